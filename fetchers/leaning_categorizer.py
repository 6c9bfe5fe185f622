"""Keyword-weighted political leaning classification for topic titles.

Scores run from -100 (far left) to +100 (far right); ``None`` means the topic
is non-political or carries no detectable signal.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .relevance_scorer import round_half_up


@dataclass(frozen=True)
class LeaningLexicon:
    """Immutable keyword lists the categorizer scores against."""
    left: Tuple[str, ...]
    right: Tuple[str, ...]
    centrist: Tuple[str, ...]
    non_political: Tuple[str, ...]
    left_weight: int = 3
    right_weight: int = 3
    centrist_weight: int = 2


@dataclass
class LeaningAnalysis:
    """Breakdown of a single classification."""
    score: Optional[int]
    left_score: int = 0
    right_score: int = 0
    centrist_score: int = 0
    matched: Tuple[str, ...] = ()
    non_political: bool = False

    @property
    def label(self) -> str:
        return get_political_leaning_label(self.score)


DEFAULT_LEXICON = LeaningLexicon(
    left=(
        # progressive policies
        'progressive', 'democratic socialist', 'socialist', 'bernie sanders', 'aoc', 'alexandria ocasio-cortez',
        'medicare for all', 'green new deal', 'climate change', 'renewable energy', 'environmental protection',
        'lgbtq rights', 'lgbt rights', 'transgender rights', 'marriage equality', 'pride',
        'minimum wage increase', 'living wage', 'union', 'labor rights', 'workers rights',
        'affordable housing', 'housing crisis', 'student debt', 'student loan forgiveness',
        'gun control', 'gun reform', 'assault weapons ban', 'background checks',
        'immigration reform', 'dreamers', 'daca', 'pathway to citizenship',
        'voting rights', 'voter suppression', 'gerrymandering', 'democracy reform',
        'police reform', 'defund police', 'police accountability', 'criminal justice reform',
        'reproductive rights', 'abortion rights', 'planned parenthood', 'roe v wade',
        'racial justice', 'black lives matter', 'systemic racism', 'equity',
        'wealth tax', 'tax the rich', 'income inequality', 'corporate tax',
        'public option', 'universal healthcare', 'single payer', 'healthcare reform',
        'free college', 'public education', 'education funding',
        'net neutrality', 'privacy rights', 'data protection',
        'warren', 'sanders', 'ocasio-cortez', 'pressley', 'tlaib', 'omar',
    ),
    right=(
        # conservative policies
        'conservative', 'republican', 'trump', 'desantis', 'pence', 'mcconnell', 'cruz', 'hawley',
        'tax cuts', 'tax reduction', 'corporate tax cut', 'tax reform',
        'second amendment', 'gun rights', 'concealed carry', 'stand your ground',
        'border security', 'border wall', 'illegal immigration', 'immigration enforcement',
        'pro life', 'pro-life', 'abortion ban', 'right to life', 'unborn',
        'religious freedom', 'religious liberty', 'christian values', 'traditional values',
        'school choice', 'vouchers', 'charter schools', 'homeschooling',
        'deregulation', 'regulatory reform', 'small government', 'limited government',
        'free market', 'capitalism', 'free enterprise', 'economic freedom',
        'military spending', 'defense budget', 'veterans', 'support our troops',
        'law and order', 'tough on crime', 'death penalty', 'capital punishment',
        'voter id', 'voter identification', 'election integrity', 'voter fraud',
        'energy independence', 'oil drilling', 'fracking', 'coal', 'fossil fuels',
        'states rights', 'federalism', 'constitutional rights',
        'family values', 'traditional marriage', 'pro-family',
        'welfare reform', 'work requirements', 'welfare to work',
        'supreme court', 'judicial appointments', 'originalism', 'textualism',
        'cancel culture', 'woke', 'critical race theory', 'crt',
    ),
    centrist=(
        'bipartisan', 'compromise', 'moderate', 'centrist', 'independent',
        'infrastructure', 'roads', 'bridges', 'transportation',
        'cybersecurity', 'national security', 'homeland security',
        'trade agreement', 'trade deal', 'nafta', 'usmca',
        'budget', 'debt ceiling', 'government shutdown', 'appropriations',
    ),
    non_political=(
        'weather', 'sports', 'entertainment', 'music', 'movie', 'tv show',
        'recipe', 'cooking', 'food', 'restaurant', 'shopping', 'sale',
        'technology', 'gadget', 'app', 'software', 'game', 'video game',
        'health', 'fitness', 'exercise', 'diet', 'medical', 'disease',
        'science', 'research', 'study', 'discovery', 'space', 'astronomy',
    ),
)

# (upper bound inclusive, label, css category); anything above the last bound is far right
_LABEL_BANDS = (
    (-50, 'Far Left', 'far-left'),
    (-5, 'Left Leaning', 'left-leaning'),
    (4, 'Centrist', 'centrist'),
    (50, 'Right Leaning', 'right-leaning'),
)


class LeaningCategorizer:
    """Classify topic titles on a left/right spectrum using keyword lexicons."""

    def __init__(self, lexicon: LeaningLexicon = DEFAULT_LEXICON, longest_match_only: bool = False):
        """Initialize the categorizer.

        Args:
            lexicon: keyword lists to score against.
            longest_match_only: when True, a keyword contained inside another
                matched keyword ("tax cuts" inside "corporate tax cut") is not
                counted again.  Off by default so scores stay comparable with
                already-persisted data.
        """
        self.logger = logging.getLogger(__name__)
        self.lexicon = lexicon
        self.longest_match_only = longest_match_only

    def analyze(self, topic_name: Optional[str]) -> LeaningAnalysis:
        """Classify *topic_name* and return the full score breakdown."""
        if not topic_name or not isinstance(topic_name, str):
            return LeaningAnalysis(score=None)

        normalized = topic_name.lower().strip()

        # Non-political phrases win over any political match
        if any(keyword in normalized for keyword in self.lexicon.non_political):
            return LeaningAnalysis(score=None, non_political=True)

        buckets = {
            'left': [k for k in self.lexicon.left if k.lower() in normalized],
            'right': [k for k in self.lexicon.right if k.lower() in normalized],
            'centrist': [k for k in self.lexicon.centrist if k.lower() in normalized],
        }
        if self.longest_match_only:
            buckets = self._drop_nested_matches(buckets)

        left_score = self._bucket_score(buckets['left'], self.lexicon.left_weight)
        right_score = self._bucket_score(buckets['right'], self.lexicon.right_weight)
        centrist_score = self._bucket_score(buckets['centrist'], self.lexicon.centrist_weight)
        matched = tuple(buckets['left'] + buckets['right'] + buckets['centrist'])

        if left_score == 0 and right_score == 0 and centrist_score == 0:
            return LeaningAnalysis(score=None)

        # negative = left, positive = right
        net_score = right_score - left_score

        # centrist keywords pull toward zero but never across it
        centrist_modifier = min(centrist_score * 0.3, abs(net_score))
        final_score = net_score - centrist_modifier if net_score > 0 else net_score + centrist_modifier

        # many weak hits should not add up to an extreme score
        total_score = left_score + right_score + centrist_score
        if total_score > 0:
            final_score *= min(100 / total_score, 1)

        final_score = max(-100.0, min(100.0, final_score))

        return LeaningAnalysis(
            score=round_half_up(final_score),
            left_score=left_score,
            right_score=right_score,
            centrist_score=centrist_score,
            matched=matched,
        )

    def classify(self, topic_name: Optional[str]) -> Optional[int]:
        """Return the leaning score for *topic_name*, or ``None``."""
        return self.analyze(topic_name).score

    def classify_topics(self, topic_names: List[str]) -> Dict[str, Optional[int]]:
        """Classify many titles at once; logs a short distribution summary."""
        results = {name: self.classify(name) for name in topic_names}
        political = [score for score in results.values() if score is not None]
        self.logger.debug(f"Classified {len(results)} topics ({len(political)} political)")
        return results

    @staticmethod
    def _bucket_score(keywords: List[str], weight: int) -> int:
        # multi-word keywords weigh more
        return sum(len(keyword.split(' ')) * weight for keyword in keywords)

    @staticmethod
    def _drop_nested_matches(buckets: Dict[str, List[str]]) -> Dict[str, List[str]]:
        everything = [k.lower() for keywords in buckets.values() for k in keywords]
        return {
            side: [k for k in keywords if not any(k.lower() != other and k.lower() in other for other in everything)]
            for side, keywords in buckets.items()
        }


_DEFAULT_CATEGORIZER = LeaningCategorizer()


def classify_political_leaning(topic_name: Optional[str]) -> Optional[int]:
    """Score *topic_name* with the default lexicon (see :class:`LeaningCategorizer`)."""
    return _DEFAULT_CATEGORIZER.classify(topic_name)


def get_political_leaning_label(score: Optional[int]) -> str:
    """Human-readable label for a leaning score."""
    if score is None:
        return 'Non-political'
    for upper, label, _ in _LABEL_BANDS:
        if score <= upper:
            return label
    return 'Far Right'


def get_political_leaning_category(score: Optional[int]) -> str:
    """CSS-style slug for a leaning score."""
    if score is None:
        return 'non-political'
    for upper, _, category in _LABEL_BANDS:
        if score <= upper:
            return category
    return 'far-right'
