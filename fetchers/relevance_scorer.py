"""Relevance scoring for trending topics.

Two named scorers live here:

* :func:`calculate_relevance_score` - additive heuristic for topics scraped
  from the trends page (volume + recency + percentage growth).
* :func:`calculate_feed_relevance` - blend of recency decay and keyword
  density for items from the RSS feed, which carries no growth figure.

Both return an integer in ``[0, 100]`` and never rank a more recent topic
below an otherwise identical older one.
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

BASE_SCORE = 50

# (minimum growth %, bonus), checked top-down
GROWTH_TIERS = (
    (10_000, 30),
    (1_000, 25),
    (500, 20),
    (200, 15),
    (100, 10),
    (50, 5),
)

LAW_GOV_KEYWORDS = (
    "law", "government", "politics", "election", "congress", "supreme court",
    "senate", "house", "governor", "mayor", "vote", "voting", "constitution",
    "legislation", "bill", "policy", "reform", "court", "legal", "rights",
)

_HOURS_SHORT = re.compile(r"\b\d+\s*h\b")
_MINUTES = re.compile(r"\b\d+\s*(?:m|mins?|minutes?)\b")
_PERCENT_DIGITS = re.compile(r"\d+")


def round_half_up(value: float) -> int:
    """Round .5 towards +infinity, matching how the map UI rounds."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: int = 0, high: int = 100) -> float:
    return max(low, min(high, value))


def _volume_bonus(search_volume: Optional[str]) -> int:
    if not search_volume:
        return 0
    volume = search_volume.lower()
    if "+" in volume or "high" in volume or "very" in volume:
        return 30
    if "medium" in volume or "moderate" in volume:
        return 15
    return 0


def _recency_bonus(started: Optional[str]) -> int:
    # minutes ("15 mins", "30m") and the "6h ago" short form share the hour tier
    if not started:
        return 0
    started = started.lower()
    if "now" in started or "hour" in started or _MINUTES.search(started) or _HOURS_SHORT.search(started):
        return 20
    if "day" in started:
        return 10
    return 0


def parse_percentage(percentage_increase: Optional[str]) -> Optional[int]:
    """``"1,000%"`` -> ``1000``; ``None`` when no digits are present."""
    if not percentage_increase:
        return None
    match = _PERCENT_DIGITS.search(str(percentage_increase).replace(",", ""))
    return int(match.group()) if match else None


def _growth_bonus(percentage_increase: Optional[str]) -> int:
    value = parse_percentage(percentage_increase)
    if value is None:
        return 0
    for threshold, bonus in GROWTH_TIERS:
        if value >= threshold:
            return bonus
    return 0


def calculate_relevance_score(
    search_volume: Optional[str],
    started: Optional[str],
    percentage_increase: Optional[str] = None,
) -> int:
    """Score a scraped topic from its volume, recency and growth texts.

    >>> calculate_relevance_score("1K+", "6 hours ago", "1000%")
    100
    >>> calculate_relevance_score("N/A", "2 days ago")
    60
    """
    score = BASE_SCORE
    score += _volume_bonus(search_volume)
    score += _recency_bonus(started)
    score += _growth_bonus(percentage_increase)
    return int(clamp(score))


def keyword_hits(text: str, keywords: Iterable[str] = LAW_GOV_KEYWORDS) -> int:
    text = text.lower()
    return sum(1 for keyword in keywords if keyword in text)


def calculate_feed_relevance(
    published: Optional[datetime],
    text: str,
    now: Optional[datetime] = None,
    keywords: Iterable[str] = LAW_GOV_KEYWORDS,
) -> int:
    """Score an RSS item: 70% recency (-2 points per hour), 30% keyword density.

    A missing or future publish date counts as "just published".
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if published is None:
        published = now
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)

    hours_since = max(0.0, (now - published).total_seconds() / 3600)
    recency_score = max(0, 100 - math.floor(hours_since * 2))
    keyword_score = min(100, keyword_hits(text, keywords) * 12)

    return int(clamp(round_half_up(recency_score * 0.7 + keyword_score * 0.3)))
