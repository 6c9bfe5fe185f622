"""Ordered regex tables for pulling individual fields out of trend-row text.

Each field has a tuple of :class:`FieldPattern` entries, strictest first.  An
entry is only tried when every earlier one failed, and its extractor may still
reject the match (an all-zero percentage), in which case the next entry
gets its turn.
"""
from __future__ import annotations

import re
from typing import Callable, Iterable, NamedTuple, Optional, Sequence

# Phrases that mark page chrome rather than a trend title
UI_NOISE_PHRASES = (
    "trend breakdown", "search trends", "sort by", "trend status",
    "select", "filter", "more action", "explore", "search it",
    "started", "search volume", "rows per page", "showing",
)

# Broader list used by the link and heading harvesters, which see navigation text
CHROME_PHRASES = (
    "sign in", "sign out", "menu", "search", "trending now", "explore", "home",
    "close", "back", "next", "previous", "more", "less", "show", "hide",
    "trending_up", "trending_down", "arrow", "icon", "button", "trend status",
    "select country", "select", "filter", "sort", "view", "settings", "options",
)

_STOP_WORDS = ("the", "and", "or", "but", "for", "with", "from")

_BREAKDOWN_NOISE = (
    "search", "term", "query", "stat", "explore", "more", "action", "vert",
    "termquery", "searchterm", "querystat",
)


class FieldPattern(NamedTuple):
    pattern: re.Pattern
    extract: Callable[[re.Match], Optional[str]]


def first_match(patterns: Sequence[FieldPattern], texts: Iterable[str]) -> Optional[str]:
    """Return the first accepted value, trying every text per pattern before moving on."""
    texts = [text for text in texts if text]
    for field_pattern in patterns:
        for text in texts:
            for match in field_pattern.pattern.finditer(text):
                value = field_pattern.extract(match)
                if value:
                    return value
    return None


# ---------------------------------------------------------------------------
# Search volume
# ---------------------------------------------------------------------------

def _volume(match: re.Match) -> str:
    digits = match.group("num")
    return f"{digits}{(match.group('unit') or '').upper()}{'+' if match.group('plus') else ''}"


# at most three leading digits, so four-digit years never match
_NUM = r"(?<![\d.,])(?P<num>[1-9]\d{0,2}(?:\.\d)?)"

VOLUME_PATTERNS = (
    # "1K+ searches"
    FieldPattern(re.compile(_NUM + r"(?P<unit>[KMB])?\s*(?P<plus>\+)\s*searches", re.I), _volume),
    # "1K+", "500 +"
    FieldPattern(re.compile(_NUM + r"(?P<unit>[KMB])?\s*(?P<plus>\+)", re.I), _volume),
    # "20K" with a unit but no plus
    FieldPattern(re.compile(_NUM + r"(?P<unit>[KMB])(?P<plus>)(?![a-z])", re.I), _volume),
    # "500 searches"
    FieldPattern(re.compile(_NUM + r"(?P<unit>)(?P<plus>)\s*searches", re.I), _volume),
)

# Row qualification uses the strict "<n>[KMB]+" form only
VOLUME_TOKEN = VOLUME_PATTERNS[1]


def find_volume_token(text: str) -> Optional[re.Match]:
    """First non-year ``\\d+[KMB]?+`` token in *text*, or ``None``."""
    return VOLUME_TOKEN.pattern.search(text or "")


# ---------------------------------------------------------------------------
# Started / recency
# ---------------------------------------------------------------------------

def _whole(match: re.Match) -> Optional[str]:
    return match.group(0).strip()


STARTED_PATTERNS = (
    FieldPattern(re.compile(r"\b\d+\s*hours?\s*ago\b", re.I), _whole),
    FieldPattern(re.compile(r"\b\d+\s*h\s*ago\b", re.I), _whole),
    FieldPattern(re.compile(r"\b\d+\s*days?\s*ago\b", re.I), _whole),
    FieldPattern(re.compile(r"\b\d+\s*(?:minutes?|mins?)\s*ago\b", re.I), _whole),
    FieldPattern(re.compile(r"\b\d+\s*[a-z]+\s+ago\b", re.I), _whole),
)


# ---------------------------------------------------------------------------
# Percentage growth
# ---------------------------------------------------------------------------

def _percentage(match: re.Match) -> Optional[str]:
    digits = match.group("pct").replace(",", "")
    if not digits or not digits.isdigit():
        return None
    # "0" is a real reading; "000" and friends are padding
    if digits != "0" and digits.startswith("0"):
        return None
    return f"{digits}%"


_PCT = r"(?P<pct>[1-9]\d{0,5}(?:,\d{3})*|0)%"

PERCENTAGE_PATTERNS = (
    # "+500%"
    FieldPattern(re.compile(r"\+" + _PCT), _percentage),
    # "arrow_upward 500%", "↑ 1,000%"
    FieldPattern(
        re.compile(
            r"(?:arrow[_\s]*upward|arrow[_\s]*downward|arrow[_\s]*down|trending[_\s]*up|"
            r"trending[_\s]*down|↑|↓|\bup|\bdown)\s*[+\-]?" + _PCT,
            re.I,
        ),
        _percentage,
    ),
    # standalone "500%" between whitespace or tags
    FieldPattern(re.compile(r"(?:^|(?<=[\s>]))[+\-]?" + _PCT + r"(?=\s|$|<)"), _percentage),
    # any word-bounded "500%"
    FieldPattern(re.compile(r"\b[+\-]?" + _PCT), _percentage),
    # anything ending in %, padding rejected by the extractor
    FieldPattern(re.compile(r"[+\-]?(?P<pct>\d[\d,]*)%"), _percentage),
)


# ---------------------------------------------------------------------------
# Trend breakdown
# ---------------------------------------------------------------------------

_CAMEL_SPLIT = re.compile(r"(?<=[a-z])(?=[A-Z])")


def breakdown_words(text: str) -> list[str]:
    """Split breakdown-cell text into candidate terms, dropping UI words."""
    words = text.split()
    if len(words) == 1 and len(words[0]) > 10:
        # glued text like "venezuelaVenezuelaSearch"
        words = [w for w in _CAMEL_SPLIT.split(words[0]) if w]

    cleaned = []
    for word in words:
        word = re.sub(r"[^a-zA-Z]", "", word)
        lower = word.lower()
        if not 2 < len(word) < 30:
            continue
        if lower in _BREAKDOWN_NOISE or "search" in lower or "query" in lower:
            continue
        cleaned.append(word)
    return cleaned


def _breakdown_term(match: re.Match) -> Optional[str]:
    term = match.group("term").strip()
    return term if not is_chrome_text(term) else None


BREAKDOWN_PATTERNS = (
    # term that follows the recency text and precedes the "Search term" chrome
    FieldPattern(
        re.compile(
            r"\b(?:ago|hr)\b\W*(?P<term>[a-z]{3,}(?:\s+[a-z]+)?)\s*(?:search|query|more|arrow|checklist|explore)",
            re.I,
        ),
        _breakdown_term,
    ),
)


# ---------------------------------------------------------------------------
# Text classification helpers
# ---------------------------------------------------------------------------

def is_chrome_text(text: Optional[str]) -> bool:
    """True when *text* looks like navigation or control text, not a trend."""
    if not text or len(text) < 3 or len(text) > 100:
        return True
    if not text[0].isalpha():
        return True
    lower = text.lower()
    if any(phrase in lower for phrase in CHROME_PHRASES):
        return True
    if len(text.split()) == 1 and len(text) < 4:
        return lower in _STOP_WORDS
    return False
