"""Region table: US states and territories with their Google Trends geo codes."""
from __future__ import annotations

import logging
from typing import Iterable, List, NamedTuple, Optional

logger = logging.getLogger(__name__)

TRENDS_BASE_URL = "https://trends.google.com"


class Region(NamedTuple):
    name: str  # matched against the map's GeoJSON feature names
    code: str
    geo: str


_STATES = [
    ("Alabama", "AL"), ("Alaska", "AK"), ("Arizona", "AZ"), ("Arkansas", "AR"),
    ("California", "CA"), ("Colorado", "CO"), ("Connecticut", "CT"), ("Delaware", "DE"),
    ("Florida", "FL"), ("Georgia", "GA"), ("Hawaii", "HI"), ("Idaho", "ID"),
    ("Illinois", "IL"), ("Indiana", "IN"), ("Iowa", "IA"), ("Kansas", "KS"),
    ("Kentucky", "KY"), ("Louisiana", "LA"), ("Maine", "ME"), ("Maryland", "MD"),
    ("Massachusetts", "MA"), ("Michigan", "MI"), ("Minnesota", "MN"), ("Mississippi", "MS"),
    ("Missouri", "MO"), ("Montana", "MT"), ("Nebraska", "NE"), ("Nevada", "NV"),
    ("New Hampshire", "NH"), ("New Jersey", "NJ"), ("New Mexico", "NM"), ("New York", "NY"),
    ("North Carolina", "NC"), ("North Dakota", "ND"), ("Ohio", "OH"), ("Oklahoma", "OK"),
    ("Oregon", "OR"), ("Pennsylvania", "PA"), ("Rhode Island", "RI"), ("South Carolina", "SC"),
    ("South Dakota", "SD"), ("Tennessee", "TN"), ("Texas", "TX"), ("Utah", "UT"),
    ("Vermont", "VT"), ("Virginia", "VA"), ("Washington", "WA"), ("West Virginia", "WV"),
    ("Wisconsin", "WI"), ("Wyoming", "WY"),
]

REGIONS: List[Region] = [Region(name, code, f"US-{code}") for name, code in _STATES]
REGIONS.append(Region("Puerto Rico", "PR", "PR"))
REGIONS.append(Region("District of Columbia", "DC", "US-DC"))

_BY_NAME = {region.name.lower(): region for region in REGIONS}
_BY_CODE = {region.code.lower(): region for region in REGIONS}


def find_region(key: str) -> Optional[Region]:
    """Look a region up by full name or two-letter code (case-insensitive)."""
    key = key.strip().lower()
    return _BY_NAME.get(key) or _BY_CODE.get(key)


def resolve_regions(args: Optional[Iterable[str]] = None) -> List[Region]:
    """Turn command-line words into regions.

    Multi-word names may arrive split (``["New", "York"]``); up to three
    adjacent words are joined when they name a region and the single word
    does not.  Unknown names are logged and skipped.  No arguments means every
    region.
    """
    words = list(args or [])
    if not words:
        return list(REGIONS)

    regions: List[Region] = []
    i = 0
    while i < len(words):
        key, step = words[i], 1
        if find_region(key) is None:
            for span in (3, 2):
                joined = " ".join(words[i:i + span])
                if i + span <= len(words) and find_region(joined):
                    key, step = joined, span
                    break
        i += step

        region = find_region(key)
        if region is None:
            logger.warning(f"No code mapping found for region: {key}")
            continue
        if region not in regions:
            regions.append(region)
    return regions


def get_trends_url(geo: str, category: int = 10) -> str:
    """Google Trends "trending now" page for *geo*, filtered to *category*."""
    return f"{TRENDS_BASE_URL}/trending?geo={geo}&hl=en-US&category={category}"


def get_rss_url(geo: str) -> str:
    """Google Trends RSS feed for *geo*."""
    return f"{TRENDS_BASE_URL}/trending/rss?geo={geo}"
