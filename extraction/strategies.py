"""Extraction strategies for the trends page, richest first.

Every strategy takes parsed page markup and returns raw candidates; none of
them depends on another's output.  The markup is largely class-free and
shifts between sessions, so each strategy keys on a different structural
signal: table-row semantics, article blocks, trend-detail links, headings.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from aggregation_engine.models import UNKNOWN, RawCandidate

from .field_patterns import (
    BREAKDOWN_PATTERNS,
    PERCENTAGE_PATTERNS,
    STARTED_PATTERNS,
    VOLUME_PATTERNS,
    breakdown_words,
    find_volume_token,
    first_match,
    is_chrome_text,
)

TREND_LINK_SELECTOR = 'a[href*="/trending"]'
MAX_LINKS = 25
MAX_HEADINGS = 20

_ALPHA_RUN = re.compile(r"[^\W\d_]+(?:[ '’.&-]+[^\W\d_]+)*")
_ICON_LIGATURE = re.compile(r"\S*_\S*")  # material icon names such as "check_box_outline_blank"

_CHROME_TAGS = {"header", "nav"}
_CHROME_ROLES = {"banner", "navigation"}


def _text(tag: Optional[Tag]) -> str:
    if tag is None:
        return ""
    return " ".join(tag.get_text(" ", strip=True).split())


def _inside_chrome(tag: Tag) -> bool:
    for node in [tag, *tag.parents]:
        if node.name in _CHROME_TAGS or node.get("role") in _CHROME_ROLES:
            return True
    return False


def _link(scope: Tag, base_url: str) -> Optional[str]:
    anchor = scope if scope.name == "a" else scope.select_one(TREND_LINK_SELECTOR)
    href = anchor.get("href") if anchor is not None else None
    return urljoin(base_url, href) if href else None


# ---------------------------------------------------------------------------
# 1. Structured rows
# ---------------------------------------------------------------------------

def _is_header_row(row: Tag) -> bool:
    return (
        row.find("th") is not None
        or row.get("role") == "rowheader"
        or row.select_one('[role="columnheader"]') is not None
    )


def _is_ui_cell(text: str) -> bool:
    lower = text.lower()
    return (
        "trend breakdown" in lower
        or "search trends" in lower
        or "sort by" in lower
        or ("started" in lower and "ago" not in lower)
        or ("search volume" in lower and "searches" not in lower)
    )


def longest_alpha_run(text: str) -> str:
    """Longest run of letters (with inner spaces/apostrophes/hyphens) in *text*."""
    text = _ICON_LIGATURE.sub(" ", text)
    runs = _ALPHA_RUN.findall(text)
    return max(runs, key=len).strip() if runs else ""


def title_before_volume(text: str) -> str:
    """Title = longest alphabetic run before the first volume token."""
    token = find_volume_token(text)
    prefix = text[:token.start()] if token else text
    return longest_alpha_run(prefix)


def _attribute_texts(row: Tag) -> List[str]:
    texts = [row.get("aria-label") or ""]
    texts.extend(str(value) for name, value in row.attrs.items() if name.startswith("data-"))
    texts.extend(el.get("aria-label") or "" for el in row.find_all(True))
    return [text for text in texts if text]


def _row_breakdown(cell_texts: List[str], row_text: str, title: str) -> Optional[str]:
    title_lower = title.lower()
    if len(cell_texts) >= 5:
        for word in breakdown_words(cell_texts[4]):
            if word.lower() != title_lower:
                return word
    term = first_match(BREAKDOWN_PATTERNS, [row_text])
    if term and term.lower() != title_lower:
        return term
    return None


def extract_structured_rows(soup: BeautifulSoup, base_url: str) -> List[RawCandidate]:
    """Rows with >= 3 cells where some cell carries a ``1K+``-style volume."""
    candidates: List[RawCandidate] = []
    for row in soup.select('[role="row"], table tr'):
        if _is_header_row(row):
            continue
        cells = row.select('[role="cell"], [role="gridcell"], td')
        if len(cells) < 3:
            continue

        cell_texts = [_text(cell) for cell in cells]
        volume_index = next(
            (i for i, text in enumerate(cell_texts) if find_volume_token(text) and not _is_ui_cell(text)),
            None,
        )
        if volume_index is None:
            continue

        row_text = _text(row)
        texts = cell_texts + [row_text]
        title = title_before_volume(" ".join(cell_texts[:volume_index + 1]))
        percentage = (
            first_match(PERCENTAGE_PATTERNS, texts)
            or first_match(PERCENTAGE_PATTERNS, _attribute_texts(row))
        )

        candidates.append(
            RawCandidate(
                title=title,
                search_volume=first_match(VOLUME_PATTERNS, texts) or UNKNOWN,
                started=first_match(STARTED_PATTERNS, texts) or UNKNOWN,
                trend_breakdown=_row_breakdown(cell_texts, row_text, title),
                percentage_increase=percentage,
                link=_link(row, base_url),
            )
        )
    return candidates


# ---------------------------------------------------------------------------
# 2. Article elements
# ---------------------------------------------------------------------------

def extract_article_elements(soup: BeautifulSoup, base_url: str) -> List[RawCandidate]:
    """``<article>`` blocks with a heading or trend link for the title."""
    candidates: List[RawCandidate] = []
    for article in soup.select('article, [role="article"]'):
        title_el = article.select_one(f'h2, h3, h4, {TREND_LINK_SELECTOR}, .trend-title, [data-title]')
        if title_el is None:
            continue
        title = title_el.get("data-title") or _text(title_el)
        if is_chrome_text(title):
            continue

        body = _text(article)
        time_text = _text(article.find("time"))
        candidates.append(
            RawCandidate(
                title=title,
                search_volume=first_match(VOLUME_PATTERNS, [body]) or UNKNOWN,
                started=first_match(STARTED_PATTERNS, [time_text, body]) or UNKNOWN,
                percentage_increase=first_match(PERCENTAGE_PATTERNS, [body]),
                link=_link(article, base_url),
            )
        )
    return candidates


# ---------------------------------------------------------------------------
# 3. Link harvest
# ---------------------------------------------------------------------------

def _trend_links(soup: BeautifulSoup) -> Iterable[Tag]:
    for anchor in soup.select(TREND_LINK_SELECTOR):
        text = _text(anchor)
        if 3 < len(text) < 200 and not is_chrome_text(text) and not _inside_chrome(anchor):
            yield anchor


def extract_trending_links(soup: BeautifulSoup, base_url: str) -> List[RawCandidate]:
    """Anchors pointing at trend-detail pages, outside header/navigation."""
    candidates: List[RawCandidate] = []
    for anchor in _trend_links(soup):
        container = anchor.find_parent(["div", "article", "li", "tr"])
        context = _text(container)
        candidates.append(
            RawCandidate(
                title=_text(anchor),
                search_volume=first_match(VOLUME_PATTERNS, [context]) or UNKNOWN,
                started=first_match(STARTED_PATTERNS, [context]) or UNKNOWN,
                link=_link(anchor, base_url),
            )
        )
        if len(candidates) >= MAX_LINKS:
            break
    return candidates


# ---------------------------------------------------------------------------
# 4. Heading fallback
# ---------------------------------------------------------------------------

def extract_headings(soup: BeautifulSoup, base_url: str) -> List[RawCandidate]:
    """Bare heading titles; no volume or recency is available here."""
    candidates: List[RawCandidate] = []
    for heading in soup.select("h1, h2, h3, h4, h5, h6"):
        text = _text(heading)
        lower = text.lower()
        if not 5 < len(text) < 100 or is_chrome_text(text):
            continue
        if "trending" in lower or "google" in lower or _inside_chrome(heading):
            continue
        candidates.append(RawCandidate(title=text))
        if len(candidates) >= MAX_HEADINGS:
            break
    return candidates
