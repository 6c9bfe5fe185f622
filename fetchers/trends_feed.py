"""Google Trends RSS feed as an alternative topic source.

The feed has no growth figure and no category, so items are kept when they
look like law/government news and are scored with
:func:`fetchers.relevance_scorer.calculate_feed_relevance`.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

import feedparser
import httpx

from aggregation_engine.models import ScoredTopic
from statemap_engine.errors import SourceUnavailable
from statemap_engine.regions import Region, get_rss_url

from .leaning_categorizer import LeaningCategorizer
from .relevance_scorer import LAW_GOV_KEYWORDS, calculate_feed_relevance, keyword_hits

logger = logging.getLogger(__name__)


def _published(entry) -> Optional[datetime]:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return datetime(*parsed[:6], tzinfo=timezone.utc)


def _entry_text(entry) -> str:
    parts = [entry.get("title", ""), entry.get("summary", ""), entry.get("ht_news_item_title", "")]
    return " ".join(part for part in parts if part)


def _started_text(published: Optional[datetime], now: datetime) -> Optional[str]:
    if published is None:
        return None
    hours = int(max(0.0, (now - published).total_seconds()) // 3600)
    if hours < 1:
        return "just now"
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    days = hours // 24
    return f"{days} day{'s' if days != 1 else ''} ago"


def is_law_and_government(entry) -> bool:
    """Category tag when the feed has one, keyword match otherwise."""
    terms = [(tag.get("term") or "").lower() for tag in entry.get("tags", [])]
    if terms:
        return any("law" in term or "government" in term for term in terms)
    return keyword_hits(_entry_text(entry), LAW_GOV_KEYWORDS) > 0


def parse_feed(
    xml_text: str,
    category: str = "Law and Government",
    now: Optional[datetime] = None,
    categorizer: Optional[LeaningCategorizer] = None,
) -> List[ScoredTopic]:
    """Turn RSS XML into scored topics (unranked, no floor applied)."""
    now = now or datetime.now(timezone.utc)
    categorizer = categorizer or LeaningCategorizer()
    feed = feedparser.parse(xml_text)
    if feed.bozo and not feed.entries:
        logger.warning(f"Feed could not be parsed: {feed.get('bozo_exception')}")

    topics: List[ScoredTopic] = []
    for entry in feed.entries:
        title = (entry.get("title") or "").strip()
        if not title or not is_law_and_government(entry):
            continue
        published = _published(entry)
        topics.append(
            ScoredTopic(
                name=title,
                relevance_score=calculate_feed_relevance(published, _entry_text(entry), now=now),
                category=category,
                search_volume=entry.get("ht_approx_traffic") or None,
                started=_started_text(published, now),
                political_leaning=categorizer.classify(title),
                link=entry.get("link") or None,
            )
        )
    return topics


class TrendsFeedSource:
    """Fetch and score the per-region RSS feed."""

    def __init__(self, category: str = "Law and Government", timeout: float = 30.0,
                 client: Optional[httpx.AsyncClient] = None):
        self.logger = logging.getLogger(__name__)
        self.category = category
        self.timeout = timeout
        self.client = client
        self.categorizer = LeaningCategorizer()

    async def fetch_xml(self, region: Region) -> str:
        url = get_rss_url(region.geo)
        try:
            if self.client is not None:
                response = await self.client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"Feed for {region.name} failed: {e}") from e
        return response.text

    async def topics(self, region: Region) -> List[ScoredTopic]:
        xml_text = await self.fetch_xml(region)
        topics = parse_feed(xml_text, category=self.category, categorizer=self.categorizer)
        self.logger.info(f"📰 {region.name}: {len(topics)} law/government items in feed")
        return topics
