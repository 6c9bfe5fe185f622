import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from fetchers.trends_feed import TrendsFeedSource, parse_feed
from statemap_engine.errors import SourceUnavailable
from statemap_engine.regions import find_region

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)

FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss xmlns:ht="https://trends.google.com/trending/rss" version="2.0">
  <channel>
    <title>Daily Search Trends</title>
    <item>
      <title>senate vote on budget bill</title>
      <ht:approx_traffic>2000+</ht:approx_traffic>
      <link>https://trends.google.com/trending/rss?geo=US-CA</link>
      <pubDate>Sun, 18 Oct 2026 10:00:00 +0000</pubDate>
      <ht:news_item>
        <ht:news_item_title>Senate passes budget bill</ht:news_item_title>
      </ht:news_item>
    </item>
    <item>
      <title>taylor swift tour</title>
      <ht:approx_traffic>50000+</ht:approx_traffic>
      <pubDate>Sun, 18 Oct 2026 11:00:00 +0000</pubDate>
    </item>
  </channel>
</rss>
"""


def test_parse_feed_keeps_law_and_government_items() -> None:
    topics = parse_feed(FEED_XML, now=NOW)
    assert [t.name for t in topics] == ["senate vote on budget bill"]

    topic = topics[0]
    # recency 96 (2h), keywords senate/vote/bill -> 36
    assert topic.relevance_score == 78
    assert topic.search_volume == "2000+"
    assert topic.started == "2 hours ago"
    assert topic.category == "Law and Government"
    assert topic.link == "https://trends.google.com/trending/rss?geo=US-CA"


def test_parse_feed_garbage_is_empty() -> None:
    assert parse_feed("this is not xml", now=NOW) == []


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_feed_source_requests_region_feed() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text=FEED_XML)

    async def run():
        async with _client(handler) as client:
            return await TrendsFeedSource(client=client).topics(find_region("CA"))

    topics = asyncio.run(run())
    assert seen == ["https://trends.google.com/trending/rss?geo=US-CA"]
    assert [t.name for t in topics] == ["senate vote on budget bill"]


def test_feed_source_http_error() -> None:
    async def run():
        async with _client(lambda request: httpx.Response(503)) as client:
            await TrendsFeedSource(client=client).topics(find_region("CA"))

    with pytest.raises(SourceUnavailable):
        asyncio.run(run())
