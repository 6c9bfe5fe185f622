"""Content sources that return the rendered "trending now" page for a region.

The extraction cascade only needs HTML, so a source is anything with an async
``fetch(region) -> str``.  Three are provided:

* :class:`ApifyPageSource` - renders the page in a headless browser through an
  Apify actor (waits for the table, scrolls for lazy rows).
* :class:`HttpPageSource` - plain GET with httpx; only useful when the markup
  is served pre-rendered (proxies, caches).
* :class:`FixturePageSource` - saved ``<geo>.html`` snapshots for offline runs.
"""
from __future__ import annotations

import asyncio
import math
import logging
from pathlib import Path
from typing import Optional, Protocol

import httpx
from apify_client import ApifyClientAsync

from statemap_engine.config import IngestSettings
from statemap_engine.errors import ConfigurationInvalid, SourceUnavailable
from statemap_engine.regions import Region, get_trends_url

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Runs inside the actor's browser; returns the settled page markup
PAGE_FUNCTION = """
async function pageFunction(context) {
    const { page, request } = context;
    await page.waitForSelector('table, [role="row"], article', { timeout: 30000 }).catch(() => {});
    await new Promise((resolve) => setTimeout(resolve, 5000));
    await page.evaluate(() => window.scrollTo(0, document.body.scrollHeight));
    await new Promise((resolve) => setTimeout(resolve, 3000));
    return { url: request.url, html: await page.content() };
}
"""


class ContentSource(Protocol):
    async def fetch(self, region: Region) -> str:
        ...


class ApifyPageSource:
    """Render the trends page with an Apify browser actor.

    ``timeout_secs`` is the budget for the whole fetch; every attempt gets an
    equal slice of it so a hung render still leaves room to retry.
    """

    def __init__(self, token: str, actor: str = "apify/playwright-scraper", category: int = 10,
                 timeout_secs: float = 120, client: Optional[ApifyClientAsync] = None,
                 backoff_base: float = 1.0):
        self.logger = logging.getLogger(__name__)
        self.client = client or ApifyClientAsync(token)
        self.actor = actor
        self.category = category
        self.timeout_secs = timeout_secs
        self.backoff_base = backoff_base

    def _run_input(self, url: str) -> dict:
        return {
            "startUrls": [{"url": url}],
            "pageFunction": PAGE_FUNCTION,
            "headless": True,
            "proxyConfiguration": {"useApifyProxy": True},
        }

    def attempt_timeout(self) -> float:
        """Share of ``timeout_secs`` one attempt may use, back-off waits excluded."""
        backoff_total = sum(self.backoff_base * 2 ** attempt for attempt in range(MAX_ATTEMPTS - 1))
        remaining = self.timeout_secs - backoff_total
        if remaining <= 0:
            remaining = self.timeout_secs
        return remaining / MAX_ATTEMPTS

    async def _render(self, region: Region, url: str, timeout: float) -> str:
        run = await self.client.actor(self.actor).call(
            run_input=self._run_input(url), timeout_secs=max(1, math.ceil(timeout))
        )
        if not run:
            raise SourceUnavailable(f"Actor run for {region.name} returned nothing")
        items = (await self.client.dataset(run["defaultDatasetId"]).list_items()).items
        html = next((item.get("html") for item in items if item.get("html")), None)
        if not html:
            raise SourceUnavailable(f"No rendered HTML for {region.name}")
        return html

    async def fetch(self, region: Region) -> str:
        url = get_trends_url(region.geo, self.category)
        timeout = self.attempt_timeout()
        last_error: Optional[Exception] = None

        for attempt in range(MAX_ATTEMPTS):
            try:
                self.logger.info(f"Rendering {region.name} ({region.geo}) - Attempt {attempt + 1}")
                return await asyncio.wait_for(self._render(region, url, timeout), timeout=timeout)
            except asyncio.TimeoutError:
                last_error = SourceUnavailable(f"render exceeded {timeout:.1f}s")
                self.logger.error(f"Rendering {region.name} timed out on attempt {attempt + 1}")
            except Exception as e:
                last_error = e
                self.logger.error(f"Rendering {region.name} failed on attempt {attempt + 1}: {e}")
            if attempt < MAX_ATTEMPTS - 1:
                wait_time = self.backoff_base * 2 ** attempt  # Exponential back-off: 1s, 2s
                self.logger.info(f"Retrying in {wait_time} seconds...")
                await asyncio.sleep(wait_time)

        raise SourceUnavailable(
            f"Rendering {region.name} failed after {MAX_ATTEMPTS} attempts: {last_error}"
        )


class HttpPageSource:
    """Fetch the trends page over plain HTTP."""

    def __init__(self, category: int = 10, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self.category = category
        self.timeout = timeout
        self.client = client

    async def fetch(self, region: Region) -> str:
        url = get_trends_url(region.geo, self.category)
        try:
            if self.client is not None:
                response = await self.client.get(url)
            else:
                async with httpx.AsyncClient(
                    timeout=self.timeout, headers={"User-Agent": USER_AGENT}, follow_redirects=True
                ) as client:
                    response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"GET {url} failed: {e}") from e
        return response.text


class FixturePageSource:
    """Serve saved page snapshots named ``<geo>.html`` (or ``<code>.html``)."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, region: Region) -> Optional[Path]:
        for stem in (region.geo, region.code):
            path = self.directory / f"{stem}.html"
            if path.exists():
                return path
        return None

    async def fetch(self, region: Region) -> str:
        path = self.path_for(region)
        if path is None:
            raise SourceUnavailable(f"No snapshot for {region.name} in {self.directory}")
        return path.read_text(encoding="utf-8")


def build_page_source(settings: IngestSettings) -> ContentSource:
    """Pick the content source named by ``settings.source``."""
    if settings.source == "apify":
        if not settings.apify_token:
            raise ConfigurationInvalid("source=apify requires APIFY_TOKEN")
        return ApifyPageSource(
            settings.apify_token,
            actor=settings.apify_actor,
            category=settings.trends_category,
            timeout_secs=settings.region_timeout_s,
        )
    if settings.source == "http":
        return HttpPageSource(category=settings.trends_category, timeout=settings.region_timeout_s)
    if settings.fixture_dir is None:
        raise ConfigurationInvalid("source=fixture requires a fixture directory")
    return FixturePageSource(settings.fixture_dir)
