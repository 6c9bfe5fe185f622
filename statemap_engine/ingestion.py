"""Bounded-concurrency batch ingestion across regions.

Each region is fetched, extracted and scored on its own; a failure is
recorded in the :class:`RunSummary` and never stops the batch.  The store on
disk is read and written exactly once, after every region has finished.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence

from aggregation_engine.aggregator import build_state_record, iso_timestamp, merge_store, score_topics
from aggregation_engine.models import ScoredTopic, StateRecord
from aggregation_engine.store_loader import load_store, save_store
from extraction.cascade import ExtractionCascade
from fetchers.leaning_categorizer import LeaningCategorizer
from fetchers.trends_feed import TrendsFeedSource
from fetchers.trends_page_source import ContentSource, build_page_source

from .config import IngestSettings
from .errors import IngestionError, SourceUnavailable
from .regions import Region

logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"
FAILED = "failed"
SKIPPED = "skipped"

TopicProcessor = Callable[[Region], Awaitable[List[ScoredTopic]]]


@dataclass
class RegionOutcome:
    region: Region
    status: str
    record: Optional[StateRecord] = None
    error_kind: Optional[str] = None
    message: str = ""
    elapsed: float = 0.0


@dataclass
class RunSummary:
    """What happened to every region in one run."""
    started_at: datetime
    outcomes: List[RegionOutcome] = field(default_factory=list)
    output_path: Optional[Path] = None
    store_written: bool = False

    def _with_status(self, status: str) -> List[RegionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status == status]

    @property
    def succeeded(self) -> List[RegionOutcome]:
        return self._with_status(SUCCEEDED)

    @property
    def failed(self) -> List[RegionOutcome]:
        return self._with_status(FAILED)

    @property
    def skipped(self) -> List[RegionOutcome]:
        return self._with_status(SKIPPED)

    def counts(self) -> dict:
        return {
            SUCCEEDED: len(self.succeeded),
            FAILED: len(self.failed),
            SKIPPED: len(self.skipped),
        }

    def log(self) -> None:
        counts = self.counts()
        logger.info("=" * 60)
        logger.info(
            f"📊 Run summary: {counts[SUCCEEDED]} succeeded, "
            f"{counts[FAILED]} failed, {counts[SKIPPED]} skipped"
        )
        if self.succeeded:
            logger.info(f"  ✅ {', '.join(o.region.name for o in self.succeeded)}")
        for outcome in self.failed:
            logger.warning(f"  ❌ {outcome.region.name} [{outcome.error_kind}]: {outcome.message}")
        for outcome in self.skipped:
            logger.info(f"  ⏭️  {outcome.region.name}: {outcome.message}")
        if self.store_written:
            logger.info(f"  💾 Store: {self.output_path}")
        logger.info("=" * 60)


class PageTopicProcessor:
    """Rendered page -> extraction cascade -> scored topics."""

    def __init__(self, source: ContentSource, cascade: Optional[ExtractionCascade] = None,
                 category: str = "Law and Government", categorizer: Optional[LeaningCategorizer] = None):
        self.logger = logging.getLogger(__name__)
        self.source = source
        self.cascade = cascade or ExtractionCascade()
        self.category = category
        self.categorizer = categorizer or LeaningCategorizer()

    async def __call__(self, region: Region) -> List[ScoredTopic]:
        html = await self.source.fetch(region)
        if not html:
            raise SourceUnavailable(f"Empty page for {region.name}")

        # parsing is CPU-bound; keep the event loop free for other regions
        result = await asyncio.to_thread(self.cascade.run, html, region.name)
        self.logger.info(f"🧩 {region.name}: {len(result.topics)} topics via {result.strategy}")
        return score_topics(result.topics, category=self.category, categorizer=self.categorizer)


class FeedTopicProcessor:
    """RSS feed -> scored topics."""

    def __init__(self, source: Optional[TrendsFeedSource] = None, category: str = "Law and Government",
                 timeout: float = 30.0):
        self.source = source or TrendsFeedSource(category=category, timeout=timeout)

    async def __call__(self, region: Region) -> List[ScoredTopic]:
        return await self.source.topics(region)


async def process_region(
    region: Region,
    processor: TopicProcessor,
    settings: IngestSettings,
    timestamp: str,
) -> RegionOutcome:
    """Run *processor* for one region under the timeout; never raises."""
    started = time.monotonic()

    def _outcome(status: str, **kwargs) -> RegionOutcome:
        return RegionOutcome(region=region, status=status, elapsed=time.monotonic() - started, **kwargs)

    try:
        topics = await asyncio.wait_for(processor(region), timeout=settings.region_timeout_s)
    except asyncio.TimeoutError:
        return _outcome(
            FAILED,
            error_kind=SourceUnavailable.kind,
            message=f"no content within {settings.region_timeout_ms} ms",
        )
    except IngestionError as e:
        return _outcome(FAILED, error_kind=e.kind, message=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error while processing {region.name}")
        return _outcome(FAILED, error_kind="unexpected", message=f"{type(e).__name__}: {e}")

    record = build_state_record(
        region.name,
        region.code,
        topics,
        timestamp,
        category=settings.topic_category,
        top_n=settings.top_n,
        min_relevance_score=settings.min_relevance_score,
    )
    if not record.topics:
        return _outcome(
            SKIPPED,
            message=f"{len(topics)} topics, none at or above relevance {settings.min_relevance_score}",
        )
    return _outcome(SUCCEEDED, record=record)


async def run_batch(
    regions: Sequence[Region],
    processor: TopicProcessor,
    settings: IngestSettings,
    timestamp: str,
) -> List[RegionOutcome]:
    """Process *regions* with at most ``settings.concurrency`` in flight.

    After each region the worker holds its slot for ``region_delay_ms`` so
    the content source sees a bounded request rate.
    """
    semaphore = asyncio.Semaphore(settings.concurrency)
    total = len(regions)
    batch_start = time.monotonic()
    completed = 0

    async def _worker(index: int, region: Region) -> RegionOutcome:
        nonlocal completed
        async with semaphore:
            logger.info(f"🔄 Processing {region.name} ({region.geo})")
            outcome = await process_region(region, processor, settings, timestamp)

            completed += 1
            elapsed = time.monotonic() - batch_start
            remaining = elapsed / completed * (total - completed)
            logger.info(
                f"[{completed}/{total}] {region.name}: {outcome.status} "
                f"in {outcome.elapsed:.1f}s (elapsed {elapsed:.0f}s, ~{remaining:.0f}s remaining)"
            )

            if settings.region_delay_ms and index < total - 1:
                await asyncio.sleep(settings.region_delay_s)
            return outcome

    return list(await asyncio.gather(*(_worker(i, region) for i, region in enumerate(regions))))


async def ingest(
    settings: IngestSettings,
    regions: Sequence[Region],
    processor: TopicProcessor,
    started_at: Optional[datetime] = None,
) -> RunSummary:
    """Run the batch, merge successful regions into the store, write it once."""
    started_at = started_at or datetime.now(timezone.utc)
    timestamp = iso_timestamp(started_at)
    summary = RunSummary(started_at=started_at, output_path=settings.output_path)

    logger.info(
        f"🚀 Ingesting {len(regions)} regions (concurrency {settings.concurrency}, "
        f"timeout {settings.region_timeout_ms} ms)"
    )
    summary.outcomes = await run_batch(regions, processor, settings, timestamp)

    records = [outcome.record for outcome in summary.succeeded]
    if records:
        previous = load_store(settings.output_path)
        store = merge_store(previous, records, timestamp)
        save_store(settings.output_path, store)
        summary.store_written = True
    else:
        logger.warning("No region produced topics; existing store left untouched")

    summary.log()
    return summary


async def ingest_pages(settings: IngestSettings, regions: Sequence[Region],
                       source: Optional[ContentSource] = None) -> RunSummary:
    """Page ingestion with the source configured in *settings*."""
    processor = PageTopicProcessor(source or build_page_source(settings), category=settings.topic_category)
    return await ingest(settings, regions, processor)


async def ingest_feed(settings: IngestSettings, regions: Sequence[Region]) -> RunSummary:
    """RSS ingestion into the same store."""
    processor = FeedTopicProcessor(category=settings.topic_category, timeout=settings.region_timeout_s)
    return await ingest(settings, regions, processor)
