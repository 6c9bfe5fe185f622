"""Run the extraction strategies in priority order until one yields topics."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, NamedTuple, Optional, Sequence

from bs4 import BeautifulSoup

from aggregation_engine.models import RawCandidate, ValidatedTopic
from statemap_engine.errors import ExtractionExhausted, ValidationRejectedAll
from statemap_engine.regions import TRENDS_BASE_URL

from .strategies import (
    extract_article_elements,
    extract_headings,
    extract_structured_rows,
    extract_trending_links,
)
from .validator import validate_candidates


class ExtractionStrategy(NamedTuple):
    name: str
    extract: Callable[[BeautifulSoup, str], List[RawCandidate]]


DEFAULT_STRATEGIES = (
    ExtractionStrategy("structured_rows", extract_structured_rows),
    ExtractionStrategy("article_elements", extract_article_elements),
    ExtractionStrategy("link_harvest", extract_trending_links),
    ExtractionStrategy("heading_fallback", extract_headings),
)


@dataclass
class StrategyAttempt:
    name: str
    raw_count: int
    valid_count: int


@dataclass
class CascadeResult:
    """Which strategy won, what it found, and what every tried strategy saw."""
    strategy: Optional[str]
    candidates: List[RawCandidate] = field(default_factory=list)
    topics: List[ValidatedTopic] = field(default_factory=list)
    attempts: List[StrategyAttempt] = field(default_factory=list)

    @property
    def raw_total(self) -> int:
        return sum(attempt.raw_count for attempt in self.attempts)


class ExtractionCascade:
    """Strategy cascade over one rendered trends page.

    Each strategy's candidates go through the validator; the first strategy
    with at least one surviving topic wins and later strategies are not run.
    """

    def __init__(
        self,
        strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
        base_url: str = TRENDS_BASE_URL,
        parser: str = "html.parser",
    ):
        self.logger = logging.getLogger(__name__)
        self.strategies = list(strategies)
        self.base_url = base_url
        self.parser = parser

    def run(self, html: str, label: str = "page") -> CascadeResult:
        """Extract validated topics from *html*.

        Raises:
            ExtractionExhausted: no strategy produced any candidate.
            ValidationRejectedAll: candidates were found but all were noise.
        """
        soup = BeautifulSoup(html or "", self.parser)
        result = CascadeResult(strategy=None)

        for strategy in self.strategies:
            try:
                raw = strategy.extract(soup, self.base_url)
            except Exception as e:
                self.logger.warning(f"⚠️ {label}: strategy {strategy.name} failed: {e}", exc_info=True)
                raw = []

            topics = validate_candidates(raw)
            result.attempts.append(StrategyAttempt(strategy.name, len(raw), len(topics)))
            self.logger.info(
                f"🔎 {label}: {strategy.name} found {len(raw)} candidates, {len(topics)} valid"
            )
            if topics:
                result.strategy = strategy.name
                result.candidates = raw
                result.topics = topics
                return result

        if result.raw_total == 0:
            raise ExtractionExhausted(f"{label}: no strategy found any candidate")
        raise ValidationRejectedAll(
            f"{label}: all {result.raw_total} candidates were rejected as UI noise"
        )
