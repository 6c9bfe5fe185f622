"""Pure functions that turn per-region topic lists into the persisted store.

Nothing here touches the filesystem; :mod:`aggregation_engine.store_loader`
handles reading and writing.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from fetchers.leaning_categorizer import LeaningCategorizer
from fetchers.relevance_scorer import calculate_relevance_score

from .models import UNKNOWN, AggregateStore, ScoredTopic, StateRecord, ValidatedTopic

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Law and Government"
DEFAULT_TOP_N = 10


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """UTC ISO-8601 with milliseconds and a ``Z`` suffix (``2025-01-01T12:00:00.000Z``)."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _optional(value: Optional[str]) -> Optional[str]:
    return value if value and value != UNKNOWN else None


def score_topics(
    topics: Iterable[ValidatedTopic],
    category: str = DEFAULT_CATEGORY,
    categorizer: Optional[LeaningCategorizer] = None,
) -> List[ScoredTopic]:
    """Attach a relevance score and political leaning to each validated topic."""
    categorizer = categorizer or LeaningCategorizer()
    scored: List[ScoredTopic] = []
    for topic in topics:
        scored.append(
            ScoredTopic(
                name=topic.title,
                relevance_score=calculate_relevance_score(
                    topic.search_volume, topic.started, topic.percentage_increase
                ),
                category=category,
                search_volume=_optional(topic.search_volume),
                started=_optional(topic.started),
                trend_breakdown=topic.trend_breakdown,
                percentage_increase=topic.percentage_increase,
                political_leaning=categorizer.classify(topic.title),
                link=topic.link,
            )
        )
    return scored


def dedupe_topics(topics: Iterable[ScoredTopic]) -> List[ScoredTopic]:
    """Drop repeated titles (exact match); the first occurrence is kept."""
    seen = set()
    unique: List[ScoredTopic] = []
    for topic in topics:
        if topic.name in seen:
            continue
        seen.add(topic.name)
        unique.append(topic)
    return unique


def rank_topics(
    topics: Iterable[ScoredTopic],
    top_n: int = DEFAULT_TOP_N,
    min_relevance_score: int = 0,
) -> List[ScoredTopic]:
    """Sort by relevance, dedupe, apply the floor and keep the top *top_n*.

    Sorting happens before deduplication (the sort is stable), so of two
    topics with the same title the higher-scored one survives; equal scores
    keep extraction order.
    """
    ordered = sorted(topics, key=lambda topic: topic.relevance_score, reverse=True)
    kept = [topic for topic in dedupe_topics(ordered) if topic.relevance_score >= min_relevance_score]
    return kept[:top_n]


def build_state_record(
    name: str,
    code: str,
    topics: Iterable[ScoredTopic],
    timestamp: str,
    category: str = DEFAULT_CATEGORY,
    top_n: int = DEFAULT_TOP_N,
    min_relevance_score: int = 0,
) -> StateRecord:
    """Rank *topics* and wrap them in a :class:`StateRecord`."""
    ranked = rank_topics(topics, top_n=top_n, min_relevance_score=min_relevance_score)
    top = ranked[0] if ranked else None
    return StateRecord(
        name=name,
        code=code,
        top_topic=top.name if top else "",
        category=category,
        trending_score=top.relevance_score if top else 0,
        topics=ranked,
        timestamp=timestamp,
    )


def merge_store(previous: AggregateStore, records: Iterable[StateRecord], timestamp: str) -> AggregateStore:
    """Merge this run's records into *previous*, keyed by region name.

    Regions in *records* replace their old entry in place; regions missing
    from this run keep their previous record untouched; new regions are
    appended.  *previous* is not modified.
    """
    merged: Dict[str, StateRecord] = {state.name: state for state in previous.states}
    for record in records:
        merged[record.name] = record
    return AggregateStore(timestamp=timestamp, states=list(merged.values()))


def apply_political_leaning(
    store: AggregateStore,
    categorizer: Optional[LeaningCategorizer] = None,
    recompute: bool = False,
) -> Tuple[AggregateStore, int, int]:
    """Fill in ``politicalLeaning`` for every topic of *store*.

    Topics that already carry a leaning are left alone unless *recompute* is
    set.  Returns the updated store, the total topic count and the number of
    topics that end up classified.
    """
    categorizer = categorizer or LeaningCategorizer()
    total = classified = 0
    states: List[StateRecord] = []

    for state in store.states:
        topics: List[ScoredTopic] = []
        for topic in state.topics:
            total += 1
            if recompute or topic.political_leaning is None:
                topic = topic.model_copy(update={"political_leaning": categorizer.classify(topic.name)})
            if topic.political_leaning is not None:
                classified += 1
            topics.append(topic)
        states.append(state.model_copy(update={"topics": topics}))

    logger.info(f"Classified {classified} of {total} topics")
    return store.model_copy(update={"states": states}), total, classified
