"""Pydantic data models shared by extraction, scoring and aggregation.

Field names are snake_case in Python; the persisted JSON uses the camelCase
aliases the map UI reads (``relevanceScore``, ``topTopic`` ...).
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

UNKNOWN = "N/A"  # sentinel for a volume/recency field the extractor could not resolve


def is_resolved(value: Optional[str]) -> bool:
    """True when *value* carries real data rather than the unresolved sentinel."""
    return bool(value) and value.strip().upper() != UNKNOWN


class RawCandidate(BaseModel):
    """Unvalidated trend record produced by a single extraction strategy."""

    title: str = ""
    search_volume: str = UNKNOWN
    started: str = UNKNOWN
    trend_breakdown: Optional[str] = None
    percentage_increase: Optional[str] = None
    link: Optional[str] = None

    model_config = {
        "frozen": True,
    }

    @property
    def has_volume(self) -> bool:
        return is_resolved(self.search_volume)

    @property
    def has_started(self) -> bool:
        return is_resolved(self.started)


class ValidatedTopic(RawCandidate):
    """A candidate that passed :mod:`extraction.validator`."""


class ScoredTopic(BaseModel):
    """One topic as persisted inside a :class:`StateRecord`."""

    name: str = Field(..., min_length=1)
    relevance_score: int = Field(..., ge=0, le=100, alias="relevanceScore")
    category: str = "Law and Government"
    search_volume: Optional[str] = Field(None, alias="searchVolume")
    started: Optional[str] = None
    trend_breakdown: Optional[str] = Field(None, alias="trendBreakdown")
    percentage_increase: Optional[str] = Field(None, alias="percentageIncrease")
    political_leaning: Optional[int] = Field(None, ge=-100, le=100, alias="politicalLeaning")
    link: Optional[str] = None

    # extra="allow" keeps fields written by older runs intact across merges
    model_config = {
        "populate_by_name": True,
        "extra": "allow",
    }


class StateRecord(BaseModel):
    """Latest topic set for one region."""

    name: str
    code: str
    top_topic: str = Field("", alias="topTopic")
    category: str = "Law and Government"
    trending_score: int = Field(0, ge=0, le=100, alias="trendingScore")
    topics: List[ScoredTopic] = Field(default_factory=list)
    timestamp: str = ""

    model_config = {
        "populate_by_name": True,
        "extra": "allow",
    }


class AggregateStore(BaseModel):
    """The persisted file: every region's latest record plus the last write time."""

    timestamp: str = ""
    states: List[StateRecord] = Field(default_factory=list)

    model_config = {
        "populate_by_name": True,
    }

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
