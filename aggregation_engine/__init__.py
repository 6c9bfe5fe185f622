"""Statemap Aggregation Engine.

Data models for extracted and scored topics, plus the pure ranking/merge
functions and the JSON store that the map UI reads.
"""

from .models import AggregateStore, RawCandidate, ScoredTopic, StateRecord, ValidatedTopic

__all__ = [
    "AggregateStore",
    "RawCandidate",
    "ScoredTopic",
    "StateRecord",
    "ValidatedTopic",
]

__version__ = "0.1.0"
