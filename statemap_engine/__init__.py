"""StateMap Engine.

Ingests per-region trending-topic pages, scores and classifies the topics and
merges them into the persisted per-state dataset consumed by the map UI.
"""

__all__ = [
    "IngestSettings",
    "load_settings",
]

__version__ = "0.1.0"

from .config import IngestSettings, load_settings
