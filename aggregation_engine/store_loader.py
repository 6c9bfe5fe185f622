"""Read and write the aggregate ``states-topics.json`` store."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from statemap_engine.errors import MalformedPersistedStore

from .models import AggregateStore

logger = logging.getLogger(__name__)


def read_store(path: Path) -> AggregateStore:
    """Parse the store at *path*; a missing file is an empty store.

    Raises
    ------
    MalformedPersistedStore
        If the file exists but is not a valid store.
    """
    path = Path(path)
    if not path.exists():
        return AggregateStore()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return AggregateStore.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise MalformedPersistedStore(f"Could not read {path}: {e}") from e


def load_store(path: Path) -> AggregateStore:
    """Like :func:`read_store` but a corrupt file falls back to an empty store."""
    try:
        return read_store(path)
    except MalformedPersistedStore as e:
        logger.warning(f"⚠️ {e}. Starting from an empty store; regions not in this run will be lost on write.")
        return AggregateStore()


def save_store(path: Path, store: AggregateStore) -> Path:
    """Write *store* to *path* atomically (temp file + rename)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".states_", suffix=".json", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(store.to_json_dict(), f, ensure_ascii=False, indent=2)
            f.write("\n")
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise
    logger.info(f"💾 Saved {len(store.states)} regions to {path}")
    return path


def store_to_frame(store: AggregateStore) -> pd.DataFrame:
    """One row per (region, topic), ranked within each region."""
    rows = []
    for state in store.states:
        for rank, topic in enumerate(state.topics, start=1):
            rows.append({
                "region": state.name,
                "code": state.code,
                "rank": rank,
                "topic": topic.name,
                "relevance_score": topic.relevance_score,
                "search_volume": topic.search_volume,
                "started": topic.started,
                "political_leaning": topic.political_leaning,
                "timestamp": state.timestamp,
            })
    columns = ["region", "code", "rank", "topic", "relevance_score", "search_volume",
               "started", "political_leaning", "timestamp"]
    return pd.DataFrame(rows, columns=columns)
