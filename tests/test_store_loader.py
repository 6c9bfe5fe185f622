import json
from pathlib import Path

import pytest

from aggregation_engine.models import AggregateStore, ScoredTopic, StateRecord
from aggregation_engine.store_loader import load_store, read_store, save_store, store_to_frame
from statemap_engine.errors import MalformedPersistedStore


def _store() -> AggregateStore:
    return AggregateStore(
        timestamp="2026-10-18T12:00:00.000Z",
        states=[
            StateRecord(
                name="Ohio",
                code="OH",
                top_topic="Senate race",
                trending_score=90,
                topics=[
                    ScoredTopic(name="Senate race", relevance_score=90, political_leaning=None),
                    ScoredTopic(name="trump rally", relevance_score=70, political_leaning=3),
                ],
                timestamp="2026-10-18T12:00:00.000Z",
            )
        ],
    )


def test_missing_file_is_empty_store(tmp_path: Path) -> None:
    assert load_store(tmp_path / "nope.json") == AggregateStore()


def test_malformed_file_falls_back_to_empty(tmp_path: Path) -> None:
    path = tmp_path / "states-topics.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(MalformedPersistedStore):
        read_store(path)
    assert load_store(path) == AggregateStore()


def test_wrong_shape_is_malformed(tmp_path: Path) -> None:
    path = tmp_path / "states-topics.json"
    path.write_text(json.dumps({"states": [{"code": "OH"}]}), encoding="utf-8")
    with pytest.raises(MalformedPersistedStore):
        read_store(path)


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "public" / "data" / "states-topics.json"
    save_store(path, _store())

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["states"][0]["topTopic"] == "Senate race"
    assert "politicalLeaning" not in raw["states"][0]["topics"][0]
    assert raw["states"][0]["topics"][1]["politicalLeaning"] == 3
    assert load_store(path) == _store()
    # no temp files left behind
    assert [p.name for p in path.parent.iterdir()] == ["states-topics.json"]


def test_unknown_fields_survive_a_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "states-topics.json"
    data = _store().to_json_dict()
    data["states"][0]["topics"][0]["newsItems"] = [{"title": "Debate recap"}]
    path.write_text(json.dumps(data), encoding="utf-8")

    save_store(path, load_store(path))
    reloaded = json.loads(path.read_text(encoding="utf-8"))
    assert reloaded["states"][0]["topics"][0]["newsItems"] == [{"title": "Debate recap"}]


def test_store_to_frame() -> None:
    df = store_to_frame(_store())
    assert list(df["topic"]) == ["Senate race", "trump rally"]
    assert list(df["rank"]) == [1, 2]
    assert set(df["region"]) == {"Ohio"}
    assert store_to_frame(AggregateStore()).empty
