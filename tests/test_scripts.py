import json
from datetime import datetime, timezone
from pathlib import Path

from aggregation_engine.models import AggregateStore, ScoredTopic, StateRecord
from aggregation_engine.store_loader import save_store, store_to_frame
from scripts.add_political_leaning import backfill
from scripts.ingest_states import exit_code, generate_store_report, write_report
from statemap_engine.ingestion import FAILED, SUCCEEDED, RegionOutcome, RunSummary
from statemap_engine.regions import find_region


def _store() -> AggregateStore:
    return AggregateStore(
        timestamp="2026-10-18T12:00:00.000Z",
        states=[
            StateRecord(name="Ohio", code="OH", top_topic="trump border wall", trending_score=90, topics=[
                ScoredTopic(name="trump border wall", relevance_score=90, search_volume="5K+"),
                ScoredTopic(name="weather warning", relevance_score=60),
            ]),
        ],
    )


def _summary() -> RunSummary:
    return RunSummary(
        started_at=datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc),
        outcomes=[
            RegionOutcome(region=find_region("OH"), status=SUCCEEDED),
            RegionOutcome(region=find_region("TX"), status=FAILED, error_kind="source_unavailable",
                          message="renderer down"),
        ],
    )


def test_generate_store_report() -> None:
    report = generate_store_report(store_to_frame(_store()), _summary())
    assert "Ohio (OH): trump border wall (Score: 90, 5K+)" in report
    assert "1 succeeded, 1 failed, 0 skipped" in report
    assert "Texas [source_unavailable]: renderer down" in report
    assert "Non-political: 2 topics" in report


def test_write_report_next_to_store(tmp_path: Path) -> None:
    output = tmp_path / "states-topics.json"
    save_store(output, _store())
    report_path = write_report(output)
    assert report_path == tmp_path / "states-topics-report.txt"
    assert "STATE TRENDING TOPICS REPORT" in report_path.read_text(encoding="utf-8")


def test_exit_code() -> None:
    assert exit_code(_summary()) == 0
    all_failed = _summary()
    all_failed.outcomes = all_failed.outcomes[1:]
    assert exit_code(all_failed) == 1


def test_backfill_adds_leaning_in_place(tmp_path: Path) -> None:
    path = tmp_path / "states-topics.json"
    save_store(path, _store())

    total, classified = backfill(path)

    assert (total, classified) == (2, 1)
    topics = json.loads(path.read_text(encoding="utf-8"))["states"][0]["topics"]
    assert topics[0]["politicalLeaning"] == 9
    assert "politicalLeaning" not in topics[1]
