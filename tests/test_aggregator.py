from datetime import datetime, timezone

from aggregation_engine.aggregator import (
    apply_political_leaning,
    build_state_record,
    dedupe_topics,
    iso_timestamp,
    merge_store,
    rank_topics,
    score_topics,
)
from aggregation_engine.models import AggregateStore, ScoredTopic, StateRecord, ValidatedTopic

TIMESTAMP = "2026-10-18T12:00:00.000Z"


def _topic(name: str, score: int, **kwargs) -> ScoredTopic:
    return ScoredTopic(name=name, relevance_score=score, **kwargs)


def _batch_with_duplicate() -> list[ScoredTopic]:
    topics = [_topic("Election Reform", 80)]
    topics += [_topic(f"Topic {i}", 50 + i) for i in range(10)]
    topics.append(_topic("Election Reform", 95))
    return topics


def test_duplicate_title_kept_once_with_highest_score() -> None:
    ranked = rank_topics(_batch_with_duplicate(), top_n=10)
    election = [topic for topic in ranked if topic.name == "Election Reform"]
    assert len(election) == 1
    assert election[0].relevance_score == 95
    assert ranked[0].name == "Election Reform"
    assert len(ranked) == 10


def test_dedupe_keeps_first_occurrence() -> None:
    unique = dedupe_topics([_topic("A", 10), _topic("B", 20), _topic("A", 90)])
    assert [(t.name, t.relevance_score) for t in unique] == [("A", 10), ("B", 20)]


def test_equal_scores_keep_extraction_order() -> None:
    ranked = rank_topics([_topic("First", 70), _topic("Second", 90), _topic("Third", 70)])
    assert [t.name for t in ranked] == ["Second", "First", "Third"]


def test_relevance_floor_and_top_n() -> None:
    topics = [_topic("Low", 39), _topic("Edge", 40), _topic("High", 90)]
    assert [t.name for t in rank_topics(topics, min_relevance_score=40)] == ["High", "Edge"]
    assert [t.name for t in rank_topics(topics, top_n=1)] == ["High"]


def test_build_state_record_top_topic() -> None:
    record = build_state_record("Texas", "TX", [_topic("Border bill", 70), _topic("Senate race", 88)], TIMESTAMP)
    assert record.top_topic == "Senate race"
    assert record.trending_score == 88
    assert record.timestamp == TIMESTAMP
    assert record.category == "Law and Government"


def test_build_state_record_without_topics() -> None:
    record = build_state_record("Texas", "TX", [_topic("Weak", 10)], TIMESTAMP, min_relevance_score=40)
    assert record.topics == []
    assert record.top_topic == ""
    assert record.trending_score == 0


def test_score_topics_maps_fields() -> None:
    validated = [
        ValidatedTopic(title="trump border wall", search_volume="5K+", started="N/A", percentage_increase="200%"),
    ]
    [scored] = score_topics(validated, category="Politics")
    assert scored.relevance_score == 95
    assert scored.search_volume == "5K+"
    assert scored.started is None
    assert scored.category == "Politics"
    assert scored.political_leaning == 9


def test_merge_preserves_regions_missing_from_run() -> None:
    old_texas = StateRecord(name="Texas", code="TX", top_topic="Old", trending_score=60,
                            topics=[_topic("Old", 60)], timestamp="2026-10-17T00:00:00.000Z")
    old_ohio = StateRecord(name="Ohio", code="OH", top_topic="Levy", trending_score=55,
                           topics=[_topic("Levy", 55)], timestamp="2026-10-17T00:00:00.000Z")
    previous = AggregateStore(timestamp="2026-10-17T00:00:00.000Z", states=[old_texas, old_ohio])

    new_ohio = build_state_record("Ohio", "OH", [_topic("Senate race", 90)], TIMESTAMP)
    new_utah = build_state_record("Utah", "UT", [_topic("Water rights", 75)], TIMESTAMP)
    merged = merge_store(previous, [new_ohio, new_utah], TIMESTAMP)

    assert [state.name for state in merged.states] == ["Texas", "Ohio", "Utah"]
    assert merged.states[0] == old_texas
    assert merged.states[1].top_topic == "Senate race"
    assert merged.timestamp == TIMESTAMP
    # input store untouched
    assert previous.states[1].top_topic == "Levy"


def test_merge_is_idempotent() -> None:
    records = [
        build_state_record("Ohio", "OH", _batch_with_duplicate(), TIMESTAMP),
        build_state_record("Utah", "UT", [_topic("Water rights", 75)], TIMESTAMP),
    ]
    once = merge_store(AggregateStore(), records, TIMESTAMP)
    twice = merge_store(once, records, TIMESTAMP)
    assert once.to_json_dict() == twice.to_json_dict()
    assert merge_store(AggregateStore(), records, TIMESTAMP) == once


def test_json_uses_camel_case_and_drops_missing_optionals() -> None:
    record = build_state_record("Ohio", "OH", [_topic("Senate race", 90, search_volume="1K+")], TIMESTAMP)
    data = merge_store(AggregateStore(), [record], TIMESTAMP).to_json_dict()
    state = data["states"][0]
    assert state["topTopic"] == "Senate race"
    assert state["trendingScore"] == 90
    assert state["topics"][0] == {
        "name": "Senate race",
        "relevanceScore": 90,
        "category": "Law and Government",
        "searchVolume": "1K+",
    }


def test_apply_political_leaning_fills_missing_only() -> None:
    store = AggregateStore(states=[
        StateRecord(name="Ohio", code="OH", topics=[
            _topic("trump border wall", 80),
            _topic("bernie sanders medicare for all", 70, political_leaning=-90),
            _topic("weather warning", 60),
        ]),
    ])
    updated, total, classified = apply_political_leaning(store)
    leanings = [topic.political_leaning for topic in updated.states[0].topics]
    assert leanings == [9, -90, None]
    assert (total, classified) == (3, 2)
    assert store.states[0].topics[0].political_leaning is None

    recomputed, _, _ = apply_political_leaning(store, recompute=True)
    assert recomputed.states[0].topics[1].political_leaning == -18


def test_iso_timestamp_format() -> None:
    moment = datetime(2026, 10, 18, 12, 0, 5, 123000, tzinfo=timezone.utc)
    assert iso_timestamp(moment) == "2026-10-18T12:00:05.123Z"
