from __future__ import annotations

from datetime import datetime

import pytest

from moodjournal.app.analytics import DateRange, MoodRecord, PresenceFilter, SearchEngine

OCTOBER = DateRange.parse("2025-10-01", "2025-10-10")


def _keys(records) -> list[str]:
    return [record.date_key for record in records]


def test_initialize_without_mood_matches_everything(sample_records) -> None:
    engine = SearchEngine(sample_records)
    state = engine.initialize()
    assert state.selected_moods == frozenset()
    assert state.presence == PresenceFilter.NEITHER
    assert len(engine.search()) == len(sample_records)


def test_initialize_with_incoming_mood(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.set_filters(only_empty_mood=True)

    state = engine.initialize("😀")

    assert state.selected_moods == frozenset({"😀"})
    assert state.only_with_mood is False
    assert state.only_empty_mood is False
    engine.set_filters(date_range=OCTOBER)
    assert _keys(engine.search()) == ["2025-10-01", "2025-10-02"]


def test_empty_mood_only_returns_records_without_mood(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.initialize()
    engine.set_filters(date_range=OCTOBER)
    engine.on_empty_mood_toggle(True)
    assert _keys(engine.search()) == ["2025-10-05", "2025-10-10"]


def test_with_mood_only_returns_records_with_mood(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.initialize()
    engine.on_with_mood_toggle(True)
    results = engine.search()
    assert results
    assert all(record.mood for record in results)


def test_toggles_are_mutually_exclusive(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.initialize("😀")

    assert engine.on_with_mood_toggle(True) == PresenceFilter.WITH_MOOD_ONLY
    assert engine.on_empty_mood_toggle(True) == PresenceFilter.EMPTY_MOOD_ONLY
    assert engine.state.only_with_mood is False
    assert engine.state.only_empty_mood is True

    assert engine.on_with_mood_toggle(False) == PresenceFilter.EMPTY_MOOD_ONLY
    assert engine.on_empty_mood_toggle(False) == PresenceFilter.NEITHER
    assert engine.state.only_with_mood is False
    assert engine.state.only_empty_mood is False


def test_set_filters_routes_flags_through_toggles(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.initialize()
    state = engine.set_filters(only_with_mood=True, only_empty_mood=True)
    assert state.presence == PresenceFilter.EMPTY_MOOD_ONLY
    assert not (state.only_with_mood and state.only_empty_mood)


def test_set_filters_rejects_unknown_keys(sample_records) -> None:
    engine = SearchEngine(sample_records)
    with pytest.raises(TypeError):
        engine.set_filters(colour="blue")


def test_multi_mood_selection(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.initialize()
    engine.set_filters(selected_moods=["🙂", "😐"])
    assert _keys(engine.search()) == ["2025-10-03", "2025-10-08"]


def test_mood_selection_combined_with_empty_only_matches_nothing(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.initialize("😀")
    engine.on_empty_mood_toggle(True)
    assert engine.search() == []


def test_inverted_range_returns_empty(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.initialize()
    engine.set_filters(date_range=DateRange.parse("2025-10-10", "2025-10-01"))
    assert engine.search() == []


def test_keyword_matches_note_case_insensitively(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.initialize()
    engine.set_filters(keyword="  NOTE ")
    assert _keys(engine.search()) == ["2025-10-05"]


def test_results_sorted_by_timestamp_then_date_key() -> None:
    same = datetime(2025, 10, 9, 12, 0)
    records = {
        "2025-10-03": MoodRecord("2025-10-03", "😀", "", datetime(2025, 10, 20)),
        "2025-10-02": MoodRecord("2025-10-02", "😀", "", same),
        "2025-10-01": MoodRecord("2025-10-01", "😀", "", same),
    }
    engine = SearchEngine(records)
    engine.initialize("😀")
    assert _keys(engine.search()) == ["2025-10-01", "2025-10-02", "2025-10-03"]


def test_search_recomputes_on_every_call(sample_records) -> None:
    engine = SearchEngine(sample_records)
    engine.initialize()
    first = engine.search()
    second = engine.search()
    assert first == second
    engine.set_filters(selected_moods={"😐"})
    assert _keys(engine.search()) == ["2025-10-08"]
