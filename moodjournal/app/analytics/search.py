from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .dates import DateRange
from .models import MoodRecord

logger = logging.getLogger(__name__)


class PresenceFilter(str, Enum):
    NEITHER = "neither"
    WITH_MOOD_ONLY = "with_mood_only"
    EMPTY_MOOD_ONLY = "empty_mood_only"


@dataclass(frozen=True)
class SearchFilterState:
    date_range: DateRange | None = None
    selected_moods: frozenset[str] = field(default_factory=frozenset)
    only_with_mood: bool = False
    only_empty_mood: bool = False
    keyword: str = ""

    @property
    def presence(self) -> PresenceFilter:
        if self.only_with_mood:
            return PresenceFilter.WITH_MOOD_ONLY
        if self.only_empty_mood:
            return PresenceFilter.EMPTY_MOOD_ONLY
        return PresenceFilter.NEITHER


def _matches(record: MoodRecord, state: SearchFilterState) -> bool:
    if state.date_range is not None:
        day = record.day
        if day is None or not state.date_range.contains(day):
            return False
    if state.selected_moods and record.mood not in state.selected_moods:
        return False
    if state.only_with_mood and not record.has_mood:
        return False
    if state.only_empty_mood and record.has_mood:
        return False
    if state.keyword and state.keyword.casefold() not in record.note.casefold():
        return False
    return True


def filter_records(
    records: Iterable[MoodRecord],
    state: SearchFilterState,
) -> list[MoodRecord]:
    """Apply the filter state and order matches by timestamp, then date key."""

    if state.date_range is not None and state.date_range.is_empty:
        return []
    matches = [record for record in records if _matches(record, state)]
    matches.sort(key=lambda record: (record.timestamp, record.date_key))
    return matches


class SearchEngine:
    """Holds the search filter state for one view over a record snapshot.

    The two presence toggles are mutually exclusive: switching one on
    switches the other off, so both can never be active together.
    """

    def __init__(self, records: Mapping[str, MoodRecord]) -> None:
        self._records = records
        self._state = SearchFilterState()

    @property
    def state(self) -> SearchFilterState:
        return self._state

    def initialize(self, incoming_mood: str | None = None) -> SearchFilterState:
        if incoming_mood:
            self._state = SearchFilterState(selected_moods=frozenset({incoming_mood}))
        else:
            self._state = SearchFilterState()
        return self._state

    def set_filters(self, **partial: Any) -> SearchFilterState:
        with_mood = partial.pop("only_with_mood", None)
        empty_mood = partial.pop("only_empty_mood", None)
        unknown = set(partial) - {"date_range", "selected_moods", "keyword"}
        if unknown:
            raise TypeError(f"unknown search filters: {sorted(unknown)}")

        if "selected_moods" in partial:
            partial["selected_moods"] = frozenset(
                mood for mood in partial["selected_moods"] or () if mood
            )
        if "keyword" in partial:
            partial["keyword"] = (partial["keyword"] or "").strip()
        self._state = replace(self._state, **partial)

        if with_mood is not None:
            self.on_with_mood_toggle(bool(with_mood))
        if empty_mood is not None:
            self.on_empty_mood_toggle(bool(empty_mood))
        return self._state

    def on_with_mood_toggle(self, value: bool) -> PresenceFilter:
        if value:
            self._state = replace(self._state, only_with_mood=True, only_empty_mood=False)
        elif self._state.only_with_mood:
            self._state = replace(self._state, only_with_mood=False)
        return self._state.presence

    def on_empty_mood_toggle(self, value: bool) -> PresenceFilter:
        if value:
            self._state = replace(self._state, only_empty_mood=True, only_with_mood=False)
        elif self._state.only_empty_mood:
            self._state = replace(self._state, only_empty_mood=False)
        return self._state.presence

    def search(self) -> list[MoodRecord]:
        results = filter_records(self._records.values(), self._state)
        logger.debug(
            "search matched %d of %d records",
            len(results),
            len(self._records),
            extra={
                "presence": self._state.presence.value,
                "selected_moods": self._state.selected_moods,
                "result_count": len(results),
            },
        )
        return results


__all__ = ["PresenceFilter", "SearchEngine", "SearchFilterState", "filter_records"]
