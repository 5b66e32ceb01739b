from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from .dates import InvalidRangeError, parse_date_key

PieMap = dict[str, int]


@dataclass(frozen=True)
class MoodRecord:
    """A single day's logged mood and note."""

    date_key: str
    mood: str = ""
    note: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime(1970, 1, 1))

    @property
    def has_mood(self) -> bool:
        return bool(self.mood)

    @property
    def day(self) -> date | None:
        try:
            return parse_date_key(self.date_key)
        except InvalidRangeError:
            return None


@dataclass(frozen=True)
class MoodCount:
    mood: str
    count: int


@dataclass
class TrendBucket:
    bucket_key: str
    start_date: date
    end_date: date
    mood_counts: dict[str, int] = field(default_factory=dict)
    empty_count: int = 0

    @property
    def total(self) -> int:
        return sum(self.mood_counts.values())


@dataclass
class StatsState:
    range_mood_counts: list[MoodCount] = field(default_factory=list)
    trend_buckets: list[TrendBucket] = field(default_factory=list)
    pie_map: PieMap = field(default_factory=dict)
    data_locked: bool = False
    records_in_range: int = 0

    @classmethod
    def locked(cls) -> StatsState:
        return cls(data_locked=True)


__all__ = ["MoodCount", "MoodRecord", "PieMap", "StatsState", "TrendBucket"]
