"""Mood statistics and search over the journal record snapshot."""

from .dates import DateRange, Granularity, InvalidRangeError
from .export import records_to_csv
from .geometry import Arc, ChartGeometry, build_arcs, resolve_tap
from .models import MoodCount, MoodRecord, PieMap, StatsState, TrendBucket
from .search import PresenceFilter, SearchEngine, SearchFilterState, filter_records
from .stats import StatsEngine

__all__ = [
    "Arc",
    "ChartGeometry",
    "DateRange",
    "Granularity",
    "InvalidRangeError",
    "MoodCount",
    "MoodRecord",
    "PieMap",
    "PresenceFilter",
    "SearchEngine",
    "SearchFilterState",
    "StatsEngine",
    "StatsState",
    "TrendBucket",
    "build_arcs",
    "filter_records",
    "records_to_csv",
    "resolve_tap",
]
