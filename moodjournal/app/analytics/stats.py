from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import date

from ..services.navigation import Navigator, SearchHandoff
from .dates import DateRange, Granularity, InvalidRangeError, iter_periods
from .geometry import Arc, ChartGeometry, build_arcs, resolve_tap
from .models import MoodCount, MoodRecord, PieMap, StatsState, TrendBucket

logger = logging.getLogger(__name__)


class StatsEngine:
    """Aggregate mood records into range counts, trend buckets and a pie map."""

    def __init__(
        self,
        palette: Sequence[str],
        *,
        week_start: int = 0,
        navigator: Navigator | None = None,
    ) -> None:
        self._palette = list(dict.fromkeys(mood for mood in palette if mood))
        self._week_start = week_start % 7
        self._navigator = navigator

    @property
    def palette(self) -> list[str]:
        return list(self._palette)

    def compute_stats(
        self,
        records: Mapping[str, MoodRecord],
        start: date | str | None,
        end: date | str | None,
        granularity: Granularity | str = Granularity.DAY,
    ) -> StatsState:
        try:
            date_range = DateRange.parse(start, end)
            granularity = Granularity.parse(granularity)
        except InvalidRangeError as exc:
            logger.info("stats locked: %s", exc, extra={"date_range": f"{start}..{end}"})
            return StatsState.locked()
        span = f"{date_range.start}..{date_range.end}"
        if date_range.is_empty:
            logger.info("stats locked: inverted range", extra={"date_range": span})
            return StatsState.locked()

        selected = self._select(records, date_range)
        buckets = self._bucketize(selected, date_range, granularity)
        logger.info(
            "stats computed",
            extra={
                "granularity": granularity.value,
                "date_range": span,
                "records_in_range": len(selected),
                "bucket_count": len(buckets),
            },
        )
        return StatsState(
            range_mood_counts=self._range_counts(selected),
            trend_buckets=buckets,
            pie_map=self._latest_pie_map(buckets),
            data_locked=False,
            records_in_range=len(selected),
        )

    def draw_pie_chart(self, pie_map: Mapping[str, int]) -> list[Arc]:
        return build_arcs(pie_map, self._palette)

    @staticmethod
    def resolve_tap(
        point: tuple[float, float],
        arcs: Sequence[Arc],
        geometry: ChartGeometry,
    ) -> str | None:
        return resolve_tap(point, arcs, geometry)

    def on_pie_tap(
        self,
        point: tuple[float, float],
        arcs: Sequence[Arc],
        geometry: ChartGeometry,
    ) -> SearchHandoff | None:
        mood = resolve_tap(point, arcs, geometry)
        if mood is None:
            logger.debug("pie tap at %s resolved to nothing", point)
            return None
        logger.info("pie tap resolved", extra={"mood": mood})
        handoff = SearchHandoff(mood=mood)
        if self._navigator is not None:
            self._navigator.navigate(handoff)
        return handoff

    @staticmethod
    def _select(
        records: Mapping[str, MoodRecord],
        date_range: DateRange,
    ) -> list[tuple[date, MoodRecord]]:
        selected: list[tuple[date, MoodRecord]] = []
        for key, record in records.items():
            day = record.day
            if day is None:
                logger.debug("skipping record with invalid date key %r", key)
                continue
            if date_range.contains(day):
                selected.append((day, record))
        selected.sort(key=lambda item: item[0])
        return selected

    def _range_counts(self, selected: Sequence[tuple[date, MoodRecord]]) -> list[MoodCount]:
        counter = Counter(record.mood for _, record in selected if record.has_mood)
        counts = [MoodCount(mood=mood, count=counter.get(mood, 0)) for mood in self._palette]
        known = set(self._palette)
        # Counter keeps first-seen order and selected is chronological
        for mood, count in counter.items():
            if mood not in known:
                counts.append(MoodCount(mood=mood, count=count))
        return counts

    def _bucketize(
        self,
        selected: Sequence[tuple[date, MoodRecord]],
        date_range: DateRange,
        granularity: Granularity,
    ) -> list[TrendBucket]:
        buckets = [
            TrendBucket(bucket_key=key, start_date=start, end_date=end)
            for key, start, end in iter_periods(date_range, granularity, self._week_start)
        ]
        index = 0
        for day, record in selected:
            while buckets[index].end_date < day:
                index += 1
            bucket = buckets[index]
            if record.has_mood:
                bucket.mood_counts[record.mood] = bucket.mood_counts.get(record.mood, 0) + 1
            else:
                bucket.empty_count += 1
        return buckets

    @staticmethod
    def _latest_pie_map(buckets: Sequence[TrendBucket]) -> PieMap:
        for bucket in reversed(buckets):
            if bucket.total > 0:
                return dict(bucket.mood_counts)
        return {}


__all__ = ["StatsEngine"]
