from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from ..analytics import Granularity


class MoodCountModel(BaseModel):
    mood: str
    count: int = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)


class TrendBucketModel(BaseModel):
    bucket_key: str
    start_date: date
    end_date: date
    mood_counts: dict[str, int]
    empty_count: int = 0
    total: int = 0

    model_config = ConfigDict(from_attributes=True)


class StatsResponse(BaseModel):
    start: str | None = None
    end: str | None = None
    granularity: str
    data_locked: bool
    records_in_range: int
    range_mood_counts: list[MoodCountModel]
    trend_buckets: list[TrendBucketModel]
    pie_map: dict[str, int]


class ArcModel(BaseModel):
    mood: str
    start: float
    end: float
    count: int

    model_config = ConfigDict(from_attributes=True)


class PieResponse(BaseModel):
    pie_map: dict[str, int]
    arcs: list[ArcModel]


class PieTapRequest(BaseModel):
    start: str | None = None
    end: str | None = None
    granularity: Granularity = Granularity.DAY
    x: float
    y: float
    width: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)


class PieTapResponse(BaseModel):
    mood: str | None
    search_url: str | None = None
