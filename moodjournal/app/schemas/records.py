from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MoodRecordUpsert(BaseModel):
    mood: str = Field(default="", max_length=32)
    note: str = Field(default="", max_length=4000)
    timestamp: datetime | None = None


class MoodRecordModel(BaseModel):
    date_key: str
    mood: str
    note: str
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class MoodRecordListResponse(BaseModel):
    items: list[MoodRecordModel]
