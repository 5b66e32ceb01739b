from __future__ import annotations

from pydantic import BaseModel

from .records import MoodRecordModel


class SearchResponse(BaseModel):
    presence: str
    selected_moods: list[str]
    count: int
    items: list[MoodRecordModel]
