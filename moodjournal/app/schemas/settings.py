from __future__ import annotations

from pydantic import BaseModel, Field

from ..analytics import Granularity


class PaletteModel(BaseModel):
    palette: list[str] = Field(..., min_length=1)


class GranularityModel(BaseModel):
    granularity: Granularity
