from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PALETTE = "😀,🙂,😐,🙁,😢"
GRANULARITIES = {"day", "week", "month"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/moodjournal.db",
        alias="DATABASE_URL",
    )
    log_file: Path = Field(default=Path("logs/moodjournal.log"))
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_max_bytes: int = Field(default=1_000_000, alias="LOG_MAX_BYTES")

    # Journal defaults, overridable through the settings store
    emoji_palette: str = Field(default=DEFAULT_PALETTE, alias="EMOJI_PALETTE")
    default_granularity: str = Field(default="day", alias="DEFAULT_GRANULARITY")
    week_start_day: int = Field(default=0, alias="WEEK_START_DAY")

    # Pie chart hit-testing
    pie_active_ratio: float = Field(default=1.0, alias="PIE_ACTIVE_RATIO")
    chart_width: float = Field(default=343.0, alias="CHART_WIDTH")
    chart_height: float = Field(default=200.0, alias="CHART_HEIGHT")

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        version_env = os.getenv("VERSION")
        if version_env:
            return version_env
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @property
    def palette(self) -> list[str]:
        moods: list[str] = []
        for chunk in self.emoji_palette.split(","):
            mood = chunk.strip()
            if mood and mood not in moods:
                moods.append(mood)
        return moods

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: str | None) -> str:
        level = str(value or "INFO").upper()
        if level not in LOG_LEVELS:
            return "INFO"
        return level

    @field_validator("default_granularity", mode="before")
    @classmethod
    def _validate_granularity(cls, value: str | None) -> str:
        if not value:
            return "day"
        normalized = str(value).lower()
        if normalized not in GRANULARITIES:
            return "day"
        return normalized

    @field_validator("week_start_day", mode="before")
    @classmethod
    def _validate_week_start(cls, value: int | str | None) -> int:
        if value is None or value == "":
            return 0
        return min(max(int(value), 0), 6)

    @field_validator("pie_active_ratio", mode="before")
    @classmethod
    def _validate_active_ratio(cls, value: float | str | None) -> float:
        if value is None or value == "":
            return 1.0
        ratio = float(value)
        if ratio <= 0:
            return 1.0
        return min(ratio, 1.0)

    @field_validator("database_url", mode="before")
    @classmethod
    def _validate_database_url(cls, value: str | None) -> str:
        if not value:
            value = "sqlite:///./data/moodjournal.db"

        normalized = str(value)
        if normalized.startswith("postgres://"):
            normalized = normalized.replace("postgres://", "postgresql://", 1)
        if normalized.startswith("postgresql://") and "+asyncpg" not in normalized:
            normalized = normalized.replace("postgresql://", "postgresql+asyncpg://", 1)
        if normalized.startswith("sqlite://") and "+aiosqlite" not in normalized:
            normalized = normalized.replace("sqlite://", "sqlite+aiosqlite://", 1)

        if normalized.startswith("sqlite+aiosqlite:///"):
            db_path = normalized.split("///", maxsplit=1)[-1]
            if db_path and db_path != ":memory:":
                db_file = Path(db_path)
                db_file.parent.mkdir(parents=True, exist_ok=True)

        return normalized


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
