from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import delete, select, text
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..analytics.dates import Granularity, format_date_key, parse_date_key
from ..analytics.models import MoodRecord
from ..db.models import MoodRecordEntry, SettingEntry, utcnow

PALETTE_KEY = "emoji_palette"
GRANULARITY_KEY = "default_granularity"

logger = logging.getLogger(__name__)


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _clean_palette(palette: Sequence[object]) -> list[str]:
    moods = (str(mood).strip() for mood in palette if mood)
    return list(dict.fromkeys(mood for mood in moods if mood))


def _to_record(entry: MoodRecordEntry) -> MoodRecord:
    return MoodRecord(
        date_key=entry.date_key,
        mood=entry.mood or "",
        note=entry.note or "",
        timestamp=entry.timestamp,
    )


class StorageService:
    """Persist mood records and journal settings."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        *,
        default_palette: Sequence[str] = (),
        default_granularity: str = "day",
    ) -> None:
        self._session_factory = session_factory
        self._default_palette = list(default_palette)
        self._default_granularity = default_granularity

    async def healthcheck(self) -> None:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))

    # -- settings helpers ------------------------------------------------
    async def get_setting(self, key: str) -> str | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key == key)
            )
            entry = result.scalar_one_or_none()
            return entry.value if entry else None

    async def set_setting(self, key: str, value: str) -> None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key == key)
            )
            entry = result.scalar_one_or_none()
            if entry is None:
                entry = SettingEntry(key=key, value=value)
                session.add(entry)
            else:
                entry.value = value
            await session.commit()

    async def get_palette(self) -> list[str]:
        stored = await self.get_setting(PALETTE_KEY)
        if stored is None:
            return list(self._default_palette)
        try:
            palette = json.loads(stored)
        except json.JSONDecodeError:
            logger.warning("stored palette is not valid JSON, using default")
            return list(self._default_palette)
        if not isinstance(palette, list):
            return list(self._default_palette)
        return _clean_palette(palette)

    async def set_palette(self, palette: Sequence[str]) -> list[str]:
        cleaned = _clean_palette(palette)
        await self.set_setting(PALETTE_KEY, json.dumps(cleaned, ensure_ascii=False))
        return cleaned

    async def get_default_granularity(self) -> Granularity:
        stored = await self.get_setting(GRANULARITY_KEY)
        for candidate in (stored, self._default_granularity):
            if candidate in {item.value for item in Granularity}:
                return Granularity(candidate)
        return Granularity.DAY

    async def set_default_granularity(self, granularity: Granularity | str) -> Granularity:
        value = Granularity.parse(granularity)
        await self.set_setting(GRANULARITY_KEY, value.value)
        return value

    # -- mood records ----------------------------------------------------
    async def get_all(self) -> dict[str, MoodRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(MoodRecordEntry).order_by(MoodRecordEntry.date_key)
            )
            return {entry.date_key: _to_record(entry) for entry in result.scalars().all()}

    async def get_record(self, date_key: str) -> MoodRecord | None:
        async with self._session_factory() as session:
            entry = await session.scalar(
                select(MoodRecordEntry).where(MoodRecordEntry.date_key == date_key)
            )
            return _to_record(entry) if entry else None

    async def save_record(
        self,
        date_key: str,
        *,
        mood: str = "",
        note: str = "",
        timestamp: datetime | None = None,
    ) -> MoodRecord:
        key = format_date_key(parse_date_key(date_key))
        ts = _to_naive_utc(timestamp) if timestamp is not None else utcnow()
        async with self._session_factory() as session:
            entry = await session.scalar(
                select(MoodRecordEntry).where(MoodRecordEntry.date_key == key)
            )
            if entry is None:
                entry = MoodRecordEntry(date_key=key, mood=mood, note=note, timestamp=ts)
                session.add(entry)
            else:
                entry.mood = mood
                entry.note = note
                entry.timestamp = ts
            await session.commit()
            await session.refresh(entry)
            return _to_record(entry)

    async def delete_record(self, date_key: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(MoodRecordEntry).where(MoodRecordEntry.date_key == date_key)
            )
            await session.commit()
            return bool(result.rowcount)


__all__ = ["StorageService"]
