from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from moodjournal.app.analytics import Granularity, InvalidRangeError
from moodjournal.app.services.storage import StorageService
from moodjournal.db import create_engine, create_session_factory, init_db


@pytest.mark.anyio
async def test_storage_service_records_crud(tmp_path: Path) -> None:
    db_path = tmp_path / "test.db"
    database_url = f"sqlite+aiosqlite:///{db_path}"
    engine = create_engine(database_url)
    session_factory = create_session_factory(engine)
    await init_db(engine, session_factory, "test")

    storage = StorageService(session_factory, default_palette=["😀", "🙂"])

    first = await storage.save_record("2025-10-02", mood="😀", note="заметка")
    await storage.save_record("2025-10-01", mood="", note="only note")
    assert first.date_key == "2025-10-02"
    assert first.timestamp is not None

    records = await storage.get_all()
    assert list(records) == ["2025-10-01", "2025-10-02"]
    assert records["2025-10-02"].note == "заметка"
    assert records["2025-10-01"].has_mood is False

    updated = await storage.save_record("2025-10-02", mood="🙂", note="")
    assert updated.mood == "🙂"
    assert len(await storage.get_all()) == 2

    assert await storage.delete_record("2025-10-01") is True
    assert await storage.delete_record("2025-10-01") is False
    assert await storage.get_record("2025-10-01") is None

    await engine.dispose()


@pytest.mark.anyio
async def test_save_record_normalizes_timestamp_and_key(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    aware = datetime(2025, 10, 1, 12, 0, tzinfo=timezone(timedelta(hours=3)))

    record = await storage.save_record("2025-10-01", mood="😀", timestamp=aware)

    assert record.timestamp == datetime(2025, 10, 1, 9, 0)
    assert record.timestamp.tzinfo is None
    assert record.timestamp == aware.astimezone(UTC).replace(tzinfo=None)

    with pytest.raises(InvalidRangeError):
        await storage.save_record("not-a-day", mood="😀")


@pytest.mark.anyio
async def test_palette_defaults_and_updates(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory, default_palette=["😀", "🙂", "😐"])

    assert await storage.get_palette() == ["😀", "🙂", "😐"]

    saved = await storage.set_palette(["😢", " 😀 ", "😢", ""])
    assert saved == ["😢", "😀"]
    assert await storage.get_palette() == ["😢", "😀"]


@pytest.mark.anyio
async def test_corrupt_palette_falls_back_to_default(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory, default_palette=["😀"])
    await storage.set_setting("emoji_palette", "{not json")
    assert await storage.get_palette() == ["😀"]


@pytest.mark.anyio
async def test_default_granularity_round_trip(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory, default_granularity="week")
    assert await storage.get_default_granularity() is Granularity.WEEK

    await storage.set_default_granularity("month")
    assert await storage.get_default_granularity() is Granularity.MONTH

    with pytest.raises(InvalidRangeError):
        await storage.set_default_granularity("decade")


@pytest.mark.anyio
async def test_healthcheck(temp_session_factory) -> None:
    await StorageService(temp_session_factory).healthcheck()


@pytest.mark.anyio
async def test_stored_palette_with_repeats_is_cleaned_on_read(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory, default_palette=["😀"])
    await storage.set_setting("emoji_palette", '["😀", "🙂", "😀", " 🙂 ", ""]')
    assert await storage.get_palette() == ["😀", "🙂"]
