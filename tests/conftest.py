from __future__ import annotations

import asyncio
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from moodjournal.app.analytics import MoodRecord
from moodjournal.app.core import config
from moodjournal.db import create_engine, create_session_factory, init_db

PALETTE = ["😀", "🙂", "😐"]


def _record(date_key: str, mood: str, note: str) -> MoodRecord:
    return MoodRecord(
        date_key=date_key,
        mood=mood,
        note=note,
        timestamp=datetime.fromisoformat(date_key),
    )


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def palette() -> list[str]:
    return list(PALETTE)


@pytest.fixture()
def sample_records() -> dict[str, MoodRecord]:
    rows = [
        _record("2025-10-01", "😀", "start"),
        _record("2025-10-02", "😀", ""),
        _record("2025-10-03", "🙂", "ok"),
        _record("2025-10-05", "", "only note"),
        _record("2025-10-08", "😐", ""),
        _record("2025-10-10", "", ""),
    ]
    return {row.date_key: row for row in rows}


@pytest.fixture()
def test_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    monkeypatch.setenv("VERSION", "0.1.0-test")
    monkeypatch.setenv("EMOJI_PALETTE", ",".join(PALETTE))
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "test.log"))
    db_path = tmp_path / f"test_{uuid4().hex}.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    config.get_settings.cache_clear()

    from moodjournal.app.main import app

    try:
        with TestClient(app) as client:
            yield client
    finally:
        config.get_settings.cache_clear()


@pytest.fixture()
def temp_session_factory(tmp_path: Path):
    db_path = tmp_path / f"unit_{uuid4().hex}.db"
    database_url = f"sqlite+aiosqlite:///{db_path}"
    engine = create_engine(database_url)
    session_factory = create_session_factory(engine)
    asyncio.run(init_db(engine, session_factory, "test"))
    try:
        yield session_factory
    finally:
        asyncio.run(engine.dispose())
