from __future__ import annotations

import logging
import os

import uvicorn

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8000


def _resolve_port(raw: str | None) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        logger.warning("ignoring non-numeric PORT=%r", raw)
        return DEFAULT_PORT
    if not 0 < port < 65536:
        logger.warning("ignoring out-of-range PORT=%d", port)
        return DEFAULT_PORT
    return port


def run() -> None:
    """Serve the mood journal API; uvicorn keeps the journal's JSON log handlers."""

    from moodjournal.app.main import app

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_resolve_port(os.getenv("PORT")),
        log_config=None,
    )


if __name__ == "__main__":
    run()
