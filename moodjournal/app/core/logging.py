from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import Any

from .config import Settings, get_settings

REQUEST_FIELDS = ("request_id", "path", "method", "status", "duration_ms")
# Context attached by the stats and search engines through ``extra=``
JOURNAL_FIELDS = (
    "granularity",
    "date_range",
    "records_in_range",
    "bucket_count",
    "mood",
    "presence",
    "selected_moods",
    "result_count",
)

_HANDLER_MARKER = "_moodjournal_handler"


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON line with request and journal context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(self._collect(record, REQUEST_FIELDS))

        journal = self._collect(record, JOURNAL_FIELDS)
        if journal:
            payload["journal"] = journal

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            payload.update(extra_fields)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=_jsonable)

    @staticmethod
    def _collect(record: logging.LogRecord, fields: tuple[str, ...]) -> dict[str, Any]:
        collected: dict[str, Any] = {}
        for field in fields:
            value = getattr(record, field, None)
            if value is not None:
                collected[field] = value
        return collected


def _jsonable(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return str(value)


def _mark(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_MARKER, True)
    return handler


def configure_logging(settings: Settings | None = None) -> None:
    """Attach the JSON file and console handlers to the root logger once."""

    settings = settings or get_settings()
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    if any(getattr(handler, _HANDLER_MARKER, False) for handler in root_logger.handlers):
        return

    formatter = JsonFormatter()
    file_handler = RotatingFileHandler(
        settings.log_file,
        maxBytes=settings.log_max_bytes,
        backupCount=3,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler()
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        root_logger.addHandler(_mark(handler))
