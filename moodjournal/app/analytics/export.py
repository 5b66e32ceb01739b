from __future__ import annotations

import csv
import io
from collections.abc import Iterable

from .models import MoodRecord

CSV_HEADER = ("date", "mood", "note", "timestamp")


def records_to_csv(records: Iterable[MoodRecord]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow(
            [
                record.date_key,
                record.mood,
                record.note,
                record.timestamp.isoformat(),
            ]
        )
    return buffer.getvalue()


__all__ = ["CSV_HEADER", "records_to_csv"]
