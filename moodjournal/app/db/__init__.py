"""Database utilities for the mood journal."""

from .models import Base, MoodRecordEntry, SettingEntry

__all__ = [
    "Base",
    "MoodRecordEntry",
    "SettingEntry",
]
