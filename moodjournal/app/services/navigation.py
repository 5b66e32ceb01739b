from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable
from urllib.parse import urlencode

SEARCH_TARGET = "search"


@dataclass(frozen=True)
class SearchHandoff:
    """One-shot message carrying a mood from the stats view to search."""

    mood: str
    target: str = SEARCH_TARGET


@runtime_checkable
class Navigator(Protocol):
    def navigate(self, handoff: SearchHandoff) -> None: ...


@dataclass
class UrlNavigator:
    """Translate handoffs into search URLs and remember them."""

    search_path: str = "/api/v1/search"
    history: list[str] = field(default_factory=list)

    def url_for(self, handoff: SearchHandoff) -> str:
        return f"{self.search_path}?{urlencode({'mood': handoff.mood})}"

    def navigate(self, handoff: SearchHandoff) -> None:
        self.history.append(self.url_for(handoff))

    @property
    def last_url(self) -> str | None:
        return self.history[-1] if self.history else None


__all__ = ["SEARCH_TARGET", "Navigator", "SearchHandoff", "UrlNavigator"]
