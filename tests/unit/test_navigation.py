from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from moodjournal.app.services.navigation import Navigator, SearchHandoff, UrlNavigator


def test_url_navigator_records_search_url() -> None:
    navigator = UrlNavigator()
    assert isinstance(navigator, Navigator)
    assert navigator.last_url is None

    navigator.navigate(SearchHandoff(mood="😐"))

    url = navigator.last_url
    assert url is not None
    parts = urlsplit(url)
    assert parts.path == "/api/v1/search"
    assert parse_qs(parts.query) == {"mood": ["😐"]}


def test_handoff_targets_search_view() -> None:
    assert SearchHandoff(mood="😀").target == "search"
