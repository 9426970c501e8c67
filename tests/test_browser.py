"""Tests for :mod:`topicnews.services.browser`."""

from __future__ import annotations

import pytest

from topicnews.errors import ExtractionError, InitializationError, NavigationError, ResourceError
from topicnews.services.browser import WAIT_UNTIL, RenderSession


def _session(site, **kwargs) -> RenderSession:
    return RenderSession("TopicNewsTest/1.0", playwright_factory=site.driver, **kwargs)


def test_open_applies_user_agent_to_context(site) -> None:
    session = _session(site, launch_args=["--no-sandbox"]).open()

    assert session.is_open
    assert site.launches == [{"headless": True, "args": ["--no-sandbox"]}]
    assert site.contexts[0].user_agent == "TopicNewsTest/1.0"

    session.close()


def test_close_is_idempotent_and_releases_everything(site) -> None:
    session = _session(site).open()

    session.close()
    session.close()

    assert site.contexts[0].closed is True
    assert site.browser_closes == 1
    assert site.stops == 1
    assert not session.is_open


def test_close_on_never_opened_session_is_a_no_op(site) -> None:
    _session(site).close()

    assert site.starts == 0
    assert site.stops == 0


def test_closed_session_cannot_be_reopened(site) -> None:
    session = _session(site).open()
    session.close()

    with pytest.raises(InitializationError):
        session.open()


def test_launch_failure_raises_initialization_error_and_stops_driver(site) -> None:
    site.fail_launch = True
    session = _session(site)

    with pytest.raises(InitializationError) as excinfo:
        session.open()

    assert "Executable doesn't exist" in str(excinfo.value)
    assert site.stops == 1
    assert not session.is_open


def test_new_tab_requires_open_session(site) -> None:
    with pytest.raises(ResourceError):
        _session(site).new_tab()


def test_new_tab_failure_raises_resource_error(site) -> None:
    site.fail_new_page = True

    with _session(site) as session:
        with pytest.raises(ResourceError):
            session.new_tab()


def test_navigate_waits_for_network_idle_with_timeout_in_ms(site) -> None:
    site.add_article("https://news.example.com/a", ["<p>a</p>"])

    with _session(site) as session, session.new_tab() as tab:
        tab.navigate("https://news.example.com/a", timeout=2.5)
        assert tab.current_url == "https://news.example.com/a"

    assert site.goto_calls == [
        {"url": "https://news.example.com/a", "wait_until": WAIT_UNTIL, "timeout": 2500}
    ]
    assert site.pages[0].close_calls == 1


def test_navigate_timeout_raises_navigation_error(site) -> None:
    site.add_article("https://news.example.com/slow", [], timeout=True)

    with _session(site) as session, session.new_tab() as tab:
        with pytest.raises(NavigationError) as excinfo:
            tab.navigate("https://news.example.com/slow", timeout=1)

    assert excinfo.value.url == "https://news.example.com/slow"
    assert "Timed out" in str(excinfo.value)


def test_navigate_failure_raises_navigation_error(site) -> None:
    with _session(site) as session, session.new_tab() as tab:
        with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
            tab.navigate("https://unknown.example.com/", timeout=1)


def test_extract_fragments_returns_empty_list_when_nothing_matches(site) -> None:
    site.add_article("https://news.example.com/empty", [])

    with _session(site) as session, session.new_tab() as tab:
        tab.navigate("https://news.example.com/empty", timeout=1)
        assert tab.extract_fragments(".body > p") == []


def test_extract_fragments_wraps_selector_errors(site) -> None:
    site.add_article("https://news.example.com/a", [], broken_selector=True)

    with _session(site) as session, session.new_tab() as tab:
        tab.navigate("https://news.example.com/a", timeout=1)
        with pytest.raises(ExtractionError):
            tab.extract_fragments("p[")


def test_extract_listing_trims_titles_and_keeps_order(site) -> None:
    site.add_listing(
        "https://news.example.com/topic/tech",
        [("  First  ", "https://news.example.com/1"), ("Second\n", "https://news.example.com/2")],
    )

    with _session(site) as session, session.new_tab() as tab:
        tab.navigate("https://news.example.com/topic/tech", timeout=1)
        entries = tab.extract_listing("li", "h3 > a")

    assert entries == [
        {"title": "First", "href": "https://news.example.com/1"},
        {"title": "Second", "href": "https://news.example.com/2"},
    ]


@pytest.mark.parametrize(
    "row",
    [
        None,
        {"title": "No link target", "href": ""},
        {"title": "   ", "href": "https://news.example.com/3"},
    ],
)
def test_extract_listing_rejects_malformed_items(site, row) -> None:
    site.add_listing(
        "https://news.example.com/topic/tech",
        [("Fine", "https://news.example.com/1"), row],
    )

    with _session(site) as session, session.new_tab() as tab:
        tab.navigate("https://news.example.com/topic/tech", timeout=1)
        with pytest.raises(ExtractionError, match="invalid news item structure") as excinfo:
            tab.extract_listing("li", "h3 > a")

    assert excinfo.value.context["index"] == 1


def test_tab_dispose_is_idempotent(site) -> None:
    with _session(site) as session:
        tab = session.new_tab()
        tab.dispose()
        tab.dispose()

    assert tab.disposed
    assert site.pages[0].close_calls == 1


def test_close_releases_browser_and_driver_when_context_close_fails(site, monkeypatch, caplog) -> None:
    session = _session(site).open()

    def broken_close() -> None:
        raise RuntimeError("driver connection lost")

    monkeypatch.setattr(site.contexts[0], "close", broken_close)

    session.close()

    assert site.browser_closes == 1
    assert site.stops == 1
    assert not session.is_open
    assert "driver connection lost" in caplog.text
