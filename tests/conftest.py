"""In-memory stand-ins for the Playwright driver used across the tests."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from topicnews.config import ScraperConfig
from topicnews.services.browser import RenderSession


class FakePage:
    def __init__(self, site: "FakeSite") -> None:
        self.site = site
        self.url = "about:blank"
        self.close_calls = 0
        self._route: Dict[str, Any] = {}

    def goto(self, url: str, wait_until: str | None = None, timeout: float | None = None) -> None:
        self.site.events.append(("goto", url))
        self.site.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        route = self.site.routes.get(url)
        if route is None:
            raise PlaywrightError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        if route.get("timeout"):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        self._route = route
        self.url = route.get("final_url", url)

    def eval_on_selector_all(self, selector: str, expression: str, arg: Any = None) -> List[Any]:
        self.site.queries.append(selector)
        if self._route.get("broken_selector"):
            raise PlaywrightError(f"Unexpected token in selector {selector}")
        if arg is None:
            return list(self._route.get("fragments", []))
        return [dict(row) if row is not None else None for row in self._route.get("listing", [])]

    def close(self) -> None:
        self.close_calls += 1


class FakeContext:
    def __init__(self, site: "FakeSite", user_agent: str) -> None:
        self.site = site
        self.user_agent = user_agent
        self.closed = False

    def new_page(self) -> FakePage:
        if self.site.fail_new_page:
            raise PlaywrightError("Target page, context or browser has been closed")
        page = FakePage(self.site)
        self.site.pages.append(page)
        return page

    def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self, site: "FakeSite") -> None:
        self.site = site
        self.closed = False

    def new_context(self, user_agent: str | None = None) -> FakeContext:
        context = FakeContext(self.site, user_agent or "")
        self.site.contexts.append(context)
        return context

    def close(self) -> None:
        self.closed = True
        self.site.browser_closes += 1


class FakeChromium:
    def __init__(self, site: "FakeSite") -> None:
        self.site = site

    def launch(self, headless: bool = True, args: List[str] | None = None) -> FakeBrowser:
        self.site.launches.append({"headless": headless, "args": list(args or [])})
        if self.site.fail_launch:
            raise PlaywrightError("Executable doesn't exist at /ms-playwright/chromium/chrome")
        browser = FakeBrowser(self.site)
        self.site.browsers.append(browser)
        return browser


class FakeDriver:
    def __init__(self, site: "FakeSite") -> None:
        self.chromium = FakeChromium(site)
        self.site = site

    def start(self) -> "FakeDriver":
        self.site.starts += 1
        return self

    def stop(self) -> None:
        self.site.stops += 1


class FakeSite:
    """A tiny web: ``routes`` maps URLs to what the page exposes once loaded."""

    def __init__(self) -> None:
        self.routes: Dict[str, Dict[str, Any]] = {}
        self.events: List[tuple] = []
        self.goto_calls: List[Dict[str, Any]] = []
        self.queries: List[str] = []
        self.pages: List[FakePage] = []
        self.contexts: List[FakeContext] = []
        self.browsers: List[FakeBrowser] = []
        self.launches: List[Dict[str, Any]] = []
        self.starts = 0
        self.stops = 0
        self.browser_closes = 0
        self.fail_launch = False
        self.fail_new_page = False

    def driver(self) -> FakeDriver:
        return FakeDriver(self)

    def sleep(self, seconds: float) -> None:
        self.events.append(("sleep", seconds))

    def session_factory(self, config: ScraperConfig) -> RenderSession:
        return RenderSession(
            config.user_agent,
            headless=config.browser.headless,
            launch_args=config.browser.launch_args,
            playwright_factory=self.driver,
        )

    def add_listing(self, url: str, items: List[Any], **extra: Any) -> None:
        rows = [
            item if item is None or isinstance(item, dict) else {"title": item[0], "href": item[1]}
            for item in items
        ]
        self.routes[url] = {"listing": rows, **extra}

    def add_article(self, url: str, fragments: List[str], **extra: Any) -> None:
        self.routes[url] = {"fragments": fragments, **extra}


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def config() -> ScraperConfig:
    return ScraperConfig(
        topics=["tech", "crypto"],
        base_url="https://news.example.com/topic",
        user_agent="TopicNewsTest/1.0",
        pacing={"between_articles": 0.5, "page_load_timeout": 5},
    )
