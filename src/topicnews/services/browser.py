"""Long-lived Playwright browser session and the tabs it hands out.

A :class:`RenderSession` owns one Chromium instance and one browser context for the
duration of a crawl.  Every page load happens in a :class:`Tab` obtained from
:meth:`RenderSession.new_tab`; tabs are context managers so the operation that opened
one also closes it, whether it returns normally or raises.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Sequence

from playwright.sync_api import BrowserContext, Page
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from topicnews.config import ScraperConfig
from topicnews.errors import ExtractionError, InitializationError, NavigationError, ResourceError

__all__ = ["RenderSession", "Tab", "WAIT_UNTIL"]

logger = logging.getLogger(__name__)

# Playwright's equivalent of waiting for network quiescence.
WAIT_UNTIL = "networkidle"

_OUTER_HTML_JS = "(elements) => elements.map((element) => element.outerHTML)"

_LISTING_JS = """
(items, linkSelector) => items.map((item) => {
    const link = item.querySelector(linkSelector);
    if (!link) {
        return null;
    }
    return { title: link.innerText || "", href: link.href || "" };
})
"""


class Tab:
    """One isolated navigation context inside a :class:`RenderSession`."""

    def __init__(self, page: Page) -> None:
        self._page = page
        self._disposed = False

    def __enter__(self) -> "Tab":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def current_url(self) -> str:
        return self._page.url

    def navigate(self, url: str, *, timeout: float) -> None:
        """Load ``url`` and wait until the network is quiet.

        ``timeout`` is expressed in seconds.
        """

        try:
            self._page.goto(url, wait_until=WAIT_UNTIL, timeout=timeout * 1000)
        except PlaywrightTimeoutError as exc:
            raise NavigationError(url, f"Timed out after {timeout:g}s loading {url}") from exc
        except PlaywrightError as exc:
            raise NavigationError(url, f"Failed to navigate to {url}: {exc}") from exc

    def extract_fragments(self, selector: str) -> List[str]:
        """Return the serialized markup of every element matching ``selector``."""

        try:
            fragments = self._page.eval_on_selector_all(selector, _OUTER_HTML_JS)
        except PlaywrightError as exc:
            raise ExtractionError(
                f"Failed to query {selector!r}: {exc}", {"selector": selector, "url": self.current_url}
            ) from exc
        return [str(fragment) for fragment in fragments or []]

    def extract_listing(self, item_selector: str, link_selector: str) -> List[Dict[str, str]]:
        """Return ``{"title", "href"}`` for each listing item, in document order.

        Every item must contain a link with a target and non-blank text; a single
        malformed item fails the whole extraction.
        """

        try:
            rows: Sequence[Any] = self._page.eval_on_selector_all(item_selector, _LISTING_JS, link_selector)
        except PlaywrightError as exc:
            raise ExtractionError(
                f"Failed to query {item_selector!r}: {exc}",
                {"selector": item_selector, "url": self.current_url},
            ) from exc

        entries: List[Dict[str, str]] = []
        for index, row in enumerate(rows or []):
            title = str((row or {}).get("title") or "").strip()
            href = str((row or {}).get("href") or "").strip()
            if not title or not href:
                raise ExtractionError(
                    "invalid news item structure",
                    {"index": index, "selector": link_selector, "url": self.current_url},
                )
            entries.append({"title": title, "href": href})
        return entries

    def dispose(self) -> None:
        """Close the underlying page. Safe to call more than once."""

        if self._disposed:
            return
        self._disposed = True
        try:
            self._page.close()
        except PlaywrightError as exc:
            logger.warning("Failed to close tab: %s", exc)


class RenderSession:
    """Owns the Playwright driver, one Chromium browser and one browser context."""

    def __init__(
        self,
        user_agent: str,
        *,
        headless: bool = True,
        launch_args: Sequence[str] = (),
        playwright_factory: Callable[[], Any] = sync_playwright,
    ) -> None:
        self.user_agent = user_agent
        self.headless = headless
        self.launch_args = list(launch_args)
        self._playwright_factory = playwright_factory
        self._playwright: Any = None
        self._browser: Any = None
        self._context: BrowserContext | None = None
        self._closed = False

    @classmethod
    def from_config(cls, config: ScraperConfig) -> "RenderSession":
        return cls(
            config.user_agent,
            headless=config.browser.headless,
            launch_args=config.browser.launch_args,
        )

    def __enter__(self) -> "RenderSession":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._context is not None

    def open(self) -> "RenderSession":
        """Start the browser. Every tab inherits the configured user agent."""

        if self._closed:
            raise InitializationError("Render session has been closed and cannot be reused")
        if self.is_open:
            raise InitializationError("Render session is already open")

        try:
            self._playwright = self._playwright_factory().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.headless, args=self.launch_args
            )
            self._context = self._browser.new_context(user_agent=self.user_agent)
        except Exception as exc:  # noqa: BLE001 - any launcher failure means no session
            self.close()
            raise InitializationError(f"Failed to initialize scraper: {exc}") from exc

        logger.debug("Browser session started (headless=%s)", self.headless)
        return self

    def new_tab(self) -> Tab:
        if self._context is None:
            raise ResourceError("Render session is not open")
        try:
            page = self._context.new_page()
        except PlaywrightError as exc:
            raise ResourceError(f"Failed to open a new tab: {exc}") from exc
        return Tab(page)

    def close(self) -> None:
        """Release the browser. Safe to call on a closed or never-opened session."""

        if self._closed:
            return
        self._closed = True

        context, browser, playwright = self._context, self._browser, self._playwright
        self._context = self._browser = self._playwright = None

        for label, release in (
            ("browser context", getattr(context, "close", None)),
            ("browser", getattr(browser, "close", None)),
            ("playwright driver", getattr(playwright, "stop", None)),
        ):
            if release is None:
                continue
            try:
                release()
            except Exception as exc:  # noqa: BLE001 - later resources must still be released
                logger.warning("Failed to close %s: %s", label, exc)
