"""Exception hierarchy raised by the scraping pipeline."""

from __future__ import annotations

from typing import Any, Mapping

__all__ = [
    "ArticleFetchError",
    "ExtractionError",
    "InitializationError",
    "NavigationError",
    "ResourceError",
    "ScraperError",
    "TopicFetchError",
]


class ScraperError(Exception):
    """Base class for every scraping failure; ``context`` locates the failure."""

    def __init__(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = dict(context or {})


class InitializationError(ScraperError):
    """The browser session could not be started."""


class ResourceError(ScraperError):
    """A tab could not be created."""


class NavigationError(ScraperError):
    """Navigating a tab timed out or failed."""

    def __init__(self, url: str, message: str | None = None) -> None:
        super().__init__(message or f"Failed to navigate to {url}", {"url": url})
        self.url = url


class ExtractionError(ScraperError):
    """The rendered DOM did not have the expected structure."""


class ArticleFetchError(ScraperError):
    """Fetching a single article failed. The topic pipeline skips the article."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"Failed to fetch article content: {url}", {"url": url})
        self.url = url
        self.cause = cause


class TopicFetchError(ScraperError):
    """Loading or extracting a topic listing failed."""

    def __init__(self, topic: str, cause: BaseException, url: str | None = None) -> None:
        context = {"topic": topic}
        if url is not None:
            context["url"] = url
        super().__init__(f"Failed to scrape topic: {topic}", context)
        self.topic = topic
        self.cause = cause
