"""Fetching the content of a single article in its own tab."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

from bs4 import BeautifulSoup

from topicnews.errors import ArticleFetchError, ScraperError
from topicnews.services.browser import RenderSession

__all__ = ["CONTENT_SEPARATOR", "fetch_article_content", "fragment_to_text", "join_fragments"]

logger = logging.getLogger(__name__)

CONTENT_SEPARATOR = "\n"


def fragment_to_text(fragment: str) -> str:
    """Reduce one serialized DOM fragment to whitespace-normalised text."""

    soup = BeautifulSoup(fragment, "lxml")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return re.sub(r"\s+", " ", soup.get_text(" ", strip=True)).strip()


def join_fragments(fragments: Iterable[str], content_format: str = "html") -> str:
    """Join fragments with :data:`CONTENT_SEPARATOR`, optionally as plain text."""

    if content_format == "text":
        parts: List[str] = [text for text in map(fragment_to_text, fragments) if text]
    else:
        parts = list(fragments)
    return CONTENT_SEPARATOR.join(parts)


def fetch_article_content(
    session: RenderSession,
    url: str,
    *,
    selector: str,
    timeout: float,
    content_format: str = "html",
) -> str:
    """Load ``url`` in a fresh tab and return its joined content fragments.

    The tab is closed before returning on every path.  Any navigation or extraction
    failure is raised as :class:`~topicnews.errors.ArticleFetchError`.
    """

    try:
        with session.new_tab() as tab:
            tab.navigate(url, timeout=timeout)
            fragments = tab.extract_fragments(selector)
        content = join_fragments(fragments, content_format)
    except ScraperError as exc:
        raise ArticleFetchError(url, exc) from exc
    except Exception as exc:  # noqa: BLE001 - a malformed fragment only costs this article
        raise ArticleFetchError(url, exc) from exc

    logger.debug("Extracted %d fragments from %s", len(fragments), url)
    return content
