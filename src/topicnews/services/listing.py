"""Extraction of news teasers from a rendered topic listing page."""

from __future__ import annotations

from typing import List

from topicnews.config import SelectorConfig
from topicnews.models import NewsItem
from topicnews.services.browser import Tab

__all__ = ["extract_news_items"]


def extract_news_items(tab: Tab, selectors: SelectorConfig) -> List[NewsItem]:
    """Return the listing's news items in document order.

    ``tab`` must already be navigated to the listing page.  Detail URLs are returned
    as the page exposes them and may still need resolving against the page URL.
    Raises :class:`~topicnews.errors.ExtractionError` when any teaser is malformed.
    """

    entries = tab.extract_listing(selectors.news_list, selectors.news_title)
    return [NewsItem(title=entry["title"], detail_url=entry["href"]) for entry in entries]
