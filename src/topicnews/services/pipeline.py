"""Scraping of one topic: its listing page, then each article in turn."""

from __future__ import annotations

import logging
import time
from typing import Callable, List
from urllib.parse import urljoin

from topicnews.config import ScraperConfig
from topicnews.errors import ArticleFetchError, ScraperError, TopicFetchError
from topicnews.models import NewsItem
from topicnews.services.article import fetch_article_content
from topicnews.services.browser import RenderSession
from topicnews.services.listing import extract_news_items

__all__ = ["TopicPipeline"]

logger = logging.getLogger(__name__)


class TopicPipeline:
    """Scrape topics sequentially using a shared :class:`RenderSession`."""

    def __init__(
        self,
        session: RenderSession,
        config: ScraperConfig,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._session = session
        self._config = config
        self._sleep = sleep

    def load_listing(self, topic: str) -> tuple[str, List[NewsItem]]:
        """Return the final listing page URL and the items found on it."""

        url = self._config.topic_url(topic)
        try:
            with self._session.new_tab() as tab:
                tab.navigate(url, timeout=self._config.pacing.page_load_timeout)
                items = extract_news_items(tab, self._config.selectors)
                page_url = tab.current_url or url
        except ScraperError as exc:
            raise TopicFetchError(topic, exc, url=url) from exc

        logger.info(
            "Found %d news items for topic %s",
            len(items),
            topic,
            extra={"payload": {"topic": topic, "url": page_url, "items_count": len(items)}},
        )
        return page_url, items

    def scrape_topic(self, topic: str) -> List[NewsItem]:
        """Return the completed news items of ``topic`` in listing order.

        Articles that cannot be fetched are logged and left out.  A failure to load or
        parse the listing itself raises :class:`~topicnews.errors.TopicFetchError`.
        """

        page_url, items = self.load_listing(topic)
        pacing = self._config.pacing

        results: List[NewsItem] = []
        for item in items:
            absolute_url = urljoin(page_url, item.detail_url)
            try:
                content = fetch_article_content(
                    self._session,
                    absolute_url,
                    selector=self._config.selectors.article_content,
                    timeout=pacing.page_load_timeout,
                    content_format=self._config.content_format,
                )
            except ArticleFetchError as exc:
                logger.error(
                    "Failed to process article: %s",
                    item.title,
                    exc_info=exc,
                    extra={"payload": {"topic": topic, "title": item.title, "url": absolute_url}},
                )
            else:
                results.append(item.with_content(absolute_url, content))
                logger.info(
                    "Scraped article: %s",
                    item.title,
                    extra={"payload": {"topic": topic, "title": item.title, "url": absolute_url}},
                )
            self._sleep(pacing.between_articles)

        return results
