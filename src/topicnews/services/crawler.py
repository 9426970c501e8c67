"""Crawl orchestration across every configured topic."""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Callable, Iterable, List

from topicnews.config import ScraperConfig
from topicnews.errors import TopicFetchError
from topicnews.models import CrawlReport, NewsItem, TopicResults
from topicnews.services.browser import RenderSession
from topicnews.services.pipeline import TopicPipeline

__all__ = ["NewsCrawler", "build_report"]

logger = logging.getLogger(__name__)


def build_report(results: TopicResults) -> CrawlReport:
    """Wrap crawl results in a serialisable :class:`CrawlReport`."""

    return CrawlReport.from_results(results, fetched_at=datetime.now(UTC))


class NewsCrawler:
    """Run the topic pipeline for each topic inside one browser session."""

    def __init__(
        self,
        config: ScraperConfig,
        *,
        session_factory: Callable[[ScraperConfig], RenderSession] = RenderSession.from_config,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self._session_factory = session_factory
        self._sleep = sleep

    def select_topics(self, topics: Iterable[str] | None = None) -> List[str]:
        """Return the requested topics in configuration order.

        ``None`` selects every configured topic.  Unknown topics raise ``ValueError``.
        """

        if topics is None:
            return list(self.config.topics)

        requested = {topic.strip().strip("/") for topic in topics}
        unknown = sorted(requested.difference(self.config.topics))
        if unknown:
            raise ValueError(f"Unknown topics: {', '.join(unknown)}")
        return [topic for topic in self.config.topics if topic in requested]

    def crawl(self, topics: Iterable[str] | None = None) -> TopicResults:
        """Scrape every selected topic and return the results keyed by topic.

        A new browser session is opened for every call and always closed before
        returning.  A topic whose listing fails aborts the crawl unless
        ``continue_on_topic_error`` is configured.
        """

        selected = self.select_topics(topics)
        results: TopicResults = {}

        try:
            with self._session_factory(self.config) as session:
                pipeline = TopicPipeline(session, self.config, sleep=self._sleep)
                for topic in selected:
                    results[topic] = self._scrape_topic(pipeline, topic)
        except Exception:
            logger.exception("Failed to complete scraping")
            raise

        return results

    def _scrape_topic(self, pipeline: TopicPipeline, topic: str) -> List[NewsItem]:
        logger.info("Starting to scrape topic: %s", topic, extra={"payload": {"topic": topic}})
        try:
            items = pipeline.scrape_topic(topic)
        except TopicFetchError as exc:
            if not self.config.continue_on_topic_error:
                raise
            logger.error(
                "Skipping topic %s after listing failure",
                topic,
                exc_info=exc,
                extra={"payload": exc.context},
            )
            items = []

        logger.info(
            "Completed scraping topic: %s",
            topic,
            extra={"payload": {"topic": topic, "articles_count": len(items)}},
        )
        return items
