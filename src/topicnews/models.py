"""Domain models used across the application."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

__all__ = ["CrawlReport", "NewsItem", "TopicReport", "TopicResults"]


class NewsItem(BaseModel):
    """One article discovered on a topic listing page."""

    title: str = Field(..., min_length=1)
    detail_url: str = Field(..., min_length=1)
    content: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        title = value.strip()
        if not title:
            raise ValueError("title must not be blank")
        return title

    def with_content(self, detail_url: str, content: str) -> "NewsItem":
        """Return the completed item carrying its absolute URL and fetched content."""

        return self.model_copy(update={"detail_url": detail_url, "content": content})


TopicResults = Dict[str, List[NewsItem]]


class TopicReport(BaseModel):
    """Result of scraping a single topic."""

    topic: str
    articles_count: int
    articles: List[NewsItem] = Field(default_factory=list)


class CrawlReport(BaseModel):
    """Serialisable summary of a whole crawl."""

    topics: List[TopicReport] = Field(default_factory=list)
    fetched_at: datetime

    @classmethod
    def from_results(cls, results: TopicResults, fetched_at: datetime) -> "CrawlReport":
        return cls(
            topics=[
                TopicReport(topic=topic, articles_count=len(items), articles=list(items))
                for topic, items in results.items()
            ],
            fetched_at=fetched_at,
        )
