"""API routes exposing the topic scraper."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Body, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from topicnews.config import ScraperConfig
from topicnews.errors import InitializationError, ScraperError, TopicFetchError
from topicnews.models import CrawlReport
from topicnews.services.crawler import NewsCrawler, build_report

logger = logging.getLogger(__name__)

router = APIRouter()


class TopicEntry(BaseModel):
    name: str
    url: str


class TopicsResponse(BaseModel):
    topics: List[TopicEntry] = Field(default_factory=list)


class CrawlRequest(BaseModel):
    topics: List[str] | None = None


def _load_config() -> ScraperConfig:
    try:
        return ScraperConfig.from_file()
    except (FileNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/topics", response_model=TopicsResponse)
async def list_topics() -> TopicsResponse:
    """Return the configured topics and their listing pages."""

    config = _load_config()
    return TopicsResponse(
        topics=[TopicEntry(name=topic, url=config.topic_url(topic)) for topic in config.topics]
    )


@router.post("/crawl", response_model=CrawlReport)
async def trigger_crawler(payload: CrawlRequest | None = Body(default=None)) -> CrawlReport:
    """Scrape the configured topics, or the requested subset, and return the articles."""

    config = _load_config()
    crawler = NewsCrawler(config)
    requested = payload.topics if payload is not None else None

    try:
        topics = crawler.select_topics(requested)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not topics:
        raise HTTPException(status_code=400, detail="Select at least one topic.")

    try:
        results = await run_in_threadpool(crawler.crawl, topics)
    except InitializationError as exc:
        logger.exception("Browser session could not be started")
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except TopicFetchError as exc:
        raise HTTPException(status_code=502, detail=f"{exc}: {exc.cause}") from exc
    except ScraperError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return build_report(results)
