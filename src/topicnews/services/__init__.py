"""Service layer entry points for Topic News."""

from __future__ import annotations

from .browser import RenderSession, Tab  # noqa: F401
from .crawler import NewsCrawler, build_report  # noqa: F401
from .pipeline import TopicPipeline  # noqa: F401

__all__ = ["NewsCrawler", "RenderSession", "Tab", "TopicPipeline", "build_report"]
