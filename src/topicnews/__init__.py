"""Topic News package exposing configuration, the scraping pipeline and the API."""

from __future__ import annotations

from .config import ScraperConfig, load_env_file
from .models import NewsItem

# ``TOPICNEWS_CONFIG`` and friends may live in a project-level ``.env`` file.
load_env_file()

__all__ = ["NewsItem", "ScraperConfig", "load_env_file"]
