"""Configuration models and helpers for the topic news scraper."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError, field_validator

__all__ = [
    "BrowserConfig",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_ENV_PATH",
    "DEFAULT_USER_AGENT",
    "PacingConfig",
    "ScraperConfig",
    "SelectorConfig",
    "load_env_file",
    "resolve_config_path",
]

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "data" / "scraper.json"
DEFAULT_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
CONFIG_ENV_VAR = "TOPICNEWS_CONFIG"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/58.0.3029.110 Safari/537.36"
)

_CONTENT_TAGS = ("p", "h1", "h2", "h3", "h4", "h5", "h6")
DEFAULT_ARTICLE_CONTENT_SELECTOR = ", ".join(
    f"{container} > {tag}" for container in (".body", ".caas-body") for tag in _CONTENT_TAGS
)

DEFAULT_TOPICS = (
    "crypto",
    "tech",
    "earnings",
    "housing-market",
    "economic-news",
    "morning-brief",
    "yahoo-finance-originals",
    "stock-market-news",
)


def load_env_file(path: Path | str = DEFAULT_ENV_PATH) -> List[str]:
    """Export ``KEY=value`` lines from ``path`` without overriding the environment.

    Blank lines, comments and an optional ``export`` prefix are ignored, and values may
    be quoted.  Returns the names of the variables that were set.
    """

    env_path = Path(path)
    if not env_path.is_file():
        return []

    loaded: List[str] = []
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = (part.strip() for part in line.split("=", 1))
        if not key or key in os.environ:
            continue

        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ[key] = value
        loaded.append(key)
    return loaded


def resolve_config_path(path: Path | str | None = None) -> Path:
    """Return the configuration path, honouring ``TOPICNEWS_CONFIG`` when no path is given."""

    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


class SelectorConfig(BaseModel):
    """CSS selectors driving listing and article extraction."""

    model_config = ConfigDict(frozen=True)

    news_list: str = Field(
        default=r"ul.My\(0\) > li.js-stream-content",
        min_length=1,
        description="Selector matching every teaser on a topic listing page",
    )
    news_title: str = Field(
        default="h3 > a",
        min_length=1,
        description="Selector, relative to a teaser, for the title link",
    )
    article_content: str = Field(
        default=DEFAULT_ARTICLE_CONTENT_SELECTOR,
        min_length=1,
        description="Selector matching the content fragments of an article page",
    )


class PacingConfig(BaseModel):
    """Delays and timeouts, in seconds."""

    model_config = ConfigDict(frozen=True)

    between_articles: float = Field(default=2.0, ge=0, description="Pause after every article")
    page_load_timeout: float = Field(default=30.0, gt=0, description="Timeout for a single navigation")


class BrowserConfig(BaseModel):
    """Options passed to the browser launcher."""

    model_config = ConfigDict(frozen=True)

    headless: bool = True
    launch_args: Tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox")


class ScraperConfig(BaseModel):
    """Immutable configuration for a single crawl."""

    model_config = ConfigDict(frozen=True)

    topics: Tuple[str, ...] = Field(..., min_length=1, description="Topics to crawl, in order")
    base_url: HttpUrl = Field(..., description="URL prefix of the topic listing pages")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)
    pacing: PacingConfig = Field(default_factory=PacingConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    content_format: Literal["html", "text"] = Field(
        default="html",
        description="Whether article content keeps its markup or is reduced to plain text",
    )
    continue_on_topic_error: bool = Field(
        default=False,
        description=(
            "Record an empty result and move on when a topic listing fails, instead of "
            "aborting the whole crawl."
        ),
    )

    @field_validator("topics")
    @classmethod
    def _strip_topics(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        topics = tuple(topic.strip().strip("/") for topic in value)
        if any(not topic for topic in topics):
            raise ValueError("topics must not contain blank entries")
        duplicates = sorted({topic for topic in topics if topics.count(topic) > 1})
        if duplicates:
            raise ValueError(f"topics must be unique, duplicated: {', '.join(duplicates)}")
        return topics

    def topic_url(self, topic: str) -> str:
        """Return the listing page URL for ``topic``."""

        return f"{str(self.base_url).rstrip('/')}/{topic}"

    @classmethod
    def default(cls) -> "ScraperConfig":
        """Return the stock configuration for the Yahoo Finance topic pages."""

        return cls(topics=DEFAULT_TOPICS, base_url="https://finance.yahoo.com/topic")

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "ScraperConfig":
        """Load configuration data from a JSON file."""

        config_path = resolve_config_path(path)
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file: {config_path}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Configuration file is invalid: {config_path}\n{exc}") from exc

    def dump(self, path: Path | str | None = None) -> None:
        """Persist the configuration back to disk as JSON."""

        config_path = resolve_config_path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
