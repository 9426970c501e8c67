"""Convenience script for running the topic news scraper locally."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure the src directory is on the Python path so the topicnews package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from topicnews.config import ScraperConfig  # noqa: E402  (import after path setup)
from topicnews.errors import ScraperError  # noqa: E402
from topicnews.services.crawler import NewsCrawler, build_report  # noqa: E402


def main(argv: list[str] | None = None) -> None:
    """Load the scraper configuration, crawl every topic and print the results as JSON."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", help="Path to the scraper configuration JSON file")
    parser.add_argument("topics", nargs="*", help="Restrict the crawl to these configured topics")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        config = ScraperConfig.from_file(args.config)
    except (FileNotFoundError, ValueError) as exc:
        logging.error("Could not load scraper configuration: %s", exc)
        sys.exit(1)

    crawler = NewsCrawler(config)
    try:
        results = crawler.crawl(args.topics or None)
    except (ScraperError, ValueError) as exc:
        logging.error("Scraping failed: %s", exc)
        sys.exit(1)

    for topic, items in results.items():
        logging.info(
            "Topic: %s (%d articles)\n%s",
            topic,
            len(items),
            json.dumps([{"title": item.title, "url": item.detail_url} for item in items], indent=2),
        )

    print(build_report(results).model_dump_json(indent=2))


if __name__ == "__main__":
    main()
