"""Crawl4AI REST client and request payload builders."""

from linkscout.client.api import Crawl4aiClient, parse_api_error
from linkscout.client.payloads import (
    BrowserOptions,
    CrawlerRunConfig,
    build_crawler_run_config,
    format_browser_config,
    format_crawler_config,
)

__all__ = [
    "Crawl4aiClient",
    "parse_api_error",
    "BrowserOptions",
    "CrawlerRunConfig",
    "build_crawler_run_config",
    "format_browser_config",
    "format_crawler_config",
]
