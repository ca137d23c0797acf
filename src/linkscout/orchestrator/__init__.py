"""Orchestrator module for link discovery.

This module runs the discover-links operation over a batch of pages:
crawl, filter, deduplicate, and format.
"""

from linkscout.orchestrator.discover import (
    CrawlClientProtocol,
    DiscoverLinksOperation,
    DiscoverRequest,
    FilterOptions,
    OutputItem,
    OutputOptions,
    validate_url,
)


__all__ = [
    "CrawlClientProtocol",
    "DiscoverLinksOperation",
    "DiscoverRequest",
    "FilterOptions",
    "OutputItem",
    "OutputOptions",
    "validate_url",
]
