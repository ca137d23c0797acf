"""linkscout - Discover and filter links through a Crawl4AI server."""

__version__ = "0.1.0"
