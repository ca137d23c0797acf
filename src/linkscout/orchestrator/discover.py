"""Discover-links operation.

This module provides the DiscoverLinksOperation class that crawls each
requested page through the Crawl4AI server, then filters, deduplicates
and formats the links reported for it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Protocol, runtime_checkable
from urllib.parse import urlsplit

from linkscout.client.payloads import BrowserOptions, CrawlerRunConfig, build_crawler_run_config
from linkscout.core.constants import CacheMode, DEFAULTS, OutputFormat
from linkscout.core.exceptions import (
    CrawlFailedError,
    InvalidURLError,
    LinkScoutError,
    ValidationError,
)
from linkscout.core.models import CrawlResult, FilterCriteria
from linkscout.filters.patterns import compile_patterns, parse_file_types
from linkscout.filters.processor import LinkSetProcessor, parse_link_types
from linkscout.reporting.formatter import format_links, parse_output_format


logger = logging.getLogger(__name__)


@runtime_checkable
class CrawlClientProtocol(Protocol):
    """Anything that can crawl a single URL."""

    async def crawl_url(self, url: str, config: CrawlerRunConfig) -> CrawlResult:
        ...


# ============================================================================
# Options
# ============================================================================

@dataclass
class FilterOptions:
    """Filter settings as entered by the user."""
    include_patterns: str = ""              # Comma-separated wildcards
    exclude_patterns: str = ""              # Comma-separated wildcards
    exclude_file_types: str = ""            # Comma-separated extensions
    exclude_social_media: bool = False
    require_text: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterOptions":
        def joined(value: Any) -> str:
            if isinstance(value, (list, tuple)):
                return ",".join(str(v) for v in value)
            return str(value or "")

        return cls(
            include_patterns=joined(data.get("include_patterns")),
            exclude_patterns=joined(data.get("exclude_patterns")),
            exclude_file_types=joined(data.get("exclude_file_types")),
            exclude_social_media=data.get("exclude_social_media") is True,
            require_text=data.get("require_text") is True,
        )

    def to_criteria(self) -> FilterCriteria:
        """Compile the user strings into FilterCriteria."""
        return FilterCriteria(
            include_patterns=tuple(compile_patterns(self.include_patterns)),
            exclude_patterns=tuple(compile_patterns(self.exclude_patterns)),
            exclude_file_types=tuple(parse_file_types(self.exclude_file_types)),
            exclude_social_media=self.exclude_social_media,
            require_text=self.require_text,
        )


@dataclass
class OutputOptions:
    """Crawl cache and output shaping settings."""
    cache_mode: CacheMode = CacheMode.ENABLED
    deduplicate: bool = True
    include_metadata: bool = True
    output_format: OutputFormat = OutputFormat.GROUPED
    score_links: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OutputOptions":
        cache_mode = str(data.get("cache_mode", DEFAULTS["cache_mode"])).upper()
        try:
            parsed_cache_mode = CacheMode(cache_mode)
        except ValueError:
            raise ValidationError(
                f"Invalid cache mode '{cache_mode}'. Must be one of: ENABLED, DISABLED, BYPASS"
            ) from None

        return cls(
            cache_mode=parsed_cache_mode,
            deduplicate=data.get("deduplicate") is not False,
            include_metadata=data.get("include_metadata") is not False,
            output_format=parse_output_format(data.get("output_format", DEFAULTS["output_format"])),
            score_links=data.get("score_links") is not False,
        )


@dataclass
class DiscoverRequest:
    """One page to discover links on."""
    url: str
    link_types: list[str] = field(default_factory=lambda: list(DEFAULTS["link_types"]))
    filters: FilterOptions = field(default_factory=FilterOptions)
    browser: BrowserOptions = field(default_factory=BrowserOptions)
    output: OutputOptions = field(default_factory=OutputOptions)


@dataclass
class OutputItem:
    """Emitted record paired with the index of the request it came from."""
    json: dict[str, Any]
    paired_item: int
    error: Optional[str] = None


def validate_url(url: str) -> str:
    """Check that url is an absolute URL.

    Raises:
        InvalidURLError: If url is empty or not absolute
    """
    if not url or not url.strip():
        raise InvalidURLError("URL cannot be empty.")
    url = url.strip()
    try:
        parsed = urlsplit(url)
    except ValueError:
        raise InvalidURLError(f"Invalid URL: {url}") from None
    if not parsed.scheme or not parsed.netloc:
        raise InvalidURLError(f"Invalid URL: {url}")
    return url


# ============================================================================
# Operation
# ============================================================================

class DiscoverLinksOperation:
    """Discover links on a batch of pages.

    With ``continue_on_fail`` a failing page yields an error item and the
    batch continues; otherwise the first error aborts the batch.
    """

    def __init__(self, client: CrawlClientProtocol, *, continue_on_fail: bool = False):
        self.client = client
        self.continue_on_fail = continue_on_fail

    async def run(self, requests: Iterable[DiscoverRequest]) -> list[OutputItem]:
        """Process requests in order.

        Args:
            requests: Pages to discover links on

        Returns:
            Output items of all requests, in request order

        Raises:
            LinkScoutError: On the first failing request, unless continue_on_fail
        """
        results: list[OutputItem] = []

        for index, request in enumerate(requests):
            try:
                results.extend(await self.run_one(request, index))
            except Exception as e:
                if not self.continue_on_fail:
                    raise
                if isinstance(e, LinkScoutError):
                    logger.warning(f"Item {index} ({request.url}) failed: {e}")
                else:
                    logger.exception(f"Item {index} ({request.url}) failed unexpectedly")
                message = str(e) or type(e).__name__
                results.append(OutputItem(
                    json={"url": request.url, "error": message},
                    paired_item=index,
                    error=message,
                ))

        return results

    async def run_one(self, request: DiscoverRequest, item_index: int = 0) -> list[OutputItem]:
        """Discover links on a single page.

        Args:
            request: Page and options
            item_index: Position of the request in its batch

        Returns:
            Output items for the page (at least one)

        Raises:
            InvalidURLError: If the URL is empty or not absolute
            LinkTypeSelectionError: If no link type is selected
            CrawlFailedError: If the crawl server reports a failure
        """
        try:
            return await self._discover(request, item_index)
        except LinkScoutError as e:
            if e.item_index is None:
                e.item_index = item_index
            raise

    async def _discover(self, request: DiscoverRequest, item_index: int) -> list[OutputItem]:
        url = validate_url(request.url)
        link_types = parse_link_types(request.link_types)
        criteria = request.filters.to_criteria()

        config = build_crawler_run_config(
            request.browser,
            cache_mode=request.output.cache_mode,
            score_links=request.output.score_links,
        )

        result = await self.client.crawl_url(url, config)
        if not result.success:
            raise CrawlFailedError(
                f"Failed to crawl URL: {result.error_message or 'Unknown error'}"
            )

        processed = LinkSetProcessor(criteria).process(
            result.links,
            link_types,
            dedupe=request.output.deduplicate,
        )
        logger.info(
            f"{url}: {result.links.total} links reported, {processed.total} kept "
            f"({len(processed.internal)} internal, {len(processed.external)} external)"
        )

        records = format_links(
            processed,
            request.output.output_format,
            request.output.include_metadata,
            source_url=url,
        )
        return [OutputItem(json=record, paired_item=item_index) for record in records]
