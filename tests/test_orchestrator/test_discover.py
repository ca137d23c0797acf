"""Unit tests for the discover-links operation.

The crawl client is replaced by an AsyncMock so only the orchestration
(validation, filtering, formatting, error policy) is exercised.
"""

import unittest
from unittest.mock import AsyncMock

from linkscout.client.payloads import BrowserOptions, CrawlerRunConfig
from linkscout.core.constants import CacheMode, EMPTY_RESULT_MESSAGE, OutputFormat
from linkscout.core.exceptions import (
    CrawlFailedError,
    InvalidURLError,
    LinkTypeSelectionError,
    ValidationError,
)
from linkscout.core.models import CrawlResult, Link, LinkCollection
from linkscout.orchestrator.discover import (
    CrawlClientProtocol,
    DiscoverLinksOperation,
    DiscoverRequest,
    FilterOptions,
    OutputOptions,
    validate_url,
)


PAGE = "https://a.com/"

LINKS = LinkCollection(
    internal=(
        Link(href="https://a.com/x", text="X"),
        Link(href="https://a.com/x/", text="X again"),
        Link(href="https://a.com/blog/1", text="Post"),
        Link(href="https://a.com/doc.PDF", text="Doc"),
    ),
    external=(
        Link(href="https://twitter.com/user", text="Tweet"),
        Link(href="https://nottwitter.com/user", text="Not a tweet"),
    ),
)


def make_client(result: CrawlResult = None) -> AsyncMock:
    client = AsyncMock()
    client.crawl_url.return_value = result or CrawlResult(url=PAGE, success=True, links=LINKS)
    return client


class TestValidateUrl(unittest.TestCase):
    """Test validate_url."""

    def test_strips_whitespace(self):
        self.assertEqual(validate_url("  https://a.com/  "), "https://a.com/")

    def test_empty(self):
        with self.assertRaises(InvalidURLError) as ctx:
            validate_url("   ")
        self.assertEqual(str(ctx.exception), "URL cannot be empty.")

    def test_relative(self):
        with self.assertRaises(InvalidURLError):
            validate_url("/just/a/path")


class TestOptions(unittest.TestCase):
    """Test option parsing."""

    def test_filter_options_join_lists(self):
        """Test that list values are joined into comma-separated strings."""
        options = FilterOptions.from_dict({"exclude_file_types": ["pdf", "zip"], "require_text": True})
        self.assertEqual(options.exclude_file_types, "pdf,zip")
        self.assertEqual(options.to_criteria().exclude_file_types, (".pdf", ".zip"))
        self.assertTrue(options.to_criteria().require_text)

    def test_output_options_defaults(self):
        """Test that an empty mapping yields defaults."""
        options = OutputOptions.from_dict({})
        self.assertEqual(options.cache_mode, CacheMode.ENABLED)
        self.assertTrue(options.deduplicate)
        self.assertEqual(options.output_format, OutputFormat.GROUPED)

    def test_output_options_invalid_cache_mode(self):
        with self.assertRaises(ValidationError):
            OutputOptions.from_dict({"cache_mode": "sometimes"})

    def test_mock_satisfies_protocol(self):
        self.assertIsInstance(make_client(), CrawlClientProtocol)


class TestDiscoverLinksOperation(unittest.IsolatedAsyncioTestCase):
    """Test DiscoverLinksOperation."""

    async def test_grouped_with_filters(self):
        """Test filtering, dedup and grouped formatting of one page."""
        client = make_client()
        request = DiscoverRequest(
            url=PAGE,
            filters=FilterOptions(exclude_file_types="pdf", exclude_social_media=True),
        )

        items = await DiscoverLinksOperation(client).run([request])

        self.assertEqual(len(items), 1)
        record = items[0].json
        self.assertEqual(items[0].paired_item, 0)
        self.assertEqual(record["url"], PAGE)
        self.assertEqual(
            [link["href"] for link in record["internalLinks"]],
            ["https://a.com/x", "https://a.com/blog/1"],
        )
        self.assertEqual(
            [link["href"] for link in record["externalLinks"]],
            ["https://nottwitter.com/user"],
        )
        self.assertEqual(record["totalLinks"], 3)

    async def test_crawl_config_passed_to_client(self):
        """Test that browser and output options reach the crawl config."""
        client = make_client()
        request = DiscoverRequest(
            url=PAGE,
            browser=BrowserOptions(timeout_ms=5000, wait_for="main"),
            output=OutputOptions(cache_mode=CacheMode.BYPASS, score_links=False),
        )

        await DiscoverLinksOperation(client).run_one(request)

        url, config = client.crawl_url.await_args.args
        self.assertEqual(url, PAGE)
        self.assertIsInstance(config, CrawlerRunConfig)
        self.assertEqual(config.cache_mode, CacheMode.BYPASS)
        self.assertEqual(config.page_timeout, 5000)
        self.assertEqual(config.wait_for, "main")
        self.assertFalse(config.score_links)

    async def test_split_with_include_pattern(self):
        """Test split output restricted to internal links under /blog/."""
        request = DiscoverRequest(
            url=PAGE,
            link_types=["internal"],
            filters=FilterOptions(include_patterns="*/blog/*"),
            output=OutputOptions(output_format=OutputFormat.SPLIT, include_metadata=False),
        )

        items = await DiscoverLinksOperation(make_client()).run([request])

        self.assertEqual([item.json for item in items], [{
            "url": "https://a.com/blog/1",
            "type": "internal",
            "sourceUrl": PAGE,
        }])

    async def test_split_empty_sentinel(self):
        """Test that a page with no surviving links yields the sentinel record."""
        request = DiscoverRequest(
            url=PAGE,
            link_types=["external"],
            filters=FilterOptions(exclude_patterns="*twitter*"),
            output=OutputOptions(output_format=OutputFormat.SPLIT),
        )

        items = await DiscoverLinksOperation(make_client()).run([request])

        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].json["message"], EMPTY_RESULT_MESSAGE)
        self.assertEqual(items[0].json["sourceUrl"], PAGE)

    async def test_no_dedupe_keeps_duplicates(self):
        request = DiscoverRequest(
            url=PAGE,
            link_types=["internal"],
            output=OutputOptions(deduplicate=False),
        )

        items = await DiscoverLinksOperation(make_client()).run([request])

        self.assertEqual(items[0].json["totalInternal"], 4)

    async def test_empty_link_types_raise_before_crawl(self):
        """Test that selecting no link type fails before any request."""
        client = make_client()
        request = DiscoverRequest(url=PAGE, link_types=[])

        with self.assertRaises(LinkTypeSelectionError) as ctx:
            await DiscoverLinksOperation(client).run([request])

        self.assertEqual(ctx.exception.item_index, 0)
        client.crawl_url.assert_not_awaited()

    async def test_crawl_failure_raises(self):
        """Test that an unsuccessful crawl aborts the batch."""
        client = make_client(CrawlResult.failure(PAGE, "Server error (500)"))

        with self.assertRaises(CrawlFailedError) as ctx:
            await DiscoverLinksOperation(client).run([DiscoverRequest(url=PAGE)])

        self.assertEqual(str(ctx.exception), "Failed to crawl URL: Server error (500)")

    async def test_continue_on_fail(self):
        """Test that failing items become error records and the batch continues."""
        client = make_client()
        requests = [
            DiscoverRequest(url=""),
            DiscoverRequest(url=PAGE, link_types=["internal"]),
        ]

        with self.assertLogs("linkscout.orchestrator.discover", level="WARNING"):
            items = await DiscoverLinksOperation(client, continue_on_fail=True).run(requests)

        self.assertEqual(len(items), 2)
        self.assertEqual(items[0].json, {"url": "", "error": "URL cannot be empty."})
        self.assertEqual(items[0].error, "URL cannot be empty.")
        self.assertEqual(items[0].paired_item, 0)
        self.assertEqual(items[1].paired_item, 1)
        self.assertIsNone(items[1].error)
        client.crawl_url.assert_awaited_once()

    async def test_continue_on_fail_unexpected_error(self):
        """Test that unexpected client errors are also captured per item."""
        client = AsyncMock()
        client.crawl_url.side_effect = RuntimeError("boom")

        with self.assertLogs("linkscout.orchestrator.discover", level="ERROR"):
            items = await DiscoverLinksOperation(client, continue_on_fail=True).run(
                [DiscoverRequest(url=PAGE)]
            )

        self.assertEqual(items[0].json, {"url": PAGE, "error": "boom"})

    async def test_deterministic(self):
        """Test that repeated runs produce identical output."""
        request = DiscoverRequest(url=PAGE, filters=FilterOptions(exclude_social_media=True))
        operation = DiscoverLinksOperation(make_client())

        first = await operation.run([request])
        second = await operation.run([request])

        self.assertEqual([i.json for i in first], [i.json for i in second])


if __name__ == "__main__":
    unittest.main()
