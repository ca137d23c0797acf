"""Async client for the Crawl4AI Docker REST API."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from linkscout.client.payloads import (
    CrawlerRunConfig,
    format_browser_config,
    format_crawler_config,
)
from linkscout.core.exceptions import CrawlerAPIError
from linkscout.core.models import CrawlResult, ServerConfig


logger = logging.getLogger(__name__)


NO_RESULT_MESSAGE = (
    "No result returned from Crawl4AI API. "
    "The API responded but did not return any crawl results."
)


def _response_detail(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("error") or data.get("message")
        return str(detail) if detail else None
    return None


def parse_api_error(error: Exception, base_url: str = "") -> str:
    """Turn a request failure into an actionable message.

    Args:
        error: Exception raised while talking to the server
        base_url: Server URL, mentioned in connection errors

    Returns:
        Human-readable error message
    """
    if isinstance(error, httpx.ConnectError):
        return (
            f"Cannot connect to Crawl4AI API at {base_url}. "
            "Check that the Docker container is running and the URL is correct."
        )

    if isinstance(error, httpx.TimeoutException):
        return (
            "Request timed out. The crawl operation took longer than the configured timeout. "
            "Consider increasing the timeout or simplifying the crawl configuration."
        )

    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        status = response.status_code
        detail = _response_detail(response)

        if status == 400:
            return f"Invalid request (400): {detail or 'Bad request format'}. Check your configuration parameters."
        if status == 401:
            return f"Authentication failed (401): {detail or 'Invalid credentials'}. Check your API token or username/password."
        if status == 403:
            return f"Access forbidden (403): {detail or 'Insufficient permissions'}. Check your authentication credentials."
        if status == 404:
            return f"Endpoint not found (404): {detail or 'The requested endpoint does not exist'}. Verify the Crawl4AI API version."
        if status == 422:
            return f"Validation error (422): {detail or 'Invalid configuration parameters'}. Review your browser_config or crawler_config settings."
        if status == 429:
            return f"Rate limit exceeded (429): {detail or 'Too many requests'}. Please wait before retrying."
        if status >= 500:
            return f"Server error ({status}): {detail or 'Crawl4AI API encountered an internal error'}. The server may be overloaded or experiencing issues."
        return f"API error ({status}): {detail or response.reason_phrase or 'Unknown error'}"

    if isinstance(error, ValueError):
        return f"Invalid response from Crawl4AI API: {error}"

    return str(error) or "Unknown error occurred"


class Crawl4aiClient:
    """Client for a Crawl4AI server.

    Use as an async context manager so the underlying connection pool is
    closed::

        async with Crawl4aiClient(server) as client:
            result = await client.crawl_url(url, config)
    """

    def __init__(
        self,
        server: ServerConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.server = server
        self._client = httpx.AsyncClient(
            base_url=server.url,
            timeout=server.timeout,
            headers=server.auth_headers,
            auth=server.basic_auth,
            transport=transport,
        )

    async def __aenter__(self) -> Crawl4aiClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def crawl_url(self, url: str, config: CrawlerRunConfig) -> CrawlResult:
        """Crawl a single URL.

        Request failures are reported through an unsuccessful CrawlResult
        rather than raised.

        Args:
            url: Page to crawl
            config: Browser and crawler settings

        Returns:
            CrawlResult for url
        """
        payload = {
            "urls": [url],
            "browser_config": format_browser_config(config),
            "crawler_config": format_crawler_config(config),
        }

        logger.info(f"Crawling {url}")
        try:
            response = await self._client.post("/crawl", json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            message = parse_api_error(e, self.server.url)
            logger.warning(f"Crawl request for {url} failed: {message}")
            return CrawlResult.failure(url, message)

        results = data.get("results") if isinstance(data, dict) else None
        if isinstance(results, list) and results:
            return CrawlResult.from_dict(results[0], url=url)

        return CrawlResult.failure(url, NO_RESULT_MESSAGE)

    async def get_monitor_health(self) -> dict[str, Any]:
        """Get server health (``GET /monitor/health``).

        Raises:
            CrawlerAPIError: If the request fails
        """
        return await self._get_json("/monitor/health")

    async def get_endpoint_stats(self) -> dict[str, Any]:
        """Get per-endpoint statistics (``GET /monitor/endpoints/stats``).

        Raises:
            CrawlerAPIError: If the request fails
        """
        return await self._get_json("/monitor/endpoints/stats")

    async def _get_json(self, path: str) -> dict[str, Any]:
        try:
            response = await self._client.get(path)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CrawlerAPIError(parse_api_error(e, self.server.url)) from e

        if not isinstance(data, dict):
            raise CrawlerAPIError(f"Unexpected response from {path}: expected a JSON object")
        return data
