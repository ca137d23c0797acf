"""Core data models for linkscout.

This module defines the data structures shared by the filter pipeline,
the crawl client and the discover operation: links, link collections,
filter criteria, crawl results and server settings.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from linkscout.core.constants import AuthType, DEFAULTS, LinkType

if TYPE_CHECKING:
    from linkscout.filters.patterns import WildcardPattern


# ============================================================================
# Link Models
# ============================================================================

@dataclass(frozen=True)
class Link:
    """Hyperlink record as reported by the crawl server.

    ``href`` may be relative, absolute or malformed; it is never rewritten.
    """
    href: str
    text: str = ""
    title: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Link":
        """Build a Link from a server JSON object.

        Args:
            data: Link object with ``href``, ``text`` and optional ``title``

        Returns:
            Link instance (missing href/text become empty strings)
        """
        title = data.get("title")
        return cls(
            href=data.get("href") or "",
            text=data.get("text") or "",
            title=str(title) if title is not None else None,
        )


@dataclass(frozen=True)
class LinkCollection:
    """Links of one page, partitioned into internal and external."""
    internal: tuple[Link, ...] = ()
    external: tuple[Link, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "LinkCollection":
        """Build a collection from the ``links`` object of a crawl result."""
        if not data:
            return cls()
        return cls(
            internal=tuple(Link.from_dict(item) for item in data.get("internal") or []),
            external=tuple(Link.from_dict(item) for item in data.get("external") or []),
        )

    def get(self, link_type: LinkType) -> tuple[Link, ...]:
        """Return the links of the given type."""
        if link_type == LinkType.INTERNAL:
            return self.internal
        return self.external

    @property
    def total(self) -> int:
        """Total number of links in both partitions."""
        return len(self.internal) + len(self.external)


# ============================================================================
# Filter Criteria Model
# ============================================================================

@dataclass(frozen=True)
class FilterCriteria:
    """Inclusion/exclusion settings applied to every link of a page."""
    include_patterns: tuple["WildcardPattern", ...] = ()
    exclude_patterns: tuple["WildcardPattern", ...] = ()
    exclude_file_types: tuple[str, ...] = ()    # Lower-cased, dot-prefixed (".pdf")
    exclude_social_media: bool = False
    require_text: bool = False


# ============================================================================
# Crawl Result Model
# ============================================================================

@dataclass
class CrawlResult:
    """Subset of a Crawl4AI crawl result used by link discovery."""
    url: str
    success: bool
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    links: LinkCollection = field(default_factory=LinkCollection)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, url: str = "") -> "CrawlResult":
        """Parse one entry of the server's ``results`` array.

        Args:
            data: Result object returned by ``POST /crawl``
            url: Requested URL, used when the result omits it

        Returns:
            CrawlResult instance
        """
        status = data.get("status_code")
        return cls(
            url=data.get("url") or url,
            success=bool(data.get("success", False)),
            status_code=int(status) if status is not None else None,
            error_message=data.get("error_message"),
            links=LinkCollection.from_dict(data.get("links")),
            metadata=data.get("metadata") or {},
        )

    @classmethod
    def failure(cls, url: str, message: str) -> "CrawlResult":
        """Create an unsuccessful result carrying an error message."""
        return cls(url=url, success=False, error_message=message)


# ============================================================================
# Server Configuration Model
# ============================================================================

@dataclass
class ServerConfig:
    """Connection settings for the Crawl4AI REST server."""
    url: str = DEFAULTS["server_url"]
    auth_type: AuthType = AuthType.NONE
    api_token: str = ""
    username: str = ""
    password: str = ""
    timeout: float = DEFAULTS["request_timeout"]  # Seconds

    @property
    def auth_headers(self) -> dict[str, str]:
        """Headers required by token authentication."""
        if self.auth_type == AuthType.TOKEN and self.api_token:
            return {"Authorization": f"Bearer {self.api_token}"}
        return {}

    @property
    def basic_auth(self) -> Optional[tuple[str, str]]:
        """Username/password pair for basic authentication, if configured."""
        if self.auth_type == AuthType.BASIC and self.username and self.password:
            return (self.username, self.password)
        return None
