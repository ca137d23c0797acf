"""URL canonicalization for link deduplication.

This module derives the key under which two links are considered the same
page. The key keeps:
- Scheme and host (default ports dropped)
- Path, with a single trailing slash removed (except root)
- The original query string

The fragment is dropped and the whole key is lower-cased. Hrefs that cannot
be parsed as absolute URLs fall back to the raw href, lower-cased.
"""

from typing import Optional
from urllib.parse import SplitResult, urlsplit


class URLCanonicalizer:
    """Build canonical keys for hrefs.

    Parsing follows browser URL semantics closely enough for deduplication:
    hierarchical schemes need a host, an empty path counts as ``/``, and the
    default port of the scheme is omitted.
    """

    DEFAULT_PORTS = {
        'http': 80,
        'https': 443,
        'ws': 80,
        'wss': 443,
        'ftp': 21,
    }

    HIERARCHICAL_SCHEMES = frozenset(DEFAULT_PORTS) | {'file'}

    def canonicalize(self, href: str) -> str:
        """Return the canonical key for href.

        Args:
            href: Link target as reported by the crawl server

        Returns:
            Lower-cased canonical key; never raises
        """
        href = href or ""
        parsed = self.parse(href)
        if parsed is None:
            return href.lower()

        scheme = parsed.scheme.lower()
        path = parsed.path
        if not path and scheme in self.HIERARCHICAL_SCHEMES:
            path = '/'

        canonical = f"{scheme}://{self._host(parsed, scheme)}{path}"
        if canonical.endswith('/') and path != '/':
            canonical = canonical[:-1]

        if parsed.query:
            canonical += f"?{parsed.query}"

        return canonical.lower()

    def parse(self, href: str) -> Optional[SplitResult]:
        """Strictly parse an absolute URL.

        Args:
            href: Candidate URL

        Returns:
            Split URL, or None for relative or malformed hrefs
        """
        if not href or not isinstance(href, str):
            return None

        href = href.strip()
        try:
            parsed = urlsplit(href)
            scheme = parsed.scheme.lower()
            # http:/a.com and http:a.com name the host a.com, as in browsers
            if scheme in self.DEFAULT_PORTS and not parsed.netloc:
                rest = href[len(scheme) + 1:].lstrip('/\\')
                if rest:
                    parsed = urlsplit(f"{scheme}://{rest}")
            # Accessing .port validates it
            parsed.port
        except ValueError:
            return None

        if not parsed.scheme:
            return None

        if parsed.scheme.lower() in self.DEFAULT_PORTS and not parsed.hostname:
            return None

        return parsed

    def hostname(self, href: str) -> Optional[str]:
        """Return the lower-cased host of href, or None if it has none."""
        parsed = self.parse(href)
        if parsed is None or not parsed.hostname:
            return None
        return parsed.hostname.lower()

    def _host(self, parsed: SplitResult, scheme: str) -> str:
        host = parsed.hostname or ''
        if ':' in host:
            host = f"[{host}]"

        port = parsed.port
        if port is not None and port != self.DEFAULT_PORTS.get(scheme):
            host = f"{host}:{port}"

        return host


_default = URLCanonicalizer()


def canonicalize(href: str) -> str:
    """Canonical key for href using the default canonicalizer."""
    return _default.canonicalize(href)
