"""Link deduplication by canonical URL.

Two links are duplicates when their hrefs share a canonical key (see
``linkscout.filters.canonical``). The first occurrence wins and relative
order is preserved, so deduplicating twice gives the same list as once.
"""

from typing import Iterable, Optional

from linkscout.core.models import Link
from linkscout.filters.canonical import URLCanonicalizer


class LinkDeduper:
    """Deduplicate links based on canonical href."""

    def __init__(self, *, canonicalizer: Optional[URLCanonicalizer] = None):
        """Initialize LinkDeduper.

        Args:
            canonicalizer: URLCanonicalizer instance (creates default if None)
        """
        self.canonicalizer = canonicalizer or URLCanonicalizer()

    def key(self, link: Link) -> str:
        """Deduplication key for link."""
        return self.canonicalizer.canonicalize(link.href)

    def deduplicate(self, links: Iterable[Link]) -> list[Link]:
        """Deduplicate links.

        Args:
            links: Links in their original order

        Returns:
            First occurrence of each canonical key, in original order
        """
        seen_keys: set[str] = set()
        deduplicated = []

        for link in links:
            key = self.key(link)
            if key not in seen_keys:
                seen_keys.add(key)
                deduplicated.append(link)

        return deduplicated

    def get_duplicates(self, links: Iterable[Link]) -> dict[str, list[Link]]:
        """Find duplicate link groups.

        Args:
            links: Links to analyze

        Returns:
            Dictionary mapping canonical keys to the links sharing them,
            limited to keys seen more than once
        """
        groups: dict[str, list[Link]] = {}
        for link in links:
            groups.setdefault(self.key(link), []).append(link)

        return {
            key: members
            for key, members in groups.items()
            if len(members) > 1
        }
