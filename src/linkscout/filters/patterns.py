"""Wildcard pattern compilation for link filtering.

Users write patterns such as ``*/login/*`` or ``*/blog/*``. Every character
except ``*`` is matched literally, ``*`` matches any run of characters, and a
pattern matches when it occurs anywhere in the href (case-insensitive).
"""

import re
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class WildcardPattern:
    """Compiled wildcard pattern."""
    source: str
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        literal_parts = (re.escape(part) for part in self.source.split("*"))
        object.__setattr__(
            self, "regex", re.compile(".*".join(literal_parts), re.IGNORECASE)
        )

    def matches(self, href: str) -> bool:
        """Check whether the pattern occurs anywhere in href."""
        return self.regex.search(href) is not None


def _split_list(value: Optional[str]) -> list[str]:
    if not value or not isinstance(value, str):
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def compile_patterns(patterns: Optional[str]) -> list[WildcardPattern]:
    """Compile a comma-separated list of wildcard patterns.

    Args:
        patterns: Comma-separated patterns, e.g. ``"*/login/*, */admin/*"``

    Returns:
        One WildcardPattern per non-empty segment, in input order
    """
    return [WildcardPattern(part) for part in _split_list(patterns)]


def parse_file_types(file_types: Optional[str]) -> list[str]:
    """Parse a comma-separated extension list into dot-prefixed suffixes.

    ``"pdf, .ZIP"`` becomes ``[".pdf", ".zip"]``.
    """
    extensions = []
    for part in _split_list(file_types):
        ext = part.lower()
        extensions.append(ext if ext.startswith(".") else f".{ext}")
    return extensions
