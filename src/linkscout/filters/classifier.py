"""Link classification against filter criteria.

This module decides whether a single link survives the user's filters.
Each filter is a named rule; a link is accepted when every active rule
passes. Rules never raise: hrefs that cannot be parsed simply skip checks
that need a parsed URL.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from linkscout.core.constants import SOCIAL_MEDIA_DOMAINS
from linkscout.core.models import FilterCriteria, Link
from linkscout.filters.canonical import URLCanonicalizer


logger = logging.getLogger(__name__)

_canonicalizer = URLCanonicalizer()


# ============================================================================
# Rule Predicates
# ============================================================================

def passes_include_patterns(link: Link, criteria: FilterCriteria) -> bool:
    if not criteria.include_patterns:
        return True
    return any(pattern.matches(link.href) for pattern in criteria.include_patterns)


def passes_exclude_patterns(link: Link, criteria: FilterCriteria) -> bool:
    return not any(pattern.matches(link.href) for pattern in criteria.exclude_patterns)


def passes_file_types(link: Link, criteria: FilterCriteria) -> bool:
    if not criteria.exclude_file_types:
        return True
    lower_href = link.href.lower()
    return not any(lower_href.endswith(ext) for ext in criteria.exclude_file_types)


def is_social_media_host(host: str, domains: tuple[str, ...] = SOCIAL_MEDIA_DOMAINS) -> bool:
    """Check if host is one of domains or a subdomain of one."""
    host = host.lower()
    return any(host == domain or host.endswith(f".{domain}") for domain in domains)


def passes_social_media(link: Link, criteria: FilterCriteria) -> bool:
    if not criteria.exclude_social_media:
        return True
    host = _canonicalizer.hostname(link.href)
    if host is None:
        # Unparsable hrefs cannot be classified as social media
        return True
    return not is_social_media_host(host)


def passes_text_requirement(link: Link, criteria: FilterCriteria) -> bool:
    if not criteria.require_text:
        return True
    return bool((link.text or "").strip())


# ============================================================================
# Filter Rule
# ============================================================================

@dataclass(frozen=True)
class FilterRule:
    """Named predicate; ``check`` returns True when the link survives."""
    name: str
    check: Callable[[Link, FilterCriteria], bool]
    description: str = ""


DEFAULT_RULES: tuple[FilterRule, ...] = (
    FilterRule(
        name="include_patterns",
        check=passes_include_patterns,
        description="Href must match at least one include pattern",
    ),
    FilterRule(
        name="exclude_patterns",
        check=passes_exclude_patterns,
        description="Href must not match any exclude pattern",
    ),
    FilterRule(
        name="file_types",
        check=passes_file_types,
        description="Href must not end with an excluded extension",
    ),
    FilterRule(
        name="social_media",
        check=passes_social_media,
        description="Host must not be a social media domain",
    ),
    FilterRule(
        name="require_text",
        check=passes_text_requirement,
        description="Anchor text must not be blank",
    ),
)


class LinkClassifier:
    """Apply filter rules to links.

    Rules are evaluated in order and the first failing rule rejects the
    link. Order only affects how much work is done, not the result.
    """

    def __init__(
        self,
        criteria: FilterCriteria,
        *,
        rules: Optional[tuple[FilterRule, ...]] = None,
    ):
        """Initialize LinkClassifier.

        Args:
            criteria: Filter settings for the current page
            rules: Rules to apply (defaults to DEFAULT_RULES)
        """
        self.criteria = criteria
        self.rules = rules if rules is not None else DEFAULT_RULES

    def accepts(self, link: Link) -> bool:
        """Check whether link survives all rules."""
        return self.rejection_reason(link) is None

    def rejection_reason(self, link: Link) -> Optional[str]:
        """Return the name of the first rule rejecting link, or None."""
        for rule in self.rules:
            if not rule.check(link, self.criteria):
                return rule.name
        return None

    def filter(self, links: tuple[Link, ...] | list[Link]) -> list[Link]:
        """Return accepted links, preserving their relative order."""
        accepted = []
        for link in links:
            reason = self.rejection_reason(link)
            if reason is None:
                accepted.append(link)
            else:
                logger.debug(f"Rejected {link.href!r}: {reason}")
        return accepted


def accepts(link: Link, criteria: FilterCriteria) -> bool:
    """Check whether link survives criteria."""
    return LinkClassifier(criteria).accepts(link)
