"""Link filtering, canonicalization, and deduplication.

This package turns the raw links of a crawled page into the filtered set:
- compile_patterns / parse_file_types: Parse user filter strings
- URLCanonicalizer: Canonical keys for deduplication
- LinkClassifier: Apply filter rules to single links
- LinkDeduper: Order-preserving deduplication
- LinkSetProcessor: Filter and deduplicate internal/external links
"""

from linkscout.filters.patterns import WildcardPattern, compile_patterns, parse_file_types
from linkscout.filters.canonical import URLCanonicalizer, canonicalize
from linkscout.filters.classifier import FilterRule, LinkClassifier, accepts
from linkscout.filters.deduper import LinkDeduper
from linkscout.filters.processor import LinkSetProcessor, parse_link_types, process

__all__ = [
    "WildcardPattern",
    "compile_patterns",
    "parse_file_types",
    "URLCanonicalizer",
    "canonicalize",
    "FilterRule",
    "LinkClassifier",
    "accepts",
    "LinkDeduper",
    "LinkSetProcessor",
    "parse_link_types",
    "process",
]
