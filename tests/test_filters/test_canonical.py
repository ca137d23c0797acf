"""Unit tests for URL canonicalization.

Tests for URLCanonicalizer including trailing-slash handling, query
preservation, fragment removal, case folding and the fallback for hrefs
that cannot be parsed.
"""

import sys
import unittest
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
sys.path.insert(0, str(src_path))

from linkscout.filters.canonical import URLCanonicalizer, canonicalize


class TestURLCanonicalizer(unittest.TestCase):
    """Test suite for URLCanonicalizer class."""

    def setUp(self):
        """Set up test fixtures."""
        self.canonicalizer = URLCanonicalizer()

    def test_trailing_slash_removed(self):
        """Test that a single trailing slash is stripped from the path."""
        self.assertEqual(canonicalize("https://a.com/x/"), "https://a.com/x")
        self.assertEqual(canonicalize("https://a.com/x"), "https://a.com/x")

    def test_root_path_kept(self):
        """Test that the root path keeps its slash."""
        self.assertEqual(canonicalize("https://a.com/"), "https://a.com/")
        self.assertEqual(canonicalize("https://a.com"), "https://a.com/")

    def test_only_one_trailing_slash_removed(self):
        """Test that only one trailing slash is stripped."""
        self.assertEqual(canonicalize("https://a.com/x//"), "https://a.com/x/")

    def test_query_preserved(self):
        """Test that the query string is kept verbatim (then lower-cased)."""
        self.assertEqual(
            canonicalize("https://a.com/search/?q=Test&b=2"),
            "https://a.com/search?q=test&b=2",
        )

    def test_empty_query_dropped(self):
        """Test that a bare question mark adds nothing."""
        self.assertEqual(canonicalize("https://a.com/x?"), "https://a.com/x")

    def test_fragment_dropped(self):
        """Test that fragments do not affect the key."""
        self.assertEqual(canonicalize("https://a.com/x#top"), "https://a.com/x")

    def test_result_lowercased(self):
        """Test that scheme, host and path are lower-cased."""
        self.assertEqual(canonicalize("HTTPS://A.com/Path"), "https://a.com/path")

    def test_default_port_dropped(self):
        """Test that the scheme's default port is omitted."""
        self.assertEqual(canonicalize("https://a.com:443/x"), "https://a.com/x")
        self.assertEqual(canonicalize("http://a.com:8080/x"), "http://a.com:8080/x")

    def test_relative_href_falls_back_to_lowercase(self):
        """Test that relative hrefs are only lower-cased."""
        self.assertEqual(canonicalize("/About/Us/"), "/about/us/")
        self.assertEqual(canonicalize("page.html#Top"), "page.html#top")

    def test_malformed_href_falls_back(self):
        """Test that malformed URLs do not raise."""
        self.assertEqual(canonicalize("http://[broken"), "http://[broken")
        self.assertEqual(canonicalize("http://a.com:notaport/"), "http://a.com:notaport/")
        self.assertEqual(canonicalize("http://"), "http://")
        self.assertEqual(canonicalize(""), "")

    def test_missing_slashes_after_special_scheme(self):
        """Test that http:/host and https:host parse like browsers do."""
        self.assertEqual(canonicalize("http:/a.com/x"), "http://a.com/x")
        self.assertEqual(canonicalize("https:a.com/x/"), "https://a.com/x")
        self.assertEqual(canonicalize("http:///a.com"), "http://a.com/")
    def test_missing_slashes_dedupe_with_canonical_twin(self):
        """Test that slash-less variants share a key with the full URL."""
        self.assertEqual(canonicalize("HTTP:/A.com/x/"), canonicalize("http://a.com/x"))

    def test_non_hierarchical_scheme(self):
        """Test that schemes without a host still produce a key."""
        self.assertEqual(canonicalize("mailto:Info@A.com"), "mailto://info@a.com")

    def test_hostname(self):
        """Test host extraction used by the social media filter."""
        self.assertEqual(self.canonicalizer.hostname("https://WWW.Twitter.com/u"), "www.twitter.com")
        self.assertIsNone(self.canonicalizer.hostname("/relative/path"))
        self.assertIsNone(self.canonicalizer.hostname("mailto:someone@x.com"))

    def test_ipv6_host(self):
        """Test that IPv6 hosts keep their brackets."""
        self.assertEqual(canonicalize("http://[::1]:8000/x/"), "http://[::1]:8000/x")


if __name__ == "__main__":
    unittest.main()
