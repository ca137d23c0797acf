"""Constants used throughout linkscout.

This module contains enums, default values, and static configurations
to ensure consistency across the application.
"""

from enum import Enum


class LinkType(Enum):
    """Link partition reported by the crawl server."""
    INTERNAL = "internal"
    EXTERNAL = "external"


class OutputFormat(Enum):
    """Shape of the records emitted for a crawled page."""
    GROUPED = "grouped"
    SPLIT = "split"


class CacheMode(Enum):
    """Crawl4AI cache modes."""
    ENABLED = "ENABLED"
    DISABLED = "DISABLED"
    BYPASS = "BYPASS"


class BrowserType(Enum):
    """Browser engines supported by the crawl server."""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


class AuthType(str, Enum):
    """Authentication schemes for the crawl server."""
    NONE = "none"
    TOKEN = "token"
    BASIC = "basic"


# Hosts treated as social media; subdomains match too
SOCIAL_MEDIA_DOMAINS = (
    'facebook.com', 'fb.com', 'fb.me',
    'twitter.com', 'x.com', 't.co',
    'linkedin.com', 'lnkd.in',
    'instagram.com', 'instagr.am',
    'youtube.com', 'youtu.be',
    'tiktok.com',
    'pinterest.com', 'pin.it',
    'reddit.com', 'redd.it',
    'tumblr.com',
    'snapchat.com',
    'whatsapp.com', 'wa.me',
    'telegram.org', 't.me',
    'discord.com', 'discord.gg',
    'twitch.tv',
)


EMPTY_RESULT_MESSAGE = "No links found matching the specified criteria"


# Application-wide defaults
DEFAULTS = {
    "server_url": "http://crawl4ai:11235",
    "request_timeout": 120.0,
    "page_timeout": 30000,
    "link_types": ["internal", "external"],
    "cache_mode": CacheMode.ENABLED.value,
    "output_format": OutputFormat.GROUPED.value,
}
