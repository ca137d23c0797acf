"""Request payloads for the Crawl4AI REST API.

Options are kept as typed dataclasses and only converted to the server's
snake_case JSON shape at the edge. Unset options are left out of the
payload so the server applies its own defaults.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from linkscout.core.constants import BrowserType, CacheMode
from linkscout.core.exceptions import ValidationError


@dataclass
class BrowserOptions:
    """Browser settings for a crawl."""
    browser_type: Optional[BrowserType] = None
    headless: Optional[bool] = None
    java_script_enabled: Optional[bool] = None
    enable_stealth: bool = False
    init_scripts: list[str] = field(default_factory=list)
    user_agent: Optional[str] = None
    ignore_https_errors: Optional[bool] = None
    timeout_ms: Optional[int] = None         # Page load timeout
    wait_for: Optional[str] = None           # CSS selector
    js_code: Optional[Union[str, list[str]]] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BrowserOptions":
        """Build options from a config mapping (snake_case keys)."""
        browser_type = data.get("browser_type")
        try:
            parsed_type = BrowserType(str(browser_type).lower()) if browser_type else None
        except ValueError:
            raise ValidationError(
                f"Invalid browser type '{browser_type}'. Must be one of: chromium, firefox, webkit"
            ) from None

        timeout = data.get("timeout_ms", data.get("timeout"))
        return cls(
            browser_type=parsed_type,
            headless=data.get("headless"),
            java_script_enabled=data.get("java_script_enabled"),
            enable_stealth=bool(data.get("enable_stealth", False)),
            init_scripts=[s for s in data.get("init_scripts") or [] if s],
            user_agent=data.get("user_agent") or None,
            ignore_https_errors=data.get("ignore_https_errors"),
            timeout_ms=int(timeout) if timeout is not None else None,
            wait_for=data.get("wait_for") or None,
            js_code=data.get("js_code") or None,
        )


@dataclass
class CrawlerRunConfig:
    """Per-request crawl configuration."""
    browser: BrowserOptions = field(default_factory=BrowserOptions)
    cache_mode: Optional[CacheMode] = None
    page_timeout: Optional[int] = None
    wait_for: Optional[str] = None
    js_code: Optional[Union[str, list[str]]] = None
    score_links: Optional[bool] = None


def build_crawler_run_config(
    browser: BrowserOptions,
    *,
    cache_mode: CacheMode = CacheMode.ENABLED,
    score_links: bool = True,
) -> CrawlerRunConfig:
    """Build the run config for link discovery from browser options."""
    return CrawlerRunConfig(
        browser=browser,
        cache_mode=cache_mode,
        page_timeout=browser.timeout_ms,
        wait_for=browser.wait_for,
        js_code=browser.js_code,
        score_links=score_links,
    )


def format_browser_config(config: CrawlerRunConfig) -> dict[str, Any]:
    """Convert browser options to the ``browser_config`` payload."""
    browser = config.browser
    params: dict[str, Any] = {}

    if browser.browser_type:
        params["browser_type"] = browser.browser_type.value
    if browser.headless is not None:
        params["headless"] = browser.headless
    if browser.java_script_enabled is not None:
        params["java_script_enabled"] = browser.java_script_enabled
    if browser.user_agent:
        params["user_agent"] = browser.user_agent
    if browser.ignore_https_errors is not None:
        params["ignore_https_errors"] = browser.ignore_https_errors
    if browser.enable_stealth:
        params["enable_stealth"] = True
    if browser.init_scripts:
        params["init_scripts"] = list(browser.init_scripts)

    return params


def format_crawler_config(config: CrawlerRunConfig) -> dict[str, Any]:
    """Convert run options to the ``crawler_config`` payload."""
    params: dict[str, Any] = {}

    if config.cache_mode:
        params["cache_mode"] = config.cache_mode.value
    if config.page_timeout is not None:
        params["page_timeout"] = config.page_timeout
    if config.wait_for:
        params["wait_for"] = config.wait_for
    if config.js_code:
        params["js_code"] = config.js_code
    if config.score_links is not None:
        params["score_links"] = config.score_links

    return params
