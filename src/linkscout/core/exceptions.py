from typing import Optional


class LinkScoutError(Exception):
    """Base exception for linkscout.

    ``item_index`` records which input item of a batch failed, when known.
    """

    def __init__(self, message: str = "", *, item_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.item_index = item_index

class ConfigError(LinkScoutError):
    pass

class InvalidServerConfigError(ConfigError):
    pass

class OptionsFileError(ConfigError):
    pass

class ValidationError(LinkScoutError):
    pass

class LinkTypeSelectionError(ValidationError):
    """No (or an unknown) link type was selected."""
    pass

class InvalidURLError(ValidationError):
    pass

class CrawlerError(LinkScoutError):
    pass

class CrawlerAPIError(CrawlerError):
    """Request to the crawl server failed."""
    pass

class CrawlFailedError(CrawlerError):
    """Crawl server reported an unsuccessful crawl."""
    pass

class ExportError(LinkScoutError):
    """Failed to write output records."""
    pass
