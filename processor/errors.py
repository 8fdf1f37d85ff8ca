"""Exception hierarchy for shop schedule scraping."""
from typing import Optional


class ScheduleScrapeError(Exception):
    """Base class for every error raised while generating calendars."""


class InvalidURLError(ScheduleScrapeError):
    """The URL given on the command line is not an absolute http(s) URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid URL: {url!r}")


class FetchError(ScheduleScrapeError):
    """A GET request failed or returned a non-success status."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class MarkupError(ScheduleScrapeError):
    """The page markup no longer matches the expected structure."""

    def __init__(self, message: str, venue_url: str = "", shop_name: Optional[str] = None):
        self.venue_url = venue_url
        self.shop_name = shop_name
        super().__init__(message)


class MissingTitle(MarkupError):
    """The index page has no ``#title img`` with an alt text."""

    def __init__(self, page_url: str):
        super().__init__(f"{page_url} has no event title (#title img[alt])", page_url)


class MalformedVenueLink(MarkupError):
    """A venue map area lacks its href or title attribute."""

    def __init__(self, page_url: str, attribute: str):
        self.attribute = attribute
        super().__init__(
            f"{page_url} has a venue link without a {attribute} attribute", page_url
        )


class UnexpectedTableShape(MarkupError):
    """A result-list table does not have exactly three rows."""

    def __init__(self, venue_url: str, row_count: int):
        self.row_count = row_count
        super().__init__(
            f"{venue_url} shop table has unexpected rows: {row_count}", venue_url
        )


class MissingShopName(MarkupError):
    def __init__(self, venue_url: str):
        super().__init__(f"{venue_url} shop table has no shop name", venue_url)


class MissingAddress(MarkupError):
    def __init__(self, venue_url: str, shop_name: str):
        super().__init__(
            f"{venue_url} {shop_name} has no address", venue_url, shop_name
        )


class UnrecognizableSchedule(MarkupError):
    """A schedule description could not be turned into a start time."""

    def __init__(self, text: str, venue_url: str = "", shop_name: str = "", detail: str = ""):
        self.text = text
        message = f"{venue_url} {shop_name} has unrecognizable description: {text}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, venue_url, shop_name)


class PatternNotFound(UnrecognizableSchedule):
    """The date/time pattern does not occur in the description."""


class InvalidScheduleTime(UnrecognizableSchedule):
    """The pattern matched but the fields do not form a valid timestamp."""


class OutputError(ScheduleScrapeError):
    """A venue calendar could not be written to disk."""

    def __init__(self, title: str, path: str, reason: str):
        self.title = title
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write calendar for {title} to {path}: {reason}")
