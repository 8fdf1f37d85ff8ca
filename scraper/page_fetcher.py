"""HTTP fetching and HTML parsing for schedule pages."""
import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

import requests
from bs4 import BeautifulSoup

from processor.errors import FetchError

logger = logging.getLogger(__name__)

PROJECT_NAME = "shop-schedule-ics"

try:
    PROJECT_VERSION = version(PROJECT_NAME)
except PackageNotFoundError:
    # running from a source checkout that was never installed
    PROJECT_VERSION = "0.0.0"

USER_AGENT = f"{PROJECT_NAME}/{PROJECT_VERSION}"


class PageFetcher:
    """Fetches pages with a fixed client label and parses them as HTML."""

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        """
        Initialize the page fetcher.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
            session: Optional session to reuse; a new one is created otherwise
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT

    def fetch(self, url: str) -> bytes:
        """
        GET a page and return its body.

        Raises:
            FetchError: On connection failure, timeout or non-2xx status
        """
        logger.info(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"GET {url} failed: {e}")
            raise FetchError(url, str(e)) from e
        return response.content

    def fetch_document(self, url: str) -> BeautifulSoup:
        """GET a page and parse it; the declared charset is honoured."""
        return BeautifulSoup(self.fetch(url), "html.parser")
