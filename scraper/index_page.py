"""Extraction of the event title and venue links from the index page."""
import logging
from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from processor.errors import MalformedVenueLink, MissingTitle
from processor.models import IndexPage, VenueLink

logger = logging.getLogger(__name__)


class IndexPageExtractor:
    """Reads the schedule index page."""

    TITLE_SELECTOR = "#title img"
    VENUE_LINK_SELECTOR = "#m_shop area[href]"

    def extract(self, document: BeautifulSoup, base_url: str) -> IndexPage:
        """
        Extract the event title and the venue links.

        Args:
            document: Parsed index page
            base_url: URL the index page was fetched from, used to resolve
                relative venue links

        Returns:
            IndexPage with venue links in document order

        Raises:
            MissingTitle: If there is no title image with an alt text
            MalformedVenueLink: If a map area lacks href or title
        """
        event_title = self._extract_event_title(document, base_url)
        venue_links = self._extract_venue_links(document, base_url)

        logger.info(
            f"Index page '{event_title}' lists {len(venue_links)} venues"
        )
        return IndexPage(event_title=event_title, venue_links=venue_links)

    def _extract_event_title(self, document: BeautifulSoup, base_url: str) -> str:
        title_node = document.select_one(self.TITLE_SELECTOR)
        if title_node is None or title_node.get("alt") is None:
            raise MissingTitle(base_url)
        return title_node["alt"]

    def _extract_venue_links(self, document: BeautifulSoup, base_url: str) -> List[VenueLink]:
        venue_links = []
        for area in document.select(self.VENUE_LINK_SELECTOR):
            href = area.get("href")
            if href is None:
                raise MalformedVenueLink(base_url, "href")
            title = area.get("title")
            if title is None:
                raise MalformedVenueLink(base_url, "title")
            venue_links.append(VenueLink(title=title, url=urljoin(base_url, href)))
        return venue_links
