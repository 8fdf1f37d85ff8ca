"""Extraction of schedule entries from a venue page."""
import enum
import logging
from datetime import timedelta
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from processor.errors import MissingAddress, MissingShopName, UnexpectedTableShape
from processor.models import DEFAULT_DURATION, ScheduleEntry
from processor.schedule_pattern import match_schedule, schedule_start

logger = logging.getLogger(__name__)


class CaptureState(enum.Enum):
    """
    Position inside a capture run of ``strong``/``hr`` nodes.

    The venue markup repeats a ``strong`` label right after the primary
    one; only the first ``strong`` after each ``hr`` describes a schedule.
    """

    READY = "ready"
    CAPTURED = "captured"

    def accept(self, node_name: str) -> Tuple["CaptureState", bool]:
        """
        Advance on one node.

        Returns:
            Tuple of (next state, whether this node should be captured)
        """
        if node_name == "hr":
            return CaptureState.READY, False
        if self is CaptureState.READY:
            return CaptureState.CAPTURED, True
        return CaptureState.CAPTURED, False


def select_captured(nodes: Iterable[Tag]) -> List[Tag]:
    """Return the ``strong`` nodes that open a capture run, in order."""
    state = CaptureState.READY
    captured = []
    for node in nodes:
        state, capture = state.accept(node.name)
        if capture:
            captured.append(node)
    return captured


class VenuePageExtractor:
    """Reads shop result tables from a venue page."""

    TABLE_SELECTOR = ".shoplist_resultlist[cellpadding]"
    ROW_SELECTOR = (
        ":scope > tr, :scope > thead > tr, :scope > tbody > tr, :scope > tfoot > tr"
    )
    SHOP_NAME_SELECTOR = ".shopname"
    ADDRESS_SELECTOR = ".list-adtext-detitext"
    SCHEDULE_SELECTOR = ".list-adtext-detitext > div > strong, hr"
    EXPECTED_ROWS = 3

    def __init__(self, duration: timedelta = DEFAULT_DURATION):
        """
        Args:
            duration: Length given to every extracted entry (default: 1 hour)
        """
        self.duration = duration

    def extract(self, document: BeautifulSoup, venue_url: str) -> List[ScheduleEntry]:
        """
        Extract schedule entries from every result table on the page.

        Args:
            document: Parsed venue page
            venue_url: URL of the venue page, used in error messages

        Returns:
            List of ScheduleEntry objects in document order

        Raises:
            UnexpectedTableShape: If a table does not have exactly three rows
            MissingShopName: If the first row has no shop name
            MissingAddress: If the second row has no address
            UnrecognizableSchedule: If a schedule description has no date/time
        """
        entries = []
        tables = document.select(self.TABLE_SELECTOR)
        for table in tables:
            entries.extend(self._extract_table(table, venue_url))

        logger.info(
            f"Extracted {len(entries)} entries from {len(tables)} tables at {venue_url}"
        )
        return entries

    def _extract_table(self, table: Tag, venue_url: str) -> List[ScheduleEntry]:
        rows = table.select(self.ROW_SELECTOR)
        if len(rows) != self.EXPECTED_ROWS:
            raise UnexpectedTableShape(venue_url, len(rows))
        name_row, address_row, schedule_row = rows

        shop_name = self._first_text(name_row, self.SHOP_NAME_SELECTOR)
        if shop_name is None:
            raise MissingShopName(venue_url)

        address = self._first_text(address_row, self.ADDRESS_SELECTOR)
        if address is None:
            raise MissingAddress(venue_url, shop_name)

        entries = []
        for node in select_captured(schedule_row.select(self.SCHEDULE_SELECTOR)):
            description = node.get_text()
            fields = match_schedule(description, venue_url=venue_url, shop_name=shop_name)
            start_time = schedule_start(
                fields, text=description, venue_url=venue_url, shop_name=shop_name
            )
            entries.append(ScheduleEntry(
                start_time=start_time,
                shop_name=shop_name,
                address=address,
                duration=self.duration
            ))
        return entries

    @staticmethod
    def _first_text(row: Tag, selector: str) -> Optional[str]:
        node = row.select_one(selector)
        if node is None:
            return None
        return node.get_text().strip()
