"""Assembly of venue calendars and writing them as .ics files."""
import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from icalendar import Calendar, Event

from processor.errors import OutputError
from processor.models import ScheduleEntry

logger = logging.getLogger(__name__)

PRODID = "-//shop-schedule-ics//Shop Schedule Calendar//JA"
UID_DOMAIN = "shop-schedule-ics"


class CalendarWriter:
    """Builds one calendar per venue and persists it to the output directory."""

    FILE_EXTENSION = ".ics"

    def __init__(self, output_dir: str = "."):
        """
        Args:
            output_dir: Directory the .ics files are written to (default: CWD)
        """
        self.output_dir = Path(output_dir)

    def build_calendar(self, event_title: str, venue_url: str,
                       entries: List[ScheduleEntry]) -> Calendar:
        """
        Build a calendar with one event per schedule entry, in entry order.

        Args:
            event_title: Shared title used as every event's summary
            venue_url: Venue page URL, appended to each description
            entries: Schedule entries extracted from the venue page

        Returns:
            icalendar Calendar (possibly without events)
        """
        calendar = Calendar()
        calendar.add("prodid", PRODID)
        calendar.add("version", "2.0")

        stamp = datetime.now(timezone.utc)
        for entry in entries:
            calendar.add_component(
                self._build_event(event_title, venue_url, entry, stamp)
            )
        return calendar

    def _build_event(self, event_title: str, venue_url: str,
                     entry: ScheduleEntry, stamp: datetime) -> Event:
        event = Event()
        event.add("uid", self.generate_uid(venue_url, entry))
        event.add("dtstamp", stamp)
        event.add("summary", event_title)
        event.add("description", f"{entry.shop_name}\n{venue_url}")
        event.add("location", entry.address)
        # UTC form needs no VTIMEZONE for the fixed +09:00 offset
        event.add("dtstart", entry.start_time.astimezone(timezone.utc))
        event.add("dtend", entry.end_time.astimezone(timezone.utc))
        return event

    def generate_uid(self, venue_url: str, entry: ScheduleEntry) -> str:
        """
        Generate a stable UID from venue URL + shop name + start time.

        Returns:
            SHA256 hex digest qualified with the project domain
        """
        composite = f"{venue_url}|{entry.shop_name}|{entry.start_time.isoformat()}"
        digest = hashlib.sha256(composite.encode("utf-8")).hexdigest()
        return f"{digest}@{UID_DOMAIN}"

    def path_for(self, title: str) -> Path:
        """Output path for a venue title; path separators become underscores."""
        stem = title.replace("/", "_").replace("\\", "_")
        return self.output_dir / f"{stem}{self.FILE_EXTENSION}"

    def write(self, title: str, calendar: Calendar) -> Optional[Path]:
        """
        Write the calendar to ``<title>.ics``, overwriting any existing file.

        A calendar without events is not written.

        Returns:
            Path of the written file, or None if the calendar was empty

        Raises:
            OutputError: If the file cannot be written
        """
        event_count = len(calendar.walk("VEVENT"))
        if event_count == 0:
            logger.info(f"{title} has no events")
            return None

        path = self.path_for(title)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(calendar.to_ical())
        except (OSError, ValueError) as e:
            logger.error(f"Failed to write {path}: {e}")
            raise OutputError(title, str(path), str(e)) from e
        logger.info(f"Wrote {event_count} events to {path}")
        return path
