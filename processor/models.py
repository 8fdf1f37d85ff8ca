"""Data models for schedule scraping."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

DEFAULT_DURATION = timedelta(hours=1)

STATUS_WRITTEN = "written"
STATUS_EMPTY = "empty"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class VenueLink:
    """Venue sub-page discovered on the index page."""
    title: str
    url: str


@dataclass(frozen=True)
class IndexPage:
    """Event title and venue links from the top-level page."""
    event_title: str
    venue_links: List[VenueLink]


@dataclass(frozen=True)
class ScheduleEntry:
    """One schedule slot at a shop, destined to become one calendar event."""
    start_time: datetime
    shop_name: str
    address: str
    duration: timedelta = DEFAULT_DURATION

    @property
    def end_time(self) -> datetime:
        return self.start_time + self.duration


@dataclass
class VenueResult:
    """Outcome of processing a single venue."""
    title: str
    url: str
    status: str
    event_count: int = 0
    path: Optional[Path] = None
    error: Optional[str] = None


@dataclass
class RunSummary:
    """Result of a generate run."""
    event_title: str
    results: List[VenueResult] = field(default_factory=list)

    @property
    def written(self) -> List[VenueResult]:
        return [r for r in self.results if r.status == STATUS_WRITTEN]

    @property
    def empty(self) -> List[VenueResult]:
        return [r for r in self.results if r.status == STATUS_EMPTY]

    @property
    def failed(self) -> List[VenueResult]:
        return [r for r in self.results if r.status == STATUS_FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed
