"""Date/time pattern matching for shop schedule descriptions."""
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Tuple

from processor.errors import InvalidScheduleTime, PatternNotFound

logger = logging.getLogger(__name__)

JST = timezone(timedelta(hours=9))

# "2024年3月15日(金) ... /18:30～" where the gap may span lines
SCHEDULE_PATTERN = re.compile(r"(\d+)年(\d+)月(\d+)日.+/(\d+):(\d+)～", re.DOTALL)

ScheduleFields = Tuple[int, int, int, int, int]


def match_schedule(text: str, venue_url: str = "", shop_name: str = "") -> ScheduleFields:
    """
    Extract (year, month, day, hour, minute) from a schedule description.

    Values are returned as matched; range checks happen when the start
    time is built.

    Args:
        text: Free text taken from the venue page
        venue_url: Venue page URL, reported on failure
        shop_name: Shop name, reported on failure

    Returns:
        Tuple of five integers

    Raises:
        PatternNotFound: If the text does not contain the pattern
    """
    match = SCHEDULE_PATTERN.search(text)
    if match is None:
        raise PatternNotFound(text, venue_url=venue_url, shop_name=shop_name)

    year, month, day, hour, minute = (int(group) for group in match.groups())
    logger.debug(
        f"Matched schedule {year}-{month}-{day} {hour}:{minute} for {shop_name}"
    )
    return year, month, day, hour, minute


def schedule_start(fields: ScheduleFields, text: str = "", venue_url: str = "",
                   shop_name: str = "") -> datetime:
    """
    Build the start time at a fixed +09:00 offset.

    Raises:
        InvalidScheduleTime: If the fields are out of range (month 13, hour 25)
    """
    year, month, day, hour, minute = fields
    try:
        return datetime(year, month, day, hour, minute, tzinfo=JST)
    except ValueError as e:
        raise InvalidScheduleTime(
            text, venue_url=venue_url, shop_name=shop_name, detail=str(e)
        ) from e
