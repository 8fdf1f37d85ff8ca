"""Command-line entry point: generate one iCalendar file per venue."""
import argparse
import json
import logging
import os
import sys
import time
from datetime import timedelta
from typing import List, Optional
from urllib.parse import urlsplit

from processor.errors import InvalidURLError, ScheduleScrapeError
from processor.models import (
    STATUS_EMPTY,
    STATUS_FAILED,
    STATUS_WRITTEN,
    RunSummary,
    VenueLink,
    VenueResult,
)
from scraper.index_page import IndexPageExtractor
from scraper.page_fetcher import PageFetcher
from scraper.venue_page import VenuePageExtractor
from storage.calendar_writer import CalendarWriter

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(log_level: str = 'INFO', json_logs: bool = False) -> None:
    """
    Configure root logging on stderr.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Emit one JSON object per record instead of plain text
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def validate_url(url: str) -> str:
    """
    Check that the URL is an absolute http(s) URL.

    Raises:
        InvalidURLError: If the scheme or host is missing
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidURLError(url) from e
    if parts.scheme not in ('http', 'https') or not parts.netloc:
        raise InvalidURLError(url)
    return url


def process_venue(venue: VenueLink, event_title: str, fetcher: PageFetcher,
                  venue_extractor: VenuePageExtractor,
                  writer: CalendarWriter) -> VenueResult:
    """Fetch one venue page, extract its entries and write its calendar."""
    document = fetcher.fetch_document(venue.url)
    entries = venue_extractor.extract(document, venue.url)
    calendar = writer.build_calendar(event_title, venue.url, entries)
    path = writer.write(venue.title, calendar)
    if path is None:
        return VenueResult(title=venue.title, url=venue.url, status=STATUS_EMPTY)
    return VenueResult(
        title=venue.title,
        url=venue.url,
        status=STATUS_WRITTEN,
        event_count=len(entries),
        path=path
    )


def generate(url: str, fetcher: Optional[PageFetcher] = None,
             writer: Optional[CalendarWriter] = None,
             venue_extractor: Optional[VenuePageExtractor] = None,
             fail_fast: bool = False) -> RunSummary:
    """
    Generate calendars for every venue linked from the index page.

    Failures on the index page always abort the run. A venue failure is
    recorded in the summary and the next venue is processed, unless
    ``fail_fast`` is set, in which case it is re-raised. Files written
    before an abort stay on disk.

    Args:
        url: Index page URL
        fetcher: Page fetcher (default: PageFetcher())
        writer: Calendar writer (default: CalendarWriter() on the CWD)
        venue_extractor: Venue page extractor (default: one-hour events)
        fail_fast: Abort on the first venue failure

    Returns:
        RunSummary with one VenueResult per venue, in index order

    Raises:
        InvalidURLError: If the URL is malformed (before any request)
        FetchError: If the index page (or, with fail_fast, a venue) can't be fetched
        MarkupError: If the index page (or, with fail_fast, a venue) doesn't parse
    """
    validate_url(url)
    fetcher = fetcher or PageFetcher()
    writer = writer or CalendarWriter()
    venue_extractor = venue_extractor or VenuePageExtractor()

    index_document = fetcher.fetch_document(url)
    index_page = IndexPageExtractor().extract(index_document, url)
    summary = RunSummary(event_title=index_page.event_title)

    for venue in index_page.venue_links:
        try:
            result = process_venue(
                venue, index_page.event_title, fetcher, venue_extractor, writer
            )
        except ScheduleScrapeError as e:
            if fail_fast:
                raise
            logger.error(
                f"Failed to generate calendar for {venue.title}: {e}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            result = VenueResult(
                title=venue.title,
                url=venue.url,
                status=STATUS_FAILED,
                error=str(e)
            )
        summary.results.append(result)

    return summary


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').strip().lower() in ('1', 'true', 'yes', 'on')


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; defaults come from the environment."""
    parser = argparse.ArgumentParser(
        prog='shop-schedule',
        description='Generate iCalendar files from a shop schedule page'
    )
    parser.add_argument(
        '--log-level', default=os.environ.get('LOG_LEVEL', 'INFO'),
        help='Logging level (default: $LOG_LEVEL or INFO)'
    )
    parser.add_argument(
        '--json-logs', action='store_true', default=_env_flag('JSON_LOGS'),
        help='Emit structured JSON log records'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    generate_parser = subparsers.add_parser(
        'generate', help='Generate iCalendar files for the shop schedule'
    )
    generate_parser.add_argument('url', metavar='URL', help='Schedule index page URL')
    generate_parser.add_argument(
        '--output-dir', default=os.environ.get('OUTPUT_DIR', '.'),
        help='Directory for the .ics files (default: $OUTPUT_DIR or CWD)'
    )
    generate_parser.add_argument(
        '--timeout', type=int, default=int(os.environ.get('TIMEOUT_SECONDS', '30')),
        help='HTTP timeout in seconds (default: $TIMEOUT_SECONDS or 30)'
    )
    generate_parser.add_argument(
        '--duration-minutes', type=int,
        default=int(os.environ.get('EVENT_DURATION_MINUTES', '60')),
        help='Length of each event in minutes (default: $EVENT_DURATION_MINUTES or 60)'
    )
    generate_parser.add_argument(
        '--fail-fast', action='store_true', default=_env_flag('FAIL_FAST'),
        help='Abort the whole run on the first venue failure'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line interface.

    Returns:
        0 on success, 1 if the run aborted or any venue failed
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        validate_url(args.url)
    except InvalidURLError as e:
        parser.error(str(e))

    setup_logging(args.log_level, args.json_logs)
    start_time = time.time()
    logger.info(
        f"Generating calendars from {args.url}",
        extra={'output_dir': args.output_dir, 'fail_fast': args.fail_fast}
    )

    try:
        summary = generate(
            args.url,
            fetcher=PageFetcher(timeout=args.timeout),
            writer=CalendarWriter(output_dir=args.output_dir),
            venue_extractor=VenuePageExtractor(
                duration=timedelta(minutes=args.duration_minutes)
            ),
            fail_fast=args.fail_fast
        )
    except ScheduleScrapeError as e:
        logger.error(
            f"Generation aborted: {e}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return 1

    duration = time.time() - start_time
    logger.info(
        f"Finished '{summary.event_title}' in {duration:.2f}s: "
        f"{len(summary.written)} written, {len(summary.empty)} empty, "
        f"{len(summary.failed)} failed"
    )
    for result in summary.failed:
        logger.error(f"{result.title} ({result.url}): {result.error}")

    return 0 if summary.ok else 1


if __name__ == '__main__':
    sys.exit(main())
