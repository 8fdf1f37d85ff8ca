"""Unit tests for VenuePageExtractor and the capture state machine."""
from datetime import datetime, timedelta

import pytest
from bs4 import BeautifulSoup

from processor.errors import (
    MissingAddress,
    MissingShopName,
    PatternNotFound,
    UnexpectedTableShape,
    UnrecognizableSchedule,
)
from processor.schedule_pattern import JST
from scraper.venue_page import CaptureState, VenuePageExtractor, select_captured

VENUE_URL = "https://example.com/scout/shop/shibuya.html"


def parse(html):
    return BeautifulSoup(html, "html.parser")


def nodes(*names):
    html = "".join("<hr>" if name == "hr" else f"<{name}></{name}>" for name in names)
    return parse(html).find_all(True)


class TestCaptureState:
    """Test cases for the two-state capture machine."""

    def test_first_strong_captured(self):
        """Test that READY captures and moves to CAPTURED."""
        assert CaptureState.READY.accept("strong") == (CaptureState.CAPTURED, True)

    def test_repeated_strong_ignored(self):
        """Test that CAPTURED ignores further strong nodes."""
        assert CaptureState.CAPTURED.accept("strong") == (CaptureState.CAPTURED, False)

    @pytest.mark.parametrize("state", list(CaptureState))
    def test_separator_resets(self, state):
        """Test that hr always returns to READY without capturing."""
        assert state.accept("hr") == (CaptureState.READY, False)

    def test_select_captured_sequence(self):
        """Test strong, strong, hr, strong yields the first and third strong."""
        sequence = nodes("strong", "strong", "hr", "strong")

        captured = select_captured(sequence)

        assert captured == [sequence[0], sequence[3]]

    def test_select_captured_leading_and_double_separators(self):
        """Test that separators without strong nodes produce nothing."""
        sequence = nodes("hr", "hr", "strong", "hr", "hr")

        assert select_captured(sequence) == [sequence[2]]

    def test_select_captured_empty(self):
        assert select_captured([]) == []


class TestVenuePageExtractor:
    """Test cases for VenuePageExtractor class."""

    def test_extract_single_entry(self, venue_page, venue_table):
        """Test extraction of one entry with trimmed name and address."""
        html = venue_page(venue_table())

        entries = VenuePageExtractor().extract(parse(html), VENUE_URL)

        assert len(entries) == 1
        entry = entries[0]
        assert entry.shop_name == "渋谷店"
        assert entry.address == "東京都渋谷区道玄坂1-2-3"
        assert entry.start_time == datetime(2024, 3, 15, 18, 30, tzinfo=JST)
        assert entry.end_time == datetime(2024, 3, 15, 19, 30, tzinfo=JST)

    def test_duplicate_label_suppressed(self, venue_page, venue_table):
        """Test strong, strong, hr, strong yields two entries, not three."""
        html = venue_page(venue_table(schedule_nodes=[
            "2024年3月15日(金) /18:30～",
            "ライブ配信あり",
            "hr",
            "2024年3月16日(土) /13:00～",
        ]))

        entries = VenuePageExtractor().extract(parse(html), VENUE_URL)

        assert [entry.start_time for entry in entries] == [
            datetime(2024, 3, 15, 18, 30, tzinfo=JST),
            datetime(2024, 3, 16, 13, 0, tzinfo=JST),
        ]

    def test_multiple_tables_in_order(self, venue_page, venue_table):
        """Test that every matching table is processed in document order."""
        html = venue_page(
            venue_table(shop_name="A店", schedule_nodes=["2024年4月1日 /10:00～"]),
            venue_table(shop_name="B店", schedule_nodes=["2024年4月2日 /11:00～"]),
        )

        entries = VenuePageExtractor().extract(parse(html), VENUE_URL)

        assert [entry.shop_name for entry in entries] == ["A店", "B店"]

    def test_tbody_wrapped_rows(self, venue_page, venue_table):
        """Test that rows inside tbody are counted."""
        html = venue_page(venue_table(tbody=True))

        entries = VenuePageExtractor().extract(parse(html), VENUE_URL)

        assert len(entries) == 1

    def test_tables_without_cellpadding_ignored(self, venue_page, venue_table):
        """Test that result-list tables without cellpadding are skipped."""
        html = venue_page(venue_table(row_count=2).replace(' cellpadding="0"', ""))

        assert VenuePageExtractor().extract(parse(html), VENUE_URL) == []

    def test_no_tables(self, venue_page):
        """Test that a page without tables yields no entries."""
        assert VenuePageExtractor().extract(parse(venue_page()), VENUE_URL) == []

    def test_table_without_schedule_nodes(self, venue_page, venue_table):
        """Test that a table with an empty schedule row yields no entries."""
        html = venue_page(venue_table(schedule_nodes=[]))

        assert VenuePageExtractor().extract(parse(html), VENUE_URL) == []

    @pytest.mark.parametrize("row_count", [2, 4])
    def test_unexpected_row_count(self, venue_page, venue_table, row_count):
        """Test that tables with other than three rows fail."""
        html = venue_page(venue_table(row_count=row_count))

        with pytest.raises(UnexpectedTableShape) as exc_info:
            VenuePageExtractor().extract(parse(html), VENUE_URL)

        assert exc_info.value.row_count == row_count
        assert exc_info.value.venue_url == VENUE_URL

    def test_missing_shop_name(self, venue_page, venue_table):
        html = venue_page(venue_table().replace('class="shopname"', 'class="name"'))

        with pytest.raises(MissingShopName):
            VenuePageExtractor().extract(parse(html), VENUE_URL)

    def test_missing_address(self, venue_page, venue_table):
        html = venue_page(venue_table().replace(
            '<div class="list-adtext-detitext">\n', '<div class="other">\n'
        ))

        with pytest.raises(MissingAddress) as exc_info:
            VenuePageExtractor().extract(parse(html), VENUE_URL)

        assert exc_info.value.shop_name == "渋谷店"

    def test_unrecognizable_schedule(self, venue_page, venue_table):
        """Test that a captured description without a date fails with context."""
        html = venue_page(venue_table(schedule_nodes=["近日公開"]))

        with pytest.raises(UnrecognizableSchedule) as exc_info:
            VenuePageExtractor().extract(parse(html), VENUE_URL)

        assert isinstance(exc_info.value, PatternNotFound)
        assert exc_info.value.text == "近日公開"
        assert exc_info.value.shop_name == "渋谷店"
        assert exc_info.value.venue_url == VENUE_URL

    def test_suppressed_label_not_parsed(self, venue_page, venue_table):
        """Test that a suppressed duplicate label may contain any text."""
        html = venue_page(venue_table(schedule_nodes=[
            "2024年3月15日 /18:30～", "no date here",
        ]))

        entries = VenuePageExtractor().extract(parse(html), VENUE_URL)

        assert len(entries) == 1

    def test_custom_duration(self, venue_page, venue_table):
        """Test that the event length is configurable."""
        extractor = VenuePageExtractor(duration=timedelta(minutes=90))

        entries = extractor.extract(parse(venue_page(venue_table())), VENUE_URL)

        assert entries[0].end_time == datetime(2024, 3, 15, 20, 0, tzinfo=JST)
