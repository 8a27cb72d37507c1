"""
Unit tests for the calendar feed: download, iCal parsing and the booking cache.
"""
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
import requests

from availability_api import config
from availability_api.errors import CalendarFetchError
from availability_api.feeds import bookings
from availability_api.feeds.client import fetch_calendar
from availability_api.feeds.ical_parser import parse_bookings

from .conftest import booking

FEED = b"""BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Test//Bookings//EN
BEGIN:VEVENT
UID:all-day@test
DTSTAMP:20260101T000000Z
DTSTART;VALUE=DATE:20260704
DTEND;VALUE=DATE:20260711
SUMMARY:Booked
END:VEVENT
BEGIN:VEVENT
UID:timed@test
DTSTAMP:20260101T000000Z
DTSTART:20260801T150000Z
DTEND:20260808T090000Z
SUMMARY:Booked
END:VEVENT
BEGIN:VEVENT
UID:single-day@test
DTSTAMP:20260101T000000Z
DTSTART;VALUE=DATE:20260620
SUMMARY:Owner day
END:VEVENT
END:VCALENDAR
""".replace(b"\n", b"\r\n")


class TestParseBookings:
    """Tests for parse_bookings."""

    def test_parses_events_in_start_order(self):
        intervals = parse_bookings(FEED, "Europe/London")
        assert [i.start for i in intervals] == [
            datetime(2026, 6, 20),
            datetime(2026, 7, 4),
            datetime(2026, 8, 1, 16, 0),
        ]

    def test_all_day_event_spans_midnights(self):
        intervals = parse_bookings(FEED, "Europe/London")
        assert booking("2026-07-04", "2026-07-11") in intervals

    def test_utc_times_convert_to_local(self):
        intervals = parse_bookings(FEED, "Europe/London")
        timed = intervals[-1]
        # BST is UTC+1 in August
        assert timed.end == datetime(2026, 8, 8, 10, 0)
        assert timed.start.tzinfo is None

    def test_missing_dtend_on_all_day_event_lasts_one_day(self):
        intervals = parse_bookings(FEED, "Europe/London")
        assert intervals[0] == booking("2026-06-20", "2026-06-21")

    def test_empty_calendar(self):
        feed = b"BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//Test//EN\r\nEND:VCALENDAR\r\n"
        assert parse_bookings(feed, "Europe/London") == []

    def test_garbage_raises(self):
        with pytest.raises(CalendarFetchError):
            parse_bookings(b"<html>maintenance</html>", "Europe/London")


class TestFetchCalendar:
    """Tests for fetch_calendar."""

    @patch("availability_api.feeds.client.requests.get")
    def test_returns_body(self, mock_get):
        response = MagicMock()
        response.content = FEED
        mock_get.return_value = response

        assert fetch_calendar("https://example.test/cal.ics", 5) == FEED
        mock_get.assert_called_once()
        assert mock_get.call_args.kwargs["timeout"] == 5

    @patch("availability_api.feeds.client.requests.get")
    def test_network_error_is_wrapped(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("down")
        with pytest.raises(CalendarFetchError, match="down"):
            fetch_calendar("https://example.test/cal.ics", 5)

    @patch("availability_api.feeds.client.requests.get")
    def test_http_error_is_wrapped(self, mock_get):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        mock_get.return_value = response
        with pytest.raises(CalendarFetchError):
            fetch_calendar("https://example.test/cal.ics", 5)

    def test_missing_url(self):
        with pytest.raises(CalendarFetchError):
            fetch_calendar("", 5)


class TestLoadBookings:
    """Tests for the optional booking cache."""

    @pytest.fixture(autouse=True)
    def clear_cache(self):
        bookings.refresh_bookings()
        yield
        bookings.refresh_bookings()

    @patch("availability_api.feeds.bookings.fetch_calendar", return_value=FEED)
    def test_fetches_every_time_without_cache(self, mock_fetch, monkeypatch):
        monkeypatch.setattr(config, "CALENDAR_CACHE_SECONDS", 0)
        bookings.load_bookings()
        bookings.load_bookings()
        assert mock_fetch.call_count == 2

    @patch("availability_api.feeds.bookings.fetch_calendar", return_value=FEED)
    def test_cache_reuses_result_until_refresh(self, mock_fetch, monkeypatch):
        monkeypatch.setattr(config, "CALENDAR_CACHE_SECONDS", 300)
        first = bookings.load_bookings()
        second = bookings.load_bookings()
        assert first == second
        assert mock_fetch.call_count == 1

        assert bookings.refresh_bookings() is True
        bookings.load_bookings()
        assert mock_fetch.call_count == 2

    @patch("availability_api.feeds.bookings.fetch_calendar")
    def test_failures_are_not_cached(self, mock_fetch, monkeypatch):
        monkeypatch.setattr(config, "CALENDAR_CACHE_SECONDS", 300)
        mock_fetch.side_effect = [CalendarFetchError("timeout"), FEED]
        with pytest.raises(CalendarFetchError):
            bookings.load_bookings()
        assert len(bookings.load_bookings()) == 3
