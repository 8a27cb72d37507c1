import threading
import time
from typing import List, Optional, Tuple

from .. import config
from ..availability import BookedInterval
from .client import fetch_calendar
from .ical_parser import parse_bookings

# (fetched_at, bookings) from the last successful fetch, only used when caching is on
_cache: Optional[Tuple[float, List[BookedInterval]]] = None
_cache_lock = threading.Lock()


def _fetch_and_parse() -> List[BookedInterval]:
    print(f"[CALENDAR] Fetching {config.ICAL_URL}")
    raw = fetch_calendar(config.ICAL_URL, config.FETCH_TIMEOUT_SECONDS)
    bookings = parse_bookings(raw, config.CALENDAR_TIMEZONE)
    print(f"[CALENDAR] Got {len(bookings)} booked intervals")
    return bookings


def load_bookings() -> List[BookedInterval]:
    """Current booked intervals, refetched unless a fresh cached copy exists.

    Raises CalendarFetchError when the feed cannot be read.
    """
    global _cache
    ttl = config.CALENDAR_CACHE_SECONDS
    if ttl <= 0:
        return _fetch_and_parse()

    with _cache_lock:
        if _cache is not None and time.monotonic() - _cache[0] < ttl:
            return _cache[1]
        bookings = _fetch_and_parse()
        _cache = (time.monotonic(), bookings)
        return bookings


def refresh_bookings() -> bool:
    """Drop any cached bookings so the next request refetches the feed."""
    global _cache
    with _cache_lock:
        had_cache = _cache is not None
        _cache = None
    return had_cache
