from datetime import date, datetime, time, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from icalendar import Calendar

from ..availability import BookedInterval
from ..errors import CalendarFetchError


def _to_local_naive(value, zone: ZoneInfo) -> datetime:
    """Turn an iCal DATE or DATE-TIME into a naive datetime in ``zone``."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(zone).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise ValueError(f"Unsupported date value: {value!r}")


def _event_end(event, start_value) -> Optional[object]:
    if event.get("DTEND") is not None:
        return event.decoded("DTEND")
    if event.get("DURATION") is not None:
        return start_value + event.decoded("DURATION")
    # RFC 5545: an all-day event without DTEND lasts one day
    if not isinstance(start_value, datetime):
        return start_value + timedelta(days=1)
    return None


def parse_bookings(ics_data: bytes, timezone_name: str) -> List[BookedInterval]:
    """Parse every VEVENT of the feed into a booked interval."""
    try:
        calendar = Calendar.from_ical(ics_data)
    except ValueError as e:
        raise CalendarFetchError(f"Malformed calendar feed: {e}") from e

    zone = ZoneInfo(timezone_name)
    bookings: List[BookedInterval] = []
    skipped = 0

    for event in calendar.walk("VEVENT"):
        if event.get("DTSTART") is None:
            skipped += 1
            continue
        try:
            start_value = event.decoded("DTSTART")
            end_value = _event_end(event, start_value)
            if end_value is None:
                skipped += 1
                continue
            start = _to_local_naive(start_value, zone)
            end = _to_local_naive(end_value, zone)
        except (KeyError, TypeError, ValueError) as e:
            raise CalendarFetchError(f"Malformed event {event.get('UID')}: {e}") from e

        if end <= start:
            skipped += 1
            continue
        bookings.append(BookedInterval(start=start, end=end))

    if skipped:
        print(f"[CALENDAR] Skipped {skipped} events without a usable span")
    bookings.sort(key=lambda b: b.start)
    return bookings
