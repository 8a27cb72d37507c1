from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterator, List, Optional, Sequence

from .pricing import PriceBand, price_for_date

# Bookings are compared at midday so midnight rounding never shifts a day
MIDDAY = time(12, 0)
WEEK_LENGTH = timedelta(days=7)


@dataclass(frozen=True)
class BookedInterval:
    """One occupied block from the calendar feed, half-open [start, end)."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class Week:
    """A canonical Saturday-to-Saturday span with its occupancy and price."""

    start: date
    end: date
    booked: bool
    price: Optional[float]

    @property
    def bookable(self) -> bool:
        # A week without a price is not offered yet, even when it is free
        return not self.booked and self.price is not None

    def as_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "booked": self.booked,
            "price": self.price,
        }


def parse_date(date_str: str) -> date:
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def is_date_booked(day: date, intervals: Sequence[BookedInterval]) -> bool:
    moment = datetime.combine(day, MIDDAY)
    return any(b.start <= moment < b.end for b in intervals)


def iter_days(range_start: date, range_end: date) -> Iterator[date]:
    """Yield every calendar day in [range_start, range_end)."""
    day = range_start
    while day < range_end:
        yield day
        day = day + timedelta(days=1)


def is_range_booked(range_start: date, range_end: date, intervals: Sequence[BookedInterval]) -> bool:
    """True if any day in [range_start, range_end) is booked.

    Scans day by day so the answer always agrees with is_date_booked.
    """
    return any(is_date_booked(day, intervals) for day in iter_days(range_start, range_end))


def snap_to_week_start(day: date) -> date:
    """Return the latest Saturday on or before ``day``."""
    # date.weekday() is Monday=0; convert to Sunday=0 ... Saturday=6
    sunday_based = (day.weekday() + 1) % 7
    return day - timedelta(days=(sunday_based + 1) % 7)


def iter_week_starts(from_date: date) -> Iterator[date]:
    """Yield consecutive Saturdays starting from the week containing ``from_date``."""
    week_start = snap_to_week_start(from_date)
    while True:
        yield week_start
        week_start = week_start + WEEK_LENGTH


def week_info(week_start: date, intervals: Sequence[BookedInterval], bands: Sequence[PriceBand]) -> Week:
    start = snap_to_week_start(week_start)
    end = start + WEEK_LENGTH
    return Week(
        start=start,
        end=end,
        booked=is_range_booked(start, end, intervals),
        price=price_for_date(start, bands),
    )


def next_available_week(
    from_date: date,
    intervals: Sequence[BookedInterval],
    bands: Sequence[PriceBand],
    max_lookahead: int = 8,
) -> Optional[Week]:
    """First bookable week at or after the week containing ``from_date``.

    Looks at most ``max_lookahead`` weeks ahead and returns None when every one
    of them is booked or unpriced.
    """
    starts = iter_week_starts(from_date)
    for _ in range(max_lookahead):
        week = week_info(next(starts), intervals, bands)
        if week.bookable:
            return week
    return None


def iter_weeks_between(
    range_start: date,
    range_end: date,
    intervals: Sequence[BookedInterval],
    bands: Sequence[PriceBand],
) -> Iterator[Week]:
    """Yield every week whose start lies in [snap(range_start), range_end)."""
    for week_start in iter_week_starts(range_start):
        if week_start >= range_end:
            return
        yield week_info(week_start, intervals, bands)


def available_weeks_between(
    range_start: date,
    range_end: date,
    intervals: Sequence[BookedInterval],
    bands: Sequence[PriceBand],
) -> List[Week]:
    """All bookable weeks in the window, in chronological order."""
    return [w for w in iter_weeks_between(range_start, range_end, intervals, bands) if w.bookable]
