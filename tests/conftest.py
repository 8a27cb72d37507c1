from datetime import date, datetime

import pytest

from availability_api.availability import BookedInterval
from availability_api.pricing import PriceBand

# A Monday, so "this weekend" is Saturday 10 January
TODAY = date(2026, 1, 5)


def booking(start: str, end: str) -> BookedInterval:
    return BookedInterval(start=datetime.fromisoformat(start), end=datetime.fromisoformat(end))


def band(start: str, end: str, price: float) -> PriceBand:
    return PriceBand(start=date.fromisoformat(start), end=date.fromisoformat(end), price=price)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def july_booked():
    """Week of Saturday 4 July 2026 is taken."""
    return [booking("2026-07-04", "2026-07-11")]


@pytest.fixture
def summer_bands():
    return [
        band("2026-06-01", "2026-07-04", 1150),
        band("2026-07-04", "2026-09-05", 1500),
    ]
