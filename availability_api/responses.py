from datetime import date
from typing import List, Optional, Sequence

from . import config
from .availability import (
    BookedInterval,
    Week,
    available_weeks_between,
    is_range_booked,
    next_available_week,
    week_info,
)
from .intents import HOLIDAY, MONTH, SEASON, WEEK, ExactRange, InvalidQuery, QueryIntent, SingleDate, VagueRange
from .models import INVALID, RANGE, SINGLE, VAGUE_RANGE, CheckResponse, WeekResult
from .pricing import PriceBand

INVALID_MESSAGE = (
    "Sorry, I couldn't work out the dates from that. Try something like "
    "\"4 July 2026\", \"10-17 Aug 2026\" or \"anything in July 2026\", "
    "or check the calendar on our website."
)


def format_day(day: date) -> str:
    """Guest-facing date, e.g. 'Sat, 27 Jun 2026'."""
    return day.strftime("%a, %d %b %Y")


def format_price(price: float, currency: str) -> str:
    if float(price).is_integer():
        return f"{currency}{int(price):,}"
    return f"{currency}{price:,.2f}"


def _week_result(week: Optional[Week]) -> Optional[WeekResult]:
    if week is None:
        return None
    return WeekResult(**week.as_dict())


def _window_phrase(intent: VagueRange) -> str:
    if intent.label in (MONTH, SEASON):
        return f"in {intent.name}"
    if intent.label == HOLIDAY:
        return f"over {intent.name}"
    if intent.label == WEEK:
        return f"for {intent.name}"
    return f"between {format_day(intent.start)} and {format_day(intent.end)}"


def _no_availability(from_day: date, max_lookahead: int) -> str:
    return (
        f"Sorry, there are no available weeks in the {max_lookahead} weeks from "
        f"{format_day(from_day)}. Please check the calendar or get in touch."
    )


class ResponseComposer:
    """Resolves intents against the bookings and price table and phrases the outcome."""

    def __init__(
        self,
        intervals: Sequence[BookedInterval],
        bands: Sequence[PriceBand],
        max_lookahead: int = config.LOOKAHEAD_WEEKS,
        preview_size: int = config.PREVIEW_WEEKS,
        currency: str = config.CURRENCY_SYMBOL,
    ):
        self.intervals = intervals
        self.bands = bands
        self.max_lookahead = max_lookahead
        self.preview_size = preview_size
        self.currency = currency

    def compose(self, intent: QueryIntent, query: Optional[str] = None) -> CheckResponse:
        if isinstance(intent, SingleDate):
            return self.single(intent, query)
        if isinstance(intent, ExactRange):
            return self.exact_range(intent, query)
        if isinstance(intent, VagueRange):
            return self.vague_range(intent, query)
        return invalid_response(intent, query)

    def _price(self, week: Week) -> str:
        return format_price(week.price, self.currency)

    def single(self, intent: SingleDate, query: Optional[str]) -> CheckResponse:
        requested = week_info(intent.date, self.intervals, self.bands)
        found = next_available_week(intent.date, self.intervals, self.bands, self.max_lookahead)
        exact = found is not None and found.start == requested.start and not found.booked

        if found is None:
            message = _no_availability(requested.start, self.max_lookahead)
        elif exact:
            message = (
                f"Great news, the week starting {format_day(found.start)} is available "
                f"for {self._price(found)}. Short stays on request."
            )
        else:
            message = (
                f"Sorry, the week starting {format_day(requested.start)} isn't available. "
                f"The nearest available week starts {format_day(found.start)} at {self._price(found)}."
            )

        return CheckResponse(
            mode=SINGLE,
            query=query,
            date=intent.date.isoformat(),
            requested_week=_week_result(requested),
            week=_week_result(found),
            exact_match=exact,
            alternative=None if exact else _week_result(found),
            booked=requested.booked,
            price=requested.price,
            message=message,
        )

    def exact_range(self, intent: ExactRange, query: Optional[str]) -> CheckResponse:
        requested = week_info(intent.start, self.intervals, self.bands)
        range_booked = is_range_booked(intent.start, intent.end, self.intervals)
        alternative = None

        if requested.bookable:
            week = requested
            message = (
                f"Great news, the week starting {format_day(requested.start)} is available "
                f"for {self._price(requested)}."
            )
        else:
            alternative = next_available_week(intent.start, self.intervals, self.bands, self.max_lookahead)
            week = alternative
            if alternative is None:
                message = _no_availability(requested.start, self.max_lookahead)
            else:
                message = (
                    f"Sorry, the week starting {format_day(requested.start)} isn't available. "
                    f"The nearest available week starts {format_day(alternative.start)} "
                    f"at {self._price(alternative)}."
                )

        return CheckResponse(
            mode=RANGE,
            query=query,
            start_date=intent.start.isoformat(),
            end_date=intent.end.isoformat(),
            requested_week=_week_result(requested),
            week=_week_result(week),
            exact_match=requested.bookable,
            alternative=_week_result(alternative),
            range_booked=range_booked,
            booked=requested.booked,
            price=requested.price,
            message=message,
        )

    def vague_range(self, intent: VagueRange, query: Optional[str]) -> CheckResponse:
        weeks = available_weeks_between(intent.start, intent.end, self.intervals, self.bands)
        preview = weeks[: self.preview_size]
        phrase = _window_phrase(intent)

        if not weeks:
            message = f"Sorry, there are no available Saturday-to-Saturday weeks {phrase}."
        else:
            listed = ", ".join(f"{format_day(w.start)} ({self._price(w)})" for w in preview)
            message = f"Here are the available Saturday-to-Saturday weeks {phrase}: {listed}"
            if len(weeks) > len(preview):
                message += f", plus {len(weeks) - len(preview)} more"
            message += "."

        results: List[WeekResult] = [_week_result(w) for w in weeks]
        return CheckResponse(
            mode=VAGUE_RANGE,
            query=query,
            start_date=intent.start.isoformat(),
            end_date=intent.end.isoformat(),
            label=intent.label,
            name=intent.name or None,
            available_weeks=results,
            preview=results[: self.preview_size],
            message=message,
        )


def invalid_response(intent: InvalidQuery, query: Optional[str] = None) -> CheckResponse:
    return CheckResponse(mode=INVALID, query=query, message=INVALID_MESSAGE)
