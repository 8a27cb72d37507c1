from datetime import date, timedelta
from typing import Callable, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from .availability import BookedInterval, iter_weeks_between, parse_date
from .errors import AvailabilityError
from .feeds.bookings import load_bookings, refresh_bookings
from .intents import LEGACY_RANGE, ExactRange, InvalidQuery, QueryIntent, SingleDate, VagueRange
from .models import CheckRequest, CheckResponse, WeekResult
from .pricing import PriceBand
from .query_parser import interpret_query
from .responses import ResponseComposer, invalid_response

BookingLoader = Callable[[], List[BookedInterval]]

# Longest window the operator week listing will walk
MAX_LISTING_DAYS = 366

router = APIRouter()


def get_price_table(request: Request) -> List[PriceBand]:
    return getattr(request.app.state, "price_table", [])


def get_booking_loader() -> BookingLoader:
    return load_bookings


def get_today() -> date:
    return date.today()


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_input_date(value: str, field: str) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{field} must be YYYY-MM-DD")


def intent_from_request(body: CheckRequest, today: date) -> Tuple[QueryIntent, Optional[str]]:
    """Build the intent from free text, or from the structured payload older callers send."""
    if body.query is not None:
        return interpret_query(body.query, today), body.query

    day = _blank_to_none(body.date)
    start_raw = _blank_to_none(body.start_date)
    end_raw = _blank_to_none(body.end_date)
    vague = body.vague is True or (isinstance(body.vague, str) and body.vague.strip().lower() == "true")

    if day:
        return SingleDate(_parse_input_date(day, "date")), None

    if start_raw and end_raw:
        start = _parse_input_date(start_raw, "start_date")
        end = _parse_input_date(end_raw, "end_date")
        if end <= start:
            raise HTTPException(status_code=400, detail="end_date must be after start_date")
        if vague:
            return VagueRange(start=start, end=end, label=LEGACY_RANGE), None
        return ExactRange(start=start, end=end), None

    raise HTTPException(
        status_code=400,
        detail="Invalid request. Provide query, or date, or start_date + end_date.",
    )


def resolve_intent(
    intent: QueryIntent,
    query: Optional[str],
    bands: List[PriceBand],
    booking_loader: BookingLoader,
) -> CheckResponse:
    if isinstance(intent, InvalidQuery):
        print(f"[CHECK] Could not interpret {query!r}: {intent.reason}")
        return invalid_response(intent, query)

    try:
        intervals = booking_loader()
    except AvailabilityError as e:
        print(f"[CHECK] ERROR: {e}")
        raise HTTPException(status_code=500, detail="Server error")

    print(f"[CHECK] Resolving {intent} against {len(intervals)} bookings")
    return ResponseComposer(intervals, bands).compose(intent, query)


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/refresh")
async def refresh():
    cleared = refresh_bookings()
    return {"status": "refreshed", "cleared": cleared}


@router.post("/check", response_model=CheckResponse)
def check(
    body: CheckRequest,
    bands: List[PriceBand] = Depends(get_price_table),
    booking_loader: BookingLoader = Depends(get_booking_loader),
    today: date = Depends(get_today),
):
    intent, query = intent_from_request(body, today)
    return resolve_intent(intent, query, bands, booking_loader)


@router.get("/check", response_model=CheckResponse)
def check_text(
    q: Optional[str] = Query(None, description="Free-text question"),
    bands: List[PriceBand] = Depends(get_price_table),
    booking_loader: BookingLoader = Depends(get_booking_loader),
    today: date = Depends(get_today),
):
    if q is None:
        raise HTTPException(status_code=400, detail="Query parameter q is required")
    return resolve_intent(interpret_query(q, today), q, bands, booking_loader)


@router.get("/weeks", response_model=List[WeekResult])
def weeks(
    start: str = Query(..., description="YYYY-MM-DD"),
    end: str = Query(..., description="YYYY-MM-DD (exclusive)"),
    bands: List[PriceBand] = Depends(get_price_table),
    booking_loader: BookingLoader = Depends(get_booking_loader),
):
    start_day = _parse_input_date(start, "start")
    end_day = _parse_input_date(end, "end")
    if end_day <= start_day:
        raise HTTPException(status_code=400, detail="end must be after start")
    if end_day - start_day > timedelta(days=MAX_LISTING_DAYS):
        raise HTTPException(status_code=400, detail=f"Window is limited to {MAX_LISTING_DAYS} days")

    try:
        intervals = booking_loader()
    except AvailabilityError as e:
        print(f"[WEEKS] ERROR: {e}")
        raise HTTPException(status_code=500, detail="Server error")

    results = [WeekResult(**w.as_dict()) for w in iter_weeks_between(start_day, end_day, intervals, bands)]
    print(f"[WEEKS] Returning {len(results)} weeks")
    return results
