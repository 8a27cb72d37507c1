"""Turn free-text date questions into query intents.

Recognizers run in a fixed order and the first one that returns an intent
wins. Weekend phrases beat seasons, seasons beat holidays, and all three beat
the general date parser, so "summer 10-17 July 2026" is a season query.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Tuple

from dateutil import parser as date_parser
from dateutil.easter import easter
from dateutil.relativedelta import relativedelta

from .intents import (
    HOLIDAY,
    MONTH,
    SEASON,
    WEEK,
    ExactRange,
    InvalidQuery,
    QueryIntent,
    SingleDate,
    VagueRange,
)

MONTH_PATTERN = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)
WEEKDAY_PATTERN = (
    r"mon(?:day)?|tue(?:s(?:day)?)?|wed(?:nesday)?|thu(?:r(?:s(?:day)?)?)?"
    r"|fri(?:day)?|sat(?:urday)?|sun(?:day)?"
)
ORDINAL = r"(?:st|nd|rd|th)?"
YEAR_PATTERN = r"(?:19|20)\d{2}"

YEAR_RE = re.compile(rf"\b({YEAR_PATTERN})\b")
WEEKDAY_RE = re.compile(rf"\b(?:{WEEKDAY_PATTERN})\b")
ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")

# Date fragments inside a longer message, so guest and night counts are ignored
DAY_MONTH_RE = re.compile(rf"\b\d{{1,2}}{ORDINAL}\s+(?:of\s+)?(?:{MONTH_PATTERN})\b(?:\s*,?\s*{YEAR_PATTERN}\b)?")
MONTH_DAY_RE = re.compile(rf"\b(?:{MONTH_PATTERN})\s+\d{{1,2}}{ORDINAL}\b(?:\s*,?\s*{YEAR_PATTERN}\b)?")
NUMERIC_DATE_RE = re.compile(r"\b\d{1,2}/\d{1,2}(?:/(?:\d{4}|\d{2}))?\b")
MONTH_YEAR_RE = re.compile(rf"\b(?:{MONTH_PATTERN})\b(?:\s*,?\s*{YEAR_PATTERN}\b)?")
DATE_FRAGMENTS = (DAY_MONTH_RE, MONTH_DAY_RE, NUMERIC_DATE_RE, MONTH_YEAR_RE)
# Something on a range end that can only be a date
DATE_ANCHOR_RE = re.compile(rf"\b(?:{MONTH_PATTERN}|{WEEKDAY_PATTERN})\b|\b\d{{4}}-\d{{2}}-\d{{2}}\b|\b\d{{1,2}}/\d{{1,2}}\b")

WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

WEEKEND_RE = re.compile(r"\b(?:(this|next|coming)\s+)?weekend\b(?:\s+(?:of|on|starting|in)\s+(.+))?")
SEASON_RE = re.compile(r"\b(next\s+)?(spring|summer|autumn|fall|winter)\b")

# "10-17 aug 2026", "10th to 17th of august"
DAY_SPAN_RE = re.compile(
    rf"\b(\d{{1,2}}){ORDINAL}\s*(?:-|to|until|till)\s*(\d{{1,2}}){ORDINAL}\s+(?:of\s+)?({MONTH_PATTERN})\b"
    rf"(?:\s*,?\s*({YEAR_PATTERN})\b)?"
)
# "aug 10-17 2026"
MONTH_SPAN_RE = re.compile(
    rf"\b({MONTH_PATTERN})\s+(\d{{1,2}}){ORDINAL}\s*(?:-|to|until|till)\s*(\d{{1,2}}){ORDINAL}\b"
    rf"(?:\s*,?\s*({YEAR_PATTERN})\b)?"
)
# "from 3 july to 10 july", "between 2026-07-03 and 2026-07-10"
TWO_SIDED_RE = re.compile(
    r"^(?:.*?\b(?:from|between)\s+)?(?P<left>.+?)\s+(?:-|to|until|till|through|and)\s+(?P<right>.+)$"
)

NUMBER_WORDS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}
RELATIVE_OFFSET_RE = re.compile(
    r"\bin\s+(\d+|" + "|".join(NUMBER_WORDS) + r")\s+(day|week|month)s?\b"
)

VAGUE_MONTH_RE = re.compile(rf"\banything in\b|\bany\b|\bsometime\b|\bthroughout\b|\bin\s+(?:{MONTH_PATTERN})\b")
VAGUE_WEEK_RE = re.compile(r"\bnext week\b|\bthat week\b|\bfor a week\b|\bweek in\b")

# Defaults for the two-pass dateutil parse; both are leap years with 31-day months
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2004, 3, 2))

SEASON_START_MONTH = {"spring": 3, "summer": 6, "autumn": 9, "winter": 12}

DAY = "day"

Recognizer = Callable[[str, date], Optional[QueryIntent]]


@dataclass(frozen=True)
class DatePhrase:
    """A date pulled out of text plus how precisely it was stated."""

    value: date
    granularity: str  # DAY or MONTH
    year_given: bool


def normalise_query(text: Optional[str]) -> str:
    cleaned = (text or "").lower()
    cleaned = cleaned.replace("–", "-").replace("—", "-")
    return re.sub(r"\s+", " ", cleaned).strip()


def explicit_year(text: str) -> Optional[int]:
    m = YEAR_RE.search(text)
    return int(m.group(1)) if m else None


def month_start(day: date) -> date:
    return day.replace(day=1)


def next_month_start(day: date) -> date:
    return month_start(day) + relativedelta(months=1)


def _safe_date(year: int, month: int, day: int) -> date:
    """Build a date, clamping the day to the end of a short month."""
    while day > 28:
        try:
            return date(year, month, day)
        except ValueError:
            day -= 1
    return date(year, month, day)


def _with_year(day: date, year: int) -> date:
    return _safe_date(year, day.month, day.day)


def _next_window(window: Callable[[int], Tuple[date, date]], today: date, year: Optional[int], upcoming_only: bool = False) -> Tuple[date, date]:
    """Pick the window for an explicit year, else the next one that is still relevant.

    ``upcoming_only`` skips a window that has already started.
    """
    if year is not None:
        return window(year)
    for candidate in (today.year - 1, today.year, today.year + 1, today.year + 2):
        start, end = window(candidate)
        if upcoming_only and start > today:
            return start, end
        if not upcoming_only and end > today:
            return start, end
    return window(today.year + 1)


# ---------------------------------------------------------------------------
# Weekends


def weekend_saturday(day: date) -> date:
    """Saturday of the weekend on or after ``day``; a Sunday maps to the day before."""
    weekday = day.weekday()
    if weekday == 6:
        return day - timedelta(days=1)
    return day + timedelta(days=5 - weekday)


def recognize_weekend(text: str, today: date) -> Optional[QueryIntent]:
    m = WEEKEND_RE.search(text)
    if not m:
        return None

    qualifier, anchor_text = m.group(1), m.group(2)
    if anchor_text:
        anchor = parse_date_phrase(anchor_text, today)
        if anchor is None:
            return None
        saturday = weekend_saturday(anchor.value)
    else:
        saturday = weekend_saturday(today)

    if qualifier == "next":
        saturday = saturday + timedelta(days=7)
    return SingleDate(saturday)


# ---------------------------------------------------------------------------
# Seasons and holidays


def season_window(season: str, year: int) -> Tuple[date, date]:
    start = date(year, SEASON_START_MONTH[season], 1)
    return start, start + relativedelta(months=3)


def recognize_season(text: str, today: date) -> Optional[QueryIntent]:
    m = SEASON_RE.search(text)
    if not m:
        return None

    season = "autumn" if m.group(2) == "fall" else m.group(2)
    start, end = _next_window(
        lambda y: season_window(season, y),
        today,
        explicit_year(text),
        upcoming_only=bool(m.group(1)),
    )
    if season == "winter":
        name = f"winter {start.year}/{str(end.year)[-2:]}"
    else:
        name = f"{season} {start.year}"
    return VagueRange(start=start, end=end, label=SEASON, name=name)


def easter_window(year: int) -> Tuple[date, date]:
    sunday = easter(year)
    return sunday - timedelta(days=14), sunday + timedelta(days=14)


def christmas_window(year: int) -> Tuple[date, date]:
    return date(year, 12, 18), date(year + 1, 1, 4)


def new_year_window(year: int) -> Tuple[date, date]:
    # Keyed by the year being welcomed in
    return date(year - 1, 12, 27), date(year, 1, 7)


# (pattern, display name, window for a year)
HOLIDAYS = (
    (re.compile(r"\beaster\b"), "Easter", easter_window),
    (re.compile(r"\b(?:christmas|xmas)\b"), "Christmas", christmas_window),
    (re.compile(r"\bnew year'?s?\b"), "New Year", new_year_window),
)


def recognize_holiday(text: str, today: date) -> Optional[QueryIntent]:
    for pattern, name, window in HOLIDAYS:
        if not pattern.search(text):
            continue
        start, end = _next_window(window, today, explicit_year(text))
        year = end.year if window is new_year_window else start.year
        return VagueRange(start=start, end=end, label=HOLIDAY, name=f"{name} {year}")
    return None


# ---------------------------------------------------------------------------
# General date phrases


def _relative_offset(text: str, today: date) -> Optional[DatePhrase]:
    # Runs before the absolute parser, which would read "in 2 weeks" as a day number
    m = RELATIVE_OFFSET_RE.search(text)
    if not m:
        return None
    amount = m.group(1)
    count = int(amount) if amount.isdigit() else NUMBER_WORDS[amount]
    unit = m.group(2)
    try:
        if unit == "day":
            return DatePhrase(today + timedelta(days=count), DAY, False)
        if unit == "week":
            return DatePhrase(today + timedelta(weeks=count), DAY, False)
        return DatePhrase(month_start(today + relativedelta(months=count)), MONTH, False)
    except (OverflowError, ValueError):
        # Past the last representable date
        return None


def _relative_fallback(text: str, today: date) -> Optional[DatePhrase]:
    """Phrases that only make sense when no absolute date was found."""
    if re.search(r"\btoday\b|\btonight\b", text):
        return DatePhrase(today, DAY, False)
    if re.search(r"\btomorrow\b", text):
        return DatePhrase(today + timedelta(days=1), DAY, False)
    if re.search(r"\bnext week\b", text):
        return DatePhrase(today + timedelta(days=7), DAY, False)
    if re.search(r"\bnext month\b", text):
        return DatePhrase(next_month_start(today), MONTH, False)
    if re.search(r"\bthis month\b", text):
        return DatePhrase(month_start(today), MONTH, False)
    return None


def _roll_forward(month: int, day: int, granularity: str, today: date) -> date:
    """Next occurrence of a month, or of a day in a month, on or after today.

    29 February moves on to the next leap year.
    """
    if granularity == MONTH:
        candidate = date(today.year, month, 1)
        if next_month_start(candidate) <= today:
            candidate = date(today.year + 1, month, 1)
        return candidate

    for year in range(today.year, today.year + 9):
        try:
            candidate = date(year, month, day)
        except ValueError:
            continue
        if candidate >= today:
            return candidate
    raise ValueError(f"no {day}/{month} on or after {today}")


def date_fragment(text: str) -> Optional[str]:
    """The part of a message that states a date, ignoring any other numbers."""
    for pattern in DATE_FRAGMENTS:
        m = pattern.search(text)
        if m:
            return m.group(0)
    return None


def _next_weekday(text: str, today: date) -> Optional[DatePhrase]:
    m = WEEKDAY_RE.search(text)
    if not m:
        return None
    weekday = WEEKDAYS.index(m.group(0)[:3])
    return DatePhrase(today + timedelta(days=(weekday - today.weekday()) % 7), DAY, False)


def _absolute_phrase(text: str, today: date) -> Optional[DatePhrase]:
    iso = ISO_DATE_RE.search(text)
    if iso:
        try:
            return DatePhrase(date(*(int(g) for g in iso.groups())), DAY, True)
        except ValueError:
            return None

    fragment = date_fragment(text)
    if fragment is None:
        return _next_weekday(text, today)

    try:
        first, second = (date_parser.parse(fragment, default=d, dayfirst=True, fuzzy=True) for d in _PARSE_DEFAULTS)
    except (ValueError, OverflowError):
        return None

    # Components dateutil took from the default differ between the two passes
    day_given = first.day == second.day
    month_given = first.month == second.month
    year_given = first.year == second.year
    if not month_given:
        return None

    granularity = DAY if day_given else MONTH
    day = first.day if day_given else 1
    year = first.year if year_given else explicit_year(text)
    try:
        if year is None:
            return DatePhrase(_roll_forward(first.month, day, granularity, today), granularity, False)
        return DatePhrase(date(year, first.month, day), granularity, True)
    except ValueError:
        return None


def parse_date_phrase(text: str, today: date) -> Optional[DatePhrase]:
    """Extract a single date from a fragment of text, biased towards the future."""
    return _relative_offset(text, today) or _absolute_phrase(text, today) or _relative_fallback(text, today)


def _align_range(start: DatePhrase, end: DatePhrase) -> Optional[Tuple[date, date]]:
    start_value, end_value = start.value, end.value

    if end.year_given and not start.year_given:
        start_value = _with_year(start_value, end_value.year)
        if start_value > end_value:
            start_value = _with_year(start_value, end_value.year - 1)
    elif not end.year_given:
        end_value = _with_year(end_value, start_value.year)
        if end_value <= start_value:
            end_value = _with_year(end_value, start_value.year + 1)

    if end.granularity == MONTH:
        end_value = next_month_start(end_value)
    if end_value <= start_value:
        return None
    return start_value, end_value


def _span_dates(start_day: str, end_day: str, month_name: str, year: Optional[str], today: date) -> Optional[Tuple[date, date]]:
    fragment = f"{start_day} {month_name}" + (f" {year}" if year else "")
    start = parse_date_phrase(fragment, today)
    if start is None:
        return None
    try:
        end_value = date(start.value.year, start.value.month, int(end_day))
    except ValueError:
        return None
    if end_value <= start.value:
        # "28-4 dec" style spans run into the next month
        end_value = end_value + relativedelta(months=1)
    return start.value, end_value


def extract_range(text: str, today: date) -> Optional[Tuple[date, date]]:
    """Find an explicit start and end date, if the text states both."""
    isos = ISO_DATE_RE.findall(text)
    if len(isos) >= 2:
        try:
            start, end = (date(*(int(g) for g in parts)) for parts in isos[:2])
        except ValueError:
            return None
        return (start, end) if end > start else None

    m = DAY_SPAN_RE.search(text)
    if m:
        return _span_dates(m.group(1), m.group(2), m.group(3), m.group(4), today)

    m = MONTH_SPAN_RE.search(text)
    if m:
        return _span_dates(m.group(2), m.group(3), m.group(1), m.group(4), today)

    m = TWO_SIDED_RE.match(text)
    if m:
        left, right = m.group("left"), m.group("right")
        if DATE_ANCHOR_RE.search(left) and DATE_ANCHOR_RE.search(right):
            start = parse_date_phrase(left, today)
            end = parse_date_phrase(right, today)
            if start is not None and end is not None:
                return _align_range(start, end)
    return None


def month_name(day: date) -> str:
    return day.strftime("%B %Y")


def recognize_general(text: str, today: date) -> Optional[QueryIntent]:
    span = extract_range(text, today)
    if span is not None:
        return ExactRange(start=span[0], end=span[1])

    phrase = parse_date_phrase(text, today)
    if phrase is None:
        return None

    if VAGUE_MONTH_RE.search(text):
        start = month_start(phrase.value)
        return VagueRange(start=start, end=next_month_start(start), label=MONTH, name=month_name(start))

    if VAGUE_WEEK_RE.search(text):
        start = phrase.value
        return VagueRange(start=start, end=start + timedelta(days=7), label=WEEK, name=f"the week of {start:%d %b %Y}")

    return SingleDate(phrase.value)


RECOGNIZERS: Tuple[Recognizer, ...] = (
    recognize_weekend,
    recognize_season,
    recognize_holiday,
    recognize_general,
)


def interpret_query(text: Optional[str], today: Optional[date] = None) -> QueryIntent:
    """Classify a free-text query into a SingleDate, ExactRange, VagueRange or InvalidQuery."""
    today = today or date.today()
    cleaned = normalise_query(text)
    if not cleaned:
        return InvalidQuery("empty query")

    for recognizer in RECOGNIZERS:
        intent = recognizer(cleaned, today)
        if intent is not None:
            return intent
    return InvalidQuery(f"no dates found in {cleaned!r}")
