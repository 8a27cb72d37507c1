"""Typed query intents produced by the query parser."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Union

MONTH = "month"
SEASON = "season"
HOLIDAY = "holiday"
WEEK = "week"
# Structured {start_date, end_date, vague: true} payloads from older callers
LEGACY_RANGE = "range"


@dataclass(frozen=True)
class SingleDate:
    """One calendar date of interest."""

    date: date


@dataclass(frozen=True)
class ExactRange:
    """An explicit stay, half-open [start, end)."""

    start: date
    end: date


@dataclass(frozen=True)
class VagueRange:
    """A broad window in which any available week satisfies the guest."""

    start: date
    end: date
    label: str
    name: str = ""


@dataclass(frozen=True)
class InvalidQuery:
    """Text that no recognizer could turn into dates."""

    reason: str = ""


QueryIntent = Union[SingleDate, ExactRange, VagueRange, InvalidQuery]
