from pydantic import BaseModel, Field
from typing import List, Optional, Union

SINGLE = "single"
RANGE = "range"
VAGUE_RANGE = "vagueRange"
INVALID = "invalid"


class CheckRequest(BaseModel):
    query: Optional[str] = Field(None, description="Free-text question, e.g. 'anything in July 2026'")
    # Structured fields kept for older callers that pre-parse dates
    date: Optional[str] = Field(None, description="YYYY-MM-DD")
    start_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    end_date: Optional[str] = Field(None, description="YYYY-MM-DD (exclusive)")
    vague: Union[bool, str, None] = False


class WeekResult(BaseModel):
    start: str
    end: str
    booked: bool
    price: Optional[float] = None


class CheckResponse(BaseModel):
    mode: str
    query: Optional[str] = None
    date: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    label: Optional[str] = None
    name: Optional[str] = None
    requested_week: Optional[WeekResult] = None
    week: Optional[WeekResult] = None
    exact_match: Optional[bool] = None
    alternative: Optional[WeekResult] = None
    range_booked: Optional[bool] = None
    booked: Optional[bool] = None
    price: Optional[float] = None
    available_weeks: List[WeekResult] = []
    preview: List[WeekResult] = []
    message: str
