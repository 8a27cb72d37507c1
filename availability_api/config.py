import os
from typing import List

# Property shown in status responses and messages
PROPERTY_NAME: str = os.getenv("PROPERTY_NAME", "Tansea")

# Bookalet iCal export for the property
ICAL_URL: str = os.getenv(
    "ICAL_URL",
    "https://api.bookalet.co.uk/v1/16295/bookalet-723489/26085.ics",
)
CALENDAR_TIMEZONE: str = os.getenv("CALENDAR_TIMEZONE", "Europe/London")
FETCH_TIMEOUT_SECONDS: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "10"))
# 0 disables caching, the feed is then fetched on every request
CALENDAR_CACHE_SECONDS: int = int(os.getenv("CALENDAR_CACHE_SECONDS", "0"))

PRICES_PATH: str = os.getenv("PRICES_PATH", "prices.json")
CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "£")

LOOKAHEAD_WEEKS: int = int(os.getenv("LOOKAHEAD_WEEKS", "8"))
PREVIEW_WEEKS: int = int(os.getenv("PREVIEW_WEEKS", "3"))

CORS_ORIGINS: List[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
PORT: int = int(os.getenv("PORT", "3000"))
