import json
import os
from datetime import date
from typing import List, Optional, Sequence

from pydantic import BaseModel, ValidationError


class PriceBand(BaseModel):
    """Weekly price valid for week starts in [start, end)."""

    start: date
    end: date
    price: float

    def covers(self, day: date) -> bool:
        return self.start <= day < self.end


def price_for_date(day: date, bands: Sequence[PriceBand]) -> Optional[float]:
    """Price of the first band covering ``day``, or None when no band does."""
    for band in bands:
        if band.covers(day):
            return band.price
    return None


def load_price_table(path: str) -> List[PriceBand]:
    """Read the price table JSON. Any problem yields an empty table."""
    if not os.path.exists(path):
        print(f"[PRICES] Price table {path} not found, all weeks will be unpriced")
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError("price table must be a JSON array")
        bands = [PriceBand(**item) for item in raw]
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print(f"[PRICES] Failed to load {path}: {e}")
        return []

    print(f"[PRICES] Loaded {len(bands)} price bands from {path}")
    return bands
