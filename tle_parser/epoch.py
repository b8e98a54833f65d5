"""Epoch decoding: two-digit year + fractional day-of-year → UTC datetime."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from .fields import parse_decimal, parse_integer

# Two-digit years at or above this pivot belong to the 1900s (Sputnik, 1957).
CENTURY_PIVOT = 57


def full_year(year2: int) -> int:
    return 1900 + year2 if year2 >= CENTURY_PIVOT else 2000 + year2


def epoch_to_datetime(year2: int, day_of_year: float) -> dt.datetime:
    """Convert a TLE epoch to a timezone-aware UTC datetime."""

    year = full_year(year2)
    day_int = int(day_of_year)
    frac = day_of_year - day_int
    base = dt.datetime(year, 1, 1, tzinfo=dt.timezone.utc) + dt.timedelta(days=day_int - 1)
    return base + dt.timedelta(seconds=frac * 86400.0)


def epoch_from_fields(epoch_year: Optional[str], epoch_day: Optional[str]) -> Optional[dt.datetime]:
    """Decode the epoch from extracted field text; ``None`` if either is malformed."""

    year2 = parse_integer(epoch_year)
    day = parse_decimal(epoch_day)
    if year2 is None or day is None or year2 > 99:
        return None
    try:
        return epoch_to_datetime(year2, day)
    except OverflowError:
        return None


def tle_epoch(line1: str) -> dt.datetime:
    """Parse epoch from line 1: YY + day-of-year.fraction → UTC datetime."""

    year2 = int(line1[18:20])
    doy = float(line1[20:32])
    return epoch_to_datetime(year2, doy)


__all__ = ["CENTURY_PIVOT", "epoch_from_fields", "epoch_to_datetime", "full_year", "tle_epoch"]
