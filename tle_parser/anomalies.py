"""Advisory checks for unusual-but-valid orbital element values."""

from __future__ import annotations

import datetime as dt
import math
from typing import List, Mapping, Optional

from .epoch import epoch_from_fields, full_year
from .errors import ErrorCode, Issue, Severity
from .fields import eccentricity_value, parse_decimal, parse_integer
from .options import DEFAULT_STALE_AFTER_DAYS

HIGH_ECCENTRICITY = 0.25
LOW_MEAN_MOTION = 1.0  # rev/day
ROLLOVER_THRESHOLD = 90000
ZERO_DRAG_PATTERNS = frozenset({"00000-0", "00000+0", "00000 0"})
STANDARD_EPHEMERIS = frozenset({"0", ""})

Fields = Mapping[str, Optional[str]]


def _warning(code: ErrorCode, message: str, field: str, **context) -> Issue:
    actual = context.pop("value", None)
    return Issue(
        code=code,
        message=message,
        severity=Severity.WARNING,
        field=field,
        actual=actual,
        context=context,
    )


def check_classification(fields: Fields) -> List[Issue]:
    classification = fields.get("classification")
    if classification and classification != "U":
        return [
            _warning(
                ErrorCode.CLASSIFIED_DATA_WARNING,
                f"Classification '{classification}' is unusual in public TLE data "
                "(typically 'U' for unclassified)",
                "classification",
                value=classification,
            )
        ]
    return []


def check_epoch(
    fields: Fields,
    reference_time: Optional[dt.datetime] = None,
    stale_after_days: float = DEFAULT_STALE_AFTER_DAYS,
) -> List[Issue]:
    warnings: List[Issue] = []
    year2 = parse_integer(fields.get("epoch_year"))
    epoch = epoch_from_fields(fields.get("epoch_year"), fields.get("epoch_day"))
    if year2 is None or epoch is None:
        return warnings

    year = full_year(year2)
    if year < 2000:
        warnings.append(
            _warning(
                ErrorCode.DEPRECATED_EPOCH_YEAR_WARNING,
                f"Epoch year {year} is in the deprecated 1900s range (two-digit year: {year2:02d})",
                "epoch_year",
                value=year2,
                full_year=year,
            )
        )

    now = reference_time or dt.datetime.now(dt.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    age_days = (now - epoch).total_seconds() / 86400.0
    if age_days > stale_after_days:
        epoch_date = epoch.date().isoformat()
        warnings.append(
            _warning(
                ErrorCode.STALE_TLE_WARNING,
                f"TLE epoch is {math.floor(age_days)} days old (epoch: {epoch_date}). "
                "TLE data may be stale.",
                "epoch_day",
                days_since_epoch=math.floor(age_days),
                epoch_date=epoch_date,
            )
        )
    return warnings


def check_orbital_parameters(fields: Fields) -> List[Issue]:
    warnings: List[Issue] = []

    eccentricity = eccentricity_value(fields.get("eccentricity"))
    if eccentricity is not None and eccentricity > HIGH_ECCENTRICITY:
        warnings.append(
            _warning(
                ErrorCode.HIGH_ECCENTRICITY_WARNING,
                f"Eccentricity {eccentricity:.7f} is unusually high. "
                "This indicates a highly elliptical orbit.",
                "eccentricity",
                value=eccentricity,
            )
        )

    mean_motion = parse_decimal(fields.get("mean_motion"))
    if mean_motion is not None and mean_motion < LOW_MEAN_MOTION:
        warnings.append(
            _warning(
                ErrorCode.LOW_MEAN_MOTION_WARNING,
                f"Mean motion {mean_motion:.8f} rev/day is unusually low. "
                "This indicates a very high orbit.",
                "mean_motion",
                value=mean_motion,
            )
        )

    revolutions = parse_integer(fields.get("revolution_number"))
    if revolutions is not None and revolutions > ROLLOVER_THRESHOLD:
        warnings.append(
            _warning(
                ErrorCode.REVOLUTION_NUMBER_ROLLOVER_WARNING,
                f"Revolution number {revolutions} is approaching rollover limit (99999). "
                "Counter may reset soon.",
                "revolution_number",
                value=revolutions,
            )
        )
    return warnings


def check_drag_and_ephemeris(fields: Fields) -> List[Issue]:
    warnings: List[Issue] = []

    bstar = fields.get("bstar")
    if bstar is not None and bstar in ZERO_DRAG_PATTERNS:
        warnings.append(
            _warning(
                ErrorCode.NEAR_ZERO_DRAG_WARNING,
                "B* drag term is zero or near-zero, which is unusual for most satellites in LEO",
                "bstar",
                value=bstar,
            )
        )

    first_derivative = parse_decimal(fields.get("first_derivative"))
    if first_derivative is not None and first_derivative < 0:
        warnings.append(
            _warning(
                ErrorCode.NEGATIVE_DECAY_WARNING,
                f"First derivative of mean motion is negative ({first_derivative}), "
                "indicating orbital decay",
                "first_derivative",
                value=first_derivative,
            )
        )

    ephemeris = fields.get("ephemeris_type")
    if ephemeris is not None and ephemeris not in STANDARD_EPHEMERIS:
        warnings.append(
            _warning(
                ErrorCode.NON_STANDARD_EPHEMERIS_WARNING,
                f"Ephemeris type '{ephemeris}' is non-standard (expected '0' for SGP4/SDP4)",
                "ephemeris_type",
                value=ephemeris,
            )
        )
    return warnings


def detect_anomalies(
    fields: Fields,
    reference_time: Optional[dt.datetime] = None,
    stale_after_days: float = DEFAULT_STALE_AFTER_DAYS,
    line1: bool = True,
    line2: bool = True,
) -> List[Issue]:
    """Run every advisory check over already-extracted ``fields``.

    ``line1``/``line2`` switch off the checks for a line whose fields are not
    trustworthy (for example a line of the wrong length).
    """

    warnings: List[Issue] = []
    if line1:
        warnings.extend(check_classification(fields))
        warnings.extend(check_epoch(fields, reference_time, stale_after_days))
        warnings.extend(check_drag_and_ephemeris(fields))
    if line2:
        warnings.extend(check_orbital_parameters(fields))
    return warnings


__all__ = [
    "HIGH_ECCENTRICITY",
    "LOW_MEAN_MOTION",
    "ROLLOVER_THRESHOLD",
    "ZERO_DRAG_PATTERNS",
    "check_classification",
    "check_drag_and_ephemeris",
    "check_epoch",
    "check_orbital_parameters",
    "detect_anomalies",
]
