"""Fixed-column field extraction for TLE element lines.

Columns follow the CelesTrak/NORAD layout; offsets below are zero-based and
half-open, so ``(2, 7)`` is the 1-based column range 3-7.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

COMPLETE = "complete"
PARTIAL = "partial"
MISSING = "missing"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    line: int
    start: int
    end: int
    label: str


@dataclass(frozen=True)
class FieldSlice:
    value: Optional[str]
    status: str = COMPLETE


FIELD_SPECS: Tuple[FieldSpec, ...] = (
    FieldSpec("line_number1", 1, 0, 1, "Line 1 number"),
    FieldSpec("satellite_number1", 1, 2, 7, "Satellite number"),
    FieldSpec("classification", 1, 7, 8, "Classification"),
    FieldSpec("intl_designator_year", 1, 9, 11, "Int. designator year"),
    FieldSpec("intl_designator_launch", 1, 11, 14, "Int. designator launch"),
    FieldSpec("intl_designator_piece", 1, 14, 17, "Int. designator piece"),
    FieldSpec("epoch_year", 1, 18, 20, "Epoch year"),
    FieldSpec("epoch_day", 1, 20, 32, "Epoch day"),
    FieldSpec("first_derivative", 1, 33, 43, "First derivative"),
    FieldSpec("second_derivative", 1, 44, 52, "Second derivative"),
    FieldSpec("bstar", 1, 53, 61, "B* drag term"),
    FieldSpec("ephemeris_type", 1, 62, 63, "Ephemeris type"),
    FieldSpec("element_set_number", 1, 64, 68, "Element set number"),
    FieldSpec("checksum1", 1, 68, 69, "Checksum"),
    FieldSpec("line_number2", 2, 0, 1, "Line 2 number"),
    FieldSpec("satellite_number2", 2, 2, 7, "Satellite number"),
    FieldSpec("inclination", 2, 8, 16, "Inclination"),
    FieldSpec("right_ascension", 2, 17, 25, "Right ascension"),
    FieldSpec("eccentricity", 2, 26, 33, "Eccentricity"),
    FieldSpec("argument_of_perigee", 2, 34, 42, "Argument of perigee"),
    FieldSpec("mean_anomaly", 2, 43, 51, "Mean anomaly"),
    FieldSpec("mean_motion", 2, 52, 63, "Mean motion"),
    FieldSpec("revolution_number", 2, 63, 68, "Revolution number"),
    FieldSpec("checksum2", 2, 68, 69, "Checksum"),
)

FIELDS_BY_NAME: Mapping[str, FieldSpec] = MappingProxyType({spec.name: spec for spec in FIELD_SPECS})
LINE1_FIELDS: Tuple[FieldSpec, ...] = tuple(spec for spec in FIELD_SPECS if spec.line == 1)
LINE2_FIELDS: Tuple[FieldSpec, ...] = tuple(spec for spec in FIELD_SPECS if spec.line == 2)
FIELD_NAMES: Tuple[str, ...] = tuple(spec.name for spec in FIELD_SPECS)


def slice_field(line: str, spec: FieldSpec) -> FieldSlice:
    """Cut one field out of ``line``; short lines yield partial or missing slices."""

    if len(line) >= spec.end:
        return FieldSlice(line[spec.start : spec.end].strip(), COMPLETE)
    if len(line) > spec.start:
        return FieldSlice(line[spec.start :].strip(), PARTIAL)
    return FieldSlice(None, MISSING)


def extract_line(line: str, line_no: int) -> Dict[str, FieldSlice]:
    specs = LINE1_FIELDS if line_no == 1 else LINE2_FIELDS
    return {spec.name: slice_field(line, spec) for spec in specs}


def extract_fields(line1: str, line2: str) -> Dict[str, Optional[str]]:
    """Return the trimmed text of every Line 1 and Line 2 field.

    Never raises: fields beyond the end of a short line come back as ``None``
    and truncated fields keep whatever characters were present.
    """

    values: Dict[str, Optional[str]] = {}
    for line, line_no in ((line1, 1), (line2, 2)):
        for name, piece in extract_line(line, line_no).items():
            values[name] = piece.value
    return values


# --------------------------- numeric conversion ---------------------------- #

# TLE columns are ASCII only.
_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$", re.ASCII)
_IMPLIED_RE = re.compile(r"^([+-]?)(\d{1,6})([+-]\d)$", re.ASCII)


def parse_decimal(text: Optional[str]) -> Optional[float]:
    """Parse a plain decimal field, returning ``None`` when malformed."""

    if text is None:
        return None
    candidate = text.strip()
    if not _DECIMAL_RE.match(candidate):
        return None
    return float(candidate)


def parse_integer(text: Optional[str]) -> Optional[int]:
    if text is None:
        return None
    candidate = text.strip()
    if not candidate.isdigit() or not candidate.isascii():
        return None
    return int(candidate)


def decode_implied_decimal(text: Optional[str]) -> Optional[float]:
    """Decode the ``±ddddd±e`` notation used for nddot/6 and B*.

    ``-11606-4`` means ``-0.11606e-4``; blank fields decode to ``0.0``.
    """

    if text is None:
        return None
    candidate = text.strip().replace(" ", "")
    if not candidate:
        return 0.0
    match = _IMPLIED_RE.match(candidate)
    if not match:
        return None
    sign, mantissa, exponent = match.groups()
    value = float(f"0.{mantissa}") * 10.0 ** int(exponent)
    return -value if sign == "-" else value


def eccentricity_value(text: Optional[str]) -> Optional[float]:
    """Rebuild the eccentricity from its digits-only TLE representation."""

    if text is None:
        return None
    digits = text.strip()
    if not digits:
        return None
    return parse_decimal(f"0.{digits}")


@dataclass(frozen=True)
class NumericElements:
    """Numeric form of the extracted fields; ``None`` where text is malformed."""

    satellite_number: Optional[int]
    intl_designator_year: Optional[int]
    intl_designator_launch: Optional[int]
    epoch_year: Optional[int]
    epoch_day: Optional[float]
    first_derivative: Optional[float]
    second_derivative: Optional[float]
    bstar: Optional[float]
    ephemeris_type: Optional[int]
    element_set_number: Optional[int]
    inclination: Optional[float]
    right_ascension: Optional[float]
    eccentricity: Optional[float]
    argument_of_perigee: Optional[float]
    mean_anomaly: Optional[float]
    mean_motion: Optional[float]
    revolution_number: Optional[int]


def numeric_elements(fields: Mapping[str, Optional[str]]) -> NumericElements:
    return NumericElements(
        satellite_number=parse_integer(fields.get("satellite_number1")),
        intl_designator_year=parse_integer(fields.get("intl_designator_year")),
        intl_designator_launch=parse_integer(fields.get("intl_designator_launch")),
        epoch_year=parse_integer(fields.get("epoch_year")),
        epoch_day=parse_decimal(fields.get("epoch_day")),
        first_derivative=parse_decimal(fields.get("first_derivative")),
        second_derivative=decode_implied_decimal(fields.get("second_derivative")),
        bstar=decode_implied_decimal(fields.get("bstar")),
        ephemeris_type=parse_integer(fields.get("ephemeris_type")),
        element_set_number=parse_integer(fields.get("element_set_number")),
        inclination=parse_decimal(fields.get("inclination")),
        right_ascension=parse_decimal(fields.get("right_ascension")),
        eccentricity=eccentricity_value(fields.get("eccentricity")),
        argument_of_perigee=parse_decimal(fields.get("argument_of_perigee")),
        mean_anomaly=parse_decimal(fields.get("mean_anomaly")),
        mean_motion=parse_decimal(fields.get("mean_motion")),
        revolution_number=parse_integer(fields.get("revolution_number")),
    )


__all__ = [
    "COMPLETE",
    "FIELDS_BY_NAME",
    "FIELD_NAMES",
    "FIELD_SPECS",
    "FieldSlice",
    "FieldSpec",
    "LINE1_FIELDS",
    "LINE2_FIELDS",
    "MISSING",
    "NumericElements",
    "PARTIAL",
    "decode_implied_decimal",
    "eccentricity_value",
    "extract_fields",
    "extract_line",
    "numeric_elements",
    "parse_decimal",
    "parse_integer",
    "slice_field",
]
