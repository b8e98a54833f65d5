"""Issue codes, severities and exception types shared by the parser."""

from __future__ import annotations

import dataclasses
import enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, enum.Enum):
    """Closed set of diagnostic codes emitted by the parser."""

    # input
    INVALID_INPUT_TYPE = "INVALID_INPUT_TYPE"
    EMPTY_INPUT = "EMPTY_INPUT"

    # structure
    INVALID_LINE_COUNT = "INVALID_LINE_COUNT"
    INVALID_LINE_LENGTH = "INVALID_LINE_LENGTH"
    INVALID_LINE_NUMBER = "INVALID_LINE_NUMBER"

    # checksum
    CHECKSUM_MISMATCH = "CHECKSUM_MISMATCH"
    INVALID_CHECKSUM_CHARACTER = "INVALID_CHECKSUM_CHARACTER"

    # fields
    SATELLITE_NUMBER_MISMATCH = "SATELLITE_NUMBER_MISMATCH"
    INVALID_SATELLITE_NUMBER = "INVALID_SATELLITE_NUMBER"
    INVALID_CLASSIFICATION = "INVALID_CLASSIFICATION"
    VALUE_OUT_OF_RANGE = "VALUE_OUT_OF_RANGE"
    INVALID_NUMBER_FORMAT = "INVALID_NUMBER_FORMAT"
    SATELLITE_NAME_TOO_LONG = "SATELLITE_NAME_TOO_LONG"
    SATELLITE_NAME_FORMAT_WARNING = "SATELLITE_NAME_FORMAT_WARNING"

    # advisory
    CLASSIFIED_DATA_WARNING = "CLASSIFIED_DATA_WARNING"
    STALE_TLE_WARNING = "STALE_TLE_WARNING"
    HIGH_ECCENTRICITY_WARNING = "HIGH_ECCENTRICITY_WARNING"
    LOW_MEAN_MOTION_WARNING = "LOW_MEAN_MOTION_WARNING"
    DEPRECATED_EPOCH_YEAR_WARNING = "DEPRECATED_EPOCH_YEAR_WARNING"
    REVOLUTION_NUMBER_ROLLOVER_WARNING = "REVOLUTION_NUMBER_ROLLOVER_WARNING"
    NEAR_ZERO_DRAG_WARNING = "NEAR_ZERO_DRAG_WARNING"
    NON_STANDARD_EPHEMERIS_WARNING = "NON_STANDARD_EPHEMERIS_WARNING"
    NEGATIVE_DECAY_WARNING = "NEGATIVE_DECAY_WARNING"

    # state machine
    PARTIAL_FIELD = "PARTIAL_FIELD"
    MISSING_FIELD = "MISSING_FIELD"
    STATE_MACHINE_LOOP = "STATE_MACHINE_LOOP"


class Severity(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_DESCRIPTIONS: Mapping[ErrorCode, str] = MappingProxyType(
    {
        ErrorCode.INVALID_INPUT_TYPE: "Input data must be a string",
        ErrorCode.EMPTY_INPUT: "Input string is empty or contains only whitespace",
        ErrorCode.INVALID_LINE_COUNT: "TLE must contain exactly 2 or 3 lines",
        ErrorCode.INVALID_LINE_LENGTH: "TLE line must be exactly 69 characters",
        ErrorCode.INVALID_LINE_NUMBER: "Line number must be 1 or 2",
        ErrorCode.CHECKSUM_MISMATCH: "Calculated checksum does not match",
        ErrorCode.INVALID_CHECKSUM_CHARACTER: "Checksum must be a digit 0-9",
        ErrorCode.SATELLITE_NUMBER_MISMATCH: "Satellite numbers on line 1 and line 2 must match",
        ErrorCode.INVALID_SATELLITE_NUMBER: "Satellite catalog number is invalid",
        ErrorCode.INVALID_CLASSIFICATION: "Classification must be U, C, or S",
        ErrorCode.VALUE_OUT_OF_RANGE: "Field value is outside valid range",
        ErrorCode.INVALID_NUMBER_FORMAT: "Field contains invalid numeric format",
        ErrorCode.SATELLITE_NAME_TOO_LONG: "Satellite name exceeds maximum length",
        ErrorCode.SATELLITE_NAME_FORMAT_WARNING: "Satellite name contains unusual characters",
        ErrorCode.CLASSIFIED_DATA_WARNING: "TLE contains classified satellite data",
        ErrorCode.STALE_TLE_WARNING: "TLE epoch is significantly old",
        ErrorCode.HIGH_ECCENTRICITY_WARNING: "Eccentricity is unusually high",
        ErrorCode.LOW_MEAN_MOTION_WARNING: "Mean motion is unusually low",
        ErrorCode.DEPRECATED_EPOCH_YEAR_WARNING: "Epoch year is in the far past",
        ErrorCode.REVOLUTION_NUMBER_ROLLOVER_WARNING: "Revolution number may have rolled over",
        ErrorCode.NEAR_ZERO_DRAG_WARNING: "Drag coefficient is near zero",
        ErrorCode.NON_STANDARD_EPHEMERIS_WARNING: "Ephemeris type is non-standard",
        ErrorCode.NEGATIVE_DECAY_WARNING: "Mean motion decay is negative",
        ErrorCode.PARTIAL_FIELD: "Field is truncated by a short line",
        ErrorCode.MISSING_FIELD: "Field is absent because the line is too short",
        ErrorCode.STATE_MACHINE_LOOP: "State machine exceeded maximum iterations",
    }
)

_WARNING_CODES = frozenset(
    {
        ErrorCode.SATELLITE_NAME_TOO_LONG,
        ErrorCode.SATELLITE_NAME_FORMAT_WARNING,
        ErrorCode.CLASSIFIED_DATA_WARNING,
        ErrorCode.STALE_TLE_WARNING,
        ErrorCode.HIGH_ECCENTRICITY_WARNING,
        ErrorCode.LOW_MEAN_MOTION_WARNING,
        ErrorCode.DEPRECATED_EPOCH_YEAR_WARNING,
        ErrorCode.REVOLUTION_NUMBER_ROLLOVER_WARNING,
        ErrorCode.NEAR_ZERO_DRAG_WARNING,
        ErrorCode.NON_STANDARD_EPHEMERIS_WARNING,
        ErrorCode.NEGATIVE_DECAY_WARNING,
        ErrorCode.PARTIAL_FIELD,
        ErrorCode.MISSING_FIELD,
    }
)


def _coerce_code(code: ErrorCode | str) -> Optional[ErrorCode]:
    try:
        return ErrorCode(code)
    except ValueError:
        return None


def describe(code: ErrorCode | str) -> str:
    """Return a human-readable description of ``code``."""

    resolved = _coerce_code(code)
    if resolved is None:
        return "Unknown error code"
    return _DESCRIPTIONS[resolved]


def is_warning_code(code: ErrorCode | str) -> bool:
    """Return ``True`` for codes that only ever describe advisory conditions."""

    return _coerce_code(code) in _WARNING_CODES


def is_critical_code(code: ErrorCode | str) -> bool:
    resolved = _coerce_code(code)
    return resolved is not None and resolved not in _WARNING_CODES


@dataclasses.dataclass(frozen=True)
class Issue:
    """A single error or warning produced while parsing or validating.

    ``context`` holds any extra key/value detail specific to the issue kind
    (for example ``days_since_epoch`` on stale-epoch warnings).
    """

    code: ErrorCode
    message: str
    severity: Severity = Severity.ERROR
    line: Optional[int] = None
    field: Optional[str] = None
    expected: Any = None
    actual: Any = None
    context: Mapping[str, Any] = dataclasses.field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))

    @property
    def is_warning(self) -> bool:
        return self.severity in (Severity.WARNING, Severity.INFO)

    def with_severity(self, severity: Severity) -> "Issue":
        return dataclasses.replace(self, severity=severity)

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity.value,
        }
        for key in ("line", "field", "expected", "actual"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class TLEValidationError(ValueError):
    """Raised by the fail-fast entry point when validation rejects the input.

    The exception carries every error and warning gathered before the parse
    was abandoned, in the order they were found.
    """

    def __init__(self, message: str, errors, warnings=()) -> None:
        super().__init__(message)
        self.errors = tuple(errors)
        self.warnings = tuple(warnings)

    @property
    def codes(self):
        return [issue.code for issue in self.errors]


class TLEFormatError(ValueError):
    """Raised for structural problems that prevent any field extraction."""

    def __init__(self, message: str, code: ErrorCode, details: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.details = dict(details or {})


__all__ = [
    "ErrorCode",
    "Issue",
    "Severity",
    "TLEFormatError",
    "TLEValidationError",
    "describe",
    "is_critical_code",
    "is_warning_code",
]
