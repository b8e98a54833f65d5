"""Structural, checksum and range validation of TLE text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .anomalies import detect_anomalies
from .checksum import LINE_LENGTH, validate_checksum
from .errors import ErrorCode, Issue, Severity, TLEFormatError
from .fields import extract_fields, parse_decimal
from .lines import split_lines
from .logging import get_logger
from .options import ParseOptions, resolve
from .record import ValidationFailure, ValidationResult, ValidationSuccess

LOGGER = get_logger(__name__)

MAX_NAME_LENGTH = 24
VALID_CLASSIFICATIONS = ("U", "C", "S")
CHECKSUM_CODES = frozenset({ErrorCode.CHECKSUM_MISMATCH, ErrorCode.INVALID_CHECKSUM_CHARACTER})


@dataclass(frozen=True)
class RangeRule:
    field: str
    name: str
    minimum: float
    maximum: float
    optional: bool = False
    warning_only: bool = False


RANGE_RULES: Tuple[RangeRule, ...] = (
    RangeRule("satellite_number1", "Satellite Number", 1, 99999),
    RangeRule("intl_designator_year", "International Designator Year", 0, 99, optional=True),
    RangeRule("intl_designator_launch", "International Designator Launch Number", 1, 999, optional=True),
    RangeRule("ephemeris_type", "Ephemeris Type", 0, 9, optional=True),
    RangeRule("element_set_number", "Element Set Number", 0, 9999, optional=True),
    RangeRule("epoch_year", "Epoch Year", 0, 99),
    RangeRule("epoch_day", "Epoch Day", 1, 366.99999999),
    RangeRule("inclination", "Inclination", 0, 180),
    RangeRule("right_ascension", "Right Ascension", 0, 360),
    RangeRule("eccentricity", "Eccentricity", 0, 1),
    RangeRule("argument_of_perigee", "Argument of Perigee", 0, 360),
    RangeRule("mean_anomaly", "Mean Anomaly", 0, 360),
    RangeRule("mean_motion", "Mean Motion", 0, 20, warning_only=True),
    RangeRule("revolution_number", "Revolution Number", 0, 99999, optional=True),
)


# ----------------------------- building blocks ----------------------------- #


def validate_line_structure(line: str, expected_line_number: int) -> List[Issue]:
    """Check length, line marker and checksum of one element line."""

    if len(line) != LINE_LENGTH:
        return [
            Issue(
                code=ErrorCode.INVALID_LINE_LENGTH,
                message=f"Line {expected_line_number} must be exactly {LINE_LENGTH} characters (got {len(line)})",
                line=expected_line_number,
                field="line_length",
                expected=LINE_LENGTH,
                actual=len(line),
            )
        ]

    issues: List[Issue] = []
    marker = line[0]
    if marker != str(expected_line_number):
        issues.append(
            Issue(
                code=ErrorCode.INVALID_LINE_NUMBER,
                message=f"Line {expected_line_number} must start with '{expected_line_number}' (got '{marker}')",
                line=expected_line_number,
                field="line_number",
                expected=str(expected_line_number),
                actual=marker,
            )
        )

    checksum = validate_checksum(line)
    if checksum.error is not None:
        error = checksum.error
        issues.append(
            Issue(
                code=error.code,
                message=f"Line {expected_line_number}: {error.message}",
                line=expected_line_number,
                field=error.field,
                expected=error.expected,
                actual=error.actual,
                context=error.context,
            )
        )
    return issues


def validate_satellite_number(line1: str, line2: str) -> Optional[Issue]:
    """Return an issue when the catalog numbers differ or are not numeric."""

    sat1 = line1[2:7].strip()
    sat2 = line2[2:7].strip()
    if sat1 != sat2:
        return Issue(
            code=ErrorCode.SATELLITE_NUMBER_MISMATCH,
            message=f"Satellite numbers must match (Line 1: {sat1}, Line 2: {sat2})",
            field="satellite_number",
            context={"line1_value": sat1, "line2_value": sat2},
        )
    if not (sat1.isascii() and sat1.isdigit()):
        return Issue(
            code=ErrorCode.INVALID_SATELLITE_NUMBER,
            message=f"Satellite number must be numeric (got '{sat1}')",
            field="satellite_number",
            actual=sat1,
        )
    return None


def validate_classification(line1: str) -> Optional[Issue]:
    classification = line1[7:8]
    if classification in VALID_CLASSIFICATIONS:
        return None
    return Issue(
        code=ErrorCode.INVALID_CLASSIFICATION,
        message=f"Classification must be U, C, or S (got '{classification}')",
        line=1,
        field="classification",
        expected=tuple(VALID_CLASSIFICATIONS),
        actual=classification,
    )


def validate_numeric_range(
    value: str,
    name: str,
    minimum: float,
    maximum: float,
    field: Optional[str] = None,
) -> Optional[Issue]:
    """Return an issue if ``value`` is not a number within ``[minimum, maximum]``."""

    number = parse_decimal(value)
    if number is None:
        return Issue(
            code=ErrorCode.INVALID_NUMBER_FORMAT,
            message=f"{name} must be numeric (got '{value}')",
            field=field or name,
            actual=value,
        )
    if number < minimum or number > maximum:
        return Issue(
            code=ErrorCode.VALUE_OUT_OF_RANGE,
            message=f"{name} must be between {minimum} and {maximum} (got {number})",
            field=field or name,
            actual=number,
            context={"min": minimum, "max": maximum},
        )
    return None


def check_satellite_name(name: str) -> List[Issue]:
    warnings: List[Issue] = []
    if name[:1] in ("1", "2"):
        warnings.append(
            Issue(
                code=ErrorCode.SATELLITE_NAME_FORMAT_WARNING,
                message='Line 0 starts with "1" or "2", might be incorrectly formatted',
                severity=Severity.WARNING,
                line=0,
                field="satellite_name",
                actual=name,
            )
        )
    if len(name) > MAX_NAME_LENGTH:
        warnings.append(
            Issue(
                code=ErrorCode.SATELLITE_NAME_TOO_LONG,
                message=f"Satellite name (Line 0) should be {MAX_NAME_LENGTH} characters or less",
                severity=Severity.WARNING,
                line=0,
                field="satellite_name",
                expected=MAX_NAME_LENGTH,
                actual=len(name),
            )
        )
    return warnings


def range_issues(fields, rules: Sequence[RangeRule] = RANGE_RULES) -> List[Tuple[RangeRule, Issue]]:
    """Run ``rules`` over extracted ``fields``, skipping absent optional ones."""

    found: List[Tuple[RangeRule, Issue]] = []
    for rule in rules:
        raw = fields.get(rule.field)
        if raw is None:
            continue
        if rule.optional and raw == "":
            continue
        value = f"0.{raw}" if rule.field == "eccentricity" else raw
        issue = validate_numeric_range(value, rule.name, rule.minimum, rule.maximum, field=rule.field)
        if issue is not None:
            found.append((rule, issue))
    return found


# ------------------------------- entry point ------------------------------- #


def ensure_text(text) -> str:
    if not isinstance(text, str):
        raise TypeError("TLE data must be a string")
    if not text.strip():
        raise TLEFormatError("TLE string cannot be empty", ErrorCode.EMPTY_INPUT, {"input_length": len(text)})
    return text


def _finish(errors: List[Issue], warnings: List[Issue]) -> ValidationResult:
    LOGGER.debug("validation_complete", extra={"errors": len(errors), "warnings": len(warnings)})
    if errors:
        return ValidationFailure(errors=tuple(errors), warnings=tuple(warnings))
    return ValidationSuccess(warnings=tuple(warnings))


def validate_lines(lines: Sequence[str], options: ParseOptions) -> ValidationResult:
    """Validate already-normalised data lines."""

    errors: List[Issue] = []
    warnings: List[Issue] = []

    def file(issue: Issue, demote: bool) -> None:
        if demote:
            warnings.append(issue.with_severity(Severity.WARNING))
        else:
            errors.append(issue)

    if len(lines) < 2 or len(lines) > 3:
        errors.append(
            Issue(
                code=ErrorCode.INVALID_LINE_COUNT,
                message=f"TLE must contain 2 or 3 lines (got {len(lines)})",
                field="line_count",
                expected="2 or 3",
                actual=len(lines),
            )
        )
        return _finish(errors, warnings)

    if len(lines) == 3:
        warnings.extend(check_satellite_name(lines[0]))
    line1, line2 = lines[-2], lines[-1]

    # Both lines are checked before giving up so callers see every structural fault.
    demote_checksums = options.permissive or not options.strict_checksums
    for line, number in ((line1, 1), (line2, 2)):
        for issue in validate_line_structure(line, number):
            file(issue, demote_checksums and issue.code in CHECKSUM_CODES)
    if errors:
        return _finish(errors, warnings)

    sat_issue = validate_satellite_number(line1, line2)
    if sat_issue is not None:
        file(sat_issue, options.permissive)

    class_issue = validate_classification(line1)
    if class_issue is not None:
        file(class_issue, options.permissive)

    fields = extract_fields(line1, line2)
    if options.validate_ranges:
        for rule, issue in range_issues(fields):
            file(issue, rule.warning_only or options.permissive)

    warnings.extend(
        detect_anomalies(
            fields,
            reference_time=options.reference_time,
            stale_after_days=options.stale_after_days,
        )
    )
    return _finish(errors, warnings)


def validate(text: str, options: Optional[ParseOptions] = None, **overrides) -> ValidationResult:
    """Validate ``text`` and return diagnostics without assembling a record.

    Raises :class:`TypeError` for non-string input and
    :class:`~tle_parser.errors.TLEFormatError` for empty input; every other
    problem is reported through the returned result.
    """

    opts = resolve(options, ParseOptions, overrides)
    ensure_text(text)
    return validate_lines(split_lines(text).data, opts)


__all__ = [
    "CHECKSUM_CODES",
    "MAX_NAME_LENGTH",
    "RANGE_RULES",
    "RangeRule",
    "VALID_CLASSIFICATIONS",
    "check_satellite_name",
    "ensure_text",
    "range_issues",
    "validate",
    "validate_classification",
    "validate_line_structure",
    "validate_lines",
    "validate_numeric_range",
    "validate_satellite_number",
]
