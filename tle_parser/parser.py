"""Fail-fast parsing entry points and record assembly."""

from __future__ import annotations

from typing import Optional, Sequence

from .errors import ErrorCode, Issue, TLEFormatError, TLEValidationError
from .fields import extract_fields
from .lines import NormalizedLines, split_lines
from .logging import get_logger, log_context
from .options import ParseOptions, profile_options, resolve
from .record import ParseFailure, ParseResult, ParseSuccess, TleRecord
from .validator import ensure_text, validate_lines

LOGGER = get_logger(__name__)


def assemble_record(
    lines: NormalizedLines,
    warnings: Sequence[Issue] = (),
    include_warnings: bool = True,
    include_comments: bool = True,
) -> TleRecord:
    """Build a :class:`TleRecord` from normalised lines and collected warnings."""

    data = lines.data
    if len(data) not in (2, 3):
        raise TLEFormatError(
            f"TLE must contain 2 or 3 lines (got {len(data)})",
            ErrorCode.INVALID_LINE_COUNT,
            {"actual": len(data)},
        )
    name = data[0] if len(data) == 3 else None
    line1, line2 = data[-2], data[-1]
    return TleRecord.from_fields(
        extract_fields(line1, line2),
        satellite_name=name,
        line1=line1,
        line2=line2,
        warnings=warnings if include_warnings else (),
        comments=lines.comments if include_comments else (),
    )


def _failure_message(errors: Sequence[Issue]) -> str:
    return "TLE validation failed:\n" + "\n".join(issue.message for issue in errors)


def parse(text: str, options: Optional[ParseOptions] = None, **overrides) -> TleRecord:
    """Parse one TLE (2 or 3 lines) into a :class:`TleRecord`.

    With ``validate`` enabled (the default) the text is checked first and a
    :class:`~tle_parser.errors.TLEValidationError` carrying every error and
    warning is raised on failure.  Keyword arguments override fields of
    ``options``.
    """

    opts = resolve(options, ParseOptions, overrides)
    ensure_text(text)
    lines = split_lines(text)

    warnings: Sequence[Issue] = ()
    if opts.validate:
        result = validate_lines(lines.data, opts)
        if not result.is_valid:
            LOGGER.info(
                "tle_rejected",
                extra={"codes": [issue.code for issue in result.errors], "mode": opts.mode},
            )
            raise TLEValidationError(_failure_message(result.errors), result.errors, result.warnings)
        warnings = result.warnings

    record = assemble_record(
        lines,
        warnings,
        include_warnings=opts.include_warnings,
        include_comments=opts.include_comments,
    )
    with log_context(norad_id=record.satellite_number1):
        LOGGER.debug("tle_parsed", extra={"warnings": len(record.warnings)})
    return record


def safe_parse(text: str, options: Optional[ParseOptions] = None, **overrides) -> ParseResult:
    """Like :func:`parse` but returns ``ParseSuccess``/``ParseFailure`` instead of raising."""

    if not isinstance(text, str):
        issue = Issue(
            code=ErrorCode.INVALID_INPUT_TYPE,
            message="TLE data must be a string",
            context={"input_type": type(text).__name__},
        )
        return ParseFailure(errors=(issue,))
    try:
        record = parse(text, options, **overrides)
    except TLEValidationError as exc:
        return ParseFailure(errors=exc.errors, warnings=exc.warnings)
    except TLEFormatError as exc:
        issue = Issue(code=exc.code, message=str(exc), context=exc.details)
        return ParseFailure(errors=(issue,))
    return ParseSuccess(record=record, warnings=record.warnings)


def parse_with_profile(text: str, profile: str) -> TleRecord:
    return parse(text, profile_options(profile))


__all__ = ["assemble_record", "parse", "parse_with_profile", "safe_parse"]
