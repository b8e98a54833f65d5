from __future__ import annotations

import datetime as dt

import pytest
from hypothesis import given, strategies as st

from tle_parser.checksum import calculate_checksum
from tle_parser.errors import ErrorCode, TLEFormatError, TLEValidationError
from tle_parser.parser import parse, parse_with_profile, safe_parse
from tle_parser.record import ParseFailure, ParseSuccess, TleRecord

BASE_NAME = "ISS (ZARYA)"
BASE_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
BASE_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"
FRESH = dt.datetime(2008, 9, 25, tzinfo=dt.timezone.utc)


def _text_payload(include_name: bool, prefix_blanks: int, suffix_blanks: int, trailing_space: bool, newline: str) -> str:
    lines = []
    lines.extend("" for _ in range(prefix_blanks))
    if include_name:
        lines.append(BASE_NAME + (" " if trailing_space else ""))
    lines.append(BASE_LINE1 + (" " if trailing_space else ""))
    lines.append(BASE_LINE2 + (" " if trailing_space else ""))
    lines.extend("" for _ in range(suffix_blanks))
    return newline.join(lines)


@st.composite
def tle_payloads(draw) -> str:
    return _text_payload(
        include_name=draw(st.booleans()),
        prefix_blanks=draw(st.integers(min_value=0, max_value=3)),
        suffix_blanks=draw(st.integers(min_value=0, max_value=3)),
        trailing_space=draw(st.booleans()),
        newline=draw(st.sampled_from(["\n", "\r\n", "\r"])),
    )


@given(tle_payloads())
def test_parse_handles_noise(payload: str) -> None:
    record = parse(payload, reference_time=FRESH)
    assert isinstance(record, TleRecord)
    assert record.norad_id == "25544"
    assert record.line1 == BASE_LINE1
    assert record.line2 == BASE_LINE2
    round_trip = parse(record.as_text(), reference_time=FRESH)
    assert round_trip == record


def test_iss_golden_record() -> None:
    record = parse(f"{BASE_NAME}\n{BASE_LINE1}\n{BASE_LINE2}", reference_time=FRESH)
    assert record.satellite_name == BASE_NAME
    assert record.satellite_number1 == record.satellite_number2 == "25544"
    assert record.inclination == "51.6416"
    assert record.eccentricity == "0006703"
    assert record.checksum1 == str(calculate_checksum(BASE_LINE1))
    assert record.checksum2 == str(calculate_checksum(BASE_LINE2))
    assert record.epoch.date() == dt.date(2008, 9, 20)
    assert [issue.code for issue in record.warnings] == [ErrorCode.NEGATIVE_DECAY_WARNING]
    assert record.numeric().inclination == pytest.approx(51.6416)


def test_parse_is_idempotent() -> None:
    text = f"{BASE_NAME}\n{BASE_LINE1}\n{BASE_LINE2}"
    assert parse(text, reference_time=FRESH) == parse(text, reference_time=FRESH)


def test_two_line_input_has_no_name() -> None:
    record = parse(f"{BASE_LINE1}\n{BASE_LINE2}")
    assert record.satellite_name is None
    assert record.as_text() == f"{BASE_LINE1}\n{BASE_LINE2}\n"


def test_comments_and_warnings_follow_options() -> None:
    text = f"# fetched 2008-09-21\n{BASE_LINE1}\n{BASE_LINE2}"
    record = parse(text)
    assert record.comments == ("# fetched 2008-09-21",)
    assert record.warnings

    bare = parse(text, include_comments=False, include_warnings=False)
    assert bare.comments == ()
    assert bare.warnings == ()


def test_validation_failure_carries_all_issues() -> None:
    with pytest.raises(TLEValidationError) as excinfo:
        parse(f"{BASE_LINE1[:68]}8\n{BASE_LINE2[:68]}0")
    exc = excinfo.value
    assert exc.codes == [ErrorCode.CHECKSUM_MISMATCH, ErrorCode.CHECKSUM_MISMATCH]
    assert [issue.line for issue in exc.errors] == [1, 2]
    assert str(exc).startswith("TLE validation failed:")


def test_permissive_parse_accepts_bad_checksum() -> None:
    record = parse(f"{BASE_LINE1[:68]}8\n{BASE_LINE2}", mode="permissive")
    assert record.checksum1 == "8"
    assert ErrorCode.CHECKSUM_MISMATCH in [issue.code for issue in record.warnings]


def test_unvalidated_parse_still_needs_two_or_three_lines() -> None:
    record = parse(f"{BASE_LINE1[:68]}8\n{BASE_LINE2}", validate=False)
    assert record.checksum1 == "8"
    assert record.warnings == ()
    with pytest.raises(TLEFormatError) as excinfo:
        parse(BASE_LINE1, validate=False)
    assert excinfo.value.code is ErrorCode.INVALID_LINE_COUNT


def test_profiles() -> None:
    text = f"{BASE_LINE1[:68]}8\n{BASE_LINE2}"
    with pytest.raises(TLEValidationError):
        parse_with_profile(text, "strict")
    assert parse_with_profile(text, "legacy").checksum1 == "8"
    assert parse_with_profile(text, "fast").warnings == ()
    with pytest.raises(ValueError):
        parse_with_profile(text, "turbo")


def test_safe_parse_never_raises_for_bad_input() -> None:
    ok = safe_parse(f"{BASE_LINE1}\n{BASE_LINE2}")
    assert isinstance(ok, ParseSuccess) and ok.ok
    assert ok.record.norad_id == "25544"

    bad = safe_parse(f"{BASE_LINE1[:68]}8\n{BASE_LINE2}")
    assert isinstance(bad, ParseFailure) and not bad.ok
    assert bad.errors[0].code is ErrorCode.CHECKSUM_MISMATCH

    empty = safe_parse("")
    assert empty.errors[0].code is ErrorCode.EMPTY_INPUT

    wrong_type = safe_parse(42)  # type: ignore[arg-type]
    assert wrong_type.errors[0].code is ErrorCode.INVALID_INPUT_TYPE


def test_parse_rejects_non_string() -> None:
    with pytest.raises(TypeError):
        parse(b"1 25544U")  # type: ignore[arg-type]
