from __future__ import annotations

import datetime as dt

from hypothesis import given, strategies as st

from tle_parser.epoch import epoch_from_fields, epoch_to_datetime, full_year, tle_epoch

SECONDS_PER_DAY = 86_400
MICROS_PER_DAY = SECONDS_PER_DAY * 1_000_000

BASE_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
PREFIX = BASE_LINE1[:18]
SUFFIX = BASE_LINE1[32:]


def build_line1(year: int, day: int, seconds: int, micros: int) -> str:
    total_micro = seconds * 1_000_000 + micros
    frac_scaled = round(total_micro * 100_000_000 / MICROS_PER_DAY)
    adj_day = day
    if frac_scaled >= 100_000_000:
        adj_day += 1
        frac_scaled -= 100_000_000
    epoch_field = f"{year % 100:02d}{adj_day:03d}.{frac_scaled:08d}"
    return f"{PREFIX}{epoch_field}{SUFFIX}"


@given(
    st.integers(min_value=1957, max_value=2056),
    st.integers(min_value=1, max_value=365),
    st.integers(min_value=0, max_value=86399),
    st.integers(min_value=0, max_value=999_999),
)
def test_epoch_matches_manual(year: int, day: int, seconds: int, micros: int) -> None:
    line1 = build_line1(year, day, seconds, micros)
    result = tle_epoch(line1)
    expected = dt.datetime(year, 1, 1, tzinfo=dt.timezone.utc) + dt.timedelta(
        days=day - 1, seconds=seconds, microseconds=micros
    )
    assert result.tzinfo is dt.timezone.utc
    delta = abs(result - expected)
    assert delta <= dt.timedelta(microseconds=900)


def test_century_pivot() -> None:
    assert full_year(57) == 1957
    assert full_year(99) == 1999
    assert full_year(0) == 2000
    assert full_year(56) == 2056


def test_iss_epoch() -> None:
    epoch = tle_epoch(BASE_LINE1)
    assert epoch.date() == dt.date(2008, 9, 20)
    assert epoch == epoch_to_datetime(8, 264.51782528)


def test_epoch_from_fields_rejects_malformed_text() -> None:
    assert epoch_from_fields("08", "264.51782528") == tle_epoch(BASE_LINE1)
    assert epoch_from_fields("8X", "264.5") is None
    assert epoch_from_fields("08", "abc") is None
    assert epoch_from_fields(None, "264.5") is None
    assert epoch_from_fields("08", "9" * 40) is None
