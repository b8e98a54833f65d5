from __future__ import annotations

import datetime as dt

import pytest

from tle_parser.batch import TleFilter, apply_filter, iter_records, parse_batch, split_tles
from tle_parser.checksum import append_checksum
from tle_parser.errors import ErrorCode, TLEValidationError
from tle_parser.parser import parse

ISS_NAME = "ISS (ZARYA)"
ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"

OTHER_LINE1 = append_checksum(ISS_LINE1[:2] + "43013" + "S" + ISS_LINE1[8:68])
OTHER_LINE2 = append_checksum(ISS_LINE2[:2] + "43013" + ISS_LINE2[7:8] + " 97.8000" + ISS_LINE2[16:68])
BROKEN_LINE1 = ISS_LINE1[:68] + "0"

CATALOGUE = "\n".join(
    [
        "# catalogue export",
        ISS_NAME,
        ISS_LINE1,
        "# mid-set note",
        ISS_LINE2,
        OTHER_LINE1,
        OTHER_LINE2,
        "BROKEN SAT",
        BROKEN_LINE1,
        ISS_LINE2,
    ]
)


def test_split_groups_sets_and_keeps_names() -> None:
    sets = split_tles(CATALOGUE)
    assert sets == [
        f"{ISS_NAME}\n{ISS_LINE1}\n# mid-set note\n{ISS_LINE2}",
        f"{OTHER_LINE1}\n{OTHER_LINE2}",
        f"BROKEN SAT\n{BROKEN_LINE1}\n{ISS_LINE2}",
    ]


def test_split_drops_incomplete_groups() -> None:
    assert split_tles(f"LONELY NAME\n{ISS_LINE1}\nNEXT\n{ISS_LINE1}\n{ISS_LINE2}") == [
        f"NEXT\n{ISS_LINE1}\n{ISS_LINE2}"
    ]
    assert split_tles("") == []


def test_batch_stops_on_first_error_by_default() -> None:
    with pytest.raises(TLEValidationError) as excinfo:
        parse_batch(CATALOGUE)
    assert excinfo.value.codes == [ErrorCode.CHECKSUM_MISMATCH]


def test_batch_collects_failures_when_continuing() -> None:
    result = parse_batch(CATALOGUE, continue_on_error=True)
    assert [record.norad_id for record in result] == ["25544", "43013"]
    assert result.records[0].comments == ("# mid-set note",)
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert failure.index == 2
    assert failure.raw.startswith("BROKEN SAT")
    assert isinstance(failure.error, TLEValidationError)


def test_batch_skip_limit_and_filter() -> None:
    assert [r.norad_id for r in parse_batch(CATALOGUE, skip=1, limit=1)] == ["43013"]
    assert [r.norad_id for r in parse_batch(CATALOGUE, limit=1)] == ["25544"]

    only_classified = TleFilter(classifications=["S"])
    result = parse_batch(CATALOGUE, continue_on_error=True, filter=only_classified)
    assert [r.norad_id for r in result] == ["43013"]


def test_iter_records_skips_invalid_sets() -> None:
    assert [record.norad_id for record in iter_records(CATALOGUE)] == ["25544", "43013"]


@pytest.mark.parametrize(
    "filt, expected",
    [
        (TleFilter(), True),
        (TleFilter(satellite_numbers="25544"), True),
        (TleFilter(satellite_numbers=["1", "2"]), False),
        (TleFilter(satellite_numbers=lambda number: number.startswith("25")), True),
        (TleFilter(names="ZARYA"), True),
        (TleFilter(names=["HUBBLE", "NOAA"]), False),
        (TleFilter(intl_designators="98067A"), True),
        (TleFilter(classifications="U"), True),
        (TleFilter(classifications=("C", "S")), False),
        (TleFilter(inclination_range=(50.0, 52.0)), True),
        (TleFilter(inclination_range=(None, 50.0)), False),
        (TleFilter(epoch_range=(dt.datetime(2008, 9, 1), dt.datetime(2008, 10, 1))), True),
        (TleFilter(epoch_range=(dt.datetime(2009, 1, 1, tzinfo=dt.timezone.utc), None)), False),
        (TleFilter(predicate=lambda record: record.satellite_name is None), False),
    ],
)
def test_apply_filter(filt: TleFilter, expected: bool) -> None:
    record = parse(f"{ISS_NAME}\n{ISS_LINE1}\n{ISS_LINE2}")
    assert apply_filter(record, filt) is expected
