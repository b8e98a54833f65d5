"""Parsing of multi-TLE documents such as CelesTrak catalogue dumps."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Callable, Collection, Iterator, List, Optional, Tuple, Union

from .errors import TLEFormatError, TLEValidationError
from .fields import parse_decimal
from .lines import COMMENT_PREFIX, normalize_line_endings
from .logging import get_logger, log_context
from .options import ParseOptions
from .parser import parse
from .record import TleRecord

LOGGER = get_logger(__name__)

Matcher = Union[str, Collection[str], Callable[[str], bool]]


def split_tles(text: str) -> List[str]:
    """Group the lines of a multi-TLE document into one text block per TLE.

    A line starting with ``1`` opens a set (keeping any name lines read just
    before it) and a line starting with ``2`` closes it; any other line is a
    satellite name. Comment lines are kept with the set they appear in. A
    Line 1 that is never closed, or a Line 2 with nothing open, is dropped
    together with the names collected for it.
    """

    sets: List[str] = []
    current: List[str] = []
    has_line1 = False

    for raw in normalize_line_endings(text).split("\n"):
        line = raw.strip()
        if not line:
            continue
        if line.startswith(COMMENT_PREFIX):
            if current:
                current.append(line)
            continue
        if line[0] == "1":
            if has_line1:
                current = []
            current.append(line)
            has_line1 = True
        elif line[0] == "2":
            if has_line1:
                current.append(line)
                sets.append("\n".join(current))
            current = []
            has_line1 = False
        else:
            if has_line1:
                current = []
                has_line1 = False
            current.append(line)
    return sets


@dataclass(frozen=True)
class TleFilter:
    """Selection criteria applied to parsed records; unset criteria match everything.

    String matchers accept a single value, a collection of values or a
    predicate. Satellite names match on substring.
    """

    satellite_numbers: Optional[Matcher] = None
    names: Optional[Matcher] = None
    intl_designators: Optional[Matcher] = None
    classifications: Optional[Collection[str]] = None
    inclination_range: Optional[Tuple[Optional[float], Optional[float]]] = None
    epoch_range: Optional[Tuple[Optional[dt.datetime], Optional[dt.datetime]]] = None
    predicate: Optional[Callable[[TleRecord], bool]] = None


def _matches(value: str, matcher: Matcher, substring: bool = False) -> bool:
    if callable(matcher):
        return bool(matcher(value))
    candidates = [matcher] if isinstance(matcher, str) else list(matcher)
    if substring:
        return any(candidate in value for candidate in candidates)
    return value in candidates


def _aware(value: dt.datetime) -> dt.datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=dt.timezone.utc)


def apply_filter(record: TleRecord, filt: TleFilter) -> bool:
    """Return ``True`` when ``record`` satisfies every criterion of ``filt``."""

    if filt.satellite_numbers is not None:
        if not _matches(record.satellite_number1 or "", filt.satellite_numbers):
            return False

    if filt.names is not None and record.satellite_name:
        if not _matches(record.satellite_name, filt.names, substring=True):
            return False

    if filt.intl_designators is not None:
        designator = "".join(
            part or ""
            for part in (record.intl_designator_year, record.intl_designator_launch, record.intl_designator_piece)
        )
        if not _matches(designator, filt.intl_designators):
            return False

    if filt.classifications is not None:
        allowed = [filt.classifications] if isinstance(filt.classifications, str) else filt.classifications
        if record.classification not in allowed:
            return False

    if filt.inclination_range is not None:
        low, high = filt.inclination_range
        inclination = parse_decimal(record.inclination)
        if inclination is None:
            return False
        if low is not None and inclination < low:
            return False
        if high is not None and inclination > high:
            return False

    if filt.epoch_range is not None:
        start, end = filt.epoch_range
        epoch = record.epoch
        if epoch is None:
            return False
        if start is not None and epoch < _aware(start):
            return False
        if end is not None and epoch > _aware(end):
            return False

    if filt.predicate is not None and not filt.predicate(record):
        return False
    return True


@dataclass(frozen=True)
class BatchFailure:
    index: int
    raw: str
    error: Exception


@dataclass
class BatchResult:
    records: List[TleRecord] = field(default_factory=list)
    failures: List[BatchFailure] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[TleRecord]:
        return iter(self.records)


def parse_batch(
    text: str,
    options: Optional[ParseOptions] = None,
    *,
    continue_on_error: bool = False,
    skip: int = 0,
    limit: Optional[int] = None,
    filter: Optional[TleFilter] = None,
) -> BatchResult:
    """Parse every TLE in ``text``.

    ``skip`` drops the first sets before parsing; ``limit`` caps the number of
    records kept after filtering. Without ``continue_on_error`` the first
    failing set re-raises its error; with it, failures are collected in
    :attr:`BatchResult.failures`.
    """

    result = BatchResult()
    sets = split_tles(text)
    LOGGER.debug("batch_split", extra={"sets": len(sets)})

    for index, raw in enumerate(sets):
        if index < skip:
            continue
        if limit is not None and len(result.records) >= limit:
            break
        try:
            record = parse(raw, options)
        except (TLEValidationError, TLEFormatError) as exc:
            if not continue_on_error:
                raise
            with log_context(batch_index=index):
                LOGGER.warning("batch_entry_failed", extra={"error": str(exc), "raw": raw})
            result.failures.append(BatchFailure(index=index, raw=raw, error=exc))
            continue
        if filter is not None and not apply_filter(record, filter):
            continue
        result.records.append(record)

    LOGGER.info(
        "batch_parsed",
        extra={"records": len(result.records), "failures": len(result.failures), "sets": len(sets)},
    )
    return result


def iter_records(text: str, options: Optional[ParseOptions] = None) -> Iterator[TleRecord]:
    """Lazily yield the valid records of ``text``, skipping invalid sets."""

    for index, raw in enumerate(split_tles(text)):
        try:
            yield parse(raw, options)
        except (TLEValidationError, TLEFormatError) as exc:
            with log_context(batch_index=index):
                LOGGER.warning("batch_entry_skipped", extra={"error": str(exc), "raw": raw})


__all__ = [
    "BatchFailure",
    "BatchResult",
    "TleFilter",
    "apply_filter",
    "iter_records",
    "parse_batch",
    "split_tles",
]
