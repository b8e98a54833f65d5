"""Parsed TLE record and the tagged result types returned by entry points."""

from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .epoch import epoch_from_fields
from .errors import Issue
from .fields import FIELD_NAMES, NumericElements, numeric_elements


@dataclasses.dataclass(frozen=True)
class TleRecord:
    """Structured view of one TLE.

    Every element is kept as the verbatim trimmed text of its columns so the
    original formatting survives; :meth:`numeric` gives the parsed numbers.
    Fields are ``None`` only when a recovery parse could not reach them.
    """

    satellite_name: Optional[str] = None

    line_number1: Optional[str] = None
    satellite_number1: Optional[str] = None
    classification: Optional[str] = None
    intl_designator_year: Optional[str] = None
    intl_designator_launch: Optional[str] = None
    intl_designator_piece: Optional[str] = None
    epoch_year: Optional[str] = None
    epoch_day: Optional[str] = None
    first_derivative: Optional[str] = None
    second_derivative: Optional[str] = None
    bstar: Optional[str] = None
    ephemeris_type: Optional[str] = None
    element_set_number: Optional[str] = None
    checksum1: Optional[str] = None

    line_number2: Optional[str] = None
    satellite_number2: Optional[str] = None
    inclination: Optional[str] = None
    right_ascension: Optional[str] = None
    eccentricity: Optional[str] = None
    argument_of_perigee: Optional[str] = None
    mean_anomaly: Optional[str] = None
    mean_motion: Optional[str] = None
    revolution_number: Optional[str] = None
    checksum2: Optional[str] = None

    line1: Optional[str] = None
    line2: Optional[str] = None
    warnings: Tuple[Issue, ...] = ()
    comments: Tuple[str, ...] = ()

    @classmethod
    def from_fields(
        cls,
        fields: Mapping[str, Optional[str]],
        satellite_name: Optional[str] = None,
        line1: Optional[str] = None,
        line2: Optional[str] = None,
        warnings=(),
        comments=(),
    ) -> "TleRecord":
        values = {name: fields.get(name) for name in FIELD_NAMES}
        return cls(
            satellite_name=satellite_name,
            line1=line1,
            line2=line2,
            warnings=tuple(warnings),
            comments=tuple(comments),
            **values,
        )

    @property
    def norad_id(self) -> Optional[str]:
        return self.satellite_number1

    @property
    def epoch(self) -> Optional[dt.datetime]:
        return epoch_from_fields(self.epoch_year, self.epoch_day)

    def fields(self) -> Dict[str, Optional[str]]:
        return {name: getattr(self, name) for name in FIELD_NAMES}

    def numeric(self) -> NumericElements:
        return numeric_elements(self.fields())

    def as_text(self, three_line: bool = True) -> str:
        if three_line and self.satellite_name:
            return f"{self.satellite_name}\n{self.line1}\n{self.line2}\n"
        return f"{self.line1}\n{self.line2}\n"

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"satellite_name": self.satellite_name}
        payload.update(self.fields())
        if self.warnings:
            payload["warnings"] = [issue.as_dict() for issue in self.warnings]
        if self.comments:
            payload["comments"] = list(self.comments)
        return payload


# ------------------------------ result unions ------------------------------ #


@dataclasses.dataclass(frozen=True)
class ValidationSuccess:
    warnings: Tuple[Issue, ...] = ()
    errors: Tuple[Issue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return True


@dataclasses.dataclass(frozen=True)
class ValidationFailure:
    errors: Tuple[Issue, ...]
    warnings: Tuple[Issue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return False


ValidationResult = Union[ValidationSuccess, ValidationFailure]


@dataclasses.dataclass(frozen=True)
class ParseSuccess:
    record: TleRecord
    warnings: Tuple[Issue, ...] = ()

    @property
    def ok(self) -> bool:
        return True


@dataclasses.dataclass(frozen=True)
class ParseFailure:
    errors: Tuple[Issue, ...]
    warnings: Tuple[Issue, ...] = ()

    @property
    def ok(self) -> bool:
        return False


ParseResult = Union[ParseSuccess, ParseFailure]


__all__ = [
    "ParseFailure",
    "ParseResult",
    "ParseSuccess",
    "TleRecord",
    "ValidationFailure",
    "ValidationResult",
    "ValidationSuccess",
]
