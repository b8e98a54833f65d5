"""Hand-off of parsed records to the SGP4 propagator."""

from __future__ import annotations

from sgp4.api import WGS72, Satrec

from .checksum import LINE_LENGTH
from .errors import ErrorCode, TLEFormatError
from .record import TleRecord


def to_satrec(record: TleRecord, gravity: int = WGS72) -> Satrec:
    """Build an :class:`sgp4.api.Satrec` from the record's element lines.

    Only records with both element lines intact can be handed over; partial
    results from the recovery parser raise :class:`TLEFormatError`.
    """

    for number, line in ((1, record.line1), (2, record.line2)):
        if line is None or len(line) != LINE_LENGTH:
            raise TLEFormatError(
                f"Line {number} is incomplete; cannot build a propagator model",
                ErrorCode.INVALID_LINE_LENGTH,
                {"line": number, "actual": None if line is None else len(line)},
            )
    return Satrec.twoline2rv(record.line1, record.line2, gravity)


__all__ = ["to_satrec"]
