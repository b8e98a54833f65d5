"""NORAD modulo-10 checksum for TLE element lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import ErrorCode, Issue

LINE_LENGTH = 69
DATA_WINDOW = 68  # the checksum digit itself sits at index 68


@dataclass(frozen=True)
class ChecksumResult:
    is_valid: bool
    expected: Optional[int]
    actual: Optional[int]
    error: Optional[Issue] = None


def calculate_checksum(line: str) -> int:
    """Sum the digits of the first 68 characters, counting ``-`` as 1, mod 10."""

    total = 0
    for ch in line[:DATA_WINDOW]:
        if "0" <= ch <= "9":
            total += ord(ch) - 48
        elif ch == "-":
            total += 1
    return total % 10


def validate_checksum(line: str) -> ChecksumResult:
    """Compare the declared checksum digit of ``line`` with the computed one."""

    if len(line) != LINE_LENGTH:
        return ChecksumResult(
            is_valid=False,
            expected=None,
            actual=None,
            error=Issue(
                code=ErrorCode.INVALID_LINE_LENGTH,
                message=f"Line length must be {LINE_LENGTH} characters",
                field="line_length",
                expected=LINE_LENGTH,
                actual=len(line),
            ),
        )

    expected = calculate_checksum(line)
    declared = line[DATA_WINDOW]
    if not ("0" <= declared <= "9"):
        return ChecksumResult(
            is_valid=False,
            expected=expected,
            actual=None,
            error=Issue(
                code=ErrorCode.INVALID_CHECKSUM_CHARACTER,
                message="Checksum position must contain a digit",
                field="checksum",
                actual=declared,
                context={"position": DATA_WINDOW},
            ),
        )

    actual = int(declared)
    if actual == expected:
        return ChecksumResult(is_valid=True, expected=expected, actual=actual)
    return ChecksumResult(
        is_valid=False,
        expected=expected,
        actual=actual,
        error=Issue(
            code=ErrorCode.CHECKSUM_MISMATCH,
            message=f"Checksum mismatch: expected {expected}, got {actual}",
            field="checksum",
            expected=expected,
            actual=actual,
        ),
    )


def append_checksum(line: str) -> str:
    """Return the first 68 characters of ``line`` (space padded) plus their checksum."""

    body = line[:DATA_WINDOW].ljust(DATA_WINDOW)
    return f"{body}{calculate_checksum(body)}"


__all__ = [
    "ChecksumResult",
    "DATA_WINDOW",
    "LINE_LENGTH",
    "append_checksum",
    "calculate_checksum",
    "validate_checksum",
]
