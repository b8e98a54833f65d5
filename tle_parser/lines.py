"""Line normalisation for raw TLE payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

COMMENT_PREFIX = "#"


@dataclass(frozen=True)
class NormalizedLines:
    """Data lines and comment lines split out of a payload, in input order."""

    data: Tuple[str, ...]
    comments: Tuple[str, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.data)


def normalize_line_endings(text: str) -> str:
    """Collapse CRLF and bare CR line breaks into LF."""

    return text.replace("\r\n", "\n").replace("\r", "\n")


def _clean(raw: str) -> str:
    return raw.replace("\t", " ").strip()


def split_lines(text: str) -> NormalizedLines:
    """Split ``text`` into trimmed, non-empty data lines plus comment lines."""

    data: List[str] = []
    comments: List[str] = []
    for raw in normalize_line_endings(text).split("\n"):
        line = _clean(raw)
        if not line:
            continue
        if line.startswith(COMMENT_PREFIX):
            comments.append(line)
        else:
            data.append(line)
    return NormalizedLines(data=tuple(data), comments=tuple(comments))


def parse_lines(text: str) -> List[str]:
    """Return only the data lines of ``text``."""

    return list(split_lines(text).data)


__all__ = ["COMMENT_PREFIX", "NormalizedLines", "normalize_line_endings", "parse_lines", "split_lines"]
