"""Option objects and named parser profiles."""

from __future__ import annotations

import dataclasses
import datetime as dt
from types import MappingProxyType
from typing import Any, Mapping, Optional

STRICT = "strict"
PERMISSIVE = "permissive"
MODES = (STRICT, PERMISSIVE)

DEFAULT_STALE_AFTER_DAYS = 30.0


@dataclasses.dataclass(frozen=True)
class ParseOptions:
    """Options for the fail-fast ``parse``/``validate`` entry points."""

    validate: bool = True
    strict_checksums: bool = True
    validate_ranges: bool = True
    include_warnings: bool = True
    include_comments: bool = True
    mode: str = STRICT
    reference_time: Optional[dt.datetime] = None
    stale_after_days: float = DEFAULT_STALE_AFTER_DAYS

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES!r} (got {self.mode!r})")

    @property
    def permissive(self) -> bool:
        return self.mode == PERMISSIVE


@dataclasses.dataclass(frozen=True)
class RecoveryOptions:
    """Options for the state-machine entry point."""

    attempt_recovery: bool = True
    include_partial_results: bool = True
    strict_mode: bool = False
    reference_time: Optional[dt.datetime] = None
    stale_after_days: float = DEFAULT_STALE_AFTER_DAYS


def resolve(options, cls, overrides: Mapping[str, Any]):
    """Merge keyword overrides into an options object of type ``cls``."""

    if options is None:
        options = cls()
    elif not isinstance(options, cls):
        raise TypeError(f"options must be a {cls.__name__} instance")
    if overrides:
        options = dataclasses.replace(options, **overrides)
    return options


PROFILES: Mapping[str, ParseOptions] = MappingProxyType(
    {
        "strict": ParseOptions(),
        "permissive": ParseOptions(strict_checksums=False, validate_ranges=False, mode=PERMISSIVE),
        "fast": ParseOptions(validate=False, include_warnings=False, include_comments=False),
        "realtime": ParseOptions(
            strict_checksums=False,
            validate_ranges=False,
            mode=PERMISSIVE,
            include_warnings=False,
            include_comments=False,
        ),
        "batch": ParseOptions(include_warnings=False, include_comments=False),
        "recovery": ParseOptions(validate=False),
        "legacy": ParseOptions(strict_checksums=False, validate_ranges=False, mode=PERMISSIVE),
    }
)


def profile_options(name: str) -> ParseOptions:
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(f"unknown parser profile '{name}'") from None


__all__ = [
    "DEFAULT_STALE_AFTER_DAYS",
    "MODES",
    "PERMISSIVE",
    "PROFILES",
    "ParseOptions",
    "RecoveryOptions",
    "STRICT",
    "profile_options",
    "resolve",
]
