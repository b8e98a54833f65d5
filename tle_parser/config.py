"""Environment-driven configuration for tle_parser."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .logging import configure_logging
from .options import DEFAULT_STALE_AFTER_DAYS, MODES, ParseOptions, RecoveryOptions, profile_options

__all__ = [
    "ParserConfig",
    "load_config",
]


@dataclass(frozen=True)
class ParserConfig:
    """Settings derived from ``TLE_PARSER_*`` environment variables."""

    profile: str = "strict"
    mode: Optional[str] = None
    strict_checksums: Optional[bool] = None
    validate_ranges: Optional[bool] = None
    stale_after_days: float = DEFAULT_STALE_AFTER_DAYS
    log_level: str = "INFO"

    def parse_options(self) -> ParseOptions:
        """Profile defaults with any explicitly configured overrides applied."""

        options = replace(profile_options(self.profile), stale_after_days=self.stale_after_days)
        if self.mode is not None:
            options = replace(options, mode=self.mode)
        if self.strict_checksums is not None:
            options = replace(options, strict_checksums=self.strict_checksums)
        if self.validate_ranges is not None:
            options = replace(options, validate_ranges=self.validate_ranges)
        return options

    def recovery_options(self) -> RecoveryOptions:
        return RecoveryOptions(
            strict_mode=self.mode == "strict",
            stale_after_days=self.stale_after_days,
        )

    def configure_logging(self, stream=None, force: bool = False) -> logging.Logger:
        """Set up the package JSON logger at the configured level."""

        return configure_logging(level=self.log_level, stream=stream, force=force)


_TRUE_SET = {"1", "true", "yes", "on"}
_FALSE_SET = {"0", "false", "no", "off"}


def _to_bool(value: Optional[str], default: Optional[bool] = None) -> Optional[bool]:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_SET:
        return True
    if lowered in _FALSE_SET:
        return False
    return default


def load_config(env: Optional[Mapping[str, str]] = None) -> ParserConfig:
    """Load configuration from environment variables.

    Unknown profiles and modes raise :class:`ValueError` here rather than at
    first use.
    """

    env_map: Mapping[str, str]
    if env is None:
        env_map = os.environ
    else:
        env_map = env

    profile = env_map.get("TLE_PARSER_PROFILE", "strict").strip().lower()
    profile_options(profile)

    mode = env_map.get("TLE_PARSER_MODE")
    if mode is not None:
        mode = mode.strip().lower()
        if mode not in MODES:
            raise ValueError(f"TLE_PARSER_MODE must be one of {MODES!r} (got {mode!r})")

    stale_raw = env_map.get("TLE_PARSER_STALE_DAYS")
    stale = float(stale_raw) if stale_raw else DEFAULT_STALE_AFTER_DAYS

    return ParserConfig(
        profile=profile,
        mode=mode,
        strict_checksums=_to_bool(env_map.get("TLE_PARSER_STRICT_CHECKSUMS")),
        validate_ranges=_to_bool(env_map.get("TLE_PARSER_VALIDATE_RANGES")),
        stale_after_days=stale,
        log_level=env_map.get("TLE_PARSER_LOG_LEVEL", "INFO").strip().upper(),
    )
