"""Parse and validate NORAD Two-Line Element sets."""

from .batch import BatchFailure, BatchResult, TleFilter, apply_filter, iter_records, parse_batch, split_tles
from .checksum import ChecksumResult, append_checksum, calculate_checksum, validate_checksum
from .config import ParserConfig, load_config
from .epoch import epoch_to_datetime, tle_epoch
from .errors import ErrorCode, Issue, Severity, TLEFormatError, TLEValidationError, describe
from .fields import NumericElements, extract_fields
from .interop import to_satrec
from .logging import configure_logging, get_logger, log_context
from .options import PROFILES, ParseOptions, RecoveryOptions, profile_options
from .parser import parse, parse_with_profile, safe_parse
from .record import (
    ParseFailure,
    ParseResult,
    ParseSuccess,
    TleRecord,
    ValidationFailure,
    ValidationResult,
    ValidationSuccess,
)
from .state_machine import ParserState, RecoveryAction, RecoveryResult, StateMachineParser, parse_with_recovery
from .validator import validate

__all__ = [
    "BatchFailure",
    "BatchResult",
    "ChecksumResult",
    "ErrorCode",
    "Issue",
    "NumericElements",
    "PROFILES",
    "ParseFailure",
    "ParseOptions",
    "ParseResult",
    "ParseSuccess",
    "ParserConfig",
    "ParserState",
    "RecoveryAction",
    "RecoveryOptions",
    "RecoveryResult",
    "Severity",
    "StateMachineParser",
    "TLEFormatError",
    "TLEValidationError",
    "TleFilter",
    "TleRecord",
    "ValidationFailure",
    "ValidationResult",
    "ValidationSuccess",
    "append_checksum",
    "apply_filter",
    "calculate_checksum",
    "configure_logging",
    "describe",
    "epoch_to_datetime",
    "extract_fields",
    "get_logger",
    "iter_records",
    "load_config",
    "log_context",
    "parse",
    "parse_batch",
    "parse_with_profile",
    "parse_with_recovery",
    "profile_options",
    "safe_parse",
    "split_tles",
    "tle_epoch",
    "to_satrec",
    "validate",
]
