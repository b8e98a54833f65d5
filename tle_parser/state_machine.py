"""State-machine TLE parser with best-effort error recovery.

Unlike :func:`tle_parser.parser.parse`, which stops at the first fatal
problem, this parser walks a fixed sequence of states, records every issue it
meets along the way and keeps going whenever a sensible default exists. The
result always carries the final state, whatever data could be extracted and
the complete issue and recovery log.

Each state is served by one handler method that does the work for that state
and returns the next state; :meth:`StateMachineParser.parse` simply applies
handlers until a terminal state is reached.
"""

from __future__ import annotations

import dataclasses
import enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .anomalies import detect_anomalies
from .checksum import LINE_LENGTH, validate_checksum
from .errors import ErrorCode, Issue, Severity
from .fields import LINE1_FIELDS, LINE2_FIELDS, MISSING, PARTIAL, slice_field
from .lines import split_lines
from .logging import get_logger, log_context
from .options import RecoveryOptions, resolve
from .record import TleRecord
from .validator import RANGE_RULES, VALID_CLASSIFICATIONS, check_satellite_name, range_issues

LOGGER = get_logger(__name__)

MAX_TRANSITIONS = 100


class ParserState(str, enum.Enum):
    INITIAL = "INITIAL"
    DETECTING_FORMAT = "DETECTING_FORMAT"
    PARSING_NAME = "PARSING_NAME"
    PARSING_LINE1 = "PARSING_LINE1"
    PARSING_LINE2 = "PARSING_LINE2"
    VALIDATING = "VALIDATING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


TERMINAL_STATES = frozenset({ParserState.COMPLETED, ParserState.ERROR})


class RecoveryAction(str, enum.Enum):
    CONTINUE = "CONTINUE"
    SKIP_FIELD = "SKIP_FIELD"
    USE_DEFAULT = "USE_DEFAULT"
    ATTEMPT_FIX = "ATTEMPT_FIX"
    ABORT = "ABORT"


# Fields range-checked once both lines are read.
_CROSS_CHECKED = frozenset(
    {
        "epoch_year",
        "epoch_day",
        "inclination",
        "right_ascension",
        "eccentricity",
        "argument_of_perigee",
        "mean_anomaly",
        "mean_motion",
    }
)
_CROSS_RULES = tuple(rule for rule in RANGE_RULES if rule.field in _CROSS_CHECKED)


@dataclasses.dataclass
class ParserContext:
    """Scratch state owned by a single :meth:`StateMachineParser.parse` run."""

    text: Any = None
    lines: List[str] = dataclasses.field(default_factory=list)
    comments: Tuple[str, ...] = ()
    line_count: int = 0
    has_name: bool = False
    name_index: int = -1
    line1_index: int = -1
    line2_index: int = -1
    recovery_attempts: int = 0
    satellite_name: Optional[str] = None
    raw_lines: Dict[int, str] = dataclasses.field(default_factory=dict)
    full_length: Dict[int, bool] = dataclasses.field(default_factory=dict)
    fields: Dict[str, Optional[str]] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class RecoveryRecord:
    action: RecoveryAction
    description: str
    state: ParserState
    context: Mapping[str, Any] = dataclasses.field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))


@dataclasses.dataclass(frozen=True)
class ContextSummary:
    line_count: int
    has_name: bool
    recovery_attempts: int


@dataclasses.dataclass(frozen=True)
class RecoveryResult:
    success: bool
    state: ParserState
    data: Optional[TleRecord]
    errors: Tuple[Issue, ...]
    warnings: Tuple[Issue, ...]
    recovery_actions: Tuple[RecoveryRecord, ...]
    context: ContextSummary

    @property
    def actions(self) -> Tuple[RecoveryAction, ...]:
        return tuple(record.action for record in self.recovery_actions)

    @property
    def codes(self) -> Tuple[ErrorCode, ...]:
        return tuple(issue.code for issue in self.errors + self.warnings)


class StateMachineParser:
    """Parse TLE text through an explicit state machine.

    A parser instance is reusable but not shareable: :meth:`parse` resets all
    accumulated state on entry, so concurrent callers must each use their own
    instance (:func:`parse_with_recovery` does this for you).
    """

    _HANDLERS: Mapping[ParserState, str] = {
        ParserState.INITIAL: "_start",
        ParserState.DETECTING_FORMAT: "_detect_format",
        ParserState.PARSING_NAME: "_parse_name",
        ParserState.PARSING_LINE1: "_parse_line1",
        ParserState.PARSING_LINE2: "_parse_line2",
        ParserState.VALIDATING: "_validate",
    }

    def __init__(self, options: Optional[RecoveryOptions] = None, **overrides) -> None:
        self.options = resolve(options, RecoveryOptions, overrides)
        self.reset()

    def reset(self) -> None:
        self.state = ParserState.INITIAL
        self.errors: List[Issue] = []
        self.warnings: List[Issue] = []
        self.recovery_actions: List[RecoveryRecord] = []
        self.context = ParserContext()

    # ------------------------------------------------------------------ #
    # bookkeeping

    def _add_issue(self, severity: Severity, code: ErrorCode, message: str, **details: Any) -> Issue:
        line = details.pop("line", None)
        field = details.pop("field", None)
        expected = details.pop("expected", None)
        actual = details.pop("actual", None)
        details["state"] = self.state.value
        issue = Issue(
            code=code,
            message=message,
            severity=severity,
            line=line,
            field=field,
            expected=expected,
            actual=actual,
            context=details,
        )
        if issue.is_warning:
            self.warnings.append(issue)
        else:
            self.errors.append(issue)
        return issue

    def _file(self, issue: Issue, severity: Severity) -> None:
        context = dict(issue.context)
        context["state"] = self.state.value
        issue = dataclasses.replace(issue, severity=severity, context=context)
        if issue.is_warning:
            self.warnings.append(issue)
        else:
            self.errors.append(issue)

    def _recover(self, action: RecoveryAction, description: str, **context: Any) -> None:
        if not self.options.attempt_recovery:
            return
        self.recovery_actions.append(
            RecoveryRecord(action=action, description=description, state=self.state, context=context)
        )
        self.context.recovery_attempts += 1
        LOGGER.debug("recovery_action", extra={"action": action.value, "description": description})

    def _transition(self, new_state: ParserState) -> None:
        if new_state is not self.state:
            LOGGER.debug("state_transition", extra={"from_state": self.state.value, "to_state": new_state.value})
        self.state = new_state

    # ------------------------------------------------------------------ #
    # driver

    def parse(self, text: Any) -> RecoveryResult:
        """Run the state machine over ``text``; never raises for bad input."""

        self.reset()
        self.context.text = text
        transitions = 0
        while self.state not in TERMINAL_STATES:
            if transitions >= MAX_TRANSITIONS:
                self._add_issue(
                    Severity.CRITICAL,
                    ErrorCode.STATE_MACHINE_LOOP,
                    "State machine exceeded maximum iterations",
                    iterations=transitions,
                )
                self._transition(ParserState.ERROR)
                break
            handler = getattr(self, self._HANDLERS.get(self.state, "_unexpected_state"))
            self._transition(handler())
            transitions += 1

        result = self._result()
        with log_context(norad_id=self.context.fields.get("satellite_number1")):
            LOGGER.debug(
                "recovery_parse_finished",
                extra={
                    "final_state": result.state.value,
                    "errors": len(result.errors),
                    "warnings": len(result.warnings),
                    "recoveries": len(result.recovery_actions),
                },
            )
        return result

    def _unexpected_state(self) -> ParserState:
        self._add_issue(Severity.CRITICAL, ErrorCode.STATE_MACHINE_LOOP, f"No handler for state {self.state.value}")
        return ParserState.ERROR

    # ------------------------------------------------------------------ #
    # state handlers

    def _start(self) -> ParserState:
        text = self.context.text
        if not isinstance(text, str):
            self._add_issue(
                Severity.CRITICAL,
                ErrorCode.INVALID_INPUT_TYPE,
                "TLE data must be a string",
                input_type=type(text).__name__,
            )
            return ParserState.ERROR
        if not text.strip():
            self._add_issue(
                Severity.CRITICAL,
                ErrorCode.EMPTY_INPUT,
                "TLE string cannot be empty",
                input_length=len(text),
            )
            return ParserState.ERROR
        return ParserState.DETECTING_FORMAT

    def _detect_format(self) -> ParserState:
        ctx = self.context
        normalized = split_lines(ctx.text)
        ctx.lines = list(normalized.data)
        ctx.comments = normalized.comments
        ctx.line_count = len(ctx.lines)

        if ctx.line_count < 2:
            self._add_issue(
                Severity.CRITICAL,
                ErrorCode.INVALID_LINE_COUNT,
                f"TLE must contain at least 2 lines (found {ctx.line_count})",
                expected="2 or 3",
                actual=ctx.line_count,
            )
            self._recover(RecoveryAction.ABORT, "Insufficient lines to parse TLE", line_count=ctx.line_count)
            return ParserState.ERROR

        if ctx.line_count > 3:
            return self._recover_excess_lines()

        if ctx.line_count == 3:
            ctx.has_name = True
            ctx.name_index, ctx.line1_index, ctx.line2_index = 0, 1, 2
            return ParserState.PARSING_NAME

        ctx.line1_index, ctx.line2_index = 0, 1
        return ParserState.PARSING_LINE1

    def _recover_excess_lines(self) -> ParserState:
        ctx = self.context
        self._add_issue(
            Severity.ERROR,
            ErrorCode.INVALID_LINE_COUNT,
            f"TLE should contain 2 or 3 lines (found {ctx.line_count})",
            expected="2 or 3",
            actual=ctx.line_count,
        )

        if self.options.attempt_recovery:
            self._recover(
                RecoveryAction.ATTEMPT_FIX,
                "Attempting to identify valid TLE lines from excess lines",
                line_count=ctx.line_count,
            )
            ones = [idx for idx, line in enumerate(ctx.lines) if line.startswith("1")]
            twos = [idx for idx, line in enumerate(ctx.lines) if line.startswith("2")]
            if len(ones) == 1 and len(twos) == 1 and ones[0] < twos[0]:
                idx1, idx2 = ones[0], twos[0]
                rebuilt = [ctx.lines[idx1], ctx.lines[idx2]]
                if idx1 > 0:
                    rebuilt.insert(0, ctx.lines[idx1 - 1])
                ctx.lines = rebuilt
                ctx.line_count = len(rebuilt)
                ctx.has_name = len(rebuilt) == 3
                if ctx.has_name:
                    ctx.name_index, ctx.line1_index, ctx.line2_index = 0, 1, 2
                else:
                    ctx.line1_index, ctx.line2_index = 0, 1
                self._recover(
                    RecoveryAction.CONTINUE,
                    "Successfully identified TLE lines from excess input",
                    extracted_lines=ctx.line_count,
                )
                return ParserState.PARSING_NAME if ctx.has_name else ParserState.PARSING_LINE1

        self._add_issue(
            Severity.CRITICAL,
            ErrorCode.INVALID_LINE_COUNT,
            "Could not identify a single Line 1 / Line 2 pair in the input",
            actual=ctx.line_count,
        )
        self._recover(RecoveryAction.ABORT, "Unable to reconstruct TLE from excess lines")
        return ParserState.ERROR

    def _parse_name(self) -> ParserState:
        name = self.context.lines[self.context.name_index]
        self.context.satellite_name = name
        for issue in check_satellite_name(name):
            self._file(issue, Severity.WARNING)
        return ParserState.PARSING_LINE1

    def _parse_line1(self) -> ParserState:
        line = self.context.lines[self.context.line1_index]
        if self._parse_line(line, 1):
            classification = self.context.fields.get("classification")
            if classification and classification not in VALID_CLASSIFICATIONS:
                self._add_issue(
                    Severity.ERROR,
                    ErrorCode.INVALID_CLASSIFICATION,
                    f"Classification must be U, C, or S (got '{classification}')",
                    line=1,
                    field="classification",
                    expected=tuple(VALID_CLASSIFICATIONS),
                    actual=classification,
                )
        return ParserState.PARSING_LINE2

    def _parse_line2(self) -> ParserState:
        line = self.context.lines[self.context.line2_index]
        self._parse_line(line, 2)
        return ParserState.VALIDATING

    def _parse_line(self, line: str, number: int) -> bool:
        """Extract one line's fields; returns ``False`` when the line was skipped."""

        ctx = self.context
        ctx.raw_lines[number] = line
        ctx.full_length[number] = len(line) == LINE_LENGTH
        specs = LINE1_FIELDS if number == 1 else LINE2_FIELDS

        if len(line) != LINE_LENGTH:
            self._add_issue(
                Severity.ERROR,
                ErrorCode.INVALID_LINE_LENGTH,
                f"Line {number} must be exactly {LINE_LENGTH} characters (got {len(line)})",
                line=number,
                expected=LINE_LENGTH,
                actual=len(line),
            )
            if self.options.attempt_recovery:
                self._recover(
                    RecoveryAction.CONTINUE,
                    f"Attempting to parse Line {number} despite incorrect length",
                    length=len(line),
                )
            elif self.options.strict_mode:
                for spec in specs:
                    ctx.fields[spec.name] = None
                return False

        for spec in specs:
            piece = slice_field(line, spec)
            ctx.fields[spec.name] = piece.value
            if piece.status == PARTIAL:
                self._add_issue(
                    Severity.WARNING,
                    ErrorCode.PARTIAL_FIELD,
                    f"{spec.label} is incomplete due to short line",
                    line=number,
                    field=spec.name,
                    expected=(spec.start, spec.end),
                    actual=len(line),
                )
                self._recover(RecoveryAction.USE_DEFAULT, f"Using partial value for {spec.label}", field=spec.name)
            elif piece.status == MISSING:
                self._add_issue(
                    Severity.WARNING,
                    ErrorCode.MISSING_FIELD,
                    f"{spec.label} is missing due to short line",
                    line=number,
                    field=spec.name,
                    expected=(spec.start, spec.end),
                    actual=len(line),
                )
                self._recover(RecoveryAction.USE_DEFAULT, f"Using null for missing {spec.label}", field=spec.name)

        marker = ctx.fields.get(f"line_number{number}")
        if marker != str(number):
            self._add_issue(
                Severity.ERROR,
                ErrorCode.INVALID_LINE_NUMBER,
                f"Line {number} must start with '{number}' (got '{marker}')",
                line=number,
                expected=str(number),
                actual=marker,
            )

        if len(line) == LINE_LENGTH:
            checksum = validate_checksum(line)
            if checksum.error is not None:
                self._add_issue(
                    Severity.ERROR,
                    checksum.error.code,
                    f"Line {number}: {checksum.error.message}",
                    line=number,
                    field="checksum",
                    expected=checksum.expected,
                    actual=checksum.actual,
                )
                if checksum.error.code is ErrorCode.INVALID_CHECKSUM_CHARACTER:
                    description = "Continuing despite non-digit checksum character"
                else:
                    description = "Continuing despite checksum mismatch"
                self._recover(RecoveryAction.CONTINUE, description, line=number, code=checksum.error.code.value)
        return True

    def _validate(self) -> ParserState:
        ctx = self.context
        fields = ctx.fields

        sat1 = fields.get("satellite_number1")
        sat2 = fields.get("satellite_number2")
        if sat1 and sat2 and sat1 != sat2:
            self._add_issue(
                Severity.ERROR,
                ErrorCode.SATELLITE_NUMBER_MISMATCH,
                f"Satellite numbers must match (Line 1: {sat1}, Line 2: {sat2})",
                field="satellite_number",
                line1_value=sat1,
                line2_value=sat2,
            )

        present = {name: value for name, value in fields.items() if value}
        for rule, issue in range_issues(present, _CROSS_RULES):
            self._file(issue, Severity.WARNING if rule.warning_only else Severity.ERROR)

        for issue in detect_anomalies(
            present,
            reference_time=self.options.reference_time,
            stale_after_days=self.options.stale_after_days,
            line1=ctx.full_length.get(1, False),
            line2=ctx.full_length.get(2, False),
        ):
            self._file(issue, Severity.WARNING)

        critical = any(issue.severity is Severity.CRITICAL for issue in self.errors)
        if critical and not self.options.include_partial_results:
            return ParserState.ERROR
        return ParserState.COMPLETED

    # ------------------------------------------------------------------ #

    def _result(self) -> RecoveryResult:
        ctx = self.context
        completed = self.state is ParserState.COMPLETED
        data: Optional[TleRecord] = None
        if (completed or self.options.include_partial_results) and (ctx.fields or ctx.satellite_name):
            data = TleRecord.from_fields(
                ctx.fields,
                satellite_name=ctx.satellite_name,
                line1=ctx.raw_lines.get(1),
                line2=ctx.raw_lines.get(2),
                comments=ctx.comments,
            )
        return RecoveryResult(
            success=completed,
            state=self.state,
            data=data,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            recovery_actions=tuple(self.recovery_actions),
            context=ContextSummary(
                line_count=ctx.line_count,
                has_name=ctx.has_name,
                recovery_attempts=ctx.recovery_attempts,
            ),
        )


def parse_with_recovery(text: Any, options: Optional[RecoveryOptions] = None, **overrides) -> RecoveryResult:
    """Parse ``text`` with a fresh :class:`StateMachineParser`; never raises on bad input."""

    return StateMachineParser(options, **overrides).parse(text)


__all__ = [
    "ContextSummary",
    "MAX_TRANSITIONS",
    "ParserContext",
    "ParserState",
    "RecoveryAction",
    "RecoveryRecord",
    "RecoveryResult",
    "StateMachineParser",
    "TERMINAL_STATES",
    "parse_with_recovery",
]
