import io
import json

from tle_parser.logging import configure_logging, get_logger, log_context
from tle_parser.state_machine import parse_with_recovery

ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"


def _setup_logger(level="INFO"):
    stream = io.StringIO()
    configure_logging(level=level, stream=stream, force=True)
    return get_logger("tests"), stream


def _records(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_json_logging_includes_context_and_extras():
    logger, stream = _setup_logger()
    with log_context(norad_id="25544", attempt=1):
        logger.info("tle_parsed", extra={"mode": "strict", "duration": 0.42})
    payload = json.loads(stream.getvalue())
    assert payload["message"] == "tle_parsed"
    assert payload["logger"] == "tle_parser.tests"
    assert payload["context"] == {"norad_id": "25544", "attempt": 1}
    assert payload["extra"]["mode"] == "strict"
    assert payload["extra"]["duration"] == 0.42


def test_long_payloads_are_truncated():
    logger, stream = _setup_logger()
    raw = "\n".join([ISS_LINE1, ISS_LINE2] * 3)
    logger.warning("batch_entry_failed", extra={"raw": raw, "nested": {"lines": [raw]}})
    payload = json.loads(stream.getvalue())
    assert payload["extra"]["raw"].endswith("...<truncated>")
    assert len(payload["extra"]["raw"]) < len(raw)
    assert payload["extra"]["nested"]["lines"][0].endswith("...<truncated>")


def test_context_is_unwound():
    logger, stream = _setup_logger()
    with log_context(norad_id="25544"):
        pass
    logger.info("after")
    assert "context" not in json.loads(stream.getvalue())


def test_state_machine_logs_transitions_at_debug():
    _, stream = _setup_logger(level="DEBUG")
    parse_with_recovery(f"{ISS_LINE1}\n{ISS_LINE2}")
    records = _records(stream)
    transitions = [r["extra"] for r in records if r["message"] == "state_transition"]
    assert transitions[0] == {"from_state": "INITIAL", "to_state": "DETECTING_FORMAT"}
    assert transitions[-1]["to_state"] == "COMPLETED"
    finished = [r for r in records if r["message"] == "recovery_parse_finished"]
    assert finished[0]["context"] == {"norad_id": "25544"}
    assert finished[0]["extra"]["final_state"] == "COMPLETED"


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("TLE_PARSER_LOG_LEVEL", "warning")
    stream = io.StringIO()
    logger = configure_logging(stream=stream, force=True)
    assert logger.level == 30
    get_logger("tests").info("hidden")
    assert stream.getvalue() == ""
