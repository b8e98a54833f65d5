import io
import json
import logging

import pytest

from tle_parser.config import load_config
from tle_parser.logging import get_logger
from tle_parser.options import ParseOptions


def test_defaults_without_environment():
    config = load_config({})
    assert config.profile == "strict"
    assert config.log_level == "INFO"
    assert config.parse_options() == ParseOptions()
    assert config.recovery_options().strict_mode is False


def test_environment_overrides_profile():
    config = load_config(
        {
            "TLE_PARSER_PROFILE": "Legacy",
            "TLE_PARSER_MODE": "strict",
            "TLE_PARSER_VALIDATE_RANGES": "yes",
            "TLE_PARSER_STALE_DAYS": "7.5",
            "TLE_PARSER_LOG_LEVEL": "debug",
        }
    )
    options = config.parse_options()
    assert config.profile == "legacy"
    assert options.mode == "strict"
    assert options.strict_checksums is False
    assert options.validate_ranges is True
    assert options.stale_after_days == 7.5
    assert config.log_level == "DEBUG"
    assert config.recovery_options().strict_mode is True
    assert config.recovery_options().stale_after_days == 7.5


def test_unrecognised_booleans_fall_back_to_profile():
    config = load_config({"TLE_PARSER_STRICT_CHECKSUMS": "maybe"})
    assert config.strict_checksums is None
    assert config.parse_options().strict_checksums is True


def test_invalid_values_raise():
    with pytest.raises(ValueError):
        load_config({"TLE_PARSER_PROFILE": "turbo"})
    with pytest.raises(ValueError):
        load_config({"TLE_PARSER_MODE": "lenient"})
    with pytest.raises(ValueError):
        load_config({"TLE_PARSER_STALE_DAYS": "soon"})


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("TLE_PARSER_PROFILE", "batch")
    config = load_config()
    assert config.parse_options().include_warnings is False


def test_configured_log_level_is_applied():
    stream = io.StringIO()
    logger = load_config({"TLE_PARSER_LOG_LEVEL": "warning"}).configure_logging(stream=stream, force=True)
    assert logger.level == logging.WARNING

    get_logger("config").info("hidden")
    get_logger("config").warning("shown")
    messages = [json.loads(line)["message"] for line in stream.getvalue().splitlines()]
    assert messages == ["shown"]
