"""Tests for logging helpers."""

import json
import logging

import pytest

from futar.config import get_settings
from futar.utils.exceptions import ConfigurationError
from futar.utils.logger import ROOT_LOGGER_NAME, get_logger, log_api_call, setup_logging


@pytest.fixture
def restore_root_logger():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_get_logger_names() -> None:
    assert get_logger().name == "futar"
    assert get_logger("FutarClient").name == "futar.FutarClient"


def test_setup_logging_json(capsys, restore_root_logger) -> None:
    setup_logging(level="info", format_type="json")

    get_logger("client").info("hello", extra={"api_endpoint": "/metadata.json"})

    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["message"] == "hello"
    assert record["levelname"] == "INFO"
    assert record["name"] == "futar.client"
    assert record["api_endpoint"] == "/metadata.json"


def test_setup_logging_text(capsys, restore_root_logger) -> None:
    setup_logging(level="WARNING", format_type="text")

    get_logger("client").info("dropped")
    get_logger("client").warning("kept")

    err = capsys.readouterr().err
    assert "dropped" not in err
    assert "WARNING  futar.client: kept" in err


def test_setup_logging_reads_environment(monkeypatch, capsys, restore_root_logger) -> None:
    monkeypatch.setenv("FUTAR_LOG_LEVEL", "debug")
    monkeypatch.setenv("FUTAR_LOG_FORMAT", "text")

    logger = setup_logging()

    assert logger.level == logging.DEBUG
    get_logger("client").debug("request built")
    err = capsys.readouterr().err
    assert "DEBUG    futar.client: request built" in err


def test_explicit_arguments_win_over_environment(monkeypatch, restore_root_logger) -> None:
    monkeypatch.setenv("FUTAR_LOG_LEVEL", "DEBUG")

    assert setup_logging(level="ERROR", format_type="json").level == logging.ERROR


@pytest.mark.parametrize("kwargs", [{"level": "LOUD"}, {"format_type": "xml"}])
def test_setup_logging_rejects_bad_values(kwargs, restore_root_logger) -> None:
    with pytest.raises(ConfigurationError):
        setup_logging(**kwargs)


def test_log_api_call_levels(caplog) -> None:
    logger = logging.getLogger("futar_test_calls")

    with caplog.at_level(logging.INFO, logger="futar_test_calls"):
        log_api_call(logger, "/stop/BKK_F01080.json", 12.3456, status_code=200, envelope_code=200)
        log_api_call(logger, "/stop/BKK_F01080.json", 3.0, envelope_code=404, error_code="SERVICE_ERROR")

    ok, failed = caplog.records
    assert ok.levelno == logging.INFO
    assert ok.duration_ms == 12.35
    assert ok.envelope_code == 200
    assert failed.levelno == logging.ERROR
    assert failed.error_code == "SERVICE_ERROR"
    assert failed.getMessage() == "API call failed: /stop/BKK_F01080.json"
