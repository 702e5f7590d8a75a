from __future__ import annotations

import io
import logging

from payroll_ingest.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    enable_debug,
    get_logger,
    log_summary,
    reset_logging,
    setup_logging,
)


def test_setup_logging_is_idempotent():
    first = setup_logging()
    assert setup_logging() is first
    assert first.name == LOGGER_NAME
    assert len(first.handlers) == 1
    assert first.propagate is False


def test_labels_and_summary_level():
    stream = io.StringIO()
    logger = setup_logging(stream=stream)
    logger.info("hello")
    logger.warning("careful")
    log_summary("files=1/1")
    assert stream.getvalue().splitlines() == ["INFO hello", "WARN careful", "SUMMARY files=1/1"]
    assert logging.getLevelName(SUMMARY_LEVEL) == "SUMMARY"


def test_module_loggers_use_package_handler():
    stream = io.StringIO()
    setup_logging(stream=stream)
    logging.getLogger("payroll_ingest.services.pipeline").info("from module")
    assert "INFO from module" in stream.getvalue()


def test_debug_hidden_until_enabled():
    stream = io.StringIO()
    logger = setup_logging(stream=stream)
    logger.debug("hidden")
    enable_debug(logger)
    logger.debug("shown")
    assert stream.getvalue().splitlines() == ["DEBUG shown"]


def test_reset_logging_allows_reconfiguration():
    first = io.StringIO()
    setup_logging(stream=first)
    reset_logging()
    second = io.StringIO()
    get_logger()  # default stream
    reset_logging()
    setup_logging(stream=second).info("again")
    assert second.getvalue() == "INFO again\n"
    assert first.getvalue() == ""
