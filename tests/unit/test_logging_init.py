from __future__ import annotations

import io
import logging

from sheetdash.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    get_logger,
    log_summary,
    reset_logging,
    set_debug,
    setup_logging,
)

"""Unit tests for labeled logging setup."""


def test_setup_logging_is_idempotent() -> None:
    first = setup_logging()
    second = setup_logging()

    assert first is second
    assert first.name == LOGGER_NAME
    assert len(first.handlers) == 1
    assert first.propagate is False


def test_labels(capsys) -> None:
    logger = setup_logging()
    logger.info("hello")
    logger.warning("careful")
    logger.error("boom")
    log_summary("tables=1")

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["INFO hello", "WARN careful", "ERROR boom", "SUMMARY tables=1"]


def test_child_loggers_share_handler(capsys) -> None:
    setup_logging()
    logging.getLogger("sheetdash.services.pipeline").info("from child")

    assert capsys.readouterr().out == "INFO from child\n"


def test_debug_toggle(capsys) -> None:
    logger = setup_logging()
    logger.debug("hidden")
    set_debug(True)
    logger.debug("shown")
    set_debug(False)
    logger.debug("hidden again")

    assert capsys.readouterr().out == "DEBUG shown\n"


def test_summary_level_between_info_and_warning() -> None:
    assert logging.INFO < SUMMARY_LEVEL < logging.WARNING
    setup_logging()
    assert logging.getLevelName(SUMMARY_LEVEL) == "SUMMARY"


def test_reset_logging_rebuilds_handler() -> None:
    first = get_logger()
    reset_logging()
    second = setup_logging()

    # 同名ロガーは同一インスタンスだがハンドラは 1 つに保たれる
    assert first is second
    assert len(second.handlers) == 1


def test_custom_stream_and_exception_text() -> None:
    buf = io.StringIO()
    logger = setup_logging(stream=buf)
    try:
        raise ValueError("bad cell")
    except ValueError:
        logger.exception("read failed")

    lines = buf.getvalue().splitlines()
    assert lines[0] == "ERROR read failed"
    assert lines[-1] == "ValueError: bad cell"
