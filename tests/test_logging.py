"""Tests for docagent.logging."""

from __future__ import annotations

import logging

import pytest

from docagent.logging import configure_logging, get_logger

pytestmark = pytest.mark.usefixtures("restore_logging")


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if getattr(handler, "_docagent_handler", False)]


def test_get_logger_nests_under_docagent() -> None:
    assert get_logger().name == "docagent"
    assert get_logger("processor").name == "docagent.processor"


def test_configure_logging_writes_file_sink(tmp_path) -> None:
    log_file = tmp_path / "logs" / "docagent.log"

    configure_logging(log_file=log_file)
    get_logger("processor").info("Created documentation.md for o/r@main")
    logging.getLogger("httpx").info("HTTP Request: GET https://api.github.com/repos/o/r")
    logging.getLogger("httpx").warning("connection pool is full")
    for handler in _own_handlers(logging.getLogger("docagent")):
        handler.flush()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert "INFO docagent.processor: Created documentation.md for o/r@main" in lines[0]
    assert "WARNING httpx: connection pool is full" in lines[1]


def test_configure_logging_verbose_enables_transport_debug() -> None:
    configure_logging(verbose=True)

    assert logging.getLogger("docagent").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.DEBUG

    configure_logging()

    assert logging.getLogger("docagent").level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING


def test_configure_logging_replaces_only_its_own_handlers(tmp_path) -> None:
    foreign = logging.NullHandler()
    logging.getLogger("httpx").addHandler(foreign)

    configure_logging(log_file=tmp_path / "a.log")
    configure_logging()

    root = logging.getLogger("docagent")
    assert len(_own_handlers(root)) == 1
    assert root.propagate is False
    assert foreign in logging.getLogger("httpx").handlers
    assert len(_own_handlers(logging.getLogger("httpx"))) == 1
