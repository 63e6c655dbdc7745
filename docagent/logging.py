"""Logging setup for the webhook service and one-shot runs.

Everything docagent emits lives under the ``docagent`` logger. Outbound HTTP
traffic is logged by httpx under its own names; those loggers share the
docagent handlers so transport problems land in the same sink, and request
lines only show up in verbose mode.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import List

ROOT_LOGGER = "docagent"
TRANSPORT_LOGGERS = ("httpx", "httpcore")

CONSOLE_FORMAT = "[docagent] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Marks handlers installed here so reconfiguring leaves foreign handlers alone.
_HANDLER_MARK = "_docagent_handler"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``docagent.<name>``, or the root docagent logger."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(
    *, verbose: bool = False, log_file: Path | str | None = None
) -> logging.Logger:
    """Install console (and optionally file) handlers; safe to call repeatedly.

    The file sink is a ``WatchedFileHandler`` so external log rotation can move
    the file out from under a long-running service.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers = _build_handlers(log_file)

    logger = logging.getLogger(ROOT_LOGGER)
    _install(logger, handlers, level)

    transport_level = logging.DEBUG if verbose else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        _install(logging.getLogger(name), handlers, transport_level)

    return logger


def _build_handlers(log_file: Path | str | None) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console]

    if log_file is not None:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.handlers.WatchedFileHandler(path, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(sink)

    for handler in handlers:
        setattr(handler, _HANDLER_MARK, True)
    return handlers


def _install(logger: logging.Logger, handlers: List[logging.Handler], level: int) -> None:
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            logger.removeHandler(existing)
            existing.close()
    logger.setLevel(level)
    logger.propagate = False
    for handler in handlers:
        logger.addHandler(handler)


__all__ = ["configure_logging", "get_logger"]
