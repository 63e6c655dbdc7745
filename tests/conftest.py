from __future__ import annotations

import logging
from typing import Callable

import pytest

from docagent.config import Settings


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings with test credentials; keyword overrides replace defaults."""

    def factory(**overrides: object) -> Settings:
        values: dict[str, object] = {
            "app_id": "1",
            "private_key": "key",
            "webhook_secret": "secret",
            "llm_api_key": "openai",
            "llm_model": "gpt-4.1-mini",
            "commit_actor": "doc-agent-github-app",
            "max_concurrent_file_reads": 3,
        }
        values.update(overrides)
        return Settings(**values)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def restore_logging():
    """Undo handler, level and propagation changes made by configure_logging."""
    names = ("docagent", "httpx", "httpcore")
    saved = {}
    for name in names:
        logger = logging.getLogger(name)
        saved[name] = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if handler not in handlers:
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(level)
        logger.propagate = propagate
