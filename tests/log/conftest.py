"""Logging test fixtures."""

import pytest


@pytest.fixture(autouse=True)
def _restore_logger(monkeypatch):
    """Undo handler and level changes made by setup_logging()."""
    from lldbconnect._logging import logger

    monkeypatch.delenv("LLDBCONNECT_LOG_FORMAT", raising=False)
    handlers = logger.handlers[:]
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
