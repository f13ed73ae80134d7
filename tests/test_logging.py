from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from shortybot.core.logging import APP_LOGGERS, LIBRARY_LEVELS, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    names = (*APP_LOGGERS, *LIBRARY_LEVELS, "asyncio")
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, saved in levels.items():
        logging.getLogger(name).setLevel(saved)


def test_installs_rich_handler_with_logger_names(restore_logging):
    setup_logging("INFO")

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], RichHandler)
    record = logging.LogRecord("Orchestrator", logging.INFO, __file__, 1, "[alice] said hi", None, None)
    assert handlers[0].format(record) == "[Orchestrator] [alice] said hi"


def test_app_loggers_follow_configured_level(restore_logging):
    setup_logging("WARNING")
    for name in APP_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_library_loggers_are_quiet_outside_debug(restore_logging):
    setup_logging("INFO")
    assert logging.getLogger("twitchio.http").level == logging.WARNING
    assert logging.getLogger("twitchio.eventsub").level == logging.INFO
    assert logging.getLogger("asyncpg").level == logging.WARNING
    assert logging.getLogger("asyncio").level == logging.ERROR


def test_debug_opens_library_loggers(restore_logging):
    setup_logging("debug")
    assert logging.getLogger("twitchio.http").level == logging.DEBUG
    assert logging.getLogger("Orchestrator").level == logging.DEBUG
