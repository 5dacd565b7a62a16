from __future__ import annotations

import logging

import pytest

from chat_room_api.app.core.logging_config import setup_logging


@pytest.fixture
def root_logger():
    """Root logger whose level is restored afterwards."""
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


def test_first_setup_attaches_console_and_file_handlers(tmp_path, root_logger, monkeypatch):
    # Emptied inside the test body: pytest adds its capture handlers
    # to the root logger after fixtures are set up.
    monkeypatch.setattr(root_logger, "handlers", [])
    logfile = tmp_path / "chat.log"

    setup_logging("debug", str(logfile))
    added = list(root_logger.handlers)
    try:
        assert root_logger.level == logging.DEBUG
        assert [type(h) for h in added] == [logging.StreamHandler, logging.FileHandler]
        logging.getLogger("chat_room_api.test").warning("hello log")
        added[1].flush()
        assert "[WARNING] chat_room_api.test: hello log" in logfile.read_text(encoding="utf-8")
    finally:
        monkeypatch.undo()
        for handler in added:
            handler.close()


def test_repeated_setup_only_changes_level(root_logger, monkeypatch):
    sentinel = logging.NullHandler()
    monkeypatch.setattr(root_logger, "handlers", [sentinel])

    setup_logging("nonsense")
    assert root_logger.handlers == [sentinel]
    assert root_logger.level == logging.INFO
