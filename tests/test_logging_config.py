import logging
import sys

import pytest

from salvo.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_logs_go_to_stderr():
    logger = setup_logging("info")
    (handler,) = logger.handlers
    assert handler.stream is sys.stderr
    assert logger.level == logging.INFO
    assert handler.formatter._fmt == "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"


def test_log_file_handler(tmp_path):
    log_file = tmp_path / "salvo.log"
    logger = setup_logging("DEBUG", log_file=str(log_file))
    assert len(logger.handlers) == 2
    logging.getLogger("salvo.test").debug("hello")
    for h in logger.handlers:
        h.flush()
    assert "salvo.test" in log_file.read_text(encoding="utf-8")
    logger.handlers[1].close()
