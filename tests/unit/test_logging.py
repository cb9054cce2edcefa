"""
Unit Tests for Logging Setup
"""
import logging

import pytest

from tnbc_cds.utils import setup_logging
from tnbc_cds.utils.logging import StructuredFormatter


@pytest.fixture
def root_logger():
    """Root logger, restored to its previous handlers and level afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def _record(level=logging.INFO, msg="hello"):
    return logging.LogRecord("tnbc_cds.test", level, __file__, 1, msg, None, None)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_is_applied(self, root_logger):
        setup_logging("debug")
        assert root_logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, root_logger):
        setup_logging("chatty")
        assert root_logger.level == logging.INFO

    def test_repeated_setup_replaces_handlers(self, root_logger):
        setup_logging()
        setup_logging()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, StructuredFormatter)

    def test_log_file_gets_plain_copy(self, root_logger, tmp_path):
        log_file = tmp_path / "cds.log"
        setup_logging("INFO", str(log_file))
        logging.getLogger("tnbc_cds.test").info("hook evaluated")
        for handler in root_logger.handlers:
            handler.flush()

        assert len(root_logger.handlers) == 2
        assert "| INFO | tnbc_cds.test | hook evaluated" in log_file.read_text()


class TestStructuredFormatter:
    def test_plain_line(self):
        line = StructuredFormatter(use_color=False).format(_record())
        assert line.endswith("INFO     [tnbc_cds.test] hello")
        assert "\033[" not in line

    def test_colour_wraps_line(self):
        line = StructuredFormatter(use_color=True).format(_record(logging.WARNING))
        assert line.startswith("\033[33m")
        assert line.endswith("\033[0m")
