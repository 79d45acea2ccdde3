"""
Tests for logging setup.
"""

import logging

from fruit_catcher.catch_core.log import LOGGER_NAME, setup_logging
from fruit_catcher.catch_core.storage import parse_high_score


class TestSetupLogging:
    """Test the package logger configuration."""

    def teardown_method(self):
        setup_logging(None)

    def test_silent_without_file(self):
        """Without a log file only a NullHandler is attached."""
        logger = setup_logging(None)

        assert logger.name == LOGGER_NAME
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]
        assert not logger.propagate

    def test_module_records_reach_file(self, tmp_path):
        """Package module loggers write to the configured file."""
        log_file = tmp_path / "game.log"
        logger = setup_logging(log_file)

        parse_high_score("garbage")
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text()
        assert "WARNING" in text
        assert "fruit_catcher.catch_core.storage" in text

    def test_debug_level(self, tmp_path):
        """debug=True lowers the level to DEBUG."""
        logger = setup_logging(tmp_path / "game.log", debug=True)

        assert logger.level == logging.DEBUG

    def test_reconfigure_replaces_handlers(self, tmp_path):
        """Calling setup twice does not stack handlers."""
        setup_logging(tmp_path / "a.log")
        logger = setup_logging(tmp_path / "b.log")

        assert len(logger.handlers) == 1
