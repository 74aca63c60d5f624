"""
Tests for logging setup.
"""

import logging
from logging.handlers import RotatingFileHandler

from config import PATHS
from services.logger import init_logging


class TestInitLogging:
    """Tests for init_logging."""

    def setup_method(self):
        self.root = logging.getLogger()
        self.saved_handlers = list(self.root.handlers)
        self.saved_level = self.root.level

    def teardown_method(self):
        for handler in self.root.handlers:
            handler.close()
        self.root.handlers = self.saved_handlers
        self.root.setLevel(self.saved_level)

    def test_console_only_without_file(self):
        """Without a log file only the console handler is installed."""
        root = init_logging(None, "warning")

        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.WARNING
        assert root.level == logging.DEBUG

    def test_rotating_file_at_given_path(self, tmp_path):
        """The file handler writes to the given path, creating its directory."""
        log_file = tmp_path / "logs" / "lane_runner.log"
        root = init_logging(log_file)

        file_handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == str(log_file)
        assert log_file.parent.is_dir()

        logging.getLogger("engine.rules").debug("checkpoint started")
        file_handlers[0].flush()
        assert "checkpoint started" in log_file.read_text()

    def test_unwritable_location_falls_back_to_stderr(self, tmp_path):
        """A log path that cannot be created does not raise."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        root = init_logging(blocker / "lane_runner.log")

        assert len(root.handlers) == 2
        assert not any(isinstance(h, RotatingFileHandler) for h in root.handlers)

    def test_default_log_file_lives_in_log_dir(self):
        """The application log file sits in the per-user log directory."""
        assert PATHS.log_file.parent == PATHS.log_dir
        assert PATHS.log_file.name == "lane_runner.log"
