"""Unit tests for command line logging setup."""

import logging

import pytest

from mht2html.logging_utils import configure_logging, resolve_log_level

pytestmark = pytest.mark.usefixtures("reset_root_logging")


@pytest.mark.unit
class TestResolveLogLevel:
    """Test level name resolution."""

    def test_names_are_case_insensitive(self):
        assert resolve_log_level("warning") == logging.WARNING
        assert resolve_log_level("DEBUG") == logging.DEBUG

    def test_numeric_level_passes_through(self):
        assert resolve_log_level(15) == 15

    def test_unknown_name_falls_back_to_info(self):
        assert resolve_log_level("chatty") == logging.INFO
        assert resolve_log_level("basic_format") == logging.INFO


@pytest.mark.unit
class TestConfigureLogging:
    """Test root handler installation."""

    def test_replaces_root_handlers(self):
        root = configure_logging("ERROR")

        assert root is logging.getLogger()
        assert root.level == logging.ERROR
        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == "%(levelname)s: %(message)s"

    def test_chardet_kept_quiet_at_debug(self):
        configure_logging("DEBUG")

        assert logging.getLogger("chardet").level == logging.INFO

    def test_trace_format(self):
        root = configure_logging("INFO", trace_mode=True)

        assert "%(name)s" in root.handlers[0].formatter._fmt

    def test_log_file_receives_records(self, temp_dir):
        log_file = temp_dir / "run.log"
        root = configure_logging("INFO", log_file=str(log_file))
        logging.getLogger("mht2html.test").info("hello file")

        for handler in root.handlers:
            handler.flush()
        assert len(root.handlers) == 2
        assert "hello file" in log_file.read_text(encoding="utf-8")

    def test_unwritable_log_file_keeps_console(self, temp_dir):
        root = configure_logging("INFO", log_file=str(temp_dir / "missing" / "run.log"))

        assert len(root.handlers) == 1
