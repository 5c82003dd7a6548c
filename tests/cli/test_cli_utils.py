"""Tests for CLI helper functions."""

import logging
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import click
import pytest

from pren.cli.utils import (
    copy_to_clipboard,
    parse_arguments_option,
    parse_key_value,
    parse_tags_option,
    setup_logging,
)
from pren.config.app import LoggingSettings

pytestmark = pytest.mark.unit


class TestParseKeyValue:
    """Tests for parse_key_value."""

    def test_simple_pair(self) -> None:
        """Test a plain KEY=value pair."""
        assert parse_key_value("name=Alice") == ("name", "Alice")

    def test_splits_at_first_equals(self) -> None:
        """Test the value keeps later '=' characters."""
        assert parse_key_value("expr=a=b") == ("expr", "a=b")

    def test_empty_value(self) -> None:
        """Test an empty value is allowed."""
        assert parse_key_value("name=") == ("name", "")

    def test_missing_equals(self) -> None:
        """Test a pair without '=' is rejected."""
        with pytest.raises(click.BadParameter, match="no `=` found in `name`"):
            parse_key_value("name")

    def test_empty_key(self) -> None:
        """Test a pair with an empty key is rejected."""
        with pytest.raises(click.BadParameter, match="empty key"):
            parse_key_value("=value")


class TestOptionCallbacks:
    """Tests for click option callbacks."""

    def test_arguments_comma_and_repeat(self) -> None:
        """Test comma-separated and repeated pairs merge."""
        result = parse_arguments_option(
            MagicMock(), MagicMock(), ("a=1,b=2", "c=3", "a=4")
        )
        assert result == {"a": "4", "b": "2", "c": "3"}

    def test_arguments_empty(self) -> None:
        """Test no options give no arguments."""
        assert parse_arguments_option(MagicMock(), MagicMock(), ()) == {}

    def test_tags(self) -> None:
        """Test tags are split, stripped and kept in order."""
        assert parse_tags_option(MagicMock(), MagicMock(), ("b, a", "c,,")) == ["b", "a", "c"]


class TestCopyToClipboard:
    """Tests for copy_to_clipboard."""

    def test_first_available_command(self) -> None:
        """Test the first installed command receives the text."""
        with (
            patch("pren.cli.utils.shutil.which", side_effect=lambda c: c == "xclip" or None),
            patch("pren.cli.utils.subprocess.run") as mock_run,
        ):
            assert copy_to_clipboard("hello") is True

        command = mock_run.call_args.args[0]
        assert command[0] == "xclip"
        assert mock_run.call_args.kwargs["input"] == b"hello"

    def test_no_command_available(self) -> None:
        """Test False when no clipboard tool is installed."""
        with patch("pren.cli.utils.shutil.which", return_value=None):
            assert copy_to_clipboard("hello") is False

    def test_falls_through_on_failure(self) -> None:
        """Test a failing command falls through to the next one."""
        calls = []

        def fake_run(command, **kwargs):
            calls.append(command[0])
            if command[0] == "pbcopy":
                raise subprocess.CalledProcessError(1, command)

        with (
            patch("pren.cli.utils.shutil.which", return_value="/usr/bin/tool"),
            patch("pren.cli.utils.subprocess.run", side_effect=fake_run),
        ):
            assert copy_to_clipboard("hello") is True
        assert calls == ["pbcopy", "wl-copy"]


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_handler_added(self, temp_dir: Path) -> None:
        """Test a rotating file handler is attached when a log file is set."""
        log_file = temp_dir / "logs" / "pren.log"
        pren_logger = logging.getLogger("pren")
        before = list(pren_logger.handlers)
        try:
            setup_logging(settings=LoggingSettings(file=str(log_file)))
            added = [h for h in pren_logger.handlers if h not in before]
            assert len(added) == 1
            assert log_file.parent.is_dir()
        finally:
            for handler in list(pren_logger.handlers):
                if handler not in before:
                    pren_logger.removeHandler(handler)
                    handler.close()

    def test_quiets_third_party_loggers(self) -> None:
        """Test noisy libraries are capped at WARNING."""
        setup_logging(verbose=True)
        assert logging.getLogger("LiteLLM").level == logging.WARNING
