"""Tests for ASCII-only CLI help output.

Windows Command Prompt uses CP1252 encoding which cannot handle emojis
or Unicode characters. This test ensures all CLI help text is pure ASCII.
"""

import pytest
from click.testing import CliRunner

from devhelper.cli import cli


class TestCliAsciiCompliance:
    """Ensure all CLI output is ASCII-safe for Windows CP1252."""

    @pytest.fixture
    def runner(self):
        """Create CLI test runner."""
        return CliRunner()

    def test_root_help_ascii(self, runner):
        """Test dev-helper --help contains only ASCII characters."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "DIAGNOSE" in result.output
        assert "check-command" in result.output

        try:
            result.output.encode("ascii")
        except UnicodeEncodeError as e:
            pytest.fail(f"Non-ASCII character in dev-helper --help: {e}")

    @pytest.mark.parametrize("command", ["setup", "explain", "tools", "check-command"])
    def test_command_help_ascii(self, runner, command):
        result = runner.invoke(cli, [command, "--help"])
        assert result.exit_code == 0
        try:
            result.output.encode("ascii")
        except UnicodeEncodeError as e:
            pytest.fail(f"Non-ASCII character in dev-helper {command} --help: {e}")

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "dev-helper" in result.output
