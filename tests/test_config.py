"""Tests for settings validation and the CLI."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from proctop.cli import _build_parser, build_settings, configure_logging, main
from proctop.config import Settings


class TestSettings:
    """Tests for the Settings model."""

    def test_defaults(self):
        """Test the default settings."""
        settings = Settings()
        assert settings.refresh_interval_ms == 3000
        assert settings.input_poll_ms == 100
        assert settings.proc_root == Path("/proc")
        assert settings.meminfo_path == Path("/proc/meminfo")
        assert settings.enable_kill is True
        assert settings.log_file is None
        assert settings.numeric_log_level == logging.WARNING

    @pytest.mark.parametrize("value", [0, 99, 60_001])
    def test_refresh_interval_bounds(self, value):
        """Test out-of-range refresh intervals are rejected."""
        with pytest.raises(ValidationError):
            Settings(refresh_interval_ms=value)

    def test_poll_must_not_exceed_refresh(self):
        """Test the input poll may not be slower than the refresh."""
        with pytest.raises(ValidationError):
            Settings(refresh_interval_ms=500, input_poll_ms=1000)

    def test_poll_minimum(self):
        """Test the input poll has a minimum."""
        with pytest.raises(ValidationError):
            Settings(input_poll_ms=1)

    def test_log_level_normalised(self):
        """Test log levels are upper-cased."""
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_unknown_field_rejected(self):
        """Test unknown settings are rejected."""
        with pytest.raises(ValidationError):
            Settings(colour="blue")

    def test_frozen(self):
        """Test settings cannot be changed after creation."""
        with pytest.raises(ValidationError):
            Settings().enable_kill = False


class TestCli:
    """Tests for argument parsing."""

    def test_no_arguments(self):
        """Test the CLI defaults match Settings defaults."""
        settings = build_settings(_build_parser().parse_args([]))
        assert settings == Settings()

    def test_all_arguments(self, tmp_path: Path):
        """Test every CLI option reaches Settings."""
        args = _build_parser().parse_args([
            "--refresh-ms", "2000",
            "--poll-ms", "50",
            "--proc-root", str(tmp_path),
            "--no-kill",
            "--log-file", str(tmp_path / "proctop.log"),
            "--log-level", "info",
        ])
        settings = build_settings(args)

        assert settings.refresh_interval_ms == 2000
        assert settings.input_poll_ms == 50
        assert settings.proc_root == tmp_path
        assert settings.meminfo_path == tmp_path / "meminfo"
        assert settings.enable_kill is False
        assert settings.log_level == "INFO"

    def test_explicit_meminfo_wins(self, tmp_path: Path):
        """Test an explicit meminfo path overrides the proc root default."""
        args = _build_parser().parse_args([
            "--proc-root", str(tmp_path), "--meminfo", str(tmp_path / "other"),
        ])
        assert build_settings(args).meminfo_path == tmp_path / "other"

    def test_invalid_option_exits_with_2(self, capsys):
        """Test invalid options exit with status 2."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--refresh-ms", "5"])
        assert exc_info.value.code == 2
        assert "invalid options" in capsys.readouterr().err

    def test_configure_logging_without_file(self):
        """Test logging stays quiet without a log file."""
        configure_logging(Settings())
        handlers = logging.getLogger("proctop").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)
