"""Tests for environment-driven settings."""

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from queso.settings import Settings


class TestSettingsDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.qemu_bin is None
        assert settings.probe_timeout_seconds == 5.0
        assert settings.echo_command is False


class TestSettingsEnvironment:
    """Tests for QUESO_* environment overrides."""

    def test_qemu_bin(self) -> None:
        with patch.dict("os.environ", {"QUESO_QEMU_BIN": "/opt/qemu/bin/qemu-system-aarch64"}):
            assert Settings().qemu_bin == Path("/opt/qemu/bin/qemu-system-aarch64")

    def test_probe_timeout(self) -> None:
        with patch.dict("os.environ", {"QUESO_PROBE_TIMEOUT_SECONDS": "1.5"}):
            assert Settings().probe_timeout_seconds == 1.5

    @pytest.mark.parametrize(("raw", "expected"), [("1", True), ("true", True), ("0", False), ("no", False)])
    def test_echo_command(self, raw: str, expected: bool) -> None:
        with patch.dict("os.environ", {"QUESO_ECHO_COMMAND": raw}):
            assert Settings().echo_command is expected

    def test_unrelated_variables_ignored(self) -> None:
        with patch.dict("os.environ", {"QUESO_SOMETHING_ELSE": "x"}):
            Settings()

    @pytest.mark.parametrize("raw", ["0", "-1", "301", "soon"])
    def test_invalid_probe_timeout(self, raw: str) -> None:
        with patch.dict("os.environ", {"QUESO_PROBE_TIMEOUT_SECONDS": raw}), pytest.raises(ValidationError):
            Settings()

    def test_explicit_beats_environment(self) -> None:
        with patch.dict("os.environ", {"QUESO_PROBE_TIMEOUT_SECONDS": "9"}):
            assert Settings(probe_timeout_seconds=2).probe_timeout_seconds == 2
