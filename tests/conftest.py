"""Shared pytest fixtures for queso tests."""

import logging
import os
import shlex
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# ============================================================================
# Environment isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _clean_queso_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop QUESO_* variables from the developer's shell so Settings sees defaults."""
    for key in list(os.environ):
        if key.startswith("QUESO_"):
            monkeypatch.delenv(key)


# ============================================================================
# Fake QEMU binary
# ============================================================================


@pytest.fixture
def make_fake_qemu(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an executable shell script that stands in for qemu-system-*.

    The script records its argv (one per line) to `<name>.args`, prints
    `stdout` and exits with `exit_code`, or sleeps for `sleep` seconds
    instead of exiting.
    """

    def _make(stdout: str = "", exit_code: int = 0, name: str = "qemu-system-fake", sleep: float = 0) -> Path:
        path = tmp_path / name
        args_file = tmp_path / f"{name}.args"
        lines = [
            "#!/bin/sh",
            f"printf '%s\\n' \"$@\" > {shlex.quote(str(args_file))}",
            f"printf '%s' {shlex.quote(stdout)}",
        ]
        if sleep:
            # exec so a kill reaches the process holding the pipes
            lines.append(f"exec sleep {sleep}")
        else:
            lines.append(f"exit {exit_code}")
        path.write_text("\n".join(lines) + "\n")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def recorded_args() -> Callable[[Path], list[str]]:
    """Return argv the fake QEMU at a given path was last called with."""

    def _read(qemu_path: Path) -> list[str]:
        args_file = qemu_path.with_name(f"{qemu_path.name}.args")
        return args_file.read_text().splitlines()

    return _read


# ============================================================================
# Logging
# ============================================================================


@pytest.fixture
def restore_queso_logger() -> Iterator[logging.Logger]:
    """Undo handler and level changes made to the "queso" logger by configure_logging()."""
    lib_logger = logging.getLogger("queso")
    handlers = list(lib_logger.handlers)
    level = lib_logger.level
    yield lib_logger
    for handler in list(lib_logger.handlers):
        if handler not in handlers:
            lib_logger.removeHandler(handler)
            handler.close()
    lib_logger.setLevel(level)
