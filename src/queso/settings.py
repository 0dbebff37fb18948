"""Runtime configuration from environment variables."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from queso import constants


class Settings(BaseSettings):
    """Runtime configuration from environment variables.

    All settings can be overridden via environment variables with QUESO_ prefix.
    Example: QUESO_QEMU_BIN=/opt/qemu/bin/qemu-system-aarch64
    """

    model_config = SettingsConfigDict(
        env_prefix="QUESO_",
        extra="ignore",
    )

    # QEMU
    qemu_bin: Path | None = None
    """Explicit emulator binary. None picks qemu-system-<host arch> from PATH."""

    # Probes
    probe_timeout_seconds: float = Field(
        default=constants.DEFAULT_PROBE_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        description="Timeout for -version / -accel help probes",
    )

    # CLI
    echo_command: bool = False
    """Print the full command line to stderr before running QEMU."""
