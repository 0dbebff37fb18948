"""Constants for queso defaults and QEMU limits."""

from typing import Final

# ============================================================================
# QEMU limits
# ============================================================================

CHARDEV_ID_MAX_LENGTH: Final[int] = 127
"""Maximum length of a chardev id accepted by QEMU."""

NUMA_CPU_RANGE_MAX_VALUES: Final[int] = 2
"""A NUMA `cpus=` range is a single CPU or a first-last pair."""

# ============================================================================
# Process probes
# ============================================================================

DEFAULT_PROBE_TIMEOUT_SECONDS: Final[float] = 5.0
"""Timeout for `-version` and `-accel help` probes."""

QEMU_SYSTEM_PREFIX: Final[str] = "qemu-system-"
"""System emulators are named qemu-system-<target arch>."""

# ============================================================================
# CLI exit codes
# ============================================================================

EXIT_USAGE_ERROR: Final[int] = 2
"""Bad arguments or invalid machine description."""

EXIT_QUESO_ERROR: Final[int] = 125
"""queso itself failed (follows the `timeout`/`docker run` convention)."""

EXIT_NOT_FOUND: Final[int] = 127
"""QEMU binary not found (shell convention)."""
