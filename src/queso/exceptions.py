"""Exception hierarchy for queso.

All exceptions inherit from QuesoError.

Hierarchy:
    QuesoError (base)
    ├── OptionError (caller-bug marker base, also a ValueError)
    │   ├── PropertyKeyError                ← empty property key
    │   ├── PropertyRequiredError           ← option needs at least one property
    │   ├── ArityError                      ← wrong number of values (e.g. NUMA cpus)
    │   ├── MutuallyExclusivePropertyError  ← e.g. latency and bandwidth together
    │   └── PropertyValueError              ← value outside QEMU's documented limits
    ├── MachineSpecError                    ← invalid machine description file
    └── QemuError (external process failures)
        ├── QemuNotFoundError               ← binary missing / not executable
        ├── QemuExitError                   ← non-zero exit status
        └── QemuVersionError                ← unparseable -version output

Option errors are raised at construction (or finalization) time. They are
programmer errors and are never retried.
"""

from __future__ import annotations

from typing import Any


class QuesoError(Exception):
    """Base exception for all queso errors with structured context.

    Attributes:
        message: Human-readable error message
        context: Dictionary of structured error context for logging/debugging
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


# =============================================================================
# Construction-time errors (caller bugs)
# =============================================================================


class OptionError(QuesoError, ValueError):
    """Base for invalid option/property construction.

    These errors mean the caller described an invocation QEMU could never
    accept. Nothing was rendered; fix the builder calls and try again.
    """


class PropertyKeyError(OptionError):
    """Property key is empty."""


class PropertyRequiredError(OptionError):
    """Option was finalized without any of its required properties.

    Attributes:
        flag: Flag of the offending option (without the leading dash)
    """

    def __init__(self, message: str, flag: str, context: dict[str, Any] | None = None):
        ctx = context or {}
        ctx.update({"flag": flag})
        super().__init__(message, ctx)
        self.flag = flag


class ArityError(OptionError):
    """Wrong number of values passed to a builder.

    Attributes:
        expected: Human-readable description of the accepted counts
        actual: Number of values received
    """

    def __init__(
        self,
        message: str,
        expected: str,
        actual: int,
        context: dict[str, Any] | None = None,
    ):
        ctx = context or {}
        ctx.update({"expected": expected, "actual": actual})
        super().__init__(message, ctx)
        self.expected = expected
        self.actual = actual


class MutuallyExclusivePropertyError(OptionError):
    """Two properties that QEMU treats as mutually exclusive were both set.

    Attributes:
        key: Property being set
        conflicting_key: Property already present
    """

    def __init__(
        self,
        message: str,
        key: str,
        conflicting_key: str,
        context: dict[str, Any] | None = None,
    ):
        ctx = context or {}
        ctx.update({"key": key, "conflicting_key": conflicting_key})
        super().__init__(message, ctx)
        self.key = key
        self.conflicting_key = conflicting_key


class PropertyValueError(OptionError):
    """Property value violates a limit documented by QEMU."""


class MachineSpecError(QuesoError):
    """Machine description file is unreadable or invalid.

    Raised when the JSON document cannot be parsed or does not match the
    expected schema. The pydantic validation message is kept in context.
    """


# =============================================================================
# External process errors
# =============================================================================


class QemuError(QuesoError):
    """Base for failures of the external QEMU process.

    queso performs no interpretation of QEMU's own error text; stderr is
    passed through to the parent process unchanged.
    """


class QemuNotFoundError(QemuError):
    """QEMU executable does not exist or cannot be executed."""


class QemuExitError(QemuError):
    """QEMU exited with a non-zero status.

    Attributes:
        returncode: Exit status reported by the process
    """

    def __init__(self, message: str, returncode: int, context: dict[str, Any] | None = None):
        ctx = context or {}
        ctx.update({"returncode": returncode})
        super().__init__(message, ctx)
        self.returncode = returncode


class QemuVersionError(QemuError):
    """Output of `qemu-system-* -version` holds no valid version string."""
