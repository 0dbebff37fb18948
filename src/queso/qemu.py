"""QEMU process invocation.

Collects options into a flat argv and runs the emulator binary:

    >>> q = Qemu("qemu-system-x86_64").use(accelerator(AccelType.KVM), Memory("1G"))
    >>> q.command()
    ['qemu-system-x86_64', '-accel', 'kvm', '-m', 'size=1G']
    >>> await q.run()

run() waits for exactly one child with inherited stdout/stderr. The probes
(version(), accelerators()) capture stdout and are bounded by
Settings.probe_timeout_seconds.
"""

from __future__ import annotations

import asyncio
import os
import re
import shlex
from typing import Self

from queso import constants
from queso._logging import get_logger
from queso.exceptions import QemuError, QemuExitError, QemuNotFoundError, QemuVersionError
from queso.options import Option, Usable
from queso.platform_utils import HostArch, ProcessWrapper, detect_host_arch
from queso.settings import Settings

logger = get_logger(__name__)

# "QEMU emulator version 8.2.2 (Debian 1:8.2.2+ds-0ubuntu1)"
_VERSION_RE = re.compile(r"\bversion\s+v?(\d+\.\d+\.\d+)\b", re.IGNORECASE)
_SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+$")


def default_executable(arch: HostArch | None = None) -> str:
    """System emulator for the given (default: host) architecture, e.g. qemu-system-aarch64."""
    return f"{constants.QEMU_SYSTEM_PREFIX}{(arch or detect_host_arch()).value}"


def parse_version(output: str) -> str:
    """Extract "X.Y.Z" from `-version` output.

    The first line is searched for "version X.Y.Z"; when that is absent the
    last word of the line must itself be a version.

    Raises:
        QemuVersionError: No valid version in the output
    """
    first_line = output.strip().splitlines()[0] if output.strip() else ""
    if match := _VERSION_RE.search(first_line):
        return match.group(1)
    words = first_line.split()
    candidate = words[-1] if words else ""
    if _SEMVER_RE.match(candidate):
        return candidate
    raise QemuVersionError(
        f"Invalid QEMU version output: {first_line!r}",
        context={"first_line": first_line},
    )


def parse_accelerators(output: str) -> list[str]:
    """Parse `-accel help` output, skipping the header line.

    Output looks like "Accelerators supported in QEMU binary:\\ntcg\\nkvm\\n".
    """
    accels: list[str] = []
    for raw_line in output.splitlines():
        accel_name = raw_line.strip().lower()
        if accel_name and not accel_name.startswith("accelerator") and accel_name not in accels:
            accels.append(accel_name)
    return accels


class Qemu:
    """Argument list plus the binary that receives it."""

    def __init__(self, executable: str | os.PathLike[str] | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        if executable is None:
            executable = self.settings.qemu_bin or default_executable()
        self.executable = os.fspath(executable)
        self._args: list[str] = []

    def __repr__(self) -> str:
        return f"Qemu({self.executable!r}, args={len(self._args)})"

    def with_options(self, *options: Option | Usable) -> Self:
        """Replace the argument list with the given options."""
        self._args = []
        return self.use(*options)

    def use(self, *items: Option | Usable) -> Self:
        """Append options (or builders, finalized now) to the argument list."""
        for item in items:
            option = item if isinstance(item, Option) else item.option()
            self._args.extend(option.args())
        return self

    def args(self) -> list[str]:
        return list(self._args)

    def command(self) -> list[str]:
        return [self.executable, *self._args]

    def command_line(self) -> str:
        """Shell-quoted command, safe to paste into a POSIX shell."""
        return shlex.join(self.command())

    async def _spawn(self, *argv: str, capture: bool) -> ProcessWrapper:
        pipe = asyncio.subprocess.PIPE if capture else None
        try:
            proc = await asyncio.create_subprocess_exec(
                self.executable,
                *argv,
                stdout=pipe,
                stderr=pipe,
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            raise QemuNotFoundError(
                f"QEMU binary not executable: {self.executable}",
                context={"executable": self.executable, "error": str(e)},
            ) from e
        return ProcessWrapper(proc)

    async def run(self) -> int:
        """Run QEMU until it exits, passing stdout/stderr through.

        Returns:
            0 on success

        Raises:
            QemuNotFoundError: Binary missing or not executable
            QemuExitError: QEMU exited with a non-zero status
        """
        logger.debug("Starting QEMU", extra={"command": self.command_line()})
        proc = await self._spawn(*self._args, capture=False)
        try:
            returncode = await proc.wait()
        except asyncio.CancelledError:
            await proc.kill()
            await proc.wait()
            raise

        if returncode != 0:
            logger.warning(
                "QEMU exited with non-zero status",
                extra={"executable": self.executable, "returncode": returncode},
            )
            raise QemuExitError(
                f"QEMU exited with status {returncode}",
                returncode=returncode,
                context={"command": self.command_line()},
            )
        return returncode

    async def _probe(self, *argv: str) -> str:
        proc = await self._spawn(*argv, capture=True)
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.settings.probe_timeout_seconds)
        except TimeoutError as e:
            await proc.kill()
            await proc.wait()
            raise QemuError(
                f"QEMU probe timed out after {self.settings.probe_timeout_seconds}s",
                context={"executable": self.executable, "argv": list(argv)},
            ) from e

        if proc.returncode != 0:
            raise QemuExitError(
                f"QEMU probe {' '.join(argv)} exited with status {proc.returncode}",
                returncode=proc.returncode or 1,
                context={"stderr": stderr.decode(errors="replace").strip()},
            )
        return stdout.decode(errors="replace")

    async def version(self) -> str:
        """Run `-version` and return the version as "X.Y.Z"."""
        version = parse_version(await self._probe("-version"))
        logger.debug("QEMU version probe complete", extra={"executable": self.executable, "version": version})
        return version

    async def accelerators(self) -> list[str]:
        """Run `-accel help` and return the accelerators compiled into the binary."""
        accels = parse_accelerators(await self._probe("-accel", "help"))
        logger.debug(
            "QEMU accelerator probe complete",
            extra={"executable": self.executable, "accelerators": accels},
        )
        return accels
