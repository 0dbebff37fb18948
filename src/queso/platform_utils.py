"""Host platform detection and child process wrapper.

Detects the host CPU architecture and wraps asyncio subprocesses with psutil
for PID-reuse safe signalling.
"""

import asyncio
import contextlib
import platform
from enum import Enum
from functools import cache

import psutil


class HostArch(str, Enum):
    """Host CPU architecture, named the way qemu-system-* binaries are."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"
    RISCV64 = "riscv64"
    PPC64 = "ppc64"
    S390X = "s390x"


_MACHINE_ALIASES: dict[str, HostArch] = {
    "amd64": HostArch.X86_64,
    "x86_64": HostArch.X86_64,
    "arm64": HostArch.AARCH64,
    "aarch64": HostArch.AARCH64,
    "riscv64": HostArch.RISCV64,
    "ppc64le": HostArch.PPC64,
    "ppc64": HostArch.PPC64,
    "s390x": HostArch.S390X,
}


@cache
def detect_host_arch() -> HostArch:
    """Detect host CPU architecture.

    Unknown machines fall back to x86_64, the most widely packaged target.
    """
    return _MACHINE_ALIASES.get(platform.machine().lower(), HostArch.X86_64)


class ProcessWrapper:
    """PID-reuse safe process wrapper using psutil.

    Wraps asyncio.subprocess.Process with psutil.Process so signals are never
    sent to a recycled PID.
    """

    def __init__(self, async_proc: asyncio.subprocess.Process) -> None:
        self.async_proc = async_proc
        self.psutil_proc: psutil.Process | None = None

        if async_proc.pid:
            with contextlib.suppress(psutil.NoSuchProcess, psutil.AccessDenied):
                # Process already died or inaccessible
                self.psutil_proc = psutil.Process(async_proc.pid)

    async def is_running(self) -> bool:
        """Check if process is still running (PID-reuse safe)."""
        if not self.psutil_proc:
            return self.async_proc.returncode is None

        try:
            return await asyncio.to_thread(self.psutil_proc.is_running)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return False

    @property
    def pid(self) -> int | None:
        return self.async_proc.pid

    @property
    def returncode(self) -> int | None:
        """Process return code (None if still running)."""
        return self.async_proc.returncode

    async def wait(self) -> int:
        return await self.async_proc.wait()

    async def communicate(self) -> tuple[bytes, bytes]:
        """Wait for exit and return captured (stdout, stderr)."""
        return await self.async_proc.communicate()

    async def kill(self) -> None:
        """Kill process (SIGKILL) without blocking the event loop."""
        if self.psutil_proc and await self.is_running():
            with contextlib.suppress(psutil.NoSuchProcess, psutil.AccessDenied):
                await asyncio.to_thread(self.psutil_proc.kill)
        elif self.async_proc.returncode is None:
            self.async_proc.kill()
