"""Accelerator options (`-accel`).

QEMU picks the first accelerator it can initialize, so `-accel` may be
repeated to give a fallback chain:

    qemu-system-x86_64 -accel kvm -accel tcg,thread=multi
"""

from __future__ import annotations

from enum import Enum
from typing import Self

from queso.options import Entity, Option
from queso.properties import render_value


class AccelType(str, Enum):
    """Accelerator backends known to QEMU."""

    KVM = "kvm"
    TCG = "tcg"
    XEN = "xen"
    HVF = "hvf"
    NVMM = "nvmm"
    WHPX = "whpx"
    HAX = "hax"


class NotifyVMExit(str, Enum):
    """What KVM does when a guest stays in guest mode past the notify window."""

    RUN = "run"
    INTERNAL_ERROR = "internal-error"
    DISABLE = "disable"


class KernelIRQChip(str, Enum):
    ON = "on"
    OFF = "off"
    SPLIT = "split"


class TCGThreads(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


def accelerator(accel_type: AccelType | str) -> Option:
    """Bare accelerator option, e.g. `-accel kvm`."""
    return Option("accel", render_value(accel_type))


class Accelerator(Entity):
    """Accelerator with properties shared by every backend."""

    def __init__(self, accel_type: AccelType | str) -> None:
        super().__init__("accel", render_value(accel_type))

    def set_notify_on_vm_exit(self, mode: NotifyVMExit, window: int = 0) -> Self:
        """Set notify-vmexit. The window only applies to the `run` mode."""
        if NotifyVMExit(mode) is NotifyVMExit.RUN:
            return self.set_property("notify-vmexit", f"run,notify-window={window}")
        return self.set_property("notify-vmexit", mode)


class KVMAccelerator(Accelerator):
    def __init__(self) -> None:
        super().__init__(AccelType.KVM)

    def set_dirty_ring_size(self, size: int) -> Self:
        """Size of the per-vCPU dirty page ring buffer (power of two, 0 disables)."""
        return self.set_property("dirty-ring-size", size)

    def set_eager_split_size(self, size: int) -> Self:
        return self.set_property("eager-split-size", size)

    def set_kernel_irqchip(self, mode: KernelIRQChip) -> Self:
        return self.set_property("kernel-irqchip", mode)

    def set_shadow_memory(self, size: int) -> Self:
        return self.set_property("kvm-shadow-mem", size)


class TCGAccelerator(Accelerator):
    def __init__(self) -> None:
        super().__init__(AccelType.TCG)

    def set_threads(self, threads: TCGThreads) -> Self:
        return self.set_property("thread", threads)

    def set_translation_block_cache_size(self, megabytes: int) -> Self:
        return self.set_property("tb-size", megabytes)

    def toggle_one_instruction_per_tb(self, enabled: bool) -> Self:
        return self.set_property("one-insn-per-tb", enabled)

    def toggle_split_wx(self, enabled: bool) -> Self:
        """Map the translation buffer twice, once writable and once executable."""
        return self.set_property("split-wx", enabled)


class XenAccelerator(Accelerator):
    def __init__(self) -> None:
        super().__init__(AccelType.XEN)

    def toggle_igd_passthrough(self, enabled: bool) -> Self:
        return self.set_property("igd-passthru", enabled)
