"""Debug and expert options.

Mostly single flags with an optional bare value (`-pidfile vm.pid`, `-S`,
`-d int,cpu_reset`), plus a few builders for options that take properties.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Self

from queso.options import Entity, Option
from queso.properties import Property, PropertyValue, render_value, status_from_bool


class RedirectSource(str, Enum):
    """Guest-side device whose I/O is sent to a host character device."""

    DEBUG_CONSOLE = "debugcon"
    MONITOR = "monitor"
    PARALLEL = "parallel"
    QMP = "qmp"
    QMP_PRETTY = "qmp-pretty"
    SERIAL = "serial"


class SemihostingTarget(str, Enum):
    AUTO = "auto"
    GDB = "gdb"
    NATIVE = "native"


def host_redirect(source: RedirectSource, device: str) -> Option:
    """Redirect a guest device to a host device, e.g. `-serial stdio` or `-qmp unix:/tmp/qmp.sock,server=on`."""
    return Option(render_value(source), device)


def pidfile(path: str | os.PathLike[str]) -> Option:
    return Option("pidfile", render_value(path))


def single_step() -> Option:
    return Option("singlestep")


def freeze_cpu_at_startup() -> Option:
    """Do not start the CPU until `cont` is issued on the monitor (`-S`)."""
    return Option("S")


def overcommit(mem_lock: bool | None = None, cpu_pm: bool | None = None) -> Option:
    props = []
    if mem_lock is not None:
        props.append(Property("mem-lock", mem_lock))
    if cpu_pm is not None:
        props.append(Property("cpu-pm", cpu_pm))
    return Option("overcommit", "", *props)


def gdb(device: str) -> Option:
    """Wait for a gdb connection on device, e.g. `tcp::1234`."""
    return Option("gdb", device)


def gdb_tcp_default() -> Option:
    """Shorthand for `-gdb tcp::1234` (`-s`)."""
    return Option("s")


def log_items(*items: str) -> Option:
    """Enable logging of the given items (`-d int,cpu_reset`)."""
    return Option("d", ",".join(items))


def log_file(path: str | os.PathLike[str]) -> Option:
    return Option("D", render_value(path))


def log_filter(*ranges: str) -> Option:
    """Only log for the given address ranges, e.g. "0x8000..0x8fff"."""
    return Option("dfilter", ",".join(ranges))


def seed(value: int) -> Option:
    return Option("seed", str(value))


def data_directory(path: str | os.PathLike[str]) -> Option:
    """Directory for BIOS, VGA BIOS and keymaps (`-L`)."""
    return Option("L", render_value(path))


def bios(path: str | os.PathLike[str]) -> Option:
    return Option("bios", render_value(path))


def enable_kvm() -> Option:
    return Option("enable-kvm")


def xen_domain_id(domain_id: int) -> Option:
    return Option("xen-domid", str(domain_id))


def xen_attach() -> Option:
    return Option("xen-attach")


def no_reboot() -> Option:
    return Option("no-reboot")


def no_shutdown() -> Option:
    return Option("no-shutdown")


def action(event: str, response: str) -> Option:
    """How QEMU reacts to an event, e.g. `-action panic=pause`."""
    return Option("action", "", Property(event, response))


def load_vm(snapshot: str) -> Option:
    return Option("loadvm", snapshot)


def daemonize() -> Option:
    return Option("daemonize")


def option_rom(path: str | os.PathLike[str]) -> Option:
    return Option("option-rom", render_value(path))


# =============================================================================
# Incoming migration
# =============================================================================


def incoming_tcp(
    port: int,
    host: str = "",
    to: int | None = None,
    ipv4: bool | None = None,
    ipv6: bool | None = None,
) -> Option:
    target = f"tcp:{host}:{port}" if host else f"tcp:{port}"
    props = []
    if to is not None:
        props.append(Property("to", to))
    if ipv4 is not None:
        props.append(Property("ipv4", ipv4))
    if ipv6 is not None:
        props.append(Property("ipv6", ipv6))
    return Option("incoming", target, *props)


def incoming_unix(path: str | os.PathLike[str]) -> Option:
    return Option("incoming", f"unix:{os.fspath(path)}")


def incoming_fd(fd: int) -> Option:
    return Option("incoming", f"fd:{fd}")


def incoming_file(path: str | os.PathLike[str], offset: int | None = None) -> Option:
    if offset is None:
        return Option("incoming", f"file:{os.fspath(path)}")
    return Option("incoming", f"file:{os.fspath(path)}", Property("offset", offset))


def incoming_exec(command: str) -> Option:
    return Option("incoming", f"exec:{command}")


def incoming_defer() -> Option:
    """Wait for the URI to be given later via `migrate-incoming`."""
    return Option("incoming", "defer")


def only_migratable() -> Option:
    return Option("only-migratable")


def no_defaults() -> Option:
    return Option("nodefaults")


def chroot(path: str | os.PathLike[str]) -> Option:
    return Option("chroot", render_value(path))


def run_as(user: str) -> Option:
    return Option("runas", user)


def run_with(async_teardown: bool | None = None, chroot_dir: str | os.PathLike[str] | None = None) -> Option:
    props = []
    if async_teardown is not None:
        props.append(Property("async-teardown", async_teardown))
    if chroot_dir is not None:
        props.append(Property("chroot", chroot_dir))
    return Option("run-with", "", *props)


def prom_env(name: str, value: str) -> Option:
    """Set an OpenBIOS NVRAM variable (PPC/SPARC only)."""
    return Option("prom-env", f"{name}={value}")


def semihosting() -> Option:
    return Option("semihosting")


def semihosting_config(
    enabled: bool,
    target: SemihostingTarget = SemihostingTarget.AUTO,
    chardev: str = "",
    arguments: Iterable[str] = (),
) -> Option:
    props = [Property("enable", enabled), Property("target", target)]
    if chardev:
        props.append(Property("chardev", chardev))
    props.extend(Property("arg", arg) for arg in arguments)
    return Option("semihosting-config", "", *props)


class Sandbox(Entity):
    """Seccomp system call filter (`-sandbox on,...`)."""

    def __init__(self, enabled: bool = True) -> None:
        super().__init__("sandbox", status_from_bool(enabled))

    def toggle_obsolete(self, allowed: bool) -> Self:
        return self.set_property("obsolete", status_from_bool(allowed, "allow", "deny"))

    def toggle_elevate_privileges(self, allowed: bool) -> Self:
        return self.set_property("elevateprivileges", status_from_bool(allowed, "allow", "deny"))

    def toggle_spawn(self, allowed: bool) -> Self:
        return self.set_property("spawn", status_from_bool(allowed, "allow", "deny"))

    def toggle_resource_control(self, allowed: bool) -> Self:
        return self.set_property("resourcecontrol", status_from_bool(allowed, "allow", "deny"))


def read_config(path: str | os.PathLike[str]) -> Option:
    return Option("readconfig", render_value(path))


def no_user_config() -> Option:
    return Option("no-user-config")


class Trace(Entity):
    """Trace event control (`-trace enable=pattern,...`)."""

    def __init__(self) -> None:
        super().__init__("trace")

    def enable(self, pattern: str) -> Self:
        return self.set_property("enable", pattern)

    def set_events_file(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("events", path)

    def set_output_file(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("file", path)


def plugin(path: str | os.PathLike[str], arguments: Mapping[str, PropertyValue] | None = None) -> Option:
    """TCG plugin with its arguments, e.g. `-plugin file=libinsn.so,inline=on`."""
    props = [Property("file", path)]
    props.extend(Property(key, value) for key, value in (arguments or {}).items())
    return Option("plugin", "", *props)


def message_format(timestamp: bool | None = None, guest_name: bool | None = None) -> Option:
    """Control error message format (`-msg timestamp=on`)."""
    props = []
    if timestamp is not None:
        props.append(Property("timestamp", timestamp))
    if guest_name is not None:
        props.append(Property("guest-name", guest_name))
    return Option("msg", "", *props)


def dump_vmstate(path: str | os.PathLike[str]) -> Option:
    return Option("dump-vmstate", render_value(path))


def enable_sync_profile() -> Option:
    return Option("enable-sync-profile")
