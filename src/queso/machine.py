"""Standard machine options: identity, machine type, CPUs, memory, kernel boot.

Example:
    >>> Machine("q35").set_accelerators(AccelType.KVM, AccelType.TCG).args_string()
    '-machine q35,accel=kvm:tcg'
"""

from __future__ import annotations

import os
import uuid as uuid_mod
from enum import Enum
from typing import Self

from queso.accel import AccelType
from queso.exceptions import PropertyRequiredError
from queso.options import Entity, Option
from queso.properties import Property, PropertyValue, Status, render_value


class KeyboardLayout(str, Enum):
    ARABIC = "ar"
    CZECH = "cz"
    DANISH = "da"
    GERMAN = "de"
    GERMAN_SWITZERLAND = "de-ch"
    ENGLISH_UK = "en-gb"
    ENGLISH_US = "en-us"
    SPANISH = "es"
    ESTONIAN = "et"
    FINNISH = "fi"
    FAROESE = "fo"
    FRENCH = "fr"
    FRENCH_BELGIUM = "fr-be"
    FRENCH_CANADA = "fr-ca"
    FRENCH_SWITZERLAND = "fr-ch"
    CROATIAN = "hr"
    HUNGARIAN = "hu"
    ICELANDIC = "is"
    ITALIAN = "it"
    JAPANESE = "ja"
    LITHUANIAN = "lt"
    LATVIAN = "lv"
    MACEDONIAN = "mk"
    DUTCH = "nl"
    DUTCH_BELGIUM = "nl-be"
    NORWEGIAN = "no"
    POLISH = "pl"
    PORTUGUESE = "pt"
    PORTUGUESE_BRAZIL = "pt-br"
    RUSSIAN = "ru"
    THAI = "th"
    TURKISH = "tr"
    SLOVENIAN = "sl"
    SWEDISH = "sv"


def name(guest_name: str) -> Option:
    """Guest name shown in window titles and the VNC server name."""
    return Option("name", guest_name)


def uuid(value: str | uuid_mod.UUID) -> Option:
    return Option("uuid", str(value))


def cpu(model: str) -> Option:
    """CPU model, e.g. `host` or `max`, optionally with `,+feature` flags."""
    return Option("cpu", model)


def keyboard_layout(layout: KeyboardLayout | str) -> Option:
    return Option("k", render_value(layout))


def kernel(path: str | os.PathLike[str]) -> Option:
    return Option("kernel", render_value(path))


def initrd(path: str | os.PathLike[str]) -> Option:
    return Option("initrd", render_value(path))


def append(cmdline: str) -> Option:
    """Kernel command line; kept as one argv token."""
    return Option("append", cmdline)


def device_tree(path: str | os.PathLike[str]) -> Option:
    return Option("dtb", render_value(path))


def add_fd(fd: int, fdset: int, opaque: str = "") -> Option:
    """Add an inherited file descriptor to an fd set (`-add-fd fd=3,set=2`)."""
    props = [Property("fd", fd), Property("set", fdset)]
    if opaque:
        props.append(Property("opaque", opaque))
    return Option("add-fd", "", *props)


def global_property(driver: str, prop: str, value: PropertyValue) -> Option:
    """Default value for a device property (`-global driver=..,property=..,value=..`)."""
    return Option("global", "", Property("driver", driver), Property("property", prop), Property("value", value))


def memory_path(path: str | os.PathLike[str]) -> Option:
    return Option("mem-path", render_value(path))


def memory_prealloc() -> Option:
    return Option("mem-prealloc")


class Machine(Entity):
    """Machine type and its properties (`-machine q35,accel=kvm`)."""

    def __init__(self, machine_type: str = "") -> None:
        super().__init__("machine", machine_type)

    def set_accelerators(self, *accels: AccelType | str) -> Self:
        """Accelerators to try in order, joined with colons."""
        return self.set_property("accel", ":".join(render_value(accel) for accel in accels))

    def set_vmport(self, status: Status) -> Self:
        return self.set_property("vmport", status)

    def toggle_dump_guest_core(self, enabled: bool) -> Self:
        return self.set_property("dump-guest-core", enabled)

    def toggle_memory_merge(self, enabled: bool) -> Self:
        """KSM page merging of guest memory."""
        return self.set_property("mem-merge", enabled)

    def toggle_aes_key_wrap(self, enabled: bool) -> Self:
        return self.set_property("aes-key-wrap", enabled)

    def toggle_dea_key_wrap(self, enabled: bool) -> Self:
        return self.set_property("dea-key-wrap", enabled)

    def toggle_nvdimm(self, enabled: bool) -> Self:
        return self.set_property("nvdimm", enabled)

    def toggle_hmat(self, enabled: bool) -> Self:
        return self.set_property("hmat", enabled)

    def set_memory_encryption(self, object_id: str) -> Self:
        return self.set_property("memory-encryption", object_id)

    def set_memory_backend(self, object_id: str) -> Self:
        return self.set_property("memory-backend", object_id)


class SMP(Entity):
    """CPU count and topology (`-smp cpus=4,sockets=1,cores=2,threads=2`)."""

    def __init__(self, cpus: int | None = None) -> None:
        super().__init__("smp")
        if cpus is not None:
            self.set_property("cpus", cpus)

    def set_max_cpus(self, count: int) -> Self:
        """Upper bound for hot-plugged CPUs."""
        return self.set_property("maxcpus", count)

    def set_sockets(self, count: int) -> Self:
        return self.set_property("sockets", count)

    def set_dies(self, count: int) -> Self:
        return self.set_property("dies", count)

    def set_clusters(self, count: int) -> Self:
        return self.set_property("clusters", count)

    def set_cores(self, count: int) -> Self:
        return self.set_property("cores", count)

    def set_threads(self, count: int) -> Self:
        return self.set_property("threads", count)

    def validate(self) -> None:
        if not len(self):
            raise PropertyRequiredError("-smp needs a CPU count or at least one topology property", flag=self.flag)


class Memory(Entity):
    """Guest RAM (`-m size=1G,slots=2,maxmem=4G`)."""

    def __init__(self, size: str) -> None:
        super().__init__("m")
        self.set_property("size", size)

    def set_slots(self, count: int) -> Self:
        return self.set_property("slots", count)

    def set_max_memory(self, size: str) -> Self:
        return self.set_property("maxmem", size)
