"""Generic guest device (`-device <driver>,...`) and the USB and watchdog shortcuts.

Per-model property catalogs are out of scope; use set_property() for
driver-specific settings:

    >>> Device("e1000").set_property("mac", "52:54:00:12:34:56").set_property("netdev", "net0").args_string()
    '-device e1000,mac=52:54:00:12:34:56,netdev=net0'
"""

from __future__ import annotations

from enum import Enum
from typing import Self

from queso.options import Entity, Option
from queso.properties import render_value


class Device(Entity):
    def __init__(self, driver: str) -> None:
        super().__init__("device", driver)

    def set_id(self, device_id: str) -> Self:
        return self.upsert_property("id", device_id)

    def set_bus(self, bus: str) -> Self:
        return self.upsert_property("bus", bus)

    def set_address(self, address: str) -> Self:
        """PCI slot and function, e.g. "04.0"."""
        return self.upsert_property("addr", address)


# =============================================================================
# USB and watchdog shortcuts
# =============================================================================


class USBDeviceName(str, Enum):
    BRAILLE = "braille"
    KEYBOARD = "keyboard"
    MOUSE = "mouse"
    TABLET = "tablet"
    WACOM_TABLET = "wacom-tablet"


def enable_usb() -> Option:
    """Enable the on-board USB host controller where the machine has one."""
    return Option("usb")


def usb_device(device: USBDeviceName | str) -> Option:
    """`-usbdevice NAME`; enables a USB controller if needed."""
    return Option("usbdevice", render_value(device))


class WatchdogAction(str, Enum):
    RESET = "reset"
    SHUTDOWN = "shutdown"
    POWEROFF = "poweroff"
    INJECT_NMI = "inject-nmi"
    PAUSE = "pause"
    DEBUG = "debug"
    NONE = "none"


def watchdog_action(action: WatchdogAction) -> Option:
    """What to do when the guest stops feeding its watchdog device."""
    return Option("watchdog-action", render_value(action))
