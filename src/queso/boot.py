"""Boot order and boot menu (`-boot`).

Drive letters follow the x86 PC convention: `a`/`b` floppy, `c` first hard
disk, `d` first CD-ROM, `n`-`p` network adapters. They are concatenated
without a separator:

    >>> BootOptions().set_order("c", "d").args_string()
    '-boot order=cd'
"""

from __future__ import annotations

import os
from typing import Self

from queso.exceptions import PropertyRequiredError
from queso.options import Entity


class BootOptions(Entity):
    def __init__(self) -> None:
        super().__init__("boot")

    def set_order(self, *drives: str) -> Self:
        return self.set_property("order", "".join(drives))

    def set_once(self, *drives: str) -> Self:
        """Boot order for the first boot only; reverts to order on reset."""
        return self.set_property("once", "".join(drives))

    def toggle_menu(self, enabled: bool) -> Self:
        return self.set_property("menu", enabled)

    def set_splash(self, path: str | os.PathLike[str]) -> Self:
        """Splash picture shown while the menu waits (requires menu=on)."""
        return self.set_property("splash", path)

    def set_splash_time(self, milliseconds: int) -> Self:
        return self.set_property("splash-time", milliseconds)

    def set_reboot_timeout(self, milliseconds: int) -> Self:
        """Reboot after this long when no bootable device is found; -1 disables."""
        return self.set_property("reboot-timeout", milliseconds)

    def toggle_strict(self, enabled: bool) -> Self:
        return self.set_property("strict", enabled)

    def validate(self) -> None:
        if not len(self):
            raise PropertyRequiredError("-boot needs at least one property", flag=self.flag)
