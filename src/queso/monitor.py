"""Monitors attached to a character device (`-mon`).

The monitor front end reads commands from a chardev backend created with
`-chardev`:

    -chardev socket,id=qmp0,path=/tmp/qmp.sock,server=on,wait=off
    -mon chardev=qmp0,mode=control,pretty=on

`-monitor`/`-qmp` shortcuts live in queso.debug.host_redirect.
"""

from __future__ import annotations

from enum import Enum
from typing import Self

from queso.exceptions import PropertyValueError
from queso.options import Entity
from queso.properties import properties_table


class MonitorMode(str, Enum):
    """HMP is the human monitor, QMP the JSON protocol."""

    HMP = "readline"
    QMP = "control"


class Monitor(Entity):
    def __init__(self, chardev_id: str) -> None:
        super().__init__("mon")
        self.set_property("chardev", chardev_id)

    def set_mode(self, mode: MonitorMode) -> Self:
        return self.upsert_property("mode", mode)

    def toggle_pretty(self, enabled: bool) -> Self:
        """Pretty-print JSON replies (QMP only)."""
        return self.upsert_property("pretty", enabled)

    def validate(self) -> None:
        table = properties_table(self)
        if table.get("mode") == MonitorMode.HMP.value and table.get("pretty") == "on":
            raise PropertyValueError(
                "pretty=on is only valid for QMP monitors (mode=control)",
                context={"chardev": table.get("chardev"), "mode": table["mode"]},
            )
