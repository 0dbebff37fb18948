"""Properties: the `key=value` parameters attached to a command-line option.

A property value is one of bool, int, float, str, a str-valued Enum or an
os.PathLike. Rendering matches on the value type:

    bool      -> "on" / "off"   (checked before int, bool is an int subclass)
    Enum      -> member value
    PathLike  -> os.fspath()
    other     -> str()

No escaping is performed. QEMU expects literal commas inside a value to be
doubled; use escape_commas() where that can happen (e.g. file names).
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from queso.exceptions import PropertyKeyError

PropertyValue = bool | int | float | str | Enum | os.PathLike[str]


class Status(str, Enum):
    """Tri-state value used by properties that can also be decided by QEMU."""

    ON = "on"
    OFF = "off"
    AUTO = "auto"


def status_from_bool(value: bool, if_true: str = Status.ON.value, if_false: str = Status.OFF.value) -> str:
    """Return if_true when value is truthy, otherwise if_false."""
    return if_true if value else if_false


def escape_commas(value: str) -> str:
    """Double every comma so QEMU reads it as part of the value.

    Example:
        >>> escape_commas("my,file.img")
        'my,,file.img'
    """
    return value.replace(",", ",,")


def render_value(value: PropertyValue) -> str:
    """Render a property value the way QEMU's option parser expects it."""
    match value:
        case bool():
            return status_from_bool(value)
        case Enum():
            return str(value.value)
        case str():
            return value
        case os.PathLike():
            return os.fspath(value)
        case _:
            return str(value)


@dataclass(frozen=True, slots=True)
class Property:
    """Single named value of an option.

    Attributes:
        key: Property name, e.g. "cache" or "kernel-irqchip". Never empty.
        value: Property value; see module docstring for rendering rules.
    """

    key: str
    value: PropertyValue

    def __post_init__(self) -> None:
        if not self.key:
            raise PropertyKeyError("Property key must not be empty", context={"value": repr(self.value)})

    def string_value(self) -> str:
        """Rendered value without the key."""
        return render_value(self.value)

    def arg(self) -> str:
        """Render as `key=value`."""
        return f"{self.key}={self.string_value()}"


def properties_table(properties: Iterable[Property]) -> dict[str, str]:
    """Map property keys to rendered values (a later duplicate key wins)."""
    return {prop.key: prop.string_value() for prop in properties}
