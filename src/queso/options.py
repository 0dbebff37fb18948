"""Options and the builder every domain catalog is made of.

An Option is one top-level QEMU flag with an optional bare name and ordered
properties:

    -<flag> <name>,<key1>=<val1>,<key2>=<val2>

Option values are immutable. Catalog modules build them through Entity, a
mutable fluent builder that is finalized with Entity.option().

Example:
    >>> Option("accel", "kvm", Property("kernel-irqchip", True)).args()
    ['-accel', 'kvm,kernel-irqchip=on']
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol, Self, runtime_checkable

from queso.properties import Property, PropertyValue, properties_table


@dataclass(frozen=True, slots=True, init=False)
class Option:
    """Immutable command-line option.

    Attributes:
        flag: Flag without the leading dash, e.g. "drive"
        name: Bare first token of the value, e.g. "kvm" (may be empty)
        properties: Properties in serialization order
        leading_dash: Whether the flag renders with a "-" prefix
    """

    flag: str
    name: str
    properties: tuple[Property, ...]
    leading_dash: bool

    def __init__(self, flag: str, name: str = "", *properties: Property, leading_dash: bool = True) -> None:
        object.__setattr__(self, "flag", flag)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "properties", tuple(properties))
        object.__setattr__(self, "leading_dash", leading_dash)

    def omit_leading_dash(self) -> Option:
        """Copy of this option rendering the flag without a dash."""
        return Option(self.flag, self.name, *self.properties, leading_dash=False)

    def args(self) -> list[str]:
        """Render as argv tokens: the flag, then the joined value if any."""
        flag = f"-{self.flag}" if self.leading_dash else self.flag
        parts = [self.name] if self.name else []
        parts.extend(prop.arg() for prop in self.properties)
        if not parts:
            return [flag]
        return [flag, ",".join(parts)]

    def args_string(self) -> str:
        return " ".join(self.args())

    def table(self) -> dict[str, str]:
        """Property key -> rendered value (last duplicate wins)."""
        return properties_table(self.properties)

    def __str__(self) -> str:
        return self.args_string()


@runtime_checkable
class Usable(Protocol):
    """Anything that can be finalized into an Option."""

    def option(self) -> Option: ...


class Entity:
    """Mutable builder for an Option.

    Setters return the builder so calls can be chained; option() validates
    and returns an immutable snapshot. Snapshots are unaffected by later
    setter calls.

    Subclasses override validate() to enforce QEMU's constraints on the
    finished property list.
    """

    def __init__(self, flag: str, name: str = "", *properties: Property) -> None:
        self.flag = flag
        self.name = name
        self._properties: list[Property] = list(properties)

    @property
    def properties(self) -> tuple[Property, ...]:
        return tuple(self._properties)

    def __iter__(self) -> Iterator[Property]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.flag!r}, {self.name!r}, properties={len(self._properties)})"

    def set_option_flag(self, flag: str) -> Self:
        """Override the flag, e.g. when a wrapper reuses a builder under another flag."""
        self.flag = flag
        return self

    def set_option_name(self, name: str) -> Self:
        self.name = name
        return self

    def set_property(self, key: str, value: PropertyValue) -> Self:
        """Append a property. Duplicate keys are kept and rendered in order."""
        self._properties.append(Property(key, value))
        return self

    def set_properties(self, items: Iterable[tuple[str, PropertyValue]]) -> Self:
        for key, value in items:
            self.set_property(key, value)
        return self

    def upsert_property(self, key: str, value: PropertyValue) -> Self:
        """Replace the value of every property named key, or append one."""
        found = False
        for idx, prop in enumerate(self._properties):
            if prop.key == key:
                self._properties[idx] = Property(key, value)
                found = True
        if not found:
            self._properties.append(Property(key, value))
        return self

    def remove_property(self, key: str) -> Self:
        self._properties = [prop for prop in self._properties if prop.key != key]
        return self

    def get_property(self, key: str) -> Property | None:
        """Last property named key, or None."""
        match = None
        for prop in self._properties:
            if prop.key == key:
                match = prop
        return match

    def has_property(self, key: str) -> bool:
        return any(prop.key == key for prop in self._properties)

    def validate(self) -> None:
        """Hook run by option(); raise an OptionError subclass on violation."""

    def option(self) -> Option:
        self.validate()
        return Option(self.flag, self.name, *self._properties)

    def args(self) -> list[str]:
        return self.option().args()

    def args_string(self) -> str:
        return self.option().args_string()

