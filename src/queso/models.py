"""Machine description files.

A machine description is a JSON document listing the options of one QEMU
invocation, in order:

    {
      "executable": "qemu-system-x86_64",
      "options": [
        {"flag": "accel", "name": "kvm"},
        {"flag": "m", "properties": {"size": "1G"}},
        {"flag": "drive", "properties": [
          {"key": "file", "value": "disk.img"},
          {"key": "if", "value": "virtio"}
        ]}
      ]
    }

Properties may be given as a list of {key, value} objects (duplicate keys
allowed) or as one object (key order preserved).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from queso.exceptions import MachineSpecError
from queso.options import Option
from queso.properties import Property
from queso.qemu import Qemu
from queso.settings import Settings


class PropertySpec(BaseModel):
    """One `key=value` pair of an option."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str = Field(min_length=1, description="Property name")
    value: bool | int | float | str = Field(description="Property value; booleans render on/off")

    def to_property(self) -> Property:
        return Property(self.key, self.value)


class OptionSpec(BaseModel):
    """One command-line option."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    flag: str = Field(min_length=1, description="Flag without the leading dash")
    name: str = Field(default="", description="Bare first token of the value")
    properties: list[PropertySpec] = Field(default_factory=list)
    leading_dash: bool = True

    @field_validator("properties", mode="before")
    @classmethod
    def _properties_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return [{"key": key, "value": val} for key, val in value.items()]
        return value

    def to_option(self) -> Option:
        return Option(
            self.flag,
            self.name,
            *(prop.to_property() for prop in self.properties),
            leading_dash=self.leading_dash,
        )


class MachineSpec(BaseModel):
    """Emulator binary plus its ordered options."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    executable: str | None = Field(default=None, description="Binary; defaults to Settings/host arch")
    options: list[OptionSpec] = Field(default_factory=list)

    def to_options(self) -> list[Option]:
        return [spec.to_option() for spec in self.options]

    def to_qemu(self, settings: Settings | None = None) -> Qemu:
        return Qemu(self.executable, settings=settings).with_options(*self.to_options())


def parse_machine_spec(text: str | bytes, source: str = "<string>") -> MachineSpec:
    """Validate a machine description from JSON text or UTF-8 bytes.

    Raises:
        MachineSpecError: Undecodable bytes, malformed JSON or schema violation
    """
    try:
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        return MachineSpec.model_validate_json(text)
    except UnicodeDecodeError as e:
        raise MachineSpecError(
            f"Machine description {source} is not valid UTF-8: {e.reason} at byte {e.start}",
            context={"source": source, "position": e.start},
        ) from e
    except ValidationError as e:
        raise MachineSpecError(
            f"Invalid machine description {source}: {e.error_count()} error(s)",
            context={"source": source, "errors": str(e)},
        ) from e


def load_machine_spec(path: str | Path) -> MachineSpec:
    """Read and validate a machine description file."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise MachineSpecError(
            f"Cannot read machine description {path}: {e.strerror or e}",
            context={"source": str(path)},
        ) from e
    return parse_machine_spec(data, source=str(path))
