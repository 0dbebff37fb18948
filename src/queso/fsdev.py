"""File system devices (`-fsdev`) and the `-virtfs` shorthand.

A `-fsdev` backend is exported to the guest by a virtio-9p device:

    -fsdev local,id=share0,path=/srv/share,security_model=mapped-xattr
    -device virtio-9p-pci,fsdev=share0,mount_tag=share

`-virtfs` creates both halves in one option.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Self

from queso.blockdev import IOOperation, throttle_key
from queso.options import Entity


class FSDriver(str, Enum):
    LOCAL = "local"
    SYNTH = "synth"


class SecurityModel(str, Enum):
    """How guest file ownership and permissions map onto the host."""

    NONE = "none"
    PASSTHROUGH = "passthrough"
    MAPPED_XATTR = "mapped-xattr"
    MAPPED_FILE = "mapped-file"


class MultiDeviceSharing(str, Enum):
    """Handling of exported trees spanning several host devices."""

    REMAP = "remap"
    FORBID = "forbid"
    WARN = "warn"


class _LocalFileSystem(Entity):
    """Properties shared by the local `-fsdev` and `-virtfs` forms."""

    def enable_write_out(self) -> Self:
        """Write through to the host page cache before acknowledging."""
        return self.upsert_property("writeout", "immediate")

    def toggle_read_only(self, enabled: bool) -> Self:
        return self.set_property("readonly", enabled)

    def set_file_mode(self, mode: str) -> Self:
        """Default mode for created files, e.g. "0644" (mapped security models only)."""
        return self.set_property("fmode", mode)

    def set_directory_mode(self, mode: str) -> Self:
        return self.set_property("dmode", mode)

    def set_path(self, path: str | os.PathLike[str]) -> Self:
        return self.upsert_property("path", path)

    def set_security_model(self, model: SecurityModel) -> Self:
        return self.upsert_property("security_model", model)


class LocalFileSystemDevice(_LocalFileSystem):
    """`-fsdev local` exporting a host directory."""

    def __init__(self, fsdev_id: str, path: str | os.PathLike[str], model: SecurityModel) -> None:
        super().__init__("fsdev", FSDriver.LOCAL.value)
        self.set_property("id", fsdev_id)
        self.set_property("path", path)
        self.set_property("security_model", model)

    def set_id(self, fsdev_id: str) -> Self:
        return self.upsert_property("id", fsdev_id)

    def set_bandwidth_limit(self, operation: IOOperation, bytes_per_second: int) -> Self:
        return self.set_property(f"throttling.{throttle_key('bps', operation)}", bytes_per_second)

    def set_bandwidth_burst(self, operation: IOOperation, bytes_per_second: int) -> Self:
        return self.set_property(f"throttling.{throttle_key('bps', operation, burst=True)}", bytes_per_second)

    def set_request_rate_limit(self, operation: IOOperation, requests_per_second: int) -> Self:
        return self.set_property(f"throttling.{throttle_key('iops', operation)}", requests_per_second)

    def set_request_rate_burst(self, operation: IOOperation, requests_per_second: int) -> Self:
        return self.set_property(f"throttling.{throttle_key('iops', operation, burst=True)}", requests_per_second)

    def set_request_size(self, size: int) -> Self:
        return self.set_property("throttling.iops_size", size)


class SynthFileSystemDevice(Entity):
    """`-fsdev synth`, a synthetic file system used only by QTests."""

    def __init__(self, fsdev_id: str) -> None:
        super().__init__("fsdev", FSDriver.SYNTH.value)
        self.set_property("id", fsdev_id)

    def set_id(self, fsdev_id: str) -> Self:
        return self.upsert_property("id", fsdev_id)

    def toggle_read_only(self, enabled: bool) -> Self:
        return self.set_property("readonly", enabled)


class VirtualFileSystem(_LocalFileSystem):
    """`-virtfs local` creating the backend and the 9p device together."""

    def __init__(self, mount_tag: str, path: str | os.PathLike[str], model: SecurityModel) -> None:
        super().__init__("virtfs", FSDriver.LOCAL.value)
        self.set_property("mount_tag", mount_tag)
        self.set_property("path", path)
        self.set_property("security_model", model)

    def set_mount_tag(self, tag: str) -> Self:
        return self.upsert_property("mount_tag", tag)

    def set_id(self, fsdev_id: str) -> Self:
        return self.upsert_property("id", fsdev_id)

    def set_multi_device_sharing(self, sharing: MultiDeviceSharing) -> Self:
        return self.set_property("multidevs", sharing)


class VirtualSynthFileSystem(Entity):
    def __init__(self, mount_tag: str) -> None:
        super().__init__("virtfs", FSDriver.SYNTH.value)
        self.set_property("mount_tag", mount_tag)
