"""Block device options: disk shortcuts, `-drive` and `-blockdev`.

`-drive` is the legacy all-in-one form that creates both the backend and the
guest device. `-blockdev` only creates a node in the block graph; a
`-device` referencing its node-name attaches it to the guest.

Example:
    >>> Drive().set_file("disk.img").set_interface(DriveInterface.VIRTIO).args_string()
    '-drive file=disk.img,if=virtio'
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Self

from queso.options import Entity, Option
from queso.properties import render_value


class DiskDrive(str, Enum):
    """Legacy disk shortcut flags."""

    FDA = "fda"
    FDB = "fdb"
    HDA = "hda"
    HDB = "hdb"
    HDC = "hdc"
    HDD = "hdd"
    CDROM = "cdrom"


class IOOperation(str, Enum):
    """Which I/O direction a throttling limit applies to."""

    ALL = "all"
    READ = "read"
    WRITE = "write"


class DriveInterface(str, Enum):
    NONE = "none"
    FLASH_MEMORY = "mtd"
    FLOPPY = "floppy"
    IDE = "ide"
    PARALLEL_FLASH = "pflash"
    SCSI = "scsi"
    SD_CARD = "sd"
    VIRTIO = "virtio"


class DriveMedia(str, Enum):
    CDROM = "cdrom"
    DISK = "disk"


class CacheMode(str, Enum):
    NONE = "none"
    DIRECT_SYNC = "directsync"
    UNSAFE = "unsafe"
    WRITE_BACK = "writeback"
    WRITE_THROUGH = "writethrough"


class AIOBackend(str, Enum):
    THREADS = "threads"
    IO_URING = "io_uring"
    NATIVE = "native"


class IOErrorAction(str, Enum):
    IGNORE = "ignore"
    STOP = "stop"
    REPORT = "report"
    ENOSPC = "enospc"


class DiscardMode(str, Enum):
    IGNORE = "ignore"
    UNMAP = "unmap"


class DetectZeroes(str, Enum):
    OFF = "off"
    ON = "on"
    UNMAP = "unmap"


class ImageFormat(str, Enum):
    """Disk image formats accepted by `format=`/`driver=`."""

    RAW = "raw"
    QCOW2 = "qcow2"
    QCOW = "qcow"
    QED = "qed"
    VMDK = "vmdk"
    VDI = "vdi"
    VHDX = "vhdx"
    VPC = "vpc"


class LockingMode(str, Enum):
    ON = "on"
    OFF = "off"
    AUTO = "auto"


def throttle_key(base: str, operation: IOOperation, burst: bool = False) -> str:
    """Property key for a throttling limit.

    Example:
        >>> throttle_key("bps", IOOperation.READ)
        'bps_rd'
        >>> throttle_key("iops", IOOperation.ALL, burst=True)
        'iops_max'
    """
    suffix = {IOOperation.ALL: "", IOOperation.READ: "_rd", IOOperation.WRITE: "_wr"}[IOOperation(operation)]
    return f"{base}{suffix}{'_max' if burst else ''}"


# =============================================================================
# Disk shortcuts
# =============================================================================


def disk_drive(drive: DiskDrive | str, file: str | os.PathLike[str]) -> Option:
    """Disk image as a legacy drive, e.g. `-hda disk.img` or `-cdrom boot.iso`."""
    return Option(render_value(drive), render_value(file))


def flash_memory(file: str | os.PathLike[str]) -> Option:
    return Option("mtdblock", render_value(file))


def sd_card(file: str | os.PathLike[str]) -> Option:
    return Option("sd", render_value(file))


def parallel_flash(file: str | os.PathLike[str]) -> Option:
    return Option("pflash", render_value(file))


def snapshot_mode() -> Option:
    """Write to temporary files instead of disk images (`-snapshot`)."""
    return Option("snapshot")


# =============================================================================
# -drive
# =============================================================================


class Drive(Entity):
    """Legacy `-drive` option combining a block backend and a guest device."""

    def __init__(self) -> None:
        super().__init__("drive")

    def set_file(self, file: str | os.PathLike[str]) -> Self:
        return self.set_property("file", file)

    def set_format(self, image_format: ImageFormat | str) -> Self:
        return self.set_property("format", image_format)

    def set_interface(self, interface: DriveInterface) -> Self:
        return self.set_property("if", interface)

    def set_bus(self, bus: int) -> Self:
        return self.set_property("bus", bus)

    def set_unit(self, unit: int) -> Self:
        return self.set_property("unit", unit)

    def set_index(self, index: int) -> Self:
        return self.set_property("index", index)

    def set_media(self, media: DriveMedia) -> Self:
        return self.set_property("media", media)

    def toggle_snapshot(self, enabled: bool) -> Self:
        return self.set_property("snapshot", enabled)

    def set_cache(self, mode: CacheMode) -> Self:
        return self.set_property("cache", mode)

    def set_aio(self, backend: AIOBackend) -> Self:
        return self.set_property("aio", backend)

    def set_discard(self, mode: DiscardMode) -> Self:
        return self.set_property("discard", mode)

    def set_detect_zeroes(self, mode: DetectZeroes) -> Self:
        return self.set_property("detect-zeroes", mode)

    def set_read_error_action(self, action: IOErrorAction) -> Self:
        return self.set_property("rerror", action)

    def set_write_error_action(self, action: IOErrorAction) -> Self:
        return self.set_property("werror", action)

    def toggle_read_only(self, enabled: bool) -> Self:
        return self.set_property("read-only", enabled)

    def toggle_copy_on_read(self, enabled: bool) -> Self:
        return self.set_property("copy-on-read", enabled)

    def set_bandwidth_limit(self, operation: IOOperation, bytes_per_second: int) -> Self:
        return self.set_property(throttle_key("bps", operation), bytes_per_second)

    def set_bandwidth_burst(self, operation: IOOperation, bytes_per_second: int) -> Self:
        return self.set_property(throttle_key("bps", operation, burst=True), bytes_per_second)

    def set_request_rate_limit(self, operation: IOOperation, requests_per_second: int) -> Self:
        return self.set_property(throttle_key("iops", operation), requests_per_second)

    def set_request_rate_burst(self, operation: IOOperation, requests_per_second: int) -> Self:
        return self.set_property(throttle_key("iops", operation, burst=True), requests_per_second)

    def set_request_size(self, size: int) -> Self:
        """Count each request larger than size bytes as several for iops limits."""
        return self.set_property("iops_size", size)

    def set_throttling_group(self, group: str) -> Self:
        """Share throttling limits with every drive in the same group."""
        return self.set_property("group", group)

    def set_id(self, drive_id: str) -> Self:
        return self.set_property("id", drive_id)

    def set_serial(self, serial: str) -> Self:
        return self.set_property("serial", serial)


# =============================================================================
# -blockdev
# =============================================================================


class BlockDriver(Entity):
    """Node in the block graph (`-blockdev driver=<name>,...`).

    Options common to every driver live here; format and protocol specific
    ones on the subclasses.
    """

    def __init__(self, driver: ImageFormat | str) -> None:
        super().__init__("blockdev")
        self.set_property("driver", driver)

    def set_node_name(self, name: str) -> Self:
        return self.set_property("node-name", name)

    def toggle_read_only(self, enabled: bool) -> Self:
        return self.set_property("read-only", enabled)

    def toggle_auto_read_only(self, enabled: bool) -> Self:
        return self.set_property("auto-read-only", enabled)

    def toggle_force_share(self, enabled: bool) -> Self:
        """Requires read-only=on."""
        return self.set_property("force-share", enabled)

    def toggle_direct_cache(self, enabled: bool) -> Self:
        return self.set_property("cache.direct", enabled)

    def toggle_no_flush_cache(self, enabled: bool) -> Self:
        return self.set_property("cache.no-flush", enabled)

    def set_discard(self, mode: DiscardMode) -> Self:
        return self.set_property("discard", mode)

    def set_detect_zeroes(self, mode: DetectZeroes) -> Self:
        return self.set_property("detect-zeroes", mode)


class FileDriver(BlockDriver):
    """Protocol driver for a host file."""

    def __init__(self, filename: str | os.PathLike[str]) -> None:
        super().__init__("file")
        self.set_property("filename", filename)

    def set_aio(self, backend: AIOBackend) -> Self:
        return self.set_property("aio", backend)

    def set_locking(self, mode: LockingMode) -> Self:
        return self.set_property("locking", mode)


class RawDriver(BlockDriver):
    """Raw format driver on top of the node named by `file`."""

    def __init__(self, file: str) -> None:
        super().__init__(ImageFormat.RAW)
        self.set_property("file", file)

    def set_offset(self, offset: int) -> Self:
        return self.set_property("offset", offset)

    def set_size(self, size: int) -> Self:
        return self.set_property("size", size)


class QCOW2Driver(BlockDriver):
    def __init__(self, file: str) -> None:
        super().__init__(ImageFormat.QCOW2)
        self.set_property("file", file)

    def set_backing(self, node_name: str) -> Self:
        return self.set_property("backing", node_name)

    def toggle_lazy_refcounts(self, enabled: bool) -> Self:
        return self.set_property("lazy-refcounts", enabled)

    def set_cache_size(self, size: int) -> Self:
        return self.set_property("cache-size", size)

    def set_l2_cache_size(self, size: int) -> Self:
        return self.set_property("l2-cache-size", size)

    def set_refcount_cache_size(self, size: int) -> Self:
        return self.set_property("refcount-cache-size", size)

    def set_cache_clean_interval(self, seconds: int) -> Self:
        return self.set_property("cache-clean-interval", seconds)
