"""Tests for block device options."""

from pathlib import Path

import pytest

from queso.blockdev import (
    AIOBackend,
    BlockDriver,
    CacheMode,
    DetectZeroes,
    DiskDrive,
    DiscardMode,
    Drive,
    DriveInterface,
    DriveMedia,
    FileDriver,
    IOErrorAction,
    IOOperation,
    LockingMode,
    QCOW2Driver,
    RawDriver,
    disk_drive,
    flash_memory,
    parallel_flash,
    sd_card,
    snapshot_mode,
    throttle_key,
)

# ============================================================================
# Shortcuts
# ============================================================================


class TestShortcuts:
    """Tests for the legacy disk shortcut flags."""

    @pytest.mark.parametrize("drive", list(DiskDrive))
    def test_disk_drive(self, drive: DiskDrive) -> None:
        assert disk_drive(drive, "disk.img").args() == [f"-{drive.value}", "disk.img"]

    def test_disk_drive_path(self) -> None:
        assert disk_drive(DiskDrive.CDROM, Path("/iso/boot.iso")).args_string() == "-cdrom /iso/boot.iso"

    def test_flash_and_cards(self) -> None:
        assert flash_memory("nand.bin").args_string() == "-mtdblock nand.bin"
        assert sd_card("sd.img").args_string() == "-sd sd.img"
        assert parallel_flash("OVMF_CODE.fd").args_string() == "-pflash OVMF_CODE.fd"

    def test_snapshot(self) -> None:
        assert snapshot_mode().args() == ["-snapshot"]


# ============================================================================
# Throttling keys
# ============================================================================


class TestThrottleKey:
    """Tests for throttling property key construction."""

    @pytest.mark.parametrize(
        ("base", "operation", "burst", "expected"),
        [
            ("bps", IOOperation.ALL, False, "bps"),
            ("bps", IOOperation.READ, False, "bps_rd"),
            ("bps", IOOperation.WRITE, False, "bps_wr"),
            ("bps", IOOperation.ALL, True, "bps_max"),
            ("iops", IOOperation.READ, True, "iops_rd_max"),
            ("iops", IOOperation.WRITE, True, "iops_wr_max"),
        ],
    )
    def test_keys(self, base: str, operation: IOOperation, burst: bool, expected: str) -> None:
        assert throttle_key(base, operation, burst) == expected


# ============================================================================
# -drive
# ============================================================================


class TestDrive:
    """Tests for the -drive builder."""

    def test_basic(self) -> None:
        drive = Drive().set_file("disk.img").set_interface(DriveInterface.VIRTIO)
        assert drive.args_string() == "-drive file=disk.img,if=virtio"

    def test_bandwidth_limits(self) -> None:
        drive = (
            Drive()
            .set_bandwidth_limit(IOOperation.ALL, 50)
            .set_bandwidth_limit(IOOperation.READ, 50)
            .set_bandwidth_burst(IOOperation.WRITE, 100)
        )
        assert drive.args_string() == "-drive bps=50,bps_rd=50,bps_wr_max=100"

    def test_request_rate_limits(self) -> None:
        drive = (
            Drive()
            .set_request_rate_limit(IOOperation.WRITE, 200)
            .set_request_rate_burst(IOOperation.ALL, 400)
            .set_request_size(8192)
            .set_throttling_group("slow")
        )
        assert drive.args_string() == "-drive iops_wr=200,iops_max=400,iops_size=8192,group=slow"

    def test_full_drive(self) -> None:
        drive = (
            Drive()
            .set_id("d0")
            .set_file(Path("/var/lib/vm/disk.qcow2"))
            .set_format("qcow2")
            .set_media(DriveMedia.DISK)
            .set_bus(0)
            .set_unit(1)
            .set_index(2)
            .set_cache(CacheMode.NONE)
            .set_aio(AIOBackend.IO_URING)
            .set_discard(DiscardMode.UNMAP)
            .set_detect_zeroes(DetectZeroes.UNMAP)
            .set_read_error_action(IOErrorAction.REPORT)
            .set_write_error_action(IOErrorAction.ENOSPC)
            .toggle_read_only(False)
            .toggle_copy_on_read(True)
            .toggle_snapshot(False)
            .set_serial("QM0001")
        )
        assert drive.option().table() == {
            "id": "d0",
            "file": "/var/lib/vm/disk.qcow2",
            "format": "qcow2",
            "media": "disk",
            "bus": "0",
            "unit": "1",
            "index": "2",
            "cache": "none",
            "aio": "io_uring",
            "discard": "unmap",
            "detect-zeroes": "unmap",
            "rerror": "report",
            "werror": "enospc",
            "read-only": "off",
            "copy-on-read": "on",
            "snapshot": "off",
            "serial": "QM0001",
        }


# ============================================================================
# -blockdev
# ============================================================================


class TestBlockDriver:
    """Tests for -blockdev nodes."""

    def test_driver_comes_first(self) -> None:
        node = BlockDriver("null-co").set_node_name("n0")
        assert node.args_string() == "-blockdev driver=null-co,node-name=n0"

    def test_file_protocol(self) -> None:
        node = (
            FileDriver("/images/disk.raw")
            .set_node_name("proto0")
            .set_aio(AIOBackend.NATIVE)
            .toggle_direct_cache(True)
            .set_locking(LockingMode.AUTO)
        )
        assert node.args_string() == (
            "-blockdev driver=file,filename=/images/disk.raw,node-name=proto0,aio=native,cache.direct=on,locking=auto"
        )

    def test_raw_format(self) -> None:
        node = RawDriver("proto0").set_node_name("fmt0").set_offset(512).set_size(1048576)
        assert node.args_string() == "-blockdev driver=raw,file=proto0,node-name=fmt0,offset=512,size=1048576"

    def test_qcow2_format(self) -> None:
        node = (
            QCOW2Driver("proto0")
            .set_node_name("fmt0")
            .set_backing("base0")
            .toggle_lazy_refcounts(True)
            .set_l2_cache_size(4194304)
        )
        assert node.args_string() == (
            "-blockdev driver=qcow2,file=proto0,node-name=fmt0,backing=base0,lazy-refcounts=on,l2-cache-size=4194304"
        )

    def test_shared_read_only(self) -> None:
        node = (
            FileDriver("base.img")
            .toggle_read_only(True)
            .toggle_force_share(True)
            .toggle_auto_read_only(False)
            .toggle_no_flush_cache(True)
            .set_discard(DiscardMode.IGNORE)
            .set_detect_zeroes(DetectZeroes.OFF)
        )
        assert node.option().table() == {
            "driver": "file",
            "filename": "base.img",
            "read-only": "on",
            "force-share": "on",
            "auto-read-only": "off",
            "cache.no-flush": "on",
            "discard": "ignore",
            "detect-zeroes": "off",
        }
