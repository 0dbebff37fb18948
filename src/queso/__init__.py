"""queso: QEMU command lines from typed Python builders.

Options and their properties are assembled with typed constructors and
rendered into QEMU's `-flag name,key=value,...` syntax, then handed to a
`qemu-system-*` process.

Quick Start:
    ```python
    from queso import Qemu
    from queso.accel import KVMAccelerator, KernelIRQChip
    from queso.blockdev import Drive, DriveInterface
    from queso.machine import Memory

    qemu = Qemu("qemu-system-x86_64").use(
        KVMAccelerator().set_kernel_irqchip(KernelIRQChip.ON),
        Memory("2G"),
        Drive().set_file("disk.img").set_interface(DriveInterface.VIRTIO),
    )
    print(qemu.command_line())
    # qemu-system-x86_64 -accel kvm,kernel-irqchip=on -m size=2G -drive file=disk.img,if=virtio
    await qemu.run()
    ```

Low-level options:
    ```python
    from queso import Option, Property

    Option("chardev", "spicevmc", Property("id", "vdagent0"), Property("name", "vdagent")).args()
    # ['-chardev', 'spicevmc,id=vdagent0,name=vdagent']
    ```

Machine descriptions (JSON) can be rendered or run with the `queso` CLI.

Requirements:
    - Python 3.12+
    - QEMU on PATH (only for running; rendering needs no QEMU)
"""

from queso.exceptions import (
    ArityError,
    MachineSpecError,
    MutuallyExclusivePropertyError,
    OptionError,
    PropertyKeyError,
    PropertyRequiredError,
    PropertyValueError,
    QemuError,
    QemuExitError,
    QemuNotFoundError,
    QemuVersionError,
    QuesoError,
)
from queso.models import MachineSpec, OptionSpec, PropertySpec, load_machine_spec, parse_machine_spec
from queso.options import Entity, Option, Usable
from queso.properties import Property, Status, escape_commas, properties_table, status_from_bool
from queso.qemu import Qemu, default_executable
from queso.settings import Settings

__all__ = [
    "ArityError",
    "Entity",
    "MachineSpec",
    "MachineSpecError",
    "MutuallyExclusivePropertyError",
    "Option",
    "OptionError",
    "OptionSpec",
    "Property",
    "PropertyKeyError",
    "PropertyRequiredError",
    "PropertySpec",
    "PropertyValueError",
    "Qemu",
    "QemuError",
    "QemuExitError",
    "QemuNotFoundError",
    "QemuVersionError",
    "QuesoError",
    "Settings",
    "Status",
    "Usable",
    "default_executable",
    "escape_commas",
    "load_machine_spec",
    "parse_machine_spec",
    "properties_table",
    "status_from_bool",
]

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("queso")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
