"""TPM backends (`-tpmdev`).

The backend is exposed to the guest by a `tpm-tis` or `tpm-crb` device:

    -chardev socket,id=chrtpm,path=/tmp/swtpm.sock
    -tpmdev emulator,id=tpm0,chardev=chrtpm
    -device tpm-tis,tpmdev=tpm0
"""

from __future__ import annotations

import os
from typing import Self

from queso.options import Entity


class Backend(Entity):
    def __init__(self, backend_type: str, backend_id: str) -> None:
        super().__init__("tpmdev", backend_type)
        self.set_property("id", backend_id)


class PassthroughBackend(Backend):
    """Host TPM through the passthrough driver (Linux only).

    The host TPM must not be in use by anything else on the host.
    """

    def __init__(self, backend_id: str) -> None:
        super().__init__("passthrough", backend_id)

    def set_path(self, path: str | os.PathLike[str]) -> Self:
        """Host TPM device; QEMU defaults to /dev/tpm0."""
        return self.set_property("path", path)

    def set_cancel_path(self, path: str | os.PathLike[str]) -> Self:
        """sysfs entry used to cancel a running TPM command."""
        return self.set_property("cancel-path", path)


class EmulatorBackend(Backend):
    """Software TPM (swtpm) reached over a Unix socket chardev."""

    def __init__(self, backend_id: str, chardev_id: str) -> None:
        super().__init__("emulator", backend_id)
        self.set_property("chardev", chardev_id)
