"""Character device backends (`-chardev`).

Every backend renders its id first:

    -chardev socket,id=mon0,path=/tmp/mon.sock,server=on,wait=off

Front ends (serial ports, monitors, virtio consoles) refer to the backend by
that id.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Self

from queso import constants
from queso.exceptions import PropertyValueError
from queso.options import Entity
from queso.properties import render_value


class BackendType(str, Enum):
    NULL = "null"
    SOCKET = "socket"
    UDP = "udp"
    MSMOUSE = "msmouse"
    VC = "vc"
    RINGBUF = "ringbuf"
    FILE = "file"
    PIPE = "pipe"
    CONSOLE = "console"
    SERIAL = "serial"
    TTY = "tty"
    PARALLEL = "parallel"
    PARPORT = "parport"
    PTY = "pty"
    STDIO = "stdio"
    BRAILLE = "braille"
    SPICEVMC = "spicevmc"
    SPICEPORT = "spiceport"


class Backend(Entity):
    """Character device backend with the given type and id."""

    def __init__(self, backend_type: BackendType | str, backend_id: str) -> None:
        super().__init__("chardev", render_value(backend_type))
        self.set_property("id", backend_id)

    @property
    def id(self) -> str:
        prop = self.get_property("id")
        return prop.string_value() if prop else ""

    def toggle_multiplexing(self, enabled: bool) -> Self:
        """Share the backend between several front ends (`mux=on`)."""
        return self.set_property("mux", enabled)

    def validate(self) -> None:
        if len(self.id) > constants.CHARDEV_ID_MAX_LENGTH:
            raise PropertyValueError(
                f"Chardev id is {len(self.id)} characters, QEMU accepts at most {constants.CHARDEV_ID_MAX_LENGTH}",
                context={"id": self.id},
            )


# =============================================================================
# Sockets
# =============================================================================


class SocketBackend(Backend):
    """Stream socket shared by the TCP and Unix variants."""

    def __init__(self, backend_id: str) -> None:
        super().__init__(BackendType.SOCKET, backend_id)

    def toggle_server(self, enabled: bool) -> Self:
        """Listen for connections instead of connecting out."""
        return self.set_property("server", enabled)

    def toggle_wait(self, enabled: bool) -> Self:
        """Block startup until a client connects (server mode only)."""
        return self.set_property("wait", enabled)

    def toggle_telnet(self, enabled: bool) -> Self:
        return self.set_property("telnet", enabled)

    def toggle_websocket(self, enabled: bool) -> Self:
        return self.set_property("websocket", enabled)

    def set_reconnect(self, seconds: int) -> Self:
        """Client mode: retry a dropped connection after this many seconds."""
        return self.set_property("reconnect", seconds)

    def set_tls_credentials(self, creds_id: str) -> Self:
        return self.set_property("tls-creds", creds_id)

    def set_tls_authorization(self, authz_id: str) -> Self:
        return self.set_property("tls-authz", authz_id)


class TCPSocketBackend(SocketBackend):
    def __init__(self, backend_id: str, port: int) -> None:
        super().__init__(backend_id)
        self.set_property("port", port)

    def set_host(self, host: str) -> Self:
        return self.set_property("host", host)

    def set_to_port(self, port: int) -> Self:
        """Server mode: try ports up to this one until a bind succeeds."""
        return self.set_property("to", port)

    def toggle_ipv4(self, enabled: bool) -> Self:
        return self.set_property("ipv4", enabled)

    def toggle_ipv6(self, enabled: bool) -> Self:
        return self.set_property("ipv6", enabled)

    def toggle_no_delay(self, enabled: bool) -> Self:
        return self.set_property("nodelay", enabled)


class UnixSocketBackend(SocketBackend):
    def __init__(self, backend_id: str, path: str | os.PathLike[str]) -> None:
        super().__init__(backend_id)
        self.set_property("path", path)

    def toggle_abstract(self, enabled: bool) -> Self:
        """Use the Linux abstract socket namespace."""
        return self.set_property("abstract", enabled)

    def toggle_tight(self, enabled: bool) -> Self:
        return self.set_property("tight", enabled)


class UDPBackend(Backend):
    def __init__(self, backend_id: str, port: int) -> None:
        super().__init__(BackendType.UDP, backend_id)
        self.set_property("port", port)

    def set_host(self, host: str) -> Self:
        return self.set_property("host", host)

    def set_local_address(self, address: str) -> Self:
        return self.set_property("localaddr", address)

    def set_local_port(self, port: int) -> Self:
        return self.set_property("localport", port)

    def toggle_ipv4(self, enabled: bool) -> Self:
        return self.set_property("ipv4", enabled)

    def toggle_ipv6(self, enabled: bool) -> Self:
        return self.set_property("ipv6", enabled)


# =============================================================================
# Host files and terminals
# =============================================================================


class VirtualConsoleBackend(Backend):
    """Text console; size in pixels or in character cells."""

    def __init__(self, backend_id: str) -> None:
        super().__init__(BackendType.VC, backend_id)

    def set_width(self, pixels: int) -> Self:
        return self.set_property("width", pixels)

    def set_height(self, pixels: int) -> Self:
        return self.set_property("height", pixels)

    def set_columns(self, count: int) -> Self:
        return self.set_property("cols", count)

    def set_rows(self, count: int) -> Self:
        return self.set_property("rows", count)


class RingBufferBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(BackendType.RINGBUF, backend_id)

    def set_size(self, size: str) -> Self:
        """Buffer size, a power of two with an optional suffix, e.g. "64K"."""
        return self.set_property("size", size)


class FileBackend(Backend):
    def __init__(self, backend_id: str, path: str | os.PathLike[str]) -> None:
        super().__init__(BackendType.FILE, backend_id)
        self.set_property("path", path)

    def set_input_path(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("input-path", path)

    def toggle_append(self, enabled: bool) -> Self:
        return self.set_property("append", enabled)


class StdioBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(BackendType.STDIO, backend_id)

    def toggle_signals(self, enabled: bool) -> Self:
        """Whether Ctrl-C in the terminal reaches QEMU as SIGINT."""
        return self.set_property("signals", enabled)


def null_backend(backend_id: str) -> Backend:
    """Device that discards output and never produces input."""
    return Backend(BackendType.NULL, backend_id)


def msmouse_backend(backend_id: str) -> Backend:
    return Backend(BackendType.MSMOUSE, backend_id)


def pipe_backend(backend_id: str, path: str | os.PathLike[str]) -> Backend:
    """Named pipe pair `path.in`/`path.out`, or `path` itself."""
    return Backend(BackendType.PIPE, backend_id).set_property("path", path)


def console_backend(backend_id: str) -> Backend:
    """Windows console (Windows hosts only)."""
    return Backend(BackendType.CONSOLE, backend_id)


def serial_backend(backend_id: str, path: str | os.PathLike[str]) -> Backend:
    return Backend(BackendType.SERIAL, backend_id).set_property("path", path)


def parallel_backend(backend_id: str, path: str | os.PathLike[str]) -> Backend:
    return Backend(BackendType.PARALLEL, backend_id).set_property("path", path)


def pty_backend(backend_id: str) -> Backend:
    return Backend(BackendType.PTY, backend_id)


def braille_backend(backend_id: str) -> Backend:
    return Backend(BackendType.BRAILLE, backend_id)


# =============================================================================
# SPICE channels
# =============================================================================


def spicevmc_backend(backend_id: str, name: str, debug: int | None = None) -> Backend:
    """SPICE virtual machine channel, e.g. `vdagent` or `usbredir`."""
    backend = Backend(BackendType.SPICEVMC, backend_id)
    if debug is not None:
        backend.set_property("debug", debug)
    return backend.set_property("name", name)


def spiceport_backend(backend_id: str, name: str, debug: int | None = None) -> Backend:
    """SPICE port channel exposed to the client under a fully qualified name."""
    backend = Backend(BackendType.SPICEPORT, backend_id)
    if debug is not None:
        backend.set_property("debug", debug)
    return backend.set_property("name", name)
