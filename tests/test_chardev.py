"""Tests for character device backends."""

import pytest

from queso.chardev import (
    Backend,
    BackendType,
    FileBackend,
    RingBufferBackend,
    StdioBackend,
    TCPSocketBackend,
    UDPBackend,
    UnixSocketBackend,
    VirtualConsoleBackend,
    braille_backend,
    console_backend,
    msmouse_backend,
    null_backend,
    parallel_backend,
    pipe_backend,
    pty_backend,
    serial_backend,
    spiceport_backend,
    spicevmc_backend,
)
from queso.exceptions import OptionError, PropertyValueError

# ============================================================================
# Identity
# ============================================================================


class TestBackendId:
    """Tests for id placement and length limits."""

    def test_id_first(self) -> None:
        backend = Backend(BackendType.NULL, "n0").toggle_multiplexing(True)
        assert backend.args_string() == "-chardev null,id=n0,mux=on"

    def test_id_property(self) -> None:
        assert Backend("pty", "p0").id == "p0"

    def test_max_length_id_accepted(self) -> None:
        backend_id = "c" * 127
        assert null_backend(backend_id).args() == ["-chardev", f"null,id={backend_id}"]

    def test_overlong_id_rejected(self) -> None:
        with pytest.raises(PropertyValueError) as exc_info:
            null_backend("c" * 128).option()
        assert exc_info.value.context["id"] == "c" * 128
        assert isinstance(exc_info.value, OptionError)


# ============================================================================
# Sockets
# ============================================================================


class TestSockets:
    """Tests for socket-family backends."""

    def test_tcp_server(self) -> None:
        backend = (
            TCPSocketBackend("mon0", 4444)
            .set_host("127.0.0.1")
            .toggle_server(True)
            .toggle_wait(False)
            .toggle_no_delay(True)
        )
        assert backend.args_string() == "-chardev socket,id=mon0,port=4444,host=127.0.0.1,server=on,wait=off,nodelay=on"

    def test_tcp_client_options(self) -> None:
        backend = (
            TCPSocketBackend("c", 5555)
            .set_to_port(5560)
            .toggle_ipv4(True)
            .toggle_ipv6(False)
            .toggle_telnet(True)
            .toggle_websocket(False)
            .set_reconnect(2)
            .set_tls_credentials("tls0")
            .set_tls_authorization("authz0")
        )
        assert backend.option().table() == {
            "id": "c",
            "port": "5555",
            "to": "5560",
            "ipv4": "on",
            "ipv6": "off",
            "telnet": "on",
            "websocket": "off",
            "reconnect": "2",
            "tls-creds": "tls0",
            "tls-authz": "authz0",
        }

    def test_unix_socket(self) -> None:
        backend = UnixSocketBackend("qmp", "/run/qmp.sock").toggle_server(True).toggle_wait(False)
        assert backend.args_string() == "-chardev socket,id=qmp,path=/run/qmp.sock,server=on,wait=off"

    def test_abstract_unix_socket(self) -> None:
        backend = UnixSocketBackend("qmp", "qmp").toggle_abstract(True).toggle_tight(False)
        assert backend.args_string() == "-chardev socket,id=qmp,path=qmp,abstract=on,tight=off"

    def test_udp(self) -> None:
        backend = (
            UDPBackend("u0", 6000)
            .set_host("10.0.0.2")
            .set_local_address("0.0.0.0")
            .set_local_port(6001)
            .toggle_ipv4(True)
            .toggle_ipv6(False)
        )
        assert backend.args_string() == (
            "-chardev udp,id=u0,port=6000,host=10.0.0.2,localaddr=0.0.0.0,localport=6001,ipv4=on,ipv6=off"
        )


# ============================================================================
# Files, terminals and devices
# ============================================================================


class TestHostBackends:
    """Tests for file, terminal and host device backends."""

    def test_virtual_console(self) -> None:
        backend = VirtualConsoleBackend("vc0").set_columns(80).set_rows(25).set_width(640).set_height(480)
        assert backend.args_string() == "-chardev vc,id=vc0,cols=80,rows=25,width=640,height=480"

    def test_ring_buffer(self) -> None:
        assert RingBufferBackend("log").set_size("64K").args_string() == "-chardev ringbuf,id=log,size=64K"

    def test_file(self) -> None:
        backend = FileBackend("f0", "/tmp/serial.log").toggle_append(True).set_input_path("/tmp/in")
        assert backend.args_string() == "-chardev file,id=f0,path=/tmp/serial.log,append=on,input-path=/tmp/in"

    def test_stdio(self) -> None:
        backend = StdioBackend("s0").toggle_multiplexing(True).toggle_signals(False)
        assert backend.args_string() == "-chardev stdio,id=s0,mux=on,signals=off"

    @pytest.mark.parametrize(
        ("factory", "expected"),
        [
            (null_backend, "-chardev null,id=x"),
            (msmouse_backend, "-chardev msmouse,id=x"),
            (console_backend, "-chardev console,id=x"),
            (pty_backend, "-chardev pty,id=x"),
            (braille_backend, "-chardev braille,id=x"),
        ],
    )
    def test_id_only_factories(self, factory, expected: str) -> None:  # type: ignore[no-untyped-def]
        assert factory("x").args_string() == expected

    def test_path_factories(self) -> None:
        assert pipe_backend("p", "/tmp/guest").args_string() == "-chardev pipe,id=p,path=/tmp/guest"
        assert serial_backend("s", "/dev/ttyS0").args_string() == "-chardev serial,id=s,path=/dev/ttyS0"
        assert parallel_backend("l", "/dev/parport0").args_string() == "-chardev parallel,id=l,path=/dev/parport0"


# ============================================================================
# SPICE
# ============================================================================


class TestSpiceBackends:
    """Tests for SPICE channel backends."""

    def test_spicevmc_usbredir(self) -> None:
        backend = spicevmc_backend("usbredirchardev1", "usbredir")
        assert backend.args_string() == "-chardev spicevmc,id=usbredirchardev1,name=usbredir"

    def test_spicevmc_debug(self) -> None:
        backend = spicevmc_backend("vdagent0", "vdagent", debug=1)
        assert backend.args_string() == "-chardev spicevmc,id=vdagent0,debug=1,name=vdagent"

    def test_spiceport(self) -> None:
        backend = spiceport_backend("sp0", "org.qemu.console.serial.0")
        assert backend.args_string() == "-chardev spiceport,id=sp0,name=org.qemu.console.serial.0"
