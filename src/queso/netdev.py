"""Network backends (`-netdev`) and the `-nic` shorthand.

A `-netdev` backend is connected to a guest NIC created with `-device`:

    -netdev user,id=net0,hostfwd=tcp::2222-:22
    -device virtio-net-pci,netdev=net0

`-nic` creates both halves in one option and takes no id. NIC.from_backend()
turns a configured backend into one:

    >>> NIC.from_backend(UserBackend("net0").toggle_restricted(True)).set_model("virtio-net-pci").args_string()
    '-nic user,restrict=on,model=virtio-net-pci'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Self

from queso.options import Entity
from queso.properties import render_value


class BackendType(str, Enum):
    USER = "user"
    TAP = "tap"
    BRIDGE = "bridge"
    SOCKET = "socket"
    STREAM = "stream"
    DGRAM = "dgram"
    L2TPV3 = "l2tpv3"
    VDE = "vde"
    AF_XDP = "af-xdp"
    VHOST_USER = "vhost-user"
    VHOST_VDPA = "vhost-vdpa"
    HUBPORT = "hubport"
    VMNET_HOST = "vmnet-host"
    VMNET_SHARED = "vmnet-shared"
    VMNET_BRIDGED = "vmnet-bridged"


class PortType(str, Enum):
    TCP = "tcp"
    UDP = "udp"


# =============================================================================
# User-mode forwarding rules
# =============================================================================


@dataclass(frozen=True)
class HostForwardRule:
    """Redirect a host port to the guest (`hostfwd=tcp:HOSTIP:PORT-GUESTIP:PORT`).

    Empty addresses bind every host interface and target the guest's DHCP
    address.
    """

    host_port: int
    guest_port: int
    port_type: PortType = PortType.TCP
    host_address: str = ""
    guest_address: str = ""

    def value(self) -> str:
        return (
            f"{self.port_type.value}:{self.host_address}:{self.host_port}-"
            f"{self.guest_address}:{self.guest_port}"
        )


@dataclass(frozen=True)
class GuestForwardRule:
    """Forward guest TCP connections to SERVER:PORT to a host chardev or command."""

    server_address: str
    server_port: int
    target: str

    def value(self) -> str:
        return f"tcp:{self.server_address}:{self.server_port}-{self.target}"


# =============================================================================
# Backends
# =============================================================================


class Backend(Entity):
    """Network backend with the given type and id."""

    def __init__(self, backend_type: BackendType | str, backend_id: str) -> None:
        super().__init__("netdev", render_value(backend_type))
        self.set_property("id", backend_id)


class UserBackend(Backend):
    """User-mode (SLIRP) networking: no privileges needed, NAT to the host."""

    def __init__(self, backend_id: str) -> None:
        super().__init__(BackendType.USER, backend_id)

    def add_host_forward(self, rule: HostForwardRule) -> Self:
        return self.set_property("hostfwd", rule.value())

    def add_guest_forward(self, rule: GuestForwardRule) -> Self:
        return self.set_property("guestfwd", rule.value())

    def toggle_ipv4(self, enabled: bool) -> Self:
        return self.set_property("ipv4", enabled)

    def toggle_ipv6(self, enabled: bool) -> Self:
        return self.set_property("ipv6", enabled)

    def set_network(self, address: str) -> Self:
        """Guest network, e.g. "10.0.2.0/24"."""
        return self.set_property("net", address)

    def set_host_address(self, address: str) -> Self:
        """Host address as seen from the guest."""
        return self.set_property("host", address)

    def set_ipv6_network(self, prefix: str) -> Self:
        return self.set_property("ipv6-net", prefix)

    def set_ipv6_host_address(self, address: str) -> Self:
        return self.set_property("ipv6-host", address)

    def toggle_restricted(self, enabled: bool) -> Self:
        """Isolate the guest from the host and the outside network."""
        return self.set_property("restrict", enabled)

    def set_hostname(self, hostname: str) -> Self:
        return self.set_property("hostname", hostname)

    def set_dhcp_start(self, address: str) -> Self:
        return self.set_property("dhcpstart", address)

    def set_dns(self, address: str) -> Self:
        return self.set_property("dns", address)

    def set_ipv6_dns(self, address: str) -> Self:
        return self.set_property("ipv6-dns", address)

    def add_dns_search(self, domain: str) -> Self:
        return self.set_property("dnssearch", domain)

    def set_domain_name(self, domain: str) -> Self:
        return self.set_property("domainname", domain)

    def set_tftp_root(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("tftp", path)

    def set_tftp_server_name(self, name: str) -> Self:
        return self.set_property("tftp-server-name", name)

    def set_boot_file(self, path: str) -> Self:
        """BOOTP file name, e.g. "pxelinux.0" (used with the TFTP root)."""
        return self.set_property("bootfile", path)

    def set_smb_share(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("smb", path)

    def set_smb_server(self, address: str) -> Self:
        return self.set_property("smbserver", address)


class TAPBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(BackendType.TAP, backend_id)

    def set_interface_name(self, name: str) -> Self:
        return self.set_property("ifname", name)

    def set_file_descriptor(self, fd: int) -> Self:
        """Already-open TAP device."""
        return self.set_property("fd", fd)

    def set_up_script(self, path: str | os.PathLike[str]) -> Self:
        """Script run after the interface is created; "no" disables it."""
        return self.set_property("script", path)

    def set_down_script(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("downscript", path)

    def set_bridge(self, bridge: str) -> Self:
        return self.set_property("br", bridge)

    def set_helper(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("helper", path)

    def toggle_vhost(self, enabled: bool) -> Self:
        return self.set_property("vhost", enabled)

    def set_queues(self, count: int) -> Self:
        return self.set_property("queues", count)


class BridgeBackend(Backend):
    """TAP device attached to a host bridge through qemu-bridge-helper."""

    def __init__(self, backend_id: str) -> None:
        super().__init__(BackendType.BRIDGE, backend_id)

    def set_bridge(self, bridge: str) -> Self:
        return self.set_property("br", bridge)

    def set_helper(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("helper", path)


class SocketBackend(Backend):
    """Connect VLANs of separate QEMU instances over TCP or UDP multicast."""

    def __init__(self, backend_id: str) -> None:
        super().__init__(BackendType.SOCKET, backend_id)

    def set_file_descriptor(self, fd: int) -> Self:
        return self.set_property("fd", fd)

    def set_listen(self, port: int, host: str = "") -> Self:
        return self.set_property("listen", f"{host}:{port}")

    def set_connect(self, host: str, port: int) -> Self:
        return self.set_property("connect", f"{host}:{port}")

    def set_multicast(self, address: str, port: int) -> Self:
        return self.set_property("mcast", f"{address}:{port}")

    def set_local_address(self, address: str) -> Self:
        """Local address for multicast packets."""
        return self.set_property("localaddr", address)

    def set_udp(self, host: str, port: int) -> Self:
        """Unicast UDP peer; pair with set_local_address()."""
        return self.set_property("udp", f"{host}:{port}")


class L2TPv3Backend(Backend):
    """Static L2TPv3 pseudowire (RFC 3931)."""

    def __init__(self, backend_id: str, source: str, destination: str) -> None:
        super().__init__(BackendType.L2TPV3, backend_id)
        self.set_property("src", source)
        self.set_property("dst", destination)

    def toggle_udp(self, enabled: bool) -> Self:
        """Encapsulate in UDP instead of IP."""
        return self.set_property("udp", enabled)

    def set_source_port(self, port: int) -> Self:
        return self.set_property("srcport", port)

    def set_destination_port(self, port: int) -> Self:
        return self.set_property("dstport", port)

    def toggle_ipv6(self, enabled: bool) -> Self:
        return self.set_property("ipv6", enabled)

    def set_receive_session(self, session: int) -> Self:
        return self.set_property("rxsession", session)

    def set_transmit_session(self, session: int) -> Self:
        return self.set_property("txsession", session)

    def set_receive_cookie(self, cookie: int) -> Self:
        return self.set_property("rxcookie", cookie)

    def set_transmit_cookie(self, cookie: int) -> Self:
        return self.set_property("txcookie", cookie)

    def toggle_64bit_cookie(self, enabled: bool) -> Self:
        return self.set_property("cookie64", enabled)

    def toggle_counter(self, enabled: bool) -> Self:
        return self.set_property("counter", enabled)

    def toggle_pin_counter(self, enabled: bool) -> Self:
        return self.set_property("pincounter", enabled)

    def set_offset(self, offset: int) -> Self:
        return self.set_property("offset", offset)


class VDEBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(BackendType.VDE, backend_id)

    def set_socket_path(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("sock", path)

    def set_port(self, port: int) -> Self:
        return self.set_property("port", port)

    def set_group(self, group: str) -> Self:
        return self.set_property("group", group)

    def set_mode(self, mode: str) -> Self:
        """Octal permissions of the communication port, e.g. "0700"."""
        return self.set_property("mode", mode)


class VhostUserBackend(Backend):
    """Backend served by an external vhost-user process over a chardev."""

    def __init__(self, backend_id: str, chardev_id: str) -> None:
        super().__init__(BackendType.VHOST_USER, backend_id)
        self.set_property("chardev", chardev_id)

    def toggle_vhost_force(self, enabled: bool) -> Self:
        return self.set_property("vhostforce", enabled)

    def set_queues(self, count: int) -> Self:
        return self.set_property("queues", count)


class VhostVDPABackend(Backend):
    def __init__(self, backend_id: str, vhostdev: str | os.PathLike[str]) -> None:
        super().__init__(BackendType.VHOST_VDPA, backend_id)
        self.set_property("vhostdev", vhostdev)


class HubPortBackend(Backend):
    """Port on an emulated hub; every port of a hub sees the others' traffic."""

    def __init__(self, backend_id: str, hub_id: int) -> None:
        super().__init__(BackendType.HUBPORT, backend_id)
        self.set_property("hubid", hub_id)

    def set_netdev(self, netdev_id: str) -> Self:
        """Connect the port to another backend."""
        return self.set_property("netdev", netdev_id)


# =============================================================================
# -nic
# =============================================================================


class NIC(Entity):
    """Guest NIC and host backend in one option (`-nic type,...,model=...`)."""

    def __init__(self, backend_type: BackendType | str) -> None:
        super().__init__("nic", render_value(backend_type))

    @classmethod
    def from_backend(cls, backend: Backend) -> NIC:
        """NIC with the backend's type and properties, minus its id."""
        nic = cls(backend.name)
        nic.set_properties((prop.key, prop.value) for prop in backend if prop.key != "id")
        return nic

    def set_model(self, model: str) -> Self:
        """Guest device model, e.g. "virtio-net-pci" or "e1000"."""
        return self.upsert_property("model", model)

    def set_mac_address(self, address: str) -> Self:
        return self.upsert_property("mac", address)


def no_network() -> NIC:
    """`-nic none`: no network devices at all."""
    return NIC("none")
