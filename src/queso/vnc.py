"""VNC server (`-vnc <target>,...`).

The first token is the display target:

    host_display(1, "127.0.0.1")  -> 127.0.0.1:1   (TCP port 5901)
    to_display(5)                 -> to=5
    unix_display("/tmp/vnc.sock") -> unix:/tmp/vnc.sock
    no_display()                  -> none
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Self

from queso.options import Entity


class SharingPolicy(str, Enum):
    ALLOW_EXCLUSIVE = "allow-exclusive"
    FORCE_SHARED = "force-shared"
    IGNORED = "ignored"


def host_display(display: int, host: str = "") -> str:
    """`host:N`; an empty host listens on every interface."""
    return f"{host}:{display}"


def to_display(display: int) -> str:
    return f"to={display}"


def unix_display(path: str | os.PathLike[str]) -> str:
    return f"unix:{os.fspath(path)}"


def no_display() -> str:
    """Initialize VNC without listening; enable later from the monitor."""
    return "none"


class VNC(Entity):
    def __init__(self, target: str) -> None:
        super().__init__("vnc", target)

    def toggle_reverse(self, enabled: bool) -> Self:
        """Connect out to a listening viewer instead of accepting connections."""
        return self.set_property("reverse", enabled)

    def toggle_websocket(self, enabled: bool) -> Self:
        return self.set_property("websocket", enabled)

    def set_websocket(self, port: int, host: str = "") -> Self:
        return self.set_property("websocket", f"{host}:{port}" if host else port)

    def toggle_password(self, enabled: bool) -> Self:
        """Require password auth; the password is set later via the monitor."""
        return self.set_property("password", enabled)

    def set_password_secret(self, secret_id: str) -> Self:
        return self.set_property("password-secret", secret_id)

    def set_tls_credentials(self, creds_id: str) -> Self:
        return self.set_property("tls-creds", creds_id)

    def set_tls_authorization(self, authz_id: str) -> Self:
        return self.set_property("tls-authz", authz_id)

    def toggle_sasl(self, enabled: bool) -> Self:
        return self.set_property("sasl", enabled)

    def set_sasl_authorization(self, authz_id: str) -> Self:
        return self.set_property("sasl-authz", authz_id)

    def toggle_lossy(self, enabled: bool) -> Self:
        return self.set_property("lossy", enabled)

    def toggle_adaptive_encoding(self, enabled: bool) -> Self:
        return self.set_property("non-adaptive", not enabled)

    def set_sharing_policy(self, policy: SharingPolicy) -> Self:
        return self.set_property("share", policy)

    def set_key_delay(self, milliseconds: int) -> Self:
        return self.set_property("key-delay-ms", milliseconds)

    def set_audio_device(self, audiodev_id: str) -> Self:
        return self.set_property("audiodev", audiodev_id)

    def toggle_power_control(self, enabled: bool) -> Self:
        return self.set_property("power-control", enabled)
