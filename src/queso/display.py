"""Display options: `-display` backends, VGA card, SPICE and screen tweaks.

VNC has its own module (queso.vnc) since `-vnc` takes a display target
rather than a backend name.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from enum import Enum
from typing import Self

from queso.options import Entity, Option
from queso.properties import render_value


class DisplayType(str, Enum):
    NONE = "none"
    SDL = "sdl"
    GTK = "gtk"
    CURSES = "curses"
    EGL_HEADLESS = "egl-headless"
    DBUS = "dbus"
    COCOA = "cocoa"
    SPICE_APP = "spice-app"
    VNC = "vnc"


class OpenGL(str, Enum):
    ON = "on"
    OFF = "off"
    CORE = "core"
    ES = "es"


class GrabModifiers(str, Enum):
    """Modifier keys that release a grabbed mouse in SDL."""

    LEFT = "lshift-lctrl-lalt"
    RIGHT = "rctrl"


class VGACard(str, Enum):
    NONE = "none"
    CIRRUS = "cirrus"
    STANDARD = "std"
    VMWARE = "vmware"
    QXL = "qxl"
    TCX = "tcx"
    CG3 = "cg3"
    VIRTIO = "virtio"


class Display(Entity):
    """Generic `-display <type>` option."""

    def __init__(self, display_type: DisplayType | str) -> None:
        super().__init__("display", render_value(display_type))


class SDLDisplay(Display):
    def __init__(self) -> None:
        super().__init__(DisplayType.SDL)

    def set_grab_modifiers(self, mods: GrabModifiers) -> Self:
        return self.set_property("grab-mod", mods)

    def set_opengl(self, gl: OpenGL) -> Self:
        return self.set_property("gl", gl)

    def toggle_show_cursor(self, enabled: bool) -> Self:
        return self.set_property("show-cursor", enabled)

    def toggle_window_close(self, enabled: bool) -> Self:
        """Allow closing the window to shut the guest down."""
        return self.set_property("window-close", enabled)


class GTKDisplay(Display):
    def __init__(self) -> None:
        super().__init__(DisplayType.GTK)

    def toggle_full_screen(self, enabled: bool) -> Self:
        return self.set_property("full-screen", enabled)

    def toggle_opengl(self, enabled: bool) -> Self:
        return self.set_property("gl", enabled)

    def toggle_show_cursor(self, enabled: bool) -> Self:
        return self.set_property("show-cursor", enabled)

    def toggle_show_menu_bar(self, enabled: bool) -> Self:
        return self.set_property("show-menubar", enabled)

    def toggle_show_tabs(self, enabled: bool) -> Self:
        return self.set_property("show-tabs", enabled)

    def toggle_window_close(self, enabled: bool) -> Self:
        return self.set_property("window-close", enabled)

    def toggle_zoom_to_fit(self, enabled: bool) -> Self:
        return self.set_property("zoom-to-fit", enabled)


class CursesDisplay(Display):
    def __init__(self) -> None:
        super().__init__(DisplayType.CURSES)

    def set_charset(self, encoding: str) -> Self:
        """Guest encoding for the text console, e.g. "CP850"."""
        return self.set_property("charset", encoding)


class EGLHeadlessDisplay(Display):
    def __init__(self) -> None:
        super().__init__(DisplayType.EGL_HEADLESS)

    def set_render_node(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("rendernode", path)


class DBusDisplay(Display):
    def __init__(self) -> None:
        super().__init__(DisplayType.DBUS)

    def set_address(self, address: str) -> Self:
        return self.set_property("addr", address)

    def set_opengl(self, gl: OpenGL) -> Self:
        return self.set_property("gl", gl)

    def toggle_peer_to_peer(self, enabled: bool) -> Self:
        return self.set_property("p2p", enabled)


class CocoaDisplay(Display):
    def __init__(self) -> None:
        super().__init__(DisplayType.COCOA)

    def toggle_left_command_key(self, enabled: bool) -> Self:
        return self.set_property("left-command-key", enabled)

    def toggle_show_cursor(self, enabled: bool) -> Self:
        return self.set_property("show-cursor", enabled)


class NoDisplay(Display):
    """Guest keeps its graphics card but nothing is shown on the host."""

    def __init__(self) -> None:
        super().__init__(DisplayType.NONE)


def vga(card: VGACard | str) -> Option:
    return Option("vga", render_value(card))


def no_graphic() -> Option:
    """Disable graphical output and redirect serial I/O to the console."""
    return Option("nographic")


def full_screen() -> Option:
    return Option("full-screen")


def portrait() -> Option:
    return Option("portrait")


def rotate(degrees: int) -> Option:
    return Option("rotate", str(degrees))


def screen_resolution(width: int, height: int, depth: int = 0) -> Option:
    """Initial graphical resolution, e.g. `-g 1024x768x24`. A zero depth is omitted."""
    resolution = f"{width}x{height}"
    if depth:
        resolution = f"{resolution}x{depth}"
    return Option("g", resolution)


# =============================================================================
# SPICE
# =============================================================================


class SpiceChannel(str, Enum):
    DEFAULT = "default"
    CURSOR = "cursor"
    DISPLAY = "display"
    INPUTS = "inputs"
    MAIN = "main"
    PLAYBACK = "playback"
    RECORD = "record"


class ImageCompression(str, Enum):
    AUTO_GLZ = "auto_glz"
    AUTO_LZ = "auto_lz"
    QUIC = "quic"
    GLZ = "glz"
    LZ = "lz"
    OFF = "off"


class WANCompression(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class VideoStreamDetection(str, Enum):
    OFF = "off"
    ALL = "all"
    FILTER = "filter"


class Spice(Entity):
    """SPICE remote desktop server (`-spice`)."""

    def __init__(self) -> None:
        super().__init__("spice")

    def set_port(self, port: int) -> Self:
        return self.set_property("port", port)

    def set_tls_port(self, port: int) -> Self:
        return self.set_property("tls-port", port)

    def set_address(self, address: str) -> Self:
        """IP address, or socket path when unix=on."""
        return self.set_property("addr", address)

    def toggle_ipv4(self, enabled: bool) -> Self:
        return self.set_property("ipv4", enabled)

    def toggle_ipv6(self, enabled: bool) -> Self:
        return self.set_property("ipv6", enabled)

    def toggle_unix(self, enabled: bool) -> Self:
        return self.set_property("unix", enabled)

    def set_password_secret(self, secret_id: str) -> Self:
        return self.set_property("password-secret", secret_id)

    def toggle_sasl(self, enabled: bool) -> Self:
        return self.set_property("sasl", enabled)

    def disable_ticketing(self, disabled: bool = True) -> Self:
        return self.set_property("disable-ticketing", disabled)

    def disable_copy_paste(self, disabled: bool = True) -> Self:
        return self.set_property("disable-copy-paste", disabled)

    def disable_agent_file_transfer(self, disabled: bool = True) -> Self:
        return self.set_property("disable-agent-file-xfer", disabled)

    def set_x509_directory(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("x509-dir", path)

    def set_x509_key_file(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("x509-key-file", path)

    def set_x509_key_password(self, password: str) -> Self:
        return self.set_property("x509-key-password", password)

    def set_x509_cert_file(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("x509-cert-file", path)

    def set_x509_cacert_file(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("x509-cacert-file", path)

    def set_x509_dh_key_file(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("x509-dh-key-file", path)

    def set_tls_ciphers(self, ciphers: Iterable[str]) -> Self:
        """OpenSSL cipher list; joined with colons."""
        return self.set_property("tls-ciphers", ":".join(ciphers))

    def set_tls_channel(self, channel: SpiceChannel) -> Self:
        return self.set_property("tls-channel", channel)

    def set_plaintext_channel(self, channel: SpiceChannel) -> Self:
        return self.set_property("plaintext-channel", channel)

    def set_image_compression(self, compression: ImageCompression) -> Self:
        return self.set_property("image-compression", compression)

    def set_jpeg_wan_compression(self, mode: WANCompression) -> Self:
        return self.set_property("jpeg-wan-compression", mode)

    def set_zlib_glz_wan_compression(self, mode: WANCompression) -> Self:
        return self.set_property("zlib-glz-wan-compression", mode)

    def set_video_stream_detection(self, detection: VideoStreamDetection) -> Self:
        return self.set_property("streaming-video", detection)

    def toggle_agent_mouse(self, enabled: bool) -> Self:
        return self.set_property("agent-mouse", enabled)

    def toggle_playback_compression(self, enabled: bool) -> Self:
        return self.set_property("playback-compression", enabled)

    def toggle_seamless_migration(self, enabled: bool) -> Self:
        return self.set_property("seamless-migration", enabled)

    def toggle_opengl(self, enabled: bool) -> Self:
        return self.set_property("gl", enabled)

    def set_render_node(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("rendernode", path)
