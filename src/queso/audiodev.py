"""Audio backends (`-audiodev <driver>,id=<id>,...`).

Most per-stream settings apply to one direction and are prefixed with it:

    -audiodev pa,id=snd0,out.frequency=48000,in.channels=1
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Self

from queso.options import Entity
from queso.properties import PropertyValue, render_value


class Direction(str, Enum):
    INPUT = "in"
    OUTPUT = "out"


class SampleFormat(str, Enum):
    S8 = "s8"
    S16 = "s16"
    S32 = "s32"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    F32 = "f32"


class AudioDriver(str, Enum):
    NONE = "none"
    ALSA = "alsa"
    COREAUDIO = "coreaudio"
    DSOUND = "dsound"
    OSS = "oss"
    PA = "pa"
    PIPEWIRE = "pipewire"
    SDL = "sdl"
    SNDIO = "sndio"
    SPICE = "spice"
    WAV = "wav"


class Backend(Entity):
    """Audio backend with the settings every driver understands."""

    def __init__(self, driver: AudioDriver | str, backend_id: str) -> None:
        super().__init__("audiodev", render_value(driver))
        self.set_property("id", backend_id)

    def set_direction_property(self, direction: Direction, key: str, value: PropertyValue) -> Self:
        """Set `<in|out>.<key>=value`."""
        return self.set_property(f"{Direction(direction).value}.{key}", value)

    def set_buffer_length(self, direction: Direction, microseconds: int) -> Self:
        return self.set_direction_property(direction, "buffer-length", microseconds)

    def set_channels(self, direction: Direction, count: int) -> Self:
        return self.set_direction_property(direction, "channels", count)

    def set_frequency(self, direction: Direction, hertz: int) -> Self:
        return self.set_direction_property(direction, "frequency", hertz)

    def set_sample_format(self, direction: Direction, sample_format: SampleFormat) -> Self:
        return self.set_direction_property(direction, "format", sample_format)

    def set_voices(self, direction: Direction, count: int) -> Self:
        return self.set_direction_property(direction, "voices", count)

    def toggle_fixed_settings(self, direction: Direction, enabled: bool) -> Self:
        """Use the configured frequency/channels/format instead of the guest's."""
        return self.set_direction_property(direction, "fixed-settings", enabled)

    def toggle_mixing_engine(self, direction: Direction, enabled: bool) -> Self:
        return self.set_direction_property(direction, "mixing-engine", enabled)

    def set_timer_period(self, microseconds: int) -> Self:
        return self.set_property("timer-period", microseconds)


class ALSABackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(AudioDriver.ALSA, backend_id)

    def set_device(self, direction: Direction, device: str) -> Self:
        return self.set_direction_property(direction, "dev", device)

    def set_period_length(self, direction: Direction, microseconds: int) -> Self:
        return self.set_direction_property(direction, "period-length", microseconds)

    def toggle_try_poll(self, direction: Direction, enabled: bool) -> Self:
        return self.set_direction_property(direction, "try-poll", enabled)

    def set_threshold(self, microseconds: int) -> Self:
        return self.set_property("threshold", microseconds)


class CoreAudioBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(AudioDriver.COREAUDIO, backend_id)

    def set_buffer_count(self, direction: Direction, count: int) -> Self:
        return self.set_direction_property(direction, "buffer-count", count)


class DirectSoundBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(AudioDriver.DSOUND, backend_id)

    def set_latency(self, microseconds: int) -> Self:
        return self.set_property("latency", microseconds)


class OSSBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(AudioDriver.OSS, backend_id)

    def set_device(self, direction: Direction, device: str) -> Self:
        return self.set_direction_property(direction, "dev", device)

    def set_buffer_count(self, direction: Direction, count: int) -> Self:
        return self.set_direction_property(direction, "buffer-count", count)

    def toggle_try_poll(self, direction: Direction, enabled: bool) -> Self:
        return self.set_direction_property(direction, "try-poll", enabled)

    def set_dsp_policy(self, policy: int) -> Self:
        return self.set_property("dsp-policy", policy)

    def toggle_exclusive(self, enabled: bool) -> Self:
        return self.set_property("exclusive", enabled)

    def toggle_try_mmap(self, enabled: bool) -> Self:
        return self.set_property("try-mmap", enabled)


class PulseAudioBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(AudioDriver.PA, backend_id)

    def set_server(self, server: str) -> Self:
        return self.set_property("server", server)

    def set_sink(self, direction: Direction, name: str) -> Self:
        """Sink (output) or source (input) to use."""
        return self.set_direction_property(direction, "name", name)

    def set_latency(self, direction: Direction, microseconds: int) -> Self:
        return self.set_direction_property(direction, "latency", microseconds)


class PipeWireBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(AudioDriver.PIPEWIRE, backend_id)

    def set_sink(self, direction: Direction, name: str) -> Self:
        return self.set_direction_property(direction, "name", name)

    def set_stream_name(self, direction: Direction, name: str) -> Self:
        return self.set_direction_property(direction, "stream-name", name)

    def set_latency(self, direction: Direction, microseconds: int) -> Self:
        return self.set_direction_property(direction, "latency", microseconds)


class SDLBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(AudioDriver.SDL, backend_id)

    def set_buffer_count(self, direction: Direction, count: int) -> Self:
        return self.set_direction_property(direction, "buffer-count", count)


class SndioBackend(Backend):
    def __init__(self, backend_id: str) -> None:
        super().__init__(AudioDriver.SNDIO, backend_id)

    def set_device(self, direction: Direction, device: str) -> Self:
        return self.set_direction_property(direction, "dev", device)

    def set_latency(self, direction: Direction, microseconds: int) -> Self:
        return self.set_direction_property(direction, "latency", microseconds)


class WAVBackend(Backend):
    """Capture output to a WAV file; input is not supported."""

    def __init__(self, backend_id: str) -> None:
        super().__init__(AudioDriver.WAV, backend_id)

    def set_path(self, path: str | os.PathLike[str]) -> Self:
        return self.set_property("path", path)


def spice_backend(backend_id: str) -> Backend:
    """Send audio through the SPICE protocol (requires -spice)."""
    return Backend(AudioDriver.SPICE, backend_id)


def none_backend(backend_id: str) -> Backend:
    """Emulate the audio timing but discard the samples."""
    return Backend(AudioDriver.NONE, backend_id)
