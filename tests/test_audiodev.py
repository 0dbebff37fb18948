"""Tests for audio backends."""

from queso.audiodev import (
    ALSABackend,
    AudioDriver,
    Backend,
    CoreAudioBackend,
    Direction,
    DirectSoundBackend,
    OSSBackend,
    PipeWireBackend,
    PulseAudioBackend,
    SampleFormat,
    SDLBackend,
    SndioBackend,
    WAVBackend,
    none_backend,
    spice_backend,
)


class TestBackend:
    """Tests for settings shared by every driver."""

    def test_id_first(self) -> None:
        assert Backend(AudioDriver.OSS, "snd0").args_string() == "-audiodev oss,id=snd0"

    def test_direction_prefix(self) -> None:
        backend = (
            Backend("pa", "snd0")
            .set_frequency(Direction.OUTPUT, 48000)
            .set_channels(Direction.INPUT, 1)
            .set_sample_format(Direction.OUTPUT, SampleFormat.S16)
        )
        assert backend.args_string() == "-audiodev pa,id=snd0,out.frequency=48000,in.channels=1,out.format=s16"

    def test_common_settings(self) -> None:
        backend = (
            none_backend("a")
            .set_buffer_length(Direction.OUTPUT, 10000)
            .set_voices(Direction.INPUT, 2)
            .toggle_fixed_settings(Direction.OUTPUT, False)
            .toggle_mixing_engine(Direction.INPUT, True)
            .set_timer_period(5000)
        )
        assert backend.args_string() == (
            "-audiodev none,id=a,out.buffer-length=10000,in.voices=2,out.fixed-settings=off,"
            "in.mixing-engine=on,timer-period=5000"
        )


class TestDrivers:
    """Tests for driver-specific builders."""

    def test_alsa(self) -> None:
        backend = (
            ALSABackend("a")
            .set_device(Direction.OUTPUT, "hw:0")
            .set_period_length(Direction.OUTPUT, 500)
            .toggle_try_poll(Direction.INPUT, False)
            .set_threshold(100)
        )
        assert backend.args_string() == (
            "-audiodev alsa,id=a,out.dev=hw:0,out.period-length=500,in.try-poll=off,threshold=100"
        )

    def test_coreaudio(self) -> None:
        backend = CoreAudioBackend("c").set_buffer_count(Direction.OUTPUT, 4)
        assert backend.args_string() == "-audiodev coreaudio,id=c,out.buffer-count=4"

    def test_dsound(self) -> None:
        assert DirectSoundBackend("d").set_latency(10000).args_string() == "-audiodev dsound,id=d,latency=10000"

    def test_oss(self) -> None:
        backend = (
            OSSBackend("o")
            .set_device(Direction.INPUT, "/dev/dsp")
            .set_buffer_count(Direction.OUTPUT, 2)
            .toggle_try_poll(Direction.OUTPUT, True)
            .set_dsp_policy(5)
            .toggle_exclusive(False)
            .toggle_try_mmap(True)
        )
        assert backend.args_string() == (
            "-audiodev oss,id=o,in.dev=/dev/dsp,out.buffer-count=2,out.try-poll=on,dsp-policy=5,"
            "exclusive=off,try-mmap=on"
        )

    def test_pulseaudio(self) -> None:
        backend = (
            PulseAudioBackend("p")
            .set_server("unix:/run/pulse/native")
            .set_sink(Direction.OUTPUT, "speakers")
            .set_latency(Direction.OUTPUT, 15000)
        )
        assert backend.args_string() == (
            "-audiodev pa,id=p,server=unix:/run/pulse/native,out.name=speakers,out.latency=15000"
        )

    def test_pipewire(self) -> None:
        backend = PipeWireBackend("pw").set_stream_name(Direction.OUTPUT, "vm").set_sink(Direction.INPUT, "mic")
        assert backend.args_string() == "-audiodev pipewire,id=pw,out.stream-name=vm,in.name=mic"

    def test_sdl_and_sndio(self) -> None:
        assert SDLBackend("s").set_buffer_count(Direction.OUTPUT, 3).args_string() == (
            "-audiodev sdl,id=s,out.buffer-count=3"
        )
        assert SndioBackend("n").set_device(Direction.OUTPUT, "snd/0").set_latency(Direction.OUTPUT, 50).args_string() == (
            "-audiodev sndio,id=n,out.dev=snd/0,out.latency=50"
        )

    def test_wav(self) -> None:
        assert WAVBackend("w").set_path("/tmp/out.wav").args_string() == "-audiodev wav,id=w,path=/tmp/out.wav"

    def test_spice(self) -> None:
        assert spice_backend("sp").args_string() == "-audiodev spice,id=sp"
