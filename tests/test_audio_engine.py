import numpy as np
import pytest

pyaudio = pytest.importorskip("pyaudio")

from Core.audio_engine import AudioEngine  # noqa: E402

RATE = 44_100


class FakeStream:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.active = False
        self.closed = False

    def start_stream(self):
        self.active = True

    def stop_stream(self):
        self.active = False

    def close(self):
        self.closed = True

    def is_active(self):
        return self.active


class FakePyAudio:
    def __init__(self, fail=False, devices=()):
        self.fail = fail
        self.devices = list(devices)
        self.streams = []
        self.terminated = False

    def get_device_count(self):
        return len(self.devices)

    def get_device_info_by_index(self, idx):
        return self.devices[idx]

    def get_host_api_info_by_index(self, idx):
        return {"name": "ALSA"}

    def open(self, **kwargs):
        if self.fail:
            raise OSError("Invalid input device")
        stream = FakeStream(**kwargs)
        self.streams.append(stream)
        return stream

    def terminate(self):
        self.terminated = True


def sine(freq, n, amplitude=0.5):
    return (amplitude * np.sin(2 * np.pi * freq * np.arange(n) / RATE)).astype(np.float32)


@pytest.fixture
def engine():
    eng = AudioEngine(rate=RATE, block_size=2048, pa=FakePyAudio())
    eng.messages = []
    eng.set_log_callback(eng.messages.append)
    return eng


def test_process_block_publishes_result(engine):
    heard = []
    engine.add_listener(lambda f, n: heard.append((f, n)))
    result = engine.process_block(sine(220, 2048))

    assert result.note == "A3"
    assert engine.current_note == "A3"
    assert engine.current_frequency == result.frequency
    assert heard == [(result.frequency, "A3")]


def test_silent_frame_is_no_pitch(engine):
    result = engine.analyze_frame()
    assert result == (0.0, "N/A")
    assert engine.current_note == "N/A"


def test_ring_buffer_keeps_newest_block(engine):
    wave = sine(330, 4096)
    for i in range(0, len(wave), 512):
        engine.push_samples(wave[i:i + 512])
    np.testing.assert_array_equal(engine.latest_block(), wave[-2048:])
    assert engine.analyze_frame().note == "E4"


def test_oversized_push_keeps_tail(engine):
    wave = sine(220, 5000)
    engine.push_samples(wave)
    np.testing.assert_array_equal(engine.latest_block(), wave[-2048:])


def test_callback_normalizes_int16(engine):
    data = np.full(512, 16384, dtype=np.int16).tobytes()
    out, flag = engine._callback(data, 512, None, 0)
    assert out is None
    assert flag == pyaudio.paContinue
    np.testing.assert_allclose(engine.latest_block()[-512:], 0.5)
    assert engine.current_level == pytest.approx(50.0)


def test_start_and_stop_stream(engine):
    engine.start_stream(input_device_index=3)
    stream = engine.pa.streams[0]
    assert engine.running
    assert engine.is_stream_active()
    assert stream.kwargs["rate"] == RATE
    assert stream.kwargs["input_device_index"] == 3
    assert stream.kwargs["input"] is True

    engine.stop_stream()
    assert stream.closed
    assert not engine.running
    assert engine.stream is None
    engine.stop_stream()  # idempotent


def test_start_failure_is_recorded_and_raised():
    eng = AudioEngine(pa=FakePyAudio(fail=True))
    with pytest.raises(OSError):
        eng.start_stream(7)
    assert eng.stream is None
    assert not eng.running
    assert "Invalid input device" in eng.error


def test_listener_error_does_not_stop_frame(engine):
    def broken(frequency, note):
        raise RuntimeError("display gone")

    heard = []
    engine.add_listener(broken)
    engine.add_listener(lambda f, n: heard.append(n))
    engine.process_block(np.zeros(2048))

    assert heard == ["N/A"]
    assert any("Listener error" in m for m in engine.messages)


def test_recording_collects_pushed_audio(engine):
    engine.push_samples(np.zeros(256))
    engine.start_recording()
    engine.push_samples(np.zeros(512))
    engine.stop_recording()
    engine.push_samples(np.zeros(256))
    assert engine.recorder.num_samples == 512


def test_terminate_releases_pyaudio(engine):
    engine.start_stream()
    engine.terminate()
    assert engine.pa.terminated
    assert engine.stream is None


def test_input_devices_skips_output_only(monkeypatch):
    monkeypatch.setattr("Core.audio_engine.os.name", "posix")
    pa = FakePyAudio(devices=[
        {"name": "Built-in Mic", "maxInputChannels": 2, "defaultSampleRate": 48000.0, "hostApi": 0},
        {"name": "Speakers", "maxInputChannels": 0, "defaultSampleRate": 44100.0, "hostApi": 0},
        {"name": "USB Mic", "maxInputChannels": 1, "defaultSampleRate": 44100.0, "hostApi": 0},
    ])
    devices = AudioEngine(pa=pa).input_devices()
    assert [d["index"] for d in devices] == [0, 2]
    assert devices[0] == {"index": 0, "name": "Built-in Mic", "channels": 2, "default_sr": 48000}
