import numpy as np
import pytest
import soundfile as sf

from Core.recorder import AudioRecorder


def test_records_only_between_start_and_stop():
    rec = AudioRecorder(rate=8000)
    rec.append(np.ones(100))
    rec.start()
    rec.append(np.zeros(1000))
    rec.append(np.zeros(1000))
    rec.stop()
    rec.append(np.ones(100))

    assert rec.num_samples == 2000
    assert rec.duration == pytest.approx(0.25)


def test_save_writes_wav(tmp_path):
    rec = AudioRecorder(rate=44_100)
    rec.start()
    t = np.arange(4410) / 44_100
    rec.append(0.5 * np.sin(2 * np.pi * 220 * t))
    rec.stop()

    path = rec.save(str(tmp_path / "takes" / "take.wav"))
    data, rate = sf.read(path)
    assert rate == 44_100
    assert len(data) == 4410
    assert np.max(np.abs(data)) == pytest.approx(0.5, abs=1e-3)


def test_save_without_audio_fails(tmp_path):
    with pytest.raises(ValueError):
        AudioRecorder().save(str(tmp_path / "empty.wav"))
