import numpy as np

from pitch_detection.pitch_detection import detect_pitch, NO_PITCH, PitchResult

RATE = 44_100


def test_silence_is_no_pitch():
    assert detect_pitch(np.zeros(2048), RATE) == NO_PITCH
    assert detect_pitch(np.zeros(2048), RATE) == (0.0, "N/A")


def test_short_block_is_no_pitch():
    assert detect_pitch(np.ones(512), RATE) is NO_PITCH


def test_sine_maps_to_note():
    t = np.arange(2048) / RATE
    result = detect_pitch(0.5 * np.sin(2 * np.pi * 330 * t), RATE)
    assert isinstance(result, PitchResult)
    assert result.note == "E4"
    assert result.frequency > 0
