# pitch_detection/pitch_detection.py
from typing import NamedTuple

from pitch_detection.estimator import estimate
from pitch_detection.note_mapper import frequency_to_note, NO_NOTE


class PitchResult(NamedTuple):
    frequency: float
    note: str


NO_PITCH = PitchResult(0.0, NO_NOTE)


def detect_pitch(samples, sample_rate: float) -> PitchResult:
    """
    Estimate pitch of one block and map it to a note name.
    Returns NO_PITCH (0.0, "N/A") when nothing periodic is found.
    """
    frequency = estimate(samples, sample_rate)
    if frequency <= 0:
        return NO_PITCH
    return PitchResult(frequency, frequency_to_note(frequency))
