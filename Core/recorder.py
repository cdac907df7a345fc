# Core/recorder.py
import os
import threading

import numpy as np
import soundfile as sf


class AudioRecorder:
    """
    Accumulates captured float32 blocks while recording and writes them
    to a WAV file on save().
    """

    def __init__(self, rate=44100, channels=1, subtype="PCM_16"):
        self.rate = int(rate)
        self.channels = channels
        self.subtype = subtype
        self.frames = []
        self.recording = False
        self._lock = threading.Lock()

    def start(self):
        with self._lock:
            self.frames = []
            self.recording = True

    def stop(self):
        with self._lock:
            self.recording = False

    def append(self, block: np.ndarray):
        """Store a copy of `block` if recording (called from the audio thread)."""
        with self._lock:
            if self.recording:
                self.frames.append(np.array(block, dtype=np.float32, copy=True))

    @property
    def num_samples(self) -> int:
        return sum(len(f) for f in self.frames)

    @property
    def duration(self) -> float:
        """Recorded length in seconds."""
        return self.num_samples / self.rate

    def save(self, path: str) -> str:
        with self._lock:
            if not self.frames:
                raise ValueError("Nothing recorded.")
            audio = np.concatenate(self.frames)

        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        sf.write(path, np.clip(audio, -1.0, 1.0), self.rate, subtype=self.subtype)
        return path
