# Core/audio_engine.py
import logging
import os
import threading

import numpy as np
import pyaudio

from pitch_detection.pitch_detection import detect_pitch, NO_PITCH, PitchResult
from Core.recorder import AudioRecorder

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44100
DEFAULT_BLOCK_SIZE = 2048      # samples analyzed per frame
FRAMES_PER_BUFFER = 512        # PortAudio callback size


class AudioEngine:
    """
    Real-time pitch engine:
    - Captures mono input from a microphone into a ring buffer
    - Once per frame, estimates pitch on the latest block
    - Publishes (frequency, note) to listeners

    Notes:
      - Input PCM is int16 from the pyaudio callback, normalized to float32 in [-1, 1].
      - analyze_frame() is driven by a FrameScheduler; it never blocks on the device.
    """

    def __init__(self, rate=DEFAULT_SAMPLE_RATE, block_size=DEFAULT_BLOCK_SIZE,
                 frames_per_buffer=FRAMES_PER_BUFFER, pa=None):
        self.rate = rate
        self.block_size = block_size
        self.frames_per_buffer = frames_per_buffer
        self.in_channels = 1

        self.input_device_index = None

        # PyAudio
        self.pa = pa if pa is not None else pyaudio.PyAudio()
        self._running = False
        self.stream = None
        self.error = None

        # Capture ring buffer (latest block_size samples)
        self._buffer = np.zeros(self.block_size, dtype=np.float32)
        self._buffer_lock = threading.Lock()

        # Recording of captured audio
        self.recorder = AudioRecorder(rate=self.rate)

        # GUI / monitoring
        self.current_level = 0.0
        self.current_frequency = 0.0
        self.current_note = NO_PITCH.note
        self.listeners = []

        # logging callback (set by GUI)
        self.log_callback = None

    def set_log_callback(self, callback):
        """Set a logging callback for GUI log output."""
        self.log_callback = callback

    def _log(self, msg: str, level=logging.INFO):
        """Internal helper to send log messages."""
        if self.log_callback:
            try:
                self.log_callback(msg)
            except Exception:
                # logger must not break the audio path (GUI thread)
                logger.exception("[AudioEngine] log callback failed.")
                logger.log(level, msg)
        else:
            logger.log(level, msg)

    # ----------------------------
    # Listeners
    # ----------------------------
    def add_listener(self, callback):
        """Register callback(frequency, note), called after every analyzed frame."""
        self.listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self.listeners:
            self.listeners.remove(callback)

    # ----------------------------
    # Devices
    # ----------------------------
    def input_devices(self):
        """
        List microphones the engine can open, as dicts with
        index / name / channels / default_sr. On Windows only
        WASAPI devices are offered.
        """
        found = []
        for idx in range(self.pa.get_device_count()):
            info = self.pa.get_device_info_by_index(idx)
            channels = int(info["maxInputChannels"])
            if channels < self.in_channels:
                continue
            if os.name == "nt":
                api = self.pa.get_host_api_info_by_index(info["hostApi"])
                if "WASAPI" not in api["name"]:
                    continue
            found.append({
                "index": idx,
                "name": info["name"],
                "channels": channels,
                "default_sr": int(info["defaultSampleRate"]),
            })
        return found

    # ----------------------------
    # Stream control
    # ----------------------------
    def start_stream(self, input_device_index=None):
        """Start capturing from the given input device."""
        if self.stream:
            self._log("[AudioEngine] Stream already active — restarting...")
            self.stop_stream()

        self.input_device_index = input_device_index
        self.error = None

        self._log("[AudioEngine] Starting stream...")
        self._log(f"  Input Device  : {input_device_index}")
        self._log(f"  Sample Rate   : {self.rate} Hz")
        self._log(f"  Block Size    : {self.block_size}")

        with self._buffer_lock:
            self._buffer[:] = 0.0

        try:
            self.stream = self.pa.open(
                format=pyaudio.paInt16,
                channels=self.in_channels,
                rate=self.rate,
                input=True,
                frames_per_buffer=self.frames_per_buffer,
                input_device_index=input_device_index,
                stream_callback=self._callback
            )
            self.stream.start_stream()
            self.running = True
            self._log("[AudioEngine] Stream started successfully.")
        except Exception as e:
            self.stream = None
            self.error = str(e)
            self._log(f"[AudioEngine] Error starting stream: {e}", logging.ERROR)
            raise

    def stop_stream(self):
        """Stop audio stream and release resources."""
        if not self.stream:
            self._log("[AudioEngine] No active stream to stop.", logging.DEBUG)
            return
        self._log("[AudioEngine] Stopping stream...")
        try:
            self.stream.stop_stream()
            self.stream.close()
            self._log("[AudioEngine] Stream stopped.")
        except Exception as e:
            self._log(f"[AudioEngine] Error stopping stream: {e}", logging.WARNING)
        self.stream = None
        self.running = False
        self.recorder.stop()
        # reset level and pitch
        self.current_level = 0.0
        self.current_frequency = 0.0
        self.current_note = NO_PITCH.note

    def terminate(self):
        self.stop_stream()
        try:
            self.pa.terminate()
        except Exception as e:
            self._log(f"[AudioEngine] Error terminating PyAudio: {e}", logging.WARNING)

    # ----------------------------
    # PyAudio callback
    # ----------------------------
    def _callback(self, in_data, frame_count, time_info, status):
        audio_in = np.frombuffer(in_data, dtype=np.int16).astype(np.float32) / 32768.0
        self.push_samples(audio_in)
        return (None, pyaudio.paContinue)

    def push_samples(self, samples: np.ndarray):
        """Append captured samples to the ring buffer, keeping the newest block_size."""
        samples = np.asarray(samples, dtype=np.float32).ravel()
        if samples.size == 0:
            return
        self.current_level = min(100.0, float(np.sqrt(np.mean(samples ** 2))) * 100.0)
        with self._buffer_lock:
            if samples.size >= self.block_size:
                self._buffer[:] = samples[-self.block_size:]
            else:
                self._buffer = np.roll(self._buffer, -samples.size)
                self._buffer[-samples.size:] = samples
        self.recorder.append(samples)

    def latest_block(self) -> np.ndarray:
        with self._buffer_lock:
            return self._buffer.copy()

    # ----------------------------
    # Per-frame analysis
    # ----------------------------
    def analyze_frame(self) -> PitchResult:
        """Frame-loop entry point: analyze the newest block_size samples."""
        return self.process_block(self.latest_block())

    def process_block(self, samples) -> PitchResult:
        result = detect_pitch(samples, self.rate)
        self.current_frequency, self.current_note = result
        for listener in list(self.listeners):
            try:
                listener(result.frequency, result.note)
            except Exception as e:
                self._log(f"[AudioEngine] Listener error: {e}", logging.ERROR)
        return result

    # ----------------------------
    # Recording
    # ----------------------------
    def start_recording(self):
        self._log("[AudioEngine] Recording started.")
        self.recorder.start()

    def stop_recording(self):
        self.recorder.stop()
        self._log(f"[AudioEngine] Recording stopped ({self.recorder.duration:.2f} s).")

    # ----------------------------
    # Stream state
    # ----------------------------
    def is_stream_active(self):
        """Return True if the capture stream is open and active."""
        return self.stream is not None and self.stream.is_active()

    @property
    def running(self):
        return self._running

    @running.setter
    def running(self, value: bool):
        self._running = value
