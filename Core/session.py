# Core/session.py
import json
import logging
import os
import random
import string
import threading
import time
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_session_id() -> str:
    """Unique-enough id: session_<epoch ms>_<7 base-36 chars>."""
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(7))
    return f"session_{_now_ms()}_{suffix}"


@dataclass
class PitchData:
    frequency: float
    note: str
    time: int  # ms since recording started


@dataclass
class RecordingSession:
    session_id: str
    timestamp: str
    duration: int  # ms
    pitch_data: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "timestamp": self.timestamp,
            "duration": self.duration,
            "pitchData": [asdict(p) for p in self.pitch_data],
        }


class SessionTracker:
    """
    Collects detected pitches between start_recording() and stop_recording().
    Frames without a pitch are not stored.
    """

    def __init__(self, clock=_now_ms):
        self._clock = clock
        self._lock = threading.Lock()
        self.session_id = generate_session_id()
        self.is_recording = False
        self.start_time = 0
        self.pitch_history = []

    def start_recording(self):
        with self._lock:
            self.pitch_history = []
            self.session_id = generate_session_id()
            self.start_time = self._clock()
            self.is_recording = True

    def stop_recording(self) -> RecordingSession:
        with self._lock:
            self.is_recording = False
            duration = self._clock() - self.start_time
            return RecordingSession(
                session_id=self.session_id,
                timestamp=datetime.now(timezone.utc).isoformat(),
                duration=duration,
                pitch_data=list(self.pitch_history),
            )

    def on_pitch_detected(self, frequency: float, note: str):
        with self._lock:
            if not self.is_recording or frequency <= 0:
                return
            self.pitch_history.append(
                PitchData(frequency, note, self._clock() - self.start_time)
            )


class SessionLogger:
    """
    Appends finished sessions to a JSON-lines file.

    log_session() reports its outcome as (success, message) and never raises.
    """

    def __init__(self, path="sessions.jsonl", log_callback=None):
        self.path = path
        self.log_callback = log_callback

    def _log(self, msg: str, level=logging.INFO):
        if self.log_callback:
            try:
                self.log_callback(msg)
            except Exception:
                # a closed GUI log box must not fail the session write
                logger.exception("[SessionLogger] log callback failed.")
                logger.log(level, msg)
        else:
            logger.log(level, msg)

    @staticmethod
    def validate(data: dict) -> bool:
        return bool(data.get("sessionId")) and bool(data.get("timestamp")) \
            and isinstance(data.get("pitchData"), list)

    def log_session(self, session: RecordingSession):
        data = session.to_dict()
        if not self.validate(data):
            self._log("[SessionLogger] Invalid session data", logging.WARNING)
            return False, "Invalid session data"

        try:
            directory = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(directory, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(json.dumps(data) + "\n")
        except OSError as e:
            self._log(f"[SessionLogger] Error logging session: {e}", logging.ERROR)
            return False, "Failed to log session"

        self._log(
            f"[SessionLogger] Recording session logged: {data['sessionId']} "
            f"(duration={data['duration']} ms, points={len(data['pitchData'])})"
        )
        return True, "Session logged successfully"
