# Core/scheduler.py
import threading
from functools import partial

DEFAULT_INTERVAL_MS = 16   # ~60 frames per second


def _timer_after(delay_ms, fn):
    timer = threading.Timer(delay_ms / 1000.0, fn)
    timer.daemon = True
    timer.start()
    return timer


def _timer_cancel(timer):
    timer.cancel()


class FrameScheduler:
    """
    Calls `callback` once per tick at a bounded rate.

    The next tick is scheduled only after the current callback returns,
    so callbacks never overlap or queue up. `after(delay_ms, fn)` and
    `after_cancel(handle)` default to a threading.Timer; pass a Tk
    widget's `after` / `after_cancel` to run on the GUI thread.
    """

    def __init__(self, callback, interval_ms=DEFAULT_INTERVAL_MS,
                 after=None, after_cancel=None):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.callback = callback
        self.interval_ms = int(interval_ms)
        self._after = after or _timer_after
        self._after_cancel = after_cancel or _timer_cancel
        self._handle = None
        self._running = False
        # bumped on every start/stop; a tick only re-arms its own chain
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def running(self):
        return self._running

    def _arm(self, generation):
        self._handle = self._after(self.interval_ms, partial(self._tick, generation))

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            self._arm(self._generation)

    def stop(self):
        with self._lock:
            self._running = False
            self._generation += 1
            handle, self._handle = self._handle, None
        if handle is not None:
            self._after_cancel(handle)

    def _tick(self, generation):
        if not self._running or generation != self._generation:
            return
        try:
            self.callback()
        finally:
            with self._lock:
                if self._running and generation == self._generation:
                    self._arm(generation)
