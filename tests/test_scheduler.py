import threading

import pytest

from Core.scheduler import FrameScheduler


class FakeAfter:
    """Stands in for Tk's after/after_cancel pair."""

    def __init__(self):
        self.pending = []
        self.cancelled = []
        self._next = 0

    def after(self, delay_ms, fn):
        self._next += 1
        self.pending.append((self._next, delay_ms, fn))
        return self._next

    def after_cancel(self, handle):
        self.cancelled.append(handle)
        self.pending = [p for p in self.pending if p[0] != handle]

    def fire(self):
        _, _, fn = self.pending.pop(0)
        fn()


def make_scheduler(callback, interval_ms=20):
    fake = FakeAfter()
    return FrameScheduler(callback, interval_ms, after=fake.after,
                          after_cancel=fake.after_cancel), fake


def test_ticks_reschedule_after_callback():
    calls = []
    scheduler, fake = make_scheduler(lambda: calls.append(1))
    scheduler.start()
    assert scheduler.running
    assert [p[1] for p in fake.pending] == [20]

    fake.fire()
    fake.fire()
    assert len(calls) == 2
    assert len(fake.pending) == 1


def test_start_twice_schedules_once():
    scheduler, fake = make_scheduler(lambda: None)
    scheduler.start()
    scheduler.start()
    assert len(fake.pending) == 1


def test_stop_cancels_pending_tick():
    calls = []
    scheduler, fake = make_scheduler(lambda: calls.append(1))
    scheduler.start()
    handle = fake.pending[0][0]
    scheduler.stop()

    assert not scheduler.running
    assert fake.cancelled == [handle]
    assert fake.pending == []


def test_stale_tick_after_stop_does_nothing():
    calls = []
    scheduler, fake = make_scheduler(lambda: calls.append(1))
    scheduler.start()
    _, _, stale = fake.pending[0]
    scheduler.stop()
    stale()
    assert calls == []
    assert fake.pending == []


def test_stop_from_inside_callback():
    scheduler, fake = make_scheduler(lambda: scheduler.stop())
    scheduler.start()
    fake.fire()
    assert fake.pending == []


def test_callback_error_propagates_but_loop_continues():
    def boom():
        raise RuntimeError("frame failed")

    scheduler, fake = make_scheduler(boom)
    scheduler.start()
    with pytest.raises(RuntimeError):
        fake.fire()
    assert len(fake.pending) == 1


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        FrameScheduler(lambda: None, 0)


def test_default_timer_runs_until_stopped():
    ticked = threading.Event()
    scheduler = FrameScheduler(ticked.set, interval_ms=1)
    scheduler.start()
    try:
        assert ticked.wait(timeout=2.0)
    finally:
        scheduler.stop()
    assert not scheduler.running


def test_restart_inside_callback_keeps_single_chain():
    calls = []

    def restart():
        calls.append(1)
        if len(calls) == 1:
            scheduler.stop()
            scheduler.start()

    scheduler, fake = make_scheduler(restart)
    scheduler.start()
    fake.fire()
    assert scheduler.running
    assert len(fake.pending) == 1

    # the remaining handle is the live one, so stop() cancels everything
    scheduler.stop()
    assert fake.pending == []
