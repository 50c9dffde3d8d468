from timewise.services.error_handling_service import ErrorHandlingService
from timewise.services.qt_scheduler import QtHostScheduler


def test_call_later_fires_once(qtbot):
    sched = QtHostScheduler()
    fired = []
    handle = sched.call_later(10, lambda: fired.append(sched.now_ms()))
    assert handle.active
    qtbot.waitUntil(lambda: len(fired) == 1, timeout=1000)
    assert not handle.active
    assert fired[0] >= 0
    assert sched.pending_count() == 0


def test_cancel_prevents_callback(qtbot):
    sched = QtHostScheduler()
    fired = []
    handle = sched.call_later(20, lambda: fired.append(True))
    handle.cancel()
    handle.cancel()
    qtbot.wait(60)
    assert fired == []
    assert sched.pending_count() == 0


def test_frames_are_paced_by_interval(qtbot):
    sched = QtHostScheduler(frame_interval_ms=5)
    ticks = []

    def tick():
        ticks.append(sched.now_ms())
        if len(ticks) < 3:
            sched.call_before_paint(tick)

    sched.call_before_paint(tick)
    qtbot.waitUntil(lambda: len(ticks) == 3, timeout=1000)
    assert ticks == sorted(ticks)


def test_callback_errors_go_to_error_service(qtbot):
    errors = ErrorHandlingService()
    sched = QtHostScheduler(error_service=errors)

    def boom():
        raise ValueError("frame failed")

    sched.call_before_paint(boom)
    qtbot.waitUntil(lambda: len(errors.recent_errors()) == 1, timeout=1000)
    record = errors.recent_errors()[0]
    assert record.origin == "frame"
    assert record.exc_type is ValueError
