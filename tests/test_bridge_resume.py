"""Tests for bridge.resume: the interaction latch."""

import threading

from bitbridge.bridge.resume import ResumeSignal


def test_wake_before_wait_is_not_lost() -> None:
    signal = ResumeSignal()
    signal.arm()
    signal.wake()
    assert signal.wait(timeout=0.01) is True


def test_arm_discards_stale_wake() -> None:
    signal = ResumeSignal()
    signal.wake()
    signal.arm()
    assert signal.wait(timeout=0.01) is False


def test_redundant_wakes_collapse() -> None:
    signal = ResumeSignal()
    signal.arm()
    signal.wake()
    signal.wake()
    assert signal.wait(timeout=0.01) is True
    signal.arm()
    assert signal.wait(timeout=0.01) is False
    assert signal.wakes == 2


def test_wake_releases_waiter_on_other_thread() -> None:
    signal = ResumeSignal()
    signal.arm()
    released = threading.Event()

    def _waiter():
        signal.wait()
        released.set()

    thread = threading.Thread(target=_waiter, daemon=True)
    thread.start()
    assert not released.wait(timeout=0.05)
    signal.wake()
    assert released.wait(timeout=1)


def test_close_stays_set_after_arm() -> None:
    signal = ResumeSignal()
    signal.close()
    signal.arm()
    assert signal.closed is True
    assert signal.is_set is True
    assert signal.wait(timeout=0.01) is True
