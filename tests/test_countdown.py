import pytest

from wordjumble.countdown import Countdown


def test_counts_down_and_expires_once():
    c = Countdown(3)
    c.start()
    assert [c.tick(), c.tick(), c.tick()] == [False, False, True]
    assert not c.running
    assert c.tick() is False
    assert c.remaining == 0


def test_cancel_freezes_remaining():
    c = Countdown(10)
    c.start()
    c.tick()
    c.cancel()
    c.tick()
    assert c.remaining == 9


def test_ticks_before_start_are_ignored():
    c = Countdown(5)
    assert c.tick() is False
    assert c.remaining == 5


def test_restart_resets():
    c = Countdown(2)
    c.start()
    c.tick()
    c.start()
    assert c.remaining == 2 and c.running


def test_rejects_non_positive_duration():
    with pytest.raises(ValueError):
        Countdown(0)
