"""Tests for the virtual-clock scheduler and challenge timer."""

import pytest

from shapeplay.timers import ChallengeTimer, Scheduler


@pytest.fixture
def sched():
    return Scheduler()


class TestScheduler:
    def test_fires_in_due_order(self, sched):
        fired = []
        sched.call_later(3, lambda: fired.append("c"))
        sched.call_later(1, lambda: fired.append("a"))
        sched.call_later(2, lambda: fired.append("b"))
        sched.advance(5)
        assert fired == ["a", "b", "c"]
        assert sched.now == 5

    def test_not_due_yet(self, sched):
        fired = []
        sched.call_later(10, lambda: fired.append(1))
        sched.advance(9.5)
        assert fired == []
        sched.advance(0.5)
        assert fired == [1]

    def test_cancel(self, sched):
        fired = []
        task = sched.call_later(1, lambda: fired.append(1))
        task.cancel()
        task.cancel()
        sched.advance(2)
        assert fired == [] and not task.active
        assert sched.pending() == 0

    def test_repeating(self, sched):
        fired = []
        sched.call_every(1, lambda: fired.append(sched.now))
        sched.advance(3.5)
        assert fired == [1.0, 2.0, 3.0]
        assert sched.pending() == 1

    def test_callback_can_cancel_other_task(self, sched):
        fired = []
        later = sched.call_later(2, lambda: fired.append("later"))
        sched.call_later(1, later.cancel)
        sched.advance(3)
        assert fired == []

    def test_invalid_arguments(self, sched):
        with pytest.raises(ValueError):
            sched.advance(-1)
        with pytest.raises(ValueError):
            sched.call_every(0, lambda: None)

    def test_cancel_all(self, sched):
        sched.call_later(1, lambda: None)
        sched.call_every(1, lambda: None)
        sched.cancel_all()
        assert sched.pending() == 0


class TestChallengeTimer:
    def test_counts_whole_seconds(self, sched):
        ticks = []
        timer = ChallengeTimer(sched, on_tick=ticks.append)
        timer.start()
        sched.advance(2.5)
        assert timer.elapsed == 2
        assert ticks == [1, 2]

    def test_pause_and_resume(self, sched):
        timer = ChallengeTimer(sched)
        timer.start()
        sched.advance(3)
        timer.pause()
        assert timer.paused and not timer.running
        sched.advance(10)
        assert timer.elapsed == 3
        timer.resume()
        sched.advance(2)
        assert timer.elapsed == 5

    def test_resume_without_start_is_noop(self, sched):
        timer = ChallengeTimer(sched)
        timer.resume()
        sched.advance(5)
        assert timer.elapsed == 0 and not timer.running

    def test_stop_keeps_elapsed(self, sched):
        timer = ChallengeTimer(sched)
        timer.start()
        sched.advance(4)
        timer.stop()
        sched.advance(4)
        assert timer.elapsed == 4 and not timer.paused
        timer.reset()
        assert timer.elapsed == 0

    def test_double_start_single_task(self, sched):
        timer = ChallengeTimer(sched)
        timer.start()
        timer.start()
        sched.advance(3)
        assert timer.elapsed == 3

    @pytest.mark.parametrize("elapsed,text", [(0, "0:00"), (9, "0:09"), (75, "1:15"), (600, "10:00")])
    def test_format(self, sched, elapsed, text):
        timer = ChallengeTimer(sched)
        timer.elapsed = elapsed
        assert timer.format() == text
