"""Tests for scoring, levels, achievements and power-ups."""

import numpy as np
import pytest

from shapeplay.challenges import Challenge
from shapeplay.progression import ProgressionState, ProgressionTracker, time_bonus
from shapeplay.timers import Scheduler


@pytest.fixture
def sched():
    return Scheduler()


@pytest.fixture
def tracker(sched):
    return ProgressionTracker(scheduler=sched, rng=np.random.default_rng(0))


@pytest.fixture
def easy():
    return Challenge("e", "easy one", "area", 100, 5, "easy", shape_kind="triangle")


@pytest.fixture
def hard():
    return Challenge("h", "hard one", "area", 25, 2, "hard", shape_kind="circle")


class TestLevels:
    def test_xp_carries_over(self, tracker):
        tracker.state.current_xp = 95
        tracker.award_points(20)
        assert tracker.state.level == 2
        assert tracker.state.current_xp == 15

    def test_level_up_grants_power_up(self, tracker):
        before = sum(tracker.state.power_ups.values())
        tracker.award_points(100)
        assert sum(tracker.state.power_ups.values()) == before + 1

    def test_multiple_levels_at_once(self, tracker):
        tracker.award_points(350)
        # 100 for level 2, 200 for level 3
        assert tracker.state.level == 3
        assert tracker.state.current_xp == 50

    def test_rising_star(self, tracker):
        tracker.state = ProgressionState(level=4)
        tracker.award_points(400)
        assert "Rising Star" in tracker.state.achievements
        assert tracker.state.score == 450

    def test_level_progress(self):
        state = ProgressionState(level=2, current_xp=50)
        assert state.xp_to_next_level == 200
        assert state.level_progress == pytest.approx(0.25)


class TestChallengeScoring:
    @pytest.mark.parametrize("elapsed,bonus", [(0, 50), (29, 50), (30, 25), (59, 25), (60, 0), (300, 0)])
    def test_time_bonus(self, elapsed, bonus):
        assert time_bonus(elapsed) == bonus

    def test_first_success_breakdown(self, tracker, easy):
        result = tracker.on_challenge_success(easy, elapsed_time=20)
        assert result.base_points == 75
        assert result.time_bonus == 50
        assert result.streak_bonus == 0
        assert result.points == 125
        assert result.achievements == ("First Success",)
        assert result.achievement_points == 50
        assert result.total == tracker.state.score == 175
        assert result.leveled_up

    def test_streak_bonus_uses_prior_streak(self, tracker, easy):
        tracker.state.streak = 3
        result = tracker.on_challenge_success(easy, elapsed_time=100)
        assert result.streak_bonus == 30
        assert tracker.state.streak == 4

    def test_streak_master_once(self, tracker, easy):
        unlocked = []
        for _ in range(8):
            unlocked.extend(tracker.on_challenge_success(easy, elapsed_time=100).achievements)
        assert unlocked.count("Streak Master") == 1

    def test_failure_resets_streak(self, tracker, easy):
        for _ in range(4):
            tracker.on_challenge_success(easy, elapsed_time=100)
        tracker.on_challenge_failure()
        tracker.on_challenge_success(easy, elapsed_time=100)
        assert tracker.state.streak == 1
        assert "Streak Master" not in tracker.state.achievements

    def test_speed_demon(self, tracker, easy):
        result = tracker.on_challenge_success(easy, elapsed_time=5)
        assert result.achievements == ("First Success", "Speed Demon")
        assert result.achievement_points == 100

    def test_perfectionist(self, tracker, hard):
        for _ in range(5):
            tracker.on_challenge_success(hard, elapsed_time=100)
        assert tracker.state.perfect_solutions == 5
        assert "Perfectionist" in tracker.state.achievements

    def test_explorer(self, tracker, easy):
        for _ in range(10):
            tracker.on_challenge_success(easy, elapsed_time=100)
        assert "Explorer" in tracker.state.achievements

    def test_shape_specialist(self, tracker, easy):
        for _ in range(5):
            tracker.on_challenge_success(easy, elapsed_time=100)
        assert tracker.state.shape_successes == {"triangle": 5}
        assert "Triangle Expert" in tracker.state.achievements

    def test_display_queue_order(self, tracker, easy):
        tracker.on_challenge_success(easy, elapsed_time=5)
        assert tracker.drain_achievements() == ["First Success", "Speed Demon"]
        assert tracker.drain_achievements() == []


class TestPowerUps:
    def test_double_points(self, tracker):
        assert tracker.use_power_up("doublePoints")
        assert tracker.award_points(10) == 20
        assert tracker.state.score == 20

    def test_double_points_on_success(self, tracker, easy):
        tracker.use_power_up("doublePoints")
        result = tracker.on_challenge_success(easy, elapsed_time=100)
        assert result.multiplier == 2
        assert result.points == 150

    def test_zero_balance_is_noop(self, tracker):
        tracker.state.power_ups["hint"] = 0
        assert not tracker.use_power_up("hint")
        assert tracker.state.active_power_up is None
        assert tracker.state.power_ups["hint"] == 0

    def test_unknown_kind(self, tracker):
        with pytest.raises(ValueError):
            tracker.use_power_up("teleport")
        with pytest.raises(ValueError):
            tracker.grant_power_up("teleport")

    def test_expires(self, tracker, sched):
        tracker.use_power_up("precision")
        sched.advance(9)
        assert tracker.is_active("precision")
        sched.advance(1)
        assert tracker.state.active_power_up is None

    def test_last_activated_wins(self, sched):
        changes = []
        tracker = ProgressionTracker(
            scheduler=sched, on_power_up_change=lambda k, a: changes.append((k, a))
        )
        tracker.use_power_up("hint")
        sched.advance(5)
        tracker.use_power_up("precision")
        sched.advance(6)
        # the hint expiry at t=10 was cancelled
        assert tracker.is_active("precision")
        sched.advance(5)
        assert tracker.state.active_power_up is None
        assert changes == [
            ("hint", True), ("hint", False), ("precision", True), ("precision", False),
        ]

    def test_reactivation_extends(self, tracker, sched):
        tracker.grant_power_up("hint")
        tracker.use_power_up("hint")
        sched.advance(8)
        tracker.use_power_up("hint")
        sched.advance(8)
        assert tracker.is_active("hint")
        assert tracker.state.power_ups["hint"] == 0
