"""Tests for pass resolution and route running."""

import random

import pytest

from pocketqb.simulation.plays.routes import RouteType, route
from pocketqb.simulation.systems.passing import (
    PlayOutcome,
    coverage_factor,
    is_big_play,
    resolve_pass,
)
from pocketqb.simulation.systems.route_runner import (
    lead_point,
    receiver_states,
    route_progress,
)
from pocketqb.simulation.systems.timing import CatchTiming, ThrowTiming


class ScriptedRandom(random.Random):
    """Random source that replays fixed rolls."""

    def __init__(self, rolls):
        super().__init__(0)
        self._rolls = list(rolls)

    def random(self):
        return self._rolls.pop(0)


class TestResolvePass:
    """Interception roll first, then the drop roll, then the gain."""

    def test_clean_catch(self):
        result = resolve_pass(
            ThrowTiming.PERFECT, CatchTiming.PERFECT, 10.0, 10.0, 1.0, ScriptedRandom([0.5, 0.5])
        )
        assert result.outcome == PlayOutcome.COMPLETE
        assert result.yards == round((10 + 6) * 1.3)
        assert result.spiral_quality == 1.0

    def test_missed_timing_is_incomplete_without_rolling(self):
        result = resolve_pass(
            ThrowTiming.PERFECT, CatchTiming.MISS, 10.0, 1.0, 2.0, ScriptedRandom([])
        )
        assert result.outcome == PlayOutcome.INCOMPLETE
        assert result.yards == 0

    def test_tight_coverage_interception(self):
        # 0.01 base * 1.5 tight coverage
        result = resolve_pass(
            ThrowTiming.PERFECT, CatchTiming.GOOD, 10.0, 2.0, 1.0, ScriptedRandom([0.012])
        )
        assert result.outcome == PlayOutcome.INTERCEPTION

    def test_same_roll_is_safe_in_open_field(self):
        result = resolve_pass(
            ThrowTiming.PERFECT, CatchTiming.GOOD, 10.0, 10.0, 1.0, ScriptedRandom([0.012, 0.9])
        )
        assert result.outcome == PlayOutcome.COMPLETE

    def test_late_catch_drops_often(self):
        result = resolve_pass(
            ThrowTiming.LATE, CatchTiming.LATE, 10.0, 10.0, 1.0, ScriptedRandom([0.9, 0.3])
        )
        assert result.outcome == PlayOutcome.INCOMPLETE

    def test_gain_never_negative(self):
        result = resolve_pass(
            ThrowTiming.VERY_LATE, CatchTiming.GOOD, 2.0, 10.0, 0.1, ScriptedRandom([0.99, 0.99])
        )
        assert result.outcome == PlayOutcome.COMPLETE
        assert result.yards == 0

    def test_zero_difficulty_never_turns_over(self):
        rng = random.Random(5)
        for _ in range(200):
            result = resolve_pass(ThrowTiming.VERY_LATE, CatchTiming.LATE, 8.0, 1.0, 0.0, rng)
            assert result.outcome == PlayOutcome.COMPLETE

    def test_coverage_factor(self):
        assert coverage_factor(2.0) == 1.5
        assert coverage_factor(4.0) == 1.2
        assert coverage_factor(10.0) == 1.0

    def test_big_play(self):
        assert is_big_play(PlayOutcome.TOUCHDOWN, 3)
        assert is_big_play(PlayOutcome.COMPLETE, 25)
        assert not is_big_play(PlayOutcome.COMPLETE, 24)

    def test_completion_outcomes(self):
        assert PlayOutcome.FIRST_DOWN.is_completion
        assert not PlayOutcome.INTERCEPTION.is_completion


class TestRouteRunner:
    """Route progress and receiver snapshots."""

    @pytest.fixture
    def routes(self):
        return (
            route(0, RouteType.GO, [(-10, 0, 0), (-10, 30, 1)], (0.5, 0.7), 20),
            route(1, RouteType.FLAT, [(0, 0, 0), (10, 3, 1)], (0.2, 0.4), 4),
        )

    def test_progress_rate(self):
        assert route_progress(0.0) == 0.0
        assert route_progress(1.5, 3.0) == 0.5
        assert route_progress(10.0, 3.0) == 1.0

    def test_progress_freezes(self):
        assert route_progress(2.7, 3.0, frozen_at=1.2) == pytest.approx(0.4)

    def test_negative_time_fails(self):
        with pytest.raises(AssertionError):
            route_progress(-0.1)

    def test_receiver_states(self, routes):
        states = receiver_states(routes, 0.6, 30, targeted=0, user_receiver=1)

        assert [s.index for s in states] == [0, 1]
        assert states[0].position.y == pytest.approx(48)
        assert states[0].is_open
        assert not states[1].is_open
        assert states[0].is_targeted and not states[1].is_targeted
        assert states[1].is_user_controlled

    def test_lead_point_is_further_along(self, routes):
        aim = lead_point(routes[0], 0.5, 0.2, 30)
        assert aim.y == pytest.approx(30 + 30 * 0.7)

    def test_lead_point_clamps_at_route_end(self, routes):
        assert lead_point(routes[0], 0.95, 0.2, 30).y == pytest.approx(60)
