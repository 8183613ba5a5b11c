"""Tests for the ball flight model."""

import pytest

from pocketqb.config import FlightConfig
from pocketqb.simulation.core.vec2 import Vec2
from pocketqb.simulation.physics import (
    MAX_ARC_HEIGHT,
    MAX_FLIGHT_DURATION,
    MIN_ARC_HEIGHT,
    MIN_FLIGHT_DURATION,
    BallFlight,
    ThrowType,
    arc_at,
    arc_height,
    flight_duration,
    orientation_at_progress,
    position_at,
    spin_at,
    throw_type_for,
)


class TestTrajectory:
    """Position and height along the flight."""

    def test_position_endpoints(self):
        start, target = Vec2(0, 15), Vec2(10, 35)
        assert position_at(start, target, 0.0) == start
        assert position_at(start, target, 1.0) == target
        assert position_at(start, target, 0.5) == Vec2(5, 25)

    def test_arc_is_zero_at_ends_and_peaks_in_middle(self):
        assert arc_at(0.0, 4.0) == 0.0
        assert arc_at(1.0, 4.0) == 0.0
        assert arc_at(0.5, 4.0) == pytest.approx(4.0)
        assert arc_at(0.25, 4.0) == pytest.approx(arc_at(0.75, 4.0))
        assert arc_at(0.25, 4.0) < arc_at(0.5, 4.0)

    def test_arc_height_grows_with_distance_and_caps(self):
        assert arc_height(2.0) == MIN_ARC_HEIGHT
        assert arc_height(10.0) < arc_height(30.0)
        assert arc_height(80.0) == MAX_ARC_HEIGHT

    def test_progress_out_of_range_fails(self):
        with pytest.raises(AssertionError):
            arc_at(1.2, 3.0)
        with pytest.raises(AssertionError):
            position_at(Vec2(), Vec2(1, 1), -0.1)


class TestDuration:
    """Flight time scales with distance between a floor and a ceiling."""

    def test_floor_and_ceiling(self):
        assert flight_duration(1.0) == MIN_FLIGHT_DURATION
        assert flight_duration(60.0) == MAX_FLIGHT_DURATION

    def test_monotonic(self):
        durations = [flight_duration(d) for d in range(0, 50, 5)]
        assert durations == sorted(durations)

    def test_config_overrides(self):
        config = FlightConfig(min_duration=0.5, max_duration=1.5)
        flight = BallFlight.between(Vec2(0, 0), Vec2(0, 60), config)
        assert flight.duration == 1.5


class TestSpin:
    """Spin is cosmetic but must never run backwards."""

    def test_spin_monotonic(self):
        samples = [spin_at(t / 10, 20.0) for t in range(11)]
        assert samples == sorted(samples)
        assert samples[0] == 0.0

    @pytest.mark.parametrize("distance,expected", [
        (8.0, ThrowType.BULLET),
        (20.0, ThrowType.TOUCH),
        (35.0, ThrowType.LOB),
    ])
    def test_throw_type(self, distance, expected):
        assert throw_type_for(distance) == expected

    def test_orientation_tilts_nose_down(self):
        _, _, start_tilt = orientation_at_progress(Vec2(0, 10), 0.0)
        _, _, end_tilt = orientation_at_progress(Vec2(0, 10), 1.0)
        assert start_tilt > 0 > end_tilt


class TestBallFlight:
    """The flight object ties the pieces together."""

    def test_sample_is_deterministic(self):
        flight = BallFlight.between(Vec2(0, 15), Vec2(8, 40))
        assert flight.sample(0.37) == flight.sample(0.37)

    def test_progress_clamps_at_arrival(self):
        flight = BallFlight.between(Vec2(0, 15), Vec2(0, 35))
        assert flight.progress_at(0.0) == 0.0
        assert flight.progress_at(flight.duration / 2) == pytest.approx(0.5)
        assert flight.progress_at(flight.duration * 3) == 1.0

    def test_sample_at_arrival_is_target(self):
        flight = BallFlight.between(Vec2(0, 15), Vec2(-6, 27))
        sample = flight.sample(1.0)
        assert sample.position == Vec2(-6, 27)
        assert sample.height == 0.0
