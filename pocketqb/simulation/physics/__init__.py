"""Physics layer - ball flight."""

from .ball_flight import (
    MAX_ARC_HEIGHT,
    MAX_FLIGHT_DURATION,
    MIN_ARC_HEIGHT,
    MIN_FLIGHT_DURATION,
    BallFlight,
    BallSample,
    ThrowType,
    arc_at,
    arc_height,
    flight_duration,
    orientation_at_progress,
    position_at,
    spin_at,
    spin_rate,
    throw_type_for,
)

__all__ = [
    "MAX_ARC_HEIGHT",
    "MAX_FLIGHT_DURATION",
    "MIN_ARC_HEIGHT",
    "MIN_FLIGHT_DURATION",
    "BallFlight",
    "BallSample",
    "ThrowType",
    "arc_at",
    "arc_height",
    "flight_duration",
    "orientation_at_progress",
    "position_at",
    "spin_at",
    "spin_rate",
    "throw_type_for",
]
