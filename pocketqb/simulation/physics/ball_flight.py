"""Ball flight model.

Every quantity is a pure function of ``(start, target, t)`` where ``t`` is
normalized flight progress (0.0 = release, 1.0 = arrival):

- Planar position is a straight lerp from release point to target
- Height follows a parabola peaking at ``t = 0.5``; the peak grows with
  throw distance up to a cap
- Flight duration grows with distance between a floor (short throws stay
  catchable) and a ceiling (deep throws fit inside the play clock)
- Spin is cosmetic and only has to increase monotonically

Nothing here keeps state, so re-rendering a frame at the same ``t`` always
yields the same sample.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from ..core.vec2 import Vec2

if TYPE_CHECKING:
    from pocketqb.config import FlightConfig


# =============================================================================
# SCALING CONSTANTS
# =============================================================================

MIN_FLIGHT_DURATION = 0.3   # seconds
MAX_FLIGHT_DURATION = 0.9
MIN_ARC_HEIGHT = 1.5        # yards above release height
MAX_ARC_HEIGHT = 6.0
SHORT_THROW = 5.0           # yards; at or below this the arc is flattest
LONG_THROW = 40.0           # yards; at or above this the arc is highest


class ThrowType(str, Enum):
    """Delivery style, derived from distance."""
    BULLET = "bullet"
    TOUCH = "touch"
    LOB = "lob"


# =============================================================================
# SPIN RATES BY THROW TYPE (RPM)
# =============================================================================
# Tighter spirals for bullet passes
SPIN_RATES: dict[ThrowType, Tuple[float, float]] = {
    ThrowType.BULLET: (550.0, 650.0),
    ThrowType.TOUCH: (450.0, 550.0),
    ThrowType.LOB: (350.0, 450.0),
}


def _assert_progress(t: float) -> None:
    assert 0.0 <= t <= 1.0, f"flight progress out of range: {t}"


def _distance_ratio(
    distance: float,
    short_distance: float = SHORT_THROW,
    long_distance: float = LONG_THROW,
) -> float:
    """0.0 for short throws, 1.0 for deep ones, linear in between."""
    assert distance >= 0, f"negative throw distance: {distance}"
    ratio = (distance - short_distance) / (long_distance - short_distance)
    return max(0.0, min(1.0, ratio))


def position_at(start: Vec2, target: Vec2, t: float) -> Vec2:
    """Planar ball position at flight progress ``t``."""
    _assert_progress(t)
    return start.lerp(target, t)


def arc_height(
    distance: float,
    min_arc: float = MIN_ARC_HEIGHT,
    max_arc: float = MAX_ARC_HEIGHT,
    short_distance: float = SHORT_THROW,
    long_distance: float = LONG_THROW,
) -> float:
    """Peak height of the arc for a throw of ``distance`` yards.

    Args:
        distance: Release-to-target distance in yards
        min_arc: Peak height of a short bullet
        max_arc: Cap for deep throws

    Returns:
        Peak height in yards, within ``[min_arc, max_arc]``
    """
    ratio = _distance_ratio(distance, short_distance, long_distance)
    return min(max_arc, min_arc + ratio * (max_arc - min_arc))


def arc_at(t: float, max_height: float) -> float:
    """Height at progress ``t``: ``4·t·(1−t)·max_height``.

    Zero at release and arrival, single maximum at ``t = 0.5``.
    """
    _assert_progress(t)
    return 4.0 * t * (1.0 - t) * max_height


def flight_duration(
    distance: float,
    min_duration: float = MIN_FLIGHT_DURATION,
    max_duration: float = MAX_FLIGHT_DURATION,
    short_distance: float = SHORT_THROW,
    long_distance: float = LONG_THROW,
) -> float:
    """Seconds the ball spends in the air for a throw of ``distance`` yards."""
    ratio = _distance_ratio(distance, short_distance, long_distance)
    return min_duration + ratio * (max_duration - min_duration)


def throw_type_for(distance: float) -> ThrowType:
    """Bullets underneath, touch passes intermediate, lobs deep."""
    if distance < 15:
        return ThrowType.BULLET
    if distance < 30:
        return ThrowType.TOUCH
    return ThrowType.LOB


def spin_rate(throw_type: ThrowType) -> float:
    """Spin rate in RPM (middle of the throw type's range)."""
    spin_min, spin_max = SPIN_RATES[throw_type]
    return (spin_min + spin_max) / 2


def spin_at(t: float, distance: float, duration: Optional[float] = None) -> float:
    """Accumulated spiral rotation in degrees at progress ``t``.

    Monotonically non-decreasing in ``t``; cosmetic only.
    """
    _assert_progress(t)
    if duration is None:
        duration = flight_duration(distance)
    rpm = spin_rate(throw_type_for(distance))
    return rpm / 60.0 * 360.0 * duration * t


def orientation_at_progress(
    direction: Vec2,
    progress: float,
) -> Tuple[float, float, float]:
    """Get ball orientation at flight progress.

    Ball axis rotates to follow trajectory:
    - Nose-up at start (release)
    - Level at apex
    - Nose-down at end (catch)

    Args:
        direction: Throw direction (normalized here)
        progress: Flight progress (0.0 = release, 1.0 = arrival)

    Returns:
        (x, y, z) orientation at current progress
    """
    _assert_progress(progress)
    unit = direction.normalized()
    # Z tilt interpolates: +0.3 at start → -0.3 at end
    z_tilt = 0.3 * (1 - 2 * progress)
    return (unit.x, unit.y, z_tilt)


@dataclass(frozen=True)
class BallSample:
    """Ball state at one instant of flight."""
    position: Vec2
    height: float
    spin: float


@dataclass(frozen=True)
class BallFlight:
    """A thrown ball: release point, target and the derived flight shape."""
    start: Vec2
    target: Vec2
    duration: float
    max_height: float

    @classmethod
    def between(
        cls,
        start: Vec2,
        target: Vec2,
        config: Optional["FlightConfig"] = None,
    ) -> BallFlight:
        distance = start.distance_to(target)
        if config is None:
            return cls(start, target, flight_duration(distance), arc_height(distance))
        return cls(
            start=start,
            target=target,
            duration=flight_duration(
                distance,
                config.min_duration,
                config.max_duration,
                config.short_distance,
                config.long_distance,
            ),
            max_height=arc_height(
                distance,
                config.min_arc,
                config.max_arc,
                config.short_distance,
                config.long_distance,
            ),
        )

    @property
    def distance(self) -> float:
        return self.start.distance_to(self.target)

    @property
    def throw_type(self) -> ThrowType:
        return throw_type_for(self.distance)

    def progress_at(self, elapsed: float) -> float:
        """Flight progress after ``elapsed`` seconds since release (clamped)."""
        assert elapsed >= 0, f"negative flight time: {elapsed}"
        return min(1.0, elapsed / self.duration)

    def sample(self, t: float) -> BallSample:
        return BallSample(
            position=position_at(self.start, self.target, t),
            height=arc_at(t, self.max_height),
            spin=spin_at(t, self.distance, self.duration),
        )
