"""Route definitions.

A receiver route is an ordered list of waypoints relative to the line of
scrimmage, each stamped with the route progress (0-1) at which the
receiver reaches it. Receiver position at any progress is a piecewise
linear interpolation between the two surrounding waypoints.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.field import assert_yard_line, cap_depth
from ..core.vec2 import Vec2


class RouteType(str, Enum):
    """Standard route types."""
    # Quick routes (0-5 yards)
    HITCH = "hitch"
    SLANT = "slant"
    FLAT = "flat"

    # Intermediate (5-15 yards)
    CURL = "curl"
    OUT = "out"
    IN = "in"
    DRAG = "drag"

    # Deep (15+ yards)
    GO = "go"
    POST = "post"
    CORNER = "corner"

    # Special
    WHEEL = "wheel"


@dataclass(frozen=True)
class RouteWaypoint:
    """A waypoint in a route.

    Attributes:
        offset: Lateral position (0 = middle of the field) and depth past
            the line of scrimmage, in yards
        timing: Route progress at which the receiver arrives here
    """
    offset: Vec2
    timing: float

    @property
    def depth(self) -> float:
        return self.offset.y


@dataclass(frozen=True)
class ReceiverRoute:
    """One receiver's assignment inside a play."""
    receiver_index: int
    route_type: RouteType
    waypoints: tuple[RouteWaypoint, ...]
    perfect_window: tuple[float, float]  # Route progress when most open
    expected_yards: int

    def problems(self) -> list[str]:
        """Structural problems with this route (empty when valid)."""
        issues = []
        label = f"receiver {self.receiver_index} ({self.route_type.value})"
        if self.receiver_index < 0:
            issues.append(f"{label}: negative receiver index")
        if len(self.waypoints) < 2:
            issues.append(f"{label}: needs at least two waypoints")
            return issues

        timings = [w.timing for w in self.waypoints]
        if timings[0] != 0.0 or timings[-1] != 1.0:
            issues.append(f"{label}: waypoint timings must run from 0.0 to 1.0")
        if any(b <= a for a, b in zip(timings, timings[1:])):
            issues.append(f"{label}: waypoint timings must strictly increase")

        start, end = self.perfect_window
        if not 0.0 <= start < end <= 1.0:
            issues.append(f"{label}: perfect window {start}-{end} outside route")
        return issues

    def in_perfect_window(self, progress: float) -> bool:
        start, end = self.perfect_window
        return start <= progress <= end


def receiver_position(route: ReceiverRoute, progress: float, line_of_scrimmage: float) -> Vec2:
    """Field position of a receiver ``progress`` of the way through a route.

    Depth is capped at the back of the end zone; a pure function of its
    arguments.
    """
    assert 0.0 <= progress <= 1.0, f"route progress out of range: {progress}"
    assert_yard_line(line_of_scrimmage)

    waypoints = route.waypoints
    offset = waypoints[-1].offset
    for current, nxt in zip(waypoints, waypoints[1:]):
        if current.timing <= progress <= nxt.timing:
            segment = (progress - current.timing) / (nxt.timing - current.timing)
            offset = current.offset.lerp(nxt.offset, segment)
            break

    return Vec2(offset.x, cap_depth(line_of_scrimmage + offset.y))


def route(
    receiver_index: int,
    route_type: RouteType,
    points: list[tuple[float, float, float]],
    perfect_window: tuple[float, float],
    expected_yards: int,
) -> ReceiverRoute:
    """Build a route from ``(x, depth, timing)`` triples."""
    return ReceiverRoute(
        receiver_index=receiver_index,
        route_type=route_type,
        waypoints=tuple(RouteWaypoint(Vec2(x, y), t) for x, y, t in points),
        perfect_window=perfect_window,
        expected_yards=expected_yards,
    )
