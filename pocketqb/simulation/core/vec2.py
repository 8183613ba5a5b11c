"""2D vector used for every field position.

Units are yards. ``x`` is lateral (0 = middle of the field), ``y`` is the
absolute field position of the possessing team: 0 = own goal line,
100 = opponent goal line.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vec2:
    """Immutable 2D vector."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def length(self) -> float:
        """Magnitude of vector."""
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vec2:
        """Unit vector in same direction (zero stays zero)."""
        length = self.length()
        if length < 0.0001:
            return Vec2(0, 0)
        return Vec2(self.x / length, self.y / length)

    def distance_to(self, other: Vec2) -> float:
        """Euclidean distance to another point."""
        return (other - self).length()

    def lerp(self, other: Vec2, t: float) -> Vec2:
        """Linear interpolation to another vector."""
        return Vec2(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
        )

    def move_toward(self, target: Vec2, max_distance: float) -> Vec2:
        """Step toward ``target`` by at most ``max_distance`` yards."""
        delta = target - self
        dist = delta.length()
        if dist <= max_distance or dist < 0.0001:
            return target
        return self + delta * (max_distance / dist)

    def to_dict(self) -> dict[str, float]:
        return {"x": round(self.x, 3), "y": round(self.y, 3)}

    def __repr__(self) -> str:
        return f"Vec2({self.x:.2f}, {self.y:.2f})"
