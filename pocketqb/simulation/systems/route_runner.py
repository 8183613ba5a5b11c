"""Route running system.

Receiver positions for a play at any instant. Route progress advances at
a fixed rate from the snap and freezes once the ball is resolved, so the
position of every receiver is a pure function of play time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..core.vec2 import Vec2
from ..plays.routes import ReceiverRoute, receiver_position


# Seconds for a receiver to run a full route
ROUTE_DURATION = 3.0


def route_progress(
    elapsed: float,
    route_duration: float = ROUTE_DURATION,
    frozen_at: Optional[float] = None,
) -> float:
    """Route progress ``elapsed`` seconds after the snap.

    Args:
        elapsed: Seconds since the snap (0 before the snap)
        route_duration: Seconds to run the whole route
        frozen_at: Play time at which routes stopped (ball resolved)

    Returns:
        Progress in ``[0, 1]``
    """
    assert elapsed >= 0, f"negative route time: {elapsed}"
    if frozen_at is not None:
        elapsed = min(elapsed, frozen_at)
    return min(1.0, elapsed / route_duration)


@dataclass
class ReceiverState:
    """A receiver at one instant of the play."""
    index: int
    route: ReceiverRoute
    position: Vec2
    progress: float
    is_targeted: bool = False
    is_user_controlled: bool = False

    @property
    def is_open(self) -> bool:
        """Inside the route's perfect window."""
        return self.route.in_perfect_window(self.progress)

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "route": self.route.route_type.value,
            "position": self.position.to_dict(),
            "progress": round(self.progress, 4),
            "is_open": self.is_open,
            "is_targeted": self.is_targeted,
            "is_user_controlled": self.is_user_controlled,
        }


def receiver_states(
    routes: tuple[ReceiverRoute, ...],
    progress: float,
    line_of_scrimmage: float,
    targeted: Optional[int] = None,
    user_receiver: Optional[int] = None,
) -> List[ReceiverState]:
    """Every receiver of a play at one route progress."""
    return [
        ReceiverState(
            index=r.receiver_index,
            route=r,
            position=receiver_position(r, progress, line_of_scrimmage),
            progress=progress,
            is_targeted=r.receiver_index == targeted,
            is_user_controlled=r.receiver_index == user_receiver,
        )
        for r in routes
    ]


def lead_point(route: ReceiverRoute, progress: float, lead: float, line_of_scrimmage: float) -> Vec2:
    """Where to aim so the ball meets the receiver ``lead`` further along his route."""
    return receiver_position(route, min(1.0, progress + lead), line_of_scrimmage)
