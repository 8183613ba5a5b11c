"""Coverage system.

Defender behaviour for the seven-man shell (2 CB, 2 S, 3 LB):

- Zone: drop from alignment to a scheme-specific zone centroid, then break
  toward the ball's target once it is thrown (after a reaction delay)
- Man: mirror the assigned receiver as he was ``reaction_delay`` seconds
  ago, plus a fixed outside / over-the-top cushion
- Blitz: one linebacker rushes the quarterback; everybody else plays man
  where they have a receiver and zone otherwise

Every policy is a pure function of play time. Receiver positions are
supplied through a ``receiver_at(index, time)`` callable, so evaluating
a defender twice at the same instant always gives the same answer.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Collection, Dict, Optional, Sequence, Tuple

from ..core.field import LEFT_SIDELINE, RIGHT_SIDELINE, assert_yard_line, cap_depth
from ..core.vec2 import Vec2

if TYPE_CHECKING:
    from pocketqb.config import CoverageConfig

logger = logging.getLogger(__name__)


# =============================================================================
# Coverage Types
# =============================================================================

class CoverageType(str, Enum):
    """Defensive call for one play."""
    COVER2 = "cover2"
    COVER3 = "cover3"
    MAN = "man"
    ZONE = "zone"
    BLITZ = "blitz"


class CoverageBehavior(str, Enum):
    """Policy a defender actually runs."""
    ZONE = "zone"
    MAN = "man"
    BLITZ = "blitz"


def behavior_for(coverage: CoverageType) -> CoverageBehavior:
    """cover2, cover3 and zone all play the zone policy."""
    if coverage == CoverageType.MAN:
        return CoverageBehavior.MAN
    if coverage == CoverageType.BLITZ:
        return CoverageBehavior.BLITZ
    return CoverageBehavior.ZONE


class DefenderRole(str, Enum):
    CB = "cb"
    S = "s"
    LB = "lb"


class Movement(str, Enum):
    """What a defender is visibly doing (for presentation)."""
    IDLE = "idle"
    PATROL = "patrol"
    MIRROR = "mirror"
    BREAK = "break"
    RUSH = "rush"


# =============================================================================
# Alignment
# =============================================================================

@dataclass(frozen=True)
class DefenderAlignment:
    """Pre-snap spot relative to the line of scrimmage (+y = downfield)."""
    index: int
    role: DefenderRole
    offset: Vec2
    covers_receiver: Optional[int] = None  # Man responsibility, if any

    def position(self, line_of_scrimmage: float) -> Vec2:
        return Vec2(self.offset.x, cap_depth(line_of_scrimmage + self.offset.y))


DEFENSIVE_SHELL: Tuple[DefenderAlignment, ...] = (
    DefenderAlignment(0, DefenderRole.CB, Vec2(-17.0, 7.0), covers_receiver=0),
    DefenderAlignment(1, DefenderRole.CB, Vec2(17.0, 7.0), covers_receiver=2),
    DefenderAlignment(2, DefenderRole.S, Vec2(-7.5, 15.0)),
    DefenderAlignment(3, DefenderRole.S, Vec2(7.5, 15.0)),
    DefenderAlignment(4, DefenderRole.LB, Vec2(-10.0, 5.0), covers_receiver=1),
    DefenderAlignment(5, DefenderRole.LB, Vec2(0.0, 4.0)),
    DefenderAlignment(6, DefenderRole.LB, Vec2(10.0, 5.0), covers_receiver=3),
)

LINEBACKERS: Tuple[int, ...] = tuple(a.index for a in DEFENSIVE_SHELL if a.role == DefenderRole.LB)


# Zone landmarks per scheme, one per defender (offsets from the LOS)
ZONE_CENTROIDS: Dict[CoverageType, Tuple[Vec2, ...]] = {
    # Corners sink to the flats, safeties split the deep halves
    CoverageType.COVER2: (
        Vec2(-14, 4), Vec2(14, 4),
        Vec2(-12, 18), Vec2(12, 18),
        Vec2(-6, 8), Vec2(0, 10), Vec2(6, 8),
    ),
    # Corners and free safety take deep thirds, strong safety rolls to the curl
    CoverageType.COVER3: (
        Vec2(-16, 14), Vec2(16, 14),
        Vec2(0, 18), Vec2(12, 6),
        Vec2(-12, 5), Vec2(0, 10), Vec2(6, 8),
    ),
    CoverageType.ZONE: (
        Vec2(-15, 10), Vec2(15, 10),
        Vec2(-8, 16), Vec2(8, 16),
        Vec2(-7, 7), Vec2(0, 8), Vec2(7, 7),
    ),
}


@dataclass(frozen=True)
class DefenderAssignment:
    """What one defender does this play."""
    behavior: CoverageBehavior
    zone_centroid: Vec2
    man_target: Optional[int] = None
    is_blitzer: bool = False


def zone_centroid(coverage: CoverageType, defender_index: int, line_of_scrimmage: float) -> Vec2:
    """Absolute zone landmark; man and blitz calls fall back to the generic zone."""
    scheme = coverage if coverage in ZONE_CENTROIDS else CoverageType.ZONE
    offset = ZONE_CENTROIDS[scheme][defender_index]
    return Vec2(offset.x, cap_depth(line_of_scrimmage + offset.y))


def choose_blitzer(rng: random.Random) -> int:
    """Pick the rushing linebacker."""
    return rng.choice(LINEBACKERS)


def assign_defenders(
    coverage: CoverageType,
    line_of_scrimmage: float,
    receivers: Collection[int],
    blitzer_index: Optional[int] = None,
) -> Tuple[DefenderAssignment, ...]:
    """Assignments for the whole shell.

    ``receivers`` are the receiver indexes the play sends out. Man
    responsibilities only apply to those; a defender without one plays zone.
    """
    assert_yard_line(line_of_scrimmage)
    behavior = behavior_for(coverage)
    if behavior == CoverageBehavior.BLITZ:
        assert blitzer_index in LINEBACKERS, f"blitzer must be a linebacker: {blitzer_index}"

    assignments = []
    for align in DEFENSIVE_SHELL:
        centroid = zone_centroid(coverage, align.index, line_of_scrimmage)
        has_man = align.covers_receiver is not None and align.covers_receiver in receivers

        if behavior == CoverageBehavior.BLITZ and align.index == blitzer_index:
            assignments.append(DefenderAssignment(CoverageBehavior.BLITZ, centroid, is_blitzer=True))
        elif behavior != CoverageBehavior.ZONE and has_man:
            assignments.append(
                DefenderAssignment(CoverageBehavior.MAN, centroid, man_target=align.covers_receiver)
            )
        else:
            assignments.append(DefenderAssignment(CoverageBehavior.ZONE, centroid))
    return tuple(assignments)


# =============================================================================
# Coverage selection
# =============================================================================

# Draw order for the cumulative pick; zone always comes last
_DRAW_ORDER = (
    CoverageType.BLITZ,
    CoverageType.MAN,
    CoverageType.COVER3,
    CoverageType.COVER2,
    CoverageType.ZONE,
)


def _coverage_defaults() -> "CoverageConfig":
    from pocketqb.config import CoverageConfig

    return CoverageConfig()


def coverage_weights(
    difficulty: float,
    config: Optional["CoverageConfig"] = None,
) -> Dict[CoverageType, float]:
    """Probability of each call at a difficulty.

    Each non-zone weight is ``base + slope * d`` with ``d`` clamped to
    ``[0, max_difficulty]``; ``zone`` gets the remainder.
    """
    config = config or _coverage_defaults()
    d = max(0.0, min(config.max_difficulty, difficulty))

    def linear(params: Tuple[float, float]) -> float:
        base, slope = params
        return max(0.0, base + slope * d)

    weights = {
        CoverageType.BLITZ: linear(config.blitz_weight),
        CoverageType.MAN: linear(config.man_weight),
        CoverageType.COVER3: linear(config.cover3_weight),
        CoverageType.COVER2: linear(config.cover2_weight),
    }
    weights[CoverageType.ZONE] = max(0.0, 1.0 - sum(weights.values()))
    return weights


def select_coverage(
    difficulty: float,
    rng: random.Random,
    config: Optional["CoverageConfig"] = None,
) -> CoverageType:
    """Weighted draw; the only randomness comes from ``rng``."""
    weights = coverage_weights(difficulty, config)
    roll = rng.random()
    cumulative = 0.0
    for coverage in _DRAW_ORDER:
        cumulative += weights[coverage]
        if roll < cumulative:
            return coverage
    return CoverageType.ZONE


# =============================================================================
# Policies
# =============================================================================

ReceiverLookup = Callable[[int, float], Vec2]


@dataclass(frozen=True)
class ThrowInfo:
    """What defenders react to once the ball is out."""
    time: float
    target: Vec2


@dataclass
class DefenderState:
    """A defender at one instant of the play."""
    index: int
    role: DefenderRole
    position: Vec2
    assignment: DefenderAssignment
    movement: Movement

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "role": self.role.value,
            "position": self.position.to_dict(),
            "behavior": self.assignment.behavior.value,
            "man_target": self.assignment.man_target,
            "is_blitzer": self.assignment.is_blitzer,
            "movement": self.movement.value,
        }


def _ease(t: float, duration: float) -> float:
    """Smoothstep from 0 to 1 over ``duration`` seconds."""
    u = max(0.0, min(1.0, t / duration))
    return u * u * (3 - 2 * u)


def _on_field(pos: Vec2) -> Vec2:
    return Vec2(max(LEFT_SIDELINE, min(RIGHT_SIDELINE, pos.x)), cap_depth(pos.y))


def zone_position(start: Vec2, centroid: Vec2, t: float, params: "CoverageConfig") -> Vec2:
    """Zone drop: ease from alignment onto the landmark."""
    return start.lerp(centroid, _ease(t, params.zone_drop_time))


def man_position(
    start: Vec2,
    receiver_index: int,
    t: float,
    receiver_at: ReceiverLookup,
    params: "CoverageConfig",
) -> Vec2:
    """Trail the receiver's lagged position with an outside, deep cushion."""
    assert params.man_reaction_delay > 0, "man coverage needs a positive reaction delay"
    lagged = receiver_at(receiver_index, max(0.0, t - params.man_reaction_delay))
    outside, over_top = params.man_offset
    side = -1.0 if lagged.x < 0 else 1.0
    mirror = Vec2(lagged.x + side * outside, lagged.y + over_top)
    return start.lerp(mirror, _ease(t, params.man_close_time))


def rush_position(start: Vec2, qb: Vec2, t: float, params: "CoverageConfig") -> Vec2:
    """Straight-line rush at the quarterback after the get-off delay."""
    run_time = max(0.0, t - params.rush_delay)
    return start.move_toward(qb, params.rush_speed * run_time)


def blitz_arrival_time(start: Vec2, qb: Vec2, params: "CoverageConfig") -> float:
    """Play time at which the rusher gets within ``sack_radius`` of the QB."""
    gap = max(0.0, start.distance_to(qb) - params.sack_radius)
    return params.rush_delay + gap / params.rush_speed


def defender_state(
    alignment: DefenderAlignment,
    assignment: DefenderAssignment,
    t: float,
    *,
    line_of_scrimmage: float,
    qb: Vec2,
    receiver_at: ReceiverLookup,
    params: "CoverageConfig",
    throw: Optional[ThrowInfo] = None,
) -> DefenderState:
    """Where a defender is ``t`` seconds after the snap.

    Pass ``t = 0`` before the snap to get the alignment.
    """
    assert t >= 0, f"negative play time: {t}"
    start = alignment.position(line_of_scrimmage)

    def coverage_at(time: float) -> Tuple[Vec2, Movement]:
        if time <= 0:
            return start, Movement.IDLE
        if assignment.behavior == CoverageBehavior.BLITZ:
            return rush_position(start, qb, time, params), Movement.RUSH
        if assignment.behavior == CoverageBehavior.MAN and assignment.man_target is not None:
            return man_position(start, assignment.man_target, time, receiver_at, params), Movement.MIRROR
        return zone_position(start, assignment.zone_centroid, time, params), Movement.PATROL

    position, movement = coverage_at(t)

    # Everybody but the rusher breaks on the ball
    if throw is not None and assignment.behavior != CoverageBehavior.BLITZ:
        break_start = throw.time + params.zone_reaction_delay
        if t > break_start:
            origin, _ = coverage_at(break_start)
            position = origin.move_toward(throw.target, params.break_speed * (t - break_start))
            movement = Movement.BREAK

    return DefenderState(
        index=alignment.index,
        role=alignment.role,
        position=_on_field(position),
        assignment=assignment,
        movement=movement,
    )


# =============================================================================
# Contest helpers
# =============================================================================

def nearest_defender(positions: Sequence[Vec2], point: Vec2) -> Tuple[Optional[int], float]:
    """Index of and distance to the defender closest to ``point``."""
    best_index: Optional[int] = None
    best_distance = float("inf")
    for i, pos in enumerate(positions):
        distance = pos.distance_to(point)
        if distance < best_distance:
            best_index, best_distance = i, distance
    return best_index, best_distance


def is_contested(distance: float, params: "CoverageConfig") -> bool:
    return distance <= params.contest_radius
