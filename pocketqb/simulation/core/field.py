"""Field geometry and coordinate system.

All measurements in yards. Positions are in the possessing team's frame:

    y = -10   back of own end zone
    y =   0   own goal line
    y = 100   opponent goal line
    y = 110   back of opponent end zone

``x`` runs sideline to sideline with 0 at the middle of the field.
"""

from __future__ import annotations

from enum import Enum

from .vec2 import Vec2


# =============================================================================
# Field Dimensions (yards)
# =============================================================================

FIELD_LENGTH = 100.0        # Goal line to goal line
FIELD_WIDTH = 53.333        # 53 1/3 yards
ENDZONE_DEPTH = 10.0

LEFT_SIDELINE = -FIELD_WIDTH / 2    # -26.667
RIGHT_SIDELINE = FIELD_WIDTH / 2    # +26.667

OWN_GOAL_LINE = 0.0
OPP_GOAL_LINE = FIELD_LENGTH
OWN_END_LINE = OWN_GOAL_LINE - ENDZONE_DEPTH
OPP_END_LINE = OPP_GOAL_LINE + ENDZONE_DEPTH

MIDFIELD = 50.0
RED_ZONE = 80.0

# Quarterback sets up this far behind the line of scrimmage
QB_DEPTH = 5.0


class FieldZone(str, Enum):
    """Vertical zones of the field, for HUD and commentary collaborators."""
    OWN_REDZONE = "own_redzone"      # Own 0-20
    OWN_TERRITORY = "own_territory"  # Own 21-44
    MIDFIELD = "midfield"            # 45-55
    OPP_TERRITORY = "opp_territory"  # Opp 44-21
    OPP_REDZONE = "opp_redzone"      # Opp 20-0

    @classmethod
    def for_yard_line(cls, yard_line: float) -> FieldZone:
        assert_yard_line(yard_line)
        if yard_line <= 20:
            return cls.OWN_REDZONE
        if yard_line < 45:
            return cls.OWN_TERRITORY
        if yard_line <= 55:
            return cls.MIDFIELD
        if yard_line < RED_ZONE:
            return cls.OPP_TERRITORY
        return cls.OPP_REDZONE


# =============================================================================
# Range checks
# =============================================================================
# These values are fully controlled by the simulation; anything outside the
# field is a bug in the engine, never a game condition.


def assert_yard_line(yard_line: float) -> None:
    """Fail loudly if a line of scrimmage is off the field of play."""
    assert OWN_GOAL_LINE <= yard_line <= OPP_GOAL_LINE, f"yard line out of range: {yard_line}"


def is_on_field(pos: Vec2) -> bool:
    """True if a point is on the playing surface, end zones included."""
    return OWN_END_LINE <= pos.y <= OPP_END_LINE and LEFT_SIDELINE <= pos.x <= RIGHT_SIDELINE


def assert_on_field(pos: Vec2) -> None:
    """Fail loudly if a position is outside the playing surface."""
    assert OWN_END_LINE <= pos.y <= OPP_END_LINE, f"field position out of range: {pos}"
    assert LEFT_SIDELINE <= pos.x <= RIGHT_SIDELINE, f"lateral position out of range: {pos}"


def cap_depth(y: float) -> float:
    """Keep a route depth inside the end lines."""
    return max(OWN_END_LINE, min(OPP_END_LINE, y))


def qb_position(line_of_scrimmage: float) -> Vec2:
    """Where the quarterback sets up for a given line of scrimmage."""
    assert_yard_line(line_of_scrimmage)
    return Vec2(0.0, line_of_scrimmage - QB_DEPTH)


def describe_yard_line(yard_line: float) -> str:
    """Broadcast-style yard line ("own 25", "opp 10", "50")."""
    assert_yard_line(yard_line)
    yl = round(yard_line)
    if yl == 50:
        return "50"
    if yl < 50:
        return f"own {yl}"
    return f"opp {100 - yl}"
