"""Core layer - foundational types and utilities."""

from .vec2 import Vec2
from .field import (
    FIELD_LENGTH,
    FIELD_WIDTH,
    ENDZONE_DEPTH,
    LEFT_SIDELINE,
    RIGHT_SIDELINE,
    OWN_GOAL_LINE,
    OPP_GOAL_LINE,
    FieldZone,
    assert_on_field,
    is_on_field,
    assert_yard_line,
    qb_position,
)
from .clock import Scheduler, SchedulerClosed, TimerHandle
from .events import Event, EventType, EventBus
from .phases import (
    PlayPhase,
    PhaseStateMachine,
    PhaseTransition,
    InvalidPhaseTransition,
    VALID_TRANSITIONS,
)

__all__ = [
    "Vec2",
    "FIELD_LENGTH",
    "FIELD_WIDTH",
    "ENDZONE_DEPTH",
    "LEFT_SIDELINE",
    "RIGHT_SIDELINE",
    "OWN_GOAL_LINE",
    "OPP_GOAL_LINE",
    "FieldZone",
    "assert_on_field",
    "is_on_field",
    "assert_yard_line",
    "qb_position",
    "Scheduler",
    "SchedulerClosed",
    "TimerHandle",
    "Event",
    "EventType",
    "EventBus",
    "PlayPhase",
    "PhaseStateMachine",
    "PhaseTransition",
    "InvalidPhaseTransition",
    "VALID_TRANSITIONS",
]
