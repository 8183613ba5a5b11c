"""Play definitions - routes and the play catalog."""

from .routes import (
    RouteType,
    RouteWaypoint,
    ReceiverRoute,
    receiver_position,
)
from .playbook import (
    PlayCategory,
    PlayDefinition,
    Playbook,
    PlaybookError,
    RiskLevel,
    UnknownPlayError,
    PLAY_DEFINITIONS,
    default_playbook,
)

__all__ = [
    "RouteType",
    "RouteWaypoint",
    "ReceiverRoute",
    "receiver_position",
    "PlayCategory",
    "PlayDefinition",
    "Playbook",
    "PlaybookError",
    "RiskLevel",
    "UnknownPlayError",
    "PLAY_DEFINITIONS",
    "default_playbook",
]
