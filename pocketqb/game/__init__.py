"""Game layer - drive ledger, difficulty, and the play session."""

from pocketqb.game.drive import (
    DriveState,
    PlayLog,
    PlayResult,
    Score,
    Side,
    apply_play,
    run_clock,
)
from pocketqb.game.difficulty import difficulty_for_week, pocket_time_for
from pocketqb.game.session import (
    PlayerRole,
    PlaySession,
    SessionDisposedError,
)
from pocketqb.game.autopilot import Autopilot

__all__ = [
    "DriveState",
    "PlayLog",
    "PlayResult",
    "Score",
    "Side",
    "apply_play",
    "run_clock",
    "difficulty_for_week",
    "pocket_time_for",
    "PlayerRole",
    "PlaySession",
    "SessionDisposedError",
    "Autopilot",
]
