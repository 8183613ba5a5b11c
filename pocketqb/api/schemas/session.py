"""Pydantic schemas for the play session API."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from pocketqb.game.session import PlayerRole


class Position2DSchema(BaseModel):
    """2D position on the field (yards)."""

    x: float = 0.0
    y: float = 0.0


class CreateSessionRequest(BaseModel):
    """Request to start a new game."""

    week: int = Field(default=1, ge=1, le=22)
    role: PlayerRole = PlayerRole.QUARTERBACK
    seed: Optional[int] = None
    user_receiver: int = Field(default=0, ge=0, le=4)


class ScoreSchema(BaseModel):
    home: int
    away: int


class DriveSchema(BaseModel):
    """Down, distance, field position, clock and score."""

    down: int
    yards_to_go: int
    yard_line: int
    quarter: int
    time_remaining: int
    score: ScoreSchema
    possession: str
    is_final: bool


class SessionResponse(BaseModel):
    """Summary of a session."""

    session_id: str
    week: int
    role: PlayerRole
    difficulty: float
    phase: str
    play_number: int
    drive: DriveSchema


class SelectPlayRequest(BaseModel):
    play_id: str


class ThrowRequest(BaseModel):
    """Throw at a receiver and/or a field point; both optional."""

    target_index: Optional[int] = Field(default=None, ge=0)
    aim: Optional[Position2DSchema] = None


class CatchRequest(BaseModel):
    """Catch attempt; ``at`` defaults to the current session time."""

    at: Optional[float] = Field(default=None, ge=0)


class InterceptRequest(BaseModel):
    defender_index: int = Field(ge=0, le=6)
    at: Optional[float] = Field(default=None, ge=0)


class TickRequest(BaseModel):
    dt: float = Field(gt=0, le=5.0)


class ActionResponse(BaseModel):
    """Result of an input, with the state right after it."""

    accepted: bool
    phase: str
    detail: Optional[dict[str, Any]] = None
    snapshot: dict[str, Any]


class TickResponse(BaseModel):
    timers_fired: int
    phase: str
    snapshot: dict[str, Any]


class PlaySchema(BaseModel):
    """A play available to the session."""

    id: str
    name: str
    short_name: str
    category: str
    risk: str
    unlock_week: int
    description: str
    receivers: int
    best_against: list[str]
