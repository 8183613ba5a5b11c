"""Pydantic schemas for API request/response validation."""

from pocketqb.api.schemas.session import (
    ActionResponse,
    CatchRequest,
    CreateSessionRequest,
    DriveSchema,
    InterceptRequest,
    PlaySchema,
    Position2DSchema,
    ScoreSchema,
    SelectPlayRequest,
    SessionResponse,
    ThrowRequest,
    TickRequest,
    TickResponse,
)

__all__ = [
    "ActionResponse",
    "CatchRequest",
    "CreateSessionRequest",
    "DriveSchema",
    "InterceptRequest",
    "PlaySchema",
    "Position2DSchema",
    "ScoreSchema",
    "SelectPlayRequest",
    "SessionResponse",
    "ThrowRequest",
    "TickRequest",
    "TickResponse",
]
