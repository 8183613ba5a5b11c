"""REST API router for play sessions."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from pocketqb.api.schemas.session import (
    ActionResponse,
    CatchRequest,
    CreateSessionRequest,
    InterceptRequest,
    PlaySchema,
    SelectPlayRequest,
    SessionResponse,
    ThrowRequest,
    TickRequest,
    TickResponse,
)
from pocketqb.api.services.session_manager import ManagedSession, get_session_manager
from pocketqb.game.session import PlaySession, SessionDisposedError
from pocketqb.simulation.core.events import EventType
from pocketqb.simulation.core.vec2 import Vec2
from pocketqb.simulation.plays.playbook import UnknownPlayError

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _session_to_response(managed: ManagedSession) -> SessionResponse:
    session = managed.session
    return SessionResponse(
        session_id=str(managed.session_id),
        week=session.week,
        role=session.role,
        difficulty=session.difficulty,
        phase=session.phase.value,
        play_number=session.play_number,
        drive=session.drive.to_dict(),
    )


async def _get_managed(session_id: str) -> ManagedSession:
    try:
        uuid = UUID(session_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid session ID format",
        )

    managed = await get_session_manager().get_session(uuid)
    if managed is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return managed


def _rejected(session: PlaySession) -> HTTPException:
    """409 carrying the reason of the latest rejected input."""
    rejected = session.event_bus.get_events_by_type(EventType.INVALID_TRANSITION)
    reason = rejected[-1].description if rejected else f"not allowed during {session.phase.value}"
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=reason)


def _gone() -> HTTPException:
    return HTTPException(status_code=status.HTTP_410_GONE, detail="Session has been disposed")


def _action_response(session: PlaySession, detail: Optional[dict] = None) -> ActionResponse:
    return ActionResponse(
        accepted=True,
        phase=session.phase.value,
        detail=detail,
        snapshot=session.snapshot(),
    )


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(request: Optional[CreateSessionRequest] = None) -> SessionResponse:
    """Start a new game."""
    request = request or CreateSessionRequest()
    managed = await get_session_manager().create_session(
        week=request.week,
        role=request.role,
        seed=request.seed,
        user_receiver=request.user_receiver,
    )
    return _session_to_response(managed)


@router.get("", response_model=list[str])
async def list_sessions() -> list[str]:
    """List all active session IDs."""
    sessions = await get_session_manager().list_sessions()
    return [str(s) for s in sessions]


@router.get("/{session_id}", response_model=ActionResponse)
async def get_session(session_id: str) -> ActionResponse:
    """Full snapshot of a session."""
    managed = await _get_managed(session_id)
    async with managed.lock:
        return _action_response(managed.session)


@router.get("/{session_id}/playbook", response_model=list[PlaySchema])
async def get_playbook(session_id: str) -> list[PlaySchema]:
    """Plays unlocked for the session's week."""
    managed = await _get_managed(session_id)
    session = managed.session
    return [
        PlaySchema(
            id=play.id,
            name=play.name,
            short_name=play.short_name,
            category=play.category.value,
            risk=play.risk.value,
            unlock_week=play.unlock_week,
            description=play.description,
            receivers=play.receiver_count,
            best_against=[c.value for c in play.best_against],
        )
        for play in session.playbook.available(session.week)
    ]


@router.post("/{session_id}/select", response_model=ActionResponse)
async def select_play(session_id: str, request: SelectPlayRequest) -> ActionResponse:
    """Call a play."""
    managed = await _get_managed(session_id)
    async with managed.lock:
        session = managed.session
        try:
            accepted = session.select_play(request.play_id)
        except UnknownPlayError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.args[0])
        except SessionDisposedError:
            raise _gone()
        if not accepted:
            raise _rejected(session)
        return _action_response(session, {"coverage": session.call.coverage.value})


@router.post("/{session_id}/snap", response_model=ActionResponse)
async def snap(session_id: str) -> ActionResponse:
    """Snap the ball."""
    managed = await _get_managed(session_id)
    async with managed.lock:
        session = managed.session
        try:
            accepted = session.snap()
        except SessionDisposedError:
            raise _gone()
        if not accepted:
            raise _rejected(session)
        return _action_response(session)


@router.post("/{session_id}/throw", response_model=ActionResponse)
async def throw(session_id: str, request: Optional[ThrowRequest] = None) -> ActionResponse:
    """Throw the ball."""
    request = request or ThrowRequest()
    managed = await _get_managed(session_id)
    async with managed.lock:
        session = managed.session
        aim = Vec2(request.aim.x, request.aim.y) if request.aim else None
        try:
            ball = session.throw(target_index=request.target_index, aim=aim)
        except SessionDisposedError:
            raise _gone()
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        if ball is None:
            raise _rejected(session)
        return _action_response(
            session,
            {"target_index": ball.target_index, "throw_timing": ball.throw_timing.value},
        )


@router.post("/{session_id}/catch", response_model=ActionResponse)
async def attempt_catch(session_id: str, request: Optional[CatchRequest] = None) -> ActionResponse:
    """Attempt the catch."""
    request = request or CatchRequest()
    managed = await _get_managed(session_id)
    async with managed.lock:
        session = managed.session
        try:
            timing = session.attempt_catch(at=request.at)
        except SessionDisposedError:
            raise _gone()
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        if timing is None:
            raise _rejected(session)
        return _action_response(session, {"timing": timing.value})


@router.post("/{session_id}/intercept", response_model=ActionResponse)
async def attempt_interception(session_id: str, request: InterceptRequest) -> ActionResponse:
    """A defender plays the ball."""
    managed = await _get_managed(session_id)
    async with managed.lock:
        session = managed.session
        try:
            attempt = session.attempt_interception(request.defender_index, at=request.at)
        except SessionDisposedError:
            raise _gone()
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        if attempt is None:
            raise _rejected(session)
        return _action_response(
            session,
            {
                "defender_index": attempt.defender_index,
                "timing": attempt.timing.value,
                "distance": attempt.distance,
                "success": attempt.success,
            },
        )


@router.post("/{session_id}/tick", response_model=TickResponse)
async def tick(session_id: str, request: TickRequest) -> TickResponse:
    """Advance simulation time."""
    managed = await _get_managed(session_id)
    async with managed.lock:
        session = managed.session
        if session.disposed:
            raise _gone()
        fired = session.tick(request.dt)
        return TickResponse(timers_fired=fired, phase=session.phase.value, snapshot=session.snapshot())


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str) -> None:
    """Dispose a session."""
    managed = await _get_managed(session_id)
    await get_session_manager().delete_session(managed.session_id)
