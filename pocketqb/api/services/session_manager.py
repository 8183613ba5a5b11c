"""Session manager for HTTP play sessions."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID, uuid4

from pocketqb.game.session import PlayerRole, PlaySession

logger = logging.getLogger(__name__)


@dataclass
class ManagedSession:
    """A play session plus the lock serializing requests against it."""

    session_id: UUID
    session: PlaySession
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)


class SessionManager:
    """
    Manages active play sessions.

    Sessions are stored behind an asyncio lock; each session also has its
    own lock so that two requests never drive the same session at once.
    """

    def __init__(self) -> None:
        self._sessions: dict[UUID, ManagedSession] = {}
        self._lock = asyncio.Lock()

    async def create_session(
        self,
        week: int = 1,
        role: PlayerRole = PlayerRole.QUARTERBACK,
        seed: Optional[int] = None,
        user_receiver: int = 0,
    ) -> ManagedSession:
        """Create a new play session."""
        session = PlaySession(week=week, role=role, seed=seed, user_receiver=user_receiver)
        managed = ManagedSession(session_id=uuid4(), session=session)

        async with self._lock:
            self._sessions[managed.session_id] = managed

        logger.info("Created session %s", managed.session_id)
        return managed

    async def get_session(self, session_id: UUID) -> Optional[ManagedSession]:
        """Get a session by ID."""
        async with self._lock:
            return self._sessions.get(session_id)

    async def delete_session(self, session_id: UUID) -> bool:
        """
        Dispose and forget a session.

        Returns True if session existed and was deleted.
        """
        async with self._lock:
            managed = self._sessions.pop(session_id, None)
        if managed is None:
            return False

        async with managed.lock:
            managed.session.dispose()
        logger.info("Deleted session %s", session_id)
        return True

    async def list_sessions(self) -> list[UUID]:
        """List all active session IDs."""
        async with self._lock:
            return list(self._sessions.keys())

    async def cleanup_all(self) -> None:
        """Dispose every session (application shutdown)."""
        for session_id in await self.list_sessions():
            await self.delete_session(session_id)


_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    """Get the global session manager instance."""
    global _manager
    if _manager is None:
        _manager = SessionManager()
    return _manager
