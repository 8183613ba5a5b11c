"""API services."""

from pocketqb.api.services.session_manager import (
    ManagedSession,
    SessionManager,
    get_session_manager,
)

__all__ = ["ManagedSession", "SessionManager", "get_session_manager"]
