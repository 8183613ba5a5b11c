"""PocketQB API package - FastAPI backend for play sessions."""

from pocketqb.api.main import app, create_app

__all__ = ["app", "create_app"]
