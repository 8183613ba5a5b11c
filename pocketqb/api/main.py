"""FastAPI application for PocketQB."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pocketqb import __version__
from pocketqb.api.routers import sessions_router
from pocketqb.api.services.session_manager import get_session_manager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("PocketQB API starting up")
    yield
    logger.info("PocketQB API shutting down")
    # Dispose sessions so no timers outlive the process
    await get_session_manager().cleanup_all()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PocketQB API",
        description="Quarterback passing game API",
        version=__version__,
        lifespan=lifespan,
    )

    # Configure CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",  # Vite dev server
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(sessions_router, prefix="/api/v1")

    @app.get("/")
    async def root() -> dict:
        """Root endpoint - API info."""
        return {
            "name": "PocketQB API",
            "version": __version__,
            "description": "Quarterback passing game",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint."""
        sessions = await get_session_manager().list_sessions()
        return {"status": "healthy", "active_sessions": len(sessions)}

    return app


# Create app instance
app = create_app()


def run_api(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Run the API server."""
    uvicorn.run(
        "pocketqb.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run_api(reload=True)
