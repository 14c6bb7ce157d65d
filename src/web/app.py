"""
FastAPI application factory for the line counter status API.

Routes:
- /api/status -> running count, active tracks, line position
- /api/tracks -> snapshots of the live tracks
- /api/events -> recent count events from the database
- /api/counts -> stored totals, overall and per category
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI

from .routes import api
from .state import SharedState, state as default_state


def create_app(shared: Optional[SharedState] = None, db: Any = None) -> FastAPI:
    """Create the FastAPI app and wire routes to the shared state and database."""
    app = FastAPI(
        title="Line Counter",
        version="0.1.0",
        description="Vehicle line crossing counter status API",
    )
    app.state.shared = shared if shared is not None else default_state
    app.state.db = db

    app.include_router(api.router, prefix="/api")

    return app
