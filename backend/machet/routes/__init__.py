"""
Route registration — includes all API routers into the FastAPI app.
"""

from fastapi import FastAPI

from machet.routes.health import router as health_router
from machet.routes.sessions import router as sessions_router


def register_routes(app: FastAPI):
    """Mount all API routers onto the app."""
    app.include_router(health_router)
    app.include_router(sessions_router)
