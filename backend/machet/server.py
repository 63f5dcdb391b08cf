"""
machet server — FastAPI app hosting independent chat sessions over HTTP.

Each session is its own TurnController with its own conversation log;
POST /sessions/{id}/messages plays the role of the /USER/ prompt.

Run: machet-server --host 127.0.0.1 --port 8000
"""

import argparse
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI

from machet import __version__
from machet.config import LOG_DATE_FORMAT, LOG_FORMAT
from machet.profile import Profile, get_profile, reload_profile
from machet.routes import register_routes
from machet.sessions import SessionManager

logger = logging.getLogger(__name__)


def create_app(profile: Optional[Profile] = None,
               backend_factory: Optional[Callable] = None) -> FastAPI:
    profile = profile or get_profile()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=getattr(logging, profile.logging.level.upper(), logging.INFO),
            format=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
        )
        logger.info("Serving model %s", profile.inference.model)
        if not profile.web.api_key:
            logger.warning("No API key configured, session endpoints are open")
        yield
        logger.info("Shutting down with %d open sessions", len(app.state.sessions.all()))

    app = FastAPI(
        title="machet",
        description="Chat sessions with tool execution embedded in model replies",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.profile = profile
    app.state.sessions = SessionManager(profile, backend_factory)
    register_routes(app)
    return app


def main(argv: Optional[list[str]] = None):
    parser = argparse.ArgumentParser(prog="machet-server", description="machet HTTP session server")
    parser.add_argument("--host", default=None, help="Bind address (default from profile)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (default from profile)")
    parser.add_argument("--profile", default=None, help="Path to a machet.yaml profile")
    args = parser.parse_args(argv)

    profile = reload_profile(args.profile) if args.profile else get_profile()

    import uvicorn
    uvicorn.run(
        create_app(profile),
        host=args.host or profile.web.host,
        port=args.port or profile.web.port,
    )


if __name__ == "__main__":
    main()
