"""YouTube Search Proxy: FastAPI app and lifespan."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from src.config import settings
from src.context import ServerContext
from src.middleware import RateLimitMiddleware, UnhandledFailureMiddleware
from src.routes import videos

logger = logging.getLogger(__name__)

CLIENT_DIR = Path(__file__).resolve().parent.parent / "integration"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifespan: shut down the server context on exit."""
    logger.info("YouTube Search Proxy starting")
    try:
        yield
    finally:
        logger.info("YouTube Search Proxy shutting down")
        await app.state.context.aclose()


def create_app(context: ServerContext | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Server context to serve from; built from settings when omitted

    Returns:
        Configured FastAPI instance
    """
    context = context or ServerContext.from_settings(settings)
    app = FastAPI(
        title="YouTube Search Proxy",
        description="Caching proxy for YouTube search with duration, embed and channel filters",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.context = context

    # Last added runs first: CORS wraps every response, including generic 500s and 429s
    app.add_middleware(GZipMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(UnhandledFailureMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[context.settings.cors_origin],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(videos.router)

    @app.get("/")
    async def liveness() -> dict[str, bool]:
        """Return service liveness."""
        return {"ok": True}

    if CLIENT_DIR.is_dir():
        app.mount("/client", StaticFiles(directory=CLIENT_DIR, html=True), name="client")

    return app
