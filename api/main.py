from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.db import Database
from core.errors import install_error_handlers
from core.log import configure_logging
from core.settings import Settings
from posts import router as posts_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the API.

    A `database` passed in is used as-is and left open on shutdown; otherwise
    the app creates its own pool from `settings` and owns its lifecycle.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    owns_database = database is None
    db = database if database is not None else Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        # Initialize the DB pool once per process.
        if owns_database:
            await db.connect()
        try:
            yield
        finally:
            if owns_database:
                await db.close()

    app = FastAPI(lifespan=lifespan)
    app.state.database = db

    # Allow the frontend dev server to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app, posts_router.STORE_FAILURE_MESSAGES)
    app.include_router(posts_router.router, tags=["posts"])

    @app.get("/health")
    def health() -> dict:
        # Liveness only; never touches the database.
        return {"ok": True}

    return app


app = create_app()


if __name__ == "__main__":
    settings = Settings.from_env()
    logger.info("api_listening host=%s port=%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
