# src/snapshare/main.py
"""Main entry point for the SnapShare application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from snapshare import __version__
from snapshare.api.v1 import api_router
from snapshare.core.logging import configure_logging
from snapshare.core.settings import Settings
from snapshare.core.settings import settings as default_settings
from snapshare.errors import ConflictError, NotFoundError, ValidationError
from snapshare.repositories import SocialStore, build_store

logger = logging.getLogger(__name__)


def _register_exception_handlers(app: FastAPI) -> None:
    """Translate domain errors raised by the stores into HTTP responses."""

    @app.exception_handler(NotFoundError)
    async def _not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def _invalid(_request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(ConflictError)
    async def _conflict(_request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


def create_app(settings: Settings | None = None, store: SocialStore | None = None) -> FastAPI:
    """Build the FastAPI application around an explicitly constructed store.

    Args:
        settings: Configuration; defaults to values read from the environment.
        store: Storage backend; defaults to the one selected by ``settings``.
    """
    config = settings or default_settings
    configure_logging(config.log_level)
    backend = store if store is not None else build_store(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        backend.init()
        logger.info("%s started with %s", config.app_name, type(backend).__name__)
        try:
            yield
        finally:
            backend.close()

    app = FastAPI(
        title="SnapShare API",
        description="Social photo-sharing API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.store = backend

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    # Add GZip middleware for compression
    app.add_middleware(GZipMiddleware)

    _register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with basic information about the API."""
        return {
            "name": "SnapShare API",
            "version": __version__,
            "description": "Social photo-sharing API",
            "docs": "/docs",
            "redoc": "/redoc",
        }

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "snapshare.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=default_settings.debug,
    )
