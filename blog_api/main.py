"""FastAPI application entry point and composition root."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from blog_api.api.routes.health import router as health_router
from blog_api.api.routes.posts import router as posts_router
from blog_api.core.errors import (
    normalize_store_error,
    normalize_unknown_error,
    normalize_validation_error,
)
from blog_api.core.logging import EVENT_APP_START, EVENT_CONFIG_LOADED, setup_logging
from blog_api.core.settings import settings
from blog_api.services.post_store import PostStore, StoreError

setup_logging(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(EVENT_APP_START)
    logger.info("%s: %s", EVENT_CONFIG_LOADED, settings.safe_dump())
    store: PostStore = app.state.store
    store.open()
    logger.info("Blog Posts API ready")
    yield
    store.close()
    logger.info("Blog Posts API shutting down")


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    error = normalize_store_error(
        exc, operation=exc.operation, retryable=exc.retryable,
    )
    return JSONResponse(
        status_code=error.http_status,
        content={"detail": error.user_message},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Malformed request bodies are client errors (400), like field errors."""
    messages = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    error = normalize_validation_error(messages)
    return JSONResponse(
        status_code=error.http_status,
        content={"detail": error.user_message},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler: log details, return safe generic message."""
    error = normalize_unknown_error(exc, operation=f"{request.method} {request.url.path}")
    return JSONResponse(
        status_code=error.http_status,
        content={"detail": error.user_message},
    )


def create_app(store: PostStore | None = None) -> FastAPI:
    """Build the application around *store* (defaults to the configured one).

    The store is opened on startup and closed on shutdown.
    """
    app = FastAPI(
        title="Blog Posts API",
        version="0.1.0",
        description="CRUD resource server for blog posts.",
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else PostStore.from_settings(settings)

    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(posts_router, tags=["posts"])
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "blog_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
