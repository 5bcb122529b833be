"""
LocalBiz Directory — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       lifespan() handles logging setup, optional table creation, the
       category seed and engine disposal.
Who:   uvicorn app.main:app

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (logged, not fatal)
    3. Create tables when DB_CREATE_TABLES is set
    4. Ensure the seed categories exist (best effort)

    Shutdown:
    1. Dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app import __version__
from app.config import settings
from app.database import async_session_factory, dispose_engine, init_models
from app.exceptions import DirectoryError, RateLimitExceededError, UnauthenticatedError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from app.routes import businesses, categories, health, reviews, users
from app.services.category_service import category_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """Configure the root logger once: stdout, ISO timestamps, LOG_LEVEL."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)


async def seed_categories() -> None:
    """Insert any missing seed categories. Failures are logged, never raised."""
    try:
        async with async_session_factory() as session:
            added = await category_service.ensure_defaults(session)
            await session.commit()
    except (DirectoryError, SQLAlchemyError) as e:
        logger.error("Category seed failed, continuing without it: %s", str(e))
        return
    if added:
        logger.info("Seeded %d categories", added)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("LocalBiz Directory %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # the API still serves; tokens are signed with the dev secret
        logger.error("Configuration error: %s", str(e))

    if settings.db_create_tables:
        await init_models()
        logger.info("Database tables ensured")

    if settings.seed_categories_on_startup:
        await seed_categories()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("LocalBiz Directory shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details=None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the shared error body
    {"error", "message", "details"?, "request_id"}.

        DirectoryError subclasses  → their own status_code / error_code
        RequestValidationError     → 400 validation_error
        Exception (fallback)       → 500 internal_server_error
    """

    @app.exception_handler(DirectoryError)
    async def handle_directory_error(request: Request, exc: DirectoryError):
        rid = request_id_var.get("")
        headers = {}
        if isinstance(exc, UnauthenticatedError):
            headers["WWW-Authenticate"] = "Bearer"
        if isinstance(exc, RateLimitExceededError):
            headers["Retry-After"] = str(exc.retry_after)

        if exc.status_code >= 500:
            # driver and constraint detail stays in the log
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            content = _error_body(exc.error_code, exc.message)
        else:
            logger.info("[%s] %s (%d): %s", rid, exc.error_code, exc.status_code, exc.message)
            content = _error_body(exc.error_code, exc.message, exc.context)

        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(content),
            headers=headers or None,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request")
        if field:
            message = f"{field}: {message}"
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder(
                _error_body(
                    "validation_error",
                    message,
                    {"errors": [{"loc": e.get("loc"), "msg": e.get("msg")} for e in errors]},
                )
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Served by the outermost ServerErrorMiddleware, where the ContextVar
        # set by RequestIDMiddleware is no longer visible; request.state is.
        rid = getattr(request.state, "request_id", "") or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        content = _error_body(
            "internal_server_error",
            "An unexpected error occurred",
            {"reason": str(exc)},
        )
        content["request_id"] = rid
        return JSONResponse(
            status_code=500,
            content=content,
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="LocalBiz Directory API",
        description=(
            "Directory of local businesses: browse listings by category and "
            "location, read and write reviews, and manage your own listings."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Executed in reverse order of addition:
    # RequestID → RateLimit → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(businesses.router)
    app.include_router(reviews.router)
    app.include_router(categories.router)
    app.include_router(health.router)

    return app


app = create_app()
