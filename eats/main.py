"""
Eats Server: FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   `create_app(settings)` builds the engine and session factory, stores
       them on `app.state`, registers middleware, exception handlers and
       routers, and returns the app.
Who:   uvicorn (`eats.main:app`, or `python -m eats`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │   Req ID     │→│ Logging  │→│  CORS           │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────┐ ┌─────────────────┐   │
    │  │ /places, /places/{id}... │ │ GET /health     │   │
    │  └──────────────────────────┘ └─────────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Database→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → CREATE TABLE IF NOT EXISTS (optional) → ready
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eats import __version__
from eats.config import Settings, settings as default_settings
from eats.database import (
    build_engine,
    build_session_factory,
    create_tables,
    dispose_engine,
)
from eats.exceptions import (
    DatabaseError,
    EatsError,
    NotFoundError,
    ValidationError,
)
from eats.middleware.logging import RequestLoggingMiddleware
from eats.middleware.request_id import RequestIDMiddleware, request_id_var
from eats.routes import health, places

logger = logging.getLogger(__name__)

CORS_ALLOWED_METHODS = ["GET", "PUT", "POST", "DELETE", "PATCH"]
CORS_ALLOWED_HEADERS = ["Authorization", "Content-Type", "Access-Control-Allow-Origin"]


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Create the places table if it does not exist (DB_CREATE_TABLES)
    Shutdown:
        1. Dispose the engine

    A database that cannot be reached during step 2 aborts startup.
    """
    app_settings: Settings = app.state.settings

    setup_logging(app_settings)
    logger.info("Eats server %s starting up...", __version__)

    if app_settings.db_create_tables:
        await create_tables(app.state.engine)

    logger.info(
        "Server ready at http://%s:%d",
        app_settings.backend_host,
        app_settings.backend_port,
    )

    yield

    logger.info("Eats server shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    """The single error envelope used by every handler: {"error": message}."""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes.

    Handler table:
        ValidationError         → 400
        RequestValidationError  → 400 "Invalid request payload"
        NotFoundError           → 404
        DatabaseError           → 500 (raw driver message)
        EatsError (base)        → its status_code
        HTTPException           → its status_code (unknown route, bad method)
        Exception (fallback)    → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # Malformed JSON, missing fields, wrong field types
        logger.warning(
            "[%s] Invalid request payload: %s", request_id_var.get(""), exc.errors()
        )
        return error_response(400, "Invalid request payload")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return error_response(500, exc.message)

    @app.exception_handler(EatsError)
    async def handle_app_error(request: Request, exc: EatsError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return error_response(500, str(exc) or type(exc).__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to use; defaults to the environment-derived
                  `eats.config.settings`. Tests pass their own to point the
                  app at a temporary database.

    The engine is created here but no connection is opened until the first
    query (or the startup table bootstrap).
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Eats API",
        description=(
            "Suggest restaurants and food places. New suggestions wait in a "
            "requested state until a moderator approves them."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=CORS_ALLOWED_METHODS,
        allow_headers=CORS_ALLOWED_HEADERS,
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(places.router)

    return app


# uvicorn entry point: `uvicorn eats.main:app`
app = create_app()
