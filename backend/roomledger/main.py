"""
RoomLedger Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn roomledger.main:app) or the `roomledger`
       console script (run()).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────────────────┐  │
    │  │  Req ID  │→│ Access log  │→│ CORS (optional)  │  │
    │  └──────────┘ └─────────────┘ └──────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ /api/...     │ │ /health  │ │ OPTIONS *, 404  │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ DB/other→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create tables if missing (failure aborts startup)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from roomledger import __version__
from roomledger.config import settings
from roomledger.database import dispose_engine, init_schema
from roomledger.exceptions import DatabaseError, NotFoundError, ValidationError
from roomledger.middleware.cors import PreflightCORSMiddleware
from roomledger.middleware.logging import RequestLoggingMiddleware
from roomledger.middleware.request_id import RequestIDMiddleware, request_id_var
from roomledger.routes import fallback, health, household

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When: Called once during app startup, before any other initialization.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access logger replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, then schema bootstrap. The tables exist before the
    first request is accepted, so handlers never check for them.

    Shutdown: close pooled connections.
    """
    setup_logging()
    logger.info("RoomLedger Backend %s starting up...", __version__)

    # Not caught: a database that cannot be reached or migrated stops startup
    await init_schema()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("RoomLedger Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

_NOT_FOUND = "Not Found"
_SERVER_ERROR = "Internal Server Error"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        ValidationError         → 400 {"error": message}
        RequestValidationError  → 400 {"error": "invalid request"}
        NotFoundError           → 404 text/plain "Not Found"
        HTTPException 404/405   → 404 text/plain "Not Found"
        DatabaseError           → 500 text/plain, details logged only
        Exception (fallback)    → 500 text/plain, traceback logged
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning(
            "[%s] Validation error on %s: %s %s",
            rid, request.url.path, exc.message, exc.context,
        )
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation error on %s: %s", rid, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "invalid request"})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return PlainTextResponse(_NOT_FOUND, status_code=404)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return PlainTextResponse(_NOT_FOUND, status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return PlainTextResponse(_SERVER_ERROR, status_code=500)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return PlainTextResponse(_SERVER_ERROR, status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance. No I/O happens here; the
    database is first touched in the lifespan.
    """
    app = FastAPI(
        title="RoomLedger API",
        description="Shared-household expense tracker: roommates and expenses per household.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Execution order is the reverse of registration: RequestID → Logging → CORS

    # Same-origin deployments leave CORS_ORIGINS empty; preflights then reach
    # the OPTIONS fallback route. Either way a preflight answers 204.
    if settings.cors_origins_list:
        app.add_middleware(
            PreflightCORSMiddleware,
            allow_origins=settings.cors_origins_list,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(household.router)
    app.include_router(health.router)
    app.include_router(fallback.router)  # catch-all, must stay last

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured address."""
    uvicorn.run(
        "roomledger.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# uvicorn expects `roomledger.main:app` to be importable
app = create_app()
