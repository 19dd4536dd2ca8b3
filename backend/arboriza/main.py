"""
Arboriza Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the Database, registers middleware, exception
       handlers and routers, and returns the app.
Who:   uvicorn (`uvicorn arboriza.main:app`, or `python -m arboriza`) and
       the test suite, which calls create_app() with its own Settings.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware: RequestID → RateLimit → Logging →           │
    │              SecurityHeaders → GZip → CORS               │
    │                                                          │
    │  Routes: /api/auth  /api/plantas  /api/plants            │
    │          /api/especies  /api/filtros  /api/rooms         │
    │          /api/health                                     │
    │                                                          │
    │  Exception handlers: ArborizaError → its status code,    │
    │  request validation → 400, anything else → 500           │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, check the store answers SELECT 1
              (the process refuses to start otherwise)
    Shutdown: dispose the engine so pooled connections are released
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from arboriza import __version__
from arboriza.config import Settings, settings as default_settings
from arboriza.database import Database
from arboriza.exceptions import ArborizaError, StoreError, error_body
from arboriza.middleware.logging import RequestLoggingMiddleware
from arboriza.middleware.rate_limit import RateLimitMiddleware
from arboriza.middleware.request_id import RequestIDMiddleware, request_id_var
from arboriza.middleware.security_headers import SecurityHeadersMiddleware
from arboriza.routes import auth, forum, health, plants, species

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout so
    the container runtime collects it.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(app_settings.log_level)
    logger.info("Arboriza backend %s starting up...", __version__)

    try:
        await database.ping()
    except Exception:
        logger.error("Could not connect to the database", exc_info=True)
        await database.dispose()
        raise
    logger.info("Database connection established")
    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)

    yield

    logger.info("Arboriza backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to JSON error responses.

    Handler hierarchy:
        RequestValidationError → 400 (unparseable body, non-numeric id, ...)
        StoreError             → 500, driver text only when expose_detail
        ArborizaError (base)   → exc.status_code with exc.context as details
        Exception (fallback)   → 500, generic message

    Stack traces are logged server-side only, never returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Invalid request: %s", request_id_var.get(""), errors)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", "Invalid request data", {"errors": errors}),
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error(
            "[%s] Store error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        details = exc.context if exc.expose_detail else None
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error_code, exc.message, details),
        )

    @app.exception_handler(ArborizaError)
    async def handle_app_error(request: Request, exc: ArborizaError):
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s", request_id_var.get(""), exc.error_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error_code, exc.message, exc.context),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content=error_body("internal_server_error", "Internal server error"),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: configuration to use; defaults to the environment-loaded
                      singleton. Tests pass their own (SQLite database URL).
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Arboriza API",
        description=(
            "Urban tree inventory: plant registration with geolocation, "
            "species catalogue, comments and a community chat forum."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # One store handle per application, shared by every request
    app.state.settings = app_settings
    app.state.database = Database(app_settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added runs first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=app_settings.rate_limit_requests,
        window_seconds=app_settings.rate_limit_window,
    )
    # Outermost, so rejected requests also carry an ID
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(plants.router)
    app.include_router(species.router)
    app.include_router(forum.router)
    app.include_router(health.router)

    return app


# uvicorn expects `arboriza.main:app` to be importable
app = create_app()
