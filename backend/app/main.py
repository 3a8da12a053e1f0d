"""
Tasklane Backend — FastAPI Application Factory
================================================

What:  Builds the FastAPI application: middleware, error handling, routers
       and the startup/shutdown hook.
Who:   uvicorn app.main:app; the test suite calls create_app() directly.

Request path:
    RateLimit → RequestID → RequestLogging → GZip → CORS → router
        /api/boards, /api/columns, /api/items   (always)
        /api/admin/seed, /api/admin/clear       (ENABLE_ADMIN_ROUTES)
        /health

Errors:
    TasklaneError subclasses → their own status and error code
    RequestValidationError   → 422 (FastAPI default)
    anything else            → 500 internal_server_error

Lifecycle:
    Startup:  logging → config validation → seed default board
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import async_session_factory, dispose_engine
from app.exceptions import TasklaneError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import admin, boards, columns, health, items
from app.services.board_service import board_service

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "asyncpg"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

async def seed_default_board() -> None:
    """Run BoardService.seed() in its own transaction."""
    async with async_session_factory() as session:
        try:
            inserted = await board_service.seed(session)
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    logger.info("Default board %s", "created" if inserted else "not needed; boards present")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    A failing seed aborts startup: clients expect at least the default
    board to exist once the server answers.
    """
    setup_logging()
    logger.info("Tasklane Backend %s starting", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("%s", e)

    if settings.seed_on_startup:
        await seed_default_board()

    if settings.enable_admin_routes:
        logger.warning("Admin routes enabled: /api/admin/seed, /api/admin/clear")

    logger.info("Listening on http://%s:%d", settings.backend_host, settings.backend_port)
    yield

    await dispose_engine()
    logger.info("Tasklane Backend stopped")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(TasklaneError)
    async def handle_application_error(request: Request, exc: TasklaneError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s",
                         rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s", rid, exc.message)

        content = {
            "error": exc.error_code,
            "message": exc.public_message(),
            "request_id": rid,
        }
        if exc.expose_context:
            content["details"] = exc.context
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500 with a request ID for support tickets."""
        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Reads settings at call time, so tests can flip settings (admin routes,
    rate limits) and build a fresh app.
    """
    app = FastAPI(
        title="Tasklane API",
        description=(
            "Kanban board backend: boards hold ordered columns, columns hold "
            "ordered items."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Added innermost first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    for module in (boards, columns, items, health):
        app.include_router(module.router)
    if settings.enable_admin_routes:
        app.include_router(admin.router)

    return app


app = create_app()
