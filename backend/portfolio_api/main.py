"""
Portfolio Backend: FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() resolves Settings, builds the engine, gateway, mail
       transport and services once, stores them on app.state, registers
       middleware, exception handlers and routers, and returns the app.
Who:   uvicorn imports `portfolio_api.main:app`; tests call create_app()
       directly with their own settings, a spy gateway and a fake mailer.

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                     FastAPI App                         │
    │                                                         │
    │  Middleware Chain:                                      │
    │  ┌────────────┐ ┌──────────┐ ┌────────────────────────┐ │
    │  │ Request ID │→│ Logging  │→│ CORS / OPTIONS → 204   │ │
    │  └────────────┘ └──────────┘ └────────────────────────┘ │
    │                                                         │
    │  Routes:                                                │
    │   GET  /api/reviews   POST /api/review                  │
    │   GET  /api/projects  POST /api/contact                 │
    │   POST /api/login     POST /api/verify                  │
    │   GET|POST /api/protected                 GET /health   │
    │                                                         │
    │  Exception Handlers:                                    │
    │  ┌───────────────────────────────────────────────────┐  │
    │  │ Decode→400 │ Auth→401 │ Method→405 │ others→500   │  │
    │  └───────────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (ConfigError aborts startup)
    3. Ping the store (StorageError aborts startup)

    Shutdown:
    1. Dispose the engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_api import __version__
from portfolio_api.config import Settings
from portfolio_api.database import build_engine
from portfolio_api.exceptions import (
    AuthError,
    ConfigError,
    DecodeError,
    MethodError,
    PortfolioError,
    StorageError,
    TokenError,
    TransportError,
)
from portfolio_api.middleware.cors import PreflightCORSMiddleware
from portfolio_api.middleware.logging import RequestLoggingMiddleware
from portfolio_api.middleware.request_id import RequestIDMiddleware, request_id_var
from portfolio_api.routes import auth, contact, health, projects, reviews
from portfolio_api.services.auth_service import AuthService
from portfolio_api.services.contact_service import ContactService
from portfolio_api.services.gateway import PersistenceGateway
from portfolio_api.services.mail_base import MailTransport
from portfolio_api.services.mailer import build_mailer
from portfolio_api.services.review_service import ReviewService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    The request ID is part of each access-log message and of every error
    handler's log line, so a failed submission can be traced from the
    request_id in its error body.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("aiosmtplib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup validates configuration and reaches the store; either failure
    propagates and the server exits instead of accepting traffic.
    """
    settings: Settings = app.state.settings
    gateway: PersistenceGateway = app.state.gateway

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("Portfolio backend starting up...")

    try:
        settings.validate_required()
    except ConfigError as e:
        logger.critical("Configuration error: %s", e.message)
        raise

    try:
        await gateway.ping()
    except StorageError as e:
        logger.critical("Database unreachable at startup: %s", e.context)
        await gateway.dispose()
        raise

    logger.info("Mail transport: %s", app.state.mailer.name)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Portfolio backend shutting down...")
    await gateway.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str) -> Dict[str, Optional[str]]:
    return {
        "error": error,
        "message": message,
        "request_id": request_id_var.get("") or None,
    }


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP status codes and the ErrorResponse body.

    Handler hierarchy:
        RequestValidationError → 400 (as DecodeError)
        DecodeError            → 400 Bad Request
        AuthError              → 401 Unauthorized (+ WWW-Authenticate)
        HTTP 405 from routing  → 405 (as MethodError)
        ConfigError            → 500
        StorageError           → 500
        TransportError         → 500 (MailAuthError included)
        TokenError             → 500
        PortfolioError (base)  → its status_code
        Exception (fallback)   → 500

    Messages returned are short and generic; SQL errors, relay replies and
    configuration details stay in the server log.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed JSON, missing field or wrong type. No handler logic ran."""
        errors = exc.errors()
        field = None
        if errors:
            loc = [str(part) for part in errors[0].get("loc", ()) if part != "body"]
            field = ".".join(loc) or None
        error = DecodeError(field=field)
        logger.warning(
            "[%s] Invalid payload on %s %s: field=%s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            field,
        )
        return JSONResponse(
            status_code=error.status_code,
            content=_error_body(error.error_code, error.message),
        )

    @app.exception_handler(DecodeError)
    async def handle_decode_error(request: Request, exc: DecodeError):
        logger.warning("[%s] Invalid payload: %s", request_id_var.get(""), exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError):
        """Secret or token rejected. The reason stays in the message only."""
        logger.warning(
            "[%s] Unauthorized %s %s: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """405 gets the application error body; everything else (404) is FastAPI's default."""
        if exc.status_code == 405:
            error = MethodError(method=request.method, path=request.url.path)
            logger.info("[%s] %s not allowed on %s", request_id_var.get(""), request.method, request.url.path)
            return JSONResponse(
                status_code=error.status_code,
                content=_error_body(error.error_code, error.message),
                headers=dict(exc.headers or {}),
            )
        return await http_exception_handler(request, exc)

    @app.exception_handler(ConfigError)
    async def handle_config_error(request: Request, exc: ConfigError):
        logger.error("[%s] Configuration error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """Database error: generic message to user, details logged server-side."""
        logger.error("[%s] Storage error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(TransportError)
    async def handle_transport_error(request: Request, exc: TransportError):
        logger.error(
            "[%s] Mail delivery failed at stage=%s | Context: %s",
            request_id_var.get(""),
            exc.stage,
            exc.context,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(TokenError)
    async def handle_token_error(request: Request, exc: TokenError):
        logger.error("[%s] Token error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(PortfolioError)
    async def handle_portfolio_error(request: Request, exc: PortfolioError):
        logger.error("[%s] %s: %s | Context: %s", request_id_var.get(""), type(exc).__name__, exc.message, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Last resort for errors raised outside the CORS middleware.

        Errors from routes and services are caught one layer in, by
        PreflightCORSMiddleware, so their 500 still carries CORS headers.
        Stack trace is logged server-side only.
        """
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_server_error", "An unexpected error occurred"),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[PersistenceGateway] = None,
    mailer: Optional[MailTransport] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Resolved configuration. Read from the environment if omitted.
        gateway:  Persistence gateway. Built from settings.database_url if omitted.
        mailer:   Mail transport. Chosen by settings.mail_transport if omitted.

    Nothing here connects to the database or the mail relay; the lifespan
    pings the store, and the mailer connects per send.
    """
    settings = settings or Settings()
    if gateway is None:
        gateway = PersistenceGateway(
            build_engine(settings),
            query_timeout=settings.db_query_timeout,
        )
    if mailer is None:
        mailer = build_mailer(settings)

    app = FastAPI(
        title="Portfolio API",
        description=(
            "Backend for a personal portfolio site: reviews, project cards, "
            "contact-form relay and token login."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.gateway = gateway
    app.state.mailer = mailer
    app.state.review_service = ReviewService(gateway, settings.review_form_key)
    app.state.contact_service = ContactService(
        mailer,
        admin_email=settings.admin_email,
        contact_form_key=settings.contact_form_key,
        from_display_name=settings.mail_from_name,
    )
    app.state.auth_service = AuthService(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route. Preflights are therefore logged
    # with an ID but never reach a handler.
    app.add_middleware(PreflightCORSMiddleware, allow_origins=settings.cors_origins_list)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(reviews.router)
    app.include_router(projects.router)
    app.include_router(contact.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    return app


# uvicorn expects `portfolio_api.main:app` to be importable
app = create_app()
