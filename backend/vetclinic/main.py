"""
VetClinic Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, error handling
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn vetclinic.main:app) or the `vetclinic` script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Req ID      │→│Rate Limit│→│  Logging → CORS │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes (/api):                                     │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ Veterinarios │ │  Pacientes   │ │ docs, health│  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Auth→401 │ Forbidden→403 │        │
    │  NotFound→404 │ Store→500 │ Unmatched route→404 text│
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (warn on development secrets)
    3. Open the document store unless one was injected
    4. Build the OpenAPI document (errors abort startup)

    Shutdown:
    1. Close the document store if this app opened it
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vetclinic import __version__
from vetclinic.config import settings
from vetclinic.docs import install_docs
from vetclinic.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    VetClinicError,
)
from vetclinic.middleware.logging import RequestLoggingMiddleware
from vetclinic.middleware.rate_limit import RateLimitMiddleware
from vetclinic.middleware.request_id import RequestIDMiddleware, request_id_var
from vetclinic.routes import health, patients, veterinarians
from vetclinic.schemas.common import EMPTY_FIELDS_MESSAGE
from vetclinic.store import DocumentStore, open_store

logger = logging.getLogger(__name__)

UNMATCHED_ROUTE_MESSAGE = "Endpoint no encontrado - 404"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("VetClinic Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.warning("%s", str(e))

    owns_store = getattr(app.state, "store", None) is None
    if owns_store:
        app.state.store = await open_store()
    logger.info("Document store: %s", type(app.state.store).__name__)

    app.openapi()
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/api/docs", settings.host, settings.port)

    yield

    logger.info("VetClinic Backend shutting down...")
    if owns_store:
        await app.state.store.close()
        app.state.store = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, exc: VetClinicError, details: bool = True) -> dict:
    return {
        "error": error,
        "message": exc.message,
        "details": exc.context if details else None,
        "request_id": request_id_var.get(""),
    }


def _validation_message(errors: list) -> str:
    for err in errors:
        if err["type"] == "empty_field":
            return EMPTY_FIELDS_MESSAGE
    for err in errors:
        if err["type"] == "extra_forbidden":
            return f"Campo no permitido: {err['loc'][-1]}"
        if err["type"] == "null_field":
            return err["msg"]
    return "Los datos enviados no son válidos"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response formats.

    Handler hierarchy:
        RequestValidationError  → 400 (schema errors, empty fields)
        ValidationError         → 400
        AuthenticationError     → 401 (+ WWW-Authenticate: Bearer)
        PermissionDeniedError   → 403
        NotFoundError           → 404
        DatabaseError           → 500 (generic message, details logged)
        VetClinicError (base)   → 500
        unmatched route/method  → 404 plain text
        Exception (fallback)    → 500
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid request on %s: %d error(s)", rid, request.url.path, len(errors))
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": _validation_message(errors),
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in err["loc"]),
                        "message": err["msg"],
                        "type": err["type"],
                    }
                    for err in errors
                ],
                "request_id": rid,
            },
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content=_error_body("validation_error", exc))

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content=_error_body("unauthorized", exc, details=False),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(request: Request, exc: PermissionDeniedError):
        return JSONResponse(status_code=403, content=_error_body("forbidden", exc, details=False))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content=_error_body("server_error", exc, details=False))

    @app.exception_handler(VetClinicError)
    async def handle_app_error(request: Request, exc: VetClinicError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content=_error_body("server_error", exc, details=False))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # No route for this method and path: 405 is reported as unmatched too
        if exc.status_code in (404, 405):
            return PlainTextResponse(UNMATCHED_ROUTE_MESSAGE, status_code=404)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "Error interno del servidor",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Document store to use instead of the one selected by
            DATABASE_BACKEND. The app does not close an injected store.
    """
    app = FastAPI(
        title="Swagger Veterinary",
        description=(
            "API de la clínica veterinaria: autenticación de veterinarios y "
            "gestión de sus pacientes."
        ),
        version=__version__,
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/docs.json",
        lifespan=lifespan,
    )
    app.state.store = store
    install_docs(app)

    # Middleware executes in REVERSE order of addition:
    # RequestID → RateLimit → Logging → GZip → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(veterinarians.router)
    app.include_router(patients.router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "vetclinic.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


app = create_app()
