"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown, middleware, CORS, error
rendering and routers are all registered here.

Errors always leave the API as {"message": ...}: a string for auth and
not-found errors, a list of strings for validation errors.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from photo_api import __version__
from photo_api.api import api_router
from photo_api.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "photo_api.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    yield

    logger.info("photo_api.shutdown")

    from photo_api.db.engine import engine
    await engine.dispose()


def _format_validation_error(error: dict) -> str:
    if error.get("type") == "json_invalid":
        return "Malformed JSON body"
    # Integer parts are byte offsets or list indexes, not field names
    loc = [
        str(part) for part in error.get("loc", ())
        if part != "body" and not isinstance(part, int)
    ]
    if loc:
        return f"{'.'.join(loc)}: {error['msg']}"
    return error["msg"]


def register_exception_handlers(app: FastAPI) -> None:
    """Render errors in the API's {"message": ...} shape."""

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        # Malformed bodies are reported like rule violations
        messages = [_format_validation_error(e) for e in exc.errors()]
        logger.info("request.invalid", path=request.url.path, errors=messages)
        return JSONResponse(status_code=400, content={"message": messages})


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Photo API",
        description="Photos owned by authenticated users",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from photo_api.middleware.request_id import RequestIdMiddleware
    from photo_api.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: photo_api.main:app)
app = create_app()
