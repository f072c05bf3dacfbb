"""
FastAPI Application
==================

Main FastAPI application for HTML to image conversion.
Launches the shared browser on startup and terminates it on shutdown.
"""

from contextlib import asynccontextmanager
import uuid
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send
import uvicorn

from html2png.api.responses import error_response
from html2png.api.routes.convert import router as convert_router
from html2png.api.routes.general import AVAILABLE_ENDPOINTS, router as general_router
from html2png.config.logging import get_logger
from html2png.config.settings import Settings, get_settings
from html2png.core.rendering.engine import EngineHandle
from html2png.core.rendering.lifecycle import EngineLifecycle
from html2png.core.rendering.pipeline import ConversionPipeline
from html2png.models.schemas import NotFoundResponse

logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Cross-Origin-Resource-Policy": "same-origin",
}

BODY_TOO_LARGE_ERROR = "Request entity too large"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    lifecycle: EngineLifecycle = app.state.lifecycle

    # Startup
    logger.info("Starting HTML to PNG service")
    if not await lifecycle.startup():
        logger.warning("Service started without a rendering engine")

    try:
        yield
    finally:
        # Shutdown: the browser must go before the process does
        logger.info("Shutting down HTML to PNG service")
        await lifecycle.shutdown()


# Middleware
class StreamedBodyLimit:
    """
    Count request body bytes as they arrive.

    Chunked uploads carry no Content-Length, so the limit is enforced on the
    running total. Crossing it raises a 413 ``HTTPException`` from inside the
    read, which the route's exception handlers turn into a response.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        received = 0

        async def counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    raise HTTPException(status_code=413, detail=BODY_TOO_LARGE_ERROR)
            return message

        await self.app(scope, counting_receive, send)


async def limit_body_size(request: Request, call_next) -> Response:  # type: ignore
    """Reject bodies whose declared length exceeds the configured limit."""
    max_bytes = request.app.state.settings.max_body_bytes
    content_length = request.headers.get("content-length")

    if content_length is not None:
        try:
            declared = int(content_length)
        except ValueError:
            return error_response(400, "Invalid Content-Length header")
        if declared > max_bytes:
            return body_too_large_response(max_bytes)

    return await call_next(request)  # type: ignore


async def add_request_id(request: Request, call_next) -> Response:  # type: ignore
    """Add request ID and security headers to all responses, 500s included."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    try:
        response = await call_next(request)  # type: ignore
    except Exception as e:
        response = await general_exception_handler(request, e)

    response.headers["X-Request-ID"] = request_id
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)

    return response  # type: ignore


def body_too_large_response(max_bytes: int) -> JSONResponse:
    return error_response(413, BODY_TOO_LARGE_ERROR, f"Body exceeds {max_bytes} bytes")


# Exception handlers
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes and methods get the endpoint listing; others a structured error."""
    if exc.status_code in (404, 405):
        body = NotFoundResponse(available_endpoints=AVAILABLE_ENDPOINTS)
        return JSONResponse(status_code=404, content=body.model_dump(by_alias=True))
    if exc.status_code == 413:
        return body_too_large_response(request.app.state.settings.max_body_bytes)

    return error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed requests are the caller's to fix."""
    logger.info(
        "Request validation failed",
        errors=exc.errors(),
        request_id=getattr(request.state, "request_id", None),
    )
    return error_response(400, "Invalid request", str(exc.errors()))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """General exception handler for unexpected errors."""
    logger.error(
        "Unhandled exception",
        exception=str(exc),
        request_id=getattr(request.state, "request_id", None),
        exc_info=True,
    )
    return error_response(500, "Internal server error", str(exc))


def create_app(
    settings: Optional[Settings] = None, engine: Optional[EngineHandle] = None
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Settings to use, defaults to the global settings
        engine: Engine handle to use, defaults to a new Chromium handle

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()
    engine = engine or EngineHandle(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Convert HTML markup to PNG or JPEG images",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_docs else None,
        redoc_url="/redoc" if settings.enable_docs else None,
        openapi_url="/openapi.json" if settings.enable_docs else None,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.lifecycle = EngineLifecycle(engine)
    app.state.pipeline = ConversionPipeline(engine, settings)

    # Add middleware; the last one added runs first
    app.add_middleware(StreamedBodyLimit, max_bytes=settings.max_body_bytes)
    app.middleware("http")(limit_body_size)
    app.middleware("http")(add_request_id)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(general_router)
    app.include_router(convert_router)

    return app


app = create_app()


def run_server() -> None:
    """Run the service with uvicorn, which turns SIGINT/SIGTERM into lifespan shutdown."""
    settings = get_settings()
    logger.info(
        "HTML to PNG service starting",
        port=settings.port,
        health_check=f"http://localhost:{settings.port}/health",
    )
    uvicorn.run(
        "html2png.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
        access_log=True,
    )


if __name__ == "__main__":
    run_server()
