"""
Company Registry API - FastAPI application.
Request logging, error handling, compression, CORS, HTTPS redirect, /api routes, static frontend.
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from company_api.api.routes import api_router
from company_api.core.config import (
    LOG_PROFILE_COMBINED,
    LOG_PROFILE_NONE,
    Settings,
    get_settings,
)
from company_api.core.database import close_mongo_client
from company_api.schemas.common import HealthResponse

_log_handler = logging.StreamHandler(sys.stdout)
_log_handler.setLevel(logging.INFO)
_log_handler.setFormatter(logging.Formatter("%(levelname)s:     %(message)s"))
_package_logger = logging.getLogger("company_api")
_package_logger.setLevel(logging.INFO)
if not _package_logger.handlers:
    _package_logger.addHandler(_log_handler)

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,PUT,POST,PATCH,DELETE",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _format_dev(request: StarletteRequest, response: Response, elapsed_ms: float) -> str:
    length = response.headers.get("content-length", "-")
    return f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.3f} ms - {length}"


def _format_combined(request: StarletteRequest, response: Response, elapsed_ms: float) -> str:
    client = request.client.host if request.client else "-"
    stamp = datetime.now(timezone.utc).strftime("%d/%b/%Y:%H:%M:%S %z")
    target = request.url.path + (f"?{request.url.query}" if request.url.query else "")
    version = request.scope.get("http_version", "1.1")
    length = response.headers.get("content-length", "-")
    referer = request.headers.get("referer", "-")
    agent = request.headers.get("user-agent", "-")
    return (
        f'{client} - - [{stamp}] "{request.method} {target} HTTP/{version}" '
        f'{response.status_code} {length} "{referer}" "{agent}"'
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request in the format picked by NODE_ENV (combined or dev)."""

    def __init__(self, app, profile: str) -> None:
        super().__init__(app)
        self.formatter = _format_combined if profile == LOG_PROFILE_COMBINED else _format_dev

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(self.formatter(request, response, elapsed_ms))
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn uncaught exceptions into a 500 envelope. Development responses carry the exception text."""

    def __init__(self, app, expose_errors: bool = False) -> None:
        super().__init__(app)
        self.expose_errors = expose_errors

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error: %s", exc)
            if self.expose_errors:
                message = str(exc) or exc.__class__.__name__
            else:
                message = "Internal server error"
            return JSONResponse(status_code=500, content={"error": message})


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """
    Permissive CORS: fixed headers on every response.
    OPTIONS (preflight) is answered immediately with 200.
    """

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


class HttpsRedirectMiddleware(BaseHTTPMiddleware):
    """Redirect to https:// unless the proxy reports X-Forwarded-Proto: https."""

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        if request.headers.get("x-forwarded-proto") == "https":
            return await call_next(request)
        host = request.headers.get("host", request.url.netloc)
        target = request.url.path + (f"?{request.url.query}" if request.url.query else "")
        return RedirectResponse(f"https://{host}{target}", status_code=302)


class CachedStaticFiles(StaticFiles):
    """StaticFiles with a fixed Cache-Control max-age for client-side caching."""

    def __init__(self, *args, max_age: int = 0, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.max_age = max_age

    def file_response(self, *args, **kwargs) -> Response:
        response = super().file_response(*args, **kwargs)
        response.headers["Cache-Control"] = f"public, max-age={self.max_age}"
        return response


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        logger.info("Starting Company Registry API (NODE_ENV=%s)", settings.environment or "-")
        logger.info("MongoDB: %s", settings.mongo_uri)
        yield
        close_mongo_client()
        logger.info("Shutting down")

    app = FastAPI(
        title="Company Registry API",
        version="1.0.0",
        description="CRUD API for Company documents stored in MongoDB.",
        lifespan=lifespan,
    )

    # Middleware runs outermost-last-added: logging, errors, gzip, CORS, HTTPS redirect.
    if settings.force_https:
        app.add_middleware(HttpsRedirectMiddleware)
    app.add_middleware(CorsHeadersMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1024, compresslevel=7)
    app.add_middleware(ErrorHandlerMiddleware, expose_errors=settings.is_development)
    if settings.request_log_profile != LOG_PROFILE_NONE:
        app.add_middleware(RequestLoggingMiddleware, profile=settings.request_log_profile)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", response_model=HealthResponse)
    def health():
        return {"status": "healthy"}

    # Frontend bundle last so API routes take precedence.
    if settings.static_dir.is_dir():
        app.mount(
            "/",
            CachedStaticFiles(directory=settings.static_dir, html=True, max_age=settings.static_max_age),
            name="frontend",
        )
    else:
        logger.warning("Static directory %s not found; frontend not served", settings.static_dir)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("company_api.main:app", host="0.0.0.0", port=get_settings().port)
