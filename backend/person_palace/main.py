"""
Person Palace - FastAPI application.
CORS, API versioning (/api/v1), health check, error handling.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from person_palace.api.v1.routes import api_router
from person_palace.core.config import get_settings

# Load settings once at import so CORS list and log level are available to middleware
_settings = get_settings()

# Package-wide handler so request and backend logs appear in deploy logs
_log_handler = logging.StreamHandler(sys.stdout)
_log_handler.setLevel(_settings.LOG_LEVEL)
_log_handler.setFormatter(logging.Formatter("%(levelname)s:     %(message)s"))
_package_logger = logging.getLogger("person_palace")
_package_logger.setLevel(_settings.LOG_LEVEL)
if not _package_logger.handlers:
    _package_logger.addHandler(_log_handler)
logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request (method + path) with its response status."""

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response


class PreflightCorsMiddleware(BaseHTTPMiddleware):
    """
    Respond to OPTIONS (preflight) immediately with 200 and CORS headers,
    before any other middleware or routing.
    """

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        if request.method != "OPTIONS":
            return await call_next(request)
        origin = request.headers.get("origin", "").strip()
        allowed = _settings.cors_origins_list
        allow_origin = origin if origin in allowed else (allowed[0] if allowed else "*")
        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": allow_origin,
                "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
                "Access-Control-Allow-Headers": "*",
                "Access-Control-Allow-Credentials": "true",
                "Access-Control-Max-Age": "86400",
            },
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    logger.info("Starting Person Palace API")
    logger.info("PERSONS_API_ROOT=%s", _settings.persons_api_root)
    logger.info("CORS_ORIGINS=%s", _settings.cors_origins)
    if _settings.ENVIRONMENT == "production":
        _settings.validate_for_production()
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Person Palace API",
    version="1.0.0",
    description="Persons CRUD in front of the persons REST backend.",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
# CORS: preflight first (runs first), then general CORS for all responses
app.add_middleware(PreflightCorsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


# Error handling middleware
@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Root and health (outside versioning)
@app.get("/")
def root():
    return {
        "message": "Person Palace API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "persons": "/api/v1/persons",
        },
    }


@app.get("/health")
def health():
    return {"status": "healthy"}


# API v1
app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run("person_palace.main:app", host="0.0.0.0", port=port)
