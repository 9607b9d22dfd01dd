"""
FastAPI application entry point for the Quotely backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quotely.config import get_settings
from quotely.errors import (
    AlreadyFavorited,
    DashboardUnavailable,
    InvalidRequest,
    NotFound,
    QuotelyError,
)
from quotely.routes import router

logger = logging.getLogger(__name__)


def _envelope(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if message:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _envelope(404, "Not found", f"Route {request.url.path} not found")
    return _envelope(exc.status_code, str(exc.detail))


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    return _envelope(400, "Invalid request", problems)


async def _already_favorited(request: Request, exc: AlreadyFavorited) -> JSONResponse:
    return _envelope(400, "Already favorited", "This quote is already in your favorites")


async def _not_found(request: Request, exc: NotFound) -> JSONResponse:
    return _envelope(404, "Not found", str(exc))


async def _invalid_request(request: Request, exc: InvalidRequest) -> JSONResponse:
    return _envelope(400, "Invalid request", str(exc))


async def _dashboard_unavailable(
    request: Request, exc: DashboardUnavailable
) -> JSONResponse:
    return _envelope(
        500,
        "Failed to fetch dashboard stats",
        "Unavailable counts: " + ", ".join(exc.failed),
    )


async def _application_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _envelope(500, "Internal server error", "An unexpected error occurred")


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="Quotely Backend (FastAPI)", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.cors_origin.split(",")],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-User-Id"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(AlreadyFavorited, _already_favorited)
    app.add_exception_handler(NotFound, _not_found)
    app.add_exception_handler(InvalidRequest, _invalid_request)
    app.add_exception_handler(DashboardUnavailable, _dashboard_unavailable)
    app.add_exception_handler(QuotelyError, _application_error)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
