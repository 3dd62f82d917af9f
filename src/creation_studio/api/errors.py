"""Centralized JSON error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from creation_studio.errors import AppError, ServiceDisabledError, ValidationError

logger = logging.getLogger(__name__)


def _json_error(code: str, detail: str, status: int) -> JSONResponse:
    return JSONResponse({"error": code, "detail": detail}, status_code=status)


def validation_message(errors: list[dict[str, object]]) -> str:
    """Describe the first request validation failure in one sentence."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [
        str(part) for part in first.get("loc", ()) if not isinstance(part, int)
    ]
    field = location[-1] if location else "request"
    if first.get("type") == "missing":
        return f"Missing required field: {field}"
    return f"Invalid value for {field}: {first.get('msg', 'invalid')}"


def register_error_handlers(app: FastAPI) -> None:
    """Register error handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                extra={"path": request.url.path, "error_type": type(exc).__name__},
            )
        payload: dict[str, object] = {"error": exc.message}
        if isinstance(exc, ServiceDisabledError):
            payload["disabled"] = True
        return JSONResponse(payload, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationError(validation_message(exc.errors()))
        return await app_error(request, error)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 404:
            return _json_error("not_found", "Resource not found.", 404)
        return JSONResponse(
            {"error": exc.detail}, status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(Exception)
    async def internal(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return _json_error("server_error", "A server error occurred.", 500)
