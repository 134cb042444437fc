"""Centralized exception handlers for the reservation service."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from turfbook.services.errors import ErrorKind, ServiceResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.SYSTEM: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap_result(result: ServiceResult[T]) -> T:
    """Return the result data or raise the matching ``HTTPException``."""

    if result.ok:
        return result.data  # type: ignore[return-value]

    assert result.error is not None
    raise HTTPException(
        status_code=_STATUS_BY_KIND[result.error.kind],
        detail={"code": result.error.value, "detail": result.message},
    )


def _flatten_detail(detail: Any) -> str:
    """Convert arbitrary exception detail payloads into a string message."""
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict):
        if "detail" in detail:
            nested = detail["detail"]
            if isinstance(nested, str):
                return nested
        return "; ".join(f"{key}: {value}" for key, value in detail.items())
    if isinstance(detail, Iterable) and not isinstance(detail, (bytes, bytearray)):
        return "; ".join(_flatten_detail(item) for item in detail)
    if detail is None:
        return "An error occurred"
    return str(detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Register FastAPI exception handlers that return a normalized JSON payload."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):  # type: ignore[override]
        content: dict[str, Any] = {"detail": _flatten_detail(exc.detail)}
        if isinstance(exc.detail, dict) and "code" in exc.detail:
            content["code"] = exc.detail["code"]

        response = JSONResponse(status_code=exc.status_code, content=content)

        if exc.headers:
            for key, value in exc.headers.items():
                response.headers[key] = value

        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:  # type: ignore[override]
        messages = []
        for error in exc.errors():
            location = [str(loc) for loc in error.get("loc", []) if loc != "body"]
            message = error.get("msg", "Invalid input")
            if location:
                messages.append(f"{'.'.join(location)}: {message}")
            else:
                messages.append(message)

        detail = "; ".join(messages) if messages else "Invalid request"
        return JSONResponse(status_code=422, content={"detail": detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:  # type: ignore[override]
        logger.exception(
            "Unhandled exception while processing %s %s", request.method, request.url
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


__all__ = ["register_exception_handlers", "unwrap_result"]
