"""Translate engine errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from herald.core.errors import (
    ConflictError,
    DeliveryError,
    HeraldError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES: tuple[tuple[type[HeraldError], int], ...] = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 422),
    (DeliveryError, 500),
)


def status_for(exc: HeraldError) -> int:
    for exc_type, status_code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(HeraldError)
    async def handle_herald_error(request: Request, exc: HeraldError) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        body: dict[str, str] = {"detail": str(exc)}
        field = getattr(exc, "field", None)
        if field:
            body["field"] = field
        return JSONResponse(status_code=status_code, content=body)
