"""Translate service errors into JSON responses; hide details of unexpected failures."""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import STATUS_BY_KIND, ErrorKind, ServiceError, ValidationError

logger = logging.getLogger(__name__)


def _body(code: str, message: str, status_code: int, details: object = None) -> dict:
    error: dict = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {
        "success": False,
        "detail": message,
        "error": error,
        "statusCode": status_code,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(exc.kind.value, exc.message, exc.status_code, exc.details),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    status_code = STATUS_BY_KIND[ErrorKind.VALIDATION]
    return JSONResponse(
        status_code=status_code,
        content=_body(
            ErrorKind.VALIDATION.value,
            ValidationError.default_message,
            status_code,
            jsonable_encoder(exc.errors()),
        ),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=_body("INTERNAL_ERROR", "An unexpected error occurred", 500),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
