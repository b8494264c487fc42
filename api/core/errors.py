"""
Error taxonomy and the HTTP mapping for it.

Services raise `ServiceError` subclasses; the handlers registered by
`install_error_handlers` are the only place they turn into responses.
Client bodies are always `{"error": ...}`; internal detail stays in logs.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

DEFAULT_STORE_FAILURE_MESSAGE = "Error interno del servidor"
INVALID_REQUEST_MESSAGE = "Solicitud inválida"


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = list(fields or [])


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreFailure(ServiceError):
    pass


def store_failure_message(request: Request) -> str:
    route = request.scope.get("route")
    name = getattr(route, "name", None) or getattr(request.scope.get("endpoint"), "__name__", "")
    messages = getattr(request.app.state, "store_failure_messages", None) or {}
    return messages.get(name, DEFAULT_STORE_FAILURE_MESSAGE)


def _field_name(loc: tuple, error_type: str = "") -> str:
    # A JSON syntax error points at a character offset, not a field.
    if error_type == "json_invalid":
        return "body"
    # Drop the "body"/"path" prefix pydantic puts in front of the field name.
    parts = [str(p) for p in loc[1:]] or [str(p) for p in loc]
    return ".".join(parts)


async def _validation_failed_handler(_: Request, exc: ValidationFailed) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "fields": exc.fields},
    )


async def _not_found_handler(_: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _store_failure_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.error("store_failure method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": store_failure_message(request)},
    )


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    fields: list[str] = []
    for err in exc.errors():
        name = _field_name(tuple(err.get("loc") or ()), str(err.get("type") or ""))
        if name and name not in fields:
            fields.append(name)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": INVALID_REQUEST_MESSAGE, "fields": fields},
    )


async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths, wrong methods and other errors raised by the framework itself.
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": DEFAULT_STORE_FAILURE_MESSAGE},
    )


def install_error_handlers(app: FastAPI, store_failure_messages: dict[str, str] | None = None) -> None:
    """
    Register the error mapping. `store_failure_messages` maps route names to
    the generic 500 message shown for that route.
    """
    app.state.store_failure_messages = dict(store_failure_messages or {})
    app.add_exception_handler(ValidationFailed, _validation_failed_handler)
    app.add_exception_handler(NotFound, _not_found_handler)
    app.add_exception_handler(StoreFailure, _store_failure_handler)
    app.add_exception_handler(ServiceError, _store_failure_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
