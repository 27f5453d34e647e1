"""Translation of domain errors into transport error codes."""

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import NoteNotFoundError, NotesError, ValidationError

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = "internal server error: {}"
INVALID_NOTE = "invalid note: {}"
INVALID_REQUEST = "invalid request: {}"
NOTE_NOT_FOUND = "note not found: {}"
PATTERN_EMPTY = "pattern cannot be empty"


class ErrorCode(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


HTTP_STATUS = {
    ErrorCode.INVALID_ARGUMENT: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INTERNAL: 500,
}


def classify(exc: Exception) -> tuple[ErrorCode, str]:
    """Map an exception raised below the API to a code and message."""
    if isinstance(exc, ValidationError):
        return ErrorCode.INVALID_ARGUMENT, str(exc)
    if isinstance(exc, NoteNotFoundError):
        return ErrorCode.NOT_FOUND, NOTE_NOT_FOUND.format(exc)
    return ErrorCode.INTERNAL, INTERNAL_SERVER_ERROR.format(exc)


def describe_validation(errors: list[dict[str, Any]]) -> str:
    """Flatten pydantic errors into `field: message; ...`."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
        where = ".".join(loc) or "request"
        parts.append(f"{where}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def error_response(code: ErrorCode, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_STATUS[code],
        content={"code": code.value, "message": message},
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register the handlers that turn every failure into {code, message}."""

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = list(exc.errors())
        detail = describe_validation(errors)
        in_body = any(err.get("loc", ("",))[0] == "body" for err in errors)
        template = INVALID_NOTE if in_body else INVALID_REQUEST
        return error_response(ErrorCode.INVALID_ARGUMENT, template.format(detail))

    @app.exception_handler(NotesError)
    async def _domain_error(request: Request, exc: NotesError) -> JSONResponse:
        code, message = classify(exc)
        if code is ErrorCode.INTERNAL:
            logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
        return error_response(code, message)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return error_response(ErrorCode.INTERNAL, INTERNAL_SERVER_ERROR.format(exc))
