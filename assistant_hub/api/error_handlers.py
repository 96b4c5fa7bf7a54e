"""
API exception handlers.

Maps the AssistantHubError hierarchy to HTTP status codes and the common
error payload {"success": false, "error": {"kind", "message", "details"}}.

Dependencies: fastapi, assistant_hub.core.exceptions, assistant_hub.models.common
System role: Error translation for the HTTP transport
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from assistant_hub.core.exceptions import (
    AccessDenied,
    AssistantHubError,
    AuthenticationRequired,
    FileTooLarge,
    IncompleteStream,
    IndexingFailed,
    InvalidInput,
    NotFound,
    StorageFailure,
    UpstreamFailure,
)
from assistant_hub.models.common import ErrorBody, ErrorResponse

logger = logging.getLogger(__name__)

# Most specific first
STATUS_BY_EXCEPTION: list[tuple[type[AssistantHubError], int]] = [
    (FileTooLarge, 413),
    (InvalidInput, 400),
    (AuthenticationRequired, 401),
    (AccessDenied, 403),
    (NotFound, 404),
    (StorageFailure, 500),
    (IndexingFailed, 502),
    (UpstreamFailure, 502),
    (IncompleteStream, 502),
]


def status_for(exc: AssistantHubError) -> int:
    """HTTP status for an application error."""
    for exc_type, status in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status
    return 500


def error_response(status_code: int, kind: str, message: str, details: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(kind=kind, message=message, details=details or {}))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def handle_app_error(request: Request, exc: AssistantHubError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.info
    log(
        f"{request.method} {request.url.path} - {exc.kind}",
        extra={"kind": exc.kind, "status_code": status_code, "error": exc.message},
    )
    return error_response(status_code, exc.kind, exc.message, exc.details)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        422,
        InvalidInput.kind,
        "Malformed request",
        {"errors": jsonable_encoder(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the application's exception handlers."""
    app.add_exception_handler(AssistantHubError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
