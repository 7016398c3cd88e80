"""Map domain errors to HTTP responses for every router."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.errors import (
    ExpectedVersionError,
    ForbiddenError,
    InvalidAmountError,
    InvalidTransitionError,
    NoVendorError,
    ObjectNotFoundError,
    ProteanException,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# Most specific classes first; the first match in the MRO wins
_ERROR_TABLE = {
    ObjectNotFoundError: (404, "not_found"),
    ForbiddenError: (403, "forbidden"),
    ExpectedVersionError: (409, "concurrent_modification"),
    InvalidTransitionError: (400, "invalid_transition"),
    NoVendorError: (400, "no_vendor"),
    InvalidAmountError: (400, "invalid_amount"),
    ValidationError: (400, "validation_error"),
}


def _lookup(exc: ProteanException) -> tuple[int, str]:
    for error_cls in type(exc).__mro__:
        if error_cls in _ERROR_TABLE:
            return _ERROR_TABLE[error_cls]
    return 500, "server_error"


def status_code_for(exc: ProteanException) -> int:
    return _lookup(exc)[0]


def error_kind(exc: ProteanException) -> str:
    return _lookup(exc)[1]


def error_messages(exc: ProteanException) -> dict:
    """``{field: [message]}`` for any protean error, including string-only ones."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return {field: list(errors) if isinstance(errors, list | tuple) else [str(errors)] for field, errors in messages.items()}
    if messages:
        return {"_entity": [str(messages)]}
    return {}


def register_exception_handlers(app: FastAPI) -> None:
    """Register JSON error handlers for the marketplace error taxonomy."""

    @app.exception_handler(ProteanException)
    async def handle_domain_error(request: Request, exc: ProteanException) -> JSONResponse:
        status_code, kind = _lookup(exc)
        messages = error_messages(exc)
        if isinstance(exc, InvalidAmountError):
            logger.error("Invalid monetary amount reached the API", path=request.url.path, messages=messages)
        elif status_code >= 500:
            logger.error("Unhandled domain error", path=request.url.path, error_type=type(exc).__name__, messages=messages)
            return JSONResponse(status_code=500, content={"error": "server_error", "messages": {}})
        return JSONResponse(status_code=status_code, content={"error": kind, "messages": messages})
