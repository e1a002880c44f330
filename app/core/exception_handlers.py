"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses with the shared error body
{"error": CODE, "message": text, "details": {...}}. Internal detail of
unexpected errors is never forwarded to clients.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.messages import translate
from app.domain.exceptions import IdentityException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INVALID_CODE": 400,
    "PHONE_VERIFICATION_FAILED": 400,
    "AUTHENTICATION_ERROR": 401,
    "INCORRECT_PIN": 401,
    "PERMISSION_DENIED": 403,
    "PHONE_MISMATCH": 403,
    "PIN_REQUIRED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "OWNER_ALREADY_EXISTS": 409,
    "TRANSFER_ALREADY_ACTIVE": 409,
    "PHONE_ALREADY_REGISTERED": 409,
    "TRANSFER_NOT_ACTIVE": 409,
    "DUPLICATE_VALUE": 409,
    "PIN_LOCKED_OUT": 423,
    "UPSTREAM_UNAVAILABLE": 503,
}

_HTTP_STATUS_CODES: dict[int, str] = {
    401: "AUTHENTICATION_ERROR",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    429: "RATE_LIMITED",
}


def status_for(exc: IdentityException) -> int:
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _identity_exception_handler(request: Request, exc: IdentityException) -> JSONResponse:
    """Return JSON from IdentityException.to_dict() with the mapped status code."""
    status = status_for(exc)
    if status >= 500:
        logger.warning("Request failed upstream: %s", exc.details)
    headers = {"WWW-Authenticate": "Bearer"} if exc.error_code == "AUTHENTICATION_ERROR" else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 naming the offending fields; submitted values are not echoed back."""
    fields = sorted({".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()})
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": translate("request_invalid"),
            "details": {"fields": [f for f in fields if f]},
        },
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": _HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR"),
            "message": exc.detail,
            "details": {},
        },
        headers=getattr(exc, "headers", None),
    )


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit hit on %s (%s)", request.url.path, exc.detail)
    return JSONResponse(
        status_code=429,
        content={
            "error": "RATE_LIMITED",
            "message": translate("too_many_attempts"),
            "details": {"limit": str(exc.detail)},
        },
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500 with a generic message; the exception is logged with its traceback."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": translate("try_again"), "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: IdentityException (and
    subclasses), RequestValidationError, RateLimitExceeded,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(IdentityException, _identity_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
