"""
HTTP error responses.

Every error body has the same shape, `{"message": ..., "code": ...}`.
Domain errors are mapped to a status code by category; anything else is
logged and answered with a generic 500.
"""

from enum import Enum

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from matchday.errors import (
    AuthenticationError,
    ConflictError,
    InvalidRequestError,
    MatchdayError,
    NotFoundError,
)

logger = structlog.get_logger(__name__)


class ResponseMessage(str, Enum):
    UNAUTHORIZED_REQUEST = "Unauthorized request."
    REQUIRED_ATTRIBUTES_MISSING = "Required attributes are missing."
    PASSWORDS_DONT_MATCH = "Passwords don't match."
    INTERNAL_SERVER_ERROR = "Internal server error."
    ENDPOINT_NOT_IMPLEMENTED = "Endpoint not implemented."
    LOGIN_SUCCESSFUL = "Login successful."


class ResponseErrorCode(str, Enum):
    UNAUTHORIZED_REQUEST = "UNAUTHORIZED_REQUEST"
    INVALID_REQUEST_BODY = "INVALID_REQUEST_BODY"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


# Checked in order; the first matching category wins
CATEGORY_STATUS: tuple[tuple[type[MatchdayError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def status_for(error: MatchdayError) -> int:
    """HTTP status code for a domain error."""
    for category, status_code in CATEGORY_STATUS:
        if isinstance(error, category):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "code": code})


def internal_error_response() -> JSONResponse:
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ResponseMessage.INTERNAL_SERVER_ERROR.value,
        ResponseErrorCode.INTERNAL_SERVER_ERROR.value,
    )


async def handle_domain_error(request: Request, exc: MatchdayError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=exc.message,
        )
        return internal_error_response()

    logger.info(
        "Request rejected",
        path=request.url.path,
        status_code=status_code,
        error_type=type(exc).__name__,
        error=exc.message,
    )
    return error_response(status_code, exc.message, exc.code)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Invalid request body", path=request.url.path, errors=exc.errors())
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        ResponseMessage.REQUIRED_ATTRIBUTES_MISSING.value,
        ResponseErrorCode.INVALID_REQUEST_BODY.value,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, error_type=type(exc).__name__)
    return internal_error_response()


def register_error_handlers(app: FastAPI) -> None:
    """Attach the error handlers to an application."""
    app.add_exception_handler(MatchdayError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
