"""
Error taxonomy and the handlers that turn errors into the response envelope.

Every failure response has the shape
`{"error": true, "message": ..., "detail"?: ..., "missing_fields"?: {...}}`.
"""

import logging
from typing import Dict, Optional
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        detail: Optional[str] = None,
        missing_fields: Optional[Dict[str, bool]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.missing_fields = missing_fields


class ValidationError(AppError):
    """A required field is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthError(AppError):
    """Unknown login key or wrong password."""

    status_code = status.HTTP_401_UNAUTHORIZED


class StorageError(AppError):
    """An uploaded file could not be written."""


class DatabaseError(AppError):
    """A connection could not be acquired or a statement failed."""


class CredentialError(AppError):
    """Hashing or verifying a password failed."""


def error_body(message: str, detail=None, missing_fields=None) -> dict:
    body = {"error": True, "message": message}
    if detail is not None:
        body["detail"] = detail
    if missing_fields is not None:
        body["missing_fields"] = missing_fields
    return body


async def handle_app_errors(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.detail, exc.missing_fields),
    )


async def handle_request_validation_errors(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Invalid request", jsonable_encoder(exc.errors())),
    )


async def handle_database_errors(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Unhandled database error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Database error", str(exc)),
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Turn anything that escaped the handlers into a 500 envelope."""
    try:
        return await call_next(request)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error", str(exc)),
        )
