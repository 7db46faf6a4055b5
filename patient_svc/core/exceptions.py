"""
Shared exception classes and error handling utilities for Patient Records Service.

This module provides:
- Custom exception hierarchy for domain-specific errors
- The error envelope every failed request is rendered as
- Exception handlers for FastAPI integration

Every domain error is reported to clients as HTTP 400. Only the message
differs between categories; the wire format does not distinguish them.

Usage:
    from core.exceptions import PatientNotFoundError, ValidationError

    # In service layer - raise domain exceptions
    raise ValidationError("invalid id")

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

ERROR_STATUS = "Error"


# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================

class PatientServiceError(Exception):
    """
    Base exception for all Patient Records Service domain errors.

    All custom exceptions inherit from this class and carry the HTTP status
    code and the human-readable message used in the error envelope.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context, logged but never sent to clients.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the error envelope."""
        return error_envelope(self.status_code, self.detail)


# =============================================================================
# DOMAIN EXCEPTIONS
# =============================================================================

class ValidationError(PatientServiceError):
    """Raised when an id or name fails validation before reaching storage."""

    detail = "validation failed"


class PatientNotFoundError(PatientServiceError):
    """Raised when no active (non-deleted) patient exists for an id."""

    detail = "patient not found"

    def __init__(self, patient_id: Optional[int] = None, **kwargs: Any):
        detail = (
            f"invalid id: no active patient with id {patient_id}"
            if patient_id is not None else self.detail
        )
        super().__init__(detail=detail, patient_id=patient_id, **kwargs)


class PersistenceError(PatientServiceError):
    """Raised when the underlying database operation fails."""

    detail = "database operation failed"

    def __init__(self, operation: Optional[str] = None, error: Optional[str] = None, **kwargs: Any):
        if operation and error:
            detail = f"database error during {operation}: {error}"
        elif operation:
            detail = f"database error during {operation}"
        else:
            detail = self.detail
        super().__init__(detail=detail, operation=operation, **kwargs)


class DecodeError(PatientServiceError):
    """Raised when a request body cannot be decoded into a patient."""

    detail = "invalid request body"


# =============================================================================
# ENVELOPE
# =============================================================================

def error_envelope(code: int, message: str) -> Dict[str, Any]:
    """Build the error envelope: {code, status, Message}."""
    return {"code": code, "status": ERROR_STATUS, "Message": message}


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Flatten FastAPI's request validation errors into one message."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or DecodeError.detail


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def patient_service_exception_handler(
    request: Request,
    exc: PatientServiceError
) -> JSONResponse:
    """
    Handle PatientServiceError exceptions and return the error envelope.
    """
    logger.warning(
        f"{type(exc).__name__}: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Render body decoding failures (malformed JSON, wrong field types) as DecodeError.
    """
    decode_error = DecodeError(_describe_validation_error(exc))
    return await patient_service_exception_handler(request, decode_error)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.

    Example:
        app = FastAPI()
        setup_exception_handlers(app)
    """
    app.add_exception_handler(PatientServiceError, patient_service_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
