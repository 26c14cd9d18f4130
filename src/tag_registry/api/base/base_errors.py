"""Base error handling module."""

from datetime import datetime
from typing import Optional, Dict, Any

from fastapi import HTTPException, status


# Common status codes
SERVICE_ERROR = status.HTTP_503_SERVICE_UNAVAILABLE
NOT_IMPLEMENTED = status.HTTP_501_NOT_IMPLEMENTED
CONFLICT = status.HTTP_409_CONFLICT
NOT_FOUND = status.HTTP_404_NOT_FOUND
VALIDATION_ERROR = status.HTTP_422_UNPROCESSABLE_ENTITY


def create_error(
    message: str,
    status_code: int,
    context: Optional[Dict[str, Any]] = None,
    cause: Optional[Exception] = None
) -> HTTPException:
    """Create HTTP exception with consistent format.

    Args:
        message: Error message
        status_code: HTTP status code
        context: Optional error context
        cause: Optional cause exception; a ServiceError contributes its context

    Returns:
        HTTPException with formatted detail
    """
    detail = {
        "message": message,
        "timestamp": datetime.now().isoformat(),
        "context": dict(context or {})
    }

    if cause:
        detail["context"].update(getattr(cause, "context", None) or {})
        detail["context"]["error"] = str(cause)

    error = HTTPException(
        status_code=status_code,
        detail=detail
    )

    if cause:
        error.__cause__ = cause

    return error
