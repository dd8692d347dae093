"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class ConfigError(AppError):
    """Raised when required configuration is missing or malformed."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message, status_code=500)


class SignatureError(AppError):
    """Raised when a webhook signature does not match the shared secret."""

    def __init__(self, message: str = "Invalid webhook signature"):
        super().__init__(message, status_code=401)


class DirectoryError(AppError):
    """
    Raised when a call to the store's customer directory fails.

    ``status_code`` is the upstream HTTP status when a response arrived,
    otherwise 502. ``detail`` holds a trimmed copy of the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message, status_code=status_code or 502)
        self.upstream_status = status_code
        self.detail = detail


def to_response(error: AppError) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps({"message": str(error), "status": "error"}),
    }
