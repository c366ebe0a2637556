# ruff: noqa: D107
"""Base exception classes."""

from typing import Any

from fastapi import HTTPException


class BaseAppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
        requires_auth: bool = False,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.requires_auth = requires_auth

        super().__init__(
            status_code=status_code,
            detail={
                "message": message,
                "error_code": error_code,
                "details": self.details,
                "requires_auth": requires_auth,
            },
        )


class InternalServerError(BaseAppException):
    """Generic 500; never carries the underlying error text."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message=message, status_code=500, error_code="INTERNAL_ERROR")
