# whisperer/core/exceptions.py
"""
Application exceptions.

Route handlers raise these and the handlers registered in main.py turn them
into `{"message": ...}` responses with the matching status code.
"""
from typing import Any, Dict, Optional


class WhispererException(Exception):
    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(WhispererException):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "UNAUTHORIZED", 401)


class NotFoundError(WhispererException):
    def __init__(self, message: str = "Not Found"):
        super().__init__(message, "NOT_FOUND", 404)


class ForbiddenAsNotFoundError(WhispererException):
    """Raised for callers who may not know the resource exists at all."""

    def __init__(self):
        super().__init__("Not Found", "NOT_FOUND", 404)


class ValidationFailedError(WhispererException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", 400, details)


class ApiKeyNotFoundError(WhispererException):
    def __init__(self, provider_name: str):
        super().__init__(
            f"{provider_name} API Key not found",
            "API_KEY_NOT_FOUND",
            500,
            {"provider": provider_name},
        )


class UpstreamProviderError(WhispererException):
    """An LLM or retrieval backend answered with an error status."""

    def __init__(self, provider_name: str, status_code: int, message: str):
        super().__init__(
            message or "An unexpected error occurred",
            "UPSTREAM_ERROR",
            status_code or 500,
            {"provider": provider_name},
        )
