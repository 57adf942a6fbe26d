"""
Exception classes for the Todo Service.

Services raise these; the exception handlers registered in main.py turn
them into HTTP responses.
"""
from typing import Any, Dict, Optional


class TodoServiceError(Exception):
    """Base exception for all Todo Service errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "status": "error",
            "message": self.message,
        }


class ValidationError(TodoServiceError):
    """A field failed validation."""

    def __init__(self, field: str, message: str):
        super().__init__(message, code="VALIDATION_ERROR", details={"field": field})
        self.field = field

    @property
    def errors(self) -> Dict[str, str]:
        return {self.field: self.message}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "message": "Validation failed",
            "errors": self.errors,
        }


class DuplicateUsernameError(TodoServiceError):
    def __init__(self, username: str):
        super().__init__(
            "Username is already taken",
            code="DUPLICATE_USERNAME",
            details={"username": username},
        )


class DuplicateEmailError(TodoServiceError):
    def __init__(self, email: str):
        super().__init__(
            "Email is already in use",
            code="DUPLICATE_EMAIL",
            details={"email": email},
        )


class InvalidCredentialsError(TodoServiceError):
    """Login failed. Never says whether the username or the password was wrong."""

    def __init__(self):
        super().__init__("Invalid username or password", code="INVALID_CREDENTIALS")


class NotFoundError(TodoServiceError):
    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            f"{resource} not found with ID: {resource_id}",
            code="NOT_FOUND",
            details={"resource_id": str(resource_id)},
        )
        self.resource_id = resource_id


class AccessDeniedError(TodoServiceError):
    def __init__(self, message: str = "You do not have permission to access this task"):
        super().__init__(message, code="ACCESS_DENIED")


class InvalidTokenError(TodoServiceError):
    """Token failed verification. The specific cause is only logged."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_TOKEN")


class UnauthenticatedError(TodoServiceError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHENTICATED")
