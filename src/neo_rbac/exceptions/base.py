"""
Base exception classes for the RBAC service.

Every domain error carries a message, a machine readable code, an HTTP
status code and optional details. The API layer renders them through a
single exception handler registry.
"""
from typing import Any, Dict, Optional


class NeoException(Exception):
    """Base exception for all RBAC errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(NeoException):
    """Raised when input validation fails."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)


class BadRequestError(NeoException):
    """Raised when a request cannot be fulfilled as issued."""

    status_code = 400


class UnauthorizedError(NeoException):
    """Raised when authentication fails."""

    status_code = 401

    def __init__(self, message: str = "Authentication required", **kwargs):
        super().__init__(message, **kwargs)


class ForbiddenError(NeoException):
    """Raised when the principal lacks the permissions a route requires."""

    status_code = 403

    def __init__(
        self,
        message: str = "Access denied",
        required_permissions: Optional[list] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if required_permissions:
            self.details["required_permissions"] = list(required_permissions)


class NotFoundError(NeoException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(
        self,
        message: Optional[str] = None,
        resource: Optional[str] = None,
        identifier: Optional[Any] = None,
        **kwargs
    ):
        if message is None:
            if resource and identifier is not None:
                message = f"{resource} with ID {identifier} not found"
            elif resource:
                message = f"{resource} not found"
            else:
                message = "Resource not found"
        super().__init__(message, **kwargs)
        if resource:
            self.details["resource"] = resource
        if identifier is not None:
            self.details["identifier"] = str(identifier)


class ConflictError(NeoException):
    """Raised when an operation would violate a uniqueness rule."""

    status_code = 409

    def __init__(
        self,
        message: str = "Resource conflict",
        conflicting_field: Optional[str] = None,
        conflicting_value: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if conflicting_field:
            self.details["conflicting_field"] = conflicting_field
        if conflicting_value is not None:
            self.details["conflicting_value"] = str(conflicting_value)


class DatabaseError(NeoException):
    """Raised when the store fails or times out."""

    status_code = 500

    def __init__(self, message: str = "Database operation failed", **kwargs):
        super().__init__(message, **kwargs)
