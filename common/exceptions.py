"""
E-mart - Custom Exceptions
===========================
Business-level exceptions that can be caught and converted to HTTP responses.
"""

from fastapi import status


class EmartError(Exception):
    """Base exception for all business logic errors."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"

    def __init__(self, message: str = "Unexpected error."):
        self.message = message
        super().__init__(self.message)


class NotFoundError(EmartError):
    """Raised when a requested resource doesn't exist."""
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class InsufficientStockError(EmartError):
    """Raised when the requested quantity exceeds available stock."""
    status_code = status.HTTP_409_CONFLICT
    code = "insufficient_stock"

    def __init__(self, product_name: str = "", requested: int = 0, available: int = 0):
        self.requested = requested
        self.available = available
        if product_name:
            msg = f"Not enough stock for {product_name} (requested {requested}, available {available})."
        else:
            msg = "Not enough stock available."
        super().__init__(msg)


class UnauthenticatedError(EmartError):
    """Raised when an operation has no user context."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"

    def __init__(self, message: str = "login_required"):
        super().__init__(message)


class StorageConflictError(EmartError):
    """Raised when a transaction keeps losing to concurrent writers. Safe to retry."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "storage_conflict"

    def __init__(self, message: str = "The cart was modified concurrently, please retry."):
        super().__init__(message)


class InvalidArgumentError(EmartError):
    """Raised for malformed input such as a non-positive quantity."""
    status_code = 422
    code = "invalid_argument"


class DuplicateError(EmartError):
    """Raised for unique constraint violations at the business level."""
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate"
