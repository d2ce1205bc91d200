"""Lumina exceptions.

The catalog itself reports not-found conditions through return values.
These exceptions cover the places where a caller asks for a hard failure:
single-product reads and opt-in draft validation.
"""

from typing import Any


class LuminaError(Exception):
    """Base class for all Lumina exceptions.

    All errors raised by the service inherit from this class so the
    HTTP layer can map them to a consistent error envelope.
    """

    error_code: str = "LUMINA_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ProductNotFoundError(LuminaError):
    """Raised when a product lookup by ID finds nothing."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID that was looked up.
        """
        super().__init__(
            f"Product not found: {product_id}",
            details={"product_id": product_id},
        )


class ProductValidationError(LuminaError):
    """Raised by strict validation when a draft breaks a catalog invariant."""

    error_code = "PRODUCT_INVALID"

    def __init__(self, field: str, value: Any, reason: str) -> None:
        """Initialize product validation error.

        Args:
            field: Name of the offending field.
            value: Rejected value.
            reason: Why the value was rejected.
        """
        super().__init__(
            f"Invalid {field}: {reason}",
            details={"field": field, "value": value, "reason": reason},
        )
