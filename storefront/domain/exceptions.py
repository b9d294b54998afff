"""Domain exceptions.

Errors raised by the catalog services for requests that cannot be
served. The API layer translates them into HTTP responses.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the API layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Product Errors
# ============================================================================


class ProductError(DomainError):
    """Base class for product-related errors."""

    pass


class InvalidProductIdError(ProductError):
    """Raised when a product id is not in canonical id format."""

    def __init__(self, product_id: str) -> None:
        """Initialize invalid product id error.

        Args:
            product_id: The malformed id.
        """
        super().__init__(
            "Invalid product ID",
            details={"product_id": product_id},
        )


class ProductNotFoundError(ProductError):
    """Raised when no active, published product has the requested id."""

    def __init__(self, product_id: str) -> None:
        """Initialize product not found error.

        Args:
            product_id: The requested id.
        """
        super().__init__(
            "Product not found or unavailable",
            details={"product_id": product_id},
        )
