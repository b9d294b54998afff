"""Domain layer - catalog errors.

Example usage:
    from storefront.domain import ProductNotFoundError

    raise ProductNotFoundError(product_id)
"""

from storefront.domain.exceptions import (
    DomainError,
    InvalidProductIdError,
    ProductError,
    ProductNotFoundError,
)

__all__ = [
    "DomainError",
    "InvalidProductIdError",
    "ProductError",
    "ProductNotFoundError",
]
