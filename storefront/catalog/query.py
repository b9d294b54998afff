"""Product query criteria, sort options and pagination.

Builds the SQL conditions shared by the listing and the similar
products query. Every criteria object carries the base catalog
constraints; the optional filters are layered on top.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement, false, func, or_

from storefront.catalog.models import ACTIVE_STATUS, Product


class SortOption(str, Enum):
    """Supported listing sort keys."""

    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    DISCOUNT = "discount"
    POPULAR = "popular"
    NEWEST = "newest"

    @classmethod
    def parse(cls, value: str | None) -> "SortOption":
        """Map a raw sort key to an option, defaulting to newest first."""
        try:
            return cls(value) if value else cls.NEWEST
        except ValueError:
            return cls.NEWEST


SORT_ORDERS: dict[SortOption, tuple[Any, ...]] = {
    SortOption.PRICE_ASC: (Product.price.asc(),),
    SortOption.PRICE_DESC: (Product.price.desc(),),
    SortOption.DISCOUNT: (Product.discount.desc(),),
    SortOption.POPULAR: (Product.popular.desc(), Product.deal_of_day.desc()),
    SortOption.NEWEST: (Product.created_at.desc(),),
}


def sort_clauses(option: SortOption) -> tuple[Any, ...]:
    """Get ORDER BY clauses for a sort option.

    The product id is appended so that equal keys page deterministically.
    """
    return SORT_ORDERS[option] + (Product.id.asc(),)


def base_conditions() -> list[ColumnElement[bool]]:
    """Conditions every browsable product satisfies.

    The shop-by-store-only exclusion matches rows where the flag is
    false as well as rows where it was never set.
    """
    return [
        Product.status == ACTIVE_STATUS,
        Product.publish.is_(True),
        or_(
            Product.is_shop_by_store_only.is_(None),
            Product.is_shop_by_store_only.is_(False),
        ),
    ]


@dataclass
class ProductCriteria:
    """Filter criteria for a product query.

    Attributes:
        category_id: Resolved category id.
        subcategory_id: Resolved subcategory id.
        brand_id: Exact brand id.
        min_price: Inclusive lower price bound.
        max_price: Inclusive upper price bound.
        min_discount: Inclusive lower discount bound.
        search: Free text; any whitespace-separated term may match.
        exclude_product_id: Product to leave out.
        seller_ids: None leaves sellers unrestricted; a set restricts to
            it, and an empty set matches nothing.
    """

    category_id: str | None = None
    subcategory_id: str | None = None
    brand_id: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_discount: float | None = None
    search: str | None = None
    exclude_product_id: str | None = None
    seller_ids: frozenset[str] | None = None

    def conditions(self) -> list[ColumnElement[bool]]:
        """Build the SQL conditions for these criteria."""
        conditions = base_conditions()

        if self.exclude_product_id is not None:
            conditions.append(Product.id != self.exclude_product_id)

        if self.seller_ids is not None:
            if self.seller_ids:
                conditions.append(Product.seller_id.in_(sorted(self.seller_ids)))
            else:
                conditions.append(false())

        if self.category_id is not None:
            conditions.append(Product.category_id == self.category_id)

        if self.subcategory_id is not None:
            conditions.append(Product.subcategory_id == self.subcategory_id)

        if self.brand_id is not None:
            conditions.append(Product.brand_id == self.brand_id)

        if self.min_price is not None:
            conditions.append(Product.price >= self.min_price)

        if self.max_price is not None:
            conditions.append(Product.price <= self.max_price)

        if self.min_discount is not None:
            conditions.append(Product.discount >= self.min_discount)

        search_condition = self._search_condition()
        if search_condition is not None:
            conditions.append(search_condition)

        return conditions

    def _search_condition(self) -> ColumnElement[bool] | None:
        terms = (self.search or "").split()
        if not terms:
            return None

        matches = []
        for term in terms:
            term = term.lower()
            matches.extend(
                [
                    func.lower(Product.product_name).contains(term, autoescape=True),
                    func.lower(func.coalesce(Product.description, "")).contains(
                        term, autoescape=True
                    ),
                    func.lower(func.coalesce(Product.tags, "")).contains(
                        term, autoescape=True
                    ),
                ]
            )
        return or_(*matches)


@dataclass
class PaginationParams:
    """Pagination parameters.

    Attributes:
        page: Page number (1-indexed).
        limit: Items per page.
        sort: Sort option.
    """

    page: int = 1
    limit: int = 20
    sort: SortOption = field(default=SortOption.NEWEST)

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.limit

    @classmethod
    def from_raw(
        cls,
        page: Any = None,
        limit: Any = None,
        sort: str | None = None,
        default_limit: int = 20,
        max_limit: int = 100,
    ) -> "PaginationParams":
        """Coerce raw query values into pagination parameters.

        Non-numeric or non-positive values fall back to the defaults and
        the limit is capped at max_limit.
        """
        return cls(
            page=_positive_int(page, 1),
            limit=min(_positive_int(limit, default_limit), max_limit),
            sort=SortOption.parse(sort),
        )


def _positive_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number >= 1 else default


def parse_number(value: Any) -> float | None:
    """Parse an optional numeric filter value.

    Returns:
        The value as a float, or None when absent or not a finite number.
    """
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def page_count(total: int, limit: int) -> int:
    """Number of pages needed for total items at limit per page."""
    return math.ceil(total / limit) if limit > 0 else 0
