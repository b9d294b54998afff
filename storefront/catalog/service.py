"""Catalog service for product discovery.

High-level service that combines identifier resolution, seller
visibility and repository queries into product listings and
product detail views.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.geo import GeoPoint, RangeService, SellerDistanceRangeService, parse_point
from storefront.catalog.models import Product, Seller
from storefront.catalog.query import (
    PaginationParams,
    ProductCriteria,
    page_count,
    parse_number,
)
from storefront.catalog.repository import ProductRepository, SellerRepository
from storefront.catalog.resolver import EntityType, IdentifierResolver, canonical_id
from storefront.catalog.visibility import (
    GeoVisibilityFilter,
    VisibleSellers,
    is_global_seller,
    listing_seller_constraint,
    similar_products_seller_constraint,
)
from storefront.domain.exceptions import InvalidProductIdError, ProductNotFoundError
from storefront.infrastructure.config import settings

T = TypeVar("T")

logger = structlog.get_logger()


@dataclass
class ListingParams:
    """Raw listing request parameters, as received from the query string.

    Attributes:
        category: Category id, slug or name.
        subcategory: Subcategory id, slug or name.
        search: Free text search.
        page: Page number (1-indexed).
        limit: Items per page.
        sort: Sort key (price_asc, price_desc, discount, popular).
        min_price: Inclusive minimum price.
        max_price: Inclusive maximum price.
        brand: Brand id.
        min_discount: Inclusive minimum discount percentage.
        latitude: Customer latitude.
        longitude: Customer longitude.
    """

    category: str | None = None
    subcategory: str | None = None
    search: str | None = None
    page: str | int | None = None
    limit: str | int | None = None
    sort: str | None = None
    min_price: str | float | None = None
    max_price: str | float | None = None
    brand: str | None = None
    min_discount: str | float | None = None
    latitude: str | float | None = None
    longitude: str | float | None = None


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: List of items.
        total: Total count across all pages.
        page: Current page.
        limit: Items per page.
    """

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        """Calculate total pages."""
        return page_count(self.total, self.limit)


@dataclass
class ProductPage(PaginatedResult[Product]):
    """A page of products plus names of the subcategories they reference."""

    subcategory_names: dict[str, str] = field(default_factory=dict)


@dataclass
class ProductDetail:
    """A product with its availability and similar products.

    Attributes:
        product: The product, with category, brand and seller loaded.
        subcategory_name: Name of the product's subcategory, if any.
        is_available_at_location: Whether the seller delivers to the customer.
        similar_products: Products from the same category, card columns only.
    """

    product: Product
    subcategory_name: str | None
    is_available_at_location: bool
    similar_products: list[Product] = field(default_factory=list)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def is_available_at_location(
    seller: Seller | None,
    point: GeoPoint | None,
    visible: VisibleSellers | None,
) -> bool:
    """Decide whether a product's seller serves the customer's location.

    Global sellers are always available, and so is everything when no
    usable location was supplied. Otherwise the seller must have a
    location on record and be within range of the customer.
    """
    if is_global_seller(seller):
        return True
    if point is None or visible is None:
        return True
    if seller is not None and seller.has_location:
        return seller.id in visible.nearby
    return False


class CatalogService:
    """Service for product discovery.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session)

            page = await service.list_products(
                ListingParams(category="grocery-and-staples", sort="price_asc"),
            )
            detail = await service.get_product_detail(
                product_id, latitude="19.07", longitude="72.87"
            )
    """

    def __init__(
        self,
        session: AsyncSession,
        range_service: RangeService | None = None,
        sellers: SellerRepository | None = None,
    ) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
            range_service: Seller range lookup (defaults to a distance scan).
            sellers: Seller repository (defaults to one on the session).
        """
        self.session = session
        self.products = ProductRepository(session)
        self.resolver = IdentifierResolver(session)
        self.visibility = GeoVisibilityFilter(
            range_service
            or SellerDistanceRangeService(
                session, default_radius_km=settings.default_service_radius_km
            ),
            sellers or SellerRepository(session),
        )

    async def build_criteria(self, params: ListingParams) -> ProductCriteria:
        """Compose listing criteria from raw request parameters.

        Unresolvable category or subcategory values and unparseable
        numbers leave the corresponding filter out.

        Args:
            params: Raw listing parameters.

        Returns:
            Criteria including the base catalog constraints.
        """
        brand = _clean(params.brand)
        criteria = ProductCriteria(
            brand_id=(canonical_id(brand) or brand) if brand else None,
            min_price=parse_number(params.min_price),
            max_price=parse_number(params.max_price),
            min_discount=parse_number(params.min_discount),
            search=_clean(params.search),
        )

        point = parse_point(params.latitude, params.longitude)
        if point is None:
            logger.info("Location missing, listing products from all sellers")
        else:
            visible = await self.visibility.visible_sellers(point)
            criteria.seller_ids = listing_seller_constraint(visible)
            if criteria.seller_ids is None:
                logger.info(
                    "No sellers visible at location, listing products from all sellers",
                    latitude=point.latitude,
                    longitude=point.longitude,
                )

        category = _clean(params.category)
        if category:
            criteria.category_id = await self.resolver.resolve(EntityType.CATEGORY, category)

        subcategory = _clean(params.subcategory)
        if subcategory:
            criteria.subcategory_id = await self.resolver.resolve_subcategory(subcategory)

        return criteria

    async def list_products(self, params: ListingParams) -> ProductPage:
        """List products with filters, sorting and pagination.

        Args:
            params: Raw listing parameters.

        Returns:
            A page of products with the total across all pages.
        """
        pagination = PaginationParams.from_raw(
            page=params.page,
            limit=params.limit,
            sort=params.sort,
            default_limit=settings.default_page_limit,
            max_limit=settings.max_page_limit,
        )
        criteria = await self.build_criteria(params)

        products = await self.products.find_all(criteria, pagination)
        total = await self.products.count(criteria)
        subcategory_names = await self.products.get_subcategory_names(
            p.subcategory_id for p in products
        )

        return ProductPage(
            items=list(products),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            subcategory_names=subcategory_names,
        )

    async def get_product_detail(
        self,
        product_id: str,
        latitude: str | float | None = None,
        longitude: str | float | None = None,
    ) -> ProductDetail:
        """Get a product with availability and similar products.

        Args:
            product_id: Canonical product id.
            latitude: Customer latitude.
            longitude: Customer longitude.

        Returns:
            Product detail.

        Raises:
            InvalidProductIdError: If the id is not a canonical id.
            ProductNotFoundError: If no active, published product has the id.
        """
        stored_id = canonical_id(product_id)
        if stored_id is None:
            raise InvalidProductIdError(product_id)

        product = await self.products.get_active_by_id(stored_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        point = parse_point(latitude, longitude)
        visible = await self.visibility.visible_sellers(point)
        available = is_available_at_location(product.seller, point, visible)

        similar_criteria = ProductCriteria(
            category_id=product.category_id,
            exclude_product_id=product.id,
            seller_ids=similar_products_seller_constraint(visible),
        )
        similar = await self.products.find_cards(
            similar_criteria, limit=settings.similar_products_limit
        )

        subcategory_name = None
        if product.subcategory_id:
            names = await self.products.get_subcategory_names([product.subcategory_id])
            subcategory_name = names.get(product.subcategory_id)

        logger.debug(
            "Product detail composed",
            product_id=product.id,
            is_available_at_location=available,
            similar_count=len(similar),
        )

        return ProductDetail(
            product=product,
            subcategory_name=subcategory_name,
            is_available_at_location=available,
            similar_products=list(similar),
        )
