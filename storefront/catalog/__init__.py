"""Product Discovery Engine.

Resolves category identifiers, filters sellers by customer location,
and composes product listings and product detail views.
"""

from storefront.catalog.geo import GeoPoint, RangeService, SellerDistanceRangeService, parse_point
from storefront.catalog.models import Brand, Category, Product, Seller, SubCategory
from storefront.catalog.query import PaginationParams, ProductCriteria, SortOption
from storefront.catalog.repository import ProductRepository, SellerRepository
from storefront.catalog.resolver import (
    EntityType,
    IdentifierResolver,
    canonical_id,
    is_canonical_id,
)
from storefront.catalog.service import (
    CatalogService,
    ListingParams,
    PaginatedResult,
    ProductDetail,
    ProductPage,
)
from storefront.catalog.visibility import GeoVisibilityFilter, VisibleSellers, is_global_seller

__all__ = [
    # Models
    "Brand",
    "Category",
    "Product",
    "Seller",
    "SubCategory",
    # Geo
    "GeoPoint",
    "RangeService",
    "SellerDistanceRangeService",
    "parse_point",
    # Query
    "PaginationParams",
    "ProductCriteria",
    "SortOption",
    # Repository
    "ProductRepository",
    "SellerRepository",
    # Resolver
    "EntityType",
    "IdentifierResolver",
    "canonical_id",
    "is_canonical_id",
    # Visibility
    "GeoVisibilityFilter",
    "VisibleSellers",
    "is_global_seller",
    # Service
    "CatalogService",
    "ListingParams",
    "PaginatedResult",
    "ProductDetail",
    "ProductPage",
]
