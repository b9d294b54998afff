"""API schemas for the storefront catalog API.

Pydantic models for response serialization. JSON keys are camelCase.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model emitting camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(ApiModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    success: bool = Field(default=False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message")
    error: str = Field(..., description="Machine-readable error code")
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class PaginationSchema(ApiModel):
    """Pagination block of a listing."""

    page: int = Field(..., description="Current page number (1-based)")
    limit: int = Field(..., description="Items per page")
    total: int = Field(..., description="Total number of matching products")
    pages: int = Field(..., description="Total number of pages")


# ============================================================================
# Reference Schemas
# ============================================================================


class NamedRefSchema(ApiModel):
    """A related record reduced to its id and name."""

    id: str = Field(..., description="Canonical identifier")
    name: str = Field(..., description="Display name")


class CategoryRefSchema(NamedRefSchema):
    """Category of a product."""

    icon: str | None = Field(default=None, description="Category icon URL")
    image: str | None = Field(default=None, description="Category image URL")


class SellerRefSchema(ApiModel):
    """Seller of a product."""

    id: str = Field(..., description="Seller identifier")
    store_name: str = Field(..., description="Store name")


class GeoLocationSchema(ApiModel):
    """A coordinate."""

    latitude: float
    longitude: float


class SellerDetailSchema(SellerRefSchema):
    """Seller of a product, as shown on the product page."""

    city: str | None = Field(default=None, description="Store city")
    address: str | None = Field(default=None, description="Store address")
    fssai_lic_no: str | None = Field(default=None, description="Food safety licence number")
    location: GeoLocationSchema | None = Field(
        default=None, description="Store location, when on record"
    )
    service_radius_km: float | None = Field(default=None, description="Delivery radius")


# ============================================================================
# Product Schemas
# ============================================================================


class ProductCardSchema(ApiModel):
    """Compact product card."""

    id: str = Field(..., description="Canonical product identifier")
    product_name: str = Field(..., description="Product name")
    price: float = Field(..., description="Selling price")
    mrp: float | None = Field(default=None, description="Maximum retail price")
    discount: float = Field(default=0, description="Discount percentage")
    pack: str | None = Field(default=None, description="Pack size")
    main_image: str | None = Field(default=None, description="Main image URL")
    variations: list[dict[str, Any]] | None = Field(
        default=None, description="Product variations"
    )
    rating: float = Field(default=0, description="Average rating")
    reviews_count: int = Field(default=0, description="Number of reviews")


class ProductSchema(ProductCardSchema):
    """Product with related records populated."""

    description: str | None = Field(default=None, description="Product description")
    tags: str | None = Field(default=None, description="Search tags")
    status: str = Field(..., description="Lifecycle status")
    publish: bool = Field(..., description="Whether the product is published")
    is_shop_by_store_only: bool | None = Field(
        default=None, description="Restricted to the seller's store page"
    )
    popular: bool = Field(default=False, description="Popular flag")
    deal_of_day: bool = Field(default=False, description="Deal of the day flag")
    category: CategoryRefSchema | None = Field(default=None, description="Category")
    subcategory: NamedRefSchema | None = Field(default=None, description="Subcategory")
    brand: NamedRefSchema | None = Field(default=None, description="Brand")
    seller: SellerRefSchema | None = Field(default=None, description="Seller")
    created_at: datetime = Field(..., description="When the product was created")
    updated_at: datetime = Field(..., description="When the product was last updated")


class ProductDetailSchema(ProductSchema):
    """Product page payload."""

    seller: SellerDetailSchema | None = Field(default=None, description="Seller")
    similar_products: list[ProductCardSchema] = Field(
        default_factory=list, description="Up to six products from the same category"
    )
    is_available_at_location: bool = Field(
        ..., description="Whether the seller delivers to the supplied location"
    )


class ProductListResponse(ApiModel):
    """Paginated product listing."""

    success: bool = Field(default=True)
    data: list[ProductSchema] = Field(..., description="Products on this page")
    pagination: PaginationSchema


class ProductDetailResponse(ApiModel):
    """Single product with availability and similar products."""

    success: bool = Field(default=True)
    data: ProductDetailSchema
