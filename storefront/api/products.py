"""Customer product API endpoints.

Provides endpoints for browsing the catalog:
- GET /api/v1/customer/products - filtered, paginated listing
- GET /api/v1/customer/products/{product_id} - product detail
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.schemas import (
    CategoryRefSchema,
    ErrorResponse,
    GeoLocationSchema,
    NamedRefSchema,
    PaginationSchema,
    ProductCardSchema,
    ProductDetailResponse,
    ProductDetailSchema,
    ProductListResponse,
    ProductSchema,
    SellerDetailSchema,
    SellerRefSchema,
)
from storefront.catalog.models import Product, Seller
from storefront.catalog.service import CatalogService, ListingParams, ProductDetail
from storefront.domain.exceptions import InvalidProductIdError, ProductNotFoundError
from storefront.infrastructure.database import get_session

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/customer/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(session: Annotated[AsyncSession, Depends(get_session)]) -> CatalogService:
    """Get catalog service bound to the request session."""
    return CatalogService(session)


# ============================================================================
# Converters
# ============================================================================


def card_to_schema(product: Product) -> ProductCardSchema:
    """Convert a card-projected Product to a card schema."""
    return ProductCardSchema(
        id=product.id,
        product_name=product.product_name,
        price=product.price,
        mrp=product.mrp,
        discount=product.discount,
        pack=product.pack,
        main_image=product.main_image,
        variations=product.variations,
        rating=product.rating,
        reviews_count=product.reviews_count,
    )


def _product_fields(product: Product, subcategory_names: dict[str, str]) -> dict:
    category = product.category
    brand = product.brand
    subcategory_name = subcategory_names.get(product.subcategory_id or "")

    return {
        "id": product.id,
        "product_name": product.product_name,
        "price": product.price,
        "mrp": product.mrp,
        "discount": product.discount,
        "pack": product.pack,
        "main_image": product.main_image,
        "variations": product.variations,
        "rating": product.rating,
        "reviews_count": product.reviews_count,
        "description": product.description,
        "tags": product.tags,
        "status": product.status,
        "publish": product.publish,
        "is_shop_by_store_only": product.is_shop_by_store_only,
        "popular": product.popular,
        "deal_of_day": product.deal_of_day,
        "category": (
            CategoryRefSchema(
                id=category.id,
                name=category.name,
                icon=category.icon,
                image=category.image,
            )
            if category
            else None
        ),
        "subcategory": (
            NamedRefSchema(id=product.subcategory_id, name=subcategory_name)
            if product.subcategory_id and subcategory_name is not None
            else None
        ),
        "brand": NamedRefSchema(id=brand.id, name=brand.name) if brand else None,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


def product_to_schema(product: Product, subcategory_names: dict[str, str]) -> ProductSchema:
    """Convert a Product with loaded relations to a listing schema."""
    seller = product.seller
    return ProductSchema(
        **_product_fields(product, subcategory_names),
        seller=SellerRefSchema(id=seller.id, store_name=seller.store_name) if seller else None,
    )


def seller_to_detail_schema(seller: Seller) -> SellerDetailSchema:
    """Convert a Seller to the product page seller block."""
    return SellerDetailSchema(
        id=seller.id,
        store_name=seller.store_name,
        city=seller.city,
        address=seller.address,
        fssai_lic_no=seller.fssai_lic_no,
        location=(
            GeoLocationSchema(latitude=seller.latitude, longitude=seller.longitude)
            if seller.has_location
            else None
        ),
        service_radius_km=seller.service_radius_km,
    )


def detail_to_schema(detail: ProductDetail) -> ProductDetailSchema:
    """Convert a ProductDetail to the product page schema."""
    product = detail.product
    subcategory_names = (
        {product.subcategory_id: detail.subcategory_name}
        if product.subcategory_id and detail.subcategory_name is not None
        else {}
    )
    return ProductDetailSchema(
        **_product_fields(product, subcategory_names),
        seller=seller_to_detail_schema(product.seller) if product.seller else None,
        similar_products=[card_to_schema(p) for p in detail.similar_products],
        is_available_at_location=detail.is_available_at_location,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListResponse,
    responses={500: {"model": ErrorResponse}},
    summary="List products",
    description=(
        "List active, published products visible at the customer's location, "
        "with category, price, discount, brand and text filters."
    ),
)
async def list_products(
    service: Annotated[CatalogService, Depends(get_service)],
    category: Annotated[str | None, Query(description="Category id, slug or name")] = None,
    subcategory: Annotated[
        str | None, Query(description="Subcategory id, slug or name")
    ] = None,
    search: Annotated[str | None, Query(description="Free text search")] = None,
    page: Annotated[str | None, Query(description="Page number (1-based)")] = None,
    limit: Annotated[str | None, Query(description="Items per page")] = None,
    sort: Annotated[
        str | None, Query(description="price_asc, price_desc, discount or popular")
    ] = None,
    min_price: Annotated[str | None, Query(alias="minPrice")] = None,
    max_price: Annotated[str | None, Query(alias="maxPrice")] = None,
    brand: Annotated[str | None, Query(description="Brand id")] = None,
    min_discount: Annotated[str | None, Query(alias="minDiscount")] = None,
    latitude: Annotated[str | None, Query(description="Customer latitude")] = None,
    longitude: Annotated[str | None, Query(description="Customer longitude")] = None,
) -> ProductListResponse:
    """List products.

    Unknown categories and unparseable filter values are ignored rather
    than rejected.

    Raises:
        HTTPException: If the catalog store fails.
    """
    params = ListingParams(
        category=category,
        subcategory=subcategory,
        search=search,
        page=page,
        limit=limit,
        sort=sort,
        min_price=min_price,
        max_price=max_price,
        brand=brand,
        min_discount=min_discount,
        latitude=latitude,
        longitude=longitude,
    )

    try:
        result = await service.list_products(params)
    except SQLAlchemyError as e:
        logger.exception("Error fetching products", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error_code": "CATALOG_UNAVAILABLE",
                "message": "Error fetching products",
            },
        ) from e

    return ProductListResponse(
        data=[product_to_schema(p, result.subcategory_names) for p in result.items],
        pagination=PaginationSchema(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Get product details",
    description=(
        "Get a product with its availability at the customer's location "
        "and up to six similar products."
    ),
)
async def get_product(
    product_id: str,
    service: Annotated[CatalogService, Depends(get_service)],
    latitude: Annotated[str | None, Query(description="Customer latitude")] = None,
    longitude: Annotated[str | None, Query(description="Customer longitude")] = None,
) -> ProductDetailResponse:
    """Get a product by ID.

    Raises:
        HTTPException: 400 for a malformed id, 404 if the product is not
            found, 500 if the catalog store fails.
    """
    try:
        detail = await service.get_product_detail(product_id, latitude, longitude)
    except InvalidProductIdError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error_code": "INVALID_PRODUCT_ID", "message": e.message},
        ) from e
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error_code": "PRODUCT_NOT_FOUND", "message": e.message},
        ) from e
    except SQLAlchemyError as e:
        logger.exception(
            "Error fetching product details",
            product_id=product_id,
            error=str(e),
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error_code": "CATALOG_UNAVAILABLE",
                "message": "Error fetching product details",
            },
        ) from e

    return ProductDetailResponse(data=detail_to_schema(detail))
