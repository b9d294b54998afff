"""SQLAlchemy models for the storefront catalog.

Defines Product, Category, SubCategory, Brand and Seller tables. The
catalog is read-only from this service's point of view; rows are
written by seller and admin tooling elsewhere.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.infrastructure.database import Base

ACTIVE_STATUS = "Active"


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Category(Base):
    """Catalog category.

    Subcategories are modelled as categories with a parent.

    Attributes:
        id: Canonical category identifier (UUID string).
        name: Display name (e.g., "Grocery & Staples").
        slug: URL-safe short name (e.g., "grocery-staples").
        status: Lifecycle status; only "Active" categories resolve.
        icon: Optional icon URL.
        image: Optional image URL.
        parent_id: Parent category for subcategories.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ACTIVE_STATUS)
    icon: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    parent_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, slug={self.slug})>"


class SubCategory(Base):
    """Legacy subcategory record.

    Kept for rows created before subcategories became child categories.
    Has no status column.
    """

    __tablename__ = "subcategories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<SubCategory(id={self.id}, slug={self.slug})>"


class Brand(Base):
    """Product brand."""

    __tablename__ = "brands"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)


class Seller(Base):
    """Seller storefront with a geographic service area.

    Attributes:
        id: Canonical seller identifier.
        store_name: Public store name.
        email: Contact email; used by global seller detection.
        category: Free-form seller category. The literal "Admin" marks
            a global seller.
        city: City of the store.
        address: Street address.
        fssai_lic_no: Food safety licence number.
        latitude: Store latitude, unset when no location is on record.
        longitude: Store longitude, unset when no location is on record.
        service_radius_km: Delivery radius; unset means the default radius.
    """

    __tablename__ = "sellers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    store_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    fssai_lic_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    service_radius_km: Mapped[float | None] = mapped_column(Float, nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Seller(id={self.id}, store_name={self.store_name})>"

    @property
    def has_location(self) -> bool:
        """Whether a store location is on record."""
        return self.latitude is not None and self.longitude is not None


class Product(Base):
    """Product listed by a seller.

    Attributes:
        id: Canonical product identifier (UUID string).
        product_name: Display name.
        description: Long description (searchable).
        tags: Free-form tags (searchable).
        status: Lifecycle status; only "Active" products are browsable.
        publish: Whether the product is published.
        is_shop_by_store_only: Restricts the product to its seller's store
            page. Older rows leave it unset, which counts as not restricted.
        category_id: Category reference.
        subcategory_id: Child category or legacy subcategory reference.
        brand_id: Brand reference.
        seller_id: Seller reference.
        price: Selling price.
        mrp: Maximum retail price.
        discount: Discount percentage.
        pack: Pack size label (e.g., "500 g").
        main_image: Main image URL.
        variations: Variation list as stored by seller tooling.
        rating: Average rating.
        reviews_count: Number of reviews.
        popular: Popularity flag used for sorting.
        deal_of_day: Deal-of-the-day flag used as a sort tiebreaker.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    product_name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ACTIVE_STATUS)
    publish: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_shop_by_store_only: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    category_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("categories.id"), nullable=True, index=True
    )
    # Either a child category or a legacy subcategory, so no foreign key.
    subcategory_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    brand_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("brands.id"), nullable=True, index=True
    )
    seller_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("sellers.id"), nullable=True, index=True
    )
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    mrp: Mapped[float | None] = mapped_column(Float, nullable=True)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    pack: Mapped[str | None] = mapped_column(String(100), nullable=True)
    main_image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    variations: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    reviews_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    popular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deal_of_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # Relationships
    category: Mapped[Category | None] = relationship(Category, lazy="raise")
    brand: Mapped[Brand | None] = relationship(Brand, lazy="raise")
    seller: Mapped[Seller | None] = relationship(Seller, lazy="raise")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, product_name={self.product_name[:30]})>"
