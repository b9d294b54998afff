"""Seller visibility by customer location.

Determines which sellers' products a customer at a point may see:
sellers whose service radius covers the point, plus global sellers
that are visible everywhere.

Global sellers have no dedicated flag. They are recognised by an
admin email address, a seller category of "Admin", or a store name
containing "admin". Callers go through is_global_seller() and
global_seller_condition() so the rule lives in one place.

Two empty-set policies coexist and are deliberately different:
- listings fall back to showing every seller when nobody is visible;
- similar products show nothing when nobody is visible.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

import structlog
from sqlalchemy import ColumnElement, func, or_

from storefront.catalog.geo import GeoPoint, RangeService
from storefront.catalog.models import Seller
from storefront.catalog.repository import SellerRepository
from storefront.infrastructure.config import settings

logger = structlog.get_logger()

ADMIN_SELLER_CATEGORY = "Admin"
ADMIN_STORE_NAME_PATTERN = re.compile("admin", re.IGNORECASE)


def is_global_seller(seller: Seller | None, admin_emails: Iterable[str] | None = None) -> bool:
    """Check whether a seller is visible regardless of location.

    Args:
        seller: Seller record (None is never global).
        admin_emails: Administrative addresses (defaults to settings).

    Returns:
        True for global/admin sellers.
    """
    if seller is None:
        return False
    emails = set(settings.admin_seller_emails if admin_emails is None else admin_emails)
    return (
        seller.email in emails
        or seller.category == ADMIN_SELLER_CATEGORY
        or bool(ADMIN_STORE_NAME_PATTERN.search(seller.store_name or ""))
    )


def global_seller_condition(admin_emails: Iterable[str] | None = None) -> ColumnElement[bool]:
    """SQL form of is_global_seller()."""
    emails = sorted(settings.admin_seller_emails if admin_emails is None else admin_emails)
    return or_(
        Seller.email.in_(emails),
        Seller.category == ADMIN_SELLER_CATEGORY,
        func.lower(Seller.store_name).contains("admin"),
    )


@dataclass(frozen=True)
class VisibleSellers:
    """Sellers visible at a point.

    Attributes:
        nearby: Sellers whose service radius covers the point.
        global_ids: Global sellers.
        degraded: The global seller lookup failed and global_ids is empty.
    """

    nearby: frozenset[str]
    global_ids: frozenset[str]
    degraded: bool = False

    @property
    def seller_ids(self) -> frozenset[str]:
        """All visible sellers."""
        return self.nearby | self.global_ids


def listing_seller_constraint(visible: VisibleSellers | None) -> frozenset[str] | None:
    """Seller restriction for product listings.

    Returns:
        The visible sellers, or None (no restriction) when there is no
        location or nobody is visible.
    """
    if visible is None or not visible.seller_ids:
        return None
    return visible.seller_ids


def similar_products_seller_constraint(visible: VisibleSellers | None) -> frozenset[str] | None:
    """Seller restriction for similar products.

    Returns:
        None without a location. Otherwise the visible sellers, which
        may be empty and then match nothing. When the global lookup
        failed, only nearby sellers are used, and an empty nearby set
        leaves sellers unrestricted.
    """
    if visible is None:
        return None
    if visible.degraded:
        return visible.nearby or None
    return visible.seller_ids


class GeoVisibilityFilter:
    """Computes visible sellers for a customer location.

    Example usage:
        visibility = GeoVisibilityFilter(range_service, SellerRepository(session))
        visible = await visibility.visible_sellers(GeoPoint(19.07, 72.87))
    """

    def __init__(self, range_service: RangeService, sellers: SellerRepository) -> None:
        """Initialize filter.

        Args:
            range_service: Finds sellers delivering to a point.
            sellers: Seller repository for the global seller lookup.
        """
        self.range_service = range_service
        self.sellers = sellers

    async def nearby_seller_ids(self, point: GeoPoint) -> frozenset[str]:
        """Sellers whose service radius covers the point."""
        seller_ids = await self.range_service.find_sellers_within_range(
            point.latitude, point.longitude
        )
        return frozenset(str(seller_id) for seller_id in seller_ids)

    async def global_seller_ids(self) -> tuple[frozenset[str], bool]:
        """Best-effort lookup of global sellers.

        Returns:
            Tuple of (seller ids, ok). A failed lookup is logged and
            yields an empty set with ok False.
        """
        try:
            seller_ids = await self.sellers.find_ids(global_seller_condition())
        except Exception as e:
            logger.warning(
                "Global seller lookup failed, continuing without global sellers",
                error=str(e),
                error_type=type(e).__name__,
            )
            return frozenset(), False
        return frozenset(seller_ids), True

    async def visible_sellers(self, point: GeoPoint | None) -> VisibleSellers | None:
        """Compute visible sellers for a point.

        Args:
            point: Customer location, or None when not supplied.

        Returns:
            VisibleSellers, or None when there is no usable location.
        """
        if point is None:
            return None

        nearby = await self.nearby_seller_ids(point)
        global_ids, ok = await self.global_seller_ids()

        logger.debug(
            "Visible sellers computed",
            nearby_count=len(nearby),
            global_count=len(global_ids),
            degraded=not ok,
        )
        return VisibleSellers(nearby=nearby, global_ids=global_ids, degraded=not ok)
