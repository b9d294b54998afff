"""Geographic helpers and the seller range service.

The range service answers which sellers deliver to a point. The
bundled implementation scans sellers with a location on record and
compares great-circle distance against each seller's service radius.
"""

import math
from dataclasses import dataclass
from typing import Any, Protocol

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import Seller

logger = structlog.get_logger()

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 coordinate."""

    latitude: float
    longitude: float


def parse_point(latitude: Any, longitude: Any) -> GeoPoint | None:
    """Parse raw latitude/longitude values.

    Args:
        latitude: Raw latitude (string or number).
        longitude: Raw longitude (string or number).

    Returns:
        GeoPoint, or None when either value is missing, not a finite
        number or outside the valid coordinate range.
    """
    if latitude is None or longitude is None:
        return None
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return GeoPoint(latitude=lat, longitude=lng)


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance between two points in kilometres."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


class RangeService(Protocol):
    """Finds sellers whose service radius covers a point."""

    async def find_sellers_within_range(self, latitude: float, longitude: float) -> list[str]:
        """Return ids of sellers delivering to the point."""
        ...


class SellerDistanceRangeService:
    """Range service backed by a scan of located sellers.

    Example usage:
        ranges = SellerDistanceRangeService(session, default_radius_km=10)
        seller_ids = await ranges.find_sellers_within_range(19.07, 72.87)
    """

    def __init__(self, session: AsyncSession, default_radius_km: float = 10.0) -> None:
        """Initialize range service.

        Args:
            session: Async SQLAlchemy session.
            default_radius_km: Radius for sellers without one configured.
        """
        self.session = session
        self.default_radius_km = default_radius_km

    async def find_sellers_within_range(self, latitude: float, longitude: float) -> list[str]:
        """Find sellers whose service radius covers the point.

        Args:
            latitude: Customer latitude.
            longitude: Customer longitude.

        Returns:
            Seller ids, ordered by distance.
        """
        query = select(
            Seller.id,
            Seller.latitude,
            Seller.longitude,
            Seller.service_radius_km,
        ).where(
            Seller.latitude.is_not(None),
            Seller.longitude.is_not(None),
        )
        result = await self.session.execute(query)

        origin = GeoPoint(latitude, longitude)
        in_range: list[tuple[float, str]] = []
        for row in result.all():
            radius = row.service_radius_km or self.default_radius_km
            distance = distance_km(origin, GeoPoint(row.latitude, row.longitude))
            if distance <= radius:
                in_range.append((distance, row.id))

        in_range.sort()
        logger.debug(
            "Sellers within range",
            latitude=latitude,
            longitude=longitude,
            seller_count=len(in_range),
        )
        return [seller_id for _, seller_id in in_range]
