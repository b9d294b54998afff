"""Shared fixtures for catalog tests.

Tests run against an in-memory SQLite database built from the same
SQLAlchemy models as production. The sample catalog places a customer
in Mumbai with one seller nearby, one in Pune (out of range), one
global seller and one seller without a location.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storefront.catalog.geo import GeoPoint
from storefront.catalog.models import Brand, Category, Product, Seller, SubCategory
from storefront.infrastructure.database import Base

MUMBAI = GeoPoint(latitude=19.0760, longitude=72.8777)
DELHI = GeoPoint(latitude=28.6139, longitude=77.2090)

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


def new_id() -> str:
    """Generate a canonical id."""
    return str(uuid4())


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with the catalog schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Emit BEGIN ourselves so SAVEPOINT behaves as on PostgreSQL
    @event.listens_for(engine.sync_engine, "connect")
    def disable_driver_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def begin_transaction(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Open a session for the test."""
    async with session_factory() as session:
        yield session


# ============================================================================
# Sample Catalog
# ============================================================================


@dataclass
class SampleCatalog:
    """Ids of the seeded sample catalog."""

    # Sellers
    near_seller: str
    far_seller: str
    admin_seller: str
    unlocated_seller: str

    # Categories
    grocery: str
    fruits: str
    personal_care: str
    seasonal: str
    legacy_dry_fruits: str

    # Brands
    tata: str
    fortune: str

    # Browsable products
    rice: str
    dal: str
    oil: str
    soap: str
    apple: str
    almond: str
    salt: str

    # Hidden products
    store_only: str
    draft: str
    retired: str

    @property
    def browsable(self) -> set[str]:
        """Products any customer may see without a location."""
        return {self.rice, self.dal, self.oil, self.soap, self.apple, self.almond, self.salt}

    @property
    def grocery_products(self) -> set[str]:
        """Browsable products in the grocery category."""
        return self.browsable - {self.soap}


def make_product(
    index: int,
    name: str,
    category_id: str | None,
    seller_id: str | None,
    price: float,
    discount: float = 0,
    **overrides,
) -> Product:
    """Build an active, published product created index minutes after BASE_TIME."""
    fields = {
        "id": new_id(),
        "product_name": name,
        "category_id": category_id,
        "seller_id": seller_id,
        "price": price,
        "mrp": price,
        "discount": discount,
        "status": "Active",
        "publish": True,
        "created_at": BASE_TIME + timedelta(minutes=index),
        "updated_at": BASE_TIME + timedelta(minutes=index),
    }
    fields.update(overrides)
    return Product(**fields)


@pytest_asyncio.fixture
async def catalog(session_factory: async_sessionmaker[AsyncSession]) -> SampleCatalog:
    """Seed the sample catalog and return its ids."""
    near = Seller(
        id=new_id(),
        store_name="Fresh Mart",
        email="owner@freshmart.example",
        city="Mumbai",
        latitude=19.0800,
        longitude=72.8800,
        service_radius_km=5,
    )
    far = Seller(
        id=new_id(),
        store_name="Pune Grocers",
        email="hello@punegrocers.example",
        city="Pune",
        latitude=18.5204,
        longitude=73.8567,
        service_radius_km=10,
    )
    admin = Seller(
        id=new_id(),
        store_name="Geeta Central",
        email="central@geeta.example",
        category="Admin",
    )
    unlocated = Seller(
        id=new_id(),
        store_name="Ghost Kitchen",
        email="ghost@kitchen.example",
    )

    grocery = Category(id=new_id(), name="Grocery & Staples", slug="grocery-staples")
    fruits = Category(
        id=new_id(), name="Fresh Fruits", slug="fresh-fruits", parent_id=grocery.id
    )
    personal_care = Category(id=new_id(), name="Personal Care", slug="personal-care")
    seasonal = Category(
        id=new_id(), name="Seasonal Offers", slug="seasonal-offers", status="Inactive"
    )
    legacy_dry_fruits = SubCategory(id=new_id(), name="Dry Fruits", slug="dry-fruits")

    tata = Brand(id=new_id(), name="Tata")
    fortune = Brand(id=new_id(), name="Fortune")

    rice = make_product(
        1, "Basmati Rice", grocery.id, near.id, 100, 10,
        brand_id=tata.id, is_shop_by_store_only=None,
    )
    dal = make_product(
        2, "Toor Dal", grocery.id, far.id, 250, 25,
        brand_id=tata.id, is_shop_by_store_only=False,
    )
    oil = make_product(
        3, "Sunflower Oil", grocery.id, admin.id, 180, 5,
        brand_id=fortune.id, popular=True, deal_of_day=True,
    )
    soap = make_product(
        4, "Neem Soap", personal_care.id, near.id, 40, 30, popular=True,
    )
    apple = make_product(
        5, "Shimla Apple", grocery.id, near.id, 120, 15,
        subcategory_id=fruits.id, tags="fresh fruit apple",
    )
    almond = make_product(
        6, "Almonds 500g", grocery.id, far.id, 600, 20,
        subcategory_id=legacy_dry_fruits.id,
        description="Premium California almonds",
    )
    salt = make_product(7, "Rock Salt", grocery.id, unlocated.id, 20, 0)

    store_only = make_product(
        8, "Store Special Ghee", grocery.id, near.id, 500, 50, is_shop_by_store_only=True,
    )
    draft = make_product(9, "Draft Jaggery", grocery.id, near.id, 90, 40, publish=False)
    retired = make_product(10, "Retired Sugar", grocery.id, near.id, 45, 40, status="Inactive")

    async with session_factory() as session:
        session.add_all([near, far, admin, unlocated])
        session.add_all([grocery, personal_care, seasonal, legacy_dry_fruits, tata, fortune])
        await session.flush()
        session.add(fruits)
        session.add_all([rice, dal, oil, soap, apple, almond, salt, store_only, draft, retired])
        await session.commit()

    return SampleCatalog(
        near_seller=near.id,
        far_seller=far.id,
        admin_seller=admin.id,
        unlocated_seller=unlocated.id,
        grocery=grocery.id,
        fruits=fruits.id,
        personal_care=personal_care.id,
        seasonal=seasonal.id,
        legacy_dry_fruits=legacy_dry_fruits.id,
        tata=tata.id,
        fortune=fortune.id,
        rice=rice.id,
        dal=dal.id,
        oil=oil.id,
        soap=soap.id,
        apple=apple.id,
        almond=almond.id,
        salt=salt.id,
        store_only=store_only.id,
        draft=draft.id,
        retired=retired.id,
    )
