"""Catalog repositories for database operations.

Read-only queries for products, sellers and subcategory names.
"""

from collections.abc import Iterable, Sequence

from sqlalchemy import ColumnElement, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, load_only

from storefront.catalog.models import ACTIVE_STATUS, Category, Product, Seller, SubCategory
from storefront.catalog.query import PaginationParams, ProductCriteria, sort_clauses

# Columns needed for a compact product card.
CARD_COLUMNS = (
    Product.id,
    Product.product_name,
    Product.price,
    Product.mrp,
    Product.discount,
    Product.pack,
    Product.main_image,
    Product.variations,
    Product.rating,
    Product.reviews_count,
)


class ProductRepository:
    """Repository for Product queries.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            products = await repo.find_all(
                ProductCriteria(category_id=category_id, max_price=250),
                PaginationParams(page=2, limit=20),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def find_all(
        self,
        criteria: ProductCriteria,
        pagination: PaginationParams,
    ) -> Sequence[Product]:
        """Find products with filtering, sorting, and pagination.

        Category, brand and seller are loaded with the products.

        Args:
            criteria: Filter criteria.
            pagination: Page window and sort order.

        Returns:
            Sequence of matching products.
        """
        query = (
            select(Product)
            .where(and_(*criteria.conditions()))
            .options(
                joinedload(Product.category),
                joinedload(Product.brand),
                joinedload(Product.seller),
            )
            .order_by(*sort_clauses(pagination.sort))
            .limit(pagination.limit)
            .offset(pagination.offset)
        )

        result = await self.session.execute(query)
        return result.scalars().unique().all()

    async def count(self, criteria: ProductCriteria) -> int:
        """Count products matching criteria, ignoring any page window.

        Args:
            criteria: Filter criteria.

        Returns:
            Count of matching products.
        """
        query = select(func.count(Product.id)).where(and_(*criteria.conditions()))
        result = await self.session.execute(query)
        return result.scalar_one()

    async def get_active_by_id(self, product_id: str) -> Product | None:
        """Get an active, published product with its related records.

        Args:
            product_id: Canonical product id.

        Returns:
            Product if found, None otherwise.
        """
        query = (
            select(Product)
            .where(
                Product.id == product_id,
                Product.status == ACTIVE_STATUS,
                Product.publish.is_(True),
            )
            .options(
                joinedload(Product.category),
                joinedload(Product.brand),
                joinedload(Product.seller),
            )
        )
        result = await self.session.execute(query)
        return result.scalars().unique().one_or_none()

    async def find_cards(self, criteria: ProductCriteria, limit: int) -> Sequence[Product]:
        """Find products projected to card columns.

        Args:
            criteria: Filter criteria.
            limit: Maximum results.

        Returns:
            Products with only the card columns loaded.
        """
        query = (
            select(Product)
            .where(and_(*criteria.conditions()))
            .options(load_only(*CARD_COLUMNS, raiseload=True))
            .order_by(Product.id)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_subcategory_names(self, ids: Iterable[str]) -> dict[str, str]:
        """Look up subcategory names across child categories and the legacy store.

        Args:
            ids: Subcategory ids referenced by products.

        Returns:
            Mapping of id to name for the ids found.
        """
        wanted = sorted({i for i in ids if i})
        if not wanted:
            return {}

        names: dict[str, str] = {}
        for model in (SubCategory, Category):
            result = await self.session.execute(
                select(model.id, model.name).where(model.id.in_(wanted))
            )
            names.update({row.id: row.name for row in result.all()})
        return names


class SellerRepository:
    """Repository for Seller queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def find_ids(self, condition: ColumnElement[bool]) -> list[str]:
        """Get ids of sellers matching a condition.

        The query runs inside a savepoint, so a failure rolls back to it
        and leaves the request's transaction usable.

        Args:
            condition: SQL condition on Seller.

        Returns:
            Matching seller ids.
        """
        async with self.session.begin_nested():
            result = await self.session.execute(
                select(Seller.id).where(condition).order_by(Seller.id)
            )
            return list(result.scalars().all())
