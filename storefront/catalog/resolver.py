"""Identifier resolution for categories and subcategories.

Maps a canonical id, slug or display name to the canonical id of a
category record. Matching is an ordered chain of rules; the first rule
that finds a row wins.

Example usage:
    resolver = IdentifierResolver(session)
    category_id = await resolver.resolve(EntityType.CATEGORY, "grocery-and-staples")
    subcategory_id = await resolver.resolve_subcategory("Fresh_Fruits")
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import ACTIVE_STATUS, Category, SubCategory

logger = structlog.get_logger()

# A rule turns a raw value into a match condition for a store model, or
# returns None when it does not apply to that value.
MatchRule = Callable[[Any, str], ColumnElement[bool] | None]


def canonical_id(value: str) -> str | None:
    """Normalise a hyphenated UUID to the stored (lowercase) id form.

    Returns:
        The stored form, or None when the value is not a hyphenated UUID.
    """
    try:
        parsed = UUID(value)
    except (TypeError, ValueError, AttributeError):
        return None
    normalized = str(parsed)
    return normalized if normalized == value.lower() else None


def is_canonical_id(value: str) -> bool:
    """Check whether a value is in canonical (hyphenated UUID) id format."""
    return canonical_id(value) is not None


# ============================================================================
# Match Rules
# ============================================================================


def exact_slug(model: Any, value: str) -> ColumnElement[bool]:
    """Case-sensitive slug equality."""
    return model.slug == value


def slug_ignoring_case(model: Any, value: str) -> ColumnElement[bool]:
    """Case-insensitive full-string slug match."""
    return func.lower(model.slug) == value.lower()


def name_from_slug(model: Any, value: str) -> ColumnElement[bool]:
    """Case-insensitive name match with hyphens and underscores read as spaces."""
    return func.lower(model.name) == re.sub(r"[-_]", " ", value).lower()


def name_with_ampersand(model: Any, value: str) -> ColumnElement[bool] | None:
    """Name match reading "-and-" as " & " (grocery-and-staples -> Grocery & Staples)."""
    if "and" not in value:
        return None
    name = value.replace("-and-", " & ").replace("-", " ")
    return func.lower(model.name) == name.lower()


# ============================================================================
# Stores
# ============================================================================


class EntityType(str, Enum):
    """Stores an identifier can be resolved against."""

    CATEGORY = "category"
    LEGACY_SUBCATEGORY = "legacy_subcategory"


@dataclass(frozen=True)
class ResolverStore:
    """How to search one store.

    Attributes:
        model: Mapped class to search.
        active_only: Whether rows must have status "Active". The legacy
            subcategory table has no status column.
        rules: Match rules in priority order.
    """

    model: Any
    active_only: bool
    rules: tuple[MatchRule, ...]


STORES: dict[EntityType, ResolverStore] = {
    EntityType.CATEGORY: ResolverStore(
        model=Category,
        active_only=True,
        rules=(exact_slug, slug_ignoring_case, name_from_slug, name_with_ampersand),
    ),
    EntityType.LEGACY_SUBCATEGORY: ResolverStore(
        model=SubCategory,
        active_only=False,
        rules=(exact_slug, slug_ignoring_case, name_from_slug),
    ),
}


class IdentifierResolver:
    """Resolves human-facing identifiers to canonical ids.

    Resolution is read-only and deterministic: ties between rows
    matching the same rule are broken by id.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize resolver with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def resolve(self, entity_type: EntityType, value: str) -> str | None:
        """Resolve a value against one store.

        Args:
            entity_type: Store to search.
            value: Canonical id, slug or display name.

        Returns:
            Canonical id, or None when nothing matches.
        """
        normalized = canonical_id(value)
        if normalized is not None:
            return normalized

        store = STORES[entity_type]
        for rule in store.rules:
            condition = rule(store.model, value)
            if condition is None:
                continue

            query = select(store.model.id).where(condition)
            if store.active_only:
                query = query.where(store.model.status == ACTIVE_STATUS)
            query = query.order_by(store.model.id).limit(1)

            result = await self.session.execute(query)
            resolved = result.scalar_one_or_none()
            if resolved is not None:
                logger.debug(
                    "Identifier resolved",
                    entity_type=entity_type.value,
                    value=value,
                    rule=rule.__name__,
                    resolved_id=resolved,
                )
                return resolved

        logger.debug("Identifier unresolved", entity_type=entity_type.value, value=value)
        return None

    async def resolve_subcategory(self, value: str) -> str | None:
        """Resolve a subcategory, trying child categories before the legacy store.

        Args:
            value: Canonical id, slug or display name.

        Returns:
            Canonical id, or None when neither store matches.
        """
        resolved = await self.resolve(EntityType.CATEGORY, value)
        if resolved is None:
            resolved = await self.resolve(EntityType.LEGACY_SUBCATEGORY, value)
        return resolved
