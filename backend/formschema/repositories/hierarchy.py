"""Hierarchy repository.

Row-level access to service types, categories and subcategories.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.models.hierarchy import Category, ServiceType, Subcategory
from formschema.models.level_config import LevelKind

_LEVEL_MODELS = {
    LevelKind.SERVICE: ServiceType,
    LevelKind.CATEGORY: Category,
    LevelKind.SUBCATEGORY: Subcategory,
}


class HierarchyRepository:
    """Repository for the service type -> category -> subcategory tree."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, node: ServiceType | Category | Subcategory) -> None:
        self.db.add(node)
        await self.db.flush()

    async def get_service_type(self, service_id: uuid.UUID) -> ServiceType | None:
        return await self.db.get(ServiceType, service_id)

    async def get_service_type_by_name(self, name: str) -> ServiceType | None:
        result = await self.db.execute(select(ServiceType).where(ServiceType.name == name))
        return result.scalar_one_or_none()

    async def get_category(self, category_id: uuid.UUID) -> Category | None:
        return await self.db.get(Category, category_id)

    async def get_subcategory(self, subcategory_id: uuid.UUID) -> Subcategory | None:
        return await self.db.get(Subcategory, subcategory_id)

    async def get_level(
        self, kind: LevelKind, level_id: uuid.UUID
    ) -> ServiceType | Category | Subcategory | None:
        """Load the row behind a level reference."""
        return await self.db.get(_LEVEL_MODELS[kind], level_id)

    async def list_service_types(self) -> list[ServiceType]:
        result = await self.db.execute(
            select(ServiceType).order_by(ServiceType.sort_order, ServiceType.name)
        )
        return list(result.scalars().all())

    async def list_categories(self, service_id: uuid.UUID) -> list[Category]:
        result = await self.db.execute(
            select(Category)
            .where(Category.service_type_id == service_id)
            .order_by(Category.sort_order, Category.name)
        )
        return list(result.scalars().all())

    async def list_subcategories(self, category_ids: Sequence[uuid.UUID]) -> list[Subcategory]:
        if not category_ids:
            return []
        result = await self.db.execute(
            select(Subcategory)
            .where(Subcategory.category_id.in_(category_ids))
            .order_by(Subcategory.sort_order, Subcategory.name)
        )
        return list(result.scalars().all())
