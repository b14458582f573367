"""Attribute registry repository."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.models.attribute import AttributeDefinition


class AttributeRepository:
    """Repository for AttributeDefinition rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, attribute: AttributeDefinition) -> AttributeDefinition:
        self.db.add(attribute)
        await self.db.flush()
        return attribute

    async def get_by_id(self, attribute_id: uuid.UUID) -> AttributeDefinition | None:
        return await self.db.get(AttributeDefinition, attribute_id)

    async def get_by_name(self, name: str) -> AttributeDefinition | None:
        result = await self.db.execute(
            select(AttributeDefinition).where(AttributeDefinition.name == name)
        )
        return result.scalar_one_or_none()

    async def get_many(self, attribute_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, AttributeDefinition]:
        """Load several definitions at once, keyed by id. Missing ids are absent."""
        if not attribute_ids:
            return {}
        result = await self.db.execute(
            select(AttributeDefinition).where(AttributeDefinition.id.in_(set(attribute_ids)))
        )
        return {attr.id: attr for attr in result.scalars().all()}

    async def list_attributes(
        self,
        search: str | None = None,
        data_type: str | None = None,
        group: str | None = None,
        is_active: bool | None = None,
        default_only: bool = False,
    ) -> list[AttributeDefinition]:
        """List definitions ordered by name.

        Args:
            search: Case-insensitive substring of name, label or group.
            data_type: Exact data type.
            group: Exact group name; "ungrouped" matches rows without one.
            is_active: Filter by active flag.
            default_only: Only default fields.
        """
        query = select(AttributeDefinition)

        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                or_(
                    func.lower(AttributeDefinition.name).like(pattern),
                    func.lower(AttributeDefinition.label).like(pattern),
                    func.lower(AttributeDefinition.group_name).like(pattern),
                )
            )
        if data_type:
            query = query.where(AttributeDefinition.data_type == data_type)
        if group == "ungrouped":
            query = query.where(AttributeDefinition.group_name.is_(None))
        elif group:
            query = query.where(AttributeDefinition.group_name == group)
        if is_active is not None:
            query = query.where(AttributeDefinition.is_active == is_active)
        if default_only:
            query = query.where(AttributeDefinition.is_default_field.is_(True))

        result = await self.db.execute(query.order_by(AttributeDefinition.name))
        return list(result.scalars().all())

    async def list_default_fields(self) -> list[AttributeDefinition]:
        """Active default fields in their global display order."""
        result = await self.db.execute(
            select(AttributeDefinition)
            .where(
                AttributeDefinition.is_default_field.is_(True),
                AttributeDefinition.is_active.is_(True),
            )
            .order_by(AttributeDefinition.display_order, AttributeDefinition.name)
        )
        return list(result.scalars().all())
