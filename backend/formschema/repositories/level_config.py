"""Level configuration repository.

Bindings are always loaded together with their attribute definition so that
callers can read names and labels without another round trip.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from formschema.models.attribute import AttributeDefinition
from formschema.models.level_config import LevelConfig
from formschema.schemas.level_config import LevelConfigResponse, LevelRef


def config_to_response(config: LevelConfig) -> LevelConfigResponse:
    """Convert a LevelConfig (with its attribute loaded) to the API schema."""
    return LevelConfigResponse(
        id=config.id,
        level_kind=config.level_kind,
        level_id=config.level_id,
        attribute_id=config.attribute_id,
        attribute_name=config.attribute.name,
        attribute_label=config.attribute.label,
        is_required=config.is_required,
        is_visible=config.is_visible,
        is_editable=config.is_editable,
        is_deletable=config.is_deletable,
        display_order=config.display_order,
        field_group=config.field_group,
        override_label=config.override_label,
        override_placeholder=config.override_placeholder,
        override_help_text=config.override_help_text,
        inherit_from_service=config.inherit_from_service,
        inherit_from_category=config.inherit_from_category,
        created_at=config.created_at,
        updated_at=config.updated_at,
    )


class LevelConfigRepository:
    """Repository for LevelConfig rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select[tuple[LevelConfig]]:
        return select(LevelConfig).options(joinedload(LevelConfig.attribute))

    def _for_level(self, level: LevelRef) -> Select[tuple[LevelConfig]]:
        return self._base_query().where(
            LevelConfig.level_kind == level.kind,
            LevelConfig.level_id == level.id,
        )

    async def get_by_id(self, config_id: uuid.UUID) -> LevelConfig | None:
        result = await self.db.execute(self._base_query().where(LevelConfig.id == config_id))
        return result.scalar_one_or_none()

    async def get_binding(self, level: LevelRef, attribute_id: uuid.UUID) -> LevelConfig | None:
        """The unique binding of an attribute at a level, if any."""
        result = await self.db.execute(
            self._for_level(level).where(LevelConfig.attribute_id == attribute_id)
        )
        return result.scalar_one_or_none()

    async def list_for_level(self, level: LevelRef) -> list[LevelConfig]:
        """All bindings of one level instance, by display order then name."""
        result = await self.db.execute(
            self._for_level(level)
            .join(AttributeDefinition, LevelConfig.attribute_id == AttributeDefinition.id)
            .order_by(LevelConfig.display_order, AttributeDefinition.name)
        )
        return list(result.scalars().all())

    async def list_bindings(
        self, level: LevelRef, attribute_ids: Sequence[uuid.UUID]
    ) -> list[LevelConfig]:
        if not attribute_ids:
            return []
        result = await self.db.execute(
            self._for_level(level).where(LevelConfig.attribute_id.in_(set(attribute_ids)))
        )
        return list(result.scalars().all())

    def add(self, config: LevelConfig) -> None:
        """Stage a new binding; the caller flushes the batch."""
        self.db.add(config)

    async def delete(self, config: LevelConfig) -> None:
        """Stage a binding for deletion; the caller flushes the batch."""
        await self.db.delete(config)
