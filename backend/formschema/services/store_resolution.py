"""Store-side form resolution.

Runs the precedence merge inside the database: one ranked query picks the
deepest binding per attribute along the context path, one query picks the
default fields with no binding on that path. The database does the work a
stored procedure would; any DBAPIError from here tells the caller that this
path is unavailable and the in-process merge should be used instead.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, case, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from formschema.models.attribute import AttributeDefinition
from formschema.models.level_config import LevelConfig, LevelKind
from formschema.schemas.level_config import LevelRef
from formschema.schemas.resolution import ResolvedField
from formschema.services.fields import bound_field, default_field, finalize

_KIND_BY_DEPTH = {kind.depth: kind for kind in LevelKind}


def _path_filter(path: Sequence[LevelRef]):
    return or_(
        *(
            and_(LevelConfig.level_kind == level.kind, LevelConfig.level_id == level.id)
            for level in path
        )
    )


def _depth_expression():
    return case(
        (LevelConfig.level_kind == LevelKind.SERVICE, LevelKind.SERVICE.depth),
        (LevelConfig.level_kind == LevelKind.CATEGORY, LevelKind.CATEGORY.depth),
        else_=LevelKind.SUBCATEGORY.depth,
    )


class StoreSideResolver:
    """Resolve a validated context path with set-based queries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve_path(self, path: Sequence[LevelRef]) -> list[ResolvedField]:
        """Resolve fields for a validated path (shallow to deep).

        Raises:
            sqlalchemy.exc.DBAPIError: If the store cannot run the merge.
        """
        deepest = path[-1].kind
        depth = _depth_expression()

        ranked = (
            select(
                LevelConfig.id.label("config_id"),
                depth.label("depth"),
                func.row_number()
                .over(partition_by=LevelConfig.attribute_id, order_by=depth.desc())
                .label("rank"),
            )
            .join(AttributeDefinition, LevelConfig.attribute_id == AttributeDefinition.id)
            .where(_path_filter(path), AttributeDefinition.is_active.is_(True))
            .subquery("ranked")
        )

        bound_rows = await self.db.execute(
            select(LevelConfig, ranked.c.depth)
            .join(ranked, ranked.c.config_id == LevelConfig.id)
            .where(ranked.c.rank == 1)
            .options(joinedload(LevelConfig.attribute))
        )
        fields = [
            bound_field(config, _KIND_BY_DEPTH[row_depth], deepest)
            for config, row_depth in bound_rows.all()
        ]

        bound_on_path = (
            exists()
            .where(LevelConfig.attribute_id == AttributeDefinition.id)
            .where(_path_filter(path))
        )
        default_rows = await self.db.execute(
            select(AttributeDefinition).where(
                AttributeDefinition.is_default_field.is_(True),
                AttributeDefinition.is_active.is_(True),
                ~bound_on_path,
            )
        )
        fields.extend(default_field(attribute) for attribute in default_rows.scalars().all())

        return finalize(fields)
