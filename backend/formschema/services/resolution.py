"""Resolution engine.

Computes the effective, ordered field list for a point in the hierarchy by
merging the attribute registry with the bindings of every level on the
context path:

1. Bindings are collected from the deepest level upward; the first binding
   seen for an attribute wins (nearest context wins).
2. Bindings from shallower levels are inherited (``is_direct=False``,
   ``inherited_from`` names their level).
3. Active default fields with no binding anywhere on the path are added as
   synthetic entries using the registry's own order.
4. Entries are deduplicated by attribute name, bindings beating synthetic
   entries, and sorted by display order then name.

With the "store" strategy the merge runs in the database first and falls
back to the in-process merge when the store cannot run it.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.config import settings
from formschema.models.level_config import LevelKind
from formschema.repositories.attribute import AttributeRepository
from formschema.repositories.level_config import LevelConfigRepository, config_to_response
from formschema.schemas.level_config import LevelRef
from formschema.schemas.resolution import LevelBreakdown, ResolutionContext, ResolvedField
from formschema.services.fields import bound_field, default_field, finalize
from formschema.services.hierarchy import HierarchyService
from formschema.services.store_resolution import StoreSideResolver

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Resolve hierarchy contexts into ResolvedField lists.

    Example:
        async with async_session_maker() as session:
            engine = ResolutionEngine(session)
            fields = await engine.resolve(
                ResolutionContext(service_id=service_id, category_id=category_id)
            )
    """

    def __init__(self, db: AsyncSession, strategy: str | None = None):
        """Initialize the engine.

        Args:
            db: Async SQLAlchemy session.
            strategy: "store" or "client"; defaults to settings.resolution_strategy.
        """
        self.db = db
        self.strategy = strategy or settings.resolution_strategy
        self.hierarchy = HierarchyService(db)
        self.configs = LevelConfigRepository(db)
        self.attributes = AttributeRepository(db)
        self.store_resolver = StoreSideResolver(db)

    async def resolve(self, context: ResolutionContext) -> list[ResolvedField]:
        """Resolve the effective field list for a context.

        The store-side merge runs inside a savepoint, so a failure there only
        rolls back that query; changes already made in the same unit of work
        stay visible to the fallback merge.

        Raises:
            ValidationError: If the context is not a valid hierarchy path.
        """
        path = await self.hierarchy.validate_context(context)

        if self.strategy == "store":
            try:
                async with self.db.begin_nested():
                    return await self.store_resolver.resolve_path(path)
            except DBAPIError:
                logger.warning(
                    "Store-side resolution failed for %s; falling back to client merge",
                    context,
                    exc_info=True,
                )

        return await self.merge(path)

    async def merge(self, path: Sequence[LevelRef]) -> list[ResolvedField]:
        """In-process merge of a validated path (shallow to deep)."""
        deepest = path[-1].kind
        seen: set = set()
        fields: list[ResolvedField] = []

        for level in reversed(path):
            for config in await self.configs.list_for_level(level):
                if not config.attribute.is_active or config.attribute_id in seen:
                    continue
                seen.add(config.attribute_id)
                fields.append(bound_field(config, level.kind, deepest))

        for attribute in await self.attributes.list_default_fields():
            if attribute.id not in seen:
                fields.append(default_field(attribute))

        return finalize(fields)

    async def breakdown(self, context: ResolutionContext) -> LevelBreakdown:
        """Raw bindings of each level on the context path."""
        path = await self.hierarchy.validate_context(context)
        per_level = {kind: [] for kind in LevelKind}
        for level in path:
            per_level[level.kind] = [
                config_to_response(c) for c in await self.configs.list_for_level(level)
            ]
        return LevelBreakdown(
            context=context,
            service=per_level[LevelKind.SERVICE],
            category=per_level[LevelKind.CATEGORY],
            subcategory=per_level[LevelKind.SUBCATEGORY],
        )
