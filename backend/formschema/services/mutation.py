"""Mutation service for level configurations.

Adds, overrides, toggles, reorders and deletes bindings. Multi-row
operations stage every change in the session and write them with a single
flush, so a store failure leaves none of the batch behind; the failure is
raised as a StoreError naming the operation, level and ids involved.
"""

import logging
import uuid
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.constants import CUSTOM_FIELD_GROUP, CUSTOM_ORDER_OFFSET
from formschema.errors import NotFoundError, PermissionDenied, StoreError, ValidationError
from formschema.models.level_config import LevelConfig
from formschema.repositories.attribute import AttributeRepository
from formschema.repositories.level_config import LevelConfigRepository, config_to_response
from formschema.schemas.level_config import LevelConfigOverride, LevelRef, PermissionsUpdate
from formschema.schemas.mutation import MutationOutcome, SkippedEntry, ToggleOutcome
from formschema.services.default_fields import DefaultFieldMaterializer
from formschema.services.hierarchy import HierarchyService

logger = logging.getLogger(__name__)

_OVERRIDE_TEXT_FIELDS = ("override_label", "override_placeholder", "override_help_text")


class MutationService:
    """Write operations against the level configuration store."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.hierarchy = HierarchyService(db)
        self.attributes = AttributeRepository(db)
        self.configs = LevelConfigRepository(db)
        self.materializer = DefaultFieldMaterializer(db)

    @asynccontextmanager
    async def _store_guard(
        self,
        operation: str,
        level: LevelRef | None = None,
        attribute_ids: Iterable[uuid.UUID] = (),
        config_ids: Iterable[uuid.UUID] = (),
    ) -> AsyncIterator[None]:
        """Translate store failures into StoreError after rolling back."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("Store failure during %s at %s", operation, level, exc_info=True)
            await self.db.rollback()
            raise StoreError(
                operation,
                level=level,
                attribute_ids=attribute_ids,
                config_ids=config_ids,
            ) from exc

    async def _get_config(self, config_id: uuid.UUID) -> LevelConfig:
        config = await self.configs.get_by_id(config_id)
        if config is None:
            raise NotFoundError(f"Level config {config_id} not found")
        return config

    async def list_level_configs(self, level: LevelRef) -> list[LevelConfig]:
        """Direct bindings of one level, by display order."""
        await self.hierarchy.require_level(level)
        return await self.configs.list_for_level(level)

    async def add_attributes(self, level: LevelRef, attribute_ids: list[uuid.UUID]) -> MutationOutcome:
        """Bind attributes to a level.

        Attributes already bound there (or repeated in the request) are
        reported as skipped. New bindings are optional, visible, in the
        "custom" group, and ordered after everything at the level, starting
        no lower than the custom-field offset.

        Raises:
            ValidationError: Unknown level, or unknown/inactive attribute ids.
            StoreError: The batch could not be written; nothing was added.
        """
        await self.hierarchy.require_level(level)

        found = await self.attributes.get_many(attribute_ids)
        invalid = [str(i) for i in attribute_ids if i not in found or not found[i].is_active]
        if invalid:
            raise ValidationError(f"Unknown or inactive attributes: {', '.join(invalid)}")

        existing = await self.configs.list_for_level(level)
        bound = {c.attribute_id for c in existing}
        next_order = max([c.display_order for c in existing] + [CUSTOM_ORDER_OFFSET - 1]) + 1

        outcome = MutationOutcome(operation="add_attributes", level=level)
        requested: set[uuid.UUID] = set()
        for attribute_id in attribute_ids:
            attribute = found[attribute_id]
            if attribute_id in requested:
                outcome.skipped.append(
                    SkippedEntry(id=attribute_id, name=attribute.name, reason="duplicate_in_request")
                )
                continue
            requested.add(attribute_id)
            if attribute_id in bound:
                outcome.skipped.append(
                    SkippedEntry(id=attribute_id, name=attribute.name, reason="already_bound")
                )
                continue

            self.configs.add(
                LevelConfig(
                    level_kind=level.kind,
                    level_id=level.id,
                    attribute_id=attribute_id,
                    attribute=attribute,
                    is_required=False,
                    is_visible=True,
                    display_order=next_order,
                    field_group=CUSTOM_FIELD_GROUP,
                    inherit_from_service=False,
                    inherit_from_category=False,
                )
            )
            next_order += 1
            outcome.succeeded.append(attribute_id)

        async with self._store_guard("add_attributes", level, attribute_ids=outcome.succeeded):
            await self.db.flush()

        logger.info(
            "add_attributes at %s %s: %d added, %d skipped",
            level.kind.value,
            level.id,
            outcome.succeeded_count,
            outcome.skipped_count,
        )
        return outcome

    async def update_override(self, config_id: uuid.UUID, patch: LevelConfigOverride) -> LevelConfig:
        """Apply override text, field group and required changes to a binding.

        Blank override strings clear the override.

        Raises:
            NotFoundError: Unknown config id.
            PermissionDenied: The binding is not editable.
        """
        config = await self._get_config(config_id)
        if not config.is_editable:
            raise PermissionDenied(
                f"Level config for {config.attribute.name!r} is not editable"
            )

        updates = patch.model_dump(exclude_unset=True)
        for field in _OVERRIDE_TEXT_FIELDS:
            if field in updates and updates[field] is not None and not updates[field].strip():
                updates[field] = None
        for field in ("field_group", "is_required"):
            if field in updates and updates[field] is None:
                del updates[field]

        for field, value in updates.items():
            setattr(config, field, value)

        async with self._store_guard("update_override", config_ids=[config_id]):
            await self.db.flush()
        logger.info("Updated overrides of config %s: %s", config_id, sorted(updates))
        return config

    async def set_permissions(self, config_id: uuid.UUID, patch: PermissionsUpdate) -> LevelConfig:
        """Switch the editable/deletable protection of a binding."""
        config = await self._get_config(config_id)
        if patch.is_editable is not None:
            config.is_editable = patch.is_editable
        if patch.is_deletable is not None:
            config.is_deletable = patch.is_deletable
        async with self._store_guard("set_permissions", config_ids=[config_id]):
            await self.db.flush()
        return config

    async def _toggle(self, level: LevelRef, attribute_id: uuid.UUID, flag: str, value: bool) -> ToggleOutcome:
        await self.hierarchy.require_level(level)

        config = await self.configs.get_binding(level, attribute_id)
        if config is not None:
            setattr(config, flag, value)
            async with self._store_guard(f"toggle_{flag}", level, attribute_ids=[attribute_id]):
                await self.db.flush()
            return ToggleOutcome(config=config_to_response(config), materialized=False)

        attribute = await self.attributes.get_by_id(attribute_id)
        if attribute is None or not attribute.is_default_field:
            raise NotFoundError(
                f"Attribute {attribute_id} is not bound at {level.kind.value} {level.id}; add it first"
            )
        return await self.materialize_default_field(level, attribute.name, **{flag: value})

    async def toggle_required(self, level: LevelRef, attribute_id: uuid.UUID, value: bool) -> ToggleOutcome:
        """Set is_required of a binding, materializing default fields on first use.

        Raises:
            NotFoundError: A non-default attribute with no binding at the level.
        """
        return await self._toggle(level, attribute_id, "is_required", value)

    async def toggle_visible(self, level: LevelRef, attribute_id: uuid.UUID, value: bool) -> ToggleOutcome:
        """Set is_visible of a binding, materializing default fields on first use."""
        return await self._toggle(level, attribute_id, "is_visible", value)

    async def materialize_default_field(
        self,
        level: LevelRef,
        name: str,
        is_required: bool | None = None,
        is_visible: bool | None = None,
    ) -> ToggleOutcome:
        """Create (or update) the binding of a default field at a level. Safe to retry."""
        await self.hierarchy.require_level(level)
        async with self._store_guard("materialize_default_field", level):
            result = await self.materializer.materialize(
                level, name, is_required=is_required, is_visible=is_visible
            )
        return ToggleOutcome(
            config=config_to_response(result.config),
            materialized=result.created_binding,
            attribute_created=result.created_attribute,
        )

    async def customize_default_field(
        self, level: LevelRef, name: str, patch: LevelConfigOverride
    ) -> LevelConfig:
        """Materialize a default field at a level and apply override changes to it."""
        outcome = await self.materialize_default_field(level, name)
        return await self.update_override(outcome.config.id, patch)

    async def delete_attributes(self, level: LevelRef, attribute_ids: list[uuid.UUID]) -> MutationOutcome:
        """Remove bindings from a level, never touching protected ones.

        Ids with no binding at the level are skipped as "not_bound"; bindings
        with is_deletable=False are skipped as "protected" and named in
        ``skipped_names``.

        Raises:
            PermissionDenied: Every binding found for the request is protected.
            StoreError: The batch could not be written; nothing was removed.
        """
        await self.hierarchy.require_level(level)

        bindings = {c.attribute_id: c for c in await self.configs.list_bindings(level, attribute_ids)}
        outcome = MutationOutcome(operation="delete_attributes", level=level)

        deletable: list[LevelConfig] = []
        seen: set[uuid.UUID] = set()
        for attribute_id in attribute_ids:
            if attribute_id in seen:
                continue
            seen.add(attribute_id)
            config = bindings.get(attribute_id)
            if config is None:
                outcome.skipped.append(SkippedEntry(id=attribute_id, reason="not_bound"))
            elif not config.is_deletable:
                outcome.skipped.append(
                    SkippedEntry(id=attribute_id, name=config.attribute.name, reason="protected")
                )
            else:
                deletable.append(config)

        if bindings and not deletable:
            raise PermissionDenied(
                f"None of the requested attributes can be removed: {', '.join(outcome.skipped_names)}"
            )

        for config in deletable:
            await self.configs.delete(config)
            outcome.succeeded.append(config.attribute_id)

        async with self._store_guard("delete_attributes", level, attribute_ids=outcome.succeeded):
            await self.db.flush()

        logger.info(
            "delete_attributes at %s %s: %d removed, %d skipped",
            level.kind.value,
            level.id,
            outcome.succeeded_count,
            outcome.skipped_count,
        )
        return outcome

    async def reorder(self, level: LevelRef, config_ids: list[uuid.UUID]) -> MutationOutcome:
        """Assign display orders 1000, 1001, ... to a level's bindings in the given order.

        Bindings not listed follow the listed ones, keeping their current
        relative order, so every binding of the level ends up with a distinct
        display order. Retrying the same request gives the same result.

        Raises:
            ValidationError: Duplicate ids or ids that are not bindings of the level.
            StoreError: The batch could not be written; no order changed.
        """
        await self.hierarchy.require_level(level)

        if len(set(config_ids)) != len(config_ids):
            raise ValidationError("config_ids contains duplicates")

        by_id = {c.id: c for c in await self.configs.list_for_level(level)}
        foreign = [str(i) for i in config_ids if i not in by_id]
        if foreign:
            raise ValidationError(
                f"Not configs of {level.kind.value} {level.id}: {', '.join(foreign)}"
            )

        listed = set(config_ids)
        new_order = list(config_ids) + [i for i in by_id if i not in listed]
        for position, config_id in enumerate(new_order):
            by_id[config_id].display_order = CUSTOM_ORDER_OFFSET + position

        async with self._store_guard("reorder", level, config_ids=new_order):
            await self.db.flush()

        logger.info(
            "Reordered %d configs at %s %s (%d listed)",
            len(new_order),
            level.kind.value,
            level.id,
            len(config_ids),
        )
        return MutationOutcome(operation="reorder", level=level, succeeded=new_order)
