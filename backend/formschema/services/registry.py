"""Attribute registry service.

Administrative operations on the global catalog of attribute definitions.
Definitions are never deleted; deactivation hides them from every resolved
form. System fields cannot be deactivated.
"""

import logging
import uuid
from collections import Counter

from sqlalchemy.ext.asyncio import AsyncSession

from formschema.constants import OPTION_DATA_TYPES
from formschema.errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from formschema.models.attribute import AttributeDefinition
from formschema.repositories.attribute import AttributeRepository
from formschema.schemas.attribute import (
    AttributeCreate,
    AttributeOption,
    AttributeUpdate,
    RegistryStats,
)

logger = logging.getLogger(__name__)


def _check_options(data_type: str, options: list[AttributeOption] | None) -> None:
    if data_type in OPTION_DATA_TYPES and not options:
        raise ValidationError(f"{data_type} attributes need at least one option")


class RegistryService:
    """CRUD-style operations on AttributeDefinition rows."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = AttributeRepository(db)

    async def get(self, attribute_id: uuid.UUID) -> AttributeDefinition:
        attribute = await self.repo.get_by_id(attribute_id)
        if attribute is None:
            raise NotFoundError(f"Attribute {attribute_id} not found")
        return attribute

    async def create_attribute(self, data: AttributeCreate) -> AttributeDefinition:
        """Register a new definition.

        Raises:
            ConflictError: If the name is taken.
            ValidationError: If a select/multiselect definition has no options.
        """
        _check_options(data.data_type, data.options)
        if await self.repo.get_by_name(data.name) is not None:
            raise ConflictError(f"An attribute named {data.name!r} already exists")

        attribute = AttributeDefinition(
            name=data.name,
            label=data.label,
            data_type=data.data_type,
            input_type=data.input_type or data.data_type,
            placeholder=data.placeholder,
            help_text=data.help_text,
            group_name=data.group_name,
            options=[o.model_dump() for o in data.options] if data.options else None,
            validation_rules=data.validation_rules,
            default_value=data.default_value,
            is_default_field=data.is_default_field,
            is_system_field=data.is_system_field,
            is_active=data.is_active,
            display_order=data.display_order,
        )
        await self.repo.add(attribute)
        logger.info("Registered attribute %s (%s)", attribute.name, attribute.id)
        return attribute

    async def update_attribute(self, attribute_id: uuid.UUID, data: AttributeUpdate) -> AttributeDefinition:
        attribute = await self.get(attribute_id)
        updates = data.model_dump(exclude_unset=True)

        data_type = updates.get("data_type") or attribute.data_type
        if "options" in updates:
            _check_options(data_type, data.options)
            updates["options"] = [o.model_dump() for o in data.options] if data.options else None
        elif "data_type" in updates:
            _check_options(data_type, attribute.options)

        for field, value in updates.items():
            setattr(attribute, field, value)

        await self.db.flush()
        logger.info("Updated attribute %s: %s", attribute.name, sorted(updates))
        return attribute

    async def deactivate_attribute(self, attribute_id: uuid.UUID) -> AttributeDefinition:
        """Hide a definition from every form.

        Raises:
            PermissionDenied: For system fields.
        """
        attribute = await self.get(attribute_id)
        if attribute.is_system_field:
            raise PermissionDenied(f"System field {attribute.name!r} cannot be deactivated")
        attribute.is_active = False
        await self.db.flush()
        logger.info("Deactivated attribute %s", attribute.name)
        return attribute

    async def activate_attribute(self, attribute_id: uuid.UUID) -> AttributeDefinition:
        attribute = await self.get(attribute_id)
        attribute.is_active = True
        await self.db.flush()
        return attribute

    async def list_attributes(self, **filters) -> list[AttributeDefinition]:
        return await self.repo.list_attributes(**filters)

    async def registry_stats(self) -> RegistryStats:
        attributes = await self.repo.list_attributes()
        active = sum(1 for a in attributes if a.is_active)
        return RegistryStats(
            total=len(attributes),
            active=active,
            inactive=len(attributes) - active,
            by_data_type=dict(Counter(a.data_type for a in attributes)),
            by_group=dict(Counter(a.group_name or "ungrouped" for a in attributes)),
        )

    async def reorder_default_fields(self, attribute_ids: list[uuid.UUID]) -> list[AttributeDefinition]:
        """Set the global order of default fields.

        This changes the fallback order of uncustomized default fields for
        every level at once. Per-level ordering goes through bindings instead.

        Raises:
            ValidationError: Duplicate ids, unknown ids or non-default attributes.
        """
        if len(set(attribute_ids)) != len(attribute_ids):
            raise ValidationError("attribute_ids contains duplicates")

        found = await self.repo.get_many(attribute_ids)
        missing = [str(i) for i in attribute_ids if i not in found]
        if missing:
            raise ValidationError(f"Unknown attributes: {', '.join(missing)}")
        not_default = [found[i].name for i in attribute_ids if not found[i].is_default_field]
        if not_default:
            raise ValidationError(f"Not default fields: {', '.join(not_default)}")

        ordered = [found[i] for i in attribute_ids]
        for position, attribute in enumerate(ordered):
            attribute.display_order = position
        await self.db.flush()
        logger.info("Reordered %d default fields globally", len(ordered))
        return ordered
