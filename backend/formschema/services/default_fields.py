"""Lazy materialization of default fields.

Default fields are registry entries that appear on every form without any
binding. The first time one is customized at a level, a binding is created
for it there (display order 999, just below the custom-field range). The
binding lookup runs first, so repeating a call never creates a second row.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from formschema.constants import DEFAULT_FIELD_GROUP, MATERIALIZED_DEFAULT_ORDER
from formschema.errors import NotFoundError, ValidationError
from formschema.models.attribute import AttributeDefinition
from formschema.models.level_config import LevelConfig, LevelKind
from formschema.repositories.attribute import AttributeRepository
from formschema.repositories.level_config import LevelConfigRepository
from formschema.schemas.level_config import LevelRef

logger = logging.getLogger(__name__)

# Built-in default fields, used to create the registry row on first
# customization when the registry was never seeded with it.
DEFAULT_FIELD_TEMPLATES: dict[str, dict] = {
    "product_name": {
        "label": "Product Name",
        "data_type": "text",
        "input_type": "text",
        "placeholder": "Enter product name",
        "help_text": "The name of your product",
        "display_order": 0,
        "is_system_field": True,
    },
    "product_description": {
        "label": "Description",
        "data_type": "textarea",
        "input_type": "textarea",
        "placeholder": "Describe the product...",
        "help_text": "Detailed description",
        "display_order": 1,
        "is_system_field": True,
    },
    "price": {
        "label": "Price",
        "data_type": "number",
        "input_type": "number",
        "placeholder": "Enter price",
        "help_text": "Product price",
        "display_order": 2,
        "is_system_field": True,
    },
    "vendor": {
        "label": "Vendor",
        "data_type": "select",
        "input_type": "select",
        "placeholder": "Select vendor",
        "help_text": "Choose a vendor",
        "display_order": 3,
        "is_system_field": True,
    },
}


@dataclass
class Materialization:
    """Binding produced (or found) by a materialization call."""

    config: LevelConfig
    created_binding: bool
    created_attribute: bool


def attribute_from_template(name: str) -> AttributeDefinition:
    """Build an unsaved registry row for a built-in default field."""
    template = DEFAULT_FIELD_TEMPLATES[name]
    return AttributeDefinition(
        name=name,
        is_default_field=True,
        is_active=True,
        **template,
    )


class DefaultFieldMaterializer:
    """Create or update the binding of a default field at one level."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.attributes = AttributeRepository(db)
        self.configs = LevelConfigRepository(db)

    async def resolve_attribute(self, name: str) -> tuple[AttributeDefinition, bool]:
        """Find the default field by name, creating it from a template on a miss.

        Returns:
            The definition and whether it was created by this call.

        Raises:
            NotFoundError: Unknown name with no built-in template.
            ValidationError: The name belongs to a non-default or inactive attribute.
        """
        attribute = await self.attributes.get_by_name(name)
        if attribute is None:
            if name not in DEFAULT_FIELD_TEMPLATES:
                raise NotFoundError(f"Default field {name!r} not found")
            attribute = await self.attributes.add(attribute_from_template(name))
            logger.info("Created registry row for default field %s", name)
            return attribute, True
        if not attribute.is_default_field:
            raise ValidationError(f"Attribute {name!r} is not a default field")
        if not attribute.is_active:
            raise ValidationError(f"Default field {name!r} is inactive")
        return attribute, False

    async def materialize(
        self,
        level: LevelRef,
        name: str,
        is_required: bool | None = None,
        is_visible: bool | None = None,
    ) -> Materialization:
        """Ensure a binding exists for the default field and apply the given flags.

        A new binding takes the requested flag values; flags not given keep
        their defaults (not required, visible). An existing binding only has
        the given flags updated.
        """
        attribute, created_attribute = await self.resolve_attribute(name)

        config = await self.configs.get_binding(level, attribute.id)
        created_binding = config is None
        if config is None:
            config = LevelConfig(
                level_kind=level.kind,
                level_id=level.id,
                attribute_id=attribute.id,
                attribute=attribute,
                is_required=bool(is_required),
                is_visible=True if is_visible is None else is_visible,
                is_editable=True,
                is_deletable=True,
                display_order=MATERIALIZED_DEFAULT_ORDER,
                field_group=DEFAULT_FIELD_GROUP,
                inherit_from_service=level.kind is not LevelKind.SERVICE,
                inherit_from_category=level.kind is LevelKind.SUBCATEGORY,
            )
            self.configs.add(config)
        else:
            if is_required is not None:
                config.is_required = is_required
            if is_visible is not None:
                config.is_visible = is_visible

        await self.db.flush()
        logger.info(
            "Materialized default field %s at %s %s (new binding: %s)",
            name,
            level.kind.value,
            level.id,
            created_binding,
        )
        return Materialization(
            config=config,
            created_binding=created_binding,
            created_attribute=created_attribute,
        )
