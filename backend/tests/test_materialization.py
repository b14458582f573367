"""Tests for lazy materialization of default fields."""

import pytest
from sqlalchemy import func, select

from formschema.errors import NotFoundError, ValidationError
from formschema.models import AttributeDefinition, LevelConfig
from formschema.schemas.level_config import LevelConfigOverride
from formschema.services.default_fields import DEFAULT_FIELD_TEMPLATES, attribute_from_template
from formschema.services.mutation import MutationService


async def count_bindings(db_session, level) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(LevelConfig).where(
            LevelConfig.level_kind == level.kind,
            LevelConfig.level_id == level.id,
        )
    )
    return result.scalar_one()


@pytest.mark.asyncio
async def test_materializing_twice_creates_one_binding(db_session, hierarchy, default_fields):
    service = MutationService(db_session)

    first = await service.toggle_required(hierarchy.category, default_fields["price"], True)
    second = await service.toggle_required(hierarchy.category, default_fields["price"], True)

    assert first.materialized is True
    assert second.materialized is False
    assert first.config.id == second.config.id
    assert await count_bindings(db_session, hierarchy.category) == 1


@pytest.mark.asyncio
async def test_new_binding_defaults(db_session, hierarchy, default_fields):
    outcome = await MutationService(db_session).materialize_default_field(hierarchy.category, "vendor")

    config = outcome.config
    assert config.display_order == 999
    assert config.field_group == "default"
    assert config.is_required is False
    assert config.is_visible is True
    assert config.is_editable is True
    assert config.is_deletable is True
    assert config.inherit_from_service is True
    assert config.inherit_from_category is False


@pytest.mark.asyncio
async def test_existing_binding_only_updates_given_flag(db_session, hierarchy, default_fields):
    service = MutationService(db_session)
    await service.toggle_visible(hierarchy.service, default_fields["price"], False)

    outcome = await service.toggle_required(hierarchy.service, default_fields["price"], True)

    assert outcome.materialized is False
    assert outcome.config.is_required is True
    assert outcome.config.is_visible is False


@pytest.mark.asyncio
async def test_missing_registry_row_created_from_template(db_session, hierarchy):
    outcome = await MutationService(db_session).materialize_default_field(
        hierarchy.service, "product_name", is_required=True
    )

    assert outcome.attribute_created is True
    assert outcome.config.attribute_name == "product_name"
    assert outcome.config.is_required is True
    result = await db_session.execute(
        select(AttributeDefinition).where(AttributeDefinition.name == "product_name")
    )
    attribute = result.scalar_one()
    assert attribute.is_default_field is True
    assert attribute.is_active is True


@pytest.mark.asyncio
async def test_unknown_default_field(db_session, hierarchy):
    with pytest.raises(NotFoundError):
        await MutationService(db_session).materialize_default_field(hierarchy.service, "warp_drive")


@pytest.mark.asyncio
async def test_non_default_attribute_rejected(db_session, hierarchy, make_attribute):
    await make_attribute("color")
    with pytest.raises(ValidationError, match="not a default field"):
        await MutationService(db_session).materialize_default_field(hierarchy.service, "color")


@pytest.mark.asyncio
async def test_customize_default_field(db_session, hierarchy, default_fields):
    service = MutationService(db_session)

    config = await service.customize_default_field(
        hierarchy.subcategory,
        "product_description",
        LevelConfigOverride(override_label="Fruit description", override_help_text="Taste, ripeness"),
    )

    assert config.override_label == "Fruit description"
    assert config.inherit_from_service is True
    assert config.inherit_from_category is True
    assert await count_bindings(db_session, hierarchy.subcategory) == 1


def test_templates_are_system_default_fields():
    for name in DEFAULT_FIELD_TEMPLATES:
        attribute = attribute_from_template(name)
        assert attribute.is_default_field is True
        assert attribute.is_system_field is True
        assert attribute.name == name


@pytest.mark.asyncio
async def test_inactive_default_field_rejected(db_session, hierarchy, make_attribute):
    retired = await make_attribute("gift_wrap", is_default_field=True, is_active=False)
    service = MutationService(db_session)

    with pytest.raises(ValidationError, match="inactive"):
        await service.toggle_required(hierarchy.category, retired, True)

    assert await count_bindings(db_session, hierarchy.category) == 0
