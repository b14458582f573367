"""Tests for database setup and models."""

import uuid

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from formschema.database import Base, async_session_maker, engine
from formschema.models import AttributeDefinition, LevelConfig, LevelKind


class TestLevelConfigModel:
    """Tests for LevelConfig model structure."""

    def test_tablename(self):
        assert LevelConfig.__tablename__ == "level_configs"

    def test_binding_is_unique_per_level(self):
        constraints = {c.name for c in LevelConfig.__table__.constraints}
        assert "uq_level_config_binding" in constraints

    def test_level_index(self):
        index_names = {idx.name for idx in LevelConfig.__table__.indexes}
        assert "idx_level_config_level" in index_names

    def test_level_kind_depth(self):
        assert [k.depth for k in LevelKind] == [1, 2, 3]

    def test_repr(self):
        config_id = uuid.uuid4()
        config = LevelConfig(
            id=config_id,
            level_kind=LevelKind.CATEGORY,
            level_id=uuid.uuid4(),
            attribute_id=uuid.uuid4(),
        )
        assert str(config_id) in repr(config)
        assert "category" in repr(config)

    @pytest.mark.asyncio
    async def test_duplicate_binding_rejected(self, db_session, hierarchy, make_attribute, bind):
        color = await make_attribute("color")
        await bind(hierarchy.service, color, display_order=1000)

        with pytest.raises(IntegrityError):
            await bind(hierarchy.service, color, display_order=1001)

    @pytest.mark.asyncio
    async def test_level_kind_stored_as_value(self, db_session, hierarchy, make_attribute, bind):
        await bind(hierarchy.subcategory, await make_attribute("color"), display_order=1000)
        result = await db_session.execute(text("SELECT level_kind FROM level_configs"))
        assert result.scalar_one() == "subcategory"


class TestAttributeDefinitionModel:
    def test_name_is_unique(self):
        assert AttributeDefinition.__table__.columns["name"].unique is True

    def test_repr(self):
        attribute = AttributeDefinition(id=uuid.uuid4(), name="color", label="Color")
        assert "color" in repr(attribute)


class TestDatabaseSetup:
    """Tests for database configuration."""

    def test_base_metadata_has_tables(self):
        expected = {"service_types", "categories", "subcategories", "attribute_definitions", "level_configs"}
        assert expected <= set(Base.metadata.tables)

    def test_engine_configured(self):
        assert engine.url.drivername

    def test_async_session_maker_keeps_objects_loaded(self):
        assert async_session_maker.kw["expire_on_commit"] is False
