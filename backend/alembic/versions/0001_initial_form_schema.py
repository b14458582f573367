"""initial_form_schema

Revision ID: 0001_initial_form_schema
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001_initial_form_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create hierarchy, attribute registry and level config tables."""
    op.create_table(
        "service_types",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )

    op.create_table(
        "categories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("service_type_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("service_types.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_categories_service_type_id", "categories", ["service_type_id"])

    op.create_table(
        "subcategories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("category_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("categories.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_subcategories_category_id", "subcategories", ["category_id"])

    op.create_table(
        "attribute_definitions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True, comment="Unique snake_case machine key"),
        sa.Column("label", sa.String(200), nullable=False),
        sa.Column("data_type", sa.String(40), nullable=False, server_default="text"),
        sa.Column("input_type", sa.String(40), nullable=False, server_default="text"),
        sa.Column("placeholder", sa.String(255), nullable=True),
        sa.Column("help_text", sa.Text, nullable=True),
        sa.Column("group_name", sa.String(100), nullable=True),
        sa.Column("options", postgresql.JSONB, nullable=True, comment="Choices for select/multiselect fields"),
        sa.Column("validation_rules", postgresql.JSONB, nullable=True),
        sa.Column("default_value", sa.String(255), nullable=True),
        sa.Column("is_default_field", sa.Boolean, nullable=False, server_default=sa.false(), comment="Cross-cutting field, implicitly present until customized"),
        sa.Column("is_system_field", sa.Boolean, nullable=False, server_default=sa.false(), comment="Cannot be deactivated"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0", comment="Global fallback order for default fields"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("idx_attribute_default_active", "attribute_definitions", ["is_default_field", "is_active"])

    level_kind_enum = postgresql.ENUM(
        "service",
        "category",
        "subcategory",
        name="level_kind",
        create_type=True,
    )
    level_kind_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "level_configs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("level_kind", postgresql.ENUM(name="level_kind", create_type=False), nullable=False),
        sa.Column("level_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("attribute_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("attribute_definitions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_required", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_visible", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_editable", sa.Boolean, nullable=False, server_default=sa.true(), comment="Override text and field group may be changed"),
        sa.Column("is_deletable", sa.Boolean, nullable=False, server_default=sa.true(), comment="Bulk delete may remove this binding"),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("field_group", sa.String(100), nullable=False, server_default="custom"),
        sa.Column("override_label", sa.String(200), nullable=True),
        sa.Column("override_placeholder", sa.String(255), nullable=True),
        sa.Column("override_help_text", sa.Text, nullable=True),
        sa.Column("inherit_from_service", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("inherit_from_category", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.UniqueConstraint("level_kind", "level_id", "attribute_id", name="uq_level_config_binding"),
    )
    op.create_index("ix_level_configs_attribute_id", "level_configs", ["attribute_id"])
    op.create_index("idx_level_config_level", "level_configs", ["level_kind", "level_id"])


def downgrade() -> None:
    """Drop all form schema tables and the level_kind enum."""
    op.drop_table("level_configs")
    op.execute("DROP TYPE IF EXISTS level_kind")
    op.drop_table("attribute_definitions")
    op.drop_table("subcategories")
    op.drop_table("categories")
    op.drop_table("service_types")
