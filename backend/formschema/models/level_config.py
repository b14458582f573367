"""Per-level attribute bindings.

A single polymorphic table keyed by (level_kind, level_id, attribute_id)
replaces one config table per hierarchy level. ``level_id`` points at a
service type, category or subcategory row depending on ``level_kind``.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formschema.constants import CUSTOM_FIELD_GROUP
from formschema.database import Base
from formschema.models._types import utcnow
from formschema.models.attribute import AttributeDefinition


class LevelKind(str, enum.Enum):
    """Hierarchy level a binding is attached to."""

    SERVICE = "service"
    CATEGORY = "category"
    SUBCATEGORY = "subcategory"

    @property
    def depth(self) -> int:
        """1 for service, 2 for category, 3 for subcategory."""
        return _DEPTHS[self]


_DEPTHS = {
    LevelKind.SERVICE: 1,
    LevelKind.CATEGORY: 2,
    LevelKind.SUBCATEGORY: 3,
}


class LevelConfig(Base):
    """Binding of one attribute definition to one level instance."""

    __tablename__ = "level_configs"

    # === Identity ===
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    level_kind: Mapped[LevelKind] = mapped_column(
        Enum(
            LevelKind,
            name="level_kind",
            create_constraint=True,
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
    )
    level_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    attribute_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("attribute_definitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # === Behaviour ===
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_editable: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Override text and field group may be changed",
    )
    is_deletable: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Bulk delete may remove this binding",
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    field_group: Mapped[str] = mapped_column(String(100), nullable=False, default=CUSTOM_FIELD_GROUP)

    # === Overrides ===
    override_label: Mapped[str | None] = mapped_column(String(200), nullable=True)
    override_placeholder: Mapped[str | None] = mapped_column(String(255), nullable=True)
    override_help_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    # === Provenance (category/subcategory rows only) ===
    inherit_from_service: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    inherit_from_category: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # === Timing ===
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    attribute: Mapped[AttributeDefinition] = relationship()

    __table_args__ = (
        UniqueConstraint("level_kind", "level_id", "attribute_id", name="uq_level_config_binding"),
        Index("idx_level_config_level", "level_kind", "level_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<LevelConfig(id={self.id}, level={self.level_kind.value}:{self.level_id}, "
            f"attribute_id={self.attribute_id})>"
        )
