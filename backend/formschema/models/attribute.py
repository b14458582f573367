"""Attribute registry model.

The registry is the global catalog of field definitions. Rows are created at
seed time, by administrators, or lazily when a default field is first
customized. They are deactivated, never deleted.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from formschema.database import Base
from formschema.models._types import JSONPayload, utcnow


class AttributeDefinition(Base):
    """A single form field definition in the global registry."""

    __tablename__ = "attribute_definitions"

    # === Identity ===
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Unique snake_case machine key",
    )

    # === Presentation ===
    label: Mapped[str] = mapped_column(String(200), nullable=False)
    data_type: Mapped[str] = mapped_column(String(40), nullable=False, default="text")
    input_type: Mapped[str] = mapped_column(String(40), nullable=False, default="text")
    placeholder: Mapped[str | None] = mapped_column(String(255), nullable=True)
    help_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    group_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # === Definition details ===
    options: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONPayload,
        nullable=True,
        comment="Choices for select/multiselect fields",
    )
    validation_rules: Mapped[dict[str, Any] | None] = mapped_column(JSONPayload, nullable=True)
    default_value: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # === Flags ===
    is_default_field: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Cross-cutting field, implicitly present until customized",
    )
    is_system_field: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Cannot be deactivated",
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Global fallback order for default fields",
    )

    # === Timing ===
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    __table_args__ = (
        Index("idx_attribute_default_active", "is_default_field", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<AttributeDefinition(id={self.id}, name={self.name})>"
