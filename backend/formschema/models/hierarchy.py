"""Catalog hierarchy models: Service Type -> Category -> Subcategory.

Every category belongs to exactly one service type and every subcategory to
exactly one category. Resolution contexts are paths through this tree.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formschema.database import Base
from formschema.models._types import utcnow


class ServiceType(Base):
    """Top-level service offered by a tenant (grocery, handyman, ...)."""

    __tablename__ = "service_types"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    categories: Mapped[list[Category]] = relationship(
        back_populates="service_type",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<ServiceType(id={self.id}, name={self.name})>"


class Category(Base):
    """Category under a service type."""

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    service_type_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("service_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    service_type: Mapped[ServiceType] = relationship(back_populates="categories")
    subcategories: Mapped[list[Subcategory]] = relationship(
        back_populates="category",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name}, service_type_id={self.service_type_id})>"


class Subcategory(Base):
    """Subcategory under a category."""

    __tablename__ = "subcategories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    category: Mapped[Category] = relationship(back_populates="subcategories")

    def __repr__(self) -> str:
        return f"<Subcategory(id={self.id}, name={self.name}, category_id={self.category_id})>"
