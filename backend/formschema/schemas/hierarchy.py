"""Pydantic schemas for the service/category/subcategory hierarchy."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class HierarchyNodeCreate(BaseModel):
    """Fields shared by service types, categories and subcategories."""

    name: str = Field(min_length=1, max_length=120)
    description: str | None = None
    sort_order: int = 0


class ServiceTypeResponse(BaseModel):
    """Service type in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    sort_order: int
    is_active: bool
    created_at: datetime


class CategoryResponse(BaseModel):
    """Category in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    service_type_id: UUID
    name: str
    description: str | None
    sort_order: int
    is_active: bool
    created_at: datetime


class SubcategoryResponse(BaseModel):
    """Subcategory in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    name: str
    description: str | None
    sort_order: int
    is_active: bool
    created_at: datetime


class CategoryNode(CategoryResponse):
    """Category with its subcategories."""

    subcategories: list[SubcategoryResponse] = []


class ServiceTree(ServiceTypeResponse):
    """Service type with its categories and their subcategories."""

    categories: list[CategoryNode] = []
