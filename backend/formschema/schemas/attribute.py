"""Pydantic schemas for the attribute registry."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from formschema.constants import ATTRIBUTE_NAME_PATTERN


class AttributeOption(BaseModel):
    """One choice of a select/multiselect attribute."""

    label: str = Field(min_length=1)
    value: str = Field(min_length=1)


class AttributeCreate(BaseModel):
    """Schema for registering a new attribute definition."""

    name: str = Field(min_length=1, max_length=100, pattern=ATTRIBUTE_NAME_PATTERN)
    label: str = Field(min_length=1, max_length=200)
    data_type: str = Field(default="text", min_length=1, max_length=40)
    input_type: str | None = Field(default=None, max_length=40)
    placeholder: str | None = Field(default=None, max_length=255)
    help_text: str | None = None
    group_name: str | None = Field(default=None, max_length=100)
    options: list[AttributeOption] | None = None
    validation_rules: dict[str, Any] | None = None
    default_value: str | None = Field(default=None, max_length=255)
    is_default_field: bool = False
    is_system_field: bool = False
    is_active: bool = True
    display_order: int = Field(default=0, ge=0)


class AttributeUpdate(BaseModel):
    """Schema for updating an attribute definition. The name is immutable."""

    label: str | None = Field(default=None, min_length=1, max_length=200)
    data_type: str | None = Field(default=None, min_length=1, max_length=40)
    input_type: str | None = Field(default=None, max_length=40)
    placeholder: str | None = Field(default=None, max_length=255)
    help_text: str | None = None
    group_name: str | None = Field(default=None, max_length=100)
    options: list[AttributeOption] | None = None
    validation_rules: dict[str, Any] | None = None
    default_value: str | None = Field(default=None, max_length=255)
    is_default_field: bool | None = None
    is_system_field: bool | None = None
    display_order: int | None = Field(default=None, ge=0)


class AttributeResponse(BaseModel):
    """Attribute definition in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    label: str
    data_type: str
    input_type: str
    placeholder: str | None
    help_text: str | None
    group_name: str | None
    options: list[dict[str, Any]] | None
    validation_rules: dict[str, Any] | None
    default_value: str | None
    is_default_field: bool
    is_system_field: bool
    is_active: bool
    display_order: int
    created_at: datetime
    updated_at: datetime


class AttributeListResponse(BaseModel):
    """List of attribute definitions."""

    items: list[AttributeResponse]
    total: int


class RegistryStats(BaseModel):
    """Counts over the whole registry."""

    total: int
    active: int
    inactive: int
    by_data_type: dict[str, int]
    by_group: dict[str, int]


class DefaultFieldOrderRequest(BaseModel):
    """Default-field attribute ids in their new global order."""

    attribute_ids: list[UUID] = Field(min_length=1)
