"""Pydantic schemas for level bindings and their mutations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from formschema.models.level_config import LevelKind


class LevelRef(BaseModel):
    """One concrete level instance: a service type, category or subcategory."""

    model_config = ConfigDict(frozen=True)

    kind: LevelKind
    id: UUID


class LevelConfigResponse(BaseModel):
    """A binding row as stored, with the bound attribute's identity."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    level_kind: LevelKind
    level_id: UUID
    attribute_id: UUID
    attribute_name: str
    attribute_label: str
    is_required: bool
    is_visible: bool
    is_editable: bool
    is_deletable: bool
    display_order: int
    field_group: str
    override_label: str | None
    override_placeholder: str | None
    override_help_text: str | None
    inherit_from_service: bool
    inherit_from_category: bool
    created_at: datetime
    updated_at: datetime


class LevelConfigOverride(BaseModel):
    """Patch for the override text, field group and required flag of a binding."""

    override_label: str | None = Field(default=None, max_length=200)
    override_placeholder: str | None = Field(default=None, max_length=255)
    override_help_text: str | None = None
    field_group: str | None = Field(default=None, min_length=1, max_length=100)
    is_required: bool | None = None


class PermissionsUpdate(BaseModel):
    """Administrative switch for the protection flags of a binding."""

    is_editable: bool | None = None
    is_deletable: bool | None = None


class AttributeIdsRequest(BaseModel):
    """Batch of attribute ids for add/delete."""

    attribute_ids: list[UUID] = Field(min_length=1)


class ReorderRequest(BaseModel):
    """Config ids of one level in their new order."""

    config_ids: list[UUID] = Field(min_length=1)


class FlagUpdate(BaseModel):
    """Target value for a required/visible toggle."""

    value: bool
