"""Pydantic schemas for resolved product forms."""

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from formschema.schemas.level_config import LevelConfigResponse

SourceLevel = Literal["default", "service", "category", "subcategory"]


class ResolutionContext(BaseModel):
    """A path through the hierarchy: service, optionally category and subcategory."""

    model_config = ConfigDict(frozen=True)

    service_id: UUID
    category_id: UUID | None = None
    subcategory_id: UUID | None = None


class ResolvedField(BaseModel):
    """One effective form field for a context.

    Text fields already have the binding's overrides applied. ``id`` is the
    binding id, or None for a default field nobody has customized yet.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID | None
    attribute_id: UUID
    name: str
    label: str
    placeholder: str | None
    help_text: str | None
    data_type: str
    input_type: str
    options: list[dict[str, Any]] | None = None
    validation_rules: dict[str, Any] | None = None
    default_value: str | None = None
    is_required: bool
    is_visible: bool
    is_editable: bool
    is_deletable: bool
    is_system_field: bool = False
    display_order: int
    field_group: str
    is_direct: bool
    inherited_from: SourceLevel | None
    source_level: SourceLevel
    inheritance_level: int


class ResolvedFormResponse(BaseModel):
    """Resolved field list for a context."""

    context: ResolutionContext
    fields: list[ResolvedField]
    total: int


class PreviewResponse(BaseModel):
    """Visible fields for end-user rendering, with summary counts."""

    context: ResolutionContext
    fields: list[ResolvedField]
    total_fields: int
    visible_fields: int
    required_fields: int
    hidden_fields: int


class LevelBreakdown(BaseModel):
    """Raw bindings of every level on a context path."""

    context: ResolutionContext
    service: list[LevelConfigResponse]
    category: list[LevelConfigResponse]
    subcategory: list[LevelConfigResponse]
