"""Pydantic schemas."""

from formschema.schemas.attribute import (
    AttributeCreate,
    AttributeListResponse,
    AttributeOption,
    AttributeResponse,
    AttributeUpdate,
    DefaultFieldOrderRequest,
    RegistryStats,
)
from formschema.schemas.hierarchy import (
    CategoryNode,
    CategoryResponse,
    HierarchyNodeCreate,
    ServiceTree,
    ServiceTypeResponse,
    SubcategoryResponse,
)
from formschema.schemas.level_config import (
    AttributeIdsRequest,
    FlagUpdate,
    LevelConfigOverride,
    LevelConfigResponse,
    LevelRef,
    PermissionsUpdate,
    ReorderRequest,
)
from formschema.schemas.mutation import MutationOutcome, SkippedEntry, ToggleOutcome
from formschema.schemas.resolution import (
    LevelBreakdown,
    PreviewResponse,
    ResolutionContext,
    ResolvedField,
    ResolvedFormResponse,
)

__all__ = [
    # Registry schemas
    "AttributeCreate",
    "AttributeListResponse",
    "AttributeOption",
    "AttributeResponse",
    "AttributeUpdate",
    "DefaultFieldOrderRequest",
    "RegistryStats",
    # Hierarchy schemas
    "CategoryNode",
    "CategoryResponse",
    "HierarchyNodeCreate",
    "ServiceTree",
    "ServiceTypeResponse",
    "SubcategoryResponse",
    # Level config schemas
    "AttributeIdsRequest",
    "FlagUpdate",
    "LevelConfigOverride",
    "LevelConfigResponse",
    "LevelRef",
    "PermissionsUpdate",
    "ReorderRequest",
    # Mutation outcomes
    "MutationOutcome",
    "SkippedEntry",
    "ToggleOutcome",
    # Resolution schemas
    "LevelBreakdown",
    "PreviewResponse",
    "ResolutionContext",
    "ResolvedField",
    "ResolvedFormResponse",
]
