"""Structured results of mutation operations.

Every mutation reports what it did per id instead of a single boolean.
"""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from formschema.schemas.level_config import LevelConfigResponse, LevelRef

SkipReason = Literal["already_bound", "duplicate_in_request", "not_bound", "protected"]


class SkippedEntry(BaseModel):
    """An id the operation deliberately left untouched."""

    id: UUID
    name: str | None = None
    reason: SkipReason


class MutationOutcome(BaseModel):
    """Per-id result of a multi-row mutation.

    Batches are written in a single transaction, so a store failure raises
    StoreError instead of returning an outcome; ``failed`` stays empty on
    every returned outcome and exists for callers that aggregate results.
    """

    operation: str
    level: LevelRef
    succeeded: list[UUID] = Field(default_factory=list)
    skipped: list[SkippedEntry] = Field(default_factory=list)
    failed: list[UUID] = Field(
        default_factory=list,
        description="Always empty: a failed batch raises StoreError and writes nothing",
    )

    @computed_field
    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @computed_field
    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @computed_field
    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @computed_field
    @property
    def skipped_names(self) -> list[str]:
        """Names of protected bindings, for "N could not be removed" messages."""
        return [s.name for s in self.skipped if s.reason == "protected" and s.name]


class ToggleOutcome(BaseModel):
    """Result of a required/visible toggle or a default-field materialization."""

    config: LevelConfigResponse
    materialized: bool = Field(description="A new binding was created for a default field")
    attribute_created: bool = Field(
        default=False,
        description="The registry row was created on this call",
    )
