"""Error taxonomy for form schema operations.

Services raise these exceptions; routes translate them into HTTP responses
with :func:`to_http_exception`. Validation, permission and not-found errors
are final. Store errors describe the failed operation so a caller can decide
whether a retry is safe.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import TYPE_CHECKING

from fastapi import HTTPException, status

if TYPE_CHECKING:
    from formschema.schemas.level_config import LevelRef


class FormSchemaError(Exception):
    """Base class for all form schema errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def detail(self) -> str | dict:
        return self.message


class ValidationError(FormSchemaError):
    """Malformed context, unknown level id or invalid definition."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ValidationError):
    """A unique registry name is already taken."""

    status_code = status.HTTP_409_CONFLICT


class PermissionDenied(FormSchemaError):
    """Mutation attempted on a protected row."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(FormSchemaError):
    """Referenced row does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class StoreError(FormSchemaError):
    """Persistence failure while applying an operation.

    Multi-row operations are flushed as one batch, so when this is raised
    none of the listed ids were written.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(
        self,
        operation: str,
        level: LevelRef | None = None,
        attribute_ids: Iterable[uuid.UUID] = (),
        config_ids: Iterable[uuid.UUID] = (),
    ):
        self.operation = operation
        self.level = level
        self.attribute_ids = list(attribute_ids)
        self.config_ids = list(config_ids)
        where = f" at {level.kind.value} {level.id}" if level else ""
        super().__init__(f"Store failure during {operation}{where}")

    def detail(self) -> dict:
        return {
            "message": self.message,
            "operation": self.operation,
            "level": (
                {"kind": self.level.kind.value, "id": str(self.level.id)}
                if self.level
                else None
            ),
            "attribute_ids": [str(i) for i in self.attribute_ids],
            "config_ids": [str(i) for i in self.config_ids],
        }


def to_http_exception(exc: FormSchemaError) -> HTTPException:
    """Map a service error onto an HTTPException."""
    return HTTPException(status_code=exc.status_code, detail=exc.detail())
