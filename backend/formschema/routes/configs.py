"""Routes addressing a single level configuration by id."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.auth import verify_api_key
from formschema.database import get_db
from formschema.errors import FormSchemaError, to_http_exception
from formschema.repositories.level_config import config_to_response
from formschema.schemas.level_config import (
    LevelConfigOverride,
    LevelConfigResponse,
    PermissionsUpdate,
)
from formschema.services.mutation import MutationService

router = APIRouter(prefix="/configs", tags=["configs"])


@router.patch("/{config_id}", response_model=LevelConfigResponse)
async def update_override(
    config_id: uuid.UUID,
    data: LevelConfigOverride,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> LevelConfigResponse:
    """Update override text, field group or required flag of an editable binding.

    Empty strings clear an override.
    """
    try:
        config = await MutationService(db).update_override(config_id, data)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return config_to_response(config)


@router.patch("/{config_id}/permissions", response_model=LevelConfigResponse)
async def set_permissions(
    config_id: uuid.UUID,
    data: PermissionsUpdate,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> LevelConfigResponse:
    try:
        config = await MutationService(db).set_permissions(config_id, data)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return config_to_response(config)
