"""Level configuration API routes.

Every route is scoped to one level instance, addressed as
``/levels/{kind}/{level_id}`` where kind is service, category or subcategory.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.auth import verify_api_key
from formschema.database import get_db
from formschema.errors import FormSchemaError, to_http_exception
from formschema.models.level_config import LevelKind
from formschema.repositories.level_config import config_to_response
from formschema.schemas.level_config import (
    AttributeIdsRequest,
    FlagUpdate,
    LevelConfigOverride,
    LevelConfigResponse,
    LevelRef,
    ReorderRequest,
)
from formschema.schemas.mutation import MutationOutcome, ToggleOutcome
from formschema.services.mutation import MutationService

router = APIRouter(prefix="/levels/{kind}/{level_id}", tags=["levels"])


def get_level(kind: LevelKind, level_id: uuid.UUID) -> LevelRef:
    """Path parameters as a level reference."""
    return LevelRef(kind=kind, id=level_id)


@router.get("/configs", response_model=list[LevelConfigResponse])
async def list_level_configs(
    level: LevelRef = Depends(get_level),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> list[LevelConfigResponse]:
    """Direct bindings of the level, by display order."""
    try:
        configs = await MutationService(db).list_level_configs(level)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return [config_to_response(c) for c in configs]


@router.post("/configs", response_model=MutationOutcome)
async def add_attributes(
    data: AttributeIdsRequest,
    level: LevelRef = Depends(get_level),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> MutationOutcome:
    """Bind attributes to the level. Already-bound ids are reported as skipped."""
    try:
        return await MutationService(db).add_attributes(level, data.attribute_ids)
    except FormSchemaError as e:
        raise to_http_exception(e) from e


@router.post("/configs/delete", response_model=MutationOutcome)
async def delete_attributes(
    data: AttributeIdsRequest,
    level: LevelRef = Depends(get_level),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> MutationOutcome:
    """Remove bindings from the level. Protected bindings are reported, not removed."""
    try:
        return await MutationService(db).delete_attributes(level, data.attribute_ids)
    except FormSchemaError as e:
        raise to_http_exception(e) from e


@router.put("/configs/order", response_model=MutationOutcome)
async def reorder_configs(
    data: ReorderRequest,
    level: LevelRef = Depends(get_level),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> MutationOutcome:
    try:
        return await MutationService(db).reorder(level, data.config_ids)
    except FormSchemaError as e:
        raise to_http_exception(e) from e


@router.put("/attributes/{attribute_id}/required", response_model=ToggleOutcome)
async def set_required(
    attribute_id: uuid.UUID,
    data: FlagUpdate,
    level: LevelRef = Depends(get_level),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> ToggleOutcome:
    """Set is_required; the first change to a default field creates its binding."""
    try:
        return await MutationService(db).toggle_required(level, attribute_id, data.value)
    except FormSchemaError as e:
        raise to_http_exception(e) from e


@router.put("/attributes/{attribute_id}/visible", response_model=ToggleOutcome)
async def set_visible(
    attribute_id: uuid.UUID,
    data: FlagUpdate,
    level: LevelRef = Depends(get_level),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> ToggleOutcome:
    """Set is_visible; the first change to a default field creates its binding."""
    try:
        return await MutationService(db).toggle_visible(level, attribute_id, data.value)
    except FormSchemaError as e:
        raise to_http_exception(e) from e


@router.put("/defaults/{name}", response_model=LevelConfigResponse)
async def customize_default_field(
    name: str,
    data: LevelConfigOverride,
    level: LevelRef = Depends(get_level),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> LevelConfigResponse:
    """Customize a default field at the level, creating its binding if needed."""
    try:
        config = await MutationService(db).customize_default_field(level, name, data)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return config_to_response(config)
