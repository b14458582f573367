"""Attribute registry API routes.

Register, edit, deactivate and list attribute definitions, and set the
global order of default fields.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.auth import verify_api_key
from formschema.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from formschema.database import get_db
from formschema.errors import FormSchemaError, to_http_exception
from formschema.schemas.attribute import (
    AttributeCreate,
    AttributeListResponse,
    AttributeResponse,
    AttributeUpdate,
    DefaultFieldOrderRequest,
    RegistryStats,
)
from formschema.services.registry import RegistryService

router = APIRouter(prefix="/attributes", tags=["attributes"])


@router.get("", response_model=AttributeListResponse)
async def list_attributes(
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = None,
    data_type: str | None = None,
    group: str | None = None,
    is_active: bool | None = None,
    default_only: bool = False,
) -> AttributeListResponse:
    """List registry definitions with optional filtering and pagination.

    Args:
        skip: Number of records to skip (pagination offset).
        limit: Maximum number of records to return.
        search: Case-insensitive match on name, label or group.
        data_type: Filter by data type.
        group: Filter by group name ("ungrouped" for none).
        is_active: Filter by active flag.
        default_only: Only default fields.
    """
    attributes = await RegistryService(db).list_attributes(
        search=search,
        data_type=data_type,
        group=group,
        is_active=is_active,
        default_only=default_only,
    )
    return AttributeListResponse(
        items=[AttributeResponse.model_validate(a) for a in attributes[skip : skip + limit]],
        total=len(attributes),
    )


@router.post("", response_model=AttributeResponse, status_code=status.HTTP_201_CREATED)
async def create_attribute(
    data: AttributeCreate,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> AttributeResponse:
    try:
        attribute = await RegistryService(db).create_attribute(data)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return AttributeResponse.model_validate(attribute)


@router.get("/stats", response_model=RegistryStats)
async def registry_stats(
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> RegistryStats:
    return await RegistryService(db).registry_stats()


@router.put("/defaults/order", response_model=list[AttributeResponse])
async def reorder_default_fields(
    data: DefaultFieldOrderRequest,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> list[AttributeResponse]:
    """Set the global fallback order of default fields."""
    try:
        ordered = await RegistryService(db).reorder_default_fields(data.attribute_ids)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return [AttributeResponse.model_validate(a) for a in ordered]


@router.get("/{attribute_id}", response_model=AttributeResponse)
async def get_attribute(
    attribute_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> AttributeResponse:
    try:
        attribute = await RegistryService(db).get(attribute_id)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return AttributeResponse.model_validate(attribute)


@router.patch("/{attribute_id}", response_model=AttributeResponse)
async def update_attribute(
    attribute_id: uuid.UUID,
    data: AttributeUpdate,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> AttributeResponse:
    """Update a definition. Only provided fields are changed."""
    try:
        attribute = await RegistryService(db).update_attribute(attribute_id, data)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return AttributeResponse.model_validate(attribute)


@router.post("/{attribute_id}/deactivate", response_model=AttributeResponse)
async def deactivate_attribute(
    attribute_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> AttributeResponse:
    try:
        attribute = await RegistryService(db).deactivate_attribute(attribute_id)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return AttributeResponse.model_validate(attribute)


@router.post("/{attribute_id}/activate", response_model=AttributeResponse)
async def activate_attribute(
    attribute_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> AttributeResponse:
    try:
        attribute = await RegistryService(db).activate_attribute(attribute_id)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return AttributeResponse.model_validate(attribute)
