"""Hierarchy API routes.

Create and browse service types, categories and subcategories.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.auth import verify_api_key
from formschema.database import get_db
from formschema.errors import FormSchemaError, to_http_exception
from formschema.schemas.hierarchy import (
    CategoryResponse,
    HierarchyNodeCreate,
    ServiceTree,
    ServiceTypeResponse,
    SubcategoryResponse,
)
from formschema.services.hierarchy import HierarchyService

router = APIRouter(prefix="/hierarchy", tags=["hierarchy"])


@router.get("/services", response_model=list[ServiceTypeResponse])
async def list_service_types(
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> list[ServiceTypeResponse]:
    """List all service types by sort order."""
    services = await HierarchyService(db).list_service_types()
    return [ServiceTypeResponse.model_validate(s) for s in services]


@router.post("/services", response_model=ServiceTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_service_type(
    data: HierarchyNodeCreate,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> ServiceTypeResponse:
    try:
        service = await HierarchyService(db).create_service_type(data)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return ServiceTypeResponse.model_validate(service)


@router.get("/services/{service_id}/tree", response_model=ServiceTree)
async def get_service_tree(
    service_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> ServiceTree:
    """Return a service type with its categories and subcategories nested."""
    try:
        return await HierarchyService(db).get_tree(service_id)
    except FormSchemaError as e:
        raise to_http_exception(e) from e


@router.post(
    "/services/{service_id}/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    service_id: uuid.UUID,
    data: HierarchyNodeCreate,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> CategoryResponse:
    try:
        category = await HierarchyService(db).create_category(service_id, data)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return CategoryResponse.model_validate(category)


@router.post(
    "/categories/{category_id}/subcategories",
    response_model=SubcategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_subcategory(
    category_id: uuid.UUID,
    data: HierarchyNodeCreate,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> SubcategoryResponse:
    try:
        subcategory = await HierarchyService(db).create_subcategory(category_id, data)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return SubcategoryResponse.model_validate(subcategory)
