"""Form resolution API routes.

Resolve the effective field list for a hierarchy context, preview what an
end user would see, or inspect the raw bindings of each level.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.auth import verify_api_key
from formschema.database import get_db
from formschema.errors import FormSchemaError, to_http_exception
from formschema.schemas.resolution import (
    LevelBreakdown,
    PreviewResponse,
    ResolutionContext,
    ResolvedFormResponse,
)
from formschema.services.preview import build_preview
from formschema.services.resolution import ResolutionEngine

router = APIRouter(prefix="/forms", tags=["forms"])


def get_context(
    service_id: uuid.UUID,
    category_id: uuid.UUID | None = None,
    subcategory_id: uuid.UUID | None = None,
) -> ResolutionContext:
    """Query parameters as a resolution context."""
    return ResolutionContext(
        service_id=service_id,
        category_id=category_id,
        subcategory_id=subcategory_id,
    )


@router.get("/resolve", response_model=ResolvedFormResponse)
async def resolve_form(
    context: ResolutionContext = Depends(get_context),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> ResolvedFormResponse:
    """Effective, ordered field list for the context, hidden fields included."""
    try:
        fields = await ResolutionEngine(db).resolve(context)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return ResolvedFormResponse(context=context, fields=fields, total=len(fields))


@router.get("/preview", response_model=PreviewResponse)
async def preview_form(
    context: ResolutionContext = Depends(get_context),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> PreviewResponse:
    """Visible fields only, as an end user would see the form."""
    try:
        fields = await ResolutionEngine(db).resolve(context)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
    return build_preview(context, fields)


@router.get("/breakdown", response_model=LevelBreakdown)
async def level_breakdown(
    context: ResolutionContext = Depends(get_context),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> LevelBreakdown:
    """Raw bindings of each level on the context path."""
    try:
        return await ResolutionEngine(db).breakdown(context)
    except FormSchemaError as e:
        raise to_http_exception(e) from e
