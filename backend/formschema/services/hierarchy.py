"""Hierarchy service.

Creates hierarchy nodes, builds the per-service tree, and validates
resolution contexts and level references before any configuration query
runs against them.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from formschema.errors import ConflictError, NotFoundError, ValidationError
from formschema.models.hierarchy import Category, ServiceType, Subcategory
from formschema.models.level_config import LevelKind
from formschema.repositories.hierarchy import HierarchyRepository
from formschema.schemas.hierarchy import (
    CategoryNode,
    CategoryResponse,
    HierarchyNodeCreate,
    ServiceTree,
    ServiceTypeResponse,
    SubcategoryResponse,
)
from formschema.schemas.level_config import LevelRef
from formschema.schemas.resolution import ResolutionContext

logger = logging.getLogger(__name__)


class HierarchyService:
    """Service type -> category -> subcategory operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = HierarchyRepository(db)

    async def create_service_type(self, data: HierarchyNodeCreate) -> ServiceType:
        """Create a top-level service type.

        Raises:
            ConflictError: If the name is taken.
        """
        if await self.repo.get_service_type_by_name(data.name) is not None:
            raise ConflictError(f"A service type named {data.name!r} already exists")
        service = ServiceType(
            name=data.name,
            description=data.description,
            sort_order=data.sort_order,
        )
        await self.repo.add(service)
        logger.info("Created service type %s (%s)", service.name, service.id)
        return service

    async def create_category(self, service_id: uuid.UUID, data: HierarchyNodeCreate) -> Category:
        """Create a category under an existing service type.

        Raises:
            NotFoundError: If the service type does not exist.
        """
        if await self.repo.get_service_type(service_id) is None:
            raise NotFoundError(f"Service type {service_id} not found")
        category = Category(
            service_type_id=service_id,
            name=data.name,
            description=data.description,
            sort_order=data.sort_order,
        )
        await self.repo.add(category)
        logger.info("Created category %s under service %s", category.id, service_id)
        return category

    async def create_subcategory(self, category_id: uuid.UUID, data: HierarchyNodeCreate) -> Subcategory:
        """Create a subcategory under an existing category.

        Raises:
            NotFoundError: If the parent category does not exist.
        """
        if await self.repo.get_category(category_id) is None:
            raise NotFoundError(f"Category {category_id} not found")
        subcategory = Subcategory(
            category_id=category_id,
            name=data.name,
            description=data.description,
            sort_order=data.sort_order,
        )
        await self.repo.add(subcategory)
        logger.info("Created subcategory %s under category %s", subcategory.id, category_id)
        return subcategory

    async def list_service_types(self) -> list[ServiceType]:
        return await self.repo.list_service_types()

    async def get_tree(self, service_id: uuid.UUID) -> ServiceTree:
        """Nested categories and subcategories of one service type.

        Raises:
            NotFoundError: If the service type does not exist.
        """
        service = await self.repo.get_service_type(service_id)
        if service is None:
            raise NotFoundError(f"Service type {service_id} not found")

        categories = await self.repo.list_categories(service_id)
        subcategories = await self.repo.list_subcategories([c.id for c in categories])

        children: dict[uuid.UUID, list[SubcategoryResponse]] = {c.id: [] for c in categories}
        for sub in subcategories:
            children[sub.category_id].append(SubcategoryResponse.model_validate(sub))

        return ServiceTree(
            **ServiceTypeResponse.model_validate(service).model_dump(),
            categories=[
                CategoryNode(
                    **CategoryResponse.model_validate(c).model_dump(),
                    subcategories=children[c.id],
                )
                for c in categories
            ],
        )

    async def validate_context(self, context: ResolutionContext) -> list[LevelRef]:
        """Check that a context is a real path and return its levels, shallow to deep.

        Raises:
            ValidationError: Unknown ids, a category outside the service, a
                subcategory outside the category, or a subcategory given
                without its category.
        """
        if context.subcategory_id is not None and context.category_id is None:
            raise ValidationError("subcategory_id requires category_id")

        if await self.repo.get_service_type(context.service_id) is None:
            raise ValidationError(f"Unknown service type {context.service_id}")
        path = [LevelRef(kind=LevelKind.SERVICE, id=context.service_id)]

        if context.category_id is not None:
            category = await self.repo.get_category(context.category_id)
            if category is None:
                raise ValidationError(f"Unknown category {context.category_id}")
            if category.service_type_id != context.service_id:
                raise ValidationError(
                    f"Category {context.category_id} does not belong to service {context.service_id}"
                )
            path.append(LevelRef(kind=LevelKind.CATEGORY, id=category.id))

        if context.subcategory_id is not None:
            subcategory = await self.repo.get_subcategory(context.subcategory_id)
            if subcategory is None:
                raise ValidationError(f"Unknown subcategory {context.subcategory_id}")
            if subcategory.category_id != context.category_id:
                raise ValidationError(
                    f"Subcategory {context.subcategory_id} does not belong to category {context.category_id}"
                )
            path.append(LevelRef(kind=LevelKind.SUBCATEGORY, id=subcategory.id))

        return path

    async def require_level(self, level: LevelRef) -> None:
        """Raise ValidationError unless the referenced level row exists."""
        if await self.repo.get_level(level.kind, level.id) is None:
            raise ValidationError(f"Unknown {level.kind.value} {level.id}")
