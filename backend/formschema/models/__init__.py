"""SQLAlchemy models."""

from formschema.models.attribute import AttributeDefinition
from formschema.models.hierarchy import Category, ServiceType, Subcategory
from formschema.models.level_config import LevelConfig, LevelKind

__all__ = [
    "AttributeDefinition",
    "Category",
    "LevelConfig",
    "LevelKind",
    "ServiceType",
    "Subcategory",
]
