"""Repository layer for data access.

Repositories encapsulate row-level select/insert/update/delete against the
store and return ORM objects to the service layer.
"""

from formschema.repositories.attribute import AttributeRepository
from formschema.repositories.hierarchy import HierarchyRepository
from formschema.repositories.level_config import LevelConfigRepository, config_to_response

__all__ = [
    "AttributeRepository",
    "HierarchyRepository",
    "LevelConfigRepository",
    "config_to_response",
]
