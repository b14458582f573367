"""Mapping from stored rows to resolved fields, plus the final dedup/sort.

Both resolution paths (in-process merge and store-side merge) go through
these functions so that they cannot drift apart in how a field looks.
"""

from collections.abc import Iterable

from formschema.constants import DEFAULT_FIELD_GROUP
from formschema.models.attribute import AttributeDefinition
from formschema.models.level_config import LevelConfig, LevelKind
from formschema.schemas.resolution import ResolvedField


def bound_field(config: LevelConfig, source: LevelKind, deepest: LevelKind) -> ResolvedField:
    """Resolved field for a binding contributed by ``source``.

    The binding is direct when it comes from the deepest level of the
    context; otherwise it is inherited from ``source``.
    """
    attribute = config.attribute
    is_direct = source == deepest
    return ResolvedField(
        id=config.id,
        attribute_id=attribute.id,
        name=attribute.name,
        label=config.override_label or attribute.label,
        placeholder=config.override_placeholder or attribute.placeholder,
        help_text=config.override_help_text or attribute.help_text,
        data_type=attribute.data_type,
        input_type=attribute.input_type,
        options=attribute.options,
        validation_rules=attribute.validation_rules,
        default_value=attribute.default_value,
        is_required=config.is_required,
        is_visible=config.is_visible,
        is_editable=config.is_editable,
        is_deletable=config.is_deletable,
        is_system_field=attribute.is_system_field,
        display_order=config.display_order,
        field_group=config.field_group,
        is_direct=is_direct,
        inherited_from=None if is_direct else source.value,
        source_level=source.value,
        inheritance_level=source.depth,
    )


def default_field(attribute: AttributeDefinition) -> ResolvedField:
    """Synthetic entry for a default field that has no binding on the path."""
    return ResolvedField(
        id=None,
        attribute_id=attribute.id,
        name=attribute.name,
        label=attribute.label,
        placeholder=attribute.placeholder,
        help_text=attribute.help_text,
        data_type=attribute.data_type,
        input_type=attribute.input_type,
        options=attribute.options,
        validation_rules=attribute.validation_rules,
        default_value=attribute.default_value,
        is_required=False,
        is_visible=True,
        is_editable=True,
        is_deletable=False,
        is_system_field=attribute.is_system_field,
        display_order=attribute.display_order,
        field_group=DEFAULT_FIELD_GROUP,
        is_direct=False,
        inherited_from="default",
        source_level="default",
        inheritance_level=0,
    )


def finalize(fields: Iterable[ResolvedField]) -> list[ResolvedField]:
    """Deduplicate by attribute name and sort by (display_order, name).

    When a binding and a synthetic default entry share a name, the binding
    wins regardless of input order.
    """
    by_name: dict[str, ResolvedField] = {}
    for field in fields:
        current = by_name.get(field.name)
        if current is None or (current.id is None and field.id is not None):
            by_name[field.name] = field
    return sorted(by_name.values(), key=lambda f: (f.display_order, f.name))
