"""Tests for the preview projection."""

import uuid

import pytest

from formschema.schemas.resolution import ResolutionContext, ResolvedField
from formschema.services.mutation import MutationService
from formschema.services.preview import build_preview, project
from formschema.services.resolution import ResolutionEngine


def make_field(name: str, order: int, visible: bool = True, required: bool = False) -> ResolvedField:
    return ResolvedField(
        id=uuid.uuid4(),
        attribute_id=uuid.uuid4(),
        name=name,
        label=name.title(),
        placeholder=None,
        help_text=None,
        data_type="text",
        input_type="text",
        is_required=required,
        is_visible=visible,
        is_editable=True,
        is_deletable=True,
        display_order=order,
        field_group="custom",
        is_direct=True,
        inherited_from=None,
        source_level="service",
        inheritance_level=1,
    )


class TestProject:
    def test_keeps_visible_in_order(self):
        fields = [
            make_field("a", 1),
            make_field("b", 2, visible=False),
            make_field("c", 3),
        ]
        assert [f.name for f in project(fields)] == ["a", "c"]

    def test_does_not_modify_input(self):
        fields = [make_field("a", 1, visible=False)]
        assert project(fields) == []
        assert len(fields) == 1

    def test_empty(self):
        assert project([]) == []


def test_build_preview_counts():
    context = ResolutionContext(service_id=uuid.uuid4())
    fields = [
        make_field("a", 1, required=True),
        make_field("b", 2, visible=False, required=True),
        make_field("c", 3),
    ]

    preview = build_preview(context, fields)

    assert [f.name for f in preview.fields] == ["a", "c"]
    assert preview.total_fields == 3
    assert preview.visible_fields == 2
    assert preview.hidden_fields == 1
    assert preview.required_fields == 1


@pytest.mark.asyncio
async def test_preview_of_resolved_form(db_session, hierarchy, default_fields):
    engine = ResolutionEngine(db_session)
    await MutationService(db_session).toggle_visible(hierarchy.category, default_fields["vendor"], False)
    fields = await engine.resolve(hierarchy.category_context)

    preview = build_preview(hierarchy.category_context, fields)

    assert "vendor" not in [f.name for f in preview.fields]
    assert preview.hidden_fields == 1
