"""Preview projection of resolved forms for end users."""

from collections.abc import Sequence

from formschema.schemas.resolution import PreviewResponse, ResolutionContext, ResolvedField


def project(fields: Sequence[ResolvedField]) -> list[ResolvedField]:
    """Keep only visible fields, preserving order."""
    return [field for field in fields if field.is_visible]


def build_preview(context: ResolutionContext, fields: Sequence[ResolvedField]) -> PreviewResponse:
    """Project a resolved list and summarize it."""
    visible = project(fields)
    return PreviewResponse(
        context=context,
        fields=visible,
        total_fields=len(fields),
        visible_fields=len(visible),
        required_fields=sum(1 for f in visible if f.is_required),
        hidden_fields=len(fields) - len(visible),
    )
