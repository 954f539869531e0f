"""Render module: mode-consistent projection of form schemas.

Turns a schema into a toolkit-neutral visual tree for the builder
canvas, the read-only preview and the fillable response form.
"""

from .lib import (
    DATE_PLACEHOLDER,
    DROP_INDICATOR_TEXT,
    EMPTY_CANVAS_HINT,
    HEADER_FALLBACK,
    SECTION_DESCRIPTION_FALLBACK,
    SUBMIT_TEXT,
    NodeKind,
    RenderMode,
    RenderNode,
    format_render_tree,
    project_field,
    project_schema,
)

__all__ = [
    "HEADER_FALLBACK",
    "SECTION_DESCRIPTION_FALLBACK",
    "DATE_PLACEHOLDER",
    "EMPTY_CANVAS_HINT",
    "DROP_INDICATOR_TEXT",
    "SUBMIT_TEXT",
    "RenderMode",
    "NodeKind",
    "RenderNode",
    "project_field",
    "project_schema",
    "format_render_tree",
]
