"""Render Projector: schema + mode -> visual tree.

Projection is a pure function of (field type, field data, mode). The body
of a field is built the same way for every mode, so the builder, the
read-only preview and the response form never disagree about what a
field looks like. Modes only add overlays around that body:

    - BUILDER: drag handle and delete button per field, the drop
      indicator and the empty-canvas hint
    - PREVIEW: nothing
    - RESPONSE: inputs become interactive and carry the respondent's
      answers, plus a submit button gated on response completeness

The tree is a toolkit-neutral ``RenderNode`` structure; ``format_render_tree``
prints it as an indented text draft.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.catalog import FieldType, UnknownFieldTypeError, get_field_meta
from src.config import use_legacy_checkbox
from src.fields import FieldBase
from src.response import FormResponse, ResponseEntry
from src.schema import FormSchema
from src.validation import is_response_complete

HEADER_FALLBACK = "Header"
SECTION_DESCRIPTION_FALLBACK = "Section Description"
DATE_PLACEHOLDER = "Pick a date"
EMPTY_CANVAS_HINT = "Drag fields here to start building the form"
DROP_INDICATOR_TEXT = "Drop here to add a field"
SUBMIT_TEXT = "Submit"
REQUIRED_MARK = "*"


class RenderMode(str, Enum):
    """The three projections of one schema."""

    BUILDER = "builder"
    PREVIEW = "preview"
    RESPONSE = "response"


class NodeKind(str, Enum):
    """Kinds of visual element in a projected tree."""

    FORM = "form"
    FIELD = "field"
    HEADER = "header"
    REQUIRED_MARK = "required_mark"
    DESCRIPTION = "description"
    TEXT_INPUT = "text_input"
    TEXT_AREA = "text_area"
    CHOICE_LIST = "choice_list"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE_PICKER = "date_picker"
    FILE_INPUT = "file_input"
    DIVIDER = "divider"
    DRAG_HANDLE = "drag_handle"
    DELETE_BUTTON = "delete_button"
    DROP_INDICATOR = "drop_indicator"
    EMPTY_HINT = "empty_hint"
    SUBMIT = "submit"


class RenderNode(BaseModel):
    """One element of the projected visual tree.

    Attributes:
        kind: Element kind.
        text: Visible text, if any.
        field_id: Field this element belongs to.
        value: Current answer for response-mode inputs.
        interactive: Whether the element accepts input.
        props: Extra presentation hints (placeholder, type tag, enabled).
        children: Nested elements in display order.
    """

    kind: NodeKind
    text: str | None = None
    field_id: str | None = None
    value: Any = None
    interactive: bool = False
    props: dict[str, Any] = Field(default_factory=dict)
    children: list["RenderNode"] = Field(default_factory=list)

    def find(self, kind: NodeKind) -> list["RenderNode"]:
        """All descendants (and self) of the given kind, depth-first."""
        found = [self] if self.kind == kind else []
        for child in self.children:
            found.extend(child.find(kind))
        return found


# =============================================================================
# Field bodies
# =============================================================================

BodyBuilder = Callable[[FieldBase, ResponseEntry | None, bool], list[RenderNode]]


def _section_body(field, entry, live):
    return [
        RenderNode(
            kind=NodeKind.DESCRIPTION,
            text=field.description or SECTION_DESCRIPTION_FALLBACK,
            field_id=field.id,
        )
    ]


def _text_body(kind: NodeKind) -> BodyBuilder:
    def build(field, entry, live):
        placeholder = field.placeholder or get_field_meta(field.type).placeholder
        return [
            RenderNode(
                kind=kind,
                field_id=field.id,
                value=entry.text_field if entry else None,
                interactive=live,
                props={"placeholder": placeholder},
            )
        ]

    return build


def _choice_body(kind: NodeKind) -> BodyBuilder:
    def build(field, entry, live):
        item_label = get_field_meta(field.type).item_label
        items = []
        for index, choice in enumerate(field.choices):
            if entry is None:
                checked = False
            elif kind == NodeKind.RADIO:
                checked = entry.select_field == index
            else:
                checked = index in entry.checkbox_field
            items.append(
                RenderNode(
                    kind=kind,
                    text=choice or f"{item_label} {index + 1}",
                    field_id=field.id,
                    value=checked if live else None,
                    interactive=live,
                    props={"index": index},
                )
            )
        return [
            RenderNode(kind=NodeKind.CHOICE_LIST, field_id=field.id, children=items)
        ]

    return build


def _date_body(field, entry, live):
    picked = entry.date_field if entry else None
    return [
        RenderNode(
            kind=NodeKind.DATE_PICKER,
            text=picked.isoformat() if picked else DATE_PLACEHOLDER,
            field_id=field.id,
            value=picked.isoformat() if picked else None,
            interactive=live,
        )
    ]


def _file_body(field, entry, live):
    return [
        RenderNode(
            kind=NodeKind.FILE_INPUT,
            field_id=field.id,
            value=entry.file_field if entry else None,
            interactive=live,
            props={"accept": "image/*"},
        )
    ]


_BODY_BUILDERS: dict[FieldType, BodyBuilder] = {
    FieldType.SECTION: _section_body,
    FieldType.SHORT_TEXT: _text_body(NodeKind.TEXT_INPUT),
    FieldType.LONG_TEXT: _text_body(NodeKind.TEXT_AREA),
    FieldType.CHOICE: _choice_body(NodeKind.RADIO),
    FieldType.CHECKBOX: _choice_body(NodeKind.CHECKBOX),
    FieldType.DATE: _date_body,
    FieldType.FILE: _file_body,
}


def _header(field: FieldBase) -> RenderNode:
    marks = []
    if field.type != FieldType.SECTION and getattr(field, "required", False):
        marks.append(
            RenderNode(kind=NodeKind.REQUIRED_MARK, text=REQUIRED_MARK, field_id=field.id)
        )
    return RenderNode(
        kind=NodeKind.HEADER,
        text=field.header or HEADER_FALLBACK,
        field_id=field.id,
        props={"level": "title" if field.type == FieldType.SECTION else "question"},
        children=marks,
    )


# =============================================================================
# Projection
# =============================================================================


def project_field(
    field: FieldBase,
    mode: RenderMode | str,
    entry: ResponseEntry | None = None,
) -> RenderNode:
    """Project one field for a render mode.

    Args:
        field: The field definition.
        mode: Render mode.
        entry: The respondent's answer; only used in RESPONSE mode.

    Returns:
        A FIELD node wrapping the header and the type-specific body.

    Raises:
        UnknownFieldTypeError: If the field's type has no projection.
    """
    mode = RenderMode(mode)
    try:
        build = _BODY_BUILDERS[field.type]
    except KeyError:
        raise UnknownFieldTypeError(f"No projection for field type {field.type!r}") from None

    live = mode == RenderMode.RESPONSE
    body = build(field, entry if live else None, live)
    children = [_header(field), *body]

    if mode == RenderMode.BUILDER:
        children.insert(0, RenderNode(kind=NodeKind.DRAG_HANDLE, field_id=field.id))
        children.append(
            RenderNode(kind=NodeKind.DELETE_BUTTON, field_id=field.id, interactive=True)
        )

    return RenderNode(
        kind=NodeKind.FIELD,
        field_id=field.id,
        props={"type": FieldType(field.type).value},
        children=children,
    )


def project_schema(
    schema: FormSchema,
    mode: RenderMode | str,
    response: FormResponse | None = None,
    drop_indicator: bool = False,
    legacy_checkbox: bool | None = None,
) -> RenderNode:
    """Project a whole schema for a render mode.

    Fields appear in sequence order separated by dividers.

    Args:
        schema: The form to render.
        mode: Render mode.
        response: Answers shown in RESPONSE mode; a blank response is used
            when omitted.
        drop_indicator: Whether the builder's drop indicator is armed.
        legacy_checkbox: Checkbox completeness rule for the submit button;
            FORM_LEGACY_CHECKBOX decides when None.

    Returns:
        A FORM node.
    """
    mode = RenderMode(mode)
    if mode == RenderMode.RESPONSE and response is None:
        response = FormResponse.for_schema(schema)

    children: list[RenderNode] = []
    for index, field in enumerate(schema):
        if index > 0:
            children.append(RenderNode(kind=NodeKind.DIVIDER))
        entry = response.get(field.id) if response is not None else None
        children.append(project_field(field, mode, entry))

    if mode == RenderMode.BUILDER:
        if drop_indicator:
            children.append(
                RenderNode(kind=NodeKind.DROP_INDICATOR, text=DROP_INDICATOR_TEXT)
            )
        elif schema.is_empty:
            children.append(RenderNode(kind=NodeKind.EMPTY_HINT, text=EMPTY_CANVAS_HINT))

    if mode == RenderMode.RESPONSE and not schema.is_empty:
        children.append(
            RenderNode(
                kind=NodeKind.SUBMIT,
                text=SUBMIT_TEXT,
                interactive=True,
                props={
                    "enabled": is_response_complete(
                        schema,
                        response,
                        legacy_checkbox=use_legacy_checkbox(legacy_checkbox),
                    )
                },
            )
        )

    return RenderNode(
        kind=NodeKind.FORM,
        props={"mode": mode.value, "form_id": schema.form_id},
        children=children,
    )


# =============================================================================
# Text draft
# =============================================================================


def format_render_tree(node: RenderNode) -> str:
    """Format a projected tree as indented text.

    Example output:
        form [builder]
        ├── field [SHORT_TEXT]
        │   ├── drag_handle
        │   ├── header "Your name" *
        │   ├── text_input (Short Answer)
        │   └── delete_button
        └── drop_indicator "Drop here to add a field"

    Args:
        node: Root node to format.

    Returns:
        Formatted tree string.
    """
    lines: list[str] = []
    _format_node(node, lines, "", is_last=True, is_root=True)
    return "\n".join(lines)


def _describe(node: RenderNode) -> str:
    parts = [node.kind.value]
    if node.kind == NodeKind.FORM:
        parts.append(f"[{node.props.get('mode')}]")
    elif node.kind == NodeKind.FIELD:
        parts.append(f"[{node.props.get('type')}]")
    if node.text:
        parts.append(f'"{node.text}"')
    if node.props.get("placeholder"):
        parts.append(f"({node.props['placeholder']})")
    if node.value not in (None, False):
        parts.append("[x]" if node.value is True else f"= {node.value!r}")
    if node.kind == NodeKind.SUBMIT and not node.props.get("enabled"):
        parts.append("(disabled)")
    return " ".join(parts)


def _format_node(
    node: RenderNode,
    lines: list[str],
    prefix: str,
    is_last: bool,
    is_root: bool = False,
) -> None:
    if is_root:
        connector = ""
        child_prefix = ""
    else:
        connector = "└── " if is_last else "├── "
        child_prefix = prefix + ("    " if is_last else "│   ")

    # Required marks print inline after the header text.
    inline = [c for c in node.children if c.kind == NodeKind.REQUIRED_MARK]
    label = _describe(node)
    if inline:
        label += " " + "".join(c.text or "" for c in inline)
    lines.append(f"{prefix}{connector}{label}")

    children = [c for c in node.children if c.kind != NodeKind.REQUIRED_MARK]
    for i, child in enumerate(children):
        _format_node(child, lines, child_prefix, i == len(children) - 1)


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
