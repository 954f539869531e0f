"""Field Catalog: the fixed registry of insertable question types.

This module is the single source of truth for what kinds of fields a form
can contain. It provides:
- The closed set of field-type tags
- Display metadata for an external palette (label, icon, description)
- The structural shape of each type (which attributes it carries)
- Alias resolution for legacy display names

Every other module asks the catalog instead of hard-coding per-type rules.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    """Closed set of field-type tags.

    Values are the wire tags persisted with every field definition.
    """

    SECTION = "SECTION"
    SHORT_TEXT = "SHORT_TEXT"
    LONG_TEXT = "LONG_TEXT"
    CHOICE = "CHOICE"
    CHECKBOX = "CHECKBOX"
    DATE = "DATE"
    FILE = "FILE"


class FieldCategory(str, Enum):
    """High-level grouping of field types.

    - LAYOUT: structures the form, collects no answer
    - INPUT: collects an answer from the respondent
    """

    LAYOUT = "layout"
    INPUT = "input"


class UnknownFieldTypeError(KeyError):
    """Raised when a value does not name any catalog entry."""


@dataclass(frozen=True)
class FieldShape:
    """Attributes a field type carries beyond ``id``, ``type`` and ``header``."""

    has_description: bool = False
    has_placeholder: bool = False
    has_choices: bool = False
    supports_required: bool = True


@dataclass(frozen=True)
class FieldTypeMeta:
    """Display metadata and shape for one field type.

    Attributes:
        type: The catalog tag.
        category: Layout or input.
        label: Human-readable name shown in the palette.
        icon: Icon identifier for the palette.
        description: One-line explanation of the type.
        aliases: Alternative names accepted by ``resolve_field_type``.
        shape: Attributes carried by fields of this type.
        placeholder: Text shown when the field has no placeholder of its own.
        item_label: Prefix for unnamed choice rows ("Choice 1", "Option 1").
    """

    type: FieldType
    category: FieldCategory
    label: str
    icon: str
    description: str
    aliases: tuple[str, ...] = field(default_factory=tuple)
    shape: FieldShape = field(default_factory=FieldShape)
    placeholder: str | None = None
    item_label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert metadata to dictionary for palette export."""
        return {
            "type": self.type.value,
            "category": self.category.value,
            "label": self.label,
            "icon": self.icon,
            "description": self.description,
            "aliases": list(self.aliases),
            "shape": {
                "has_description": self.shape.has_description,
                "has_placeholder": self.shape.has_placeholder,
                "has_choices": self.shape.has_choices,
                "supports_required": self.shape.supports_required,
            },
        }


_TEXT_SHAPE = FieldShape(has_placeholder=True)
_CHOICE_SHAPE = FieldShape(has_choices=True)
_PLAIN_INPUT_SHAPE = FieldShape()


# Insertion order is the palette order.
FIELD_CATALOG: dict[FieldType, FieldTypeMeta] = {
    FieldType.SECTION: FieldTypeMeta(
        type=FieldType.SECTION,
        category=FieldCategory.LAYOUT,
        label="Section",
        icon="layout-template",
        description="Heading with descriptive text that groups the questions below it",
        aliases=("section", "heading", "title"),
        shape=FieldShape(has_description=True, supports_required=False),
    ),
    FieldType.SHORT_TEXT: FieldTypeMeta(
        type=FieldType.SHORT_TEXT,
        category=FieldCategory.INPUT,
        label="Short Answer",
        icon="text",
        description="Single-line free text answer",
        aliases=("short answer", "shortanswer", "text"),
        shape=_TEXT_SHAPE,
        placeholder="Short Answer",
    ),
    FieldType.LONG_TEXT: FieldTypeMeta(
        type=FieldType.LONG_TEXT,
        category=FieldCategory.INPUT,
        label="Long Answer",
        icon="align-center",
        description="Multi-line free text answer",
        aliases=("long answer", "longanswer", "paragraph", "textarea"),
        shape=_TEXT_SHAPE,
        placeholder="Long Answer",
    ),
    FieldType.CHOICE: FieldTypeMeta(
        type=FieldType.CHOICE,
        category=FieldCategory.INPUT,
        label="Multiple Choice",
        icon="list",
        description="Pick exactly one option from an ordered list",
        aliases=("multiple choice", "multiplechoice", "radio", "single select"),
        shape=_CHOICE_SHAPE,
        item_label="Choice",
    ),
    FieldType.CHECKBOX: FieldTypeMeta(
        type=FieldType.CHECKBOX,
        category=FieldCategory.INPUT,
        label="Checkbox",
        icon="square-check-big",
        description="Tick any number of options from an ordered list",
        aliases=("checkbox", "checkboxes", "multi select"),
        shape=_CHOICE_SHAPE,
        item_label="Option",
    ),
    FieldType.FILE: FieldTypeMeta(
        type=FieldType.FILE,
        category=FieldCategory.INPUT,
        label="File Upload",
        icon="upload",
        description="Attach a single file (images by default)",
        aliases=("file upload", "fileupload", "file", "upload"),
        shape=_PLAIN_INPUT_SHAPE,
    ),
    FieldType.DATE: FieldTypeMeta(
        type=FieldType.DATE,
        category=FieldCategory.INPUT,
        label="Date",
        icon="calendar",
        description="Pick a calendar date",
        aliases=("date field", "datefield", "date", "date picker"),
        shape=_PLAIN_INPUT_SHAPE,
    ),
}


def get_field_meta(field_type: FieldType) -> FieldTypeMeta:
    """Get display metadata for a field type.

    Args:
        field_type: The field type to look up.

    Returns:
        FieldTypeMeta with full metadata for the type.

    Raises:
        UnknownFieldTypeError: If the type is not in the catalog.
    """
    try:
        return FIELD_CATALOG[field_type]
    except KeyError:
        raise UnknownFieldTypeError(f"Unknown field type: {field_type!r}") from None


def get_shape(field_type: FieldType) -> FieldShape:
    """Get the structural shape of a field type."""
    return get_field_meta(field_type).shape


def list_field_types() -> list[FieldType]:
    """All field types in palette order."""
    return list(FIELD_CATALOG)


def get_field_types_by_category(category: FieldCategory) -> list[FieldType]:
    """Get all field types in a category.

    Args:
        category: The category to filter by.

    Returns:
        List of FieldType values in the category, palette order.
    """
    return [meta.type for meta in FIELD_CATALOG.values() if meta.category == category]


def is_input_type(field_type: FieldType) -> bool:
    """Whether fields of this type collect an answer."""
    return get_field_meta(field_type).category == FieldCategory.INPUT


def editable_properties(field_type: FieldType) -> frozenset[str]:
    """Attribute names a property edit may replace for this type.

    ``id`` and ``type`` are never editable; ``choices`` is listed for
    choice types so the whole list can be replaced in one edit.
    """
    shape = get_shape(field_type)
    names = {"header"}
    if shape.has_description:
        names.add("description")
    if shape.has_placeholder:
        names.add("placeholder")
    if shape.has_choices:
        names.add("choices")
    if shape.supports_required:
        names.add("required")
    return frozenset(names)


def resolve_field_type(value: "str | FieldType") -> FieldType:
    """Resolve a tag, enum value or legacy display name to a FieldType.

    Matching is case-insensitive and ignores surrounding whitespace, so
    "SHORT_TEXT", "short_text" and "Short Answer" all resolve.

    Raises:
        UnknownFieldTypeError: If nothing in the catalog matches.
    """
    if isinstance(value, FieldType):
        return value

    normalized = value.strip()
    upper = normalized.upper()
    if upper in FieldType.__members__:
        return FieldType[upper]

    lowered = normalized.lower()
    for meta in FIELD_CATALOG.values():
        if lowered in meta.aliases or lowered == meta.label.lower():
            return meta.type

    raise UnknownFieldTypeError(f"Unknown field type: {value!r}")


def export_catalog() -> list[dict[str, Any]]:
    """Export the catalog for an external palette UI, in palette order."""
    return [meta.to_dict() for meta in FIELD_CATALOG.values()]


__all__ = [
    "FieldType",
    "FieldCategory",
    "FieldShape",
    "FieldTypeMeta",
    "FIELD_CATALOG",
    "UnknownFieldTypeError",
    "get_field_meta",
    "get_shape",
    "list_field_types",
    "get_field_types_by_category",
    "is_input_type",
    "editable_properties",
    "resolve_field_type",
    "export_catalog",
]
