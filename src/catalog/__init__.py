"""Field catalog - the fixed set of insertable question types.

Example usage:
    >>> from src.catalog import FieldType, get_field_meta, export_catalog
    >>> get_field_meta(FieldType.CHOICE).label
    'Multiple Choice'
    >>> palette = export_catalog()  # For an external palette UI
"""

from .lib import (
    FIELD_CATALOG,
    FieldCategory,
    FieldShape,
    FieldType,
    FieldTypeMeta,
    UnknownFieldTypeError,
    editable_properties,
    export_catalog,
    get_field_meta,
    get_field_types_by_category,
    get_shape,
    is_input_type,
    list_field_types,
    resolve_field_type,
)

__all__ = [
    # Enums
    "FieldType",
    "FieldCategory",
    # Metadata
    "FieldShape",
    "FieldTypeMeta",
    "FIELD_CATALOG",
    "UnknownFieldTypeError",
    # Lookup functions
    "get_field_meta",
    "get_shape",
    "list_field_types",
    "get_field_types_by_category",
    "is_input_type",
    "editable_properties",
    "resolve_field_type",
    "export_catalog",
]
