"""form-builder: editing engine for event registration forms."""

from src.catalog import FieldType, export_catalog, resolve_field_type
from src.dnd import DragCoordinator
from src.fields import FieldDefinition, create_field, parse_field
from src.render import RenderMode, format_render_tree, project_schema
from src.response import FormResponse, ResponseEntry
from src.schema import FormSchema
from src.validation import (
    ValidationError,
    is_response_complete,
    is_schema_valid,
    validate_response,
    validate_schema,
)

__all__ = [
    # Catalog
    "FieldType",
    "export_catalog",
    "resolve_field_type",
    # Fields and schema
    "FieldDefinition",
    "create_field",
    "parse_field",
    "FormSchema",
    # Drag and drop
    "DragCoordinator",
    # Responses
    "FormResponse",
    "ResponseEntry",
    # Rendering
    "RenderMode",
    "project_schema",
    "format_render_tree",
    # Validation
    "validate_schema",
    "is_schema_valid",
    "validate_response",
    "is_response_complete",
    "ValidationError",
]
