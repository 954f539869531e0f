"""Completeness validation for forms, responses and event info."""

from src.validation.lib import (
    MIN_EVENT_PRICE,
    ValidationError,
    is_event_info_valid,
    is_field_valid,
    is_response_complete,
    is_schema_valid,
    validate_event_info,
    validate_field,
    validate_response,
    validate_schema,
)

__all__ = [
    "MIN_EVENT_PRICE",
    "ValidationError",
    "validate_field",
    "is_field_valid",
    "validate_schema",
    "is_schema_valid",
    "validate_response",
    "is_response_complete",
    "validate_event_info",
    "is_event_info_valid",
]
