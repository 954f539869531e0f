"""Completeness checks for fields, schemas, responses and event info.

Validators never raise. Each ``validate_*`` function returns a list of
``ValidationError`` records explaining what is incomplete, and each
``is_*`` companion is simply ``not validate_*(...)``. Callers at the save
and submit boundaries decide how to surface the result.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.catalog import FieldType
from src.fields import FieldBase
from src.response import FormResponse, ResponseEntry
from src.schema import FormSchema

if TYPE_CHECKING:
    from src.session.models import EventInfo

MIN_EVENT_PRICE = 100


@dataclass
class ValidationError:
    """Represents one completeness problem.

    Attributes:
        field_id: Id of the offending field, or the attribute name for
            event info. Empty for schema-level problems.
        message: Human-readable error description.
        error_type: Category of the error.
    """

    field_id: str
    message: str
    error_type: str


# =============================================================================
# Field and schema validation
# =============================================================================


def validate_field(field: FieldBase) -> list[ValidationError]:
    """Check that a field is complete enough to be saved.

    Rules:
        - Every type needs a non-empty header.
        - SECTION also needs a non-empty description.
        - CHOICE and CHECKBOX need at least one choice, none of them empty.

    Args:
        field: The field definition to check.

    Returns:
        list[ValidationError]: Problems found (empty if valid).
    """
    errors: list[ValidationError] = []

    if not field.header:
        errors.append(
            ValidationError(
                field_id=field.id,
                message="Field has no header",
                error_type="missing_header",
            )
        )

    if field.type == FieldType.SECTION and not field.description:
        errors.append(
            ValidationError(
                field_id=field.id,
                message="Section has no description",
                error_type="missing_description",
            )
        )

    if field.type in (FieldType.CHOICE, FieldType.CHECKBOX):
        if not field.choices:
            errors.append(
                ValidationError(
                    field_id=field.id,
                    message="Field has no choices",
                    error_type="no_choices",
                )
            )
        for index, choice in enumerate(field.choices):
            if choice == "":
                errors.append(
                    ValidationError(
                        field_id=field.id,
                        message=f"Choice {index + 1} is empty",
                        error_type="empty_choice",
                    )
                )

    return errors


def is_field_valid(field: FieldBase) -> bool:
    return not validate_field(field)


def validate_schema(schema: FormSchema) -> list[ValidationError]:
    """Check that a schema can be saved.

    A schema needs at least one field and every field must be valid.

    Example:
        >>> errors = validate_schema(schema)
        >>> if errors:
        ...     for e in errors:
        ...         print(f"{e.field_id}: {e.message}")
    """
    if schema.is_empty:
        return [
            ValidationError(
                field_id="",
                message="Form has no fields",
                error_type="empty_schema",
            )
        ]
    errors: list[ValidationError] = []
    for field in schema:
        errors.extend(validate_field(field))
    return errors


def is_schema_valid(schema: FormSchema) -> bool:
    return not validate_schema(schema)


# =============================================================================
# Response validation
# =============================================================================


def _has_answer(
    field: FieldBase, entry: ResponseEntry, legacy_checkbox: bool
) -> bool:
    if field.type in (FieldType.SHORT_TEXT, FieldType.LONG_TEXT):
        return bool(entry.text_field)
    if field.type == FieldType.CHOICE:
        return 0 <= entry.select_field < len(field.choices)
    if field.type == FieldType.CHECKBOX:
        if legacy_checkbox:
            return len(field.choices) != 0
        return any(0 <= i < len(field.choices) for i in entry.checkbox_field)
    if field.type == FieldType.FILE:
        return bool(entry.file_field)
    if field.type == FieldType.DATE:
        return entry.date_field is not None
    return True


def validate_response(
    schema: FormSchema,
    response: FormResponse,
    legacy_checkbox: bool = False,
) -> list[ValidationError]:
    """Check that every required field has an answer.

    Sections are exempt whatever their ``required`` flag. Entries for
    fields not in the schema are ignored.

    Args:
        schema: The form being answered.
        response: The respondent's answers, matched by field id.
        legacy_checkbox: Judge CHECKBOX fields by whether the field has
            choices at all instead of by the respondent's selection.

    Returns:
        list[ValidationError]: One error per unanswered required field.
    """
    errors: list[ValidationError] = []
    for field in schema:
        if field.type == FieldType.SECTION or not getattr(field, "required", False):
            continue
        entry = response.get(field.id)
        if entry is None:
            errors.append(
                ValidationError(
                    field_id=field.id,
                    message=f"No answer for required field '{field.header}'",
                    error_type="missing_entry",
                )
            )
        elif not _has_answer(field, entry, legacy_checkbox):
            errors.append(
                ValidationError(
                    field_id=field.id,
                    message=f"Required field '{field.header}' is unanswered",
                    error_type="missing_answer",
                )
            )
    return errors


def is_response_complete(
    schema: FormSchema,
    response: FormResponse,
    legacy_checkbox: bool = False,
) -> bool:
    return not validate_response(schema, response, legacy_checkbox=legacy_checkbox)


# =============================================================================
# Event info validation
# =============================================================================

_EVENT_REQUIRED = (
    ("name", "Event name"),
    ("description", "Description"),
    ("location", "Location"),
    ("start_date", "Start date"),
    ("regist", "Registration close date"),
)


def validate_event_info(info: "EventInfo") -> list[ValidationError]:
    """Check the general information step of a new event.

    Name, description, location, start date and registration close date
    must be present, and the price must be at least ``MIN_EVENT_PRICE``.
    """
    errors: list[ValidationError] = []
    for attr, label in _EVENT_REQUIRED:
        if not getattr(info, attr, None):
            errors.append(
                ValidationError(
                    field_id=attr,
                    message=f"{label} is required",
                    error_type="missing_value",
                )
            )
    price = getattr(info, "price", None)
    if price is None or price < MIN_EVENT_PRICE:
        errors.append(
            ValidationError(
                field_id="price",
                message=f"Price must be at least {MIN_EVENT_PRICE}",
                error_type="price_too_low",
            )
        )
    return errors


def is_event_info_valid(info: "EventInfo") -> bool:
    return not validate_event_info(info)


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
