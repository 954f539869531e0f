"""Typed field definitions and their wire codec."""

from .lib import (
    FIELD_MODELS,
    CheckboxField,
    ChoiceBearingField,
    ChoiceField,
    DateField,
    FieldBase,
    FieldDefinition,
    FileField,
    LongTextField,
    SectionField,
    ShortTextField,
    create_field,
    field_to_wire,
    new_field_id,
    parse_field,
    parse_fields,
)

__all__ = [
    "FieldBase",
    "SectionField",
    "ShortTextField",
    "LongTextField",
    "ChoiceField",
    "CheckboxField",
    "DateField",
    "FileField",
    "FieldDefinition",
    "ChoiceBearingField",
    "FIELD_MODELS",
    "new_field_id",
    "create_field",
    "parse_field",
    "parse_fields",
    "field_to_wire",
]
