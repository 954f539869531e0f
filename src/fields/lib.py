"""Field definitions: one pydantic model per catalog type.

A form schema is an ordered list of these. Each variant carries only the
attributes meaningful to its type (see ``src.catalog.FieldShape``); the
``type`` tag discriminates the union, so code pattern-matches on the tag
instead of probing for optional attributes.

The wire shape is a flat camelCase record carrying every key for every
type, which is what the persistence RPC stores and returns.
"""

from typing import Annotated, Any, Literal, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

from src.catalog import FieldType, UnknownFieldTypeError, resolve_field_type


def new_field_id() -> str:
    """Generate a fresh, never-reused field id."""
    return str(uuid4())


class FieldBase(BaseModel):
    """Attributes shared by every field type.

    Attributes:
        id: Opaque identifier, stable across reorders.
        type: Catalog tag; immutable once created.
        field_order: Advisory 1-based position persisted with the field.
            Sequence position in the schema is authoritative.
        header: Question text or section title.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str = Field(default_factory=new_field_id, frozen=True)
    type: FieldType = Field(frozen=True)
    field_order: int = Field(default=1, description="Advisory position hint")
    header: str = Field(default="", description="Question text or title")

    @field_validator("type", mode="before")
    @classmethod
    def _resolve_type(cls, value: Any) -> FieldType:
        return resolve_field_type(value)

    @field_validator("header", mode="before")
    @classmethod
    def _none_header(cls, value: Any) -> Any:
        return "" if value is None else value


class _RequiredMixin(BaseModel):
    required: bool = Field(default=False, description="Answer is mandatory")

    @field_validator("required", mode="before")
    @classmethod
    def _none_required(cls, value: Any) -> Any:
        return False if value is None else value


class _ChoicesMixin(BaseModel):
    choices: list[str] = Field(
        default_factory=list,
        description="Ordered option texts; identity is position only",
    )

    @field_validator("choices", mode="before")
    @classmethod
    def _none_choices(cls, value: Any) -> Any:
        return [] if value is None else value


class SectionField(FieldBase):
    """Heading plus descriptive text. Collects no answer."""

    type: Literal[FieldType.SECTION] = Field(default=FieldType.SECTION, frozen=True)
    description: str | None = None


class ShortTextField(FieldBase, _RequiredMixin):
    """Single-line free text question."""

    type: Literal[FieldType.SHORT_TEXT] = Field(
        default=FieldType.SHORT_TEXT, frozen=True
    )
    placeholder: str | None = None


class LongTextField(FieldBase, _RequiredMixin):
    """Multi-line free text question."""

    type: Literal[FieldType.LONG_TEXT] = Field(default=FieldType.LONG_TEXT, frozen=True)
    placeholder: str | None = None


class ChoiceField(FieldBase, _RequiredMixin, _ChoicesMixin):
    """Single-select question over an ordered choice list."""

    type: Literal[FieldType.CHOICE] = Field(default=FieldType.CHOICE, frozen=True)


class CheckboxField(FieldBase, _RequiredMixin, _ChoicesMixin):
    """Multi-select question over an ordered choice list."""

    type: Literal[FieldType.CHECKBOX] = Field(default=FieldType.CHECKBOX, frozen=True)


class DateField(FieldBase, _RequiredMixin):
    """Calendar date question."""

    type: Literal[FieldType.DATE] = Field(default=FieldType.DATE, frozen=True)


class FileField(FieldBase, _RequiredMixin):
    """File attachment question."""

    type: Literal[FieldType.FILE] = Field(default=FieldType.FILE, frozen=True)


FIELD_MODELS: dict[FieldType, type[FieldBase]] = {
    FieldType.SECTION: SectionField,
    FieldType.SHORT_TEXT: ShortTextField,
    FieldType.LONG_TEXT: LongTextField,
    FieldType.CHOICE: ChoiceField,
    FieldType.CHECKBOX: CheckboxField,
    FieldType.DATE: DateField,
    FieldType.FILE: FileField,
}


def _field_tag(value: Any) -> str | None:
    """Discriminator callable: map raw input or a model to its catalog tag."""
    raw = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if raw is None:
        return None
    try:
        return resolve_field_type(raw).value
    except UnknownFieldTypeError:
        return None


FieldDefinition = Annotated[
    Union[
        Annotated[SectionField, Tag(FieldType.SECTION.value)],
        Annotated[ShortTextField, Tag(FieldType.SHORT_TEXT.value)],
        Annotated[LongTextField, Tag(FieldType.LONG_TEXT.value)],
        Annotated[ChoiceField, Tag(FieldType.CHOICE.value)],
        Annotated[CheckboxField, Tag(FieldType.CHECKBOX.value)],
        Annotated[DateField, Tag(FieldType.DATE.value)],
        Annotated[FileField, Tag(FieldType.FILE.value)],
    ],
    Discriminator(_field_tag),
]

ChoiceBearingField = ChoiceField | CheckboxField

_FIELD_ADAPTER: TypeAdapter[FieldDefinition] = TypeAdapter(FieldDefinition)
_FIELD_LIST_ADAPTER: TypeAdapter[list[FieldDefinition]] = TypeAdapter(
    list[FieldDefinition]
)


def create_field(field_type: FieldType | str, field_order: int = 1) -> FieldBase:
    """Create a new field of a catalog type with its default payload.

    The field gets a fresh id, an empty header, ``required=False`` where
    supported, and a single empty choice for choice types so the editor
    has a row to type into.

    Raises:
        UnknownFieldTypeError: If ``field_type`` is not in the catalog.
    """
    resolved = resolve_field_type(field_type)
    model = FIELD_MODELS[resolved]
    if issubclass(model, _ChoicesMixin):
        return model(field_order=field_order, choices=[""])
    return model(field_order=field_order)


def parse_field(record: dict[str, Any] | FieldBase) -> FieldBase:
    """Validate one wire record (or model) into its typed variant.

    Keys that do not belong to the record's type are ignored.

    Raises:
        pydantic.ValidationError: If the record is missing ``type`` or
            names a type outside the catalog.
    """
    return _FIELD_ADAPTER.validate_python(record)


def parse_fields(records: list[dict[str, Any]]) -> list[FieldBase]:
    """Validate a list of wire records, preserving array order."""
    return _FIELD_LIST_ADAPTER.validate_python(records)


def field_to_wire(field: FieldBase, form_id: str | None = None) -> dict[str, Any]:
    """Serialize a field to the flat wire record.

    Every record carries the full key set; keys not meaningful for the
    field's type are emitted as null, false or an empty list.
    """
    record: dict[str, Any] = {
        "id": field.id,
        "formId": form_id,
        "type": field.type.value,
        "fieldOrder": field.field_order,
        "header": field.header,
        "description": None,
        "placeholder": None,
        "required": False,
        "choices": [],
    }
    record.update(field.model_dump(by_alias=True, mode="json"))
    return record


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
