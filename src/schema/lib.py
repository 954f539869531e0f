"""Schema Model: the ordered field sequence and its mutations.

``FormSchema`` is the single owner of a form's fields while it is open in
the builder. Sequence position is the only ordering that matters; the
``field_order`` attribute carried by each field is an advisory hint that
is rewritten from position on export and never consulted for layout.

Every mutation returns ``True`` when it changed state and ``False`` when
the input referenced something that does not exist. No-ops never raise.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any, TypeVar

from src.catalog import FieldType, editable_properties
from src.fields import (
    ChoiceBearingField,
    FieldBase,
    create_field,
    field_to_wire,
    parse_field,
    parse_fields,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SchemaError(ValueError):
    """Raised when a schema is constructed from inconsistent fields."""


def array_move(items: list[T], from_index: int, to_index: int) -> list[T]:
    """Move one element to a new index, shifting the ones in between.

    This is a move-and-shift, not a swap: moving index 2 to index 0 in
    ``[A, B, C]`` yields ``[C, A, B]``.

    Args:
        items: Source list (left untouched).
        from_index: Index of the element to move.
        to_index: Index the element should occupy afterwards.

    Returns:
        A new list with the element moved.
    """
    result = list(items)
    result.insert(to_index, result.pop(from_index))
    return result


def _as_choices(value: Any) -> list[str]:
    """Normalize an edited ``choices`` value to a fresh list.

    None clears the list and a single string becomes one choice.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


# =============================================================================
# FormSchema
# =============================================================================


class FormSchema:
    """Ordered sequence of field definitions with a focused field.

    Args:
        fields: Field models or wire records, in display order.
        form_id: Identifier of the persisted form, if any.

    Raises:
        SchemaError: If two fields share an id.

    Example:
        >>> schema = FormSchema()
        >>> name = schema.append(FieldType.SHORT_TEXT)
        >>> schema.edit_property(name.id, "header", "Your name")
        True
    """

    def __init__(
        self,
        fields: Iterable[FieldBase | dict[str, Any]] = (),
        form_id: str | None = None,
    ):
        items = [parse_field(f) for f in fields]
        seen: set[str] = set()
        for item in items:
            if item.id in seen:
                raise SchemaError(f"Duplicate field id: {item.id}")
            seen.add(item.id)
        self.form_id = form_id
        self._fields: list[FieldBase] = items
        self._focused_id: str | None = None

    # -------------------------------------------------------------------------
    # Read API
    # -------------------------------------------------------------------------

    @property
    def fields(self) -> tuple[FieldBase, ...]:
        """Fields in display order."""
        return tuple(self._fields)

    def ids(self) -> list[str]:
        return [f.id for f in self._fields]

    def get(self, field_id: str) -> FieldBase | None:
        for f in self._fields:
            if f.id == field_id:
                return f
        return None

    def index_of(self, field_id: str) -> int | None:
        for i, f in enumerate(self._fields):
            if f.id == field_id:
                return i
        return None

    @property
    def is_empty(self) -> bool:
        return not self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[FieldBase]:
        return iter(list(self._fields))

    def __contains__(self, field_id: object) -> bool:
        return any(f.id == field_id for f in self._fields)

    def __repr__(self) -> str:
        return f"FormSchema(form_id={self.form_id!r}, fields={len(self._fields)})"

    # -------------------------------------------------------------------------
    # Focus
    # -------------------------------------------------------------------------

    @property
    def focused_id(self) -> str | None:
        return self._focused_id

    @property
    def focused_field(self) -> FieldBase | None:
        if self._focused_id is None:
            return None
        return self.get(self._focused_id)

    def focus(self, field_id: str) -> bool:
        """Focus a field for property editing. Unknown ids are ignored."""
        if field_id not in self:
            logger.debug(f"focus ignored, unknown field {field_id}")
            return False
        self._focused_id = field_id
        return True

    def clear_focus(self) -> None:
        self._focused_id = None

    # -------------------------------------------------------------------------
    # Field mutations
    # -------------------------------------------------------------------------

    def append(self, field_type: FieldType | str) -> FieldBase:
        """Create a field of ``field_type`` and add it at the end.

        The new field gets a fresh id, its type's default payload and
        ``field_order = len + 1``.

        Raises:
            UnknownFieldTypeError: If the type is not in the catalog.
        """
        field = create_field(field_type, field_order=len(self._fields) + 1)
        self._fields.append(field)
        logger.debug(f"Appended {field.type.value} field {field.id}")
        return field

    def remove(self, field_id: str) -> bool:
        """Delete a field. Clears focus if the removed field held it."""
        index = self.index_of(field_id)
        if index is None:
            logger.debug(f"remove ignored, unknown field {field_id}")
            return False
        del self._fields[index]
        if self._focused_id == field_id:
            self._focused_id = None
        return True

    def reorder(self, from_id: str, to_id: str) -> bool:
        """Move ``from_id`` to the position currently held by ``to_id``."""
        if from_id == to_id:
            return False
        from_index = self.index_of(from_id)
        to_index = self.index_of(to_id)
        if from_index is None or to_index is None:
            logger.debug(f"reorder ignored, unresolved {from_id} -> {to_id}")
            return False
        self._fields = array_move(self._fields, from_index, to_index)
        return True

    def edit_property(self, field_id: str, key: str, value: Any) -> bool:
        """Replace one attribute of a field in place.

        Only attributes the field's type carries can be edited; ``id``
        and ``type`` never can. No validation of ``value`` happens here;
        completeness is checked at save and submit time.
        """
        field = self.get(field_id)
        if field is None:
            logger.debug(f"edit ignored, unknown field {field_id}")
            return False
        if key not in editable_properties(field.type):
            logger.debug(f"edit ignored, {key!r} not editable on {field.type.value}")
            return False
        if key == "choices":
            value = _as_choices(value)
        setattr(field, key, value)
        return True

    # -------------------------------------------------------------------------
    # Choice mutations
    # -------------------------------------------------------------------------

    def _choice_field(self, field_id: str) -> ChoiceBearingField | None:
        field = self.get(field_id)
        if not isinstance(field, ChoiceBearingField):
            logger.debug(f"choice edit ignored, {field_id} has no choices")
            return None
        return field

    def edit_choice(self, field_id: str, index: int, text: str) -> bool:
        field = self._choice_field(field_id)
        if field is None or not 0 <= index < len(field.choices):
            return False
        field.choices[index] = text
        return True

    def add_choice(self, field_id: str, text: str = "") -> bool:
        field = self._choice_field(field_id)
        if field is None:
            return False
        field.choices.append(text)
        return True

    def remove_choice(self, field_id: str, index: int) -> bool:
        field = self._choice_field(field_id)
        if field is None or not 0 <= index < len(field.choices):
            return False
        del field.choices[index]
        return True

    def reorder_choice(self, field_id: str, from_index: int, to_index: int) -> bool:
        """Move-and-shift within one field's choice list."""
        field = self._choice_field(field_id)
        if field is None or from_index == to_index:
            return False
        size = len(field.choices)
        if not (0 <= from_index < size and 0 <= to_index < size):
            return False
        field.choices = array_move(field.choices, from_index, to_index)
        return True

    # -------------------------------------------------------------------------
    # Copies and wire format
    # -------------------------------------------------------------------------

    def copy(self) -> "FormSchema":
        """Deep copy, used as an editor working copy. Focus is not carried."""
        return FormSchema(
            [f.model_copy(deep=True) for f in self._fields], form_id=self.form_id
        )

    def to_wire(self) -> list[dict[str, Any]]:
        """Export flat records in display order, ``fieldOrder`` = index + 1."""
        records = []
        for position, field in enumerate(self._fields, start=1):
            record = field_to_wire(field, form_id=self.form_id)
            record["fieldOrder"] = position
            records.append(record)
        return records

    @classmethod
    def from_wire(
        cls, records: list[dict[str, Any]], form_id: str | None = None
    ) -> "FormSchema":
        """Build a schema from wire records, keeping array order as-is."""
        return cls(parse_fields(records), form_id=form_id)


__all__ = [
    "SchemaError",
    "FormSchema",
    "array_move",
]
