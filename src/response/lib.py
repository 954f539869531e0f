"""Response payload model: one respondent's answers to a form.

Each answer is a ``ResponseEntry`` matched to its field by id. An entry has
one slot per answer kind; which slot counts for a field depends on the
field's type (see ``src.validation.is_response_complete``).
"""

import datetime
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.catalog import is_input_type

if TYPE_CHECKING:
    from src.schema import FormSchema

NO_SELECTION = -1


class ResponseEntry(BaseModel):
    """Answer slots for a single field.

    Attributes:
        form_field_id: Id of the answered field.
        text_field: Free text answer (SHORT_TEXT, LONG_TEXT).
        select_field: Selected choice index, ``-1`` when nothing is picked.
        checkbox_field: Checked choice indexes, in the order checked.
        file_field: Reference to an uploaded file.
        date_field: Picked calendar date.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    form_field_id: str = Field(alias="formFieldId")
    text_field: str | None = Field(default=None, alias="textField")
    select_field: int = Field(default=NO_SELECTION, alias="selectField")
    checkbox_field: list[int] = Field(default_factory=list, alias="checkboxField")
    file_field: str | None = Field(default=None, alias="fileField")
    date_field: datetime.date | None = Field(default=None, alias="dateField")

    @field_validator("select_field", mode="before")
    @classmethod
    def _none_selection(cls, value: Any) -> Any:
        return NO_SELECTION if value is None else value

    @field_validator("checkbox_field", mode="before")
    @classmethod
    def _none_checked(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("date_field", mode="before")
    @classmethod
    def _date_only(cls, value: Any) -> Any:
        # Datetimes arrive from the RPC as ISO timestamps.
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class FormResponse:
    """Answers keyed by field id, kept in the order they were created."""

    def __init__(
        self,
        entries: Iterable[ResponseEntry | dict[str, Any]] = (),
        form_id: str | None = None,
    ):
        self.form_id = form_id
        self._entries: dict[str, ResponseEntry] = {}
        for raw in entries:
            entry = (
                raw
                if isinstance(raw, ResponseEntry)
                else ResponseEntry.model_validate(raw)
            )
            self._entries[entry.form_field_id] = entry

    @classmethod
    def for_schema(cls, schema: "FormSchema") -> "FormResponse":
        """Blank entries for every input field, in schema order."""
        return cls(
            [ResponseEntry(form_field_id=f.id) for f in schema if is_input_type(f.type)],
            form_id=schema.form_id,
        )

    @classmethod
    def from_wire(
        cls, records: list[dict[str, Any]], form_id: str | None = None
    ) -> "FormResponse":
        return cls(records, form_id=form_id)

    def to_wire(self) -> list[dict[str, Any]]:
        return [
            e.model_dump(by_alias=True, mode="json") for e in self._entries.values()
        ]

    def entry(self, field_id: str) -> ResponseEntry:
        """Return the entry for ``field_id``, creating a blank one if needed."""
        if field_id not in self._entries:
            self._entries[field_id] = ResponseEntry(form_field_id=field_id)
        return self._entries[field_id]

    def get(self, field_id: str) -> ResponseEntry | None:
        return self._entries.get(field_id)

    def entries(self) -> list[ResponseEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._entries

    # -------------------------------------------------------------------------
    # Answer setters
    # -------------------------------------------------------------------------

    def set_text(self, field_id: str, text: str | None) -> None:
        self.entry(field_id).text_field = text

    def select_choice(self, field_id: str, index: int) -> None:
        """Pick a single choice; ``-1`` clears the selection."""
        self.entry(field_id).select_field = index

    def toggle_choice(self, field_id: str, index: int) -> bool:
        """Check or uncheck a checkbox option.

        Returns:
            True if the option is checked after the toggle.
        """
        checked = self.entry(field_id).checkbox_field
        if index in checked:
            checked.remove(index)
            return False
        checked.append(index)
        return True

    def attach_file(self, field_id: str, reference: str | None) -> None:
        self.entry(field_id).file_field = reference

    def set_date(self, field_id: str, value: datetime.date | str | None) -> None:
        if isinstance(value, str):
            value = datetime.date.fromisoformat(value)
        self.entry(field_id).date_field = value

    def clear(self, field_id: str) -> bool:
        """Reset every slot of a field's entry. Unknown ids are ignored."""
        if field_id not in self._entries:
            return False
        self._entries[field_id] = ResponseEntry(form_field_id=field_id)
        return True


__all__ = [
    "NO_SELECTION",
    "ResponseEntry",
    "FormResponse",
]
