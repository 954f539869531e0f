"""Unit tests for the response model."""

import datetime

import pytest

from src.fields import CheckboxField, DateField, SectionField, ShortTextField
from src.schema import FormSchema

from .lib import NO_SELECTION, FormResponse, ResponseEntry


class TestResponseEntry:
    """Tests for entry parsing and defaults."""

    @pytest.mark.unit
    def test_defaults(self):
        """A blank entry has every slot empty."""
        entry = ResponseEntry(form_field_id="f")
        assert entry.text_field is None
        assert entry.select_field == NO_SELECTION
        assert entry.checkbox_field == []
        assert entry.file_field is None
        assert entry.date_field is None

    @pytest.mark.unit
    def test_wire_aliases(self):
        """camelCase wire keys populate the snake_case attributes."""
        entry = ResponseEntry.model_validate(
            {
                "formFieldId": "f",
                "textField": "hi",
                "selectField": None,
                "dateField": "2024-05-01T00:00:00.000Z",
            }
        )
        assert entry.form_field_id == "f"
        assert entry.text_field == "hi"
        assert entry.select_field == NO_SELECTION
        assert entry.date_field == datetime.date(2024, 5, 1)


class TestFormResponse:
    """Tests for answer bookkeeping."""

    @pytest.mark.unit
    def test_for_schema_skips_sections(self):
        """Blank entries are created for input fields only, in order."""
        schema = FormSchema(
            [
                SectionField(id="s"),
                ShortTextField(id="t"),
                DateField(id="d"),
            ]
        )
        response = FormResponse.for_schema(schema)
        assert [e.form_field_id for e in response.entries()] == ["t", "d"]

    @pytest.mark.unit
    def test_entry_auto_creates(self):
        """entry() makes a blank entry; get() does not."""
        response = FormResponse()
        assert response.get("x") is None
        response.entry("x")
        assert "x" in response

    @pytest.mark.unit
    def test_setters(self):
        """Each setter writes its own slot."""
        response = FormResponse()
        response.set_text("t", "hello")
        response.select_choice("c", 1)
        response.attach_file("f", "uploads/cv.pdf")
        response.set_date("d", "2024-12-31")
        assert response.get("t").text_field == "hello"
        assert response.get("c").select_field == 1
        assert response.get("f").file_field == "uploads/cv.pdf"
        assert response.get("d").date_field == datetime.date(2024, 12, 31)

    @pytest.mark.unit
    def test_toggle_choice(self):
        """Toggling twice unchecks the option."""
        schema = FormSchema([CheckboxField(id="c", choices=["a", "b"])])
        response = FormResponse.for_schema(schema)
        assert response.toggle_choice("c", 1) is True
        assert response.toggle_choice("c", 0) is True
        assert response.get("c").checkbox_field == [1, 0]
        assert response.toggle_choice("c", 1) is False
        assert response.get("c").checkbox_field == [0]

    @pytest.mark.unit
    def test_clear(self):
        """clear() resets slots; unknown ids are ignored."""
        response = FormResponse()
        response.set_text("t", "x")
        assert response.clear("t") is True
        assert response.get("t").text_field is None
        assert response.clear("missing") is False

    @pytest.mark.unit
    def test_wire_shape(self):
        """to_wire emits camelCase records that parse back."""
        response = FormResponse(form_id="form-1")
        response.set_date("d", datetime.date(2025, 1, 2))
        records = response.to_wire()
        assert records[0]["formFieldId"] == "d"
        assert records[0]["dateField"] == "2025-01-02"
        again = FormResponse.from_wire(records)
        assert again.get("d").date_field == datetime.date(2025, 1, 2)
