"""Unit tests for validation module."""

import datetime

import pytest

from src.fields import (
    CheckboxField,
    ChoiceField,
    DateField,
    FileField,
    LongTextField,
    SectionField,
    ShortTextField,
)
from src.response import FormResponse
from src.schema import FormSchema
from src.session.models import EventInfo
from src.validation import (
    is_event_info_valid,
    is_field_valid,
    is_response_complete,
    is_schema_valid,
    validate_event_info,
    validate_field,
    validate_response,
    validate_schema,
)


class TestValidateField:
    """Tests for single-field completeness."""

    @pytest.mark.unit
    def test_header_required_for_every_type(self):
        """A blank header fails whatever the type."""
        for field in (ShortTextField(), DateField(), FileField(), LongTextField()):
            errors = validate_field(field)
            assert [e.error_type for e in errors] == ["missing_header"]

    @pytest.mark.unit
    def test_plain_input_needs_only_header(self):
        """Text, date and file fields are valid with just a header."""
        assert is_field_valid(ShortTextField(header="Name"))
        assert is_field_valid(DateField(header="When"))
        assert is_field_valid(FileField(header="CV"))

    @pytest.mark.unit
    def test_section_needs_description(self):
        """Sections need a description as well as a header."""
        assert not is_field_valid(SectionField(header="Intro"))
        assert not is_field_valid(SectionField(header="Intro", description=""))
        assert is_field_valid(SectionField(header="Intro", description="Welcome"))

    @pytest.mark.unit
    @pytest.mark.parametrize("model", [ChoiceField, CheckboxField])
    @pytest.mark.parametrize(
        "choices,valid",
        [([], False), (["A", ""], False), ([""], False), (["A", "B"], True)],
    )
    def test_choice_rules(self, model, choices, valid):
        """Choices must be present and non-empty."""
        assert is_field_valid(model(header="Pick", choices=choices)) is valid

    @pytest.mark.unit
    def test_empty_choice_reports_position(self):
        """Each empty choice is reported with its 1-based position."""
        errors = validate_field(ChoiceField(header="Pick", choices=["A", "", ""]))
        assert [e.message for e in errors] == ["Choice 2 is empty", "Choice 3 is empty"]


class TestValidateSchema:
    """Tests for whole-schema submittability."""

    @pytest.mark.unit
    def test_empty_schema_invalid(self):
        """A schema with no fields cannot be saved."""
        errors = validate_schema(FormSchema())
        assert errors[0].error_type == "empty_schema"
        assert not is_schema_valid(FormSchema())

    @pytest.mark.unit
    def test_section_without_description_invalid(self):
        """One section with empty description is invalid."""
        schema = FormSchema([SectionField(header="Intro", description="")])
        assert not is_schema_valid(schema)

    @pytest.mark.unit
    def test_single_short_text_valid(self):
        """One short text with a header is valid."""
        assert is_schema_valid(FormSchema([ShortTextField(header="Name")]))

    @pytest.mark.unit
    def test_errors_collected_across_fields(self):
        """Every invalid field contributes its errors."""
        schema = FormSchema([ShortTextField(id="a"), DateField(id="b")])
        assert [e.field_id for e in validate_schema(schema)] == ["a", "b"]


class TestValidateResponse:
    """Tests for response completeness."""

    @pytest.mark.unit
    def test_required_short_text(self):
        """Empty text is incomplete; any text completes it."""
        schema = FormSchema([ShortTextField(id="t", header="Name", required=True)])
        response = FormResponse.for_schema(schema)
        response.set_text("t", "")
        assert not is_response_complete(schema, response)
        response.set_text("t", "x")
        assert is_response_complete(schema, response)

    @pytest.mark.unit
    def test_optional_fields_ignored(self):
        """Unanswered optional fields do not block submission."""
        schema = FormSchema([LongTextField(id="t", header="Notes")])
        assert is_response_complete(schema, FormResponse())

    @pytest.mark.unit
    def test_missing_entry_is_incomplete(self):
        """A required field with no entry at all is incomplete."""
        schema = FormSchema([DateField(id="d", header="When", required=True)])
        errors = validate_response(schema, FormResponse())
        assert [e.error_type for e in errors] == ["missing_entry"]

    @pytest.mark.unit
    def test_section_exempt_even_if_required(self):
        """A required flag on a section is ignored."""
        section = SectionField(id="s", header="H", description="D")
        object.__setattr__(section, "required", True)
        assert is_response_complete(FormSchema([section]), FormResponse())

    @pytest.mark.unit
    def test_unknown_entries_ignored(self):
        """Answers for fields not in the schema are not errors."""
        response = FormResponse()
        response.set_text("ghost", "boo")
        assert is_response_complete(FormSchema(), response)

    @pytest.mark.unit
    def test_choice_selection_range(self):
        """A choice answer must pick an existing index."""
        schema = FormSchema(
            [ChoiceField(id="c", header="Meal", choices=["Veg", "Meat"], required=True)]
        )
        response = FormResponse.for_schema(schema)
        assert not is_response_complete(schema, response)
        response.select_choice("c", 2)
        assert not is_response_complete(schema, response)
        response.select_choice("c", 1)
        assert is_response_complete(schema, response)

    @pytest.mark.unit
    def test_checkbox_uses_selection(self):
        """Checkbox completeness follows what the respondent checked."""
        schema = FormSchema(
            [CheckboxField(id="c", header="Tags", choices=["a", "b"], required=True)]
        )
        response = FormResponse.for_schema(schema)
        assert not is_response_complete(schema, response)
        response.toggle_choice("c", 0)
        assert is_response_complete(schema, response)

    @pytest.mark.unit
    def test_checkbox_legacy_rule(self):
        """The legacy rule only looks at the field's own choices."""
        schema = FormSchema(
            [CheckboxField(id="c", header="Tags", choices=["a"], required=True)]
        )
        response = FormResponse.for_schema(schema)
        assert is_response_complete(schema, response, legacy_checkbox=True)
        schema.edit_property("c", "choices", [])
        assert not is_response_complete(schema, response, legacy_checkbox=True)

    @pytest.mark.unit
    def test_file_and_date_slots(self):
        """File and date answers use their own slots."""
        schema = FormSchema(
            [
                FileField(id="f", header="CV", required=True),
                DateField(id="d", header="Start", required=True),
            ]
        )
        response = FormResponse.for_schema(schema)
        response.set_text("f", "not a file")
        assert len(validate_response(schema, response)) == 2
        response.attach_file("f", "cv.pdf")
        response.set_date("d", datetime.date(2025, 3, 1))
        assert is_response_complete(schema, response)


class TestValidateEventInfo:
    """Tests for the general-info step."""

    @pytest.fixture
    def info(self):
        return EventInfo(
            name="Mock exam",
            description="Full-length practice test",
            location="Hall B",
            start_date=datetime.datetime(2025, 6, 1, 9),
            regist=datetime.datetime(2025, 5, 25),
            price=150,
        )

    @pytest.mark.unit
    def test_complete_info_valid(self, info):
        """All values present and price high enough."""
        assert is_event_info_valid(info)

    @pytest.mark.unit
    def test_price_floor(self, info):
        """Price below the floor is rejected."""
        info.price = 99
        assert [e.error_type for e in validate_event_info(info)] == ["price_too_low"]
        info.price = 100
        assert is_event_info_valid(info)

    @pytest.mark.unit
    def test_missing_values(self):
        """Each missing value is reported by attribute name."""
        errors = validate_event_info(EventInfo(price=200))
        assert [e.field_id for e in errors] == [
            "name",
            "description",
            "location",
            "start_date",
            "regist",
        ]
