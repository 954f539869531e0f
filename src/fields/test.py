"""Unit tests for field definitions."""

import pytest
from pydantic import ValidationError

from src.catalog import FieldType, UnknownFieldTypeError, list_field_types

from .lib import (
    CheckboxField,
    ChoiceField,
    DateField,
    SectionField,
    ShortTextField,
    create_field,
    field_to_wire,
    new_field_id,
    parse_field,
    parse_fields,
)


class TestCreateField:
    """Tests for default field construction."""

    @pytest.mark.unit
    @pytest.mark.parametrize("field_type", list_field_types())
    def test_every_catalog_type_creates(self, field_type):
        field = create_field(field_type, field_order=3)
        assert field.type == field_type
        assert field.field_order == 3
        assert field.header == ""
        assert field.id

    @pytest.mark.unit
    def test_choice_types_start_with_one_empty_choice(self):
        assert create_field(FieldType.CHOICE).choices == [""]
        assert create_field(FieldType.CHECKBOX).choices == [""]

    @pytest.mark.unit
    def test_required_defaults_false(self):
        assert create_field(FieldType.DATE).required is False

    @pytest.mark.unit
    def test_section_has_no_required(self):
        assert not hasattr(create_field(FieldType.SECTION), "required")

    @pytest.mark.unit
    def test_ids_are_unique(self):
        ids = {create_field(FieldType.SHORT_TEXT).id for _ in range(50)}
        assert len(ids) == 50
        assert new_field_id() not in ids

    @pytest.mark.unit
    def test_accepts_string_tag(self):
        assert isinstance(create_field("CHECKBOX"), CheckboxField)

    @pytest.mark.unit
    def test_unknown_type_raises(self):
        with pytest.raises(UnknownFieldTypeError):
            create_field("SLIDER")


class TestFieldImmutability:
    """Identity attributes cannot be reassigned."""

    @pytest.mark.unit
    def test_id_is_frozen(self):
        field = create_field(FieldType.SHORT_TEXT)
        with pytest.raises(ValidationError):
            field.id = "other"

    @pytest.mark.unit
    def test_type_is_frozen(self):
        field = create_field(FieldType.SHORT_TEXT)
        with pytest.raises(ValidationError):
            field.type = FieldType.LONG_TEXT


class TestParseField:
    """Tests for decoding wire records."""

    @pytest.mark.unit
    def test_parses_flat_record(self):
        field = parse_field(
            {
                "id": "f1",
                "formId": "form-1",
                "type": "CHOICE",
                "fieldOrder": 2,
                "header": "Meal",
                "description": None,
                "placeholder": None,
                "required": True,
                "choices": ["Veg", "Meat"],
            }
        )
        assert isinstance(field, ChoiceField)
        assert field.id == "f1"
        assert field.field_order == 2
        assert field.choices == ["Veg", "Meat"]
        assert field.required is True

    @pytest.mark.unit
    def test_irrelevant_keys_are_dropped(self):
        field = parse_field(
            {"id": "s1", "type": "SECTION", "header": "Intro", "choices": ["x"]}
        )
        assert isinstance(field, SectionField)
        assert not hasattr(field, "choices")

    @pytest.mark.unit
    def test_legacy_display_names(self):
        assert isinstance(parse_field({"type": "Short Answer"}), ShortTextField)
        assert isinstance(parse_field({"type": "Multiple Choice"}), ChoiceField)

    @pytest.mark.unit
    def test_nulls_become_defaults(self):
        field = parse_field(
            {"type": "CHECKBOX", "header": None, "required": None, "choices": None}
        )
        assert field.header == ""
        assert field.required is False
        assert field.choices == []

    @pytest.mark.unit
    def test_missing_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_field({"id": "x", "header": "No type"})

    @pytest.mark.unit
    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_field({"id": "x", "type": "SLIDER"})

    @pytest.mark.unit
    def test_parse_fields_keeps_order(self):
        fields = parse_fields(
            [
                {"id": "b", "type": "DATE", "fieldOrder": 1},
                {"id": "a", "type": "FILE", "fieldOrder": 2},
            ]
        )
        assert [f.id for f in fields] == ["b", "a"]

    @pytest.mark.unit
    def test_model_instance_passes_through(self):
        field = create_field(FieldType.DATE)
        assert parse_field(field) is field


class TestFieldToWire:
    """Tests for the flat wire record."""

    @pytest.mark.unit
    def test_full_key_set(self):
        record = field_to_wire(create_field(FieldType.SECTION), form_id="form-9")
        assert set(record) == {
            "id",
            "formId",
            "type",
            "fieldOrder",
            "header",
            "description",
            "placeholder",
            "required",
            "choices",
        }
        assert record["formId"] == "form-9"
        assert record["type"] == "SECTION"
        assert record["required"] is False
        assert record["choices"] == []

    @pytest.mark.unit
    def test_variant_values_win(self):
        field = DateField(header="When", required=True)
        record = field_to_wire(field)
        assert record["required"] is True
        assert record["header"] == "When"
        assert record["type"] == "DATE"

    @pytest.mark.unit
    def test_wire_record_parses_back(self):
        original = ChoiceField(header="Size", choices=["S", "M"], required=True)
        assert parse_field(field_to_wire(original)).model_dump() == original.model_dump()
