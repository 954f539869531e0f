"""Unit tests for the field catalog."""

import pytest

from src.catalog import (
    FIELD_CATALOG,
    FieldCategory,
    FieldType,
    UnknownFieldTypeError,
    editable_properties,
    export_catalog,
    get_field_meta,
    get_field_types_by_category,
    get_shape,
    is_input_type,
    list_field_types,
    resolve_field_type,
)


class TestFieldCatalog:
    """Tests for FIELD_CATALOG completeness."""

    @pytest.mark.unit
    def test_all_field_types_registered(self):
        """Every FieldType has metadata in the catalog."""
        for ft in FieldType:
            assert ft in FIELD_CATALOG, f"Missing metadata for {ft}"

    @pytest.mark.unit
    def test_catalog_has_7_entries(self):
        """Catalog contains exactly the seven insertable types."""
        assert len(FIELD_CATALOG) == 7

    @pytest.mark.unit
    def test_all_entries_have_label_and_icon(self):
        """Every entry can be shown in a palette."""
        for ft, meta in FIELD_CATALOG.items():
            assert meta.label, f"{ft} missing label"
            assert meta.icon, f"{ft} missing icon"
            assert len(meta.description) > 10, f"{ft} description too short"

    @pytest.mark.unit
    def test_palette_order(self):
        """Palette order is stable and starts with the section type."""
        assert list_field_types() == [
            FieldType.SECTION,
            FieldType.SHORT_TEXT,
            FieldType.LONG_TEXT,
            FieldType.CHOICE,
            FieldType.CHECKBOX,
            FieldType.FILE,
            FieldType.DATE,
        ]


class TestFieldShape:
    """Tests for per-type structural shape."""

    @pytest.mark.unit
    def test_section_carries_description_not_required(self):
        """Sections describe, they do not ask."""
        shape = get_shape(FieldType.SECTION)
        assert shape.has_description
        assert not shape.supports_required
        assert not shape.has_choices

    @pytest.mark.unit
    def test_choice_types_carry_choices(self):
        """Choice and checkbox carry an ordered choice list."""
        for ft in (FieldType.CHOICE, FieldType.CHECKBOX):
            assert get_shape(ft).has_choices

    @pytest.mark.unit
    def test_text_types_carry_placeholder(self):
        """Only text types carry a placeholder."""
        with_placeholder = {ft for ft in FieldType if get_shape(ft).has_placeholder}
        assert with_placeholder == {FieldType.SHORT_TEXT, FieldType.LONG_TEXT}

    @pytest.mark.unit
    def test_editable_properties_section(self):
        """Section edits cover header and description only."""
        assert editable_properties(FieldType.SECTION) == {"header", "description"}

    @pytest.mark.unit
    def test_editable_properties_checkbox(self):
        """Checkbox edits cover header, choices and required."""
        assert editable_properties(FieldType.CHECKBOX) == {
            "header",
            "choices",
            "required",
        }

    @pytest.mark.unit
    def test_editable_properties_never_include_identity(self):
        """id and type are never editable."""
        for ft in FieldType:
            props = editable_properties(ft)
            assert "id" not in props
            assert "type" not in props


class TestCategoryLookup:
    """Tests for category lookup functions."""

    @pytest.mark.unit
    def test_section_is_only_layout_type(self):
        """Section is the only non-input type."""
        assert get_field_types_by_category(FieldCategory.LAYOUT) == [
            FieldType.SECTION
        ]
        assert not is_input_type(FieldType.SECTION)

    @pytest.mark.unit
    def test_inputs(self):
        """Every other type collects an answer."""
        inputs = get_field_types_by_category(FieldCategory.INPUT)
        assert len(inputs) == 6
        assert all(is_input_type(ft) for ft in inputs)


class TestResolveFieldType:
    """Tests for tag and alias resolution."""

    @pytest.mark.unit
    def test_resolve_tag(self):
        """Wire tags resolve directly."""
        assert resolve_field_type("SHORT_TEXT") == FieldType.SHORT_TEXT
        assert resolve_field_type("date") == FieldType.DATE

    @pytest.mark.unit
    def test_resolve_enum_passthrough(self):
        """Enum members pass through unchanged."""
        assert resolve_field_type(FieldType.FILE) is FieldType.FILE

    @pytest.mark.unit
    def test_resolve_legacy_display_names(self):
        """Legacy display names used by older clients resolve."""
        assert resolve_field_type("Short Answer") == FieldType.SHORT_TEXT
        assert resolve_field_type("Long Answer") == FieldType.LONG_TEXT
        assert resolve_field_type("Multiple Choice") == FieldType.CHOICE
        assert resolve_field_type("Checkbox") == FieldType.CHECKBOX
        assert resolve_field_type("File Upload") == FieldType.FILE
        assert resolve_field_type("Date Field") == FieldType.DATE
        assert resolve_field_type("Section") == FieldType.SECTION

    @pytest.mark.unit
    def test_unknown_raises(self):
        """Unknown names fail fast."""
        with pytest.raises(UnknownFieldTypeError):
            resolve_field_type("signature")

    @pytest.mark.unit
    def test_unknown_error_is_key_error(self):
        """UnknownFieldTypeError is a KeyError for lookup-style handling."""
        with pytest.raises(KeyError):
            get_field_meta("NOT_A_TYPE")  # type: ignore[arg-type]


class TestExportCatalog:
    """Tests for palette export."""

    @pytest.mark.unit
    def test_export_shape(self):
        """Exported entries carry tag, label and icon."""
        exported = export_catalog()
        assert len(exported) == 7
        first = exported[0]
        assert first["type"] == "SECTION"
        assert first["category"] == "layout"
        assert first["label"] == "Section"
        assert "icon" in first
        assert first["shape"]["has_description"] is True

    @pytest.mark.unit
    def test_meta_to_dict_aliases_are_lists(self):
        """Aliases are exported as JSON-friendly lists."""
        d = get_field_meta(FieldType.CHOICE).to_dict()
        assert isinstance(d["aliases"], list)
        assert "multiple choice" in d["aliases"]
