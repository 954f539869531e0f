"""Unit tests for the render projector."""

import datetime
from types import SimpleNamespace

import pytest

from src.catalog import UnknownFieldTypeError
from src.fields import CheckboxField
from src.response import FormResponse
from src.schema import FormSchema

from .lib import (
    DATE_PLACEHOLDER,
    DROP_INDICATOR_TEXT,
    EMPTY_CANVAS_HINT,
    HEADER_FALLBACK,
    SECTION_DESCRIPTION_FALLBACK,
    NodeKind,
    RenderMode,
    format_render_tree,
    project_field,
    project_schema,
)


def _without_overlays(node):
    """Field children minus builder-only overlays."""
    return [
        c
        for c in node.children
        if c.kind not in (NodeKind.DRAG_HANDLE, NodeKind.DELETE_BUTTON)
    ]


class TestProjectField:
    """Tests for single-field projection."""

    @pytest.mark.unit
    def test_builder_and_preview_agree(self, every_type_schema):
        """Builder differs from preview only by drag and delete overlays."""
        for field in every_type_schema:
            builder = project_field(field, RenderMode.BUILDER)
            preview = project_field(field, RenderMode.PREVIEW)
            assert _without_overlays(builder) == preview.children
            kinds = [c.kind for c in builder.children]
            assert kinds[0] == NodeKind.DRAG_HANDLE
            assert kinds[-1] == NodeKind.DELETE_BUTTON

    @pytest.mark.unit
    def test_preview_is_not_interactive(self, every_type_schema):
        """Preview never exposes inputs."""
        tree = project_schema(every_type_schema, RenderMode.PREVIEW)
        for kind in (NodeKind.TEXT_INPUT, NodeKind.RADIO, NodeKind.DATE_PICKER):
            assert all(not n.interactive for n in tree.find(kind))

    @pytest.mark.unit
    def test_fallback_texts(self, blank_fields_schema):
        """Blank headers and descriptions show default texts."""
        section = project_field(blank_fields_schema.get("s"), "preview")
        assert section.find(NodeKind.HEADER)[0].text == HEADER_FALLBACK
        assert section.find(NodeKind.DESCRIPTION)[0].text == SECTION_DESCRIPTION_FALLBACK
        text = project_field(blank_fields_schema.get("t"), "preview")
        assert text.find(NodeKind.TEXT_INPUT)[0].props["placeholder"] == "Short Answer"

    @pytest.mark.unit
    def test_custom_placeholder(self, every_type_schema):
        """A field's own placeholder wins over the default."""
        node = project_field(every_type_schema.get("long_text"), "preview")
        assert node.find(NodeKind.TEXT_AREA)[0].props["placeholder"] == "Tell us"

    @pytest.mark.unit
    def test_blank_choice_labels(self, every_type_schema):
        """Empty choice rows are labelled by position."""
        radios = project_field(every_type_schema.get("choice"), "preview").find(
            NodeKind.RADIO
        )
        assert [r.text for r in radios] == ["Veg", "Choice 2"]
        boxes = project_field(every_type_schema.get("checkbox"), "preview").find(
            NodeKind.CHECKBOX
        )
        assert [b.text for b in boxes] == ["Option 1", "b"]

    @pytest.mark.unit
    def test_required_mark(self, every_type_schema):
        """Required input fields carry a required mark; sections never do."""
        required = project_field(every_type_schema.get("short_text"), "preview")
        assert required.find(NodeKind.REQUIRED_MARK)
        optional = project_field(every_type_schema.get("file"), "preview")
        assert not optional.find(NodeKind.REQUIRED_MARK)

    @pytest.mark.unit
    def test_date_placeholder(self, every_type_schema):
        """Date pickers show a prompt until a date is picked."""
        node = project_field(every_type_schema.get("date"), "preview")
        assert node.find(NodeKind.DATE_PICKER)[0].text == DATE_PLACEHOLDER

    @pytest.mark.unit
    def test_unknown_type_fails_fast(self):
        """A type outside the catalog raises instead of rendering nothing."""
        bogus = SimpleNamespace(id="x", type="SLIDER", header="?")
        with pytest.raises(UnknownFieldTypeError):
            project_field(bogus, RenderMode.PREVIEW)

    @pytest.mark.unit
    def test_bad_mode_rejected(self, every_type_schema):
        """Modes outside the three projections are rejected."""
        with pytest.raises(ValueError):
            project_field(every_type_schema.get("date"), "print")


class TestProjectSchema:
    """Tests for whole-schema projection."""

    @pytest.mark.unit
    def test_order_and_dividers(self, every_type_schema):
        """Fields follow sequence order with dividers between them."""
        tree = project_schema(every_type_schema, RenderMode.PREVIEW)
        fields = tree.find(NodeKind.FIELD)
        assert [f.field_id for f in fields] == every_type_schema.ids()
        assert len(tree.find(NodeKind.DIVIDER)) == len(every_type_schema) - 1
        assert tree.children[0].kind == NodeKind.FIELD

    @pytest.mark.unit
    def test_order_follows_reorder(self, every_type_schema):
        """Rendering reflects sequence position, not field_order."""
        every_type_schema.reorder("date", "section")
        tree = project_schema(every_type_schema, RenderMode.PREVIEW)
        assert tree.find(NodeKind.FIELD)[0].field_id == "date"

    @pytest.mark.unit
    def test_empty_builder_hint(self):
        """An empty canvas shows the start hint."""
        tree = project_schema(FormSchema(), RenderMode.BUILDER)
        assert [c.text for c in tree.children] == [EMPTY_CANVAS_HINT]

    @pytest.mark.unit
    def test_drop_indicator_replaces_hint(self):
        """The armed indicator shows instead of the empty hint."""
        tree = project_schema(FormSchema(), RenderMode.BUILDER, drop_indicator=True)
        assert [c.text for c in tree.children] == [DROP_INDICATOR_TEXT]

    @pytest.mark.unit
    def test_drop_indicator_builder_only(self, every_type_schema):
        """Preview ignores the indicator flag."""
        tree = project_schema(every_type_schema, RenderMode.PREVIEW, drop_indicator=True)
        assert not tree.find(NodeKind.DROP_INDICATOR)

    @pytest.mark.unit
    def test_submit_gated_on_completeness(self, every_type_schema):
        """Submit is disabled until required fields are answered."""
        response = FormResponse.for_schema(every_type_schema)
        tree = project_schema(every_type_schema, RenderMode.RESPONSE, response)
        assert tree.find(NodeKind.SUBMIT)[0].props["enabled"] is False
        response.set_text("short_text", "Ada")
        response.select_choice("choice", 0)
        tree = project_schema(every_type_schema, RenderMode.RESPONSE, response)
        assert tree.find(NodeKind.SUBMIT)[0].props["enabled"] is True

    @pytest.mark.unit
    def test_submit_follows_legacy_checkbox(self):
        """Legacy mode counts a required checkbox with options as answered."""
        schema = FormSchema(
            [CheckboxField(id="diet", header="Diet", choices=["A"], required=True)]
        )
        legacy = project_schema(schema, RenderMode.RESPONSE, legacy_checkbox=True)
        current = project_schema(schema, RenderMode.RESPONSE, legacy_checkbox=False)
        assert legacy.find(NodeKind.SUBMIT)[0].props["enabled"] is True
        assert current.find(NodeKind.SUBMIT)[0].props["enabled"] is False

    @pytest.mark.unit
    def test_submit_legacy_from_env(self, monkeypatch):
        """FORM_LEGACY_CHECKBOX decides when no flag is passed."""
        monkeypatch.setenv("FORM_LEGACY_CHECKBOX", "true")
        schema = FormSchema(
            [CheckboxField(id="diet", header="Diet", choices=["A"], required=True)]
        )
        tree = project_schema(schema, RenderMode.RESPONSE)
        assert tree.find(NodeKind.SUBMIT)[0].props["enabled"] is True

    @pytest.mark.unit
    def test_no_submit_without_fields(self):
        """An empty response form has no submit button."""
        tree = project_schema(FormSchema(), RenderMode.RESPONSE)
        assert not tree.find(NodeKind.SUBMIT)

    @pytest.mark.unit
    def test_response_values(self, every_type_schema):
        """Response inputs carry the respondent's answers."""
        response = FormResponse.for_schema(every_type_schema)
        response.set_text("short_text", "Ada")
        response.toggle_choice("checkbox", 1)
        response.set_date("date", datetime.date(2025, 7, 4))
        tree = project_schema(every_type_schema, "response", response)
        assert tree.find(NodeKind.TEXT_INPUT)[0].value == "Ada"
        assert tree.find(NodeKind.TEXT_INPUT)[0].interactive
        assert [b.value for b in tree.find(NodeKind.CHECKBOX)] == [False, True]
        assert tree.find(NodeKind.DATE_PICKER)[0].text == "2025-07-04"

    @pytest.mark.unit
    def test_answers_never_leak_into_preview(self, every_type_schema):
        """Preview ignores any response passed in."""
        response = FormResponse()
        response.set_text("short_text", "Ada")
        tree = project_schema(every_type_schema, "preview", response)
        assert tree.find(NodeKind.TEXT_INPUT)[0].value is None


class TestFormatRenderTree:
    """Tests for the text draft."""

    @pytest.mark.unit
    def test_tree_text(self):
        """Builder tree prints with connectors and inline required marks."""
        schema = FormSchema()
        field = schema.append("SHORT_TEXT")
        schema.edit_property(field.id, "header", "Your name")
        schema.edit_property(field.id, "required", True)
        text = format_render_tree(
            project_schema(schema, RenderMode.BUILDER, drop_indicator=True)
        )
        assert text.splitlines() == [
            "form [builder]",
            "├── field [SHORT_TEXT]",
            "│   ├── drag_handle",
            '│   ├── header "Your name" *',
            "│   ├── text_input (Short Answer)",
            "│   └── delete_button",
            f'└── drop_indicator "{DROP_INDICATOR_TEXT}"',
        ]

    @pytest.mark.unit
    def test_disabled_submit_marked(self):
        """A disabled submit button is flagged in the draft."""
        schema = FormSchema([{"id": "t", "type": "SHORT_TEXT", "header": "Q", "required": True}])
        text = format_render_tree(project_schema(schema, RenderMode.RESPONSE))
        assert text.splitlines()[-1] == '└── submit "Submit" (disabled)'
