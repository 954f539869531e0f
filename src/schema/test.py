"""Unit tests for the Schema Model."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from src.catalog import FieldType, UnknownFieldTypeError, list_field_types
from src.fields import ChoiceField, DateField, SectionField, ShortTextField

from .lib import FormSchema, SchemaError, array_move


def _abc_schema() -> FormSchema:
    return FormSchema(
        [
            ChoiceField(id="1", header="A", choices=["x"]),
            SectionField(id="2", header="B", description="d"),
            DateField(id="3", header="C"),
        ]
    )


class TestArrayMove:
    """Tests for the move-and-shift primitive."""

    @pytest.mark.unit
    def test_move_back_to_front(self):
        """Last element moved to index 0 shifts the rest right."""
        assert array_move(["A", "B", "C"], 2, 0) == ["C", "A", "B"]

    @pytest.mark.unit
    def test_move_front_to_back(self):
        """First element moved to the end shifts the rest left."""
        assert array_move(["A", "B", "C"], 0, 2) == ["B", "C", "A"]

    @pytest.mark.unit
    def test_source_untouched(self):
        """The input list is not modified."""
        items = ["A", "B"]
        array_move(items, 0, 1)
        assert items == ["A", "B"]


class TestConstruction:
    """Tests for building schemas."""

    @pytest.mark.unit
    def test_empty_schema(self):
        """A new schema has no fields and no focus."""
        schema = FormSchema()
        assert schema.is_empty
        assert len(schema) == 0
        assert schema.focused_field is None

    @pytest.mark.unit
    def test_duplicate_ids_rejected(self):
        """Two fields with one id cannot share a schema."""
        with pytest.raises(SchemaError):
            FormSchema([DateField(id="x"), ShortTextField(id="x")])

    @pytest.mark.unit
    def test_accepts_wire_records(self):
        """Dict records are parsed into typed fields."""
        schema = FormSchema([{"id": "a", "type": "DATE", "header": "When"}])
        assert isinstance(schema.get("a"), DateField)

    @pytest.mark.unit
    def test_read_api(self):
        """ids, get, index_of and membership agree with sequence order."""
        schema = _abc_schema()
        assert schema.ids() == ["1", "2", "3"]
        assert schema.index_of("3") == 2
        assert schema.index_of("missing") is None
        assert schema.get("missing") is None
        assert "2" in schema
        assert "9" not in schema
        assert [f.header for f in schema] == ["A", "B", "C"]


class TestAppend:
    """Tests for appending catalog types."""

    @pytest.mark.unit
    def test_append_short_text_to_empty(self):
        """Dropping SHORT_TEXT on an empty schema yields one plain field."""
        schema = FormSchema()
        field = schema.append(FieldType.SHORT_TEXT)
        assert len(schema) == 1
        assert field.type == FieldType.SHORT_TEXT
        assert getattr(field, "choices", []) == []
        assert field.required is False

    @pytest.mark.unit
    def test_field_order_is_length_plus_one(self):
        """Appended fields get field_order = len + 1."""
        schema = _abc_schema()
        assert schema.append(FieldType.FILE).field_order == 4

    @pytest.mark.unit
    def test_choice_gets_one_empty_choice(self):
        """Choice types start with a single empty choice."""
        assert FormSchema().append(FieldType.CHOICE).choices == [""]

    @pytest.mark.unit
    def test_unknown_type_raises(self):
        """Types outside the catalog are a programming error."""
        with pytest.raises(UnknownFieldTypeError):
            FormSchema().append("RATING")


class TestRemove:
    """Tests for removing fields."""

    @pytest.mark.unit
    def test_remove_compacts(self):
        """Removing the middle field closes the gap."""
        schema = _abc_schema()
        assert schema.remove("2") is True
        assert schema.ids() == ["1", "3"]

    @pytest.mark.unit
    def test_remove_unknown_is_noop(self):
        """Unknown ids are ignored."""
        schema = _abc_schema()
        assert schema.remove("nope") is False
        assert len(schema) == 3

    @pytest.mark.unit
    def test_remove_focused_clears_focus(self):
        """Deleting the focused field clears focus."""
        schema = _abc_schema()
        schema.focus("1")
        schema.remove("1")
        assert schema.focused_id is None

    @pytest.mark.unit
    def test_remove_other_keeps_focus(self):
        """Deleting another field leaves focus alone."""
        schema = _abc_schema()
        schema.focus("1")
        schema.remove("3")
        assert schema.focused_id == "1"


class TestReorder:
    """Tests for field reordering."""

    @pytest.mark.unit
    def test_move_last_onto_first(self):
        """reorder(3, 1) on [A, B, C] gives [C, A, B]."""
        schema = _abc_schema()
        assert schema.reorder("3", "1") is True
        assert [f.header for f in schema] == ["C", "A", "B"]

    @pytest.mark.unit
    def test_same_id_is_noop(self):
        """Moving a field onto itself changes nothing."""
        schema = _abc_schema()
        assert schema.reorder("2", "2") is False
        assert schema.ids() == ["1", "2", "3"]

    @pytest.mark.unit
    @pytest.mark.parametrize("from_id,to_id", [("9", "1"), ("1", "9")])
    def test_unresolved_id_is_noop(self, from_id, to_id):
        """A reorder with a missing source or target is ignored."""
        schema = _abc_schema()
        assert schema.reorder(from_id, to_id) is False
        assert schema.ids() == ["1", "2", "3"]

    @pytest.mark.unit
    def test_round_trip_restores_order(self):
        """Moving A before C and back restores the original order."""
        schema = _abc_schema()
        schema.reorder("1", "3")
        assert schema.ids() == ["2", "3", "1"]
        schema.reorder("1", "2")
        assert schema.ids() == ["1", "2", "3"]


class TestEditProperty:
    """Tests for in-place property edits."""

    @pytest.mark.unit
    def test_edit_header(self):
        """Header edits apply in place."""
        schema = _abc_schema()
        assert schema.edit_property("3", "header", "Start date") is True
        assert schema.get("3").header == "Start date"

    @pytest.mark.unit
    def test_no_validation_at_edit_time(self):
        """Empty values are accepted while editing."""
        schema = _abc_schema()
        assert schema.edit_property("2", "description", "") is True
        assert schema.get("2").description == ""

    @pytest.mark.unit
    def test_unknown_field_is_noop(self):
        """Edits to absent fields are ignored."""
        assert _abc_schema().edit_property("x", "header", "h") is False

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["required", "choices", "placeholder", "id", "type"])
    def test_section_rejects_foreign_keys(self, key):
        """A section only edits header and description."""
        schema = _abc_schema()
        assert schema.edit_property("2", key, True) is False

    @pytest.mark.unit
    def test_required_toggle(self):
        """Input fields accept required edits."""
        schema = _abc_schema()
        assert schema.edit_property("3", "required", True) is True
        assert schema.get("3").required is True

    @pytest.mark.unit
    def test_choices_are_copied(self):
        """Assigning choices stores a copy of the given sequence."""
        schema = _abc_schema()
        new = ("p", "q")
        schema.edit_property("1", "choices", new)
        assert schema.get("1").choices == ["p", "q"]

    @pytest.mark.unit
    def test_choices_none_clears(self):
        """None empties the choice list instead of failing."""
        schema = _abc_schema()
        assert schema.edit_property("1", "choices", None) is True
        assert schema.get("1").choices == []

    @pytest.mark.unit
    def test_choices_string_is_one_choice(self):
        """A bare string is stored as a single choice, not split."""
        schema = _abc_schema()
        assert schema.edit_property("1", "choices", "AB") is True
        assert schema.get("1").choices == ["AB"]


class TestChoiceEdits:
    """Tests for choice-list operations."""

    @pytest.fixture
    def schema(self):
        return FormSchema(
            [
                ChoiceField(id="c", header="Pick", choices=["A", "B", "C"]),
                DateField(id="d", header="When"),
            ]
        )

    @pytest.mark.unit
    def test_edit_choice(self, schema):
        """Choice text is replaced by index."""
        assert schema.edit_choice("c", 1, "Beta") is True
        assert schema.get("c").choices == ["A", "Beta", "C"]

    @pytest.mark.unit
    def test_edit_choice_out_of_range(self, schema):
        """Indexes outside the list are ignored."""
        assert schema.edit_choice("c", 3, "D") is False
        assert schema.edit_choice("c", -1, "D") is False

    @pytest.mark.unit
    def test_add_and_remove_choice(self, schema):
        """Choices can be appended and removed."""
        assert schema.add_choice("c") is True
        assert schema.get("c").choices == ["A", "B", "C", ""]
        assert schema.remove_choice("c", 0) is True
        assert schema.get("c").choices == ["B", "C", ""]

    @pytest.mark.unit
    def test_reorder_choice_move_and_shift(self, schema):
        """Choice reorder shifts rather than swaps."""
        assert schema.reorder_choice("c", 0, 2) is True
        assert schema.get("c").choices == ["B", "C", "A"]

    @pytest.mark.unit
    def test_reorder_choice_noops(self, schema):
        """Same index, bad indexes and non-choice fields are ignored."""
        assert schema.reorder_choice("c", 1, 1) is False
        assert schema.reorder_choice("c", 0, 5) is False
        assert schema.reorder_choice("d", 0, 1) is False
        assert schema.add_choice("d") is False
        assert schema.add_choice("missing") is False
        assert schema.get("c").choices == ["A", "B", "C"]


class TestFocus:
    """Tests for focus tracking."""

    @pytest.mark.unit
    def test_focus_and_clear(self):
        """Focus resolves to the field and can be cleared."""
        schema = _abc_schema()
        assert schema.focus("2") is True
        assert schema.focused_field.header == "B"
        schema.clear_focus()
        assert schema.focused_field is None

    @pytest.mark.unit
    def test_focus_unknown_is_noop(self):
        """Focusing an unknown id keeps the previous focus."""
        schema = _abc_schema()
        schema.focus("1")
        assert schema.focus("zz") is False
        assert schema.focused_id == "1"


class TestCopyAndWire:
    """Tests for working copies and the export format."""

    @pytest.mark.unit
    def test_copy_is_independent(self):
        """Edits to a copy do not reach the original."""
        schema = _abc_schema()
        schema.focus("1")
        working = schema.copy()
        working.edit_choice("1", 0, "changed")
        working.remove("3")
        assert schema.get("1").choices == ["x"]
        assert len(schema) == 3
        assert working.focused_id is None

    @pytest.mark.unit
    def test_to_wire_rewrites_field_order(self):
        """Exported fieldOrder follows sequence position."""
        schema = _abc_schema()
        schema.reorder("3", "1")
        records = schema.to_wire()
        assert [r["id"] for r in records] == ["3", "1", "2"]
        assert [r["fieldOrder"] for r in records] == [1, 2, 3]

    @pytest.mark.unit
    def test_from_wire_ignores_field_order(self):
        """Array order wins over stale fieldOrder values."""
        schema = FormSchema.from_wire(
            [
                {"id": "b", "type": "DATE", "fieldOrder": 5},
                {"id": "a", "type": "FILE", "fieldOrder": 1},
            ],
            form_id="f",
        )
        assert schema.ids() == ["b", "a"]
        assert schema.form_id == "f"

    @pytest.mark.unit
    def test_wire_carries_form_id(self):
        """Every exported record names its form."""
        schema = FormSchema([DateField(id="d")], form_id="form-7")
        assert schema.to_wire()[0]["formId"] == "form-7"


_OPS = st.lists(
    st.one_of(
        st.tuples(st.just("append"), st.sampled_from(list_field_types())),
        st.tuples(st.just("remove"), st.integers(min_value=0, max_value=20)),
        st.tuples(
            st.just("reorder"),
            st.tuples(
                st.integers(min_value=0, max_value=20),
                st.integers(min_value=0, max_value=20),
            ),
        ),
    ),
    max_size=40,
)


class TestSchemaProperties:
    """Property-based tests over random edit sequences."""

    @pytest.mark.unit
    @given(_OPS)
    @settings(max_examples=150)
    def test_id_set_tracks_appends_and_removes(self, ops):
        """Invariant: ids stay unique and match appends minus removals."""
        schema = FormSchema()
        expected: set[str] = set()
        for op, arg in ops:
            ids = schema.ids()
            if op == "append":
                expected.add(schema.append(arg).id)
            elif op == "remove" and ids:
                victim = ids[arg % len(ids)]
                assert schema.remove(victim)
                expected.discard(victim)
            elif op == "reorder" and ids:
                schema.reorder(ids[arg[0] % len(ids)], ids[arg[1] % len(ids)])
            assert len(schema.ids()) == len(set(schema.ids()))
        assert set(schema.ids()) == expected
        assert len(schema) == len(expected)

    @pytest.mark.unit
    @given(st.integers(min_value=2, max_value=12), st.data())
    def test_reorder_round_trip(self, size, data):
        """Invariant: moving a field and moving it back restores order."""
        schema = FormSchema([DateField(id=str(i)) for i in range(size)])
        original = schema.ids()
        src = data.draw(st.integers(min_value=0, max_value=size - 1))
        dst = data.draw(st.integers(min_value=0, max_value=size - 1))
        moved = original[src]
        schema.reorder(moved, original[dst])
        schema.reorder(moved, schema.ids()[src])
        assert schema.ids() == original
