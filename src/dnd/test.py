"""Unit tests for the drag-reorder coordinator."""

import pytest

from src.catalog import FieldType
from src.fields import ChoiceField, DateField, SectionField
from src.schema import FormSchema

from .lib import (
    DROP_AREA,
    DragCoordinator,
    DragDomain,
    DragEvent,
    DragItem,
    DragState,
    MutationKind,
)


@pytest.fixture
def schema():
    return FormSchema(
        [
            ChoiceField(id="1", header="A", choices=["x", "y", "z"]),
            SectionField(id="2", header="B", description="d"),
            DateField(id="3", header="C"),
        ]
    )


@pytest.fixture
def coordinator(schema):
    return DragCoordinator(schema)


def _drag(coordinator, active, *overs, end=None):
    """Run a full gesture: start, hover each target, release over ``end``."""
    coordinator.on_drag_start(DragEvent(active))
    for over in overs:
        coordinator.on_drag_over(DragEvent(active, over))
    return coordinator.on_drag_end(DragEvent(active, end))


class TestDragItem:
    """Tests for drag item constructors."""

    @pytest.mark.unit
    def test_catalog_item_uses_tag(self):
        """Catalog items are identified by their type tag."""
        item = DragItem.catalog("short answer")
        assert item.id == "SHORT_TEXT"
        assert item.field_type == FieldType.SHORT_TEXT
        assert item.domain == DragDomain.CATALOG

    @pytest.mark.unit
    def test_choice_item_id(self):
        """Choice rows are identified by position."""
        assert DragItem.choice(2).id == "choice-2"
        assert DragItem.choice(2).index == 2


class TestStateMachine:
    """Tests for state transitions."""

    @pytest.mark.unit
    def test_idle_dragging_idle(self, coordinator):
        """Start enters DRAGGING; end returns to IDLE."""
        item = DragItem.field("1")
        assert coordinator.state == DragState.IDLE
        coordinator.on_drag_start(DragEvent(item))
        assert coordinator.state == DragState.DRAGGING
        assert coordinator.active == item
        coordinator.on_drag_end(DragEvent(item, None))
        assert coordinator.state == DragState.IDLE
        assert coordinator.active is None

    @pytest.mark.unit
    def test_events_ignored_when_idle(self, coordinator, schema):
        """Over and end without a start do nothing."""
        item = DragItem.field("3")
        assert coordinator.on_drag_over(DragEvent(item, DragItem.field("1"))) is None
        assert coordinator.on_drag_end(DragEvent(item, DragItem.field("1"))) is None
        assert schema.ids() == ["1", "2", "3"]

    @pytest.mark.unit
    def test_cancel_resets(self, coordinator):
        """cancel() disarms and goes idle."""
        item = DragItem.catalog(FieldType.DATE)
        coordinator.on_drag_start(DragEvent(item))
        coordinator.on_drag_over(DragEvent(item, DROP_AREA))
        coordinator.cancel()
        assert coordinator.state == DragState.IDLE
        assert not coordinator.indicator_armed


class TestCatalogDrop:
    """Tests for palette-to-canvas insertion."""

    @pytest.mark.unit
    def test_drop_short_text_on_empty_schema(self):
        """Dropping on the sentinel appends exactly one default field."""
        schema = FormSchema()
        coordinator = DragCoordinator(schema)
        item = DragItem.catalog(FieldType.SHORT_TEXT)
        mutation = _drag(coordinator, item, DROP_AREA, end=DROP_AREA)
        assert mutation.kind == MutationKind.APPEND
        assert len(schema) == 1
        field = schema.fields[0]
        assert field.id == mutation.field_id
        assert field.type == FieldType.SHORT_TEXT
        assert getattr(field, "choices", []) == []
        assert field.required is False

    @pytest.mark.unit
    def test_hover_does_not_append(self, coordinator, schema):
        """Only release appends; hovering just arms the indicator."""
        item = DragItem.catalog(FieldType.CHOICE)
        coordinator.on_drag_start(DragEvent(item))
        assert coordinator.on_drag_over(DragEvent(item, DROP_AREA)) is None
        assert coordinator.indicator_armed
        assert len(schema) == 3

    @pytest.mark.unit
    def test_indicator_disarms_on_leave(self, coordinator):
        """Leaving the sentinel disarms the indicator."""
        item = DragItem.catalog(FieldType.CHOICE)
        coordinator.on_drag_start(DragEvent(item))
        coordinator.on_drag_over(DragEvent(item, DROP_AREA))
        coordinator.on_drag_over(DragEvent(item, DragItem.field("2")))
        assert not coordinator.indicator_armed
        coordinator.on_drag_over(DragEvent(item, None))
        assert not coordinator.indicator_armed

    @pytest.mark.unit
    def test_indicator_disarms_on_end(self, coordinator):
        """Release always disarms, even when aborted over nothing."""
        item = DragItem.catalog(FieldType.FILE)
        coordinator.on_drag_start(DragEvent(item))
        coordinator.on_drag_over(DragEvent(item, DROP_AREA))
        coordinator.on_drag_end(DragEvent(item, None))
        assert not coordinator.indicator_armed

    @pytest.mark.unit
    def test_catalog_over_field_does_nothing(self, coordinator, schema):
        """A palette item released on a field inserts nothing."""
        item = DragItem.catalog(FieldType.DATE)
        assert _drag(coordinator, item, DragItem.field("1"), end=DragItem.field("1")) is None
        assert schema.ids() == ["1", "2", "3"]

    @pytest.mark.unit
    def test_catalog_over_choice_does_nothing(self, coordinator, schema):
        """Cross-domain hover over a choice row changes nothing."""
        schema.focus("1")
        item = DragItem.catalog(FieldType.DATE)
        _drag(coordinator, item, DragItem.choice(0), end=DragItem.choice(1))
        assert schema.get("1").choices == ["x", "y", "z"]
        assert len(schema) == 3

    @pytest.mark.unit
    def test_field_over_drop_area_does_nothing(self, coordinator, schema):
        """Fields dragged onto the sentinel are not duplicated."""
        item = DragItem.field("1")
        coordinator.on_drag_start(DragEvent(item))
        coordinator.on_drag_over(DragEvent(item, DROP_AREA))
        assert not coordinator.indicator_armed
        coordinator.on_drag_end(DragEvent(item, DROP_AREA))
        assert schema.ids() == ["1", "2", "3"]


class TestFieldReorder:
    """Tests for canvas-internal reordering."""

    @pytest.mark.unit
    def test_live_reorder_on_hover(self, coordinator, schema):
        """Hovering a field moves the dragged field immediately."""
        item = DragItem.field("3")
        coordinator.on_drag_start(DragEvent(item))
        mutation = coordinator.on_drag_over(DragEvent(item, DragItem.field("1")))
        assert mutation.kind == MutationKind.REORDER_FIELD
        assert schema.ids() == ["3", "1", "2"]

    @pytest.mark.unit
    def test_repeated_hover_applies_once(self, coordinator, schema):
        """Many drag-over events on one target move the field once."""
        item = DragItem.field("3")
        target = DragItem.field("1")
        coordinator.on_drag_start(DragEvent(item))
        for _ in range(5):
            coordinator.on_drag_over(DragEvent(item, target))
        assert schema.ids() == ["3", "1", "2"]

    @pytest.mark.unit
    def test_end_does_not_double_apply(self, coordinator, schema):
        """Releasing over the last live target leaves the order alone."""
        item = DragItem.field("3")
        target = DragItem.field("1")
        assert _drag(coordinator, item, target, end=target) is None
        assert schema.ids() == ["3", "1", "2"]

    @pytest.mark.unit
    def test_end_applies_unseen_target(self, coordinator, schema):
        """A release target never hovered live is still honoured."""
        item = DragItem.field("1")
        mutation = _drag(coordinator, item, end=DragItem.field("3"))
        assert mutation.kind == MutationKind.REORDER_FIELD
        assert schema.ids() == ["2", "3", "1"]

    @pytest.mark.unit
    def test_sweep_across_fields(self, coordinator, schema):
        """Sweeping over several fields follows the pointer."""
        item = DragItem.field("1")
        _drag(
            coordinator,
            item,
            DragItem.field("2"),
            DragItem.field("3"),
            end=DragItem.field("3"),
        )
        assert schema.ids() == ["2", "3", "1"]

    @pytest.mark.unit
    def test_hover_self_is_noop(self, coordinator, schema):
        """Hovering the dragged field itself changes nothing."""
        item = DragItem.field("2")
        _drag(coordinator, item, item, end=item)
        assert schema.ids() == ["1", "2", "3"]

    @pytest.mark.unit
    def test_unknown_ids_are_noops(self, coordinator, schema):
        """Unresolvable ids never raise."""
        item = DragItem.field("ghost")
        assert _drag(coordinator, item, DragItem.field("1"), end=DragItem.field("2")) is None
        assert schema.ids() == ["1", "2", "3"]

    @pytest.mark.unit
    def test_field_over_choice_does_nothing(self, coordinator, schema):
        """Fields never reorder choices."""
        schema.focus("1")
        item = DragItem.field("3")
        _drag(coordinator, item, DragItem.choice(0), end=DragItem.choice(2))
        assert schema.ids() == ["1", "2", "3"]
        assert schema.get("1").choices == ["x", "y", "z"]


class TestChoiceReorder:
    """Tests for choice-list reordering."""

    @pytest.mark.unit
    def test_choice_drag_moves_focused_field_choices(self, coordinator, schema):
        """Dragging row 0 over row 2 moves it to the end."""
        schema.focus("1")
        item = DragItem.choice(0)
        coordinator.on_drag_start(DragEvent(item))
        mutation = coordinator.on_drag_over(DragEvent(item, DragItem.choice(2)))
        assert mutation.kind == MutationKind.REORDER_CHOICE
        assert (mutation.from_index, mutation.to_index) == (0, 2)
        coordinator.on_drag_end(DragEvent(item, DragItem.choice(2)))
        assert schema.get("1").choices == ["y", "z", "x"]

    @pytest.mark.unit
    def test_choice_drag_tracks_moving_row(self, coordinator, schema):
        """Later hovers move the dragged row from where it now sits."""
        schema.focus("1")
        item = DragItem.choice(0)
        _drag(coordinator, item, DragItem.choice(1), DragItem.choice(2), end=DragItem.choice(2))
        assert schema.get("1").choices == ["y", "z", "x"]

    @pytest.mark.unit
    def test_release_only_choice_reorder(self, coordinator, schema):
        """A choice released on an unhovered row is reordered on end."""
        schema.focus("1")
        mutation = _drag(coordinator, DragItem.choice(2), end=DragItem.choice(0))
        assert mutation.kind == MutationKind.REORDER_CHOICE
        assert schema.get("1").choices == ["z", "x", "y"]

    @pytest.mark.unit
    def test_choice_drag_without_focus_is_noop(self, coordinator, schema):
        """With no focused field there are no choices to move."""
        assert _drag(coordinator, DragItem.choice(0), end=DragItem.choice(1)) is None
        assert schema.get("1").choices == ["x", "y", "z"]

    @pytest.mark.unit
    def test_choice_over_field_does_nothing(self, coordinator, schema):
        """Choice rows never reorder fields."""
        schema.focus("1")
        _drag(coordinator, DragItem.choice(0), DragItem.field("3"), end=DragItem.field("3"))
        assert schema.ids() == ["1", "2", "3"]
        assert schema.get("1").choices == ["x", "y", "z"]
