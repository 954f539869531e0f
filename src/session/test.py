"""Unit tests for the session boundary."""

from datetime import datetime

import pytest

from src.catalog import FieldType
from src.dnd import DROP_AREA, DragEvent, DragItem
from src.fields import CheckboxField, ChoiceField, ShortTextField
from src.persistence import InMemoryFormStore, StaticIdentity
from src.render import NodeKind, RenderMode, project_schema
from src.response import FormResponse
from src.schema import FormSchema

from .lib import EventWizard, FormEditor, ResponseSession
from .models import Actor, EditorMode, EventInfo, NoticeLevel, WizardStep
from .protocol import PersistenceError

SAVED_FORM = [
    {"id": "q1", "type": "SHORT_TEXT", "header": "Name", "required": True},
    {"id": "q2", "type": "CHOICE", "header": "Meal", "choices": ["Veg", "Meat"]},
]


class _BrokenStore(InMemoryFormStore):
    """Store whose writes fail at the transport level."""

    def update_form(self, form_id, fields):
        raise PersistenceError("connection refused")

    def submit_response(self, form_id, entries):
        raise PersistenceError("connection refused")


@pytest.fixture
def store():
    return InMemoryFormStore({"form-1": SAVED_FORM})


@pytest.fixture
def editor(store):
    return FormEditor.load("form-1", store)


class TestFormEditor:
    """Tests for the view/edit/save lifecycle."""

    @pytest.mark.unit
    def test_load(self, editor):
        """Loading keeps persisted order and form id."""
        assert editor.saved.ids() == ["q1", "q2"]
        assert editor.saved.form_id == "form-1"
        assert editor.mode == EditorMode.VIEW

    @pytest.mark.unit
    def test_load_missing_form(self, store):
        """Unknown forms raise."""
        with pytest.raises(PersistenceError):
            FormEditor.load("nope", store)

    @pytest.mark.unit
    def test_begin_edit_copies(self, editor):
        """Edits to the working copy leave the saved copy alone."""
        working = editor.begin_edit()
        assert editor.mode == EditorMode.EDIT
        working.remove("q1")
        assert editor.saved.ids() == ["q1", "q2"]
        assert editor.begin_edit() is working

    @pytest.mark.unit
    def test_cancel_discards(self, editor):
        """Cancel reverts to the last-saved copy."""
        editor.begin_edit().remove("q2")
        editor.cancel()
        assert editor.mode == EditorMode.VIEW
        assert editor.working is None
        assert editor.begin_edit().ids() == ["q1", "q2"]

    @pytest.mark.unit
    def test_save_success(self, editor, store):
        """A valid working copy is persisted and becomes the saved copy."""
        working = editor.begin_edit()
        working.reorder("q2", "q1")
        assert editor.save() is True
        assert editor.mode == EditorMode.VIEW
        assert editor.saved.ids() == ["q2", "q1"]
        assert [r["id"] for r in store.load_form("form-1")] == ["q2", "q1"]
        assert [r["fieldOrder"] for r in store.load_form("form-1")] == [1, 2]
        assert editor.last_notice.level == NoticeLevel.SUCCESS

    @pytest.mark.unit
    def test_drag_then_save(self, editor, store):
        """A field dropped from the palette is saved with the form."""
        editor.begin_edit()
        item = DragItem.catalog(FieldType.DATE)
        editor.coordinator.on_drag_start(DragEvent(item))
        mutation = editor.coordinator.on_drag_end(DragEvent(item, DROP_AREA))
        editor.working.edit_property(mutation.field_id, "header", "Arrival")
        assert editor.save() is True
        assert [r["type"] for r in store.load_form("form-1")] == [
            "SHORT_TEXT",
            "CHOICE",
            "DATE",
        ]

    @pytest.mark.unit
    def test_invalid_schema_not_sent(self, editor, store):
        """Validation failures keep the working copy and send nothing."""
        working = editor.begin_edit()
        working.add_choice("q2")
        assert editor.save() is False
        assert editor.mode == EditorMode.EDIT
        assert editor.working is working
        assert store.load_form("form-1")[1]["choices"] == ["Veg", "Meat"]
        notice = editor.last_notice
        assert notice.level == NoticeLevel.ERROR
        assert notice.details == ["Choice 3 is empty"]

    @pytest.mark.unit
    def test_remote_rejection_keeps_copy(self, editor, store):
        """A rejected update keeps the working copy for retry."""
        working = editor.begin_edit()
        working.remove("q2")
        store.reject = True
        assert editor.save() is False
        assert editor.working is working
        assert editor.saved.ids() == ["q1", "q2"]
        store.reject = False
        assert editor.save() is True
        assert editor.saved.ids() == ["q1"]

    @pytest.mark.unit
    def test_transport_failure_becomes_notice(self):
        """PersistenceError is reported, not raised."""
        editor = FormEditor("form-1", SAVED_FORM, _BrokenStore())
        editor.begin_edit()
        assert editor.save() is False
        assert editor.last_notice.level == NoticeLevel.ERROR

    @pytest.mark.unit
    def test_given_schema_not_mutated(self, store):
        """The editor works on its own copy of a passed-in schema."""
        schema = FormSchema(SAVED_FORM, form_id="draft")
        editor = FormEditor("form-1", schema, store)
        assert editor.saved is not schema
        assert editor.saved.form_id == "form-1"
        assert schema.form_id == "draft"

    @pytest.mark.unit
    def test_save_without_edit_is_noop(self, editor):
        """Saving in VIEW mode does nothing."""
        assert editor.save() is False
        assert editor.notices == []


class TestEventWizard:
    """Tests for the new-event flow."""

    @pytest.fixture
    def info(self):
        return EventInfo(
            name="Mock exam",
            description="Practice test",
            location="Hall B",
            start_date=datetime(2025, 6, 1),
            regist=datetime(2025, 5, 20),
            price=300,
        )

    @pytest.mark.unit
    def test_general_info_gate(self, store):
        """Incomplete info blocks the first step."""
        wizard = EventWizard(store, StaticIdentity(Actor(id="host-1")))
        assert wizard.next() is False
        assert wizard.step == WizardStep.GENERAL_INFO
        assert wizard.last_notice.level == NoticeLevel.ERROR

    @pytest.mark.unit
    def test_full_flow(self, store, info):
        """Info then form creates the event for the current actor."""
        wizard = EventWizard(store, StaticIdentity(Actor(id="host-1")), info)
        assert wizard.next() is True
        assert wizard.step == WizardStep.FORM
        assert wizard.next() is False  # empty form
        field = wizard.schema.append(FieldType.SHORT_TEXT)
        wizard.schema.edit_property(field.id, "header", "Student id")
        assert wizard.next() is True
        assert wizard.completed
        user_id, event, fields = store.events[0]
        assert user_id == "host-1"
        assert event.name == "Mock exam"
        assert fields[0]["header"] == "Student id"

    @pytest.mark.unit
    def test_back_keeps_state(self, store, info):
        """Going back keeps the form built so far."""
        wizard = EventWizard(store, StaticIdentity(Actor(id="host-1")), info)
        wizard.next()
        wizard.schema.append(FieldType.DATE)
        assert wizard.back() is True
        assert wizard.back() is False
        assert wizard.step == WizardStep.GENERAL_INFO
        assert len(wizard.schema) == 1

    @pytest.mark.unit
    def test_no_actor(self, store, info):
        """Without a signed-in actor nothing is sent."""
        wizard = EventWizard(store, StaticIdentity(None), info)
        wizard.next()
        wizard.schema.append(FieldType.DATE)
        wizard.schema.edit_property(wizard.schema.ids()[0], "header", "When")
        assert wizard.next() is False
        assert store.events == []
        assert not wizard.completed

    @pytest.mark.unit
    def test_set_start_date_moves_end(self):
        """Start dates after the end date drag the end date along."""
        info = EventInfo(end_date=datetime(2025, 1, 1))
        info.set_start_date(datetime(2025, 2, 1))
        assert info.end_date == datetime(2025, 2, 1)


class TestResponseSession:
    """Tests for answering and submitting a form."""

    @pytest.fixture
    def schema(self):
        return FormSchema(
            [
                ShortTextField(id="name", header="Name", required=True),
                ChoiceField(id="meal", header="Meal", choices=["Veg", "Meat"]),
            ],
            form_id="form-1",
        )

    @pytest.mark.unit
    def test_submit_gated(self, schema, store):
        """Submit refuses until required fields are answered."""
        session = ResponseSession(schema, store)
        assert not session.can_submit
        assert session.submit() is False
        assert "form-1" not in store.responses
        session.response.set_text("name", "Ada")
        assert session.can_submit
        assert session.submit() is True
        assert session.submitted
        assert store.responses["form-1"][0][0]["textField"] == "Ada"

    @pytest.mark.unit
    def test_submit_transport_failure(self, schema):
        """Remote failures leave the answers for a retry."""
        session = ResponseSession(schema, _BrokenStore())
        session.response.set_text("name", "Ada")
        assert session.submit() is False
        assert session.response.get("name").text_field == "Ada"
        assert session.last_notice.message

    @pytest.mark.unit
    def test_empty_response_is_kept(self, schema, store):
        """A caller's empty response object is the one the session answers."""
        answers = FormResponse(form_id="form-1")
        session = ResponseSession(schema, store, answers)
        assert session.response is answers
        answers.set_text("name", "Ada")
        assert session.submit() is True

    @pytest.mark.unit
    def test_legacy_checkbox_matches_render(self, store):
        """Submit gating and the rendered submit button agree in legacy mode."""
        schema = FormSchema(
            [CheckboxField(id="diet", header="Diet", choices=["A"], required=True)],
            form_id="form-1",
        )
        for legacy in (True, False):
            session = ResponseSession(schema, store, legacy_checkbox=legacy)
            tree = project_schema(
                schema,
                RenderMode.RESPONSE,
                session.response,
                legacy_checkbox=legacy,
            )
            assert tree.find(NodeKind.SUBMIT)[0].props["enabled"] is session.can_submit
            assert session.can_submit is legacy
