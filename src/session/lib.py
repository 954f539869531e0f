"""Save, create and submit boundary around the editing engine.

These classes own the working copy of a form while it is edited and are
the only place that talks to persistence and identity. Every failure is
turned into a ``Notice`` and leaves the in-memory state as it was, so the
user can fix the problem or retry.
"""

import logging
from typing import Any

from src.config import use_legacy_checkbox
from src.dnd import DragCoordinator
from src.response import FormResponse
from src.schema import FormSchema
from src.validation import (
    ValidationError,
    validate_event_info,
    validate_response,
    validate_schema,
)

from .models import EditorMode, EventInfo, Notice, NoticeLevel, WizardStep
from .protocol import FormPersistence, IdentityProvider, PersistenceError

logger = logging.getLogger(__name__)

SAVED_MESSAGE = "Saved"
REMOTE_FAILURE_MESSAGE = "Something went wrong, please try again"
INCOMPLETE_FORM_MESSAGE = (
    "The form needs at least one field and every field must be complete"
)
INCOMPLETE_INFO_MESSAGE = "Please fill in all general information"
NO_ACTOR_MESSAGE = "Sign in to create an event"
EVENT_CREATED_MESSAGE = "Event created"
INCOMPLETE_RESPONSE_MESSAGE = "Please answer every required question"
SUBMITTED_MESSAGE = "Response submitted"


class _NoticeBoard:
    """Keeps the notices raised by one session object."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    @property
    def last_notice(self) -> Notice | None:
        return self.notices[-1] if self.notices else None

    def _success(self, message: str) -> None:
        self.notices.append(Notice(level=NoticeLevel.SUCCESS, message=message))

    def _error(
        self, message: str, errors: list[ValidationError] | None = None
    ) -> None:
        details = [e.message for e in errors or []]
        self.notices.append(
            Notice(level=NoticeLevel.ERROR, message=message, details=details)
        )

    def _call_remote(self, action: str, call: Any, *args: Any) -> bool:
        """Run a persistence call, turning failures into an error notice."""
        try:
            ok = call(*args)
        except PersistenceError as e:
            logger.warning(f"{action} failed: {e}")
            self._error(REMOTE_FAILURE_MESSAGE)
            return False
        if not ok:
            logger.warning(f"{action} rejected by remote store")
            self._error(REMOTE_FAILURE_MESSAGE)
            return False
        return True


# =============================================================================
# Editing an existing form
# =============================================================================


class FormEditor(_NoticeBoard):
    """View/edit lifecycle of one persisted form.

    The last-saved schema stays untouched while editing happens on a
    working copy. Cancel throws the copy away; a successful save makes
    it the new last-saved schema.

    Args:
        form_id: Persisted form identifier.
        fields: Last-saved fields (schema, models or wire records).
        persistence: Remote store used by ``save``.

    Example:
        >>> editor = FormEditor("form-1", [], InMemoryFormStore())
        >>> working = editor.begin_edit()
        >>> _ = working.append("SHORT_TEXT")
        >>> editor.save()
        False
    """

    def __init__(
        self,
        form_id: str,
        fields: FormSchema | list[Any],
        persistence: FormPersistence,
    ):
        super().__init__()
        self.form_id = form_id
        self.persistence = persistence
        if isinstance(fields, FormSchema):
            self.saved = fields.copy()
        else:
            self.saved = FormSchema(fields)
        self.saved.form_id = form_id
        self.mode = EditorMode.VIEW
        self.working: FormSchema | None = None
        self.coordinator: DragCoordinator | None = None

    @classmethod
    def load(cls, form_id: str, persistence: FormPersistence) -> "FormEditor":
        """Open a persisted form.

        Raises:
            PersistenceError: If the form does not exist or cannot be read.
        """
        records = persistence.load_form(form_id)
        if records is None:
            raise PersistenceError(f"Form not found: {form_id}")
        return cls(form_id, FormSchema.from_wire(records), persistence)

    def begin_edit(self) -> FormSchema:
        """Switch to EDIT, creating the working copy if there is none."""
        if self.working is None:
            self.working = self.saved.copy()
            self.coordinator = DragCoordinator(self.working)
        self.mode = EditorMode.EDIT
        return self.working

    def cancel(self) -> None:
        """Discard the working copy and return to VIEW."""
        self.working = None
        self.coordinator = None
        self.mode = EditorMode.VIEW

    def save(self) -> bool:
        """Validate and persist the working copy.

        Returns:
            True if the form was saved. On failure the working copy is
            kept and an error notice explains why.
        """
        if self.working is None:
            logger.debug(f"save ignored, form {self.form_id} is not being edited")
            return False

        errors = validate_schema(self.working)
        if errors:
            logger.warning(f"Form {self.form_id} not saved: {len(errors)} problem(s)")
            self._error(INCOMPLETE_FORM_MESSAGE, errors)
            return False

        if not self._call_remote(
            f"update_form({self.form_id})",
            self.persistence.update_form,
            self.form_id,
            self.working.to_wire(),
        ):
            return False

        self.working.clear_focus()
        self.saved = self.working
        self.cancel()
        self._success(SAVED_MESSAGE)
        logger.info(f"Saved form {self.form_id} with {len(self.saved)} field(s)")
        return True


# =============================================================================
# Creating a new event
# =============================================================================


class EventWizard(_NoticeBoard):
    """Two-step new-event flow: general information, then the form.

    Args:
        persistence: Remote store that creates the event.
        identity: Source of the current actor's id.
        event: Pre-filled event information.
    """

    def __init__(
        self,
        persistence: FormPersistence,
        identity: IdentityProvider,
        event: EventInfo | None = None,
    ):
        super().__init__()
        self.persistence = persistence
        self.identity = identity
        self.event = event if event is not None else EventInfo()
        self.schema = FormSchema()
        self.coordinator = DragCoordinator(self.schema)
        self.step = WizardStep.GENERAL_INFO
        self.completed = False

    def next(self) -> bool:
        """Validate the current step and advance.

        On the last step this creates the event.

        Returns:
            True if the wizard advanced or the event was created.
        """
        if self.step == WizardStep.GENERAL_INFO:
            errors = validate_event_info(self.event)
            if errors:
                logger.warning(f"Event info incomplete: {len(errors)} problem(s)")
                self._error(INCOMPLETE_INFO_MESSAGE, errors)
                return False
            self.step = WizardStep.FORM
            return True

        errors = validate_schema(self.schema)
        if errors:
            logger.warning(f"Event form incomplete: {len(errors)} problem(s)")
            self._error(INCOMPLETE_FORM_MESSAGE, errors)
            return False
        return self._create()

    def back(self) -> bool:
        """Return to general information, keeping everything entered."""
        if self.step == WizardStep.GENERAL_INFO:
            return False
        self.step = WizardStep.GENERAL_INFO
        return True

    def _create(self) -> bool:
        actor = self.identity.current_actor()
        if actor is None:
            logger.warning("Event not created: no signed-in actor")
            self._error(NO_ACTOR_MESSAGE)
            return False

        if not self._call_remote(
            f"create_event({self.event.id})",
            self.persistence.create_event,
            actor.id,
            self.event,
            self.schema.to_wire(),
        ):
            return False

        self.completed = True
        self._success(EVENT_CREATED_MESSAGE)
        logger.info(f"Created event {self.event.id} for actor {actor.id}")
        return True


# =============================================================================
# Answering a form
# =============================================================================


class ResponseSession(_NoticeBoard):
    """One respondent filling in one form.

    Args:
        schema: The form being answered.
        persistence: Remote store that receives the answers.
        response: Answers collected so far; blank when omitted.
        legacy_checkbox: Use the field-definition rule for CHECKBOX
            completeness. None defers to FORM_LEGACY_CHECKBOX.
    """

    def __init__(
        self,
        schema: FormSchema,
        persistence: FormPersistence,
        response: FormResponse | None = None,
        legacy_checkbox: bool | None = None,
    ):
        super().__init__()
        self.schema = schema
        self.persistence = persistence
        self.response = (
            response if response is not None else FormResponse.for_schema(schema)
        )
        self.legacy_checkbox = use_legacy_checkbox(legacy_checkbox)
        self.submitted = False

    @property
    def can_submit(self) -> bool:
        return not validate_response(
            self.schema, self.response, legacy_checkbox=self.legacy_checkbox
        )

    def submit(self) -> bool:
        """Send the answers if every required field is answered."""
        errors = validate_response(
            self.schema, self.response, legacy_checkbox=self.legacy_checkbox
        )
        if errors:
            logger.warning(f"Response not submitted: {len(errors)} unanswered")
            self._error(INCOMPLETE_RESPONSE_MESSAGE, errors)
            return False

        if not self._call_remote(
            f"submit_response({self.schema.form_id})",
            self.persistence.submit_response,
            self.schema.form_id,
            self.response.to_wire(),
        ):
            return False

        self.submitted = True
        self._success(SUBMITTED_MESSAGE)
        logger.info(f"Submitted response to form {self.schema.form_id}")
        return True


__all__ = [
    "FormEditor",
    "EventWizard",
    "ResponseSession",
]
