"""Collaborator protocols for the session boundary.

The Schema Model and Validator take no ambient context. Only the editor,
wizard and response session defined in ``lib.py`` talk to these, and
they receive them as explicit constructor arguments.
"""

from typing import Any, Protocol

from .models import Actor, EventInfo


class FormPersistence(Protocol):
    """Remote store for forms, events and responses.

    Implementations raise ``PersistenceError`` for transport failures and
    return ``False`` when the remote side reports an unsuccessful call.
    """

    def load_form(self, form_id: str) -> list[dict[str, Any]] | None:
        """Get a form's field records.

        Args:
            form_id: Form identifier.

        Returns:
            Wire records in display order, or None if the form is unknown.
        """
        ...

    def update_form(self, form_id: str, fields: list[dict[str, Any]]) -> bool:
        """Replace a form's fields.

        Args:
            form_id: Form identifier.
            fields: Full list of wire records in display order.

        Returns:
            True if the remote side accepted the update.
        """
        ...

    def create_event(
        self,
        user_id: str,
        event: EventInfo,
        fields: list[dict[str, Any]],
    ) -> bool:
        """Create an event together with its registration form."""
        ...

    def submit_response(self, form_id: str, entries: list[dict[str, Any]]) -> bool:
        """Store one respondent's answers."""
        ...


class IdentityProvider(Protocol):
    """Lookup of the signed-in user."""

    def current_actor(self) -> Actor | None:
        """Get the current actor, or None when nobody is signed in."""
        ...


class PersistenceError(Exception):
    """Error talking to the remote store."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
