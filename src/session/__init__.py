"""Session boundary: save, create-event and submit flows.

Example usage:
    >>> from src.session import FormEditor
    >>> editor = FormEditor.load("form-1", persistence)
    >>> working = editor.begin_edit()
    >>> editor.save()
"""

from .lib import EventWizard, FormEditor, ResponseSession
from .models import (
    Actor,
    ActorRole,
    EditorMode,
    EventInfo,
    Notice,
    NoticeLevel,
    WizardStep,
)
from .protocol import FormPersistence, IdentityProvider, PersistenceError

__all__ = [
    # Flows
    "FormEditor",
    "EventWizard",
    "ResponseSession",
    # Models
    "Actor",
    "ActorRole",
    "EditorMode",
    "EventInfo",
    "Notice",
    "NoticeLevel",
    "WizardStep",
    # Protocols
    "FormPersistence",
    "IdentityProvider",
    "PersistenceError",
]
