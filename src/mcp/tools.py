"""Tool implementations for the MCP server.

Plain functions so they can be tested without the MCP protocol. Forms are
opened into ``FormEditor`` working copies kept in this module; mutations
apply to the working copy and nothing reaches persistence until
``save_form`` succeeds, which runs the same validation as the builder UI.
"""

import logging
from dataclasses import asdict
from typing import Any
from uuid import uuid4

from src.catalog import UnknownFieldTypeError, export_catalog
from src.config import use_legacy_checkbox
from src.persistence import create_persistence
from src.render import RenderMode, format_render_tree, project_schema
from src.response import FormResponse
from src.schema import FormSchema
from src.session import FormEditor, FormPersistence, PersistenceError, ResponseSession
from src.validation import validate_response, validate_schema

logger = logging.getLogger(__name__)

_persistence: FormPersistence | None = None
_editors: dict[str, FormEditor] = {}

CHOICE_ACTIONS = ("add", "edit", "remove", "move")


def get_persistence() -> FormPersistence:
    """Get the configured persistence backend, creating it on first use."""
    global _persistence
    if _persistence is None:
        _persistence = create_persistence()
    return _persistence


def set_persistence(persistence: FormPersistence | None) -> None:
    """Swap the persistence backend and forget every open form."""
    global _persistence
    _persistence = persistence
    _editors.clear()


# =============================================================================
# Helpers
# =============================================================================


def _open(form_id: str) -> FormEditor:
    if form_id not in _editors:
        try:
            _editors[form_id] = FormEditor.load(form_id, get_persistence())
        except PersistenceError as e:
            raise ValueError(f"Cannot open form '{form_id}': {e}") from e
    return _editors[form_id]


def _working(form_id: str) -> FormSchema:
    return _open(form_id).begin_edit()


def _current(editor: FormEditor) -> FormSchema:
    return editor.working if editor.working is not None else editor.saved


def _errors(errors: list) -> list[dict[str, Any]]:
    return [asdict(e) for e in errors]


def _summary(editor: FormEditor) -> dict[str, Any]:
    schema = _current(editor)
    errors = validate_schema(schema)
    return {
        "form_id": editor.form_id,
        "mode": editor.mode.value,
        "fields": schema.to_wire(),
        "valid": not errors,
        "errors": _errors(errors),
    }


# =============================================================================
# Catalog and forms
# =============================================================================


def list_field_types() -> dict[str, Any]:
    """List insertable field types in palette order."""
    return {"field_types": export_catalog()}


def create_form(form_id: str | None = None) -> dict[str, Any]:
    """Start a new, empty form in edit mode.

    Raises:
        ValueError: If a form with this id is already open or persisted.
    """
    form_id = form_id or str(uuid4())
    store = get_persistence()
    if form_id in _editors or store.load_form(form_id) is not None:
        raise ValueError(f"Form '{form_id}' already exists")
    editor = FormEditor(form_id, [], store)
    editor.begin_edit()
    _editors[form_id] = editor
    logger.info(f"Created form {form_id}")
    return _summary(editor)


def get_form(form_id: str) -> dict[str, Any]:
    """Get a form's current fields (working copy if being edited)."""
    editor = _open(form_id)
    result = _summary(editor)
    result["draft"] = format_render_tree(
        project_schema(_current(editor), RenderMode.PREVIEW)
    )
    return result


def save_form(form_id: str) -> dict[str, Any]:
    """Validate and persist the working copy."""
    editor = _open(form_id)
    saved = editor.save()
    notice = editor.last_notice
    return {
        "saved": saved,
        "notice": (
            {"level": notice.level.value, "message": notice.message, "details": notice.details}
            if notice
            else None
        ),
        **_summary(editor),
    }


def discard_changes(form_id: str) -> dict[str, Any]:
    """Throw away the working copy and return to the last-saved form."""
    editor = _open(form_id)
    editor.cancel()
    return _summary(editor)


# =============================================================================
# Field edits
# =============================================================================


def add_field(
    form_id: str,
    field_type: str,
    header: str | None = None,
    required: bool | None = None,
    choices: list[str] | None = None,
) -> dict[str, Any]:
    """Append a field, optionally filling in its first properties.

    Raises:
        ValueError: If ``field_type`` is not a catalog type.
    """
    schema = _working(form_id)
    try:
        field = schema.append(field_type)
    except UnknownFieldTypeError as e:
        raise ValueError(str(e)) from e
    rejected = []
    for key, value in (("header", header), ("required", required), ("choices", choices)):
        if value is not None and not schema.edit_property(field.id, key, value):
            rejected.append(key)
    return {"field_id": field.id, "rejected": rejected, **_summary(_open(form_id))}


def remove_field(form_id: str, field_id: str) -> dict[str, Any]:
    changed = _working(form_id).remove(field_id)
    return {"changed": changed, **_summary(_open(form_id))}


def move_field(form_id: str, field_id: str, target_id: str) -> dict[str, Any]:
    """Move a field to the position currently held by ``target_id``."""
    changed = _working(form_id).reorder(field_id, target_id)
    return {"changed": changed, **_summary(_open(form_id))}


def edit_field(form_id: str, field_id: str, properties: dict[str, Any]) -> dict[str, Any]:
    """Set several properties of one field.

    Keys the field's type does not carry are reported in ``rejected``.
    """
    schema = _working(form_id)
    applied, rejected = [], []
    for key, value in properties.items():
        (applied if schema.edit_property(field_id, key, value) else rejected).append(key)
    return {"applied": applied, "rejected": rejected, **_summary(_open(form_id))}


def edit_choices(
    form_id: str,
    field_id: str,
    action: str,
    index: int | None = None,
    text: str = "",
    to_index: int | None = None,
) -> dict[str, Any]:
    """Add, edit, remove or move one choice of a CHOICE/CHECKBOX field.

    Raises:
        ValueError: If ``action`` is unknown or a needed index is missing.
    """
    if action not in CHOICE_ACTIONS:
        raise ValueError(f"Invalid action '{action}'. Valid: {list(CHOICE_ACTIONS)}")
    if action != "add" and index is None:
        raise ValueError(f"Action '{action}' needs an index")
    if action == "move" and to_index is None:
        raise ValueError("Action 'move' needs to_index")

    schema = _working(form_id)
    if action == "add":
        changed = schema.add_choice(field_id, text)
    elif action == "edit":
        changed = schema.edit_choice(field_id, index, text)
    elif action == "remove":
        changed = schema.remove_choice(field_id, index)
    else:
        changed = schema.reorder_choice(field_id, index, to_index)
    return {"changed": changed, **_summary(_open(form_id))}


# =============================================================================
# Validation, rendering and responses
# =============================================================================


def validate_form(form_id: str) -> dict[str, Any]:
    errors = validate_schema(_current(_open(form_id)))
    return {"valid": not errors, "errors": _errors(errors)}


def render_form(
    form_id: str,
    mode: str = "preview",
    response: list[dict[str, Any]] | None = None,
    legacy_checkbox: bool | None = None,
) -> dict[str, Any]:
    """Project a form in one of the three render modes.

    Raises:
        ValueError: If ``mode`` is not builder, preview or response.
    """
    schema = _current(_open(form_id))
    answers = FormResponse.from_wire(response, form_id=form_id) if response else None
    tree = project_schema(
        schema, RenderMode(mode), response=answers, legacy_checkbox=legacy_checkbox
    )
    return {
        "mode": tree.props["mode"],
        "draft": format_render_tree(tree),
        "tree": tree.model_dump(mode="json"),
    }


def check_response(
    form_id: str,
    response: list[dict[str, Any]],
    legacy_checkbox: bool | None = None,
) -> dict[str, Any]:
    """Check a response against the last-saved form."""
    schema = _open(form_id).saved
    errors = validate_response(
        schema,
        FormResponse.from_wire(response),
        legacy_checkbox=use_legacy_checkbox(legacy_checkbox),
    )
    return {"complete": not errors, "errors": _errors(errors)}


def submit_response(form_id: str, response: list[dict[str, Any]]) -> dict[str, Any]:
    """Submit a response to the last-saved form if it is complete."""
    schema = _open(form_id).saved
    session = ResponseSession(
        schema, get_persistence(), FormResponse.from_wire(response, form_id=form_id)
    )
    submitted = session.submit()
    notice = session.last_notice
    return {
        "submitted": submitted,
        "message": notice.message if notice else None,
        "details": notice.details if notice else [],
    }


__all__ = [
    "get_persistence",
    "set_persistence",
    "list_field_types",
    "create_form",
    "get_form",
    "save_form",
    "discard_changes",
    "add_field",
    "remove_field",
    "move_field",
    "edit_field",
    "edit_choices",
    "validate_form",
    "render_form",
    "check_response",
    "submit_response",
]
