"""FastMCP server instance for form-builder.

Exposes the form editing engine to MCP clients: build a form field by
field, check it, preview it in any render mode and validate responses.

Usage:
    # STDIO mode (for desktop MCP clients)
    python -m src.mcp.server

    # HTTP mode (for web deployment)
    python -m src.mcp.server --transport http --port 18080

    # Via CLI
    python . mcp run
    python . mcp serve --port 18080
"""

import argparse
import logging
import sys
from typing import Any

from fastmcp import FastMCP

from src.core import setup_logging

from . import tools
from .lib import ServerConfig, TransportType, get_server_version

logger = logging.getLogger(__name__)


# =============================================================================
# Server Instructions (LLM Guidance)
# =============================================================================

SERVER_INSTRUCTIONS = """\
## Form Builder MCP Server

Builds registration forms as an ordered list of typed fields, previews
them and checks responses.

### Quick Start
1. `list_field_types()` → see what can be added
2. `create_form()` → get a form_id
3. `add_field(form_id, "SHORT_TEXT", header="Your name")`
4. `validate_form(form_id)` → fix any reported problems
5. `save_form(form_id)` → persist

### Editing
- `add_field`, `remove_field`, `move_field(field_id, target_id)`
- `edit_field(field_id, {"header": ..., "required": true})`
- `edit_choices(field_id, "add" | "edit" | "remove" | "move", ...)`
- `discard_changes(form_id)` → back to the last save

### Reviewing
- `get_form(form_id)` → fields plus a text draft
- `render_form(form_id, mode)` with mode builder, preview or response
- `check_response(form_id, response)` / `submit_response(form_id, response)`

Edits stay in a working copy until `save_form` succeeds. Saving requires at
least one field, a header on every field, a description on sections and
non-empty choices on choice fields.
"""

# =============================================================================
# Server Instance
# =============================================================================

mcp = FastMCP(
    name="form-builder",
    instructions=SERVER_INSTRUCTIONS,
)


# =============================================================================
# Catalog and Form Tools
# =============================================================================


@mcp.tool
def list_field_types() -> dict[str, Any]:
    """List the field types that can be added to a form.

    Returns:
        Dictionary with field_types: one entry per type with tag, label,
        icon, category and description, in palette order.
    """
    return tools.list_field_types()


@mcp.tool
def create_form(form_id: str | None = None) -> dict[str, Any]:
    """Start a new, empty form.

    Args:
        form_id: Identifier to use (optional, generated if omitted).

    Returns:
        Dictionary with form_id, mode, fields, valid and errors.
    """
    return tools.create_form(form_id)


@mcp.tool
def get_form(form_id: str) -> dict[str, Any]:
    """Get a form's fields and a text draft of its preview.

    Args:
        form_id: Form to read.

    Returns:
        Dictionary with form_id, mode, fields, valid, errors and draft.
    """
    return tools.get_form(form_id)


@mcp.tool
def save_form(form_id: str) -> dict[str, Any]:
    """Validate and save the form's pending edits.

    Nothing is saved if the form is incomplete; the returned notice says
    why.

    Returns:
        Dictionary with saved, notice and the form summary.
    """
    return tools.save_form(form_id)


@mcp.tool
def discard_changes(form_id: str) -> dict[str, Any]:
    """Drop pending edits and return to the last saved form."""
    return tools.discard_changes(form_id)


# =============================================================================
# Field Editing Tools
# =============================================================================


@mcp.tool
def add_field(
    form_id: str,
    field_type: str,
    header: str | None = None,
    required: bool | None = None,
    choices: list[str] | None = None,
) -> dict[str, Any]:
    """Append a field to the end of a form.

    Args:
        form_id: Form to edit.
        field_type: One of SECTION, SHORT_TEXT, LONG_TEXT, CHOICE,
            CHECKBOX, DATE, FILE (display names like "Short Answer" work too).
        header: Question text (optional).
        required: Whether an answer is mandatory (optional, not for SECTION).
        choices: Option texts for CHOICE and CHECKBOX (optional).

    Returns:
        Dictionary with field_id, rejected (properties the type does not
        carry) and the form summary.
    """
    return tools.add_field(form_id, field_type, header, required, choices)


@mcp.tool
def remove_field(form_id: str, field_id: str) -> dict[str, Any]:
    """Delete a field. Unknown ids are ignored (changed=false)."""
    return tools.remove_field(form_id, field_id)


@mcp.tool
def move_field(form_id: str, field_id: str, target_id: str) -> dict[str, Any]:
    """Move a field to the position currently held by another field.

    Fields in between shift by one; this is not a swap.
    """
    return tools.move_field(form_id, field_id, target_id)


@mcp.tool
def edit_field(form_id: str, field_id: str, properties: dict[str, Any]) -> dict[str, Any]:
    """Set properties of a field.

    Args:
        form_id: Form to edit.
        field_id: Field to change.
        properties: Any of header, description (SECTION), placeholder
            (SHORT_TEXT, LONG_TEXT), required, choices (CHOICE, CHECKBOX).

    Returns:
        Dictionary with applied and rejected keys plus the form summary.
    """
    return tools.edit_field(form_id, field_id, properties)


@mcp.tool
def edit_choices(
    form_id: str,
    field_id: str,
    action: str,
    index: int | None = None,
    text: str = "",
    to_index: int | None = None,
) -> dict[str, Any]:
    """Change one choice of a CHOICE or CHECKBOX field.

    Args:
        form_id: Form to edit.
        field_id: Field whose choices change.
        action: "add" (append text), "edit" (set text at index),
            "remove" (delete index) or "move" (index to to_index).
        index: Choice position, 0-based.
        text: Choice text for add and edit.
        to_index: Destination for move.
    """
    return tools.edit_choices(form_id, field_id, action, index, text, to_index)


# =============================================================================
# Review Tools
# =============================================================================


@mcp.tool
def validate_form(form_id: str) -> dict[str, Any]:
    """Check whether a form can be saved.

    Returns:
        Dictionary with valid and errors (field_id, message, error_type).
    """
    return tools.validate_form(form_id)


@mcp.tool
def render_form(
    form_id: str,
    mode: str = "preview",
    response: list[dict[str, Any]] | None = None,
    legacy_checkbox: bool | None = None,
) -> dict[str, Any]:
    """Render a form as a text draft and a structured tree.

    Args:
        form_id: Form to render.
        mode: "builder", "preview" or "response".
        response: Answers to show in response mode (optional), as
            records with formFieldId, textField, selectField,
            checkboxField, fileField, dateField.
        legacy_checkbox: Judge required checkboxes by their options when
            enabling submit (default: FORM_LEGACY_CHECKBOX).

    Returns:
        Dictionary with mode, draft and tree.
    """
    return tools.render_form(form_id, mode, response, legacy_checkbox)


@mcp.tool
def check_response(
    form_id: str,
    response: list[dict[str, Any]],
    legacy_checkbox: bool | None = None,
) -> dict[str, Any]:
    """Check that a response answers every required question.

    Args:
        form_id: Saved form being answered.
        response: Answer records keyed by formFieldId.
        legacy_checkbox: Judge checkbox questions by the field's own
            choices instead of the respondent's selection. Defaults to
            FORM_LEGACY_CHECKBOX.

    Returns:
        Dictionary with complete and errors.
    """
    return tools.check_response(form_id, response, legacy_checkbox)


@mcp.tool
def submit_response(form_id: str, response: list[dict[str, Any]]) -> dict[str, Any]:
    """Submit a complete response to a saved form."""
    return tools.submit_response(form_id, response)


# =============================================================================
# Server Factory
# =============================================================================


def create_server() -> FastMCP:
    """Create and configure the MCP server instance.

    Returns:
        Configured FastMCP server instance.
    """
    return mcp


def run_server(
    transport: TransportType | str | None = None,
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Run the MCP server with specified transport.

    Host and port fall back to MCP_HOST and MCP_PORT.

    Args:
        transport: Transport type (stdio, http, sse). Defaults to stdio.
        host: Bind address for HTTP/SSE.
        port: Port for HTTP/SSE.

    Raises:
        ValueError: If the transport is not one of TransportType.
    """
    config = ServerConfig.from_env(transport, host=host, port=port)
    logger.info(f"Starting {config.name} server v{get_server_version()}")
    logger.info(f"Transport: {config.transport.value}")
    if config.url:
        logger.info(f"Listening at {config.url}")
    mcp.run(**config.run_kwargs())


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for MCP server.

    Args:
        argv: Command line arguments (uses sys.argv if None).

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        prog="form-builder",
        description="MCP server for building and checking registration forms",
    )
    parser.add_argument(
        "--transport",
        "-t",
        type=str,
        choices=["stdio", "http", "sse"],
        default="stdio",
        help="Transport type (default: stdio)",
    )
    parser.add_argument(
        "--host", type=str, default=None, help="Bind address (default: MCP_HOST)"
    )
    parser.add_argument(
        "--port", "-p", type=int, default=None, help="Port (default: MCP_PORT)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        run_server(args.transport, host=args.host, port=args.port)
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped")
        return 0


if __name__ == "__main__":
    sys.exit(main())
