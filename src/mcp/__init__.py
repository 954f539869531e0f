"""MCP (Model Context Protocol) server for form-builder.

Exposes the form editing engine as MCP tools.

Example:
    # Start server in STDIO mode
    >>> from src.mcp import run_server
    >>> run_server()

    # Start server in HTTP mode
    >>> from src.mcp import run_server, TransportType
    >>> run_server(transport=TransportType.HTTP, port=18080)

Available Tools:
    - list_field_types: Palette of insertable field types
    - create_form / get_form / save_form / discard_changes
    - add_field / remove_field / move_field / edit_field / edit_choices
    - validate_form: Check a form can be saved
    - render_form: Builder, preview or response projection
    - check_response / submit_response: Response completeness and submission
"""

from .lib import ServerConfig, TransportType, get_server_version
from .server import create_server, mcp, run_server

__all__ = [
    # Server instance
    "mcp",
    "create_server",
    "run_server",
    # Configuration
    "ServerConfig",
    "TransportType",
    # Utilities
    "get_server_version",
]
