"""CLI entry point for form-builder.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the appropriate submodules or runs specific tasks.
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from src.config import (
    EnvVar,
    get_environment,
    get_environment_info,
    get_log_level,
    list_environment_variables,
    use_legacy_checkbox,
)
from src.core import get_logger, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


# =============================================================================
# File Helpers
# =============================================================================


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _load_schema(path: Path):
    """Load a schema file.

    Accepts either a bare list of field records or an object with
    ``formId`` and ``formFields`` keys.
    """
    from src.schema import FormSchema

    data = _read_json(path)
    if isinstance(data, dict):
        return FormSchema.from_wire(
            data.get("formFields", []), form_id=data.get("formId")
        )
    return FormSchema.from_wire(data)


def _load_response(path: Path, form_id: str | None):
    from src.response import FormResponse

    data = _read_json(path)
    if isinstance(data, dict):
        return FormResponse.from_wire(
            data.get("resFields", []), form_id=data.get("formId", form_id)
        )
    return FormResponse.from_wire(data, form_id=form_id)


# =============================================================================
# Catalog Command
# =============================================================================


def cmd_catalog(args: argparse.Namespace) -> int:
    """Print the field catalog."""
    from src.catalog import export_catalog

    catalog = export_catalog()
    if args.json:
        print(json.dumps(catalog, indent=2))
        return 0

    for entry in catalog:
        aliases = ", ".join(entry["aliases"]) or "-"
        print(f"  {entry['type']:<12} {entry['label']:<18} aliases: {aliases}")
    return 0


# =============================================================================
# Validate Command
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a schema file and report every problem found."""
    from src.validation import validate_schema

    try:
        schema = _load_schema(args.schema)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load {args.schema}: {e}")
        return 1

    errors = validate_schema(schema)
    if not errors:
        logger.info(f"{args.schema}: {len(schema)} field(s), no problems found")
        return 0

    for error in errors:
        target = error.field_id or "<form>"
        print(f"  [{error.error_type}] {target}: {error.message}")
    logger.error(f"{args.schema}: {len(errors)} problem(s)")
    return 1


# =============================================================================
# Render Command
# =============================================================================


def cmd_render(args: argparse.Namespace) -> int:
    """Render a schema file as a text tree or JSON node tree."""
    from src.render import RenderMode, format_render_tree, project_schema

    try:
        schema = _load_schema(args.schema)
        response = (
            _load_response(args.response, schema.form_id) if args.response else None
        )
    except (OSError, ValueError) as e:
        logger.error(f"Could not load input: {e}")
        return 1

    tree = project_schema(
        schema,
        RenderMode(args.mode),
        response=response,
        legacy_checkbox=args.legacy_checkbox,
    )
    if args.format == "json":
        result_text = tree.model_dump_json(indent=2, exclude_none=True)
    else:
        result_text = format_render_tree(tree)

    if args.output:
        args.output.write_text(result_text, encoding="utf-8")
        logger.info(f"Render saved to {args.output}")
    else:
        print(result_text)
    return 0


# =============================================================================
# Check Response Command
# =============================================================================


def cmd_check_response(args: argparse.Namespace) -> int:
    """Check that a response answers every required question."""
    from src.validation import validate_response

    try:
        schema = _load_schema(args.schema)
        response = _load_response(args.response, schema.form_id)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load input: {e}")
        return 1

    errors = validate_response(
        schema, response, legacy_checkbox=use_legacy_checkbox(args.legacy_checkbox)
    )
    if not errors:
        logger.info("Response is complete")
        return 0

    for error in errors:
        print(f"  [{error.error_type}] {error.field_id}: {error.message}")
    logger.error(f"Response incomplete: {len(errors)} unanswered question(s)")
    return 1


def handle_form_command(command: str, argv: list[str]) -> int:
    """Handle the offline form commands (catalog, validate, render, check)."""
    parser = argparse.ArgumentParser(
        prog=f"python . {command}",
        description="Work with form schema files offline",
    )

    if command == "catalog":
        parser.add_argument(
            "--json", action="store_true", help="Print the catalog as JSON"
        )
        parser.set_defaults(func=cmd_catalog)
    elif command == "validate":
        parser.add_argument("schema", type=Path, help="Schema JSON file")
        parser.set_defaults(func=cmd_validate)
    elif command == "render":
        parser.add_argument("schema", type=Path, help="Schema JSON file")
        parser.add_argument(
            "--mode",
            "-m",
            choices=["builder", "preview", "response"],
            default="preview",
            help="Render mode (default: preview)",
        )
        parser.add_argument(
            "--response", "-r", type=Path, help="Response JSON file (response mode)"
        )
        parser.add_argument(
            "--format",
            "-f",
            choices=["tree", "json"],
            default="tree",
            help="Output format (default: tree)",
        )
        parser.add_argument(
            "--legacy-checkbox",
            action="store_true",
            default=None,
            help="Judge checkbox questions by their option list when enabling submit",
        )
        parser.add_argument("--output", "-o", type=Path, help="Output file path")
        parser.set_defaults(func=cmd_render)
    elif command == "check-response":
        parser.add_argument("schema", type=Path, help="Schema JSON file")
        parser.add_argument("response", type=Path, help="Response JSON file")
        parser.add_argument(
            "--legacy-checkbox",
            action="store_true",
            default=None,
            help="Judge checkbox questions by their option list, not the answer",
        )
        parser.set_defaults(func=cmd_check_response)
    else:
        raise ValueError(f"Unknown form command: {command}")

    args = parser.parse_args(argv)
    return args.func(args)


# =============================================================================
# Test Command
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . test                # Run all tests
        python . test --unit         # Run only unit tests
        python . test --integration  # Run end-to-end editor flows
        python . test --mcp          # Run MCP server tests
        python . test -k "reorder"   # Run tests matching pattern
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--mcp": ["-m", "mcp"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


# =============================================================================
# Env Command
# =============================================================================


def cmd_env(_argv: list[str]) -> int:
    """Show the environment variables the project reads."""
    print("Environment Configuration")
    print("=" * 40)
    for category in ("persistence", "session", "validation", "logging", "service"):
        env_vars = list_environment_variables(category)
        if not env_vars:
            continue
        print(f"\n[{category}]")
        for env_var in env_vars:
            info = get_environment_info(env_var)
            value = get_environment(env_var)
            if env_var == EnvVar.FORM_API_TOKEN and value:
                value = "***"
            print(f"  {info.name:<18} = {value!s:<28} {info.description}")
    return 0


# =============================================================================
# MCP Command
# =============================================================================


def handle_mcp_command(argv: list[str]) -> int:
    """Handle MCP server commands.

    Usage:
        python . mcp run              # Start in STDIO mode
        python . mcp serve            # Start in HTTP mode
        python . mcp serve --port 8080
        python . mcp info             # Show server info
    """
    if not argv:
        print("MCP Server Commands")
        print("\nUsage: python . mcp {command} [options]")
        print("\nCommands:")
        print("  run                 Start server in STDIO mode")
        print("  serve               Start server in HTTP mode")
        print("  info                Show server information")
        print("\nOptions for 'serve':")
        print("  --host HOST         Bind address (default: MCP_HOST or 0.0.0.0)")
        print("  --port PORT         Port number (default: MCP_PORT or 18080)")
        print("  --transport TYPE    Transport: http or sse (default: http)")
        return 1

    subcommand = argv[0]
    subargs = argv[1:]

    if subcommand == "run":
        from src.mcp import TransportType, run_server

        logger.info("Starting MCP server in STDIO mode...")
        run_server(transport=TransportType.STDIO)
        return 0

    elif subcommand == "serve":
        from src.mcp import TransportType, run_server

        host: str | None = None
        port: int | None = None
        transport = TransportType.HTTP

        i = 0
        while i < len(subargs):
            arg = subargs[i]
            if arg == "--host" and i + 1 < len(subargs):
                host = subargs[i + 1]
                i += 2
            elif arg == "--port" and i + 1 < len(subargs):
                port = int(subargs[i + 1])
                i += 2
            elif arg == "--transport" and i + 1 < len(subargs):
                transport = TransportType(subargs[i + 1])
                i += 2
            else:
                i += 1

        logger.info(f"Starting MCP server in {transport.value} mode...")
        run_server(transport=transport, host=host, port=port)
        return 0

    elif subcommand == "info":
        from src.mcp import get_server_version, mcp

        print("Form Builder MCP Server")
        print("=" * 40)
        print(f"Name: {mcp.name}")
        print(f"Version: {get_server_version()}")
        print("\nAvailable Tools:")
        print("  - list_field_types: Palette of insertable field types")
        print("  - create_form, get_form, save_form, discard_changes")
        print("  - add_field, remove_field, move_field, edit_field, edit_choices")
        print("  - validate_form: Check a form can be saved")
        print("  - render_form: Builder, preview or response projection")
        print("  - check_response, submit_response")
        return 0

    else:
        logger.error(f"Unknown mcp command: {subcommand}")
        return handle_mcp_command([])


# =============================================================================
# Help
# =============================================================================


def show_help() -> None:
    """Print top-level usage."""
    print("form-builder CLI")
    print("\nUsage: python . {command} [options]")
    print("\n=== Forms ===")
    print("  catalog          List the insertable field types")
    print("  validate         Check a schema file can be saved")
    print("  render           Render a schema file (builder, preview, response)")
    print("  check-response   Check a response file against a schema")
    print("\n=== MCP Server ===")
    print("  mcp              Run MCP server (STDIO or HTTP mode)")
    print("\n=== Development ===")
    print("  test             Run the test suite")
    print("  env              Show environment configuration")
    print("\nExamples:")
    print("  python . catalog --json")
    print("  python . validate form.json")
    print("  python . render form.json --mode response -r answers.json")
    print("  python . check-response form.json answers.json")
    print("  python . mcp serve --port 8080")
    print("  python . test --unit")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "catalog": lambda: handle_form_command(command, rest_args),
        "validate": lambda: handle_form_command(command, rest_args),
        "render": lambda: handle_form_command(command, rest_args),
        "check-response": lambda: handle_form_command(command, rest_args),
        "mcp": lambda: handle_mcp_command(rest_args),
        "test": lambda: cmd_test(rest_args),
        "env": lambda: cmd_env(rest_args),
    }

    if command in commands:
        setup_logging(get_log_level())
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
