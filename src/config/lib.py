"""Environment configuration for form-builder.

Every setting the project reads from the process environment is declared
once as an ``EnvVar`` member. ``get_environment()`` resolves a member as
override > environment > default and converts the raw string to the
member's declared type.

Example:
    >>> from src.config import EnvVar, get_environment
    >>> get_environment(EnvVar.FORM_API_TIMEOUT)
    30
    >>> get_environment(EnvVar.FORM_API_TIMEOUT, override=5)
    5
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Declarations
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Declaration of one environment variable.

    Attributes:
        name: Variable name in the process environment.
        default: Value used when unset or unparsable.
        var_type: Target type of the raw string (str, int or bool).
        description: One line shown by ``python . env``.
        category: Group the variable is listed under.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """Environment variables read by form-builder.

    Categories:
        - persistence: Remote form API used for save/create/submit
        - session: Identity of the acting user
        - validation: Response completeness policy
        - logging: Log verbosity
        - service: MCP server bind address and port
    """

    FORM_API_URL = EnvConfig(
        name="FORM_API_URL",
        default=None,  # Unset selects the in-memory store
        var_type=str,
        description="Base URL of the form persistence RPC",
        category="persistence",
    )
    FORM_API_TIMEOUT = EnvConfig(
        name="FORM_API_TIMEOUT",
        default=30,
        var_type=int,
        description="Timeout in seconds for persistence RPC calls",
        category="persistence",
    )
    FORM_API_TOKEN = EnvConfig(
        name="FORM_API_TOKEN",
        default=None,
        var_type=str,
        description="Bearer token sent with persistence RPC calls",
        category="persistence",
    )

    FORM_ACTOR_ID = EnvConfig(
        name="FORM_ACTOR_ID",
        default=None,
        var_type=str,
        description="Actor id used by the CLI and MCP server for create-event",
        category="session",
    )

    FORM_LEGACY_CHECKBOX = EnvConfig(
        name="FORM_LEGACY_CHECKBOX",
        default=False,
        var_type=bool,
        description="Judge required checkboxes by their options, not the answer",
        category="validation",
    )

    LOG_LEVEL = EnvConfig(
        name="LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Root log level (DEBUG, INFO, WARNING, ERROR)",
        category="logging",
    )

    # Port chosen to stay clear of 8080
    MCP_HOST = EnvConfig(
        name="MCP_HOST",
        default="0.0.0.0",
        var_type=str,
        description="MCP server bind address",
        category="service",
    )
    MCP_PORT = EnvConfig(
        name="MCP_PORT",
        default=18080,
        var_type=int,
        description="MCP server port",
        category="service",
    )


# =============================================================================
# Conversion
# =============================================================================

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_STRINGS:
        return True
    if normalized in _FALSE_STRINGS:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


_CONVERTERS: dict[type, Callable[[str], Any]] = {
    str: str,
    int: lambda value: int(value.strip()),
    bool: _parse_bool,
}


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert a raw environment string, falling back to ``default``.

    Unset and unparsable values both resolve to the default.
    """
    if value is None:
        return default
    try:
        return _CONVERTERS[var_type](value)
    except ValueError:
        return default


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Resolve one variable.

    Args:
        env_var: Variable to read.
        override: Returned as-is when not None.

    Returns:
        The override, the converted environment value, or the default.
    """
    if override is not None:
        return override
    config: EnvConfig = env_var.value
    return _convert_value(os.environ.get(config.name), config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_form_api_url(override: str | None = None) -> str | None:
    """Get the persistence RPC base URL without a trailing slash.

    Resolution: override > FORM_API_URL > None (in-memory store).
    """
    url = override or get_environment(EnvVar.FORM_API_URL)
    if not url:
        return None
    return url.rstrip("/")


def get_log_level(override: str | None = None) -> str:
    """Get the configured log level name, upper-cased."""
    return str(get_environment(EnvVar.LOG_LEVEL, override=override)).upper()


def use_legacy_checkbox(override: bool | None = None) -> bool:
    """Whether required CHECKBOX fields use the field-definition rule."""
    return bool(get_environment(EnvVar.FORM_LEGACY_CHECKBOX, override=override))


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List declared variables, optionally only one category."""
    if category is None:
        return list(EnvVar)
    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    "EnvConfig",
    "EnvVar",
    "get_environment",
    "get_environment_info",
    "get_form_api_url",
    "get_log_level",
    "use_legacy_checkbox",
    "list_environment_variables",
]
