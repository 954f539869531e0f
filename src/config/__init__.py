"""Environment configuration for form-builder.

Example:
    >>> from src.config import EnvVar, get_environment
    >>> timeout = get_environment(EnvVar.FORM_API_TIMEOUT)  # int: 30
    >>> for var in list_environment_variables("persistence"):
    ...     print(get_environment_info(var).name)

Categories:
    persistence: Form API URL, timeout and token
    session: Actor id for create-event calls
    validation: Legacy checkbox completeness rule
    logging: Log level
    service: MCP server host and port
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_form_api_url,
    get_log_level,
    list_environment_variables,
    use_legacy_checkbox,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_form_api_url",
    "get_log_level",
    "use_legacy_checkbox",
    # Introspection
    "list_environment_variables",
]
