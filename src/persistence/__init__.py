"""Persistence and identity adapters for the session boundary.

Example usage:
    >>> from src.persistence import create_persistence
    >>> store = create_persistence()  # InMemoryFormStore unless FORM_API_URL is set
"""

from .lib import (
    FormApiClient,
    InMemoryFormStore,
    PersistenceError,
    StaticIdentity,
    create_persistence,
    identity_from_env,
)

__all__ = [
    "PersistenceError",
    "FormApiClient",
    "InMemoryFormStore",
    "StaticIdentity",
    "identity_from_env",
    "create_persistence",
]
