"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Remote form API detection for ``remote`` tests
- Shared schema and store fixtures
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from src.config import get_form_api_url

if TYPE_CHECKING:
    from src.persistence import InMemoryFormStore
    from src.schema import FormSchema

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Configuration Constants
# =============================================================================

FORM_API_URL = get_form_api_url()


# =============================================================================
# Remote API Detection (Private Functions)
# =============================================================================


def _is_form_api_healthy(url: str | None = FORM_API_URL) -> bool:
    """Check if the remote form API is configured and responding."""
    if not url:
        return False

    from src.persistence import FormApiClient

    client = FormApiClient(base_url=url, timeout=2)
    try:
        return client.is_available()
    finally:
        client.close()


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """Auto-skip tests marked ``remote`` when the form API is unavailable."""
    if not any("remote" in item.keywords for item in items):
        return

    skip_remote = pytest.mark.skip(reason="Form API not available")
    if _is_form_api_healthy():
        return

    for item in items:
        if "remote" in item.keywords:
            item.add_marker(skip_remote)


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryFormStore:
    """Create an empty in-memory form store.

    Returns:
        An InMemoryFormStore with no forms.
    """
    from src.persistence import InMemoryFormStore

    return InMemoryFormStore()


@pytest.fixture
def registration_schema() -> FormSchema:
    """Create a small, complete registration form.

    Returns:
        A schema with an intro section, a required name question and a
        required meal choice.
    """
    from src.fields import ChoiceField, SectionField, ShortTextField
    from src.schema import FormSchema

    return FormSchema(
        [
            SectionField(id="intro", header="Welcome", description="Sign up below"),
            ShortTextField(id="name", header="Your name", required=True),
            ChoiceField(
                id="meal",
                header="Meal",
                choices=["Vegetarian", "Vegan", "Omnivore"],
                required=True,
            ),
        ],
        form_id="form-registration",
    )
