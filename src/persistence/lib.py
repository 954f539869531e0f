"""Persistence and identity adapters.

``FormApiClient`` talks to the remote form service over HTTP. Each call is
a JSON POST to ``{base_url}/{procedure}``; replies may be bare JSON or a
tRPC envelope (``{"result": {"data": ...}}``), which is unwrapped.

``InMemoryFormStore`` implements the same protocol with plain dicts and is
used when no service URL is configured, and in tests.
"""

import copy
import logging
from typing import Any

import httpx

from src.config import EnvVar, get_environment, get_form_api_url
from src.session.models import Actor, ActorRole, EventInfo
from src.session.protocol import FormPersistence, PersistenceError

logger = logging.getLogger(__name__)


class FormApiClient:
    """HTTP client for the remote form service.

    Example:
        >>> client = FormApiClient("http://localhost:4000/trpc")
        >>> if client.is_available():
        ...     records = client.load_form("form-1")

    Attributes:
        base_url: Service URL, without trailing slash.
        timeout: Request timeout in seconds.
    """

    # Protocol method to remote procedure mapping
    _PROCEDURES = {
        "load_form": "form.getForm",
        "update_form": "form.updateForm",
        "create_event": "event.createEvent",
        "submit_response": "response.submit",
    }

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Service URL. Defaults to the FORM_API_URL env var.
            timeout: Request timeout in seconds. Defaults to FORM_API_TIMEOUT.
            token: Bearer token. Defaults to FORM_API_TOKEN.
            transport: Custom httpx transport (used by tests).

        Raises:
            ValueError: If no service URL is configured.
        """
        url = get_form_api_url(base_url)
        if not url:
            raise ValueError("No form API URL configured, set FORM_API_URL")
        self.base_url = url
        self.timeout = float(timeout or get_environment(EnvVar.FORM_API_TIMEOUT))
        token = token or get_environment(EnvVar.FORM_API_TOKEN)
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.Client(
            timeout=self.timeout, headers=headers, transport=transport
        )

    def __del__(self) -> None:
        """Clean up HTTP client."""
        if hasattr(self, "_client"):
            self._client.close()

    def close(self) -> None:
        self._client.close()

    def is_available(self) -> bool:
        """Check if the service is reachable.

        Returns:
            True if the service responds, False otherwise.
        """
        try:
            response = self._client.get(f"{self.base_url}/health", timeout=5.0)
            return response.status_code == 200
        except (httpx.RequestError, httpx.TimeoutException):
            return False

    # =========================================================================
    # FormPersistence
    # =========================================================================

    def load_form(self, form_id: str) -> list[dict[str, Any]] | None:
        data = self._call("load_form", {"formId": form_id}, missing_ok=True)
        if data is None:
            return None
        if isinstance(data, dict):
            data = data.get("formFields", data.get("fields"))
        if not isinstance(data, list):
            raise PersistenceError(f"Unexpected getForm payload for {form_id}")
        return data

    def update_form(self, form_id: str, fields: list[dict[str, Any]]) -> bool:
        data = self._call(
            "update_form", {"formId": form_id, "formFieldsData": fields}
        )
        return _is_success(data)

    def create_event(
        self,
        user_id: str,
        event: EventInfo,
        fields: list[dict[str, Any]],
    ) -> bool:
        data = self._call(
            "create_event",
            {
                "userId": user_id,
                "event": event.model_dump(by_alias=True, mode="json"),
                "formFields": fields,
            },
        )
        return _is_success(data)

    def submit_response(self, form_id: str, entries: list[dict[str, Any]]) -> bool:
        data = self._call("submit_response", {"formId": form_id, "resFields": entries})
        return _is_success(data)

    # =========================================================================
    # Transport
    # =========================================================================

    def _call(self, method: str, payload: dict[str, Any], missing_ok: bool = False) -> Any:
        """POST a payload to a procedure and return the unwrapped reply.

        Raises:
            PersistenceError: On transport failure or a non-2xx reply.
        """
        url = f"{self.base_url}/{self._PROCEDURES[method]}"
        try:
            response = self._client.post(url, json=payload)
        except httpx.TimeoutException as e:
            raise PersistenceError(f"Form API request timed out: {e}") from e
        except httpx.RequestError as e:
            raise PersistenceError(f"Form API request failed: {e}") from e

        if missing_ok and response.status_code == 404:
            return None
        if not response.is_success:
            raise PersistenceError(
                f"Form API returned {response.status_code}",
                status_code=response.status_code,
                response_body=response.text[:500],
            )

        try:
            body = response.json()
        except ValueError as e:
            raise PersistenceError(
                "Form API returned invalid JSON",
                status_code=response.status_code,
                response_body=response.text[:500],
            ) from e
        logger.debug(f"{self._PROCEDURES[method]} -> {response.status_code}")
        return _unwrap(body)


def _unwrap(body: Any) -> Any:
    """Strip tRPC ``result.data`` (and superjson ``json``) envelopes."""
    if isinstance(body, dict) and isinstance(body.get("result"), dict):
        body = body["result"].get("data")
    if isinstance(body, dict) and set(body) <= {"json", "meta"} and "json" in body:
        body = body["json"]
    return body


def _is_success(data: Any) -> bool:
    if isinstance(data, dict):
        return bool(data.get("success"))
    return bool(data)


# =============================================================================
# In-memory store
# =============================================================================


class InMemoryFormStore:
    """Dict-backed store implementing ``FormPersistence``.

    Everything stored is deep-copied, so later edits to the caller's
    objects never leak into the store.

    Attributes:
        forms: Field records per form id.
        events: Created events as ``(user_id, event, fields)`` tuples.
        responses: Submitted entry lists per form id.
        reject: When True every write reports failure.
    """

    def __init__(self, forms: dict[str, list[dict[str, Any]]] | None = None):
        self.forms: dict[str, list[dict[str, Any]]] = copy.deepcopy(forms or {})
        self.events: list[tuple[str, EventInfo, list[dict[str, Any]]]] = []
        self.responses: dict[str, list[list[dict[str, Any]]]] = {}
        self.reject = False

    def load_form(self, form_id: str) -> list[dict[str, Any]] | None:
        records = self.forms.get(form_id)
        return copy.deepcopy(records) if records is not None else None

    def update_form(self, form_id: str, fields: list[dict[str, Any]]) -> bool:
        if self.reject:
            return False
        self.forms[form_id] = copy.deepcopy(fields)
        return True

    def create_event(
        self,
        user_id: str,
        event: EventInfo,
        fields: list[dict[str, Any]],
    ) -> bool:
        if self.reject:
            return False
        self.events.append((user_id, event.model_copy(deep=True), copy.deepcopy(fields)))
        self.forms[event.id] = copy.deepcopy(fields)
        return True

    def submit_response(self, form_id: str, entries: list[dict[str, Any]]) -> bool:
        if self.reject:
            return False
        self.responses.setdefault(form_id, []).append(copy.deepcopy(entries))
        return True


# =============================================================================
# Identity
# =============================================================================


class StaticIdentity:
    """Identity provider that always reports the same actor."""

    def __init__(self, actor: Actor | None = None):
        self.actor = actor

    def current_actor(self) -> Actor | None:
        return self.actor


def identity_from_env(override: str | None = None) -> StaticIdentity:
    """Identity for CLI and MCP sessions, taken from FORM_ACTOR_ID."""
    actor_id = get_environment(EnvVar.FORM_ACTOR_ID, override=override)
    return StaticIdentity(Actor(id=actor_id, role=ActorRole.HOST) if actor_id else None)


def create_persistence(base_url: str | None = None) -> FormPersistence:
    """Pick the persistence backend.

    Returns:
        A ``FormApiClient`` when a service URL is configured, otherwise an
        empty ``InMemoryFormStore``.
    """
    url = get_form_api_url(base_url)
    if url:
        logger.info(f"Using form API at {url}")
        return FormApiClient(url)
    logger.info("FORM_API_URL not set, using in-memory form store")
    return InMemoryFormStore()


__all__ = [
    "PersistenceError",
    "FormApiClient",
    "InMemoryFormStore",
    "StaticIdentity",
    "identity_from_env",
    "create_persistence",
]
