"""Unit tests for persistence adapters."""

import json

import httpx
import pytest

from src.session import Actor, EventInfo

from .lib import (
    FormApiClient,
    InMemoryFormStore,
    PersistenceError,
    StaticIdentity,
    create_persistence,
    identity_from_env,
)

BASE = "http://forms.test/trpc"


def _client(handler, **kwargs) -> FormApiClient:
    return FormApiClient(BASE, transport=httpx.MockTransport(handler), **kwargs)


class TestFormApiClient:
    """Tests for the HTTP client against a mock transport."""

    @pytest.mark.unit
    def test_requires_url(self, monkeypatch):
        """Without a URL the client refuses to start."""
        monkeypatch.delenv("FORM_API_URL", raising=False)
        with pytest.raises(ValueError):
            FormApiClient()

    @pytest.mark.unit
    def test_update_form_posts_fields(self):
        """updateForm receives the form id and the full field list."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"result": {"data": {"success": True}}})

        fields = [{"id": "a", "type": "DATE"}]
        assert _client(handler).update_form("form-1", fields) is True
        assert seen["url"] == f"{BASE}/form.updateForm"
        assert seen["body"] == {"formId": "form-1", "formFieldsData": fields}

    @pytest.mark.unit
    def test_unsuccessful_reply(self):
        """success=false is reported as False, not raised."""
        client = _client(lambda r: httpx.Response(200, json={"success": False}))
        assert client.update_form("form-1", []) is False

    @pytest.mark.unit
    def test_http_error_raises(self):
        """Non-2xx replies become PersistenceError with details."""
        client = _client(lambda r: httpx.Response(500, text="boom"))
        with pytest.raises(PersistenceError) as exc_info:
            client.submit_response("form-1", [])
        assert exc_info.value.status_code == 500
        assert exc_info.value.response_body == "boom"

    @pytest.mark.unit
    def test_transport_error_wrapped(self):
        """Connection failures are wrapped with the original cause."""

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(PersistenceError) as exc_info:
            _client(handler).update_form("form-1", [])
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.unit
    def test_load_form_unwraps_superjson(self):
        """getForm replies wrapped in result.data.json are unwrapped."""
        records = [{"id": "a", "type": "SECTION"}]
        client = _client(
            lambda r: httpx.Response(
                200, json={"result": {"data": {"json": {"formFields": records}}}}
            )
        )
        assert client.load_form("form-1") == records

    @pytest.mark.unit
    def test_load_missing_form(self):
        """A 404 from getForm means the form does not exist."""
        client = _client(lambda r: httpx.Response(404, json={"error": "NOT_FOUND"}))
        assert client.load_form("nope") is None

    @pytest.mark.unit
    def test_create_event_payload(self):
        """createEvent sends the actor id, event info and fields."""
        seen = {}

        def handler(request):
            seen.update(json.loads(request.content))
            return httpx.Response(200, json={"success": True})

        event = EventInfo(name="Mock exam", price=150)
        assert _client(handler).create_event("user-1", event, []) is True
        assert seen["userId"] == "user-1"
        assert seen["event"]["name"] == "Mock exam"
        assert "startDate" in seen["event"]

    @pytest.mark.unit
    def test_bearer_token(self):
        """A configured token is sent as a bearer header."""
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"success": True})

        _client(handler, token="secret").update_form("f", [])
        assert seen["auth"] == "Bearer secret"

    @pytest.mark.unit
    def test_is_available(self):
        """Health probe follows the status code."""
        assert _client(lambda r: httpx.Response(200)).is_available()
        assert not _client(lambda r: httpx.Response(503)).is_available()


class TestInMemoryFormStore:
    """Tests for the dict-backed store."""

    @pytest.mark.unit
    def test_round_trip_is_copied(self):
        """Stored records are isolated from the caller's objects."""
        store = InMemoryFormStore()
        fields = [{"id": "a", "type": "DATE", "choices": []}]
        store.update_form("f", fields)
        fields[0]["id"] = "changed"
        loaded = store.load_form("f")
        assert loaded[0]["id"] == "a"
        loaded[0]["id"] = "again"
        assert store.load_form("f")[0]["id"] == "a"

    @pytest.mark.unit
    def test_unknown_form(self):
        """Unknown ids load as None."""
        assert InMemoryFormStore().load_form("missing") is None

    @pytest.mark.unit
    def test_events_and_responses_recorded(self):
        """Created events and submitted responses are kept."""
        store = InMemoryFormStore()
        event = EventInfo(name="E")
        assert store.create_event("u", event, [{"id": "x"}])
        assert store.load_form(event.id) == [{"id": "x"}]
        assert store.submit_response(event.id, [{"formFieldId": "x"}])
        assert store.events[0][0] == "u"
        assert store.responses[event.id] == [[{"formFieldId": "x"}]]

    @pytest.mark.unit
    def test_reject(self):
        """A rejecting store reports failure for every write."""
        store = InMemoryFormStore({"f": []})
        store.reject = True
        assert store.update_form("f", [{"id": "a"}]) is False
        assert store.load_form("f") == []


class TestIdentityAndFactory:
    """Tests for identity helpers and backend selection."""

    @pytest.mark.unit
    def test_static_identity(self):
        """StaticIdentity returns its actor."""
        actor = Actor(id="host-1")
        assert StaticIdentity(actor).current_actor() == actor
        assert StaticIdentity().current_actor() is None

    @pytest.mark.unit
    def test_identity_from_env(self, monkeypatch):
        """FORM_ACTOR_ID becomes the current actor."""
        monkeypatch.setenv("FORM_ACTOR_ID", "host-9")
        assert identity_from_env().current_actor().id == "host-9"
        monkeypatch.delenv("FORM_ACTOR_ID")
        assert identity_from_env().current_actor() is None

    @pytest.mark.unit
    def test_factory_defaults_to_memory(self, monkeypatch):
        """Without FORM_API_URL the in-memory store is used."""
        monkeypatch.delenv("FORM_API_URL", raising=False)
        assert isinstance(create_persistence(), InMemoryFormStore)

    @pytest.mark.unit
    def test_factory_uses_client_with_url(self, monkeypatch):
        """A configured URL selects the HTTP client."""
        monkeypatch.setenv("FORM_API_URL", "http://forms.test/trpc/")
        backend = create_persistence()
        assert isinstance(backend, FormApiClient)
        assert backend.base_url == "http://forms.test/trpc"
