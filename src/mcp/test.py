"""Unit tests for MCP server module.

Tests cover:
- Server configuration
- Tool registration over the in-memory MCP client
- Tool behaviour through the plain tool functions
"""

import pytest

from . import tools
from .lib import ServerConfig, TransportType, get_server_version
from .server import create_server, mcp, run_server

# =============================================================================
# Configuration Tests
# =============================================================================


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    @pytest.mark.unit
    def test_default_config(self):
        """Default config has expected values."""
        config = ServerConfig()

        assert config.name == "form-builder"
        assert config.transport == TransportType.STDIO
        assert config.host == "0.0.0.0"
        assert config.port == 18080
        assert config.path == "/mcp"

    @pytest.mark.unit
    def test_from_env(self, monkeypatch):
        """from_env reads host and port from the environment."""
        monkeypatch.setenv("MCP_PORT", "19000")
        config = ServerConfig.from_env(transport=TransportType.HTTP)

        assert config.transport == TransportType.HTTP
        assert config.port == 19000

    @pytest.mark.unit
    def test_transport_from_string(self):
        """Transport can be created from string."""
        assert TransportType("stdio") == TransportType.STDIO
        assert TransportType("http") == TransportType.HTTP
        assert TransportType("sse") == TransportType.SSE

    @pytest.mark.unit
    def test_explicit_port_beats_env(self, monkeypatch):
        """Arguments win over MCP_PORT."""
        monkeypatch.setenv("MCP_PORT", "19000")
        assert ServerConfig.from_env("http", port=19500).port == 19500

    @pytest.mark.unit
    def test_stdio_run_kwargs(self):
        """STDIO runs with FastMCP defaults and has no URL."""
        config = ServerConfig()
        assert config.run_kwargs() == {}
        assert config.url is None

    @pytest.mark.unit
    def test_http_run_kwargs(self):
        """HTTP passes host, port and path through."""
        config = ServerConfig(transport=TransportType.HTTP, host="127.0.0.1", port=9000)
        assert config.run_kwargs() == {
            "transport": "http",
            "host": "127.0.0.1",
            "port": 9000,
            "path": "/mcp",
        }
        assert config.url == "http://127.0.0.1:9000/mcp"

    @pytest.mark.unit
    def test_sse_has_no_path(self):
        """SSE does not take a path argument."""
        config = ServerConfig(transport=TransportType.SSE)
        assert "path" not in config.run_kwargs()
        assert config.url == "http://0.0.0.0:18080"

    @pytest.mark.unit
    def test_run_server_uses_config(self, monkeypatch):
        """run_server hands the resolved config to FastMCP.run."""
        calls = []
        monkeypatch.setattr(mcp, "run", lambda **kwargs: calls.append(kwargs))
        monkeypatch.delenv("MCP_HOST", raising=False)

        run_server("http", port=9100)

        assert calls == [
            {"transport": "http", "host": "0.0.0.0", "port": 9100, "path": "/mcp"}
        ]

    @pytest.mark.unit
    def test_run_server_rejects_unknown_transport(self):
        """Unknown transports raise before anything starts."""
        with pytest.raises(ValueError):
            run_server("carrier-pigeon")

    @pytest.mark.unit
    def test_server_version(self):
        """Server version is a dotted string."""
        assert len(get_server_version().split(".")) >= 2


# =============================================================================
# Server Instance Tests
# =============================================================================


class TestServerInstance:
    """Tests for FastMCP server instance."""

    @pytest.mark.unit
    def test_create_server_returns_mcp(self):
        """create_server returns the mcp instance."""
        assert create_server() is mcp

    @pytest.mark.unit
    def test_server_has_name(self):
        """Server has correct name."""
        assert mcp.name == "form-builder"


@pytest.mark.mcp
class TestToolRegistration:
    """Tests for MCP tool registration over the protocol."""

    async def test_tools_registered(self, mcp_client):
        """Every editing tool is listed."""
        names = {tool.name for tool in await mcp_client.list_tools()}

        assert names == {
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
        }

    async def test_call_list_field_types(self, mcp_client):
        """The catalog tool answers over the protocol."""
        result = await mcp_client.call_tool("list_field_types", {})

        tags = [entry["type"] for entry in result.data["field_types"]]
        assert tags[0] == "SECTION"
        assert len(tags) == 7


# =============================================================================
# Tool Functionality Tests (no MCP protocol)
# =============================================================================


class TestFormTools:
    """Tests for building a form through the tool functions."""

    @pytest.mark.unit
    def test_build_and_save(self, store):
        """A form built with tools is saved once it is complete."""
        form = tools.create_form("form-1")
        assert form["mode"] == "edit"
        assert form["valid"] is False

        name = tools.add_field("form-1", "SHORT_TEXT", header="Name", required=True)
        meal = tools.add_field("form-1", "Multiple Choice", header="Meal")
        assert tools.validate_form("form-1")["valid"] is False

        tools.edit_choices("form-1", meal["field_id"], "edit", index=0, text="Veg")
        tools.edit_choices("form-1", meal["field_id"], "add", text="Meat")
        tools.move_field("form-1", meal["field_id"], name["field_id"])

        result = tools.save_form("form-1")
        assert result["saved"] is True
        assert result["mode"] == "view"
        assert [r["type"] for r in store.load_form("form-1")] == ["CHOICE", "SHORT_TEXT"]

    @pytest.mark.unit
    def test_incomplete_form_not_saved(self, store):
        """Saving an incomplete form reports why and persists nothing."""
        tools.create_form("form-1")
        tools.add_field("form-1", "SECTION", header="Intro")

        result = tools.save_form("form-1")

        assert result["saved"] is False
        assert result["notice"]["level"] == "error"
        assert result["notice"]["details"] == ["Section has no description"]
        assert store.load_form("form-1") is None

    @pytest.mark.unit
    def test_discard_changes(self, store):
        """Discarding returns to the last save."""
        store.update_form("form-1", [{"id": "a", "type": "DATE", "header": "When"}])
        tools.remove_field("form-1", "a")
        assert tools.get_form("form-1")["fields"] == []

        result = tools.discard_changes("form-1")

        assert result["mode"] == "view"
        assert [f["id"] for f in result["fields"]] == ["a"]

    @pytest.mark.unit
    def test_edit_field_reports_rejected_keys(self, store):
        """Keys a type does not carry are rejected, not applied."""
        tools.create_form("form-1")
        field_id = tools.add_field("form-1", "SECTION")["field_id"]

        result = tools.edit_field(
            "form-1", field_id, {"header": "Intro", "required": True, "choices": ["x"]}
        )

        assert result["applied"] == ["header"]
        assert result["rejected"] == ["required", "choices"]

    @pytest.mark.unit
    def test_errors(self, store):
        """Bad inputs raise ValueError for the client."""
        tools.create_form("form-1")
        with pytest.raises(ValueError):
            tools.create_form("form-1")
        with pytest.raises(ValueError):
            tools.add_field("form-1", "SLIDER")
        with pytest.raises(ValueError):
            tools.edit_choices("form-1", "x", "shuffle", index=0)
        with pytest.raises(ValueError):
            tools.get_form("does-not-exist")
        with pytest.raises(ValueError):
            tools.render_form("form-1", mode="print")

    @pytest.mark.unit
    def test_render_modes(self, store):
        """render_form returns a draft for each mode."""
        tools.create_form("form-1")
        tools.add_field("form-1", "DATE", header="Arrival", required=True)

        builder = tools.render_form("form-1", "builder")
        response = tools.render_form("form-1", "response")

        assert "drag_handle" in builder["draft"]
        assert response["draft"].endswith('submit "Submit" (disabled)')
        assert response["tree"]["kind"] == "form"


class TestResponseTools:
    """Tests for response checking and submission."""

    @pytest.fixture
    def saved_form(self, store):
        store.update_form(
            "form-1",
            [{"id": "q", "type": "SHORT_TEXT", "header": "Name", "required": True}],
        )
        return "form-1"

    @pytest.mark.unit
    def test_check_response(self, saved_form):
        """Completeness is judged against the saved form."""
        blank = tools.check_response(saved_form, [{"formFieldId": "q"}])
        filled = tools.check_response(saved_form, [{"formFieldId": "q", "textField": "Ada"}])

        assert blank["complete"] is False
        assert blank["errors"][0]["field_id"] == "q"
        assert filled["complete"] is True

    @pytest.mark.unit
    def test_render_submit_follows_legacy_checkbox(self, store):
        """render_form and check_response agree on checkbox completeness."""
        store.update_form(
            "form-2",
            [
                {
                    "id": "c",
                    "type": "CHECKBOX",
                    "header": "Diet",
                    "choices": ["A"],
                    "required": True,
                }
            ],
        )
        blank = [{"formFieldId": "c"}]

        for legacy in (True, False):
            rendered = tools.render_form(
                "form-2", "response", blank, legacy_checkbox=legacy
            )
            checked = tools.check_response("form-2", blank, legacy_checkbox=legacy)
            assert rendered["draft"].endswith("(disabled)") is not checked["complete"]
            assert checked["complete"] is legacy

    @pytest.mark.unit
    def test_submit_response(self, saved_form, store):
        """Only complete responses are stored."""
        assert tools.submit_response(saved_form, [])["submitted"] is False
        result = tools.submit_response(saved_form, [{"formFieldId": "q", "textField": "Ada"}])

        assert result["submitted"] is True
        assert store.responses["form-1"][0][0]["textField"] == "Ada"
