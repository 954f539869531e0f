"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert_value,
    get_environment,
    get_environment_info,
    get_form_api_url,
    get_log_level,
    list_environment_variables,
    use_legacy_checkbox,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("FORM_API_TIMEOUT", raising=False)
        assert get_environment(EnvVar.FORM_API_TIMEOUT) == 30

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("FORM_API_TIMEOUT", "99")
        assert get_environment(EnvVar.FORM_API_TIMEOUT, override=5) == 5

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("MCP_PORT", "12345")
        result = get_environment(EnvVar.MCP_PORT)
        assert result == 12345
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("FORM_API_TOKEN", "secret-token")
        assert get_environment(EnvVar.FORM_API_TOKEN) == "secret-token"

    @pytest.mark.unit
    def test_none_default_for_api_url(self, monkeypatch):
        """Form API URL defaults to None when not set."""
        monkeypatch.delenv("FORM_API_URL", raising=False)
        assert get_environment(EnvVar.FORM_API_URL) is None

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("FORM_API_TIMEOUT", "soon")
        assert get_environment(EnvVar.FORM_API_TIMEOUT) == 30


class TestConvertValue:
    """Tests for raw string conversion."""

    @pytest.mark.unit
    def test_bool_true_values(self):
        """Recognized truthy strings convert to True."""
        for value in ("true", "1", "yes", "on", "TRUE", "Yes"):
            assert _convert_value(value, bool, None) is True

    @pytest.mark.unit
    def test_bool_false_values(self):
        """Recognized falsy strings convert to False."""
        for value in ("false", "0", "no", "FALSE", "No"):
            assert _convert_value(value, bool, None) is False

    @pytest.mark.unit
    def test_bool_unrecognized_returns_default(self):
        """Unrecognized strings fall back to the default."""
        assert _convert_value("maybe", bool, True) is True

    @pytest.mark.unit
    def test_int_strips_whitespace(self):
        """Surrounding whitespace does not break integer parsing."""
        assert _convert_value(" 42 ", int, 0) == 42

    @pytest.mark.unit
    def test_unset_returns_default(self):
        """None means unset."""
        assert _convert_value(None, bool, False) is False


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.FORM_API_TIMEOUT)
        assert isinstance(info, EnvConfig)
        assert info.name == "FORM_API_TIMEOUT"
        assert info.default == 30
        assert info.var_type is int
        assert info.category == "persistence"

    @pytest.mark.unit
    def test_description_present(self):
        """Description field is populated."""
        info = get_environment_info(EnvVar.FORM_API_URL)
        assert "persistence" in info.description


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        result = list_environment_variables()
        assert len(result) == len(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Filters by category correctly."""
        persistence_vars = list_environment_variables("persistence")
        assert EnvVar.FORM_API_URL in persistence_vars
        assert EnvVar.FORM_API_TOKEN in persistence_vars
        assert EnvVar.MCP_PORT not in persistence_vars


class TestConvenienceFunctions:
    """Tests for URL and log level helpers."""

    @pytest.mark.unit
    def test_api_url_strips_trailing_slash(self, monkeypatch):
        """Trailing slashes are removed from the base URL."""
        monkeypatch.setenv("FORM_API_URL", "http://api.example.com/trpc/")
        assert get_form_api_url() == "http://api.example.com/trpc"

    @pytest.mark.unit
    def test_api_url_override(self, monkeypatch):
        """Override beats the environment."""
        monkeypatch.setenv("FORM_API_URL", "http://env")
        assert get_form_api_url("http://override") == "http://override"

    @pytest.mark.unit
    def test_api_url_unset(self, monkeypatch):
        """Unset URL resolves to None."""
        monkeypatch.delenv("FORM_API_URL", raising=False)
        assert get_form_api_url() is None

    @pytest.mark.unit
    def test_log_level_upper_cased(self, monkeypatch):
        """Log level names are normalized to upper case."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"

    @pytest.mark.unit
    def test_legacy_checkbox_defaults_off(self, monkeypatch):
        """The respondent-selection rule is the default."""
        monkeypatch.delenv("FORM_LEGACY_CHECKBOX", raising=False)
        assert use_legacy_checkbox() is False

    @pytest.mark.unit
    def test_legacy_checkbox_from_env(self, monkeypatch):
        """The legacy rule can be switched on from the environment."""
        monkeypatch.setenv("FORM_LEGACY_CHECKBOX", "yes")
        assert use_legacy_checkbox() is True
        assert use_legacy_checkbox(override=False) is False
