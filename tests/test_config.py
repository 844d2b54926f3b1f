"""Tests for Config and the configuration errors."""

import pytest

from axitrace.config import DEFAULT_BASE_URL, Config
from axitrace.exceptions import ConfigurationError


class TestConfig:
    def test_defaults(self):
        config = Config("sk_live_abc")
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout == 30
        assert config.verify_ssl is True
        assert config.debug is False
        assert config.is_test_mode is False

    def test_test_mode(self):
        assert Config("sk_test_abc").is_test_mode is True

    def test_key_is_stripped(self):
        assert Config("  sk_test_abc \n").secret_key == "sk_test_abc"

    @pytest.mark.parametrize("key", ["", "   "])
    def test_missing_key(self, key):
        with pytest.raises(ConfigurationError, match="Secret key is required"):
            Config(key)

    def test_invalid_key_prefix(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Config("pk_live_abcdefgh")
        assert exc_info.value.context == {"provided_prefix": "pk_live_..."}
        assert "pk_live_abcdefgh" not in str(exc_info.value)

    def test_key_needs_suffix(self):
        with pytest.raises(ConfigurationError):
            Config("sk_live_")

    @pytest.mark.parametrize("url", ["ftp://x.com", "not a url", "https://"])
    def test_invalid_base_url(self, url):
        with pytest.raises(ConfigurationError, match="Invalid base URL"):
            Config("sk_test_abc", base_url=url)

    def test_trailing_slash_stripped(self):
        assert Config("sk_test_abc", base_url="http://localhost:8080/").base_url == (
            "http://localhost:8080"
        )

    @pytest.mark.parametrize("timeout", [0, -1, 1.5, True, "30"])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ConfigurationError, match="Invalid timeout"):
            Config("sk_test_abc", timeout=timeout)

    def test_user_agent(self):
        assert Config("sk_test_abc").user_agent.startswith("axitrace-python/0.1.0 ")

    def test_error_status(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Config("")
        assert exc_info.value.status_code == 400


class TestConfigFromEnv:
    def test_reads_environment(self):
        config = Config.from_env(
            {
                "AXITRACE_SECRET_KEY": "sk_test_env",
                "AXITRACE_BASE_URL": "https://staging.example.com",
                "AXITRACE_TIMEOUT": "5",
                "AXITRACE_VERIFY_SSL": "false",
                "AXITRACE_DEBUG": "yes",
            }
        )
        assert config.secret_key == "sk_test_env"
        assert config.base_url == "https://staging.example.com"
        assert config.timeout == 5
        assert config.verify_ssl is False
        assert config.debug is True

    def test_empty_values_ignored(self):
        config = Config.from_env(
            {"AXITRACE_SECRET_KEY": "sk_test_env", "AXITRACE_BASE_URL": ""}
        )
        assert config.base_url == DEFAULT_BASE_URL

    def test_overrides_win(self):
        config = Config.from_env(
            {"AXITRACE_SECRET_KEY": "sk_test_env", "AXITRACE_TIMEOUT": "5"},
            timeout=10,
            secret_key="sk_live_override",
        )
        assert config.timeout == 10
        assert config.secret_key == "sk_live_override"

    def test_missing_key(self):
        with pytest.raises(ConfigurationError, match="Secret key is required"):
            Config.from_env({})

    def test_bad_timeout(self):
        with pytest.raises(ConfigurationError, match="Invalid timeout"):
            Config.from_env(
                {"AXITRACE_SECRET_KEY": "sk_test_env", "AXITRACE_TIMEOUT": "soon"}
            )

    def test_process_environment(self, monkeypatch):
        monkeypatch.setenv("AXITRACE_SECRET_KEY", "sk_test_process")
        monkeypatch.delenv("AXITRACE_BASE_URL", raising=False)
        assert Config.from_env().secret_key == "sk_test_process"
