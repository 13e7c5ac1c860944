"""
Module: test_settings.py
Description: Unit tests for DeliverySettings loading and validation.
"""

import pytest
from pydantic import ValidationError

from timber_delivery.config.settings import DEFAULT_URL, DeliverySettings


@pytest.fixture
def clean_env(monkeypatch):
    """Remove TIMBER_* variables that could leak in from the environment."""
    for name in ("API_KEY", "URL", "POOL_MAX", "LOG_LEVEL", "PROXY", "REQUEST_TIMEOUT"):
        monkeypatch.delenv(f"TIMBER_{name}", raising=False)
    return monkeypatch


class TestDeliverySettings:
    """Test cases for DeliverySettings."""

    def test_defaults(self, clean_env):
        settings = DeliverySettings(api_key="123:abcd1234", _env_file=None)

        assert settings.url == DEFAULT_URL == "https://logs.timber.io/frames"
        assert settings.request_timeout == 60
        assert settings.socket_timeout == 10
        assert settings.connect_timeout == 10
        assert settings.pool_max == 50
        assert settings.keystore_type == "PEM"
        assert settings.truststore_type == "PEM"
        assert settings.cacert is None
        assert settings.proxy is None
        assert settings.log_level == "INFO"

    def test_api_key_is_secret(self, clean_env):
        settings = DeliverySettings(api_key="123:abcd1234", _env_file=None)

        assert "123:abcd1234" not in repr(settings)
        assert settings.api_key.get_secret_value() == "123:abcd1234"

    def test_api_key_required(self, clean_env):
        with pytest.raises(ValidationError):
            DeliverySettings(_env_file=None)

    def test_blank_api_key_rejected(self, clean_env):
        with pytest.raises(ValidationError):
            DeliverySettings(api_key="   ", _env_file=None)

    def test_from_environment(self, clean_env):
        clean_env.setenv("TIMBER_API_KEY", "env-key")
        clean_env.setenv("TIMBER_POOL_MAX", "8")
        clean_env.setenv("TIMBER_LOG_LEVEL", "debug")
        clean_env.setenv("TIMBER_PROXY", '{"host": "proxy.org", "port": 3128}')

        settings = DeliverySettings(_env_file=None)

        assert settings.api_key.get_secret_value() == "env-key"
        assert settings.pool_max == 8
        assert settings.log_level == "DEBUG"
        assert settings.proxy == {"host": "proxy.org", "port": 3128}

    def test_invalid_log_level(self, clean_env):
        with pytest.raises(ValidationError):
            DeliverySettings(api_key="k", log_level="VERBOSE", _env_file=None)

    def test_invalid_url(self, clean_env):
        with pytest.raises(ValidationError):
            DeliverySettings(api_key="k", url="logs.timber.io/frames", _env_file=None)

    @pytest.mark.parametrize("field", ["request_timeout", "socket_timeout", "connect_timeout", "pool_max"])
    def test_non_positive_values_rejected(self, clean_env, field):
        with pytest.raises(ValidationError):
            DeliverySettings(api_key="k", _env_file=None, **{field: 0})

    def test_missing_tls_file_rejected(self, clean_env, tmp_path):
        with pytest.raises(ValidationError):
            DeliverySettings(api_key="k", cacert=tmp_path / "missing.pem", _env_file=None)

    def test_unsupported_store_type_rejected(self, clean_env):
        with pytest.raises(ValidationError):
            DeliverySettings(api_key="k", keystore_type="JKS", _env_file=None)
