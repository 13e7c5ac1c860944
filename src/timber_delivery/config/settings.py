"""
Module: settings.py
Description: Delivery configuration using pydantic-settings.

Configures the Timber API credentials and the HTTP transport surface
(timeouts, connection pool, TLS material, proxy) from TIMBER_* environment
variables with validation and defaults. Supports .env files for local
development.
"""

from typing import Any, Dict, Literal, Optional, Union

from pydantic import Field, FilePath, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_URL = "https://logs.timber.io/frames"


class DeliverySettings(BaseSettings):
    """Delivery settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TIMBER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Timber API settings
    api_key: SecretStr = Field(
        ...,
        description="Timber API key, obtained by creating an app at https://app.timber.io"
    )
    url: str = Field(default=DEFAULT_URL, description="Timber ingestion endpoint")
    log_level: str = Field(default="INFO", description="Logging level")

    # Timeouts (seconds)
    request_timeout: float = Field(
        default=60,
        gt=0,
        description="Timeout for the entire request"
    )
    socket_timeout: float = Field(
        default=10,
        gt=0,
        description="Timeout to wait for data on the socket"
    )
    connect_timeout: float = Field(
        default=10,
        gt=0,
        description="Timeout to wait for a connection to be established"
    )

    # Connection pool
    pool_max: int = Field(
        default=50,
        ge=1,
        description="Max number of concurrent connections"
    )

    # TLS material
    cacert: Optional[FilePath] = Field(
        default=None,
        description="Custom X.509 CA bundle (.pem)"
    )
    client_cert: Optional[FilePath] = Field(
        default=None,
        description="Client certificate (.pem); requires client_key"
    )
    client_key: Optional[FilePath] = Field(
        default=None,
        description="Private key for client_cert (.pem)"
    )
    keystore: Optional[FilePath] = Field(
        default=None,
        description="PEM file holding the client certificate chain and encrypted key"
    )
    keystore_password: Optional[SecretStr] = Field(
        default=None,
        description="Password protecting the keystore key"
    )
    keystore_type: Literal["PEM"] = Field(default="PEM", description="Keystore format")
    truststore: Optional[FilePath] = Field(
        default=None,
        description="PEM bundle of trusted certificates"
    )
    truststore_password: Optional[SecretStr] = Field(
        default=None,
        description="Password declared for the truststore"
    )
    truststore_type: Literal["PEM"] = Field(default="PEM", description="Truststore format")

    # Proxy: "http://proxy.org:1234",
    # {"host": ..., "port": ..., "scheme": ..., "user": ..., "password": ...} or
    # {"url": ..., "user": ..., "password": ...}
    proxy: Optional[Union[str, Dict[str, Any]]] = Field(
        default=None,
        description="HTTP proxy for outbound requests"
    )

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the ingestion URL is HTTP(S)."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("url must be a valid HTTP/HTTPS URL")
        return v

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v: SecretStr) -> SecretStr:
        """Validate the API key is not blank."""
        if not v.get_secret_value().strip():
            raise ValueError("api_key must be a non-empty string")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()
