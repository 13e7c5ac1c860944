"""
Module: http_transport.py
Description: httpx-backed transport for the Timber ingestion API.

Builds httpx client options from DeliverySettings (timeouts, pool size,
TLS material, proxy), failing fast on inconsistent settings, and maps
httpx connectivity errors onto TransportErrorKind so the delivery engine
can decide what to retry.
"""

import socket
import ssl
import threading
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

import httpx

from ..config.errors import ConfigurationError, InvalidHTTPConfigError
from ..config.settings import DeliverySettings
from ..utils.logger import get_logger
from .base import TransportError, TransportErrorKind

logger = get_logger(__name__)

_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "no address associated with hostname",
)


def classify_exception(exc: BaseException) -> Optional[TransportErrorKind]:
    """
    Map an httpx exception onto a retryable fault kind.

    Args:
        exc: Exception raised by httpx during a request

    Returns:
        The fault kind, or None when the error is not a connectivity fault
    """
    if isinstance(exc, httpx.TimeoutException):
        return TransportErrorKind.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        if _is_dns_failure(exc):
            return TransportErrorKind.DNS_FAILURE
        return TransportErrorKind.CONNECTION_RESET
    if isinstance(exc, httpx.NetworkError):
        return TransportErrorKind.CONNECTION_RESET
    if isinstance(exc, httpx.ProtocolError):
        return TransportErrorKind.PROTOCOL_ERROR
    return None


def _is_dns_failure(exc: BaseException) -> bool:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, socket.gaierror):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__

    text = str(exc).lower()
    return any(marker in text for marker in _DNS_FAILURE_MARKERS)


def normalize_proxy(proxy: Union[str, Mapping[str, Any], None]) -> Optional[str]:
    """
    Normalize the supported proxy forms into a single proxy URL.

    Supported forms:
        "http://proxy.org:1234"
        {"host": "proxy.org", "port": 80, "scheme": "http", "user": "u", "password": "p"}
        {"url": "http://proxy.org:1234", "user": "u", "password": "p"}

    Raises:
        ConfigurationError: If a mapping has neither "url" nor "host"
    """
    if proxy is None:
        return None
    if isinstance(proxy, str):
        return proxy
    if not isinstance(proxy, Mapping):
        raise ConfigurationError(f"Unsupported proxy setting: {proxy!r}")

    options = {str(k): v for k, v in proxy.items()}
    if options.get("url"):
        scheme, sep, rest = str(options["url"]).partition("://")
        if not sep:
            raise ConfigurationError(f"Proxy url must include a scheme: {options['url']!r}")
    elif options.get("host"):
        scheme = str(options.get("scheme") or "http")
        rest = str(options["host"])
        if options.get("port"):
            rest = f"{rest}:{options['port']}"
    else:
        raise ConfigurationError("Proxy settings must include either 'url' or 'host'")

    user = options.get("user")
    if user:
        userinfo = quote(str(user), safe="")
        password = options.get("password")
        if password:
            userinfo = f"{userinfo}:{quote(str(password), safe='')}"
        rest = f"{userinfo}@{rest}"

    return f"{scheme}://{rest}"


def build_ssl_context(settings: DeliverySettings) -> Optional[ssl.SSLContext]:
    """
    Build an SSL context from the TLS settings.

    Returns:
        A configured context, or None when no TLS material is configured

    Raises:
        ConfigurationError: If a store is declared without a password or
            the TLS files cannot be loaded
        InvalidHTTPConfigError: If only one of client_cert/client_key is set
    """
    if settings.truststore and settings.truststore_password is None:
        raise ConfigurationError(
            "Truststore declared without a password! This is not valid, "
            "please set the 'truststore_password' option"
        )
    if settings.keystore and settings.keystore_password is None:
        raise ConfigurationError(
            "Keystore declared without a password! This is not valid, "
            "please set the 'keystore_password' option"
        )
    if bool(settings.client_cert) != bool(settings.client_key):
        raise InvalidHTTPConfigError(
            "You must specify both client_cert and client_key for an HTTP client, or neither!"
        )

    if not any((settings.cacert, settings.truststore, settings.keystore, settings.client_cert)):
        return None

    try:
        context = ssl.create_default_context(
            cafile=str(settings.cacert) if settings.cacert else None
        )
        if settings.truststore:
            context.load_verify_locations(cafile=str(settings.truststore))
        if settings.keystore:
            context.load_cert_chain(
                certfile=str(settings.keystore),
                password=settings.keystore_password.get_secret_value(),
            )
        if settings.client_cert:
            context.load_cert_chain(
                certfile=str(settings.client_cert),
                keyfile=str(settings.client_key),
            )
    except (ssl.SSLError, OSError) as e:
        raise ConfigurationError(f"Unable to load TLS material: {e}") from e

    return context


def build_client_options(settings: DeliverySettings) -> Dict[str, Any]:
    """
    Build keyword arguments for httpx.Client from delivery settings.

    Raises:
        ConfigurationError: On inconsistent TLS or proxy settings
    """
    options: Dict[str, Any] = {
        "timeout": httpx.Timeout(
            settings.request_timeout,
            connect=settings.connect_timeout,
            read=settings.socket_timeout,
            write=settings.socket_timeout,
        ),
        "limits": httpx.Limits(
            max_connections=settings.pool_max,
            max_keepalive_connections=settings.pool_max,
        ),
        "follow_redirects": True,
    }

    proxy = normalize_proxy(settings.proxy)
    if proxy:
        options["proxy"] = proxy

    context = build_ssl_context(settings)
    if context is not None:
        options["verify"] = context

    return options


class HttpTransport:
    """
    Pooled HTTP transport for the Timber API.

    Settings are validated on construction; the underlying httpx client
    is opened lazily on the first request and shared by all threads.
    """

    def __init__(self, settings: DeliverySettings):
        """
        Initialize the transport.

        Args:
            settings: Validated delivery settings

        Raises:
            ConfigurationError: On inconsistent TLS or proxy settings
        """
        self._options = build_client_options(settings)
        self._client: Optional[httpx.Client] = None
        self._lock = threading.Lock()

        logger.info(
            "HTTP transport initialized",
            pool_max=settings.pool_max,
            request_timeout=settings.request_timeout,
            proxy_enabled="proxy" in self._options,
            custom_tls="verify" in self._options
        )

    @property
    def is_open(self) -> bool:
        """Whether the underlying client has been opened."""
        return self._client is not None

    def _get_client(self) -> httpx.Client:
        with self._lock:
            if self._client is None:
                self._client = httpx.Client(**self._options)
            return self._client

    def post(self, url: str, body: bytes, headers: Mapping[str, str]) -> httpx.Response:
        """
        POST a request body.

        Raises:
            TransportError: On timeouts, connection, DNS or protocol faults
            httpx.HTTPError: On any other request failure
        """
        try:
            return self._get_client().post(url, content=body, headers=dict(headers))
        except httpx.HTTPError as e:
            kind = classify_exception(e)
            if kind is None:
                raise
            raise TransportError(kind, str(e), cause=e) from e

    def close(self) -> None:
        """Close the connection pool. Safe to call repeatedly or before first use."""
        with self._lock:
            client, self._client = self._client, None

        if client is not None:
            client.close()
            logger.info("HTTP transport closed")
