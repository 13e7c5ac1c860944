"""
Package: transport
Description: Transport capability contract and its httpx implementation.
"""

from .base import Response, Transport, TransportError, TransportErrorKind
from .http_transport import HttpTransport, build_client_options, classify_exception, normalize_proxy

__all__ = [
    "Response",
    "Transport",
    "TransportError",
    "TransportErrorKind",
    "HttpTransport",
    "build_client_options",
    "classify_exception",
    "normalize_proxy",
]
