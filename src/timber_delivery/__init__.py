"""
Package: timber_delivery
Description: Deliver batches of structured log events to the Timber.io
ingestion API.

This package provides:
- TimberOutput: register / multi_receive / close lifecycle for a host framework
- DeliveryEngine: bounded, jittered-backoff batch delivery
- transform: record-to-wire-format mapping for the Timber log event schema
- HttpTransport: pooled httpx transport with TLS and proxy support
"""

from .config import ConfigurationError, DeliverySettings, InvalidHTTPConfigError
from .delivery import DeliveryEngine, build_headers
from .output import TimberOutput
from .transform import transform
from .transport import HttpTransport, TransportError, TransportErrorKind
from .version import __version__

__all__ = [
    "TimberOutput",
    "DeliveryEngine",
    "DeliverySettings",
    "HttpTransport",
    "TransportError",
    "TransportErrorKind",
    "ConfigurationError",
    "InvalidHTTPConfigError",
    "build_headers",
    "transform",
    "__version__",
]
