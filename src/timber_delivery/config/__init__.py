"""
Package: config
Description: Delivery settings and configuration errors.
"""

from .errors import ConfigurationError, InvalidHTTPConfigError
from .settings import DEFAULT_URL, DeliverySettings

__all__ = [
    "DEFAULT_URL",
    "DeliverySettings",
    "ConfigurationError",
    "InvalidHTTPConfigError",
]
