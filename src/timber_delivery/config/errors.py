"""
Module: errors.py
Description: Configuration errors raised while building the HTTP transport.

These are the only errors that escape to the caller, and only at setup
time; delivery itself never raises.
"""


class ConfigurationError(ValueError):
    """Transport settings are inconsistent or incomplete."""


class InvalidHTTPConfigError(ConfigurationError):
    """Client certificate settings are only partially supplied."""
