"""
Module: test_headers.py
Description: Unit tests for delivery request headers.
"""

import pytest

from timber_delivery import __version__
from timber_delivery.delivery.headers import build_headers


class TestBuildHeaders:
    """Test cases for build_headers()."""

    def test_header_values(self):
        headers = build_headers("123:abcd1234")

        assert dict(headers) == {
            "Authorization": "Basic MTIzOmFiY2QxMjM0",
            "Content-Type": "application/json",
            "User-Agent": f"Timber Python/{__version__}",
        }

    def test_uses_urlsafe_alphabet(self):
        assert build_headers("û")["Authorization"] == "Basic w7s="
        # Standard alphabet would give "Pz8+Pg=="
        assert build_headers("??>>")["Authorization"] == "Basic Pz8-Pg=="

    def test_custom_user_agent(self):
        assert build_headers("key", user_agent="Custom/2.0")["User-Agent"] == "Custom/2.0"

    def test_headers_are_read_only(self):
        headers = build_headers("key")

        with pytest.raises(TypeError):
            headers["Authorization"] = "Basic other"
