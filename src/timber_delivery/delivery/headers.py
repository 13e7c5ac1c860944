"""
Module: delivery/headers.py
Description: Request headers for the Timber ingestion API.

Headers are computed once when the output is registered and shared,
read-only, by every delivery call.
"""

import base64
from types import MappingProxyType
from typing import Mapping

from ..version import __version__

CONTENT_TYPE = "application/json"
USER_AGENT = f"Timber Python/{__version__}"


def build_headers(api_key: str, user_agent: str = USER_AGENT) -> Mapping[str, str]:
    """
    Build the immutable header set for delivery requests.

    Args:
        api_key: Timber API key
        user_agent: Client identification

    Returns:
        Read-only mapping of header name to value
    """
    encoded_api_key = base64.urlsafe_b64encode(api_key.encode("utf-8")).decode("ascii").strip()
    return MappingProxyType({
        "Authorization": f"Basic {encoded_api_key}",
        "Content-Type": CONTENT_TYPE,
        "User-Agent": user_agent,
    })
