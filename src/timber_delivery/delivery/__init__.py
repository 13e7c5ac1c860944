"""
Package: delivery
Description: Batch delivery to the Timber ingestion API.

Provides the delivery engine, its bounded retry/backoff policy, and the
request headers shared by every delivery call.
"""

from .engine import DeliveryEngine, serialize_batch
from .headers import CONTENT_TYPE, USER_AGENT, build_headers
from .retry import MAX_ATTEMPTS, RETRYABLE_CODES, backoff_delay, build_retrying

__all__ = [
    "DeliveryEngine",
    "serialize_batch",
    "build_headers",
    "CONTENT_TYPE",
    "USER_AGENT",
    "MAX_ATTEMPTS",
    "RETRYABLE_CODES",
    "backoff_delay",
    "build_retrying",
]
