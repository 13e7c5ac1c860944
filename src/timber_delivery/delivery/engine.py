"""
Module: delivery/engine.py
Description: Batch delivery to the Timber ingestion API.

Transforms a batch of records into Timber wire records, POSTs them as
one JSON array, and retries transient failures within a bounded budget.
Delivery failures never raise: the outcome is a boolean plus structured
logs.
"""

import json
import math
import time
from datetime import date, datetime
from typing import Any, Mapping, Sequence

from ..config.settings import DEFAULT_URL
from ..transform.wire_format import InputRecord, transform
from ..transport.base import Transport
from ..utils.logger import get_logger
from .retry import (
    MAX_ATTEMPTS,
    BackoffFn,
    SleepFn,
    backoff_delay,
    build_retrying,
    is_success,
    log_attempts_exceeded,
)

logger = get_logger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _finite(value: Any) -> Any:
    """Replace NaN/Infinity, which JSON cannot carry, with their names as strings."""
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, dict):
        return {key: _finite(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(item) for item in value]
    return value


def serialize_batch(batch: Sequence[InputRecord]) -> bytes:
    """Transform each record and encode the batch as a strict JSON array."""
    wire_records = [_finite(transform(record)) for record in batch]
    return json.dumps(wire_records, default=_json_default, allow_nan=False).encode("utf-8")


class DeliveryEngine:
    """
    Delivers batches of log records with bounded retries.

    Holds no per-call state, so a single engine may be shared by
    threads delivering independent batches.
    """

    def __init__(
        self,
        transport: Transport,
        headers: Mapping[str, str],
        url: str = DEFAULT_URL,
        sleep: SleepFn = time.sleep,
        backoff: BackoffFn = backoff_delay,
    ):
        """
        Initialize the delivery engine.

        Args:
            transport: POST capability (see transport.base.Transport)
            headers: Immutable request headers from build_headers()
            url: Timber ingestion endpoint
            sleep: Blocking sleep after each retryable response
            backoff: Delay function for retryable responses
        """
        self.transport = transport
        self.headers = headers
        self.url = url
        self._sleep = sleep
        self._backoff = backoff

    def deliver(self, batch: Sequence[InputRecord], attempt: int = 1) -> bool:
        """
        Deliver a batch of records.

        Args:
            batch: Records to send together
            attempt: Attempt number to start from (1-based)

        Returns:
            True if the API accepted the batch, False if it was dropped

        Raises:
            ValueError: If attempt is below 1
        """
        if attempt < 1:
            raise ValueError("attempt must be 1 or greater")

        if attempt > MAX_ATTEMPTS:
            log_attempts_exceeded(attempt)
            return False

        retrying = build_retrying(first_attempt=attempt, backoff=self._backoff, sleep=self._sleep)
        current = attempt - 1

        def send(body: bytes) -> Any:
            nonlocal current
            current += 1
            return self.transport.post(self.url, body, self.headers)

        try:
            body = serialize_batch(batch)
            response = retrying(send, body)

        except Exception as e:
            current = max(current, attempt)
            logger.error(
                f"Attempt {current}, fatal exception when making request",
                attempt=current,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True
            )
            return False

        if response is None:
            # Attempts exhausted; already logged by the retry policy
            return False

        code = response.status_code

        if is_success(code):
            logger.debug(
                "Events delivered to the Timber API",
                attempt=current,
                code=code,
                count=len(batch)
            )
            return True

        logger.error(
            "Bad fatal response from the Timber API",
            attempt=current,
            code=code
        )
        return False
