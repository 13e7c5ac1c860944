"""
Module: delivery/retry.py
Description: Retry policy for batch delivery.

Implements the bounded retry strategy for the Timber API: connectivity
faults are retried immediately, overload/unavailable responses are
retried after a jittered quadratic backoff, and everything else is
handed back to the engine as a final outcome.
"""

import random
import time
from typing import Any, Callable, Optional

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_none,
)

from ..transport.base import TransportError
from ..utils.logger import get_logger

logger = get_logger(__name__)

MAX_ATTEMPTS = 3
MAX_BACKOFF_SECONDS = 60
RETRYABLE_CODES = frozenset({429, 500, 502, 503, 504})

BackoffFn = Callable[[int], float]
SleepFn = Callable[[float], None]


def backoff_delay(attempt: int) -> int:
    """
    Seconds to wait after a retryable response on the given attempt.

    Half of the capped quadratic term is always waited; the other half is
    jittered, so the delay lies in [base // 2, 60].
    """
    base = min(attempt ** 2, MAX_BACKOFF_SECONDS)
    return (base // 2) + (random.randint(0, base) // 2)


def is_success(code: int) -> bool:
    return 200 <= code <= 299


def is_retryable_response(response: Any) -> bool:
    return response.status_code in RETRYABLE_CODES


def build_retrying(
    first_attempt: int = 1,
    backoff: BackoffFn = backoff_delay,
    sleep: SleepFn = time.sleep,
) -> Retrying:
    """
    Build the retry controller for one delivery call.

    Every retryable response is followed by a backoff sleep, including
    the last one before the batch is dropped. Connectivity faults never
    sleep.

    Args:
        first_attempt: Attempt number of the first request (1-based)
        backoff: Delay function for retryable responses
        sleep: Blocking sleep used after retryable responses

    Returns:
        A Retrying instance that returns the final response, re-raises
        fatal exceptions, and returns None once attempts are exhausted

    Raises:
        ValueError: If first_attempt is below 1
    """
    if first_attempt < 1:
        raise ValueError("first_attempt must be 1 or greater")

    def attempt_of(retry_state: RetryCallState) -> int:
        return first_attempt + retry_state.attempt_number - 1

    def on_retryable(retry_state: RetryCallState) -> None:
        attempt = attempt_of(retry_state)
        if retry_state.outcome.failed:
            error = retry_state.outcome.exception()
            logger.warning(
                f"Attempt {attempt}, retryable exception when making request",
                attempt=attempt,
                kind=error.kind.value,
                error=str(error),
                error_type=type(error.cause or error).__name__,
                exc_info=error
            )
            return

        logger.warning(
            "Bad retryable response from the Timber API",
            attempt=attempt,
            code=retry_state.outcome.result().status_code
        )
        sleep(backoff(attempt))

    def drop(retry_state: RetryCallState) -> Optional[Any]:
        log_attempts_exceeded(attempt_of(retry_state) + 1)
        return None

    return Retrying(
        stop=stop_after_attempt(max(MAX_ATTEMPTS - first_attempt + 1, 1)),
        # Backoff is applied in on_retryable, so tenacity never waits itself
        wait=wait_none(),
        retry=retry_if_exception_type(TransportError) | retry_if_result(is_retryable_response),
        after=on_retryable,
        retry_error_callback=drop,
        sleep=_no_sleep,
    )


def _no_sleep(seconds: float) -> None:
    return None


def log_attempts_exceeded(attempt: int) -> None:
    logger.warning("Max attempts exceeded, dropping events", attempt=attempt)
