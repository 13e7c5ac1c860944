"""
Module: output.py
Description: Timber output for a host log-processing framework.

Wires settings, logging, headers, transport and the delivery engine
together behind the register / multi_receive / close lifecycle the host
framework drives. The host may call multi_receive from many worker
threads at once; batches may then reach the API out of order.
"""

import time
from typing import Optional, Sequence

from .config.settings import DeliverySettings
from .delivery.engine import DeliveryEngine
from .delivery.headers import build_headers
from .delivery.retry import BackoffFn, SleepFn, backoff_delay
from .transform.wire_format import InputRecord
from .transport.base import Transport
from .transport.http_transport import HttpTransport
from .utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


class TimberOutput:
    """
    Sends batches of log records to Timber.

    Example:
        >>> output = TimberOutput(DeliverySettings(api_key="123:abcd1234"))
        >>> output.register()
        >>> output.multi_receive([{"message": "hi", "@timestamp": "2017-01-01T00:00:00Z"}])
        True
        >>> output.close()
    """

    def __init__(
        self,
        settings: DeliverySettings,
        transport: Optional[Transport] = None,
        sleep: SleepFn = time.sleep,
        backoff: BackoffFn = backoff_delay,
    ):
        """
        Initialize the output.

        Args:
            settings: Validated delivery settings
            transport: Transport override; an HttpTransport is built on register()
            sleep: Blocking sleep between response-based retries
            backoff: Delay function for retryable responses
        """
        self.settings = settings
        self._transport = transport
        self._sleep = sleep
        self._backoff = backoff
        self._engine: Optional[DeliveryEngine] = None

    @classmethod
    def from_env(cls) -> "TimberOutput":
        """Create an output from TIMBER_* environment variables."""
        return cls(DeliverySettings())

    @property
    def engine(self) -> DeliveryEngine:
        if self._engine is None:
            raise RuntimeError("TimberOutput.register() must be called before delivering events")
        return self._engine

    def register(self) -> None:
        """
        Prepare headers and transport.

        Raises:
            ConfigurationError: On inconsistent transport settings
        """
        configure_logging(self.settings.log_level)

        headers = build_headers(self.settings.api_key.get_secret_value())
        if self._transport is None:
            self._transport = HttpTransport(self.settings)

        self._engine = DeliveryEngine(
            transport=self._transport,
            headers=headers,
            url=self.settings.url,
            sleep=self._sleep,
            backoff=self._backoff,
        )

        logger.info("Timber output registered", url=self.settings.url)

    def multi_receive(self, records: Sequence[InputRecord]) -> bool:
        """
        Deliver a batch of records.

        Returns:
            True if the batch was delivered, False if it was dropped
        """
        return self.engine.deliver(records)

    def close(self) -> None:
        """Release the transport. Safe to call if never registered."""
        if self._transport is not None:
            self._transport.close()

    def __enter__(self) -> "TimberOutput":
        self.register()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
