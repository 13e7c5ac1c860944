"""
Module: base.py
Description: Transport capability contract used by the delivery engine.

The engine never talks to an HTTP library directly. It POSTs through any
object satisfying Transport and classifies failures by TransportErrorKind,
a closed set of connectivity faults that are always worth retrying.
Anything a transport raises that is not a TransportError is fatal.
"""

from enum import Enum
from typing import Mapping, Optional, Protocol


class TransportErrorKind(Enum):
    """Connectivity faults a transport reports as TransportError."""

    TIMEOUT = "timeout"
    CONNECTION_RESET = "connection_reset"
    DNS_FAILURE = "dns_failure"
    PROTOCOL_ERROR = "protocol_error"


class TransportError(Exception):
    """
    Connectivity fault raised by a transport during a request.

    Attributes:
        kind: Classified fault kind
        cause: Underlying library exception, if any
    """

    def __init__(self, kind: TransportErrorKind, message: str = "", cause: Optional[BaseException] = None):
        super().__init__(message or kind.value)
        self.kind = kind
        self.cause = cause


class Response(Protocol):
    """Transport response; only the status code matters to delivery."""

    @property
    def status_code(self) -> int:
        ...


class Transport(Protocol):
    """HTTP POST capability with an explicit shutdown."""

    def post(self, url: str, body: bytes, headers: Mapping[str, str]) -> Response:
        ...

    def close(self) -> None:
        ...
