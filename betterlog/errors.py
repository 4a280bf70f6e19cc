"""
Exception taxonomy for betterlog.

Delivery failures come in three kinds, and each kind carries a fixed
retryability verdict:

    HttpError           retryable when status >= 500
    NetworkError        always retryable
    SerializationError  never retryable
"""


class BetterlogError(Exception):
    """Base class for every error raised by betterlog."""


class ConfigError(BetterlogError, ValueError):
    """Configuration is missing or malformed."""


class DeliveryError(BetterlogError):
    """A log event could not be delivered to the collector."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def retryable(self) -> bool:
        return is_retryable(self)


class HttpError(DeliveryError):
    """The collector answered with a non-2xx status."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status

    def __str__(self) -> str:
        return f"HTTP {self.status}: {self.message}"


class NetworkError(DeliveryError):
    """Request-level failure: DNS, TCP, TLS, timeout or redirect loop."""

    def __str__(self) -> str:
        return f"network error: {self.message}"


class SerializationError(DeliveryError):
    """A payload could not be encoded, or a response body could not be decoded."""

    def __str__(self) -> str:
        return f"serialization failed: {self.message}"


def is_retryable(error: DeliveryError) -> bool:
    """
    Decide whether a delivery failure is transient.

    Server errors and network faults are worth another attempt; client
    errors and serialization faults will fail the same way every time.
    """
    if isinstance(error, HttpError):
        return error.status >= 500
    if isinstance(error, NetworkError):
        return True
    return False
