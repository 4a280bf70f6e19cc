"""
betterlog - Log delivery to Better Stack with retries and backoff.

This package provides:
- Logger: Leveled logging facade (info, warn, error, debug)
- delivery: Single-attempt and retrying log delivery
- retry: Exponential backoff with cap and jitter
- transport: Transport protocol and the httpx-based implementation

Usage:
    from betterlog import Logger, LogRecord

    async with Logger.from_env(app_version="1.4.0") as log:
        await log.info(LogRecord("Payment processed", context="billing"))

Example:
    # Explicit configuration, errors reported instead of raised
    from betterlog import Logger, LogRecord, RetryConfig

    log = Logger.from_values(
        environment="prod",
        logs_source_token="xxx",
        retry_config=RetryConfig(max_retries=5, max_delay=10.0),
        suppress_errors=True,
    )
    await log.error(LogRecord("Payment failed", context="billing"))
"""

import logging

__version__ = "0.3.0"

from .config import DEFAULT_ENDPOINT, Environment, LoggerConfig
from .delivery import bearer_headers, push_log, push_with_retry
from .errors import (
    BetterlogError,
    ConfigError,
    DeliveryError,
    HttpError,
    NetworkError,
    SerializationError,
    is_retryable,
)
from .logger import Logger
from .records import EnrichedLogRecord, LogLevel, LogRecord
from .retry import RetryConfig, RetryPolicy, compute_delay
from .transport import HttpxTransport, Transport

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Facade
    "Logger",
    # Records and configuration
    "LogRecord",
    "EnrichedLogRecord",
    "LogLevel",
    "Environment",
    "LoggerConfig",
    "DEFAULT_ENDPOINT",
    # Delivery
    "push_log",
    "push_with_retry",
    "bearer_headers",
    "RetryConfig",
    "RetryPolicy",
    "compute_delay",
    "Transport",
    "HttpxTransport",
    # Errors
    "BetterlogError",
    "ConfigError",
    "DeliveryError",
    "HttpError",
    "NetworkError",
    "SerializationError",
    "is_retryable",
]
