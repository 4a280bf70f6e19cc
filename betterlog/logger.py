"""
Logger facade.

Builds an enriched record per call and decides where it goes:

- Local environment: never sent over the network.
- verbose: Info/Warn are echoed to stdout, Error to stderr.
- Debug: always echoed to stdout and never sent, whatever the environment.

Delivery failures either propagate to the caller (default) or, with
``suppress_errors=True``, are reported on stdout and swallowed so that
logging can never crash the host application.
"""

import logging
import sys
from typing import Any

from .config import DEFAULT_ENDPOINT, LoggerConfig
from .delivery import push_with_retry
from .errors import DeliveryError
from .records import LogLevel, LogRecord
from .retry import RetryConfig
from .transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class Logger:
    """
    Leveled logging to Better Stack.

    Safe to share between concurrent tasks: configuration is frozen and no
    state is kept between calls.

    Example:
        async with Logger.from_env(app_version="1.4.0") as log:
            await log.info(LogRecord("user signed in", context="auth"))
    """

    def __init__(
        self,
        config: LoggerConfig,
        transport: Transport | None = None,
        retry_config: RetryConfig | None = None,
        suppress_errors: bool = False,
    ):
        """
        Initialize the Logger.

        Args:
            config: Environment, token, app version and verbosity
            transport: Transport for deliveries (defaults to an owned HttpxTransport)
            retry_config: Retry settings (defaults to RetryConfig())
            suppress_errors: Report delivery failures on stdout instead of raising
        """
        self._config = config
        self._retry_config = retry_config or RetryConfig()
        self._owns_transport = transport is None
        self._transport: Transport = transport if transport is not None else HttpxTransport()
        self.suppress_errors = suppress_errors

    @classmethod
    def from_env(
        cls,
        app_version: str | None = None,
        verbose: bool = True,
        **kwargs,
    ) -> "Logger":
        """
        Create a Logger configured from ENVIRONMENT and LOGS_SOURCE_TOKEN.

        Extra keyword arguments are passed to the constructor.
        """
        return cls(LoggerConfig.from_env(app_version=app_version, verbose=verbose), **kwargs)

    @classmethod
    def from_values(
        cls,
        environment,
        logs_source_token: str,
        app_version: str | None = None,
        verbose: bool = True,
        endpoint: str = DEFAULT_ENDPOINT,
        **kwargs,
    ) -> "Logger":
        """
        Create a Logger from explicit configuration values.

        Extra keyword arguments are passed to the constructor.
        """
        config = LoggerConfig.from_values(
            environment=environment,
            logs_source_token=logs_source_token,
            app_version=app_version,
            verbose=verbose,
            endpoint=endpoint,
        )
        return cls(config, **kwargs)

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def retry_config(self) -> RetryConfig:
        return self._retry_config

    async def _log(self, record: LogRecord, level: LogLevel) -> Any | None:
        enriched = record.to_enriched(self._config, level)
        response = None

        if not self._config.is_local:
            try:
                response = await push_with_retry(
                    self._transport, self._config, enriched, self._retry_config
                )
            except DeliveryError as e:
                if not self.suppress_errors:
                    raise
                # Logging must not crash the app
                logger.error(f"Dropped {level.label} log after delivery failure: {e}")
                print(f"!!! Error sending log: {e}")
                return None

        if self._config.verbose:
            stream = sys.stderr if level is LogLevel.ERROR else sys.stdout
            print(enriched, file=stream)

        return response

    async def info(self, record: LogRecord) -> Any | None:
        """Send an Info log. Returns the collector's response body, if any."""
        return await self._log(record, LogLevel.INFO)

    async def warn(self, record: LogRecord) -> Any | None:
        """Send a Warn log."""
        return await self._log(record, LogLevel.WARN)

    async def error(self, record: LogRecord) -> Any | None:
        """Send an Error log; the console echo goes to stderr."""
        return await self._log(record, LogLevel.ERROR)

    async def debug(self, record: LogRecord) -> None:
        """Print a Debug log to stdout. Debug logs are never sent."""
        print(record.to_enriched(self._config, LogLevel.DEBUG))

    async def log(self, level: LogLevel, record: LogRecord) -> Any | None:
        """Dispatch to the method for ``level``."""
        if level is LogLevel.DEBUG:
            return await self.debug(record)
        return await self._log(record, level)

    async def aclose(self):
        """Release the transport if this Logger created it."""
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "Logger":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
