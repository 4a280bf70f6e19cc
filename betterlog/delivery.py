"""
Log delivery: one logical "send a log" operation, retried per RetryConfig.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Any

from .config import LoggerConfig
from .errors import DeliveryError, NetworkError
from .records import EnrichedLogRecord
from .retry import RetryConfig, RetryPolicy
from .transport import Transport

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


def bearer_headers(token: str) -> dict[str, str]:
    """Headers authenticating a request with a Better Stack source token."""
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }


async def push_log(
    transport: Transport, config: LoggerConfig, record: EnrichedLogRecord
) -> Any | None:
    """
    Push a log to the collector once.

    Args:
        transport: Transport used for the request
        config: Logger configuration (endpoint and token)
        record: The log to be pushed

    Returns:
        Decoded response body, or None if the collector sent no body.

    Raises:
        DeliveryError: The attempt failed
    """
    return await transport.post_json(
        config.endpoint,
        record.to_payload(),
        bearer_headers(config.logs_source_token),
    )


async def _retry_loop(
    transport: Transport,
    config: LoggerConfig,
    record: EnrichedLogRecord,
    policy: RetryPolicy,
    sleep: Sleep,
) -> Any | None:
    attempt = 0
    while True:
        logger.debug(
            f"Delivering {record.level.label} log (attempt {attempt + 1}/{policy.total_attempts})"
        )
        try:
            return await push_log(transport, config, record)
        except DeliveryError as e:
            if not policy.should_retry(e, attempt):
                if e.retryable:
                    logger.error(
                        f"Giving up on log delivery after {attempt + 1} attempts: {e}"
                    )
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                f"Log delivery attempt {attempt + 1}/{policy.total_attempts} failed: {e}; "
                f"retrying in {delay:.2f}s"
            )
            await sleep(delay)
            attempt += 1


async def push_with_retry(
    transport: Transport,
    config: LoggerConfig,
    record: EnrichedLogRecord,
    retry_config: RetryConfig | None = None,
    *,
    sleep: Sleep = asyncio.sleep,
    rng: random.Random | None = None,
) -> Any | None:
    """
    Push a log, retrying transient failures with exponential backoff.

    Success returns immediately. A non-retryable failure, or any failure on
    the last allowed attempt, is raised as-is, so the caller always sees the
    most recent error.

    Args:
        transport: Transport used for each attempt
        config: Logger configuration (endpoint and token)
        record: The log to be pushed
        retry_config: Retry settings (defaults to RetryConfig())
        sleep: Coroutine used for backoff waits
        rng: Random source for jitter

    Returns:
        Decoded response body of the successful attempt, or None.

    Raises:
        DeliveryError: Non-retryable failure, exhausted retries, or (as
            NetworkError) the deadline expired
    """
    policy = RetryPolicy(retry_config, rng=rng)
    deadline = policy.config.deadline

    if deadline is None:
        return await _retry_loop(transport, config, record, policy, sleep)

    try:
        async with asyncio.timeout(deadline):
            return await _retry_loop(transport, config, record, policy, sleep)
    except TimeoutError as e:
        raise NetworkError(f"log delivery exceeded deadline of {deadline}s") from e
