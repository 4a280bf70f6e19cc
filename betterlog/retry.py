"""
Retry policy for log delivery.

Exponential backoff with a cap and optional full jitter:

    delay(attempt) = min(base_delay * 2**attempt, max_delay)

With jitter on, the actual delay is drawn uniformly from [0, delay(attempt)),
which spreads out retries from many clients hitting the same outage.

Usage:
    policy = RetryPolicy(RetryConfig(max_retries=5, base_delay=0.5))

    for attempt in range(policy.total_attempts):
        ...
        if policy.should_retry(error, attempt):
            await asyncio.sleep(policy.delay_for(attempt))
"""

import math
import random
from dataclasses import dataclass

from .errors import DeliveryError, is_retryable


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retrying a single delivery."""

    max_retries: int = 3  # Attempts allowed after the first one
    base_delay: float = 1.0  # Delay before the first retry, in seconds
    max_delay: float = 5.0  # Upper bound for any single delay
    jitter: bool = True  # Draw the delay from [0, capped delay)
    deadline: float | None = None  # Overall budget for one delivery, in seconds

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")
        if self.max_delay < 0:
            raise ValueError(f"max_delay must be >= 0, got {self.max_delay}")
        if self.deadline is not None and self.deadline <= 0:
            raise ValueError(f"deadline must be > 0, got {self.deadline}")


def compute_delay(
    attempt: int, config: RetryConfig, rng: random.Random | None = None
) -> float:
    """
    Calculate the backoff before retrying after failed attempt ``attempt``.

    Args:
        attempt: Zero-based index of the attempt that just failed
        config: Retry configuration
        rng: Random source for jitter (defaults to the module-level generator)

    Returns:
        Delay in seconds
    """
    try:
        exp_delay = config.base_delay * (2**attempt)
    except OverflowError:
        exp_delay = math.inf if config.base_delay > 0 else 0.0

    capped_delay = min(exp_delay, config.max_delay)

    if config.jitter and capped_delay > 0:
        delay = (rng or random).random() * capped_delay
        # Rounding can land on the bound when capped_delay is subnormal
        return delay if delay < capped_delay else 0.0

    return capped_delay


class RetryPolicy:
    """Decides whether and when a failed delivery is attempted again."""

    def __init__(self, config: RetryConfig | None = None, rng: random.Random | None = None):
        self.config = config or RetryConfig()
        self._rng = rng

    @property
    def total_attempts(self) -> int:
        return self.config.max_retries + 1

    def should_retry(self, error: DeliveryError, attempt: int) -> bool:
        """Whether to try again after ``error`` ended zero-based ``attempt``."""
        if not is_retryable(error):
            return False
        return attempt < self.config.max_retries

    def delay_for(self, attempt: int) -> float:
        return compute_delay(attempt, self.config, self._rng)
