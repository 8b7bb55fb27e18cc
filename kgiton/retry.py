"""
Retry mechanism for gateway requests.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

from kgiton.config import GatewayConfig
from kgiton.errors import KGiTONError
from kgiton.logging import get_logger

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(self,
                 max_attempts: int = 3,
                 base_delay: float = 1.0,
                 exponential_base: float = 2.0,
                 max_delay: Optional[float] = None):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.exponential_base = exponential_base
        self.max_delay = max_delay

    @classmethod
    def from_gateway_config(cls, config: GatewayConfig) -> "RetryConfig":
        max_delay = None
        if config.max_retry_delay_ms is not None:
            max_delay = config.max_retry_delay_ms / 1000.0
        return cls(
            max_attempts=config.retry_attempts,
            base_delay=config.retry_delay_ms / 1000.0,
            max_delay=max_delay,
        )


def is_retryable(error: BaseException) -> bool:
    """Client errors (4xx other than 429) are final; everything else may be retried."""
    if isinstance(error, KGiTONError):
        status = error.status_code
        if 400 <= status < 500 and status != 429:
            return False
    return True


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Delay in seconds after the 0-indexed ``attempt`` failed."""
    delay = config.base_delay * (config.exponential_base ** attempt)
    if config.max_delay is not None:
        delay = min(delay, config.max_delay)
    return max(0.0, delay)


async def execute_with_retry(operation: Callable[[], Awaitable[T]],
                             config: RetryConfig,
                             *,
                             sleep: SleepFunc = asyncio.sleep,
                             name: str = "request",
                             log_attempts: bool = True) -> T:
    """Run ``operation`` under the retry policy.

    The last error is re-raised unchanged once attempts are exhausted, and a
    non-retryable error is re-raised on the attempt that produced it. With
    ``log_attempts`` off the policy is silent.
    """
    logger = get_logger("kgiton.retry")

    for attempt in range(config.max_attempts):
        try:
            result = await operation()

            if attempt > 0 and log_attempts:
                logger.info("Retry succeeded", attempt=attempt + 1, operation=name)

            return result

        except KGiTONError as e:
            if not is_retryable(e):
                raise

            if attempt == config.max_attempts - 1:
                if config.max_attempts > 1 and log_attempts:
                    logger.error(
                        "All retry attempts exhausted",
                        attempt=attempt + 1,
                        max_attempts=config.max_attempts,
                        operation=name,
                        error=str(e)
                    )
                raise

            delay = calculate_delay(attempt, config)

            if log_attempts:
                logger.warning(
                    "Retry attempt failed, waiting before next attempt",
                    attempt=attempt + 1,
                    max_attempts=config.max_attempts,
                    delay=delay,
                    operation=name,
                    error=str(e)
                )

            await sleep(delay)

    # max_attempts >= 1 guarantees the loop either returns or raises
    raise AssertionError("unreachable")
