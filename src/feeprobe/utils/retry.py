"""
Backoff for the read-only building stage.

A broadcast is never retried; a scenario that opts in may re-run its gas
price, chain id and nonce queries when the endpoint is briefly unreachable.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from feeprobe.errors import NetworkQueryError
from feeprobe.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """How many times to run a building stage and how long to wait between runs.

    ``max_attempts=1`` disables retrying. Delays double per attempt starting
    from ``base_delay_ms``.
    """

    max_attempts: int = 1
    base_delay_ms: int = 1000
    jitter: bool = True
    retryable_errors: Tuple[Type[Exception], ...] = field(default=(NetworkQueryError,))


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Seconds to wait before retry number ``attempt`` (zero-based)."""
    delay_ms = config.base_delay_ms * (2 ** attempt)
    if config.jitter:
        delay_ms = random.uniform(0, delay_ms)
    return delay_ms / 1000


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
) -> T:
    """Await ``fn()``, re-running it on ``config.retryable_errors``.

    Errors outside ``retryable_errors`` propagate at once; the last retryable
    error propagates once attempts run out.
    """
    config = config or RetryConfig()
    attempts = max(config.max_attempts, 1)

    for attempt in range(attempts):
        try:
            return await fn()
        except config.retryable_errors as e:
            if attempt == attempts - 1:
                raise
            delay = calculate_delay(attempt, config)
            _logger.info(
                "Retrying building stage",
                extra={"attempt": attempt + 1, "delay_s": round(delay, 3), "error": str(e)},
            )
            await asyncio.sleep(delay)

    raise AssertionError("unreachable")
