"""
feeprobe utilities.

Structured logging helpers and building-stage retry with backoff.
"""

from feeprobe.utils.logging import (
    get_logger,
    configure_logging,
    set_level,
)
from feeprobe.utils.retry import RetryConfig, calculate_delay, retry_async

__all__ = [
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    # Retry
    "RetryConfig",
    "calculate_delay",
    "retry_async",
]
