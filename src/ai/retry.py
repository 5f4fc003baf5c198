"""
Quota-aware retry

Wraps an async AI call so rate-limit / quota failures are retried with
exponential backoff. Any other failure propagates on the first attempt.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from google.api_core import exceptions as api_exceptions

from config.settings import AI_RETRY
from src.utils.errors import AIQuotaExceededError

logger = logging.getLogger(__name__)

T = TypeVar("T")

QUOTA_MARKERS = ("429", "RESOURCE_EXHAUSTED", "quota")


def is_quota_error(exc: BaseException) -> bool:
    """True for HTTP 429 / RESOURCE_EXHAUSTED style failures."""
    if isinstance(exc, (api_exceptions.ResourceExhausted, api_exceptions.TooManyRequests)):
        return True
    for attr in ("status", "status_code", "code"):
        value = getattr(exc, attr, None)
        if value == 429 or value == "429":
            return True
    message = str(exc)
    return any(marker in message for marker in QUOTA_MARKERS)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Backoff schedule: ``base_delay``, then multiplied by ``multiplier``
    after each retry. ``max_retries`` counts retries, not attempts.
    """
    max_retries: int = AI_RETRY["max_retries"]
    base_delay: float = AI_RETRY["base_delay"]
    multiplier: float = AI_RETRY["multiplier"]
    is_retryable: Callable[[BaseException], bool] = field(default=is_quota_error)

    def delays(self) -> list[float]:
        return [self.base_delay * self.multiplier ** i for i in range(self.max_retries)]


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await ``fn()``; on a retryable failure sleep and try again.

    Raises:
        AIQuotaExceededError: retries exhausted on quota failures
        Exception: any non-retryable failure, unchanged
    """
    policy = policy or RetryPolicy()
    delays = policy.delays()
    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as e:
            if not policy.is_retryable(e):
                raise
            if attempt >= len(delays):
                logger.error(f"Quota retries exhausted after {attempt + 1} attempts: {e}")
                raise AIQuotaExceededError(attempts=attempt + 1, last_error=e) from e
            delay = delays[attempt]
            attempt += 1
            logger.warning(
                f"Quota limit hit (retry {attempt}/{policy.max_retries}), waiting {delay:.1f}s: {e}"
            )
            await sleep(delay)
