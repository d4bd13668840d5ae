"""Exponential backoff for calls to the text-generation service."""
from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from .errors import LlmGatewayError, classify_failure, is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base_delay_s: float, max_delay_s: float) -> float:
    """Delay before retrying after ``attempt`` (1-based) failed."""
    return min(base_delay_s * (2 ** (attempt - 1)), max_delay_s)


def with_retry(
    operation: Callable[[], T],
    *,
    operation_name: str = "LLM operation",
    max_attempts: int = 3,
    base_delay_s: float = 1.0,
    max_delay_s: float = 10.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation`` until it succeeds, fails permanently or runs out of attempts.

    Every final failure surfaces as ``LlmGatewayError`` chained to the
    original exception, keeping its failure kind and status code.
    """

    last_error: BaseException | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except Exception as exc:  # noqa: BLE001
            last_error = exc
            retryable = is_retryable(exc)
            logger.error("%s failed (attempt %d/%d): %s", operation_name, attempt, max_attempts, exc)
            if attempt >= max_attempts or not retryable:
                raise LlmGatewayError(
                    f"{operation_name} failed after {attempt} attempt(s): {exc}",
                    kind=classify_failure(exc),
                    status_code=getattr(exc, "status_code", None),
                    retryable=retryable,
                ) from exc
            delay = backoff_delay(attempt, base_delay_s, max_delay_s)
            logger.info("Retrying %s in %.2fs", operation_name, delay)
            sleep(delay)
    raise LlmGatewayError(f"{operation_name} failed after {max_attempts} attempts") from last_error


__all__ = ["backoff_delay", "with_retry"]
