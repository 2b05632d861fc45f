"""Retry policy with bounded exponential backoff for API fetches."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

T = TypeVar("T")

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429}


class RetryPolicy:
    """Simple exponential backoff retry helper (1, 2, 4, 8, 8, ... seconds)."""

    max_retries: int
    max_delay: int
    sleep_fn: Callable[[float], Awaitable[None]]

    def __init__(
        self,
        max_retries: int = 3,
        max_delay: int = 8,
        sleep_fn: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self.max_retries = max_retries
        self.max_delay = max_delay
        self.sleep_fn = sleep_fn or asyncio.sleep

    def backoff_seconds(self, attempt_index: int) -> int:
        value = 1 << attempt_index
        return value if value <= self.max_delay else self.max_delay

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        retries = 0
        while True:
            try:
                return await operation()
            except Exception as exc:  # noqa: BLE001
                if not self.is_retryable(exc) or retries >= self.max_retries:
                    raise
                delay = self.backoff_seconds(retries)
                retries += 1
                logger.warning("fetch_retry attempt=%s delay_s=%s error=%s", retries, delay, exc)
                await self.sleep_fn(delay)

    def is_retryable(self, exc: BaseException) -> bool:
        if isinstance(exc, httpx.TransportError):
            return True
        status_code = getattr(exc, "status_code", None)
        if isinstance(status_code, int):
            return status_code >= 500 or status_code in _RETRYABLE_STATUS
        return False
