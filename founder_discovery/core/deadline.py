"""Per-request deadline checked before each external call."""

import asyncio
import inspect
import time
from typing import Awaitable, TypeVar

T = TypeVar("T")


class DeadlineExceeded(Exception):
    """Raised when a request runs past its deadline before or during an external call."""

    def __init__(self, stage: str):
        super().__init__(f"Request deadline exceeded during {stage}")
        self.stage = stage


class Deadline:
    def __init__(self, seconds: float, clock=time.monotonic):
        self._clock = clock
        self._expires_at = clock() + max(0.0, float(seconds))

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    async def bound(self, stage: str, awaitable: Awaitable[T]) -> T:
        """Await an external call with the remaining time as its timeout."""
        if self.expired:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise DeadlineExceeded(stage)
        try:
            return await asyncio.wait_for(awaitable, timeout=self.remaining())
        except asyncio.TimeoutError as e:
            raise DeadlineExceeded(stage) from e
