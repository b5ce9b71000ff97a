"""
Randomized pacing between page loads.
A uniform random pause keeps request cadence irregular and the load on the source light.
"""
from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, Optional

from shared.utils.logging import get_logger

logger = get_logger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class RandomDelay:
    """Suspends the caller for a uniformly random duration within given bounds."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        sleep: Optional[SleepFn] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._sleep = sleep or asyncio.sleep

    def pick(self, min_s: float, max_s: float) -> float:
        if max_s < min_s:
            raise ValueError(f"max_s ({max_s}) must not be below min_s ({min_s})")
        return self._rng.uniform(min_s, max_s)

    async def delay_between(self, min_s: float, max_s: float) -> float:
        """Sleep for a random duration in [min_s, max_s]. Returns the duration slept."""
        seconds = self.pick(min_s, max_s)
        logger.debug("sleeping", seconds=round(seconds, 1))
        await self._sleep(seconds)
        return seconds
