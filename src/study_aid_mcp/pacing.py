"""Pause policy between sequential Gemini calls in a page batch."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class PacingPolicy(Protocol):
    """Decides how long to wait after the call at *iteration_index*."""

    def wait(self, iteration_index: int) -> float: ...


@dataclass(frozen=True)
class FixedDelay:
    """Same pause after every call."""

    seconds: float = 0.5

    def wait(self, iteration_index: int) -> float:
        return self.seconds


class NoDelay:
    """Never pause."""

    def wait(self, iteration_index: int) -> float:
        return 0.0


async def pause(policy: PacingPolicy, iteration_index: int) -> None:
    """Sleep for the duration *policy* assigns to *iteration_index*."""
    delay = policy.wait(iteration_index)
    if delay <= 0:
        return
    logger.debug("Pacing: sleeping %.2fs after call %d", delay, iteration_index)
    await asyncio.sleep(delay)
