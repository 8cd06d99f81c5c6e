"""
IdleJanitor - periodic reclamation of idle simulated instances
"""

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .platform import Platform

logger = logging.getLogger("platform.janitor")


class IdleJanitor:
    """
    Reclaims instances whose idle time exceeds their function's keep_warm.
    """

    def __init__(self, platform: "Platform", interval: float = 5.0):
        self.platform = platform
        self.interval = interval
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        """Start the reclamation loop."""
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Idle janitor started (interval: {self.interval}s)")

    async def stop(self) -> None:
        """Stop the reclamation loop."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("Idle janitor stopped")

    async def _loop(self) -> None:
        while True:
            try:
                await asyncio.sleep(self.interval)
                await self.sweep()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Idle sweep failed: {e}")

    async def sweep(self) -> int:
        """Run one reclamation pass and return the number of instances removed."""
        pruned = await self.platform.prune_idle_instances()
        total = 0
        for fname, instances in pruned.items():
            if instances:
                logger.info(f"Reclaimed {len(instances)} idle instances of {fname}")
                total += len(instances)
        return total
