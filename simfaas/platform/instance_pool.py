"""
InstancePool - simulated instances of a single function

Condition-based capacity control: one request per instance, at most
max_instances instances (busy + idle + provisioning).
"""

import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque, List, Set, Tuple

from .models import FunctionInstance

logger = logging.getLogger("platform.instance_pool")

ProvisionCallback = Callable[[str], Awaitable[FunctionInstance]]


class InstancePool:
    """
    Per-function instance pool.

    Waiters blocked on a full pool are woken through the condition whenever an
    instance is released, pruned or a provisioning slot is returned.
    """

    def __init__(
        self,
        function_name: str,
        max_instances: int = 1,
        acquire_timeout: float = 30.0,
    ):
        self.function_name = function_name
        self.max_instances = max_instances
        self.acquire_timeout = acquire_timeout

        self._cv = asyncio.Condition()
        self._idle: Deque[FunctionInstance] = deque()
        self._all: Set[FunctionInstance] = set()
        self._provisioning_count = 0

    async def acquire(self, provision: ProvisionCallback) -> Tuple[FunctionInstance, bool]:
        """
        Acquire an idle instance, provisioning a new one if there is room.

        Returns:
            (instance, cold) where cold is True if the instance was provisioned
            for this call.

        Raises:
            asyncio.TimeoutError: the pool stayed full for acquire_timeout
        """
        async with self._cv:
            start_time = time.monotonic()

            while True:
                if self._idle:
                    return self._idle.popleft(), False

                if self._has_room():
                    self._provisioning_count += 1
                    break

                remaining = self.acquire_timeout - (time.monotonic() - start_time)
                if remaining <= 0:
                    raise asyncio.TimeoutError(f"Pool acquire timeout for {self.function_name}")

                try:
                    await asyncio.wait_for(self._cv.wait(), timeout=remaining)
                except asyncio.TimeoutError:
                    raise asyncio.TimeoutError(f"Pool acquire timeout for {self.function_name}")

        instance = await self._provision(provision)
        return instance, True

    async def ensure_instance(self, provision: ProvisionCallback) -> bool:
        """
        Make sure at least one instance exists or is being provisioned.

        Existing idle instances get their keep-warm timer refreshed.

        Returns:
            True if a new instance was provisioned.
        """
        async with self._cv:
            if self._all or self._provisioning_count:
                now = time.time()
                for instance in self._idle:
                    instance.last_used_at = now
                return False
            self._provisioning_count += 1

        instance = await self._provision(provision)
        await self.release(instance)
        return True

    async def _provision(self, provision: ProvisionCallback) -> FunctionInstance:
        # Provisioning sleeps for the cold start, so it runs outside the lock.
        try:
            instance = await provision(self.function_name)
        except BaseException:
            async with self._cv:
                if self._provisioning_count > 0:
                    self._provisioning_count -= 1
                self._cv.notify_all()
            raise

        async with self._cv:
            self._all.add(instance)
            if self._provisioning_count > 0:
                self._provisioning_count -= 1
        return instance

    def _has_room(self) -> bool:
        return len(self._all) + self._provisioning_count < self.max_instances

    async def release(self, instance: FunctionInstance) -> None:
        """Return an instance to the pool."""
        async with self._cv:
            if instance not in self._all:
                # Drained while busy.
                return
            instance.last_used_at = time.time()
            self._idle.append(instance)
            self._cv.notify_all()

    async def prune_idle(self, keep_warm: float) -> List[FunctionInstance]:
        """
        Remove instances idle for longer than keep_warm seconds.
        """
        async with self._cv:
            now = time.time()
            pruned = []
            surviving: Deque[FunctionInstance] = deque()

            while self._idle:
                instance = self._idle.popleft()
                if now - instance.last_used_at > keep_warm:
                    self._all.discard(instance)
                    pruned.append(instance)
                else:
                    surviving.append(instance)

            self._idle = surviving

            if pruned:
                self._cv.notify_all()

            return pruned

    async def drain(self) -> List[FunctionInstance]:
        """Drain all instances on shutdown."""
        async with self._cv:
            instances = list(self._all)
            self._all.clear()
            self._idle.clear()
            self._provisioning_count = 0
            self._cv.notify_all()
            return instances

    @property
    def size(self) -> int:
        """Current total instances (busy + idle)."""
        return len(self._all)

    @property
    def stats(self) -> dict:
        """Pool statistics."""
        return {
            "function_name": self.function_name,
            "instances": len(self._all),
            "idle": len(self._idle),
            "busy": len(self._all) - len(self._idle),
            "provisioning": self._provisioning_count,
            "max_instances": self.max_instances,
        }
