"""
Platform - simulated FaaS execution engine

Keeps the set of defined functions and one InstancePool per function.
Cold starts and executions are modelled with asyncio.sleep so that callers
observe realistic latencies without running any real compute.
"""

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from .exceptions import CapacityExceededError, FunctionNotDefinedError
from .instance_pool import InstancePool, ProvisionCallback
from .janitor import IdleJanitor
from .models import ExecutionReport, Function, FunctionConfig, FunctionInstance

logger = logging.getLogger("platform.platform")


class Platform:
    """
    Simulated platform.

    - define/get/define_if_absent never await, so each call is atomic with
      respect to other coroutines on the event loop
    - pools are created lazily on first deploy or run
    """

    def __init__(self, janitor_interval: float = 5.0):
        self._functions: Dict[str, Function] = {}
        self._pools: Dict[str, InstancePool] = {}
        self._janitor = IdleJanitor(self, interval=janitor_interval)
        self._started = False

    async def start(self) -> None:
        if self._started:
            return
        await self._janitor.start()
        self._started = True

    async def close(self) -> None:
        if self._started:
            await self._janitor.stop()
            self._started = False

        for name, pool in self._pools.items():
            drained = await pool.drain()
            if drained:
                logger.info(f"Drained {len(drained)} instances of {name}")

    def define(self, name: str, config: FunctionConfig) -> Function:
        """Register a function, replacing the config of an existing one."""
        fn = Function(name=name, config=config)
        self._functions[name] = fn

        pool = self._pools.get(name)
        if pool is not None:
            pool.max_instances = config.max_instances
            pool.acquire_timeout = config.acquire_timeout

        logger.debug(f"Defined function {name}: {config.model_dump()}")
        return fn

    def get(self, name: str) -> Optional[Function]:
        return self._functions.get(name)

    def define_if_absent(
        self, name: str, factory: Callable[[str], FunctionConfig]
    ) -> Tuple[Function, bool]:
        """
        Register a function built by factory unless the name is already known.

        Returns:
            (function, created)
        """
        fn = self._functions.get(name)
        if fn is not None:
            return fn, False
        return self.define(name, factory(name)), True

    def functions(self) -> List[str]:
        return list(self._functions)

    async def deploy(self, fn: Function) -> bool:
        """
        Pre-warm a function: provision an instance unless one already exists.

        Returns:
            True if a new instance was provisioned.
        """
        pool = self._pool_for(fn)
        created = await pool.ensure_instance(self._provisioner(fn))
        if created:
            logger.info(f"Deployed instance of {fn.name} (cold start {fn.config.cold_start:.3f}s)")
        return created

    async def run(self, name: str, runtime: Optional[float] = None) -> ExecutionReport:
        """
        Execute a function on an idle instance, cold-starting one if needed.

        Args:
            name: function name
            runtime: execution duration override in seconds; None uses the
                configured runtime

        Raises:
            FunctionNotDefinedError: name is unknown
            CapacityExceededError: no instance freed up within acquire_timeout
        """
        fn = self.get(name)
        if fn is None:
            raise FunctionNotDefinedError(name)

        pool = self._pool_for(fn)
        started_at = datetime.now(timezone.utc)
        try:
            instance, cold = await pool.acquire(self._provisioner(fn))
        except asyncio.TimeoutError:
            raise CapacityExceededError(name, pool.acquire_timeout)

        duration = fn.config.runtime if runtime is None else runtime
        try:
            await asyncio.sleep(duration)
        finally:
            await pool.release(instance)

        return ExecutionReport(
            function=name,
            instance_id=instance.id,
            cold_start=cold,
            cold_start_duration=fn.config.cold_start if cold else 0.0,
            runtime=duration,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            response=fn.config.response,
        )

    async def prune_idle_instances(self) -> Dict[str, List[FunctionInstance]]:
        """Reclaim instances idle for longer than their function's keep_warm."""
        pruned = {}
        for name, pool in list(self._pools.items()):
            fn = self._functions.get(name)
            if fn is None:
                continue
            pruned[name] = await pool.prune_idle(fn.config.keep_warm)
        return pruned

    def stats(self) -> Dict[str, dict]:
        return {name: pool.stats for name, pool in self._pools.items()}

    def _pool_for(self, fn: Function) -> InstancePool:
        pool = self._pools.get(fn.name)
        if pool is None:
            pool = InstancePool(
                function_name=fn.name,
                max_instances=fn.config.max_instances,
                acquire_timeout=fn.config.acquire_timeout,
            )
            self._pools[fn.name] = pool
            logger.info(f"Created pool for {fn.name}: max_instances={pool.max_instances}")
        return pool

    def _provisioner(self, fn: Function) -> ProvisionCallback:
        async def provision(function_name: str) -> FunctionInstance:
            await asyncio.sleep(fn.config.cold_start)
            now = time.time()
            return FunctionInstance(
                id=f"{function_name}-{uuid.uuid4().hex[:8]}",
                function_name=function_name,
                created_at=now,
                last_used_at=now,
            )

        return provision
