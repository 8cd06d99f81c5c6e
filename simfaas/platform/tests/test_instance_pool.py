import asyncio
import time

import pytest

from simfaas.platform.instance_pool import InstancePool
from simfaas.platform.models import FunctionInstance


def make_provisioner(delay: float = 0.0):
    counter = {"n": 0}

    async def provision(function_name: str) -> FunctionInstance:
        await asyncio.sleep(delay)
        counter["n"] += 1
        now = time.time()
        return FunctionInstance(
            id=f"{function_name}-{counter['n']}",
            function_name=function_name,
            created_at=now,
            last_used_at=now,
        )

    return provision, counter


@pytest.mark.asyncio
async def test_acquire_provisions_then_reuses_idle_instance():
    pool = InstancePool("fn", max_instances=2)
    provision, counter = make_provisioner()

    instance, cold = await pool.acquire(provision)
    assert cold is True
    await pool.release(instance)

    again, cold = await pool.acquire(provision)
    assert cold is False
    assert again == instance
    assert counter["n"] == 1


@pytest.mark.asyncio
async def test_acquire_times_out_when_pool_is_full():
    pool = InstancePool("fn", max_instances=1, acquire_timeout=0.05)
    provision, _ = make_provisioner()

    await pool.acquire(provision)

    with pytest.raises(asyncio.TimeoutError):
        await pool.acquire(provision)


@pytest.mark.asyncio
async def test_waiter_is_woken_by_release():
    pool = InstancePool("fn", max_instances=1, acquire_timeout=1.0)
    provision, counter = make_provisioner()

    first, _ = await pool.acquire(provision)
    waiter = asyncio.create_task(pool.acquire(provision))
    await asyncio.sleep(0.01)
    assert not waiter.done()

    await pool.release(first)
    second, cold = await asyncio.wait_for(waiter, timeout=1.0)

    assert second == first
    assert cold is False
    assert counter["n"] == 1


@pytest.mark.asyncio
async def test_failed_provision_returns_the_slot():
    pool = InstancePool("fn", max_instances=1, acquire_timeout=0.05)

    async def broken(function_name):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await pool.acquire(broken)

    provision, _ = make_provisioner()
    instance, cold = await pool.acquire(provision)
    assert cold is True
    assert pool.stats["provisioning"] == 0


@pytest.mark.asyncio
async def test_ensure_instance_provisions_once():
    pool = InstancePool("fn", max_instances=5)
    provision, counter = make_provisioner(delay=0.02)

    results = await asyncio.gather(
        pool.ensure_instance(provision),
        pool.ensure_instance(provision),
        pool.ensure_instance(provision),
    )

    assert results.count(True) == 1
    assert counter["n"] == 1
    assert pool.size == 1
    assert pool.stats["idle"] == 1


@pytest.mark.asyncio
async def test_prune_idle_removes_only_expired_instances():
    pool = InstancePool("fn", max_instances=10)
    provision, _ = make_provisioner()

    a, _ = await pool.acquire(provision)
    b, _ = await pool.acquire(provision)
    await pool.release(a)
    await pool.release(b)
    a.last_used_at = time.time() - 100
    b.last_used_at = time.time() - 10

    pruned = await pool.prune_idle(keep_warm=50.0)

    assert pruned == [a]
    assert pool.size == 1


@pytest.mark.asyncio
async def test_release_after_drain_is_ignored():
    pool = InstancePool("fn", max_instances=1)
    provision, _ = make_provisioner()

    instance, _ = await pool.acquire(provision)
    drained = await pool.drain()
    await pool.release(instance)

    assert drained == [instance]
    assert pool.size == 0
    assert pool.stats["idle"] == 0
