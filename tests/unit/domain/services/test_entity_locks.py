"""Unit tests for the per-entity lock registry."""

import asyncio

import pytest

from tenantaccess.domain.services import EntityLockRegistry


@pytest.mark.asyncio
async def test_same_entity_is_serialized():
    locks = EntityLockRegistry()
    order = []

    async def worker(name: str) -> None:
        async with locks.hold("account", "acme", "a1"):
            order.append(f"{name}-in")
            await asyncio.sleep(0.01)
            order.append(f"{name}-out")

    await asyncio.gather(worker("one"), worker("two"))

    assert order == ["one-in", "one-out", "two-in", "two-out"]


@pytest.mark.asyncio
async def test_distinct_entities_do_not_block_each_other():
    locks = EntityLockRegistry()
    inside = asyncio.Event()

    async def holder() -> None:
        async with locks.hold("account", "acme", "a1"):
            await asyncio.wait_for(inside.wait(), timeout=1)

    async def other() -> None:
        async with locks.hold("account", "acme", "a2"):
            inside.set()

    await asyncio.gather(holder(), other())


@pytest.mark.asyncio
async def test_keys_include_company_and_kind():
    locks = EntityLockRegistry()
    async with locks.hold("account", "acme", 1):
        assert locks.is_locked("account", "acme", "1")
        assert not locks.is_locked("account", "globex", 1)
        assert not locks.is_locked("role", "acme", 1)


@pytest.mark.asyncio
async def test_entries_are_released():
    """The registry forgets a lock once nobody holds or waits for it."""
    locks = EntityLockRegistry()
    async with locks.hold("role", "acme", 3):
        assert len(locks) == 1
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_entry_released_when_block_raises():
    locks = EntityLockRegistry()
    with pytest.raises(RuntimeError):
        async with locks.hold("role", "acme", 3):
            raise RuntimeError("fail")
    assert len(locks) == 0
    assert not locks.is_locked("role", "acme", 3)
