"""
Test suite for KeyedLock.

System role: Verification of per-key mutual exclusion
"""

import asyncio

import pytest

from assistant_hub.core.keyed_lock import KeyedLock


class TestKeyedLock:
    """Test suite for KeyedLock.hold()."""

    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self) -> None:
        locks = KeyedLock()
        order: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold("session"):
                order.append(f"{name}-start")
                await asyncio.sleep(0.01)
                order.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert order == ["a-start", "a-end", "b-start", "b-end"]

    @pytest.mark.asyncio
    async def test_different_keys_run_concurrently(self) -> None:
        locks = KeyedLock()
        inside = asyncio.Event()
        released = asyncio.Event()

        async def first() -> None:
            async with locks.hold("one"):
                inside.set()
                await released.wait()

        task = asyncio.create_task(first())
        await inside.wait()

        async with locks.hold("two"):
            assert locks.is_held("one")
            assert locks.is_held("two")

        released.set()
        await task

    @pytest.mark.asyncio
    async def test_entries_are_dropped_when_unused(self) -> None:
        locks = KeyedLock()

        async with locks.hold("session"):
            assert len(locks) == 1

        assert len(locks) == 0
        assert not locks.is_held("session")

    @pytest.mark.asyncio
    async def test_lock_is_released_on_error(self) -> None:
        locks = KeyedLock()

        with pytest.raises(RuntimeError):
            async with locks.hold("session"):
                raise RuntimeError("boom")

        assert not locks.is_held("session")
        async with locks.hold("session"):
            pass
