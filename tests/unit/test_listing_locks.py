"""
Unit tests for the per-listing lock registry.
"""

from __future__ import annotations

import asyncio
import uuid

import pytest

from app.core.locks import KeyedLockRegistry, advisory_key


@pytest.mark.unit
def test_advisory_key_is_stable_signed_64_bit() -> None:
    listing_id = uuid.uuid4()
    key = advisory_key(listing_id)

    assert key == advisory_key(listing_id)
    assert -(2**63) <= key < 2**63


@pytest.mark.unit
async def test_same_key_is_serialized() -> None:
    registry = KeyedLockRegistry()
    key = uuid.uuid4()
    events: list[str] = []

    async def worker(name: str) -> None:
        async with registry.hold(key):
            events.append(f"{name}-start")
            await asyncio.sleep(0.01)
            events.append(f"{name}-end")

    await asyncio.gather(worker("a"), worker("b"))

    assert events in (
        ["a-start", "a-end", "b-start", "b-end"],
        ["b-start", "b-end", "a-start", "a-end"],
    )


@pytest.mark.unit
async def test_different_keys_run_concurrently() -> None:
    registry = KeyedLockRegistry()
    both_inside = asyncio.Event()
    inside = 0

    async def worker() -> None:
        nonlocal inside
        async with registry.hold(uuid.uuid4()):
            inside += 1
            if inside == 2:
                both_inside.set()
            await asyncio.wait_for(both_inside.wait(), timeout=1)

    await asyncio.gather(worker(), worker())
    assert both_inside.is_set()


@pytest.mark.unit
async def test_locks_are_released_after_use() -> None:
    registry = KeyedLockRegistry()
    key = uuid.uuid4()

    async with registry.hold(key):
        assert len(registry) == 1

    assert len(registry) == 0


@pytest.mark.unit
async def test_lock_released_when_body_raises() -> None:
    registry = KeyedLockRegistry()
    key = uuid.uuid4()

    with pytest.raises(RuntimeError):
        async with registry.hold(key):
            raise RuntimeError("boom")

    assert len(registry) == 0
    async with registry.hold(key):
        pass
