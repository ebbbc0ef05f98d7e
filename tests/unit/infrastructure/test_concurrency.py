"""Unit tests for RateLimiter and KeyedLock."""
import asyncio

import pytest

from core.infrastructure.concurrency import KeyedLock, RateLimiter


class FakeClock:
    """Monotonic clock that only advances when the limiter sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(round(seconds, 6))
        self.now += seconds


async def _yield(times: int = 5) -> None:
    for _ in range(times):
        await asyncio.sleep(0)


# =============================================================================
# RATE LIMITER
# =============================================================================

def test_rate_limiter_rejects_non_positive_rate():
    with pytest.raises(ValueError):
        RateLimiter(0)


@pytest.mark.asyncio
async def test_calls_are_fifo_and_spaced_by_interval():
    clock = FakeClock()
    limiter = RateLimiter(60, clock=clock, sleep=clock.sleep)
    dispatched = []

    def call(name):
        async def run():
            dispatched.append((name, clock.now))
            return name
        return run

    results = await asyncio.gather(*(limiter.execute(call(n)) for n in ("a", "b", "c")))

    assert results == ["a", "b", "c"]
    assert dispatched == [("a", 0.0), ("b", 1.0), ("c", 2.0)]
    assert clock.sleeps == [1.0, 1.0]


@pytest.mark.asyncio
async def test_no_wait_when_interval_already_elapsed():
    clock = FakeClock()
    limiter = RateLimiter(60, clock=clock, sleep=clock.sleep)

    async def ok():
        return "ok"

    await limiter.execute(ok)
    clock.now += 5.0
    await limiter.execute(ok)

    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_failure_reaches_its_caller_and_queue_continues():
    clock = FakeClock()
    limiter = RateLimiter(60, clock=clock, sleep=clock.sleep)

    async def boom():
        raise ValueError("upstream 500")

    async def ok():
        return "ok"

    results = await asyncio.gather(limiter.execute(boom), limiter.execute(ok), return_exceptions=True)

    assert isinstance(results[0], ValueError)
    assert results[1] == "ok"


@pytest.mark.asyncio
async def test_call_that_cancels_itself_does_not_stall_the_queue():
    clock = FakeClock()
    limiter = RateLimiter(60, clock=clock, sleep=clock.sleep)

    async def gives_up():
        raise asyncio.CancelledError()

    async def ok():
        return "ok"

    cancelled = asyncio.create_task(limiter.execute(gives_up))
    later = [asyncio.create_task(limiter.execute(ok)) for _ in range(2)]

    assert await asyncio.wait_for(asyncio.gather(*later), timeout=1.0) == ["ok", "ok"]
    with pytest.raises(asyncio.CancelledError):
        await cancelled
    assert limiter.queue_length == 0


@pytest.mark.asyncio
async def test_clear_cancels_queued_calls_only():
    clock = FakeClock()
    limiter = RateLimiter(60, clock=clock, sleep=clock.sleep)
    gate = asyncio.Event()

    async def slow():
        await gate.wait()
        return "first"

    async def never():
        return "never"

    first = asyncio.create_task(limiter.execute(slow))
    await _yield()
    queued = [asyncio.create_task(limiter.execute(never)) for _ in range(2)]
    await _yield()

    assert limiter.queue_length == 2
    assert limiter.clear() == 2

    gate.set()
    assert await first == "first"
    for task in queued:
        with pytest.raises(asyncio.CancelledError):
            await task


# =============================================================================
# KEYED LOCK
# =============================================================================

@pytest.mark.asyncio
async def test_same_key_is_serialized():
    locks = KeyedLock()
    events = []

    async def worker(name):
        async with locks.hold("ORD-1"):
            events.append(f"{name}:start")
            await _yield()
            events.append(f"{name}:end")

    await asyncio.gather(worker("a"), worker("b"))

    assert events == ["a:start", "a:end", "b:start", "b:end"]
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_different_keys_run_concurrently():
    locks = KeyedLock()
    events = []

    async def worker(key):
        async with locks.hold(key):
            events.append(f"{key}:start")
            await _yield()
            events.append(f"{key}:end")

    await asyncio.gather(worker("ORD-1"), worker("ORD-2"))

    assert events[:2] == ["ORD-1:start", "ORD-2:start"]


@pytest.mark.asyncio
async def test_lock_is_released_when_body_raises():
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        async with locks.hold("ORD-1"):
            assert "ORD-1" in locks
            raise RuntimeError("write failed")

    assert "ORD-1" not in locks
