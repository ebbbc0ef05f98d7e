"""
Rate Limiter.

Paces calls to a quota-limited API: one call at a time, at least
60 / requests_per_minute seconds between dispatches, strict FIFO.
"""
import asyncio
from collections import deque
import logging
import time
from typing import Any, Awaitable, Callable, Deque, Optional, Tuple, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class RateLimiter:
    """
    FIFO call gate with a fixed minimum interval between dispatches.

    execute() enqueues the call and returns once it has been serviced,
    with the wrapped call's result or exception. Failures are not
    retried. A single worker task drains the queue and is started
    lazily on the running event loop.

    Usage:
        limiter = RateLimiter(requests_per_minute=50)
        release = await limiter.execute(lambda: client.get_release(249504))
    """

    def __init__(
        self,
        requests_per_minute: int = 50,
        *,
        name: str = "rate-limiter",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if requests_per_minute <= 0:
            raise ValueError(f"requests_per_minute must be positive: {requests_per_minute}")

        self.name = name
        self.requests_per_minute = requests_per_minute
        self.interval = 60.0 / requests_per_minute
        self._clock = clock
        self._sleep = sleep
        self._queue: Deque[Tuple[Callable[[], Awaitable[Any]], asyncio.Future]] = deque()
        self._worker: Optional[asyncio.Task] = None
        self._worker_loop: Optional[asyncio.AbstractEventLoop] = None
        self._last_dispatch: Optional[float] = None

    @property
    def queue_length(self) -> int:
        """Calls waiting to be dispatched."""
        return len(self._queue)

    async def execute(self, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Schedule fn and wait for its turn.

        Args:
            fn: Zero-argument callable returning an awaitable

        Returns:
            Whatever fn's awaitable returns

        Raises:
            Whatever fn raises; asyncio.CancelledError if the call was
            cleared from the queue before dispatch
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()
        self._queue.append((fn, future))
        self._ensure_worker(loop)
        return await future

    def clear(self) -> int:
        """Drop every queued call; their callers see CancelledError."""
        dropped = 0
        while self._queue:
            _, future = self._queue.popleft()
            if not future.done():
                future.cancel()
                dropped += 1
        if dropped:
            logger.warning(f"{self.name}: cleared {dropped} queued call(s)")
        return dropped

    def _ensure_worker(self, loop: asyncio.AbstractEventLoop) -> None:
        worker_alive = (
            self._worker is not None
            and not self._worker.done()
            and self._worker_loop is loop
        )
        if not worker_alive:
            self._worker_loop = loop
            self._worker = loop.create_task(self._drain())

    async def _wait_turn(self) -> None:
        if self._last_dispatch is None:
            return
        wait = self.interval - (self._clock() - self._last_dispatch)
        if wait > 0:
            logger.debug(f"{self.name}: waiting {wait:.3f}s ({len(self._queue)} queued)")
            await self._sleep(wait)

    async def _drain(self) -> None:
        while self._queue:
            fn, future = self._queue.popleft()
            if future.done():
                # caller gave up before its turn
                continue

            try:
                await self._wait_turn()
                if future.done():
                    continue
                self._last_dispatch = self._clock()
                result = await fn()
            except asyncio.CancelledError:
                if not future.done():
                    future.cancel()
                worker = asyncio.current_task()
                if worker is not None and worker.cancelling():
                    raise
                # fn cancelled itself; only its caller sees it
                logger.warning(f"{self.name}: queued call was cancelled by the callee")
            except Exception as exc:
                if not future.done():
                    future.set_exception(exc)
            else:
                if not future.done():
                    future.set_result(result)
