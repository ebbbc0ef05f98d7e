"""In-process concurrency primitives."""

from .keyed_lock import KeyedLock
from .rate_limiter import RateLimiter

__all__ = ["KeyedLock", "RateLimiter"]
