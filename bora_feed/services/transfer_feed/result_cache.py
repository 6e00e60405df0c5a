"""
Result cache.

Holds the result of the last successful scan for a fixed TTL. Entries are
replaced wholesale; a failed refresh leaves the previous entry in place.
Refreshes are serialized: a caller that waited behind a running refresh is
served its result instead of starting another scan.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from bora_feed.config.constants import DEFAULT_CACHE_TTL
from bora_feed.services.transfer_feed.models import (
    CachedResult,
    TransactionRecord,
)


@dataclass(frozen=True)
class CacheLookup:
    """Cache entry returned to the caller and whether it was a hit."""

    result: CachedResult
    cached: bool
    age_seconds: int = 0


class ResultCache:
    """In-process TTL cache around the scan pipeline."""

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize result cache.

        Args:
            ttl: Entry lifetime in seconds
            clock: Wall clock returning unix seconds
        """
        self.ttl = ttl
        self._clock = clock
        self._entry: CachedResult | None = None
        self._lock = asyncio.Lock()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _lookup_fresh(self) -> CacheLookup | None:
        if self._entry is None:
            return None
        elapsed = (self._now_ms() - self._entry.captured_at) / 1000
        if elapsed >= self.ttl:
            return None
        return CacheLookup(
            result=self._entry,
            cached=True,
            age_seconds=round(elapsed),
        )

    def peek(self) -> CachedResult | None:
        """Current entry, fresh or not."""
        return self._entry

    def clear(self) -> None:
        self._entry = None

    async def fetch(
        self,
        loader: Callable[[], Awaitable[Sequence[TransactionRecord]]],
        force_refresh: bool = False,
    ) -> CacheLookup:
        """
        Return the cached result or run loader to refresh it.

        Args:
            loader: Coroutine function running the full scan
            force_refresh: Skip the freshness check

        Returns:
            CacheLookup with cached=True on a hit

        Raises:
            Exception: Whatever loader raises; the cache is left untouched
        """
        if not force_refresh:
            hit = self._lookup_fresh()
            if hit is not None:
                logger.info(f"[Cache] Returning cached data ({hit.age_seconds}s old)")
                return hit

        async with self._lock:
            if not force_refresh:
                # Another caller may have refreshed while we waited
                hit = self._lookup_fresh()
                if hit is not None:
                    logger.info(
                        f"[Cache] Returning data refreshed by concurrent scan "
                        f"({hit.age_seconds}s old)"
                    )
                    return hit

            started_at = self._now_ms()
            records = await loader()
            self._entry = CachedResult(data=tuple(records), captured_at=started_at)

            logger.info(f"[Cache] Stored {len(self._entry.data)} transactions")
            return CacheLookup(result=self._entry, cached=False)
