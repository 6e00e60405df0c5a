"""
Per-scan block metadata cache.
"""

import asyncio

from loguru import logger

from bora_feed.services.transfer_feed.ledger import LedgerClient
from bora_feed.services.transfer_feed.models import BlockMetadata


class BlockTimestampCache:
    """
    Memoizes block metadata lookups for the duration of one scan.

    Concurrent lookups of the same block share a single in-flight fetch, so
    at most one request is issued per distinct block. Failed fetches are not
    cached.
    """

    def __init__(self, ledger: LedgerClient) -> None:
        self.ledger = ledger
        self._blocks: dict[int, asyncio.Task[BlockMetadata]] = {}
        self.fetch_count = 0

    def __len__(self) -> int:
        return len(self._blocks)

    async def get(self, block_number: int) -> BlockMetadata:
        task = self._blocks.get(block_number)
        if task is None:
            task = asyncio.ensure_future(self._fetch(block_number))
            self._blocks[block_number] = task

        try:
            return await asyncio.shield(task)
        except Exception:
            if self._blocks.get(block_number) is task:
                del self._blocks[block_number]
            raise

    async def _fetch(self, block_number: int) -> BlockMetadata:
        self.fetch_count += 1
        logger.debug(f"[Blocks] Fetching block {block_number}")
        return await self.ledger.get_block(block_number)
