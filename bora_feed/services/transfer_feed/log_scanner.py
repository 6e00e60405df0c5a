"""
Chunked event log scanning.

Providers cap the block range of a single eth_getLogs call and rate-limit
bursts, so the window is fetched in fixed-size chunks, one request at a
time, with a pause after each request.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterator, Sequence
from typing import Any

from loguru import logger

from bora_feed.config.constants import DEFAULT_CHUNK_DELAY, DEFAULT_CHUNK_SIZE
from bora_feed.services.transfer_feed.exceptions import (
    ChunkFetchError,
    PipelineFatalError,
)
from bora_feed.services.transfer_feed.ledger import LedgerClient
from bora_feed.services.transfer_feed.models import ScanDiagnostics, ScanWindow
from bora_feed.utils.security import mask_address


def iter_chunks(window: ScanWindow, chunk_size: int) -> Iterator[ScanWindow]:
    """
    Split a window into contiguous inclusive chunks.

    Args:
        window: Window to split
        chunk_size: Maximum blocks per chunk

    Yields:
        Chunk windows in ascending order; the last one may be shorter
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")

    current_from = window.from_block
    while current_from <= window.to_block:
        current_to = min(current_from + chunk_size - 1, window.to_block)
        yield ScanWindow(from_block=current_from, to_block=current_to)
        current_from = current_to + 1


class ChunkedLogScanner:
    """
    Collects raw Transfer logs for a contract/topic filter over a window.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        contract_address: str,
        topics: Sequence[str | None],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_delay: float = DEFAULT_CHUNK_DELAY,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """
        Initialize log scanner.

        Args:
            ledger: Ledger client used for eth_getLogs
            contract_address: Token contract emitting the events
            topics: Topic filter (event signature, indexed values)
            chunk_size: Blocks per request
            chunk_delay: Pause after every request in seconds
            sleep: Coroutine used for the pause
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.ledger = ledger
        self.contract_address = contract_address
        self.topics = list(topics)
        self.chunk_size = chunk_size
        self.chunk_delay = chunk_delay
        self._sleep = sleep

    async def scan(
        self,
        window: ScanWindow,
        diagnostics: ScanDiagnostics | None = None,
    ) -> list[Any]:
        """
        Fetch logs for every chunk of the window.

        Failed chunks are logged, recorded in diagnostics and skipped.

        Args:
            window: Block window to scan
            diagnostics: Accumulator for recovered failures

        Returns:
            Logs of all successful chunks, in chunk order

        Raises:
            PipelineFatalError: If every chunk failed
        """
        if diagnostics is None:
            diagnostics = ScanDiagnostics()

        logger.info(
            f"[Scan] Scanning {mask_address(self.contract_address)} "
            f"blocks {window.from_block} - {window.to_block} "
            f"in chunks of {self.chunk_size}"
        )

        all_logs: list[Any] = []
        chunks_ok = 0

        for chunk in iter_chunks(window, self.chunk_size):
            diagnostics.chunks_total += 1
            try:
                logs = await self.ledger.get_logs(
                    from_block=chunk.from_block,
                    to_block=chunk.to_block,
                    address=self.contract_address,
                    topics=self.topics,
                )
            except Exception as e:
                error = ChunkFetchError(chunk, e)
                diagnostics.failed_chunks.append(error)
                logger.warning(f"[Scan] {error}")
            else:
                chunks_ok += 1
                all_logs.extend(logs)
                logger.debug(
                    f"[Scan] Chunk {chunk.from_block}-{chunk.to_block}: "
                    f"{len(logs)} logs (total: {len(all_logs)})"
                )

            await self._sleep(self.chunk_delay)

        if chunks_ok == 0 and diagnostics.chunks_total > 0:
            raise PipelineFatalError(
                f"All {diagnostics.chunks_total} chunk requests failed; "
                f"last error: {diagnostics.failed_chunks[-1].cause}"
            )

        logger.info(
            f"[Scan] Found {len(all_logs)} logs in "
            f"{chunks_ok}/{diagnostics.chunks_total} chunks"
        )
        return all_logs
