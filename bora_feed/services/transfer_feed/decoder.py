"""
Transfer log decoding.

Turns raw ERC-20 Transfer logs into TransactionRecord objects. Logs are
decoded in fixed-size batches: the logs of one batch run concurrently
(each may trigger a block metadata fetch), batches run one after another
with a pause in between.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from decimal import Decimal
from typing import Any

from eth_utils import to_checksum_address
from loguru import logger

from bora_feed.config.constants import (
    DEFAULT_BATCH_DELAY,
    DEFAULT_BATCH_SIZE,
    DEFAULT_TOKEN_DECIMALS,
    DEFAULT_TOKEN_SYMBOL,
)
from bora_feed.services.transfer_feed.block_cache import BlockTimestampCache
from bora_feed.services.transfer_feed.exceptions import LogDecodeError
from bora_feed.services.transfer_feed.models import (
    ScanDiagnostics,
    TransactionRecord,
)


def hex_value(value: Any) -> str:
    """Render bytes/HexBytes or a hex string as a 0x-prefixed hex string."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    text = str(value)
    return text if text.startswith("0x") else "0x" + text


def topic_to_address(topic: Any) -> str:
    """Checksummed address held in the last 20 bytes of a 32-byte topic."""
    topic_hex = hex_value(topic)
    if len(topic_hex) < 42:
        raise ValueError(f"topic too short for an address: {topic_hex}")
    return to_checksum_address("0x" + topic_hex[-40:])


def data_to_uint(data: Any) -> int:
    """Decode a uint256 log data field."""
    if isinstance(data, (bytes, bytearray)):
        if not data:
            raise ValueError("empty log data")
        return int.from_bytes(data, "big")
    h = str(data).removeprefix("0x")
    if not h:
        raise ValueError("empty log data")
    return int(h, 16)


class TransferDecoder:
    """
    Converts raw Transfer logs into sorted transaction records.
    """

    def __init__(
        self,
        block_cache: BlockTimestampCache,
        token_symbol: str = DEFAULT_TOKEN_SYMBOL,
        decimals: int = DEFAULT_TOKEN_DECIMALS,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """
        Initialize decoder.

        Args:
            block_cache: Block metadata cache of the current scan
            token_symbol: Symbol attached to every record
            decimals: Token decimals used to scale raw values
            batch_size: Logs decoded concurrently per batch
            batch_delay: Pause after every batch in seconds
            sleep: Coroutine used for the pause
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.block_cache = block_cache
        self.token_symbol = token_symbol
        self.scale = Decimal(10) ** decimals
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self._sleep = sleep

    async def decode_log(self, log: Any) -> TransactionRecord:
        """
        Decode one Transfer log.

        Args:
            log: Raw log (blockNumber, transactionHash, data, topics)

        Returns:
            TransactionRecord

        Raises:
            LogDecodeError: If any field is missing or malformed, or the
                block metadata cannot be fetched
        """
        tx_hash = None
        block_number = None
        try:
            tx_hash = hex_value(log["transactionHash"])
            block_number = int(log["blockNumber"])

            amount = Decimal(data_to_uint(log["data"])) / self.scale
            to = topic_to_address(log["topics"][2])
            block = await self.block_cache.get(block_number)
        except Exception as e:
            raise LogDecodeError(tx_hash, block_number, e) from e

        return TransactionRecord(
            timestamp=block.timestamp * 1000,
            to=to,
            amount=amount,
            token=self.token_symbol,
            tx_hash=tx_hash,
            block_number=block_number,
        )

    async def _decode_or_none(
        self,
        log: Any,
        diagnostics: ScanDiagnostics,
    ) -> TransactionRecord | None:
        try:
            return await self.decode_log(log)
        except LogDecodeError as e:
            diagnostics.failed_logs.append(e)
            logger.warning(f"[Decode] {e}")
            return None

    async def decode(
        self,
        logs: Sequence[Any],
        diagnostics: ScanDiagnostics | None = None,
    ) -> list[TransactionRecord]:
        """
        Decode logs in throttled batches.

        Args:
            logs: Raw logs from the scanner
            diagnostics: Accumulator for dropped logs

        Returns:
            Records sorted by timestamp, newest first
        """
        if diagnostics is None:
            diagnostics = ScanDiagnostics()
        diagnostics.logs_total += len(logs)

        transactions: list[TransactionRecord] = []

        for start in range(0, len(logs), self.batch_size):
            batch = logs[start:start + self.batch_size]
            results = await asyncio.gather(
                *(self._decode_or_none(log, diagnostics) for log in batch)
            )
            transactions.extend(tx for tx in results if tx is not None)

            await self._sleep(self.batch_delay)

        transactions.sort(key=lambda tx: tx.timestamp, reverse=True)

        logger.info(
            f"[Decode] Decoded {len(transactions)}/{len(logs)} transfers "
            f"({self.block_cache.fetch_count} block lookups)"
        )
        return transactions
