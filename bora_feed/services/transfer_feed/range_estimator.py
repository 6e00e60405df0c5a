"""
Scan range estimation.

Maps the configured start time to a starting block assuming roughly one
block per second. The estimate can include or miss a small margin of blocks
around the start time.
"""

from datetime import datetime

from loguru import logger

from bora_feed.services.transfer_feed.exceptions import PipelineFatalError
from bora_feed.services.transfer_feed.ledger import LedgerClient
from bora_feed.services.transfer_feed.models import ScanWindow


class RangeEstimator:
    """Derives the block window to scan from a start time and the chain head."""

    def __init__(self, start_time: datetime) -> None:
        self.start_time = start_time
        self.start_timestamp = int(start_time.timestamp())

    def estimate(self, latest_block: int, latest_timestamp: int) -> ScanWindow:
        """
        Compute the scan window ending at the head block.

        Args:
            latest_block: Head block number
            latest_timestamp: Head block timestamp (unix seconds)

        Returns:
            ScanWindow from the estimated start block to latest_block
        """
        blocks_diff = latest_timestamp - self.start_timestamp
        # Start time in the future: nothing before the head to scan
        from_block = min(latest_block, max(0, latest_block - blocks_diff))
        return ScanWindow(from_block=from_block, to_block=latest_block)

    async def resolve(self, ledger: LedgerClient) -> ScanWindow:
        """
        Fetch the head block and estimate the scan window.

        Raises:
            PipelineFatalError: If the head block cannot be fetched
        """
        try:
            head = await ledger.get_latest_block()
        except Exception as e:
            raise PipelineFatalError(f"Cannot fetch latest block: {e}") from e

        window = self.estimate(head.block_number, head.timestamp)
        logger.info(
            f"[Range] Block range: {window.from_block} - {window.to_block} "
            f"({window.block_count} blocks since {self.start_time.isoformat()})"
        )
        return window
