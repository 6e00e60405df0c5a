"""
Transfer feed exceptions.

ChunkFetchError and LogDecodeError are recovered inside the pipeline and
collected into ScanDiagnostics. PipelineFatalError aborts the scan.
"""

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from bora_feed.services.transfer_feed.models import ScanWindow


class TransferFeedError(Exception):
    """Base exception for transfer feed errors."""
    pass


class ChunkFetchError(TransferFeedError):
    """Raised when the log query for one block chunk fails."""

    def __init__(self, window: "ScanWindow", cause: Exception) -> None:
        self.window = window
        self.cause = cause
        super().__init__(
            f"Chunk {window.from_block}-{window.to_block} failed: {cause}"
        )


class LogDecodeError(TransferFeedError):
    """Raised when a single transfer log cannot be decoded."""

    def __init__(
        self,
        tx_hash: str | None,
        block_number: int | None,
        cause: Exception,
    ) -> None:
        self.tx_hash = tx_hash
        self.block_number = block_number
        self.cause = cause
        super().__init__(
            f"Cannot decode log {tx_hash} (block {block_number}): {cause}"
        )


class PipelineFatalError(TransferFeedError):
    """Raised when the scan cannot produce any result."""
    pass
