"""
Transfer feed data models.

Plain dataclasses passed between the pipeline stages and rendered into the
JSON response.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from bora_feed.services.transfer_feed.exceptions import (
    ChunkFetchError,
    LogDecodeError,
)


@dataclass(frozen=True)
class ScanWindow:
    """Inclusive block range to scan."""

    from_block: int
    to_block: int

    def __post_init__(self) -> None:
        if self.from_block < 0:
            raise ValueError(f"from_block must be >= 0, got {self.from_block}")
        if self.from_block > self.to_block:
            raise ValueError(
                f"from_block ({self.from_block}) is after "
                f"to_block ({self.to_block})"
            )

    @property
    def block_count(self) -> int:
        return self.to_block - self.from_block + 1


@dataclass(frozen=True)
class BlockMetadata:
    """Block number and its unix timestamp in seconds."""

    block_number: int
    timestamp: int


@dataclass(frozen=True)
class TransactionRecord:
    """Decoded token transfer."""

    timestamp: int  # unix ms
    to: str
    amount: Decimal
    token: str
    tx_hash: str
    block_number: int

    def to_dict(self) -> dict[str, Any]:
        """Render the wire representation."""
        return {
            "timestamp": self.timestamp,
            "to": self.to,
            "amount": float(self.amount),
            "token": self.token,
            "txHash": self.tx_hash,
            "blockNumber": self.block_number,
        }


@dataclass(frozen=True)
class CachedResult:
    """Result set of one successful scan and when it was captured (ms)."""

    data: tuple[TransactionRecord, ...]
    captured_at: int


@dataclass
class ScanDiagnostics:
    """Failures recovered during one scan."""

    chunks_total: int = 0
    logs_total: int = 0
    failed_chunks: list[ChunkFetchError] = field(default_factory=list)
    failed_logs: list[LogDecodeError] = field(default_factory=list)

    @property
    def dropped_chunks(self) -> int:
        return len(self.failed_chunks)

    @property
    def dropped_logs(self) -> int:
        return len(self.failed_logs)

    @property
    def is_partial(self) -> bool:
        return bool(self.failed_chunks or self.failed_logs)


@dataclass
class ScanResult:
    """Outcome of TransferFeedService.scan()."""

    success: bool
    cached: bool = False
    transactions: tuple[TransactionRecord, ...] = ()
    cache_age: int | None = None
    count: int | None = None
    error: str | None = None
    diagnostics: ScanDiagnostics | None = None

    def to_dict(self, expose_diagnostics: bool = False) -> dict[str, Any]:
        """
        Render the JSON response body.

        Args:
            expose_diagnostics: Include dropped chunk/log counts for fresh scans

        Returns:
            Response dict
        """
        if not self.success:
            return {"success": False, "error": self.error or "Unknown error"}

        body: dict[str, Any] = {"success": True, "cached": self.cached}
        if self.cached:
            body["cacheAge"] = self.cache_age
        else:
            body["count"] = self.count
            if expose_diagnostics and self.diagnostics is not None:
                body["diagnostics"] = {
                    "droppedChunks": self.diagnostics.dropped_chunks,
                    "droppedLogs": self.diagnostics.dropped_logs,
                }
        body["transactions"] = [tx.to_dict() for tx in self.transactions]
        return body
