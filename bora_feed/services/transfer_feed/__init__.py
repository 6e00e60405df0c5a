"""
Transfer feed pipeline.

Exports the public API of the transfer_feed package.
"""

from bora_feed.services.transfer_feed.block_cache import BlockTimestampCache
from bora_feed.services.transfer_feed.decoder import TransferDecoder
from bora_feed.services.transfer_feed.exceptions import (
    ChunkFetchError,
    LogDecodeError,
    PipelineFatalError,
    TransferFeedError,
)
from bora_feed.services.transfer_feed.ledger import (
    LedgerClient,
    Web3LedgerClient,
    build_transfer_topics,
)
from bora_feed.services.transfer_feed.log_scanner import (
    ChunkedLogScanner,
    iter_chunks,
)
from bora_feed.services.transfer_feed.models import (
    BlockMetadata,
    CachedResult,
    ScanDiagnostics,
    ScanResult,
    ScanWindow,
    TransactionRecord,
)
from bora_feed.services.transfer_feed.range_estimator import RangeEstimator
from bora_feed.services.transfer_feed.result_cache import CacheLookup, ResultCache
from bora_feed.services.transfer_feed.service import TransferFeedService


__all__ = [
    "BlockMetadata",
    "BlockTimestampCache",
    "CacheLookup",
    "CachedResult",
    "ChunkFetchError",
    "ChunkedLogScanner",
    "LedgerClient",
    "LogDecodeError",
    "PipelineFatalError",
    "RangeEstimator",
    "ResultCache",
    "ScanDiagnostics",
    "ScanResult",
    "ScanWindow",
    "TransactionRecord",
    "TransferDecoder",
    "TransferFeedError",
    "TransferFeedService",
    "Web3LedgerClient",
    "build_transfer_topics",
    "iter_chunks",
]
