"""
Transfer feed service.

Entry point of the pipeline: serves cached transfers or runs
RangeEstimator -> ChunkedLogScanner -> TransferDecoder and stores the
result in the ResultCache.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from bora_feed.config.settings import Settings
from bora_feed.services.transfer_feed.block_cache import BlockTimestampCache
from bora_feed.services.transfer_feed.decoder import TransferDecoder
from bora_feed.services.transfer_feed.exceptions import PipelineFatalError
from bora_feed.services.transfer_feed.ledger import (
    LedgerClient,
    Web3LedgerClient,
    build_transfer_topics,
)
from bora_feed.services.transfer_feed.log_scanner import ChunkedLogScanner
from bora_feed.services.transfer_feed.models import (
    ScanDiagnostics,
    ScanResult,
    TransactionRecord,
)
from bora_feed.services.transfer_feed.range_estimator import RangeEstimator
from bora_feed.services.transfer_feed.result_cache import ResultCache
from bora_feed.utils.security import mask_address


class TransferFeedService:
    """
    Serves the transfer history of the tracked wallet.

    Features:
    - TTL-cached results
    - Chunked, throttled log scanning
    - Partial-failure tolerance with diagnostics
    """

    def __init__(
        self,
        ledger: LedgerClient,
        cache: ResultCache,
        estimator: RangeEstimator,
        scanner: ChunkedLogScanner,
        token_symbol: str,
        token_decimals: int,
        batch_size: int,
        batch_delay: float,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.ledger = ledger
        self.cache = cache
        self.estimator = estimator
        self.scanner = scanner
        self.token_symbol = token_symbol
        self.token_decimals = token_decimals
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self._sleep = sleep
        self.last_diagnostics: ScanDiagnostics | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        ledger: LedgerClient | None = None,
        cache: ResultCache | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> "TransferFeedService":
        """
        Build the service from application settings.

        Args:
            settings: Application settings
            ledger: Ledger client (defaults to Web3LedgerClient on rpc_url)
            cache: Result cache (defaults to a new one with cache_ttl)
            sleep: Coroutine used for throttle pauses
        """
        ledger = ledger or Web3LedgerClient(settings.rpc_url)
        scanner = ChunkedLogScanner(
            ledger=ledger,
            contract_address=settings.token_contract_address,
            topics=build_transfer_topics(settings.wallet_address),
            chunk_size=settings.chunk_size,
            chunk_delay=settings.chunk_delay,
            sleep=sleep,
        )
        logger.info(
            f"[Feed] Tracking {settings.token_symbol} transfers from "
            f"{mask_address(settings.wallet_address)} since "
            f"{settings.scan_start.isoformat()}"
        )
        return cls(
            ledger=ledger,
            cache=cache or ResultCache(ttl=settings.cache_ttl),
            estimator=RangeEstimator(settings.scan_start),
            scanner=scanner,
            token_symbol=settings.token_symbol,
            token_decimals=settings.token_decimals,
            batch_size=settings.batch_size,
            batch_delay=settings.batch_delay,
            sleep=sleep,
        )

    def _new_decoder(self) -> TransferDecoder:
        # Block metadata is only memoized within one scan
        return TransferDecoder(
            block_cache=BlockTimestampCache(self.ledger),
            token_symbol=self.token_symbol,
            decimals=self.token_decimals,
            batch_size=self.batch_size,
            batch_delay=self.batch_delay,
            sleep=self._sleep,
        )

    async def run_pipeline(self) -> list[TransactionRecord]:
        """
        Run a full scan, bypassing the cache.

        Returns:
            Records sorted newest first

        Raises:
            PipelineFatalError: If the head block or all chunks are unavailable
        """
        logger.info("[Feed] Starting fresh scan...")
        diagnostics = ScanDiagnostics()

        window = await self.estimator.resolve(self.ledger)
        logs = await self.scanner.scan(window, diagnostics)
        transactions = await self._new_decoder().decode(logs, diagnostics)

        self.last_diagnostics = diagnostics
        if diagnostics.is_partial:
            logger.warning(
                f"[Feed] Partial scan: {diagnostics.dropped_chunks} chunk(s), "
                f"{diagnostics.dropped_logs} log(s) dropped"
            )
        logger.success(f"[Feed] Scan complete: {len(transactions)} transactions")
        return transactions

    async def scan(self, force_refresh: bool = False) -> ScanResult:
        """
        Return the transfer history, from cache when fresh.

        Args:
            force_refresh: Run a new scan even if the cache is fresh

        Returns:
            ScanResult; success=False with an error message on fatal failure
        """
        try:
            lookup = await self.cache.fetch(self.run_pipeline, force_refresh)
        except PipelineFatalError as e:
            logger.error(f"[Feed] Scan failed: {e}")
            return ScanResult(success=False, error=str(e))
        except Exception as e:
            logger.exception(f"[Feed] Unexpected scan error: {e}")
            return ScanResult(success=False, error=str(e))

        transactions = lookup.result.data
        if lookup.cached:
            return ScanResult(
                success=True,
                cached=True,
                transactions=transactions,
                cache_age=lookup.age_seconds,
            )
        return ScanResult(
            success=True,
            cached=False,
            transactions=transactions,
            count=len(transactions),
            diagnostics=self.last_diagnostics,
        )
