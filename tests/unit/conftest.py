"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Controllable wall clock
- Settings with a scan window matching the mock ledger head
- TransferFeedService wired to the mock ledger
"""

from datetime import UTC, datetime

import pytest

from bora_feed.config.settings import Settings
from bora_feed.services.transfer_feed.result_cache import ResultCache
from bora_feed.services.transfer_feed.service import TransferFeedService


class FakeClock:
    """Wall clock advanced manually by tests."""

    def __init__(self, now: float = 1_800_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """
    Controllable clock.

    Returns:
        FakeClock: call to read, advance() to move forward
    """
    return FakeClock()


@pytest.fixture
def feed_settings():
    """
    Settings whose start time maps to block 100 on the mock ledger.

    The mock head is block 12099 at 1_700_012_099, so a start of
    1_700_000_100 gives a window of 100 - 12099.
    """
    return Settings(
        _env_file=None,
        scan_start=datetime.fromtimestamp(1_700_000_100, tz=UTC),
        chunk_size=5000,
        batch_size=10,
        chunk_delay=0.1,
        batch_delay=0.2,
        cache_ttl=300,
    )


@pytest.fixture
def feed_service(feed_settings, mock_ledger, no_sleep, clock):
    """
    TransferFeedService backed by the mock ledger and a fake clock.

    Returns:
        TransferFeedService
    """
    return TransferFeedService.from_settings(
        feed_settings,
        ledger=mock_ledger,
        cache=ResultCache(ttl=feed_settings.cache_ttl, clock=clock),
        sleep=no_sleep,
    )
