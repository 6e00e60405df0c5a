"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Keep tests away from real endpoints and local .env overrides
os.environ.setdefault("RPC_URL", "http://localhost:8551")
os.environ.setdefault("WALLET_ADDRESS", "0x3156f02e943cefb0247283b7f89b4ebf91133cff")
os.environ.setdefault("TOKEN_CONTRACT_ADDRESS", "0x02cbe46fb8a1f579254a9b485788f2d86cad51aa")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from decimal import Decimal  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from loguru import logger  # noqa: E402

from bora_feed.config.constants import TRANSFER_TOPIC  # noqa: E402
from bora_feed.services.transfer_feed.models import BlockMetadata  # noqa: E402


WALLET = "0x3156f02e943cefb0247283b7f89b4ebf91133cff"
TOKEN = "0x02cbe46fb8a1f579254a9b485788f2d86cad51aa"
RECIPIENT = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"


def pad_topic(address: str) -> str:
    """Left-pad an address to a 32-byte topic."""
    return "0x" + address.lower().removeprefix("0x").rjust(64, "0")


def build_log(
    block_number: int,
    tx_hash: str | None = None,
    amount: Decimal = Decimal("1"),
    to: str = RECIPIENT,
    sender: str = WALLET,
) -> dict:
    """Build a raw Transfer log as returned by eth_getLogs."""
    value = int(amount * Decimal(10) ** 18)
    return {
        "address": TOKEN,
        "blockNumber": block_number,
        "transactionHash": tx_hash or "0x" + f"{block_number:064x}",
        "data": f"0x{value:064x}",
        "topics": [TRANSFER_TOPIC, pad_topic(sender), pad_topic(to)],
    }


@pytest.fixture
def make_log():
    """Factory for raw Transfer logs."""
    return build_log


@pytest.fixture
def no_sleep():
    """Throttle sleep that returns immediately and records delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def mock_ledger():
    """
    Mock ledger client.

    Block timestamps are block_number + 1_700_000_000 unless overridden via
    ledger.block_timestamps.
    """
    ledger = AsyncMock()
    ledger.block_timestamps = {}

    async def get_block(block_number: int) -> BlockMetadata:
        timestamp = ledger.block_timestamps.get(
            block_number, 1_700_000_000 + block_number
        )
        return BlockMetadata(block_number=block_number, timestamp=timestamp)

    ledger.get_block = AsyncMock(side_effect=get_block)
    ledger.get_latest_block = AsyncMock(
        return_value=BlockMetadata(block_number=12099, timestamp=1_700_012_099)
    )
    ledger.get_logs = AsyncMock(return_value=[])
    return ledger


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages: list[str] = []
    sink_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
    )
    yield messages
    logger.remove(sink_id)
