"""Tests for the AsyncWeb3-backed ledger client."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from bora_feed.services.transfer_feed.ledger import Web3LedgerClient
from bora_feed.services.transfer_feed.models import BlockMetadata


@pytest.fixture
def mock_web3():
    """Mock AsyncWeb3 instance."""
    web3 = MagicMock()
    web3.eth = MagicMock()
    web3.eth.get_block = AsyncMock(
        return_value={"number": 12_099, "timestamp": 1_700_012_099, "hash": b"\x01"}
    )
    web3.eth.get_logs = AsyncMock(return_value=[{"blockNumber": 200}])
    return web3


@pytest.mark.asyncio
async def test_latest_block(mock_web3):
    client = Web3LedgerClient("http://localhost:8551", web3=mock_web3)

    head = await client.get_latest_block()

    assert head == BlockMetadata(block_number=12_099, timestamp=1_700_012_099)
    mock_web3.eth.get_block.assert_awaited_once_with("latest")


@pytest.mark.asyncio
async def test_block_by_number(mock_web3):
    client = Web3LedgerClient("http://localhost:8551", web3=mock_web3)

    await client.get_block(200)

    mock_web3.eth.get_block.assert_awaited_once_with(200)


@pytest.mark.asyncio
async def test_get_logs_filter(mock_web3):
    """Filter uses the checksummed contract address and inclusive bounds."""
    client = Web3LedgerClient("http://localhost:8551", web3=mock_web3)
    topics = ["0xddf2", "0x" + "0" * 64]

    logs = await client.get_logs(
        from_block=100,
        to_block=5_099,
        address="0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed",
        topics=topics,
    )

    assert logs == [{"blockNumber": 200}]
    mock_web3.eth.get_logs.assert_awaited_once_with({
        "fromBlock": 100,
        "toBlock": 5_099,
        "address": "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
        "topics": topics,
    })
