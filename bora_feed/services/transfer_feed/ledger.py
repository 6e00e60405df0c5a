"""
Ledger client.

The pipeline only needs three capabilities from the chain: the head block,
metadata of a block by number and event logs for a filter over a block
range. Web3LedgerClient provides them over AsyncWeb3.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from eth_utils import to_checksum_address
from loguru import logger
from web3 import AsyncHTTPProvider, AsyncWeb3

from bora_feed.config.constants import TRANSFER_TOPIC
from bora_feed.services.transfer_feed.models import BlockMetadata


class LedgerClient(Protocol):
    """Capabilities consumed by the scan pipeline."""

    async def get_latest_block(self) -> BlockMetadata:
        ...

    async def get_block(self, block_number: int) -> BlockMetadata:
        ...

    async def get_logs(
        self,
        from_block: int,
        to_block: int,
        address: str,
        topics: Sequence[str | None],
    ) -> list[Any]:
        ...


def build_transfer_topics(wallet_address: str) -> list[str]:
    """
    Build the topic filter for Transfer events sent by a wallet.

    Args:
        wallet_address: Sender wallet address (0x-prefixed)

    Returns:
        [Transfer signature, wallet left-padded to 32 bytes]
    """
    wallet_hex = wallet_address.lower().removeprefix("0x")
    return [TRANSFER_TOPIC, "0x" + wallet_hex.rjust(64, "0")]


class Web3LedgerClient:
    """
    LedgerClient backed by AsyncWeb3 over HTTP JSON-RPC.
    """

    def __init__(self, rpc_url: str, web3: AsyncWeb3 | None = None) -> None:
        """
        Initialize ledger client.

        Args:
            rpc_url: JSON-RPC endpoint
            web3: Preconfigured AsyncWeb3 instance (optional)
        """
        self.rpc_url = rpc_url
        self.web3 = web3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))

    async def get_latest_block(self) -> BlockMetadata:
        block = await self.web3.eth.get_block("latest")
        logger.debug(f"[Ledger] Head block {block['number']}")
        return BlockMetadata(
            block_number=int(block["number"]),
            timestamp=int(block["timestamp"]),
        )

    async def get_block(self, block_number: int) -> BlockMetadata:
        block = await self.web3.eth.get_block(block_number)
        return BlockMetadata(
            block_number=int(block["number"]),
            timestamp=int(block["timestamp"]),
        )

    async def get_logs(
        self,
        from_block: int,
        to_block: int,
        address: str,
        topics: Sequence[str | None],
    ) -> list[Any]:
        return list(
            await self.web3.eth.get_logs({
                "fromBlock": from_block,
                "toBlock": to_block,
                "address": to_checksum_address(address),
                "topics": list(topics),
            })
        )
