"""
Application constants.

Protocol constants and deployment defaults for the transfer feed.
"""

# ========================================================================
# LEDGER CONSTANTS
# ========================================================================

# keccak256("Transfer(address,address,uint256)")
TRANSFER_TOPIC = (
    "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
)

DEFAULT_WALLET_ADDRESS = "0x3156f02e943cefb0247283b7f89b4ebf91133cff"
DEFAULT_TOKEN_CONTRACT_ADDRESS = "0x02cbe46fb8a1f579254a9b485788f2d86cad51aa"
DEFAULT_RPC_URL = "https://kaia.blockpi.network/v1/rpc/public"
DEFAULT_SCAN_START = "2025-10-29T00:00:00+09:00"

DEFAULT_TOKEN_SYMBOL = "BORA"
DEFAULT_TOKEN_DECIMALS = 18

# ========================================================================
# SCAN / THROTTLE CONSTANTS
# ========================================================================

DEFAULT_CHUNK_SIZE = 5000  # Blocks per eth_getLogs request
DEFAULT_BATCH_SIZE = 10  # Logs decoded concurrently
DEFAULT_CHUNK_DELAY = 0.1  # Seconds between chunk requests
DEFAULT_BATCH_DELAY = 0.2  # Seconds between decode batches

# ========================================================================
# CACHE CONSTANTS
# ========================================================================

DEFAULT_CACHE_TTL = 300  # 5 minutes
