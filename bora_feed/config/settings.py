"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from datetime import UTC, datetime

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bora_feed.config.constants import (
    DEFAULT_BATCH_DELAY,
    DEFAULT_BATCH_SIZE,
    DEFAULT_CACHE_TTL,
    DEFAULT_CHUNK_DELAY,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_RPC_URL,
    DEFAULT_SCAN_START,
    DEFAULT_TOKEN_CONTRACT_ADDRESS,
    DEFAULT_TOKEN_DECIMALS,
    DEFAULT_TOKEN_SYMBOL,
    DEFAULT_WALLET_ADDRESS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Tracked wallet and token
    wallet_address: str = DEFAULT_WALLET_ADDRESS
    token_contract_address: str = DEFAULT_TOKEN_CONTRACT_ADDRESS
    token_symbol: str = DEFAULT_TOKEN_SYMBOL
    token_decimals: int = Field(
        default=DEFAULT_TOKEN_DECIMALS,
        ge=0,
        le=36,
        description="Token decimals used to scale raw transfer values"
    )

    # Ledger RPC
    rpc_url: str = DEFAULT_RPC_URL

    # Scan window start (block range is estimated from this)
    scan_start: datetime = Field(
        default=datetime.fromisoformat(DEFAULT_SCAN_START),
        description="Earliest time to include in the transfer history"
    )

    # Scan / throttle settings
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE, ge=1, description="Blocks per log query"
    )
    batch_size: int = Field(
        default=DEFAULT_BATCH_SIZE, ge=1, description="Logs decoded concurrently"
    )
    chunk_delay: float = Field(
        default=DEFAULT_CHUNK_DELAY,
        ge=0,
        description="Delay between chunk requests in seconds"
    )
    batch_delay: float = Field(
        default=DEFAULT_BATCH_DELAY,
        ge=0,
        description="Delay between decode batches in seconds"
    )

    # Result cache
    cache_ttl: int = Field(
        default=DEFAULT_CACHE_TTL, gt=0, description="Result cache TTL in seconds"
    )
    expose_diagnostics: bool = Field(
        default=False,
        description="Report dropped chunks/logs in fresh scan responses"
    )

    # Application
    log_level: str = "INFO"
    log_file: str | None = None
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535, description="HTTP port")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator('wallet_address', 'token_contract_address')
    @classmethod
    def validate_eth_address(cls, v: str) -> str:
        """Validate Ethereum address format."""
        if not v.startswith('0x') or len(v) != 42:
            raise ValueError(
                f'Invalid address: {v}. '
                'Must start with 0x and be 42 characters long.'
            )
        try:
            int(v[2:], 16)
        except ValueError as exc:
            raise ValueError(f'Invalid address format: {v}') from exc
        return v.lower()

    @field_validator('rpc_url')
    @classmethod
    def validate_rpc_url(cls, v: str) -> str:
        """Validate RPC endpoint URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('RPC_URL must start with http:// or https://')
        return v

    @field_validator('scan_start')
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive start times as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case log level for loguru."""
        return v.upper()


# Global settings instance
settings = Settings()
