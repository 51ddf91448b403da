"""Typed configuration for the arbitration monitor.

Loads from environment variables (.env file) using pydantic-settings, the
same way the DEX connectors are configured.

Example .env:
    WEB3_PROVIDER_URL=https://mainnet.infura.io/v3/<key>
    WEB3_NETWORK_VERSION=1
    OWNER_PUBLIC_KEY=0xYourOwnerAddress
    OWNER_PRIVATE_KEY=0xYourOwnerKey
    MIN_PROFIT_PER_ARB=50000
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    """Runtime environments."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


# Arbitration contract deployments keyed by network id.
DEFAULT_CONTRACT_ADDRESSES: dict[int, str] = {
    1: "0xb9Fd169F2885E5e71d9aDb8E6e8505596feC339d",
}

DEFAULT_GAS_STATION_URL = "https://ethgasstation.info/json/ethgasAPI.json"


class LegConfig(BaseModel):
    """One price-quote request: asset pair at a venue."""

    from_asset: str = Field(alias="from")
    to_asset: str = Field(alias="to")
    venue: str

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class RouteConfig(BaseModel):
    """Route definition as it appears in ARB_ROUTES (JSON)."""

    method: str
    funding_token: str = Field(alias="fundingToken")
    buy: LegConfig
    sell: LegConfig

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ArbitratorSettings(BaseSettings):
    """Settings for gas pricing, profitability, execution and polling."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Node / identity
    rpc_url: str | None = Field(default=None, alias="WEB3_PROVIDER_URL")
    network_version: int = Field(default=1, alias="WEB3_NETWORK_VERSION")
    owner_address: str | None = Field(default=None, alias="OWNER_PUBLIC_KEY")
    owner_private_key: SecretStr | None = Field(default=None, alias="OWNER_PRIVATE_KEY")
    contract_address: str | None = Field(default=None, alias="ARB_CONTRACT_ADDRESS")
    environment: Environment = Field(default=Environment.DEVELOPMENT, alias="ENVIRONMENT")

    # Gas pricing
    gas_station_url: str = Field(default=DEFAULT_GAS_STATION_URL, alias="GAS_STATION_URL")
    gas_wait_tolerance: int = Field(default=10, alias="GAS_WAIT_TOLERANCE")  # minutes
    gas_price_unit: int = Field(default=100_000_000, alias="GAS_PRICE_UNIT")  # wei per tier unit
    http_timeout_seconds: float = Field(default=5.0, alias="HTTP_TIMEOUT_SECONDS")

    # Transaction template caps
    gas_limit_cap: int = Field(default=1_000_000, alias="GAS_LIMIT_CAP")  # gas units
    gas_price_cap: int = Field(default=10_000_000_000, alias="GAS_PRICE_CAP")  # wei

    # Profitability
    min_profit_per_arb: int = Field(default=50_000, alias="MIN_PROFIT_PER_ARB")
    native_unit_scale: int = Field(default=10**18, alias="NATIVE_UNIT_SCALE")

    # Cadence
    cycle_interval_ms: int = Field(default=5_000, alias="CYCLE_INTERVAL_MS")
    receipt_poll_interval_ms: int = Field(default=3_000, alias="RECEIPT_POLL_INTERVAL_MS")
    receipt_max_attempts: int | None = Field(default=None, alias="RECEIPT_MAX_ATTEMPTS")
    receipt_timeout_ms: int | None = Field(default=None, alias="RECEIPT_TIMEOUT_MS")

    # Notification / logging
    notify_webhook_url: str | None = Field(default=None, alias="NOTIFY_WEBHOOK_URL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    routes: list[RouteConfig] | None = Field(default=None, alias="ARB_ROUTES")

    @field_validator(
        "rpc_url",
        "owner_address",
        "contract_address",
        "gas_station_url",
        "notify_webhook_url",
        mode="before",
    )
    @classmethod
    def strip_whitespace(cls, v: str | None) -> str | None:
        """Strip whitespace that breaks HTTP connections and address parsing."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("owner_private_key", mode="before")
    @classmethod
    def strip_key(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator(
        "gas_price_unit",
        "gas_limit_cap",
        "gas_price_cap",
        "native_unit_scale",
        "cycle_interval_ms",
        "receipt_poll_interval_ms",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            msg = "must be a positive integer"
            raise ValueError(msg)
        return v

    @field_validator("receipt_max_attempts", "receipt_timeout_ms")
    @classmethod
    def optional_positive(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            msg = "must be positive when set"
            raise ValueError(msg)
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def _resolve_contract_address(self) -> "ArbitratorSettings":
        if self.contract_address is None:
            self.contract_address = DEFAULT_CONTRACT_ADDRESSES.get(self.network_version)
        return self

    @property
    def is_dev(self) -> bool:
        return self.environment is Environment.DEVELOPMENT

    @property
    def cycle_interval(self) -> float:
        """Minimum time between cycle starts, in seconds."""
        return self.cycle_interval_ms / 1000

    @property
    def receipt_poll_interval(self) -> float:
        return self.receipt_poll_interval_ms / 1000

    @property
    def receipt_timeout(self) -> float | None:
        if self.receipt_timeout_ms is None:
            return None
        return self.receipt_timeout_ms / 1000

    def require_live(self) -> None:
        """Ensure everything needed to talk to a node and sign is present."""
        missing = [
            name
            for name, value in (
                ("WEB3_PROVIDER_URL", self.rpc_url),
                ("OWNER_PUBLIC_KEY", self.owner_address),
                ("OWNER_PRIVATE_KEY", self.owner_private_key),
                ("ARB_CONTRACT_ADDRESS", self.contract_address),
            )
            if not value
        ]
        if missing:
            msg = f"Missing required settings: {', '.join(missing)} (set them in environment or .env)"
            raise ValueError(msg)
