"""Tests for settings loading and validation."""

import json

import pytest
from pydantic import ValidationError

from dexarb.config import DEFAULT_CONTRACT_ADDRESSES, ArbitratorSettings, Environment
from dexarb.core.routes import DEFAULT_ROUTES, RouteCatalog


def test_defaults() -> None:
    settings = ArbitratorSettings(_env_file=None)

    assert settings.min_profit_per_arb == 50_000
    assert settings.cycle_interval == 5.0
    assert settings.receipt_poll_interval == 3.0
    assert settings.receipt_timeout is None
    assert settings.native_unit_scale == 10**18
    assert settings.gas_limit_cap != settings.gas_price_cap
    assert settings.contract_address == DEFAULT_CONTRACT_ADDRESSES[1]
    assert settings.environment is Environment.DEVELOPMENT
    assert settings.is_dev


def test_env_aliases(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEB3_PROVIDER_URL", "  http://localhost:8545 \n")
    monkeypatch.setenv("WEB3_NETWORK_VERSION", "5777")
    monkeypatch.setenv("OWNER_PUBLIC_KEY", "0xowner")
    monkeypatch.setenv("OWNER_PRIVATE_KEY", " 0xkey ")
    monkeypatch.setenv("MIN_PROFIT_PER_ARB", "1000")
    monkeypatch.setenv("RECEIPT_TIMEOUT_MS", "60000")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = ArbitratorSettings(_env_file=None)

    assert settings.rpc_url == "http://localhost:8545"
    assert settings.network_version == 5777
    assert settings.contract_address is None
    assert settings.owner_private_key is not None
    assert settings.owner_private_key.get_secret_value() == "0xkey"
    assert settings.min_profit_per_arb == 1000
    assert settings.receipt_timeout == 60.0
    assert not settings.is_dev
    assert settings.log_level == "DEBUG"


def test_routes_from_json_env(monkeypatch: pytest.MonkeyPatch) -> None:
    routes = [
        {
            "method": "arbEthFromKyberToUniswap",
            "fundingToken": "USDC",
            "buy": {"from": "ETH", "to": "USDC", "venue": "BUY-KYBER-EXCHANGE"},
            "sell": {"from": "ETH", "to": "USDC", "venue": "SELL-UNISWAP-EXCHANGE"},
        }
    ]
    monkeypatch.setenv("ARB_ROUTES", json.dumps(routes))

    settings = ArbitratorSettings(_env_file=None)
    catalog = RouteCatalog.from_config(settings.routes)

    assert len(catalog) == 1
    assert catalog[0].id == "arbEthFromKyberToUniswap:USDC"
    assert catalog[0].sell_leg.venue == "SELL-UNISWAP-EXCHANGE"


def test_default_catalog_when_routes_unset() -> None:
    settings = ArbitratorSettings(_env_file=None)
    assert list(RouteCatalog.from_config(settings.routes)) == list(DEFAULT_ROUTES)


@pytest.mark.parametrize(
    "field", ["CYCLE_INTERVAL_MS", "RECEIPT_POLL_INTERVAL_MS", "NATIVE_UNIT_SCALE", "GAS_LIMIT_CAP"]
)
def test_non_positive_values_rejected(monkeypatch: pytest.MonkeyPatch, field: str) -> None:
    monkeypatch.setenv(field, "0")
    with pytest.raises(ValidationError):
        ArbitratorSettings(_env_file=None)


def test_require_live_lists_missing_settings() -> None:
    settings = ArbitratorSettings(_env_file=None, WEB3_PROVIDER_URL="http://node")

    with pytest.raises(ValueError, match="OWNER_PUBLIC_KEY") as exc_info:
        settings.require_live()
    assert "WEB3_PROVIDER_URL" not in str(exc_info.value)
