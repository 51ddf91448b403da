"""Tests for gas tier selection and gas price fetching."""

import httpx
import pytest

from dexarb.core.errors import GasPriceError
from dexarb.live.gas_oracle import GasPriceOracle, select_tier

URL = "https://gas.example/json"
UNIT = 100_000_000


def _oracle(payload, *, status: int = 200, jitter: int = 5, tolerance: int = 10) -> GasPriceOracle:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == URL
        if isinstance(payload, (bytes, str)):
            return httpx.Response(status, content=payload)
        return httpx.Response(status, json=payload)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GasPriceOracle(
        URL,
        wait_tolerance=tolerance,
        unit_scale=UNIT,
        rng=lambda _lo, _hi: jitter,
        client=client,
    )


def test_select_tier_prefers_safe_low_within_tolerance() -> None:
    data = {"safeLow": "20", "safeLowWait": "10", "average": "30"}
    assert select_tier(data, wait_tolerance=10) == 20


def test_select_tier_switches_to_average_when_wait_too_long() -> None:
    data = {"safeLow": "20", "safeLowWait": "11", "average": "30"}
    assert select_tier(data, wait_tolerance=10) == 30


def test_select_tier_missing_field_raises() -> None:
    with pytest.raises(GasPriceError):
        select_tier({"safeLow": "20"}, wait_tolerance=10)


@pytest.mark.asyncio
async def test_gas_price_uses_safe_low_plus_jitter() -> None:
    oracle = _oracle({"safeLow": "20", "safeLowWait": "4", "average": "30"}, jitter=3)
    assert await oracle.current_gas_price() == (20 + 3) * UNIT


@pytest.mark.asyncio
@pytest.mark.parametrize("jitter", range(1, 10))
async def test_gas_price_derives_from_average_when_safe_low_is_slow(jitter: int) -> None:
    oracle = _oracle(
        {"safeLow": "20", "safeLowWait": "25", "average": "30"}, jitter=jitter
    )
    price = await oracle.current_gas_price()
    assert price == (30 + jitter) * UNIT
    assert price != (20 + jitter) * UNIT


@pytest.mark.asyncio
async def test_jitter_range_requested_from_rng() -> None:
    calls = []

    def rng(lo: int, hi: int) -> int:
        calls.append((lo, hi))
        return lo

    client = httpx.AsyncClient(
        transport=httpx.MockTransport(
            lambda _r: httpx.Response(200, json={"safeLow": 10, "safeLowWait": 1, "average": 12})
        )
    )
    oracle = GasPriceOracle(URL, unit_scale=UNIT, rng=rng, client=client)
    assert await oracle.current_gas_price() == 11 * UNIT
    assert calls == [(1, 9)]


@pytest.mark.asyncio
async def test_http_error_is_fatal() -> None:
    oracle = _oracle({"error": "down"}, status=503)
    with pytest.raises(GasPriceError):
        await oracle.current_gas_price()


@pytest.mark.asyncio
async def test_garbage_body_is_fatal() -> None:
    oracle = _oracle(b"<html>not json</html>")
    with pytest.raises(GasPriceError):
        await oracle.current_gas_price()


@pytest.mark.asyncio
async def test_unparseable_tier_is_fatal() -> None:
    oracle = _oracle({"safeLow": "cheap", "safeLowWait": "1", "average": "30"})
    with pytest.raises(GasPriceError):
        await oracle.current_gas_price()


def test_select_tier_truncates_fractional_wait() -> None:
    data = {"safeLow": "20", "safeLowWait": "10.6", "average": "30"}
    assert select_tier(data, wait_tolerance=10) == 20


@pytest.mark.asyncio
async def test_fractional_tier_is_truncated_not_rounded() -> None:
    oracle = _oracle({"safeLow": "25.7", "safeLowWait": "2", "average": "30"}, jitter=1)
    assert await oracle.current_gas_price() == (25 + 1) * UNIT
