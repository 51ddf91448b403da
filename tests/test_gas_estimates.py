"""Tests for the startup gas estimate warm-up."""

import pytest

from dexarb.core.routes import DEFAULT_ROUTES
from dexarb.core.types import GasEstimate
from dexarb.live.gas_estimates import GasEstimateCache

CAP = 1_000_000
OWNER = "0x00000000000000000000000000000000000000aa"


class DummyContract:
    def __init__(self, gas_by_token: dict[str, int | Exception]) -> None:
        self.gas_by_token = gas_by_token
        self.calls: list[tuple] = []

    async def estimate_gas(self, method: str, tx, *args):
        self.calls.append((method, dict(tx), args))
        value = self.gas_by_token[args[0]]
        if isinstance(value, Exception):
            raise value
        return value


@pytest.mark.asyncio
async def test_warm_up_estimates_every_route_with_owner_template() -> None:
    contract = DummyContract({"SAI": 210_000, "DAI": 190_000})
    cache = GasEstimateCache(contract, OWNER, CAP)  # type: ignore[arg-type]

    estimates = await cache.warm_up(DEFAULT_ROUTES)

    assert len(contract.calls) == len(DEFAULT_ROUTES)
    assert all(tx == {"from": OWNER, "gas": CAP} for _m, tx, _a in contract.calls)
    assert estimates[DEFAULT_ROUTES[0].id] == GasEstimate(210_000)
    assert estimates[DEFAULT_ROUTES[2].id] == GasEstimate(190_000)


@pytest.mark.asyncio
async def test_estimate_at_cap_marks_route_failing() -> None:
    contract = DummyContract({"SAI": CAP, "DAI": 190_000})
    cache = GasEstimateCache(contract, OWNER, CAP)  # type: ignore[arg-type]
    await cache.warm_up(DEFAULT_ROUTES)

    assert cache.get(DEFAULT_ROUTES[0].id) == GasEstimate(CAP, failing=True)
    assert cache.get(DEFAULT_ROUTES[2].id) == GasEstimate(190_000, failing=False)


@pytest.mark.asyncio
async def test_estimate_exception_marks_route_failing() -> None:
    contract = DummyContract({"SAI": RuntimeError("execution reverted"), "DAI": 190_000})
    cache = GasEstimateCache(contract, OWNER, CAP)  # type: ignore[arg-type]
    await cache.warm_up(DEFAULT_ROUTES)

    failing = cache.get(DEFAULT_ROUTES[1].id)
    assert failing is not None and failing.failing
    assert failing.gas_units == CAP


@pytest.mark.asyncio
async def test_warm_up_twice_yields_identical_cache() -> None:
    contract = DummyContract({"SAI": CAP, "DAI": 190_000})
    cache = GasEstimateCache(contract, OWNER, CAP)  # type: ignore[arg-type]

    first = dict(await cache.warm_up(DEFAULT_ROUTES))
    second = dict(await cache.warm_up(DEFAULT_ROUTES))

    assert first == second


@pytest.mark.asyncio
async def test_estimates_view_is_read_only() -> None:
    cache = GasEstimateCache(DummyContract({"SAI": 1, "DAI": 2}), OWNER, CAP)  # type: ignore[arg-type]
    estimates = await cache.warm_up(DEFAULT_ROUTES)

    with pytest.raises(TypeError):
        estimates["x"] = GasEstimate(1)  # type: ignore[index]
