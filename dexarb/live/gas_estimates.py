"""One-time gas estimation for every route."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from types import MappingProxyType

import structlog
from web3.types import TxParams

from dexarb.core.types import GasEstimate, Route
from dexarb.dex.contract import ChainContract

log = structlog.get_logger()


class GasEstimateCache:
    """Route id -> GasEstimate, filled once by :meth:`warm_up`.

    A route whose estimate failed (raised, or came back at the cap) stays
    marked ``failing`` for the life of the process; nothing re-estimates it.
    """

    def __init__(self, contract: ChainContract, owner: str, gas_limit_cap: int) -> None:
        self.contract = contract
        self.owner = owner
        self.gas_limit_cap = gas_limit_cap
        self._estimates: dict[str, GasEstimate] = {}
        self._view = MappingProxyType(self._estimates)

    @property
    def estimates(self) -> Mapping[str, GasEstimate]:
        return self._view

    def get(self, route_id: str) -> GasEstimate | None:
        return self._estimates.get(route_id)

    async def warm_up(self, routes: Iterable[Route]) -> Mapping[str, GasEstimate]:
        routes = list(routes)
        tx: TxParams = {"from": self.owner, "gas": self.gas_limit_cap}  # type: ignore[typeddict-item]
        results = await asyncio.gather(*(self._estimate(route, tx) for route in routes))

        estimates = {route.id: estimate for route, estimate in zip(routes, results, strict=True)}
        self._estimates.clear()
        self._estimates.update(estimates)

        log.info(
            "gas_estimates.ready",
            routes=len(estimates),
            failing=[rid for rid, est in estimates.items() if est.failing],
        )
        return self._view

    async def _estimate(self, route: Route, tx: TxParams) -> GasEstimate:
        try:
            gas = int(await self.contract.estimate_gas(route.method, tx, route.funding_token))
        except Exception as exc:
            log.warning("gas_estimates.failed", route=route.id, error=str(exc))
            return GasEstimate(gas_units=self.gas_limit_cap, failing=True)

        if gas == self.gas_limit_cap:
            log.warning("gas_estimates.at_cap", route=route.id, gas=gas)
            return GasEstimate(gas_units=gas, failing=True)

        log.debug("gas_estimates.route", route=route.id, gas=gas)
        return GasEstimate(gas_units=gas)
