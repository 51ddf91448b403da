"""Per-route profitability evaluation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import structlog

from dexarb.core.types import (
    Evaluation,
    EvaluationFailed,
    GasEstimate,
    Leg,
    NoOpportunity,
    Opportunity,
    PriceQuote,
    Route,
)
from dexarb.dex.contract import ChainContract
from dexarb.live.gas_estimates import GasEstimateCache

log = structlog.get_logger()

PRICE_METHOD = "getPrice"


@dataclass(frozen=True, slots=True)
class GainBreakdown:
    gas_cost_native: int
    avg_rate: Decimal
    gas_cost_in_funding_token: Decimal
    potential_gain: Decimal


def compute_gain(
    buy_rate: int,
    sell_rate: int,
    gas_units: int,
    gas_price: int,
    native_unit_scale: int,
) -> GainBreakdown:
    """Spread between legs after converting the gas bill into the funding token.

    Gas cost is priced at the mid rate of the two legs.
    """
    gas_cost_native = int(
        (Decimal(gas_units) * Decimal(gas_price)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    )
    avg_rate = (Decimal(buy_rate) + Decimal(sell_rate)) / 2
    gas_cost_in_funding_token = avg_rate * (Decimal(gas_cost_native) / Decimal(native_unit_scale))
    potential_gain = Decimal(sell_rate) - (Decimal(buy_rate) + gas_cost_in_funding_token)
    return GainBreakdown(
        gas_cost_native=gas_cost_native,
        avg_rate=avg_rate,
        gas_cost_in_funding_token=gas_cost_in_funding_token,
        potential_gain=potential_gain,
    )


class OpportunityEvaluator:
    """Decide, for one route and one gas price, whether an arbitrage is worth it.

    Never raises: quote failures are recovered as a zero rate, and anything
    else that goes wrong becomes an :class:`EvaluationFailed` so a single bad
    route cannot abort the cycle.
    """

    def __init__(
        self,
        contract: ChainContract,
        gas_estimates: GasEstimateCache,
        *,
        min_profit_per_arb: int,
        native_unit_scale: int,
    ) -> None:
        self.contract = contract
        self.gas_estimates = gas_estimates
        self.min_profit_per_arb = min_profit_per_arb
        self.native_unit_scale = native_unit_scale

    async def fetch_quote(self, leg: Leg) -> PriceQuote:
        try:
            raw = await self.contract.read_value(
                PRICE_METHOD, leg.from_asset, leg.to_asset, leg.venue, self.native_unit_scale
            )
            rate = int(str(raw), 10)
        except Exception as exc:
            log.debug(
                "evaluator.quote_failed",
                venue=leg.venue,
                pair=f"{leg.from_asset}/{leg.to_asset}",
                error=str(exc),
            )
            return PriceQuote(0, leg.from_asset, leg.to_asset, leg.venue, ok=False)
        return PriceQuote(rate, leg.from_asset, leg.to_asset, leg.venue)

    async def evaluate(self, route: Route, gas_price: int) -> Evaluation:
        estimate = self.gas_estimates.get(route.id)
        if estimate is None or estimate.failing:
            log.error("evaluator.gas_estimation_failed", route=route.id)
            return EvaluationFailed(route, reason="gas_estimation_failed")

        try:
            return await self._evaluate(route, estimate, gas_price)
        except Exception as exc:
            log.exception("evaluator.failed", route=route.id)
            return EvaluationFailed(route, reason=str(exc) or type(exc).__name__)

    async def _evaluate(self, route: Route, estimate: GasEstimate, gas_price: int) -> Evaluation:
        buy, sell = await asyncio.gather(
            self.fetch_quote(route.buy_leg), self.fetch_quote(route.sell_leg)
        )
        gain = compute_gain(
            buy.rate, sell.rate, estimate.gas_units, gas_price, self.native_unit_scale
        )

        log.debug(
            "evaluator.route",
            route=route.id,
            gas_cost_wei=gain.gas_cost_native,
            buy=buy.rate,
            sell=sell.rate,
            buy_ok=buy.ok,
            sell_ok=sell.ok,
            gas_cost_token=str(gain.gas_cost_in_funding_token),
            gain=str(gain.potential_gain),
            min_profit=self.min_profit_per_arb,
        )

        fields = dict(
            route=route,
            potential_gain=gain.potential_gain,
            buy_rate=buy.rate,
            sell_rate=sell.rate,
            gas_cost_native=gain.gas_cost_native,
            gas_cost_in_funding_token=gain.gas_cost_in_funding_token,
        )
        if gain.potential_gain >= self.min_profit_per_arb:
            return Opportunity(**fields)
        return NoOpportunity(**fields)
