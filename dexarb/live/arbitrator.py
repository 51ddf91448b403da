"""Per-cycle arbitration orchestration.

One call to :meth:`Arbitrator.monitor_all` is one polling cycle:

1. refresh the gas price (failure is fatal for the cycle and the process)
2. evaluate every route concurrently and wait for all of them
3. keep qualifying opportunities with a positive gain
4. pick the largest gain, first route in catalog order on ties
5. submit that single transaction and wait until it is mined

At most one arbitration transaction is submitted per cycle.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from dexarb.config import ArbitratorSettings
from dexarb.core.routes import RouteCatalog
from dexarb.core.types import ArbitrationResult, Evaluation, Opportunity, Receipt
from dexarb.dex.contract import ChainContract
from dexarb.live.evaluator import OpportunityEvaluator
from dexarb.live.executor import TransactionExecutor
from dexarb.live.gas_estimates import GasEstimateCache
from dexarb.live.gas_oracle import GasPriceOracle
from dexarb.live.notifier import Notifier
from dexarb.live.receipts import ReceiptWaiter

log = structlog.get_logger()


def select_best(evaluations: Iterable[Evaluation]) -> Opportunity | None:
    """Highest-gain opportunity; earlier entries win ties."""
    best: Opportunity | None = None
    for evaluation in evaluations:
        if not isinstance(evaluation, Opportunity) or evaluation.potential_gain <= 0:
            continue
        if best is None or evaluation.potential_gain > best.potential_gain:
            best = evaluation
    return best


class Arbitrator:
    """Holds only the current gas price plus its injected collaborators."""

    def __init__(
        self,
        *,
        catalog: RouteCatalog,
        gas_oracle: GasPriceOracle,
        gas_estimates: GasEstimateCache,
        evaluator: OpportunityEvaluator,
        executor: TransactionExecutor,
        receipt_waiter: ReceiptWaiter,
        notifier: Notifier | None = None,
    ) -> None:
        self.catalog = catalog
        self.gas_oracle = gas_oracle
        self.gas_estimates = gas_estimates
        self.evaluator = evaluator
        self.executor = executor
        self.receipt_waiter = receipt_waiter
        self.notifier = notifier or Notifier()
        self.gas_price = 0

    @classmethod
    def from_settings(
        cls,
        settings: ArbitratorSettings,
        contract: ChainContract,
        *,
        catalog: RouteCatalog | None = None,
    ) -> "Arbitrator":
        owner = settings.owner_address or ""
        gas_estimates = GasEstimateCache(contract, owner, settings.gas_limit_cap)
        return cls(
            catalog=catalog or RouteCatalog.from_config(settings.routes),
            gas_oracle=GasPriceOracle(
                settings.gas_station_url,
                wait_tolerance=settings.gas_wait_tolerance,
                unit_scale=settings.gas_price_unit,
                timeout=settings.http_timeout_seconds,
            ),
            gas_estimates=gas_estimates,
            evaluator=OpportunityEvaluator(
                contract,
                gas_estimates,
                min_profit_per_arb=settings.min_profit_per_arb,
                native_unit_scale=settings.native_unit_scale,
            ),
            executor=TransactionExecutor(
                contract,
                owner,
                gas_limit_cap=settings.gas_limit_cap,
                gas_price_cap=settings.gas_price_cap,
            ),
            receipt_waiter=ReceiptWaiter(
                contract,
                poll_interval=settings.receipt_poll_interval,
                max_attempts=settings.receipt_max_attempts,
                timeout=settings.receipt_timeout,
            ),
            notifier=Notifier(
                settings.notify_webhook_url, timeout=settings.http_timeout_seconds
            ),
        )

    async def prepare(self) -> None:
        """Estimate gas for every route once, before the first cycle."""
        await self.gas_estimates.warm_up(self.catalog)

    async def monitor_all(self) -> ArbitrationResult | None:
        self.gas_price = await self.gas_oracle.current_gas_price()
        log.debug("arbitrator.gas_price", gwei=self.gas_price / 1e9)

        evaluations = await asyncio.gather(
            *(self.evaluator.evaluate(route, self.gas_price) for route in self.catalog)
        )

        best = select_best(evaluations)
        if best is None:
            log.debug(
                "arbitrator.no_opportunity",
                failing=[e.route.id for e in evaluations if e.failing],
            )
            return None

        return await self._perform_arbitration(best)

    async def _perform_arbitration(self, opportunity: Opportunity) -> ArbitrationResult:
        route = opportunity.route
        log.info(
            "arbitrator.opportunity",
            route=route.id,
            gain=str(opportunity.potential_gain),
            buy=opportunity.buy_rate,
            sell=opportunity.sell_rate,
            gas_cost_wei=opportunity.gas_cost_native,
        )

        pending = await self.executor.submit(route, self.gas_price)
        receipt = await self.receipt_waiter.wait(pending.transaction_hash)
        profit, loss = self.account_result(receipt)

        result = ArbitrationResult(
            route=route,
            tx_hash=pending.transaction_hash,
            receipt=receipt,
            potential_gain=opportunity.potential_gain,
            profit=profit,
            loss=loss,
        )
        log.info(
            "arbitrator.result",
            route=route.id,
            funding_token=route.funding_token,
            profit=profit,
            loss=loss,
        )
        await self.notifier.notify(result)
        return result

    def account_result(self, receipt: Receipt) -> tuple[int, int]:
        """Realized (profit, loss) for a mined arbitration.

        Decoding the contract's logs is not implemented; both are reported as 0.
        """
        return 0, 0
