"""Submit the winning route's arbitration transaction."""

from __future__ import annotations

import structlog
from web3.types import TxParams

from dexarb.core.errors import TransactionSubmitError
from dexarb.core.types import PendingTx, Route
from dexarb.dex.contract import ChainContract

log = structlog.get_logger()


class TransactionExecutor:
    """Build, sign and broadcast one arbitration; does not wait for mining."""

    def __init__(
        self,
        contract: ChainContract,
        owner: str,
        *,
        gas_limit_cap: int,
        gas_price_cap: int,
    ) -> None:
        self.contract = contract
        self.owner = owner
        self.gas_limit_cap = gas_limit_cap
        self.gas_price_cap = gas_price_cap

    def build_tx(self, gas_price: int | None = None) -> TxParams:
        """Transaction template with the gas limit and gas price capped."""
        price = self.gas_price_cap if gas_price is None else min(gas_price, self.gas_price_cap)
        return {  # type: ignore[return-value]
            "from": self.owner,
            "gas": self.gas_limit_cap,
            "gasPrice": price,
        }

    async def submit(self, route: Route, gas_price: int | None = None) -> PendingTx:
        tx = self.build_tx(gas_price)
        log.info(
            "executor.submitting",
            route=route.id,
            gas_limit=tx["gas"],
            gas_price_gwei=tx["gasPrice"] / 1e9,  # type: ignore[operator]
        )
        try:
            result = await self.contract.submit_transaction(route.method, tx, route.funding_token)
            tx_hash = result["transactionHash"]
        except Exception as exc:
            log.exception("executor.submit_failed", route=route.id)
            raise TransactionSubmitError(route.method, route.funding_token, str(exc)) from exc

        log.info("executor.submitted", route=route.id, tx_hash=tx_hash)
        return PendingTx(transaction_hash=str(tx_hash))
