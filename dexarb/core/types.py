"""Shared data model for routes, quotes, estimates and evaluation outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

type Wei = int
type TxHash = str
type Receipt = dict[str, Any]


@dataclass(frozen=True, slots=True)
class Leg:
    """One price-quote request for an asset pair at a venue."""

    from_asset: str
    to_asset: str
    venue: str


@dataclass(frozen=True, slots=True)
class Route:
    """A contract method tied to one funding token and a buy/sell leg pair."""

    method: str
    funding_token: str
    buy_leg: Leg
    sell_leg: Leg

    @property
    def id(self) -> str:
        # The same method is listed once per funding token.
        return f"{self.method}:{self.funding_token}"


@dataclass(frozen=True, slots=True)
class GasEstimate:
    """Startup gas estimate; ``failing`` disables the route for the process."""

    gas_units: int
    failing: bool = False


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """Spot rate for one leg. ``ok`` is False when the rate is a recovered 0."""

    rate: int
    from_asset: str
    to_asset: str
    venue: str
    ok: bool = True


@dataclass(frozen=True, slots=True)
class NoOpportunity:
    """Route evaluated successfully but the spread does not clear the threshold."""

    route: Route
    potential_gain: Decimal
    buy_rate: int
    sell_rate: int
    gas_cost_native: int
    gas_cost_in_funding_token: Decimal

    @property
    def failing(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Opportunity:
    """Route whose potential gain clears the minimum profit threshold."""

    route: Route
    potential_gain: Decimal
    buy_rate: int
    sell_rate: int
    gas_cost_native: int
    gas_cost_in_funding_token: Decimal

    @property
    def funding_token(self) -> str:
        return self.route.funding_token

    @property
    def failing(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class EvaluationFailed:
    """Route could not be evaluated this cycle (or ever, for failed gas estimates)."""

    route: Route
    reason: str

    @property
    def potential_gain(self) -> Decimal:
        return Decimal(0)

    @property
    def failing(self) -> bool:
        return True


type Evaluation = NoOpportunity | Opportunity | EvaluationFailed


@dataclass(frozen=True, slots=True)
class PendingTx:
    """Transaction accepted into the node's pool, not yet mined."""

    transaction_hash: TxHash


@dataclass(slots=True)
class ArbitrationResult:
    """Outcome of one executed arbitration."""

    route: Route
    tx_hash: TxHash
    receipt: Receipt = field(default_factory=dict)
    potential_gain: Decimal = Decimal(0)
    profit: int = 0
    loss: int = 0

    @property
    def funding_token(self) -> str:
        return self.route.funding_token
