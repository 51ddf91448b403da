"""Core data model, route catalog and errors."""

from dexarb.core.errors import (
    ArbitratorError,
    GasPriceError,
    ReceiptTimeoutError,
    ReceiptWaitCancelled,
    TransactionSubmitError,
)
from dexarb.core.routes import DEFAULT_ROUTES, RouteCatalog
from dexarb.core.types import (
    ArbitrationResult,
    Evaluation,
    EvaluationFailed,
    GasEstimate,
    Leg,
    NoOpportunity,
    Opportunity,
    PendingTx,
    PriceQuote,
    Route,
)

__all__ = [
    # Errors
    "ArbitratorError",
    "GasPriceError",
    "ReceiptTimeoutError",
    "ReceiptWaitCancelled",
    "TransactionSubmitError",
    # Routes
    "DEFAULT_ROUTES",
    "RouteCatalog",
    # Types
    "ArbitrationResult",
    "Evaluation",
    "EvaluationFailed",
    "GasEstimate",
    "Leg",
    "NoOpportunity",
    "Opportunity",
    "PendingTx",
    "PriceQuote",
    "Route",
]
