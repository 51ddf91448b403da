"""Exceptions for the arbitration engine.

Everything derived from :class:`ArbitratorError` is fatal for the process:
the engine does not retry these and an outer supervisor is expected to
restart it. Per-route problems never surface as exceptions.
"""


class ArbitratorError(Exception):
    """Base class for fatal arbitration errors."""


class GasPriceError(ArbitratorError):
    """Gas price could not be fetched or parsed."""


class TransactionSubmitError(ArbitratorError):
    """Signing or broadcasting the arbitration transaction failed."""

    def __init__(self, method: str, funding_token: str, reason: str) -> None:
        super().__init__(f"{method}({funding_token}) submission failed: {reason}")
        self.method = method
        self.funding_token = funding_token
        self.reason = reason


class ReceiptTimeoutError(ArbitratorError):
    """Receipt polling gave up after its attempt or time budget."""

    def __init__(self, tx_hash: str, attempts: int) -> None:
        super().__init__(f"No receipt for {tx_hash} after {attempts} attempts")
        self.tx_hash = tx_hash
        self.attempts = attempts


class ReceiptWaitCancelled(ArbitratorError):
    """Receipt polling was cancelled before confirmation."""

    def __init__(self, tx_hash: str) -> None:
        super().__init__(f"Receipt wait cancelled for {tx_hash}")
        self.tx_hash = tx_hash
