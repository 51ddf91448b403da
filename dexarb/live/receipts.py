"""Poll for a transaction receipt until it is mined."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from enum import StrEnum

import structlog

from dexarb.core.errors import ReceiptTimeoutError, ReceiptWaitCancelled
from dexarb.core.types import Receipt, TxHash
from dexarb.dex.contract import ChainContract

log = structlog.get_logger()

Sleep = Callable[[float], Awaitable[None]]


class ReceiptState(StrEnum):
    WAITING = "waiting"
    CONFIRMED = "confirmed"


class ReceiptWaiter:
    """Waiting -> Confirmed polling loop.

    ``None`` from the node means "not mined yet" and is retried after
    ``poll_interval`` seconds. Provider errors propagate on the first
    occurrence. With the defaults (no ``max_attempts``, no ``timeout``) the
    loop waits indefinitely. Setting the ``cancel`` event also interrupts a
    pending sleep.
    """

    def __init__(
        self,
        contract: ChainContract,
        *,
        poll_interval: float = 3.0,
        max_attempts: int | None = None,
        timeout: float | None = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.contract = contract
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock
        self.state = ReceiptState.WAITING

    async def wait(self, tx_hash: TxHash, cancel: asyncio.Event | None = None) -> Receipt:
        self.state = ReceiptState.WAITING
        deadline = None if self.timeout is None else self._clock() + self.timeout
        attempts = 0

        while True:
            if cancel is not None and cancel.is_set():
                log.warning("receipts.cancelled", tx_hash=tx_hash, attempts=attempts)
                raise ReceiptWaitCancelled(tx_hash)

            receipt = await self.contract.get_receipt(tx_hash)
            attempts += 1
            if receipt is not None:
                self.state = ReceiptState.CONFIRMED
                log.info(
                    "receipts.confirmed",
                    tx_hash=tx_hash,
                    attempts=attempts,
                    status=receipt.get("status"),
                    gas_used=receipt.get("gasUsed"),
                )
                return receipt

            if self.max_attempts is not None and attempts >= self.max_attempts:
                raise ReceiptTimeoutError(tx_hash, attempts)
            if deadline is not None and self._clock() + self.poll_interval > deadline:
                raise ReceiptTimeoutError(tx_hash, attempts)

            log.debug("receipts.pending", tx_hash=tx_hash, attempts=attempts)
            await self._pause(cancel)

    async def _pause(self, cancel: asyncio.Event | None) -> None:
        """Sleep one poll interval, returning early once ``cancel`` is set."""
        if cancel is None:
            await self._sleep(self.poll_interval)
            return

        sleeper = asyncio.ensure_future(self._sleep(self.poll_interval))
        cancelled = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({sleeper, cancelled}, return_when=asyncio.FIRST_COMPLETED)
            if sleeper.done():
                sleeper.result()
        finally:
            sleeper.cancel()
            cancelled.cancel()
