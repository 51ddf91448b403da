"""Gas price oracle backed by a gas-station style tier service.

The service returns a JSON document with tier prices as base-10 numeric
strings, e.g. ``{"safeLow": "20", "safeLowWait": "4.2", "average": "30"}``,
with prices expressed in tenths of a gwei.

Tier values are truncated to integers. There is no fallback price: any
failure is raised to the caller as :class:`GasPriceError`.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Mapping
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

import httpx
import structlog

from dexarb.core.errors import GasPriceError

log = structlog.get_logger()

JITTER_MIN = 1
JITTER_MAX = 9


def _parse_tier(data: Mapping[str, Any], key: str) -> int:
    raw = data[key]
    try:
        return int(Decimal(str(raw).strip()).to_integral_value(rounding=ROUND_DOWN))
    except (InvalidOperation, ValueError) as exc:
        msg = f"Unparseable gas tier {key}={raw!r}"
        raise GasPriceError(msg) from exc


def select_tier(data: Mapping[str, Any], wait_tolerance: int) -> int:
    """Pick ``safeLow`` unless its expected wait exceeds the tolerance."""
    try:
        safe_low = _parse_tier(data, "safeLow")
        safe_low_wait = _parse_tier(data, "safeLowWait")
        if safe_low_wait > wait_tolerance:
            return _parse_tier(data, "average")
    except KeyError as exc:
        msg = f"Gas price document missing field {exc.args[0]!r}"
        raise GasPriceError(msg) from exc
    return safe_low


class GasPriceOracle:
    """Fetch the current gas price, in wei, once per call."""

    def __init__(
        self,
        url: str,
        *,
        wait_tolerance: int = 10,
        unit_scale: int = 100_000_000,
        timeout: float = 5.0,
        rng: Callable[[int, int], int] = random.randint,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize gas oracle.

        Args:
            url: Gas station JSON endpoint
            wait_tolerance: Max acceptable ``safeLowWait`` before switching to ``average``
            unit_scale: Wei per tier unit
            timeout: HTTP timeout in seconds
            rng: Inclusive random integer source used for bid jitter
            client: Optional shared HTTP client (tests inject a mock transport)
        """
        self.url = url
        self.wait_tolerance = wait_tolerance
        self.unit_scale = unit_scale
        self.timeout = timeout
        self._rng = rng
        self._client = client

    async def _fetch(self) -> Mapping[str, Any]:
        try:
            if self._client is not None:
                response = await self._client.get(self.url)
                response.raise_for_status()
                data = response.json()
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.url)
                    response.raise_for_status()
                    data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            msg = f"Gas price fetch failed: {exc}"
            raise GasPriceError(msg) from exc

        if not isinstance(data, Mapping):
            msg = f"Gas price document is not an object: {type(data).__name__}"
            raise GasPriceError(msg)
        return data

    async def current_gas_price(self) -> int:
        data = await self._fetch()
        tier = select_tier(data, self.wait_tolerance)
        # Jitter in tier units, inclusive.
        jitter = self._rng(JITTER_MIN, JITTER_MAX)
        gas_price = (tier + jitter) * self.unit_scale

        log.debug(
            "gas_oracle.fetched",
            tier=tier,
            jitter=jitter,
            gas_price_wei=gas_price,
            gas_price_gwei=gas_price / 1e9,
        )
        return gas_price
