"""Arbitration notifications.

Always logs the result; additionally posts a Discord-style ``{"content": ...}``
message when a webhook URL is configured.
"""

from __future__ import annotations

import httpx
import structlog

from dexarb.core.types import ArbitrationResult

log = structlog.get_logger()


class Notifier:
    def __init__(
        self,
        webhook_url: str | None = None,
        *,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._client = client

    @staticmethod
    def format_message(result: ArbitrationResult) -> str:
        return (
            f"Arbitration executed: {result.route.method} ({result.funding_token})\n"
            f"Profit: {result.profit}  |  Loss: {result.loss}\n"
            f"TX: {result.tx_hash}"
        )

    async def notify(self, result: ArbitrationResult) -> None:
        log.info(
            "notifier.arbitration",
            route=result.route.id,
            tx_hash=result.tx_hash,
            profit=result.profit,
            loss=result.loss,
        )
        if not self.webhook_url:
            return

        payload = {"content": self.format_message(result)}
        # The transaction is already mined; delivery failures are not fatal.
        try:
            if self._client is not None:
                response = await self._client.post(self.webhook_url, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.webhook_url, json=payload)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log.warning("notifier.webhook_failed", error=str(exc))
