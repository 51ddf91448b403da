"""Fixed-cadence polling loop around the Arbitrator.

Cycles start at most once per ``cycle_interval`` measured from the start of
the previous cycle. A cycle that overruns (e.g. while waiting for a receipt)
is followed immediately by the next one; cycles never overlap.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from collections.abc import Awaitable, Callable

import structlog

from dexarb.live.arbitrator import Arbitrator

log = structlog.get_logger()


class ArbitrationEngine:
    """Drive :meth:`Arbitrator.monitor_all` forever (or for ``max_cycles``).

    Fatal errors from a cycle are not caught here; they end :meth:`run`.
    """

    def __init__(
        self,
        arbitrator: Arbitrator,
        *,
        cycle_interval: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.arbitrator = arbitrator
        self.cycle_interval = cycle_interval
        self._sleep = sleep
        self._clock = clock
        self._stop = asyncio.Event()
        self.cycles = 0
        self.executed = 0

    async def run(self, max_cycles: int | None = None) -> None:
        await self.arbitrator.prepare()
        log.info("engine.started", routes=len(self.arbitrator.catalog), interval=self.cycle_interval)

        while not self._stop.is_set():
            started = self._clock()
            result = await self.arbitrator.monitor_all()
            self.cycles += 1
            if result is not None:
                self.executed += 1

            elapsed = self._clock() - started
            log.debug("engine.cycle_complete", cycle=self.cycles, elapsed_ms=round(elapsed * 1000))

            if max_cycles is not None and self.cycles >= max_cycles:
                break
            if elapsed < self.cycle_interval:
                await self._sleep(self.cycle_interval - elapsed)

    def stop(self) -> None:
        """Finish the current cycle and exit the loop."""
        self._stop.set()


def configure_logging(*, json_output: bool = True, level: str = "INFO") -> None:
    """Send structlog events to stdout, as JSON lines or as console text.

    Raises ``ValueError`` for a level name the logging module does not know.
    """
    threshold = logging.getLevelNamesMapping().get(level.strip().upper())
    if threshold is None:
        msg = f"Unknown log level: {level!r}"
        raise ValueError(msg)

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=False,
    )
