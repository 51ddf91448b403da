"""
Arbitration contract monitor.

This script:
1. Connects to the node and the arbitration contract
2. Estimates gas for every route once
3. Polls both venues for each route every cycle
4. Executes the single most profitable arbitration, if any, and waits for it

Any fatal error (gas price feed, submission, receipt polling) exits with
status 1 so the process supervisor can restart it.
"""

import asyncio
import sys
from typing import cast

import structlog
from dotenv import load_dotenv
from pydantic import SecretStr

from dexarb.config import ArbitratorSettings
from dexarb.dex.contract import Web3ChainContract
from dexarb.live.arbitrator import Arbitrator
from dexarb.live.engine import ArbitrationEngine, configure_logging

# Load environment variables
load_dotenv()

log = structlog.get_logger()


async def main(settings: ArbitratorSettings) -> None:
    settings.require_live()
    rpc_url = cast(str, settings.rpc_url)
    contract_address = cast(str, settings.contract_address)
    private_key = cast(SecretStr, settings.owner_private_key)

    contract = Web3ChainContract(
        rpc_url,
        contract_address,
        private_key.get_secret_value(),
        request_timeout=settings.http_timeout_seconds,
    )
    info = await contract.network_info()

    log.info(
        "arbitrator.starting",
        environment="Development" if settings.is_dev else "Production",
        contract_version=info.contract_version,
        contract_address=contract.contract_address,
        owner=settings.owner_address,
        network_version=info.chain_id,
        peer_count=info.peer_count,
    )

    arbitrator = Arbitrator.from_settings(settings, contract)
    engine = ArbitrationEngine(arbitrator, cycle_interval=settings.cycle_interval)
    await engine.run()


def cli() -> None:
    settings = ArbitratorSettings()
    configure_logging(json_output=settings.log_json, level=settings.log_level)

    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        log.info("arbitrator.stopped_by_user")
    except Exception:
        log.exception("arbitrator.quit_unexpectedly")
        sys.exit(1)


if __name__ == "__main__":
    cli()
