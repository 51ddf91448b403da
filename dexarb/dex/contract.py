"""Async Web3 binding for the on-chain arbitration contract."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, cast

import structlog
from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import TransactionNotFound
from web3.types import Nonce, TxParams

from dexarb.core.types import Receipt, TxHash

log = structlog.get_logger()


class ChainContract(Protocol):
    """What the arbitration engine needs from the chain."""

    async def estimate_gas(self, method: str, tx: TxParams, *args: Any) -> int: ...

    async def read_value(self, method: str, *args: Any) -> Any: ...

    async def submit_transaction(self, method: str, tx: TxParams, *args: Any) -> dict[str, Any]: ...

    async def get_receipt(self, tx_hash: TxHash) -> Receipt | None: ...


@dataclass(frozen=True)
class NetworkInfo:
    """Node/contract details logged at startup."""

    contract_version: str
    chain_id: int
    peer_count: int


class Web3ChainContract:
    """ChainContract backed by AsyncWeb3 with local signing."""

    CONTRACT_ABI = [
        {
            "inputs": [],
            "name": "getVersion",
            "outputs": [{"internalType": "string", "name": "", "type": "string"}],
            "stateMutability": "view",
            "type": "function",
        },
        {
            "inputs": [
                {"internalType": "string", "name": "fromSymbol", "type": "string"},
                {"internalType": "string", "name": "toSymbol", "type": "string"},
                {"internalType": "string", "name": "venue", "type": "string"},
                {"internalType": "uint256", "name": "amount", "type": "uint256"},
            ],
            "name": "getPrice",
            "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
            "stateMutability": "view",
            "type": "function",
        },
        {
            "inputs": [{"internalType": "string", "name": "fundingToken", "type": "string"}],
            "name": "arbEthFromKyberToUniswap",
            "outputs": [],
            "stateMutability": "nonpayable",
            "type": "function",
        },
        {
            "inputs": [{"internalType": "string", "name": "fundingToken", "type": "string"}],
            "name": "arbEthFromUniswapToKyber",
            "outputs": [],
            "stateMutability": "nonpayable",
            "type": "function",
        },
    ]

    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        private_key: str | None = None,
        *,
        abi: list[dict[str, Any]] | None = None,
        request_timeout: float = 10.0,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        self.w3 = w3 or AsyncWeb3(
            AsyncHTTPProvider(rpc_url.strip(), request_kwargs={"timeout": request_timeout})
        )
        self.contract_address = self.w3.to_checksum_address(contract_address)
        self.contract = self.w3.eth.contract(
            address=self.contract_address, abi=abi or self.CONTRACT_ABI
        )
        self.account = Account.from_key(private_key) if private_key else None

        log.debug("contract.initialized", address=self.contract_address)

    def _function(self, method: str, *args: Any) -> Any:
        return getattr(self.contract.functions, method)(*args)

    async def estimate_gas(self, method: str, tx: TxParams, *args: Any) -> int:
        return await self._function(method, *args).estimate_gas(tx)

    async def read_value(self, method: str, *args: Any) -> Any:
        return await self._function(method, *args).call()

    async def submit_transaction(self, method: str, tx: TxParams, *args: Any) -> dict[str, Any]:
        """Build, sign and broadcast; returns once the node accepts the transaction."""
        if self.account is None:
            msg = "Private key required to submit transactions"
            raise ValueError(msg)

        tx_params: TxParams = dict(tx)  # type: ignore[assignment]
        tx_params["from"] = self.account.address
        tx_params["nonce"] = cast(
            Nonce, await self.w3.eth.get_transaction_count(self.account.address, "pending")
        )
        tx_params["chainId"] = await self.w3.eth.chain_id

        built = await self._function(method, *args).build_transaction(tx_params)
        signed = self.account.sign_transaction(built)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash_hex = self.w3.to_hex(tx_hash)

        log.info("contract.tx_broadcast", method=method, tx_hash=tx_hash_hex)
        return {"transactionHash": tx_hash_hex}

    async def get_receipt(self, tx_hash: TxHash) -> Receipt | None:
        """Return the receipt, or None while the transaction is not mined yet."""
        try:
            receipt = await self.w3.eth.get_transaction_receipt(tx_hash)  # type: ignore[arg-type]
        except TransactionNotFound:
            return None
        return dict(receipt)

    async def network_info(self) -> NetworkInfo:
        version = await self.read_value("getVersion")
        chain_id = await self.w3.eth.chain_id
        peer_count = await self.w3.net.peer_count
        return NetworkInfo(
            contract_version=str(version), chain_id=int(chain_id), peer_count=int(peer_count)
        )
