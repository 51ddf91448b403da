"""Chain access for the arbitration contract."""

from dexarb.dex.contract import ChainContract, NetworkInfo, Web3ChainContract

__all__ = [
    "ChainContract",
    "NetworkInfo",
    "Web3ChainContract",
]
