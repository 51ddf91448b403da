"""On-chain DEX arbitration monitor."""

__version__ = "0.1.0"
