"""Etherscan account API integration."""

from .client import EtherscanClient, EtherscanError
from .types import RawTransaction

__all__ = ["EtherscanClient", "EtherscanError", "RawTransaction"]
