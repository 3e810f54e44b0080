"""Call-data decoding for RocketRewardsPool reward snapshot submissions.

oDAO members submit their rewards tree by calling
``submitRewardSnapshot(RewardSubmission _submission)`` on the
RocketRewardsPool contract. The ABI fragment for that one call ships with
the package; nothing is discovered at runtime.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from eth_abi.exceptions import DecodingError
from eth_utils import function_abi_to_4byte_selector
from pydantic import BaseModel, ConfigDict, Field, field_validator
from web3 import Web3

REWARD_SUBMISSION_FUNCTION = "submitRewardSnapshot"


class CallDataDecodeError(Exception):
    """Raised when call-data does not match the reward snapshot schema."""

    pass


def default_abi_path() -> Path:
    return Path(__file__).resolve().parents[1] / "data" / "RocketRewardsPoolABI.json"


def load_rewards_pool_abi(path: Optional[str | Path] = None) -> List[Dict[str, Any]]:
    abi_path = Path(path) if path else default_abi_path()
    with abi_path.open("r", encoding="utf-8") as f:
        abi = json.load(f)
    if not isinstance(abi, list):
        raise ValueError(f"ABI file {abi_path} must contain a JSON list")
    return abi


def _find_function(abi: Sequence[Dict[str, Any]], name: str) -> Dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == name:
            return entry
    raise ValueError(f"ABI has no function named {name}")


class RewardSubmission(BaseModel):
    """Decoded ``RewardSubmission`` struct."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    reward_index: int = Field(alias="rewardIndex")
    execution_block: int = Field(alias="executionBlock")
    consensus_block: int = Field(alias="consensusBlock")
    merkle_root: str = Field(alias="merkleRoot")
    merkle_tree_cid: str = Field(alias="merkleTreeCID")
    intervals_passed: int = Field(alias="intervalsPassed")
    treasury_rpl: int = Field(alias="treasuryRPL")
    trusted_node_rpl: List[int] = Field(alias="trustedNodeRPL")
    node_rpl: List[int] = Field(alias="nodeRPL")
    node_eth: List[int] = Field(alias="nodeETH")
    user_eth: int = Field(alias="userETH")

    @field_validator("merkle_root", mode="before")
    @classmethod
    def _root_to_hex(cls, value: Any) -> str:
        if isinstance(value, (bytes, bytearray)):
            if len(value) != 32:
                raise ValueError("merkleRoot must be 32 bytes")
            return "0x" + bytes(value).hex()
        if isinstance(value, str):
            return value.lower() if value.startswith("0x") else "0x" + value.lower()
        raise ValueError(f"unsupported merkleRoot value {value!r}")


class RewardSnapshotDecoder:
    """Strongly typed decoder for ``submitRewardSnapshot`` call-data."""

    def __init__(
        self,
        abi: Optional[Sequence[Dict[str, Any]]] = None,
        *,
        function_name: str = REWARD_SUBMISSION_FUNCTION,
    ) -> None:
        self.abi = list(abi) if abi is not None else load_rewards_pool_abi()
        self.function_name = function_name
        self._fn_abi = _find_function(self.abi, function_name)
        self._components = [c["name"] for c in self._fn_abi["inputs"][0].get("components", [])]
        self.selector = "0x" + function_abi_to_4byte_selector(self._fn_abi).hex()
        self._contract = Web3().eth.contract(abi=self.abi)

    def matches(self, call_data: Any) -> bool:
        if not isinstance(call_data, str):
            return False
        return call_data[:10].lower() == self.selector

    def decode(self, call_data: str) -> RewardSubmission:
        if not self.matches(call_data):
            raise CallDataDecodeError(
                f"call-data selector {str(call_data)[:10]!r} is not {self.function_name} ({self.selector})"
            )
        try:
            _, params = self._contract.decode_function_input(call_data)
        except DecodingError as exc:
            raise CallDataDecodeError(f"malformed {self.function_name} call-data: {exc}") from exc
        except Exception as exc:
            raise CallDataDecodeError(f"undecodable {self.function_name} call-data: {exc}") from exc

        if len(params) != 1:
            raise CallDataDecodeError(f"expected one argument, got {len(params)}")
        struct = next(iter(params.values()))
        if isinstance(struct, (list, tuple)):
            if len(struct) != len(self._components):
                raise CallDataDecodeError("submission tuple does not match ABI components")
            struct = dict(zip(self._components, struct))
        if not isinstance(struct, dict):
            raise CallDataDecodeError(f"unexpected decoded argument type {type(struct).__name__}")
        try:
            return RewardSubmission.model_validate(struct)
        except ValueError as exc:
            raise CallDataDecodeError(f"decoded submission failed validation: {exc}") from exc

    def merkle_root(self, call_data: str) -> str:
        return self.decode(call_data).merkle_root


__all__ = [
    "REWARD_SUBMISSION_FUNCTION",
    "CallDataDecodeError",
    "RewardSubmission",
    "RewardSnapshotDecoder",
    "default_abi_path",
    "load_rewards_pool_abi",
]
