"""Shared fixtures: roster, decoder and synthetic reward snapshot transactions."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

import pytest
from eth_abi import encode
from eth_utils import function_abi_to_4byte_selector

from odao_guess.chain.abi import REWARD_SUBMISSION_FUNCTION, RewardSnapshotDecoder, load_rewards_pool_abi
from odao_guess.roster import Member, Roster

NOW = 1_700_000_000
WINDOW_SECONDS = 14 * 24 * 3600

SUBMISSION_TUPLE_TYPE = (
    "(uint256,uint256,uint256,bytes32,string,uint256,uint256,uint256[],uint256[],uint256[],uint256)"
)


def _address(n: int) -> str:
    return "0x" + f"{n:040x}"


def _root(n: int) -> bytes:
    return n.to_bytes(32, "big")


@pytest.fixture
def roster() -> Roster:
    return Roster(
        Member(id=f"member-{i:02d}", address=_address(0xA0 + i), url=f"https://rocketscan.io/node/{_address(0xA0 + i)}")
        for i in range(1, 13)
    )


@pytest.fixture
def decoder() -> RewardSnapshotDecoder:
    return RewardSnapshotDecoder()


@pytest.fixture
def encode_call_data() -> Callable[..., str]:
    """Build submitRewardSnapshot call-data for a merkle root number."""
    fn_abi = next(e for e in load_rewards_pool_abi() if e.get("name") == REWARD_SUBMISSION_FUNCTION)
    selector = function_abi_to_4byte_selector(fn_abi)

    def _encode(root: int, reward_index: int = 42) -> str:
        submission = (
            reward_index,
            18_000_000,
            7_500_000,
            _root(root),
            "bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi",
            1,
            1000,
            [1, 2],
            [3, 4],
            [5, 6],
            7,
        )
        return "0x" + (selector + encode([SUBMISSION_TUPLE_TYPE], [submission])).hex()

    return _encode


@pytest.fixture
def make_tx(roster: Roster, encode_call_data) -> Callable[..., Dict[str, Any]]:
    """Etherscan txlist row from member index, root number and seconds before NOW."""
    members: List[Member] = list(roster)
    counter = {"n": 0}

    def _make(
        member: int,
        root: int = 1,
        age: int = 3600,
        *,
        is_error: str = "0",
        status: str = "1",
        call_data: str | None = None,
        address: str | None = None,
    ) -> Dict[str, Any]:
        counter["n"] += 1
        return {
            "hash": "0x" + f"{counter['n']:064x}",
            "from": address or members[member].address,
            "to": "0xa805d68b61956bc92d556f2be6d18747adaeee82",
            "timeStamp": str(NOW - age),
            "isError": is_error,
            "txreceipt_status": status,
            "input": call_data if call_data is not None else encode_call_data(root),
            "functionName": "submitRewardSnapshot(tuple _submission)",
            "blockNumber": "18000000",
        }

    return _make


def root_hex(n: int) -> str:
    return "0x" + _root(n).hex()


@pytest.fixture
def now() -> int:
    return NOW


@pytest.fixture
def window_seconds() -> int:
    return WINDOW_SECONDS


@pytest.fixture(name="root_hex")
def root_hex_fixture() -> Callable[[int], str]:
    return root_hex
