"""Normalization of raw chain transactions into oDAO submissions.

Pipeline:
1. Drop failed calls (isError != "0")
2. Drop reverted calls (txreceipt_status != "1")
3. Drop calls at or before ``now - window_seconds``
4. Drop calls that are not ``submitRewardSnapshot``
5. Decode the merkle root; records that fail to decode are skipped
6. Count roots, sort by timestamp (stable), resolve members, flag validity
"""

from __future__ import annotations

import time
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import bittensor as bt

from odao_guess.chain.abi import CallDataDecodeError, RewardSnapshotDecoder
from odao_guess.providers.etherscan.types import RawTransaction
from odao_guess.roster import Member, Roster

from .types import Submission

_default_decoder: Optional[RewardSnapshotDecoder] = None


def get_default_decoder() -> RewardSnapshotDecoder:
    global _default_decoder
    if _default_decoder is None:
        _default_decoder = RewardSnapshotDecoder()
    return _default_decoder


def _as_roster(members: Union[Roster, Iterable[Member]]) -> Roster:
    if isinstance(members, Roster):
        return members
    return Roster(members)


def _as_transaction(item: Union[RawTransaction, Dict[str, Any]]) -> Optional[RawTransaction]:
    if isinstance(item, RawTransaction):
        return item
    try:
        return RawTransaction.model_validate(item)
    except Exception as exc:
        bt.logging.debug({"normalize_skip_row": {"reason": "invalid_row", "error": str(exc)}})
        return None


def count_roots(roots: Iterable[str]) -> Counter:
    """Occurrences per merkle root, keyed in first-seen order."""
    return Counter(roots)


def normalize(
    raw_transactions: Iterable[Union[RawTransaction, Dict[str, Any]]],
    members: Union[Roster, Iterable[Member]],
    window_seconds: int,
    consensus_threshold: int,
    *,
    decoder: Optional[RewardSnapshotDecoder] = None,
    now: Optional[float] = None,
) -> List[Submission]:
    """Build the time-ordered submission list with consensus flags.

    Validity is recomputed from the whole input on every call.

    Args:
        raw_transactions: Etherscan txlist rows (models or raw dicts)
        members: oDAO roster used to name senders
        window_seconds: Rolling lookback window
        consensus_threshold: Submissions needed for a root to be valid
        decoder: Call-data decoder (defaults to the bundled ABI)
        now: Reference unix time (defaults to the current time)

    Returns:
        Submissions sorted ascending by timestamp
    """
    roster = _as_roster(members)
    decoder = decoder or get_default_decoder()
    cutoff = (time.time() if now is None else now) - window_seconds

    skipped: Counter = Counter()
    decoded: List[Tuple[RawTransaction, str]] = []
    for item in raw_transactions:
        tx = _as_transaction(item)
        if tx is None:
            skipped["invalid_row"] += 1
            continue
        if tx.failed:
            skipped["failed"] += 1
            continue
        if tx.reverted:
            skipped["reverted"] += 1
            continue
        if tx.timestamp <= cutoff:
            skipped["outside_window"] += 1
            continue
        if not decoder.matches(tx.input):
            skipped["other_function"] += 1
            continue
        try:
            root = decoder.merkle_root(tx.input)
        except CallDataDecodeError as exc:
            skipped["malformed_call_data"] += 1
            bt.logging.warning({"normalize_skip_tx": {"hash": tx.hash, "error": str(exc)}})
            continue
        decoded.append((tx, root))

    root_counts = count_roots(root for _, root in decoded)
    decoded.sort(key=lambda pair: pair[0].timestamp)

    submissions = [
        Submission(
            address=tx.from_address,
            timestamp=tx.timestamp,
            transaction_hash=tx.hash,
            merkle_root=root,
            member_id=roster.resolve(tx.from_address),
            valid=root_counts[root] >= consensus_threshold,
        )
        for tx, root in decoded
    ]
    bt.logging.debug(
        {
            "normalize_submissions": {
                "kept": len(submissions),
                "skipped": dict(skipped),
                "roots": dict(root_counts),
            }
        }
    )
    return submissions


__all__ = [
    "count_roots",
    "get_default_decoder",
    "normalize",
]
