"""On-chain data decoding."""

from .abi import (
    REWARD_SUBMISSION_FUNCTION,
    CallDataDecodeError,
    RewardSnapshotDecoder,
    RewardSubmission,
    load_rewards_pool_abi,
)

__all__ = [
    "REWARD_SUBMISSION_FUNCTION",
    "CallDataDecodeError",
    "RewardSnapshotDecoder",
    "RewardSubmission",
    "load_rewards_pool_abi",
]
