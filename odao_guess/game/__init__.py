"""Guessing game core.

- Commitments over a ranked guess and a salt
- Normalization of reward snapshot transactions into submissions
- Positional scoring against the consensus submission order
- Session state and its query-string serialization
"""

from __future__ import annotations

from .commitment import commit, random_salt, verify_commitment
from .scoring import consensus_reached, ground_truth, score, winning_root
from .submissions import normalize
from .types import GameError, QueryStateError, ScoreCard, ScoredEntry, Submission

__all__ = [
    "commit",
    "random_salt",
    "verify_commitment",
    "consensus_reached",
    "ground_truth",
    "score",
    "winning_root",
    "normalize",
    "GameError",
    "QueryStateError",
    "ScoreCard",
    "ScoredEntry",
    "Submission",
]
