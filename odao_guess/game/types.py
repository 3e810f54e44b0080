"""Type definitions for the guessing game."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple


class GameError(Exception):
    """Base class for game errors."""

    pass


class QueryStateError(GameError):
    """Raised when persisted query state cannot be restored."""

    pass


# ─────────────────────────────────────────────────────────────────────────────
# Dataclasses for internal use
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Submission:
    """A decoded reward snapshot submission by one oDAO member."""

    address: str
    timestamp: int
    transaction_hash: str
    merkle_root: str
    member_id: str
    valid: bool


@dataclass(frozen=True)
class ScoredEntry:
    """Score for one guess position."""

    position: int
    guessed_id: str
    matched_submission: Optional[Submission]
    score: Decimal


@dataclass(frozen=True)
class ScoreCard:
    """Full scoring result for a guess.

    ``is_final`` is False until at least ``consensus_threshold`` submissions
    are valid; until then the total is provisional.
    """

    entries: Tuple[ScoredEntry, ...]
    total: Decimal
    winning_root: Optional[str]
    ground_truth: Tuple[Submission, ...]
    valid_count: int
    consensus_threshold: int
    is_final: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "is_final", self.valid_count >= self.consensus_threshold)


__all__ = [
    "GameError",
    "QueryStateError",
    "Submission",
    "ScoredEntry",
    "ScoreCard",
]
