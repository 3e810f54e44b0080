"""Scoring a ranked guess against the observed submission order.

Algorithm:
1. Winning root = merkle root with the most submissions. Ties go to the
   root that appears first in the time-ordered submission list.
2. Ground truth = submissions carrying the winning root, in time order.
3. Guess position i is paired with ground-truth position i.
4. Exact member at i scores the exact points; the member at i-1 or i+1
   scores the adjacent points; anything else scores zero. Positions past
   the end of ground truth have no submission and score zero.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from odao_guess.config.game_params import GameParams, get_game_params

from .submissions import count_roots
from .types import ScoreCard, ScoredEntry, Submission


def winning_root(submissions: Sequence[Submission]) -> Optional[str]:
    """Most common merkle root; earliest-seen root wins a tie."""
    if not submissions:
        return None
    counts = count_roots(s.merkle_root for s in submissions)
    best_root: Optional[str] = None
    best_count = 0
    # Counter keeps first-seen order, so a strict > keeps the earliest on ties.
    for root, count in counts.items():
        if count > best_count:
            best_root, best_count = root, count
    return best_root


def ground_truth(submissions: Sequence[Submission]) -> List[Submission]:
    root = winning_root(submissions)
    if root is None:
        return []
    return [s for s in submissions if s.merkle_root == root]


def valid_count(submissions: Sequence[Submission]) -> int:
    return sum(1 for s in submissions if s.valid)


def consensus_reached(submissions: Sequence[Submission], consensus_threshold: int) -> bool:
    return valid_count(submissions) >= consensus_threshold


def _member_at(truth: Sequence[Submission], index: int) -> Optional[str]:
    if 0 <= index < len(truth):
        return truth[index].member_id
    return None


def score_position(
    guessed_id: str,
    position: int,
    truth: Sequence[Submission],
    params: GameParams,
) -> Decimal:
    if position >= len(truth):
        return Decimal("0")
    if guessed_id == truth[position].member_id:
        return params.points.exact
    if guessed_id in (_member_at(truth, position - 1), _member_at(truth, position + 1)):
        return params.points.adjacent
    return Decimal("0")


def score(
    guess: Sequence[str],
    submissions: Sequence[Submission],
    consensus_threshold: int,
    *,
    params: GameParams | None = None,
) -> ScoreCard:
    """Score a guess against the consensus-ordered submissions.

    Args:
        guess: Ranked member ids
        submissions: Normalized submissions in time order
        consensus_threshold: K, used to report whether the result is final
        params: Game parameters (uses defaults if None)

    Returns:
        ScoreCard with per-position entries and the total
    """
    params = params or get_game_params()
    truth = ground_truth(submissions)

    entries: List[ScoredEntry] = []
    for position, guessed_id in enumerate(guess):
        entries.append(
            ScoredEntry(
                position=position,
                guessed_id=guessed_id,
                matched_submission=truth[position] if position < len(truth) else None,
                score=score_position(guessed_id, position, truth, params),
            )
        )

    return ScoreCard(
        entries=tuple(entries),
        total=sum((e.score for e in entries), Decimal("0")),
        winning_root=truth[0].merkle_root if truth else None,
        ground_truth=tuple(truth),
        valid_count=valid_count(submissions),
        consensus_threshold=consensus_threshold,
    )


__all__ = [
    "winning_root",
    "ground_truth",
    "valid_count",
    "consensus_reached",
    "score_position",
    "score",
]
