"""Tests for game/scoring.py - positional scoring with adjacent credit."""

from __future__ import annotations

from decimal import Decimal

import pytest

from odao_guess.config.game_params import GameParams, PointsParams
from odao_guess.game.scoring import (
    consensus_reached,
    ground_truth,
    score,
    valid_count,
    winning_root,
)
from odao_guess.game.types import Submission

K = 10


def make_sub(member_id: str, ts: int, root: str = "0xaa", valid: bool = True) -> Submission:
    return Submission(
        address="0x" + "00" * 20,
        timestamp=ts,
        transaction_hash=f"0x{ts:064x}",
        merkle_root=root,
        member_id=member_id,
        valid=valid,
    )


def truth_of(ids, root="0xaa"):
    return [make_sub(m, 1000 + i, root) for i, m in enumerate(ids)]


IDS = [f"m{i}" for i in range(K)]


class TestWinningRoot:
    """Tests for winning_root and ground_truth."""

    def test_none_without_submissions(self):
        assert winning_root([]) is None
        assert ground_truth([]) == []

    def test_most_common_root_wins(self):
        subs = [
            make_sub("a", 1, "0x01"),
            make_sub("b", 2, "0x02"),
            make_sub("c", 3, "0x02"),
        ]
        assert winning_root(subs) == "0x02"

    def test_tie_goes_to_earliest_seen_root(self):
        subs = [
            make_sub("a", 1, "0x02"),
            make_sub("b", 2, "0x01"),
            make_sub("c", 3, "0x01"),
            make_sub("d", 4, "0x02"),
        ]
        assert winning_root(subs) == "0x02"

    def test_tie_break_follows_list_order(self):
        subs = [
            make_sub("b", 1, "0x01"),
            make_sub("a", 2, "0x02"),
            make_sub("c", 3, "0x02"),
            make_sub("d", 4, "0x01"),
        ]
        assert winning_root(subs) == "0x01"

    def test_ground_truth_filters_to_winning_root_in_order(self):
        subs = [
            make_sub("a", 1, "0x01"),
            make_sub("x", 2, "0x09"),
            make_sub("b", 3, "0x01"),
        ]
        assert [s.member_id for s in ground_truth(subs)] == ["a", "b"]


class TestScore:
    """Tests for score()."""

    def test_identical_sequence_scores_k(self):
        card = score(IDS, truth_of(IDS), K)
        assert card.total == Decimal("10")
        assert all(e.score == Decimal("1") for e in card.entries)

    def test_shift_by_one_scores_quarter_per_position(self):
        guess = IDS[1:] + [IDS[0]]
        card = score(guess, truth_of(IDS), K)
        # positions 0..8 match truth[i+1]; the last guessed id sits at truth[0], not adjacent
        assert [e.score for e in card.entries] == [Decimal("0.25")] * (K - 1) + [Decimal("0")]
        assert card.total == Decimal("0.25") * (K - 1)

    def test_shift_right_scores_quarter_per_position(self):
        guess = ["zz"] + IDS[:-1]
        card = score(guess, truth_of(IDS), K)
        assert card.entries[0].score == Decimal("0")
        assert all(e.score == Decimal("0.25") for e in card.entries[1:])
        assert card.total == Decimal("2.25")

    def test_disjoint_guess_scores_zero(self):
        guess = [f"other{i}" for i in range(K)]
        card = score(guess, truth_of(IDS), K)
        assert card.total == Decimal("0")

    def test_swap_scenario(self):
        card = score(["A", "B", "C"], truth_of(["A", "C", "B"]), 3)
        assert [e.score for e in card.entries] == [Decimal("1"), Decimal("0.25"), Decimal("0.25")]
        assert card.total == Decimal("1.5")

    def test_pairing_is_positional_not_search(self):
        card = score(["C", "X", "A"], truth_of(["A", "B", "C", "D"]), 4)
        # C at 0 is two away from truth index 2; A at 2 is two away from truth index 0
        assert card.total == Decimal("0")

    def test_both_neighbours_match_only_quarter(self):
        card = score(["Q", "B", "Q"], truth_of(["B", "X", "B"]), 3)
        assert card.entries[1].score == Decimal("0.25")
        assert card.total == Decimal("0.25")

    def test_short_ground_truth_trailing_positions_score_zero(self):
        card = score(["A", "B", "C", "D"], truth_of(["A", "B"]), 4)
        assert [e.score for e in card.entries] == [Decimal("1"), Decimal("1"), Decimal("0"), Decimal("0")]
        assert card.entries[2].matched_submission is None
        assert card.entries[3].matched_submission is None

    def test_trailing_position_adjacent_to_last_truth_scores_zero(self):
        card = score(["A", "X", "B"], truth_of(["A", "B"]), 3)
        # B submitted at index 1, one away from guess index 2, but index 2 has no submission
        assert card.entries[2].matched_submission is None
        assert card.entries[2].score == Decimal("0")
        assert card.total == Decimal("1")

    def test_no_submissions(self):
        card = score(["A", "B"], [], 2)
        assert card.total == Decimal("0")
        assert card.winning_root is None
        assert card.ground_truth == ()
        assert card.is_final is False

    def test_empty_guess(self):
        card = score([], truth_of(["A"]), 1)
        assert card.entries == ()
        assert card.total == Decimal("0")

    def test_entries_carry_matched_submission(self):
        truth = truth_of(["A", "B"])
        card = score(["B", "A"], truth, 2)
        assert card.entries[0].matched_submission == truth[0]
        assert card.entries[0].guessed_id == "B"
        assert card.entries[1].position == 1

    def test_only_winning_root_counts(self):
        subs = [
            make_sub("X", 1, "0xbad"),
            make_sub("A", 2, "0xaa"),
            make_sub("B", 3, "0xaa"),
        ]
        card = score(["A", "B"], subs, 2)
        assert card.total == Decimal("2")
        assert card.winning_root == "0xaa"

    def test_custom_points(self):
        params = GameParams(points=PointsParams(exact=Decimal("3"), adjacent=Decimal("1")))
        card = score(["A", "C", "B"], truth_of(["A", "B", "C"]), 3, params=params)
        assert card.total == Decimal("5")


class TestConsensusStatus:
    """valid_count / is_final reporting."""

    def test_valid_count(self):
        subs = [make_sub("a", 1, valid=True), make_sub("b", 2, valid=False), make_sub("c", 3, valid=True)]
        assert valid_count(subs) == 2

    @pytest.mark.parametrize("n_valid,expected", [(K - 1, False), (K, True), (K + 2, True)])
    def test_consensus_reached(self, n_valid, expected):
        subs = [make_sub(f"m{i}", i) for i in range(n_valid)]
        assert consensus_reached(subs, K) is expected

    def test_score_card_provisional_before_consensus(self):
        subs = [make_sub(m, i, valid=False) for i, m in enumerate(IDS)]
        card = score(IDS, subs, K)
        assert card.valid_count == 0
        assert card.is_final is False
        assert card.total == Decimal("10")

    def test_score_card_final_at_threshold(self):
        card = score(IDS, truth_of(IDS), K)
        assert card.valid_count == K
        assert card.consensus_threshold == K
        assert card.is_final is True
