"""Command-line client for the oDAO treegen guessing game.

Commands:
    members      list the oDAO roster
    commit       hash a full guess with a salt and print the reveal link
    verify       check a revealed guess and salt against a published hash
    submissions  fetch and show the current reward snapshot submissions
    score        score a guess against the submissions
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import List, Optional, Sequence

import bittensor as bt
import yaml
from dotenv import load_dotenv

from odao_guess.config.core import Settings, load_settings, sanitize_dict
from odao_guess.game.commitment import verify_commitment
from odao_guess.game.feed import RefreshResult, SubmissionFeed
from odao_guess.game.query_state import decode_state, parse_query_string, to_query_string, verify_link
from odao_guess.game.scoring import consensus_reached, score
from odao_guess.game.session import GameSession, new_session
from odao_guess.game.types import QueryStateError, ScoreCard, Submission
from odao_guess.providers.etherscan.client import EtherscanClient
from odao_guess.roster import Roster, load_roster
from odao_guess.shared.formatting import format_points, format_timestamp, shorten
from odao_guess.shared.logging import redact_api_keys, setup_events_logger


class UsageError(Exception):
    pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="odao-guess", description="Rocket Pool oDAO treegen guessing game")
    parser.add_argument("--config", type=str, default=None, help="YAML settings file")
    parser.add_argument("--roster", type=str, default=None, help="oDAO roster JSON (rocketscan export)")
    parser.add_argument("--debug", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("members", help="List oDAO members")

    p_commit = sub.add_parser("commit", help="Hash a complete guess")
    p_commit.add_argument("--guess", required=True, help="Comma-separated member ids in predicted order")
    p_commit.add_argument("--salt", type=int, default=None)

    p_verify = sub.add_parser("verify", help="Check a guess and salt against a hash")
    p_verify.add_argument("--guess", required=True)
    p_verify.add_argument("--salt", type=int, required=True)
    p_verify.add_argument("--hash", dest="expected_hash", required=True)

    sub.add_parser("submissions", help="Show reward snapshot submissions")

    p_score = sub.add_parser("score", help="Score a guess against the submissions")
    p_score.add_argument("--guess", default=None)
    p_score.add_argument("--salt", type=int, default=None)
    p_score.add_argument("--link", default=None, help="Saved query string, e.g. '?guess=a,b&salt=12&verify=true'")
    return parser


def _split_guess(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _check_members(guess: Sequence[str], roster: Roster) -> None:
    unknown = [m for m in guess if m not in roster]
    if unknown:
        raise UsageError(f"unknown oDAO member(s): {', '.join(unknown)}")


def _session_from_args(args: argparse.Namespace, settings: Settings, roster: Roster) -> GameSession:
    threshold = settings.game.consensus.threshold
    try:
        if getattr(args, "link", None):
            session = decode_state(parse_query_string(args.link.split("?", 1)[-1]), threshold)
        else:
            session = new_session(threshold, salt=args.salt, guess=_split_guess(args.guess or ""))
    except (QueryStateError, ValueError) as exc:
        raise UsageError(str(exc)) from exc
    _check_members(session.guess, roster)
    return session


def _events_logger(settings: Settings):
    if not settings.logging.events_dir:
        return None
    return setup_events_logger(settings.logging.events_dir, settings.logging.events_retention_bytes)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
def cmd_members(roster: Roster) -> int:
    for member in roster:
        print(f"{member.id:<28} {shorten(member.address)}  {member.url}")
    return 0


def cmd_commit(args: argparse.Namespace, settings: Settings, roster: Roster) -> int:
    session = _session_from_args(args, settings, roster)
    if not session.guess_complete:
        raise UsageError(
            f"select {session.remaining} more member{'s' if session.remaining != 1 else ''} "
            f"(a guess needs exactly {session.consensus_threshold})"
        )
    print(f"Hash: {session.commitment}")
    print(f"Salt: {session.salt}")
    print(f"Reveal link: {verify_link(session)}")
    print("Post the hash now. Keep the link private until the oDAO reaches consensus.")
    events = _events_logger(settings)
    if events is not None:
        events.event(f"commit hash={session.commitment} guess_len={len(session.guess)}")
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    guess = _split_guess(args.guess)
    if verify_commitment(guess, args.salt, args.expected_hash):
        print("Commitment matches.")
        return 0
    print("Commitment does NOT match.")
    return 1


def _print_submissions(submissions: Sequence[Submission], threshold: int) -> None:
    if not submissions:
        print("No submissions detected for this rewards period yet...")
        return
    print(f"{'Address':<22} {'Member':<24} {'Tx':<22} {'Time':<17} {'Merkle root':<22} Consensus")
    for s in submissions:
        print(
            f"{shorten(s.address):<22} {s.member_id:<24} {shorten(s.transaction_hash):<22} "
            f"{format_timestamp(s.timestamp):<17} {shorten(s.merkle_root):<22} {'Valid' if s.valid else 'Pending'}"
        )
    if consensus_reached(submissions, threshold):
        print("Consensus reached.")
    else:
        print("Results are pending until consensus is reached...")


def _print_score_card(session: GameSession, card: ScoreCard) -> None:
    print(f"Hash: {session.commitment or '(guess incomplete)'}")
    suffix = "" if card.is_final else " (not your final score until consensus is reached)"
    print(f"Score: {format_points(card.total)}{suffix}")
    print(f"{'#':>3} {'Your guess':<24} {'oDAO position':<24} Score")
    for entry in card.entries:
        actual = entry.matched_submission.member_id if entry.matched_submission else ""
        print(f"{entry.position + 1:>3} {entry.guessed_id:<24} {actual:<24} {format_points(entry.score)}")


async def _refresh(settings: Settings, roster: Roster) -> RefreshResult:
    async with EtherscanClient(settings=settings.etherscan) as client:
        feed = SubmissionFeed(client, roster, params=settings.game)
        return await feed.refresh()


def cmd_submissions(settings: Settings, roster: Roster) -> int:
    result = asyncio.run(_refresh(settings, roster))
    if not result.ok:
        print(f"Could not load submissions ({result.error}). Try again later.")
        return 1
    _print_submissions(result.submissions, settings.game.consensus.threshold)
    return 0


def cmd_score(args: argparse.Namespace, settings: Settings, roster: Roster) -> int:
    session = _session_from_args(args, settings, roster)
    if not session.guess:
        raise UsageError("a guess is required (--guess or --link)")
    result = asyncio.run(_refresh(settings, roster))
    if not result.ok:
        print(f"Could not load submissions ({result.error}). Try again later.")
        return 1
    card = score(session.guess, result.submissions, session.consensus_threshold, params=settings.game)
    _print_score_card(session, card)
    events = _events_logger(settings)
    if events is not None:
        events.event(
            f"score total={format_points(card.total)} final={card.is_final} "
            f"state={to_query_string({'guess': ','.join(session.guess), 'salt': str(session.salt)})}"
        )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    # Load .env if not in test mode
    if os.environ.get("ODAO_GUESS_TEST_MODE") != "true":
        load_dotenv()

    args = build_parser().parse_args(argv)
    redact_api_keys()

    try:
        settings = load_settings(args.config)
        if args.debug or settings.logging.level.upper() == "DEBUG":
            bt.logging.set_debug(True)
        bt.logging.debug({"cli_settings": sanitize_dict(settings.model_dump())})

        roster = load_roster(args.roster or settings.roster.path)
        if args.command == "members":
            return cmd_members(roster)
        if args.command == "commit":
            return cmd_commit(args, settings, roster)
        if args.command == "verify":
            return cmd_verify(args)
        if args.command == "submissions":
            return cmd_submissions(settings, roster)
        if args.command == "score":
            return cmd_score(args, settings, roster)
    except UsageError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except (OSError, ValueError, yaml.YAMLError) as exc:
        bt.logging.error({"cli_error": {"command": args.command, "error": str(exc)}})
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())
