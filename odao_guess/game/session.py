"""Explicit session state with pure update functions.

Every update returns a new ``GameSession``; nothing is mutated in place.
The commitment is cached on the session and recomputed only by updates
that change the guess or the salt.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Iterable, Optional, Tuple

from odao_guess.config.game_params import get_game_params

from .commitment import commit, random_salt
from .types import Submission


class Page(IntEnum):
    INSTRUCTIONS = 1
    SELECT = 2
    SUBMIT = 3
    VERIFY = 4


@dataclass(frozen=True)
class GameSession:
    consensus_threshold: int
    salt: int
    guess: Tuple[str, ...] = ()
    page: Page = Page.INSTRUCTIONS
    warning: str = ""
    submissions: Tuple[Submission, ...] = ()
    commitment: Optional[str] = None

    @property
    def guess_complete(self) -> bool:
        return len(self.guess) == self.consensus_threshold

    @property
    def remaining(self) -> int:
        return self.consensus_threshold - len(self.guess)


def _recommit(session: GameSession) -> GameSession:
    digest = commit(session.guess, session.salt) if session.guess_complete else None
    return replace(session, commitment=digest)


def new_session(
    consensus_threshold: Optional[int] = None,
    *,
    salt: Optional[int] = None,
    guess: Iterable[str] = (),
    page: Page = Page.INSTRUCTIONS,
    rng: Optional[random.Random] = None,
) -> GameSession:
    threshold = consensus_threshold or get_game_params().consensus.threshold
    guess_tuple = tuple(guess)
    if len(guess_tuple) > threshold:
        raise ValueError(f"guess has {len(guess_tuple)} members, at most {threshold} allowed")
    if len(set(guess_tuple)) != len(guess_tuple):
        raise ValueError("guess contains duplicate members")
    session = GameSession(
        consensus_threshold=threshold,
        salt=random_salt(rng) if salt is None else int(salt),
        guess=guess_tuple,
        page=page,
    )
    return _recommit(session)


def add_member(session: GameSession, member_id: str) -> GameSession:
    if session.guess_complete:
        return replace(
            session,
            warning=(
                f"You have reached {session.consensus_threshold} guesses which is the length required "
                "to reach consensus. Remove members before adding more."
            ),
        )
    if member_id in session.guess:
        return replace(
            session,
            warning=f'You have already selected this oDAO member "{member_id}". Remove them from your guess first.',
        )
    return _recommit(replace(session, guess=session.guess + (member_id,), warning=""))


def remove_member(session: GameSession, member_id: str) -> GameSession:
    guess = tuple(m for m in session.guess if m != member_id)
    return _recommit(replace(session, guess=guess, warning=""))


def move_member(session: GameSession, index: int, offset: int) -> GameSession:
    """Swap the member at ``index`` with the one ``offset`` places away, clamped to the ends."""
    if not 0 <= index < len(session.guess):
        raise IndexError(f"guess position {index} out of range")
    target = max(min(index + offset, len(session.guess) - 1), 0)
    guess = list(session.guess)
    guess[index], guess[target] = guess[target], guess[index]
    return _recommit(replace(session, guess=tuple(guess)))


def clear_guess(session: GameSession) -> GameSession:
    return _recommit(replace(session, guess=(), warning=""))


def set_salt(session: GameSession, salt: int) -> GameSession:
    return _recommit(replace(session, salt=int(salt)))


def set_page(session: GameSession, page: Page | int) -> GameSession:
    return replace(session, page=Page(page))


def with_submissions(session: GameSession, submissions: Iterable[Submission]) -> GameSession:
    """Replace the whole submission list in one step."""
    return replace(session, submissions=tuple(submissions))


__all__ = [
    "Page",
    "GameSession",
    "new_session",
    "add_member",
    "remove_member",
    "move_member",
    "clear_guess",
    "set_salt",
    "set_page",
    "with_submissions",
]
