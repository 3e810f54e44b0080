"""Shareable query-string state: ``guess``, ``salt`` and ``verify``.

A player bookmarks the query string after committing; reopening it
restores the guess and salt so the commitment can be re-derived and the
guess scored.
"""

from __future__ import annotations

import random
from typing import Dict, Mapping, Optional
from urllib.parse import parse_qs, urlencode

from odao_guess.config.game_params import get_game_params

from .session import GameSession, Page, new_session
from .types import QueryStateError

GUESS_PARAM = "guess"
SALT_PARAM = "salt"
VERIFY_PARAM = "verify"


def encode_state(session: GameSession) -> Dict[str, str]:
    params: Dict[str, str] = {}
    if session.guess:
        params[GUESS_PARAM] = ",".join(session.guess)
    params[SALT_PARAM] = str(session.salt)
    return params


def to_query_string(params: Mapping[str, str]) -> str:
    if not params:
        return ""
    return "?" + urlencode(dict(params), safe=",")


def verify_link(session: GameSession, base_url: str = "") -> str:
    """Link that reopens the session straight on the verify page."""
    params = encode_state(session)
    params[VERIFY_PARAM] = "true"
    return f"{base_url}{to_query_string(params)}"


def parse_query_string(query: str) -> Dict[str, str]:
    parsed = parse_qs(query.lstrip("?"), keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items() if values}


def _derive_page(guess_length: int, consensus_threshold: int) -> Page:
    if guess_length == 0:
        return Page.INSTRUCTIONS
    if guess_length < consensus_threshold:
        return Page.SELECT
    return Page.SUBMIT


def decode_state(
    params: Mapping[str, str],
    consensus_threshold: Optional[int] = None,
    *,
    rng: Optional[random.Random] = None,
) -> GameSession:
    """Restore a session from query parameters.

    Raises:
        QueryStateError: If the salt is not a canonical integer (no plus sign,
            whitespace or leading zeros), the guess repeats a member, or the
            guess is longer than the consensus threshold
    """
    threshold = consensus_threshold or get_game_params().consensus.threshold

    raw_guess = params.get(GUESS_PARAM) or ""
    guess = [part.strip() for part in raw_guess.split(",") if part.strip()]
    if len(guess) > threshold:
        raise QueryStateError(f"guess has {len(guess)} members, at most {threshold} allowed")
    if len(set(guess)) != len(guess):
        raise QueryStateError("guess contains duplicate members")

    raw_salt = params.get(SALT_PARAM)
    salt: Optional[int] = None
    if raw_salt:
        try:
            salt = int(raw_salt)
        except ValueError as exc:
            raise QueryStateError(f"salt must be an integer, got {raw_salt!r}") from exc
        # The commitment hashes str(salt), so the link must carry that exact text.
        if str(salt) != raw_salt:
            raise QueryStateError(f"salt must be written in canonical form, got {raw_salt!r}")

    page = Page.VERIFY if params.get(VERIFY_PARAM) else _derive_page(len(guess), threshold)
    return new_session(threshold, salt=salt, guess=guess, page=page, rng=rng)


__all__ = [
    "GUESS_PARAM",
    "SALT_PARAM",
    "VERIFY_PARAM",
    "encode_state",
    "to_query_string",
    "verify_link",
    "parse_query_string",
    "decode_state",
]
