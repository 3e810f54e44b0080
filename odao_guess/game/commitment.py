"""Commitments binding a ranked guess to a salt.

A commitment is published before the oDAO submits and revealed afterwards.
Anyone can recompute it: SHA-256 over the comma-joined member ids followed
by the decimal salt, hex encoded.
"""

from __future__ import annotations

import hashlib
import random
from typing import Optional, Sequence

from odao_guess.config.game_params import get_game_params


def commitment_preimage(guess: Sequence[str], salt: int) -> str:
    return ",".join(guess) + str(salt)


def commit(guess: Sequence[str], salt: int) -> str:
    """Compute the commitment hash for a guess and salt.

    No length check happens here; callers decide when a guess is complete
    enough to publish.

    Args:
        guess: Ranked member ids
        salt: Integer salt

    Returns:
        Hex-encoded SHA256 hash (64 characters)
    """
    return hashlib.sha256(commitment_preimage(guess, salt).encode("utf-8")).hexdigest()


def verify_commitment(guess: Sequence[str], salt: int, expected_hash: str) -> bool:
    """Check a revealed guess and salt against a published commitment."""
    expected = expected_hash.strip().lower()
    if expected.startswith("0x"):
        expected = expected[2:]
    return commit(guess, salt) == expected


def random_salt(rng: Optional[random.Random] = None, upper_bound: Optional[int] = None) -> int:
    """Draw a salt in ``[0, upper_bound)``."""
    bound = upper_bound if upper_bound is not None else get_game_params().salt.upper_bound
    source = rng or random.SystemRandom()
    return source.randrange(bound)


__all__ = [
    "commit",
    "commitment_preimage",
    "verify_commitment",
    "random_salt",
]
