"""Game rules and thresholds.

All rule-related configuration lives here so that every player scoring the
same reveal against the same chain data gets the same result.

IMPORTANT: Changing these values changes the rules of the game. A guess
committed under one set of parameters must be scored under the same set.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class ConsensusParams(BaseModel):
    """oDAO consensus requirements."""

    threshold: int = Field(
        default=10,
        ge=1,
        le=64,
        description="Submissions that must agree on a merkle root before it is considered final. Also the guess length.",
    )


class WindowParams(BaseModel):
    """Time window for submission lookups."""

    window_days: int = Field(
        default=14,
        ge=1,
        le=90,
        description="Rolling lookback window for reward submissions (days). One rewards interval plus slack.",
    )

    @property
    def window_seconds(self) -> int:
        return self.window_days * 24 * 3600


class PointsParams(BaseModel):
    """Points awarded per guess position."""

    exact: Decimal = Field(
        default=Decimal("1"),
        ge=Decimal("0"),
        le=Decimal("10"),
        description="Points when the guessed member submitted at exactly that position.",
    )
    adjacent: Decimal = Field(
        default=Decimal("0.25"),
        ge=Decimal("0"),
        le=Decimal("10"),
        description="Points when the guessed member submitted one position earlier or later.",
    )


class SaltParams(BaseModel):
    """Random salt generation."""

    upper_bound: int = Field(
        default=10000,
        ge=2,
        le=2**63,
        description="Exclusive upper bound for generated salts.",
    )


class GameParams(BaseModel):
    """Master configuration for all game parameters."""

    consensus: ConsensusParams = Field(default_factory=ConsensusParams)
    window: WindowParams = Field(default_factory=WindowParams)
    points: PointsParams = Field(default_factory=PointsParams)
    salt: SaltParams = Field(default_factory=SaltParams)


# Default instance for easy import
DEFAULT_GAME_PARAMS = GameParams()


def get_game_params() -> GameParams:
    """Get game parameters. Overrides come from Settings.game."""
    return DEFAULT_GAME_PARAMS


__all__ = [
    "ConsensusParams",
    "WindowParams",
    "PointsParams",
    "SaltParams",
    "GameParams",
    "DEFAULT_GAME_PARAMS",
    "get_game_params",
]
