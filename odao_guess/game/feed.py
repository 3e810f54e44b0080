"""Submission refresh cycle.

One refresh = one Etherscan request followed by a full re-normalization.
Refreshes are serialized so at most one request is outstanding, and every
failure is reported on the result instead of raised.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import bittensor as bt
import httpx

from odao_guess.chain.abi import RewardSnapshotDecoder
from odao_guess.config.game_params import GameParams, get_game_params
from odao_guess.providers.etherscan.client import EtherscanClient, EtherscanError
from odao_guess.roster import Roster

from .submissions import normalize
from .types import Submission


@dataclass(frozen=True)
class RefreshResult:
    submissions: Tuple[Submission, ...]
    ok: bool
    error: Optional[str] = None
    fetched_at: Optional[float] = None


class SubmissionFeed:
    """Fetches and normalizes reward submissions on demand."""

    def __init__(
        self,
        client: EtherscanClient,
        roster: Roster,
        *,
        params: GameParams | None = None,
        decoder: RewardSnapshotDecoder | None = None,
    ) -> None:
        self.client = client
        self.roster = roster
        self.params = params or get_game_params()
        self.decoder = decoder
        self._lock = asyncio.Lock()

    async def refresh(self, *, now: Optional[float] = None) -> RefreshResult:
        async with self._lock:
            try:
                raw = await self.client.fetch_transactions()
            except httpx.TimeoutException as exc:
                return self._failed("timeout", exc)
            except (httpx.HTTPError, EtherscanError, ValueError) as exc:
                return self._failed("fetch_error", exc)

            reference = time.time() if now is None else now
            submissions = normalize(
                raw,
                self.roster,
                self.params.window.window_seconds,
                self.params.consensus.threshold,
                decoder=self.decoder,
                now=reference,
            )
            bt.logging.info(
                {
                    "feed_refresh": {
                        "fetched": len(raw),
                        "submissions": len(submissions),
                        "valid": sum(1 for s in submissions if s.valid),
                    }
                }
            )
            return RefreshResult(submissions=tuple(submissions), ok=True, fetched_at=reference)

    def _failed(self, reason: str, exc: Exception) -> RefreshResult:
        message = str(exc) or type(exc).__name__
        bt.logging.warning({"feed_refresh_failed": {"reason": reason, "error": message}})
        return RefreshResult(submissions=(), ok=False, error=f"{reason}: {message}")


__all__ = ["RefreshResult", "SubmissionFeed"]
