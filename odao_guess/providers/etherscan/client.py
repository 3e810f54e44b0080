from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import bittensor as bt
import httpx

from odao_guess.config.core import EtherscanSettings

from .types import RawTransaction

_NO_TRANSACTIONS = "no transactions found"


class EtherscanError(Exception):
    """Raised when Etherscan answers with an error payload."""

    pass


class EtherscanClient:
    """
    Async HTTP client for the Etherscan account API.

    - Single GET per call, bounded by a timeout
    - No automatic retries; callers decide when to refresh again
    - Rows that fail validation are skipped, not fatal
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        settings: Optional[EtherscanSettings] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or EtherscanSettings()
        self.api_key = api_key or self.settings.api_key or os.getenv("ETHERSCAN_API_KEY")
        timeout = timeout_seconds if timeout_seconds is not None else self.settings.timeout_seconds
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "EtherscanClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Public fetch helpers
    # ------------------------------------------------------------------
    async def fetch_transactions(self, address: Optional[str] = None) -> List[RawTransaction]:
        target = address or self.settings.contract_address
        params: Dict[str, Any] = {
            "module": "account",
            "action": "txlist",
            "address": target,
            "sort": "asc",
        }
        if self.settings.chain_id is not None:
            params["chainid"] = self.settings.chain_id
        bt.logging.debug({"etherscan_txlist_request": {"address": target}})
        payload = await self._get_json(params)
        txs = self._parse_transactions(payload)
        bt.logging.debug(
            {
                "etherscan_txlist_response": {
                    "address": target,
                    "raw_count": len(payload.get("result") or []) if isinstance(payload, dict) else 0,
                    "parsed_count": len(txs),
                }
            }
        )
        return txs

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _get_json(self, params: Dict[str, Any]) -> Any:
        if not self.api_key:
            raise EtherscanError("ETHERSCAN_API_KEY (or ODAO_GUESS_ETHERSCAN__API_KEY) is required to query Etherscan.")
        query = dict(params)
        query["apikey"] = self.api_key
        resp = await self._client.get(self.settings.base_url, params=query)
        resp.raise_for_status()
        return resp.json()

    def _parse_transactions(self, payload: Any) -> List[RawTransaction]:
        if not isinstance(payload, dict):
            raise EtherscanError(f"unexpected Etherscan payload type {type(payload).__name__}")
        result = payload.get("result")
        message = str(payload.get("message", ""))
        if not isinstance(result, list):
            raise EtherscanError(f"Etherscan error: {message or 'NOTOK'}: {result}")
        if payload.get("status") == "0" and not result and not message.lower().startswith(_NO_TRANSACTIONS):
            raise EtherscanError(f"Etherscan error: {message or 'NOTOK'}")

        txs: List[RawTransaction] = []
        for item in result:
            try:
                txs.append(RawTransaction.model_validate(item))
            except Exception as exc:
                bt.logging.debug({"etherscan_parse_tx_error": {"hash": _safe_hash(item), "error": str(exc)}})
        return txs


def _safe_hash(item: Any) -> Optional[str]:
    if isinstance(item, dict):
        value = item.get("hash")
        return str(value) if value is not None else None
    return None


__all__ = [
    "EtherscanClient",
    "EtherscanError",
]
