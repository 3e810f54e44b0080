"""oDAO member roster.

The roster is static reference data: the list of trusted nodes allowed to
submit reward snapshots, exported from rocketscan.io. It is loaded once and
never mutated.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import bittensor as bt
from pydantic import BaseModel, ConfigDict, field_validator

UNKNOWN_MEMBER_ID = "Unknown ODAO"


def default_roster_path() -> Path:
    return Path(__file__).resolve().parent / "data" / "odao.json"


class Member(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    address: str
    url: str = ""

    @field_validator("address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        if not value.startswith("0x"):
            raise ValueError(f"member address must be 0x-prefixed: {value!r}")
        return value


class Roster:
    """Immutable, id-sorted member list with case-insensitive address lookup."""

    def __init__(self, members: Iterable[Member]) -> None:
        ordered = sorted(members, key=lambda m: m.id)
        seen: set[str] = set()
        for member in ordered:
            if member.id in seen:
                raise ValueError(f"duplicate member id in roster: {member.id}")
            seen.add(member.id)
        self._members: Tuple[Member, ...] = tuple(ordered)
        self._by_id: Dict[str, Member] = {m.id: m for m in ordered}
        self._by_address: Dict[str, Member] = {m.address.lower(): m for m in ordered}

    @property
    def members(self) -> Tuple[Member, ...]:
        return self._members

    def ids(self) -> List[str]:
        return [m.id for m in self._members]

    def get(self, member_id: str) -> Optional[Member]:
        return self._by_id.get(member_id)

    def resolve(self, address: str) -> str:
        member = self._by_address.get(address.lower())
        if member is None:
            return UNKNOWN_MEMBER_ID
        return member.id

    def __contains__(self, member_id: object) -> bool:
        return member_id in self._by_id

    def __iter__(self) -> Iterator[Member]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)


def parse_roster(payload: Any) -> Roster:
    """Accept the rocketscan export (``oracle.members.members``) or a bare list."""
    if isinstance(payload, dict):
        try:
            payload = payload["oracle"]["members"]["members"]
        except (KeyError, TypeError) as exc:
            raise ValueError("roster payload missing oracle.members.members") from exc
    if not isinstance(payload, list):
        raise ValueError("roster payload must be a list of members")
    return Roster(Member.model_validate(item) for item in payload)


def load_roster(path: Optional[str | Path] = None) -> Roster:
    roster_path = Path(path) if path else default_roster_path()
    with roster_path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    roster = parse_roster(payload)
    bt.logging.debug({"roster_loaded": {"path": str(roster_path), "members": len(roster)}})
    return roster


__all__ = [
    "UNKNOWN_MEMBER_ID",
    "Member",
    "Roster",
    "default_roster_path",
    "parse_roster",
    "load_roster",
]
