from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .game_params import GameParams

ROCKET_REWARDS_POOL_ADDRESS = "0xA805d68b61956BC92d556F2bE6d18747adAeEe82"

_last_yaml_path: Optional[str] = None


class EtherscanSettings(BaseModel):
    api_key: Optional[str] = None
    base_url: str = "https://api.etherscan.io/v2/api"
    # Sent as ``chainid``; set to None for the legacy single-chain endpoint.
    chain_id: Optional[int] = 1
    contract_address: str = ROCKET_REWARDS_POOL_ADDRESS
    timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    @field_validator("contract_address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        if not (value.startswith("0x") and len(value) == 42):
            raise ValueError("contract_address must be a 0x-prefixed 20-byte hex address")
        return value


class RosterSettings(BaseModel):
    path: Optional[str] = None


class LoggingSettings(BaseModel):
    level: str = "INFO"
    events_dir: Optional[str] = None
    events_retention_bytes: int = Field(default=1_000_000, ge=1024)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ODAO_GUESS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    etherscan: EtherscanSettings = Field(default_factory=EtherscanSettings)
    roster: RosterSettings = Field(default_factory=RosterSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    game: GameParams = Field(default_factory=GameParams)
    test_mode: bool = False

    @model_validator(mode="before")
    @classmethod
    def _apply_yaml_overrides(cls, data: Any) -> Any:
        overrides = _load_yaml_overrides()
        if not overrides:
            return data
        if isinstance(data, dict):
            return _deep_merge(overrides, data)
        return data


def last_yaml_path() -> Optional[str]:
    return _last_yaml_path or os.getenv("ODAO_GUESS_CONFIG")


def _deep_merge(base: Dict[str, Any], top: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in top.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml_overrides() -> Dict[str, Any]:
    yaml_path = last_yaml_path()
    if not yaml_path:
        return {}
    path = Path(yaml_path).expanduser()
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    return data


def load_settings(yaml_path: Optional[str] = None) -> Settings:
    """Build settings from env vars (ODAO_GUESS_*) layered over an optional YAML file."""
    global _last_yaml_path
    if yaml_path is not None:
        _last_yaml_path = str(yaml_path)
    return Settings()


def sanitize_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Mask secrets before a settings dump is logged."""
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            out[key] = sanitize_dict(value)
        elif "key" in key.lower() and value:
            out[key] = "***"
        else:
            out[key] = value
    return out


__all__ = [
    "ROCKET_REWARDS_POOL_ADDRESS",
    "EtherscanSettings",
    "RosterSettings",
    "LoggingSettings",
    "Settings",
    "load_settings",
    "last_yaml_path",
    "sanitize_dict",
]
