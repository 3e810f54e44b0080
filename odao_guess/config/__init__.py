from .core import (
    ROCKET_REWARDS_POOL_ADDRESS,
    EtherscanSettings,
    LoggingSettings,
    RosterSettings,
    Settings,
    load_settings,
    sanitize_dict,
)
from .game_params import DEFAULT_GAME_PARAMS, GameParams, get_game_params

__all__ = [
    "ROCKET_REWARDS_POOL_ADDRESS",
    "EtherscanSettings",
    "LoggingSettings",
    "RosterSettings",
    "Settings",
    "load_settings",
    "sanitize_dict",
    "DEFAULT_GAME_PARAMS",
    "GameParams",
    "get_game_params",
]
