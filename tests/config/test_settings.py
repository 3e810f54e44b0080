"""Tests for config/core.py and config/game_params.py."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from odao_guess.config import core
from odao_guess.config.core import (
    ROCKET_REWARDS_POOL_ADDRESS,
    EtherscanSettings,
    last_yaml_path,
    load_settings,
    sanitize_dict,
)
from odao_guess.config.game_params import ConsensusParams, GameParams, WindowParams


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.setattr(core, "_last_yaml_path", None)
    monkeypatch.delenv("ODAO_GUESS_CONFIG", raising=False)
    for name in (
        "ODAO_GUESS_ETHERSCAN__API_KEY",
        "ODAO_GUESS_ETHERSCAN__CHAIN_ID",
        "ODAO_GUESS_GAME__CONSENSUS__THRESHOLD",
        "ODAO_GUESS_TEST_MODE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_settings_defaults(self):
        settings = load_settings()
        assert settings.etherscan.base_url == "https://api.etherscan.io/v2/api"
        assert settings.etherscan.chain_id == 1
        assert settings.etherscan.contract_address == ROCKET_REWARDS_POOL_ADDRESS
        assert settings.game.consensus.threshold == 10
        assert settings.game.window.window_days == 14
        assert settings.game.points.exact == Decimal("1")
        assert settings.game.points.adjacent == Decimal("0.25")
        assert settings.test_mode is False

    def test_window_seconds(self):
        assert WindowParams(window_days=2).window_seconds == 172800


class TestEnvironment:
    def test_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("ODAO_GUESS_ETHERSCAN__API_KEY", "abc")
        monkeypatch.setenv("ODAO_GUESS_GAME__CONSENSUS__THRESHOLD", "5")
        monkeypatch.setenv("ODAO_GUESS_TEST_MODE", "true")

        settings = load_settings()

        assert settings.etherscan.api_key == "abc"
        assert settings.game.consensus.threshold == 5
        assert settings.test_mode is True


class TestYamlOverrides:
    def test_yaml_file_applied(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("game:\n  consensus:\n    threshold: 7\netherscan:\n  chain_id: 5\n")

        settings = load_settings(str(path))

        assert settings.game.consensus.threshold == 7
        assert settings.etherscan.chain_id == 5
        assert last_yaml_path() == str(path)

    def test_env_wins_over_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("game:\n  consensus:\n    threshold: 7\n")
        monkeypatch.setenv("ODAO_GUESS_GAME__CONSENSUS__THRESHOLD", "4")

        assert load_settings(str(path)).game.consensus.threshold == 4

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("game:\n  window:\n    window_days: 3\n")
        monkeypatch.setenv("ODAO_GUESS_CONFIG", str(path))

        assert load_settings().game.window.window_days == 3

    def test_missing_file_ignored(self, tmp_path):
        settings = load_settings(str(tmp_path / "absent.yaml"))
        assert settings.game.consensus.threshold == 10

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            load_settings(str(path))


class TestValidation:
    def test_threshold_bounds(self):
        with pytest.raises(ValidationError):
            ConsensusParams(threshold=0)
        with pytest.raises(ValidationError):
            GameParams(consensus={"threshold": 65})

    def test_contract_address_checked(self):
        with pytest.raises(ValidationError):
            EtherscanSettings(contract_address="0x1234")


def test_sanitize_dict_masks_keys():
    data = {"etherscan": {"api_key": "secret", "base_url": "https://x"}, "test_mode": False}
    clean = sanitize_dict(data)
    assert clean["etherscan"]["api_key"] == "***"
    assert clean["etherscan"]["base_url"] == "https://x"
    assert data["etherscan"]["api_key"] == "secret"


def test_sanitize_dict_leaves_empty_keys():
    assert sanitize_dict({"api_key": None}) == {"api_key": None}
