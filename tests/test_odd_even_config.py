import json

import pytest

from odd_even_config import LOCALNET_TOKEN, GameConfig, NetworkConfig, load_game_config, resolve_game_config
from odd_even_errors import ConfigurationError

def test_defaults_match_deployment():
    cfg = GameConfig()
    assert cfg.game_cost == 1_000
    assert cfg.max_waiting_time == 3600
    assert cfg.judge_reward_percentage == 5
    assert cfg.validate() is cfg

def test_load_missing_file_uses_defaults(tmp_path):
    assert load_game_config(tmp_path / "nope.json") == GameConfig()

def test_load_from_json(tmp_path):
    path = tmp_path / "game.json"
    path.write_text(json.dumps({"game_cost": 5000, "max_waiting_time": 3}), encoding="utf-8")
    assert load_game_config(path) == GameConfig(game_cost=5000, max_waiting_time=3, judge_reward_percentage=5)

@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"game_cost": "lots"}', '{"judge_reward_percentage": 250}'])
def test_load_rejects_bad_files(tmp_path, content):
    path = tmp_path / "game.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_game_config(path)

def test_from_env(monkeypatch):
    monkeypatch.setenv("ODD_EVEN_GAME_COST", "2500")
    monkeypatch.setenv("ODD_EVEN_MAX_WAITING_TIME", "60")
    monkeypatch.setenv("ODD_EVEN_JUDGE_REWARD_PERCENTAGE", "10")
    assert GameConfig.from_env() == GameConfig(2500, 60, 10)

def test_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("ODD_EVEN_GAME_COST", "cheap")
    with pytest.raises(ConfigurationError):
        GameConfig.from_env()

def test_network_from_env(monkeypatch):
    for var in ("ALGOD_LOCAL", "ALGOD_LOCAL_TOKEN", "KMD_LOCAL", "KMD_LOCAL_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    assert NetworkConfig.from_env() == NetworkConfig()

    monkeypatch.setenv("ALGOD_LOCAL", "http://algod:4001")
    monkeypatch.setenv("ALGOD_LOCAL_TOKEN", "t" * 64)
    net = NetworkConfig.from_env()
    assert net.algod_address == "http://algod:4001"
    assert net.kmd_token == "t" * 64
    assert NetworkConfig().algod_token == LOCALNET_TOKEN

def test_resolve_prefers_config_file(monkeypatch, tmp_path):
    path = tmp_path / "deploy.json"
    path.write_text(json.dumps({"game_cost": 7000, "max_waiting_time": 10, "judge_reward_percentage": 2}),
                    encoding="utf-8")
    monkeypatch.setenv("ODD_EVEN_CONFIG", str(path))
    monkeypatch.setenv("ODD_EVEN_GAME_COST", "2500")
    assert resolve_game_config() == GameConfig(7000, 10, 2)

def test_resolve_falls_back_to_env(monkeypatch):
    monkeypatch.delenv("ODD_EVEN_CONFIG", raising=False)
    monkeypatch.setenv("ODD_EVEN_GAME_COST", "2500")
    assert resolve_game_config().game_cost == 2500
