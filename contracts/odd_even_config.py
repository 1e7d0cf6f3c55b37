# contracts/odd_even_config.py
# Registry parameters and LocalNet endpoints.
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from odd_even_errors import ConfigurationError

logger = logging.getLogger(__name__)

LOCALNET_TOKEN = "a" * 64


@dataclass(frozen=True)
class GameConfig:
    """Constructor-time parameters of a registry.

    Amounts are integer base units (microAlgos on chain). The judge reward is
    a whole percent of the pot, 0 to 100.
    """

    game_cost: int = 1_000             # 0.001 Algo
    max_waiting_time: int = 60 * 60    # 1 hour
    judge_reward_percentage: int = 5

    def validate(self) -> "GameConfig":
        if self.game_cost <= 0:
            raise ConfigurationError(f"game_cost must be positive, got {self.game_cost}")
        if self.max_waiting_time < 0:
            raise ConfigurationError(f"max_waiting_time must be >= 0, got {self.max_waiting_time}")
        if not 0 <= self.judge_reward_percentage <= 100:
            raise ConfigurationError(
                f"judge_reward_percentage must be within 0..100, got {self.judge_reward_percentage}"
            )
        return self

    @classmethod
    def from_env(cls) -> "GameConfig":
        defaults = cls()
        try:
            cfg = cls(
                game_cost=int(os.getenv("ODD_EVEN_GAME_COST", defaults.game_cost)),
                max_waiting_time=int(os.getenv("ODD_EVEN_MAX_WAITING_TIME", defaults.max_waiting_time)),
                judge_reward_percentage=int(
                    os.getenv("ODD_EVEN_JUDGE_REWARD_PERCENTAGE", defaults.judge_reward_percentage)
                ),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid game config in environment: {e}") from e
        return cfg.validate()


def load_game_config(path: Path) -> GameConfig:
    """Read a GameConfig from JSON; a missing file yields the defaults."""
    if not path.exists():
        logger.warning("Game config not found at %s; using defaults", path)
        return GameConfig()
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Malformed game config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Game config {path} must hold a JSON object")

    defaults = GameConfig()
    try:
        cfg = GameConfig(
            game_cost=int(data.get("game_cost", defaults.game_cost)),
            max_waiting_time=int(data.get("max_waiting_time", defaults.max_waiting_time)),
            judge_reward_percentage=int(data.get("judge_reward_percentage", defaults.judge_reward_percentage)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value in game config {path}: {e}") from e
    logger.debug("Loaded game config from %s: %s", path, cfg)
    return cfg.validate()


def resolve_game_config() -> GameConfig:
    """ODD_EVEN_CONFIG names a JSON file; without it the ODD_EVEN_* variables apply."""
    path = os.getenv("ODD_EVEN_CONFIG")
    if path:
        return load_game_config(Path(path))
    return GameConfig.from_env()


@dataclass(frozen=True)
class NetworkConfig:
    algod_address: str = "http://localhost:4001"
    algod_token: str = LOCALNET_TOKEN
    kmd_address: str = "http://localhost:4002"
    kmd_token: str = LOCALNET_TOKEN

    @classmethod
    def from_env(cls) -> "NetworkConfig":
        algod_token = os.getenv("ALGOD_LOCAL_TOKEN", LOCALNET_TOKEN)
        return cls(
            algod_address=os.getenv("ALGOD_LOCAL", cls.algod_address),
            algod_token=algod_token,
            kmd_address=os.getenv("KMD_LOCAL", cls.kmd_address),
            kmd_token=os.getenv("KMD_LOCAL_TOKEN", algod_token),  # usually same in sandbox
        )
