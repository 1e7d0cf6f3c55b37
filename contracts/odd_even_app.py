"""
Odd/Even Game App (pure Python registry)

Two players stake the same amount. The opener commits to a secret word by
its sha256 hash, the joiner plays a word in the clear, and the opener then
reveals. An odd combined word length pays the opener, an even one pays the
joiner. If the opener never reveals, the owner acts as judge once the
waiting window has passed: the joiner takes the pot minus the judge's cut.

Notes:
- Same state machine as the PyTeal program in odd_even_contract.py; this
  one runs against an in-process Ledger and an injected clock.
- Every call either completes or raises with no change to games or funds.
"""
import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional

from odd_even_commitment import COMMITMENT_SIZE, matches
from odd_even_config import GameConfig
from odd_even_errors import (
    AlreadyJoined,
    AlreadySettled,
    GameNotJoined,
    InsufficientStake,
    InvalidCommitment,
    InvalidReveal,
    NoSuchGame,
    Unauthorized,
    WaitingPeriodNotExpired,
)
from odd_even_escrow import Ledger
from odd_even_settlement import pot_of, reveal_payouts, timeout_payouts

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def wall_clock() -> int:
    return int(time.time())


class GameState(Enum):
    OPEN = "open"
    JOINED = "joined"
    SETTLED = "settled"


@dataclass
class Game:
    player_odd: str
    hash_odd: bytes
    cost: int
    start_time: int
    player_even: Optional[str] = None
    magic_word_even: Optional[str] = None
    magic_word_odd: Optional[str] = None
    total_length: int = 0
    settled: bool = False

    @property
    def state(self) -> GameState:
        if self.settled:
            return GameState.SETTLED
        if self.player_even is None:
            return GameState.OPEN
        return GameState.JOINED

    @property
    def pot(self) -> int:
        return pot_of(self.cost)


class OddEvenGame:
    """Registry of Odd/Even games with a single owner acting as judge."""

    def __init__(
        self,
        owner: str,
        game_cost: int,
        max_waiting_time: int,
        judge_reward_percentage: int,
        ledger: Optional[Ledger] = None,
        clock: Optional[Clock] = None,
    ):
        self._config = GameConfig(
            game_cost=game_cost,
            max_waiting_time=max_waiting_time,
            judge_reward_percentage=judge_reward_percentage,
        ).validate()
        self._owner = owner
        self._games: List[Game] = []
        self.ledger = ledger if ledger is not None else Ledger()
        self._clock = clock or wall_clock
        logger.info(
            "Registry created: owner=%s cost=%s max_wait=%ss judge_pct=%s",
            owner,
            game_cost,
            max_waiting_time,
            judge_reward_percentage,
        )

    @classmethod
    def from_config(cls, owner: str, config: GameConfig, ledger: Optional[Ledger] = None,
                    clock: Optional[Clock] = None) -> "OddEvenGame":
        return cls(
            owner,
            config.game_cost,
            config.max_waiting_time,
            config.judge_reward_percentage,
            ledger=ledger,
            clock=clock,
        )

    # ---- Read-only parameters ----

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def game_cost(self) -> int:
        return self._config.game_cost

    @property
    def max_waiting_time(self) -> int:
        return self._config.max_waiting_time

    @property
    def judge_reward_percentage(self) -> int:
        return self._config.judge_reward_percentage

    def __len__(self) -> int:
        return len(self._games)

    # ---- Entry points ----

    def open(self, caller: str, commitment_hash: bytes, stake: int) -> int:
        """Start a game committed to commitment_hash. Returns its index."""
        self._require_stake(stake)
        if not isinstance(commitment_hash, (bytes, bytearray, memoryview)):
            raise InvalidCommitment(f"Commitment must be bytes, got {type(commitment_hash).__name__}")
        if len(commitment_hash) != COMMITMENT_SIZE:
            raise InvalidCommitment(
                f"Commitment must be {COMMITMENT_SIZE} bytes, got {len(commitment_hash)}"
            )

        # Record first: nothing may fail between taking the stake and appending.
        game = Game(
            player_odd=caller,
            hash_odd=bytes(commitment_hash),
            cost=self.game_cost,
            start_time=self._clock(),
        )
        index = len(self._games)
        self.ledger.lock(index, caller, stake)
        self._games.append(game)
        logger.info("Game %s opened by %s", index, caller)
        return index

    def join(self, caller: str, game_index: int, word: str, stake: int) -> None:
        """Take the even side of an open game, playing word in the clear."""
        game = self._get(game_index)
        if game.player_even is not None:
            raise AlreadyJoined(f"Game {game_index} was already joined by {game.player_even}")
        self._require_stake(stake)

        self.ledger.lock(game_index, caller, stake)
        game.player_even = caller
        game.magic_word_even = word
        logger.info("Game %s joined by %s", game_index, caller)

    def reveal(self, caller: str, game_index: int, word: str) -> str:
        """Open the commitment and settle on parity. Returns the winner."""
        game = self._get(game_index)
        if caller != game.player_odd:
            raise Unauthorized(f"Only player odd can reveal game {game_index}")
        self._require_joined(game_index, game)
        if not matches(word, game.hash_odd):
            raise InvalidReveal(f"Word does not match the commitment of game {game_index}")

        total_length = len(word) + len(game.magic_word_even)
        payouts = reveal_payouts(game.player_odd, game.player_even, total_length, game.cost)
        self.ledger.release(game_index, payouts)

        game.magic_word_odd = word
        game.total_length = total_length
        game.settled = True
        winner = payouts[0].recipient
        logger.info("Game %s revealed: total_length=%s winner=%s", game_index, total_length, winner)
        return winner

    def judge_settle(self, caller: str, game_index: int) -> None:
        """Forfeit a stalled opener once the waiting window has passed."""
        game = self._get(game_index)
        if caller != self._owner:
            raise Unauthorized(f"Only the judge can settle game {game_index}")
        self._require_joined(game_index, game)
        elapsed = self._clock() - game.start_time
        if elapsed <= self.max_waiting_time:
            raise WaitingPeriodNotExpired(
                f"Game {game_index} has waited {elapsed}s of {self.max_waiting_time}s"
            )

        payouts = timeout_payouts(self._owner, game.player_even, game.cost, self.judge_reward_percentage)
        self.ledger.release(game_index, payouts)
        game.settled = True
        logger.info("Game %s settled by judge after %ss", game_index, elapsed)

    def list(self) -> List[Game]:
        """Snapshot of every game, in creation order."""
        return [replace(g) for g in self._games]

    def game(self, game_index: int) -> Game:
        return replace(self._get(game_index))

    # ---- Checks ----

    def _get(self, game_index: int) -> Game:
        if not 0 <= game_index < len(self._games):
            raise NoSuchGame(f"No game at index {game_index} (have {len(self._games)})")
        return self._games[game_index]

    def _require_stake(self, stake: int) -> None:
        if stake != self.game_cost:
            raise InsufficientStake(f"You must pay exactly {self.game_cost} for the game, got {stake}")

    @staticmethod
    def _require_joined(game_index: int, game: Game) -> None:
        if game.settled:
            raise AlreadySettled(f"Game {game_index} is already settled")
        if game.player_even is None:
            raise GameNotJoined(f"Game {game_index} has no second player yet")
