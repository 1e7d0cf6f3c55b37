# contracts/odd_even_escrow.py
# In-process ledger: account balances plus the stake held per game.
import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from odd_even_errors import EscrowError, InsufficientFunds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Payout:
    """A single outgoing transfer from a game's escrow."""

    recipient: str
    amount: int
    reason: str  # "parity", "judge_reward", "timeout_win"


class Ledger:
    """Balances of every identity and the escrow of every game.

    Funds enter escrow through lock() and leave through release(), which
    drains a game's escrow exactly once. Nothing else moves escrowed funds.
    """

    def __init__(self, balances: Optional[Mapping[str, int]] = None) -> None:
        self._balances: Dict[str, int] = {}
        self._escrow: Dict[int, int] = {}
        self._released: set = set()
        for account, amount in (balances or {}).items():
            self.deposit(account, amount)

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def escrowed(self, game_index: int) -> int:
        return self._escrow.get(game_index, 0)

    @property
    def total_escrowed(self) -> int:
        return sum(self._escrow.values())

    def deposit(self, account: str, amount: int) -> None:
        """Credit an account from outside the game (funding)."""
        if amount < 0:
            raise ValueError("Cannot deposit a negative amount")
        self._balances[account] = self.balance_of(account) + amount
        logger.debug("Deposit: %s +%s -> %s", account, amount, self._balances[account])

    def can_afford(self, account: str, amount: int) -> bool:
        return amount >= 0 and self.balance_of(account) >= amount

    def lock(self, game_index: int, payer: str, amount: int) -> None:
        """Move a stake from the payer into the game's escrow."""
        if amount < 0:
            raise ValueError("Cannot escrow a negative amount")
        if game_index in self._released:
            raise EscrowError(f"Escrow for game {game_index} was already released")
        if not self.can_afford(payer, amount):
            raise InsufficientFunds(
                f"{payer} has {self.balance_of(payer)}, needs {amount} for game {game_index}"
            )
        self._balances[payer] = self.balance_of(payer) - amount
        self._escrow[game_index] = self.escrowed(game_index) + amount
        logger.debug(
            "Escrow lock: game=%s payer=%s amount=%s held=%s",
            game_index,
            payer,
            amount,
            self._escrow[game_index],
        )

    def release(self, game_index: int, payouts: Sequence[Payout]) -> None:
        """Pay out a game's entire escrow, or nothing at all."""
        if game_index in self._released:
            raise EscrowError(f"Escrow for game {game_index} was already released")
        held = self.escrowed(game_index)
        if any(p.amount < 0 for p in payouts):
            raise EscrowError(f"Negative payout for game {game_index}: {list(payouts)}")
        total = sum(p.amount for p in payouts)
        if total != held:
            raise EscrowError(f"Payouts for game {game_index} total {total}, escrow holds {held}")

        for p in payouts:
            self._balances[p.recipient] = self.balance_of(p.recipient) + p.amount
            logger.debug("Escrow release: game=%s -> %s +%s (%s)", game_index, p.recipient, p.amount, p.reason)
        self._escrow[game_index] = 0
        self._released.add(game_index)
