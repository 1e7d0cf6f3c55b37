# contracts/odd_even_settlement.py
# Winner and split computation for both settlement paths. Pure functions.
import logging
from typing import List

from odd_even_escrow import Payout

logger = logging.getLogger(__name__)

PERCENT = 100


def pot_of(cost: int) -> int:
    return 2 * cost


def parity_winner(player_odd: str, player_even: str, total_length: int) -> str:
    """Odd total pays the opener, even total pays the joiner."""
    return player_odd if total_length % 2 == 1 else player_even


def judge_reward(pot: int, judge_reward_percentage: int) -> int:
    """Judge's cut of a timed-out pot, truncated toward zero."""
    return pot * judge_reward_percentage // PERCENT


def reveal_payouts(player_odd: str, player_even: str, total_length: int, cost: int) -> List[Payout]:
    """The whole pot to the parity winner; the judge gets nothing."""
    winner = parity_winner(player_odd, player_even, total_length)
    pot = pot_of(cost)
    logger.debug("Reveal split: total_length=%s winner=%s pot=%s", total_length, winner, pot)
    return [Payout(recipient=winner, amount=pot, reason="parity")]


def timeout_payouts(judge: str, player_even: str, cost: int, judge_reward_percentage: int) -> List[Payout]:
    """Split a forfeited pot between the judge and the joiner.

    The truncation remainder stays in the joiner's share, so the payouts
    always add up to the full pot.
    """
    pot = pot_of(cost)
    reward = judge_reward(pot, judge_reward_percentage)
    winnings = pot - reward
    logger.debug(
        "Timeout split: pot=%s pct=%s reward=%s winnings=%s",
        pot,
        judge_reward_percentage,
        reward,
        winnings,
    )
    return [
        Payout(recipient=judge, amount=reward, reason="judge_reward"),
        Payout(recipient=player_even, amount=winnings, reason="timeout_win"),
    ]
