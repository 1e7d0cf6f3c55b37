import pytest

from odd_even_app import OddEvenGame
from odd_even_escrow import Ledger
from support import EVEN, GAME_COST, JUDGE_PCT, MAX_WAIT, ODD, OWNER, START_BALANCE, STRANGER, FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger():
    return Ledger({OWNER: START_BALANCE, ODD: START_BALANCE, EVEN: START_BALANCE, STRANGER: START_BALANCE})


@pytest.fixture
def registry(ledger, clock):
    return OddEvenGame(OWNER, GAME_COST, MAX_WAIT, JUDGE_PCT, ledger=ledger, clock=clock)
