import time

import pytest
from algosdk.error import AlgodHTTPError
from algosdk.transaction import ApplicationNoOpTxn

from odd_even_client import OddEvenClient
from odd_even_commitment import commit
from odd_even_config import GameConfig
from odd_even_contract import even_word_box_name, game_box_name

pytestmark = pytest.mark.localnet

GAME_COST = 100_000
MAX_WAIT = 3
APP_FUNDING = 1_000_000

def balance(algod, address: str) -> int:
    return algod.account_info(address)["amount"]

def snapshot(algod, app, accounts, index=None):
    balances = {a.address: balance(algod, a.address) for a in accounts}
    balances[app.app_address] = balance(algod, app.app_address)
    return balances, app.game_count(), app.game(index) if index is not None else None

@pytest.fixture
def game_app(algod, accounts):
    owner = accounts[0]
    client = OddEvenClient.deploy(algod, owner, GameConfig(GAME_COST, MAX_WAIT, 5))
    client.fund_app(owner, APP_FUNDING)
    return client

@pytest.fixture
def joined(game_app, accounts):
    _, odd, even = accounts
    index = game_app.open_game(odd, commit("hello"), GAME_COST)
    game_app.join_game(even, index, "world", GAME_COST)
    return index

def test_open_with_wrong_stake_is_rejected(algod, accounts, game_app):
    _, odd, _ = accounts
    before = snapshot(algod, game_app, accounts)
    for stake in (GAME_COST - 1, GAME_COST + 1):
        with pytest.raises(AlgodHTTPError):
            game_app.open_game(odd, commit("hello"), stake)
    assert snapshot(algod, game_app, accounts) == before
    assert game_app.list_games() == []

def test_join_with_wrong_stake_is_rejected(algod, accounts, game_app):
    _, odd, even = accounts
    index = game_app.open_game(odd, commit("hello"), GAME_COST)
    before = snapshot(algod, game_app, accounts, index)
    with pytest.raises(AlgodHTTPError):
        game_app.join_game(even, index, "world", GAME_COST - 1)
    assert snapshot(algod, game_app, accounts, index) == before
    assert game_app.game(index).player_even is None

def test_second_join_is_rejected(algod, accounts, game_app, joined):
    owner = accounts[0]
    before = snapshot(algod, game_app, accounts, joined)
    with pytest.raises(AlgodHTTPError):
        game_app.join_game(owner, joined, "again", GAME_COST)
    assert snapshot(algod, game_app, accounts, joined) == before

def test_non_ascii_join_is_rejected(algod, accounts, game_app):
    _, odd, even = accounts
    index = game_app.open_game(odd, commit("hello"), GAME_COST)
    before = snapshot(algod, game_app, accounts, index)

    # bypasses the client's own ASCII check
    call = ApplicationNoOpTxn(
        sender=even.address,
        sp=game_app._params(),
        index=game_app.app_id,
        app_args=[b"join", index.to_bytes(8, "big"), "wörld".encode("utf-8")],
        boxes=[(0, game_box_name(index)), (0, even_word_box_name(index))],
    )
    with pytest.raises(AlgodHTTPError):
        game_app._send(even, call, GAME_COST)
    assert snapshot(algod, game_app, accounts, index) == before

def test_reveal_by_player_even_is_rejected(algod, accounts, game_app, joined):
    _, _, even = accounts
    before = snapshot(algod, game_app, accounts, joined)
    with pytest.raises(AlgodHTTPError):
        game_app.reveal(even, joined, "hello")
    assert snapshot(algod, game_app, accounts, joined) == before

def test_reveal_with_wrong_word_is_rejected(algod, accounts, game_app, joined):
    _, odd, _ = accounts
    before = snapshot(algod, game_app, accounts, joined)
    with pytest.raises(AlgodHTTPError):
        game_app.reveal(odd, joined, "hellO")
    assert snapshot(algod, game_app, accounts, joined) == before
    assert not game_app.game(joined).settled

def test_reveal_settles_once(algod, accounts, game_app, joined):
    owner, odd, _ = accounts
    game_app.reveal(odd, joined, "hello")
    time.sleep(MAX_WAIT + 2)
    game_app.fund_app(owner, 100_000)  # fresh block for latest_timestamp

    before = snapshot(algod, game_app, accounts, joined)
    with pytest.raises(AlgodHTTPError):
        game_app.reveal(odd, joined, "hello")
    with pytest.raises(AlgodHTTPError):
        game_app.judge_settle(owner, joined)
    assert snapshot(algod, game_app, accounts, joined) == before

def test_judge_gating_on_localnet(algod, accounts, game_app, joined):
    owner, odd, _ = accounts

    before = snapshot(algod, game_app, accounts, joined)
    with pytest.raises(AlgodHTTPError):
        game_app.judge_settle(owner, joined)
    assert snapshot(algod, game_app, accounts, joined) == before

    time.sleep(MAX_WAIT + 2)
    game_app.fund_app(owner, 100_000)  # fresh block for latest_timestamp

    before = snapshot(algod, game_app, accounts, joined)
    with pytest.raises(AlgodHTTPError):
        game_app.judge_settle(odd, joined)
    assert snapshot(algod, game_app, accounts, joined) == before

    game_app.judge_settle(owner, joined)
    before = snapshot(algod, game_app, accounts, joined)
    with pytest.raises(AlgodHTTPError):
        game_app.judge_settle(owner, joined)
    with pytest.raises(AlgodHTTPError):
        game_app.reveal(odd, joined, "hello")
    assert snapshot(algod, game_app, accounts, joined) == before
