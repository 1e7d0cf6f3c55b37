# contracts/odd_even_client.py
# algosdk client for the Odd/Even Game application on LocalNet.
import base64
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from algosdk import encoding, logic
from algosdk.error import AlgodHTTPError, KMDHTTPError
from algosdk.kmd import KMDClient
from algosdk.transaction import (
    ApplicationCreateTxn,
    ApplicationNoOpTxn,
    OnComplete,
    PaymentTxn,
    StateSchema,
    assign_group_id,
    wait_for_confirmation,
)
from algosdk.v2client.algod import AlgodClient

from build_contract import compile_programs
from odd_even_config import GameConfig, NetworkConfig
from odd_even_contract import (
    GAME_BOX_SIZE,
    GAME_COST_OFFSET,
    HASH_ODD_OFFSET,
    PLAYER_EVEN_OFFSET,
    PLAYER_ODD_OFFSET,
    SETTLED_OFFSET,
    START_TIME_OFFSET,
    TOTAL_LENGTH_OFFSET,
    even_word_box_name,
    game_box_name,
    odd_word_box_name,
)

logger = logging.getLogger(__name__)

# Globals: cost,wait,pct,n (uints) + owner (bytes) → 4/1
GLOBAL_SCHEMA = StateSchema(num_uints=4, num_byte_slices=1)
LOCAL_SCHEMA = StateSchema(num_uints=0, num_byte_slices=0)

MIN_TXN_FEE = 1_000
WAIT_ROUNDS = 10
ZERO_ADDRESS_BYTES = bytes(32)


@dataclass(frozen=True)
class LocalAccount:
    address: str
    private_key: str


@dataclass(frozen=True)
class GameRecord:
    """A game as stored in its boxes."""

    index: int
    player_odd: str
    player_even: Optional[str]
    hash_odd: bytes
    cost: int
    start_time: int
    total_length: int
    settled: bool
    magic_word_even: Optional[str] = None
    magic_word_odd: Optional[str] = None


def get_algod(net: Optional[NetworkConfig] = None) -> AlgodClient:
    net = net or NetworkConfig.from_env()
    return AlgodClient(net.algod_token, net.algod_address, headers={"X-Algo-API-Token": net.algod_token})


def get_kmd(net: Optional[NetworkConfig] = None) -> KMDClient:
    net = net or NetworkConfig.from_env()
    return KMDClient(net.kmd_token, net.kmd_address)


def localnet_accounts(kmd: KMDClient, count: int = 3) -> List[LocalAccount]:
    """Funded accounts from the first KMD wallet that unlocks."""
    wl = kmd.list_wallets()
    wallets = wl.get("wallets", []) if isinstance(wl, dict) else wl
    if not wallets:
        raise RuntimeError("No KMD wallets found in LocalNet")
    wallet_id = wallets[0]["id"]
    for pw in ["", "a", "testpassword"]:
        try:
            handle = kmd.init_wallet_handle(wallet_id, pw)
        except KMDHTTPError:
            continue
        try:
            addrs = list(kmd.list_keys(handle))
            while len(addrs) < count:
                addrs.append(kmd.generate_key(handle))
            return [LocalAccount(a, kmd.export_key(handle, pw, a)) for a in addrs[:count]]
        finally:
            kmd.release_wallet_handle(handle)
    raise RuntimeError("Could not unlock KMD wallet with '', 'a', or 'testpassword'")


def compile_program(algod: AlgodClient, source: str) -> bytes:
    return base64.b64decode(algod.compile(source)["result"])


def decode_game(index: int, raw: bytes, even_word: Optional[bytes] = None,
                odd_word: Optional[bytes] = None) -> GameRecord:
    if len(raw) != GAME_BOX_SIZE:
        raise ValueError(f"Game box {index} holds {len(raw)} bytes, expected {GAME_BOX_SIZE}")

    def field(offset: int, size: int) -> bytes:
        return raw[offset:offset + size]

    def uint(offset: int) -> int:
        return int.from_bytes(field(offset, 8), "big")

    even = field(PLAYER_EVEN_OFFSET, 32)
    return GameRecord(
        index=index,
        player_odd=encoding.encode_address(field(PLAYER_ODD_OFFSET, 32)),
        player_even=None if even == ZERO_ADDRESS_BYTES else encoding.encode_address(even),
        hash_odd=field(HASH_ODD_OFFSET, 32),
        cost=uint(GAME_COST_OFFSET),
        start_time=uint(START_TIME_OFFSET),
        total_length=uint(TOTAL_LENGTH_OFFSET),
        settled=uint(SETTLED_OFFSET) == 1,
        magic_word_even=even_word.decode("utf-8") if even_word is not None else None,
        magic_word_odd=odd_word.decode("utf-8") if odd_word is not None else None,
    )


def _itob(value: int) -> bytes:
    return value.to_bytes(8, "big")


def _require_ascii(word: str) -> bytes:
    # Lengths on chain are byte lengths
    if not word.isascii():
        raise ValueError(f"Magic words must be ASCII, got {word!r}")
    return word.encode("ascii")


class OddEvenClient:
    def __init__(self, algod: AlgodClient, app_id: int):
        self.algod = algod
        self.app_id = app_id

    @property
    def app_address(self) -> str:
        return logic.get_application_address(self.app_id)

    @classmethod
    def deploy(cls, algod: AlgodClient, creator: LocalAccount, config: GameConfig) -> "OddEvenClient":
        config.validate()
        approval_teal, clear_teal = compile_programs()
        create = ApplicationCreateTxn(
            sender=creator.address,
            sp=algod.suggested_params(),
            on_complete=OnComplete.NoOpOC,
            approval_program=compile_program(algod, approval_teal),
            clear_program=compile_program(algod, clear_teal),
            global_schema=GLOBAL_SCHEMA,
            local_schema=LOCAL_SCHEMA,
            app_args=[
                _itob(config.game_cost),
                _itob(config.max_waiting_time),
                _itob(config.judge_reward_percentage),
            ],
            note=b"odd-even-game create",
        )
        txid = algod.send_transaction(create.sign(creator.private_key))
        res = wait_for_confirmation(algod, txid, WAIT_ROUNDS * 2)
        app_id = res.get("application-index")
        if not app_id:
            raise RuntimeError(f"no app id in result: {res}")
        logger.info("Deployed Odd/Even Game app %s (%s)", app_id, config)
        return cls(algod, app_id)

    # ---- State ----

    def global_state(self) -> Dict[str, object]:
        info = self.algod.application_info(self.app_id)
        state = {}
        for kv in info["params"].get("global-state", []):
            key = base64.b64decode(kv["key"]).decode("utf-8")
            value = kv["value"]
            if value["type"] == 1:
                state[key] = base64.b64decode(value["bytes"])
            else:
                state[key] = value["uint"]
        return state

    def owner(self) -> str:
        return encoding.encode_address(self.global_state()["owner"])

    def game_count(self) -> int:
        return int(self.global_state().get("n", 0))

    def _box(self, name: bytes) -> Optional[bytes]:
        try:
            resp = self.algod.application_box_by_name(self.app_id, name)
        except AlgodHTTPError as e:
            if e.code == 404:
                return None
            raise
        return base64.b64decode(resp["value"])

    def game(self, index: int) -> GameRecord:
        raw = self._box(game_box_name(index))
        if raw is None:
            raise IndexError(f"No game at index {index}")
        return decode_game(index, raw, self._box(even_word_box_name(index)), self._box(odd_word_box_name(index)))

    def list_games(self) -> List[GameRecord]:
        return [self.game(i) for i in range(self.game_count())]

    # ---- Calls ----

    def fund_app(self, funder: LocalAccount, amount: int) -> None:
        """Cover the app account's minimum balance, which grows with every box."""
        pay = PaymentTxn(funder.address, self.algod.suggested_params(), self.app_address, amount)
        txid = self.algod.send_transaction(pay.sign(funder.private_key))
        wait_for_confirmation(self.algod, txid, WAIT_ROUNDS)

    def _send(self, signer: LocalAccount, call: ApplicationNoOpTxn, stake: Optional[int] = None) -> dict:
        if stake is None:
            txid = self.algod.send_transaction(call.sign(signer.private_key))
            return wait_for_confirmation(self.algod, txid, WAIT_ROUNDS)

        pay = PaymentTxn(signer.address, self.algod.suggested_params(), self.app_address, stake)
        pay, call = assign_group_id([pay, call])
        self.algod.send_transactions([pay.sign(signer.private_key), call.sign(signer.private_key)])
        return wait_for_confirmation(self.algod, call.get_txid(), WAIT_ROUNDS)

    def _params(self, inner_payments: int = 0):
        sp = self.algod.suggested_params()
        sp.flat_fee = True
        sp.fee = MIN_TXN_FEE * (1 + inner_payments)
        return sp

    def open_game(self, player: LocalAccount, commitment: bytes, stake: int) -> int:
        index = self.game_count()
        call = ApplicationNoOpTxn(
            sender=player.address,
            sp=self._params(),
            index=self.app_id,
            app_args=[b"open", commitment],
            boxes=[(0, game_box_name(index))],
        )
        res = self._send(player, call, stake)
        logged = int.from_bytes(base64.b64decode(res["logs"][-1]), "big")
        logger.info("Game %s opened by %s", logged, player.address)
        return logged

    def join_game(self, player: LocalAccount, index: int, word: str, stake: int) -> None:
        call = ApplicationNoOpTxn(
            sender=player.address,
            sp=self._params(),
            index=self.app_id,
            app_args=[b"join", _itob(index), _require_ascii(word)],
            boxes=[(0, game_box_name(index)), (0, even_word_box_name(index))],
        )
        self._send(player, call, stake)
        logger.info("Game %s joined by %s", index, player.address)

    def reveal(self, player: LocalAccount, index: int, word: str) -> None:
        game = self.game(index)
        call = ApplicationNoOpTxn(
            sender=player.address,
            sp=self._params(inner_payments=1),
            index=self.app_id,
            app_args=[b"reveal", _itob(index), _require_ascii(word)],
            accounts=[game.player_even] if game.player_even else None,
            boxes=[(0, game_box_name(index)), (0, even_word_box_name(index)), (0, odd_word_box_name(index))],
        )
        self._send(player, call)
        logger.info("Game %s revealed by %s", index, player.address)

    def judge_settle(self, judge: LocalAccount, index: int) -> None:
        game = self.game(index)
        call = ApplicationNoOpTxn(
            sender=judge.address,
            sp=self._params(inner_payments=2),
            index=self.app_id,
            app_args=[b"judge", _itob(index)],
            accounts=[game.player_even] if game.player_even else None,
            boxes=[(0, game_box_name(index))],
        )
        self._send(judge, call)
        logger.info("Game %s settled by judge %s", index, judge.address)
