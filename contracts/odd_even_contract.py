# contracts/odd_even_contract.py
# Odd/Even Game: open (commit), join, reveal, judge. One box per game.
# Words must be ASCII: Len counts bytes, and bytes equal characters only for ASCII.
from pyteal import *

# -------- Global keys --------
OWNER_KEY = Bytes("owner")        # bytes: creator addr, acts as judge
COST_KEY = Bytes("cost")          # uint: stake per player (microAlgos)
WAIT_KEY = Bytes("wait")          # uint: seconds before judge may settle
PCT_KEY = Bytes("pct")            # uint: judge reward, whole percent 0..100
N_GAMES_KEY = Bytes("n")          # uint: number of games opened

# -------- Box layout --------
GAME_PREFIX = Bytes("g")          # g + itob(i): fixed game record
EVEN_WORD_PREFIX = Bytes("e")     # e + itob(i): magicWordEven
ODD_WORD_PREFIX = Bytes("o")      # o + itob(i): magicWordOdd

PLAYER_ODD_OFFSET = 0
PLAYER_EVEN_OFFSET = 32
HASH_ODD_OFFSET = 64
GAME_COST_OFFSET = 96
START_TIME_OFFSET = 104
TOTAL_LENGTH_OFFSET = 112
SETTLED_OFFSET = 120
GAME_BOX_SIZE = 128


def game_box_name(index: int) -> bytes:
    return b"g" + index.to_bytes(8, "big")


def even_word_box_name(index: int) -> bytes:
    return b"e" + index.to_bytes(8, "big")


def odd_word_box_name(index: int) -> bytes:
    return b"o" + index.to_bytes(8, "big")


@Subroutine(TealType.none)
def assert_ascii(word: Expr) -> Expr:
    i = ScratchVar(TealType.uint64)
    return For(i.store(Int(0)), i.load() < Len(word), i.store(i.load() + Int(1))).Do(
        Assert(GetByte(word, i.load()) < Int(128))
    )


def approval_program() -> Expr:
    is_owner = Txn.sender() == App.globalGet(OWNER_KEY)
    cost = App.globalGet(COST_KEY)

    on_create = Seq(
        Assert(Txn.application_args.length() == Int(3)),
        Assert(Btoi(Txn.application_args[0]) > Int(0)),
        Assert(Btoi(Txn.application_args[2]) <= Int(100)),
        App.globalPut(OWNER_KEY, Txn.sender()),
        App.globalPut(COST_KEY, Btoi(Txn.application_args[0])),
        App.globalPut(WAIT_KEY, Btoi(Txn.application_args[1])),
        App.globalPut(PCT_KEY, Btoi(Txn.application_args[2])),
        App.globalPut(N_GAMES_KEY, Int(0)),
        Approve(),
    )

    # The stake is the payment placed right before the app call in the group.
    stake = Gtxn[Txn.group_index() - Int(1)]
    stake_paid = Seq(
        Assert(Txn.group_index() > Int(0)),
        Assert(stake.type_enum() == TxnType.Payment),
        Assert(stake.sender() == Txn.sender()),
        Assert(stake.receiver() == Global.current_application_address()),
        Assert(stake.amount() == cost),
        Assert(stake.close_remainder_to() == Global.zero_address()),
        Assert(stake.rekey_to() == Global.zero_address()),
    )

    def pay(receiver: Expr, amount: Expr) -> Expr:
        return Seq(
            InnerTxnBuilder.Begin(),
            InnerTxnBuilder.SetFields({
                TxnField.type_enum: TxnType.Payment,
                TxnField.receiver: receiver,
                TxnField.amount: amount,
                TxnField.fee: Int(0),  # caller covers inner fees by pooling
            }),
            InnerTxnBuilder.Submit(),
        )

    index = Btoi(Txn.application_args[1])
    game_key = Concat(GAME_PREFIX, Itob(index))
    even_key = Concat(EVEN_WORD_PREFIX, Itob(index))
    odd_key = Concat(ODD_WORD_PREFIX, Itob(index))

    player_odd = App.box_extract(game_key, Int(PLAYER_ODD_OFFSET), Int(32))
    player_even = App.box_extract(game_key, Int(PLAYER_EVEN_OFFSET), Int(32))
    hash_odd = App.box_extract(game_key, Int(HASH_ODD_OFFSET), Int(32))
    game_cost = Btoi(App.box_extract(game_key, Int(GAME_COST_OFFSET), Int(8)))
    start_time = Btoi(App.box_extract(game_key, Int(START_TIME_OFFSET), Int(8)))
    settled = Btoi(App.box_extract(game_key, Int(SETTLED_OFFSET), Int(8)))

    game_exists = Assert(index < App.globalGet(N_GAMES_KEY))
    joined_unsettled = Seq(
        Assert(settled == Int(0)),
        Assert(player_even != Global.zero_address()),
    )

    # ---- Methods ----

    # open(hash32)  [any, pays cost]  -> logs itob(index)
    commit_arg = Txn.application_args[1]
    new_index = ScratchVar(TealType.uint64)
    do_open = Seq(
        Assert(Txn.application_args.length() == Int(2)),
        stake_paid,
        Assert(Len(commit_arg) == Int(32)),
        new_index.store(App.globalGet(N_GAMES_KEY)),
        App.box_put(
            Concat(GAME_PREFIX, Itob(new_index.load())),
            Concat(
                Txn.sender(),
                Global.zero_address(),
                commit_arg,
                Itob(cost),
                Itob(Global.latest_timestamp()),
                Itob(Int(0)),
                Itob(Int(0)),
            ),
        ),
        App.globalPut(N_GAMES_KEY, new_index.load() + Int(1)),
        Log(Itob(new_index.load())),
        Approve(),
    )

    # join(index, word)  [game open, pays cost]
    even_word_arg = Txn.application_args[2]
    do_join = Seq(
        Assert(Txn.application_args.length() == Int(3)),
        game_exists,
        Assert(player_even == Global.zero_address()),
        assert_ascii(even_word_arg),
        stake_paid,
        App.box_replace(game_key, Int(PLAYER_EVEN_OFFSET), Txn.sender()),
        App.box_put(even_key, even_word_arg),
        Log(Bytes("join")),
        Approve(),
    )

    # reveal(index, word)  [player odd only]
    odd_word_arg = Txn.application_args[2]
    even_len = App.box_length(even_key)
    total_length = ScratchVar(TealType.uint64)
    do_reveal = Seq(
        Assert(Txn.application_args.length() == Int(3)),
        game_exists,
        Assert(Txn.sender() == player_odd),
        joined_unsettled,
        Assert(Sha256(odd_word_arg) == hash_odd),
        assert_ascii(odd_word_arg),
        even_len,
        Assert(even_len.hasValue()),
        total_length.store(Len(odd_word_arg) + even_len.value()),
        App.box_put(odd_key, odd_word_arg),
        App.box_replace(game_key, Int(TOTAL_LENGTH_OFFSET), Itob(total_length.load())),
        App.box_replace(game_key, Int(SETTLED_OFFSET), Itob(Int(1))),
        pay(
            If(total_length.load() % Int(2) == Int(1), player_odd, player_even),
            game_cost * Int(2),
        ),
        Log(Bytes("reveal")),
        Approve(),
    )

    # judge(index)  [owner only, after the waiting window]
    reward = ScratchVar(TealType.uint64)
    do_judge = Seq(
        Assert(Txn.application_args.length() == Int(2)),
        game_exists,
        Assert(is_owner),
        joined_unsettled,
        Assert(Global.latest_timestamp() - start_time > App.globalGet(WAIT_KEY)),
        reward.store(game_cost * Int(2) * App.globalGet(PCT_KEY) / Int(100)),
        App.box_replace(game_key, Int(SETTLED_OFFSET), Itob(Int(1))),
        pay(Txn.sender(), reward.load()),
        pay(player_even, game_cost * Int(2) - reward.load()),
        Log(Bytes("judge")),
        Approve(),
    )

    on_noop = Cond(
        [Txn.application_args[0] == Bytes("open"), do_open],
        [Txn.application_args[0] == Bytes("join"), do_join],
        [Txn.application_args[0] == Bytes("reveal"), do_reveal],
        [Txn.application_args[0] == Bytes("judge"), do_judge],
    )

    # No update or delete: escrow only leaves through reveal and judge.
    program = Cond(
        [Txn.application_id() == Int(0), on_create],
        [Txn.on_completion() == OnComplete.NoOp, on_noop],
        [Int(1), Reject()],
    )
    return program


def clear_state_program() -> Expr:
    return Approve()


if __name__ == "__main__":
    print(compileTeal(approval_program(), mode=Mode.Application, version=8))
