GAME_COST = 10 ** 15  # 0.001 in 18-decimal base units
MAX_WAIT = 3
JUDGE_PCT = 5
START_BALANCE = 10 ** 18

OWNER, ODD, EVEN, STRANGER = "judge", "alice", "bob", "mallory"


class FakeClock:
    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds
