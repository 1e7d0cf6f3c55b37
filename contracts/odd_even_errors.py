# contracts/odd_even_errors.py
# Exceptions raised by the Odd/Even game registry and its ledger.


class OddEvenGameError(Exception):
    """Base exception for the Odd/Even game."""


class ConfigurationError(OddEvenGameError, ValueError):
    """Raised when registry parameters are out of range or unreadable."""


class NoSuchGame(OddEvenGameError):
    """Raised when a game index is outside the game table."""


class InsufficientStake(OddEvenGameError):
    """Raised when the attached payment is not exactly the game cost."""


class InvalidCommitment(OddEvenGameError):
    """Raised when a commitment hash is not a 32-byte digest."""


class GameNotJoinable(OddEvenGameError):
    """Raised when join is attempted on a game outside the Open state."""


class AlreadyJoined(GameNotJoinable):
    """Raised when a game already has its second player."""


class GameNotJoined(OddEvenGameError):
    """Raised when reveal or judge settlement targets a game nobody joined."""


class Unauthorized(OddEvenGameError):
    """Raised when the caller lacks the role the operation requires."""


class InvalidReveal(OddEvenGameError):
    """Raised when a revealed word does not hash to the stored commitment."""


class WaitingPeriodNotExpired(OddEvenGameError):
    """Raised when the judge settles before the waiting window has passed."""


class AlreadySettled(OddEvenGameError):
    """Raised on any settlement attempt against a settled game."""


class InsufficientFunds(OddEvenGameError):
    """Raised when an account cannot cover the stake it is paying."""


class EscrowError(OddEvenGameError):
    """Raised when a release would not exactly drain a game's escrow."""
