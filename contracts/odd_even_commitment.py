# contracts/odd_even_commitment.py
# Commit-reveal helpers shared by the Python registry and the LocalNet client.
import hashlib

COMMITMENT_SIZE = 32


def word_bytes(word: str) -> bytes:
    """Canonical byte encoding of a magic word."""
    return word.encode("utf-8")


def commit(word: str) -> bytes:
    """sha256 commitment of a word; matches the contract's Sha256 over the raw arg."""
    return hashlib.sha256(word_bytes(word)).digest()


def commit_hex(word: str) -> str:
    return commit(word).hex()


def matches(word: str, commitment: bytes) -> bool:
    return commit(word) == bytes(commitment)
