"""Reproducible pseudo-random sequence keyed by a string seed."""

import math
import struct


def _to_int32(value: int) -> int:
    """Wrap an integer into the signed 32-bit range."""
    value &= 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def hash_seed(seed: str) -> int:
    """
    Fold a seed string into a signed 32-bit accumulator.

    Uses acc = acc * 31 + code over the UTF-16 code units of the seed, so
    characters outside the BMP contribute their surrogate pair.
    """
    data = seed.encode("utf-16-le", "surrogatepass")
    acc = 0
    for (code,) in struct.iter_unpack("<H", data):
        acc = _to_int32(acc * 31 + code)
    return acc


class SeededSequence:
    """
    Deterministic float sequence in [0, 1).

    The same seed and the same number of next() calls always yield the same
    values; no external entropy is consulted.
    """

    def __init__(self, seed: str):
        self.seed = seed
        self._state: float = hash_seed(seed)
        self.calls = 0

    def next(self) -> float:
        """Advance the sequence and return its fractional part."""
        self._state = math.sin(self._state) * 10000
        self.calls += 1
        return self._state - math.floor(self._state)

    def skip(self, count: int) -> None:
        """Advance the sequence by count draws, discarding the values."""
        for _ in range(count):
            self.next()

    def __iter__(self):
        return self

    def __next__(self) -> float:
        return self.next()
