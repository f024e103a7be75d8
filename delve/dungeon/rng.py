"""Seeded pseudo-random stream shared by every generation stage.

Linear congruential generator. Every stochastic decision in the pipeline
draws from a single instance in a fixed order, so a seed reproduces the same
level on any interpreter version.
"""
from __future__ import annotations

import math
from typing import MutableSequence, Sequence, TypeVar

T = TypeVar("T")

MULTIPLIER = 9301
INCREMENT = 49297
MODULUS = 233280


class SeededRNG:
    __slots__ = ("seed", "state")

    def __init__(self, seed: int):
        self.seed = int(seed)
        self.state = self.seed

    def reseed(self, seed: int) -> None:
        """Restart the stream from `seed`; nothing of the old stream survives."""
        self.seed = int(seed)
        self.state = self.seed

    def random(self) -> float:
        self.state = (self.state * MULTIPLIER + INCREMENT) % MODULUS
        return self.state / MODULUS

    def random_int(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi)."""
        return math.floor(self.random() * (hi - lo)) + lo

    def chance(self, p: float) -> bool:
        return self.random() < p

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("choice from empty sequence")
        return seq[math.floor(self.random() * len(seq))]

    def shuffle(self, items: MutableSequence[T]) -> MutableSequence[T]:
        # Fisher-Yates, in place
        for i in range(len(items) - 1, 0, -1):
            j = math.floor(self.random() * (i + 1))
            items[i], items[j] = items[j], items[i]
        return items


__all__ = ["SeededRNG", "MULTIPLIER", "INCREMENT", "MODULUS"]
