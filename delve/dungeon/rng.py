"""Seeded random source shared by every generation phase.

Wraps :class:`random.Random` so each run owns an isolated stream. Two sources
built from the same seed yield identical sequences, which is what makes a
whole generation a pure function of (settings, seed).
"""
from __future__ import annotations

import hashlib
import random
from typing import MutableSequence, Sequence, Tuple, TypeVar

T = TypeVar("T")


def derive_seed(seed: int, label: str) -> int:
    """Stable child seed for ``label``; independent of PYTHONHASHSEED."""
    digest = hashlib.sha256(f"{seed}:{label}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


class RandomSource:
    def __init__(self, seed: int):
        self.seed = seed
        self._rng = random.Random(seed)

    def next(self) -> float:
        """Float in [0, 1)."""
        return self._rng.random()

    def next_int(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi] inclusive; reversed bounds are swapped."""
        lo, hi = int(lo), int(hi)
        if lo > hi:
            lo, hi = hi, lo
        return self._rng.randint(lo, hi)

    def chance(self, probability: float) -> bool:
        return self._rng.random() < probability

    def choice(self, items: Sequence[T]) -> T:
        return items[self._rng.randrange(len(items))]

    def shuffle(self, items: MutableSequence[T]) -> None:
        self._rng.shuffle(items)

    def weighted_choice(self, options: Sequence[Tuple[T, float]]) -> T:
        total = sum(weight for _, weight in options)
        roll = self._rng.random() * total
        for value, weight in options:
            roll -= weight
            if roll < 0:
                return value
        return options[-1][0]


__all__ = ["RandomSource", "derive_seed"]
