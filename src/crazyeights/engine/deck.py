from __future__ import annotations

from typing import Protocol, Sequence, TypeVar

from .types import RANKS, SUITS, Card

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that can pick an int in [a, b]; `random.Random` qualifies."""

    def randint(self, a: int, b: int) -> int: ...


def build_deck() -> list[Card]:
    """Return the 52 cards, suit-major and rank-minor. No randomness."""
    return [Card(suit=suit, rank=rank) for suit in SUITS for rank in RANKS]


def shuffle(items: Sequence[T], rng: RandomSource) -> list[T]:
    """Fisher-Yates shuffle into a new list; `items` is left untouched."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out
