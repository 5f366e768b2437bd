from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Suit = Literal["hearts", "diamonds", "clubs", "spades"]
Rank = Literal["A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"]

Actor = Literal["human", "computer"]
GamePhase = Literal[
    "not_started",
    "awaiting_player_move",
    "awaiting_suit_choice",
    "finished_won",
    "finished_lost",
]

SUITS: tuple[Suit, ...] = ("hearts", "diamonds", "clubs", "spades")
RANKS: tuple[Rank, ...] = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")

RANK_VALUES: dict[Rank, int] = {rank: i + 1 for i, rank in enumerate(RANKS)}

WILD_RANK: Rank = "8"

SUIT_SYMBOLS: dict[Suit, str] = {"hearts": "H", "diamonds": "D", "clubs": "C", "spades": "S"}


@dataclass(frozen=True)
class Card:
    """A playing card. Identity is the (rank, suit) pair."""

    suit: Suit
    rank: Rank

    @property
    def value(self) -> int:
        return RANK_VALUES[self.rank]

    @property
    def id(self) -> str:
        return f"{self.rank}-{self.suit}"

    @property
    def is_wild(self) -> bool:
        return self.rank == WILD_RANK

    @property
    def label(self) -> str:
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"


def other_actor(actor: Actor) -> Actor:
    return "computer" if actor == "human" else "human"
