from __future__ import annotations

from dataclasses import dataclass

from .types import Actor, Card, Suit


@dataclass(frozen=True)
class PlayCardAction:
    actor: Actor
    card: Card


@dataclass(frozen=True)
class DrawAction:
    actor: Actor


@dataclass(frozen=True)
class ChooseSuitAction:
    suit: Suit


Intent = PlayCardAction | DrawAction
Action = PlayCardAction | DrawAction | ChooseSuitAction
