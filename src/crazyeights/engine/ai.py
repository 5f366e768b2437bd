from __future__ import annotations

from typing import Sequence

from .actions import DrawAction, Intent, PlayCardAction
from .rules import GameState, StepResult, choose_suit_for, playable_cards, step
from .types import Card, Suit

__all__ = ["ai_take_turn", "choose_move", "choose_suit_for", "next_intent"]


def choose_move(hand: Sequence[Card], top_discard: Card | None, active_suit: Suit | None) -> Intent:
    """Pick the computer's intent.

    Plays the first playable non-8 in hand order; an 8 only when it is the
    sole option. Draws when nothing is playable.
    """
    playable = playable_cards(hand, top_discard, active_suit)
    if not playable:
        return DrawAction(actor="computer")
    for card in playable:
        if not card.is_wild:
            return PlayCardAction(actor="computer", card=card)
    return PlayCardAction(actor="computer", card=playable[0])


def next_intent(state: GameState) -> Intent:
    # A card drawn this turn that can be played is played straight away.
    if state.drawn_card is not None:
        return PlayCardAction(actor="computer", card=state.drawn_card)
    return choose_move(state.hands["computer"], state.top_discard, state.active_suit)


def ai_take_turn(state: GameState) -> list[StepResult]:
    """Advance the game through the computer's whole turn, synchronously."""
    results: list[StepResult] = []
    while state.phase == "awaiting_player_move" and state.turn_owner == "computer":
        res = step(state, next_intent(state))
        results.append(res)
        if not res.ok:
            break
    return results
