from __future__ import annotations

from .actions import Action, ChooseSuitAction, DrawAction, PlayCardAction
from .rules import GameState
from .types import Card


def _card_id(c: Card | None) -> str | None:
    if c is None:
        return None
    return c.id


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlayCardAction):
        return {"type": "play", "actor": a.actor, "card_id": a.card.id}
    if isinstance(a, DrawAction):
        return {"type": "draw", "actor": a.actor}
    if isinstance(a, ChooseSuitAction):
        return {"type": "choose_suit", "suit": a.suit}
    raise TypeError(f"Not an action: {a!r}")


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game state."""
    return {
        "seed": state.seed,
        "phase": state.phase,
        "turn_owner": state.turn_owner,
        "active_suit": state.active_suit,
        "draw_pile": [c.id for c in state.draw_pile],
        "discard_pile": [c.id for c in state.discard_pile],
        "hands": {actor: [c.id for c in cards] for actor, cards in state.hands.items()},
        "drawn_card": _card_id(state.drawn_card),
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
