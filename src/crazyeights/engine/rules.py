from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Literal, Sequence

from .actions import Action, ChooseSuitAction, DrawAction, PlayCardAction
from .deck import RandomSource, build_deck, shuffle
from .types import SUITS, Actor, Card, GamePhase, Suit, other_actor

Event = dict[str, object]

Outcome = Literal[
    "played",
    "won_game",
    "lost_game",
    "wild_pending_suit",
    "suit_chosen",
    "drawn_playable",
    "drawn_unplayable",
    "draw_pile_empty_turn_skipped",
    "illegal_move",
    "illegal_state",
]

HAND_SIZE = 8
FINISHED_PHASES: tuple[GamePhase, ...] = ("finished_won", "finished_lost")


class EngineError(RuntimeError):
    pass


class IllegalMove(EngineError):
    """The actor may not make this play or draw right now."""


class IllegalState(EngineError):
    """The operation is not valid in the current game phase."""


@dataclass
class StepResult:
    ok: bool
    outcome: Outcome
    events: list[Event]
    error: str | None = None
    card: Card | None = None


@dataclass
class GameState:
    seed: int | None = None
    draw_pile: list[Card] = field(default_factory=list)
    discard_pile: list[Card] = field(default_factory=list)
    hands: dict[Actor, list[Card]] = field(default_factory=lambda: {"human": [], "computer": []})
    active_suit: Suit | None = None
    turn_owner: Actor = "human"
    phase: GamePhase = "not_started"
    drawn_card: Card | None = None  # set while the drawer may still play it
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    @property
    def top_discard(self) -> Card | None:
        return self.discard_pile[-1] if self.discard_pile else None

    @property
    def finished(self) -> bool:
        return self.phase in FINISHED_PHASES

    def card_count(self) -> int:
        return (
            len(self.draw_pile)
            + len(self.discard_pile)
            + len(self.hands["human"])
            + len(self.hands["computer"])
        )


@dataclass(frozen=True)
class GameView:
    """Read-only snapshot handed to presentation."""

    human_hand: tuple[Card, ...]
    computer_hand: tuple[Card, ...]
    top_discard: Card | None
    active_suit: Suit | None
    draw_pile_count: int
    turn_owner: Actor
    phase: GamePhase
    drawn_card: Card | None = None

    @property
    def computer_hand_count(self) -> int:
        return len(self.computer_hand)


def view(state: GameState) -> GameView:
    return GameView(
        human_hand=tuple(state.hands["human"]),
        computer_hand=tuple(state.hands["computer"]),
        top_discard=state.top_discard,
        active_suit=state.active_suit,
        draw_pile_count=len(state.draw_pile),
        turn_owner=state.turn_owner,
        phase=state.phase,
        drawn_card=state.drawn_card,
    )


def can_play(card: Card, top_discard: Card | None, active_suit: Suit | None) -> bool:
    if top_discard is None:
        return False
    if card.is_wild:
        return True
    return card.suit == active_suit or card.rank == top_discard.rank


def playable_cards(hand: Sequence[Card], top_discard: Card | None, active_suit: Suit | None) -> list[Card]:
    return [c for c in hand if can_play(c, top_discard, active_suit)]


def choose_suit_for(hand: Sequence[Card]) -> Suit:
    """Suit the computer names after an 8: the most common suit left in `hand`.

    Ties go to the later suit in SUITS order.
    """
    counts: dict[Suit, int] = {s: 0 for s in SUITS}
    for card in hand:
        counts[card.suit] += 1
    best = SUITS[0]
    for suit in SUITS[1:]:
        if counts[best] <= counts[suit]:
            best = suit
    return best


def new_game(seed: int | None = None, rng: RandomSource | None = None) -> GameState:
    """Build, shuffle and deal a fresh game.

    `rng` is the only entropy source; when omitted a `random.Random(seed)`
    is used, so a given seed always produces the same deal.
    """
    source: RandomSource = rng if rng is not None else random.Random(seed)
    deck = shuffle(build_deck(), source)

    human = deck[:HAND_SIZE]
    computer = deck[HAND_SIZE : HAND_SIZE * 2]
    rest = deck[HAND_SIZE * 2 :]

    # Opening card is the first non-8; any leading 8s stay in the draw pile.
    first_index = next(i for i, c in enumerate(rest) if not c.is_wild)
    first = rest.pop(first_index)

    state = GameState(
        seed=seed,
        draw_pile=rest,
        discard_pile=[first],
        hands={"human": human, "computer": computer},
        active_suit=first.suit,
        turn_owner="human",
        phase="awaiting_player_move",
    )
    state.event_log.append({"type": "GAME_STARTED", "seed": seed, "first_discard": first.id})
    return state


def _require_turn(state: GameState, actor: Actor) -> None:
    if state.phase == "not_started":
        raise IllegalState("Game has not started.")
    if state.finished:
        raise IllegalState("Game is over.")
    if state.phase == "awaiting_suit_choice":
        raise IllegalState("A suit must be chosen first.")
    if actor != state.turn_owner:
        raise IllegalMove("Not your turn.")


def _pass_turn(state: GameState) -> None:
    state.drawn_card = None
    state.turn_owner = other_actor(state.turn_owner)
    state.event_log.append({"type": "TURN_PASSED", "player": state.turn_owner})


def _end_game(state: GameState, winner: Actor) -> None:
    state.drawn_card = None
    state.phase = "finished_won" if winner == "human" else "finished_lost"
    state.event_log.append({"type": "GAME_ENDED", "winner": winner})


def play_card(state: GameState, actor: Actor, card: Card) -> Outcome:
    _require_turn(state, actor)
    hand = state.hands[actor]
    if card not in hand:
        raise IllegalMove(f"{card.label} is not in the {actor} hand.")
    if not can_play(card, state.top_discard, state.active_suit):
        raise IllegalMove(f"{card.label} does not match the active suit or top rank.")

    hand.remove(card)
    state.discard_pile.append(card)
    state.drawn_card = None
    state.action_log.append(PlayCardAction(actor=actor, card=card))
    state.event_log.append({"type": "CARD_PLAYED", "player": actor, "card_id": card.id})

    if not hand:
        _end_game(state, actor)
        return "won_game" if actor == "human" else "lost_game"

    if card.is_wild:
        if actor == "human":
            state.phase = "awaiting_suit_choice"
            return "wild_pending_suit"
        suit = choose_suit_for(hand)
        state.active_suit = suit
        state.event_log.append({"type": "SUIT_CHOSEN", "player": actor, "suit": suit})
        _pass_turn(state)
        return "played"

    state.active_suit = card.suit
    _pass_turn(state)
    return "played"


def choose_suit(state: GameState, suit: Suit) -> Outcome:
    if state.phase != "awaiting_suit_choice":
        raise IllegalState("No suit choice is pending.")
    if suit not in SUITS:
        raise IllegalMove(f"Unknown suit: {suit}")

    state.active_suit = suit
    state.phase = "awaiting_player_move"
    state.action_log.append(ChooseSuitAction(suit=suit))
    state.event_log.append({"type": "SUIT_CHOSEN", "player": state.turn_owner, "suit": suit})
    _pass_turn(state)
    return "suit_chosen"


def draw_card(state: GameState, actor: Actor) -> tuple[Outcome, Card | None]:
    """Draw for `actor`.

    Drawing is accepted even when a legal play exists. An empty draw pile
    forfeits the turn; a playable drawn card keeps the turn with the drawer.
    """
    _require_turn(state, actor)
    state.action_log.append(DrawAction(actor=actor))

    if not state.draw_pile:
        state.event_log.append({"type": "TURN_SKIPPED", "player": actor, "reason": "draw_pile_empty"})
        _pass_turn(state)
        return "draw_pile_empty_turn_skipped", None

    card = state.draw_pile.pop()
    state.hands[actor].append(card)
    state.event_log.append({"type": "CARD_DRAWN", "player": actor, "card_id": card.id})

    if can_play(card, state.top_discard, state.active_suit):
        state.drawn_card = card
        return "drawn_playable", card
    _pass_turn(state)
    return "drawn_unplayable", card


def step(state: GameState, action: Action) -> StepResult:
    """Apply a single intent, reporting rejections as results.

    A rejected intent leaves `state` untouched.
    """
    before = len(state.event_log)
    card: Card | None = None
    try:
        if isinstance(action, PlayCardAction):
            outcome = play_card(state, action.actor, action.card)
        elif isinstance(action, DrawAction):
            outcome, card = draw_card(state, action.actor)
        elif isinstance(action, ChooseSuitAction):
            outcome = choose_suit(state, action.suit)
        else:
            return StepResult(ok=False, outcome="illegal_move", events=[], error="Unknown action.")
    except IllegalState as e:
        return StepResult(ok=False, outcome="illegal_state", events=[], error=str(e))
    except IllegalMove as e:
        return StepResult(ok=False, outcome="illegal_move", events=[], error=str(e))
    return StepResult(ok=True, outcome=outcome, events=state.event_log[before:], card=card)


def replay(seed: int, actions: Iterable[Action]) -> GameState:
    state = new_game(seed=seed)
    for a in actions:
        step(state, a)
        if state.finished:
            break
    return state

