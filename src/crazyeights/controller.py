from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from crazyeights.engine.actions import ChooseSuitAction, DrawAction, PlayCardAction
from crazyeights.engine.game import CrazyEightsGame, Submission
from crazyeights.engine.rules import GameView
from crazyeights.engine.types import Card, Suit
from crazyeights.services.telemetry import TelemetryService

Listener = Callable[[Submission], None]


@dataclass
class PendingAction:
    generation: int
    remaining: float


class TurnScheduler:
    """Drives turn order between human input and the computer opponent.

    Computer moves are delayed so they are perceptible. Each pending move is
    tagged with the game generation it was scheduled in and is dropped if a
    new game has started since.
    """

    def __init__(
        self,
        game: CrazyEightsGame,
        computer_delay: float = 1.5,
        drawn_card_delay: float = 1.0,
        telemetry: TelemetryService | None = None,
    ) -> None:
        self.game = game
        self.computer_delay = computer_delay
        self.drawn_card_delay = drawn_card_delay
        self.telemetry = telemetry
        self._pending: PendingAction | None = None
        self._listeners: list[Listener] = []

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def start_game(self, seed: int | None = None) -> GameView:
        self._pending = None
        state = self.game.start_game(seed=seed)
        self._log("game_started", {"seed": self.game.state.seed, "generation": self.game.generation})
        return state

    def play(self, card: Card) -> Submission:
        return self._submit(PlayCardAction(actor="human", card=card))

    def choose_suit(self, suit: Suit) -> Submission:
        return self._submit(ChooseSuitAction(suit=suit))

    def draw(self) -> Submission:
        return self._submit(DrawAction(actor="human"))

    def update(self, dt: float) -> Submission | None:
        """Advance the clock by `dt` seconds, firing a due computer move."""
        pending = self._pending
        if pending is None:
            return None
        if pending.generation != self.game.generation:
            self._pending = None
            return None
        pending.remaining -= dt
        if pending.remaining > 0:
            return None
        self._pending = None

        state = self.game.state
        if state.phase != "awaiting_player_move" or state.turn_owner != "computer":
            return None
        intent = self.game.request_computer_move(state)
        return self._submit(intent)

    def _submit(self, action: PlayCardAction | DrawAction | ChooseSuitAction) -> Submission:
        sub = self.game.submit(action)
        self._log(
            "outcome",
            {
                "generation": self.game.generation,
                "outcome": sub.outcome,
                "ok": sub.ok,
                "error": sub.result.error,
            },
        )
        if sub.ok:
            if self.game.state.finished:
                self._log("game_ended", {"phase": self.game.state.phase})
            self._schedule_if_needed()
        for listener in self._listeners:
            listener(sub)
        return sub

    def _schedule_if_needed(self) -> None:
        state = self.game.state
        if state.phase != "awaiting_player_move" or state.turn_owner != "computer":
            return
        delay = self.drawn_card_delay if state.drawn_card is not None else self.computer_delay
        self._pending = PendingAction(generation=self.game.generation, remaining=delay)

    def _log(self, event_type: str, payload: dict[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload)
