from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable

from .actions import ChooseSuitAction, DrawAction, Intent, PlayCardAction
from .ai import next_intent
from .deck import RandomSource
from .rules import GameState, GameView, Outcome, StepResult, new_game, step, view
from .types import Actor, Card, Suit


@dataclass(frozen=True)
class Submission:
    state: GameView
    result: StepResult

    @property
    def outcome(self) -> Outcome:
        return self.result.outcome

    @property
    def ok(self) -> bool:
        return self.result.ok


class CrazyEightsGame:
    """Single-game boundary used by the controller and presentation.

    Every mutation goes through `rules`. `generation` increases on each
    `start_game` so callers can tell stale scheduled work apart.
    """

    def __init__(self, rng_factory: Callable[[int], RandomSource] = random.Random) -> None:
        self._rng_factory = rng_factory
        self.state = GameState()
        self.generation = 0

    def start_game(self, seed: int | None = None) -> GameView:
        if seed is None:
            seed = random.randrange(1, 2**31 - 1)
        self.generation += 1
        self.state = new_game(seed=seed, rng=self._rng_factory(seed))
        return view(self.state)

    def get_state(self) -> GameView:
        return view(self.state)

    def submit(self, intent: Intent | ChooseSuitAction) -> Submission:
        result = step(self.state, intent)
        return Submission(state=view(self.state), result=result)

    def submit_play(self, card: Card, actor: Actor = "human") -> Submission:
        return self.submit(PlayCardAction(actor=actor, card=card))

    def submit_suit_choice(self, suit: Suit) -> Submission:
        return self.submit(ChooseSuitAction(suit=suit))

    def submit_draw(self, actor: Actor = "human") -> Submission:
        return self.submit(DrawAction(actor=actor))

    def request_computer_move(self, state: GameState | None = None) -> Intent:
        return next_intent(state if state is not None else self.state)
