from __future__ import annotations

import random

from crazyeights.engine.actions import DrawAction
from crazyeights.engine.game import CrazyEightsGame
from crazyeights.engine.rules import GameState
from crazyeights.engine.serialize import snapshot
from crazyeights.engine.types import Card


def test_get_state_before_start() -> None:
    game = CrazyEightsGame()
    v = game.get_state()
    assert v.phase == "not_started"
    assert v.top_discard is None
    assert game.generation == 0
    res = game.submit_draw()
    assert res.outcome == "illegal_state"


def test_start_game_deals_and_bumps_generation() -> None:
    game = CrazyEightsGame()
    v = game.start_game(seed=5)
    assert game.generation == 1
    assert v.phase == "awaiting_player_move"
    assert v.turn_owner == "human"
    assert len(v.human_hand) == 8
    assert v.computer_hand_count == 8
    assert v.draw_pile_count == 35
    assert v.top_discard is not None and v.active_suit == v.top_discard.suit

    game.start_game(seed=6)
    assert game.generation == 2


def test_rng_factory_is_injected() -> None:
    seeds: list[int] = []

    def factory(seed: int) -> random.Random:
        seeds.append(seed)
        return random.Random(seed)

    game = CrazyEightsGame(rng_factory=factory)
    game.start_game(seed=77)
    assert seeds == [77]
    assert game.state.seed == 77


def test_submit_play_reports_illegal_move() -> None:
    game = CrazyEightsGame()
    game.start_game(seed=3)
    # A card the human certainly does not hold.
    missing = game.state.draw_pile[0]
    sub = game.submit_play(missing)
    assert not sub.ok
    assert sub.outcome == "illegal_move"
    assert sub.state == game.get_state()


def test_request_computer_move_is_pure() -> None:
    game = CrazyEightsGame()
    game.start_game(seed=11)
    game.state.turn_owner = "computer"
    before = snapshot(game.state)
    intent = game.request_computer_move()
    assert snapshot(game.state) == before
    if isinstance(intent, DrawAction):
        assert intent.actor == "computer"
    else:
        assert intent.card in game.state.hands["computer"]


def test_request_computer_move_plays_drawn_card() -> None:
    game = CrazyEightsGame()
    game.start_game(seed=11)
    drawn = Card(suit="hearts", rank="8")
    game.state.drawn_card = drawn
    intent = game.request_computer_move(game.state)
    assert getattr(intent, "card", None) == drawn


def test_suit_choice_round_trip() -> None:
    game = CrazyEightsGame()
    game.start_game(seed=2)
    eight = Card(suit="clubs", rank="8")
    two = Card(suit="spades", rank="2")
    game.state = GameState(
        draw_pile=[],
        discard_pile=[Card(suit="hearts", rank="5")],
        hands={"human": [eight, two], "computer": [Card(suit="hearts", rank="K")]},
        active_suit="hearts",
        phase="awaiting_player_move",
    )
    sub = game.submit_play(eight)
    assert sub.outcome == "wild_pending_suit"
    assert sub.state.phase == "awaiting_suit_choice"
    assert sub.state.turn_owner == "human"

    sub = game.submit_suit_choice("diamonds")
    assert sub.outcome == "suit_chosen"
    assert sub.state.active_suit == "diamonds"
    assert sub.state.turn_owner == "computer"
    assert sub.state.phase == "awaiting_player_move"
