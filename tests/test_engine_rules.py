from __future__ import annotations

import pytest

from crazyeights.engine.actions import ChooseSuitAction, DrawAction, PlayCardAction
from crazyeights.engine.deck import build_deck
from crazyeights.engine.rules import (
    GameState,
    IllegalMove,
    IllegalState,
    can_play,
    choose_suit,
    choose_suit_for,
    draw_card,
    new_game,
    play_card,
    playable_cards,
    step,
)
from crazyeights.engine.serialize import snapshot
from crazyeights.engine.types import Actor, Card, Rank, Suit


def _c(rank: Rank, suit: Suit) -> Card:
    return Card(suit=suit, rank=rank)


def _state(
    human: list[Card],
    computer: list[Card],
    top: Card,
    active_suit: Suit | None = None,
    draw: list[Card] | None = None,
    turn_owner: Actor = "human",
) -> GameState:
    used = set(human) | set(computer) | {top}
    rest = [c for c in build_deck() if c not in used] if draw is None else list(draw)
    return GameState(
        draw_pile=rest,
        discard_pile=[top],
        hands={"human": list(human), "computer": list(computer)},
        active_suit=active_suit or top.suit,
        turn_owner=turn_owner,
        phase="awaiting_player_move",
    )


class _ScriptedRandom:
    """Makes the shuffle produce `target` exactly."""

    def __init__(self, target: list[Card]) -> None:
        self.target = target
        self.items = build_deck()

    def randint(self, a: int, b: int) -> int:
        j = self.items.index(self.target[b])
        self.items[b], self.items[j] = self.items[j], self.items[b]
        return j


def test_new_game_invariants() -> None:
    for seed in range(40):
        state = new_game(seed=seed)
        assert state.card_count() == 52
        assert len(state.discard_pile) == 1
        assert state.top_discard is not None
        assert state.top_discard.rank != "8"
        assert state.active_suit == state.top_discard.suit
        assert len(state.hands["human"]) == 8
        assert len(state.hands["computer"]) == 8
        assert len(state.draw_pile) == 35
        assert state.turn_owner == "human"
        assert state.phase == "awaiting_player_move"
        all_cards = state.draw_pile + state.discard_pile + state.hands["human"] + state.hands["computer"]
        assert len(set(all_cards)) == 52


def test_new_game_skips_leading_eights_without_discarding_them() -> None:
    e1, e2, three = _c("8", "spades"), _c("8", "clubs"), _c("3", "spades")
    base = [c for c in build_deck() if c not in (e1, e2, three)]
    target = base[:16] + [e1, e2, three] + base[16:]

    state = new_game(rng=_ScriptedRandom(target))

    assert state.hands["human"] == target[:8]
    assert state.hands["computer"] == target[8:16]
    assert state.discard_pile == [three]
    assert state.active_suit == "spades"
    assert state.draw_pile[:2] == [e1, e2]
    assert three not in state.draw_pile
    assert state.card_count() == 52


def test_can_play_classifies_every_card() -> None:
    top = _c("5", "hearts")
    for card in build_deck():
        legal = can_play(card, top, "clubs")
        expected = card.rank == "8" or card.suit == "clubs" or card.rank == "5"
        assert legal is expected


def test_eight_is_always_playable_but_nothing_without_discard() -> None:
    for suit in ("hearts", "diamonds", "clubs", "spades"):
        assert can_play(_c("8", suit), _c("K", "spades"), "diamonds")
    assert not can_play(_c("8", "hearts"), None, None)
    assert not can_play(_c("5", "hearts"), None, "hearts")


def test_rank_match_changes_active_suit_and_passes_turn() -> None:
    state = _state(
        human=[_c("5", "spades"), _c("2", "clubs")],
        computer=[_c("K", "diamonds")],
        top=_c("5", "hearts"),
    )
    assert play_card(state, "human", _c("5", "spades")) == "played"
    assert state.top_discard == _c("5", "spades")
    assert state.active_suit == "spades"
    assert state.turn_owner == "computer"
    assert state.phase == "awaiting_player_move"
    assert _c("5", "spades") not in state.hands["human"]
    assert state.card_count() == 52


def test_illegal_play_is_rejected_and_state_untouched() -> None:
    state = _state(
        human=[_c("9", "clubs"), _c("2", "clubs")],
        computer=[_c("K", "diamonds")],
        top=_c("5", "hearts"),
    )
    before = snapshot(state)
    with pytest.raises(IllegalMove):
        play_card(state, "human", _c("9", "clubs"))
    assert snapshot(state) == before

    res = step(state, PlayCardAction(actor="human", card=_c("9", "clubs")))
    assert not res.ok
    assert res.outcome == "illegal_move"
    assert res.error is not None
    assert snapshot(state) == before


def test_card_not_in_hand_is_illegal() -> None:
    state = _state(human=[_c("2", "clubs")], computer=[_c("K", "diamonds")], top=_c("5", "hearts"))
    with pytest.raises(IllegalMove):
        play_card(state, "human", _c("7", "hearts"))


def test_playing_out_of_turn_is_illegal() -> None:
    state = _state(human=[_c("2", "hearts")], computer=[_c("K", "hearts"), _c("3", "clubs")], top=_c("5", "hearts"))
    with pytest.raises(IllegalMove):
        play_card(state, "computer", _c("K", "hearts"))
    with pytest.raises(IllegalMove):
        draw_card(state, "computer")


def test_human_eight_waits_for_suit_choice() -> None:
    state = _state(
        human=[_c("8", "clubs"), _c("2", "spades")],
        computer=[_c("K", "hearts")],
        top=_c("5", "hearts"),
    )
    assert play_card(state, "human", _c("8", "clubs")) == "wild_pending_suit"
    assert state.phase == "awaiting_suit_choice"
    assert state.turn_owner == "human"

    # Nothing else may happen until a suit is named.
    with pytest.raises(IllegalState):
        play_card(state, "human", _c("2", "spades"))
    with pytest.raises(IllegalState):
        draw_card(state, "human")

    assert choose_suit(state, "diamonds") == "suit_chosen"
    assert state.active_suit == "diamonds"
    assert state.turn_owner == "computer"
    assert state.phase == "awaiting_player_move"
    assert state.action_log[-1] == ChooseSuitAction(suit="diamonds")


def test_choose_suit_outside_suit_phase_is_illegal_state() -> None:
    state = _state(human=[_c("2", "spades")], computer=[_c("K", "hearts")], top=_c("5", "hearts"))
    before = snapshot(state)
    with pytest.raises(IllegalState):
        choose_suit(state, "clubs")
    res = step(state, ChooseSuitAction(suit="clubs"))
    assert res.outcome == "illegal_state"
    assert snapshot(state) == before


def test_playing_last_card_wins_and_is_sticky() -> None:
    state = _state(human=[_c("9", "hearts")], computer=[_c("K", "clubs")], top=_c("5", "hearts"))
    assert play_card(state, "human", _c("9", "hearts")) == "won_game"
    assert state.phase == "finished_won"
    assert state.event_log[-1] == {"type": "GAME_ENDED", "winner": "human"}

    with pytest.raises(IllegalState):
        draw_card(state, "human")
    with pytest.raises(IllegalState):
        play_card(state, "computer", _c("K", "clubs"))
    res = step(state, DrawAction(actor="computer"))
    assert res.outcome == "illegal_state"
    assert state.phase == "finished_won"


def test_last_card_eight_ends_game_without_suit_choice() -> None:
    state = _state(human=[_c("8", "spades")], computer=[_c("K", "clubs")], top=_c("5", "hearts"))
    assert play_card(state, "human", _c("8", "spades")) == "won_game"
    assert state.phase == "finished_won"
    with pytest.raises(IllegalState):
        choose_suit(state, "clubs")


def test_computer_emptying_hand_loses_game_for_human() -> None:
    state = _state(
        human=[_c("2", "clubs")],
        computer=[_c("8", "diamonds")],
        top=_c("5", "hearts"),
        turn_owner="computer",
    )
    assert play_card(state, "computer", _c("8", "diamonds")) == "lost_game"
    assert state.phase == "finished_lost"


def test_computer_eight_picks_suit_and_returns_turn() -> None:
    state = _state(
        human=[_c("2", "clubs")],
        computer=[_c("8", "diamonds"), _c("3", "spades"), _c("J", "spades"), _c("4", "clubs")],
        top=_c("5", "hearts"),
        turn_owner="computer",
    )
    assert play_card(state, "computer", _c("8", "diamonds")) == "played"
    assert state.active_suit == "spades"
    assert state.turn_owner == "human"
    assert state.phase == "awaiting_player_move"


def test_draw_from_empty_pile_skips_turn() -> None:
    state = _state(
        human=[_c("2", "clubs")],
        computer=[_c("K", "clubs")],
        top=_c("5", "hearts"),
        draw=[],
    )
    res = step(state, DrawAction(actor="human"))
    assert res.ok
    assert res.outcome == "draw_pile_empty_turn_skipped"
    assert res.card is None
    assert len(state.hands["human"]) == 1
    assert len(state.hands["computer"]) == 1
    assert state.turn_owner == "computer"

    outcome, card = draw_card(state, "computer")
    assert outcome == "draw_pile_empty_turn_skipped"
    assert card is None
    assert state.turn_owner == "human"


def test_drawing_unplayable_card_passes_turn() -> None:
    king = _c("K", "clubs")
    state = _state(human=[_c("2", "clubs")], computer=[_c("3", "clubs")], top=_c("5", "hearts"), draw=[_c("4", "spades"), king])
    res = step(state, DrawAction(actor="human"))
    assert res.outcome == "drawn_unplayable"
    assert res.card == king
    assert state.hands["human"][-1] == king
    assert len(state.draw_pile) == 1
    assert state.turn_owner == "computer"
    assert state.drawn_card is None


def test_drawing_playable_card_keeps_turn() -> None:
    nine = _c("9", "hearts")
    state = _state(human=[_c("2", "clubs")], computer=[_c("3", "clubs")], top=_c("5", "hearts"), draw=[nine])
    outcome, card = draw_card(state, "human")
    assert outcome == "drawn_playable"
    assert card == nine
    assert state.turn_owner == "human"
    assert state.drawn_card == nine
    assert play_card(state, "human", nine) == "played"
    assert state.drawn_card is None
    assert state.turn_owner == "computer"


def test_draw_allowed_even_with_a_legal_play() -> None:
    state = _state(human=[_c("2", "hearts")], computer=[_c("3", "clubs")], top=_c("5", "hearts"))
    before = len(state.draw_pile)
    res = step(state, DrawAction(actor="human"))
    assert res.ok
    assert len(state.draw_pile) == before - 1
    assert len(state.hands["human"]) == 2
    assert state.card_count() == 52


def test_scenario_no_match_then_draw() -> None:
    state = _state(
        human=[_c("2", "clubs"), _c("J", "spades")],
        computer=[_c("3", "clubs")],
        top=_c("5", "hearts"),
    )
    assert not any(can_play(c, state.top_discard, state.active_suit) for c in state.hands["human"])
    before = len(state.draw_pile)
    res = step(state, DrawAction(actor="human"))
    assert res.ok
    assert res.outcome in ("drawn_playable", "drawn_unplayable")
    assert len(state.draw_pile) == before - 1
    assert len(state.hands["human"]) == 3


def test_actions_before_start_are_illegal_state() -> None:
    state = GameState()
    assert state.phase == "not_started"
    with pytest.raises(IllegalState):
        draw_card(state, "human")
    res = step(state, PlayCardAction(actor="human", card=_c("2", "clubs")))
    assert res.outcome == "illegal_state"


def test_step_reports_only_new_events() -> None:
    state = _state(human=[_c("5", "spades"), _c("2", "clubs")], computer=[_c("K", "diamonds")], top=_c("5", "hearts"))
    state.event_log.append({"type": "OLD"})
    res = step(state, PlayCardAction(actor="human", card=_c("5", "spades")))
    assert res.ok
    assert [e["type"] for e in res.events] == ["CARD_PLAYED", "TURN_PASSED"]


def test_playable_cards_keeps_hand_order_and_includes_eights() -> None:
    hand = [_c("K", "spades"), _c("8", "clubs"), _c("5", "diamonds"), _c("2", "clubs"), _c("J", "hearts")]
    assert playable_cards(hand, _c("5", "hearts"), "hearts") == [
        _c("8", "clubs"),
        _c("5", "diamonds"),
        _c("J", "hearts"),
    ]
    assert playable_cards(hand, None, None) == []
    assert playable_cards([], _c("5", "hearts"), "hearts") == []


def test_playable_cards_follows_named_suit() -> None:
    hand = [_c("4", "hearts"), _c("7", "diamonds"), _c("8", "spades")]
    assert playable_cards(hand, _c("8", "hearts"), "diamonds") == [_c("7", "diamonds"), _c("8", "spades")]


def test_suit_policy_lives_with_the_rules() -> None:
    from crazyeights.engine import ai

    assert ai.choose_suit_for is choose_suit_for
    assert choose_suit_for([_c("3", "spades"), _c("J", "spades"), _c("4", "clubs")]) == "spades"
    assert choose_suit_for([]) == "spades"
