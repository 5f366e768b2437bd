from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from crazyeights.controller import TurnScheduler
from crazyeights.engine.game import Submission
from crazyeights.engine.rules import GameView, can_play, playable_cards
from crazyeights.engine.types import SUITS, Card

from ..app import GameContext, Scene
from ..asset_manager import CARD_SIZE
from ..ui import Button, draw_text

HAND_Y = 560
COMPUTER_Y = 70
PILE_Y = 300
CARD_GAP = 8

MESSAGES: dict[str, str] = {
    "wild_pending_suit": "Crazy eight! Choose a new suit.",
    "suit_chosen": "Suit set. Computer is thinking...",
    "won_game": "You emptied your hand first. You win!",
    "lost_game": "The computer won this time.",
    "drawn_unplayable": "Nothing playable was drawn. Turn passes.",
    "draw_pile_empty_turn_skipped": "Draw pile is empty! Turn skipped.",
}


def _describe(sub: Submission) -> str:
    if not sub.ok:
        return sub.result.error or "Invalid action."
    state = sub.state
    if sub.outcome == "drawn_playable":
        if state.turn_owner == "human":
            return "You drew a card you can play right away!"
        return "Computer drew a playable card..."
    if sub.outcome == "played":
        if state.turn_owner == "computer":
            return "Computer is thinking..."
        return f"Your turn! Active suit: {state.active_suit}."
    return MESSAGES.get(sub.outcome, "")


class TableScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        assert ctx.scheduler is not None
        self.scheduler: TurnScheduler = ctx.scheduler
        self.scheduler.add_listener(self._on_outcome)

        self._message: str = "Welcome to Crazy Eights!"

        width, height = ctx.screen.get_size()
        self.btn_start = Button(
            rect=pygame.Rect(width // 2 - 150, height // 2 + 40, 300, 56),
            text="Start Game",
            on_click=self._on_start,
        )
        self.btn_again = Button(
            rect=pygame.Rect(width // 2 - 150, height // 2 + 40, 300, 56),
            text="Play Again",
            on_click=self._on_start,
        )
        self.btn_draw = Button(
            rect=pygame.Rect(width // 2 + 120, PILE_Y + 30, 200, 50),
            text="Draw a card",
            on_click=self._on_draw,
        )
        self.suit_buttons = [
            Button(
                rect=pygame.Rect(width // 2 - 230 + i * 120, height // 2 - 20, 110, 56),
                text=suit.capitalize(),
                on_click=lambda s=suit: self._on_suit(s),
            )
            for i, suit in enumerate(SUITS)
        ]

    @property
    def view(self) -> GameView:
        return self.scheduler.game.get_state()

    def _on_outcome(self, sub: Submission) -> None:
        self._message = _describe(sub)

    def _on_start(self) -> None:
        settings = self.ctx.settings
        self.scheduler.start_game(seed=settings.seed if settings is not None else None)
        self._message = "Your turn! Match the suit or the rank. Eights are wild."

    def _on_draw(self) -> None:
        self.scheduler.draw()

    def _on_suit(self, suit: str) -> None:
        self.scheduler.choose_suit(suit)  # type: ignore[arg-type]

    def _is_human_turn(self, v: GameView) -> bool:
        return v.phase == "awaiting_player_move" and v.turn_owner == "human"

    def _has_valid_moves(self, v: GameView) -> bool:
        return bool(playable_cards(v.human_hand, v.top_discard, v.active_suit))

    def handle_event(self, event: pygame.event.Event) -> None:
        v = self.view
        if v.phase == "not_started":
            self.btn_start.handle_event(event)
            return
        if v.phase in ("finished_won", "finished_lost"):
            self.btn_again.handle_event(event)
            return
        if v.phase == "awaiting_suit_choice":
            for b in self.suit_buttons:
                if b.handle_event(event):
                    return
            return

        self.btn_draw.enabled = self._is_human_turn(v) and not self._has_valid_moves(v)
        if self.btn_draw.handle_event(event):
            return

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if not self._is_human_turn(v):
                return
            card = self._hit_test_hand(event.pos, v)
            if card is not None:
                self.scheduler.play(card)

    def _hand_rects(self, v: GameView) -> list[tuple[pygame.Rect, Card]]:
        w, h = CARD_SIZE
        width = self.ctx.screen.get_width()
        n = len(v.human_hand)
        step = min(w + CARD_GAP, (width - 80 - w) // max(1, n - 1)) if n > 1 else w
        x0 = max(40, (width - (step * (n - 1) + w)) // 2)
        return [(pygame.Rect(x0 + i * step, HAND_Y, w, h), c) for i, c in enumerate(v.human_hand)]

    def _hit_test_hand(self, pos: tuple[int, int], v: GameView) -> Card | None:
        # Later cards overlap earlier ones, so test from the top of the fan.
        for rect, card in reversed(self._hand_rects(v)):
            if rect.collidepoint(pos):
                return card
        return None

    def update(self, dt: float) -> Scene | None:
        self.scheduler.update(dt)
        return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((6, 78, 59))
        fonts = self.ctx.assets.fonts
        v = self.view
        width, height = screen.get_size()

        draw_text(screen, fonts.big, "Crazy Eights", (20, 16))
        you_color = (250, 204, 21) if v.turn_owner == "human" else (160, 190, 170)
        cpu_color = (250, 204, 21) if v.turn_owner == "computer" else (160, 190, 170)
        draw_text(screen, fonts.ui, f"You: {len(v.human_hand)}", (width - 260, 22), color=you_color)
        draw_text(screen, fonts.ui, f"Computer: {v.computer_hand_count}", (width - 160, 22), color=cpu_color)

        if v.phase != "not_started":
            self._draw_computer_hand(screen, v)
            self._draw_piles(screen, v)
            self._draw_hand(screen, v)
            if self._is_human_turn(v) and not self._has_valid_moves(v):
                self.btn_draw.enabled = True
                self.btn_draw.draw(screen, fonts.ui)

        if self._message:
            img = fonts.ui.render(self._message, True, (236, 253, 245))
            screen.blit(img, img.get_rect(center=(width // 2, PILE_Y + CARD_SIZE[1] + 60)).topleft)

        if v.phase == "not_started":
            self._draw_overlay(screen, "Crazy Eights", "Match the top card's suit or rank. 8s are wild!")
            self.btn_start.draw(screen, fonts.ui)
        elif v.phase == "awaiting_suit_choice":
            self._draw_overlay(screen, "Choose a new suit", "")
            for b in self.suit_buttons:
                b.draw(screen, fonts.ui)
        elif v.phase in ("finished_won", "finished_lost"):
            won = v.phase == "finished_won"
            self._draw_overlay(
                screen,
                "Victory!" if won else "Game Over",
                "You emptied your hand first!" if won else "The computer won this time.",
            )
            self.btn_again.draw(screen, fonts.ui)

    def _draw_computer_hand(self, screen: pygame.Surface, v: GameView) -> None:
        back = self.ctx.assets.card_back()
        n = v.computer_hand_count
        x0 = (screen.get_width() - (n * 24 + CARD_SIZE[0])) // 2
        for i in range(n):
            screen.blit(back, (x0 + i * 24, COMPUTER_Y))

    def _draw_piles(self, screen: pygame.Surface, v: GameView) -> None:
        fonts = self.ctx.assets.fonts
        cx = screen.get_width() // 2
        draw_pos = (cx - CARD_SIZE[0] - 40, PILE_Y)
        discard_pos = (cx + 40, PILE_Y)

        if v.draw_pile_count:
            screen.blit(self.ctx.assets.card_back(), draw_pos)
        draw_text(screen, fonts.small, f"Draw pile ({v.draw_pile_count})", (draw_pos[0], PILE_Y + CARD_SIZE[1] + 6))

        if v.top_discard is not None:
            screen.blit(self.ctx.assets.card_face(v.top_discard), discard_pos)
        draw_text(screen, fonts.small, "Discard", (discard_pos[0], PILE_Y + CARD_SIZE[1] + 6))
        if v.active_suit is not None:
            draw_text(screen, fonts.ui, f"Suit: {v.active_suit}", (discard_pos[0], PILE_Y - 28), color=(250, 204, 21))

    def _draw_hand(self, screen: pygame.Surface, v: GameView) -> None:
        human_turn = self._is_human_turn(v)
        for rect, card in self._hand_rects(v):
            screen.blit(self.ctx.assets.card_face(card), rect.topleft)
            if human_turn and can_play(card, v.top_discard, v.active_suit):
                pygame.draw.rect(screen, (250, 204, 21), rect.inflate(6, 6), width=3, border_radius=10)

    def _draw_overlay(self, screen: pygame.Surface, title: str, subtitle: str) -> None:
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        screen.blit(overlay, (0, 0))
        fonts = self.ctx.assets.fonts
        width, height = screen.get_size()
        img = fonts.big.render(title, True, (240, 240, 240))
        screen.blit(img, img.get_rect(center=(width // 2, height // 2 - 80)).topleft)
        if subtitle:
            sub = fonts.ui.render(subtitle, True, (200, 230, 210))
            screen.blit(sub, sub.get_rect(center=(width // 2, height // 2 - 40)).topleft)
