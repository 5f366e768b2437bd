from __future__ import annotations

import traceback

import pygame  # type: ignore[import-not-found]

from crazyeights.controller import TurnScheduler
from crazyeights.engine.game import CrazyEightsGame
from ..app import GameContext, Scene
from ..ui import Button, draw_text
from .table import TableScene


class BootScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._did_boot = False
        self._error: str | None = None
        self._quit_button: Button | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._quit_button is not None:
            self._quit_button.handle_event(event)

    def update(self, dt: float) -> Scene | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            settings = self.ctx.apply_overrides(self.ctx.config.load_settings())
            self.ctx.settings = settings

            self.ctx.paths.userdata_dir.mkdir(parents=True, exist_ok=True)
            self.ctx.scheduler = TurnScheduler(
                CrazyEightsGame(),
                computer_delay=settings.computer_delay,
                drawn_card_delay=settings.drawn_card_delay,
                telemetry=self.ctx.telemetry if settings.telemetry_enabled else None,
            )

            if settings.telemetry_enabled:
                self.ctx.telemetry.log("boot", {"ok": True})
            return TableScene(self.ctx)
        except Exception as e:
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            # Offer quit button
            self._quit_button = Button(
                rect=pygame.Rect(20, self.ctx.screen.get_height() - 68, 140, 44),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((10, 40, 30))
        font = self.ctx.assets.fonts.big
        draw_text(screen, font, "Crazy Eights", (20, 20))

        font2 = self.ctx.assets.fonts.ui
        if self._error is None:
            draw_text(screen, font2, "Booting... loading settings.", (20, 80))
        else:
            draw_text(screen, font2, "BOOT ERROR", (20, 80), color=(240, 80, 80))
            y = 120
            for line in self._error.splitlines()[:22]:
                draw_text(screen, self.ctx.assets.fonts.small, line[:120], (20, y), color=(230, 230, 230))
                y += 18
            if self._quit_button is not None:
                self._quit_button.draw(screen, font2)
