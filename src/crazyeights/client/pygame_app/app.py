from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import pygame  # type: ignore[import-not-found]

from crazyeights.controller import TurnScheduler
from crazyeights.paths import Paths
from crazyeights.services.config import ConfigService, Settings
from crazyeights.services.telemetry import TelemetryService

from .asset_manager import AssetManager

FPS = 60


class Scene(Protocol):
    """Boot or table. `update` returns the scene to switch to, if any."""

    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> Scene | None: ...
    def render(self, screen: pygame.Surface) -> None: ...


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    config: ConfigService
    telemetry: TelemetryService

    # Command-line overrides, applied on top of settings.json at boot
    width: int | None = None
    height: int | None = None
    seed: int | None = None
    delay_ms: int | None = None

    # Loaded at boot
    settings: Optional[Settings] = None
    scheduler: Optional[TurnScheduler] = None

    def apply_overrides(self, settings: Settings) -> Settings:
        return settings.with_overrides(
            width=self.width,
            height=self.height,
            seed=self.seed,
            delay_ms=self.delay_ms,
        )


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True

    def run(self) -> int:
        while self.running:
            dt = self.ctx.clock.tick(FPS) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    break
                self.scene.handle_event(event)

            nxt = self.scene.update(dt)
            if nxt is not None:
                self.scene = nxt

            self.scene.render(self.ctx.screen)
            pygame.display.flip()

        pygame.quit()
        return 0
