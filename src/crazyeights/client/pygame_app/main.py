from __future__ import annotations

import argparse

import pygame  # type: ignore[import-not-found]

from crazyeights.paths import get_paths
from crazyeights.services.config import ConfigError, ConfigService, Settings
from crazyeights.services.telemetry import TelemetryService

from .app import App, GameContext
from .asset_manager import AssetManager
from .scenes.boot import BootScene


def main() -> int:
    parser = argparse.ArgumentParser(prog="crazyeights")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--delay-ms", type=int, default=None, help="computer turn delay")
    args = parser.parse_args()

    paths = get_paths()
    config = ConfigService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    try:
        settings = config.load_settings()
    except ConfigError:
        # The boot scene reports the error; open a default-sized window for it.
        settings = Settings()

    pygame.init()
    window = settings.with_overrides(width=args.width, height=args.height).window
    screen = pygame.display.set_mode((window.width, window.height))
    pygame.display.set_caption("Crazy Eights")

    clock = pygame.time.Clock()
    assets = AssetManager()
    telemetry = TelemetryService(paths.userdata_dir / "telemetry.jsonl")

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        assets=assets,
        config=config,
        telemetry=telemetry,
        width=args.width,
        height=args.height,
        seed=args.seed,
        delay_ms=args.delay_ms,
    )

    app = App(ctx, BootScene(ctx))
    return app.run()
