from __future__ import annotations

from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

from crazyeights.engine.types import Card, Suit

CARD_SIZE = (80, 112)

SUIT_COLORS: dict[Suit, tuple[int, int, int]] = {
    "hearts": (200, 30, 40),
    "diamonds": (200, 30, 40),
    "clubs": (20, 20, 30),
    "spades": (20, 20, 30),
}


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font


class AssetManager:
    """Fonts plus procedurally drawn card faces, cached per card."""

    def __init__(self) -> None:
        self._cache: dict[str, pygame.Surface] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 24),
            small=pygame.font.SysFont(None, 18),
            big=pygame.font.SysFont(None, 34),
        )

    def card_face(self, card: Card) -> pygame.Surface:
        if card.id in self._cache:
            return self._cache[card.id]
        surf = pygame.Surface(CARD_SIZE, pygame.SRCALPHA)
        rect = surf.get_rect()
        pygame.draw.rect(surf, (250, 250, 250), rect, border_radius=8)
        pygame.draw.rect(surf, (180, 180, 190), rect, width=2, border_radius=8)
        color = SUIT_COLORS[card.suit]
        corner = self.fonts.ui.render(card.label, True, color)
        surf.blit(corner, (6, 6))
        center = self.fonts.big.render(card.rank, True, color)
        surf.blit(center, center.get_rect(center=rect.center).topleft)
        self._cache[card.id] = surf
        return surf

    def card_back(self) -> pygame.Surface:
        key = "__back__"
        if key in self._cache:
            return self._cache[key]
        surf = pygame.Surface(CARD_SIZE, pygame.SRCALPHA)
        rect = surf.get_rect()
        pygame.draw.rect(surf, (60, 50, 160), rect, border_radius=8)
        pygame.draw.rect(surf, (30, 20, 90), rect, width=2, border_radius=8)
        pygame.draw.rect(surf, (120, 110, 220), rect.inflate(-16, -16), width=2, border_radius=6)
        self._cache[key] = surf
        return surf
