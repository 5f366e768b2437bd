"""Headless rules engine for Crazy Eights.

IMPORTANT: This package must never import pygame.
"""

from .actions import ChooseSuitAction, DrawAction, PlayCardAction
from .game import CrazyEightsGame, Submission
from .rules import GameState, GameView, IllegalMove, IllegalState, StepResult, new_game, step
from .types import SUITS, Card, Suit

__all__ = [
    "Card",
    "ChooseSuitAction",
    "CrazyEightsGame",
    "DrawAction",
    "GameState",
    "GameView",
    "IllegalMove",
    "IllegalState",
    "PlayCardAction",
    "SUITS",
    "StepResult",
    "Submission",
    "Suit",
    "new_game",
    "step",
]
