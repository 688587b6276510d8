"""
QuartoBot Game Engine Package.

This package contains the Quarto rules engine (turn order, move validation,
win detection), board geometry constants, and the compact move-history
encoding used to persist and replay games.
"""

from quartobot.game.constants import (
    NUM_FIELDS,
    NUM_PIECES,
    NUM_LINES,
    LINES,
    LINES_PER_FIELD,
    MAX_MOVES,
    PASS_PHASE_START,
    MIN_QUARTO_MOVES,
    attribute_values,
)
from quartobot.game.quarto import (
    QuartoException,
    GameStateException,
    NextAction,
    MoveType,
    Move,
    GameState,
)

__all__ = [
    "NUM_FIELDS",
    "NUM_PIECES",
    "NUM_LINES",
    "LINES",
    "LINES_PER_FIELD",
    "MAX_MOVES",
    "PASS_PHASE_START",
    "MIN_QUARTO_MOVES",
    "attribute_values",
    "QuartoException",
    "GameStateException",
    "NextAction",
    "MoveType",
    "Move",
    "GameState",
]
