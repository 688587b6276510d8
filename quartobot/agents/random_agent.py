"""
Random baseline player.
"""

from typing import Optional

import numpy as np

from quartobot.agents.base import Agent
from quartobot.game.quarto import GameState, GameStateException, Move


class RandomAgent(Agent):
    """
    Plays a uniformly random legal move, but always claims a Quarto.

    Useful as a sanity baseline for the arena: a search player that does not
    beat it almost every game is broken.
    """

    name = "random"

    def __init__(
        self,
        state: Optional[GameState] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.state = state.copy() if state is not None else GameState()
        self.rng = rng if rng is not None else np.random.default_rng()

    def execute(self, move: Move) -> bool:
        return self.state.execute(move)

    def calculate_move(self) -> Move:
        if self.state.is_over():
            raise GameStateException("Cannot calculate a move: game is over")
        if self.state.is_quarto_possible():
            return Move.quarto()
        moves = self.state.list_valid_moves()
        return moves[int(self.rng.integers(len(moves)))]
