"""
AI controller: persistent search tree across turns.

The controller keeps its own copy of the game state and the root of the
search tree. Every played move is replayed into both: the state advances, and
the tree descends into the matching expanded child (tree reuse), keeping its
subtree and dropping the siblings. If there is no matching child, the tree is
discarded and rebuilt lazily on the next calculate_move().

calculate_move() answers without searching when the answer is forced:
    1. Claim Quarto if possible
    2. Pass during the pass phase
    3. On a placement turn, place where it completes a Quarto
Otherwise it runs the Monte-Carlo tree search from the (reused) root.
"""

import logging
from typing import List, Optional

import numpy as np

from quartobot.agents.base import Agent
from quartobot.config import SearchConfig
from quartobot.game.quarto import GameState, GameStateException, Move, MoveType, NextAction
from quartobot.mcts.compact import CompactState
from quartobot.mcts.node import SearchNode
from quartobot.mcts.search import MCTS

logger = logging.getLogger(__name__)


class AiController(Agent):
    """
    Monte-Carlo tree search player with tree reuse.

    Attributes:
        state: The controller's own copy of the game state
        root: Root of the persistent search tree (None until needed, and
            after a move without a matching expanded child)
        mcts: Search engine, owning the controller's random generator
    """

    name = "mcts"

    def __init__(
        self,
        state: Optional[GameState] = None,
        config: Optional[SearchConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the controller.

        Args:
            state: Current game state (copied; default: initial state)
            config: Search configuration (default: SearchConfig())
            rng: Random generator for all of the controller's randomness.
                Defaults to one seeded from config.seed, or from OS entropy
                when no seed is configured.
        """
        self.state = state.copy() if state is not None else GameState()
        self.config = config if config is not None else SearchConfig()
        self.mcts = MCTS(self.config, rng)
        self.root: Optional[SearchNode] = None

    @property
    def rng(self) -> np.random.Generator:
        return self.mcts.rng

    def execute(self, move: Move) -> bool:
        """
        Feed a played move into the tracked state and the tree.

        Args:
            move: Move played by either side

        Returns:
            False iff the rules reject the move (state and tree unchanged)
        """
        if not self.state.execute(move):
            return False

        new_root = None
        if self.root is not None and move.type in (MoveType.SELECT, MoveType.PLACE):
            new_root = self.root.find_child(move)
        if self.root is not None and new_root is None:
            logger.debug(f"No expanded child for {move!r}, discarding search tree")
        self.root = new_root
        return True

    def calculate_move(self) -> Move:
        """
        Choose a move for the player to move.

        Returns:
            The chosen move

        Raises:
            GameStateException: If the game is already over
        """
        if self.state.is_over():
            raise GameStateException("Cannot calculate a move: game is over")

        if self.state.is_quarto_possible():
            return Move.quarto()

        next_action = self.state.next_action()
        if next_action == NextAction.PASS:
            return Move.pass_()

        if next_action == NextAction.PLACE:
            winning_moves = self.find_winning_placements()
            if winning_moves:
                logger.info(f"Found winning move: place at {[m.field for m in winning_moves]}")
                return self.mcts.random_choice(winning_moves)

        if self.root is None:
            logger.info("Recreating root node")
            self.root = SearchNode(CompactState.from_game_state(self.state))

        if not self.root.moves:
            # Every selection hands the opponent a win
            logger.info("Loss is imminent, choosing a random move")
            return self.mcts.random_choice(self.state.list_valid_moves())

        return self.mcts.search(self.root)

    def find_winning_placements(self) -> List[Move]:
        """
        Find placements of the pending piece that complete a Quarto.

        Returns:
            List of Place moves after which a Quarto can be claimed
        """
        winning_moves = []
        for move in self.state.list_valid_moves():
            if move.type != MoveType.PLACE:
                continue
            next_state = self.state.copy()
            next_state.execute_valid(move)
            if next_state.is_quarto_possible():
                winning_moves.append(move)
        return winning_moves
