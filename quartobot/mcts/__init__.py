"""
Monte Carlo Tree Search (MCTS) implementation for QuartoBot.

This module provides the search infrastructure used by the AI controller:
- CompactState: Incremental board mirror with per-line threat bookkeeping
- SearchNode: Tree node with playout statistics or a proven (fixed) value
- MCTS: Search driver (selection, expansion, playout, backpropagation)

The MCTS implementation uses:
- UCB formula for exploration-exploitation balance
- Random playouts restricted to non-losing moves
- Exact win/loss/tie resolution that fixes proven nodes
- Tree reuse across turns (see quartobot.agents.controller)

Example:
    >>> import numpy as np
    >>> from quartobot.config import SearchConfig
    >>> from quartobot.game.quarto import GameState
    >>> from quartobot.mcts import MCTS, SearchNode, CompactState
    >>>
    >>> state = GameState()
    >>> root = SearchNode(CompactState.from_game_state(state))
    >>> mcts = MCTS(SearchConfig(iterations_per_move=500), np.random.default_rng(7))
    >>> move = mcts.search(root)
    >>> state.is_valid(move)
    True
"""

from quartobot.mcts.compact import CompactState
from quartobot.mcts.node import (
    SearchException,
    Result,
    Outcome,
    Unresolved,
    Fixed,
    SearchNode,
)
from quartobot.mcts.search import MCTS

__all__ = [
    "CompactState",
    "SearchException",
    "Result",
    "Outcome",
    "Unresolved",
    "Fixed",
    "SearchNode",
    "MCTS",
]
