"""
Monte Carlo Tree Search with exact-value fixing for Quarto.

Each iteration descends from the root:
    1. Selection: once every candidate of a node has a child, revisit the
       child with the highest upper confidence bound
       value + sqrt(c * ln(N_parent) / N_child)
    2. Expansion: otherwise create the next unexpanded child. A child without
       non-losing candidates is fixed immediately (LOSS if pieces remain,
       TIE if the board is full).
    3. Simulation: on its first visit a node runs one random playout, with
       both sides restricted to non-losing moves
    4. Backpropagation: results are inverted across Select nodes. When a
       child becomes fixed, the parent is fixed too if that child is a win
       for it, or if all of its children are now fixed (minimax value).

The search stops early once the root is fixed, and then picks uniformly among
the children that realize the proven value. Otherwise the most visited child
wins.

Example:
    >>> from quartobot.config import SearchConfig
    >>> from quartobot.game.quarto import GameState
    >>> from quartobot.mcts import MCTS, SearchNode, CompactState
    >>> import numpy as np
    >>>
    >>> mcts = MCTS(SearchConfig(iterations_per_move=1000), np.random.default_rng(0))
    >>> root = SearchNode(CompactState.from_game_state(GameState()))
    >>> move = mcts.search(root)
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence, TypeVar

import numpy as np

from quartobot.config import SearchConfig
from quartobot.game.quarto import Move
from quartobot.mcts.compact import CompactState
from quartobot.mcts.node import Outcome, Result, SearchException, SearchNode

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MCTS:
    """
    Monte Carlo Tree Search engine.

    Stateless apart from its configuration and random generator: the tree is
    owned by the caller and mutated in place.

    Attributes:
        config: Search configuration (exploration constant, budget, logging)
        rng: Random generator for playouts and tie-breaks
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the search engine.

        Args:
            config: Search configuration (default: SearchConfig())
            rng: Random generator. All randomness of the search is drawn from
                it, so a seeded generator makes searches reproducible.
                Defaults to a generator seeded from config.seed.
        """
        self.config = config if config is not None else SearchConfig()
        self.config.validate()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

    def random_choice(self, items: Sequence[T]) -> T:
        """Pick a uniformly random element of a non-empty sequence."""
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[int(self.rng.integers(len(items)))]

    # ------------------------------------------------------------------
    # Iterations
    # ------------------------------------------------------------------

    def play_out(self, state: CompactState) -> Result:
        """
        Simulate a random game from a position.

        Both sides pick uniformly among their non-losing moves. A player who
        must select but has no non-losing piece loses on the spot. If the
        pieces run out without that happening, the game is a tie.

        Args:
            state: Starting position (not modified)

        Returns:
            Result for the player to move at state
        """
        cst = state.copy()
        win = Result.WIN
        rng = self.rng

        while cst.next_piece >= 0 or cst.pieces != 0:
            moves = cst.nonlosing_moves()
            if cst.next_piece < 0:
                if not moves:
                    return win.invert()
                cst.select(moves[int(rng.integers(len(moves)))])
                win = win.invert()
            else:
                cst.place(moves[int(rng.integers(len(moves)))])

        # All pieces placed and nobody won
        return Result.TIE

    def _select_child(self, node: SearchNode) -> SearchNode:
        """
        Select the child with the highest upper confidence bound.

        Child statistics are kept from the point of view of the player to
        move at the child, so they are negated when the parent selects.
        Ties go to the first candidate in order.
        """
        log_visits = math.log(node.visit_count)
        c = self.config.exploration_constant
        sign = -1.0 if node.is_select_node else 1.0
        best_score = -math.inf
        best_child = None
        for child in node.children:
            value = sign * child.expected_value()
            score = value + math.sqrt(c * log_visits / child.visit_count)
            if score > best_score:
                best_score = score
                best_child = child
        if best_child is None:
            raise SearchException("No children to select from")
        return best_child

    def expand_tree(self, node: SearchNode) -> Outcome:
        """
        Run one search iteration below node.

        Args:
            node: Node to start from (typically the root)

        Returns:
            Outcome for the player to move at node. fixed is True
            only when node's value became proven during this iteration.
        """
        node.visit_count += 1
        if node.is_fixed:
            return Outcome(node.fixed_result, True)

        if node.visit_count == 1:
            result = self.play_out(node.state)
            node.record(result)
            return Outcome(result, False)

        if not node.moves:
            raise SearchException("Unfixed node has no candidate moves")

        child_fixed_before = False
        if not node.is_fully_expanded():
            child = node.expand_child()
            if not child.moves:
                # Only a selection can run out of candidates
                child.fix(Result.LOSS if child.state.pieces else Result.TIE)
        else:
            child = self._select_child(node)
            child_fixed_before = child.is_fixed

        child_outcome = self.expand_tree(child)
        outcome = child_outcome.invert() if node.is_select_node else child_outcome

        if not child_fixed_before and outcome.fixed:
            if outcome.result == Result.WIN:
                return node.fix(Result.WIN)

            # A winning child would have been caught above, so the minimax
            # value of a fully fixed node is never positive here.
            if node.is_fully_expanded() and all(c.is_fixed for c in node.children):
                values = [int(c.fixed_result) for c in node.children]
                best = -min(values) if node.is_select_node else max(values)
                return node.fix(Result.LOSS if best < 0 else Result.TIE)

        node.record(outcome.result)
        return Outcome(outcome.result, False)

    # ------------------------------------------------------------------
    # Move decision
    # ------------------------------------------------------------------

    def search(self, root: SearchNode) -> Move:
        """
        Run the iteration budget and choose a move.

        Args:
            root: Root of the (possibly reused) tree; must have at least one
                candidate move

        Returns:
            The chosen Select or Place move

        Raises:
            SearchException: If the root has no candidate moves
        """
        if not root.moves:
            raise SearchException("Cannot search a position without candidate moves")

        for _ in range(self.config.iterations_per_move):
            if root.is_fixed:
                break
            self.expand_tree(root)

        if root.is_fixed:
            logger.info(f"Root node has fixed value: {root.fixed_result.name}")
            return self.best_move_from_fixed(root)
        return self.best_move(root)

    def best_move_from_fixed(self, root: SearchNode) -> Move:
        """
        Pick uniformly among children that realize the root's proven value.

        Raises:
            SearchException: If the root is not fixed or no child matches
        """
        if not root.is_fixed:
            raise SearchException("Root value is not fixed")

        target = root.fixed_result.invert() if root.is_select_node else root.fixed_result
        candidates = [
            root.move_at(i)
            for i, child in enumerate(root.children)
            if child.fixed_result == target
        ]
        if not candidates:
            raise SearchException(f"No child realizes fixed value {root.fixed_result.name}")
        return self.random_choice(candidates)

    def best_move(self, root: SearchNode) -> Move:
        """
        Pick the most visited child (first one on ties).

        Falls back to a random candidate if no child was expanded yet.
        """
        if not root.children:
            logger.warning("No expanded children, choosing a random candidate")
            return root.move_at(int(self.rng.integers(len(root.moves))))

        best_index = 0
        for i, child in enumerate(root.children):
            if child.visit_count > root.children[best_index].visit_count:
                best_index = i

        if self.config.log_move_statistics:
            for stats in self.get_move_statistics(root):
                if stats['expanded']:
                    logger.debug(
                        f"Move {stats['move']!r}: ({stats['wins']} - {stats['losses']}) "
                        f"/ {stats['visits']}"
                    )
                else:
                    logger.debug(f"Move {stats['move']!r} unexpanded")

        if self.config.log_expected_value:
            value = root.children[best_index].expected_value()
            if root.is_select_node:
                value = -value
            logger.debug(f"Expected value: {value:.3f}")

        return root.move_at(best_index)

    def get_move_statistics(self, root: SearchNode) -> List[Dict[str, Any]]:
        """
        Summarize the candidates of a node.

        Returns:
            One dict per candidate move, in candidate order, with keys
            move, expanded, visits, wins, losses, fixed
        """
        stats = []
        for i in range(len(root.moves)):
            if i < len(root.children):
                child = root.children[i]
                stats.append({
                    'move': root.move_at(i),
                    'expanded': True,
                    'visits': child.visit_count,
                    'wins': child.win_count,
                    'losses': child.loss_count,
                    'fixed': child.fixed_result,
                })
            else:
                stats.append({
                    'move': root.move_at(i),
                    'expanded': False,
                    'visits': 0,
                    'wins': 0,
                    'losses': 0,
                    'fixed': None,
                })
        return stats
