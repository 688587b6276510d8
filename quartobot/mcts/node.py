"""
Search tree node with exact-value fixing.

Each SearchNode owns a CompactState, its visit count and either running
win/loss statistics (Unresolved) or a proven game-theoretic result (Fixed).
Candidate moves are computed once, at creation, with the non-losing filter;
children are created lazily, one per candidate, in candidate order.

Statistics and fixed results are kept from the perspective of the player to
move at the node itself. A selection hands the move to the opponent, so the
search inverts values when passing them up through a Select node (see
quartobot.mcts.search).
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Union

from quartobot.game.quarto import Move, QuartoException
from quartobot.mcts.compact import CompactState


class SearchException(QuartoException):
    """Raised when the search tree is used in violation of its contract."""

    pass


class Result(IntEnum):
    """Game result; the integer value is its game-theoretic value."""

    LOSS = -1
    TIE = 0
    WIN = 1

    def invert(self) -> "Result":
        return Result(-int(self))


@dataclass(frozen=True)
class Outcome:
    """Result of one iteration, and whether it is a proven value."""

    result: Result
    fixed: bool

    def invert(self) -> "Outcome":
        return Outcome(self.result.invert(), self.fixed)


@dataclass
class Unresolved:
    """Running playout statistics of a node without a proven value."""

    wins: int = 0
    losses: int = 0


@dataclass(frozen=True)
class Fixed:
    """Proven exact value of a node. Never revised."""

    result: Result


class SearchNode:
    """
    Node in the search tree.

    Attributes:
        state: Position at this node
        visit_count: Number of iterations that passed through this node
        value: Unresolved statistics or Fixed result
        moves: Non-losing candidate moves (piece or field numbers)
        children: Expanded children, children[i] belongs to moves[i]
    """

    __slots__ = ("state", "visit_count", "value", "moves", "children")

    def __init__(self, state: CompactState, move: Optional[int] = None):
        """
        Create a node.

        Args:
            state: Position of the parent (or of this node if move is None).
                The node keeps its own copy.
            move: Candidate move of the parent to apply to the copy
        """
        self.state = state.copy()
        if move is not None:
            if self.state.must_select():
                self.state.select(move)
            else:
                self.state.place(move)
        self.visit_count = 0
        self.value: Union[Unresolved, Fixed] = Unresolved()
        self.moves: List[int] = self.state.nonlosing_moves()
        self.children: List["SearchNode"] = []

    @property
    def fixed_result(self) -> Optional[Result]:
        return self.value.result if isinstance(self.value, Fixed) else None

    @property
    def is_fixed(self) -> bool:
        return isinstance(self.value, Fixed)

    @property
    def win_count(self) -> int:
        if isinstance(self.value, Fixed):
            return int(self.value.result == Result.WIN)
        return self.value.wins

    @property
    def loss_count(self) -> int:
        if isinstance(self.value, Fixed):
            return int(self.value.result == Result.LOSS)
        return self.value.losses

    @property
    def is_select_node(self) -> bool:
        """True if the move made from this node is a selection."""
        return self.state.must_select()

    @property
    def num_expanded(self) -> int:
        return len(self.children)

    def is_fully_expanded(self) -> bool:
        return len(self.children) == len(self.moves)

    def expected_value(self) -> float:
        """Proven value if fixed, otherwise (wins - losses) / visits."""
        if isinstance(self.value, Fixed):
            return float(self.value.result)
        if self.visit_count == 0:
            return 0.0
        return (self.value.wins - self.value.losses) / self.visit_count

    def record(self, result: Result) -> None:
        """Add a playout result to the running statistics."""
        if result == Result.WIN:
            self.value.wins += 1
        elif result == Result.LOSS:
            self.value.losses += 1

    def fix(self, result: Result) -> Outcome:
        """
        Set the proven value of this node.

        Children are kept: they are needed to extract the best move from a
        fixed root and to reuse the tree on later turns.

        Raises:
            SearchException: If the node is already fixed
        """
        if isinstance(self.value, Fixed):
            raise SearchException(f"Node already fixed to {self.value.result.name}")
        self.value = Fixed(result)
        return Outcome(result, True)

    def expand_child(self) -> "SearchNode":
        """
        Create the child for the next unexpanded candidate move.

        Raises:
            SearchException: If all candidates already have children
        """
        if self.is_fully_expanded():
            raise SearchException("Cannot expand: all candidate moves expanded")
        child = SearchNode(self.state, self.moves[len(self.children)])
        self.children.append(child)
        return child

    def move_at(self, index: int) -> Move:
        """Convert candidate index to the corresponding rules-engine Move."""
        if self.is_select_node:
            return Move.select(self.moves[index])
        return Move.place(self.moves[index])

    def find_child(self, move: Move) -> Optional["SearchNode"]:
        """
        Find the expanded child reached by a Select or Place move.

        Returns:
            The child, or None if the move is not an expanded edge
        """
        value = move.piece if self.is_select_node else move.field
        if value is None:
            return None
        for i, child in enumerate(self.children):
            if self.moves[i] == value:
                return child
        return None

    def __repr__(self) -> str:
        value = (
            f"fixed={self.value.result.name}" if isinstance(self.value, Fixed)
            else f"wins={self.value.wins}, losses={self.value.losses}"
        )
        return (
            f"SearchNode(visits={self.visit_count}, {value}, "
            f"expanded={len(self.children)}/{len(self.moves)})"
        )
