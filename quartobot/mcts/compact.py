"""
Compact incremental game state for fast simulation.

CompactState mirrors GameState in a denormalized form: besides board
occupancy and piece availability it keeps, for each of the 10 lines, the
running intersection of the attribute masks placed on it and the number of
empty slots. This makes the "does this selection hand the opponent an
immediate win" check O(1) per piece, which is what keeps random playouts
cheap enough to run in bulk.

Only select() and place() mutate a CompactState. Search code copies it
before every playout and every child expansion; GameState is never touched.
"""

from typing import List

from quartobot.game.constants import (
    NUM_FIELDS,
    NUM_PIECES,
    NUM_LINES,
    ALL_ATTRIBUTES,
    ATTRIBUTE_VALUES,
    LINES_PER_FIELD,
)
from quartobot.game.quarto import GameState, GameStateException, NextAction

ALL_PIECES = (1 << NUM_PIECES) - 1
NO_PIECE = -1
EMPTY = -1


class CompactState:
    """
    Search-side snapshot of a position.

    Attributes:
        next_piece: Piece waiting to be placed, or -1 if a piece must be
            selected next
        pieces: Bitmask of pieces still available for selection
        fields: 16 entries, the piece on each field or -1 if empty
        common: Per line, AND of the attribute masks placed on it (0xFF when
            the line is empty)
        slots_left: Per line, number of empty fields (4 when the line is empty)
    """

    __slots__ = ("next_piece", "pieces", "fields", "common", "slots_left")

    def __init__(self):
        self.next_piece: int = NO_PIECE
        self.pieces: int = ALL_PIECES
        self.fields: List[int] = [EMPTY] * NUM_FIELDS
        self.common: List[int] = [ALL_ATTRIBUTES] * NUM_LINES
        self.slots_left: List[int] = [4] * NUM_LINES

    @classmethod
    def from_game_state(cls, state: GameState) -> "CompactState":
        """
        Derive a CompactState from a rules-engine state.

        Args:
            state: Game state whose next action is SELECT or PLACE

        Returns:
            Fresh CompactState mirroring the position

        Raises:
            GameStateException: If the game is over or in the pass phase
        """
        action = state.next_action()
        if action not in (NextAction.SELECT, NextAction.PLACE):
            raise GameStateException(
                f"Cannot derive search state when next action is {action.name}"
            )

        cst = cls()
        if action == NextAction.PLACE:
            cst.next_piece = state.last_selected_piece
            cst.pieces &= ~(1 << cst.next_piece)

        for field, piece in enumerate(state.fields):
            if piece is None:
                continue
            cst.pieces &= ~(1 << piece)
            cst.fields[field] = piece
            cst._update_lines(field, piece)
        return cst

    def copy(self) -> "CompactState":
        cst = CompactState.__new__(CompactState)
        cst.next_piece = self.next_piece
        cst.pieces = self.pieces
        cst.fields = self.fields[:]
        cst.common = self.common[:]
        cst.slots_left = self.slots_left[:]
        return cst

    def must_select(self) -> bool:
        """True if the next move is a selection rather than a placement."""
        return self.next_piece < 0

    def select(self, piece: int) -> None:
        """Mark an available piece as pending placement."""
        assert 0 <= piece < NUM_PIECES, f"invalid piece {piece}"
        assert self.next_piece < 0, "a piece is already pending"
        assert self.pieces & (1 << piece), f"piece {piece} is not available"
        self.next_piece = piece
        self.pieces &= ~(1 << piece)

    def place(self, field: int) -> None:
        """Place the pending piece on an empty field and update its lines."""
        assert 0 <= field < NUM_FIELDS, f"invalid field {field}"
        assert self.next_piece >= 0, "no piece is pending"
        assert self.fields[field] < 0, f"field {field} is occupied"
        piece = self.next_piece
        self.next_piece = NO_PIECE
        self.fields[field] = piece
        self._update_lines(field, piece)

    def _update_lines(self, field: int, piece: int) -> None:
        values = ATTRIBUTE_VALUES[piece]
        for line in LINES_PER_FIELD[field]:
            self.slots_left[line] -= 1
            self.common[line] &= values

    def winning_values(self) -> int:
        """Union of the shared attributes of all lines with one slot left."""
        winning = 0
        for line in range(NUM_LINES):
            if self.slots_left[line] == 1:
                winning |= self.common[line]
        return winning

    def nonlosing_moves(self) -> List[int]:
        """
        List candidate moves that do not hand the opponent an immediate win.

        Returns:
            - Selection turn: available pieces whose attributes do not
              complete any line with one slot left. An empty list means every
              selection loses.
            - Placement turn: every empty field.
        """
        if self.next_piece >= 0:
            return [f for f in range(NUM_FIELDS) if self.fields[f] < 0]

        winning = self.winning_values()
        return [
            p for p in range(NUM_PIECES)
            if self.pieces & (1 << p) and not ATTRIBUTE_VALUES[p] & winning
        ]

    def has_quarto(self) -> bool:
        """True if some line is full and its pieces share an attribute."""
        return any(
            self.slots_left[line] == 0 and self.common[line] != 0
            for line in range(NUM_LINES)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, CompactState):
            return NotImplemented
        return (
            self.next_piece == other.next_piece
            and self.pieces == other.pieces
            and self.fields == other.fields
            and self.common == other.common
            and self.slots_left == other.slots_left
        )

    def __repr__(self) -> str:
        return (
            f"CompactState(next_piece={self.next_piece}, "
            f"pieces={self.pieces:#06x}, "
            f"placed={sum(1 for f in self.fields if f >= 0)})"
        )
