"""
Core game logic for Quarto.

This module implements the rules engine: the Move value type, turn order
derived from the move count, legal-move enumeration, win detection and move
application. It contains no search logic.

Turn structure:
    - Moves 0-31 alternate Select (choose a piece for the opponent) and Place
      (put the selected piece on an empty field).
    - Moves 32-33 allow only Pass or a Quarto claim.
    - After move 34 the game ends in a tie unless a Quarto was claimed.

Illegal moves are reported through boolean results of is_valid() and
execute(); exceptions are reserved for programmer errors such as
out-of-range piece or field numbers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
import copy

from quartobot.game.constants import (
    NUM_FIELDS,
    NUM_PIECES,
    PASS_PHASE_START,
    MAX_MOVES,
    MIN_QUARTO_MOVES,
    ALL_ATTRIBUTES,
    LINES,
    LINES_PER_FIELD,
    attribute_values,
)


# ============================================================================
# Custom Exceptions
# ============================================================================


class QuartoException(Exception):
    """Base exception for Quarto errors."""

    pass


class GameStateException(QuartoException):
    """Raised when the game is in an invalid state for the requested operation."""

    pass


# ============================================================================
# Moves
# ============================================================================


class NextAction(Enum):
    """Kind of move expected next."""

    NONE = "none"  # game is over, no actions are possible
    SELECT = "select"  # select a piece for the opponent to place (or call quarto)
    PLACE = "place"  # place the given piece on a field (or call quarto)
    PASS = "pass"  # pass (or call quarto)


class MoveType(Enum):
    """Variant tag of a Move."""

    SELECT = "select"
    PLACE = "place"
    QUARTO = "quarto"
    PASS = "pass"


def _check_piece(piece: int) -> int:
    if not 0 <= piece < NUM_PIECES:
        raise ValueError(f"Invalid piece: {piece}. Must be in [0, {NUM_PIECES})")
    return piece


def _check_field(field: int) -> int:
    if not 0 <= field < NUM_FIELDS:
        raise ValueError(f"Invalid field: {field}. Must be in [0, {NUM_FIELDS})")
    return field


@dataclass(frozen=True)
class Move:
    """
    Immutable move with exactly one active variant.

    Attributes:
        type: Variant tag
        piece: Selected piece (SELECT moves only, otherwise None)
        field: Target field (PLACE moves only, otherwise None)

    Use the named constructors rather than the dataclass constructor:
        >>> Move.select(3)
        Move.select(3)
        >>> Move.place(15).field
        15
        >>> Move.quarto() == Move.quarto()
        True
    """

    type: MoveType
    piece: Optional[int] = None
    field: Optional[int] = None

    def __post_init__(self):
        """Validate that only the active variant carries a value."""
        if self.type == MoveType.SELECT:
            if self.piece is None or self.field is not None:
                raise ValueError("SELECT move requires a piece and no field")
            _check_piece(self.piece)
        elif self.type == MoveType.PLACE:
            if self.field is None or self.piece is not None:
                raise ValueError("PLACE move requires a field and no piece")
            _check_field(self.field)
        elif self.piece is not None or self.field is not None:
            raise ValueError(f"{self.type.name} move takes no piece or field")

    @classmethod
    def select(cls, piece: int) -> "Move":
        return cls(MoveType.SELECT, piece=piece)

    @classmethod
    def place(cls, field: int) -> "Move":
        return cls(MoveType.PLACE, field=field)

    @classmethod
    def quarto(cls) -> "Move":
        return cls(MoveType.QUARTO)

    @classmethod
    def pass_(cls) -> "Move":
        return cls(MoveType.PASS)

    def __repr__(self) -> str:
        """Developer representation: Move.select(3)"""
        if self.type == MoveType.SELECT:
            return f"Move.select({self.piece})"
        if self.type == MoveType.PLACE:
            return f"Move.place({self.field})"
        if self.type == MoveType.QUARTO:
            return "Move.quarto()"
        return "Move.pass_()"


# ============================================================================
# GameState Class
# ============================================================================


class GameState:
    """
    Quarto rules engine.

    Tracks the board, the available pieces and the move count. Whose turn it
    is and what they must do next is a pure function of move_count.

    Attributes:
        move_count: Number of moves played so far (0-34). Selecting and
            placing count as separate moves.
        last_selected_piece: Piece selected most recently (None at the start
            and after the first pass)
        last_placed_field: Field placed on most recently (None at the start
            and after the second pass)
        quarto_claimed: True once a Quarto has been claimed (never reset)
        fields: 16 entries, the piece on each field or None
        pieces: 16 entries, True while the piece is still available
    """

    def __init__(self):
        """Create the initial (empty board) game state."""
        self.move_count: int = 0
        self.last_selected_piece: Optional[int] = None
        self.last_placed_field: Optional[int] = None
        self.quarto_claimed: bool = False
        self.fields: List[Optional[int]] = [None] * NUM_FIELDS
        self.pieces: List[bool] = [True] * NUM_PIECES

    @classmethod
    def initial(cls) -> "GameState":
        return cls()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def previous_player(self) -> int:
        """Player (0 or 1) who made the most recent move."""
        return (self.move_count // 2) % 2

    def next_player(self) -> int:
        """Player (0 or 1) who makes the next move."""
        return ((self.move_count + 1) // 2) % 2

    def is_over(self) -> bool:
        """True iff a Quarto has been claimed or all 34 moves have been played."""
        return self.quarto_claimed or self.move_count >= MAX_MOVES

    def winner(self) -> Optional[int]:
        """
        Get the winning player.

        Returns:
            The player who claimed Quarto, or None if nobody has (game still
            ongoing, or finished in a tie; use is_over() to tell them apart)
        """
        return self.previous_player() if self.quarto_claimed else None

    def is_empty(self, field: int) -> bool:
        return self.fields[_check_field(field)] is None

    def piece_at(self, field: int) -> Optional[int]:
        return self.fields[_check_field(field)]

    def is_available(self, piece: int) -> bool:
        return self.pieces[_check_piece(piece)]

    def next_action(self) -> NextAction:
        """
        Determine the kind of move expected next.

        Returns:
            NONE when the game is over, PASS from move 32 on, otherwise
            SELECT on even and PLACE on odd move counts.

        Examples:
            >>> state = GameState()
            >>> state.next_action()
            <NextAction.SELECT: 'select'>
            >>> state.execute(Move.select(0))
            True
            >>> state.next_action()
            <NextAction.PLACE: 'place'>
        """
        if self.is_over():
            return NextAction.NONE
        if self.move_count >= PASS_PHASE_START:
            return NextAction.PASS
        if self.move_count % 2 == 0:
            return NextAction.SELECT
        return NextAction.PLACE

    def is_quarto_possible(self) -> bool:
        """
        Check whether the player to move may claim a Quarto.

        A Quarto can only first appear right after the placement that
        completes it, so only the (at most 3) lines through the most recently
        placed field are examined. Only the player who made that placement
        may claim it, which is the mover at an even move count.

        Returns:
            True iff some line through last_placed_field is full and its
            pieces share at least one attribute value
        """
        if self.move_count < MIN_QUARTO_MOVES or self.is_over():
            return False
        if self.last_placed_field is None or self.move_count % 2 != 0:
            return False

        for line in LINES_PER_FIELD[self.last_placed_field]:
            common = ALL_ATTRIBUTES
            for field in LINES[line]:
                piece = self.fields[field]
                if piece is None:
                    break
                common &= attribute_values(piece)
                if common == 0:
                    break
            else:
                return True
        return False

    def is_valid(self, move: Move) -> bool:
        """
        Check whether a move is legal in the current state.

        Args:
            move: Move to check

        Returns:
            True if the move may be executed now
        """
        if move.type == MoveType.SELECT:
            return self.next_action() == NextAction.SELECT and self.is_available(move.piece)
        if move.type == MoveType.PLACE:
            return self.next_action() == NextAction.PLACE and self.is_empty(move.field)
        if move.type == MoveType.QUARTO:
            return self.is_quarto_possible()
        if move.type == MoveType.PASS:
            return self.move_count >= PASS_PHASE_START and not self.is_over()
        return False

    def list_valid_moves(self) -> List[Move]:
        """
        List all legal moves in a canonical order.

        Returns:
            - SELECT turn: Select moves for all available pieces (ascending)
            - PLACE turn: Place moves for all empty fields (ascending)
            - PASS turn: a single Pass move
            - Game over: empty list
            A Quarto move is appended whenever is_quarto_possible() holds.
        """
        action = self.next_action()
        if action == NextAction.NONE:
            return []

        if action == NextAction.SELECT:
            moves = [Move.select(p) for p in range(NUM_PIECES) if self.pieces[p]]
        elif action == NextAction.PLACE:
            moves = [Move.place(f) for f in range(NUM_FIELDS) if self.fields[f] is None]
        else:
            moves = [Move.pass_()]

        if self.is_quarto_possible():
            moves.append(Move.quarto())
        return moves

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def execute(self, move: Move) -> bool:
        """
        Validate and apply a move.

        Args:
            move: Move to apply

        Returns:
            False (and leaves the state untouched) if the move is illegal,
            True after applying it otherwise
        """
        if not self.is_valid(move):
            return False
        self.execute_valid(move)
        return True

    def execute_valid(self, move: Move) -> None:
        """
        Apply a move without validation.

        The caller guarantees that is_valid(move) holds. Applying an illegal
        move leaves the state inconsistent.
        """
        if move.type == MoveType.SELECT:
            self.last_selected_piece = move.piece
            self.pieces[move.piece] = False
        elif move.type == MoveType.PLACE:
            self.last_placed_field = move.field
            self.fields[move.field] = self.last_selected_piece
        elif move.type == MoveType.QUARTO:
            self.quarto_claimed = True
        elif move.type == MoveType.PASS:
            if self.move_count == PASS_PHASE_START:
                self.last_selected_piece = None
            elif self.move_count == PASS_PHASE_START + 1:
                self.last_placed_field = None
        self.move_count += 1

    def copy(self) -> "GameState":
        """Create an independent copy of the game state."""
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return (
            f"GameState(moves={self.move_count}, "
            f"next={self.next_action().name}, "
            f"quarto={self.quarto_claimed})"
        )
