"""
Game constants for Quarto.

This module defines the board geometry (fields and lines), the piece
attribute encoding, and the move-count thresholds that drive turn order.
"""

from typing import List, Tuple

# Board and pieces
NUM_FIELDS = 16
NUM_PIECES = 16
BOARD_SIZE = 4

# Move counts
PASS_PHASE_START = 32  # After 32 moves every piece is placed; only pass or quarto remain
MAX_MOVES = 34  # Two passes after a full board end the game in a tie
MIN_QUARTO_MOVES = 8  # Four placements are needed to complete a line

# Attribute masks
ALL_ATTRIBUTES = 0xFF

# Lines: rows 0-3, columns 4-7, main diagonal 8, anti-diagonal 9
LINES: Tuple[Tuple[int, ...], ...] = tuple(
    [tuple(4 * row + col for col in range(BOARD_SIZE)) for row in range(BOARD_SIZE)]
    + [tuple(4 * row + col for row in range(BOARD_SIZE)) for col in range(BOARD_SIZE)]
    + [(0, 5, 10, 15), (3, 6, 9, 12)]
)
NUM_LINES = len(LINES)


def _build_lines_per_field() -> Tuple[Tuple[int, ...], ...]:
    lines_per_field: List[List[int]] = [[] for _ in range(NUM_FIELDS)]
    for line, fields in enumerate(LINES):
        for field in fields:
            lines_per_field[field].append(line)
    return tuple(tuple(lines) for lines in lines_per_field)


# Field -> lines it belongs to (2 or 3 entries each)
LINES_PER_FIELD = _build_lines_per_field()


def attribute_values(piece: int) -> int:
    """
    Compute the attribute mask of a piece.

    Each of the 4 bits of a piece selects one of two values for one binary
    attribute. The mask has one bit per (attribute, value) pair, so exactly 4
    of its 8 bits are set. Two pieces share an attribute value iff their
    masks intersect.

    Args:
        piece: Piece number (0-15)

    Returns:
        8-bit attribute mask

    Examples:
        >>> attribute_values(0)
        15
        >>> attribute_values(15)
        240
        >>> attribute_values(0) & attribute_values(15)
        0
    """
    return (piece << 4) | (piece ^ 0xF)


# Precomputed masks for the hot search loops
ATTRIBUTE_VALUES: Tuple[int, ...] = tuple(attribute_values(p) for p in range(NUM_PIECES))
