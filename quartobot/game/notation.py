"""
Compact move-history encoding.

Each move is one character of a base-34 alphabet:
    - digits 0-15: Select(piece)
    - digits 16-31: Place(field - 16)
    - digit 32: Quarto
    - digit 33: Pass

A full game therefore fits in a string of at most 34 characters, e.g. the
opening Select(0), Place(0), Select(15), Place(1) encodes as "0gfh".
"""

from typing import Iterable, List

from quartobot.game.constants import NUM_FIELDS, NUM_PIECES
from quartobot.game.quarto import GameState, GameStateException, Move, MoveType

ALPHABET = "0123456789abcdefghijklmnopqrstuvwx"

PLACE_OFFSET = NUM_PIECES
QUARTO_DIGIT = PLACE_OFFSET + NUM_FIELDS
PASS_DIGIT = QUARTO_DIGIT + 1

_DIGITS = {ch: i for i, ch in enumerate(ALPHABET)}


def encode_move(move: Move) -> str:
    """Encode a single move as one character."""
    if move.type == MoveType.SELECT:
        return ALPHABET[move.piece]
    if move.type == MoveType.PLACE:
        return ALPHABET[PLACE_OFFSET + move.field]
    if move.type == MoveType.QUARTO:
        return ALPHABET[QUARTO_DIGIT]
    return ALPHABET[PASS_DIGIT]


def decode_move(ch: str) -> Move:
    """
    Decode a single character into a move.

    Args:
        ch: One character of the alphabet (case-insensitive)

    Returns:
        The decoded Move

    Raises:
        ValueError: If ch is not a character of the alphabet
    """
    digit = _DIGITS.get(ch.lower()) if len(ch) == 1 else None
    if digit is None:
        raise ValueError(f"Invalid move character: {ch!r}")

    if digit < PLACE_OFFSET:
        return Move.select(digit)
    if digit < QUARTO_DIGIT:
        return Move.place(digit - PLACE_OFFSET)
    if digit == QUARTO_DIGIT:
        return Move.quarto()
    return Move.pass_()


def encode_history(moves: Iterable[Move]) -> str:
    return "".join(encode_move(move) for move in moves)


def decode_history(text: str) -> List[Move]:
    return [decode_move(ch) for ch in text.strip()]


def replay_history(text: str) -> GameState:
    """
    Rebuild a game state from an encoded history.

    Args:
        text: Encoded move history

    Returns:
        GameState after executing every move in order

    Raises:
        ValueError: If the text contains a character outside the alphabet
        GameStateException: If a move is illegal at the point it is played
    """
    state = GameState()
    for index, move in enumerate(decode_history(text)):
        if not state.execute(move):
            raise GameStateException(
                f"Illegal move {move!r} at position {index} of history {text!r}"
            )
    return state
