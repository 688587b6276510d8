"""
Tests for the base-34 move-history encoding.
"""

import pytest

from quartobot.game.notation import (
    ALPHABET,
    decode_history,
    decode_move,
    encode_history,
    encode_move,
    replay_history,
)
from quartobot.game.quarto import GameStateException, Move


class TestMoveEncoding:
    """Test single-character encoding."""

    def test_alphabet_size(self):
        assert len(ALPHABET) == 34
        assert len(set(ALPHABET)) == 34

    def test_digit_ranges(self):
        assert encode_move(Move.select(0)) == "0"
        assert encode_move(Move.select(15)) == "f"
        assert encode_move(Move.place(0)) == "g"
        assert encode_move(Move.place(15)) == "v"
        assert encode_move(Move.quarto()) == "w"
        assert encode_move(Move.pass_()) == "x"

    def test_decode_every_character(self):
        decoded = [decode_move(ch) for ch in ALPHABET]
        assert decoded[:16] == [Move.select(p) for p in range(16)]
        assert decoded[16:32] == [Move.place(f) for f in range(16)]
        assert decoded[32] == Move.quarto()
        assert decoded[33] == Move.pass_()

    def test_decode_is_case_insensitive(self):
        assert decode_move("G") == Move.place(0)

    @pytest.mark.parametrize("ch", ["y", "z", "-", " ", "", "ab"])
    def test_decode_invalid_character(self, ch):
        with pytest.raises(ValueError, match="Invalid move character"):
            decode_move(ch)


class TestHistory:
    """Test whole-game histories."""

    def test_encode_opening(self):
        moves = [Move.select(0), Move.place(0), Move.select(15), Move.place(1)]
        assert encode_history(moves) == "0gfh"
        assert decode_history("0gfh") == moves

    def test_replay_history(self):
        state = replay_history("0gfh")
        assert state.move_count == 4
        assert state.piece_at(0) == 0
        assert state.piece_at(1) == 15

    def test_replay_quarto(self):
        state = replay_history("0g1h2i3jw")
        assert state.is_over()
        assert state.winner() == 0

    def test_replay_illegal_history(self):
        with pytest.raises(GameStateException, match="position 1"):
            replay_history("00")

    def test_replay_invalid_character(self):
        with pytest.raises(ValueError):
            replay_history("0g!")
