"""
Tests for the search tree node.

Tests cover:
- Node initialization and candidate moves
- Lazy child expansion in candidate order
- Fixing values (and double-fix protection)
- Statistics variant (Unresolved vs Fixed)
- Finding children by rules-engine move
"""

import pytest

from quartobot.game.quarto import GameState, Move
from quartobot.mcts.compact import CompactState
from quartobot.mcts.node import (
    Fixed,
    Outcome,
    Result,
    SearchException,
    SearchNode,
    Unresolved,
)


@pytest.fixture
def root():
    """Root node at the initial position."""
    return SearchNode(CompactState.from_game_state(GameState()))


class TestResult:
    """Test Result and Outcome helpers."""

    def test_values(self):
        assert int(Result.WIN) == 1
        assert int(Result.TIE) == 0
        assert int(Result.LOSS) == -1

    def test_invert(self):
        assert Result.WIN.invert() == Result.LOSS
        assert Result.LOSS.invert() == Result.WIN
        assert Result.TIE.invert() == Result.TIE
        assert Outcome(Result.WIN, True).invert() == Outcome(Result.LOSS, True)


class TestSearchNodeBasics:
    """Test node creation and state."""

    def test_node_initialization(self, root):
        assert root.visit_count == 0
        assert root.value == Unresolved()
        assert root.fixed_result is None
        assert not root.is_fixed
        assert root.moves == list(range(16))
        assert root.children == []
        assert root.is_select_node

    def test_node_owns_state_copy(self):
        cst = CompactState()
        node = SearchNode(cst)
        cst.select(0)
        assert node.state.must_select()

    def test_child_applies_move(self, root):
        child = root.expand_child()
        assert child.state.next_piece == 0
        assert not child.is_select_node
        assert child.moves == list(range(16))
        assert root.state.must_select()

    def test_children_expand_in_candidate_order(self, root):
        for i in range(3):
            child = root.expand_child()
            assert child.state.next_piece == root.moves[i]
        assert root.num_expanded == 3
        assert not root.is_fully_expanded()

    def test_expand_beyond_candidates_raises(self):
        state = GameState()
        for field in range(15):
            state.execute(Move.select(field))
            state.execute(Move.place(field))
        state.execute(Move.select(15))
        node = SearchNode(CompactState.from_game_state(state))
        assert node.moves == [15]
        node.expand_child()
        assert node.is_fully_expanded()
        with pytest.raises(SearchException):
            node.expand_child()

    def test_repr(self, root):
        root.visit_count = 3
        assert "visits=3" in repr(root)
        assert "expanded=0/16" in repr(root)


class TestStatistics:
    """Test the Unresolved/Fixed statistics variant."""

    def test_record(self, root):
        root.visit_count = 3
        root.record(Result.WIN)
        root.record(Result.LOSS)
        root.record(Result.TIE)
        assert root.win_count == 1
        assert root.loss_count == 1
        assert root.expected_value() == 0.0

    def test_expected_value_unvisited(self, root):
        assert root.expected_value() == 0.0

    def test_expected_value_from_counts(self, root):
        root.visit_count = 4
        for _ in range(3):
            root.record(Result.WIN)
        assert root.expected_value() == pytest.approx(0.75)

    def test_fix(self, root):
        root.record(Result.LOSS)
        outcome = root.fix(Result.WIN)
        assert outcome == Outcome(Result.WIN, True)
        assert root.value == Fixed(Result.WIN)
        assert root.fixed_result == Result.WIN
        assert root.is_fixed
        assert root.win_count == 1
        assert root.loss_count == 0
        assert root.expected_value() == 1.0

    def test_fix_keeps_children(self, root):
        root.expand_child()
        root.fix(Result.TIE)
        assert root.num_expanded == 1

    def test_double_fix_raises(self, root):
        root.fix(Result.LOSS)
        with pytest.raises(SearchException, match="already fixed"):
            root.fix(Result.TIE)


class TestFindChild:
    """Test mapping rules-engine moves onto tree edges."""

    def test_move_at(self, root):
        assert root.move_at(5) == Move.select(5)
        child = root.expand_child()
        assert child.move_at(0) == Move.place(0)

    def test_find_expanded_child(self, root):
        first = root.expand_child()
        second = root.expand_child()
        assert root.find_child(Move.select(0)) is first
        assert root.find_child(Move.select(1)) is second

    def test_unexpanded_child_not_found(self, root):
        root.expand_child()
        assert root.find_child(Move.select(7)) is None

    def test_other_move_types_not_found(self, root):
        root.expand_child()
        assert root.find_child(Move.place(0)) is None
        assert root.find_child(Move.quarto()) is None
        assert root.find_child(Move.pass_()) is None
