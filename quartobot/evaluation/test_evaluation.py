"""
Tests for agent vs agent evaluation.

Tests the Arena game loop, seat alternation and match statistics.
"""

import logging

import numpy as np
import pytest

from quartobot.agents import Agent, AiController, RandomAgent
from quartobot.config import SearchConfig
from quartobot.evaluation.arena import Arena
from quartobot.game.notation import replay_history
from quartobot.game.quarto import GameState, GameStateException, Move


class FirstMoveAgent(Agent):
    """Always plays the first legal move (claiming when possible)."""

    name = "first"

    def __init__(self):
        self.state = GameState()

    def execute(self, move: Move) -> bool:
        return self.state.execute(move)

    def calculate_move(self) -> Move:
        if self.state.is_quarto_possible():
            return Move.quarto()
        return self.state.list_valid_moves()[0]


class IllegalAgent(FirstMoveAgent):
    """Tries to place before a piece was selected."""

    name = "illegal"

    def calculate_move(self) -> Move:
        return Move.place(0)


@pytest.fixture
def arena():
    """Create arena for testing."""
    return Arena(progress_every=2)


def random_factory(seed: int):
    seeds = np.random.SeedSequence(seed)
    return lambda: RandomAgent(rng=np.random.default_rng(seeds.spawn(1)[0]))


class TestArena:
    """Tests for Arena game loop."""

    def test_arena_initialization(self):
        assert Arena().progress_every == 10
        assert Arena(progress_every=3).progress_every == 3

    def test_play_game_random_agents(self, arena):
        agents = [RandomAgent(rng=np.random.default_rng(1)), RandomAgent(rng=np.random.default_rng(2))]
        record = arena.play_game(agents)

        assert record['winner'] in (0, 1, None)
        assert 8 <= record['num_moves'] <= 34
        assert len(record['history']) == record['num_moves']

        state = replay_history(record['history'])
        assert state.is_over()
        assert state.winner() == record['winner']
        for agent in agents:
            assert agent.state.move_count == record['num_moves']

    def test_first_move_game_is_deterministic(self, arena):
        # Piece p on field p: the first Quarto appears in row 0 at move 8
        record = arena.play_game([FirstMoveAgent(), FirstMoveAgent()])
        assert record['history'] == "0g1h2i3jw"
        assert record['winner'] == 0
        assert record['num_moves'] == 9

    def test_illegal_move_raises(self, arena):
        with pytest.raises(GameStateException, match="illegal"):
            arena.play_game([IllegalAgent(), FirstMoveAgent()])

    def test_wrong_number_of_agents(self, arena):
        with pytest.raises(ValueError):
            arena.play_game([FirstMoveAgent()])


class TestMatch:
    """Tests for match statistics."""

    def test_match_counts(self, arena):
        results = arena.play_match(random_factory(0), random_factory(1), num_games=6, verbose=False)
        assert results['games_played'] == 6
        assert results['agent1_wins'] + results['agent2_wins'] + results['draws'] == 6
        assert results['win_rate'] == pytest.approx(results['agent1_wins'] / 6)
        assert len(results['histories']) == 6
        assert 8 <= results['avg_game_length'] <= 34

    def test_seats_alternate(self, arena):
        # The first mover always wins with FirstMoveAgent on both sides
        results = arena.play_match(FirstMoveAgent, FirstMoveAgent, num_games=4, verbose=False)
        assert results['agent1_wins'] == 2
        assert results['agent2_wins'] == 2
        assert results['draws'] == 0

    def test_invalid_num_games(self, arena):
        with pytest.raises(ValueError):
            arena.play_match(FirstMoveAgent, FirstMoveAgent, num_games=0)

    def test_progress_logged(self, arena, caplog):
        with caplog.at_level(logging.INFO, logger="quartobot.evaluation.arena"):
            arena.play_match(FirstMoveAgent, FirstMoveAgent, num_games=2)
        assert "Progress: 2/2 games" in caplog.text
        assert "Match complete" in caplog.text

    def test_mcts_beats_first_move_agent(self, arena):
        config = SearchConfig(iterations_per_move=300)
        seeds = np.random.SeedSequence(9)

        def mcts_factory():
            return AiController(config=config, rng=np.random.default_rng(seeds.spawn(1)[0]))

        results = arena.play_match(mcts_factory, FirstMoveAgent, num_games=2, verbose=False)
        assert results['agent1_wins'] >= 1
