"""
Arena system for agent vs agent evaluation.

This module plays games between two agents to measure their relative
strength, e.g. the MCTS controller at different iteration budgets, or against
the random baseline. Seats alternate between games so that neither agent
profits from always moving first.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from quartobot.agents.base import Agent
from quartobot.game.notation import encode_history
from quartobot.game.quarto import GameState, GameStateException, Move

logger = logging.getLogger(__name__)

AgentFactory = Callable[[], Agent]


class Arena:
    """
    Tournament system for agent vs agent evaluation.

    Agents are created fresh for every game by the given factories, so no
    search tree or random state leaks from one game into the next except
    through the factory itself.
    """

    def __init__(self, progress_every: int = 10):
        """
        Initialize arena.

        Args:
            progress_every: Log progress every N games during a match
        """
        self.progress_every = progress_every

    def play_game(self, agents: List[Agent]) -> Dict[str, Any]:
        """
        Play a single game.

        Every move is fed to both agents, so each keeps its own view of the
        game in sync with the referee state.

        Args:
            agents: Two agents; agents[0] moves first

        Returns:
            Game record:
            - winner: Index of the winning agent, or None for a tie
            - num_moves: Moves played (including passes and the claim)
            - history: Base-34 encoded move history

        Raises:
            GameStateException: If an agent proposes an illegal move
        """
        if len(agents) != 2:
            raise ValueError(f"Quarto needs exactly 2 agents, got {len(agents)}")

        state = GameState()
        moves: List[Move] = []
        while not state.is_over():
            player = state.next_player()
            move = agents[player].calculate_move()
            if not state.execute(move):
                raise GameStateException(
                    f"{agents[player].name} proposed illegal move {move!r} "
                    f"at move {state.move_count}"
                )
            for agent in agents:
                if not agent.execute(move):
                    raise GameStateException(
                        f"{agent.name} rejected move {move!r} at move {state.move_count - 1}"
                    )
            moves.append(move)

        return {
            'winner': state.winner(),
            'num_moves': state.move_count,
            'history': encode_history(moves),
        }

    def play_match(
        self,
        factory1: AgentFactory,
        factory2: AgentFactory,
        num_games: int = 20,
        verbose: bool = True,
    ) -> Dict[str, Any]:
        """
        Play a match between two agents.

        Agent 1 moves first in even-numbered games, agent 2 in odd ones.

        Args:
            factory1: Creates agent 1 for each game
            factory2: Creates agent 2 for each game
            num_games: Number of games to play
            verbose: Log progress and the final summary

        Returns:
            Match results:
            - agent1_wins: Number of games agent 1 won
            - agent2_wins: Number of games agent 2 won
            - draws: Number of ties
            - win_rate: Agent 1 win rate
            - avg_game_length: Average number of moves per game
            - games_played: Total games played
            - histories: Encoded history of every game
        """
        if num_games <= 0:
            raise ValueError(f"num_games must be positive, got {num_games}")

        agent1_wins = 0
        agent2_wins = 0
        draws = 0
        game_lengths = []
        histories = []

        for game_idx in range(num_games):
            agent1_seat = game_idx % 2
            agents: List[Optional[Agent]] = [None, None]
            agents[agent1_seat] = factory1()
            agents[1 - agent1_seat] = factory2()

            record = self.play_game(agents)
            game_lengths.append(record['num_moves'])
            histories.append(record['history'])

            if record['winner'] is None:
                draws += 1
            elif record['winner'] == agent1_seat:
                agent1_wins += 1
            else:
                agent2_wins += 1

            games_played = game_idx + 1
            if verbose and games_played % self.progress_every == 0:
                logger.info(
                    f"Progress: {games_played}/{num_games} games, "
                    f"agent1 win rate: {agent1_wins / games_played:.1%}"
                )

        results = {
            'agent1_wins': agent1_wins,
            'agent2_wins': agent2_wins,
            'draws': draws,
            'win_rate': agent1_wins / num_games,
            'avg_game_length': float(np.mean(game_lengths)),
            'games_played': num_games,
            'histories': histories,
        }

        if verbose:
            logger.info(
                f"Match complete: agent1 {agent1_wins} - agent2 {agent2_wins} "
                f"- draws {draws} (win rate {results['win_rate']:.1%}, "
                f"avg length {results['avg_game_length']:.1f})"
            )

        return results
