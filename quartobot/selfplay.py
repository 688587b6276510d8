"""
Self-play Script

Entry point for playing matches between search agents (or against the random
baseline) and reporting the results. No board is rendered; games are logged
as base-34 encoded move histories.

Usage:
    # MCTS vs random baseline, 10 games
    python -m quartobot.selfplay --games 10 --opponent random

    # MCTS vs MCTS with a smaller budget for the second agent
    python -m quartobot.selfplay --iterations 20000 --opponent-iterations 5000

    # Reproducible run from a JSON config
    python -m quartobot.selfplay --config configs/search.json --seed 42
"""

import argparse
import logging
import sys
from typing import Callable, Optional

import numpy as np

from quartobot.agents import Agent, AiController, RandomAgent
from quartobot.config import SearchConfig
from quartobot.evaluation.arena import Arena

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Play Quarto matches between MCTS agents",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Match parameters
    parser.add_argument(
        '--games',
        type=int,
        default=10,
        help='Number of games to play',
    )
    parser.add_argument(
        '--opponent',
        type=str,
        choices=['mcts', 'random'],
        default='random',
        help='Opponent of the first MCTS agent',
    )

    # Search
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to JSON search config file (overrides defaults)',
    )
    parser.add_argument(
        '--iterations',
        type=int,
        default=None,
        help='Iterations per move (overrides config)',
    )
    parser.add_argument(
        '--opponent-iterations',
        type=int,
        default=None,
        help='Iterations per move of an MCTS opponent (default: same as --iterations)',
    )
    parser.add_argument(
        '--exploration',
        type=float,
        default=None,
        help='UCB exploration constant (overrides config)',
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Master random seed (default: OS entropy)',
    )

    # Logging
    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level',
    )

    return parser.parse_args(argv)


def setup_logging(log_level: str = 'INFO'):
    """
    Setup console logging.

    Args:
        log_level: Logging level
    """
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'
    logging.basicConfig(
        level=getattr(logging, log_level),
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_config(args: argparse.Namespace) -> SearchConfig:
    """
    Build the search config from defaults, config file and CLI overrides.

    Raises:
        ValueError: If the resulting config is invalid
    """
    config = SearchConfig.from_file(args.config) if args.config else SearchConfig()
    if args.iterations is not None:
        config.iterations_per_move = args.iterations
    if args.exploration is not None:
        config.exploration_constant = args.exploration
    if args.seed is not None:
        config.seed = args.seed
    config.validate()
    return config


def make_factories(
    config: SearchConfig,
    opponent: str,
    opponent_iterations: Optional[int] = None,
):
    """
    Create agent factories for a match.

    Every agent gets its own generator spawned from one master seed sequence,
    so a seeded match is reproducible while no two agents share a stream.

    Returns:
        (factory1, factory2)
    """
    seed_sequence = np.random.SeedSequence(config.seed)

    def next_rng() -> np.random.Generator:
        return np.random.default_rng(seed_sequence.spawn(1)[0])

    def mcts_factory(iterations: int) -> Callable[[], Agent]:
        agent_config = SearchConfig.from_dict(config.to_dict())
        agent_config.iterations_per_move = iterations
        return lambda: AiController(config=agent_config, rng=next_rng())

    factory1 = mcts_factory(config.iterations_per_move)
    if opponent == 'random':
        factory2 = lambda: RandomAgent(rng=next_rng())  # noqa: E731
    else:
        factory2 = mcts_factory(opponent_iterations or config.iterations_per_move)
    return factory1, factory2


def main(argv: Optional[list] = None) -> int:
    """Run a match and log its results."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info(str(config))
    logger.info(f"Opponent: {args.opponent}, games: {args.games}")

    factory1, factory2 = make_factories(config, args.opponent, args.opponent_iterations)
    results = Arena().play_match(factory1, factory2, num_games=args.games)

    for i, history in enumerate(results['histories']):
        logger.info(f"Game {i + 1}: {history}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
