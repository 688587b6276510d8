"""
QuartoBot: Monte-Carlo tree search player for the board game Quarto.

Subpackages:
    - game: rules engine and move-history encoding
    - mcts: compact search state, search tree and search driver
    - agents: AI controller with tree reuse, random baseline
    - evaluation: arena for agent vs agent matches
"""

__version__ = "0.1.0"
