"""
Search Configuration System

Centralized configuration for the Monte-Carlo tree search engine.
"""

import json
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Optional


@dataclass
class SearchConfig:
    """Configuration for the search engine and the AI controller."""

    # UCB exploration constant: score = value + sqrt(c * ln(N_parent) / N_child)
    exploration_constant: float = 2.0

    # Iterations per move decision (stops early once the root value is proven)
    iterations_per_move: int = 1_000_000

    # Logging
    log_move_statistics: bool = False  # per-candidate wins/losses/visits after each search
    log_expected_value: bool = False  # expected value of the chosen move

    # Seed for the controller's random generator (None = OS entropy)
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SearchConfig':
        """Build a config from a dict, ignoring keys that are not fields."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config_dict.items() if k in known})

    @classmethod
    def from_file(cls, filepath: str) -> 'SearchConfig':
        """
        Load a config saved with save().

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not valid JSON
        """
        with open(filepath) as f:
            return cls.from_dict(json.load(f))

    def save(self, filepath: str):
        """Write the config as indented JSON."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if config is valid

        Raises:
            ValueError: If config values are invalid
        """
        if self.exploration_constant < 0:
            raise ValueError(
                f"exploration_constant must be non-negative, got {self.exploration_constant}"
            )

        if self.iterations_per_move <= 0:
            raise ValueError(
                f"iterations_per_move must be positive, got {self.iterations_per_move}"
            )

        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")

        return True

    def __str__(self) -> str:
        """String representation of config."""
        lines = ["Search Configuration:"]
        lines.append(f"  MCTS: {self.iterations_per_move} iterations/move, c={self.exploration_constant}")
        lines.append(f"  Seed: {self.seed if self.seed is not None else 'OS entropy'}")
        lines.append(f"  Logging: stats={self.log_move_statistics}, value={self.log_expected_value}")
        return "\n".join(lines)


def get_fast_config() -> SearchConfig:
    """
    Get a fast search config for testing/debugging.

    Returns:
        SearchConfig with a small iteration budget
    """
    return SearchConfig(iterations_per_move=2_000)


def get_production_config() -> SearchConfig:
    """
    Get the full-strength search config.

    Returns:
        SearchConfig with the full iteration budget
    """
    return SearchConfig()  # Uses defaults
