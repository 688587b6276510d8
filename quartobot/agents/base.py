"""
Agent interface shared by the AI controller and baseline players.
"""

from abc import ABC, abstractmethod

from quartobot.game.quarto import Move


class Agent(ABC):
    """
    A player that tracks the game through the moves it is told about.

    The game loop feeds every played move (its own and the opponent's) to
    execute(), and asks calculate_move() whenever it is the agent's turn.
    """

    name: str = "agent"

    @abstractmethod
    def execute(self, move: Move) -> bool:
        """
        Apply a played move to the agent's internal state.

        Returns:
            False iff the rules reject the move, in which case the agent's
            state is unchanged
        """

    @abstractmethod
    def calculate_move(self) -> Move:
        """Choose a move for the player to move. Must not be called once the game is over."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
