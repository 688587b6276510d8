"""Agent evaluation."""

from quartobot.evaluation.arena import Arena

__all__ = ['Arena']
