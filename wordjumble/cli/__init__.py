"""
CLI commands for the word jumble game.
"""

from .play import app, cli, play_session, run_rounds

__all__ = [
    "app",
    "cli",
    "play_session",
    "run_rounds",
]
