"""
Word Jumble - gameplay session engine.
"""

from .puzzle import Puzzle, InvalidPuzzleError
from .countdown import Countdown
from .round import RoundController, RoundState, HintLevel, Outcome, score_points
from .session import GameSession, Phase, SessionSummary, RoundResult
from .stats import (
    LifetimeStats,
    StatsAggregator,
    JsonFileStatsStorage,
    MemoryStatsStorage,
    skill_level,
)
from .utils import normalize

__all__ = [
    "Puzzle",
    "InvalidPuzzleError",
    "Countdown",
    "RoundController",
    "RoundState",
    "HintLevel",
    "Outcome",
    "score_points",
    "GameSession",
    "Phase",
    "SessionSummary",
    "RoundResult",
    "LifetimeStats",
    "StatsAggregator",
    "JsonFileStatsStorage",
    "MemoryStatsStorage",
    "skill_level",
    "normalize",
]
