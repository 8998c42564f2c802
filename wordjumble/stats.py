"""
Lifetime statistics across finished sessions, plus the storages that persist them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import orjson

logger = logging.getLogger(__name__)


def rounded_average(total: int, games: int) -> int:
    """Mean rounded half up; 0 when no games were played."""
    if games <= 0:
        return 0
    return (2 * total + games) // (2 * games)


@dataclass(frozen=True)
class LifetimeStats:
    total_score: int = 0
    games: int = 0
    average: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "LifetimeStats":
        """
        Parse the stored {"totalScore", "games", "average"} shape.
        The average is always recomputed from the totals.

        Raises:
            ValueError: if the record is not the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Stats record must be an object, got {type(data).__name__}")
        total = data.get("totalScore")
        games = data.get("games")
        for name, value in (("totalScore", total), ("games", games)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"Stats field {name} must be a non-negative integer, got {value!r}")
        return cls(total_score=total, games=games, average=rounded_average(total, games))

    def to_dict(self) -> Dict[str, int]:
        return {"totalScore": self.total_score, "games": self.games, "average": self.average}


class StatsStorage(Protocol):
    """Where the single lifetime record lives between runs."""

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Returns the stored record, or None when nothing was stored.

        Raises:
            ValueError: if the stored data cannot be parsed
        """
        ...

    def save(self, stats: Dict[str, int]) -> None:
        ...


class JsonFileStatsStorage:
    """Lifetime stats as a small JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        with open(self.path, "rb") as f:
            return orjson.loads(f.read())

    def save(self, stats: Dict[str, int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "wb") as f:
            f.write(orjson.dumps(stats))

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class MemoryStatsStorage:
    """Keeps the serialized record in memory; handy for tests and throwaway runs."""

    def __init__(self, raw: str | bytes | None = None):
        self.raw = raw

    def load(self) -> Optional[Dict[str, Any]]:
        if self.raw is None:
            return None
        return orjson.loads(self.raw)

    def save(self, stats: Dict[str, int]) -> None:
        self.raw = orjson.dumps(stats)

    def clear(self) -> None:
        self.raw = None


SKILL_LEVELS = [
    (150, "Genius"),
    (100, "Excellent"),
    (50, "Good"),
]


def skill_level(score: int) -> str:
    """Title for a session score or a lifetime average."""
    for threshold, title in SKILL_LEVELS:
        if score > threshold:
            return title
    return "Keep Trying"


class StatsAggregator:
    """
    Folds finished-session scores into the lifetime record.

    The record is read from storage once, when loaded, and written back
    after every update.
    """

    def __init__(self, storage: StatsStorage):
        self.storage = storage
        self.current = LifetimeStats()
        self._loaded = False

    def load(self) -> LifetimeStats:
        """Read the stored record; unreadable data is discarded in favour of zeros."""
        try:
            raw = self.storage.load()
            self.current = LifetimeStats() if raw is None else LifetimeStats.from_dict(raw)
        except (ValueError, TypeError) as e:
            # orjson.JSONDecodeError is a ValueError
            logger.warning("Discarding unreadable lifetime stats: %s", e)
            self.current = LifetimeStats()
            if hasattr(self.storage, "clear"):
                self.storage.clear()
        self._loaded = True
        return self.current

    def record_game_result(self, score: int) -> LifetimeStats:
        """Add one finished session and persist the updated record."""
        if score < 0:
            raise ValueError(f"Session score cannot be negative, got {score}")
        if not self._loaded:
            self.load()
        total = self.current.total_score + score
        games = self.current.games + 1
        self.current = LifetimeStats(
            total_score=total,
            games=games,
            average=rounded_average(total, games),
        )
        self.storage.save(self.current.to_dict())
        logger.info(
            "Lifetime stats: %d games, total %d, average %d",
            games, total, self.current.average,
        )
        return self.current
