from __future__ import annotations
import logging
import random
from pathlib import Path
from typing import Any, Dict, Iterable, List

import orjson

from ..puzzle import InvalidPuzzleError, Puzzle

logger = logging.getLogger(__name__)


def read_jsonl(path: str | Path) -> Iterable[Dict[str, Any]]:
    with open(path, "rb") as f:
        for line in f:
            if line.strip():
                yield orjson.loads(line)


class JsonlPuzzleSource:
    """
    Offline puzzle source.

    Each line of the file is {"theme": str, "puzzles": [...]}. Themes match
    case-insensitively; an unknown theme yields no puzzles.
    """

    def __init__(self, path: str | Path, count: int | None = None, seed: int | None = None):
        self.path = Path(path)
        self.count = count
        self.rng = random.Random(seed)
        self.themes: Dict[str, List[Puzzle]] = {}
        for row in read_jsonl(self.path):
            if not isinstance(row, dict):
                logger.warning("Skipping non-object line in %s: %r", self.path, row)
                continue
            key = str(row.get("theme", "")).strip().lower()
            batch = self.themes.setdefault(key, [])
            for item in row.get("puzzles") or []:
                try:
                    batch.append(Puzzle.from_dict(item))
                except InvalidPuzzleError as e:
                    logger.warning("Skipping invalid puzzle in %s: %s", self.path, e)

    async def generate_puzzles(self, theme: str) -> List[Puzzle]:
        puzzles = list(self.themes.get(theme.strip().lower(), []))
        if self.count is not None and len(puzzles) > self.count:
            puzzles = self.rng.sample(puzzles, self.count)
        return puzzles
