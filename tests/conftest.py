import random

import pytest

from wordjumble.puzzle import Puzzle
from wordjumble.stats import MemoryStatsStorage, StatsAggregator


OCEAN_LIFE = [
    {"solution": "Dolphin", "jumbledWord": "hpnlodi", "hint": "A clever marine mammal.", "wordCount": 1},
    {"solution": "Starfish", "jumbledWord": "fhstirsa", "hint": "It has five arms.", "wordCount": 1},
    {"solution": "Sea Turtle", "jumbledWord": "rtelutaes", "hint": "A shelled reptile of the sea.", "wordCount": 2},
    {"solution": "Octopus", "jumbledWord": "pusotco", "hint": "Eight arms and ink.", "wordCount": 1},
    {"solution": "Jellyfish", "jumbledWord": "flyjelish", "hint": "It stings and drifts.", "wordCount": 1},
]


class FakeSource:
    """Async puzzle source returning a canned result or raising."""

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else []
        self.error = error
        self.calls = []

    async def generate_puzzles(self, theme):
        self.calls.append(theme)
        if self.error is not None:
            raise self.error
        return list(self.result)


@pytest.fixture()
def ocean_puzzles():
    return [Puzzle.from_dict(p) for p in OCEAN_LIFE]


@pytest.fixture()
def puzzle(ocean_puzzles):
    return ocean_puzzles[0]


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def ocean_source(ocean_puzzles):
    return FakeSource(result=ocean_puzzles)


@pytest.fixture()
def storage():
    return MemoryStatsStorage()


@pytest.fixture()
def aggregator(storage):
    return StatsAggregator(storage)


@pytest.fixture()
def make_source():
    return FakeSource
