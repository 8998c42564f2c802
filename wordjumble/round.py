"""
Per-puzzle round lifecycle: countdown, hint ladder, shuffle, guesses and scoring.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Optional

from .countdown import Countdown
from .puzzle import InvalidPuzzleError, Puzzle
from .utils import distinct_arrangements, normalize, shuffle_letters

logger = logging.getLogger(__name__)

ROUND_SECONDS = 30
BASE_POINTS = 10
REVEAL_LENGTH = 3


class HintLevel(IntEnum):
    NONE = 0
    TEXT_HINT = 1
    LETTER_REVEAL = 2


# Penalty for the hint level reached. LETTER_REVEAL is the total for both
# hints, not added on top of TEXT_HINT.
HINT_PENALTIES = {
    HintLevel.NONE: 0,
    HintLevel.TEXT_HINT: 3,
    HintLevel.LETTER_REVEAL: 5,
}


class Outcome(str, Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    TIMED_OUT = "timed_out"


def score_points(remaining: int, hint_level: HintLevel) -> int:
    """points = max(0, 10 + remaining - penalty)"""
    return max(0, BASE_POINTS + remaining - HINT_PENALTIES[hint_level])


@dataclass
class RoundState:
    """Everything the presentation layer needs to draw one round."""
    puzzle: Puzzle
    display: str
    remaining: int
    hint_level: HintLevel = HintLevel.NONE
    input: str = ""
    outcome: Outcome = Outcome.PENDING
    points: Optional[int] = None
    feedback: Optional[Outcome] = None

    @property
    def hint(self) -> Optional[str]:
        return self.puzzle.hint if self.hint_level >= HintLevel.TEXT_HINT else None

    @property
    def locked_prefix(self) -> str:
        if self.hint_level is HintLevel.LETTER_REVEAL:
            return self.puzzle.solution[:REVEAL_LENGTH]
        return ""


ResolvedCallback = Callable[[Outcome, Optional[int]], None]


class RoundController:
    """
    Owns a single puzzle from start until it resolves CORRECT or TIMED_OUT.

    Once resolved or cancelled, the round is frozen: every operation becomes
    a no-op, so a late clock tick can never touch it.
    """

    def __init__(
        self,
        round_seconds: int = ROUND_SECONDS,
        rng: Optional[random.Random] = None,
        on_resolved: Optional[ResolvedCallback] = None,
    ):
        if round_seconds <= 0:
            raise ValueError(f"round_seconds must be positive, got {round_seconds}")
        self.round_seconds = round_seconds
        self.rng = rng or random.Random()
        self.on_resolved = on_resolved
        self.state: Optional[RoundState] = None
        self._countdown = Countdown(round_seconds)
        self._cancelled = False

    def start(self, puzzle: Puzzle) -> RoundState:
        """Reset all round state for puzzle and start the countdown."""
        if not isinstance(puzzle, Puzzle):
            raise InvalidPuzzleError(f"Round needs a Puzzle, got {type(puzzle).__name__}")
        self._cancelled = False
        self._countdown.start()
        self.state = RoundState(
            puzzle=puzzle,
            display=puzzle.jumbled_word,
            remaining=self._countdown.remaining,
        )
        logger.debug("Round started: %s (%ss)", puzzle.jumbled_word, self.round_seconds)
        return self.state

    @property
    def is_pending(self) -> bool:
        return (
            self.state is not None
            and not self._cancelled
            and self.state.outcome is Outcome.PENDING
        )

    def tick(self) -> None:
        """Count one second down; reaching zero times the round out."""
        if not self.is_pending:
            return
        expired = self._countdown.tick()
        self.state.remaining = self._countdown.remaining
        if expired:
            self._resolve(Outcome.TIMED_OUT, None)

    def submit_guess(self, text: str) -> Optional[Outcome]:
        """
        Check a guess against the solution.

        Returns:
            Outcome.CORRECT, Outcome.INCORRECT, or None when the round no
            longer accepts guesses.
        """
        if not self.is_pending:
            return None
        state = self.state
        prefix = state.locked_prefix
        if prefix and not text.lower().startswith(prefix.lower()):
            state.input = prefix
            state.feedback = Outcome.INCORRECT
            return Outcome.INCORRECT

        if normalize(text) == normalize(state.puzzle.solution):
            self._countdown.cancel()
            points = score_points(state.remaining, state.hint_level)
            state.input = text
            self._resolve(Outcome.CORRECT, points)
            return Outcome.CORRECT

        # Wrong: keep only what the hints revealed
        state.input = state.locked_prefix
        state.feedback = Outcome.INCORRECT
        return Outcome.INCORRECT

    def edit_input(self, text: str) -> Optional[str]:
        """Replace the input buffer, enforcing the revealed-letter lock."""
        if not self.is_pending:
            return None
        state = self.state
        prefix = state.locked_prefix
        if prefix and not text.lower().startswith(prefix.lower()):
            text = prefix
        state.input = text
        state.feedback = None
        return text

    def request_hint(self) -> Optional[HintLevel]:
        """Climb one step of the hint ladder; a third request does nothing."""
        if not self.is_pending:
            return None
        state = self.state
        if state.hint_level is HintLevel.LETTER_REVEAL:
            return state.hint_level
        state.hint_level = HintLevel(state.hint_level + 1)
        if state.hint_level is HintLevel.LETTER_REVEAL:
            state.input = state.locked_prefix
        logger.debug("Hint level now %s", state.hint_level.name)
        return state.hint_level

    def shuffle_display(self) -> Optional[str]:
        """Re-jumble the displayed letters; the solution is unaffected."""
        if not self.is_pending:
            return None
        state = self.state
        current = state.display
        solution = normalize(state.puzzle.solution)

        # Need an arrangement that is neither the current one nor the solution
        if distinct_arrangements(current) < 3 and len(current) > 1:
            return current
        while True:
            candidate = shuffle_letters(current, self.rng)
            if len(current) > 1 and candidate == current:
                continue
            if normalize(candidate) == solution:
                continue
            break
        state.display = candidate
        return candidate

    def cancel(self) -> None:
        """Halt the countdown without resolving the round."""
        self._countdown.cancel()
        self._cancelled = True

    async def run_clock(self, interval: float = 1.0) -> None:
        """Tick every interval seconds while this round is pending."""
        while self.is_pending:
            await asyncio.sleep(interval)
            self.tick()

    def _resolve(self, outcome: Outcome, points: Optional[int]) -> None:
        state = self.state
        state.outcome = outcome
        state.points = points
        state.feedback = outcome
        logger.info("Round resolved %s (%s points)", outcome.value, points)
        if self.on_resolved is not None:
            self.on_resolved(outcome, points)
