"""
Session state machine: theme selection, puzzle loading, round sequencing and the end-of-game summary.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .models.base_client import FAILURE_MESSAGE, PuzzleSource, PuzzleSourceError
from .puzzle import InvalidPuzzleError, Puzzle
from .round import ROUND_SECONDS, Outcome, RoundController, RoundState
from .stats import LifetimeStats, StatsAggregator, skill_level

logger = logging.getLogger(__name__)

EMPTY_THEME_MESSAGE = "Theme is required and cannot be empty."
NO_PUZZLES_MESSAGE = "The AI couldn't generate puzzles for this theme. Please try another."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(frozen=True)
class RoundResult:
    puzzle: Puzzle
    outcome: Outcome
    points: int = 0


@dataclass(frozen=True)
class SessionSummary:
    theme: str
    score: int
    skill: str
    results: Tuple[RoundResult, ...]
    missed: Tuple[Puzzle, ...]
    lifetime: Optional[LifetimeStats] = None

    @property
    def solved(self) -> int:
        return sum(1 for r in self.results if r.outcome is Outcome.CORRECT)


@dataclass
class SessionState:
    phase: Phase = Phase.IDLE
    theme: str = ""
    puzzles: Tuple[Puzzle, ...] = ()
    index: int = 0
    score: int = 0
    missed: List[Puzzle] = field(default_factory=list)
    results: List[RoundResult] = field(default_factory=list)
    error: Optional[str] = None


class GameSession:
    """
    Drives one play-through at a time.

    start_game() is only honoured from IDLE; while LOADING or PLAYING it is
    ignored and returns False. Every mutation runs on the caller's event
    loop, so no locking is needed.
    """

    def __init__(
        self,
        source: PuzzleSource,
        stats: Optional[StatsAggregator] = None,
        round_seconds: int = ROUND_SECONDS,
        rng: Optional[random.Random] = None,
    ):
        if round_seconds <= 0:
            raise ValueError(f"round_seconds must be positive, got {round_seconds}")
        self.source = source
        self.stats = stats
        self.round_seconds = round_seconds
        self.rng = rng or random.Random()
        self.state = SessionState()
        self.round: Optional[RoundController] = None
        self.lifetime: Optional[LifetimeStats] = stats.load() if stats is not None else None

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def current_puzzle(self) -> Optional[Puzzle]:
        if self.state.phase is not Phase.PLAYING:
            return None
        return self.state.puzzles[self.state.index]

    @property
    def round_state(self) -> Optional[RoundState]:
        return self.round.state if self.round is not None else None

    async def start_game(self, theme: str) -> bool:
        """
        Load puzzles for theme and begin the first round.

        Returns:
            True when the session is now PLAYING. False when the request was
            ignored or loading failed; on failure state.error holds the reason.
        """
        if self.state.phase is not Phase.IDLE:
            logger.warning("Ignoring start_game(%r) while %s", theme, self.state.phase.value)
            return False

        theme = (theme or "").strip()
        if not theme:
            self.state = SessionState(error=EMPTY_THEME_MESSAGE)
            return False

        self.state = SessionState(phase=Phase.LOADING, theme=theme)
        logger.info("Loading puzzles for theme %r", theme)
        try:
            raw = await self.source.generate_puzzles(theme)
            puzzles = self._coerce_puzzles(raw)
            if not puzzles:
                raise PuzzleSourceError(NO_PUZZLES_MESSAGE)
        except asyncio.CancelledError:
            self.state = SessionState()
            raise
        except InvalidPuzzleError as e:
            logger.error("Source returned a malformed puzzle for %r: %s", theme, e)
            self.state = SessionState(error=FAILURE_MESSAGE)
            return False
        except Exception as e:
            message = str(e) or UNKNOWN_ERROR_MESSAGE
            logger.error("Could not start game for %r: %s", theme, e)
            self.state = SessionState(error=message)
            return False

        self.state = SessionState(phase=Phase.PLAYING, theme=theme, puzzles=puzzles)
        logger.info("Playing %d puzzles for %r", len(puzzles), theme)
        self._start_round()
        return True

    def round_resolved(self, outcome: Outcome, points: Optional[int] = None) -> None:
        """Fold a finished round into the session and move to the next puzzle."""
        if outcome not in (Outcome.CORRECT, Outcome.TIMED_OUT):
            raise ValueError(f"A round can only resolve CORRECT or TIMED_OUT, got {outcome}")
        state = self.state
        if state.phase is not Phase.PLAYING:
            logger.debug("Ignoring round result while %s", state.phase.value)
            return
        if self.round is not None:
            self.round.cancel()
            self.round = None

        puzzle = state.puzzles[state.index]
        if outcome is Outcome.CORRECT:
            earned = max(0, points or 0)
            state.score += earned
            state.results.append(RoundResult(puzzle, outcome, earned))
        else:
            state.missed.append(puzzle)
            state.results.append(RoundResult(puzzle, outcome, 0))

        if state.index >= len(state.puzzles) - 1:
            self._finish()
        else:
            state.index += 1
            self._start_round()

    def restart(self) -> None:
        """Drop the session and return to IDLE; lifetime stats are untouched."""
        if self.state.phase is Phase.LOADING:
            logger.warning("Ignoring restart while loading")
            return
        if self.round is not None:
            self.round.cancel()
            self.round = None
        self.state = SessionState()

    def tick(self) -> None:
        if self._playing():
            self.round.tick()

    def submit_guess(self, text: str) -> Optional[Outcome]:
        if not self._playing():
            return None
        return self.round.submit_guess(text)

    def edit_input(self, text: str) -> Optional[str]:
        if not self._playing():
            return None
        return self.round.edit_input(text)

    def request_hint(self):
        if not self._playing():
            return None
        return self.round.request_hint()

    def shuffle_display(self) -> Optional[str]:
        if not self._playing():
            return None
        return self.round.shuffle_display()

    def summary(self) -> SessionSummary:
        state = self.state
        return SessionSummary(
            theme=state.theme,
            score=state.score,
            skill=skill_level(state.score),
            results=tuple(state.results),
            missed=tuple(state.missed),
            lifetime=self.lifetime,
        )

    def _playing(self) -> bool:
        return self.state.phase is Phase.PLAYING and self.round is not None

    def _start_round(self) -> None:
        controller = RoundController(
            round_seconds=self.round_seconds,
            rng=self.rng,
        )
        # Bind the callback to this controller so a superseded round cannot report
        controller.on_resolved = lambda outcome, points: self._on_round_resolved(controller, outcome, points)
        self.round = controller
        controller.start(self.state.puzzles[self.state.index])

    def _on_round_resolved(self, controller: RoundController, outcome: Outcome, points: Optional[int]) -> None:
        if controller is not self.round:
            return
        self.round = None
        self.round_resolved(outcome, points)

    def _finish(self) -> None:
        self.state.phase = Phase.FINISHED
        logger.info("Session finished: %d points, %d missed", self.state.score, len(self.state.missed))
        if self.stats is not None:
            self.lifetime = self.stats.record_game_result(self.state.score)

    @staticmethod
    def _coerce_puzzles(raw) -> Tuple[Puzzle, ...]:
        if raw is None:
            return ()
        return tuple(p if isinstance(p, Puzzle) else Puzzle.from_dict(p) for p in raw)
