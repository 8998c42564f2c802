from __future__ import annotations
import logging
from typing import Protocol, List, Any

from ..puzzle import InvalidPuzzleError, Puzzle, MIN_LETTERS, MAX_LETTERS
from ..utils import extract_json_from_response, extract_puzzle_items

logger = logging.getLogger(__name__)

DEFAULT_PUZZLE_COUNT = 5

FAILURE_MESSAGE = (
    "Failed to generate puzzles. The AI might be busy, or the theme might be "
    "too restrictive. Please try again."
)


class PuzzleSourceError(RuntimeError):
    """A source could not produce puzzles; the message is safe to show players."""


class PuzzleSource(Protocol):
    """Protocol defining the interface all puzzle sources must implement."""

    async def generate_puzzles(self, theme: str) -> List[Puzzle]:
        """
        Generate a batch of jumble puzzles for a theme.

        Args:
            theme: Free-text theme, e.g. "Ocean Life"

        Returns:
            Ordered, possibly empty list of valid puzzles

        Raises:
            PuzzleSourceError: If the provider call fails or the reply is unusable
        """
        ...


# Shared prompts used across all LLM sources
SYSTEM_PROMPT = (
    "You write puzzles for a word jumble game. "
    "Return STRICT JSON only, no extra text."
)

USER_PROMPT_TEMPLATE = """Generate {count} word puzzles for a word jumble game. The theme is "{theme}".
For each puzzle, provide:
1. "solution": A solution phrase. It can be a multi-word phrase if that is the most accurate answer (e.g. "Fallow Deer" instead of just "Fallow"). The total letter count (excluding spaces) must be between {min_letters} and {max_letters}.
2. "jumbledWord": A jumbled anagram of all the letters from the solution, with any spaces removed. It must not spell the solution.
3. "hint": A short, one-sentence hint for the solution.
4. "wordCount": The number of words in the solution.

The solution must be a specific *example* of the theme, not just a related concept. If the theme is "British Birds", "ROBIN" is correct but "FEATHER" is not.
For themes about geography, flora or fauna, assume a British context unless the theme names another region.

Return STRICT JSON only:
{{
  "puzzles": [
    {{"solution": "...", "jumbledWord": "...", "hint": "...", "wordCount": 1}}
  ]
}}
"""


def build_prompt(theme: str, count: int = DEFAULT_PUZZLE_COUNT) -> str:
    return USER_PROMPT_TEMPLATE.format(
        theme=theme,
        count=count,
        min_letters=MIN_LETTERS,
        max_letters=MAX_LETTERS,
    )


def parse_puzzles(text: str) -> List[Puzzle]:
    """
    Extract puzzles from a model reply, dropping any that fail validation.

    Raises:
        ValueError: If the reply holds no JSON at all
    """
    parsed = extract_json_from_response(text or "")
    if parsed is None:
        raise ValueError(f"No JSON found in response: {(text or '')[:200]}")

    puzzles: List[Puzzle] = []
    for item in extract_puzzle_items(parsed):
        try:
            puzzles.append(Puzzle.from_dict(item))
        except InvalidPuzzleError as e:
            logger.warning("Dropping invalid puzzle %r: %s", item.get("solution"), e)
    return puzzles


def describe_error(e: BaseException) -> Any:
    """Best-effort provider detail, unwrapping tenacity's RetryError."""
    cause = e.__cause__ or e
    last_attempt = getattr(e, "last_attempt", None)
    if last_attempt is not None and last_attempt.failed:
        cause = last_attempt.exception()
    return getattr(cause, "message", None) or getattr(cause, "body", None) or str(cause)
