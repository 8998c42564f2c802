from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Mapping

from .utils import normalize

MIN_LETTERS = 4
MAX_LETTERS = 20


class InvalidPuzzleError(ValueError):
    """Raised when puzzle data does not describe a playable jumble."""


@dataclass(frozen=True)
class Puzzle:
    """One jumble: the scrambled letters, the answer and a hint."""
    solution: str
    jumbled_word: str
    hint: str
    word_count: int

    def __post_init__(self):
        problem = _find_problem(self.solution, self.jumbled_word, self.hint, self.word_count)
        if problem:
            raise InvalidPuzzleError(problem)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Puzzle":
        """
        Build a Puzzle from wire data.

        Accepts the camelCase keys models are prompted with ("jumbledWord",
        "wordCount") as well as snake_case ones.

        Raises:
            InvalidPuzzleError: if a field is missing or the puzzle is not valid
        """
        if not isinstance(data, Mapping):
            raise InvalidPuzzleError(f"Expected a mapping, got {type(data).__name__}")
        fields = {
            "solution": data.get("solution"),
            "jumbled_word": data.get("jumbledWord", data.get("jumbled_word")),
            "hint": data.get("hint"),
            "word_count": data.get("wordCount", data.get("word_count")),
        }
        missing = [k for k, v in fields.items() if v is None]
        if missing:
            raise InvalidPuzzleError(f"Missing puzzle fields: {missing}")

        # Models sometimes emit 2.0 for a count
        count = fields["word_count"]
        if isinstance(count, float) and count.is_integer():
            fields["word_count"] = int(count)
        return cls(**fields)


def _find_problem(solution: Any, jumbled: Any, hint: Any, word_count: Any) -> str | None:
    if not isinstance(solution, str) or not solution.strip():
        return "solution must be non-empty text"
    if not isinstance(jumbled, str) or not jumbled.strip():
        return "jumbledWord must be non-empty text"
    if not isinstance(hint, str) or not hint.strip():
        return "hint must be non-empty text"
    if isinstance(word_count, bool) or not isinstance(word_count, int) or word_count < 1:
        return f"wordCount must be a positive integer, got {word_count!r}"

    letters = normalize(solution)
    if not (MIN_LETTERS <= len(letters) <= MAX_LETTERS):
        return f"solution must have {MIN_LETTERS}-{MAX_LETTERS} letters, got {len(letters)}"

    scrambled = normalize(jumbled)
    if Counter(scrambled) != Counter(letters):
        return f"jumbledWord {jumbled!r} is not an anagram of {solution!r}"
    if scrambled == letters:
        return "jumbledWord must differ from the solution"
    return None
