"""
Utility functions for normalizing guesses, shuffling letters and parsing model outputs.
"""

import re
import json
import math
import random
from collections import Counter
from typing import Optional, List, Dict, Any


_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Remove all whitespace and lower-case, for guess/solution comparison."""
    return _WHITESPACE.sub("", text).lower()


def shuffle_letters(text: str, rng: Optional[random.Random] = None) -> str:
    """Return a uniformly random permutation of the characters in text."""
    letters = list(text)
    (rng or random).shuffle(letters)
    return "".join(letters)


def distinct_arrangements(text: str) -> int:
    """Number of distinct permutations of the letters in text."""
    total = math.factorial(len(text))
    for count in Counter(text).values():
        total //= math.factorial(count)
    return total


def extract_json_from_response(text: str) -> Optional[Any]:
    """
    Extract a JSON array or object from a model response.
    Handles both ```json blocks and raw JSON.
    """
    # Try to find JSON in markdown code blocks first
    matches = list(re.finditer(r'```(?:json)?\s*([\[{].*?[\]}])\s*```', text, re.DOTALL))
    if matches:
        try:
            return json.loads(matches[-1].group(1))
        except json.JSONDecodeError:
            pass

    # Raw JSON: balanced scan from the first opening bracket
    starts = [i for i in (text.find('['), text.find('{')) if i != -1]
    if not starts:
        return None
    start = min(starts)
    opener = text[start]
    closer = ']' if opener == '[' else '}'
    depth = 0
    for i, c in enumerate(text[start:]):
        if c == opener:
            depth += 1
        elif c == closer:
            depth -= 1
        if depth == 0:
            try:
                return json.loads(text[start:start + i + 1])
            except json.JSONDecodeError:
                return None

    return None


def extract_puzzle_items(parsed: Any) -> List[Dict[str, Any]]:
    """
    Extract the list of puzzle dicts from parsed JSON.
    Handles a bare array or an object wrapping one.
    """
    if isinstance(parsed, list):
        return [p for p in parsed if isinstance(p, dict)]
    if not isinstance(parsed, dict):
        return []

    for key in ["puzzles", "items", "data"]:
        if key in parsed and isinstance(parsed[key], list):
            return [p for p in parsed[key] if isinstance(p, dict)]

    # Fallback: first list value
    for value in parsed.values():
        if isinstance(value, list):
            return [p for p in value if isinstance(p, dict)]

    return []
