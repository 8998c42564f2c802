from __future__ import annotations
import logging
import os
from typing import List

import google.generativeai as genai
from tenacity import RetryError, retry, stop_after_attempt, wait_exponential
from typing_extensions import TypedDict

from ..puzzle import Puzzle
from .base_client import (
    DEFAULT_PUZZLE_COUNT,
    FAILURE_MESSAGE,
    SYSTEM_PROMPT,
    PuzzleSourceError,
    build_prompt,
    describe_error,
    parse_puzzles,
)

logger = logging.getLogger(__name__)


class PuzzleSchema(TypedDict):
    solution: str
    jumbledWord: str
    hint: str
    wordCount: int


class PuzzleBatchSchema(TypedDict):
    puzzles: list[PuzzleSchema]


class GeminiSource:
    """Puzzle source backed by Google Gemini models using official SDK."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash",
        count: int = DEFAULT_PUZZLE_COUNT,
        temperature: float = 0.9,
    ):
        """
        Initialize Gemini source.

        Args:
            api_key: Google API key (defaults to GOOGLE_API_KEY, GEMINI_API_KEY or API_KEY env vars)
            model: Gemini model name (e.g., "gemini-2.5-flash")
            count: Puzzles requested per theme
            temperature: Sampling temperature
        """
        api_key = (
            api_key
            or os.getenv("GOOGLE_API_KEY")
            or os.getenv("GEMINI_API_KEY")
            or os.getenv("API_KEY")
        )
        if not api_key:
            raise ValueError("GOOGLE_API_KEY not found in environment")
        genai.configure(api_key=api_key)
        self.model = model
        self.count = count
        self.temperature = temperature

    async def generate_puzzles(self, theme: str) -> List[Puzzle]:
        try:
            raw_text = await self._generate(theme)
            return parse_puzzles(raw_text)
        except (RetryError, ValueError) as e:
            logger.error("Error generating puzzles with Gemini: %s", describe_error(e))
            raise PuzzleSourceError(FAILURE_MESSAGE) from e

    @retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=8))
    async def _generate(self, theme: str) -> str:
        generation_config = {
            "temperature": self.temperature,
            "response_mime_type": "application/json",  # Request JSON output
            "response_schema": PuzzleBatchSchema,
        }
        gem_model = genai.GenerativeModel(
            model_name=self.model,
            generation_config=generation_config,
            system_instruction=SYSTEM_PROMPT,
        )
        response = await gem_model.generate_content_async(build_prompt(theme, self.count))
        return response.text
