from __future__ import annotations
import logging
import os
from typing import List

from openai import AsyncOpenAI
from tenacity import RetryError, retry, stop_after_attempt, wait_exponential

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


class OpenAISource:
    """
    Puzzle source backed by OpenAI chat models.
    Any OpenAI-compatible server works through base_url (Together AI, vLLM, Ollama).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        count: int = DEFAULT_PUZZLE_COUNT,
        temperature: float = 0.9,
        max_tokens: int = 1024,
    ):
        """
        Initialize OpenAI source.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Model identifier (e.g., "gpt-4o")
            base_url: Alternate OpenAI-compatible endpoint
            count: Puzzles requested per theme
        """
        self.client = AsyncOpenAI(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            base_url=base_url,
        )
        self.model = model
        self.count = count
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate_puzzles(self, theme: str) -> List[Puzzle]:
        try:
            raw_text = await self._generate(theme)
            return parse_puzzles(raw_text)
        except (RetryError, ValueError) as e:
            logger.error("Error generating puzzles with %s: %s", self.model, describe_error(e))
            raise PuzzleSourceError(FAILURE_MESSAGE) from e

    @retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=8))
    async def _generate(self, theme: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(theme, self.count)},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content
