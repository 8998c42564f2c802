from __future__ import annotations
import logging
import os
from typing import List

from anthropic import AsyncAnthropic
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


class AnthropicSource:
    """Puzzle source backed by Anthropic Claude models using official SDK."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-3-5-haiku-20241022",
        count: int = DEFAULT_PUZZLE_COUNT,
        temperature: float = 0.9,
        max_tokens: int = 1024,
    ):
        """
        Initialize Anthropic source.

        Args:
            api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
        """
        self.client = AsyncAnthropic(api_key=api_key or os.getenv("ANTHROPIC_API_KEY"))
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
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": build_prompt(theme, self.count)}],
        )
        return response.content[0].text
