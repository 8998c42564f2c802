"""
Puzzle sources for the word jumble game.

This module turns a theme into a batch of puzzles:
- Google (Gemini) via official SDK, the default
- OpenAI (GPT-4o, etc.) or any OpenAI-compatible server
- Anthropic (Claude) via official SDK
- An offline JSONL file of themed puzzles

Usage:
    from wordjumble.models import get_source_for_model

    source, resolved = get_source_for_model("gemini")
    puzzles = await source.generate_puzzles("Ocean Life")
"""

from .base_client import (
    PuzzleSource,
    PuzzleSourceError,
    FAILURE_MESSAGE,
    build_prompt,
    parse_puzzles,
)
from .gemini_client import GeminiSource
from .openai_client import OpenAISource
from .anthropic_client import AnthropicSource
from .jsonl_source import JsonlPuzzleSource, read_jsonl
from .client_factory import get_source_for_model, MODEL_PRESETS

__all__ = [
    # Main functions
    "get_source_for_model",
    "build_prompt",
    "parse_puzzles",
    "read_jsonl",

    # Source classes
    "GeminiSource",
    "OpenAISource",
    "AnthropicSource",
    "JsonlPuzzleSource",

    # Base types
    "PuzzleSource",
    "PuzzleSourceError",

    # Constants
    "FAILURE_MESSAGE",
    "MODEL_PRESETS",
]
