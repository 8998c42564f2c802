from __future__ import annotations
from typing import Dict, Tuple

from .base_client import DEFAULT_PUZZLE_COUNT, PuzzleSource
from .anthropic_client import AnthropicSource
from .gemini_client import GeminiSource
from .jsonl_source import JsonlPuzzleSource
from .openai_client import OpenAISource


# Model presets for convenience
MODEL_PRESETS: Dict[str, str] = {
    # Google models
    "gemini": "gemini-2.5-flash",
    "gemini-flash": "gemini-2.5-flash",
    "gemini-flash-lite": "gemini-2.5-flash-lite",
    "gemini-pro": "gemini-2.5-pro",

    # OpenAI models
    "gpt4o": "gpt-4o",
    "gpt4o-mini": "gpt-4o-mini",

    # Anthropic models (use dated versions for reliability)
    "sonnet": "claude-3-5-sonnet-20241022",
    "haiku": "claude-3-5-haiku-20241022",
}


def get_source_for_model(model: str, count: int = DEFAULT_PUZZLE_COUNT) -> Tuple[PuzzleSource, str]:
    """
    Factory function to get the appropriate puzzle source for a model.

    Args:
        model: Preset name, full model string, or "jsonl:<path>" for an offline file
        count: Puzzles per theme

    Returns:
        (source, resolved_model)

    Raises:
        ValueError: If model type cannot be determined
    """
    if model.startswith("jsonl:"):
        path = model[len("jsonl:"):]
        return JsonlPuzzleSource(path, count=count), model

    # Resolve preset aliases
    resolved_model = MODEL_PRESETS.get(model, model)
    lowered = resolved_model.lower()

    if "gemini" in lowered:
        return GeminiSource(model=resolved_model, count=count), resolved_model

    elif lowered.startswith("gpt") or lowered.startswith("o1") or lowered.startswith("o3"):
        return OpenAISource(model=resolved_model, count=count), resolved_model

    elif "claude" in lowered:
        return AnthropicSource(model=resolved_model, count=count), resolved_model

    else:
        raise ValueError(
            f"Unknown model type: {model}\n"
            f"Supported: Google (gemini-*), OpenAI (gpt-*), Anthropic (claude-*), "
            f"or jsonl:<path> for an offline puzzle file"
        )
