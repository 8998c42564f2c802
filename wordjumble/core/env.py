# wordjumble/core/env.py
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

KNOWN_KEYS = [
    "GOOGLE_API_KEY",        # AI Studio
    "GEMINI_API_KEY",        # alias for GOOGLE API key
    "API_KEY",               # alias for GOOGLE API key
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
]

DEFAULT_STATS_PATH = "~/.wordjumble/stats.json"


def load_env(dotenv_path: str | None = None) -> dict[str, str]:
    """
    Load .env once. Returns a dict of which keys are present (masked).
    """
    load_dotenv(dotenv_path or os.getenv("DOTENV_PATH", ".env"), override=False)
    found = {}
    for k in KNOWN_KEYS:
        v = os.getenv(k)
        if v:
            mask = v[:4] + "…" if len(v) > 4 else "…"
            found[k] = mask
    return found


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    model: str = "gemini"
    round_seconds: int = 30
    puzzle_count: int = 5
    stats_path: Path = Path(DEFAULT_STATS_PATH).expanduser()

    @classmethod
    def from_env(cls) -> "Settings":
        """Read WORDJUMBLE_* variables; call load_env() first to pick up .env."""
        return cls(
            model=os.getenv("WORDJUMBLE_MODEL") or "gemini",
            round_seconds=_int_env("WORDJUMBLE_ROUND_SECONDS", 30),
            puzzle_count=_int_env("WORDJUMBLE_PUZZLE_COUNT", 5),
            stats_path=Path(os.getenv("WORDJUMBLE_STATS_PATH") or DEFAULT_STATS_PATH).expanduser(),
        )
