#!/usr/bin/env python3
"""Play word jumble sessions in the terminal."""

from __future__ import annotations

import asyncio
import logging
import random
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..core.env import Settings, load_env
from ..models import MODEL_PRESETS, get_source_for_model
from ..round import HintLevel, Outcome, RoundController
from ..session import GameSession, Phase, SessionSummary
from ..stats import JsonFileStatsStorage, LifetimeStats, StatsAggregator, skill_level
from ..utils import normalize

app = typer.Typer(help="Unscramble AI-generated words against the clock.")
console = Console()

HINT_COMMAND = "?"
SHUFFLE_COMMAND = "!"
QUIT_COMMANDS = {":q", ":quit"}


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def render_round(session: GameSession) -> None:
    state = session.round_state
    if state is None:
        return
    puzzle = state.puzzle
    words = f"{puzzle.word_count} words" if puzzle.word_count > 1 else "1 word"
    timer_style = "bold red" if state.remaining <= 5 else "bold"
    body = (
        f"[bold yellow]{' '.join(state.display.upper())}[/]\n\n"
        f"Unscramble the word ({words})  ·  [{timer_style}]{state.remaining}s[/] left"
    )
    if state.hint:
        body += f"\n[cyan]Hint:[/] {state.hint}"
    if state.locked_prefix:
        body += f"\n[cyan]Starts with:[/] {state.locked_prefix.upper()}"
    console.print(Panel(
        body,
        title=f"{session.state.theme} · Word {session.state.index + 1}/{len(session.state.puzzles)}",
        subtitle=f"Score: {session.state.score}",
    ))
    console.print(f"[dim]{HINT_COMMAND} hint · {SHUFFLE_COMMAND} shuffle · :q quit[/]")


def with_prefix(line: str, prefix: str) -> str:
    """Complete a typed guess so it starts with the revealed prefix."""
    if not prefix or line.lower().startswith(prefix.lower()):
        return line
    letters = normalize(prefix)
    if not normalize(line).startswith(letters):
        return prefix + line
    # Player retyped the prefix letters without its spacing
    matched = 0
    for i, ch in enumerate(line):
        if not ch.isspace():
            matched += 1
        if matched == len(letters):
            return prefix + line[i + 1:].lstrip()
    return prefix


def handle_line(session: GameSession, controller: RoundController, line: str) -> None:
    """Apply one line of player input to the active round."""
    line = line.strip()
    if not line:
        return
    if line in QUIT_COMMANDS:
        session.restart()
        return
    if line == HINT_COMMAND:
        level = session.request_hint()
        if level is HintLevel.LETTER_REVEAL:
            console.print(f"[cyan]Hint:[/] {controller.state.hint}  ([red]-5 pts total[/])")
            console.print(f"[cyan]Starts with:[/] {controller.state.locked_prefix.upper()}")
        elif level is HintLevel.TEXT_HINT:
            console.print(f"[cyan]Hint:[/] {controller.state.hint}  ([red]-3 pts[/])")
        return
    if line == SHUFFLE_COMMAND:
        display = session.shuffle_display()
        if display:
            console.print(f"[bold yellow]{' '.join(display.upper())}[/]")
        return

    # Typed letters continue after the revealed prefix
    session.edit_input(with_prefix(line, controller.state.locked_prefix))
    result = session.submit_guess(controller.state.input)
    if result is Outcome.INCORRECT:
        console.print(f"[red]Not quite.[/] {controller.state.remaining}s left")


def report_round(controller: RoundController) -> None:
    state = controller.state
    if state.outcome is Outcome.CORRECT:
        console.print(f"[bold green]Correct! +{state.points}[/]")
    elif state.outcome is Outcome.TIMED_OUT:
        console.print(f"[bold red]Time's up![/] It was [green]{state.puzzle.solution.upper()}[/]")


async def run_rounds(session: GameSession, reader: Callable[[], str], clock_interval: float = 1.0) -> None:
    """Play every round of a loaded session, reading guesses with reader in a worker thread."""
    pending_line: Optional[asyncio.Task] = None
    try:
        while session.phase is Phase.PLAYING:
            controller = session.round
            render_round(session)
            clock = asyncio.create_task(controller.run_clock(clock_interval))
            try:
                while controller.is_pending and session.phase is Phase.PLAYING:
                    if pending_line is None:
                        pending_line = asyncio.create_task(asyncio.to_thread(reader))
                    done, _ = await asyncio.wait({pending_line, clock}, return_when=asyncio.FIRST_COMPLETED)
                    if pending_line in done:
                        line = pending_line.result()
                        pending_line = None
                        handle_line(session, controller, line)
            finally:
                clock.cancel()
            report_round(controller)
            if pending_line is not None:
                # The reader thread cannot be interrupted; let it finish before moving on
                console.print("[dim]Press Enter to continue[/]")
                await pending_line
                pending_line = None
    finally:
        if pending_line is not None:
            pending_line.cancel()


def lifetime_table(stats: LifetimeStats) -> Table:
    table = Table("Games Played", "Average Score", "Overall Skill", title="Lifetime Stats")
    table.add_row(str(stats.games), str(stats.average), skill_level(stats.average))
    return table


def render_summary(summary: SessionSummary) -> None:
    console.rule("[bold green]Puzzle Complete!")
    console.print(f"Final score: [bold sky_blue1]{summary.score}[/]  ({summary.skill})")
    console.print(f"Solved {summary.solved}/{len(summary.results)}")
    if summary.lifetime and summary.lifetime.games > 0:
        console.print(lifetime_table(summary.lifetime))
    if summary.missed:
        table = Table("Jumbled", "Solution", title="Words you missed")
        for puzzle in summary.missed:
            table.add_row(puzzle.jumbled_word.upper(), puzzle.solution.upper())
        console.print(table)


async def play_session(
    session: GameSession,
    theme: Optional[str],
    reader: Callable[[], str],
    clock_interval: float = 1.0,
) -> None:
    while True:
        if not theme:
            theme = typer.prompt("Theme")
        with console.status(f"Generating puzzles for [bold]{theme}[/]..."):
            started = await session.start_game(theme)
        if not started:
            console.print(f"[red]{session.state.error}[/]")
            theme = None
            continue

        await run_rounds(session, reader, clock_interval)
        if session.phase is Phase.FINISHED:
            render_summary(session.summary())
        session.restart()
        if not typer.confirm("Play again?", default=True):
            return
        theme = None


@app.command()
def play(
    theme: Optional[str] = typer.Option(None, help="Theme for the puzzles; prompted when omitted."),
    model: Optional[str] = typer.Option(None, help=f"Model preset or name ({', '.join(MODEL_PRESETS)}), or jsonl:<path>."),
    round_seconds: Optional[int] = typer.Option(None, help="Seconds per puzzle."),
    count: Optional[int] = typer.Option(None, help="Puzzles per session."),
    stats_path: Optional[Path] = typer.Option(None, help="Where lifetime stats are kept."),
    seed: Optional[int] = typer.Option(None, help="Seed for letter shuffling."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Play word jumble sessions until you stop."""
    seen = load_env()
    setup_logging(verbose)
    settings = Settings.from_env()
    if verbose:
        console.print({"env_keys_detected": seen})

    source, resolved = get_source_for_model(model or settings.model, count=count or settings.puzzle_count)
    logging.getLogger(__name__).debug("Using puzzle source %s", resolved)
    session = GameSession(
        source=source,
        stats=StatsAggregator(JsonFileStatsStorage(stats_path or settings.stats_path)),
        round_seconds=round_seconds or settings.round_seconds,
        rng=random.Random(seed),
    )
    console.rule(f"[bold sky_blue1]Word Jumble[/] · {resolved}")
    try:
        asyncio.run(play_session(session, theme, reader=lambda: console.input("> ")))
    except (KeyboardInterrupt, EOFError):
        console.print("\nBye!")


@app.command()
def stats(
    stats_path: Optional[Path] = typer.Option(None, help="Where lifetime stats are kept."),
    reset: bool = typer.Option(False, "--reset", help="Forget all recorded games."),
):
    """Show lifetime stats."""
    load_env()
    setup_logging(False)
    storage = JsonFileStatsStorage(stats_path or Settings.from_env().stats_path)
    if reset:
        storage.clear()
        console.print("[yellow]Lifetime stats cleared.[/]")
        return
    current = StatsAggregator(storage).load()
    if current.games == 0:
        console.print("No games played yet.")
        return
    console.print(lifetime_table(current))


def cli():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    cli()
