import asyncio
import random

import orjson
from typer.testing import CliRunner

from wordjumble.cli.play import app, handle_line, run_rounds, with_prefix
from wordjumble.puzzle import Puzzle
from wordjumble.round import HintLevel, Outcome
from wordjumble.session import GameSession, Phase

runner = CliRunner()


def playing_session(source, seconds=30):
    session = GameSession(source=source, round_seconds=seconds, rng=random.Random(2))
    assert asyncio.run(session.start_game("Ocean Life"))
    return session


def test_handle_line_commands(ocean_source):
    session = playing_session(ocean_source)
    controller = session.round

    handle_line(session, controller, "?")
    assert controller.state.hint_level is HintLevel.TEXT_HINT
    before = controller.state.display
    handle_line(session, controller, "!")
    assert controller.state.display != before

    handle_line(session, controller, "?")
    # Typed letters continue after the revealed prefix
    handle_line(session, controller, "phin")
    assert controller.state.outcome is Outcome.CORRECT
    assert controller.state.points == 10 + 30 - 5
    assert session.state.index == 1


def test_handle_line_quit(ocean_source):
    session = playing_session(ocean_source)
    handle_line(session, session.round, ":q")
    assert session.phase is Phase.IDLE


def test_with_prefix_completes_guesses():
    assert with_prefix("phin", "") == "phin"
    assert with_prefix("phin", "Dol") == "Dolphin"
    assert with_prefix("DOLPHIN", "Dol") == "DOLPHIN"
    assert with_prefix("d o lphin", "Dol") == "Dolphin"
    assert with_prefix("oxeyedaisy", "Ox ") == "Ox eyedaisy"
    assert with_prefix("eye daisy", "Ox ") == "Ox eye daisy"


def test_handle_line_short_first_word(make_source):
    daisy = Puzzle("Ox Eye Daisy", "yadeseyxoi", "A meadow flower.", 3)
    session = playing_session(make_source(result=[daisy]))
    controller = session.round

    handle_line(session, controller, "?")
    handle_line(session, controller, "?")
    assert controller.state.input == "Ox "
    handle_line(session, controller, "oxeyedaisy")
    assert controller.state.outcome is Outcome.CORRECT
    assert session.phase is Phase.FINISHED


def test_run_rounds_plays_to_the_end(ocean_source, ocean_puzzles):
    session = playing_session(ocean_source)
    answers = iter(p.solution for p in ocean_puzzles)
    asyncio.run(asyncio.wait_for(run_rounds(session, reader=lambda: next(answers)), timeout=10))
    assert session.phase is Phase.FINISHED
    assert session.state.missed == []
    assert session.state.score >= 5 * 10


def test_stats_command(tmp_path):
    path = tmp_path / "stats.json"
    result = runner.invoke(app, ["stats", "--stats-path", str(path)])
    assert result.exit_code == 0
    assert "No games played yet" in result.output

    path.write_bytes(orjson.dumps({"totalScore": 120, "games": 2, "average": 60}))
    result = runner.invoke(app, ["stats", "--stats-path", str(path)])
    assert result.exit_code == 0
    assert "60" in result.output

    result = runner.invoke(app, ["stats", "--stats-path", str(path), "--reset"])
    assert result.exit_code == 0
    assert not path.exists()
