import asyncio
import threading
import time
import random
import pytest
from unittest.mock import patch, MagicMock
from flashtrade.cli import ask, main, run_game, format_price
from flashtrade.config import settings
from flashtrade.engine.engine import GameEngine

@pytest.fixture(autouse=True)
def restore_settings():
    seed, interval = settings.RNG_SEED, settings.TICK_INTERVAL_SEC
    yield
    settings.RNG_SEED, settings.TICK_INTERVAL_SEC = seed, interval

def test_cli_auto_play(capsys):
    with patch("sys.argv", ["flashtrade", "play", "--auto", "--rounds", "2", "--seed", "7", "--tick-interval", "0"]):
        main()

    out = capsys.readouterr().out
    assert out.count("Investing... 10") == 2
    assert out.count("you won!") + out.count("you lost!") == 2
    assert "Not investment advice." in out
    assert settings.RNG_SEED == 7

def test_cli_seed_is_reproducible(capsys):
    argv = ["flashtrade", "play", "--auto", "--seed", "21", "--tick-interval", "0"]
    with patch("sys.argv", argv):
        main()
    first = capsys.readouterr().out
    with patch("sys.argv", argv):
        main()
    second = capsys.readouterr().out
    assert first == second

@patch("flashtrade.cli.run_game")
def test_cli_without_command_prints_help(mock_run, capsys):
    with patch("sys.argv", ["flashtrade"]):
        main()
    mock_run.assert_not_called()
    assert "play" in capsys.readouterr().out

def test_interactive_quit_after_one_round(capsys):
    prompt = MagicMock(side_effect=["", "q"])
    played = asyncio.run(run_game(GameEngine(rng=random.Random(1), tick_interval=0), prompt=prompt))

    assert played == 1
    assert prompt.call_count == 2
    assert "BUY" in prompt.call_args_list[0].args[0]

def test_interactive_quit_before_buying(capsys):
    prompt = MagicMock(side_effect=EOFError)

    async def play():
        engine = GameEngine(rng=random.Random(1), tick_interval=0)
        played = await run_game(engine, prompt=prompt)
        return engine, played

    engine, played = asyncio.run(play())
    assert played == 0
    assert engine.closed
    assert "Investing" not in capsys.readouterr().out

def test_interactive_replay(capsys):
    prompt = MagicMock(side_effect=["", "", "", "quit"])
    played = asyncio.run(run_game(GameEngine(rng=random.Random(4), tick_interval=0), prompt=prompt))
    assert played == 2

def test_format_price():
    assert format_price(175.0) == "$175.00"
    assert format_price(0.01) == "$0.01"
    assert format_price(0) == "$---.--"

def test_pending_prompt_does_not_block_shutdown():
    release = threading.Event()

    def blocked_input(text):
        release.wait(5)
        return ""

    async def play():
        await asyncio.wait_for(ask("  [Enter] BUY  [q] quit: ", blocked_input), timeout=0.05)

    started = time.monotonic()
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(play())
    elapsed = time.monotonic() - started
    release.set()
    assert elapsed < 1.0

def test_ask_reports_eof_as_quit():
    assert asyncio.run(ask("> ", MagicMock(side_effect=EOFError))) is None
    assert asyncio.run(ask("> ", MagicMock(return_value=" Q "))) is None
    assert asyncio.run(ask("> ", MagicMock(return_value=""))) == ""

def test_cli_ctrl_c_exits_cleanly(capsys):
    def interrupt(coro):
        coro.close()
        raise KeyboardInterrupt

    with patch("sys.argv", ["flashtrade", "play"]), patch("flashtrade.cli.asyncio.run", side_effect=interrupt) as mock_run:
        main()
    mock_run.assert_called_once()
    assert "Investing" not in capsys.readouterr().out
