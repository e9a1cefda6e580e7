import argparse
import asyncio
import logging
import random
import sys
import threading
from typing import Callable, Optional

from flashtrade.config import settings
from flashtrade.engine.engine import GameEngine
from flashtrade.engine.session import GameSession, TradeResult
from flashtrade.engine.state import GamePhase

# Setup Logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("CLI")

FOOTER = "This is a simulation. Not investment advice."

def format_price(price: float) -> str:
    return f"${price:.2f}" if price > 0 else "$---.--"

def render_session(session: GameSession) -> None:
    print(f"\n  {session.instrument_symbol}")
    print(f"  {format_price(session.current_price)}")

def render_countdown(session: GameSession) -> None:
    # Listener: only the countdown redraws on its own
    if session.phase == GamePhase.PENDING:
        print(f"  Investing... {session.countdown_remaining}")

def render_result(result: TradeResult) -> None:
    if result.is_profit:
        print("\n  Congratulations, you won!")
        print(f"  Gain: {result.signed_delta()}")
    else:
        print("\n  Unfortunately, you lost!")
        print(f"  Loss: {result.signed_delta()}")
    print(f"  {result.instrument_symbol} {format_price(result.purchase_price)} -> {format_price(result.final_price)}")

def _read_line(loop: asyncio.AbstractEventLoop, future: asyncio.Future,
               prompt: Callable[[str], str], text: str) -> None:
    try:
        answer = prompt(text)
    except Exception as e:
        deliver, value = future.set_exception, e
    else:
        deliver, value = future.set_result, answer

    def _settle() -> None:
        if not future.done():
            deliver(value)

    try:
        loop.call_soon_threadsafe(_settle)
    except RuntimeError:
        pass  # Loop already closed: the game was interrupted while we waited

async def ask(text: str, prompt: Callable[[str], str] = input) -> Optional[str]:
    """
    Read a line off the event loop. None means quit (q, EOF).
    The reader is a daemon thread so Ctrl-C never waits on a blocked input().
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()
    threading.Thread(target=_read_line, args=(loop, future, prompt, text), daemon=True).start()
    try:
        answer = await future
    except EOFError:
        return None
    answer = answer.strip().lower()
    if answer in ("q", "quit"):
        return None
    return answer

async def run_game(engine: GameEngine, auto: bool = False, rounds: Optional[int] = None,
                   prompt: Callable[[str], str] = input) -> int:
    """
    Drive the engine from the terminal. Returns the number of rounds played.
    `rounds=None` plays until the user quits.
    """
    unsubscribe = engine.subscribe(render_countdown)
    played = 0
    try:
        while rounds is None or played < rounds:
            render_session(engine.session)
            if not auto and await ask("  [Enter] BUY  [q] quit: ", prompt) is None:
                break

            engine.buy()
            result = await engine.wait_for_result()
            if result is None:
                break
            played += 1
            render_result(result)

            if rounds is not None and played >= rounds:
                break
            label = "Play again" if result.is_profit else "Try again!"
            if not auto and await ask(f"  [Enter] {label}  [q] quit: ", prompt) is None:
                break
            engine.reset()
    finally:
        unsubscribe()
        engine.close()

    print(f"\n  {FOOTER}")
    return played

def apply_args(args):
    if args.seed is not None:
        settings.RNG_SEED = args.seed
    if args.tick_interval is not None:
        settings.TICK_INTERVAL_SEC = args.tick_interval

def main():
    parser = argparse.ArgumentParser(description="FlashTrade CLI")
    subparsers = parser.add_subparsers(dest="command")

    # PLAY
    play_parser = subparsers.add_parser("play")
    play_parser.add_argument("--auto", action="store_true", help="Buy and replay without prompting")
    play_parser.add_argument("--rounds", type=int, help="Stop after N rounds (default: unbounded, or AUTO_ROUNDS with --auto)")
    play_parser.add_argument("--seed", type=int, help="Seed the random source for a reproducible game")
    play_parser.add_argument("--tick-interval", type=float, help="Seconds between countdown ticks")

    args = parser.parse_args()

    if args.command != "play":
        parser.print_help()
        return

    apply_args(args)
    rounds = args.rounds
    if rounds is None and args.auto:
        rounds = settings.AUTO_ROUNDS

    async def _play() -> int:
        engine = GameEngine(rng=random.Random(settings.RNG_SEED))
        return await run_game(engine, auto=args.auto, rounds=rounds)

    try:
        played = asyncio.run(_play())
    except KeyboardInterrupt:
        logger.info("Stopping...")
        return
    logger.info(f"Rounds played: {played}")

if __name__ == "__main__":
    main()
