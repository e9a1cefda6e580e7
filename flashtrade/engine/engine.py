import asyncio
import logging
import random
from typing import Callable, List, Optional

from flashtrade.config import settings
from flashtrade.engine.session import GameSession, TradeResult
from flashtrade.engine.state import GamePhase
from flashtrade.engine.timer import PeriodicTimer
from flashtrade.engine.transitions import apply_buy, apply_reset, apply_tick, new_session
from flashtrade.market.pricing import RandomSource

logger = logging.getLogger(__name__)

Listener = Callable[[GameSession], None]

class GameEngine:
    def __init__(self, rng: Optional[RandomSource] = None, tick_interval: Optional[float] = None,
                 timer: Optional[PeriodicTimer] = None):
        self.rng = rng if rng is not None else random.Random(settings.RNG_SEED)
        interval = tick_interval if tick_interval is not None else settings.TICK_INTERVAL_SEC
        self.timer = timer if timer is not None else PeriodicTimer(interval, self.tick)

        self._session = new_session(self.rng)
        self._listeners: List[Listener] = []
        self._round_over = asyncio.Event()
        self.closed = False

        logger.info(f"New session: {self._session.instrument_symbol} @ {self._session.current_price:.2f}")

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def phase(self) -> GamePhase:
        return self._session.phase

    def snapshot(self) -> dict:
        return self._session.snapshot()

    def result(self) -> Optional[TradeResult]:
        if self._session.phase != GamePhase.RESOLVED:
            return None
        return TradeResult.from_session(self._session)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with the new session after every change. Returns an unsubscribe hook."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def buy(self) -> bool:
        """
        Open a position at the current price and start the countdown.
        Returns False (nothing changes) unless the session is Idle.
        """
        if self.closed:
            logger.warning("Engine closed: buy ignored")
            return False

        updated = apply_buy(self._session)
        if updated is self._session:
            logger.debug(f"Buy ignored in phase {self._session.phase.value}")
            return False

        # Timer first: if it cannot start, the session stays Idle
        self.timer.start()
        self._round_over.clear()
        self._commit(updated)
        logger.info(f"Bought {updated.instrument_symbol} @ {updated.purchase_price:.2f}")
        return True

    def tick(self) -> None:
        """Single countdown step; driven by the timer while Pending."""
        if self.closed or self._session.phase != GamePhase.PENDING:
            return

        updated, outcome = apply_tick(self._session, self.rng)
        if outcome is not None:
            self.timer.cancel()
            logger.info(
                f"Resolved {updated.instrument_symbol}: {'WIN' if outcome.is_win else 'LOSS'} "
                f"change={outcome.change:+.2f} price {self._session.current_price:.2f} -> {updated.current_price:.2f}"
            )
        self._commit(updated)
        if outcome is not None:
            self._round_over.set()

    def reset(self) -> None:
        """Cancel any countdown and replace the session with a fresh Idle one."""
        if self.closed:
            logger.warning("Engine closed: reset ignored")
            return

        self.timer.cancel()
        if self._session.phase == GamePhase.PENDING:
            logger.info("Reset during countdown, trade abandoned")
        self._commit(apply_reset(self.rng))
        self._round_over.set()
        logger.info(f"New session: {self._session.instrument_symbol} @ {self._session.current_price:.2f}")

    async def wait_for_result(self) -> Optional[TradeResult]:
        """Block until the running round resolves. None if it was reset first."""
        if self._session.phase == GamePhase.PENDING:
            await self._round_over.wait()
        return self.result()

    def close(self) -> None:
        self.timer.cancel()
        self._listeners.clear()
        self._round_over.set()
        self.closed = True

    def _commit(self, session: GameSession) -> None:
        self._session = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener failed")
