from typing import Optional, Tuple

from flashtrade.engine.session import COUNTDOWN_SECONDS, GameSession
from flashtrade.engine.state import GamePhase
from flashtrade.market.pricing import (
    Outcome, RandomSource, apply_outcome, draw_outcome, initial_price, pick_symbol
)

def new_session(rng: RandomSource) -> GameSession:
    """Fresh Idle session with a random symbol and starting price."""
    return GameSession(
        phase=GamePhase.IDLE,
        instrument_symbol=pick_symbol(rng),
        current_price=initial_price(rng),
        purchase_price=None,
        countdown_remaining=COUNTDOWN_SECONDS,
    )

def apply_buy(session: GameSession) -> GameSession:
    """
    Open the position at the displayed price.
    Returns the same object untouched when not Idle or price is not positive.
    """
    if session.phase != GamePhase.IDLE or session.current_price <= 0:
        return session
    return session.evolve(
        phase=GamePhase.PENDING,
        purchase_price=session.current_price,
        countdown_remaining=COUNTDOWN_SECONDS,
    )

def apply_tick(session: GameSession, rng: RandomSource) -> Tuple[GameSession, Optional[Outcome]]:
    """
    One countdown step. Resolves the round when the countdown hits zero.
    The outcome is returned only on the resolving tick.
    """
    if session.phase != GamePhase.PENDING:
        return session, None

    remaining = max(session.countdown_remaining - 1, 0)
    if remaining > 0:
        return session.evolve(countdown_remaining=remaining), None

    outcome = draw_outcome(rng)
    resolved = session.evolve(
        phase=GamePhase.RESOLVED,
        current_price=apply_outcome(session.current_price, outcome),
        countdown_remaining=COUNTDOWN_SECONDS,  # Pre-armed for the next round
    )
    return resolved, outcome

def apply_reset(rng: RandomSource) -> GameSession:
    # Nothing carries over from the old session
    return new_session(rng)
