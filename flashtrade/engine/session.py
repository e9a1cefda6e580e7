from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from flashtrade.engine.state import GamePhase
from flashtrade.market.pricing import to_cents

COUNTDOWN_SECONDS = 10


class GameSession(BaseModel):
    """
    One play-through, from Idle to Resolved.
    Immutable: transitions return a new session, reset replaces it.
    Serializes with camelCase keys (instrumentSymbol, currentPrice, ...).
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    phase: GamePhase = GamePhase.IDLE
    instrument_symbol: str
    current_price: float = Field(gt=0)
    purchase_price: Optional[float] = Field(default=None, gt=0)
    countdown_remaining: int = Field(default=COUNTDOWN_SECONDS, ge=0, le=COUNTDOWN_SECONDS)

    @model_validator(mode="after")
    def _check_position(self) -> "GameSession":
        holding = self.phase in (GamePhase.PENDING, GamePhase.RESOLVED)
        if holding and self.purchase_price is None:
            raise ValueError(f"purchase_price required in phase {self.phase.value}")
        if not holding and self.purchase_price is not None:
            raise ValueError("purchase_price must be empty while IDLE")
        return self

    def evolve(self, **changes) -> "GameSession":
        # model_copy(update=...) skips validation, rebuild instead
        return GameSession(**{**self.model_dump(), **changes})

    def snapshot(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class TradeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    instrument_symbol: str
    purchase_price: float
    final_price: float
    is_profit: bool
    delta: float  # Absolute, 2 decimals

    @classmethod
    def from_session(cls, session: GameSession) -> "TradeResult":
        if session.phase != GamePhase.RESOLVED:
            raise ValueError(f"No result in phase {session.phase.value}")
        return cls(
            instrument_symbol=session.instrument_symbol,
            purchase_price=session.purchase_price,
            final_price=session.current_price,
            is_profit=session.current_price > session.purchase_price,
            delta=to_cents(abs(session.current_price - session.purchase_price)),
        )

    def signed_delta(self) -> str:
        sign = "+" if self.is_profit else "-"
        return f"{sign}${self.delta:.2f}"
