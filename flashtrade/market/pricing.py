from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol, Sequence, TypeVar
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")

STOCK_SYMBOLS = ('AAPL', 'TSLA', 'GOOGL', 'AMZN', 'MSFT', 'NVDA', 'JPM', 'V', 'JNJ')

INITIAL_PRICE_BASE = 175.0
PRICE_FLUCTUATION = 50.0    # Initial price spread: base +/- 25
TRADE_FLUCTUATION = 15.0    # Outcome magnitude is 50%-100% of this
WIN_PROBABILITY = 0.3       # 30% win, 70% loss
MIN_PRICE = 0.01


class RandomSource(Protocol):
    """Anything exposing random() and choice(); random.Random qualifies."""

    def random(self) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...


class Outcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_win: bool
    change: float  # Signed, before clamping


def to_cents(value: float) -> float:
    """Half-up rounding of the exact binary value to 2 decimals (150.125 -> 150.13)."""
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

def pick_symbol(rng: RandomSource) -> str:
    """Uniform pick from the fixed catalog."""
    return rng.choice(STOCK_SYMBOLS)

def initial_price(rng: RandomSource) -> float:
    """Base price perturbed uniformly within [150, 200), 2 decimals."""
    return to_cents(INITIAL_PRICE_BASE + (rng.random() - 0.5) * PRICE_FLUCTUATION)

def draw_outcome(rng: RandomSource) -> Outcome:
    """
    Two independent draws: win/loss first, then magnitude.
    Magnitude lands in [7.5, 15.0).
    """
    is_win = rng.random() < WIN_PROBABILITY
    magnitude = (rng.random() * 0.5 + 0.5) * TRADE_FLUCTUATION
    return Outcome(is_win=is_win, change=magnitude if is_win else -magnitude)

def apply_outcome(price: float, outcome: Outcome) -> float:
    """Apply the change, floor at MIN_PRICE and round to cents."""
    return to_cents(max(price + outcome.change, MIN_PRICE))
