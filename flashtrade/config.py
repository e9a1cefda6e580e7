from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Timer
    TICK_INTERVAL_SEC: float = 1.0    # Countdown cadence while a trade is pending

    # Randomness
    RNG_SEED: Optional[int] = None    # Fixed seed for reproducible games (CLI --seed)

    # Terminal
    AUTO_ROUNDS: int = 1              # Rounds played by `play --auto` when --rounds is absent
    LOG_LEVEL: str = "WARNING"        # INFO logs every buy and resolution

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
