from enum import Enum

class GamePhase(Enum):
    IDLE = "IDLE"
    PENDING = "PENDING"    # Bought, countdown running
    RESOLVED = "RESOLVED"  # Countdown expired, outcome applied
