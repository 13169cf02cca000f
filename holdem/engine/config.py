"""Table configuration."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class TableConfig:
    """Configuration for a cash table."""
    min_bet: int = 10
    small_blind: int = 5
    big_blind: int = 10
    starting_chips: int = 1000

    max_raises_per_round: int = 4     # Further raises are converted to calls
    message_log_size: int = 50

    # Short-stack shortcut applied before any strategy runs
    push_fold_bb: float = 10.0        # Stack (in BBs) at or below which push/fold applies; 0 disables
    push_strength: float = 0.8        # Strength above which a short stack moves all-in

    # Conservative default when a strategy fails
    cheap_call_limit: int = 20

    # Presentation-only pause before an AI decision is shown (seconds)
    thinking_delay: float = 0.0

    seed: Optional[int] = None

    def __post_init__(self):
        if self.small_blind <= 0 or self.big_blind <= 0:
            raise ValueError("Blinds must be positive")
        if self.small_blind > self.big_blind:
            raise ValueError("Small blind cannot exceed big blind")
        if self.min_bet <= 0:
            raise ValueError("Minimum bet must be positive")
