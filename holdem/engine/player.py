"""Player record shared by human and AI seats."""

from dataclasses import dataclass, field
from typing import Optional

from holdem.game.cards import Card


@dataclass
class Player:
    """
    A seat at the table.

    Chips are the only state that survives a hand boundary; cards,
    per-round and per-hand contributions and the fold/all-in flags are
    reset by ``reset_for_hand``. ``strategy`` names the registered
    decision function for AI seats and is None for a human seat.
    """
    name: str
    chips: int
    strategy: Optional[str] = None
    position: int = 0

    hole_cards: list[Card] = field(default_factory=list)
    current_bet: int = 0      # At risk this round, not yet swept into the pot
    total_bet: int = 0        # Contributed this hand
    folded: bool = False
    all_in: bool = False
    active: bool = True       # Has chips and holds a seat
    has_acted: bool = False   # Acted since the last bet or raise

    @property
    def is_human(self) -> bool:
        return self.strategy is None

    @property
    def in_hand(self) -> bool:
        """Still contesting the pot."""
        return self.active and not self.folded

    @property
    def can_act(self) -> bool:
        return self.active and not self.folded and not self.all_in

    def reset_for_hand(self) -> None:
        self.hole_cards = []
        self.current_bet = 0
        self.total_bet = 0
        self.folded = False
        self.all_in = False
        self.has_acted = False
        self.active = self.chips > 0

    def reset_for_round(self) -> None:
        self.current_bet = 0
        self.has_acted = False

    def place_bet(self, amount: int) -> int:
        """
        Move chips from the stack into this round's bet.

        The amount is capped at the stack; emptying the stack marks the
        player all-in.

        Returns:
            Chips actually committed
        """
        amount = max(0, min(int(amount), self.chips))
        self.chips -= amount
        self.current_bet += amount
        self.total_bet += amount
        if self.chips == 0 and self.active:
            self.all_in = True
        return amount

    def fold(self) -> None:
        self.folded = True

    def __str__(self) -> str:
        cards = " ".join(str(c) for c in self.hole_cards) or "--"
        return f"{self.name} [{cards}] {self.chips}"
