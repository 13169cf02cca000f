"""Read-only views of the table handed to strategies."""

from dataclasses import dataclass
from typing import Optional

from holdem.game.cards import Card


@dataclass(frozen=True)
class ActionRecord:
    """One entry of a hand's action history."""
    player: str
    action: str          # small_blind, big_blind, fold, check, call, raise
    amount: int          # Chips committed by this action
    street: str
    raise_to: int = 0    # Table bet after a raise

    @property
    def is_aggressive(self) -> bool:
        return self.action == "raise"

    @property
    def is_voluntary(self) -> bool:
        return self.action in ("call", "raise")


@dataclass(frozen=True)
class PlayerView:
    """Public state of one seat; hole cards only for the viewer."""
    name: str
    position: int
    chips: int
    current_bet: int
    total_bet: int
    folded: bool
    all_in: bool
    active: bool
    strategy: Optional[str] = None
    hole_cards: tuple[Card, ...] = ()

    @property
    def in_hand(self) -> bool:
        return self.active and not self.folded

    @property
    def stack_behind(self) -> int:
        """Chips this round's bet could grow to if the player shoves."""
        return self.current_bet + self.chips


@dataclass(frozen=True)
class GameSnapshot:
    """
    Immutable copy of everything a strategy may read.

    Strategies receive this instead of the table, so nothing they do
    can mutate pot, cards or stacks.
    """
    players: tuple[PlayerView, ...]
    pot: int
    current_bet: int
    community_cards: tuple[Card, ...]
    dealer_index: int
    small_blind_index: int
    big_blind_index: int
    small_blind: int
    big_blind: int
    min_bet: int
    min_raise_to: int
    round_name: str
    hand_number: int = 0
    raises_this_round: int = 0
    max_raises_per_round: int = 4
    action_history: tuple[ActionRecord, ...] = ()

    def player(self, name: str) -> PlayerView:
        for view in self.players:
            if view.name == name:
                return view
        raise KeyError(name)

    def seat_of(self, name: str) -> int:
        for i, view in enumerate(self.players):
            if view.name == name:
                return i
        raise KeyError(name)

    @property
    def contenders(self) -> list[PlayerView]:
        return [p for p in self.players if p.in_hand]

    def opponents(self, name: str) -> list[PlayerView]:
        """Other players still contesting the pot."""
        return [p for p in self.players if p.in_hand and p.name != name]

    @property
    def total_pot(self) -> int:
        """Swept pot plus bets still at risk this round."""
        return self.pot + sum(p.current_bet for p in self.players)

    def actions_this_street(self) -> list[ActionRecord]:
        return [a for a in self.action_history if a.street == self.round_name]
