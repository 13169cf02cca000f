"""The decision contract between strategies and the table."""

from dataclasses import dataclass
from enum import Enum


class Action(str, Enum):
    """Actions a seat can submit. A call of zero chips is a check."""
    FOLD = "fold"
    CALL = "call"
    RAISE = "raise"


@dataclass(frozen=True)
class Decision:
    """
    A single action returned by a strategy.

    For RAISE, ``amount`` is the total this round's bet is raised to.
    For CALL it is informational (the chips owed); the table derives the
    real call amount from its own state.
    """
    action: Action
    amount: int = 0

    @classmethod
    def fold(cls) -> "Decision":
        return cls(Action.FOLD, 0)

    @classmethod
    def check(cls) -> "Decision":
        return cls(Action.CALL, 0)

    @classmethod
    def call(cls, amount: int = 0) -> "Decision":
        return cls(Action.CALL, max(0, int(amount)))

    @classmethod
    def raise_to(cls, amount: float) -> "Decision":
        return cls(Action.RAISE, max(0, int(amount)))

    @property
    def is_fold(self) -> bool:
        return self.action == Action.FOLD

    @property
    def is_raise(self) -> bool:
        return self.action == Action.RAISE

    def __str__(self) -> str:
        if self.action == Action.RAISE:
            return f"raise to {self.amount}"
        if self.action == Action.CALL:
            return f"call {self.amount}" if self.amount else "check"
        return "fold"
