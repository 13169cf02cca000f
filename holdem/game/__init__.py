"""Cards, hand evaluation and equity."""

from .cards import Card, Hand, Deck, Rank, Suit, parse_cards, PREMIUM_HANDS
from .evaluator import (
    HandCategory,
    HandResult,
    evaluate,
    evaluate_hand,
    compare_hands,
    best_hands,
    hand_strength,
    win_probability,
)
from .equity import EquityCalculator, EquityResult, calculate_equity

__all__ = [
    # Cards
    "Card",
    "Hand",
    "Deck",
    "Rank",
    "Suit",
    "parse_cards",
    "PREMIUM_HANDS",
    # Evaluation
    "HandCategory",
    "HandResult",
    "evaluate",
    "evaluate_hand",
    "compare_hands",
    "best_hands",
    "hand_strength",
    "win_probability",
    # Equity
    "EquityCalculator",
    "EquityResult",
    "calculate_equity",
]
