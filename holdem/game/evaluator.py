"""Hand classification, tie-breaking and continuous hand strength."""

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence

from .cards import Card, RANK_STR


class HandCategory(IntEnum):
    """Poker hand categories, weakest first."""
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass(frozen=True, order=True)
class HandResult:
    """
    Evaluated hand.

    Ordering compares the category first, then the kicker sequence
    lexicographically, so ``max(results)`` is the best hand and equal
    results are a tie.
    """
    category: HandCategory
    kickers: tuple[int, ...] = ()

    @property
    def name(self) -> str:
        return self.category.label

    def describe(self) -> str:
        ranks = " ".join(RANK_STR[k] for k in self.kickers)
        return f"{self.name} ({ranks})" if ranks else self.name


# Band floor per category used for complete-board strength
CATEGORY_BANDS = {
    HandCategory.STRAIGHT_FLUSH: 0.9,
    HandCategory.FOUR_OF_A_KIND: 0.8,
    HandCategory.FULL_HOUSE: 0.7,
    HandCategory.FLUSH: 0.6,
    HandCategory.STRAIGHT: 0.5,
    HandCategory.THREE_OF_A_KIND: 0.4,
    HandCategory.TWO_PAIR: 0.3,
    HandCategory.PAIR: 0.2,
    HandCategory.HIGH_CARD: 0.0,
}

# Rough showdown win rates used by win_probability()
BASE_WIN_PROBABILITY = {
    HandCategory.STRAIGHT_FLUSH: 0.98,
    HandCategory.FOUR_OF_A_KIND: 0.95,
    HandCategory.FULL_HOUSE: 0.90,
    HandCategory.FLUSH: 0.85,
    HandCategory.STRAIGHT: 0.80,
    HandCategory.THREE_OF_A_KIND: 0.70,
    HandCategory.TWO_PAIR: 0.60,
    HandCategory.PAIR: 0.45,
    HandCategory.HIGH_CARD: 0.25,
}
STAGE_MULTIPLIER = {0: 0.5, 3: 0.8, 4: 0.9, 5: 1.0}


def straight_high(ranks: set[int]) -> Optional[int]:
    """
    Highest straight among a set of ranks.

    The ace also plays low, so A-2-3-4-5 returns 5.
    """
    if 14 in ranks:
        ranks = ranks | {1}
    for high in range(14, 4, -1):
        if all(high - i in ranks for i in range(5)):
            return high
    return None


def evaluate(cards: Sequence[Card]) -> HandResult:
    """
    Classify the best five-card hand available from 1-7 cards.

    With fewer than five cards only multiplicity categories
    (pair, trips, quads) can be made; straights and flushes need five.

    Args:
        cards: Hole plus community cards

    Returns:
        HandResult with category and ordered kickers
    """
    if not cards:
        raise ValueError("Cannot evaluate an empty hand")

    by_suit: dict[int, list[int]] = {}
    for card in cards:
        by_suit.setdefault(card.suit, []).append(card.rank)

    flush_ranks: list[int] = []
    for suited in by_suit.values():
        if len(suited) >= 5:
            flush_ranks = sorted(suited, reverse=True)
            high = straight_high(set(suited))
            if high is not None:
                return HandResult(HandCategory.STRAIGHT_FLUSH, (high,))

    counts = Counter(card.rank for card in cards)
    # Highest multiplicity first, then highest rank
    groups = sorted(counts.items(), key=lambda rc: (rc[1], rc[0]), reverse=True)
    quads = [r for r, c in groups if c == 4]
    trips = [r for r, c in groups if c == 3]
    pairs = [r for r, c in groups if c == 2]

    def kickers(exclude: set[int], n: int) -> tuple[int, ...]:
        rest = sorted((r for r in counts if r not in exclude), reverse=True)
        return tuple(rest[:n])

    if quads:
        q = quads[0]
        return HandResult(HandCategory.FOUR_OF_A_KIND, (q,) + kickers({q}, 1))

    if trips and (len(trips) > 1 or pairs):
        t = trips[0]
        pair_part = max(trips[1:] + pairs)
        return HandResult(HandCategory.FULL_HOUSE, (t, pair_part))

    if flush_ranks:
        return HandResult(HandCategory.FLUSH, tuple(flush_ranks[:5]))

    high = straight_high(set(counts))
    if high is not None:
        return HandResult(HandCategory.STRAIGHT, (high,))

    if trips:
        t = trips[0]
        return HandResult(HandCategory.THREE_OF_A_KIND, (t,) + kickers({t}, 2))

    if len(pairs) >= 2:
        p1, p2 = pairs[0], pairs[1]
        return HandResult(HandCategory.TWO_PAIR, (p1, p2) + kickers({p1, p2}, 1))

    if pairs:
        p = pairs[0]
        return HandResult(HandCategory.PAIR, (p,) + kickers({p}, 3))

    return HandResult(HandCategory.HIGH_CARD, kickers(set(), 5))


def evaluate_hand(hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> HandResult:
    """Evaluate hole cards together with the board."""
    return evaluate(list(hole_cards) + list(community_cards))


def compare_hands(a: HandResult, b: HandResult) -> int:
    """Return 1 if a wins, -1 if b wins, 0 on a tie."""
    if a > b:
        return 1
    if a < b:
        return -1
    return 0


def best_hands(results: dict) -> list:
    """
    Keys holding the best result, in the dict's iteration order.

    Args:
        results: Mapping of player key to HandResult

    Returns:
        All keys tied for the best hand
    """
    if not results:
        return []
    best = max(results.values())
    return [key for key, result in results.items() if result == best]


def _is_well_formed(cards) -> bool:
    if cards is None:
        return False
    for card in cards:
        if not isinstance(card, Card) or not card.is_valid:
            return False
    return True


def _band_strength(result: HandResult) -> float:
    """Map a result into its category band using the primary kicker."""
    floor = CATEGORY_BANDS[result.category]
    primary = result.kickers[0] if result.kickers else 2
    position = (primary - 2) / 12
    if result.category == HandCategory.HIGH_CARD:
        return 0.2 * position
    return floor + 0.1 * position


def _draw_potential(cards: Sequence[Card]) -> float:
    potential = 0.0
    suit_counts = Counter(card.suit for card in cards)
    if any(count == 4 for count in suit_counts.values()):
        potential = 0.2
    ranks = sorted(set(card.rank for card in cards))
    for i in range(len(ranks) - 3):
        if ranks[i] + 3 == ranks[i + 3]:
            potential = max(potential, 0.15)
    return potential


def hand_strength(
    hole_cards: Sequence[Card],
    community_cards: Sequence[Card],
) -> float:
    """
    Continuous 0-1 hand strength estimate.

    On a complete board the value sits in the category band of the made
    hand. With fewer than five community cards it blends made-hand
    strength with draw potential, weighting draws by the streets still
    to come. Malformed input yields 0.0 rather than raising.

    Args:
        hole_cards: The player's two hole cards
        community_cards: 0-5 board cards

    Returns:
        Strength estimate in [0, 1]
    """
    if not _is_well_formed(hole_cards) or not _is_well_formed(community_cards):
        return 0.0
    hole = list(hole_cards)
    board = list(community_cards)
    if len(hole) < 2 or len(board) > 5:
        return 0.0

    if len(board) == 5:
        return _band_strength(evaluate(hole + board))

    made = 0.0
    high1, high2 = hole[0].rank, hole[1].rank
    if high1 == high2:
        made = 0.3 + (high1 / 14) * 0.2
    elif max(high1, high2) >= 10:
        made = 0.1 + (max(high1, high2) / 14) * 0.2

    if board:
        result = evaluate(hole + board)
        if result.category > HandCategory.HIGH_CARD:
            made = max(made, _band_strength(result))

    draw = 0.0
    if len(board) >= 3:
        draw = _draw_potential(hole + board)

    draw_weight = (5 - len(board)) / 5
    return made * 0.7 + draw * 0.3 * draw_weight


def win_probability(category: HandCategory, board_size: int) -> float:
    """Coarse showdown win rate for a made category at a given street."""
    multiplier = STAGE_MULTIPLIER.get(board_size, 1.0)
    return BASE_WIN_PROBABILITY[category] * multiplier
