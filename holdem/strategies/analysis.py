"""Draw detection, board texture and position buckets shared by strategies."""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from holdem.game.cards import Card


@dataclass(frozen=True)
class DrawInfo:
    """Draws available from the known cards."""
    flush_draw: bool = False
    open_ended: bool = False
    gutshot: bool = False
    straight_flush_draw: bool = False
    overcards: bool = False
    made_flush: bool = False
    made_straight: bool = False
    longest_run: int = 0

    @property
    def straight_draw(self) -> bool:
        return self.open_ended or self.gutshot

    @property
    def any_draw(self) -> bool:
        return self.flush_draw or self.straight_draw

    @property
    def strong_draw(self) -> bool:
        return self.flush_draw or self.open_ended

    @property
    def label(self) -> str:
        if self.straight_flush_draw:
            return "straight flush draw"
        if self.flush_draw:
            return "flush draw"
        if self.open_ended:
            return "open-ended straight draw"
        if self.gutshot:
            return "gutshot"
        return "none"


def straight_ranks(cards: Sequence[Card]) -> set[int]:
    """Distinct ranks with the ace also counted as 1."""
    ranks = {int(c.rank) for c in cards}
    if 14 in ranks:
        ranks.add(1)
    return ranks


def _straight_windows(ranks: set[int]) -> tuple[bool, bool, bool, int]:
    made = open_ended = gutshot = False
    for start in range(1, 11):
        window = set(range(start, start + 5))
        hits = len(window & ranks)
        if hits == 5:
            made = True
        elif hits == 4:
            inner = set(range(start, start + 4))
            outer = set(range(start + 1, start + 5))
            if inner <= ranks or outer <= ranks:
                open_ended = True
            else:
                gutshot = True

    longest = run = 0
    for r in range(1, 15):
        run = run + 1 if r in ranks else 0
        longest = max(longest, run)
    return made, open_ended, gutshot, longest


def identify_draws(hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> DrawInfo:
    """
    Classify flush and straight draws among hole plus board cards.

    A flush draw is exactly four cards of one suit. A straight draw is
    four distinct ranks inside a five-rank window; four in a row is
    open-ended, a hole in the middle is a gutshot.
    """
    cards = list(hole_cards) + list(community_cards)
    if not cards:
        return DrawInfo()

    suits = Counter(c.suit for c in cards)
    max_suit = max(suits.values())
    flush_draw = max_suit == 4
    made_flush = max_suit >= 5

    made, open_ended, gutshot, longest = _straight_windows(straight_ranks(cards))
    if made:
        open_ended = gutshot = False
    if open_ended:
        gutshot = False

    straight_flush_draw = False
    if flush_draw:
        suit = next(s for s, n in suits.items() if n == 4)
        suited = [c for c in cards if c.suit == suit]
        _, sf_open, sf_gut, _ = _straight_windows(straight_ranks(suited))
        straight_flush_draw = sf_open or sf_gut

    overcards = False
    if community_cards and len(hole_cards) == 2:
        top = max(c.rank for c in community_cards)
        overcards = all(c.rank > top for c in hole_cards)

    return DrawInfo(
        flush_draw=flush_draw,
        open_ended=open_ended,
        gutshot=gutshot,
        straight_flush_draw=straight_flush_draw,
        overcards=overcards,
        made_flush=made_flush,
        made_straight=made,
        longest_run=longest,
    )


@dataclass(frozen=True)
class BoardTexture:
    """Coarse description of the community cards."""
    paired: bool = False
    trips: bool = False
    suited: bool = False          # Three or more of one suit
    monotone: bool = False
    rainbow: bool = True
    connected: bool = False       # Two board ranks within two of each other
    straight_possible: bool = False
    high_cards: int = 0           # Cards ten or higher
    wetness: float = 0.0
    danger: float = 0.0

    @property
    def wet(self) -> bool:
        return (self.suited or self.connected) and not self.paired

    @property
    def dry(self) -> bool:
        return not self.suited and not self.connected

    @property
    def scary(self) -> bool:
        return (self.connected and not self.paired) or self.suited


def analyze_board(community_cards: Sequence[Card]) -> BoardTexture:
    """Texture flags plus 0-1 wetness and danger scores."""
    board = list(community_cards)
    if len(board) < 3:
        return BoardTexture()

    ranks = Counter(int(c.rank) for c in board)
    suits = Counter(c.suit for c in board)
    paired = any(n >= 2 for n in ranks.values())
    trips = any(n >= 3 for n in ranks.values())
    max_suit = max(suits.values())
    suited = max_suit >= 3
    monotone = max_suit == len(board)
    rainbow = len(suits) == len(board) or (len(board) > 4 and max_suit == 1)

    distinct = sorted(ranks)
    connected = any(b - a <= 2 for a, b in zip(distinct, distinct[1:]))

    extended = straight_ranks(board)
    straight_possible = any(
        len(set(range(start, start + 5)) & extended) >= 3 for start in range(1, 11)
    )
    high_cards = sum(1 for c in board if c.rank >= 10)

    wetness = 0.4 * suited + 0.3 * connected + 0.2 * straight_possible - 0.2 * paired - 0.3 * trips
    danger = 0.3 * paired + 0.5 * trips + 0.3 * suited + 0.2 * connected + 0.1 * high_cards

    return BoardTexture(
        paired=paired,
        trips=trips,
        suited=suited,
        monotone=monotone,
        rainbow=rainbow,
        connected=connected,
        straight_possible=straight_possible,
        high_cards=high_cards,
        wetness=max(0.0, min(1.0, wetness)),
        danger=max(0.0, min(1.0, danger)),
    )


def position_bucket(dealer_distance: int, num_players: int) -> str:
    """
    Early, middle or late by normalized distance from the button.

    The button itself (distance 0) is late; the first seat after it is
    the earliest.
    """
    if num_players <= 0:
        return "late"
    relative = dealer_distance if dealer_distance > 0 else num_players
    if relative <= num_players / 3:
        return "early"
    if relative <= 2 * num_players / 3:
        return "middle"
    return "late"


def seat_position(dealer_distance: int, num_players: int) -> str:
    """Named seat: button, blinds, then early/middle/late for the rest."""
    if dealer_distance == 0:
        return "button"
    if dealer_distance == 1:
        return "small_blind"
    if dealer_distance == 2 and num_players > 2:
        return "big_blind"
    if dealer_distance <= math.floor(0.33 * num_players):
        return "early"
    if dealer_distance <= math.floor(0.66 * num_players):
        return "middle"
    return "late"


def stack_to_pot(chips: int, pot: int) -> float:
    return chips / max(1, pot)
