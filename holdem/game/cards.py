"""Card, hole-card and deck representation."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional

import numpy as np
from treys import Card as TreysCard


class Rank(IntEnum):
    """Card ranks (2-14 where 14 is Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


class Suit(IntEnum):
    """Card suits."""
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3


RANK_STR = {
    2: "2", 3: "3", 4: "4", 5: "5", 6: "6", 7: "7", 8: "8", 9: "9",
    10: "T", 11: "J", 12: "Q", 13: "K", 14: "A"
}
STR_RANK = {v: k for k, v in RANK_STR.items()}

SUIT_STR = {0: "c", 1: "d", 2: "h", 3: "s"}
STR_SUIT = {v: k for k, v in SUIT_STR.items()}
SUIT_SYMBOL = {0: "♣", 1: "♦", 2: "♥", 3: "♠"}


@dataclass(frozen=True)
class Card:
    """A playing card. Immutable once dealt."""
    rank: int  # 2-14
    suit: int  # 0-3

    def __str__(self) -> str:
        return f"{RANK_STR[self.rank]}{SUIT_STR[self.suit]}"

    def __repr__(self) -> str:
        return str(self)

    @property
    def pretty(self) -> str:
        """Rank plus suit symbol, e.g. 'A♠'."""
        return f"{RANK_STR[self.rank]}{SUIT_SYMBOL[self.suit]}"

    @property
    def is_valid(self) -> bool:
        return self.rank in RANK_STR and self.suit in SUIT_STR

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse card from string like 'As', 'Th', '2c' or '10d'."""
        s = s.strip()
        if len(s) == 3 and s[:2] == "10":
            s = "T" + s[2]
        if len(s) != 2:
            raise ValueError(f"Invalid card string: {s}")
        rank_char = s[0].upper()
        suit_char = s[1].lower()

        if rank_char not in STR_RANK:
            raise ValueError(f"Invalid rank: {rank_char}")
        if suit_char not in STR_SUIT:
            raise ValueError(f"Invalid suit: {suit_char}")

        return cls(rank=STR_RANK[rank_char], suit=STR_SUIT[suit_char])

    def to_treys(self) -> int:
        """Convert to treys library card format."""
        return TreysCard.new(str(self))


def parse_cards(text: str) -> list[Card]:
    """
    Parse a run of cards such as 'AsKd7c' or 'As Kd 7c'.

    Raises:
        ValueError: If any card is malformed
    """
    compact = text.replace(",", " ").split()
    cards = []
    for chunk in compact:
        chunk = chunk.replace("10", "T")
        if len(chunk) % 2:
            raise ValueError(f"Invalid card run: {chunk}")
        for i in range(0, len(chunk), 2):
            cards.append(Card.from_string(chunk[i:i + 2]))
    return cards


@dataclass
class Hand:
    """A two-card starting hand."""
    card1: Card
    card2: Card

    def __post_init__(self):
        # Ensure card1 has higher or equal rank
        if self.card1.rank < self.card2.rank:
            self.card1, self.card2 = self.card2, self.card1

    @property
    def is_pair(self) -> bool:
        return self.card1.rank == self.card2.rank

    @property
    def is_suited(self) -> bool:
        return self.card1.suit == self.card2.suit

    @property
    def high(self) -> int:
        return self.card1.rank

    @property
    def low(self) -> int:
        return self.card2.rank

    @property
    def gap(self) -> int:
        """Rank distance between the two cards (1 for connectors)."""
        return self.card1.rank - self.card2.rank

    @property
    def canonical(self) -> str:
        """
        Get canonical hand notation (e.g., 'AKs', 'QQ', '72o').

        This groups equivalent hands regardless of specific suits.
        """
        r1 = RANK_STR[self.card1.rank]
        r2 = RANK_STR[self.card2.rank]

        if self.is_pair:
            return f"{r1}{r2}"
        elif self.is_suited:
            return f"{r1}{r2}s"
        else:
            return f"{r1}{r2}o"

    def cards(self) -> list[Card]:
        return [self.card1, self.card2]

    def __str__(self) -> str:
        return f"{self.card1}{self.card2}"

    def __repr__(self) -> str:
        return f"Hand({self.card1}, {self.card2})"

    @classmethod
    def from_cards(cls, cards: list[Card]) -> "Hand":
        if len(cards) != 2:
            raise ValueError(f"A starting hand needs 2 cards, got {len(cards)}")
        return cls(cards[0], cards[1])

    @classmethod
    def from_string(cls, s: str) -> "Hand":
        """Parse hand from string like 'AsKh' or 'AKs'."""
        if len(s) == 4:
            return cls(Card.from_string(s[:2]), Card.from_string(s[2:]))
        elif len(s) == 2:
            rank = STR_RANK[s[0].upper()]
            return cls(Card(rank, Suit.SPADES), Card(rank, Suit.HEARTS))
        elif len(s) == 3:
            r1 = STR_RANK[s[0].upper()]
            r2 = STR_RANK[s[1].upper()]
            if s[2].lower() == "s":
                return cls(Card(r1, Suit.SPADES), Card(r2, Suit.SPADES))
            return cls(Card(r1, Suit.SPADES), Card(r2, Suit.HEARTS))
        else:
            raise ValueError(f"Invalid hand string: {s}")

    def to_treys(self) -> list[int]:
        return [self.card1.to_treys(), self.card2.to_treys()]


# Opponent holdings assumed by range-weighted preflop simulations
PREMIUM_HANDS = ["AA", "KK", "QQ", "JJ", "AKs", "AQs", "AJs", "KQs"]


def full_deck() -> list[Card]:
    return [Card(rank, suit) for rank in range(2, 15) for suit in range(4)]


class Deck:
    """
    A standard 52-card deck dealt from the top without replacement.

    Shuffling draws from an injected numpy Generator so a seeded table
    replays the same cards.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cards: list[Card] = []
        self.reset()

    def reset(self) -> None:
        """Reset deck to full 52 cards."""
        self.cards = full_deck()

    def shuffle(self) -> None:
        """Uniform random permutation of the remaining cards."""
        order = self.rng.permutation(len(self.cards))
        self.cards = [self.cards[i] for i in order]

    def deal(self, n: int = 1) -> list[Card]:
        """Deal n cards from the top of the deck."""
        if n > len(self.cards):
            raise ValueError(f"Cannot deal {n} cards, only {len(self.cards)} remaining")
        dealt = self.cards[:n]
        self.cards = self.cards[n:]
        return dealt

    def burn(self) -> Card:
        """Discard the top card face down."""
        return self.deal(1)[0]

    def remove(self, cards: Iterable[Card]) -> None:
        """Remove specific cards from the deck."""
        for card in cards:
            if card in self.cards:
                self.cards.remove(card)

    def __contains__(self, card: Card) -> bool:
        return card in self.cards

    def __len__(self) -> int:
        return len(self.cards)
