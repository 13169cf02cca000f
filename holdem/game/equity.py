"""Monte Carlo equity estimation backed by treys."""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from treys import Evaluator

from .cards import Card, Hand, full_deck


@dataclass
class EquityResult:
    """Outcome frequencies of a batch of simulated showdowns."""
    wins: int = 0
    ties: int = 0
    losses: int = 0
    strength_gain: float = 0.0  # Mean improvement of hero's treys percentile

    @property
    def simulations(self) -> int:
        return self.wins + self.ties + self.losses

    @property
    def win_rate(self) -> float:
        return self.wins / self.simulations if self.simulations else 0.0

    @property
    def tie_rate(self) -> float:
        return self.ties / self.simulations if self.simulations else 0.0

    @property
    def equity(self) -> float:
        """Wins plus half of ties."""
        if not self.simulations:
            return 0.0
        return (self.wins + 0.5 * self.ties) / self.simulations


class EquityCalculator:
    """
    Fast equity calculations using the treys evaluator.

    All sampling draws from the injected generator, so a seeded
    calculator reproduces the same estimate.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.evaluator = Evaluator()
        self.rng = rng if rng is not None else np.random.default_rng()

    def _available(self, known: Sequence[Card]) -> list[Card]:
        known_set = set(known)
        if len(known_set) != len(known):
            raise ValueError("Duplicate cards detected")
        return [c for c in full_deck() if c not in known_set]

    def _percentile(self, hand_treys: list[int], board_treys: list[int]) -> float:
        """Treys rank mapped to [0, 1] where 1 is the nuts."""
        rank = self.evaluator.evaluate(hand_treys, board_treys)
        return 1.0 - self.evaluator.get_five_card_rank_percentage(rank)

    def versus_random(
        self,
        hole_cards: Sequence[Card],
        board: Sequence[Card],
        num_opponents: int = 1,
        num_simulations: int = 10000,
    ) -> EquityResult:
        """
        Estimate showdown outcomes against random opponent holdings.

        A trial is a win only when hero beats every opponent, a tie when
        hero shares the best hand.

        Args:
            hole_cards: Hero's two cards
            board: Known community cards (0-5)
            num_opponents: Opponents still in the hand
            num_simulations: Number of trials

        Returns:
            EquityResult with win/tie/loss counts
        """
        num_opponents = max(1, num_opponents)
        available = self._available(list(hole_cards) + list(board))
        remaining_board = 5 - len(board)
        needed = remaining_board + 2 * num_opponents
        if needed > len(available):
            raise ValueError("Not enough cards left to simulate")

        hero = [c.to_treys() for c in hole_cards]
        board_treys = [c.to_treys() for c in board]
        deck_treys = np.array([c.to_treys() for c in available], dtype=np.int64)

        baseline = None
        if len(board_treys) >= 3:
            baseline = self._percentile(hero, board_treys)

        result = EquityResult()
        gain_total = 0.0
        for _ in range(num_simulations):
            draw = self.rng.choice(deck_treys, size=needed, replace=False).tolist()
            full_board = board_treys + draw[:remaining_board]
            hero_rank = self.evaluator.evaluate(hero, full_board)

            idx = remaining_board
            best_opp = None
            for _ in range(num_opponents):
                opp_rank = self.evaluator.evaluate(draw[idx:idx + 2], full_board)
                best_opp = opp_rank if best_opp is None else min(best_opp, opp_rank)
                idx += 2

            # Lower is better in treys
            if hero_rank < best_opp:
                result.wins += 1
            elif hero_rank == best_opp:
                result.ties += 1
            else:
                result.losses += 1

            if baseline is not None:
                final = 1.0 - self.evaluator.get_five_card_rank_percentage(hero_rank)
                gain_total += final - baseline

        if num_simulations and baseline is not None:
            result.strength_gain = gain_total / num_simulations
        return result

    def versus_range(
        self,
        hole_cards: Sequence[Card],
        board: Sequence[Card],
        opponent_range: Sequence[Hand],
        range_weight: float,
        num_opponents: int = 1,
        num_simulations: int = 1000,
    ) -> EquityResult:
        """
        Estimate outcomes when opponents sometimes hold a fixed range.

        With probability ``range_weight`` each opponent is dealt a hand
        drawn from ``opponent_range`` (skipping collisions), otherwise a
        random holding.
        """
        num_opponents = max(1, num_opponents)
        known = list(hole_cards) + list(board)
        self._available(known)
        hero = [c.to_treys() for c in hole_cards]
        board_treys = [c.to_treys() for c in board]
        remaining_board = 5 - len(board)
        baseline = self._percentile(hero, board_treys) if len(board_treys) >= 3 else None

        result = EquityResult()
        gain_total = 0.0
        for _ in range(num_simulations):
            used = set(known)
            opp_hands: list[list[int]] = []
            for _ in range(num_opponents):
                hand = None
                if opponent_range and self.rng.random() < range_weight:
                    candidate = opponent_range[int(self.rng.integers(len(opponent_range)))]
                    if not set(candidate.cards()) & used:
                        hand = candidate.cards()
                if hand is None:
                    pool = [c for c in full_deck() if c not in used]
                    picks = self.rng.choice(len(pool), size=2, replace=False)
                    hand = [pool[int(i)] for i in picks]
                used.update(hand)
                opp_hands.append([c.to_treys() for c in hand])

            pool = [c for c in full_deck() if c not in used]
            picks = self.rng.choice(len(pool), size=remaining_board, replace=False)
            full_board = board_treys + [pool[int(i)].to_treys() for i in picks]

            hero_rank = self.evaluator.evaluate(hero, full_board)
            best_opp = min(self.evaluator.evaluate(h, full_board) for h in opp_hands)
            if hero_rank < best_opp:
                result.wins += 1
            elif hero_rank == best_opp:
                result.ties += 1
            else:
                result.losses += 1

            if baseline is not None:
                final = 1.0 - self.evaluator.get_five_card_rank_percentage(hero_rank)
                gain_total += final - baseline

        if num_simulations and baseline is not None:
            result.strength_gain = gain_total / num_simulations
        return result

    def showdown(
        self,
        hands: dict[str, Sequence[Card]],
        board: Sequence[Card],
    ) -> list[str]:
        """
        Exact showdown on a complete board.

        Returns:
            Names holding the best hand
        """
        if len(board) != 5:
            raise ValueError("Board must have exactly 5 cards")
        board_treys = [c.to_treys() for c in board]
        ranks = {
            name: self.evaluator.evaluate([c.to_treys() for c in cards], board_treys)
            for name, cards in hands.items()
        }
        best = min(ranks.values())
        return [name for name, rank in ranks.items() if rank == best]


def calculate_equity(
    hole_cards: Sequence[Card],
    board: Sequence[Card],
    num_opponents: int = 1,
    num_simulations: int = 10000,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """
    Calculate hand equity against random opponent(s).

    Returns:
        Equity (0-1), ties counted as half
    """
    calculator = EquityCalculator(rng)
    return calculator.versus_random(
        hole_cards, board, num_opponents, num_simulations
    ).equity
