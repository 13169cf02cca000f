"""Tests for equity calculations."""

import numpy as np
import pytest

from holdem.game.cards import Hand, parse_cards
from holdem.game.equity import EquityCalculator, EquityResult, calculate_equity


@pytest.fixture
def calculator():
    return EquityCalculator(np.random.default_rng(42))


class TestEquityResult:
    def test_rates(self):
        result = EquityResult(wins=3, ties=2, losses=5)
        assert result.simulations == 10
        assert result.win_rate == pytest.approx(0.3)
        assert result.tie_rate == pytest.approx(0.2)
        assert result.equity == pytest.approx(0.4)

    def test_empty(self):
        assert EquityResult().equity == 0.0


class TestVersusRandom:
    def test_aces_preflop(self, calculator):
        result = calculator.versus_random(parse_cards("As Ah"), [], num_simulations=1000)
        assert result.simulations == 1000
        assert 0.75 < result.equity < 0.95

    def test_nuts_on_river(self, calculator):
        result = calculator.versus_random(
            parse_cards("Ah Kh"), parse_cards("Qh Jh Th 2c 3d"), num_opponents=3, num_simulations=200
        )
        assert result.equity == 1.0

    def test_more_opponents_lowers_equity(self, calculator):
        heads_up = calculator.versus_random(parse_cards("Ks Qs"), [], 1, 1000).equity
        multiway = calculator.versus_random(parse_cards("Ks Qs"), [], 4, 1000).equity
        assert multiway < heads_up

    def test_duplicate_cards(self, calculator):
        with pytest.raises(ValueError):
            calculator.versus_random(parse_cards("As Ah"), parse_cards("As 7d 2c"), num_simulations=10)

    def test_strength_gain_only_postflop(self, calculator):
        result = calculator.versus_random(parse_cards("As Ah"), [], num_simulations=50)
        assert result.strength_gain == 0.0


class TestVersusRange:
    def test_premium_range_hurts_weak_hand(self, calculator):
        hole = parse_cards("7c 2d")
        random_eq = calculator.versus_random(hole, [], num_simulations=600).equity
        ranged = calculator.versus_range(
            hole, [], [Hand.from_string("AA"), Hand.from_string("KK")], 1.0, num_simulations=600
        ).equity
        assert ranged < random_eq

    def test_counts(self, calculator):
        result = calculator.versus_range(
            parse_cards("Ts Th"), parse_cards("2c 7d 9h"), [Hand.from_string("AKs")], 0.5, num_simulations=120
        )
        assert result.simulations == 120


class TestShowdown:
    def test_single_winner(self, calculator):
        winners = calculator.showdown(
            {"A": parse_cards("As Ad"), "B": parse_cards("Ks Kd")},
            parse_cards("2c 7d 9h Jc 3s"),
        )
        assert winners == ["A"]

    def test_split(self, calculator):
        winners = calculator.showdown(
            {"A": parse_cards("2c 3d"), "B": parse_cards("4c 5d")},
            parse_cards("Ts Jd Qc Kh As"),
        )
        assert sorted(winners) == ["A", "B"]

    def test_incomplete_board(self, calculator):
        with pytest.raises(ValueError):
            calculator.showdown({"A": parse_cards("As Ad")}, parse_cards("2c 7d 9h"))


class TestCalculateEquity:
    def test_seeded_runs_match(self):
        hole, board = parse_cards("Jh Th"), parse_cards("9h 8c 2d")
        first = calculate_equity(hole, board, 2, 300, rng=np.random.default_rng(5))
        second = calculate_equity(hole, board, 2, 300, rng=np.random.default_rng(5))
        assert first == second
        assert 0.0 <= first <= 1.0
