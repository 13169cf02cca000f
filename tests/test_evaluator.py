"""Tests for hand classification and strength estimates."""

import pytest

from holdem.game.cards import parse_cards
from holdem.game.evaluator import (
    HandCategory,
    HandResult,
    best_hands,
    compare_hands,
    evaluate,
    evaluate_hand,
    hand_strength,
    win_probability,
)


def category(text):
    return evaluate(parse_cards(text)).category


class TestEvaluate:
    @pytest.mark.parametrize("cards,expected", [
        ("As Kd 9c 7h 2s", HandCategory.HIGH_CARD),
        ("As Ad 9c 7h 2s", HandCategory.PAIR),
        ("As Ad 9c 9h 2s", HandCategory.TWO_PAIR),
        ("As Ad Ac 7h 2s", HandCategory.THREE_OF_A_KIND),
        ("9s Td Jc Qh Ks", HandCategory.STRAIGHT),
        ("2s 7s 9s Js Ks", HandCategory.FLUSH),
        ("As Ad Ac 7h 7s", HandCategory.FULL_HOUSE),
        ("As Ad Ac Ah 2s", HandCategory.FOUR_OF_A_KIND),
        ("9s Ts Js Qs Ks", HandCategory.STRAIGHT_FLUSH),
    ])
    def test_categories(self, cards, expected):
        assert category(cards) == expected

    def test_wheel(self):
        result = evaluate(parse_cards("As 2d 3c 4h 5s"))
        assert result.category == HandCategory.STRAIGHT
        assert result.kickers == (5,)

    def test_best_five_of_seven(self):
        result = evaluate_hand(parse_cards("Ah Kh"), parse_cards("Qh Jh Th 2c 3d"))
        assert result.category == HandCategory.STRAIGHT_FLUSH
        assert result.kickers == (14,)

    def test_two_trips_make_full_house(self):
        result = evaluate(parse_cards("As Ad Ac Ks Kd Kc 2h"))
        assert result.category == HandCategory.FULL_HOUSE
        assert result.kickers == (14, 13)

    def test_fewer_than_five_cards(self):
        assert category("As Ad") == HandCategory.PAIR
        assert category("As Kd") == HandCategory.HIGH_CARD

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            evaluate([])

    def test_describe(self):
        assert evaluate(parse_cards("As Ad 9c 7h 2s")).describe() == "Pair (A 9 7 2)"


class TestComparison:
    def test_category_beats_kickers(self):
        flush = evaluate(parse_cards("2s 7s 9s Js Ks"))
        straight = evaluate(parse_cards("Ts Jd Qc Kh As"))
        assert compare_hands(flush, straight) == 1
        assert compare_hands(straight, flush) == -1

    def test_kicker_decides(self):
        a = evaluate(parse_cards("As Ad Kc 7h 2s"))
        b = evaluate(parse_cards("Ac Ah Qc 7d 2d"))
        assert a > b

    def test_tie(self):
        a = HandResult(HandCategory.PAIR, (14, 13, 7, 2))
        b = HandResult(HandCategory.PAIR, (14, 13, 7, 2))
        assert compare_hands(a, b) == 0

    def test_best_hands_returns_all_tied(self):
        board = parse_cards("Ts Jd Qc Kh As")
        results = {
            "A": evaluate_hand(parse_cards("2c 3d"), board),
            "B": evaluate_hand(parse_cards("4c 5d"), board),
            "C": evaluate_hand(parse_cards("8c 8d"), board),
        }
        assert best_hands(results) == ["A", "B", "C"]

    def test_best_hands_single(self):
        board = parse_cards("2s 7d 9c Jh Kd")
        results = {
            "A": evaluate_hand(parse_cards("Ac Ad"), board),
            "B": evaluate_hand(parse_cards("Kc Qd"), board),
        }
        assert best_hands(results) == ["A"]


class TestHandStrength:
    def test_complete_board_band(self):
        strength = hand_strength(parse_cards("As Ad"), parse_cards("Ac Ah 7h 2s 9d"))
        assert strength == pytest.approx(0.9)

    def test_high_card_band(self):
        strength = hand_strength(parse_cards("7c 2d"), parse_cards("As Kh 9s 4c Jd"))
        assert strength == pytest.approx(0.2)

    def test_preflop_pair(self):
        # Made value of a pair of aces, scaled by the made-hand weight
        assert hand_strength(parse_cards("As Ad"), []) == pytest.approx(0.35)

    def test_preflop_trash(self):
        assert hand_strength(parse_cards("7c 2d"), []) == 0.0

    def test_draw_adds_potential(self):
        with_draw = hand_strength(parse_cards("2h 3h"), parse_cards("9h Kh 7c"))
        without = hand_strength(parse_cards("2c 3d"), parse_cards("9h Kh 7c"))
        assert with_draw > without

    def test_malformed_input(self):
        assert hand_strength(None, []) == 0.0
        assert hand_strength(["As", "Kd"], []) == 0.0
        assert hand_strength(parse_cards("As"), []) == 0.0

    def test_range(self):
        strength = hand_strength(parse_cards("Ks Qs"), parse_cards("Js Ts 2c"))
        assert 0.0 <= strength <= 1.0


class TestWinProbability:
    def test_flop_pair(self):
        assert win_probability(HandCategory.PAIR, 3) == pytest.approx(0.36)

    def test_river_is_unscaled(self):
        assert win_probability(HandCategory.FLUSH, 5) == pytest.approx(0.85)

    def test_monotonic_in_category(self):
        values = [win_probability(c, 4) for c in HandCategory]
        assert values == sorted(values)
