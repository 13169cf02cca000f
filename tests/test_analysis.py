"""Tests for pot odds, EV math, draws and board texture."""

import pytest

from holdem.game.cards import parse_cards
from holdem.strategies.analysis import (
    analyze_board,
    identify_draws,
    position_bucket,
    seat_position,
)
from holdem.strategies.odds import (
    EVConfig,
    bankroll_risk,
    call_ev,
    fold_ev,
    hole_equity,
    kelly_for_draws,
    kelly_fraction,
    pot_odds,
    preflop_equity,
    raise_ev,
)


class TestPotOdds:
    def test_basic(self):
        assert pot_odds(50, 150) == pytest.approx(0.25)

    def test_free_check(self):
        assert pot_odds(0, 100) == 0.0


class TestEV:
    def test_call_ev_large_bet(self):
        assert call_ev(0.5, 100, 50) == pytest.approx(25.0)

    def test_call_ev_small_bet_bonus(self):
        assert call_ev(0.5, 100, 20) == pytest.approx(40.0 + 8.0)

    def test_call_ev_without_bonus(self):
        assert call_ev(0.5, 100, 20, EVConfig(call_bonus=0.0)) == pytest.approx(40.0)

    def test_raise_ev(self):
        # 0.5 * 200 - 0.5 * 100 + 15
        assert raise_ev(0.5, 100, 100) == pytest.approx(65.0)

    def test_fold_ev(self):
        assert fold_ev(10) == pytest.approx(-22.0)


class TestPreflopEquity:
    def test_aces(self):
        assert preflop_equity(14, 14, True, False) == pytest.approx(0.85)

    def test_deuces(self):
        assert preflop_equity(2, 2, True, False) == pytest.approx(0.60)

    def test_clamped(self):
        for high in range(2, 15):
            for low in range(2, high + 1):
                for suited in (True, False):
                    value = preflop_equity(high, low, high == low, suited and high != low)
                    assert 0.35 <= value <= 0.90

    def test_suited_beats_offsuit(self):
        assert preflop_equity(14, 13, False, True) > preflop_equity(14, 13, False, False)

    def test_hole_equity(self):
        assert hole_equity(parse_cards("Kd Ks")) == pytest.approx(0.84)
        assert hole_equity(parse_cards("Kd")) == 0.35


class TestKelly:
    def test_fraction(self):
        # (0.6 * 2 - 0.4) / 2
        assert kelly_fraction(0.6, 2.0) == pytest.approx(0.4)

    def test_losing_bet_is_negative(self):
        assert kelly_fraction(0.2, 1.0) < 0

    def test_zero_odds(self):
        assert kelly_fraction(0.9, 0.0) == 0.0

    def test_draws_need_a_call(self):
        assert kelly_for_draws("flush", 100, 0) == 0.0
        assert kelly_for_draws("backdoor", 100, 20) == 0.0

    def test_flush_draw_cheap_call(self):
        assert kelly_for_draws("flush", 200, 10) > 0.0

    def test_bankroll_risk_bounds(self):
        assert bankroll_risk(1000, "flop") == pytest.approx(0.05)
        assert bankroll_risk(400, "river") == pytest.approx(0.1125)
        assert 0.02 <= bankroll_risk(5000, "river") <= 0.2


class TestDraws:
    def test_flush_draw(self):
        draws = identify_draws(parse_cards("Ah 7h"), parse_cards("2h 9h Kc"))
        assert draws.flush_draw
        assert draws.label == "flush draw"

    def test_open_ended(self):
        draws = identify_draws(parse_cards("8c 9d"), parse_cards("Th Js 2c"))
        assert draws.open_ended
        assert not draws.gutshot
        assert draws.label == "open-ended straight draw"

    def test_gutshot(self):
        draws = identify_draws(parse_cards("8c 9d"), parse_cards("Jh Qs 2c"))
        assert draws.gutshot
        assert not draws.open_ended

    def test_made_straight_is_not_a_draw(self):
        draws = identify_draws(parse_cards("8c 9d"), parse_cards("Th Js Qc"))
        assert draws.made_straight
        assert not draws.straight_draw

    def test_wheel_draw(self):
        draws = identify_draws(parse_cards("As 2d"), parse_cards("3h 4c Kd"))
        assert draws.open_ended or draws.gutshot

    def test_straight_flush_draw(self):
        draws = identify_draws(parse_cards("8h 9h"), parse_cards("Th Jh 2c"))
        assert draws.straight_flush_draw
        assert draws.label == "straight flush draw"

    def test_overcards(self):
        assert identify_draws(parse_cards("As Kd"), parse_cards("9h 7c 2s")).overcards

    def test_nothing(self):
        draws = identify_draws(parse_cards("2c 7d"), parse_cards("Jh Qs 4s"))
        assert not draws.any_draw
        assert draws.label == "none"


class TestBoardTexture:
    def test_preflop_is_blank(self):
        texture = analyze_board([])
        assert texture.wetness == 0.0
        assert texture.danger == 0.0

    def test_dry_rainbow(self):
        texture = analyze_board(parse_cards("Kc 7d 2h"))
        assert texture.rainbow
        assert texture.dry
        assert not texture.wet

    def test_monotone_connected(self):
        texture = analyze_board(parse_cards("9h Th Jh"))
        assert texture.monotone
        assert texture.connected
        assert texture.wet
        assert texture.scary
        assert texture.wetness > 0.7

    def test_paired(self):
        texture = analyze_board(parse_cards("Kc Kd 2h"))
        assert texture.paired
        assert not texture.wet

    def test_scores_in_range(self):
        texture = analyze_board(parse_cards("Ac Ad Ah Kc Qc"))
        assert 0.0 <= texture.wetness <= 1.0
        assert 0.0 <= texture.danger <= 1.0


class TestPosition:
    def test_buckets(self):
        assert position_bucket(1, 6) == "early"
        assert position_bucket(3, 6) == "middle"
        assert position_bucket(5, 6) == "late"
        assert position_bucket(0, 6) == "late"

    def test_named_seats(self):
        assert seat_position(0, 6) == "button"
        assert seat_position(1, 6) == "small_blind"
        assert seat_position(2, 6) == "big_blind"
        assert seat_position(3, 9) == "middle"
        assert seat_position(5, 6) == "late"
