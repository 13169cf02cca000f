"""Pot odds, expected value and bet sizing math."""

from dataclasses import dataclass
from typing import Sequence

from holdem.game.cards import Card


@dataclass
class EVConfig:
    """Flat adjustments applied to the basic EV formulas."""
    fold_penalty: float = 12.0
    call_bonus: float = 8.0
    raise_bonus: float = 15.0
    small_bet_limit: int = 20   # Calls at or below this get the call bonus


def pot_odds(call_amount: float, pot: float) -> float:
    """Break-even equity for a call: call / (pot + call)."""
    if call_amount <= 0:
        return 0.0
    return call_amount / (pot + call_amount)


def call_ev(p: float, pot: float, call_amount: float, config: EVConfig = EVConfig()) -> float:
    """p*pot - (1-p)*call, plus a bonus for cheap calls."""
    ev = p * pot - (1 - p) * call_amount
    if call_amount <= config.small_bet_limit:
        ev += config.call_bonus
    return ev


def raise_ev(p: float, pot: float, raise_amount: float, config: EVConfig = EVConfig()) -> float:
    """p*(pot+r) - (1-p)*r plus a fold-equity bonus."""
    return p * (pot + raise_amount) - (1 - p) * raise_amount + config.raise_bonus


def fold_ev(current_bet: float, config: EVConfig = EVConfig()) -> float:
    """Folding forfeits what is already in plus a fixed penalty."""
    return -current_bet - config.fold_penalty


def preflop_equity(high: int, low: int, pair: bool, suited: bool) -> float:
    """
    Approximate all-in equity of a starting hand.

    Args:
        high: Higher rank (2-14)
        low: Lower rank (2-14)
        pair: Both cards share a rank
        suited: Both cards share a suit

    Returns:
        Equity clamped to [0.35, 0.90]
    """
    gap = high - low
    if pair:
        if low >= 10:
            equity = 0.85 - (14 - low) * 0.01
        else:
            equity = 0.60 + (low - 2) * 0.025
    elif suited:
        if high == 14:
            equity = 0.60 + (low - 10) * 0.015 if low >= 10 else 0.55 - (10 - low) * 0.01
        elif high == 13 and low >= 10:
            equity = 0.55 + (low - 10) * 0.015
        elif gap <= 3:
            equity = 0.52 + (high - 10) * 0.01 if high >= 10 else 0.50 - (10 - high) * 0.01
        else:
            equity = 0.45
    else:
        if high == 14:
            equity = 0.57 + (low - 10) * 0.015 if low >= 10 else 0.51 - (10 - low) * 0.01
        elif high == 13 and low >= 10:
            equity = 0.52 + (low - 10) * 0.01
        elif gap <= 2:
            equity = 0.50 + (high - 10) * 0.005 if high >= 10 else 0.45 - (10 - high) * 0.01
        else:
            equity = 0.40
    return max(0.35, min(0.90, equity))


def hole_equity(hole_cards: Sequence[Card]) -> float:
    """``preflop_equity`` for two hole cards."""
    if len(hole_cards) != 2:
        return 0.35
    a, b = hole_cards
    high, low = max(a.rank, b.rank), min(a.rank, b.rank)
    return preflop_equity(int(high), int(low), a.rank == b.rank, a.suit == b.suit)


def kelly_fraction(p: float, odds: float) -> float:
    """
    Full Kelly stake fraction for a bet paying ``odds``-to-1.

    Returns:
        (p*b - (1-p)) / b, which is negative for a losing bet
    """
    if odds <= 0:
        return 0.0
    return (p * odds - (1 - p)) / odds


DRAW_ODDS = {
    "flush": 0.19,
    "open_ended": 0.17,
    "gutshot": 0.085,
}


def kelly_for_draws(draw_type: str, pot: float, call_amount: float, divisor: float = 3.0) -> float:
    """
    Fractional Kelly stake for chasing a draw with implied odds.

    Implied odds assume one more call of the same size gets paid when
    the draw hits.
    """
    draw_odds = DRAW_ODDS.get(draw_type, 0.0)
    if call_amount <= 0 or draw_odds == 0.0:
        return 0.0
    implied = (pot + call_amount * 2) / call_amount
    fraction = (draw_odds * implied - (1 - draw_odds)) / implied
    return max(0.0, fraction / divisor)


def bankroll_risk(chips: int, stage: str) -> float:
    """Share of the stack worth risking at this stage, in [0.02, 0.2]."""
    risk = 0.05
    if stage == "turn":
        risk *= 1.2
    elif stage == "river":
        risk *= 1.5
    if chips > 1500:
        risk *= 1.2
    if chips < 500:
        risk *= 1.5
    return max(0.02, min(0.2, risk))
