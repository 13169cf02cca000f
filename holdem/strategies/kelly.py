"""Kelly criterion bet sizing strategy."""

from dataclasses import dataclass

from holdem.engine.actions import Decision
from .analysis import identify_draws
from .base import DecisionContext
from .odds import bankroll_risk, call_ev, kelly_for_draws, kelly_fraction
from .registry import register


@dataclass
class KellyConfig:
    """Configuration for Kelly sizing."""
    kelly_divisor: float = 2.0         # Half Kelly
    min_fraction: float = 0.05         # At or below this we check rather than bet
    opponent_discount: float = 0.9     # Win probability scale per extra opponent
    open_bet_fraction: float = 0.5     # Hypothetical bet used to price an unopened pot
    max_open_pot_fraction: float = 0.75
    min_open_bet: int = 20
    close_call_ratio: float = 0.7      # Call when the Kelly stake is at least this share of the call
    min_multiplier: float = 2.0
    max_multiplier: float = 5.0
    draw_kelly_divisor: float = 3.0


def kelly_win_probability(p: float, stage: str, opponents: int) -> float:
    """Discount raw equity for extra opponents and streets still to come."""
    p *= 0.9 ** max(0, opponents - 1)
    if stage == "preflop":
        if p > 0.8:
            p = min(0.9, p * 0.95)
        elif p > 0.6:
            p *= 0.85
        else:
            p *= 0.7
    elif stage == "flop":
        p *= 0.9
    elif stage == "turn":
        p *= 0.95
    return max(0.05, min(0.95, p))


def raise_multiplier(fraction: float, stage: str, p: float, config: KellyConfig) -> float:
    multiplier = 2 + fraction * 5
    if stage == "preflop":
        multiplier *= 0.8
    elif stage == "river":
        multiplier *= 1.2
    if p > 0.8:
        multiplier *= 1.3
    elif p < 0.6:
        multiplier *= 0.8
    return max(config.min_multiplier, min(config.max_multiplier, multiplier))


@register("kelly")
def kelly(ctx: DecisionContext) -> Decision:
    cfg = ctx.config(KellyConfig)
    trace = ctx.trace
    call = ctx.call_amount
    pot = ctx.pot
    stage = ctx.stage

    p = kelly_win_probability(ctx.equity, stage, ctx.num_opponents)
    if call > 0:
        odds = (pot + call) / call
    else:
        bet = max(ctx.big_blind, pot * cfg.open_bet_fraction)
        odds = (pot + bet) / bet
    fraction = max(0.0, kelly_fraction(p, odds) / cfg.kelly_divisor)
    trace.evaluation = fraction
    trace.step(f"{stage}: win probability {p:.3f}, odds {odds:.2f}:1, Kelly stake {fraction:.3f}")

    if call == 0:
        if fraction <= cfg.min_fraction:
            return Decision.check()
        amount = min(ctx.chips * fraction, max(cfg.min_open_bet, pot * cfg.max_open_pot_fraction))
        return ctx.bet(amount)

    if fraction <= 0:
        draws = identify_draws(ctx.hole_cards, ctx.board)
        if stage in ("flop", "turn") and draws.any_draw:
            draw_type = "flush" if draws.flush_draw else "open_ended" if draws.open_ended else "gutshot"
            stake = kelly_for_draws(draw_type, pot, call, cfg.draw_kelly_divisor)
            risk = bankroll_risk(ctx.chips, stage)
            trace.step(f"{draws.label}: draw stake {stake:.3f}, risk budget {risk:.3f}")
            if stake > 0 and call <= ctx.chips * max(stake, risk):
                return Decision.call(call)
        return Decision.fold()

    stake = ctx.chips * fraction
    if stake < call:
        if stake >= call * cfg.close_call_ratio and call_ev(p, pot, call) > 0:
            return Decision.call(call)
        return Decision.fold()
    if stake > call * 2:
        multiplier = raise_multiplier(fraction, stage, p, cfg)
        trace.step(f"raise multiplier {multiplier:.2f}")
        return ctx.bet(min(ctx.chips, max(call * 2, call * multiplier)))
    return Decision.call(call)
