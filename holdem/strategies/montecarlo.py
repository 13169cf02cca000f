"""Simulation strategies: plain Monte Carlo and range-weighted simulation."""

from dataclasses import dataclass

from holdem.engine.actions import Decision
from holdem.game.cards import PREMIUM_HANDS, Card, Hand
from holdem.game.equity import EquityCalculator
from .base import DecisionContext
from .odds import EVConfig, call_ev, raise_ev
from .registry import register


@dataclass
class MonteCarloConfig:
    """Configuration for the Monte Carlo strategy."""
    num_simulations: int = 10000
    raise_fractions: tuple[float, ...] = (0.5, 0.75, 1.0, 1.5)
    raise_discount: float = 0.95       # Win probability haircut when raising
    small_bet_bonus_cap: float = 10.0
    small_bet_bonus_fraction: float = 0.15
    small_bet_fold_ev: float = -25.0
    fold_ev: float = -15.0


@dataclass
class WeightedSimulationConfig:
    """Configuration for the range-weighted simulation strategy."""
    num_simulations: int = 1000
    raise_fractions: tuple[float, ...] = (0.5, 0.75, 1.0, 1.5, 2.0)
    fold_ev: float = -15.0
    check_raise_ev: float = 5.0
    preflop_raise_probability: float = 0.7


# How often an opponent is assumed to hold a premium hand, by street
RANGE_WEIGHT = {"preflop": 0.8, "flop": 0.6, "turn": 0.4, "river": 0.2}
STAGE_MULTIPLIER = {"preflop": 0.8, "flop": 1.0, "turn": 1.1, "river": 1.2}


def _premium_range() -> list[Hand]:
    """Concrete combos for the premium starting hands."""
    combos = []
    for notation in PREMIUM_HANDS:
        base = Hand.from_string(notation)
        if base.is_pair:
            suits = [(a, b) for a in range(4) for b in range(a + 1, 4)]
        elif base.is_suited:
            suits = [(s, s) for s in range(4)]
        else:
            suits = [(a, b) for a in range(4) for b in range(4) if a != b]
        for s1, s2 in suits:
            combos.append(Hand(Card(base.high, s1), Card(base.low, s2)))
    return combos


PREMIUM_RANGE = _premium_range()


@register("monteCarlo")
def monte_carlo(ctx: DecisionContext) -> Decision:
    cfg = ctx.config(MonteCarloConfig)
    ev_cfg = ctx.config(EVConfig)
    trace = ctx.trace
    call = ctx.call_amount

    calculator = EquityCalculator(ctx.rng)
    result = calculator.versus_random(
        ctx.hole_cards, ctx.board, ctx.num_opponents, cfg.num_simulations
    )
    p = result.equity
    trace.simulations_run = result.simulations
    trace.step(f"{result.simulations} trials vs {ctx.num_opponents}: win probability {p:.3f}")

    small_bet = call <= ctx.big_blind * 2
    bonus = min(cfg.small_bet_bonus_cap, ctx.pot * cfg.small_bet_bonus_fraction) if small_bet else 0.0
    ev_call = call_ev(p, ctx.pot, call, ev_cfg) + bonus
    trace.step(f"call EV {ev_call:.2f}")

    best_raise, best_ev = 0, float("-inf")
    for amount in ctx.raise_options(cfg.raise_fractions):
        ev = raise_ev(p * cfg.raise_discount, ctx.pot, amount, ev_cfg)
        trace.step(f"raise {amount} EV {ev:.2f}")
        if ev > best_ev:
            best_raise, best_ev = amount, ev
    trace.evaluation = max(ev_call, best_ev)

    if call == 0:
        if best_raise and best_ev > 0 and best_ev > ev_call:
            return ctx.bet(best_raise)
        return Decision.check()

    fold_threshold = cfg.small_bet_fold_ev if small_bet else cfg.fold_ev
    if ev_call <= fold_threshold:
        trace.step("call EV too negative, folding")
        return Decision.fold()
    if best_raise and best_ev > ev_call and best_ev > 0:
        return ctx.bet(best_raise)
    return Decision.call(call)


def adjusted_win_probability(p: float, improvement: float, stage: str) -> float:
    """Stage-scaled win rate nudged by the expected strength improvement."""
    adjustment = max(-0.2, min(0.2, improvement * 0.5))
    return max(0.0, min(1.0, p * STAGE_MULTIPLIER.get(stage, 1.0) + adjustment))


def _raise_modifier(amount: float, pot: float) -> float:
    if amount <= pot * 0.5:
        return 1.05
    if amount <= pot:
        return 1.1
    return 0.95


@register("simulation")
def simulation(ctx: DecisionContext) -> Decision:
    """Simulation against opponents weighted toward premium holdings."""
    cfg = ctx.config(WeightedSimulationConfig)
    ev_cfg = ctx.config(EVConfig)
    trace = ctx.trace
    call = ctx.call_amount
    stage = ctx.stage

    calculator = EquityCalculator(ctx.rng)
    result = calculator.versus_range(
        ctx.hole_cards,
        ctx.board,
        PREMIUM_RANGE,
        RANGE_WEIGHT.get(stage, 0.5),
        ctx.num_opponents,
        cfg.num_simulations,
    )
    trace.simulations_run = result.simulations
    p = adjusted_win_probability(result.equity, result.strength_gain, stage)
    trace.step(
        f"{stage}: raw {result.equity:.3f}, improvement {result.strength_gain:+.3f}, adjusted {p:.3f}"
    )

    ev_call = call_ev(p, ctx.pot, call, ev_cfg)
    best_raise, best_ev = 0, float("-inf")
    for amount in ctx.raise_options(cfg.raise_fractions):
        ev = raise_ev(min(1.0, p * _raise_modifier(amount, ctx.pot)), ctx.pot, amount, ev_cfg)
        if ev > best_ev:
            best_raise, best_ev = amount, ev
    trace.evaluation = max(ev_call, best_ev)
    trace.step(f"call EV {ev_call:.2f}, best raise {best_raise} EV {best_ev:.2f}")

    if stage == "preflop" and p > cfg.preflop_raise_probability and best_raise:
        return ctx.bet(best_raise)
    if call == 0:
        if best_raise and best_ev > cfg.check_raise_ev:
            return ctx.bet(best_raise)
        return Decision.check()
    if ev_call <= cfg.fold_ev:
        return Decision.fold()
    if best_raise and best_ev > ev_call and best_ev > 0:
        return ctx.bet(best_raise)
    return Decision.call(call)
