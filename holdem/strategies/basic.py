"""Baseline strategy tiers: random, conservative, aggressive, basic, intermediate, advanced."""

from holdem.engine.actions import Decision
from .analysis import identify_draws
from .base import DecisionContext
from .registry import register


@register("random")
def random_play(ctx: DecisionContext) -> Decision:
    """Uniform pick among a randomly assembled set of actions."""
    call = ctx.call_amount
    options = []
    if call == 0:
        options.append(Decision.check())
        if ctx.rand() < 0.5:
            options.append(ctx.bet(10 + int(ctx.rng.integers(0, 50))))
    else:
        if ctx.rand() < 0.25:
            options.append(Decision.fold())
        options.append(Decision.call(call))
        if ctx.rand() < 0.4:
            options.append(ctx.bet(call * (2 + int(ctx.rng.integers(0, 3)))))
    choice = options[int(ctx.rng.integers(0, len(options)))]
    ctx.trace.step(f"picked {choice} from {len(options)} options")
    return choice


@register("conservative")
def conservative(ctx: DecisionContext) -> Decision:
    strength = ctx.strength
    call = ctx.call_amount
    ctx.trace.step(f"strength {strength:.3f}")
    if call == 0:
        return ctx.bet(20) if strength > 0.6 else Decision.check()
    if strength > 0.75:
        return ctx.bet(call * 2)
    if strength > 0.5:
        return Decision.call(call)
    if strength > 0.35 and call <= 20:
        return Decision.call(call)
    if call <= 10:
        return Decision.call(call)
    return Decision.fold()


@register("aggressive")
def aggressive(ctx: DecisionContext) -> Decision:
    strength = ctx.strength
    inflated = min(1.0, strength * 1.5)
    call, pot = ctx.call_amount, ctx.pot
    ctx.trace.step(f"strength {strength:.3f}, played as {inflated:.3f}")
    if call == 0:
        if strength > 0.2 or ctx.rand() < 0.7:
            return ctx.bet(max(40, int(pot * 0.7)))
        return Decision.check()
    if inflated > 0.4 or pot > 100:
        return ctx.bet(max(call * 3, int(pot * 0.8)))
    if inflated > 0.2 or call <= pot * 0.3:
        return Decision.call(call)
    return Decision.fold()


@register("basic")
def basic(ctx: DecisionContext) -> Decision:
    strength = ctx.strength
    call = ctx.call_amount
    ctx.trace.step(f"strength {strength:.3f}")
    if call == 0:
        return ctx.bet(30) if strength > 0.5 else Decision.check()
    if strength > 0.7:
        return ctx.bet(call * 3)
    if strength > 0.4:
        return Decision.call(call)
    if strength > 0.2 and call <= 30:
        return Decision.call(call)
    return Decision.fold()


@register("intermediate")
def intermediate(ctx: DecisionContext) -> Decision:
    strength = ctx.strength
    call, pot = ctx.call_amount, ctx.pot
    draw = 0.0
    if len(ctx.community_cards) < 5:
        draws = identify_draws(ctx.hole_cards, ctx.board)
        if draws.flush_draw or draws.longest_run >= 4:
            draw = 0.25
    ctx.trace.step(f"strength {strength:.3f}, draw {draw:.2f}, pot odds {ctx.pot_odds:.3f}")

    if call == 0:
        if strength > 0.5 or (strength > 0.3 and draw > 0):
            return ctx.bet(max(30, int(pot * 0.6)))
        return Decision.check()
    if strength > 0.7:
        return ctx.bet(max(call * 2.5, int(pot * 0.8)))
    if strength > 0.4 or strength + draw > ctx.pot_odds:
        if strength > 0.6 and call < pot * 0.4:
            return ctx.bet(max(call * 2, int(pot * 0.6)))
        return Decision.call(call)
    if call <= pot * 0.2 and strength > 0.2:
        return Decision.call(call)
    return Decision.fold()


def starting_hand_category(ctx: DecisionContext) -> str:
    """Premium, strong, medium or weak."""
    a, b = ctx.hole_cards
    high, low = max(a.rank, b.rank), min(a.rank, b.rank)
    gap = high - low - 1
    if high == low:
        if high >= 10:
            return "premium"
        return "strong" if high >= 7 else "medium"
    if low >= 13:
        return "premium"
    if high >= 12 and low >= 10:
        return "strong"
    if a.suit == b.suit:
        if high >= 12 and low >= 9:
            return "strong"
        if high >= 10 and low >= 9:
            return "medium"
        if gap <= 1 and low >= 5:
            return "medium"
        return "weak"
    if gap <= 1 and low >= 9:
        return "medium"
    return "weak"


def _advanced_preflop(ctx: DecisionContext) -> Decision:
    category = starting_hand_category(ctx)
    ctx.trace.step(f"starting hand is {category}")
    call, pot = ctx.call_amount, ctx.pot
    if call == 0:
        if category == "premium":
            return ctx.bet(max(40, pot * 3))
        if category == "strong":
            return ctx.bet(max(30, pot * 2))
        if category == "medium":
            return ctx.bet(max(20, pot))
        return Decision.check()
    if category == "premium":
        return ctx.bet(max(call * 3, pot))
    if category == "strong":
        if call < pot * 0.2:
            return ctx.bet(max(call * 2.5, pot * 0.75))
        return Decision.call(call)
    if category == "medium" and call < pot * 0.15:
        return Decision.call(call)
    return Decision.fold()


@register("advanced")
def advanced(ctx: DecisionContext) -> Decision:
    if ctx.is_preflop:
        return _advanced_preflop(ctx)

    strength = ctx.strength
    stage = ctx.stage
    call, pot = ctx.call_amount, ctx.pot
    draw = 0.0
    if stage != "river":
        draws = identify_draws(ctx.hole_cards, ctx.board)
        if draws.flush_draw:
            draw = 0.3 if stage == "flop" else 0.15
        if draws.longest_run == 4:
            draw = max(draw, 0.35 if stage == "flop" else 0.2)
    effective = strength + draw
    ctx.trace.step(f"{stage} strength {strength:.3f}, with draws {effective:.3f}")

    if call == 0:
        if strength > 0.8:
            return ctx.bet(max(int(pot * 0.75), 20))
        if strength > 0.6 or (effective > 0.7 and stage != "river"):
            return ctx.bet(max(int(pot * 0.5), 15))
        if strength > 0.4 or draw > 0.25:
            return ctx.bet(max(int(pot * 0.3), 10))
        return Decision.check()
    if strength > 0.8:
        return ctx.bet(max(call * 2.5, int(pot * 0.75)))
    if (strength > 0.6 or effective > 0.7) and call < pot * 0.5:
        return ctx.bet(max(call * 2, int(pot * 0.6)))
    if effective > ctx.pot_odds + 0.1:
        return Decision.call(call)
    return Decision.fold()
