"""Position-aware strategy: looser and more aggressive closer to the button."""

from dataclasses import dataclass

from holdem.engine.actions import Decision
from .analysis import DrawInfo, identify_draws, seat_position
from .base import DecisionContext
from .registry import register

IN_POSITION = ("button", "late")


@dataclass
class PositionConfig:
    """Per-seat adjustments and the semi-bluff rate."""
    button_adjustment: float = 0.07
    late_adjustment: float = 0.07
    middle_adjustment: float = 0.03
    early_adjustment: float = -0.03
    small_blind_adjustment: float = -0.05
    big_blind_adjustment: float = -0.02
    preflop_scale: float = 1.5
    river_scale: float = 0.7
    semi_bluff_probability: float = 0.3
    min_bet: int = 20


DRAW_STRENGTH = {
    "straight flush draw": 0.9,
    "flush draw": 0.7,
    "open-ended straight draw": 0.6,
    "gutshot": 0.3,
}

DRAW_EQUITY = {
    "straight flush draw": 0.35,
    "flush draw": 0.35,
    "open-ended straight draw": 0.31,
}


def position_adjustment(position: str, stage: str, config: PositionConfig) -> float:
    adjustment = {
        "button": config.button_adjustment,
        "late": config.late_adjustment,
        "middle": config.middle_adjustment,
        "early": config.early_adjustment,
        "small_blind": config.small_blind_adjustment,
        "big_blind": config.big_blind_adjustment,
    }.get(position, 0.0)
    if stage == "preflop":
        adjustment *= config.preflop_scale
    elif stage == "river":
        adjustment *= config.river_scale
    return adjustment


def preflop_score(ctx: DecisionContext, position: str) -> float:
    """Starting hand score in [0, 1] shifted by seat."""
    a, b = ctx.hole_cards
    high, low = max(a.rank, b.rank), min(a.rank, b.rank)
    suited = a.suit == b.suit
    gap = high - low

    if gap == 0:
        score = 0.5 + high / 14 * 0.5
    else:
        score = high / 14 * 0.5 + low / 14 * 0.2
        if suited:
            score += 0.1
        if gap == 1:
            score += 0.1
        elif gap == 2:
            score += 0.05
        if high >= 13 and low >= 10:
            score += 0.1

    if position in IN_POSITION:
        score += 0.1
        if suited and gap == 1:
            score += 0.05
        if suited and high == 14:
            score += 0.05
    elif position == "middle":
        score += 0.05
    elif position == "early":
        score -= 0.05
    elif position == "small_blind":
        score -= 0.1
    elif position == "big_blind":
        score -= 0.05
    return max(0.0, min(1.0, score))


def _preflop(ctx: DecisionContext, position: str, config: PositionConfig) -> Decision:
    score = preflop_score(ctx, position)
    ctx.trace.step(f"preflop score {score:.2f} from the {position}")
    call, pot = ctx.call_amount, ctx.pot

    if call == 0:
        if score >= 0.6:
            return ctx.bet(max(config.min_bet, int(pot * 0.75)))
        if score >= 0.4:
            return ctx.bet(max(config.min_bet, int(pot * 0.5)))
        return Decision.check()

    odds = ctx.pot_odds
    if score >= 0.7:
        return ctx.bet(max(call * 2, int(pot * 0.75)))
    if score >= 0.4 or (score >= 0.3 and odds <= 0.2):
        return Decision.call(call)
    if position == "big_blind" and odds <= 0.1 and score >= 0.2:
        ctx.trace.step("defending the big blind at a good price")
        return Decision.call(call)
    return Decision.fold()


def _postflop(ctx: DecisionContext, strength: float, position: str, draws: DrawInfo,
              config: PositionConfig) -> Decision:
    stage = ctx.stage
    effective = strength
    if draws.any_draw and stage != "river":
        remaining = 2 if stage == "flop" else 1
        effective = strength + DRAW_STRENGTH[draws.label] * remaining / 2
        ctx.trace.step(f"{draws.label} lifts strength to {effective:.3f}")

    call, pot = ctx.call_amount, ctx.pot
    odds = ctx.pot_odds
    in_position = position in IN_POSITION
    real_draw = draws.strong_draw

    if call == 0:
        if effective >= 0.8:
            return ctx.bet(max(config.min_bet, int(pot * 0.75)))
        if effective >= 0.65:
            return ctx.bet(max(config.min_bet, int(pot * 0.5)))
        if effective >= 0.5 and in_position:
            ctx.trace.step("betting a medium hand in position")
            return ctx.bet(max(config.min_bet, int(pot * 0.5)))
        if effective >= 0.4 and real_draw:
            ctx.trace.step("semi-bluffing the draw")
            return ctx.bet(max(config.min_bet, int(pot * 0.5)))
        return Decision.check()

    if effective >= 0.8:
        return ctx.bet(max(call * 2, int(pot * 0.75)))
    if effective >= 0.6:
        if in_position:
            return ctx.bet(max(call * 2, int(pot * 0.6)))
        return Decision.call(call)
    if effective >= 0.4 and odds <= 0.2:
        return Decision.call(call)
    if real_draw and stage != "river":
        if DRAW_EQUITY.get(draws.label, 0.17) > odds:
            return Decision.call(call)
        if in_position:
            if ctx.rand() < config.semi_bluff_probability:
                ctx.trace.step("semi-bluff raise in position")
                return ctx.bet(max(call * 2, int(pot * 0.5)))
            return Decision.call(call)
    return Decision.fold()


@register("positionBased")
def position_based(ctx: DecisionContext) -> Decision:
    config = ctx.config(PositionConfig)
    position = seat_position(ctx.dealer_distance, len(ctx.game.players))
    if ctx.is_preflop:
        return _preflop(ctx, position, config)

    draws = identify_draws(ctx.hole_cards, ctx.board)
    adjustment = position_adjustment(position, ctx.stage, config)
    strength = max(0.0, min(1.0, ctx.equity + adjustment))
    ctx.trace.step(f"{ctx.stage} from the {position}: strength {ctx.equity:.3f} adjusted to {strength:.3f}")
    return _postflop(ctx, strength, position, draws, config)
