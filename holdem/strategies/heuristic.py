"""Rule-based strategy combining position, texture, draws and opponent tendencies."""

from dataclasses import dataclass

from holdem.engine.actions import Decision
from .analysis import BoardTexture, DrawInfo, analyze_board, identify_draws, position_bucket
from .base import DecisionContext, StrategyMemory
from .registry import register


@dataclass
class HeuristicConfig:
    """Configuration for the heuristic strategy."""
    recent_actions: int = 10
    history_weight: float = 0.7       # Weight of stored tendencies against the latest window
    base_bluff_frequency: float = 0.1
    passive_bluff_bonus: float = 0.1
    wet_bluff_penalty: float = 0.05
    float_probability: float = 0.3


@dataclass
class Tendencies:
    aggressiveness: float = 0.5
    passiveness: float = 0.5
    bluff: float = 0.5


def read_tendencies(memory: StrategyMemory, config: HeuristicConfig) -> Tendencies:
    """
    Opponent tendencies from the latest observed actions, blended into
    the running estimate kept in memory.
    """
    recent = []
    for log in memory.observed.values():
        recent.extend(log)
    recent.sort(key=lambda o: o.hand_number)
    recent = [o.record for o in recent[-config.recent_actions:]]

    latest = Tendencies()
    if recent:
        n = len(recent)
        raises = sum(1 for a in recent if a.action == "raise")
        passive = sum(1 for a in recent if a.action in ("call", "check"))
        folds = sum(1 for a in recent if a.action == "fold")
        latest = Tendencies(
            aggressiveness=raises / n,
            passiveness=passive / n,
            bluff=min(0.8, (raises - folds) / n + 0.3),
        )

    w = config.history_weight
    stored = memory.tendencies
    blended = Tendencies(
        aggressiveness=stored["aggression"] * w + latest.aggressiveness * (1 - w),
        passiveness=stored["passiveness"] * w + latest.passiveness * (1 - w),
        bluff=stored["bluff"] * w + latest.bluff * (1 - w),
    )
    stored["aggression"] = blended.aggressiveness
    stored["passiveness"] = blended.passiveness
    stored["bluff"] = blended.bluff
    return blended


def implied_odds(ctx: DecisionContext, draws: DrawInfo, tendencies: Tendencies) -> float:
    """Multiplier on draw equity for money won after hitting."""
    if not draws.any_draw:
        return 1.0
    ratio = 1.0
    if draws.open_ended:
        ratio += 0.8
    elif draws.flush_draw:
        ratio += 0.6
    elif draws.gutshot:
        ratio += 0.4
    ratio *= 1 + (tendencies.passiveness - 0.5)
    if ctx.spr > 5:
        ratio *= 1.2
    elif ctx.spr < 2:
        ratio *= 0.8
    return max(0.5, min(3.0, ratio))


def preflop_strength(ctx: DecisionContext, position: str, tendencies: Tendencies) -> float:
    a, b = ctx.hole_cards
    high, low = max(a.rank, b.rank), min(a.rank, b.rank)
    pair = high == low
    suited = a.suit == b.suit
    connected = high - low == 1
    one_gap = high - low == 2

    if pair:
        strength = 0.8 + (low - 10) / 20 if low >= 10 else 0.5 + (low - 2) / 16
    elif high == 14:
        if low >= 10:
            strength = 0.7 + (low - 10) / 40 + (0.05 if suited else 0.0)
        else:
            strength = 0.3 + low / 24 + (0.1 if suited else 0.0)
    elif high >= 11 and low >= 10:
        strength = 0.5 + (high + low - 20) / 40 + (0.08 if suited else 0.0)
    else:
        strength = 0.1 + high / 28
        if suited:
            strength += 0.1
        if connected:
            strength += 0.08
        elif one_gap:
            strength += 0.04

    strength += {"early": -0.08, "middle": -0.04, "late": 0.06}[position]
    if tendencies.passiveness > 0.7:
        strength += 0.05
    elif tendencies.aggressiveness > 0.7:
        strength -= 0.05

    spr = ctx.spr
    if spr > 20:
        if suited or connected:
            strength += 0.05
    elif spr < 10:
        if pair or high >= 12:
            strength += 0.03
        elif suited or connected:
            strength -= 0.04
    return strength


def _preflop(ctx: DecisionContext, position: str, tendencies: Tendencies) -> Decision:
    strength = preflop_strength(ctx, position, tendencies)
    ctx.trace.step(f"preflop strength {strength:.3f} ({position})")
    call, pot = ctx.call_amount, ctx.pot

    if call == 0:
        if strength > 0.8:
            return ctx.bet(max(40, pot * 3))
        if strength > 0.65:
            return ctx.bet(max(30, pot * 2.5))
        if strength > 0.5:
            return ctx.bet(max(20, pot * 2))
        if strength > 0.35 and position == "late":
            return ctx.bet(max(10, pot))
        return Decision.check()

    odds = ctx.pot_odds
    if strength > 0.85:
        return ctx.bet(max(call * 3, pot))
    if strength > 0.7:
        return ctx.bet(max(call * 2.5, pot * 0.75))
    if strength > 0.5:
        return Decision.call(call)
    if strength > 0.4 and odds < 0.15:
        return Decision.call(call)
    if strength > 0.3 and position == "late" and odds < 0.1:
        return Decision.call(call)
    return Decision.fold()


def _flop(ctx: DecisionContext, position: str, texture: BoardTexture, draws: DrawInfo,
          tendencies: Tendencies, config: HeuristicConfig) -> Decision:
    strength = ctx.equity
    effective = strength
    if draws.flush_draw:
        effective += 0.15
    if draws.open_ended:
        effective += 0.12
    elif draws.gutshot:
        effective += 0.08
    if texture.paired and strength < 0.6:
        effective -= 0.05
    if texture.danger > 0.7 and strength < 0.7:
        effective -= 0.1
    if position == "late":
        effective += 0.05
    elif position == "early":
        effective -= 0.03

    draw_equity = 0.0
    if draws.flush_draw:
        draw_equity = 0.35
    if draws.open_ended:
        draw_equity = max(draw_equity, 0.31)
    if draws.gutshot:
        draw_equity = max(draw_equity, 0.17)
    draw_equity *= implied_odds(ctx, draws, tendencies)

    bluff = config.base_bluff_frequency
    if tendencies.passiveness > 0.7:
        bluff += config.passive_bluff_bonus
    if texture.wetness > 0.7:
        bluff -= config.wet_bluff_penalty
    ctx.trace.step(f"flop effective {effective:.3f}, draw equity {draw_equity:.3f}, bluff {bluff:.2f}")

    call, pot = ctx.call_amount, ctx.pot
    if call == 0:
        if effective > 0.7:
            return ctx.bet(max(pot * 0.7, 20))
        if effective > 0.5 or draws.strong_draw:
            return ctx.bet(max(pot * 0.5, 15))
        if texture.wetness < 0.3 and position == "late" and ctx.rand() < bluff:
            ctx.trace.step("bluffing a dry board in position")
            return ctx.bet(max(pot * 0.6, 15))
        return Decision.check()

    odds = ctx.pot_odds
    if effective > 0.75:
        return ctx.bet(min(ctx.chips, max(call * 2.5, pot * 0.8)))
    if effective > 0.6:
        return Decision.call(call)
    if draw_equity > odds + 0.05:
        return Decision.call(call)
    if effective > 0.4 and odds < 0.2:
        return Decision.call(call)
    if (position == "late" and tendencies.bluff > 0.7
            and ctx.rand() < config.float_probability and call < pot * 0.3):
        ctx.trace.step("floating a likely bluffer")
        return Decision.call(call)
    return Decision.fold()


def simple_decision(ctx: DecisionContext, strength: float) -> Decision:
    """Threshold play used on the turn and river."""
    call, pot = ctx.call_amount, ctx.pot
    odds = ctx.pot_odds
    if strength > 0.8:
        if call == 0:
            return ctx.bet(pot * 0.75)
        return ctx.bet(min(ctx.chips, max(call * 2.5, pot)))
    if strength > 0.6:
        if call == 0:
            return ctx.bet(pot * 0.5)
        return Decision.call(call) if odds <= 0.3 else Decision.fold()
    if strength > 0.4:
        if call == 0:
            return Decision.check()
        return Decision.call(call) if odds <= 0.15 else Decision.fold()
    return Decision.check() if call == 0 else Decision.fold()


@register("heuristic")
def heuristic(ctx: DecisionContext) -> Decision:
    config = ctx.config(HeuristicConfig)
    tendencies = read_tendencies(ctx.memory, config)
    position = position_bucket(ctx.dealer_distance, len(ctx.game.players))
    ctx.trace.step(
        f"tendencies aggressive {tendencies.aggressiveness:.2f}, "
        f"passive {tendencies.passiveness:.2f}, bluff {tendencies.bluff:.2f}"
    )

    if ctx.is_preflop:
        return _preflop(ctx, position, tendencies)
    if ctx.stage == "flop":
        texture = analyze_board(ctx.community_cards)
        draws = identify_draws(ctx.hole_cards, ctx.board)
        return _flop(ctx, position, texture, draws, tendencies, config)
    return simple_decision(ctx, ctx.equity)
