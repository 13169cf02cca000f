"""Street-specific strategy with its own sizing per phase of the hand."""

import math
from dataclasses import dataclass

from holdem.engine.actions import Decision
from .analysis import BoardTexture, DrawInfo, analyze_board, identify_draws
from .base import DecisionContext
from .registry import register


@dataclass
class GamePhaseConfig:
    """Draw bonuses per street and the river bluff rate."""
    flop_flush_bonus: float = 0.2
    flop_open_ended_bonus: float = 0.15
    flop_gutshot_bonus: float = 0.08
    turn_flush_bonus: float = 0.12
    turn_open_ended_bonus: float = 0.08
    turn_gutshot_bonus: float = 0.04
    committed_share: float = 0.3      # Share of the pot we put in that keeps us calling
    river_bluff_raise: float = 0.2
    small_table: int = 3


def phase_position(ctx: DecisionContext, config: GamePhaseConfig) -> str:
    """
    Early, middle or late among the players still in the hand.

    Short-handed only the button counts as late.
    """
    contenders = len(ctx.game.contenders)
    if contenders <= config.small_table:
        return "late" if ctx.is_dealer else "early"
    distance = ctx.dealer_distance % contenders
    if distance < math.ceil(contenders / 3):
        return "early"
    if distance < math.ceil(2 * contenders / 3):
        return "middle"
    return "late"


def preflop_value(high: int, low: int, suited: bool, position: str, contenders: int) -> float:
    if high == low:
        value = 0.8 + (low - 10) * 0.05 if low >= 10 else 0.5 + (low - 2) * 0.04
    else:
        value = 0.2 + (high - 2) * 0.02
        if high - low == 1:
            value += 0.1
        elif high - low == 2:
            value += 0.05
        if suited:
            value += 0.1
        # Broadway aces and KQ use fixed values
        if high == 14 and low >= 10:
            value = {13: 0.8, 12: 0.7, 11: 0.65, 10: 0.6}[low] + (0.05 if suited else 0.0)
        elif high == 13 and low == 12:
            value = 0.7 if suited else 0.65

    if position == "early":
        value -= 0.05
    elif position == "late":
        value += 0.05
    if contenders <= 3:
        value += 0.05
    elif contenders >= 6:
        value -= 0.05
    return max(0.0, min(1.0, value))


def flop_bet_size(pot: int, strength: float, texture: BoardTexture, contenders: int) -> int:
    if strength > 0.9:
        factor = 0.8 if texture.dry else 0.7
    elif strength > 0.75:
        factor = 0.65
    elif strength > 0.6:
        factor = 0.5
    else:
        factor = 0.4
    if texture.wet:
        factor += 0.1
    if contenders > 3:
        factor -= 0.05
    return max(int(pot * factor), 10)


def turn_bet_size(pot: int, strength: float, texture: BoardTexture) -> int:
    if strength > 0.9:
        factor = 0.75
    elif strength > 0.8:
        factor = 0.65
    elif strength > 0.7:
        factor = 0.6
    else:
        factor = 0.5
    if texture.wet:
        factor += 0.05
    return max(int(pot * factor), 20)


def river_bet_size(pot: int, strength: float, texture: BoardTexture) -> int:
    if strength > 0.9:
        factor = 0.8 if texture.paired else 0.7
    elif strength > 0.8:
        factor = 0.65
    else:
        factor = 0.5
    return max(int(pot * factor), 25)


def pot_commitment(ctx: DecisionContext) -> float:
    if ctx.pot <= 0:
        return 0.0
    return ctx.player.total_bet / ctx.pot


def good_bluff_spot(ctx: DecisionContext, position: str, texture: BoardTexture, draws: DrawInfo) -> bool:
    """Late with few players or a scary board, or holding a missed draw on the river."""
    late = position == "late"
    few = len(ctx.game.contenders) <= 3
    missed_draw = len(ctx.community_cards) == 5 and draws.any_draw
    return (late and few) or (late and texture.scary) or missed_draw


def showdown_value(ctx: DecisionContext, strength: float, texture: BoardTexture) -> float:
    value = strength
    contenders = len(ctx.game.contenders)
    if contenders > 2:
        value *= 1 - (contenders - 2) * 0.1
    if texture.paired and strength < 0.7:
        value -= 0.1
    if texture.suited and texture.high_cards >= 2:
        value -= 0.05
    return max(0.0, min(1.0, value))


def _preflop(ctx: DecisionContext, position: str) -> Decision:
    a, b = ctx.hole_cards
    value = preflop_value(max(a.rank, b.rank), min(a.rank, b.rank), a.suit == b.suit,
                          position, len(ctx.game.contenders))
    ctx.trace.step(f"preflop value {value:.3f} ({position})")
    call, pot = ctx.call_amount, ctx.pot

    if call == 0:
        if value > 0.8:
            return ctx.bet(max(40, pot * 3))
        if value > 0.6:
            return ctx.bet(max(30, pot * 2))
        if value > 0.4 and position != "early":
            return ctx.bet(max(20, pot))
        return Decision.check()

    odds = ctx.pot_odds
    if value > 0.8:
        return ctx.bet(max(call * 3, pot))
    if value > 0.6:
        if call < pot * 0.2:
            return ctx.bet(max(call * 2.5, pot * 0.75))
        return Decision.call(call)
    if value > 0.4 and (position == "late" or odds < 0.15):
        return Decision.call(call)
    if value > 0.3 and odds < 0.1 and ctx.chips > call * 15:
        ctx.trace.step("speculative hand at a cheap price")
        return Decision.call(call)
    return Decision.fold()


def _flop(ctx: DecisionContext, strength: float, position: str, texture: BoardTexture,
          draws: DrawInfo, config: GamePhaseConfig) -> Decision:
    effective = strength
    if draws.flush_draw:
        effective += config.flop_flush_bonus
    if draws.open_ended:
        effective += config.flop_open_ended_bonus
    elif draws.gutshot:
        effective += config.flop_gutshot_bonus
    ctx.trace.step(f"flop strength {strength:.3f}, with draws {effective:.3f}")
    call, pot = ctx.call_amount, ctx.pot

    if call == 0:
        if strength > 0.7:
            return ctx.bet(flop_bet_size(pot, strength, texture, len(ctx.game.contenders)))
        if effective > 0.5 and (position == "late" or texture.dry):
            return ctx.bet(max(int(pot * 0.5), 10))
        return Decision.check()

    odds = ctx.pot_odds
    if strength > 0.8:
        return ctx.bet(max(call * 2.5, int(pot * 0.75)))
    if strength > 0.6 or (effective > 0.5 and odds < 0.2):
        if position == "late" and strength > 0.65:
            return ctx.bet(max(call * 2, int(pot * 0.6)))
        return Decision.call(call)
    if effective > odds + 0.1:
        return Decision.call(call)
    return Decision.fold()


def _turn(ctx: DecisionContext, strength: float, position: str, texture: BoardTexture,
          draws: DrawInfo, config: GamePhaseConfig) -> Decision:
    effective = strength
    if draws.flush_draw:
        effective += config.turn_flush_bonus
    if draws.open_ended:
        effective += config.turn_open_ended_bonus
    elif draws.gutshot:
        effective += config.turn_gutshot_bonus
    commitment = pot_commitment(ctx)
    ctx.trace.step(f"turn strength {strength:.3f}, with draws {effective:.3f}, committed {commitment:.2f}")
    call, pot = ctx.call_amount, ctx.pot

    if call == 0:
        if strength > 0.75:
            return ctx.bet(turn_bet_size(pot, strength, texture))
        if strength > 0.6 or (effective > 0.65 and position == "late"):
            return ctx.bet(max(int(pot * 0.6), 20))
        return Decision.check()

    odds = ctx.pot_odds
    if strength > 0.85:
        return ctx.bet(max(call * 2.5, int(pot * 0.75)))
    if strength > 0.7:
        if position == "late" and call < pot * 0.4:
            return ctx.bet(max(call * 2.2, int(pot * 0.7)))
        return Decision.call(call)
    if effective > odds + 0.05 or (commitment > config.committed_share and strength > 0.5):
        return Decision.call(call)
    return Decision.fold()


def _river(ctx: DecisionContext, strength: float, position: str, texture: BoardTexture,
           draws: DrawInfo, config: GamePhaseConfig) -> Decision:
    bluff_spot = good_bluff_spot(ctx, position, texture, draws)
    value = showdown_value(ctx, strength, texture)
    ctx.trace.step(f"river strength {strength:.3f}, showdown value {value:.3f}, bluff spot {bluff_spot}")
    call, pot = ctx.call_amount, ctx.pot

    if call == 0:
        if strength > 0.8:
            return ctx.bet(river_bet_size(pot, strength, texture))
        if strength > 0.6 and position == "late":
            return ctx.bet(max(int(pot * 0.5), 20))
        if strength < 0.4 and bluff_spot:
            ctx.trace.step("bluffing the river")
            return ctx.bet(max(int(pot * 0.75), 30))
        return Decision.check()

    odds = ctx.pot_odds
    if strength > 0.85:
        return ctx.bet(max(call * 2, int(pot * 0.8)))
    if strength > 0.7 and call < pot * 0.7:
        return Decision.call(call)
    if value > odds + 0.05:
        return Decision.call(call)
    if (strength < 0.3 and bluff_spot and ctx.rand() < config.river_bluff_raise
            and call < pot * 0.5):
        ctx.trace.step("bluff raise on the river")
        return ctx.bet(max(call * 2.5, int(pot * 0.8)))
    return Decision.fold()


@register("gamephase")
def game_phase(ctx: DecisionContext) -> Decision:
    config = ctx.config(GamePhaseConfig)
    position = phase_position(ctx, config)
    if ctx.is_preflop:
        return _preflop(ctx, position)

    strength = ctx.equity
    texture = analyze_board(ctx.community_cards)
    draws = identify_draws(ctx.hole_cards, ctx.board)
    if ctx.stage == "flop":
        return _flop(ctx, strength, position, texture, draws, config)
    if ctx.stage == "turn":
        return _turn(ctx, strength, position, texture, draws, config)
    return _river(ctx, strength, position, texture, draws, config)
