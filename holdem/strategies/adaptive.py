"""Adaptive state strategy: classify the situation, then play the matching mode."""

from dataclasses import dataclass

from holdem.engine.actions import Decision
from .analysis import DrawInfo, identify_draws, seat_position
from .base import DecisionContext
from .bayesian import BayesianConfig, update_models
from .odds import EVConfig, call_ev
from .registry import register


@dataclass
class AdaptiveConfig:
    """Stack, hand and table classification boundaries."""
    desperate_bb: float = 10.0
    short_bb: float = 20.0
    medium_bb: float = 40.0
    comfortable_bb: float = 100.0
    aggressive_model: float = 0.6
    passive_model: float = 0.4
    aggressive_pot_bb: float = 20.0
    tight_pot_bb: float = 5.0
    close_call_ev: float = -10.0
    cheap_call: int = 20
    min_bet: int = 20


@dataclass(frozen=True)
class Mode:
    """How to play once the situation has been classified."""
    name: str
    check_raise_threshold: float
    continuation_bet: float
    bluff_frequency: float
    raise_multiplier: float
    description: str


MODES = {
    "value_betting": Mode("value_betting", 0.5, 0.9, 0.1, 1.5, "maximizing value with strong hands"),
    "aggressive": Mode("aggressive", 0.4, 0.8, 0.3, 1.5, "pressuring opponents"),
    "positional": Mode("positional", 0.3, 0.7, 0.4, 1.2, "exploiting position"),
    "standard": Mode("standard", 0.3, 0.6, 0.2, 1.0, "solid hands, standard lines"),
    "cautious": Mode("cautious", 0.2, 0.5, 0.1, 0.8, "marginal holdings"),
    "defensive": Mode("defensive", 0.1, 0.3, 0.05, 0.6, "weak holdings, minimizing losses"),
    "survival": Mode("survival", 0.05, 0.2, 0.0, 0.5, "desperate stack, waiting for a premium hand"),
}


@dataclass
class Situation:
    stack: str
    hand: str
    position: str
    opponents: str
    table: str
    mode: str = "standard"


def stack_state(chips: int, big_blind: int, config: AdaptiveConfig) -> str:
    depth = chips / max(1, big_blind)
    if depth < config.desperate_bb:
        return "desperate"
    if depth < config.short_bb:
        return "short"
    if depth < config.medium_bb:
        return "medium"
    if depth < config.comfortable_bb:
        return "comfortable"
    return "deep"


def hand_state(strength: float, stage: str) -> str:
    if stage == "preflop":
        if strength > 0.8:
            return "premium"
        if strength > 0.6:
            return "strong"
        if strength > 0.4:
            return "playable"
        return "weak"
    if strength > 0.8:
        return "monster"
    if strength > 0.7:
        return "strong"
    if strength > 0.6:
        return "good"
    if strength > 0.4:
        return "marginal"
    return "weak"


def opponents_state(ctx: DecisionContext, config: AdaptiveConfig) -> str:
    active = len(ctx.opponents)
    if active == 0:
        return "no_opponents"
    if active == 1:
        return "heads_up"
    if active > 3:
        return "multiway"
    models = ctx.memory.opponent_models.values()
    aggressive = sum(1 for m in models if m.aggression > config.aggressive_model)
    passive = sum(1 for m in models if m.aggression < config.passive_model)
    if aggressive > passive and aggressive > active / 2:
        return "aggressive_table"
    if passive > aggressive and passive > active / 2:
        return "passive_table"
    return "mixed_table"


def table_dynamics(ctx: DecisionContext, config: AdaptiveConfig) -> str:
    pot_bb = ctx.pot / max(1, ctx.big_blind)
    raises = sum(1 for a in ctx.game.action_history if a.action == "raise")
    calls = sum(1 for a in ctx.game.action_history if a.action == "call")
    if pot_bb > config.aggressive_pot_bb or raises > 3:
        return "aggressive"
    if calls > raises * 2:
        return "passive"
    if pot_bb < config.tight_pot_bb and raises == 0:
        return "tight"
    return "neutral"


def choose_mode(s: Situation) -> str:
    """First matching rule wins; the order matters."""
    if s.stack == "desperate":
        return "survival"
    if s.opponents == "multiway" and s.hand in ("monster", "strong"):
        return "value_betting"
    if s.table == "passive" and s.hand != "weak":
        return "aggressive"
    if s.table == "aggressive" and s.hand == "marginal":
        return "cautious"
    if s.position in ("late", "button") and s.stack in ("comfortable", "deep"):
        return "positional"
    if s.hand in ("monster", "premium"):
        return "value_betting"
    if s.hand in ("strong", "good"):
        return "standard"
    if s.hand in ("marginal", "playable"):
        return "cautious"
    return "defensive"


def classify(ctx: DecisionContext, strength: float, config: AdaptiveConfig) -> Situation:
    situation = Situation(
        stack=stack_state(ctx.chips, ctx.big_blind, config),
        hand=hand_state(strength, ctx.stage),
        position=seat_position(ctx.dealer_distance, len(ctx.game.players)),
        opponents=opponents_state(ctx, config),
        table=table_dynamics(ctx, config),
    )
    situation.mode = choose_mode(situation)
    return situation


def adjusted_win_probability(strength: float, mode: Mode, table: str) -> float:
    adjustment = 0.0
    if mode.name in ("aggressive", "value_betting"):
        adjustment -= 0.05
    elif mode.name in ("cautious", "defensive"):
        adjustment += 0.05
    if table == "aggressive":
        adjustment -= 0.05
    elif table == "passive":
        adjustment += 0.05
    return max(0.1, min(0.95, strength + adjustment))


def _should_bet(ctx: DecisionContext, mode: Mode, strength: float) -> bool:
    if mode.name == "value_betting" and strength > 0.7:
        return True
    threshold = 0.5 - (mode.continuation_bet - 0.5)
    if strength > threshold:
        return True
    if ctx.memory.last_action == "raise" and ctx.rand() < mode.continuation_bet:
        ctx.trace.step("continuation bet")
        return True
    return ctx.rand() < mode.bluff_frequency


def _should_raise(ctx: DecisionContext, mode: Mode, strength: float, position: str) -> bool:
    if strength > 0.8:
        return True
    if mode.name == "survival" and strength < 0.85:
        return False
    threshold = 0.65 - (mode.raise_multiplier - 1.0) * 0.1
    if position in ("late", "button"):
        threshold -= 0.05
    if strength > threshold:
        return True
    return strength > 0.5 and ctx.rand() < mode.bluff_frequency * 0.5


def _should_call(ev: float, call: int, odds: float, p: float, draws: DrawInfo,
                 config: AdaptiveConfig) -> bool:
    if ev > 0:
        return True
    if draws.flush_draw and odds < 0.2:
        return True
    if draws.straight_draw and odds < 0.17:
        return True
    if ev > config.close_call_ev and p > 0.4:
        return True
    return call <= config.cheap_call and p > 0.3


def raise_size(ctx: DecisionContext, mode: Mode) -> float:
    call, chips = ctx.call_amount, ctx.chips
    size = ctx.pot * mode.raise_multiplier
    if mode.name == "survival":
        size = max(call * 2, min(size, chips * 0.3))
    elif mode.name == "value_betting":
        size = max(call * 2, min(size * 1.2, chips * 0.7))
    return min(max(call * 2, size), chips)


@register("adaptiveState")
def adaptive_state(ctx: DecisionContext) -> Decision:
    config = ctx.config(AdaptiveConfig)
    update_models(ctx.memory, ctx.memory.new_actions, ctx.pot, ctx.config(BayesianConfig))

    strength = ctx.equity
    situation = classify(ctx, strength, config)
    mode = MODES[situation.mode]
    if mode.name == "value_betting" and ctx.pot > 100:
        mode = Mode(mode.name, mode.check_raise_threshold, mode.continuation_bet,
                    mode.bluff_frequency, 1.0, mode.description)
    ctx.trace.step(
        f"stack {situation.stack}, hand {situation.hand}, {situation.position}, "
        f"{situation.opponents}, table {situation.table}"
    )
    ctx.trace.step(f"mode {mode.name}: {mode.description}")

    draws = identify_draws(ctx.hole_cards, ctx.board) if len(ctx.board) >= 3 else DrawInfo()
    call = ctx.call_amount
    if call == 0:
        if _should_bet(ctx, mode, strength):
            return ctx.bet(max(config.min_bet, min(int(ctx.pot * mode.raise_multiplier), ctx.chips)))
        return Decision.check()

    p = adjusted_win_probability(strength, mode, situation.table)
    ev = call_ev(p, ctx.pot, call, EVConfig(call_bonus=0.0))
    ctx.trace.evaluation = ev
    ctx.trace.step(f"win probability {p:.3f}, call EV {ev:.2f}")
    if _should_raise(ctx, mode, strength, situation.position):
        return ctx.bet(raise_size(ctx, mode))
    if _should_call(ev, call, ctx.pot_odds, p, draws, config):
        return Decision.call(call)
    return Decision.fold()
