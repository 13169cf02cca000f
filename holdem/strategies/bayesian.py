"""Bayesian opponent modeling strategy."""

from dataclasses import dataclass
from typing import Sequence

from holdem.engine.actions import Decision
from holdem.engine.snapshot import ActionRecord
from holdem.game.cards import Card
from .analysis import analyze_board
from .base import DecisionContext, OpponentModel, StrategyMemory
from .odds import EVConfig, call_ev
from .registry import register


@dataclass
class BayesianConfig:
    """Belief update targets and strength penalties."""
    model_floor: float = 0.1
    model_ceiling: float = 0.9

    # Targets the running averages move toward after each observed action
    raise_aggression: float = 1.0
    big_raise_bluff: float = 0.1       # Postflop raise above big_raise_fraction of the pot
    small_raise_bluff: float = 0.3
    big_raise_fraction: float = 0.7
    call_aggression: float = 0.3
    fold_tightness: float = 0.7

    aggressive_opponent: float = 0.6
    tight_opponent: float = 0.6
    per_opponent_penalty: float = 0.05
    paired_board_penalty: float = 0.05
    suited_board_penalty: float = 0.1
    connected_board_penalty: float = 0.05


def _blend(current: float, target: float, n: int) -> float:
    """Running mean after the n-th observation."""
    return (current * (n - 1) + target) / n


def update_model(model: OpponentModel, action: ActionRecord, pot: int, config: BayesianConfig) -> None:
    """Fold one observed action into an opponent's beliefs."""
    model.observations += 1
    n = model.observations
    if action.action == "raise":
        model.aggression = _blend(model.aggression, config.raise_aggression, n)
        if action.street != "preflop":
            big = action.amount > pot * config.big_raise_fraction
            target = config.big_raise_bluff if big else config.small_raise_bluff
            model.bluff_frequency = _blend(model.bluff_frequency, target, n)
    elif action.action == "call":
        model.call_frequency = _blend(model.call_frequency, 1.0, n)
        model.aggression = _blend(model.aggression, config.call_aggression, n)
    elif action.action == "fold":
        model.tightness = _blend(model.tightness, config.fold_tightness, n)
        model.call_frequency = _blend(model.call_frequency, 0.0, n)

    lo, hi = config.model_floor, config.model_ceiling
    model.aggression = max(lo, min(hi, model.aggression))
    model.bluff_frequency = max(lo, min(hi, model.bluff_frequency))
    model.call_frequency = max(lo, min(hi, model.call_frequency))
    model.tightness = max(lo, min(hi, model.tightness))


def update_models(memory: StrategyMemory, actions: Sequence[ActionRecord], pot: int,
                  config: BayesianConfig) -> None:
    for action in actions:
        if action.action == "check":
            continue
        update_model(memory.model_for(action.player), action, pot, config)


def adjusted_strength(
    strength: float,
    models: Sequence[OpponentModel],
    community_cards: Sequence[Card],
    config: BayesianConfig,
) -> float:
    """
    Discount our strength for aggressive or tight opponents, more
    opponents and a dangerous board.
    """
    adjusted = strength
    for model in models:
        if model.aggression > config.aggressive_opponent:
            # Aggressive players bet weaker hands, which partly offsets the penalty
            adjusted -= (model.aggression - 0.5) * 0.2 - model.bluff_frequency * 0.2
        if model.tightness > config.tight_opponent:
            adjusted -= (model.tightness - 0.5) * 0.15
    adjusted -= config.per_opponent_penalty * max(0, len(models) - 1)

    texture = analyze_board(community_cards)
    if texture.paired:
        adjusted -= config.paired_board_penalty
    if texture.suited:
        adjusted -= config.suited_board_penalty
    if texture.connected:
        adjusted -= config.connected_board_penalty
    return max(0.1, min(0.95, adjusted))


def draw_potential(cards: Sequence[Card], board_size: int) -> float:
    """Rough chance of improving: flush and straight draws by street."""
    if board_size not in (3, 4):
        return 0.0
    flop = board_size == 3
    suits: dict[int, int] = {}
    for card in cards:
        suits[card.suit] = suits.get(card.suit, 0) + 1
    most = max(suits.values(), default=0)
    flush = 0.0
    if most == 4:
        flush = 0.35 if flop else 0.2
    elif most == 3 and flop:
        flush = 0.15

    ranks = sorted({int(c.rank) for c in cards})
    run = longest = 1 if ranks else 0
    for a, b in zip(ranks, ranks[1:]):
        run = run + 1 if b == a + 1 else 1
        longest = max(longest, run)
    straight = 0.0
    if longest >= 4:
        straight = 0.4 if flop else 0.2
    elif longest == 3:
        straight = 0.2 if flop else 0.1
    return max(flush, straight)


@register("bayesian")
def bayesian(ctx: DecisionContext) -> Decision:
    cfg = ctx.config(BayesianConfig)
    ev_cfg = ctx.config(EVConfig)
    trace = ctx.trace
    call = ctx.call_amount
    pot = ctx.pot

    update_models(ctx.memory, ctx.memory.new_actions, pot, cfg)
    models = [ctx.memory.model_for(o.name) for o in ctx.opponents]
    base = ctx.equity
    strength = adjusted_strength(base, models, ctx.community_cards, cfg)
    draws = draw_potential(ctx.hole_cards + ctx.board, len(ctx.community_cards))
    trace.step(f"base {base:.3f}, adjusted {strength:.3f}, draw potential {draws:.2f}")

    if call == 0:
        if strength > 0.7:
            return ctx.bet(max(20, pot * 0.6))
        if strength > 0.5 or draws > 0.3:
            return ctx.bet(max(15, pot * 0.4))
        if draws > 0.2:
            return ctx.bet(max(10, pot * 0.25))
        return Decision.check()

    effective = min(1.0, strength + draws)
    ev = call_ev(effective, pot, call, ev_cfg)
    trace.evaluation = ev
    trace.step(f"call EV {ev:.2f}")
    small_bet = call <= ev_cfg.small_bet_limit

    if strength > 0.8:
        return ctx.bet(max(call * 2.5, pot * 0.75))
    if strength > 0.6 and call < pot * 0.5:
        return ctx.bet(max(call * 2, pot * 0.6))
    if ev > 0 or (small_bet and strength > 0.3):
        return Decision.call(call)
    return Decision.fold()
