"""Pattern recognition strategy: classify opponents, pick a counter plan, stay unpredictable."""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from holdem.engine.actions import Decision
from .base import DecisionContext, DecisionRecord, Observation
from .registry import register


@dataclass
class PatternConfig:
    """Thresholds for reading opponents and ourselves."""
    history_window: int = 20          # Observed opponent actions considered
    self_window: int = 10             # Own decisions considered for predictability
    min_history: int = 10             # Own decisions needed before any reading
    min_actions: int = 5
    aggressive_factor: float = 0.7
    passive_factor: float = 0.3
    tight_fold_share: float = 0.6
    station_call_share: float = 0.5
    read_strategy_labels: bool = True  # Trust seat labels such as "aggressive"
    base_predictability: float = 0.3
    unpredictable_above: float = 0.7
    threshold_jitter: float = 0.1
    min_bet: int = 20


@dataclass
class OpponentPattern:
    kind: str = "unknown"
    confidence: float = 0.0
    aggression: float = 0.5
    bluff_frequency: float = 0.2
    check_raise_frequency: float = 0.1


@dataclass
class CounterPlan:
    kind: str = "balanced"
    aggression: float = 0.5
    bluff_frequency: float = 0.2


# counter plan -> (call threshold, raise threshold, bluff override)
PLAN_THRESHOLDS = {
    "trapping": (0.2, 0.8, None),
    "value_betting": (0.4, 0.5, None),
    "bluffing": (0.25, 0.55, 0.4),
    "value_only": (0.4, 0.6, 0.05),
    "bluff_catching": (0.2, 0.7, None),
    "balanced": (0.3, 0.6, None),
}

COUNTERS = {
    "aggressive": CounterPlan("trapping", 0.3, 0.1),
    "passive": CounterPlan("value_betting", 0.7, 0.2),
    "tight": CounterPlan("bluffing", 0.6, 0.4),
    "calling_station": CounterPlan("value_only", 0.6, 0.05),
}


def _check_raises(log: Sequence[Observation]) -> int:
    """Checks followed by a raise from the same player on the same street."""
    count = 0
    for prev, cur in zip(log, log[1:]):
        same_street = prev.hand_number == cur.hand_number and prev.record.street == cur.record.street
        if same_street and prev.record.action == "check" and cur.record.action == "raise":
            count += 1
    return count


def read_opponents(ctx: DecisionContext, config: PatternConfig) -> OpponentPattern:
    """Classify the table from observed opponent actions."""
    pattern = OpponentPattern()
    memory = ctx.memory

    if len(memory.decision_history) > config.min_history:
        recent = []
        check_raises = 0
        for log in memory.observed.values():
            window = list(log)[-config.history_window:]
            recent.extend(o.record for o in window)
            check_raises += _check_raises(window)
        recent = recent[-config.history_window:]
        total = len(recent)

        if total > config.min_actions:
            raises = sum(1 for a in recent if a.action == "raise")
            calls = sum(1 for a in recent if a.action == "call")
            checks = sum(1 for a in recent if a.action == "check")
            folds = sum(1 for a in recent if a.action == "fold")
            pattern.confidence = min(0.2 + total / 50, 0.9)
            if calls + checks > 0:
                pattern.aggression = raises / (raises + calls + checks)
            if pattern.aggression > config.aggressive_factor:
                pattern.kind = "aggressive"
            elif pattern.aggression < config.passive_factor:
                pattern.kind = "passive"
            elif folds > total * config.tight_fold_share:
                pattern.kind = "tight"
            elif calls > total * config.station_call_share:
                pattern.kind = "calling_station"
            else:
                pattern.kind = "balanced"
            pattern.check_raise_frequency = check_raises / total

    if config.read_strategy_labels:
        for opponent in ctx.opponents:
            if opponent.strategy == "aggressive":
                pattern.kind = "aggressive"
                pattern.confidence = max(pattern.confidence, 0.7)
                pattern.aggression = 0.8
            elif opponent.strategy == "conservative":
                pattern.kind = "tight"
                pattern.confidence = max(pattern.confidence, 0.7)
                pattern.aggression = 0.3
    return pattern


def predictability(history: Sequence[DecisionRecord], config: PatternConfig) -> float:
    """
    How readable our own recent play is, from 0.3 upward.

    Always raising (or never raising) strong hands, always folding weak
    ones and using one raise size all count against us.
    """
    score = config.base_predictability
    if len(history) <= config.min_history:
        return score
    recent = list(history)[-config.self_window:]

    strong = [d for d in recent if d.hand_strength > 0.7]
    if len(strong) > 3:
        rate = sum(1 for d in strong if d.action == "raise") / len(strong)
        if rate > 0.8 or rate < 0.2:
            score += 0.3

    weak = [d for d in recent if d.hand_strength < 0.3]
    if len(weak) > 3:
        if sum(1 for d in weak if d.action == "fold") / len(weak) > 0.8:
            score += 0.3

    sizes = [d.amount / d.pot for d in recent if d.action == "raise" and d.pot > 0]
    if len(sizes) > 3 and float(np.std(sizes)) < 0.2:
        score += 0.2
    return min(score, 1.0)


def counter_plan(pattern: OpponentPattern, stage: str) -> CounterPlan:
    base = COUNTERS.get(pattern.kind, CounterPlan())
    plan = CounterPlan(base.kind, base.aggression, base.bluff_frequency)

    if stage == "preflop":
        plan.aggression = min(plan.aggression + 0.1, 0.9)
        plan.bluff_frequency = max(plan.bluff_frequency - 0.1, 0.05)
    elif stage == "river" and pattern.confidence > 0.5:
        plan.aggression = 0.3 if pattern.kind == "aggressive" else 0.7
        plan.bluff_frequency = 0.5 if pattern.kind == "tight" else 0.1

    if pattern.bluff_frequency > 0.4:
        plan.kind = "bluff_catching"
        plan.aggression = 0.4
    if pattern.check_raise_frequency > 0.2:
        plan.aggression = max(plan.aggression - 0.2, 0.2)
    return plan


@register("pattern")
def pattern_recognition(ctx: DecisionContext) -> Decision:
    config = ctx.config(PatternConfig)
    trace = ctx.trace
    strength = ctx.equity
    call, pot = ctx.call_amount, ctx.pot

    opponents = read_opponents(ctx, config)
    plan = counter_plan(opponents, ctx.stage)
    readable = predictability(ctx.memory.decision_history, config)
    trace.step(f"opponents look {opponents.kind} ({opponents.confidence:.2f}), plan {plan.kind}")
    trace.step(f"own predictability {readable:.2f}")

    call_threshold, raise_threshold, bluff_override = PLAN_THRESHOLDS[plan.kind]
    bluff = plan.bluff_frequency if bluff_override is None else bluff_override
    if readable > config.unpredictable_above:
        jitter = ctx.rand() * 2 * config.threshold_jitter - config.threshold_jitter
        call_threshold += jitter
        raise_threshold += jitter
        trace.step(f"mixing it up, thresholds shifted by {jitter:+.3f}")
    if call > 0:
        call_threshold = min(call_threshold, ctx.pot_odds * 1.2)

    if call == 0:
        bluffing = strength < 0.3 and ctx.rand() < bluff
        if bluffing:
            trace.step(f"bluff against a {opponents.kind} table")
            return ctx.bet(max(config.min_bet, int(pot * 0.65)))
        if strength >= raise_threshold:
            if opponents.kind == "aggressive":
                size = pot * 0.5
            elif opponents.kind in ("passive", "calling_station"):
                size = pot * 0.8
            else:
                size = pot * 0.65
            return ctx.bet(max(config.min_bet, int(size)))
        return Decision.check()

    bluff_raise = strength < 0.3 and ctx.rand() < bluff / 2
    if bluff_raise:
        trace.step(f"bluff raise against a {opponents.kind} table")
        return ctx.bet(max(call * 2, int(pot * 0.75)))
    if strength >= raise_threshold:
        if opponents.kind == "aggressive":
            size = pot * 0.9
        elif opponents.kind in ("passive", "calling_station"):
            size = pot * 0.8
        else:
            size = pot * 0.7
        return ctx.bet(max(call * 2, int(size)))
    if strength >= call_threshold:
        return Decision.call(call)
    return Decision.fold()
