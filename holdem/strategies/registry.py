"""Strategy registry and the dispatch boundary between strategies and the table."""

import logging
from collections import Counter
from typing import Callable, Iterable, Optional, Sequence

import numpy as np

from holdem.engine.actions import Action, Decision
from holdem.engine.config import TableConfig
from holdem.engine.snapshot import GameSnapshot, PlayerView
from holdem.game.cards import Card
from .base import DecisionContext, DecisionRecord, DecisionTrace, StrategyMemory
from .odds import hole_equity

logger = logging.getLogger(__name__)

StrategyFn = Callable[[DecisionContext], Decision]
TraceSink = Callable[[DecisionTrace], None]

STRATEGIES: dict[str, StrategyFn] = {}
DEFAULT_STRATEGY = "basic"


def register(name: str) -> Callable[[StrategyFn], StrategyFn]:
    """Decorator adding a decision function to the registry under ``name``."""
    def decorator(fn: StrategyFn) -> StrategyFn:
        if name in STRATEGIES:
            raise ValueError(f"Strategy already registered: {name}")
        STRATEGIES[name] = fn
        return fn
    return decorator


def get_strategy(name: str) -> StrategyFn:
    return STRATEGIES[name]


def available_strategies() -> list[str]:
    return list(STRATEGIES)


def conservative_default(call_amount: int, cheap_call_limit: int) -> Decision:
    """Check if free, call if cheap, otherwise fold."""
    if call_amount == 0:
        return Decision.check()
    if call_amount <= cheap_call_limit:
        return Decision.call(call_amount)
    return Decision.fold()


def legalize(decision: Decision, player: PlayerView, game: GameSnapshot) -> Decision:
    """
    Bring a decision inside the table's bounds.

    Raises below the minimum are floored up, raises beyond the stack
    become all-in, and raises that cannot happen become calls.
    """
    call_amount = max(0, game.current_bet - player.current_bet)
    if decision.action == Action.FOLD:
        return decision
    if decision.action == Action.CALL:
        return Decision.call(min(call_amount, player.chips))

    all_in_target = player.current_bet + player.chips
    if all_in_target <= game.current_bet or game.raises_this_round >= game.max_raises_per_round:
        return Decision.call(min(call_amount, player.chips))
    target = max(decision.amount, game.min_raise_to)
    return Decision.raise_to(min(target, all_in_target))


class StrategyEngine:
    """
    Dispatches decisions to registered strategies.

    The engine owns one random generator and one private memory per
    seat. A strategy that raises is replaced by a conservative default
    for that decision, so no strategy can stall a betting round.
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        rng: Optional[np.random.Generator] = None,
        tuning: Iterable = (),
        trace_sink: Optional[TraceSink] = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Table config supplying push/fold and fallback limits
            rng: Random source threaded into every strategy
            tuning: Config dataclass instances overriding strategy defaults
            trace_sink: Optional callback receiving each finished trace
        """
        self.config = config or TableConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.tuning = {type(t): t for t in tuning}
        self.trace_sink = trace_sink
        self.memories: dict[str, StrategyMemory] = {}
        self.fallbacks: Counter = Counter()
        self.last_trace: Optional[DecisionTrace] = None

    def memory_for(self, name: str) -> StrategyMemory:
        if name not in self.memories:
            self.memories[name] = StrategyMemory()
        return self.memories[name]

    def resolve(self, strategy_id: Optional[str]) -> str:
        if strategy_id in STRATEGIES:
            return strategy_id
        logger.warning("Unknown strategy %r, using %s", strategy_id, DEFAULT_STRATEGY)
        return DEFAULT_STRATEGY

    def decide(self, player: PlayerView, game: GameSnapshot) -> Decision:
        """Decide for ``player`` using the strategy named on its seat."""
        call_amount = max(0, game.current_bet - player.current_bet)
        return self.compute(
            player.strategy,
            call_amount,
            game.community_cards,
            game.total_pot,
            game,
            player,
        )

    def compute(
        self,
        strategy_id: Optional[str],
        call_amount: int,
        community_cards: Sequence[Card],
        pot: int,
        game: GameSnapshot,
        player: PlayerView,
    ) -> Decision:
        """
        Run one decision through push/fold, the strategy and legalization.

        Args:
            strategy_id: Registered strategy name
            call_amount: Chips owed to stay in
            community_cards: 0-5 board cards
            pot: Pot size including bets on the table
            game: Read-only snapshot
            player: Acting seat's view (with hole cards)

        Returns:
            A legal Decision
        """
        name = self.resolve(strategy_id)
        memory = self.memory_for(player.name)
        memory.observe(game, player.name)
        trace = DecisionTrace(algorithm=name, player=player.name)
        ctx = DecisionContext(
            call_amount=call_amount,
            community_cards=tuple(community_cards),
            pot=pot,
            game=game,
            player=player,
            rng=self.rng,
            trace=trace,
            memory=memory,
            tuning=self.tuning,
        )

        decision = self._push_fold(ctx)
        if decision is None:
            try:
                decision = STRATEGIES[name](ctx)
                if not isinstance(decision, Decision):
                    raise TypeError(f"{name} returned {decision!r}")
            except Exception:
                logger.exception("Strategy %s failed for %s", name, player.name)
                self.fallbacks[name] += 1
                trace.fallback = True
                trace.step("strategy failed, using conservative default")
                decision = conservative_default(call_amount, self.config.cheap_call_limit)

        decision = legalize(decision, player, game)
        self._remember(ctx, decision)

        trace.decision = decision
        trace.decision_time_ms = ctx.elapsed_ms()
        self.last_trace = trace
        if self.trace_sink is not None:
            self.trace_sink(trace)
        return decision

    def _push_fold(self, ctx: DecisionContext) -> Optional[Decision]:
        threshold = self.config.push_fold_bb * ctx.big_blind
        if threshold <= 0 or ctx.player.stack_behind > threshold:
            return None
        if ctx.is_preflop:
            strength = hole_equity(ctx.player.hole_cards)
        else:
            strength = ctx.strength
        if strength <= self.config.push_strength:
            return None
        ctx.trace.push_fold = True
        ctx.trace.step(f"short stack ({ctx.player.stack_behind}), strength {strength:.2f}: all-in")
        return Decision.raise_to(ctx.player.stack_behind)

    def _remember(self, ctx: DecisionContext, decision: Decision) -> None:
        ctx.memory.record(DecisionRecord(
            hand_number=ctx.game.hand_number,
            stage=ctx.stage,
            pot=ctx.pot,
            current_bet=ctx.game.current_bet,
            position=ctx.dealer_distance,
            active_players=len(ctx.game.contenders),
            hand_strength=ctx.strength,
            action="check" if decision.action == Action.CALL and decision.amount == 0 else decision.action.value,
            amount=decision.amount,
        ))
