"""Headless batch simulation of strategies against each other."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from holdem.engine.actions import Action
from holdem.engine.config import TableConfig
from holdem.engine.player import Player
from holdem.engine.table import HandSummary, Table
from holdem.strategies.base import DecisionTrace
from holdem.strategies.montecarlo import MonteCarloConfig, WeightedSimulationConfig
from holdem.strategies.registry import StrategyEngine

logger = logging.getLogger(__name__)

ProgressFn = Callable[[int, int], None]


@dataclass
class SimulationConfig:
    """Configuration for a batch of games."""
    games: int = 10
    hands_per_game: int = 20
    starting_chips: int = 1000
    small_blind: int = 5
    big_blind: int = 10
    strategies: list[str] = field(default_factory=lambda: ["basic", "aggressive", "conservative", "monteCarlo"])
    seed: Optional[int] = None

    # Rollout counts for the simulation strategies, kept small so batches stay fast
    monte_carlo_simulations: int = 300
    weighted_simulations: int = 200

    def table_config(self) -> TableConfig:
        return TableConfig(
            small_blind=self.small_blind,
            big_blind=self.big_blind,
            min_bet=self.big_blind,
            starting_chips=self.starting_chips,
            thinking_delay=0.0,
        )

    def tuning(self) -> list:
        return [
            MonteCarloConfig(num_simulations=self.monte_carlo_simulations),
            WeightedSimulationConfig(num_simulations=self.weighted_simulations),
        ]


@dataclass
class StrategyStats:
    """
    Results for one strategy across all games.

    Rates are stored as values 0-100.
    """
    strategy: str
    hands_played: int = 0
    hands_won: int = 0
    games_played: int = 0
    games_won: int = 0
    net_chips: int = 0

    decisions: int = 0
    folds: int = 0
    checks: int = 0
    calls: int = 0
    raises: int = 0
    vpip_hands: int = 0       # Hands with a voluntary preflop call or raise
    pfr_hands: int = 0        # Hands with a preflop raise
    fallbacks: int = 0
    total_decision_ms: float = 0.0

    @property
    def win_rate(self) -> float:
        return 100.0 * self.hands_won / self.hands_played if self.hands_played else 0.0

    @property
    def vpip(self) -> float:
        return 100.0 * self.vpip_hands / self.hands_played if self.hands_played else 0.0

    @property
    def pfr(self) -> float:
        return 100.0 * self.pfr_hands / self.hands_played if self.hands_played else 0.0

    @property
    def aggression_factor(self) -> float:
        """Raises per call; raises alone when there were no calls."""
        return self.raises / self.calls if self.calls else float(self.raises)

    @property
    def avg_decision_ms(self) -> float:
        return self.total_decision_ms / self.decisions if self.decisions else 0.0

    @property
    def chips_per_hand(self) -> float:
        return self.net_chips / self.hands_played if self.hands_played else 0.0

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy,
            "hands_played": self.hands_played,
            "hands_won": self.hands_won,
            "games_played": self.games_played,
            "games_won": self.games_won,
            "net_chips": self.net_chips,
            "win_rate": round(self.win_rate, 2),
            "vpip": round(self.vpip, 2),
            "pfr": round(self.pfr, 2),
            "aggression_factor": round(self.aggression_factor, 3),
            "avg_decision_ms": round(self.avg_decision_ms, 3),
            "actions": {"fold": self.folds, "check": self.checks, "call": self.calls, "raise": self.raises},
            "fallbacks": self.fallbacks,
        }

    def __repr__(self) -> str:
        return (
            f"StrategyStats({self.strategy}, hands={self.hands_played}, "
            f"net={self.net_chips:+d}, VPIP={self.vpip:.1f}, PFR={self.pfr:.1f}, "
            f"AF={self.aggression_factor:.2f})"
        )


@dataclass
class SimulationResult:
    """Aggregated output of ``run_simulation``."""
    config: SimulationConfig
    stats: dict[str, StrategyStats]
    games_played: int = 0
    hands_played: int = 0
    chip_corrections: int = 0

    @property
    def leaderboard(self) -> list[StrategyStats]:
        """Strategies ordered by net chips, then games won."""
        return sorted(self.stats.values(), key=lambda s: (s.net_chips, s.games_won), reverse=True)

    def to_dict(self) -> dict:
        return {
            "games": self.games_played,
            "hands": self.hands_played,
            "chip_corrections": self.chip_corrections,
            "seed": self.config.seed,
            "leaderboard": [s.to_dict() for s in self.leaderboard],
        }


def _seat_name(strategy: str, seat: int) -> str:
    return f"{strategy}-{seat + 1}"


def _record_trace(trace: DecisionTrace, owners: dict[str, str], stats: dict[str, StrategyStats]) -> None:
    strategy = owners.get(trace.player)
    if strategy is None or trace.decision is None:
        return
    entry = stats[strategy]
    entry.decisions += 1
    entry.total_decision_ms += trace.decision_time_ms
    if trace.fallback:
        entry.fallbacks += 1
    decision = trace.decision
    if decision.action == Action.FOLD:
        entry.folds += 1
    elif decision.action == Action.RAISE:
        entry.raises += 1
    elif decision.amount == 0:
        entry.checks += 1
    else:
        entry.calls += 1


def _record_hand(table: Table, summary: HandSummary, seated: list[str],
                 owners: dict[str, str], stats: dict[str, StrategyStats]) -> None:
    voluntary: set[str] = set()
    raised: set[str] = set()
    for record in table.action_history:
        if record.street != "preflop":
            continue
        if record.action in ("call", "raise"):
            voluntary.add(record.player)
        if record.action == "raise":
            raised.add(record.player)

    winners = set(summary.winners)
    for name in seated:
        entry = stats[owners[name]]
        entry.hands_played += 1
        if name in winners:
            entry.hands_won += 1
        if name in voluntary:
            entry.vpip_hands += 1
        if name in raised:
            entry.pfr_hands += 1


def play_game(
    config: SimulationConfig,
    order: list[str],
    engine: StrategyEngine,
    rng: np.random.Generator,
    owners: dict[str, str],
    stats: dict[str, StrategyStats],
) -> tuple[Table, int]:
    """
    Play one game of up to ``hands_per_game`` hands.

    Returns:
        The finished table and the number of hands dealt
    """
    players = [Player(_seat_name(s, i), config.starting_chips, strategy=s) for i, s in enumerate(order)]
    for player in players:
        owners[player.name] = player.strategy
    table = Table(players, config.table_config(), rng=rng)
    if not table.start_game():
        return table, 0

    hands = 0
    while hands < config.hands_per_game and table.running:
        if hands > 0 and not table.start_new_hand():
            break
        seated = [p.name for p in table.players]
        while table.running and table.is_betting:
            table.step(engine)
        hands += 1
        summary = table.last_summary
        if summary is not None and summary.hand_number == table.hand_number:
            _record_hand(table, summary, seated, owners, stats)
    return table, hands


def run_simulation(config: SimulationConfig, progress: Optional[ProgressFn] = None) -> SimulationResult:
    """
    Run a batch of games between the configured strategies.

    Seat order rotates by one each game so no strategy keeps the same
    position. Thinking delay is always zero.

    Args:
        config: Batch size, blinds, strategies and seed
        progress: Optional callback receiving (games done, games total)

    Returns:
        SimulationResult with per-strategy statistics
    """
    if len(config.strategies) < 2:
        raise ValueError("A simulation needs at least two strategies")

    rng = np.random.default_rng(config.seed)
    stats = {s: StrategyStats(strategy=s) for s in config.strategies}
    owners: dict[str, str] = {}
    engine = StrategyEngine(
        config=config.table_config(),
        rng=rng,
        tuning=config.tuning(),
        trace_sink=lambda trace: _record_trace(trace, owners, stats),
    )
    result = SimulationResult(config=config, stats=stats)

    n = len(config.strategies)
    for game in range(config.games):
        shift = game % n
        order = config.strategies[shift:] + config.strategies[:shift]
        engine.memories.clear()
        table, hands = play_game(config, order, engine, rng, owners, stats)

        everyone = table.players + table.eliminated
        for player in everyone:
            entry = stats[player.strategy]
            entry.games_played += 1
            entry.net_chips += player.chips - config.starting_chips
        leader = max(everyone, key=lambda p: p.chips)
        stats[leader.strategy].games_won += 1

        result.games_played += 1
        result.hands_played += hands
        result.chip_corrections += table.chip_corrections
        logger.info("Game %d/%d finished after %d hands, leader %s", game + 1, config.games, hands, leader.name)
        if progress is not None:
            progress(game + 1, config.games)

    if result.chip_corrections:
        logger.warning("%d chip corrections applied during the batch", result.chip_corrections)
    return result
