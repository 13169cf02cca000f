"""Batch simulation harness."""

from .harness import SimulationConfig, SimulationResult, StrategyStats, play_game, run_simulation

__all__ = [
    "SimulationConfig",
    "SimulationResult",
    "StrategyStats",
    "play_game",
    "run_simulation",
]
