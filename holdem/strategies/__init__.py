"""Decision strategies, the registry and the dispatch engine."""

from .base import (
    DecisionContext,
    DecisionRecord,
    DecisionTrace,
    OpponentModel,
    StrategyMemory,
)
from .registry import (
    STRATEGIES,
    DEFAULT_STRATEGY,
    StrategyEngine,
    available_strategies,
    conservative_default,
    get_strategy,
    legalize,
    register,
)
from .odds import (
    EVConfig,
    call_ev,
    raise_ev,
    fold_ev,
    pot_odds,
    preflop_equity,
    hole_equity,
    kelly_fraction,
    kelly_for_draws,
    bankroll_risk,
)
from .analysis import (
    BoardTexture,
    DrawInfo,
    analyze_board,
    identify_draws,
    position_bucket,
    seat_position,
)

# Importing the strategy modules registers them
from . import basic, search, montecarlo, bayesian, kelly, heuristic, positional, pattern, adaptive, gamephase
from .search import SearchConfig, AlphaBetaConfig, ExpectimaxConfig, SearchNode, TreeSearch, render_tree
from .montecarlo import MonteCarloConfig, WeightedSimulationConfig
from .bayesian import BayesianConfig
from .kelly import KellyConfig
from .heuristic import HeuristicConfig
from .positional import PositionConfig
from .pattern import PatternConfig
from .adaptive import AdaptiveConfig
from .gamephase import GamePhaseConfig

__all__ = [
    # Contract
    "DecisionContext",
    "DecisionRecord",
    "DecisionTrace",
    "OpponentModel",
    "StrategyMemory",
    # Registry
    "STRATEGIES",
    "DEFAULT_STRATEGY",
    "StrategyEngine",
    "available_strategies",
    "conservative_default",
    "get_strategy",
    "legalize",
    "register",
    # Odds
    "EVConfig",
    "call_ev",
    "raise_ev",
    "fold_ev",
    "pot_odds",
    "preflop_equity",
    "hole_equity",
    "kelly_fraction",
    "kelly_for_draws",
    "bankroll_risk",
    # Analysis
    "BoardTexture",
    "DrawInfo",
    "analyze_board",
    "identify_draws",
    "position_bucket",
    "seat_position",
    # Search
    "SearchConfig",
    "AlphaBetaConfig",
    "ExpectimaxConfig",
    "SearchNode",
    "TreeSearch",
    "render_tree",
    # Tuning
    "MonteCarloConfig",
    "WeightedSimulationConfig",
    "BayesianConfig",
    "KellyConfig",
    "HeuristicConfig",
    "PositionConfig",
    "PatternConfig",
    "AdaptiveConfig",
    "GamePhaseConfig",
]
