"""Tests for the strategy registry, dispatch engine and individual strategies."""

import dataclasses

import pytest

from holdem.engine import Action, ActionRecord, Decision, Player, Table, TableConfig
from holdem.strategies import (
    STRATEGIES,
    AlphaBetaConfig,
    BayesianConfig,
    MonteCarloConfig,
    OpponentModel,
    SearchConfig,
    StrategyEngine,
    StrategyMemory,
    WeightedSimulationConfig,
    available_strategies,
    conservative_default,
    legalize,
    render_tree,
)
from holdem.strategies.bayesian import update_model

ALL_STRATEGIES = [
    "random", "conservative", "aggressive", "basic", "intermediate", "advanced",
    "minimax", "alphaBeta", "expectimax", "monteCarlo", "simulation", "bayesian",
    "kelly", "heuristic", "positionBased", "pattern", "adaptiveState", "gamephase",
]

NUTS_ON_RIVER = dict(hole="As Ah", board="Ad Ac 7h 2s 9d")


def decide(engine, spot, strategy, **kwargs):
    game, hero = spot(strategy=strategy, **kwargs)
    return engine.compute(strategy, game.current_bet - hero.current_bet,
                          game.community_cards, game.total_pot, game, hero)


class TestRegistry:
    def test_all_registered(self):
        assert sorted(available_strategies()) == sorted(ALL_STRATEGIES)
        assert len(STRATEGIES) == 18

    def test_unknown_falls_back_to_basic(self, engine):
        assert engine.resolve("nonexistent") == "basic"

    def test_conservative_default(self):
        assert conservative_default(0, 20) == Decision.check()
        assert conservative_default(15, 20) == Decision.call(15)
        assert conservative_default(50, 20) == Decision.fold()


class TestLegalize:
    @pytest.fixture
    def opened(self, table):
        table.start_game()
        snapshot = table.snapshot(viewer="A")
        return snapshot, snapshot.player("A")

    def test_floor_to_min_raise(self, opened):
        game, player = opened
        assert legalize(Decision.raise_to(12), player, game) == Decision.raise_to(20)

    def test_cap_at_all_in(self, opened):
        game, player = opened
        assert legalize(Decision.raise_to(5000), player, game) == Decision.raise_to(1000)

    def test_raise_cap_becomes_call(self, opened):
        game, player = opened
        capped = dataclasses.replace(game, raises_this_round=game.max_raises_per_round)
        assert legalize(Decision.raise_to(100), player, capped) == Decision.call(10)

    def test_call_amount_from_table(self, opened):
        game, player = opened
        assert legalize(Decision.call(999), player, game) == Decision.call(10)

    def test_fold_untouched(self, opened):
        game, player = opened
        assert legalize(Decision.fold(), player, game) == Decision.fold()


class TestEngine:
    def test_failing_strategy_uses_default(self, engine, spot, monkeypatch):
        def explode(ctx):
            raise RuntimeError("boom")

        monkeypatch.setitem(STRATEGIES, "basic", explode)
        decision = decide(engine, spot, "basic", hole="7c 2d", to_call=10)
        assert decision == Decision.call(10)
        assert engine.fallbacks["basic"] == 1
        assert engine.last_trace.fallback

    def test_non_decision_return_uses_default(self, engine, spot, monkeypatch):
        monkeypatch.setitem(STRATEGIES, "basic", lambda ctx: "raise")
        decision = decide(engine, spot, "basic", hole="7c 2d", to_call=50)
        assert decision == Decision.fold()
        assert engine.fallbacks["basic"] == 1

    def test_short_stack_pushes_strong_hand(self, engine, spot):
        decision = decide(engine, spot, "conservative", hole="As Ah", chips=60, to_call=10)
        assert decision == Decision.raise_to(60)
        assert engine.last_trace.push_fold

    def test_short_stack_weak_hand_uses_strategy(self, engine, spot):
        decide(engine, spot, "conservative", hole="7c 2d", chips=60, to_call=10)
        assert not engine.last_trace.push_fold

    def test_records_decision_history(self, engine, spot):
        decide(engine, spot, "basic", hole="7c 2d", to_call=50)
        memory = engine.memories["Hero"]
        assert len(memory.decision_history) == 1
        assert memory.last_action == "fold"

    def test_trace_sink_receives_trace(self, spot):
        traces = []
        engine = StrategyEngine(trace_sink=traces.append)
        decide(engine, spot, "basic")
        assert len(traces) == 1
        assert traces[0].algorithm == "basic"
        assert traces[0].decision is not None

    def test_observes_opponent_actions(self, table, engine):
        table.start_game()
        table.act(Decision.raise_to(30))
        snapshot = table.snapshot(viewer="B")
        engine.decide(snapshot.player("B"), snapshot)
        assert [a.action for a in engine.memories["B"].actions_of("A")] == ["raise"]


class TestEveryStrategy:
    @pytest.mark.parametrize("name", ALL_STRATEGIES)
    def test_preflop_decision_is_legal(self, name, rng, engine):
        players = [Player(f"P{i}", 1000, strategy=name) for i in range(3)]
        table = Table(players, TableConfig(), rng=rng)
        table.start_game()
        decision = table.step(engine)
        assert isinstance(decision, Decision)
        assert engine.fallbacks[name] == 0

    @pytest.mark.parametrize("name", ALL_STRATEGIES)
    def test_plays_through_flop(self, name, rng, engine):
        players = [Player(f"P{i}", 1000, strategy=name) for i in range(3)]
        table = Table(players, TableConfig(), rng=rng)
        table.start_game()
        table.act(Decision.call())
        table.act(Decision.call())
        table.act(Decision.check())
        assert table.round_name == "flop"
        decision = table.step(engine)
        assert isinstance(decision, Decision)
        assert engine.fallbacks[name] == 0

    @pytest.mark.parametrize("name", ALL_STRATEGIES)
    def test_river_spot(self, name, engine, spot):
        decision = decide(engine, spot, name, hole="Kd Qd", board="Kh 8c 3s 2d Jh", to_call=40)
        assert decision.action in (Action.FOLD, Action.CALL, Action.RAISE)
        assert engine.fallbacks[name] == 0

    @pytest.mark.parametrize("name", ALL_STRATEGIES)
    @pytest.mark.parametrize("chips", [60, 120, 200])
    def test_short_stack_heads_up(self, name, chips, spot, rng):
        engine = StrategyEngine(
            config=TableConfig(push_fold_bb=0),
            rng=rng,
            tuning=[MonteCarloConfig(num_simulations=100), WeightedSimulationConfig(num_simulations=50)],
        )
        for to_call in (0, 10, 20):
            decision = decide(engine, spot, name, hole="As Ah", board="Ks 7d 2c", chips=chips,
                              to_call=to_call, opponents=1)
            assert isinstance(decision, Decision)
            assert not engine.last_trace.push_fold
        assert engine.fallbacks[name] == 0

    @pytest.mark.parametrize("name", ["basic", "conservative", "aggressive", "monteCarlo", "kelly"])
    def test_never_folds_the_nuts(self, name, engine, spot):
        decision = decide(engine, spot, name, to_call=50, **NUTS_ON_RIVER)
        assert not decision.is_fold


class TestBaseline:
    def test_basic_bets_strong_river(self, engine, spot):
        assert decide(engine, spot, "basic", **NUTS_ON_RIVER) == Decision.raise_to(30)

    def test_basic_folds_air_to_big_bet(self, engine, spot):
        decision = decide(engine, spot, "basic", hole="7c 2d", board="As Kh 9s 4c Jd", to_call=50)
        assert decision == Decision.fold()

    def test_basic_calls_cheap_with_aces(self, engine, spot):
        assert decide(engine, spot, "basic", hole="As Ah", to_call=10) == Decision.call(10)

    def test_conservative_calls_tiny_bet(self, engine, spot):
        assert decide(engine, spot, "conservative", hole="7c 2d", to_call=10) == Decision.call(10)

    def test_conservative_raises_nuts(self, engine, spot):
        assert decide(engine, spot, "conservative", to_call=50, **NUTS_ON_RIVER) == Decision.raise_to(100)

    def test_random_is_reproducible(self, spot):
        first = [decide(StrategyEngine(TableConfig(seed=3)), spot, "random", to_call=20) for _ in range(3)]
        second = [decide(StrategyEngine(TableConfig(seed=3)), spot, "random", to_call=20) for _ in range(3)]
        assert first == second


class TestSearch:
    @pytest.mark.parametrize("name", ["minimax", "alphaBeta", "expectimax"])
    def test_trace_has_tree(self, name, engine, spot):
        decide(engine, spot, name, hole="Kd Qd", board="Kh 8c 3s", to_call=20)
        trace = engine.last_trace
        assert trace.nodes_explored > 1
        assert trace.best_path
        text = render_tree(trace.tree)
        assert "FOLD" in text
        assert "CALL" in text

    def test_alpha_beta_prunes_without_changing_the_choice(self, spot):
        # Same tree constants and a fixed opponent model for both searches
        tuning = [
            SearchConfig(opponent_noise=0.0),
            AlphaBetaConfig(
                fold_penalty_cap=10.0, fold_penalty_fraction=0.2, small_bet_fold_multiplier=2.0,
                small_bet_call_bonus=5.0, button_bonus=0.0, opponent_noise=0.0,
            ),
        ]
        top_pair = dict(hole="Kd Qd", board="Kh 8c 3s", to_call=20)
        minimax_engine = StrategyEngine(tuning=tuning)
        pruning_engine = StrategyEngine(tuning=tuning)

        full = decide(minimax_engine, spot, "minimax", **top_pair)
        pruned = decide(pruning_engine, spot, "alphaBeta", **top_pair)

        assert pruned == full
        assert pruning_engine.last_trace.pruned > 0
        assert minimax_engine.last_trace.pruned == 0
        assert pruning_engine.last_trace.nodes_explored < minimax_engine.last_trace.nodes_explored

    def test_expectimax_without_room_to_reraise(self, spot):
        engine = StrategyEngine(config=TableConfig(push_fold_bb=0))
        for chips in (20, 40, 90, 200, 390):
            for to_call in (0, 10, 20):
                decide(engine, spot, "expectimax", hole="As Ah", board="Ks 7d 2c", chips=chips,
                       to_call=to_call, opponents=1)
                assert engine.last_trace.nodes_explored > 1
        assert engine.fallbacks["expectimax"] == 0


class TestSimulationStrategies:
    def test_monte_carlo_reports_rollouts(self, engine, spot):
        decide(engine, spot, "monteCarlo", hole="Jh Th", board="9h 8c 2d")
        assert engine.last_trace.simulations_run == 200

    def test_weighted_simulation_reports_rollouts(self, engine, spot):
        decide(engine, spot, "simulation", hole="Jh Th", board="9h 8c 2d", to_call=20)
        assert engine.last_trace.simulations_run > 0


class TestBayesianModel:
    def test_raise_moves_aggression_up(self):
        model = OpponentModel()
        update_model(model, ActionRecord("V", "raise", 30, "preflop", 30), 100, BayesianConfig())
        assert model.aggression == pytest.approx(0.9)
        assert model.observations == 1

    def test_fold_moves_tightness(self):
        model = OpponentModel()
        update_model(model, ActionRecord("V", "fold", 0, "flop"), 100, BayesianConfig())
        assert model.tightness == pytest.approx(0.7)
        assert model.call_frequency == pytest.approx(0.1)

    def test_big_postflop_raise_is_rarely_a_bluff(self):
        model = OpponentModel()
        update_model(model, ActionRecord("V", "raise", 100, "turn", 100), 100, BayesianConfig())
        assert model.bluff_frequency == pytest.approx(0.1)

    def test_memory_creates_models(self):
        memory = StrategyMemory()
        assert memory.model_for("V") is memory.model_for("V")
