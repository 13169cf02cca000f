"""Tests for the batch simulation harness and terminal rendering."""

import io

import pytest
from rich.console import Console

from holdem.engine import Decision
from holdem.simulation import SimulationConfig, SimulationResult, StrategyStats, run_simulation
from holdem.viz import HAND_MATRIX, equity_matrix, render_leaderboard, render_summary, render_table, render_trace


def quick_config(**overrides):
    settings = dict(
        games=2,
        hands_per_game=3,
        strategies=["basic", "aggressive", "conservative"],
        seed=5,
        monte_carlo_simulations=50,
        weighted_simulations=50,
    )
    settings.update(overrides)
    return SimulationConfig(**settings)


def rendered(renderable) -> str:
    console = Console(file=io.StringIO(), width=160, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestStrategyStats:
    def test_rates_are_percentages(self):
        stats = StrategyStats("basic", hands_played=10, hands_won=3, vpip_hands=4, pfr_hands=2)
        assert stats.win_rate == pytest.approx(30.0)
        assert stats.vpip == pytest.approx(40.0)
        assert stats.pfr == pytest.approx(20.0)

    def test_aggression_factor(self):
        assert StrategyStats("a", raises=6, calls=3).aggression_factor == pytest.approx(2.0)
        assert StrategyStats("a", raises=3).aggression_factor == pytest.approx(3.0)

    def test_empty(self):
        stats = StrategyStats("basic")
        assert stats.win_rate == 0.0
        assert stats.avg_decision_ms == 0.0
        assert stats.chips_per_hand == 0.0

    def test_leaderboard_order(self):
        result = SimulationResult(config=quick_config(), stats={
            "a": StrategyStats("a", net_chips=-50),
            "b": StrategyStats("b", net_chips=120),
            "c": StrategyStats("c", net_chips=120, games_won=2),
        })
        assert [s.strategy for s in result.leaderboard] == ["c", "b", "a"]


class TestRunSimulation:
    def test_needs_two_strategies(self):
        with pytest.raises(ValueError):
            run_simulation(quick_config(strategies=["basic"]))

    def test_small_batch(self):
        config = quick_config()
        calls = []
        result = run_simulation(config, progress=lambda done, total: calls.append((done, total)))

        assert result.games_played == 2
        assert 0 < result.hands_played <= 6
        assert calls == [(1, 2), (2, 2)]
        assert sum(s.net_chips for s in result.stats.values()) == 0
        assert sum(s.games_won for s in result.stats.values()) == 2
        for stats in result.stats.values():
            assert stats.games_played == 2
            assert stats.decisions > 0
            assert stats.fallbacks == 0

    def test_seeded_batches_repeat(self):
        first = run_simulation(quick_config())
        second = run_simulation(quick_config())
        assert {s.strategy: s.net_chips for s in first.leaderboard} == \
            {s.strategy: s.net_chips for s in second.leaderboard}

    def test_simulation_strategies_use_small_rollouts(self):
        result = run_simulation(quick_config(games=1, hands_per_game=2, strategies=["monteCarlo", "simulation"]))
        assert result.games_played == 1

    def test_to_dict(self):
        data = run_simulation(quick_config(games=1)).to_dict()
        assert data["games"] == 1
        assert data["seed"] == 5
        assert {row["strategy"] for row in data["leaderboard"]} == {"basic", "aggressive", "conservative"}


class TestRendering:
    def test_hand_matrix(self):
        assert len(HAND_MATRIX) == 13
        assert HAND_MATRIX[0][0] == "AA"
        assert HAND_MATRIX[0][1] == "AKs"
        assert HAND_MATRIX[1][0] == "AKo"

    def test_equity_matrix(self):
        assert equity_matrix().row_count == 13

    def test_table_shows_round(self, table):
        table.start_game()
        text = rendered(render_table(table, reveal="A"))
        assert "A" in text
        assert "preflop" in text

    def test_summary(self, table):
        table.start_game()
        table.act(Decision.fold())
        table.act(Decision.fold())
        assert "C wins 15" in rendered(render_summary(table.last_summary))

    def test_trace(self, engine, spot):
        game, hero = spot(hole="Kd Qd", board="Kh 8c 3s", to_call=20, strategy="minimax")
        engine.compute("minimax", 20, game.community_cards, game.total_pot, game, hero)
        text = rendered(render_trace(engine.last_trace))
        assert "minimax" in text
        assert "nodes" in text

    def test_leaderboard(self):
        result = run_simulation(quick_config(games=1, hands_per_game=1))
        text = rendered(render_leaderboard(result))
        assert "conservative" in text
