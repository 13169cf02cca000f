"""Pytest configuration and fixtures."""

import numpy as np
import pytest

from holdem.engine import GameSnapshot, Player, PlayerView, Table, TableConfig
from holdem.game.cards import parse_cards
from holdem.strategies import MonteCarloConfig, StrategyEngine, WeightedSimulationConfig

STREETS = {0: "preflop", 3: "flop", 4: "turn", 5: "river"}


@pytest.fixture
def rng():
    """Seeded generator so shuffles and rollouts replay."""
    return np.random.default_rng(1234)


@pytest.fixture
def table(rng):
    """Three seats of 1000 chips with default blinds, not yet started."""
    players = [
        Player("A", 1000, strategy="basic"),
        Player("B", 1000, strategy="basic"),
        Player("C", 1000, strategy="basic"),
    ]
    return Table(players, TableConfig(), rng=rng)


@pytest.fixture
def engine(rng):
    """Engine with small rollout counts so simulation strategies stay quick."""
    return StrategyEngine(
        config=TableConfig(),
        rng=rng,
        tuning=[
            MonteCarloConfig(num_simulations=200),
            WeightedSimulationConfig(num_simulations=100),
        ],
    )


@pytest.fixture
def spot():
    """
    Build a decision point by hand.

    Hero sits on the button (seat 0) facing ``to_call`` from every
    opponent; ``pot`` is what was swept in on earlier streets.
    """

    def _spot(hole="As Ah", board="", pot=100, to_call=0, chips=1000, opponents=2, strategy="basic"):
        community = tuple(parse_cards(board)) if board else ()
        hero = PlayerView(
            name="Hero",
            position=0,
            chips=chips,
            current_bet=0,
            total_bet=0,
            folded=False,
            all_in=False,
            active=True,
            strategy=strategy,
            hole_cards=tuple(parse_cards(hole)),
        )
        views = [hero]
        for i in range(1, opponents + 1):
            views.append(PlayerView(
                name=f"Villain{i}",
                position=i,
                chips=1000,
                current_bet=to_call,
                total_bet=to_call,
                folded=False,
                all_in=False,
                active=True,
                strategy="basic",
            ))
        n = len(views)
        game = GameSnapshot(
            players=tuple(views),
            pot=pot,
            current_bet=to_call,
            community_cards=community,
            dealer_index=0,
            small_blind_index=1 % n,
            big_blind_index=2 % n,
            small_blind=5,
            big_blind=10,
            min_bet=10,
            min_raise_to=max(2 * to_call, to_call + 10),
            round_name=STREETS[len(community)],
            hand_number=1,
        )
        return game, hero

    return _spot
