"""Tests for the table state machine."""

import numpy as np
import pytest

from holdem.engine import (
    Decision,
    IllegalActionError,
    Phase,
    Player,
    Table,
    TableConfig,
)
from holdem.game.cards import parse_cards
from holdem.strategies import StrategyEngine


def heads_up(chips=100, rng=None):
    players = [Player("A", chips, strategy="basic"), Player("B", chips, strategy="basic")]
    return Table(players, TableConfig(), rng=rng or np.random.default_rng(0))


class TestConfig:
    def test_rejects_inverted_blinds(self):
        with pytest.raises(ValueError):
            TableConfig(small_blind=20, big_blind=10)

    def test_rejects_zero_min_bet(self):
        with pytest.raises(ValueError):
            TableConfig(min_bet=0)


class TestHandStart:
    def test_blinds_and_cards(self, table):
        assert table.start_game()
        assert table.phase == Phase.PREFLOP
        assert table.dealer_index == 0
        assert table.players[1].current_bet == 5
        assert table.players[2].current_bet == 10
        assert table.current_bet == 10
        assert all(len(p.hole_cards) == 2 for p in table.players)
        assert table.current_player.name == "A"

    def test_button_rotates(self, table):
        table.start_game()
        table.act(Decision.fold())
        table.act(Decision.fold())
        assert table.start_new_hand()
        assert table.dealer_index == 1
        assert table.current_player.name == "B"

    def test_min_raise(self, table):
        table.start_game()
        assert table.min_raise_to == 20

    def test_stopped_table_does_not_deal(self, table):
        assert not table.start_new_hand()


class TestBetting:
    def test_everyone_folds_to_big_blind(self, table):
        table.start_game()
        table.act(Decision.fold())
        table.act(Decision.fold())
        summary = table.last_summary
        assert summary.winners == ["C"]
        assert not summary.showdown
        assert [p.chips for p in table.players] == [1000, 995, 1005]
        assert table.phase == Phase.HAND_COMPLETE

    def test_limped_pot_reaches_flop(self, table):
        table.start_game()
        table.act(Decision.call())
        table.act(Decision.call())
        table.act(Decision.check())
        assert table.phase == Phase.FLOP
        assert len(table.community_cards) == 3
        assert table.pot == 30
        assert table.current_bet == 0
        # First seat left of the button opens the flop
        assert table.current_player.name == "B"

    def test_raise_reopens_action(self, table):
        table.start_game()
        table.act(Decision.call())
        table.act(Decision.call())
        table.act(Decision.raise_to(40))
        assert table.phase == Phase.PREFLOP
        assert table.current_player.name == "A"
        assert table.current_bet == 40

    def test_small_raise_floored(self, table):
        table.start_game()
        table.act(Decision.raise_to(12))
        assert table.players[0].current_bet == 20

    def test_oversized_raise_is_all_in(self, table):
        table.start_game()
        table.act(Decision.raise_to(5000))
        assert table.players[0].all_in
        assert table.players[0].current_bet == 1000

    def test_raise_cap_converts_to_call(self, rng):
        players = [Player(name, 1000, strategy="basic") for name in "ABC"]
        table = Table(players, TableConfig(max_raises_per_round=1), rng=rng)
        table.start_game()
        table.act(Decision.raise_to(30))
        table.act(Decision.raise_to(100))
        assert table.players[1].current_bet == 30
        assert table.current_bet == 30
        assert table.action_history[-1].action == "call"

    def test_history_records_actions(self, table):
        table.start_game()
        table.act(Decision.raise_to(30))
        table.act(Decision.fold())
        actions = [(a.player, a.action) for a in table.action_history]
        assert actions == [
            ("B", "small_blind"),
            ("C", "big_blind"),
            ("A", "raise"),
            ("B", "fold"),
        ]
        assert table.action_history[2].raise_to == 30


class TestShowdown:
    def test_heads_up_all_in_runs_out_board(self):
        table = heads_up()
        table.start_game()
        a, b = table.players
        a.hole_cards = parse_cards("As Ah")
        b.hole_cards = parse_cards("Qs Qh")
        table.deck.cards = parse_cards("3s 2c 7d 9h 4s Jc 5s Kd")

        # Heads-up the dealer posts the big blind and the other seat opens
        assert table.current_player is b
        table.act(Decision.raise_to(100))
        table.act(Decision.call())

        summary = table.last_summary
        assert [str(c) for c in summary.board] == ["2c", "7d", "9h", "Jc", "Kd"]
        assert summary.showdown
        assert summary.winnings == {"A": 200}
        assert a.chips == 200
        assert b.chips == 0
        assert not b.active

    def test_short_big_blind_pushes(self, engine):
        table = heads_up()
        table.start_game()
        a, b = table.players
        a.hole_cards = parse_cards("As Ah")
        b.hole_cards = parse_cards("Qs Qh")
        table.deck.cards = parse_cards("3s 2c 7d 9h 4s Jc 5s Kd")

        table.act(Decision.call())
        assert table.current_player is a
        assert table.step(engine) == Decision.raise_to(100)
        assert engine.last_trace.push_fold
        table.act(Decision.call())

        assert table.last_summary.pot == 200
        assert a.chips == 200
        assert not table.start_new_hand()
        assert [p.name for p in table.players] == ["A"]

    def test_split_pot(self):
        table = heads_up()
        table.start_game()
        a, b = table.players
        a.hole_cards = parse_cards("2c 3d")
        b.hole_cards = parse_cards("4c 5d")
        table.deck.cards = parse_cards("6s Ts Jd Qc 7s Kh 8s As")
        table.act(Decision.raise_to(100))
        table.act(Decision.call())
        assert table.last_summary.winnings == {"A": 100, "B": 100}
        assert a.chips == b.chips == 100

    def test_loser_eliminated_ends_game(self):
        table = heads_up()
        table.start_game()
        a, b = table.players
        a.hole_cards = parse_cards("As Ah")
        b.hole_cards = parse_cards("Qs Qh")
        table.deck.cards = parse_cards("3s 2c 7d 9h 4s Jc 5s Kd")
        table.act(Decision.raise_to(100))
        table.act(Decision.call())

        assert not table.start_new_hand()
        assert table.game_over
        assert [p.name for p in table.eliminated] == ["B"]

    def test_side_pots(self, table):
        a, b, c = table.players
        a.total_bet, b.total_bet, c.total_bet = 50, 100, 100
        pots = table.build_side_pots()
        assert [(p.amount, p.eligible) for p in pots] == [
            (150, ["A", "B", "C"]),
            (100, ["B", "C"]),
        ]

    def test_folded_chips_stay_in_pot(self, table):
        a, b, c = table.players
        a.total_bet, b.total_bet, c.total_bet = 20, 100, 100
        a.folded = True
        pots = table.build_side_pots()
        assert sum(p.amount for p in pots) == 220
        assert all("A" not in p.eligible for p in pots)

    def test_short_all_in_wins_only_main_pot(self, rng):
        players = [
            Player("A", 50, strategy="basic"),
            Player("B", 1000, strategy="basic"),
            Player("C", 1000, strategy="basic"),
        ]
        table = Table(players, TableConfig(), rng=rng)
        table.start_game()
        a, b, c = table.players
        a.hole_cards = parse_cards("As Ah")
        b.hole_cards = parse_cards("Ks Kh")
        c.hole_cards = parse_cards("7c 2d")
        table.deck.cards = parse_cards("3s 2c 8d 9h 4s Jc 5s Qd")

        table.act(Decision.raise_to(50))   # A all-in
        table.act(Decision.raise_to(200))  # B
        table.act(Decision.call())         # C
        # C and B check it down
        while table.is_betting:
            table.act(Decision.check())

        winnings = table.last_summary.winnings
        assert winnings["A"] == 150
        assert winnings["B"] == 300
        assert sum(p.chips for p in table.players) == 2050


class TestCommands:
    def test_stopped_table_rejects_actions(self, table):
        table.start_game()
        table.stop()
        with pytest.raises(IllegalActionError):
            table.act(Decision.call())

    def test_no_action_between_hands(self, table):
        table.start_game()
        table.act(Decision.fold())
        table.act(Decision.fold())
        with pytest.raises(IllegalActionError):
            table.act(Decision.call())

    def test_human_commands_need_human_turn(self, table):
        table.start_game()
        with pytest.raises(IllegalActionError):
            table.submit_fold()

    def test_step_waits_for_human(self, rng, engine):
        players = [Player("You", 1000), Player("B", 1000, strategy="basic"), Player("C", 1000, strategy="basic")]
        table = Table(players, TableConfig(), rng=rng)
        table.start_game()
        assert table.current_player.name == "You"
        assert table.step(engine) is None
        table.submit_call()
        assert table.current_player.name == "B"

    def test_snapshot_hides_other_hands(self, table):
        table.start_game()
        snapshot = table.snapshot(viewer="A")
        assert len(snapshot.player("A").hole_cards) == 2
        assert snapshot.player("B").hole_cards == ()
        assert snapshot.total_pot == 15


class TestChipConservation:
    def test_full_game(self):
        config = TableConfig(seed=11)
        players = [Player(f"P{i}", 500, strategy=s) for i, s in enumerate(["basic", "aggressive", "random", "conservative"])]
        table = Table(players, config)
        engine = StrategyEngine(config=config)
        table.start_game()
        for _ in range(25):
            while table.running and table.is_betting:
                table.step(engine)
            if not table.start_new_hand():
                break
        everyone = table.players + table.eliminated
        assert sum(p.chips for p in everyone) + table.pot + sum(p.current_bet for p in table.players) == 2000
        assert table.chip_corrections == 0

    def test_balance_check_repairs_drift(self, table):
        table.start_game()
        table.players[0].chips -= 7
        assert table.verify_chip_balance() == 7
        assert table.chip_corrections == 1


def every_card(table):
    cards = list(table.community_cards) + list(table.burned) + list(table.deck.cards)
    for player in table.players:
        cards.extend(player.hole_cards)
    return cards


class TestDeckIntegrity:
    def assert_full_deck(self, table):
        cards = every_card(table)
        assert len(cards) == 52
        assert len(set(cards)) == 52

    def test_every_street_accounts_for_52_cards(self, table):
        table.start_game()
        self.assert_full_deck(table)

        table.act(Decision.call())
        table.act(Decision.call())
        table.act(Decision.check())
        assert table.phase == Phase.FLOP
        assert len(table.burned) == 1
        self.assert_full_deck(table)

        for street in (Phase.TURN, Phase.RIVER):
            for _ in range(3):
                table.act(Decision.check())
            assert table.phase == street
            self.assert_full_deck(table)

        for _ in range(3):
            table.act(Decision.check())
        assert table.last_summary.showdown
        assert len(table.burned) == 3
        assert len(table.community_cards) == 5
        self.assert_full_deck(table)

    def test_all_in_run_out_keeps_deck_whole(self):
        table = heads_up()
        table.start_game()
        table.act(Decision.raise_to(100))
        table.act(Decision.call())
        assert len(table.community_cards) == 5
        self.assert_full_deck(table)
