#!/usr/bin/env python3
"""Show how one or more strategies decide a single spot."""

import argparse
import sys
from dataclasses import replace

from rich.console import Console

from holdem.engine import GameSnapshot, PlayerView, TableConfig
from holdem.game import evaluate_hand, hand_strength, parse_cards
from holdem.logging_config import configure_logging
from holdem.strategies import StrategyEngine, available_strategies, hole_equity
from holdem.viz import card_text, display_equity_matrix, render_trace

STREETS = {0: "preflop", 3: "flop", 4: "turn", 5: "river"}


def build_spot(hole, board, pot: int, call: int, chips: int, opponents: int,
               seat: int, config: TableConfig) -> tuple[GameSnapshot, PlayerView]:
    """A snapshot where the hero faces ``call`` with ``pot`` already swept."""
    seats = opponents + 1
    hero = PlayerView(
        name="hero", position=seat, chips=chips, current_bet=0, total_bet=0,
        folded=False, all_in=False, active=True, strategy=None, hole_cards=tuple(hole),
    )
    views = []
    bettor = (seat + 1) % seats
    for i in range(seats):
        if i == seat:
            views.append(hero)
            continue
        bet = call if i == bettor else 0
        views.append(PlayerView(
            name=f"villain-{i + 1}", position=i, chips=chips, current_bet=bet, total_bet=bet,
            folded=False, all_in=False, active=True,
        ))
    current_bet = max(v.current_bet for v in views)
    snapshot = GameSnapshot(
        players=tuple(views),
        pot=pot,
        current_bet=current_bet,
        community_cards=tuple(board),
        dealer_index=0,
        small_blind_index=1 % seats,
        big_blind_index=2 % seats,
        small_blind=config.small_blind,
        big_blind=config.big_blind,
        min_bet=config.min_bet,
        min_raise_to=max(2 * current_bet, current_bet + config.min_bet),
        round_name=STREETS[len(board)],
    )
    return snapshot, hero


def main():
    parser = argparse.ArgumentParser(
        description="Inspect strategy decisions for a single spot"
    )
    parser.add_argument(
        "-H", "--hole",
        help="Hero hole cards (e.g., 'AsKh')",
    )
    parser.add_argument(
        "-b", "--board",
        default="",
        help="Board cards, 0, 3, 4 or 5 (e.g., 'Td9d2c')",
    )
    parser.add_argument(
        "-p", "--pot",
        type=int,
        default=60,
        help="Pot before this round's bets (default: 60)",
    )
    parser.add_argument(
        "--call",
        type=int,
        default=20,
        help="Chips owed to call (default: 20)",
    )
    parser.add_argument(
        "--chips",
        type=int,
        default=1000,
        help="Hero stack (default: 1000)",
    )
    parser.add_argument(
        "--opponents",
        type=int,
        default=1,
        help="Opponents still in the hand (default: 1)",
    )
    parser.add_argument(
        "--seat",
        type=int,
        default=0,
        help="Hero seat, 0 is the button (default: 0)",
    )
    parser.add_argument(
        "-s", "--strategy",
        action="append",
        help="Strategy id (repeatable; default: all)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=7,
        help="Random seed (default: 7)",
    )
    parser.add_argument(
        "--tree",
        action="store_true",
        help="Draw search trees",
    )
    parser.add_argument(
        "--matrix",
        action="store_true",
        help="Print the preflop equity matrix and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging",
    )

    args = parser.parse_args()
    console = Console()
    configure_logging("DEBUG" if args.verbose else "WARNING")

    if args.matrix:
        display_equity_matrix(console)
        return 0
    if not args.hole:
        console.print("[red]--hole is required[/]")
        return 1

    try:
        hole = parse_cards(args.hole)
        board = parse_cards(args.board) if args.board else []
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        return 1
    if len(hole) != 2 or len(board) not in STREETS:
        console.print("[red]Need 2 hole cards and a board of 0, 3, 4 or 5 cards[/]")
        return 1
    if args.opponents < 1 or not 0 <= args.seat <= args.opponents:
        console.print("[red]Seat must be between 0 and the number of opponents[/]")
        return 1

    known = available_strategies()
    strategies = args.strategy or known
    unknown = [s for s in strategies if s not in known]
    if unknown:
        console.print(f"[red]Unknown strategies: {', '.join(unknown)}[/]")
        return 1

    config = TableConfig(seed=args.seed)
    snapshot, hero = build_spot(hole, board, args.pot, args.call, args.chips,
                                args.opponents, args.seat, config)

    line = card_text(hole)
    if board:
        line.append("| ")
        line.append_text(card_text(board))
    console.print(line)
    if board:
        console.print(f"[bold]Made hand:[/] {evaluate_hand(hole, board).describe()}")
    console.print(f"[bold]Strength:[/] {hand_strength(hole, board):.3f}   "
                  f"[bold]Preflop equity:[/] {hole_equity(hole):.3f}")
    console.print(f"[bold]Pot:[/] {snapshot.total_pot}   [bold]To call:[/] {args.call}")
    console.print()

    engine = StrategyEngine(config)
    for name in strategies:
        hero_seat = replace(hero, strategy=name)
        engine.compute(name, args.call, board, snapshot.total_pot, snapshot, hero_seat)
        console.print(render_trace(engine.last_trace, show_tree=args.tree))

    return 0


if __name__ == "__main__":
    sys.exit(main())
