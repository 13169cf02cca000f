#!/usr/bin/env python3
"""Play hold'em in the terminal against AI strategies."""

import argparse
import sys
import time

from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from holdem.engine import IllegalActionError, Player, Table, TableConfig
from holdem.logging_config import configure_logging
from holdem.strategies import StrategyEngine, available_strategies
from holdem.viz import render_summary, render_table, render_trace

HUMAN = "You"


def main():
    parser = argparse.ArgumentParser(
        description="Play no-limit hold'em against AI strategies"
    )
    parser.add_argument(
        "opponents",
        nargs="*",
        default=["heuristic", "monteCarlo", "bayesian"],
        help="Strategy ids for the AI seats (default: heuristic monteCarlo bayesian)",
    )
    parser.add_argument(
        "-c", "--chips",
        type=int,
        default=1000,
        help="Starting chips (default: 1000)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.8,
        help="Seconds to pause before each AI action (default: 0.8)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="No human seat; watch the AIs play",
    )
    parser.add_argument(
        "--reasoning",
        action="store_true",
        help="Show each AI decision's reasoning",
    )
    parser.add_argument(
        "--log-file",
        help="Write a debug log to this file",
    )

    args = parser.parse_args()
    console = Console()
    configure_logging("DEBUG" if args.log_file else "WARNING", args.log_file)

    known = available_strategies()
    unknown = [s for s in args.opponents if s not in known]
    if unknown:
        console.print(f"[red]Unknown strategies: {', '.join(unknown)}[/]")
        return 1

    players = [] if args.watch else [Player(HUMAN, args.chips)]
    players += [Player(f"{s}-{i + 1}", args.chips, strategy=s) for i, s in enumerate(args.opponents)]
    if len(players) < 2:
        console.print("[red]Need at least two seats[/]")
        return 1

    config = TableConfig(starting_chips=args.chips, thinking_delay=args.delay, seed=args.seed)
    table = Table(players, config)
    engine = StrategyEngine(config, rng=table.rng)

    table.start_game()
    try:
        while table.running:
            _play_hand(console, table, engine, args.reasoning)
            if table.last_summary is not None:
                console.print(render_summary(table.last_summary))
            if not args.watch and all(p.name != HUMAN for p in table.players if p.chips > 0):
                console.print("[bold red]You are out of chips.[/]")
                break
            if args.watch:
                time.sleep(config.thinking_delay)
            elif Prompt.ask("Next hand?", choices=["y", "n"], default="y") == "n":
                break
            if not table.start_new_hand():
                break
    except KeyboardInterrupt:
        table.stop()

    console.print()
    for player in sorted(table.players + table.eliminated, key=lambda p: p.chips, reverse=True):
        console.print(f"{player.name}: {player.chips}")
    return 0


def _play_hand(console: Console, table: Table, engine: StrategyEngine, reasoning: bool) -> None:
    while table.running and table.is_betting:
        player = table.current_player
        if player.is_human:
            console.print(render_table(table, reveal=HUMAN))
            _human_turn(console, table)
            continue
        time.sleep(table.config.thinking_delay)
        decision = table.step(engine)
        console.print(f"[cyan]{player.name}[/] {decision}")
        if reasoning and engine.last_trace is not None:
            console.print(render_trace(engine.last_trace, show_tree=False))


def _human_turn(console: Console, table: Table) -> None:
    me = table.current_player
    owed = table.call_amount(me)
    call_label = f"call {owed}" if owed else "check"
    console.print(f"To you: {call_label}, min raise to {table.min_raise_to}, stack {me.chips}")
    choice = Prompt.ask("[f]old, [c]all/check, [r]aise", choices=["f", "c", "r"], default="c")
    try:
        if choice == "f":
            table.submit_fold()
        elif choice == "c":
            table.submit_call()
        else:
            target = IntPrompt.ask("Raise to", default=table.min_raise_to)
            table.submit_raise(target)
    except IllegalActionError as e:
        console.print(f"[red]{e}[/]")


if __name__ == "__main__":
    sys.exit(main())
