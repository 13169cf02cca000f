#!/usr/bin/env python3
"""Run a batch of games between AI strategies and print a leaderboard."""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from holdem.logging_config import configure_logging
from holdem.simulation import SimulationConfig, run_simulation
from holdem.strategies import available_strategies
from holdem.viz import render_leaderboard


def main():
    parser = argparse.ArgumentParser(
        description="Simulate games between hold'em strategies"
    )
    parser.add_argument(
        "strategies",
        nargs="*",
        default=["basic", "aggressive", "conservative", "monteCarlo"],
        help="Strategy ids to seat (default: basic aggressive conservative monteCarlo)",
    )
    parser.add_argument(
        "-g", "--games",
        type=int,
        default=10,
        help="Number of games (default: 10)",
    )
    parser.add_argument(
        "-n", "--hands",
        type=int,
        default=20,
        help="Hands per game (default: 20)",
    )
    parser.add_argument(
        "-c", "--chips",
        type=int,
        default=1000,
        help="Starting chips (default: 1000)",
    )
    parser.add_argument(
        "--blinds",
        default="5/10",
        help="Small/big blind (default: 5/10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a reproducible run",
    )
    parser.add_argument(
        "--mc-sims",
        type=int,
        default=300,
        help="Rollouts per Monte Carlo decision (default: 300)",
    )
    parser.add_argument(
        "-o", "--output",
        help="Save a JSON summary to this file",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available strategies and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging",
    )

    args = parser.parse_args()
    console = Console()
    configure_logging("DEBUG" if args.verbose else "WARNING")

    known = available_strategies()
    if args.list:
        for name in known:
            console.print(name)
        return 0

    unknown = [s for s in args.strategies if s not in known]
    if unknown:
        console.print(f"[red]Unknown strategies: {', '.join(unknown)}[/]")
        console.print(f"Available: {', '.join(known)}")
        return 1
    if len(args.strategies) < 2:
        console.print("[red]Seat at least two strategies[/]")
        return 1

    try:
        small_blind, big_blind = (int(x) for x in args.blinds.split("/"))
    except ValueError:
        console.print(f"[red]Blinds must look like 5/10, got {args.blinds}[/]")
        return 1

    config = SimulationConfig(
        games=args.games,
        hands_per_game=args.hands,
        starting_chips=args.chips,
        small_blind=small_blind,
        big_blind=big_blind,
        strategies=list(args.strategies),
        seed=args.seed,
        monte_carlo_simulations=args.mc_sims,
        weighted_simulations=max(50, args.mc_sims // 2),
    )

    console.print(f"[bold]Strategies:[/] {', '.join(config.strategies)}")
    console.print(f"[bold]Games:[/] {config.games} x {config.hands_per_game} hands, blinds {args.blinds}")
    console.print()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Simulating...", total=config.games)

        def callback(done, total):
            progress.update(task, completed=done, description=f"Game {done}/{total}")

        result = run_simulation(config, progress=callback)

    console.print()
    console.print(render_leaderboard(result))
    if result.chip_corrections:
        console.print(f"[yellow]Chip corrections applied: {result.chip_corrections}[/]")

    if args.output:
        path = Path(args.output)
        path.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        console.print(f"\n[bold]Summary saved to:[/] {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
