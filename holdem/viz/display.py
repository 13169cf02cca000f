"""Terminal rendering of tables, decision traces and simulation results."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.style import Style
from rich.table import Table as RichTable
from rich.text import Text

from holdem.engine.table import HandSummary, Table
from holdem.simulation.harness import SimulationResult
from holdem.strategies.base import DecisionTrace
from holdem.strategies.odds import preflop_equity
from holdem.strategies.search import render_tree

RANKS = "AKQJT98765432"
RANK_VALUE = {r: 14 - i for i, r in enumerate(RANKS)}

# 13x13 starting hands: pairs on the diagonal, suited above, offsuit below
HAND_MATRIX = []
for i, r1 in enumerate(RANKS):
    row = []
    for j, r2 in enumerate(RANKS):
        if i == j:
            row.append(f"{r1}{r2}")
        elif i < j:
            row.append(f"{r1}{r2}s")
        else:
            row.append(f"{r2}{r1}o")
    HAND_MATRIX.append(row)

SUIT_COLORS = {"♥": "red", "♦": "red", "♣": "white", "♠": "white"}


def card_text(cards, hidden: bool = False) -> Text:
    """Cards as colored suit symbols, or face down."""
    text = Text()
    for card in cards:
        if hidden:
            text.append("🂠 ", style="blue")
            continue
        pretty = card.pretty
        text.append(pretty + " ", style=SUIT_COLORS.get(pretty[-1], "white"))
    return text


def render_table(table: Table, reveal: Optional[str] = None, show_all: bool = False) -> Panel:
    """
    Seats, stacks and bets for the hand in progress.

    Args:
        table: Table to draw
        reveal: Name of the seat whose hole cards are shown
        show_all: Show every seat's hole cards

    Returns:
        A rich Panel
    """
    seats = RichTable(show_header=True, header_style="bold")
    seats.add_column("")
    seats.add_column("Player")
    seats.add_column("Strategy", style="dim")
    seats.add_column("Chips", justify="right")
    seats.add_column("Bet", justify="right")
    seats.add_column("Cards")
    seats.add_column("Status")

    current = table.current_player
    for i, player in enumerate(table.players):
        marker = ""
        if i == table.dealer_index:
            marker = "D"
        elif i == table.small_blind_index:
            marker = "SB"
        elif i == table.big_blind_index:
            marker = "BB"
        if player.folded:
            status = Text("folded", style="grey50")
        elif player.all_in:
            status = Text("all-in", style="bold magenta")
        elif player is current:
            status = Text("to act", style="bold green")
        else:
            status = Text("")
        shown = show_all or player.name == reveal
        seats.add_row(
            marker,
            player.name,
            player.strategy or "human",
            str(player.chips),
            str(player.current_bet) if player.current_bet else "",
            card_text(player.hole_cards, hidden=not shown),
            status,
        )

    board = card_text(table.community_cards) if table.community_cards else Text("--", style="dim")
    header = Text.assemble(
        (f"Hand #{table.hand_number}  ", "bold"),
        (f"{table.round_name}  ", "cyan"),
        f"pot {table.pot}  bet {table.current_bet}  board ",
    )
    header.append_text(board)
    return Panel(seats, title=header, border_style="green")


def render_summary(summary: HandSummary) -> Panel:
    lines = Text()
    for name, amount in summary.winnings.items():
        if amount <= 0:
            continue
        hand = summary.hands.get(name, "")
        lines.append(f"{name} wins {amount}", style="bold green")
        if hand:
            lines.append(f" with {hand}")
        lines.append("\n")
    if summary.showdown and summary.hands:
        for name, hand in summary.hands.items():
            if summary.winnings.get(name, 0) <= 0:
                lines.append(f"{name} shows {hand}\n", style="dim")
    board = card_text(summary.board) if summary.board else Text("no board", style="dim")
    return Panel(lines, title=Text.assemble(f"Hand #{summary.hand_number}  pot {summary.pot}  ", board))


def render_trace(trace: DecisionTrace, show_tree: bool = True, max_nodes: int = 200) -> Panel:
    """Reasoning steps and search statistics of one decision."""
    body = Text()
    for step in trace.reasoning:
        body.append(f"• {step}\n")
    stats = []
    if trace.nodes_explored:
        stats.append(f"nodes {trace.nodes_explored}, depth {trace.max_depth}")
    if trace.pruned:
        stats.append(f"pruned {trace.pruned}")
    if trace.simulations_run:
        stats.append(f"simulations {trace.simulations_run}")
    if trace.evaluation is not None:
        stats.append(f"evaluation {trace.evaluation:.2f}")
    if trace.best_path:
        stats.append("path " + " > ".join(trace.best_path))
    if stats:
        body.append("\n".join(stats) + "\n", style="cyan")
    if trace.fallback:
        body.append("strategy failed, conservative default used\n", style="bold red")
    if trace.push_fold:
        body.append("short stack push/fold\n", style="yellow")
    if show_tree and trace.tree is not None:
        size = trace.tree.count()
        if size <= max_nodes:
            body.append("\n" + render_tree(trace.tree) + "\n")
        else:
            body.append(f"\nsearch tree has {size} nodes, too large to draw\n", style="dim")

    title = f"{trace.player} [{trace.algorithm}] -> {trace.decision} ({trace.decision_time_ms:.1f}ms)"
    return Panel(body, title=title, border_style="blue")


def render_leaderboard(result: SimulationResult) -> RichTable:
    board = RichTable(
        title=f"{result.games_played} games, {result.hands_played} hands",
        show_header=True,
        header_style="bold",
    )
    board.add_column("#", justify="right")
    board.add_column("Strategy", style="bold")
    board.add_column("Net", justify="right")
    board.add_column("Games won", justify="right")
    board.add_column("Hands won", justify="right")
    board.add_column("VPIP", justify="right")
    board.add_column("PFR", justify="right")
    board.add_column("AF", justify="right")
    board.add_column("ms/dec", justify="right")
    board.add_column("Fallbacks", justify="right")

    for rank, stats in enumerate(result.leaderboard, start=1):
        net_style = "green" if stats.net_chips > 0 else "red" if stats.net_chips < 0 else ""
        board.add_row(
            str(rank),
            stats.strategy,
            Text(f"{stats.net_chips:+d}", style=net_style),
            f"{stats.games_won}/{stats.games_played}",
            f"{stats.win_rate:.1f}%",
            f"{stats.vpip:.1f}",
            f"{stats.pfr:.1f}",
            f"{stats.aggression_factor:.2f}",
            f"{stats.avg_decision_ms:.2f}",
            str(stats.fallbacks),
        )
    return board


def _equity_style(equity: float) -> Style:
    if equity >= 0.7:
        return Style(bgcolor="green", color="white")
    if equity >= 0.55:
        return Style(bgcolor="yellow", color="black")
    if equity >= 0.45:
        return Style(bgcolor="orange3", color="black")
    return Style(bgcolor="grey30", color="grey70")


def equity_matrix() -> RichTable:
    """Preflop equity estimate for all 169 starting hands."""
    grid = RichTable(title="Preflop equity", show_header=True, header_style="bold")
    grid.add_column("", style="bold")
    for rank in RANKS:
        grid.add_column(rank, justify="center")
    for i, rank in enumerate(RANKS):
        row = [rank]
        for hand in HAND_MATRIX[i]:
            high, low = RANK_VALUE[hand[0]], RANK_VALUE[hand[1]]
            equity = preflop_equity(max(high, low), min(high, low), high == low, hand.endswith("s"))
            row.append(Text(f"{equity * 100:.0f}".center(3), style=_equity_style(equity)))
        grid.add_row(*row)
    return grid


def display_equity_matrix(console: Optional[Console] = None) -> None:
    (console or Console()).print(equity_matrix())
