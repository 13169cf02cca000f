"""Rich renderers for the terminal."""

from .display import (
    HAND_MATRIX,
    card_text,
    display_equity_matrix,
    equity_matrix,
    render_leaderboard,
    render_summary,
    render_table,
    render_trace,
)

__all__ = [
    "HAND_MATRIX",
    "card_text",
    "display_equity_matrix",
    "equity_matrix",
    "render_leaderboard",
    "render_summary",
    "render_table",
    "render_trace",
]
