"""Table state machine, players and the decision contract."""

from .actions import Action, Decision
from .config import TableConfig
from .player import Player
from .snapshot import ActionRecord, GameSnapshot, PlayerView
from .table import (
    BETTING_PHASES,
    HandSummary,
    IllegalActionError,
    Phase,
    SidePot,
    Table,
)

__all__ = [
    # Decisions
    "Action",
    "Decision",
    # Table
    "Table",
    "TableConfig",
    "Phase",
    "BETTING_PHASES",
    "HandSummary",
    "SidePot",
    "IllegalActionError",
    # Seats and views
    "Player",
    "PlayerView",
    "GameSnapshot",
    "ActionRecord",
]
