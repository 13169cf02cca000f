"""Decision context, trace and per-player memory shared by all strategies."""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar

import numpy as np

from holdem.engine.actions import Decision
from holdem.engine.snapshot import ActionRecord, GameSnapshot, PlayerView
from holdem.game.cards import Card
from holdem.game.evaluator import HandCategory, evaluate_hand, hand_strength, win_probability
from .odds import hole_equity

logger = logging.getLogger(__name__)

STAGES = {0: "preflop", 3: "flop", 4: "turn", 5: "river"}

HISTORY_LIMIT = 100
OBSERVATION_LIMIT = 200

TuningT = TypeVar("TuningT")


@dataclass
class DecisionTrace:
    """
    Observational record of one decision.

    Filled in by the strategy while it runs and handed to the trace
    sink afterwards. Gameplay never depends on it.
    """
    algorithm: str
    player: str = ""
    nodes_explored: int = 0
    max_depth: int = 0
    pruned: int = 0
    simulations_run: int = 0
    best_path: list[str] = field(default_factory=list)
    evaluation: Optional[float] = None
    reasoning: list[str] = field(default_factory=list)
    decision: Optional[Decision] = None
    decision_time_ms: float = 0.0
    fallback: bool = False
    push_fold: bool = False
    tree: Any = None

    def step(self, message: str) -> None:
        self.reasoning.append(message)
        logger.debug("[%s] %s: %s", self.algorithm, self.player, message)

    def summary(self) -> str:
        parts = [f"{self.algorithm} -> {self.decision}"]
        if self.nodes_explored:
            parts.append(f"{self.nodes_explored} nodes")
        if self.pruned:
            parts.append(f"{self.pruned} pruned")
        if self.simulations_run:
            parts.append(f"{self.simulations_run} sims")
        parts.append(f"{self.decision_time_ms:.1f}ms")
        return ", ".join(parts)


@dataclass
class DecisionRecord:
    """What a player saw and did at one decision point."""
    hand_number: int
    stage: str
    pot: int
    current_bet: int
    position: int
    active_players: int
    hand_strength: float
    action: str = ""
    amount: int = 0


@dataclass
class Observation:
    """An opponent action tagged with the hand it happened in."""
    hand_number: int
    record: ActionRecord


@dataclass
class OpponentModel:
    """Bayesian-style beliefs about one opponent."""
    aggression: float = 0.5
    bluff_frequency: float = 0.2
    call_frequency: float = 0.5
    tightness: float = 0.5
    observations: int = 0


class StrategyMemory:
    """
    Private bookkeeping for one seat.

    Strategies may update this freely; the table never sees it.
    """

    def __init__(self):
        self.decision_history: deque[DecisionRecord] = deque(maxlen=HISTORY_LIMIT)
        self.observed: dict[str, deque[Observation]] = {}
        self.opponent_models: dict[str, OpponentModel] = {}
        self.tendencies: dict[str, float] = {
            "aggression": 0.5,
            "passiveness": 0.5,
            "bluff": 0.3,
        }
        self.last_action: Optional[str] = None
        self.new_actions: list[ActionRecord] = []
        self._hand_number = -1
        self._seen = 0

    def observe(self, snapshot: GameSnapshot, me: str) -> list[ActionRecord]:
        """
        Ingest action history entries not seen before.

        Returns:
            New opponent actions since the previous call
        """
        if snapshot.hand_number != self._hand_number:
            self._hand_number = snapshot.hand_number
            self._seen = 0
        fresh = list(snapshot.action_history[self._seen:])
        self._seen = len(snapshot.action_history)

        self.new_actions = [a for a in fresh if a.player != me and a.action in ("fold", "check", "call", "raise")]
        for action in self.new_actions:
            log = self.observed.setdefault(action.player, deque(maxlen=OBSERVATION_LIMIT))
            log.append(Observation(snapshot.hand_number, action))
        return self.new_actions

    def model_for(self, name: str) -> OpponentModel:
        if name not in self.opponent_models:
            self.opponent_models[name] = OpponentModel()
        return self.opponent_models[name]

    def actions_of(self, name: str) -> list[ActionRecord]:
        return [o.record for o in self.observed.get(name, ())]

    def record(self, record: DecisionRecord) -> None:
        self.decision_history.append(record)
        self.last_action = record.action


@dataclass
class DecisionContext:
    """
    Everything a strategy may read when deciding.

    ``game`` is a frozen snapshot; writes belong in ``memory``.
    """
    call_amount: int
    community_cards: tuple[Card, ...]
    pot: int
    game: GameSnapshot
    player: PlayerView
    rng: np.random.Generator
    trace: DecisionTrace
    memory: StrategyMemory
    tuning: dict[type, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)

    _strength: Optional[float] = field(default=None, repr=False)
    _equity: Optional[float] = field(default=None, repr=False)

    def config(self, cls: type[TuningT]) -> TuningT:
        """Tuning override registered for ``cls``, or its defaults."""
        if cls not in self.tuning:
            self.tuning[cls] = cls()
        return self.tuning[cls]

    @property
    def hole_cards(self) -> list[Card]:
        return list(self.player.hole_cards)

    @property
    def board(self) -> list[Card]:
        return list(self.community_cards)

    @property
    def stage(self) -> str:
        return STAGES.get(len(self.community_cards), "preflop")

    @property
    def is_preflop(self) -> bool:
        return len(self.community_cards) == 0

    @property
    def strength(self) -> float:
        if self._strength is None:
            self._strength = hand_strength(self.player.hole_cards, self.community_cards)
        return self._strength

    @property
    def equity(self) -> float:
        """
        Showdown win estimate for EV math.

        Preflop this is starting-hand equity; later streets take the
        better of the strength estimate and the made category's base
        win rate.
        """
        if self._equity is None:
            if self.is_preflop:
                self._equity = hole_equity(self.player.hole_cards)
            else:
                p = self.strength
                if len(self.player.hole_cards) == 2 and p > 0.0:
                    category = evaluate_hand(self.player.hole_cards, self.community_cards).category
                    if category > HandCategory.HIGH_CARD:
                        p = max(p, win_probability(category, len(self.community_cards)))
                self._equity = p
        return self._equity

    @property
    def chips(self) -> int:
        return self.player.chips

    @property
    def big_blind(self) -> int:
        return self.game.big_blind

    @property
    def opponents(self) -> list[PlayerView]:
        return self.game.opponents(self.player.name)

    @property
    def num_opponents(self) -> int:
        return max(1, len(self.opponents))

    @property
    def num_players(self) -> int:
        """Seats with chips at the table."""
        return sum(1 for p in self.game.players if p.active)

    @property
    def seat(self) -> int:
        return self.game.seat_of(self.player.name)

    @property
    def dealer_distance(self) -> int:
        """Seats clockwise from the button; 0 is the button itself."""
        n = len(self.game.players)
        return (self.seat - self.game.dealer_index) % n

    @property
    def is_dealer(self) -> bool:
        return self.seat == self.game.dealer_index

    @property
    def pot_odds(self) -> float:
        if self.call_amount <= 0:
            return 0.0
        return self.call_amount / (self.pot + self.call_amount)

    @property
    def spr(self) -> float:
        return self.chips / max(1, self.pot)

    def rand(self) -> float:
        return float(self.rng.random())

    def bet(self, chips: float) -> Decision:
        """Raise by putting ``chips`` more in this round (call included)."""
        return Decision.raise_to(self.player.current_bet + max(0, int(chips)))

    def raise_options(self, fractions: tuple[float, ...]) -> list[int]:
        """
        Chip amounts worth considering for a raise.

        The minimum legal raise plus each pot fraction, kept when larger
        than the call and affordable.
        """
        minimum = self.game.min_raise_to - self.player.current_bet
        options = []
        for amount in [minimum] + [int(self.pot * f) for f in fractions]:
            if self.call_amount < amount <= self.chips and amount not in options:
                options.append(amount)
        return options

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000.0
