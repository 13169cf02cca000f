"""
Shallow game-tree search strategies: minimax, alpha-beta and expectimax.

All three build the same betting tree over fold / call / raise with a
stochastic opponent model. They differ only in how opponent nodes are
scored: the worst case for us (minimax, alpha-beta with pruning) or a
probability-weighted average (expectimax).
"""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from holdem.engine.actions import Decision
from .base import DecisionContext
from .registry import register


class NodeType(Enum):
    """Types of nodes in a search tree."""
    ROOT = auto()
    MAX = auto()        # We choose
    MIN = auto()        # Opponent chooses against us
    CHANCE = auto()     # Opponent (or our future self) acts with fixed probabilities
    TERMINAL = auto()   # Fold or showdown


@dataclass
class SearchConfig:
    """Tree shape and evaluation constants for minimax."""
    max_depth: int = 4
    raise_fractions: tuple[float, ...] = (0.5, 0.75, 1.0, 1.5, 2.0)

    # Root fold value is -call minus this penalty
    fold_penalty_cap: float = 10.0
    fold_penalty_fraction: float = 0.2
    small_bet_fold_multiplier: float = 2.0
    small_bet_call_bonus: float = 5.0
    small_bet_blinds: int = 2             # Calls up to this many big blinds are small

    strong_hand: float = 0.7
    strong_hand_bonus: float = 0.1        # Share of the pot added at leaves with a strong hand
    button_bonus: float = 0.0

    # Opponent model: their strength shifts our showdown odds
    opponent_strength_low: float = 0.2
    opponent_strength_high: float = 0.8
    opponent_noise: float = 0.5

    # Expectimax response probabilities
    opponent_fold: float = 0.3
    opponent_call: float = 0.5
    opponent_raise: float = 0.2


@dataclass
class AlphaBetaConfig(SearchConfig):
    fold_penalty_cap: float = 15.0
    fold_penalty_fraction: float = 0.25
    small_bet_fold_multiplier: float = 1.5
    small_bet_call_bonus: float = 8.0
    button_bonus: float = 0.05


@dataclass
class ExpectimaxConfig(SearchConfig):
    fold_penalty_cap: float = 15.0
    fold_penalty_fraction: float = 0.25
    small_bet_fold_multiplier: float = 1.5
    small_bet_call_bonus: float = 5.0
    button_bonus: float = 0.05
    raise_fractions: tuple[float, ...] = (0.5, 0.75, 1.0, 1.5)


@dataclass
class SearchNode:
    """A node in a decision tree; values are chips relative to now."""
    node_type: NodeType
    label: str = ""
    amount: int = 0
    probability: Optional[float] = None
    value: Optional[float] = None
    depth: int = 0
    best: bool = False
    children: list["SearchNode"] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.node_type == NodeType.TERMINAL

    def add(self, child: "SearchNode") -> "SearchNode":
        self.children.append(child)
        return child

    def count(self) -> int:
        return 1 + sum(c.count() for c in self.children)


def render_tree(node: SearchNode, prefix: str = "", is_last: bool = True, depth: int = 0) -> str:
    """
    Render a tree as indented ASCII.

    Best-path nodes are marked with ``*``; values and probabilities are
    shown when known.
    """
    connector = "" if depth == 0 else prefix + ("└── " if is_last else "├── ")
    marker = "*" if node.best else " "
    text = "ROOT" if node.node_type == NodeType.ROOT else node.label.upper()
    if node.amount:
        text += f" {node.amount}"
    if node.value is not None:
        text += f" ({node.value:.2f})"
    if node.probability is not None:
        text += f" [{node.probability * 100:.1f}%]"
    lines = [f"{connector}{marker} {text}"]

    child_prefix = "" if depth == 0 else prefix + ("    " if is_last else "│   ")
    for i, child in enumerate(node.children):
        lines.append(render_tree(child, child_prefix, i == len(node.children) - 1, depth + 1))
    return "\n".join(lines)


@dataclass
class _State:
    pot: float          # Chips in the middle
    invested: float     # Chips we have added since the root
    facing: float       # Chips the player to act must add to call
    hero_left: float
    villain_left: float


class TreeSearch:
    """
    Builds and scores a betting tree for one decision.

    Args:
        ctx: Decision context
        config: Tree constants
        mode: "minimax", "alphabeta" or "expectimax"
    """

    def __init__(self, ctx: DecisionContext, config: SearchConfig, mode: str):
        self.ctx = ctx
        self.config = config
        self.mode = mode
        self.p = max(0.01, min(0.99, ctx.equity))
        self.nodes = 0
        self.deepest = 0
        self.pruned = 0
        self.on_button = ctx.is_dealer

    # ------------------------------------------------------------------
    # Leaves

    def _visit(self, depth: int) -> None:
        self.nodes += 1
        self.deepest = max(self.deepest, depth)

    def _bonus(self, pot: float) -> float:
        bonus = 0.0
        if self.p > self.config.strong_hand:
            bonus += self.config.strong_hand_bonus * pot
        if self.on_button:
            bonus += self.config.button_bonus * pot
        return bonus

    def _showdown(self, state: _State, p: float) -> float:
        """We win the whole pot with probability p; what we added is at risk."""
        return p * state.pot - state.invested + self._bonus(state.pot)

    def _versus_opponent(self) -> float:
        cfg = self.config
        strength = self.ctx.rng.uniform(cfg.opponent_strength_low, cfg.opponent_strength_high)
        p = self.p + (0.5 - strength) * cfg.opponent_noise
        return max(0.0, min(1.0, p))

    def _sizes(self, state: _State, available: float) -> list[int]:
        """Raise increments: double the bet, half pot and pot, bounded by chips."""
        raw = [state.facing * 2, state.pot * 0.5, state.pot]
        sizes = []
        for size in raw:
            size = int(size)
            if size > 0 and state.facing + size <= available and size not in sizes:
                sizes.append(size)
        return sizes

    # ------------------------------------------------------------------
    # Interior nodes

    def _hero(self, node: SearchNode, state: _State, depth: int, alpha: float, beta: float) -> float:
        """We act facing ``state.facing``."""
        self._visit(depth)
        if depth >= self.config.max_depth:
            after = _State(state.pot + state.facing, state.invested + state.facing, 0,
                           state.hero_left - state.facing, state.villain_left)
            node.value = self._showdown(after, self.p)
            return node.value

        options: list[tuple[str, int, _State, bool]] = []
        fold_state = state
        options.append(("fold", 0, fold_state, True))
        call_state = _State(state.pot + state.facing, state.invested + state.facing, 0,
                            state.hero_left - state.facing, state.villain_left)
        options.append(("call", int(state.facing), call_state, True))
        for size in self._sizes(state, min(state.hero_left, state.villain_left + state.facing)):
            added = state.facing + size
            options.append(("raise", size, _State(
                state.pot + added, state.invested + added, size,
                state.hero_left - added, state.villain_left,
            ), False))

        if self.mode == "expectimax":
            return self._hero_chance(node, options, depth)

        best = -math.inf
        for label, amount, child_state, terminal in options:
            child = node.add(SearchNode(NodeType.TERMINAL if terminal else NodeType.MIN, label, amount, depth=depth + 1))
            if terminal:
                self._visit(depth + 1)
                if label == "fold":
                    child.value = -state.invested
                else:
                    child.value = self._showdown(child_state, self._versus_opponent())
            else:
                self._villain(child, child_state, depth + 1, alpha, beta)
            best = max(best, child.value)
            if self.mode == "alphabeta":
                alpha = max(alpha, best)
                if alpha >= beta:
                    self.pruned += len(options) - len(node.children)
                    break
        node.value = best
        return best

    def _hero_chance(self, node: SearchNode, options: list, depth: int) -> float:
        """Our later decisions, modeled as a mix weighted by hand strength."""
        p = self.p
        fold_p = min(0.7, max(0.1, (1 - p) - 0.2))
        call_p = min(0.6, max(0.2, 0.5 - abs(p - 0.5)))
        raises = [o for o in options if o[0] == "raise"]
        raise_p = max(0.0, 1.0 - fold_p - call_p) if raises else 0.0
        total = fold_p + call_p + raise_p

        node.node_type = NodeType.CHANCE
        expected = 0.0
        for label, amount, child_state, terminal in options:
            if label == "fold":
                prob = fold_p / total
            elif label == "call":
                prob = call_p / total
            else:
                prob = raise_p / total / len(raises)
            child = node.add(SearchNode(NodeType.TERMINAL if terminal else NodeType.CHANCE, label, amount,
                                        probability=prob, depth=depth + 1))
            if terminal:
                self._visit(depth + 1)
                if label == "fold":
                    child.value = -child_state.invested
                else:
                    child.value = self._showdown(child_state, self._versus_opponent())
            else:
                self._villain(child, child_state, depth + 1, -math.inf, math.inf)
            expected += prob * child.value
        node.value = expected
        return expected

    def _villain(self, node: SearchNode, state: _State, depth: int, alpha: float, beta: float) -> float:
        """Opponent faces our bet of ``state.facing``."""
        self._visit(depth)
        cfg = self.config
        if depth >= cfg.max_depth:
            after = _State(state.pot + state.facing, state.invested, 0, state.hero_left, state.villain_left)
            node.value = self._showdown(after, self._versus_opponent())
            return node.value

        call_state = _State(state.pot + state.facing, state.invested, 0,
                            state.hero_left, state.villain_left - state.facing)
        outcomes: list[tuple[str, int, Optional[_State]]] = [
            ("opp_fold", 0, None),
            ("opp_call", int(state.facing), call_state),
        ]
        for size in self._sizes(state, min(state.villain_left, state.hero_left + state.facing)):
            added = state.facing + size
            outcomes.append(("opp_raise", size, _State(
                state.pot + added, state.invested, size,
                state.hero_left, state.villain_left - added,
            )))

        if self.mode == "expectimax":
            node.node_type = NodeType.CHANCE
            raises = len(outcomes) - 2
            weights = [cfg.opponent_fold, cfg.opponent_call]
            if raises:
                weights += [cfg.opponent_raise / raises] * raises
            total = sum(weights)
            expected = 0.0
            for (label, amount, child_state), weight in zip(outcomes, weights):
                prob = weight / total
                value = self._villain_outcome(node, label, amount, state, child_state, depth, alpha, beta, prob)
                expected += prob * value
            node.value = expected
            return expected

        worst = math.inf
        for i, (label, amount, child_state) in enumerate(outcomes):
            value = self._villain_outcome(node, label, amount, state, child_state, depth, alpha, beta, None)
            worst = min(worst, value)
            if self.mode == "alphabeta":
                beta = min(beta, worst)
                if alpha >= beta:
                    self.pruned += len(outcomes) - i - 1
                    break
        node.value = worst
        return worst

    def _villain_outcome(self, node, label, amount, state, child_state, depth, alpha, beta, prob) -> float:
        if label == "opp_raise":
            child = node.add(SearchNode(NodeType.MAX, label, amount, probability=prob, depth=depth + 1))
            return self._hero(child, child_state, depth + 1, alpha, beta)
        child = node.add(SearchNode(NodeType.TERMINAL, label, amount, probability=prob, depth=depth + 1))
        self._visit(depth + 1)
        if label == "opp_fold":
            child.value = state.pot - state.invested
        else:
            child.value = self._showdown(child_state, self._versus_opponent())
        return child.value

    # ------------------------------------------------------------------
    # Root

    def root_raise_sizes(self) -> list[int]:
        """Raise increments over the table bet considered at the root."""
        ctx = self.ctx
        call = ctx.call_amount
        stack = ctx.chips
        min_increment = ctx.game.min_raise_to - ctx.game.current_bet
        raw = [min_increment] + [ctx.pot * f for f in self.config.raise_fractions]
        sizes = []
        for size in raw:
            size = max(int(size), min_increment)
            if 0 < call + size <= stack and size not in sizes:
                sizes.append(size)
        return sizes

    def run(self) -> tuple[Decision, SearchNode]:
        ctx = self.ctx
        cfg = self.config
        call = ctx.call_amount
        pot = float(ctx.pot)
        villain_left = max((o.chips for o in ctx.opponents), default=0)

        root = SearchNode(NodeType.ROOT)
        self._visit(0)
        small_bet = call <= ctx.big_blind * cfg.small_bet_blinds
        candidates: list[tuple[SearchNode, Decision]] = []

        if call > 0:
            penalty = min(cfg.fold_penalty_cap, pot * cfg.fold_penalty_fraction)
            if small_bet:
                penalty *= cfg.small_bet_fold_multiplier
            fold = root.add(SearchNode(NodeType.TERMINAL, "fold", 0, depth=1))
            self._visit(1)
            fold.value = -call - penalty
            candidates.append((fold, Decision.fold()))
            ctx.trace.step(f"fold: {fold.value:.2f} (penalty {penalty:.1f})")

        label = "call" if call > 0 else "check"
        call_node = root.add(SearchNode(NodeType.TERMINAL, label, call, depth=1))
        self._visit(1)
        call_state = _State(pot + call, call, 0, ctx.chips - call, villain_left)
        call_node.value = self._showdown(call_state, self.p)
        if small_bet:
            call_node.value += cfg.small_bet_call_bonus
        candidates.append((call_node, Decision.call(call)))
        ctx.trace.step(f"{label}: {call_node.value:.2f}")

        if villain_left > 0:
            for size in self.root_raise_sizes():
                added = call + size
                child = root.add(SearchNode(NodeType.MIN, "raise", ctx.game.current_bet + size, depth=1))
                state = _State(pot + added, added, size, ctx.chips - added, villain_left)
                alpha = max(node.value for node, _ in candidates)
                self._villain(child, state, 1, alpha, math.inf)
                candidates.append((child, Decision.raise_to(ctx.game.current_bet + size)))
                ctx.trace.step(f"raise to {ctx.game.current_bet + size}: {child.value:.2f}")

        best_node, decision = candidates[0]
        for node, option in candidates[1:]:
            if node.value > best_node.value:
                best_node, decision = node, option
        root.value = best_node.value
        root.best = True
        path = mark_best_path(best_node, self.mode)

        trace = ctx.trace
        trace.nodes_explored = self.nodes
        trace.max_depth = self.deepest
        trace.pruned = self.pruned
        trace.evaluation = best_node.value
        trace.best_path = path
        trace.tree = root
        trace.step(f"win probability {self.p:.2f}, best {decision} ({best_node.value:.2f})")
        return decision, root


def mark_best_path(node: SearchNode, mode: str) -> list[str]:
    """Flag the chosen line; opponents pick their minimum, chance picks the likeliest."""
    path = []
    while node is not None:
        node.best = True
        path.append(f"{node.label} {node.amount}".strip() if node.amount else node.label)
        if not node.children:
            break
        if node.node_type == NodeType.CHANCE:
            node = max(node.children, key=lambda c: c.probability or 0.0)
        elif node.node_type == NodeType.MIN:
            node = min(node.children, key=lambda c: c.value)
        else:
            node = max(node.children, key=lambda c: c.value)
    return path


@register("minimax")
def minimax(ctx: DecisionContext) -> Decision:
    decision, _ = TreeSearch(ctx, ctx.config(SearchConfig), "minimax").run()
    return decision


@register("alphaBeta")
def alpha_beta(ctx: DecisionContext) -> Decision:
    decision, _ = TreeSearch(ctx, ctx.config(AlphaBetaConfig), "alphabeta").run()
    return decision


@register("expectimax")
def expectimax(ctx: DecisionContext) -> Decision:
    decision, _ = TreeSearch(ctx, ctx.config(ExpectimaxConfig), "expectimax").run()
    return decision
