"""Betting round state machine for one no-limit hold'em table."""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from holdem.game.cards import Card, Deck
from holdem.game.evaluator import HandResult, best_hands, evaluate_hand
from .actions import Action, Decision
from .config import TableConfig
from .player import Player
from .snapshot import ActionRecord, GameSnapshot, PlayerView

logger = logging.getLogger(__name__)


class Phase(Enum):
    """States of the table."""
    WAITING = "waiting"
    DEALING = "dealing"
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"
    PAYOUT = "payout"
    HAND_COMPLETE = "hand_complete"
    GAME_OVER = "game_over"


BETTING_PHASES = (Phase.PREFLOP, Phase.FLOP, Phase.TURN, Phase.RIVER)
NEXT_STREET = {Phase.PREFLOP: Phase.FLOP, Phase.FLOP: Phase.TURN, Phase.TURN: Phase.RIVER}
STREET_CARDS = {Phase.FLOP: 3, Phase.TURN: 1, Phase.RIVER: 1}


class IllegalActionError(ValueError):
    """A command arrived for the wrong seat, phase or a stopped table."""


@dataclass
class SidePot:
    amount: int
    eligible: list[str]


@dataclass
class HandSummary:
    """Result of one completed hand."""
    hand_number: int
    pot: int
    board: list[Card]
    winnings: dict[str, int] = field(default_factory=dict)
    hands: dict[str, str] = field(default_factory=dict)
    showdown: bool = False

    @property
    def winners(self) -> list[str]:
        return [name for name, amount in self.winnings.items() if amount > 0]


class Table:
    """
    Owns pot, deck, community cards and turn order for a game.

    A hand moves through dealing, four betting streets, showdown and
    payout. Strategies never touch this object; they receive a
    GameSnapshot and return a Decision which ``act`` applies.
    """

    def __init__(
        self,
        players: list[Player],
        config: Optional[TableConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the table.

        Args:
            players: Seats in table order
            config: Blinds, limits and tuning
            rng: Random source for shuffling (seeded from config if omitted)
        """
        self.config = config or TableConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.players = list(players)
        for i, player in enumerate(self.players):
            player.position = i
        self.eliminated: list[Player] = []

        self.deck = Deck(self.rng)
        self.community_cards: list[Card] = []
        self.burned: list[Card] = []
        self.pot = 0
        self.current_bet = 0
        self.raises_this_round = 0

        self.dealer_index = -1
        self.small_blind_index = 0
        self.big_blind_index = 0
        self.current_index: Optional[int] = None

        self.phase = Phase.WAITING
        self.hand_number = 0
        self.running = False

        self.action_history: list[ActionRecord] = []
        self.messages: deque[str] = deque(maxlen=self.config.message_log_size)
        self.summaries: list[HandSummary] = []
        self.expected_total = sum(p.chips for p in self.players)
        self.chip_corrections = 0

    # ------------------------------------------------------------------
    # Properties

    @property
    def is_betting(self) -> bool:
        return self.phase in BETTING_PHASES

    @property
    def round_name(self) -> str:
        if self.is_betting:
            return self.phase.value
        return {0: "preflop", 3: "flop", 4: "turn", 5: "river"}.get(
            len(self.community_cards), "preflop"
        )

    @property
    def current_player(self) -> Optional[Player]:
        if not self.is_betting or self.current_index is None:
            return None
        return self.players[self.current_index]

    @property
    def min_raise_to(self) -> int:
        """Smallest legal raise target: the bet re-doubled or the table minimum on top."""
        return max(2 * self.current_bet, self.current_bet + self.config.min_bet)

    @property
    def last_summary(self) -> Optional[HandSummary]:
        return self.summaries[-1] if self.summaries else None

    @property
    def game_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    def call_amount(self, player: Player) -> int:
        return max(0, self.current_bet - player.current_bet)

    def _log(self, message: str, level: int = logging.DEBUG) -> None:
        self.messages.append(message)
        logger.log(level, message)

    # ------------------------------------------------------------------
    # Game and hand lifecycle

    def start_game(self) -> bool:
        """Reset counters and deal the first hand."""
        self.running = True
        self.hand_number = 0
        self.dealer_index = -1
        self.expected_total = sum(p.chips for p in self.players)
        self.summaries = []
        self.phase = Phase.WAITING
        return self.start_new_hand()

    def stop(self) -> None:
        """Request a stop; no further actions or pot changes are applied."""
        self.running = False
        self.current_index = None
        self._log("Table stopped", logging.INFO)

    def start_new_hand(self) -> bool:
        """
        Rotate the button, post blinds and deal hole cards.

        Returns:
            False if the table is stopped or the game is over
        """
        if not self.running:
            return False

        busted = [p for p in self.players if p.chips <= 0]
        for player in busted:
            player.active = False
            self.eliminated.append(player)
            self._log(f"{player.name} is out of chips", logging.INFO)
        self.players = [p for p in self.players if p.chips > 0]
        for i, player in enumerate(self.players):
            player.position = i

        if len(self.players) < 2:
            self.phase = Phase.GAME_OVER
            self.running = False
            self.current_index = None
            winner = self.players[0].name if self.players else "nobody"
            self._log(f"Game over, {winner} holds all the chips", logging.INFO)
            return False

        self.phase = Phase.DEALING
        self.hand_number += 1
        for player in self.players:
            player.reset_for_hand()
        self.deck.reset()
        self.deck.shuffle()
        self.community_cards = []
        self.burned = []
        self.pot = 0
        self.current_bet = 0
        self.raises_this_round = 0
        self.action_history = []

        n = len(self.players)
        self.dealer_index = (self.dealer_index + 1) % n
        self.small_blind_index = (self.dealer_index + 1) % n
        self.big_blind_index = (self.dealer_index + 2) % n
        self._log(
            f"Hand #{self.hand_number}: dealer {self.players[self.dealer_index].name}",
            logging.INFO,
        )

        self._post_blind(self.small_blind_index, self.config.small_blind, "small_blind")
        self._post_blind(self.big_blind_index, self.config.big_blind, "big_blind")
        self.current_bet = max(p.current_bet for p in self.players)

        for _ in range(2):
            for offset in range(1, n + 1):
                seat = self.players[(self.dealer_index + offset) % n]
                seat.hole_cards.extend(self.deck.deal(1))

        self.phase = Phase.PREFLOP
        self._begin_round((self.big_blind_index + 1) % n)
        return True

    def _post_blind(self, index: int, amount: int, label: str) -> None:
        player = self.players[index]
        posted = player.place_bet(amount)
        self.action_history.append(ActionRecord(player.name, label, posted, "preflop"))
        self._log(f"{player.name} posts {label.replace('_', ' ')} {posted}")

    def _next_actor(self, start: int, inclusive: bool) -> Optional[int]:
        """First seat from ``start`` in table order that can still act."""
        n = len(self.players)
        first = 0 if inclusive else 1
        for offset in range(first, n + first):
            index = (start + offset) % n
            if self.players[index].can_act:
                return index
        return None

    def _begin_round(self, start: int) -> None:
        self.current_index = self._next_actor(start, inclusive=True)
        if self.current_index is None or self.is_betting_round_complete():
            self.complete_betting_round()

    # ------------------------------------------------------------------
    # Betting

    def is_betting_round_complete(self) -> bool:
        """
        One contender left, or every contender who can act has acted and
        matched the table bet (all-in players are exempt).
        """
        contenders = [p for p in self.players if p.in_hand]
        if len(contenders) <= 1:
            return True
        actors = [p for p in contenders if not p.all_in]
        if not actors:
            return True
        if len(actors) == 1 and actors[0].current_bet >= self.current_bet:
            return True
        return all(p.has_acted and p.current_bet == self.current_bet for p in actors)

    def _legal_raise_target(self, player: Player, amount: int) -> Optional[int]:
        """Raise target after flooring to the minimum and capping at all-in, or None if only a call is possible."""
        all_in_target = player.current_bet + player.chips
        if all_in_target <= self.current_bet:
            return None
        if self.raises_this_round >= self.config.max_raises_per_round:
            return None
        target = max(int(amount), self.min_raise_to)
        return min(target, all_in_target)

    def act(self, decision: Decision) -> None:
        """
        Apply a decision for the seat whose turn it is.

        Raises:
            IllegalActionError: If the table is stopped or not in a betting round
        """
        if not self.running:
            raise IllegalActionError("Table is stopped")
        player = self.current_player
        if player is None:
            raise IllegalActionError(f"No action expected during {self.phase.value}")

        street = self.phase.value
        if decision.action == Action.RAISE:
            target = self._legal_raise_target(player, decision.amount)
            if target is None:
                decision = Decision.call(self.call_amount(player))
            else:
                committed = player.place_bet(target - player.current_bet)
                if player.current_bet > self.current_bet:
                    self.current_bet = player.current_bet
                    self.raises_this_round += 1
                    for other in self.players:
                        if other is not player and other.can_act:
                            other.has_acted = False
                self.action_history.append(
                    ActionRecord(player.name, "raise", committed, street, player.current_bet)
                )
                self._log(f"{player.name} raises to {player.current_bet}")

        if decision.action == Action.CALL:
            owed = self.call_amount(player)
            committed = player.place_bet(owed)
            label = "call" if owed > 0 else "check"
            self.action_history.append(ActionRecord(player.name, label, committed, street))
            self._log(f"{player.name} {label}s" + (f" {committed}" if committed else ""))
        elif decision.action == Action.FOLD:
            player.fold()
            self.action_history.append(ActionRecord(player.name, "fold", 0, street))
            self._log(f"{player.name} folds")

        player.has_acted = True
        self._advance()

    def submit_fold(self) -> None:
        self._require_human()
        self.act(Decision.fold())

    def submit_call(self) -> None:
        self._require_human()
        self.act(Decision.call())

    def submit_raise(self, amount: int) -> None:
        self._require_human()
        self.act(Decision.raise_to(amount))

    def _require_human(self) -> None:
        player = self.current_player
        if player is None or not player.is_human:
            raise IllegalActionError("It is not the human seat's turn")

    def _advance(self) -> None:
        if not self.running:
            return
        if self.is_betting_round_complete():
            self.complete_betting_round()
            return
        self.current_index = self._next_actor(self.current_index, inclusive=False)
        if self.current_index is None:
            self.complete_betting_round()

    def complete_betting_round(self) -> None:
        """
        Sweep per-round bets into the pot, then deal the next street or
        go to showdown. Streets are run out without betting while fewer
        than two players can act.
        """
        for player in self.players:
            self.pot += player.current_bet
            player.reset_for_round()
        self.current_bet = 0
        self.raises_this_round = 0
        self.current_index = None

        while True:
            contenders = [p for p in self.players if p.in_hand]
            if len(contenders) <= 1 or self.phase == Phase.RIVER:
                self._showdown()
                return
            if not self.running:
                return

            self.phase = NEXT_STREET[self.phase]
            self.burned.append(self.deck.burn())
            self.community_cards.extend(self.deck.deal(STREET_CARDS[self.phase]))
            board = " ".join(str(c) for c in self.community_cards)
            self._log(f"{self.phase.value.capitalize()}: {board}")

            if sum(1 for p in self.players if p.can_act) >= 2:
                self.current_index = self._next_actor(self.dealer_index, inclusive=False)
                return

    # ------------------------------------------------------------------
    # Showdown and payout

    def build_side_pots(self) -> list[SidePot]:
        """Split the pot into layers by contribution level."""
        contributions = {p.name: p.total_bet for p in self.players if p.total_bet > 0}
        folded = {p.name for p in self.players if p.folded}
        contenders = [p.name for p in self.players if p.in_hand]

        pots: list[SidePot] = []
        previous = 0
        for level in sorted(set(contributions.values())):
            contributors = [name for name, total in contributions.items() if total >= level]
            amount = (level - previous) * len(contributors)
            eligible = [name for name in contributors if name not in folded] or contenders
            if pots and pots[-1].eligible == eligible:
                pots[-1].amount += amount
            else:
                pots.append(SidePot(amount, eligible))
            previous = level
        return pots

    def _seat_order(self) -> list[Player]:
        """Players starting left of the dealer."""
        n = len(self.players)
        return [self.players[(self.dealer_index + offset) % n] for offset in range(1, n + 1)]

    def _showdown(self) -> None:
        self.phase = Phase.SHOWDOWN
        contenders = [p for p in self._seat_order() if p.in_hand]
        summary = HandSummary(
            hand_number=self.hand_number,
            pot=self.pot,
            board=list(self.community_cards),
        )

        if len(contenders) == 1:
            summary.winnings[contenders[0].name] = self.pot
        else:
            summary.showdown = True
            results: dict[str, HandResult] = {
                p.name: evaluate_hand(p.hole_cards, self.community_cards)
                for p in contenders
            }
            summary.hands = {name: result.describe() for name, result in results.items()}
            order = [p.name for p in contenders]
            for side_pot in self.build_side_pots():
                eligible = {name: results[name] for name in order if name in side_pot.eligible}
                winners = best_hands(eligible)
                share, remainder = divmod(side_pot.amount, len(winners))
                for name in winners:
                    summary.winnings[name] = summary.winnings.get(name, 0) + share
                # Odd chip to the first tied winner in seat order
                summary.winnings[winners[0]] += remainder

        self.phase = Phase.PAYOUT
        by_name = {p.name: p for p in self.players}
        for name, amount in summary.winnings.items():
            by_name[name].chips += amount
        self.pot = 0

        for name in summary.winners:
            detail = f" with {summary.hands[name]}" if name in summary.hands else ""
            self._log(f"{name} wins {summary.winnings[name]}{detail}", logging.INFO)

        self.verify_chip_balance()
        for player in self.players:
            if player.chips == 0:
                player.active = False
        self.summaries.append(summary)
        self.phase = Phase.HAND_COMPLETE

    def verify_chip_balance(self) -> int:
        """
        Compare chips in play plus pot against the expected total.

        A mismatch is corrected on the largest stack and logged.

        Returns:
            The correction applied (0 when balanced)
        """
        in_play = sum(p.chips + p.current_bet for p in self.players) + self.pot
        drift = self.expected_total - in_play
        if drift == 0:
            return 0
        richest = max(self.players, key=lambda p: p.chips)
        richest.chips = max(0, richest.chips + drift)
        self.chip_corrections += 1
        self._log(
            f"Chip balance off by {drift}; adjusted {richest.name} to {richest.chips}",
            logging.WARNING,
        )
        return drift

    # ------------------------------------------------------------------
    # Views and drivers

    def snapshot(self, viewer: Optional[str] = None) -> GameSnapshot:
        """Immutable view of the table; only ``viewer`` sees hole cards."""
        views = tuple(
            PlayerView(
                name=p.name,
                position=p.position,
                chips=p.chips,
                current_bet=p.current_bet,
                total_bet=p.total_bet,
                folded=p.folded,
                all_in=p.all_in,
                active=p.active,
                strategy=p.strategy,
                hole_cards=tuple(p.hole_cards) if p.name == viewer else (),
            )
            for p in self.players
        )
        return GameSnapshot(
            players=views,
            pot=self.pot,
            current_bet=self.current_bet,
            community_cards=tuple(self.community_cards),
            dealer_index=self.dealer_index,
            small_blind_index=self.small_blind_index,
            big_blind_index=self.big_blind_index,
            small_blind=self.config.small_blind,
            big_blind=self.config.big_blind,
            min_bet=self.config.min_bet,
            min_raise_to=self.min_raise_to,
            round_name=self.round_name,
            hand_number=self.hand_number,
            raises_this_round=self.raises_this_round,
            max_raises_per_round=self.config.max_raises_per_round,
            action_history=tuple(self.action_history),
        )

    def step(self, engine) -> Optional[Decision]:
        """
        Let the AI seat whose turn it is act.

        Args:
            engine: Object with ``decide(player, snapshot) -> Decision``

        Returns:
            The applied decision, or None if a human must act or no
            betting round is open
        """
        player = self.current_player
        if player is None or player.is_human or not self.running:
            return None
        snapshot = self.snapshot(viewer=player.name)
        decision = engine.decide(snapshot.player(player.name), snapshot)
        self.act(decision)
        return decision

    def play_hand(self, engine) -> Optional[HandSummary]:
        """
        Deal a hand if none is in progress and run AI seats until the
        hand ends or a human seat is to act.
        """
        if not self.is_betting and not self.start_new_hand():
            return None
        start = self.hand_number
        while self.running and self.is_betting:
            if self.step(engine) is None:
                return None
        summary = self.last_summary
        if summary is not None and summary.hand_number == start:
            return summary
        return None
